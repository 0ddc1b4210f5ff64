"""Domain exceptions raised by the ledger and application services."""


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    status_code = 400


class ValidationError(LedgerError):
    """Raised for malformed requests: non-positive amounts, missing signatures."""


class InvariantViolation(LedgerError):
    """Raised when a write would overdraw a contract, its debt or a branch balance."""


class NotFoundError(LedgerError):
    """Raised when a referenced contract, application or decision does not exist."""

    status_code = 404


class StateConflict(LedgerError):
    """Raised when a record is in the wrong state for the operation."""

    status_code = 409


class PermissionDenied(LedgerError):
    """Raised when the acting staff member lacks the required role."""

    status_code = 403
