from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from bank_loans.core.exceptions import ValidationError

CENT = Decimal("0.01")


def money(x) -> Decimal:
    """Always return 2-decimal Decimal with HALF_UP rounding."""
    if x is None:
        x = 0
    if not isinstance(x, Decimal):
        x = Decimal(str(x))
    return x.quantize(CENT, rounding=ROUND_HALF_UP)


def ledger_amount(x) -> Decimal:
    """
    Parse an amount about to be written to a ledger.
    Sub-cent amounts are refused instead of rounded.
    """
    try:
        value = x if isinstance(x, Decimal) else Decimal(str(x))
    except (InvalidOperation, ValueError):
        raise ValidationError("Invalid amount")
    if not value.is_finite():
        raise ValidationError("Invalid amount")
    if value != value.quantize(CENT, rounding=ROUND_HALF_UP):
        raise ValidationError("Amount must have at most 2 decimals")
    return value.quantize(CENT)
