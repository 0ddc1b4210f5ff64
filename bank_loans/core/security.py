# bank_loans/core/security.py
"""
Passwords, access tokens and resolution of the acting staff member.

Tokens are minted at login (``create_access_token``) and carry the staff id
in ``sub``; role and branch are always read fresh from the staff table so a
demoted or deactivated account loses access immediately.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bank_loans.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, BCRYPT_ROUNDS, JWT_ALGO, JWT_SECRET
from bank_loans.core.enums import StaffRole
from bank_loans.core.exceptions import PermissionDenied
from bank_loans.models.staff_model import Staff
from bank_loans.utils.database import get_db

bearer_scheme = HTTPBearer(auto_error=False)

# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class Principal:
    staff_id: int
    role: StaffRole
    branch_id: Optional[int] = None

    @property
    def is_director(self) -> bool:
        return self.role == StaffRole.DIRECTOR


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("ascii")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    raw = password.encode("utf-8")
    if not password_hash or len(raw) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(raw, password_hash.encode("ascii"))


def create_access_token(staff_id: int, expires_minutes: Optional[int] = None) -> str:
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {"sub": str(staff_id), "exp": expires}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGO)


def ensure_director(principal: Principal) -> None:
    if not principal.is_director:
        raise PermissionDenied("Invalid permission")


def principal_from_token(db: Session, token: Optional[str]) -> Optional[Principal]:
    """The active staff member a token names, or None for a missing, bad or stale token."""
    if not token:
        return None

    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGO])
        staff_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        return None

    staff = (
        db.query(Staff)
        .filter(Staff.staff_id == staff_id, Staff.is_active.is_(True))
        .first()
    )
    if not staff:
        return None

    return Principal(staff_id=staff.staff_id, role=StaffRole(staff.role), branch_id=staff.branch_id)


def get_current_principal(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        db: Session = Depends(get_db),
) -> Principal:
    principal = principal_from_token(db, credentials.credentials if credentials else None)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please authenticate",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def require_director(principal: Principal = Depends(get_current_principal)) -> Principal:
    ensure_director(principal)
    return principal
