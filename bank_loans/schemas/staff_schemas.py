# bank_loans/schemas/staff_schemas.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from bank_loans.core.enums import StaffRole
from bank_loans.core.security import MAX_PASSWORD_BYTES


def _normalise_email(v) -> str:
    v = str(v or "").strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email")
    return v


class StaffCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str
    password: str = Field(min_length=8)
    role: StaffRole
    branch_id: int

    @field_validator("email", mode="before")
    def normalise_email(cls, v):
        return _normalise_email(v)

    @field_validator("password")
    def strong_enough(cls, v):
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        if not any(c.isdigit() for c in v) or not any(c.isalpha() for c in v):
            raise ValueError("must contain letters and digits")
        return v


class StaffOut(BaseModel):
    staff_id: int
    name: str
    email: str
    role: int
    branch_id: int
    is_active: bool
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)
    branch_id: int

    @field_validator("email", mode="before")
    def normalise_email(cls, v):
        return _normalise_email(v)


class ClockStatusOut(BaseModel):
    is_clocked_in: bool
    is_clocked_out: bool
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None


class LoginOut(BaseModel):
    staff: StaffOut
    access_token: str
    token_type: str = "bearer"
    clock_in_out: ClockStatusOut


class TimekeepingOut(BaseModel):
    timekeeping_id: int
    staff_id: int
    work_day: date
    clock_in: datetime
    clock_out: Optional[datetime] = None

    class Config:
        from_attributes = True
