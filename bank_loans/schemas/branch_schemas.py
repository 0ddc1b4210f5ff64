# bank_loans/schemas/branch_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BranchCreate(BaseModel):
    branch_code: str = Field(min_length=1, max_length=30)
    branch_address: str = Field(min_length=1)
    branch_phone_number: str = Field(min_length=1, max_length=20)
    branch_fax: str = Field(min_length=1, max_length=30)
    branch_balance: Decimal = Decimal("0")

    @field_validator("branch_code", "branch_address", "branch_phone_number", "branch_fax", mode="before")
    def strip_text(cls, v):
        return str(v).strip() if v is not None else v

    @field_validator("branch_phone_number")
    def phone_digits(cls, v):
        if not v.isdigit():
            raise ValueError("must contain only digits")
        return v


class BranchOut(BaseModel):
    branch_id: int
    branch_code: str
    branch_address: str
    branch_phone_number: str
    branch_fax: str
    branch_balance: float
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class DepositCreate(BaseModel):
    amount: Decimal
    narration: Optional[str] = None

    @field_validator("narration", mode="before")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class BranchLedgerRowOut(BaseModel):
    ledger_id: int
    txn_date: Optional[datetime] = None
    txn_type: str
    ref_table: Optional[str] = None
    ref_id: Optional[int] = None
    debit: float
    credit: float
    balance_after: float
    narration: Optional[str] = None

    class Config:
        from_attributes = True
