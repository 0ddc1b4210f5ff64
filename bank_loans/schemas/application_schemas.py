# bank_loans/schemas/application_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator


class ApplicationCreate(BaseModel):
    contract_id: int
    amount: Decimal
    reason: Optional[str] = None
    signature_img: Optional[str] = None

    @field_validator("reason", mode="before")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class ExtensionApplicationCreate(ApplicationCreate):
    duration: Optional[int] = None


class DecisionRequest(BaseModel):
    application_id: int
    bod_signature: Optional[str] = None


class RejectRequest(BaseModel):
    application_id: int


class PaymentReceiptOut(BaseModel):
    receipt_id: int
    receipt_number: str
    contract_id: int
    amount: float
    created_by: Optional[int] = None
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class DecisionOut(BaseModel):
    decision_id: int
    decision_number: str
    reason: Optional[str] = None
    amount: float
    duration: Optional[int] = None
    bod_signature: str
    approved_by: Optional[int] = None
    created_on: Optional[datetime] = None

    # liquidation decisions only
    payment_receipt_id: Optional[int] = None
    payment_receipt: Optional[PaymentReceiptOut] = None

    class Config:
        from_attributes = True


class ApplicationOut(BaseModel):
    application_id: int
    application_number: str
    contract_id: int
    amount: float
    duration: Optional[int] = None
    reason: Optional[str] = None
    signature_img: str
    status: int
    decision_id: Optional[int] = None
    decision: Optional[DecisionOut] = None
    created_by: Optional[int] = None
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True
