# bank_loans/schemas/disbursement_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class DisburseCertificateCreate(BaseModel):
    contract_id: int
    amount: Decimal


class DisburseCertificateOut(BaseModel):
    certificate_id: int
    cert_number: str
    contract_id: int
    amount: float
    created_by: Optional[int] = None
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True
