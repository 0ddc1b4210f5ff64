# bank_loans/schemas/payment_receipt_schemas.py
from decimal import Decimal

from pydantic import BaseModel

from bank_loans.schemas.application_schemas import PaymentReceiptOut  # noqa: F401


class PaymentReceiptCreate(BaseModel):
    contract_id: int
    amount: Decimal
