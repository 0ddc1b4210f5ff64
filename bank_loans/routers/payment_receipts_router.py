# bank_loans/routers/payment_receipts_router.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_loans.core.security import Principal, get_current_principal
from bank_loans.schemas import PaymentReceiptCreate, PaymentReceiptOut
from bank_loans.services import receipts
from bank_loans.utils.database import get_db

router = APIRouter(tags=["Payment Receipts"])


@router.post("/payment_receipts", response_model=PaymentReceiptOut, status_code=201)
def create_receipt(
        payload: PaymentReceiptCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return receipts.create_contract_receipt(db, payload.contract_id, payload.amount, principal)


@router.get("/payment_receipts", response_model=list[PaymentReceiptOut])
def list_receipts(
        contract_id: Optional[int] = None,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return receipts.list_receipts(db, contract_id)


@router.post(
    "/liquidation_decisions/{decision_id}/payment_receipt",
    response_model=PaymentReceiptOut,
    status_code=201,
)
def attach_receipt(
        decision_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return receipts.attach_receipt(db, decision_id, principal)
