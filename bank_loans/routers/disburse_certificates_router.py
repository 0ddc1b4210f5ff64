# bank_loans/routers/disburse_certificates_router.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank_loans.core.security import Principal, get_current_principal
from bank_loans.models.disburse_certificate_model import DisburseCertificate
from bank_loans.schemas import DisburseCertificateCreate, DisburseCertificateOut
from bank_loans.services import disbursements
from bank_loans.utils.database import get_db

router = APIRouter(prefix="/disburse_certificates", tags=["Disbursements"])


@router.post("", response_model=DisburseCertificateOut, status_code=201)
def create_certificate(
        payload: DisburseCertificateCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return disbursements.issue_certificate(db, payload.contract_id, payload.amount, principal)


@router.get("", response_model=list[DisburseCertificateOut])
def list_certificates(
        contract_id: Optional[int] = None,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    query = db.query(DisburseCertificate)
    if contract_id is not None:
        query = query.filter(DisburseCertificate.contract_id == contract_id)
    return query.order_by(DisburseCertificate.certificate_id.desc()).all()
