# bank_loans/routers/loan_profiles_router.py
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bank_loans.core.config import DEFAULT_PAGE_LIMIT
from bank_loans.core.enums import LoanType, RecordStatus
from bank_loans.core.security import Principal, get_current_principal
from bank_loans.models.customer_model import Customer
from bank_loans.models.loan_contract_model import LoanContract
from bank_loans.models.loan_profile_model import LoanProfile, ProofOfIncome
from bank_loans.schemas import LoanProfileCreate, LoanProfileOut, LoanProfileStatusUpdate
from bank_loans.services.numbering import NumberKind, next_number
from bank_loans.utils.database import atomic, get_db
from bank_loans.utils.money import ledger_amount, money

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/loan_profiles", tags=["Loan Profiles"])

SORTABLE_FIELDS = ("loan_application_number", "money_to_loan", "loan_type", "loan_status", "created_on")


def get_profile_or_404(db: Session, profile_id: int) -> LoanProfile:
    profile = db.query(LoanProfile).filter(LoanProfile.profile_id == profile_id).first()
    if not profile:
        raise HTTPException(404, "This loan profile does not exist")
    return profile


def has_contract(db: Session, profile_id: int) -> bool:
    return db.query(LoanContract.contract_id).filter(LoanContract.profile_id == profile_id).first() is not None


# CREATE
@router.post("", response_model=LoanProfileOut, status_code=201)
def create_loan_profile(
        payload: LoanProfileCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    customer = db.query(Customer).filter(Customer.customer_id == payload.customer_id).first()
    if not customer:
        raise HTTPException(400, "Invalid customer_id")

    with atomic(db):
        profile = LoanProfile(
            loan_application_number=next_number(db, NumberKind.LOAN_PROFILE),
            customer_id=customer.customer_id,
            staff_id=principal.staff_id,
            money_to_loan=ledger_amount(payload.money_to_loan),
            loan_purpose=payload.loan_purpose,
            loan_duration=payload.loan_duration,
            collateral=payload.collateral,
            expected_source_money_to_repay=payload.expected_source_money_to_repay,
            benefit_from_loan=payload.benefit_from_loan,
            signature_img=payload.signature_img,
            loan_type=int(payload.loan_type),
            loan_status=int(RecordStatus.PENDING),
        )
        profile.proof_of_income = [
            ProofOfIncome(image_id=p.image_id, image_type=int(p.image_type))
            for p in payload.proof_of_income
        ]
        db.add(profile)
        db.flush()

    db.refresh(profile)
    logger.info("Loan profile %s filed for customer %s", profile.loan_application_number, customer.customer_id)
    return profile


# READ ALL
@router.get("", response_model=list[LoanProfileOut])
def list_loan_profiles(
        profile_number: Optional[str] = None,
        customer_name: Optional[str] = None,
        money_to_loan: Optional[Decimal] = None,
        loan_type: Optional[LoanType] = None,
        created_at: Optional[date] = None,
        loan_status: Optional[RecordStatus] = None,
        sort_by: Optional[str] = Query(default=None, description="field:asc|desc"),
        limit: int = DEFAULT_PAGE_LIMIT,
        skip: int = 0,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    query = db.query(LoanProfile)

    if loan_status is not None:
        query = query.filter(LoanProfile.loan_status == int(loan_status))
    else:
        query = query.filter(LoanProfile.loan_status != int(RecordStatus.DELETED))

    if profile_number:
        query = query.filter(LoanProfile.loan_application_number.ilike(f"%{profile_number}%"))
    if customer_name:
        query = query.join(Customer, Customer.customer_id == LoanProfile.customer_id).filter(
            Customer.name.ilike(f"%{customer_name}%")
        )
    if money_to_loan is not None:
        query = query.filter(LoanProfile.money_to_loan == money(money_to_loan))
    if loan_type is not None:
        query = query.filter(LoanProfile.loan_type == int(loan_type))
    if created_at is not None:
        query = query.filter(
            LoanProfile.created_on >= datetime.combine(created_at, time.min),
            LoanProfile.created_on <= datetime.combine(created_at, time.max),
        )

    order = LoanProfile.created_on.desc()
    if sort_by:
        field, _, direction = sort_by.partition(":")
        if field in SORTABLE_FIELDS:
            column = getattr(LoanProfile, field)
            order = column.desc() if direction == "desc" else column.asc()

    if limit <= 0:
        limit = DEFAULT_PAGE_LIMIT
    return query.order_by(order, LoanProfile.profile_id.desc()).offset(max(0, skip)).limit(limit).all()


# READ ONE
@router.get("/{profile_id}", response_model=LoanProfileOut)
def get_loan_profile(
        profile_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return get_profile_or_404(db, profile_id)


@router.get("/has_contract/{profile_id}", response_model=bool)
def loan_profile_has_contract(
        profile_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return has_contract(db, profile_id)


# STATUS
@router.patch("/status/{profile_id}", response_model=LoanProfileOut)
def update_loan_profile_status(
        profile_id: int,
        payload: LoanProfileStatusUpdate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    profile = get_profile_or_404(db, profile_id)

    allowed = profile.loan_status == RecordStatus.PENDING or (
        payload.status == RecordStatus.DELETED and not has_contract(db, profile_id)
    )
    if not allowed:
        raise HTTPException(403, "Forbidden")

    profile.loan_status = int(payload.status)
    db.commit()
    db.refresh(profile)
    logger.info("Loan profile %s moved to status %s", profile.loan_application_number, profile.loan_status)
    return profile
