# bank_loans/routers/loan_contracts_router.py
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bank_loans.core.config import DEFAULT_PAGE_LIMIT
from bank_loans.core.enums import LoanType
from bank_loans.core.security import Principal, get_current_principal
from bank_loans.models.loan_contract_model import LoanContract
from bank_loans.models.loan_profile_model import LoanProfile
from bank_loans.schemas import (
    ContractLedgerOut,
    LoanContractCreate,
    LoanContractDetailOut,
    LoanContractOut,
)
from bank_loans.services import contract_ledger, contracts
from bank_loans.utils.database import get_db
from bank_loans.utils.money import money

router = APIRouter(prefix="/loan_contracts", tags=["Loan Contracts"])

SORTABLE_FIELDS = ("contract_number", "principal_amount", "created_on")


# CREATE
@router.post("", response_model=LoanContractDetailOut, status_code=201)
def create_loan_contract(
        payload: LoanContractCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return contracts.create_contract(
        db,
        payload.profile_id,
        payload.commitment,
        payload.signature_img,
        principal,
    )


# READ ALL
@router.get("", response_model=list[LoanContractOut])
def list_loan_contracts(
        contract_number: Optional[str] = None,
        profile_number: Optional[str] = None,
        loan_type: Optional[LoanType] = None,
        money_to_loan: Optional[Decimal] = None,
        created_at: Optional[date] = None,
        sort_by: Optional[str] = Query(default=None, description="field:asc|desc"),
        limit: int = DEFAULT_PAGE_LIMIT,
        skip: int = 0,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    query = db.query(LoanContract).join(LoanProfile, LoanProfile.profile_id == LoanContract.profile_id)

    if contract_number:
        query = query.filter(LoanContract.contract_number.ilike(f"%{contract_number}%"))
    if profile_number:
        query = query.filter(LoanProfile.loan_application_number.ilike(f"%{profile_number}%"))
    if loan_type is not None:
        query = query.filter(LoanProfile.loan_type == int(loan_type))
    if money_to_loan is not None:
        query = query.filter(LoanContract.principal_amount == money(money_to_loan))
    if created_at is not None:
        query = query.filter(
            LoanContract.created_on >= datetime.combine(created_at, time.min),
            LoanContract.created_on <= datetime.combine(created_at, time.max),
        )

    order = LoanContract.created_on.desc()
    if sort_by:
        field, _, direction = sort_by.partition(":")
        if field in SORTABLE_FIELDS:
            column = getattr(LoanContract, field)
            order = column.desc() if direction == "desc" else column.asc()

    if limit <= 0:
        limit = DEFAULT_PAGE_LIMIT
    return query.order_by(order, LoanContract.contract_id.desc()).offset(max(0, skip)).limit(limit).all()


# READ ONE (by id or number)
@router.get("/one", response_model=LoanContractDetailOut)
def get_loan_contract(
        contract_id: Optional[int] = None,
        contract_number: Optional[str] = None,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    if contract_id is not None:
        return contract_ledger.get_contract(db, contract_id)
    if contract_number:
        return contracts.get_contract_by_number(db, contract_number)
    raise HTTPException(400, "contract_id or contract_number is required")


@router.get("/debt/{contract_id}", response_model=float)
def get_debt(
        contract_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    contract = contract_ledger.get_contract(db, contract_id)
    return contract_ledger.debt(db, contract)


@router.get("/{contract_id}/ledger", response_model=ContractLedgerOut)
def get_ledger(
        contract_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    contract = contract_ledger.get_contract(db, contract_id)
    return contract_ledger.ledger_summary(db, contract)
