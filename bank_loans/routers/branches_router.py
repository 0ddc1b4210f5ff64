# bank_loans/routers/branches_router.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bank_loans.core.config import DEFAULT_PAGE_LIMIT
from bank_loans.core.security import Principal, get_current_principal, require_director
from bank_loans.models.branch_ledger_model import BranchLedger
from bank_loans.models.branches_model import BranchInfo
from bank_loans.schemas import BranchCreate, BranchLedgerRowOut, BranchOut, DepositCreate
from bank_loans.services import branches
from bank_loans.utils.database import get_db

router = APIRouter(prefix="/branch_info", tags=["Branches"])


# CREATE
@router.post("", response_model=BranchOut, status_code=201)
def create_branch(
        payload: BranchCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_director),
):
    return branches.create_branch(db, payload.model_dump(), principal)


# READ ALL
@router.get("", response_model=list[BranchOut])
def list_branches(
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return db.query(BranchInfo).order_by(BranchInfo.branch_code.asc()).all()


# READ ONE (public: the login screen resolves the branch by code)
@router.get("/{branch_code}", response_model=BranchOut)
def get_branch(branch_code: str, db: Session = Depends(get_db)):
    branch = db.query(BranchInfo).filter(BranchInfo.branch_code == branch_code).first()
    if not branch:
        raise HTTPException(404, "Branch not found")
    return branch


# DEPOSIT
@router.post("/{branch_id}/deposit", response_model=BranchOut)
def deposit(
        branch_id: int,
        payload: DepositCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_director),
):
    return branches.deposit(db, branch_id, payload.amount, principal, narration=payload.narration)


# CASH JOURNAL
@router.get("/{branch_id}/ledger", response_model=list[BranchLedgerRowOut])
def branch_ledger(
        branch_id: int,
        limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1),
        skip: int = Query(default=0, ge=0),
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    branch = db.query(BranchInfo).filter(BranchInfo.branch_id == branch_id).first()
    if not branch:
        raise HTTPException(404, "Branch not found")

    return (
        db.query(BranchLedger)
        .filter(BranchLedger.branch_id == branch_id)
        .order_by(BranchLedger.ledger_id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
