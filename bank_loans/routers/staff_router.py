# bank_loans/routers/staff_router.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_loans.core.security import (
    Principal,
    create_access_token,
    get_current_principal,
    hash_password,
    require_director,
)
from bank_loans.models.branches_model import BranchInfo
from bank_loans.models.staff_model import Staff
from bank_loans.schemas import ClockStatusOut, LoginOut, LoginRequest, StaffCreate, StaffOut, TimekeepingOut
from bank_loans.services import staff_accounts
from bank_loans.utils.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staffs", tags=["Staff"])


@router.post("", response_model=StaffOut, status_code=201)
def create_staff(
        payload: StaffCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(require_director),
):
    branch = db.query(BranchInfo).filter(BranchInfo.branch_id == payload.branch_id).first()
    if not branch:
        raise HTTPException(400, "Invalid branch_id")

    exists = db.query(Staff).filter(Staff.email == payload.email).first()
    if exists:
        raise HTTPException(409, "Email already in use")

    staff = Staff(
        name=payload.name.strip(),
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=int(payload.role),
        branch_id=payload.branch_id,
        is_active=True,
    )
    db.add(staff)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Email already in use")
    db.refresh(staff)

    logger.info("Registered staff %s (role %s) at branch %s", staff.email, staff.role, branch.branch_code)
    return staff


# LOGIN
@router.post("/login", response_model=LoginOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    staff = staff_accounts.authenticate(db, payload.email, payload.password, payload.branch_id)
    return {
        "staff": staff,
        "access_token": create_access_token(staff.staff_id),
        "token_type": "bearer",
        "clock_in_out": staff_accounts.clock_status(db, staff.staff_id),
    }


@router.get("/me", response_model=StaffOut)
def me(
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return db.query(Staff).filter(Staff.staff_id == principal.staff_id).first()


# TIMEKEEPING
@router.post("/clock_in", response_model=TimekeepingOut)
def clock_in(
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return staff_accounts.clock_in(db, principal)


@router.post("/clock_out", response_model=TimekeepingOut)
def clock_out(
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return staff_accounts.clock_out(db, principal)


@router.get("/clock_in_out_time", response_model=ClockStatusOut)
def clock_in_out_time(
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    return staff_accounts.clock_status(db, principal.staff_id)
