# bank_loans/routers/customers_router.py
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_loans.core.enums import CustomerType
from bank_loans.core.security import Principal, get_current_principal
from bank_loans.models.customer_model import Customer
from bank_loans.models.loan_contract_model import LoanContract
from bank_loans.models.loan_profile_model import LoanProfile
from bank_loans.schemas import CustomerCreate, CustomerDetailsOut, CustomerOut, CustomerUpdate
from bank_loans.services import contract_ledger
from bank_loans.utils.database import get_db
from bank_loans.utils.money import money

router = APIRouter(prefix="/customers", tags=["Customers"])

RECENT_CONTRACTS = 4


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.customer_id == customer_id).first()
    if not customer:
        raise HTTPException(404, "Customer not found")
    return customer


def ensure_unique(db: Session, customer_id: Optional[int] = None, **fields):
    """409 when another customer already holds one of the unique identifiers."""
    for column, value in fields.items():
        if value is None:
            continue
        q = db.query(Customer).filter(getattr(Customer, column) == value)
        if customer_id is not None:
            q = q.filter(Customer.customer_id != customer_id)
        if q.first():
            raise HTTPException(409, f"{column} already in use")


def commit_unique(db: Session) -> None:
    """Commit; a concurrent writer that slipped past ensure_unique still gets a 409."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Customer identifier already in use")


def customer_contracts(db: Session, customer_id: int):
    return (
        db.query(LoanContract)
        .join(LoanProfile, LoanProfile.profile_id == LoanContract.profile_id)
        .filter(LoanProfile.customer_id == customer_id)
        .order_by(LoanContract.created_on.desc(), LoanContract.contract_id.desc())
    )


def customer_statistics(db: Session, customer_id: int, today: Optional[date] = None) -> dict:
    today = today or date.today()
    stats = {
        "principal_this_year": Decimal("0.00"),
        "principal_last_year": Decimal("0.00"),
        "principal_total": Decimal("0.00"),
        "paid": Decimal("0.00"),
        "unpaid": Decimal("0.00"),
    }
    for contract in customer_contracts(db, customer_id).all():
        principal = money(contract.principal_amount)
        year = contract.created_on.year if contract.created_on else today.year
        if year == today.year:
            stats["principal_this_year"] += principal
        elif year == today.year - 1:
            stats["principal_last_year"] += principal
        stats["principal_total"] += principal
        stats["paid"] += contract_ledger.total_paid(db, contract)
        stats["unpaid"] += contract_ledger.debt(db, contract)
    return stats


# CREATE
@router.post("", response_model=CustomerOut, status_code=201)
def create_customer(
        payload: CustomerCreate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    ensure_unique(
        db,
        identity_number=payload.identity_number,
        phone_number=payload.phone_number,
        email=payload.email,
    )

    data = payload.model_dump()
    data["customer_type"] = int(payload.customer_type)
    if payload.customer_type == CustomerType.RESIDENT:
        data["business_registration_certificate"] = None
        data["company_rules"] = None

    customer = Customer(**data)
    db.add(customer)
    commit_unique(db)
    db.refresh(customer)
    return customer


# SEARCH
@router.get("", response_model=list[CustomerOut])
def list_customers(
        name: Optional[str] = None,
        phone_number: Optional[str] = None,
        identity_number: Optional[str] = None,
        email: Optional[str] = None,
        customer_type: Optional[CustomerType] = None,
        is_start_with: bool = Query(default=False, description="Prefix match instead of substring"),
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    query = db.query(Customer)

    def pattern(value: str) -> str:
        return f"{value}%" if is_start_with else f"%{value}%"

    if name:
        query = query.filter(Customer.name.ilike(pattern(name)))
    if phone_number:
        query = query.filter(Customer.phone_number.ilike(pattern(phone_number)))
    if identity_number:
        query = query.filter(Customer.identity_number.ilike(pattern(identity_number)))
    if email:
        query = query.filter(Customer.email.ilike(pattern(email)))
    if customer_type is not None:
        query = query.filter(Customer.customer_type == int(customer_type))

    return query.order_by(Customer.name.asc()).all()


# DETAILS
@router.get("/details/{customer_id}", response_model=CustomerDetailsOut)
def customer_details(
        customer_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    customer = get_customer_or_404(db, customer_id)
    return {
        "customer": customer,
        "recent_contracts": customer_contracts(db, customer_id).limit(RECENT_CONTRACTS).all(),
        "statistics": customer_statistics(db, customer_id),
    }


# UPDATE
@router.patch("/{customer_id}", response_model=CustomerOut)
def update_customer(
        customer_id: int,
        payload: CustomerUpdate,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
):
    customer = get_customer_or_404(db, customer_id)
    changes = payload.model_dump(exclude_unset=True)

    ensure_unique(
        db,
        customer_id=customer_id,
        identity_number=changes.get("identity_number"),
        phone_number=changes.get("phone_number"),
        email=changes.get("email"),
    )

    # type-specific fields only apply to the matching customer type
    if customer.customer_type == CustomerType.BUSINESS:
        changes.pop("date_of_birth", None)
        changes.pop("permanent_residence", None)
    else:
        changes.pop("business_registration_certificate", None)
        changes.pop("company_rules", None)

    for field, value in changes.items():
        if value is None and field in ("name", "address", "identity_number", "phone_number",
                                       "identity_card_created_date"):
            continue
        setattr(customer, field, value)

    commit_unique(db)
    db.refresh(customer)
    return customer
