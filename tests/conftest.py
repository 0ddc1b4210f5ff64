"""Pytest configuration and fixtures."""

import os

# must be set before bank_loans.utils.database builds its engine
os.environ["DATABASE_URL"] = "sqlite://"
# cheap hashes keep the suite fast
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import date, datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import bank_loans.models  # noqa: E402,F401
from bank_loans.core.enums import CustomerType, LoanType, RecordStatus, StaffRole  # noqa: E402
from bank_loans.core.security import Principal, create_access_token, hash_password  # noqa: E402
from bank_loans.models.branches_model import BranchInfo  # noqa: E402
from bank_loans.models.customer_model import Customer  # noqa: E402
from bank_loans.models.loan_profile_model import LoanProfile  # noqa: E402
from bank_loans.models.staff_model import Staff  # noqa: E402
from bank_loans.services import contracts  # noqa: E402
from bank_loans.services.numbering import NumberKind, next_number  # noqa: E402
from bank_loans.utils.database import Base, get_db  # noqa: E402

FIXED_NOW = datetime(2021, 11, 7, 10, 30)
STAFF_PASSWORD = "Secret123"


@pytest.fixture
def engine():
    """One in-memory SQLite database shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # let SQLAlchemy own BEGIN so SAVEPOINTs nest inside the real transaction
    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


# ---------------------------------------------------------------
# Factories
# ---------------------------------------------------------------
@pytest.fixture
def make_branch(db):
    counter = {"n": 0}

    def factory(balance="0", code=None) -> BranchInfo:
        counter["n"] += 1
        branch = BranchInfo(
            branch_code=code or f"BR{counter['n']}",
            branch_address="1 Main street",
            branch_phone_number="0123456789",
            branch_fax="0123456788",
            branch_balance=Decimal(balance),
        )
        db.add(branch)
        db.commit()
        db.refresh(branch)
        return branch

    return factory


@pytest.fixture
def make_staff(db):
    counter = {"n": 0}

    def factory(branch: BranchInfo, role: StaffRole = StaffRole.BUSINESS) -> Staff:
        counter["n"] += 1
        staff = Staff(
            name=f"Staff {counter['n']}",
            email=f"staff{counter['n']}@bank.local",
            password_hash=hash_password(STAFF_PASSWORD),
            role=int(role),
            branch_id=branch.branch_id,
            is_active=True,
        )
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff

    return factory


def as_principal(staff: Staff) -> Principal:
    return Principal(staff_id=staff.staff_id, role=StaffRole(staff.role), branch_id=staff.branch_id)


@pytest.fixture
def make_customer(db):
    counter = {"n": 0}

    def factory(name="Nguyen Van A") -> Customer:
        counter["n"] += 1
        customer = Customer(
            name=name,
            date_of_birth=date(1990, 1, 1),
            address="12 Le Loi",
            identity_number=f"00000000{counter['n']}",
            identity_card_created_date=date(2015, 5, 5),
            phone_number=f"09000000{counter['n']}",
            permanent_residence="Ha Noi",
            email=f"customer{counter['n']}@mail.test",
            customer_type=int(CustomerType.RESIDENT),
        )
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer

    return factory


@pytest.fixture
def make_profile(db, make_customer):
    def factory(staff: Staff, money_to_loan="100", status=RecordStatus.PENDING) -> LoanProfile:
        customer = make_customer()
        profile = LoanProfile(
            loan_application_number=next_number(db, NumberKind.LOAN_PROFILE, FIXED_NOW),
            customer_id=customer.customer_id,
            staff_id=staff.staff_id,
            money_to_loan=Decimal(money_to_loan),
            loan_purpose="Working capital",
            loan_duration=12,
            collateral="House",
            expected_source_money_to_repay="Salary",
            benefit_from_loan="Expand shop",
            signature_img="sig.png",
            loan_type=int(LoanType.EACH_TIME),
            loan_status=int(status),
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return factory


@pytest.fixture
def branch(make_branch):
    return make_branch(balance="1000")


@pytest.fixture
def director(make_staff, branch):
    return make_staff(branch, StaffRole.DIRECTOR)


@pytest.fixture
def officer(make_staff, branch):
    return make_staff(branch, StaffRole.BUSINESS)


@pytest.fixture
def make_contract(db, make_profile, director):
    """Open a contract through the approval flow; the director's branch owns it."""

    def factory(principal_amount="100"):
        profile = make_profile(director, money_to_loan=principal_amount)
        return contracts.create_contract(
            db,
            profile.profile_id,
            "I commit to repay",
            "contract-sig.png",
            as_principal(director),
            now=FIXED_NOW,
        )

    return factory


# ---------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------
@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    # no context manager: startup seeding stays off the test database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_header():
    def factory(staff: Staff) -> dict:
        return {"Authorization": f"Bearer {create_access_token(staff.staff_id)}"}

    return factory


@pytest.fixture
def principal_of():
    return as_principal
