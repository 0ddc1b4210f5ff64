# bank_loans/initial_data.py
import logging

from bank_loans.core.config import (
    SEED_BRANCH_ADDRESS,
    SEED_BRANCH_CODE,
    SEED_DIRECTOR_EMAIL,
    SEED_DIRECTOR_NAME,
    SEED_DIRECTOR_PASSWORD,
)
from bank_loans.core.enums import StaffRole
from bank_loans.core.security import hash_password
from bank_loans.models.branches_model import BranchInfo
from bank_loans.models.staff_model import Staff
from bank_loans.utils.database import SessionLocal

logger = logging.getLogger(__name__)


def seed_head_office(db) -> BranchInfo:
    branch = db.query(BranchInfo).filter(BranchInfo.branch_code == SEED_BRANCH_CODE).first()
    if branch:
        return branch

    branch = BranchInfo(
        branch_code=SEED_BRANCH_CODE,
        branch_address=SEED_BRANCH_ADDRESS,
        branch_phone_number="0",
        branch_fax="0",
        branch_balance=0,
    )
    db.add(branch)
    db.flush()
    logger.info("Seeded head office branch %s", SEED_BRANCH_CODE)
    return branch


def seed_director(db, branch: BranchInfo) -> None:
    exists = db.query(Staff).filter(Staff.role == int(StaffRole.DIRECTOR)).first()
    if exists:
        return

    db.add(
        Staff(
            name=SEED_DIRECTOR_NAME,
            email=SEED_DIRECTOR_EMAIL,
            password_hash=hash_password(SEED_DIRECTOR_PASSWORD),
            role=int(StaffRole.DIRECTOR),
            branch_id=branch.branch_id,
            is_active=True,
        )
    )
    logger.info("Seeded first director %s", SEED_DIRECTOR_EMAIL)


def init_seed(session_factory=SessionLocal) -> None:
    db = session_factory()
    try:
        branch = seed_head_office(db)
        seed_director(db, branch)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
