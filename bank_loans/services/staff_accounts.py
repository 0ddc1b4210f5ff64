# bank_loans/services/staff_accounts.py
"""
Staff login and daily attendance.

A staff member clocks in at most once per calendar day and clocks out once,
after clocking in.
"""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_loans.core.exceptions import StateConflict, ValidationError
from bank_loans.core.security import Principal, verify_password
from bank_loans.models.staff_model import Staff
from bank_loans.models.timekeeping_model import Timekeeping
from bank_loans.services.numbering import current_time
from bank_loans.utils.database import atomic

logger = logging.getLogger(__name__)


def authenticate(db: Session, email: str, password: str, branch_id: int) -> Staff:
    staff = (
        db.query(Staff)
        .filter(Staff.email == email.strip().lower(), Staff.is_active.is_(True))
        .first()
    )
    if not staff:
        raise ValidationError("This user does not exist")
    if not verify_password(password, staff.password_hash):
        logger.warning("Failed login for %s", staff.email)
        raise ValidationError("Password is not correct")
    if staff.branch_id != branch_id:
        raise ValidationError("This user is not working at this branch")

    logger.info("Staff %s logged in at branch %s", staff.email, branch_id)
    return staff


def _day_row(db: Session, staff_id: int, day: date, lock: bool = False) -> Optional[Timekeeping]:
    q = db.query(Timekeeping).filter(Timekeeping.staff_id == staff_id, Timekeeping.work_day == day)
    if lock:
        q = q.with_for_update().populate_existing()
    return q.first()


def clock_in(db: Session, principal: Principal, now: Optional[datetime] = None) -> Timekeeping:
    moment = current_time(now)
    if _day_row(db, principal.staff_id, moment.date()) is not None:
        raise StateConflict("Already clocked in")

    try:
        with atomic(db):
            row = Timekeeping(staff_id=principal.staff_id, work_day=moment.date(), clock_in=moment)
            db.add(row)
            db.flush()
    except IntegrityError:
        # a second clock-in for the same day raced past the check
        raise StateConflict("Already clocked in")

    logger.info("Staff %s clocked in at %s", principal.staff_id, moment)
    return row


def clock_out(db: Session, principal: Principal, now: Optional[datetime] = None) -> Timekeeping:
    moment = current_time(now)
    with atomic(db):
        row = _day_row(db, principal.staff_id, moment.date(), lock=True)
        if row is None:
            raise StateConflict("Not clocked in yet")
        if row.clock_out is not None:
            raise StateConflict("Already clocked out")
        row.clock_out = moment
        db.flush()

    logger.info("Staff %s clocked out at %s", principal.staff_id, moment)
    return row


def clock_status(db: Session, staff_id: int, now: Optional[datetime] = None) -> dict:
    row = _day_row(db, staff_id, current_time(now).date())
    return {
        "is_clocked_in": row is not None,
        "is_clocked_out": row is not None and row.clock_out is not None,
        "clock_in": row.clock_in if row else None,
        "clock_out": row.clock_out if row else None,
    }
