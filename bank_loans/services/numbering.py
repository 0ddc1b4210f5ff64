"""Daily-reset document numbers: ``PREFIX.YY.M.D.N``.

N restarts at 1 every calendar day (server local time). The last issued value
per (kind, day) is kept in ``sequence_counters`` and incremented under a row
lock, so two creations on the same day never share a number.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_loans.models.sequence_counter_model import SequenceCounter

logger = logging.getLogger(__name__)


class NumberKind(str, Enum):
    LOAN_PROFILE = "HSSV"
    LOAN_CONTRACT = "HD"
    DISBURSE_CERTIFICATE = "PC"
    PAYMENT_RECEIPT = "PT"
    LIQUIDATION_APPLICATION = "DTT"
    EXEMPTION_APPLICATION = "DXMG"
    EXTENSION_APPLICATION = "DXGH"
    LIQUIDATION_DECISION = "QDTL"
    EXEMPTION_DECISION = "QDMG"
    EXTENSION_DECISION = "QDGH"


def current_time(now: Optional[datetime] = None) -> datetime:
    return now or datetime.now()


def format_number(kind: NumberKind, day: date, n: int) -> str:
    """
    Example:
      DISBURSE_CERTIFICATE, 2021-11-07, 3 => "PC.21.11.7.3"
    """
    return f"{kind.value}.{str(day.year)[2:]}.{day.month}.{day.day}.{n}"


def _counter_query(db: Session, kind: NumberKind, day: date):
    return db.query(SequenceCounter).filter(
        SequenceCounter.kind == kind.value,
        SequenceCounter.day == day,
    )


def peek_number(db: Session, kind: NumberKind, now: Optional[datetime] = None) -> str:
    """Number the next record of ``kind`` would get today. Does not reserve it."""
    day = current_time(now).date()
    row = _counter_query(db, kind, day).first()
    issued = row.last_value if row else 0
    return format_number(kind, day, issued + 1)


def next_number(db: Session, kind: NumberKind, now: Optional[datetime] = None) -> str:
    """
    Reserve and return the next number of ``kind`` for today.

    Runs inside the caller's transaction: the counter row stays locked until
    the record carrying the number is committed (or rolled back with it).
    """
    day = current_time(now).date()

    row = _counter_query(db, kind, day).with_for_update().first()
    if row is None:
        try:
            with db.begin_nested():
                row = SequenceCounter(kind=kind.value, day=day, last_value=0)
                db.add(row)
        except IntegrityError:
            # another transaction opened today's counter first
            row = _counter_query(db, kind, day).with_for_update().one()

    row.last_value += 1
    db.flush()

    number = format_number(kind, day, row.last_value)
    logger.debug("Issued %s", number)
    return number
