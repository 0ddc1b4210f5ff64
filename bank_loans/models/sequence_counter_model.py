from sqlalchemy import Column, Date, Integer, String

from bank_loans.utils.database import Base


class SequenceCounter(Base):
    """Last number issued per (kind, calendar day)."""

    __tablename__ = "sequence_counters"

    kind = Column(String(20), primary_key=True)
    day = Column(Date, primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
