from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from bank_loans.utils.database import Base


class Timekeeping(Base):
    """One attendance row per staff member per working day."""

    __tablename__ = "timekeeping"
    __table_args__ = (UniqueConstraint("staff_id", "work_day", name="uq_timekeeping_staff_day"),)

    timekeeping_id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.staff_id", ondelete="CASCADE"), nullable=False, index=True)
    work_day = Column(Date, nullable=False)

    clock_in = Column(DateTime, nullable=False)
    clock_out = Column(DateTime, nullable=True)

    staff = relationship("Staff", back_populates="timekeeping")
