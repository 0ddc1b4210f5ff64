from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from bank_loans.utils.database import Base


class Staff(Base):
    __tablename__ = "staff"

    staff_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(180), unique=True, nullable=False)
    password_hash = Column(String(128), nullable=False)

    # Support=1 / Business=2 / Appraisal=3 / Director=4
    role = Column(Integer, nullable=False)

    branch_id = Column(Integer, ForeignKey("branch_info.branch_id", ondelete="RESTRICT"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default="true")

    created_on = Column(DateTime, server_default=func.now(), nullable=True)

    branch = relationship("BranchInfo", back_populates="staff")
    timekeeping = relationship("Timekeeping", back_populates="staff", cascade="all, delete-orphan")
