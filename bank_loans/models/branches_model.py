# bank_loans/models/branches_model.py
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from bank_loans.utils.database import Base


class BranchInfo(Base):
    __tablename__ = "branch_info"
    __table_args__ = (
        CheckConstraint("branch_balance >= 0", name="ck_branch_balance_non_negative"),
    )

    branch_id = Column(Integer, primary_key=True, index=True)
    branch_code = Column(String(30), unique=True, nullable=False)

    branch_address = Column(String(255), nullable=False)
    branch_phone_number = Column(String(20), nullable=False)
    branch_fax = Column(String(30), nullable=False)

    # cash on hand; debited by disbursements, credited by deposits
    branch_balance = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")

    created_on = Column(DateTime, server_default=func.now(), nullable=True)

    staff = relationship("Staff", back_populates="branch")

    def __repr__(self) -> str:
        return f"<BranchInfo(id={self.branch_id}, code={self.branch_code})>"
