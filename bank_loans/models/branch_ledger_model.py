from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from bank_loans.utils.database import Base


class BranchLedger(Base):
    __tablename__ = "branch_ledger"

    ledger_id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branch_info.branch_id"), nullable=False, index=True)

    txn_date = Column(DateTime, server_default=func.now(), nullable=False)
    txn_type = Column(String(30), nullable=False)  # DEPOSIT/DISBURSEMENT

    ref_table = Column(String(50), nullable=True)
    ref_id = Column(Integer, nullable=True)

    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)

    balance_after = Column(Numeric(14, 2), nullable=False)
    narration = Column(Text, nullable=True)

    created_by = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
