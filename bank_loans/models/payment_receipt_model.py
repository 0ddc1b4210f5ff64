from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import func

from bank_loans.utils.database import Base


class PaymentReceipt(Base):
    __tablename__ = "payment_receipts"

    receipt_id = Column(Integer, primary_key=True, index=True)
    receipt_number = Column(String(50), unique=True, nullable=False)

    # set for every receipt; decision receipts are additionally linked from liquidation_decisions
    contract_id = Column(Integer, ForeignKey("loan_contracts.contract_id"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)

    created_by = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
    created_on = Column(DateTime, server_default=func.now(), nullable=True)
