# bank_loans/models/liquidation_model.py
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bank_loans.utils.database import Base


class LiquidationApplication(Base):
    __tablename__ = "liquidation_applications"

    __table_args__ = (
        Index("ix_liquidation_applications_contract_status", "contract_id", "status"),
    )

    application_id = Column(Integer, primary_key=True, index=True)
    application_number = Column(String(50), unique=True, nullable=False)

    contract_id = Column(Integer, ForeignKey("loan_contracts.contract_id"), nullable=False, index=True)

    amount = Column(Numeric(14, 2), nullable=False)
    reason = Column(Text, nullable=True)
    signature_img = Column(String(255), nullable=False)

    # Pending=1 / Done=2 / Rejected=3 / Deleted=4
    status = Column(Integer, nullable=False, default=1, server_default="1")

    # one-to-one; set exactly once by a board decision
    decision_id = Column(Integer, ForeignKey("liquidation_decisions.decision_id"), unique=True, nullable=True)

    created_by = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
    created_on = Column(DateTime, server_default=func.now(), nullable=True)
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=True)

    loan_contract = relationship("LoanContract")
    decision = relationship("LiquidationDecision", lazy="joined")


class LiquidationDecision(Base):
    __tablename__ = "liquidation_decisions"

    decision_id = Column(Integer, primary_key=True, index=True)
    decision_number = Column(String(50), unique=True, nullable=False)

    reason = Column(Text, nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    bod_signature = Column(String(255), nullable=False)

    payment_receipt_id = Column(Integer, ForeignKey("payment_receipts.receipt_id"), unique=True, nullable=True)

    approved_by = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
    created_on = Column(DateTime, server_default=func.now(), nullable=True)

    payment_receipt = relationship("PaymentReceipt", lazy="joined")
