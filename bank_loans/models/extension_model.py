# bank_loans/models/extension_model.py
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bank_loans.utils.database import Base


class ExtensionApplication(Base):
    __tablename__ = "extension_applications"

    __table_args__ = (
        Index("ix_extension_applications_contract_status", "contract_id", "status"),
    )

    application_id = Column(Integer, primary_key=True, index=True)
    application_number = Column(String(50), unique=True, nullable=False)

    contract_id = Column(Integer, ForeignKey("loan_contracts.contract_id"), nullable=False, index=True)

    amount = Column(Numeric(14, 2), nullable=False)
    duration = Column(Integer, nullable=False)  # months
    reason = Column(Text, nullable=True)
    signature_img = Column(String(255), nullable=False)

    status = Column(Integer, nullable=False, default=1, server_default="1")
    decision_id = Column(Integer, ForeignKey("extension_decisions.decision_id"), unique=True, nullable=True)

    created_by = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
    created_on = Column(DateTime, server_default=func.now(), nullable=True)
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=True)

    loan_contract = relationship("LoanContract")
    decision = relationship("ExtensionDecision", lazy="joined")


class ExtensionDecision(Base):
    __tablename__ = "extension_decisions"

    decision_id = Column(Integer, primary_key=True, index=True)
    decision_number = Column(String(50), unique=True, nullable=False)

    reason = Column(Text, nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    duration = Column(Integer, nullable=False)
    bod_signature = Column(String(255), nullable=False)

    approved_by = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
    created_on = Column(DateTime, server_default=func.now(), nullable=True)
