# bank_loans/models/loan_profile_model.py
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bank_loans.utils.database import Base


class LoanProfile(Base):
    __tablename__ = "loan_profiles"

    __table_args__ = (
        Index("ix_loan_profiles_status", "loan_status"),
        Index("ix_loan_profiles_customer_status", "customer_id", "loan_status"),
    )

    profile_id = Column(Integer, primary_key=True, index=True)
    loan_application_number = Column(String(50), unique=True, nullable=False)

    customer_id = Column(Integer, ForeignKey("customers.customer_id", ondelete="RESTRICT"), nullable=False)
    staff_id = Column(Integer, ForeignKey("staff.staff_id", ondelete="RESTRICT"), nullable=False)
    approver_id = Column(Integer, ForeignKey("staff.staff_id", ondelete="SET NULL"), nullable=True)

    money_to_loan = Column(Numeric(14, 2), nullable=False)
    loan_purpose = Column(Text, nullable=False)
    loan_duration = Column(Integer, nullable=False)
    collateral = Column(Text, nullable=False)
    expected_source_money_to_repay = Column(Text, nullable=False)
    benefit_from_loan = Column(Text, nullable=False)
    signature_img = Column(String(255), nullable=False)

    loan_type = Column(Integer, nullable=False)

    # Pending=1 / Done=2 / Rejected=3 / Deleted=4
    loan_status = Column(Integer, nullable=False, default=1, server_default="1")

    created_on = Column(DateTime, server_default=func.now(), nullable=True)

    customer = relationship("Customer", lazy="joined")
    staff = relationship("Staff", foreign_keys=[staff_id])
    approver = relationship("Staff", foreign_keys=[approver_id])

    proof_of_income = relationship(
        "ProofOfIncome",
        back_populates="loan_profile",
        cascade="all, delete-orphan",
        lazy="selectin",
        passive_deletes=True,
    )


class ProofOfIncome(Base):
    __tablename__ = "proof_of_income"

    proof_id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(
        Integer,
        ForeignKey("loan_profiles.profile_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    image_id = Column(String(255), nullable=False)
    image_type = Column(Integer, nullable=False)  # ProofOfIncomeType

    loan_profile = relationship("LoanProfile", back_populates="proof_of_income")
