# bank_loans/models/loan_contract_model.py

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bank_loans.utils.database import Base


class LoanContract(Base):
    __tablename__ = "loan_contracts"

    contract_id = Column(Integer, primary_key=True, index=True)
    contract_number = Column(String(50), unique=True, nullable=False)

    branch_id = Column(Integer, ForeignKey("branch_info.branch_id", ondelete="RESTRICT"), nullable=False, index=True)
    profile_id = Column(
        Integer,
        ForeignKey("loan_profiles.profile_id", ondelete="RESTRICT"),
        unique=True,
        nullable=False,
    )
    approver_id = Column(Integer, ForeignKey("staff.staff_id", ondelete="SET NULL"), nullable=True)

    # snapshot of loan_profiles.money_to_loan at approval time
    principal_amount = Column(Numeric(14, 2), nullable=False)

    commitment = Column(Text, nullable=False)
    signature_img = Column(String(255), nullable=False)

    created_on = Column(DateTime, server_default=func.now(), nullable=True)

    branch = relationship("BranchInfo")
    loan_profile = relationship("LoanProfile", lazy="joined")
    approver = relationship("Staff")

    # read-only views for serialisation; ledger figures are always re-aggregated in SQL
    disburse_certificates = relationship(
        "DisburseCertificate",
        order_by="DisburseCertificate.certificate_id",
        lazy="selectin",
        viewonly=True,
    )
    liquidation_applications = relationship(
        "LiquidationApplication",
        order_by="LiquidationApplication.application_id",
        lazy="selectin",
        viewonly=True,
    )
    exemption_applications = relationship(
        "ExemptionApplication",
        order_by="ExemptionApplication.application_id",
        lazy="selectin",
        viewonly=True,
    )
    extension_applications = relationship(
        "ExtensionApplication",
        order_by="ExtensionApplication.application_id",
        lazy="selectin",
        viewonly=True,
    )
    payment_receipts = relationship(
        "PaymentReceipt",
        order_by="PaymentReceipt.receipt_id",
        lazy="selectin",
        viewonly=True,
    )
