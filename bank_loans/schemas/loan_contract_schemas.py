# bank_loans/schemas/loan_contract_schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from bank_loans.schemas.application_schemas import ApplicationOut, PaymentReceiptOut
from bank_loans.schemas.branch_schemas import BranchOut
from bank_loans.schemas.disbursement_schemas import DisburseCertificateOut
from bank_loans.schemas.loan_profile_schemas import LoanProfileOut


class LoanContractCreate(BaseModel):
    profile_id: int
    commitment: str = Field(min_length=1)
    signature_img: str = Field(min_length=1)


class LoanContractOut(BaseModel):
    contract_id: int
    contract_number: str
    branch_id: int
    profile_id: int
    approver_id: Optional[int] = None
    principal_amount: float
    commitment: str
    signature_img: str
    created_on: Optional[datetime] = None

    loan_profile: Optional[LoanProfileOut] = None

    class Config:
        from_attributes = True


class LoanContractDetailOut(LoanContractOut):
    branch: Optional[BranchOut] = None
    disburse_certificates: List[DisburseCertificateOut] = []
    liquidation_applications: List[ApplicationOut] = []
    exemption_applications: List[ApplicationOut] = []
    extension_applications: List[ApplicationOut] = []
    payment_receipts: List[PaymentReceiptOut] = []


class ContractLedgerOut(BaseModel):
    contract_id: int
    contract_number: str
    principal_amount: float
    total_disbursed: float
    remaining_disburse: float
    debt: float
    paid: float
    remaining_payable: float
