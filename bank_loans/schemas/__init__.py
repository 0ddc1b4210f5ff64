from bank_loans.schemas.application_schemas import (
    ApplicationCreate,
    ApplicationOut,
    DecisionOut,
    DecisionRequest,
    ExtensionApplicationCreate,
    PaymentReceiptOut,
    RejectRequest,
)
from bank_loans.schemas.branch_schemas import BranchCreate, BranchLedgerRowOut, BranchOut, DepositCreate
from bank_loans.schemas.customer_schemas import (
    CustomerCreate,
    CustomerDetailsOut,
    CustomerOut,
    CustomerStatisticsOut,
    CustomerUpdate,
    RecentContractOut,
)
from bank_loans.schemas.disbursement_schemas import DisburseCertificateCreate, DisburseCertificateOut
from bank_loans.schemas.loan_contract_schemas import (
    ContractLedgerOut,
    LoanContractCreate,
    LoanContractDetailOut,
    LoanContractOut,
)
from bank_loans.schemas.loan_profile_schemas import (
    LoanProfileCreate,
    LoanProfileOut,
    LoanProfileStatusUpdate,
    ProofOfIncomeIn,
    ProofOfIncomeOut,
)
from bank_loans.schemas.payment_receipt_schemas import PaymentReceiptCreate
from bank_loans.schemas.staff_schemas import (
    ClockStatusOut,
    LoginOut,
    LoginRequest,
    StaffCreate,
    StaffOut,
    TimekeepingOut,
)
