# Automatically load all models so metadata knows them
from bank_loans.models.branches_model import BranchInfo
from bank_loans.models.branch_ledger_model import BranchLedger
from bank_loans.models.customer_model import Customer
from bank_loans.models.disburse_certificate_model import DisburseCertificate
from bank_loans.models.exemption_model import ExemptionApplication, ExemptionDecision
from bank_loans.models.extension_model import ExtensionApplication, ExtensionDecision
from bank_loans.models.liquidation_model import LiquidationApplication, LiquidationDecision
from bank_loans.models.loan_contract_model import LoanContract
from bank_loans.models.loan_profile_model import LoanProfile, ProofOfIncome
from bank_loans.models.payment_receipt_model import PaymentReceipt
from bank_loans.models.sequence_counter_model import SequenceCounter
from bank_loans.models.staff_model import Staff
from bank_loans.models.timekeeping_model import Timekeeping
