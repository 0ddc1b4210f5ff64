# bank_loans/services/contract_ledger.py
"""
Debt and disbursement arithmetic for a loan contract.

Every figure is re-aggregated from the live child rows on each call:

  remaining_disburse = principal - SUM(certificates)
  debt               = SUM(certificates)
                       - SUM(liquidations in Pending/Done)
                       - SUM(exemptions in Pending/Done)

Rejected and deleted applications never reduce the debt.
"""

from decimal import Decimal

from sqlalchemy import exists, func
from sqlalchemy.orm import Session

from bank_loans.core.enums import RecordStatus
from bank_loans.core.exceptions import NotFoundError
from bank_loans.models.disburse_certificate_model import DisburseCertificate
from bank_loans.models.exemption_model import ExemptionApplication
from bank_loans.models.liquidation_model import LiquidationApplication, LiquidationDecision
from bank_loans.models.loan_contract_model import LoanContract
from bank_loans.models.payment_receipt_model import PaymentReceipt
from bank_loans.utils.money import money

DEBT_REDUCING_STATUSES = (int(RecordStatus.PENDING), int(RecordStatus.DONE))


def get_contract(db: Session, contract_id: int, lock: bool = False) -> LoanContract:
    """Load a contract; ``lock=True`` serialises writers on this contract until commit."""
    q = db.query(LoanContract).filter(LoanContract.contract_id == contract_id)
    if lock:
        q = q.with_for_update(of=LoanContract).populate_existing()
    contract = q.first()
    if not contract:
        raise NotFoundError("This LoanContract does not exist")
    return contract


def _sum(db: Session, column, *criteria) -> Decimal:
    total = db.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar()
    return money(total)


def total_disbursed(db: Session, contract: LoanContract) -> Decimal:
    return _sum(
        db,
        DisburseCertificate.amount,
        DisburseCertificate.contract_id == contract.contract_id,
    )


def remaining_disburse(db: Session, contract: LoanContract) -> Decimal:
    return money(contract.principal_amount) - total_disbursed(db, contract)


def can_disburse(db: Session, contract: LoanContract, amount) -> bool:
    # exact exhaustion (result == 0) is allowed
    return remaining_disburse(db, contract) - money(amount) >= 0


def debt(db: Session, contract: LoanContract) -> Decimal:
    liquidated = _sum(
        db,
        LiquidationApplication.amount,
        LiquidationApplication.contract_id == contract.contract_id,
        LiquidationApplication.status.in_(DEBT_REDUCING_STATUSES),
    )
    exempted = _sum(
        db,
        ExemptionApplication.amount,
        ExemptionApplication.contract_id == contract.contract_id,
        ExemptionApplication.status.in_(DEBT_REDUCING_STATUSES),
    )
    return total_disbursed(db, contract) - liquidated - exempted


def can_file_application(db: Session, contract: LoanContract, amount) -> bool:
    return debt(db, contract) - money(amount) >= 0


def total_paid(db: Session, contract: LoanContract) -> Decimal:
    return _sum(db, PaymentReceipt.amount, PaymentReceipt.contract_id == contract.contract_id)


def direct_receipts(db: Session, contract: LoanContract) -> Decimal:
    """Receipts recorded straight against the contract, not through a liquidation decision."""
    via_decision = exists().where(LiquidationDecision.payment_receipt_id == PaymentReceipt.receipt_id)
    return _sum(
        db,
        PaymentReceipt.amount,
        PaymentReceipt.contract_id == contract.contract_id,
        ~via_decision,
    )


def remaining_payable(db: Session, contract: LoanContract) -> Decimal:
    return debt(db, contract) - direct_receipts(db, contract)


def ledger_summary(db: Session, contract: LoanContract) -> dict:
    disbursed = total_disbursed(db, contract)
    current_debt = debt(db, contract)
    return {
        "contract_id": contract.contract_id,
        "contract_number": contract.contract_number,
        "principal_amount": money(contract.principal_amount),
        "total_disbursed": disbursed,
        "remaining_disburse": money(contract.principal_amount) - disbursed,
        "debt": current_debt,
        "paid": total_paid(db, contract),
        "remaining_payable": current_debt - direct_receipts(db, contract),
    }
