# bank_loans/services/receipts.py
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from bank_loans.core.exceptions import InvariantViolation, NotFoundError, StateConflict, ValidationError
from bank_loans.core.security import Principal
from bank_loans.models.liquidation_model import LiquidationApplication, LiquidationDecision
from bank_loans.models.payment_receipt_model import PaymentReceipt
from bank_loans.services import contract_ledger
from bank_loans.services.numbering import NumberKind, current_time, next_number
from bank_loans.utils.database import atomic
from bank_loans.utils.money import ledger_amount, money

logger = logging.getLogger(__name__)


def create_contract_receipt(
        db: Session,
        contract_id: int,
        amount,
        principal: Optional[Principal] = None,
        now: Optional[datetime] = None,
) -> PaymentReceipt:
    """Record a repayment straight against a contract, capped by what is still payable."""
    amount = ledger_amount(amount)
    if amount <= 0:
        raise ValidationError("Amount cannot <=0")

    with atomic(db):
        contract = contract_ledger.get_contract(db, contract_id, lock=True)

        if contract_ledger.remaining_payable(db, contract) - amount < 0:
            logger.warning(
                "Receipt of %s refused on contract %s: payable %s",
                amount,
                contract.contract_number,
                contract_ledger.remaining_payable(db, contract),
            )
            raise InvariantViolation("Can't add new receipt, exceed the remaining debt")

        moment = current_time(now)
        receipt = PaymentReceipt(
            receipt_number=next_number(db, NumberKind.PAYMENT_RECEIPT, moment),
            contract_id=contract.contract_id,
            amount=amount,
            created_by=principal.staff_id if principal else None,
            created_on=moment,
        )
        db.add(receipt)
        db.flush()

    logger.info("Recorded %s for %s on contract %s", receipt.receipt_number, amount, contract_id)
    return receipt


def attach_receipt(
        db: Session,
        decision_id: int,
        principal: Optional[Principal] = None,
        now: Optional[datetime] = None,
) -> PaymentReceipt:
    """
    Mint the payment receipt for a liquidation decision.

    The receipt carries the decision's amount and the contract of the
    application the decision belongs to. A decision gets at most one receipt.
    """
    with atomic(db):
        decision = (
            db.query(LiquidationDecision)
            .filter(LiquidationDecision.decision_id == decision_id)
            .first()
        )
        if not decision:
            raise NotFoundError(f"Decision {decision_id} not found")

        application = (
            db.query(LiquidationApplication)
            .filter(LiquidationApplication.decision_id == decision_id)
            .first()
        )
        if not application:
            raise NotFoundError(f"Decision {decision_id} not found")

        contract_ledger.get_contract(db, application.contract_id, lock=True)
        decision = (
            db.query(LiquidationDecision)
            .filter(LiquidationDecision.decision_id == decision_id)
            .with_for_update(of=LiquidationDecision)
            .populate_existing()
            .first()
        )
        if not decision:
            # deleted with its application while this writer waited on the contract
            raise NotFoundError(f"Decision {decision_id} not found")
        if decision.payment_receipt_id is not None:
            raise StateConflict("This decision already had payment receipt")

        moment = current_time(now)
        receipt = PaymentReceipt(
            receipt_number=next_number(db, NumberKind.PAYMENT_RECEIPT, moment),
            contract_id=application.contract_id,
            amount=money(decision.amount),
            created_by=principal.staff_id if principal else None,
            created_on=moment,
        )
        db.add(receipt)
        db.flush()

        decision.payment_receipt_id = receipt.receipt_id
        db.flush()

    logger.info("Attached %s to decision %s", receipt.receipt_number, decision.decision_number)
    return receipt


def list_receipts(db: Session, contract_id: Optional[int] = None):
    q = db.query(PaymentReceipt)
    if contract_id is not None:
        q = q.filter(PaymentReceipt.contract_id == contract_id)
    return q.order_by(PaymentReceipt.receipt_id.desc()).all()
