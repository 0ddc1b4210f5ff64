# bank_loans/services/disbursements.py
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from bank_loans.core.enums import BranchTxnType
from bank_loans.core.exceptions import InvariantViolation, ValidationError
from bank_loans.core.security import Principal
from bank_loans.models.disburse_certificate_model import DisburseCertificate
from bank_loans.services import contract_ledger
from bank_loans.services.branches import lock_branch, post_movement
from bank_loans.services.notifications import BalanceNotifier, balance_notifier
from bank_loans.services.numbering import NumberKind, current_time, next_number
from bank_loans.utils.database import atomic
from bank_loans.utils.money import ledger_amount, money

logger = logging.getLogger(__name__)


def issue_certificate(
        db: Session,
        contract_id: int,
        amount,
        principal: Optional[Principal] = None,
        now: Optional[datetime] = None,
        notifier: BalanceNotifier = balance_notifier,
) -> DisburseCertificate:
    """
    Release ``amount`` of the contract's principal from its branch's cash.

    Certificate, branch debit and journal row commit together; the balance
    notification goes out only after the commit.
    """
    amount = ledger_amount(amount)
    if amount <= 0:
        raise ValidationError("Amount cannot <=0")

    with atomic(db):
        # contract lock first, branch lock second: same order everywhere
        contract = contract_ledger.get_contract(db, contract_id, lock=True)

        if not contract_ledger.can_disburse(db, contract, amount):
            logger.warning(
                "Disbursement of %s refused on contract %s: remaining %s",
                amount,
                contract.contract_number,
                contract_ledger.remaining_disburse(db, contract),
            )
            raise InvariantViolation("Can't add new disburse certificate, exceed the remaining amount")

        branch = lock_branch(db, contract.branch_id)
        if money(branch.branch_balance) - amount < 0:
            logger.warning(
                "Disbursement of %s refused on contract %s: branch %s holds %s",
                amount,
                contract.contract_number,
                branch.branch_code,
                branch.branch_balance,
            )
            raise InvariantViolation("Unavailable balance at this branch")

        moment = current_time(now)
        certificate = DisburseCertificate(
            contract_id=contract.contract_id,
            cert_number=next_number(db, NumberKind.DISBURSE_CERTIFICATE, moment),
            amount=amount,
            created_by=principal.staff_id if principal else None,
            created_on=moment,
        )
        db.add(certificate)
        db.flush()

        new_balance = post_movement(
            db,
            branch,
            BranchTxnType.DISBURSEMENT,
            amount,
            principal=principal,
            ref_table=DisburseCertificate.__tablename__,
            ref_id=certificate.certificate_id,
            narration=f"Disbursement {certificate.cert_number} on {contract.contract_number}",
        )
        branch_id = branch.branch_id

    logger.info("Issued %s for %s on contract %s", certificate.cert_number, amount, contract_id)
    notifier.publish(branch_id, new_balance)
    return certificate
