# bank_loans/services/branches.py
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_loans.core.enums import BranchTxnType
from bank_loans.core.exceptions import InvariantViolation, NotFoundError, StateConflict, ValidationError
from bank_loans.core.security import Principal, ensure_director
from bank_loans.models.branch_ledger_model import BranchLedger
from bank_loans.models.branches_model import BranchInfo
from bank_loans.services.notifications import BalanceNotifier, balance_notifier
from bank_loans.utils.database import atomic
from bank_loans.utils.money import ledger_amount, money

logger = logging.getLogger(__name__)


def lock_branch(db: Session, branch_id: int) -> BranchInfo:
    branch = (
        db.query(BranchInfo)
        .filter(BranchInfo.branch_id == branch_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not branch:
        raise NotFoundError("This branch does not exist")
    return branch


def post_movement(
        db: Session,
        branch: BranchInfo,
        txn_type: str,
        amount: Decimal,
        principal: Optional[Principal] = None,
        ref_table: Optional[str] = None,
        ref_id: Optional[int] = None,
        narration: Optional[str] = None,
) -> Decimal:
    """
    Apply one cash movement to a locked branch row and journal it.
    Deposits credit the branch, disbursements debit it.
    Returns the new balance. Caller owns the transaction.
    """
    amount = money(amount)
    balance = money(branch.branch_balance)

    if txn_type == BranchTxnType.DEPOSIT:
        new_balance = balance + amount
        debit, credit = money(0), amount
    else:
        new_balance = balance - amount
        debit, credit = amount, money(0)

    if new_balance < 0:
        raise InvariantViolation("Unavailable balance at this branch")

    branch.branch_balance = new_balance
    db.add(
        BranchLedger(
            branch_id=branch.branch_id,
            txn_type=txn_type,
            ref_table=ref_table,
            ref_id=ref_id,
            debit=debit,
            credit=credit,
            balance_after=new_balance,
            narration=narration,
            created_by=principal.staff_id if principal else None,
        )
    )
    db.flush()
    return new_balance


def branch_code_taken(db: Session, branch_code: str) -> bool:
    return db.query(BranchInfo).filter(BranchInfo.branch_code == branch_code).first() is not None


def create_branch(db: Session, data: dict, principal: Principal) -> BranchInfo:
    ensure_director(principal)

    if branch_code_taken(db, data["branch_code"]):
        raise StateConflict("Branch code already exists")

    opening = ledger_amount(data.get("branch_balance") or 0)
    if opening < 0:
        raise ValidationError("Balance can not be negative")

    try:
        with atomic(db):
            branch = BranchInfo(**{**data, "branch_balance": opening})
            db.add(branch)
            db.flush()
    except IntegrityError:
        # a concurrent create took the code between the check and the insert
        raise StateConflict("Branch code already exists")

    db.refresh(branch)
    logger.info("Created branch %s with opening balance %s", branch.branch_code, opening)
    return branch


def deposit(
        db: Session,
        branch_id: int,
        amount,
        principal: Principal,
        narration: Optional[str] = None,
        notifier: BalanceNotifier = balance_notifier,
) -> BranchInfo:
    ensure_director(principal)

    amount = ledger_amount(amount)
    if amount <= 0:
        raise ValidationError("Amount cannot <=0")

    with atomic(db):
        branch = lock_branch(db, branch_id)
        new_balance = post_movement(
            db,
            branch,
            BranchTxnType.DEPOSIT,
            amount,
            principal=principal,
            narration=narration or "Cash deposit",
        )

    notifier.publish(branch_id, new_balance)
    db.refresh(branch)
    return branch
