# bank_loans/services/applications.py
"""
Liquidation / exemption / extension requests and their board decisions.

    Pending --decide--> Done        (decision attached, irreversible)
    Pending --reject--> Rejected    (terminal)

The three kinds share this module; ``ApplicationKind`` carries what differs.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy.orm import Session

from bank_loans.core.config import DEFAULT_PAGE_LIMIT
from bank_loans.core.enums import RecordStatus
from bank_loans.core.exceptions import (
    InvariantViolation,
    NotFoundError,
    StateConflict,
    ValidationError,
)
from bank_loans.core.security import Principal, ensure_director
from bank_loans.models.exemption_model import ExemptionApplication, ExemptionDecision
from bank_loans.models.extension_model import ExtensionApplication, ExtensionDecision
from bank_loans.models.liquidation_model import LiquidationApplication, LiquidationDecision
from bank_loans.models.loan_contract_model import LoanContract
from bank_loans.models.payment_receipt_model import PaymentReceipt
from bank_loans.services import contract_ledger
from bank_loans.services.numbering import NumberKind, current_time, next_number
from bank_loans.utils.database import atomic
from bank_loans.utils.money import ledger_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplicationKind:
    name: str
    application_model: type
    decision_model: type
    application_number: NumberKind
    decision_number: NumberKind
    debt_error: str
    carries_duration: bool = False


LIQUIDATION = ApplicationKind(
    name="liquidation",
    application_model=LiquidationApplication,
    decision_model=LiquidationDecision,
    application_number=NumberKind.LIQUIDATION_APPLICATION,
    decision_number=NumberKind.LIQUIDATION_DECISION,
    debt_error="Can't add liquidation application, exceed the remaining debt",
)

EXEMPTION = ApplicationKind(
    name="exemption",
    application_model=ExemptionApplication,
    decision_model=ExemptionDecision,
    application_number=NumberKind.EXEMPTION_APPLICATION,
    decision_number=NumberKind.EXEMPTION_DECISION,
    debt_error="Can't add exemption, exceed the remaining debt",
)

EXTENSION = ApplicationKind(
    name="extension",
    application_model=ExtensionApplication,
    decision_model=ExtensionDecision,
    application_number=NumberKind.EXTENSION_APPLICATION,
    decision_number=NumberKind.EXTENSION_DECISION,
    debt_error="Can't add extension, exceed the remaining debt",
    carries_duration=True,
)

KINDS = {kind.name: kind for kind in (LIQUIDATION, EXEMPTION, EXTENSION)}

SORTABLE_FIELDS = ("application_number", "amount", "status", "created_on")


def _load_application(db: Session, kind: ApplicationKind, application_id: int, lock: bool = False):
    model = kind.application_model
    q = db.query(model).filter(model.application_id == application_id)
    if lock:
        q = q.with_for_update(of=model).populate_existing()
    application = q.first()
    if not application:
        raise NotFoundError(f"Application {application_id} not found")
    return application


def get_application(db: Session, kind: ApplicationKind, application_id: int):
    return _load_application(db, kind, application_id)


def file_application(
        db: Session,
        kind: ApplicationKind,
        contract_id: int,
        amount,
        signature_img: Optional[str],
        principal: Optional[Principal] = None,
        reason: Optional[str] = None,
        duration: Optional[int] = None,
        now: Optional[datetime] = None,
):
    amount = ledger_amount(amount)
    if amount <= 0:
        raise ValidationError("Amount cannot <=0")
    if not signature_img or not signature_img.strip():
        raise ValidationError("Invalid signature")
    if kind.carries_duration and (duration is None or duration <= 0):
        raise ValidationError("Duration must be > 0")

    with atomic(db):
        contract = contract_ledger.get_contract(db, contract_id, lock=True)

        if not contract_ledger.can_file_application(db, contract, amount):
            logger.warning(
                "%s application of %s refused on contract %s: debt %s",
                kind.name.capitalize(),
                amount,
                contract.contract_number,
                contract_ledger.debt(db, contract),
            )
            raise InvariantViolation(kind.debt_error)

        moment = current_time(now)
        fields = dict(
            contract_id=contract.contract_id,
            application_number=next_number(db, kind.application_number, moment),
            amount=amount,
            reason=(reason or "").strip() or None,
            signature_img=signature_img.strip(),
            status=int(RecordStatus.PENDING),
            created_by=principal.staff_id if principal else None,
            created_on=moment,
        )
        if kind.carries_duration:
            fields["duration"] = duration

        application = kind.application_model(**fields)
        db.add(application)
        db.flush()

    logger.info(
        "Filed %s for %s on contract %s",
        application.application_number,
        amount,
        contract_id,
    )
    return application


def decide(
        db: Session,
        kind: ApplicationKind,
        application_id: int,
        bod_signature: Optional[str],
        principal: Principal,
        now: Optional[datetime] = None,
):
    """Board approval: mint the decision, link it one-to-one and mark the application Done."""
    ensure_director(principal)

    with atomic(db):
        application = _load_application(db, kind, application_id)
        # decision attachment is serialised per contract, like every other ledger write
        contract_ledger.get_contract(db, application.contract_id, lock=True)
        application = _load_application(db, kind, application_id, lock=True)

        if application.status == RecordStatus.REJECTED:
            raise StateConflict("This application was rejected")
        if application.status == RecordStatus.DELETED:
            raise StateConflict("This application was deleted")
        if application.decision_id is not None:
            raise StateConflict("Already had decision")
        if not bod_signature or not bod_signature.strip():
            raise ValidationError("Invalid BODSignature")

        moment = current_time(now)
        fields = dict(
            decision_number=next_number(db, kind.decision_number, moment),
            reason=application.reason,
            amount=application.amount,
            bod_signature=bod_signature.strip(),
            approved_by=principal.staff_id,
            created_on=moment,
        )
        if kind.carries_duration:
            fields["duration"] = application.duration

        decision = kind.decision_model(**fields)
        db.add(decision)
        db.flush()

        application.decision_id = decision.decision_id
        application.status = int(RecordStatus.DONE)
        db.flush()

    db.refresh(application)
    logger.info(
        "Decision %s attached to %s",
        decision.decision_number,
        application.application_number,
    )
    return application


def reject(db: Session, kind: ApplicationKind, application_id: int, principal: Principal):
    ensure_director(principal)

    with atomic(db):
        application = _load_application(db, kind, application_id, lock=True)
        if application.decision_id is not None:
            raise StateConflict("This application already had decision")
        if application.status == RecordStatus.DELETED:
            raise StateConflict("This application was deleted")
        application.status = int(RecordStatus.REJECTED)
        db.flush()

    logger.info("Rejected %s", application.application_number)
    return application


def delete_application(db: Session, kind: ApplicationKind, application_id: int, principal: Principal) -> None:
    """Remove an application with its decision and, for liquidations, the decision's receipt."""
    ensure_director(principal)

    with atomic(db):
        application = _load_application(db, kind, application_id)
        # same lock order as decide and attach_receipt: contract, application, decision
        contract_ledger.get_contract(db, application.contract_id, lock=True)
        application = _load_application(db, kind, application_id, lock=True)
        number = application.application_number

        decision = None
        if application.decision_id is not None:
            decision = (
                db.query(kind.decision_model)
                .filter(kind.decision_model.decision_id == application.decision_id)
                .with_for_update(of=kind.decision_model)
                .populate_existing()
                .first()
            )
        receipt = None
        if decision is not None and getattr(decision, "payment_receipt_id", None):
            receipt = db.query(PaymentReceipt).filter(
                PaymentReceipt.receipt_id == decision.payment_receipt_id
            ).first()

        # the unit of work orders the deletes by foreign key: application, decision, receipt
        db.delete(application)
        if decision is not None:
            db.delete(decision)
        if receipt is not None:
            db.delete(receipt)
        db.flush()

    logger.info("Deleted %s", number)


def list_applications(
        db: Session,
        kind: ApplicationKind,
        contract_number: Optional[str] = None,
        application_number: Optional[str] = None,
        status: Optional[int] = None,
        created_at: Optional[date] = None,
        sort_by: Optional[str] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        skip: int = 0,
):
    model = kind.application_model
    q = db.query(model)

    if contract_number:
        q = q.join(LoanContract, LoanContract.contract_id == model.contract_id).filter(
            LoanContract.contract_number == contract_number
        )
    if application_number:
        q = q.filter(model.application_number == application_number)
    if status is not None:
        q = q.filter(model.status == status)
    if created_at is not None:
        q = q.filter(
            model.created_on >= datetime.combine(created_at, time.min),
            model.created_on <= datetime.combine(created_at, time.max),
        )

    order = model.application_id.desc()
    if sort_by:
        field, _, direction = sort_by.partition(":")
        if field in SORTABLE_FIELDS:
            column = getattr(model, field)
            order = column.desc() if direction == "desc" else column.asc()
    q = q.order_by(order)

    if limit <= 0:
        limit = DEFAULT_PAGE_LIMIT
    return q.offset(max(0, skip)).limit(limit).all()
