# bank_loans/services/contracts.py
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from bank_loans.core.enums import RecordStatus
from bank_loans.core.exceptions import NotFoundError, StateConflict, ValidationError
from bank_loans.core.security import Principal
from bank_loans.models.loan_contract_model import LoanContract
from bank_loans.models.loan_profile_model import LoanProfile
from bank_loans.models.staff_model import Staff
from bank_loans.services.numbering import NumberKind, current_time, next_number
from bank_loans.utils.database import atomic
from bank_loans.utils.money import money

logger = logging.getLogger(__name__)

CONTRACTABLE_STATUSES = (int(RecordStatus.PENDING), int(RecordStatus.DONE))


def create_contract(
        db: Session,
        profile_id: int,
        commitment: str,
        signature_img: str,
        principal: Principal,
        now: Optional[datetime] = None,
) -> LoanContract:
    """
    Approve a loan profile into a contract.

    The principal is a snapshot of the profile's ``money_to_loan`` and the
    contract belongs to the approving staff member's branch.
    """
    if not commitment or not commitment.strip():
        raise ValidationError("Invalid commitment")
    if not signature_img or not signature_img.strip():
        raise ValidationError("Invalid signature")

    with atomic(db):
        profile = (
            db.query(LoanProfile)
            .filter(LoanProfile.profile_id == profile_id)
            .with_for_update(of=LoanProfile)
            .populate_existing()
            .first()
        )
        if not profile:
            raise NotFoundError("This loan profile does not exist")

        existing = db.query(LoanContract).filter(LoanContract.profile_id == profile_id).first()
        if existing:
            raise StateConflict("This loan profile already had loan contract")
        if profile.loan_status not in CONTRACTABLE_STATUSES:
            raise StateConflict("This loan profile is not open for approval")

        approver = db.query(Staff).filter(Staff.staff_id == principal.staff_id).first()
        if not approver:
            raise NotFoundError("This staff does not exist")

        moment = current_time(now)
        contract = LoanContract(
            contract_number=next_number(db, NumberKind.LOAN_CONTRACT, moment),
            branch_id=approver.branch_id,
            profile_id=profile.profile_id,
            approver_id=approver.staff_id,
            principal_amount=money(profile.money_to_loan),
            commitment=commitment.strip(),
            signature_img=signature_img.strip(),
            created_on=moment,
        )
        db.add(contract)

        profile.approver_id = approver.staff_id
        profile.loan_status = int(RecordStatus.DONE)
        db.flush()

    db.refresh(contract)
    logger.info(
        "Contract %s opened on profile %s for %s",
        contract.contract_number,
        profile.loan_application_number,
        contract.principal_amount,
    )
    return contract


def get_contract_by_number(db: Session, contract_number: str) -> LoanContract:
    contract = db.query(LoanContract).filter(LoanContract.contract_number == contract_number).first()
    if not contract:
        raise NotFoundError("This LoanContract does not exist")
    return contract
