"""Tests for approving a loan profile into a contract."""

from decimal import Decimal

import pytest

from bank_loans.core.enums import RecordStatus, StaffRole
from bank_loans.core.exceptions import NotFoundError, StateConflict, ValidationError
from bank_loans.services import contracts


class TestCreateContract:
    def test_snapshot_and_profile_approval(self, db, make_profile, officer, director, principal_of) -> None:
        profile = make_profile(officer, money_to_loan="2500")

        contract = contracts.create_contract(
            db, profile.profile_id, "I commit", "sig.png", principal_of(director)
        )

        db.refresh(profile)
        assert contract.contract_number.startswith("HD.")
        assert contract.principal_amount == Decimal("2500.00")
        assert contract.branch_id == director.branch_id
        assert contract.approver_id == director.staff_id
        assert profile.loan_status == RecordStatus.DONE
        assert profile.approver_id == director.staff_id

    def test_branch_follows_the_approver(
            self, db, make_branch, make_staff, make_profile, officer, principal_of
    ) -> None:
        other_branch = make_branch(balance="0")
        approver = make_staff(other_branch, StaffRole.APPRAISAL)
        profile = make_profile(officer)

        contract = contracts.create_contract(db, profile.profile_id, "c", "s", principal_of(approver))

        assert contract.branch_id == other_branch.branch_id

    def test_one_contract_per_profile(self, db, make_profile, officer, director, principal_of) -> None:
        profile = make_profile(officer)
        contracts.create_contract(db, profile.profile_id, "c", "s", principal_of(director))

        with pytest.raises(StateConflict, match="This loan profile already had loan contract"):
            contracts.create_contract(db, profile.profile_id, "c", "s", principal_of(director))

    def test_rejected_profile_cannot_be_contracted(
            self, db, make_profile, officer, director, principal_of
    ) -> None:
        profile = make_profile(officer, status=RecordStatus.REJECTED)

        with pytest.raises(StateConflict):
            contracts.create_contract(db, profile.profile_id, "c", "s", principal_of(director))

    def test_unknown_profile(self, db, director, principal_of) -> None:
        with pytest.raises(NotFoundError, match="This loan profile does not exist"):
            contracts.create_contract(db, 31337, "c", "s", principal_of(director))

    def test_commitment_required(self, db, make_profile, officer, director, principal_of) -> None:
        profile = make_profile(officer)

        with pytest.raises(ValidationError):
            contracts.create_contract(db, profile.profile_id, " ", "s", principal_of(director))

    def test_lookup_by_number(self, db, make_contract) -> None:
        contract = make_contract("100")

        assert contracts.get_contract_by_number(db, contract.contract_number).contract_id == contract.contract_id
        with pytest.raises(NotFoundError):
            contracts.get_contract_by_number(db, "HD.00.1.1.1")
