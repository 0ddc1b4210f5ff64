"""Tests for staff login, registration and daily timekeeping."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from bank_loans.core import config
from bank_loans.core.enums import StaffRole
from bank_loans.core.exceptions import StateConflict, ValidationError
from bank_loans.core.security import hash_password, principal_from_token, verify_password
from bank_loans.initial_data import init_seed
from bank_loans.models.staff_model import Staff
from bank_loans.models.timekeeping_model import Timekeeping
from bank_loans.services import staff_accounts

FIXED_NOW = datetime(2021, 11, 7, 8, 0)
STAFF_PASSWORD = "Secret123"


class TestPasswords:
    def test_hash_round_trip(self) -> None:
        hashed = hash_password("Secret123")

        assert hashed != "Secret123"
        assert verify_password("Secret123", hashed)
        assert not verify_password("Secret124", hashed)

    def test_missing_hash_or_oversized_password(self) -> None:
        assert not verify_password("Secret123", None)
        assert not verify_password("x" * 100, hash_password("Secret123"))


class TestAuthenticate:
    def test_valid_credentials(self, db, officer, branch) -> None:
        staff = staff_accounts.authenticate(db, f" {officer.email.upper()} ", STAFF_PASSWORD, branch.branch_id)

        assert staff.staff_id == officer.staff_id

    def test_unknown_email(self, db, branch) -> None:
        with pytest.raises(ValidationError, match="This user does not exist"):
            staff_accounts.authenticate(db, "nobody@bank.local", STAFF_PASSWORD, branch.branch_id)

    def test_wrong_password(self, db, officer, branch) -> None:
        with pytest.raises(ValidationError, match="Password is not correct"):
            staff_accounts.authenticate(db, officer.email, "Wrong1234", branch.branch_id)

    def test_other_branch(self, db, officer, make_branch) -> None:
        other = make_branch()

        with pytest.raises(ValidationError, match="This user is not working at this branch"):
            staff_accounts.authenticate(db, officer.email, STAFF_PASSWORD, other.branch_id)

    def test_inactive_staff(self, db, officer, branch) -> None:
        officer.is_active = False
        db.commit()

        with pytest.raises(ValidationError, match="This user does not exist"):
            staff_accounts.authenticate(db, officer.email, STAFF_PASSWORD, branch.branch_id)


class TestTimekeeping:
    def test_clock_in_then_out(self, db, officer, principal_of) -> None:
        staff_accounts.clock_in(db, principal_of(officer), now=FIXED_NOW)
        row = staff_accounts.clock_out(db, principal_of(officer), now=FIXED_NOW + timedelta(hours=8))

        assert row.work_day == FIXED_NOW.date()
        assert row.clock_in == FIXED_NOW
        assert row.clock_out == FIXED_NOW + timedelta(hours=8)

    def test_one_clock_in_per_day(self, db, officer, principal_of) -> None:
        staff_accounts.clock_in(db, principal_of(officer), now=FIXED_NOW)

        with pytest.raises(StateConflict, match="Already clocked in"):
            staff_accounts.clock_in(db, principal_of(officer), now=FIXED_NOW + timedelta(hours=1))

        staff_accounts.clock_in(db, principal_of(officer), now=FIXED_NOW + timedelta(days=1))
        assert db.query(Timekeeping).count() == 2

    def test_clock_out_needs_clock_in(self, db, officer, principal_of) -> None:
        with pytest.raises(StateConflict, match="Not clocked in yet"):
            staff_accounts.clock_out(db, principal_of(officer), now=FIXED_NOW)

    def test_one_clock_out_per_day(self, db, officer, principal_of) -> None:
        staff_accounts.clock_in(db, principal_of(officer), now=FIXED_NOW)
        staff_accounts.clock_out(db, principal_of(officer), now=FIXED_NOW + timedelta(hours=8))

        with pytest.raises(StateConflict, match="Already clocked out"):
            staff_accounts.clock_out(db, principal_of(officer), now=FIXED_NOW + timedelta(hours=9))

    def test_status_is_per_day(self, db, officer, principal_of) -> None:
        assert staff_accounts.clock_status(db, officer.staff_id, now=FIXED_NOW) == {
            "is_clocked_in": False,
            "is_clocked_out": False,
            "clock_in": None,
            "clock_out": None,
        }

        staff_accounts.clock_in(db, principal_of(officer), now=FIXED_NOW)
        today = staff_accounts.clock_status(db, officer.staff_id, now=FIXED_NOW)
        tomorrow = staff_accounts.clock_status(db, officer.staff_id, now=FIXED_NOW + timedelta(days=1))

        assert today["is_clocked_in"] and not today["is_clocked_out"]
        assert today["clock_in"] == FIXED_NOW
        assert not tomorrow["is_clocked_in"]


class TestSeed:
    def test_seeded_director_can_log_in(self, engine, db) -> None:
        init_seed(session_factory=sessionmaker(bind=engine, autocommit=False, autoflush=False))

        director = db.query(Staff).filter(Staff.email == config.SEED_DIRECTOR_EMAIL).one()
        staff = staff_accounts.authenticate(
            db, config.SEED_DIRECTOR_EMAIL, config.SEED_DIRECTOR_PASSWORD, director.branch_id
        )

        assert staff.role == StaffRole.DIRECTOR


class TestStaffRoutes:
    def test_login_returns_a_working_token(self, client, db, officer, branch) -> None:
        response = client.post(
            "/staffs/login",
            json={"email": officer.email, "password": STAFF_PASSWORD, "branch_id": branch.branch_id},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["staff"]["staff_id"] == officer.staff_id
        assert "password_hash" not in body["staff"]
        assert body["clock_in_out"]["is_clocked_in"] is False
        assert principal_from_token(db, body["access_token"]).staff_id == officer.staff_id

        me = client.get("/staffs/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.json()["email"] == officer.email

    def test_login_with_wrong_password(self, client, officer, branch) -> None:
        response = client.post(
            "/staffs/login",
            json={"email": officer.email, "password": "Wrong1234", "branch_id": branch.branch_id},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Password is not correct"

    def test_registered_staff_can_log_in(self, client, branch, auth_header, director) -> None:
        payload = {
            "name": "Le Van C",
            "email": "C@Bank.Local",
            "password": "Teller2021",
            "role": int(StaffRole.SUPPORT),
            "branch_id": branch.branch_id,
        }

        created = client.post("/staffs", json=payload, headers=auth_header(director))
        assert created.status_code == 201

        duplicate = client.post("/staffs", json=payload, headers=auth_header(director))
        assert duplicate.status_code == 409

        login = client.post(
            "/staffs/login",
            json={"email": "c@bank.local", "password": "Teller2021", "branch_id": branch.branch_id},
        )
        assert login.status_code == 200

    def test_weak_password_is_refused(self, client, branch, auth_header, director) -> None:
        payload = {
            "name": "Le Van D",
            "email": "d@bank.local",
            "password": "onlyletters",
            "role": int(StaffRole.SUPPORT),
            "branch_id": branch.branch_id,
        }

        assert client.post("/staffs", json=payload, headers=auth_header(director)).status_code == 422

    def test_clock_routes(self, client, auth_header, officer) -> None:
        headers = auth_header(officer)

        assert client.post("/staffs/clock_in", headers=headers).status_code == 200
        assert client.post("/staffs/clock_in", headers=headers).status_code == 409

        out = client.post("/staffs/clock_out", headers=headers)
        assert out.status_code == 200
        assert out.json()["clock_out"] is not None

        status = client.get("/staffs/clock_in_out_time", headers=headers).json()
        assert status["is_clocked_in"] is True
        assert status["is_clocked_out"] is True
        assert datetime.fromisoformat(status["clock_in"]) <= datetime.fromisoformat(status["clock_out"])

    def test_clock_routes_need_a_token(self, client) -> None:
        assert client.post("/staffs/clock_in").status_code == 401
        assert client.get("/staffs/clock_in_out_time").status_code == 401
