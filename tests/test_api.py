"""HTTP-level tests: authentication, role checks and error mapping."""

from decimal import Decimal

import pytest

from bank_loans.models.branches_model import BranchInfo


@pytest.fixture
def director_headers(auth_header, director):
    return auth_header(director)


@pytest.fixture
def officer_headers(auth_header, officer):
    return auth_header(officer)


class TestAuth:
    def test_root_is_public(self, client) -> None:
        response = client.get("/")

        assert response.status_code == 200

    def test_missing_token(self, client) -> None:
        response = client.get("/staffs/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Please authenticate"

    def test_garbage_token(self, client) -> None:
        response = client.get("/staffs/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_me(self, client, officer, officer_headers) -> None:
        response = client.get("/staffs/me", headers=officer_headers)

        assert response.status_code == 200
        assert response.json()["staff_id"] == officer.staff_id
        assert response.json()["role"] == 2


class TestBranchRoutes:
    def test_get_branch_by_code_is_public(self, client, branch) -> None:
        response = client.get(f"/branch_info/{branch.branch_code}")

        assert response.status_code == 200
        assert response.json()["branch_balance"] == 1000.0

    def test_unknown_branch_code(self, client) -> None:
        assert client.get("/branch_info/NOPE").status_code == 404

    def test_create_requires_director(self, client, officer_headers) -> None:
        payload = {
            "branch_code": "HCM1",
            "branch_address": "1 Nguyen Hue",
            "branch_phone_number": "028000000",
            "branch_fax": "028000001",
        }

        response = client.post("/branch_info", json=payload, headers=officer_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Invalid permission"

    def test_director_creates_and_deposits(self, client, db, director_headers) -> None:
        payload = {
            "branch_code": "HCM1",
            "branch_address": "1 Nguyen Hue",
            "branch_phone_number": "028000000",
            "branch_fax": "028000001",
        }
        created = client.post("/branch_info", json=payload, headers=director_headers)
        assert created.status_code == 201
        branch_id = created.json()["branch_id"]

        deposited = client.post(
            f"/branch_info/{branch_id}/deposit", json={"amount": "150.25"}, headers=director_headers
        )
        assert deposited.status_code == 200
        assert deposited.json()["branch_balance"] == 150.25

        journal = client.get(f"/branch_info/{branch_id}/ledger", headers=director_headers)
        assert journal.status_code == 200
        assert journal.json()[0]["txn_type"] == "DEPOSIT"

    def test_zero_deposit_is_a_validation_error(self, client, branch, director_headers) -> None:
        response = client.post(
            f"/branch_info/{branch.branch_id}/deposit", json={"amount": 0}, headers=director_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Amount cannot <=0"


class TestCustomerRoutes:
    RESIDENT = {
        "name": "Tran Thi B",
        "date_of_birth": "1992-03-04",
        "address": "9 Hai Ba Trung",
        "identity_number": "123456789",
        "identity_card_created_date": "2016-06-06",
        "phone_number": "0912345678",
        "permanent_residence": "Hue",
        "email": "B@Mail.Test",
        "customer_type": 2,
    }

    def test_create_and_search(self, client, officer_headers) -> None:
        created = client.post("/customers", json=self.RESIDENT, headers=officer_headers)
        assert created.status_code == 201
        assert created.json()["email"] == "b@mail.test"

        prefix = client.get("/customers", params={"name": "Tran", "is_start_with": True}, headers=officer_headers)
        assert len(prefix.json()) == 1

        not_prefix = client.get("/customers", params={"name": "Thi", "is_start_with": True}, headers=officer_headers)
        assert not_prefix.json() == []

    def test_business_customer_needs_documents(self, client, officer_headers) -> None:
        payload = {**self.RESIDENT, "customer_type": 1}

        assert client.post("/customers", json=payload, headers=officer_headers).status_code == 422

    def test_identity_number_must_be_digits(self, client, officer_headers) -> None:
        payload = {**self.RESIDENT, "identity_number": "12-34"}

        assert client.post("/customers", json=payload, headers=officer_headers).status_code == 422

    def test_duplicate_phone(self, client, officer_headers) -> None:
        client.post("/customers", json=self.RESIDENT, headers=officer_headers)
        duplicate = {**self.RESIDENT, "identity_number": "987654321", "email": None}

        assert client.post("/customers", json=duplicate, headers=officer_headers).status_code == 409

    def test_duplicate_that_passes_the_pre_check(self, client, officer_headers, monkeypatch) -> None:
        from bank_loans.routers import customers_router

        client.post("/customers", json=self.RESIDENT, headers=officer_headers)
        # a concurrent create: the pre-check saw nothing, the unique index catches it
        monkeypatch.setattr(customers_router, "ensure_unique", lambda db, customer_id=None, **fields: None)

        response = client.post("/customers", json=self.RESIDENT, headers=officer_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "Customer identifier already in use"


class TestLoanFlow:
    def test_profile_contract_disburse_and_ledger(self, client, db, branch, make_customer, officer_headers,
                                                  director_headers) -> None:
        customer = make_customer()
        profile = client.post(
            "/loan_profiles",
            json={
                "customer_id": customer.customer_id,
                "proof_of_income": [{"image_id": "salary.png", "image_type": 2}],
                "money_to_loan": "500",
                "loan_purpose": "Buy a truck",
                "loan_duration": 24,
                "collateral": "Truck",
                "expected_source_money_to_repay": "Deliveries",
                "benefit_from_loan": "More routes",
                "signature_img": "cust.png",
                "loan_type": 4,
            },
            headers=officer_headers,
        )
        assert profile.status_code == 201
        assert profile.json()["loan_application_number"].startswith("HSSV.")
        assert profile.json()["proof_of_income"][0]["image_type"] == 2
        profile_id = profile.json()["profile_id"]

        contract = client.post(
            "/loan_contracts",
            json={"profile_id": profile_id, "commitment": "I will repay", "signature_img": "dir.png"},
            headers=director_headers,
        )
        assert contract.status_code == 201
        contract_id = contract.json()["contract_id"]
        assert contract.json()["principal_amount"] == 500.0

        assert client.get(f"/loan_profiles/has_contract/{profile_id}", headers=officer_headers).json() is True

        again = client.post(
            "/loan_contracts",
            json={"profile_id": profile_id, "commitment": "again", "signature_img": "dir.png"},
            headers=director_headers,
        )
        assert again.status_code == 409

        issued = client.post(
            "/disburse_certificates", json={"contract_id": contract_id, "amount": "300"}, headers=officer_headers
        )
        assert issued.status_code == 201
        assert issued.json()["cert_number"].startswith("PC.")

        too_much = client.post(
            "/disburse_certificates", json={"contract_id": contract_id, "amount": "201"}, headers=officer_headers
        )
        assert too_much.status_code == 400
        assert "exceed the remaining amount" in too_much.json()["detail"]

        assert client.get(f"/loan_contracts/debt/{contract_id}", headers=officer_headers).json() == 300.0

        ledger = client.get(f"/loan_contracts/{contract_id}/ledger", headers=officer_headers).json()
        assert ledger["remaining_disburse"] == 200.0
        assert ledger["debt"] == 300.0

        db.expire_all()
        assert db.get(BranchInfo, branch.branch_id).branch_balance == Decimal("700.00")

        one = client.get("/loan_contracts/one", params={"contract_id": contract_id}, headers=officer_headers)
        assert one.status_code == 200
        assert len(one.json()["disburse_certificates"]) == 1

    def test_unknown_contract_is_404(self, client, officer_headers) -> None:
        response = client.get("/loan_contracts/debt/999", headers=officer_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "This LoanContract does not exist"

    def test_profile_status_rules(self, client, make_profile, officer, officer_headers, make_contract) -> None:
        profile = make_profile(officer)

        rejected = client.patch(f"/loan_profiles/status/{profile.profile_id}", json={"status": 3},
                                headers=officer_headers)
        assert rejected.status_code == 200
        assert rejected.json()["loan_status"] == 3

        reopened = client.patch(f"/loan_profiles/status/{profile.profile_id}", json={"status": 1},
                                headers=officer_headers)
        assert reopened.status_code == 403

        deleted = client.patch(f"/loan_profiles/status/{profile.profile_id}", json={"status": 4},
                               headers=officer_headers)
        assert deleted.status_code == 200

        listed = client.get("/loan_profiles", headers=officer_headers).json()
        assert profile.profile_id not in [p["profile_id"] for p in listed]

        contracted = make_contract("100")
        blocked = client.patch(f"/loan_profiles/status/{contracted.profile_id}", json={"status": 4},
                               headers=officer_headers)
        assert blocked.status_code == 403


class TestApplicationRoutes:
    @pytest.fixture
    def funded(self, db, make_contract):
        from bank_loans.services.disbursements import issue_certificate
        from bank_loans.services.notifications import BalanceNotifier

        contract = make_contract("100")
        issue_certificate(db, contract.contract_id, "100", notifier=BalanceNotifier())
        return contract

    def test_liquidation_lifecycle(self, client, funded, officer_headers, director_headers) -> None:
        filed = client.post(
            "/liquidation_applications",
            json={"contract_id": funded.contract_id, "amount": "40", "signature_img": "s.png", "reason": "cash"},
            headers=officer_headers,
        )
        assert filed.status_code == 201
        application_id = filed.json()["application_id"]
        assert filed.json()["status"] == 1

        by_officer = client.post(
            "/liquidation_applications/decision",
            json={"application_id": application_id, "bod_signature": "bod.png"},
            headers=officer_headers,
        )
        assert by_officer.status_code == 403

        no_signature = client.post(
            "/liquidation_applications/decision",
            json={"application_id": application_id},
            headers=director_headers,
        )
        assert no_signature.status_code == 400
        assert no_signature.json()["detail"] == "Invalid BODSignature"

        decided = client.post(
            "/liquidation_applications/decision",
            json={"application_id": application_id, "bod_signature": "bod.png"},
            headers=director_headers,
        )
        assert decided.status_code == 200
        assert decided.json()["status"] == 2
        decision_id = decided.json()["decision"]["decision_id"]

        duplicate = client.post(
            "/liquidation_applications/decision",
            json={"application_id": application_id, "bod_signature": "bod.png"},
            headers=director_headers,
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["detail"] == "Already had decision"

        receipt = client.post(f"/liquidation_decisions/{decision_id}/payment_receipt", headers=officer_headers)
        assert receipt.status_code == 201
        assert receipt.json()["amount"] == 40.0

        deleted = client.delete(f"/liquidation_applications/{application_id}", headers=director_headers)
        assert deleted.status_code == 200
        assert client.get(f"/liquidation_applications/{application_id}", headers=officer_headers).status_code == 404

    def test_extension_requires_duration(self, client, funded, officer_headers) -> None:
        missing = client.post(
            "/extension_applications",
            json={"contract_id": funded.contract_id, "amount": "10", "signature_img": "s.png"},
            headers=officer_headers,
        )
        assert missing.status_code == 400

        filed = client.post(
            "/extension_applications",
            json={"contract_id": funded.contract_id, "amount": "10", "signature_img": "s.png", "duration": 6},
            headers=officer_headers,
        )
        assert filed.status_code == 201
        assert filed.json()["duration"] == 6

    def test_reject_then_decide(self, client, funded, officer_headers, director_headers) -> None:
        filed = client.post(
            "/exemption_applications",
            json={"contract_id": funded.contract_id, "amount": "10", "signature_img": "s.png"},
            headers=officer_headers,
        )
        application_id = filed.json()["application_id"]

        rejected = client.post(
            "/exemption_applications/reject", json={"application_id": application_id}, headers=director_headers
        )
        assert rejected.status_code == 200
        assert rejected.json()["status"] == 3

        decided = client.post(
            "/exemption_applications/decision",
            json={"application_id": application_id, "bod_signature": "bod.png"},
            headers=director_headers,
        )
        assert decided.status_code == 409
        assert decided.json()["detail"] == "This application was rejected"

    def test_contract_receipt_over_debt(self, client, funded, officer_headers) -> None:
        ok = client.post(
            "/payment_receipts", json={"contract_id": funded.contract_id, "amount": "60"}, headers=officer_headers
        )
        assert ok.status_code == 201

        over = client.post(
            "/payment_receipts", json={"contract_id": funded.contract_id, "amount": "41"}, headers=officer_headers
        )
        assert over.status_code == 400
        assert over.json()["detail"] == "Can't add new receipt, exceed the remaining debt"
