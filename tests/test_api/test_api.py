"""
Tests for the HTTP API.

These tests verify the FastAPI endpoints, status codes and error bodies.
"""

import pytest
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient

from api.main import app, reset_api_state
from shared.clock import FixedClock
from shared.data_store import DataStore


ACME = {
    "kind": "organization",
    "name": "Acme SA",
    "phone": "+41 21 000 00 00",
    "email": "contact@acme.example",
    "organization_identifier": "CHE-123.456.789",
}

JANE = {
    "kind": "individual",
    "name": "Jane Doe",
    "phone": "+41 79 000 00 00",
    "email": "jane.doe@example.com",
    "birthdate": "1990-04-02",
}


@pytest.fixture
def api_client(data_store: DataStore, clock: FixedClock):
    """Create a test client with fresh state."""
    reset_api_state(data_store, clock)
    yield TestClient(app)
    reset_api_state()


@pytest.fixture
def acme_id(api_client: TestClient) -> int:
    return api_client.post("/clients", json=ACME).json()["id"]


def open_contract(api_client: TestClient, client_id: int, **body) -> dict:
    body.setdefault("cost_amount", "100")
    response = api_client.post(f"/contracts/{client_id}", json=body)
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self, api_client: TestClient):
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestClientEndpoints:
    """Tests for /clients."""

    def test_create_organization(self, api_client: TestClient):
        response = api_client.post("/clients", json=ACME)

        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "organization"
        assert data["organization_identifier"] == "CHE-123.456.789"
        assert data["active"] is True
        assert response.headers["location"] == f"/clients/{data['id']}"

    def test_create_individual(self, api_client: TestClient):
        response = api_client.post("/clients", json=JANE)

        assert response.status_code == 201
        assert response.json()["kind"] == "individual"
        assert response.json()["birthdate"] == "1990-04-02"

    def test_create_individual_without_kind(self, api_client: TestClient):
        body = {key: value for key, value in JANE.items() if key != "kind"}

        response = api_client.post("/clients", json=body)

        assert response.status_code == 201
        assert response.json()["kind"] == "individual"

    def test_body_with_both_variant_fields_rejected(self, api_client: TestClient):
        body = {key: value for key, value in JANE.items() if key != "kind"}
        body["organization_identifier"] = "CHE-1"

        response = api_client.post("/clients", json=body)

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"
        assert api_client.get("/clients/1").status_code == 404

    def test_duplicate_identifier(self, api_client: TestClient, acme_id: int):
        response = api_client.post("/clients", json=ACME)

        assert response.status_code == 400
        data = response.json()
        assert data["status"] == 400
        assert data["error"] == "Bad Request"
        assert data["message"] == "Create client failed"
        assert data["kind"] == "DuplicateIdentifier"

    def test_invalid_phone(self, api_client: TestClient):
        response = api_client.post("/clients", json={**JANE, "phone": "call me"})

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation failed"
        assert any("phone" in v["field"] for v in data["violations"])

    def test_get_client(self, api_client: TestClient, acme_id: int):
        response = api_client.get(f"/clients/{acme_id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Acme SA"

    def test_get_unknown_client(self, api_client: TestClient):
        assert api_client.get("/clients/999").status_code == 404

    def test_get_rejects_non_positive_id(self, api_client: TestClient):
        assert api_client.get("/clients/0").status_code == 400

    def test_update_client(self, api_client: TestClient, acme_id: int):
        body = {**ACME, "name": "Acme AG", "organization_identifier": "CHE-999"}

        response = api_client.put(f"/clients/{acme_id}", json=body)

        assert response.status_code == 200
        assert response.json()["name"] == "Acme AG"
        assert response.json()["organization_identifier"] == "CHE-123.456.789"

    def test_update_type_mismatch(self, api_client: TestClient, acme_id: int):
        response = api_client.put(f"/clients/{acme_id}", json=JANE)

        assert response.status_code == 400
        assert response.json()["kind"] == "TypeMismatch"

    def test_update_unknown_client(self, api_client: TestClient):
        response = api_client.put("/clients/999", json=JANE)

        assert response.status_code == 400
        assert response.json()["kind"] == "NotFound"
        assert response.json()["message"] == "Update client failed"

    def test_deactivate_client(self, api_client: TestClient, acme_id: int):
        response = api_client.delete(f"/clients/{acme_id}")

        assert response.status_code == 204
        assert api_client.get(f"/clients/{acme_id}").status_code == 404

    def test_deactivate_twice(self, api_client: TestClient, acme_id: int):
        api_client.delete(f"/clients/{acme_id}")

        response = api_client.delete(f"/clients/{acme_id}")

        assert response.status_code == 400
        assert response.json()["kind"] == "NotFound"


class TestContractEndpoints:
    """Tests for /contracts."""

    def test_create_contract(self, api_client: TestClient, acme_id: int):
        response = api_client.post(f"/contracts/{acme_id}", json={"cost_amount": "500.00"})

        assert response.status_code == 201
        data = response.json()
        assert data["client_id"] == acme_id
        assert data["start_date"] == "2025-05-15"
        assert data["end_date"] is None
        assert Decimal(str(data["cost_amount"])) == Decimal("500")
        assert "update_date" not in data
        assert response.headers["location"] == f"/contracts/{data['id']}"

    def test_create_contract_invalid_range(self, api_client: TestClient, acme_id: int):
        response = api_client.post(f"/contracts/{acme_id}", json={
            "start_date": "2025-06-01",
            "end_date": "2025-05-01",
            "cost_amount": "10",
        })

        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidDateRange"

    def test_create_contract_negative_cost(self, api_client: TestClient, acme_id: int):
        response = api_client.post(f"/contracts/{acme_id}", json={"cost_amount": "-5"})

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_create_contract_unknown_client(self, api_client: TestClient):
        response = api_client.post("/contracts/77", json={"cost_amount": "10"})

        assert response.status_code == 400
        assert response.json()["kind"] == "ClientNotFound"

    def test_list_active_contracts(self, api_client: TestClient, acme_id: int):
        running = open_contract(api_client, acme_id)
        open_contract(api_client, acme_id, start_date="2024-01-01", end_date="2024-12-31")

        response = api_client.get(f"/contracts/{acme_id}")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [running["id"]]

    def test_list_with_update_window(
        self, api_client: TestClient, acme_id: int, clock: FixedClock
    ):
        clock.set(date(2025, 5, 1))
        early = open_contract(api_client, acme_id)
        clock.set(date(2025, 5, 15))
        late = open_contract(api_client, acme_id)

        after = api_client.get(f"/contracts/{acme_id}", params={"updated_after": "2025-05-10"})
        before = api_client.get(f"/contracts/{acme_id}", params={"updated_before": "2025-05-10"})

        assert [c["id"] for c in after.json()] == [late["id"]]
        assert [c["id"] for c in before.json()] == [early["id"]]

    def test_sum_cost(self, api_client: TestClient, acme_id: int):
        open_contract(api_client, acme_id, cost_amount="500")
        open_contract(api_client, acme_id, cost_amount="250")

        response = api_client.get(f"/contracts/{acme_id}/sum-cost")

        assert response.status_code == 200
        data = response.json()
        assert data["client_id"] == acme_id
        assert Decimal(str(data["sum_cost"])) == Decimal("750")

    def test_sum_cost_without_contracts(self, api_client: TestClient, acme_id: int):
        response = api_client.get(f"/contracts/{acme_id}/sum-cost")
        assert Decimal(str(response.json()["sum_cost"])) == Decimal("0")

    def test_amounts_are_json_numbers(self, api_client: TestClient, acme_id: int):
        contract = open_contract(api_client, acme_id, cost_amount="250.50")

        total = api_client.get(f"/contracts/{acme_id}/sum-cost").json()["sum_cost"]

        assert isinstance(contract["cost_amount"], float)
        assert isinstance(total, float)
        assert total == 250.5

    def test_update_cost(self, api_client: TestClient, acme_id: int):
        contract = open_contract(api_client, acme_id, cost_amount="500")

        response = api_client.put(f"/contracts/{contract['id']}/cost", json={"cost_amount": "650"})

        assert response.status_code == 200
        assert Decimal(str(response.json()["cost_amount"])) == Decimal("650")

    def test_update_cost_unknown_contract(self, api_client: TestClient):
        response = api_client.put("/contracts/12/cost", json={"cost_amount": "1"})

        assert response.status_code == 400
        assert response.json()["kind"] == "ContractNotFound"
        assert response.json()["message"] == "Update contract cost failed"

    def test_deactivation_closes_contracts(self, api_client: TestClient, acme_id: int):
        open_contract(api_client, acme_id, cost_amount="500")

        api_client.delete(f"/clients/{acme_id}")
        response = api_client.get(f"/contracts/{acme_id}/sum-cost")

        assert response.status_code == 400
        assert response.json()["kind"] == "ClientNotFound"
