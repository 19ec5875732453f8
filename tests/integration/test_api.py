"""Integration tests for API endpoints and the calculator page"""

import pytest
from fastapi.testclient import TestClient

from emi_gateway.api.main import create_app
from emi_gateway.config import Settings
from emi_gateway.infrastructure.memory.repositories import InMemoryCalculationRepository

LOAN = {"principal": 100000, "monthly_rate": 1, "months": 12}


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["persistence_backend"] == "memory"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/emi", json=LOAN)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "emi_calculations_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_preview_endpoint(client: TestClient, memory_repository: InMemoryCalculationRepository):
    """Test POST /v1/emi returns payment and totals without saving"""
    response = client.post("/v1/emi", json=LOAN)

    assert response.status_code == 200
    data = response.json()
    assert data["monthly_payment"] == pytest.approx(8884.88, abs=0.01)
    assert data["formatted_monthly_payment"] == "K8,884.88"
    assert data["total_payment"] == pytest.approx(data["monthly_payment"] * 12)
    assert data["formatted_total_interest"].startswith("K")
    assert data["currency"] == "ZMW"
    assert memory_repository.records == []


def test_preview_endpoint_field_errors(client: TestClient):
    response = client.post("/v1/emi", json={"principal": "abc", "monthly_rate": 0.05})

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["field_errors"]["principal"] == ["Principal must be a number"]
    assert data["field_errors"]["monthly_rate"] == ["Monthly rate must be greater than or equal to 0.1"]
    assert data["field_errors"]["months"] == ["Months is required"]


def test_create_calculation(client: TestClient, memory_repository: InMemoryCalculationRepository):
    """Test POST /v1/calculations with the in-memory store"""
    response = client.post(
        "/v1/calculations",
        json={**LOAN, "currency": "ZMW", "user_id": "user-1", "client_request_id": "req-1"},
    )

    assert response.status_code == 201
    assert response.json() == {"success": True, "id": "inmem-1"}
    assert memory_repository.records[0].user_id == "user-1"


def test_create_calculation_validation_error(client: TestClient, memory_repository: InMemoryCalculationRepository):
    response = client.post(
        "/v1/calculations",
        json={"principal": 0, "monthly_rate": 1, "months": 12.5, "currency": "USD"},
    )

    assert response.status_code == 422
    field_errors = response.json()["field_errors"]
    assert set(field_errors) == {"principal", "months", "currency"}
    assert memory_repository.records == []


def test_create_calculation_persistence_failure(failing_client: TestClient):
    response = failing_client.post("/v1/calculations", json={**LOAN, "currency": "ZMW"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Calculation store unavailable"


def test_preview_unaffected_by_store_failure(failing_client: TestClient):
    response = failing_client.post("/v1/emi", json=LOAN)
    assert response.status_code == 200


def test_create_calculation_idempotent_in_database(database_client: TestClient, sql_repository):
    body = {**LOAN, "currency": "ZMW", "client_request_id": "req-42"}

    first = database_client.post("/v1/calculations", json=body)
    second = database_client.post("/v1/calculations", json={**body, "principal": 200000})

    assert first.status_code == second.status_code == 201
    assert first.json()["id"] == second.json()["id"] == "req-42"
    assert sql_repository.get("req-42").principal == 200000


def test_create_calculation_without_request_id_in_database(database_client: TestClient):
    ids = {
        database_client.post("/v1/calculations", json={**LOAN, "currency": "ZMW"}).json()["id"]
        for _ in range(3)
    }
    assert len(ids) == 3


def test_calculator_page_defaults(client: TestClient, memory_repository: InMemoryCalculationRepository):
    """Test GET / renders the form with the default calculation"""
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'name="principal"' in response.text
    assert 'value="100000"' in response.text
    assert "K8,884.88" in response.text
    assert memory_repository.records == []


def test_calculator_page_with_query(client: TestClient):
    response = client.get("/", params={"principal": "10000", "monthly_rate": str(20 / 12), "months": "12"})

    assert response.status_code == 200
    assert "K926.35" in response.text


def test_calculator_page_shows_field_errors(client: TestClient):
    response = client.get("/", params={"principal": "0", "monthly_rate": "1", "months": "12.5"})

    assert response.status_code == 200
    assert "Principal must be greater than or equal to 1" in response.text
    assert "Months must be a whole number" in response.text
    assert 'id="result" class="result" hidden' in response.text


def test_calculator_page_escapes_input(client: TestClient):
    response = client.get("/", params={"principal": '"><script>alert(1)</script>', "monthly_rate": "1", "months": "12"})

    assert "<script>alert(1)</script>" not in response.text
    assert "Principal must be a number" in response.text


def test_missing_store_credentials_fail_first_save_only():
    """Durable store without credentials: startup and previews work, saving returns 503"""
    app = create_app(Settings(persistence_backend="database", store_credentials=None, store_emulator_url=None))
    client = TestClient(app)

    assert client.post("/v1/emi", json=LOAN).status_code == 200

    response = client.post("/v1/calculations", json={**LOAN, "currency": "ZMW"})
    assert response.status_code == 503


def test_calculator_page_reuses_request_id_until_inputs_change(client: TestClient):
    """Repeat saves of one result share a client_request_id; editing an input starts a new one"""
    script = client.get("/").text

    assert script.count("crypto.randomUUID()") == 1
    assert "client_request_id: requestId" in script
    assert "requestId = null;\n    clearTimeout(timer);" in script


def test_create_calculation_empty_request_id_uses_field_errors(client: TestClient):
    response = client.post("/v1/calculations", json={**LOAN, "currency": "ZMW", "client_request_id": ""})

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert list(data["field_errors"]) == ["client_request_id"]


def test_create_calculation_non_string_user_id_uses_field_errors(client: TestClient):
    response = client.post("/v1/calculations", json={**LOAN, "currency": "ZMW", "user_id": 42})

    assert response.status_code == 422
    assert list(response.json()["field_errors"]) == ["user_id"]


def test_preview_non_object_body_uses_field_errors(client: TestClient):
    response = client.post("/v1/emi", json=[1, 2, 3])

    assert response.status_code == 422
    assert "__root__" in response.json()["field_errors"]
