"""
Tests for the FastAPI application.

Test categories:
- Health check
- Demo preview (GET /api/preview/demo)
- Caller-supplied preview (POST /api/preview)
- Invalid constraints / transactions (400)
- Pydantic errors (422)
- Internal errors (500)
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from txselect.api import app


# =============================================================================
# Test Client
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def default_policy(monkeypatch):
    """Run every test with the default nonce policy unless it sets one."""
    monkeypatch.delenv("TXSELECT_NONCE_POLICY", raising=False)


# =============================================================================
# Test Data
# =============================================================================


def make_valid_request() -> dict:
    """Create a valid preview request payload."""
    return {
        "transactions": [
            {"id": "A0", "sender": "A", "nonce": 0, "gas": 100, "price": 20},
            {"id": "A1", "sender": "A", "nonce": 1, "gas": 100, "price": 20},
        ],
        "constraints": {"base_fee": 10, "max_gas": 150, "max_txs": 10},
    }


def make_gated_request() -> dict:
    """Nonce 0 below the base fee, nonce 1 above it."""
    return {
        "transactions": [
            {"id": "A0", "sender": "A", "nonce": 0, "gas": 100, "price": 5},
            {"id": "A1", "sender": "A", "nonce": 1, "gas": 100, "price": 50},
        ],
        "constraints": {"base_fee": 10, "max_gas": 1000, "max_txs": 10},
    }


# =============================================================================
# Health Check
# =============================================================================


class TestHealthCheck:
    """Tests for health check endpoint."""

    def test_health_check_returns_200(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "service" in data
        assert "version" in data


# =============================================================================
# Demo Preview
# =============================================================================


class TestDemoPreview:
    """Tests for GET /api/preview/demo."""

    def test_default_constraints(self, client: TestClient) -> None:
        response = client.get("/api/preview/demo")

        assert response.status_code == 200
        data = response.json()
        assert data["constraints"] == {"base_fee": 15, "max_gas": 150_000, "max_txs": 5}

        result = data["result"]
        assert [tx["id"] for tx in result["picked"]] == [
            "0x0f..aa91",
            "0xa1..88ef",
            "0x7a..9111",
            "0x3a..00ab",
        ]
        assert result["gas_used"] == 132_000
        assert result["avg_price"] == pytest.approx(20.25)
        assert result["eligible_count"] == 7
        assert result["skipped"] == ["0x9c..19de", "0xa2..21aa"]
        assert result["stop_reason"] == "exhausted"

    def test_pool_summary(self, client: TestClient) -> None:
        data = client.get("/api/preview/demo").json()

        assert data["pool"]["pool_size"] == 7
        assert len(data["pool"]["senders"]) == 4
        assert [b["label"] for b in data["pool"]["histogram"]] == ["15-16", "17-18", "21-22", "25-26"]

    def test_decisions_cover_pool(self, client: TestClient) -> None:
        data = client.get("/api/preview/demo").json()

        statuses = {d["tx_id"]: d["status"] for d in data["decisions"]}
        assert len(statuses) == 7
        assert statuses["0x9c..19de"] == "gas_skipped"
        assert statuses["0x5d..7312"] == "predecessor_skipped"

    def test_query_filters_pool(self, client: TestClient) -> None:
        data = client.get("/api/preview/demo", params={"q": "0x4F"}).json()

        assert data["pool"]["pool_size"] == 2
        assert [tx["id"] for tx in data["result"]["picked"]] == ["0x0f..aa91", "0x3a..00ab"]

    def test_override_constraints(self, client: TestClient) -> None:
        response = client.get("/api/preview/demo", params={"max_txs": 1})

        result = response.json()["result"]
        assert [tx["id"] for tx in result["picked"]] == ["0x0f..aa91"]
        assert result["stop_reason"] == "tx_limit"

    def test_negative_max_gas_is_blocked(self, client: TestClient) -> None:
        response = client.get("/api/preview/demo", params={"max_gas": -1})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_CONSTRAINT"


# =============================================================================
# Caller-Supplied Preview
# =============================================================================


class TestCreatePreview:
    """Tests for POST /api/preview."""

    def test_valid_request(self, client: TestClient) -> None:
        response = client.post("/api/preview", json=make_valid_request())

        assert response.status_code == 200
        data = response.json()
        assert [tx["id"] for tx in data["result"]["picked"]] == ["A0"]
        assert data["result"]["gas_used"] == 100
        assert data["result"]["eligible_count"] == 2
        assert data["explanation"]["summary"] == "1 of 2 eligible tx picked, avg 20.00, gas 100 of 150."

    def test_empty_pool(self, client: TestClient) -> None:
        request = {"transactions": [], "constraints": {"base_fee": 0, "max_gas": 100, "max_txs": 10}}

        response = client.post("/api/preview", json=request)

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["picked"] == []
        assert result["gas_used"] == 0
        assert result["avg_price"] == 0
        assert result["eligible_count"] == 0

    def test_missing_constraints_use_defaults(self, client: TestClient) -> None:
        request = make_valid_request()
        del request["constraints"]

        data = client.post("/api/preview", json=request).json()

        assert data["constraints"] == {"base_fee": 15, "max_gas": 150_000, "max_txs": 5}

    def test_query_filters_pool(self, client: TestClient) -> None:
        request = make_valid_request()
        request["query"] = "a1"

        data = client.post("/api/preview", json=request).json()

        assert data["pool"]["pool_size"] == 1
        assert [tx["id"] for tx in data["result"]["picked"]] == ["A1"]

    def test_strict_policy_by_default(self, client: TestClient) -> None:
        data = client.post("/api/preview", json=make_gated_request()).json()

        assert data["result"]["picked"] == []
        assert data["result"]["eligible_count"] == 1

    def test_lenient_policy_from_environment(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setenv("TXSELECT_NONCE_POLICY", "lenient")

        data = client.post("/api/preview", json=make_gated_request()).json()

        assert [tx["id"] for tx in data["result"]["picked"]] == ["A1"]


# =============================================================================
# Error Tests
# =============================================================================


class TestPreviewErrors:
    """Tests for error responses."""

    def test_negative_max_txs_returns_400(self, client: TestClient) -> None:
        request = make_valid_request()
        request["constraints"]["max_txs"] = -1

        response = client.post("/api/preview", json=request)

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "INVALID_CONSTRAINT"
        assert "max_txs" in detail["detail"]

    def test_negative_gas_returns_400_with_tx_id(self, client: TestClient) -> None:
        request = make_valid_request()
        request["transactions"][1]["gas"] = -5

        response = client.post("/api/preview", json=request)

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "INVALID_TRANSACTION"
        assert detail["tx_id"] == "A1"

    def test_missing_field_returns_422(self, client: TestClient) -> None:
        request = make_valid_request()
        del request["transactions"][0]["sender"]

        response = client.post("/api/preview", json=request)

        assert response.status_code == 422

    def test_negative_nonce_returns_422(self, client: TestClient) -> None:
        request = make_valid_request()
        request["transactions"][0]["nonce"] = -1

        response = client.post("/api/preview", json=request)

        assert response.status_code == 422

    def test_unexpected_error_returns_500(self, client: TestClient) -> None:
        with patch("txselect.api.trace_selection", side_effect=RuntimeError("boom")):
            response = client.post("/api/preview", json=make_valid_request())

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "INTERNAL_ERROR"

    def test_invalid_policy_environment_returns_500(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setenv("TXSELECT_NONCE_POLICY", "sometimes")

        response = client.post("/api/preview", json=make_valid_request())

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "INTERNAL_ERROR"

    def test_invalid_policy_environment_on_demo_returns_500(
        self, client: TestClient, monkeypatch
    ) -> None:
        monkeypatch.setenv("TXSELECT_NONCE_POLICY", "sometimes")

        response = client.get("/api/preview/demo")

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["code"] == "INTERNAL_ERROR"
        assert detail["error"] == "Internal error"
