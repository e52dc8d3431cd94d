# tests/integration/routers/test_sampling_router.py
from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient

from tickmark_api.config.settings import Settings
from tickmark_api.main import create_app

BASE = "/v1/sampling"


@pytest.fixture
def client() -> TestClient:
    settings = Settings(_env_file=None, ENVIRONMENT="test", DATABASE_URL="sqlite+aiosqlite://")
    return TestClient(create_app(settings))


def _post(client: TestClient, path: str, body: dict[str, Any]) -> Any:
    return client.post(f"{BASE}{path}", json=body)


def test_mus_sample_size(client: TestClient) -> None:
    resp = _post(
        client,
        "/compute",
        {"method": "MUS", "population_value": "5000000", "tolerable_error": "250000"},
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["method"] == "MUS"
    assert data["sample_size"] == 61
    assert data["trace"]["sampling_interval"] == "83333"
    assert data["trace"]["reliability_factor"] == "3.00"


def test_classical_sample_size(client: TestClient) -> None:
    resp = _post(
        client,
        "/compute",
        {
            "method": "classical_variables",
            "population_size": 1000,
            "population_value": 5000000,
            "tolerable_error": 250000,
        },
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["sample_size"] == 35


def test_attribute_sample_size(client: TestClient) -> None:
    resp = _post(
        client,
        "/compute",
        {"method": "attribute", "population_size": 500, "expected_error_rate": "2"},
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["sample_size"] == 215


def test_missing_inputs_are_incomplete_not_errors(client: TestClient) -> None:
    resp = _post(client, "/compute", {"method": "MUS", "tolerable_error": "250000"})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["sample_size"] == 0
    assert data["trace"]["incomplete"] is True
    assert data["trace"]["missing_fields"] == ["population_value"]


def test_unsupported_confidence_level_is_invalid_input(client: TestClient) -> None:
    resp = _post(
        client,
        "/compute",
        {
            "method": "MUS",
            "population_value": "5000000",
            "tolerable_error": "250000",
            "confidence_level": 80,
        },
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"


def test_degenerate_interval(client: TestClient) -> None:
    resp = _post(
        client, "/compute", {"method": "MUS", "population_value": "5000000", "tolerable_error": "2"}
    )

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "DEGENERATE_COMPUTATION"


def test_unknown_method_is_validation_error(client: TestClient) -> None:
    resp = _post(client, "/compute", {"method": "stratified"})

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_mus_selection(client: TestClient) -> None:
    resp = _post(
        client,
        "/mus/select",
        {
            "population": [
                {"item_id": "a", "value": "100"},
                {"item_id": "b", "value": "200"},
                {"item_id": "c", "value": "300"},
                {"item_id": "d", "value": "400"},
            ],
            "sample_size": 4,
            "start_point": "100",
        },
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["sampling_interval"] == "250"
    assert data["selected_ids"] == ["a", "c", "d"]


def test_mus_selection_rejects_bad_start(client: TestClient) -> None:
    resp = _post(
        client,
        "/mus/select",
        {"population": [{"item_id": "a", "value": "100"}], "sample_size": 1, "start_point": "0"},
    )

    assert resp.status_code == 400


def test_mus_evaluation(client: TestClient) -> None:
    resp = _post(
        client,
        "/mus/evaluate",
        {
            "items": [{"item_id": "x", "book_value": "5000", "audited_value": "4000"}],
            "sampling_interval": "10000",
            "tolerable_misstatement": "30000",
        },
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert Decimal(data["upper_misstatement_limit"]) == Decimal("33500")
    assert data["conclusion"] == "requires_expansion"


def test_attribute_evaluation(client: TestClient) -> None:
    resp = _post(
        client,
        "/attribute/evaluate",
        {"sample_size": 60, "deviations": 1, "tolerable_deviation_rate": "0.05"},
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["conclusion"] == "reliance_not_supported"
