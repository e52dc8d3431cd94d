# tests/integration/routers/test_materiality_router.py
from __future__ import annotations

from typing import Any
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tickmark_api.adapters.dependencies.materiality import get_materiality_uow
from tickmark_api.config.settings import Settings
from tickmark_api.main import create_app

BASE = "/v1/materiality"
BENCHMARK_RATIONALE = (
    "Revenue is the most stable measure for this trading entity and is the focus of users."
)


@pytest.fixture
def app(uow: Any) -> FastAPI:
    settings = Settings(_env_file=None, ENVIRONMENT="test", DATABASE_URL="sqlite+aiosqlite://")
    application = create_app(settings)
    application.dependency_overrides[get_materiality_uow] = lambda: uow
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def _inputs(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "benchmark_type": "revenue",
        "benchmark_value": "5000000",
        "benchmark_rationale": BENCHMARK_RATIONALE,
    }
    body.update(overrides)
    return body


def test_compute_returns_thresholds_as_strings(client: TestClient) -> None:
    resp = client.post(f"{BASE}/compute", json=_inputs(), headers={"X-Request-ID": "rid-7"})

    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "rid-7"
    data = resp.json()["data"]
    assert data["thresholds"]["overall_materiality"] == "250000"
    assert data["thresholds"]["performance_materiality"] == "187500"
    assert data["thresholds"]["clearly_trivial_threshold"] == "12500"
    assert data["approvable"] is True
    assert data["advisories"] == []


def test_compute_flags_missing_benchmark(client: TestClient) -> None:
    resp = client.post(f"{BASE}/compute", json=_inputs(benchmark_value=None))

    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["approvable"] is False
    assert data["thresholds"]["overall_materiality"] == "0"
    assert data["advisories"][0]["code"] == "NON_POSITIVE_BENCHMARK"


def test_compute_rejects_out_of_range_percentage(client: TestClient) -> None:
    resp = client.post(f"{BASE}/compute", json=_inputs(overall_materiality_percentage="150"))

    assert resp.status_code == 400
    err = resp.json()["error"]
    assert err["code"] == "INVALID_INPUT"
    assert err["http_status"] == 400
    assert err["trace_id"] == resp.headers["X-Request-ID"]


def test_compute_validation_error_envelope(client: TestClient) -> None:
    resp = client.post(f"{BASE}/compute", json={"benchmark_value": "1"})

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_compute_rejects_unknown_fields(client: TestClient) -> None:
    resp = client.post(f"{BASE}/compute", json=_inputs(unexpected=True))

    assert resp.status_code == 422


def test_guidance_has_etag(client: TestClient) -> None:
    resp = client.get(
        f"{BASE}/guidance", params={"benchmark_type": "total_assets", "industry": "banking"}
    )

    assert resp.status_code == 200
    assert resp.headers["ETag"].startswith('"')
    data = resp.json()["data"]
    assert data["industry"] == "banking"
    assert data["recommended_overall_pct"] == "0.5"


def test_guidance_requires_benchmark_type(client: TestClient) -> None:
    resp = client.get(f"{BASE}/guidance")

    assert resp.status_code == 422


def test_current_is_null_before_first_save(client: TestClient) -> None:
    resp = client.get(f"{BASE}/engagements/eng-1/current")

    assert resp.status_code == 200
    assert resp.json() == {"data": None}


def test_save_lifecycle(client: TestClient) -> None:
    url = f"{BASE}/engagements/eng-1/versions"

    created = client.post(url, json=_inputs(prepared_by="alice"))
    assert created.status_code == 201
    first = created.json()["data"]["version"]
    assert first["version"] == 1
    assert created.json()["data"]["created"] is True

    unchanged = client.post(url, json=_inputs(expected_current_version_id=first["id"]))
    assert unchanged.status_code == 200
    assert unchanged.json()["data"]["created"] is False
    assert unchanged.json()["data"]["version"]["id"] == first["id"]

    second = client.post(
        url,
        json=_inputs(expected_current_version_id=first["id"], overall_materiality_percentage="1"),
    )
    assert second.status_code == 201
    assert second.json()["data"]["version"]["previous_version_id"] == first["id"]

    stale = client.post(
        url,
        json=_inputs(expected_current_version_id=first["id"], overall_materiality_percentage="2"),
    )
    assert stale.status_code == 409
    assert stale.json()["error"]["code"] == "VERSION_CONFLICT"

    history = client.get(f"{BASE}/engagements/eng-1/history")
    assert history.status_code == 200
    assert "ETag" in history.headers
    assert [v["version"] for v in history.json()["data"]["versions"]] == [2, 1]

    current = client.get(f"{BASE}/engagements/eng-1/current")
    assert current.json()["data"]["version"] == 2


def test_approval_flow(client: TestClient) -> None:
    saved = client.post(f"{BASE}/engagements/eng-1/versions", json=_inputs())
    version_id = saved.json()["data"]["version"]["id"]

    approved = client.post(f"{BASE}/versions/{version_id}/approve", json={"approver": "partner"})
    assert approved.status_code == 200
    assert approved.json()["data"]["is_approved"] is True
    assert approved.json()["data"]["approved_by"] == "partner"

    again = client.post(f"{BASE}/versions/{version_id}/approve", json={"approver": "other"})
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_APPROVED"


def test_approve_unknown_version(client: TestClient) -> None:
    resp = client.post(f"{BASE}/versions/{uuid4()}/approve", json={"approver": "partner"})

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "VERSION_NOT_FOUND"


def test_approve_requires_approver(client: TestClient) -> None:
    resp = client.post(f"{BASE}/versions/{uuid4()}/approve", json={"approver": ""})

    assert resp.status_code == 422


def test_save_rounds_inputs_to_stored_scale(client: TestClient) -> None:
    url = f"{BASE}/engagements/eng-1/versions"
    body = _inputs(benchmark_value="1234567.123456789", overall_materiality_percentage="4.12345678")

    created = client.post(url, json=body)
    assert created.status_code == 201
    version = created.json()["data"]["version"]
    assert version["inputs"]["benchmark_value"] == "1234567.12345679"
    assert version["inputs"]["overall_materiality_percentage"] == "4.123457"

    again = client.post(url, json={**body, "expected_current_version_id": version["id"]})
    assert again.status_code == 200
    assert again.json()["data"]["created"] is False
    assert again.json()["data"]["version"]["id"] == version["id"]


def test_compute_rejects_benchmark_beyond_stored_scale(client: TestClient) -> None:
    resp = client.post(f"{BASE}/compute", json=_inputs(benchmark_value="1e25"))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"


def test_qualitative_adjustments(client: TestClient) -> None:
    resp = client.post(
        f"{BASE}/qualitative-adjustments",
        json={
            "base_materiality": "100000",
            "factors": [
                {"factor": "debt_covenants", "assessment": "decreases", "impact": "5"},
                {"factor": "industry_volatility", "assessment": "increases", "impact": "10"},
                {"factor": "fraud_risk", "assessment": "no_impact"},
            ],
        },
    )

    assert resp.status_code == 200
    assert "ETag" not in resp.headers
    data = resp.json()["data"]
    assert data["base_materiality"] == "100000"
    assert data["adjusted_materiality"] == "105000"
    assert data["factors_applied"] == 2


def test_qualitative_adjustments_round_to_whole_units(client: TestClient) -> None:
    resp = client.post(
        f"{BASE}/qualitative-adjustments",
        json={
            "base_materiality": "12345.67",
            "factors": [{"factor": "public_interest", "assessment": "increases", "impact": "10"}],
        },
    )

    assert resp.json()["data"]["adjusted_materiality"] == "13580"


def test_qualitative_adjustments_reject_negative_base(client: TestClient) -> None:
    resp = client.post(
        f"{BASE}/qualitative-adjustments", json={"base_materiality": "-1", "factors": []}
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"


def test_qualitative_adjustments_reject_unknown_factor(client: TestClient) -> None:
    resp = client.post(
        f"{BASE}/qualitative-adjustments",
        json={
            "base_materiality": "100000",
            "factors": [{"factor": "weather", "assessment": "increases", "impact": "5"}],
        },
    )

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.parametrize(
    "aggregate, should_revise",
    [("80000", True), ("75000", False)],
)
def test_revision_check(client: TestClient, aggregate: str, should_revise: bool) -> None:
    resp = client.post(
        f"{BASE}/revision-check",
        json={"overall_materiality": "100000", "aggregate_misstatements": aggregate},
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["should_revise"] is should_revise
    if should_revise:
        assert data["reason"] == "Aggregate misstatements exceed 75% of overall materiality"
    else:
        assert data["reason"] is None


def test_revision_check_rejects_negative_amount(client: TestClient) -> None:
    resp = client.post(
        f"{BASE}/revision-check",
        json={"overall_materiality": "100000", "aggregate_misstatements": "-5"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    resp = client.get("/v1/nothing-here")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "HTTP_ERROR"


def test_metrics_endpoint(client: TestClient) -> None:
    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "materiality_versions_saved_total" in resp.text


def test_metrics_can_be_disabled() -> None:
    settings = Settings(_env_file=None, ENVIRONMENT="test", METRICS_ENABLED=False)
    resp = TestClient(create_app(settings)).get("/metrics")

    assert resp.status_code == 404
