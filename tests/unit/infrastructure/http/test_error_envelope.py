# tests/unit/infrastructure/http/test_error_envelope.py
from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from tickmark_api.infrastructure.http.errors import error_envelope


def test_minimal_envelope_omits_optional_keys() -> None:
    assert error_envelope(code="INVALID_INPUT", http_status=400, message="bad") == {
        "error": {"code": "INVALID_INPUT", "http_status": 400, "message": "bad"}
    }


def test_details_are_json_encoded() -> None:
    body = error_envelope(
        code="VERSION_CONFLICT",
        http_status=409,
        message="stale",
        details={
            "version_id": UUID("00000000-0000-0000-0000-000000000001"),
            "amount": Decimal("1.5"),
        },
        trace_id="rid-1",
    )

    err = body["error"]
    assert err["trace_id"] == "rid-1"
    assert err["details"]["version_id"] == "00000000-0000-0000-0000-000000000001"
    assert err["details"]["amount"] == 1.5
