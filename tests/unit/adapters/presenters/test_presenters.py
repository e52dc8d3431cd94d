# tests/unit/adapters/presenters/test_presenters.py
from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from tickmark_api.adapters.presenters.base_presenter import (
    BasePresenter,
    compute_quoted_etag,
)
from tickmark_api.adapters.presenters.materiality_presenter import MaterialityPresenter
from tickmark_api.adapters.presenters.sampling_presenter import SamplingPresenter
from tickmark_api.application.schemas.dto.materiality import (
    MaterialityHistoryDTO,
    MaterialityInputsDTO,
    MaterialitySaveResultDTO,
    MaterialityThresholdsDTO,
    MaterialityVersionDTO,
)
from tickmark_api.application.schemas.dto.sampling import SamplingResultDTO, SamplingTraceDTO
from tickmark_api.domain.enums.materiality import BenchmarkType
from tickmark_api.domain.enums.sampling import SamplingMethod


def _version() -> MaterialityVersionDTO:
    return MaterialityVersionDTO(
        id=uuid4(),
        engagement_id="eng-1",
        version=1,
        is_current=True,
        is_approved=False,
        inputs=MaterialityInputsDTO(
            benchmark_type=BenchmarkType.REVENUE,
            benchmark_value=Decimal("5000000"),
            overall_materiality_percentage=Decimal("1"),
            performance_materiality_percentage=Decimal("75"),
            clearly_trivial_percentage=Decimal("5"),
        ),
        thresholds=MaterialityThresholdsDTO(
            overall_materiality=Decimal("50000"),
            performance_materiality=Decimal("37500"),
            clearly_trivial_threshold=Decimal("2500"),
        ),
        created_at=datetime(2024, 3, 31, tzinfo=UTC),
    )


def test_etag_is_quoted_and_order_independent() -> None:
    a = compute_quoted_etag({"x": 1, "y": [1, 2]})
    b = compute_quoted_etag({"y": [1, 2], "x": 1})

    assert a == b
    assert a.startswith('"') and a.endswith('"')
    assert len(a) == 66


def test_present_success_headers() -> None:
    result = BasePresenter().present_success(data={"k": "v"}, trace_id="rid-1", etag=True)

    assert result.body.data == {"k": "v"}
    assert result.headers["X-Request-ID"] == "rid-1"
    assert result.headers["ETag"] == compute_quoted_etag({"data": {"k": "v"}})
    assert result.status_code is None


def test_present_success_without_trace_or_etag() -> None:
    result = BasePresenter().present_success(data=None)

    assert result.headers == {}


def test_present_saved_status_codes() -> None:
    presenter = MaterialityPresenter()
    version = _version()

    created = presenter.present_saved(
        MaterialitySaveResultDTO(version=version, created=True, advisories=[]), trace_id=None
    )
    unchanged = presenter.present_saved(
        MaterialitySaveResultDTO(version=version, created=False, advisories=[]), trace_id=None
    )

    assert created.status_code == 201
    assert unchanged.status_code == 200


def test_version_amounts_serialize_as_strings() -> None:
    result = MaterialityPresenter().present_version(_version(), trace_id="t", etag=True)

    payload = result.body.model_dump(mode="json")
    assert payload["data"]["thresholds"]["overall_materiality"] == "50000"
    assert payload["data"]["inputs"]["benchmark_value"] == "5000000"
    assert "ETag" in result.headers


def test_missing_version_presents_null() -> None:
    result = MaterialityPresenter().present_version(None, trace_id=None)

    assert result.body.model_dump(mode="json") == {"data": None}


def test_history_etag_changes_with_content() -> None:
    presenter = MaterialityPresenter()
    empty = presenter.present_history(
        MaterialityHistoryDTO(engagement_id="eng-1", versions=[]), trace_id=None
    )
    one = presenter.present_history(
        MaterialityHistoryDTO(engagement_id="eng-1", versions=[_version()]), trace_id=None
    )

    assert empty.headers["ETag"] != one.headers["ETag"]


def test_sampling_result_presentation() -> None:
    dto = SamplingResultDTO(
        method=SamplingMethod.MUS,
        sample_size=61,
        trace=SamplingTraceDTO(
            confidence_level=95,
            reliability_factor=Decimal("3.00"),
            sampling_interval=Decimal("83333"),
            raw_sample_size=61,
        ),
    )

    payload = SamplingPresenter().present_result(dto, trace_id=None).body.model_dump(mode="json")

    assert payload["data"]["method"] == "MUS"
    assert payload["data"]["sample_size"] == 61
    assert payload["data"]["trace"]["reliability_factor"] == "3.00"
    assert payload["data"]["trace"]["sampling_interval"] == "83333"
