# tests/unit/application/use_cases/materiality/test_materiality_queries_uc.py
from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from tickmark_api.adapters.gateways.static_industry_guidance_gateway import (
    StaticIndustryGuidanceGateway,
)
from tickmark_api.application.use_cases.materiality.compute_materiality import (
    ComputeMaterialityRequest,
    ComputeMaterialityUseCase,
)
from tickmark_api.application.use_cases.materiality.get_industry_guidance import (
    GetIndustryGuidanceUseCase,
)
from tickmark_api.application.use_cases.materiality.get_materiality_history import (
    GetCurrentMaterialityUseCase,
    GetMaterialityHistoryUseCase,
)
from tickmark_api.application.use_cases.materiality.save_materiality import (
    SaveMaterialityRequest,
    SaveMaterialityUseCase,
)
from tickmark_api.domain.enums.materiality import BenchmarkType, MaterialityAdvisoryCode
from tickmark_api.domain.exceptions.calculation import InvalidInput


async def _save_three(uow: Any, clock: Any, inputs_factory: Any) -> list[Any]:
    uc = SaveMaterialityUseCase(uow, clock=clock)
    current = None
    saved = []
    for pct in ("1", "2", "3"):
        result = await uc.execute(
            SaveMaterialityRequest(
                "eng-1",
                current,
                inputs_factory(overall_materiality_percentage=Decimal(pct)),
            )
        )
        current = result.version.id
        saved.append(result.version)
    return saved


@pytest.mark.asyncio
async def test_history_is_newest_first(uow: Any, clock: Any, inputs_factory: Any) -> None:
    await _save_three(uow, clock, inputs_factory)

    history = await GetMaterialityHistoryUseCase(uow).execute("eng-1")

    assert history.engagement_id == "eng-1"
    assert [v.version for v in history.versions] == [3, 2, 1]
    assert [v.is_current for v in history.versions] == [True, False, False]


@pytest.mark.asyncio
async def test_history_of_unknown_engagement_is_empty(uow: Any) -> None:
    history = await GetMaterialityHistoryUseCase(uow).execute("nope")

    assert history.versions == []


@pytest.mark.asyncio
async def test_current_version(uow: Any, clock: Any, inputs_factory: Any) -> None:
    saved = await _save_three(uow, clock, inputs_factory)

    current = await GetCurrentMaterialityUseCase(uow).execute(" eng-1 ")

    assert current is not None
    assert current.id == saved[-1].id
    assert await GetCurrentMaterialityUseCase(uow).execute("other") is None


@pytest.mark.asyncio
async def test_reads_reject_blank_engagement(uow: Any) -> None:
    with pytest.raises(InvalidInput):
        await GetMaterialityHistoryUseCase(uow).execute("")
    with pytest.raises(InvalidInput):
        await GetCurrentMaterialityUseCase(uow).execute("  ")


@pytest.mark.asyncio
async def test_compute_without_gateway(inputs_factory: Any) -> None:
    result = await ComputeMaterialityUseCase().execute(ComputeMaterialityRequest(inputs_factory()))

    assert result.approvable is True
    assert result.advisories == []
    assert result.thresholds.overall_materiality == Decimal("250000")
    assert result.thresholds.performance_materiality == Decimal("187500")
    assert result.thresholds.clearly_trivial_threshold == Decimal("12500")


@pytest.mark.asyncio
async def test_compute_flags_guidance_range(inputs_factory: Any) -> None:
    uc = ComputeMaterialityUseCase(guidance_gateway=StaticIndustryGuidanceGateway())

    result = await uc.execute(ComputeMaterialityRequest(inputs_factory(industry="retail")))

    assert [a.code for a in result.advisories] == [
        MaterialityAdvisoryCode.BENCHMARK_PERCENTAGE_OUTSIDE_TYPICAL_RANGE
    ]
    assert result.approvable is True


@pytest.mark.asyncio
async def test_compute_non_positive_benchmark(inputs_factory: Any) -> None:
    result = await ComputeMaterialityUseCase().execute(
        ComputeMaterialityRequest(inputs_factory(benchmark_value=Decimal("-10")))
    )

    assert result.approvable is False
    assert result.thresholds.overall_materiality == 0
    assert result.advisories[0].code is MaterialityAdvisoryCode.NON_POSITIVE_BENCHMARK


@pytest.mark.asyncio
async def test_guidance_lookup() -> None:
    uc = GetIndustryGuidanceUseCase(StaticIndustryGuidanceGateway())

    banking = await uc.execute("Banking", BenchmarkType.TOTAL_ASSETS)
    fallback = await uc.execute(None, BenchmarkType.NET_INCOME)

    assert banking is not None
    assert banking.industry == "banking"
    assert banking.recommended_performance_pct == Decimal("60")
    assert fallback is not None
    assert fallback.industry == "other"
    assert fallback.recommended_overall_pct == Decimal("5")
