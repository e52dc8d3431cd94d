# tests/unit/adapters/gateways/test_static_industry_guidance_gateway.py
from __future__ import annotations

from decimal import Decimal

import pytest

from tickmark_api.adapters.gateways.static_industry_guidance_gateway import (
    DEFAULT_GUIDANCE,
    INDUSTRY_GUIDANCE,
    StaticIndustryGuidanceGateway,
    normalize_industry,
)
from tickmark_api.domain.entities.industry_guidance import IndustryGuidance
from tickmark_api.domain.enums.materiality import BenchmarkType


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Banking", "banking"),
        ("  Real Estate ", "real_estate"),
        ("financial-services", "financial_services"),
        ("", None),
        ("   ", None),
        (None, None),
    ],
)
def test_normalize_industry(raw: str | None, expected: str | None) -> None:
    assert normalize_industry(raw) == expected


def test_every_benchmark_has_a_default_row() -> None:
    assert set(DEFAULT_GUIDANCE) == set(BenchmarkType)
    for benchmark, row in DEFAULT_GUIDANCE.items():
        assert row.benchmark_type is benchmark
        assert row.industry == "other"
        assert row.typical_overall_min_pct <= row.recommended_overall_pct
        assert row.recommended_overall_pct <= row.typical_overall_max_pct


def test_industry_rows_are_keyed_consistently() -> None:
    for (industry, benchmark), row in INDUSTRY_GUIDANCE.items():
        assert row.industry == industry
        assert row.benchmark_type is benchmark


@pytest.mark.asyncio
async def test_industry_override_wins() -> None:
    row = await StaticIndustryGuidanceGateway().lookup("Real Estate", BenchmarkType.TOTAL_ASSETS)

    assert row is not None
    assert row.industry == "real_estate"


@pytest.mark.asyncio
async def test_unknown_industry_falls_back_to_benchmark_default() -> None:
    row = await StaticIndustryGuidanceGateway().lookup("shipping", BenchmarkType.REVENUE)

    assert row is DEFAULT_GUIDANCE[BenchmarkType.REVENUE]


@pytest.mark.asyncio
async def test_industry_without_row_for_benchmark_falls_back() -> None:
    row = await StaticIndustryGuidanceGateway().lookup("banking", BenchmarkType.REVENUE)

    assert row is not None
    assert row.industry == "other"


@pytest.mark.asyncio
async def test_custom_tables() -> None:
    custom = IndustryGuidance(
        industry="mining",
        benchmark_type=BenchmarkType.EQUITY,
        recommended_overall_pct=Decimal("3"),
        recommended_performance_pct=Decimal("70"),
        recommended_trivial_pct=Decimal("4"),
        typical_overall_min_pct=Decimal("2"),
        typical_overall_max_pct=Decimal("4"),
        rationale="Commodity cycles.",
    )
    gateway = StaticIndustryGuidanceGateway(
        table={("mining", BenchmarkType.EQUITY): custom}, defaults={}
    )

    assert await gateway.lookup("Mining", BenchmarkType.EQUITY) is custom
    assert await gateway.lookup("mining", BenchmarkType.REVENUE) is None


def test_guidance_range_must_be_ordered() -> None:
    with pytest.raises(ValueError):
        IndustryGuidance(
            industry="x",
            benchmark_type=BenchmarkType.REVENUE,
            recommended_overall_pct=Decimal("1"),
            recommended_performance_pct=Decimal("75"),
            recommended_trivial_pct=Decimal("5"),
            typical_overall_min_pct=Decimal("3"),
            typical_overall_max_pct=Decimal("2"),
            rationale="bad",
        )
