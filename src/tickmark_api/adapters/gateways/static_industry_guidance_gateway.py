# src/tickmark_api/adapters/gateways/static_industry_guidance_gateway.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""In-process industry guidance table.

Purpose:
    Serve materiality recommendations keyed by (industry, benchmark type)
    from a static table. Each benchmark has a default row; a handful of
    industries override it where practice differs materially.

Layer:
    adapters/gateways

Notes:
    - Industry labels are normalized (case-insensitive, spaces and dashes
      become underscores) before lookup.
    - Unknown or missing industries fall back to the benchmark default row,
      reported with industry ``"other"``.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import Final

from tickmark_api.domain.entities.industry_guidance import IndustryGuidance
from tickmark_api.domain.enums.materiality import BenchmarkType
from tickmark_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

DEFAULT_INDUSTRY: Final[str] = "other"

_PERFORMANCE: Final[Decimal] = Decimal("75")
_TRIVIAL: Final[Decimal] = Decimal("5")


def _row(
    industry: str,
    benchmark_type: BenchmarkType,
    recommended: str,
    low: str,
    high: str,
    rationale: str,
    *,
    performance: Decimal = _PERFORMANCE,
) -> IndustryGuidance:
    return IndustryGuidance(
        industry=industry,
        benchmark_type=benchmark_type,
        recommended_overall_pct=Decimal(recommended),
        recommended_performance_pct=performance,
        recommended_trivial_pct=_TRIVIAL,
        typical_overall_min_pct=Decimal(low),
        typical_overall_max_pct=Decimal(high),
        rationale=rationale,
    )


DEFAULT_GUIDANCE: Final[Mapping[BenchmarkType, IndustryGuidance]] = MappingProxyType(
    {
        BenchmarkType.REVENUE: _row(
            DEFAULT_INDUSTRY,
            BenchmarkType.REVENUE,
            "1",
            "0.5",
            "2",
            "Appropriate for commercial entities where revenue is the primary driver.",
        ),
        BenchmarkType.TOTAL_ASSETS: _row(
            DEFAULT_INDUSTRY,
            BenchmarkType.TOTAL_ASSETS,
            "1",
            "0.5",
            "2",
            "Appropriate for asset-intensive entities or entities with volatile earnings.",
        ),
        BenchmarkType.NET_INCOME: _row(
            DEFAULT_INDUSTRY,
            BenchmarkType.NET_INCOME,
            "5",
            "3",
            "7",
            "Appropriate for mature, profitable entities with stable pre-tax earnings.",
        ),
        BenchmarkType.EQUITY: _row(
            DEFAULT_INDUSTRY,
            BenchmarkType.EQUITY,
            "2",
            "1",
            "3",
            "Appropriate for investment and holding companies measured by net assets.",
        ),
        BenchmarkType.EXPENSES: _row(
            DEFAULT_INDUSTRY,
            BenchmarkType.EXPENSES,
            "1",
            "0.5",
            "2",
            "Appropriate for not-for-profit and government entities.",
        ),
    }
)

INDUSTRY_GUIDANCE: Final[Mapping[tuple[str, BenchmarkType], IndustryGuidance]] = MappingProxyType(
    {
        ("banking", BenchmarkType.TOTAL_ASSETS): _row(
            "banking",
            BenchmarkType.TOTAL_ASSETS,
            "0.5",
            "0.25",
            "1",
            "Balance sheets are large relative to earnings; users focus on capital adequacy.",
            performance=Decimal("60"),
        ),
        ("financial_services", BenchmarkType.TOTAL_ASSETS): _row(
            "financial_services",
            BenchmarkType.TOTAL_ASSETS,
            "0.5",
            "0.25",
            "1",
            "Asset base drives regulatory and user focus.",
        ),
        ("insurance", BenchmarkType.EQUITY): _row(
            "insurance",
            BenchmarkType.EQUITY,
            "1",
            "0.5",
            "2",
            "Solvency is measured against policyholder surplus.",
        ),
        ("nonprofit", BenchmarkType.EXPENSES): _row(
            "nonprofit",
            BenchmarkType.EXPENSES,
            "1",
            "0.5",
            "2",
            "Donors and grantors focus on how resources were spent.",
        ),
        ("government", BenchmarkType.EXPENSES): _row(
            "government",
            BenchmarkType.EXPENSES,
            "0.5",
            "0.5",
            "2",
            "Public accountability lowers the tolerance for misstatement.",
            performance=Decimal("50"),
        ),
        ("real_estate", BenchmarkType.TOTAL_ASSETS): _row(
            "real_estate",
            BenchmarkType.TOTAL_ASSETS,
            "1",
            "0.5",
            "2",
            "Property values dominate the balance sheet.",
        ),
        ("saas", BenchmarkType.REVENUE): _row(
            "saas",
            BenchmarkType.REVENUE,
            "1",
            "0.5",
            "2",
            "Growth-stage software entities are often loss-making; revenue is the stable measure.",
        ),
        ("retail", BenchmarkType.REVENUE): _row(
            "retail",
            BenchmarkType.REVENUE,
            "0.5",
            "0.5",
            "1.5",
            "Thin margins make revenue-based materiality comparatively large.",
        ),
    }
)


def normalize_industry(industry: str | None) -> str | None:
    """Return the lookup key for an industry label, or ``None`` when blank."""
    if industry is None:
        return None
    key = industry.strip().lower().replace("-", "_").replace(" ", "_")
    return key or None


class StaticIndustryGuidanceGateway:
    """``IndustryGuidanceGateway`` backed by an in-process table."""

    def __init__(
        self,
        table: Mapping[tuple[str, BenchmarkType], IndustryGuidance] | None = None,
        defaults: Mapping[BenchmarkType, IndustryGuidance] | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            table: Industry-specific rows; defaults to ``INDUSTRY_GUIDANCE``.
            defaults: Per-benchmark fallback rows; defaults to ``DEFAULT_GUIDANCE``.
        """
        self._table = INDUSTRY_GUIDANCE if table is None else table
        self._defaults = DEFAULT_GUIDANCE if defaults is None else defaults

    async def lookup(
        self,
        industry: str | None,
        benchmark_type: BenchmarkType,
    ) -> IndustryGuidance | None:
        """Return guidance for ``industry`` and ``benchmark_type``."""
        key = normalize_industry(industry)
        if key is not None:
            row = self._table.get((key, benchmark_type))
            if row is not None:
                return row

        fallback = self._defaults.get(benchmark_type)
        logger.debug(
            "industry_guidance.fallback",
            extra={"industry": key, "benchmark_type": benchmark_type.value, "found": fallback is not None},
        )
        return fallback


__all__ = [
    "DEFAULT_GUIDANCE",
    "INDUSTRY_GUIDANCE",
    "StaticIndustryGuidanceGateway",
    "normalize_industry",
]
