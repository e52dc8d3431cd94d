# src/tickmark_api/domain/entities/industry_guidance.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Industry materiality guidance entity.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tickmark_api.domain.enums.materiality import BenchmarkType


@dataclass(frozen=True, slots=True)
class IndustryGuidance:
    """Recommended percentages for an industry and benchmark.

    Values are advisory; callers may apply them before computing materiality.

    Attributes:
        industry: Industry key (e.g. ``"banking"``).
        benchmark_type: Benchmark the guidance applies to.
        recommended_overall_pct: Suggested percent of the benchmark.
        recommended_performance_pct: Suggested percent of overall materiality.
        recommended_trivial_pct: Suggested percent of overall materiality.
        typical_overall_min_pct: Lower end of the customary overall range.
        typical_overall_max_pct: Upper end of the customary overall range.
        rationale: Narrative supporting the recommendation.
    """

    industry: str
    benchmark_type: BenchmarkType
    recommended_overall_pct: Decimal
    recommended_performance_pct: Decimal
    recommended_trivial_pct: Decimal
    typical_overall_min_pct: Decimal
    typical_overall_max_pct: Decimal
    rationale: str

    def __post_init__(self) -> None:
        """Enforce invariants."""
        if self.typical_overall_min_pct > self.typical_overall_max_pct:
            raise ValueError("typical_overall_min_pct must not exceed typical_overall_max_pct.")


__all__ = ["IndustryGuidance"]
