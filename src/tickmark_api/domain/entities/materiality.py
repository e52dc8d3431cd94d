# src/tickmark_api/domain/entities/materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Materiality entities.

Purpose:
    Represent materiality inputs, computed thresholds, advisory flags, and the
    versioned MaterialityCalculation record kept per engagement.

Layer:
    domain/entities

Notes:
    - Pure domain logic only.
    - All monetary and percentage values are :class:`decimal.Decimal`.
    - Percentages are expressed 0-100. Performance and clearly-trivial
      percentages apply to overall materiality, not to the benchmark.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from tickmark_api.domain.enums.materiality import (
    BenchmarkType,
    FactorAssessment,
    MaterialityAdvisoryCode,
    QualitativeFactor,
    RiskLevel,
)

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class MaterialityInputs:
    """Caller-supplied inputs for a materiality calculation.

    Attributes:
        benchmark_type: Financial-statement benchmark.
        benchmark_value: Benchmark amount. ``None`` while not yet entered.
        overall_materiality_percentage: Percent of the benchmark.
        performance_materiality_percentage: Percent of overall materiality.
        clearly_trivial_percentage: Percent of overall materiality.
        benchmark_rationale: Why this benchmark was selected.
        percentage_rationale: Why these percentages were selected.
        additional_notes: Free-form documentation.
        industry: Industry key used for guidance lookups.
        risk_level: Engagement risk assessment.
        benchmark_year: Fiscal year the benchmark figure relates to.
    """

    benchmark_type: BenchmarkType
    benchmark_value: Decimal | None
    overall_materiality_percentage: Decimal = Decimal("5")
    performance_materiality_percentage: Decimal = Decimal("75")
    clearly_trivial_percentage: Decimal = Decimal("5")
    benchmark_rationale: str | None = None
    percentage_rationale: str | None = None
    additional_notes: str | None = None
    industry: str | None = None
    risk_level: RiskLevel = RiskLevel.MEDIUM
    benchmark_year: int | None = None


@dataclass(frozen=True, slots=True)
class MaterialityThresholds:
    """Derived materiality amounts."""

    overall: Decimal
    performance: Decimal
    clearly_trivial: Decimal

    def __post_init__(self) -> None:
        """Enforce invariants."""
        if self.overall < _ZERO or self.performance < _ZERO or self.clearly_trivial < _ZERO:
            raise ValueError("Materiality thresholds must be non-negative.")
        if self.performance > self.overall:
            raise ValueError("Performance materiality cannot exceed overall materiality.")
        if self.clearly_trivial > self.overall:
            raise ValueError("Clearly trivial threshold cannot exceed overall materiality.")

    @classmethod
    def zero(cls) -> MaterialityThresholds:
        """Return the all-zero thresholds used for non-positive benchmarks."""
        return cls(overall=_ZERO, performance=_ZERO, clearly_trivial=_ZERO)


@dataclass(frozen=True, slots=True)
class MaterialityAdvisory:
    """A non-blocking advisory raised while computing materiality."""

    code: MaterialityAdvisoryCode
    message: str


@dataclass(frozen=True, slots=True)
class MaterialityResult:
    """Thresholds plus the advisories raised while computing them.

    Attributes:
        thresholds: Derived amounts.
        advisories: Advisory flags, in a stable order.
        approvable: False when the benchmark was missing or non-positive.
    """

    thresholds: MaterialityThresholds
    advisories: tuple[MaterialityAdvisory, ...] = ()
    approvable: bool = True

    @property
    def advisory_codes(self) -> tuple[MaterialityAdvisoryCode, ...]:
        """Return the advisory codes in order."""
        return tuple(a.code for a in self.advisories)


@dataclass(frozen=True, slots=True)
class QualitativeFactorAssessment:
    """Assessment of a single qualitative factor.

    Attributes:
        factor: The qualitative consideration.
        assessment: Direction of the effect on materiality.
        impact: Percentage adjustment (e.g. ``Decimal("10")`` for 10%).
        description: Optional documentation.
    """

    factor: QualitativeFactor
    assessment: FactorAssessment
    impact: Decimal | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class MaterialityRevisionAssessment:
    """Outcome of checking whether materiality should be revised."""

    should_revise: bool
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class MaterialityCalculation:
    """A saved materiality version for an engagement.

    Attributes:
        id: Version identifier.
        engagement_id: Owning engagement.
        version: Monotonic version number (1-based) within the engagement.
        is_current: True for exactly one version per engagement.
        inputs: Inputs captured for this version.
        thresholds: Amounts computed from ``inputs`` at save time.
        created_at: Save timestamp (UTC).
        prepared_by: Actor who saved the version.
        previous_version_id: Version this one superseded, if any.
        approved_at: Approval timestamp; once set, the version is terminal.
        approved_by: Approver identifier.
    """

    id: UUID
    engagement_id: str
    version: int
    is_current: bool
    inputs: MaterialityInputs
    thresholds: MaterialityThresholds
    created_at: datetime
    prepared_by: str | None = None
    previous_version_id: UUID | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None

    def __post_init__(self) -> None:
        """Enforce invariants."""
        if not self.engagement_id:
            raise ValueError("engagement_id must not be empty.")
        if self.version < 1:
            raise ValueError("version must be >= 1.")
        if (self.approved_at is None) != (self.approved_by is None):
            raise ValueError("approved_at and approved_by must be set together.")

    @property
    def is_approved(self) -> bool:
        """Return True once an approval has been recorded."""
        return self.approved_at is not None


__all__ = [
    "MaterialityInputs",
    "MaterialityThresholds",
    "MaterialityAdvisory",
    "MaterialityResult",
    "QualitativeFactorAssessment",
    "MaterialityRevisionAssessment",
    "MaterialityCalculation",
]
