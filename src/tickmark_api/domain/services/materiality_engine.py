# src/tickmark_api/domain/services/materiality_engine.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Materiality engine (domain kernel).

Purpose:
    Turn a financial-statement benchmark into overall materiality,
    performance materiality, and the clearly-trivial threshold (AU-C 320),
    and define the version/approval transitions over saved results.

Layer:
    domain/services

Notes:
    - Pure domain logic:
        * No logging.
        * No HTTP or transport concerns.
        * No persistence or gateways.
    - Percentages outside conventional ranges are accepted and flagged;
      advisories never block a computation, a save, or an approval.
    - A missing or non-positive benchmark yields all-zero thresholds and a
      result marked not approvable.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID, uuid4

from tickmark_api.domain.entities.industry_guidance import IndustryGuidance
from tickmark_api.domain.entities.materiality import (
    MaterialityAdvisory,
    MaterialityCalculation,
    MaterialityInputs,
    MaterialityResult,
    MaterialityRevisionAssessment,
    MaterialityThresholds,
    QualitativeFactorAssessment,
)
from tickmark_api.domain.enums.materiality import FactorAssessment, MaterialityAdvisoryCode
from tickmark_api.domain.exceptions.calculation import InvalidInput
from tickmark_api.domain.exceptions.materiality import AlreadyApproved, NotCurrentVersion

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_WHOLE_UNIT = Decimal("1")


@dataclass(frozen=True, slots=True)
class MaterialityEngineConfig:
    """Conventional ranges used for advisory flags.

    Attributes:
        overall_range: Customary overall percentage of the benchmark.
        performance_range: Customary performance percentage of overall.
        trivial_range: Customary clearly-trivial percentage of overall.
        qualitative_adjustment_cap: Absolute cap (percent) on the summed
            qualitative adjustment.
        revision_trigger_ratio: Share of overall materiality that aggregate
            misstatements may reach before revision is suggested.
        typical_range_headroom: Multiplier on the benchmark's typical
            maximum before the overall percentage is flagged.
        min_benchmark_rationale_length: Characters of benchmark rationale
            expected before approval.
    """

    overall_range: tuple[Decimal, Decimal] = (Decimal("0.5"), Decimal("5"))
    performance_range: tuple[Decimal, Decimal] = (Decimal("50"), Decimal("75"))
    trivial_range: tuple[Decimal, Decimal] = (Decimal("3"), Decimal("5"))
    qualitative_adjustment_cap: Decimal = Decimal("50")
    revision_trigger_ratio: Decimal = Decimal("0.75")
    typical_range_headroom: Decimal = Decimal("1.5")
    min_benchmark_rationale_length: int = 50


class MaterialityEngine:
    """Pure materiality computation and version-transition kernel."""

    def __init__(self, config: MaterialityEngineConfig | None = None) -> None:
        """Initialize the engine.

        Args:
            config:
                Optional configuration. When omitted, defaults are used.
        """
        self._config = config or MaterialityEngineConfig()

    # ------------------------------------------------------------------ #
    # Computation                                                        #
    # ------------------------------------------------------------------ #

    def compute(
        self,
        benchmark_value: Decimal | None,
        overall_pct: Decimal,
        performance_pct: Decimal,
        trivial_pct: Decimal,
    ) -> MaterialityThresholds:
        """Compute materiality thresholds.

        overall = benchmark x overall_pct / 100; performance and clearly
        trivial are percentages of overall.

        Args:
            benchmark_value: Benchmark amount; ``None`` or ``<= 0`` yields zeros.
            overall_pct: Percent of the benchmark (0-100).
            performance_pct: Percent of overall materiality (0-100).
            trivial_pct: Percent of overall materiality (0-100).

        Returns:
            MaterialityThresholds.

        Raises:
            InvalidInput: When a percentage is outside [0, 100] or any value
                is not finite.
        """
        _require_percentage("overall_materiality_percentage", overall_pct)
        _require_percentage("performance_materiality_percentage", performance_pct)
        _require_percentage("clearly_trivial_percentage", trivial_pct)

        if benchmark_value is None:
            return MaterialityThresholds.zero()
        if not benchmark_value.is_finite():
            raise InvalidInput(
                "benchmark_value must be a finite number.",
                details={"benchmark_value": str(benchmark_value)},
            )
        if benchmark_value <= _ZERO:
            return MaterialityThresholds.zero()

        overall = benchmark_value * overall_pct / _HUNDRED
        return MaterialityThresholds(
            overall=overall,
            performance=overall * performance_pct / _HUNDRED,
            clearly_trivial=overall * trivial_pct / _HUNDRED,
        )

    def evaluate(
        self,
        inputs: MaterialityInputs,
        *,
        guidance: IndustryGuidance | None = None,
    ) -> MaterialityResult:
        """Compute thresholds for ``inputs`` and attach advisory flags.

        Args:
            inputs: Materiality inputs.
            guidance: Optional industry guidance supplying the customary
                overall range for the selected benchmark.

        Returns:
            MaterialityResult with thresholds, advisories and approvability.
        """
        thresholds = self.compute(
            inputs.benchmark_value,
            inputs.overall_materiality_percentage,
            inputs.performance_materiality_percentage,
            inputs.clearly_trivial_percentage,
        )
        advisories = self.advisories(inputs, guidance=guidance)
        approvable = MaterialityAdvisoryCode.NON_POSITIVE_BENCHMARK not in {
            a.code for a in advisories
        }
        return MaterialityResult(
            thresholds=thresholds,
            advisories=advisories,
            approvable=approvable,
        )

    def advisories(
        self,
        inputs: MaterialityInputs,
        *,
        guidance: IndustryGuidance | None = None,
    ) -> tuple[MaterialityAdvisory, ...]:
        """Return advisory flags for ``inputs`` in a stable order."""
        cfg = self._config
        out: list[MaterialityAdvisory] = []

        if inputs.benchmark_value is None or inputs.benchmark_value <= _ZERO:
            out.append(
                MaterialityAdvisory(
                    code=MaterialityAdvisoryCode.NON_POSITIVE_BENCHMARK,
                    message="Benchmark value must be greater than zero before approval.",
                )
            )

        checks = (
            (
                inputs.overall_materiality_percentage,
                cfg.overall_range,
                MaterialityAdvisoryCode.OVERALL_PERCENTAGE_OUTSIDE_RANGE,
                "Overall materiality percentage",
            ),
            (
                inputs.performance_materiality_percentage,
                cfg.performance_range,
                MaterialityAdvisoryCode.PERFORMANCE_PERCENTAGE_OUTSIDE_RANGE,
                "Performance materiality percentage",
            ),
            (
                inputs.clearly_trivial_percentage,
                cfg.trivial_range,
                MaterialityAdvisoryCode.TRIVIAL_PERCENTAGE_OUTSIDE_RANGE,
                "Clearly trivial percentage",
            ),
        )
        for value, (low, high), code, label in checks:
            if not low <= value <= high:
                out.append(
                    MaterialityAdvisory(
                        code=code,
                        message=f"{label} {value}% is outside the conventional {low}-{high}% range.",
                    )
                )

        if guidance is not None and guidance.benchmark_type == inputs.benchmark_type:
            low, high = guidance.typical_overall_min_pct, guidance.typical_overall_max_pct
            pct = inputs.overall_materiality_percentage
            if pct < low or pct > high * cfg.typical_range_headroom:
                out.append(
                    MaterialityAdvisory(
                        code=MaterialityAdvisoryCode.BENCHMARK_PERCENTAGE_OUTSIDE_TYPICAL_RANGE,
                        message=(
                            f"Overall percentage {pct}% is outside the typical {low}-{high}% "
                            f"range for {inputs.benchmark_type.value}. Document the rationale."
                        ),
                    )
                )

        rationale = (inputs.benchmark_rationale or "").strip()
        if len(rationale) < cfg.min_benchmark_rationale_length:
            out.append(
                MaterialityAdvisory(
                    code=MaterialityAdvisoryCode.BENCHMARK_RATIONALE_TOO_SHORT,
                    message=(
                        "Benchmark rationale should be at least "
                        f"{cfg.min_benchmark_rationale_length} characters."
                    ),
                )
            )

        return tuple(out)

    # ------------------------------------------------------------------ #
    # Qualitative adjustments and revision                               #
    # ------------------------------------------------------------------ #

    def apply_qualitative_adjustments(
        self,
        base_materiality: Decimal,
        factors: Iterable[QualitativeFactorAssessment],
    ) -> Decimal:
        """Adjust a materiality amount for qualitative factors.

        Each factor with an impact adds it (``increases``) or subtracts it
        (``decreases``); the summed adjustment is capped at the configured
        absolute percentage. The adjusted amount is rounded half-up to a whole
        currency unit.

        Raises:
            InvalidInput: On a negative or non-finite base amount or impact.
        """
        _require_amount("base_materiality", base_materiality)
        total = _ZERO
        for factor in factors:
            if not factor.impact:
                continue
            _require_amount(f"impact ({factor.factor.value})", factor.impact)
            if factor.assessment is FactorAssessment.INCREASES:
                total += factor.impact
            elif factor.assessment is FactorAssessment.DECREASES:
                total -= factor.impact

        cap = self._config.qualitative_adjustment_cap
        total = max(-cap, min(cap, total))
        adjusted = base_materiality * (1 + total / _HUNDRED)
        return adjusted.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)

    def should_revise(
        self,
        overall_materiality: Decimal,
        aggregate_misstatements: Decimal,
    ) -> MaterialityRevisionAssessment:
        """Return whether accumulated misstatements warrant revisiting materiality.

        Raises:
            InvalidInput: On a negative or non-finite amount.
        """
        _require_amount("overall_materiality", overall_materiality)
        _require_amount("aggregate_misstatements", aggregate_misstatements)
        ratio = self._config.revision_trigger_ratio
        if aggregate_misstatements > overall_materiality * ratio:
            return MaterialityRevisionAssessment(
                should_revise=True,
                reason=f"Aggregate misstatements exceed {ratio * _HUNDRED:.0f}% of overall materiality",
            )
        return MaterialityRevisionAssessment(should_revise=False)

    # ------------------------------------------------------------------ #
    # Version transitions                                                #
    # ------------------------------------------------------------------ #

    @staticmethod
    def inputs_changed(current: MaterialityCalculation | None, inputs: MaterialityInputs) -> bool:
        """Return True when ``inputs`` differ from the current version's inputs."""
        return current is None or current.inputs != inputs

    def next_version(
        self,
        *,
        engagement_id: str,
        history: Sequence[MaterialityCalculation],
        inputs: MaterialityInputs,
        prepared_by: str | None,
        now: datetime,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> MaterialityCalculation:
        """Build the next current version for an engagement.

        The new version number is ``max(history.version) + 1`` (1 when the
        engagement has no history). Approved versions are never modified; an
        edit always produces a new version.
        """
        current = next((v for v in history if v.is_current), None)
        latest = max((v.version for v in history), default=0)
        return MaterialityCalculation(
            id=id_factory(),
            engagement_id=engagement_id,
            version=latest + 1,
            is_current=True,
            inputs=inputs,
            thresholds=self.compute(
                inputs.benchmark_value,
                inputs.overall_materiality_percentage,
                inputs.performance_materiality_percentage,
                inputs.clearly_trivial_percentage,
            ),
            created_at=now,
            prepared_by=prepared_by,
            previous_version_id=current.id if current is not None else None,
        )

    @staticmethod
    def approve(
        version: MaterialityCalculation,
        *,
        approver: str,
        at: datetime,
    ) -> MaterialityCalculation:
        """Return ``version`` with its approval recorded.

        Raises:
            NotCurrentVersion: If the version has been superseded.
            AlreadyApproved: If an approval is already recorded.
            InvalidInput: If ``approver`` is blank.
        """
        if not version.is_current:
            raise NotCurrentVersion(
                "Only the current materiality version can be approved.",
                details={"version_id": str(version.id), "version": version.version},
            )
        if version.is_approved:
            raise AlreadyApproved(
                "Materiality version is already approved.",
                details={
                    "version_id": str(version.id),
                    "approved_by": version.approved_by,
                },
            )
        if not approver or not approver.strip():
            raise InvalidInput("approver must not be empty.")
        return replace(version, approved_at=at, approved_by=approver.strip())


def _require_amount(name: str, value: Decimal) -> None:
    """Validate that ``value`` is a finite, non-negative amount."""
    if not value.is_finite() or value < _ZERO:
        raise InvalidInput(
            f"{name} must be a finite, non-negative number.",
            details={name: str(value)},
        )


def _require_percentage(name: str, value: Decimal) -> None:
    """Validate that ``value`` is a finite percentage in [0, 100]."""
    if not value.is_finite() or value < _ZERO or value > _HUNDRED:
        raise InvalidInput(
            f"{name} must be a finite percentage between 0 and 100.",
            details={name: str(value)},
        )


__all__ = ["MaterialityEngine", "MaterialityEngineConfig"]
