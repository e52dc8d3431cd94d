# src/tickmark_api/domain/services/sampling_engine.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Sampling engine (domain kernel).

Purpose:
    Compute required audit sample sizes (AU-C 530) for three independent
    formula variants, returning the size together with the full formula
    trace for audit documentation:

        * MUS:       interval = floor(TE / RF); n = ceil(PV / interval)
        * Classical: n = ceil((z x 0.15 x PV / TE) ** 2), capped at N
        * Attribute: n = ceil(RF / (TR / 100) x N / 100), capped at N,
                     where TR = expected rate + 5 points

Layer:
    domain/services

Notes:
    - Pure domain logic:
        * No logging.
        * No HTTP or transport concerns.
        * No persistence or gateways.
    - Missing inputs (``None`` or zero) are incomplete, not invalid: the
      result has ``sample_size == 0`` and ``trace.incomplete``.
    - The classical standard deviation is a fixed 15% of population value,
      not a statistic computed from item dispersion.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal, DivisionByZero, InvalidOperation

from tickmark_api.domain.entities.sampling import (
    AttributeInput,
    ClassicalVariablesInput,
    MUSInput,
    SamplingInput,
    SamplingResult,
    SamplingTrace,
)
from tickmark_api.domain.enums.sampling import SamplingMethod
from tickmark_api.domain.exceptions.calculation import DegenerateComputation, InvalidInput
from tickmark_api.domain.services.reliability_factors import (
    ReliabilityFactorTable,
    resolve_confidence_level,
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True, slots=True)
class SamplingEngineConfig:
    """Fixed conventions used by the simplified formulas.

    Attributes:
        assumed_std_dev_ratio: Share of population value used as the
            classical standard deviation.
        tolerable_rate_offset: Percentage points added to the expected
            error rate to obtain the tolerable rate.
    """

    assumed_std_dev_ratio: Decimal = Decimal("0.15")
    tolerable_rate_offset: Decimal = Decimal("5")


class SamplingEngine:
    """Pure sample-size engine dispatching on the input variant."""

    def __init__(
        self,
        config: SamplingEngineConfig | None = None,
        factors: ReliabilityFactorTable | None = None,
    ) -> None:
        """Initialize the sampling engine.

        Args:
            config: Optional formula conventions.
            factors: Optional reliability factor table.
        """
        self._config = config or SamplingEngineConfig()
        self._factors = factors or ReliabilityFactorTable()

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    def compute(self, inputs: SamplingInput) -> SamplingResult:
        """Compute the sample size for a tagged input variant.

        Raises:
            InvalidInput: On negative or non-finite values, or an unsupported
                confidence level.
            DegenerateComputation: When a formula divides by zero.
        """
        if isinstance(inputs, MUSInput):
            return self._compute_mus(inputs)
        if isinstance(inputs, ClassicalVariablesInput):
            return self._compute_classical(inputs)
        if isinstance(inputs, AttributeInput):
            return self._compute_attribute(inputs)
        raise InvalidInput(
            "Unsupported sampling input type.",
            details={"type": type(inputs).__name__},
        )

    # ------------------------------------------------------------------ #
    # MUS                                                                #
    # ------------------------------------------------------------------ #

    def _compute_mus(self, inputs: MUSInput) -> SamplingResult:
        method = SamplingMethod.MUS
        level = resolve_confidence_level(inputs.confidence_level)
        if inputs.expected_misstatements < 0:
            raise InvalidInput(
                "expected_misstatements must be non-negative.",
                details={"expected_misstatements": inputs.expected_misstatements},
            )

        missing = _missing(
            population_value=inputs.population_value,
            tolerable_error=inputs.tolerable_error,
        )
        if missing:
            return _incomplete(method, int(level), missing)

        population_value = _positive(inputs.population_value, "population_value")
        tolerable_error = _positive(inputs.tolerable_error, "tolerable_error")

        factor = self._factors.lookup(level, inputs.expected_misstatements)
        interval = _divide(tolerable_error, factor, "sampling_interval").to_integral_value(
            rounding=ROUND_FLOOR
        )
        if interval == _ZERO:
            raise DegenerateComputation(
                "Sampling interval resolves to zero; tolerable_error is smaller than "
                "the reliability factor.",
                details={
                    "tolerable_error": str(tolerable_error),
                    "reliability_factor": str(factor),
                },
            )

        size = _ceil(_divide(population_value, interval, "sample_size"))
        return SamplingResult(
            method=method,
            sample_size=size,
            trace=SamplingTrace(
                method=method,
                confidence_level=int(level),
                reliability_factor=factor,
                sampling_interval=interval,
                raw_sample_size=size,
            ),
        )

    # ------------------------------------------------------------------ #
    # Classical variables                                                #
    # ------------------------------------------------------------------ #

    def _compute_classical(self, inputs: ClassicalVariablesInput) -> SamplingResult:
        method = SamplingMethod.CLASSICAL_VARIABLES
        level = resolve_confidence_level(inputs.confidence_level)

        missing = _missing(
            population_size=inputs.population_size,
            population_value=inputs.population_value,
            tolerable_error=inputs.tolerable_error,
        )
        if missing:
            return _incomplete(method, int(level), missing)

        population_size = _positive_int(inputs.population_size, "population_size")
        population_value = _positive(inputs.population_value, "population_value")
        tolerable_error = _positive(inputs.tolerable_error, "tolerable_error")

        z_value = self._factors.z_value(level)
        std_dev = population_value * self._config.assumed_std_dev_ratio
        ratio = _divide(z_value * std_dev, tolerable_error, "sample_size")
        raw = _ceil(ratio * ratio)
        size = min(raw, population_size)

        return SamplingResult(
            method=method,
            sample_size=size,
            trace=SamplingTrace(
                method=method,
                confidence_level=int(level),
                z_value=z_value,
                assumed_std_dev=std_dev,
                raw_sample_size=raw,
                capped=size < raw,
            ),
        )

    # ------------------------------------------------------------------ #
    # Attribute                                                          #
    # ------------------------------------------------------------------ #

    def _compute_attribute(self, inputs: AttributeInput) -> SamplingResult:
        method = SamplingMethod.ATTRIBUTE
        level = resolve_confidence_level(inputs.confidence_level)

        # A zero expected rate is a legitimate entry; only None is missing.
        missing = _missing(population_size=inputs.population_size)
        if inputs.expected_error_rate is None:
            missing = (*missing, "expected_error_rate")
        if missing:
            return _incomplete(method, int(level), missing)

        population_size = _positive_int(inputs.population_size, "population_size")
        expected_rate = _non_negative(inputs.expected_error_rate, "expected_error_rate")

        tolerable_rate = expected_rate + self._config.tolerable_rate_offset
        factor = self._factors.lookup(level, 0)
        per_hundred = _divide(factor, tolerable_rate / _HUNDRED, "sample_size")
        raw = _ceil(per_hundred * population_size / _HUNDRED)
        size = min(raw, population_size)

        return SamplingResult(
            method=method,
            sample_size=size,
            trace=SamplingTrace(
                method=method,
                confidence_level=int(level),
                reliability_factor=factor,
                tolerable_rate=tolerable_rate,
                raw_sample_size=raw,
                capped=size < raw,
            ),
        )


# ---------------------------------------------------------------------- #
# Helpers                                                                #
# ---------------------------------------------------------------------- #


def _missing(**values: Decimal | int | None) -> tuple[str, ...]:
    """Return the names of inputs that are not yet entered (None or zero)."""
    return tuple(name for name, value in values.items() if value is None or value == 0)


def _incomplete(method: SamplingMethod, level: int, missing: tuple[str, ...]) -> SamplingResult:
    return SamplingResult(
        method=method,
        sample_size=0,
        trace=SamplingTrace(
            method=method,
            confidence_level=level,
            incomplete=True,
            missing_fields=missing,
        ),
    )


def _non_negative(value: Decimal | None, name: str) -> Decimal:
    if value is None or not value.is_finite() or value < _ZERO:
        raise InvalidInput(
            f"{name} must be a finite, non-negative number.",
            details={name: None if value is None else str(value)},
        )
    return value


def _positive(value: Decimal | None, name: str) -> Decimal:
    checked = _non_negative(value, name)
    if checked == _ZERO:
        raise InvalidInput(f"{name} must be greater than zero.", details={name: "0"})
    return checked


def _positive_int(value: int | None, name: str) -> int:
    if value is None or isinstance(value, bool) or value < 1:
        raise InvalidInput(f"{name} must be a positive integer.", details={name: value})
    return int(value)


def _divide(numerator: Decimal, denominator: Decimal, step: str) -> Decimal:
    """Divide, converting division by zero or non-finite output into an error."""
    try:
        result = numerator / denominator
    except (DivisionByZero, InvalidOperation, ZeroDivisionError) as exc:
        raise DegenerateComputation(
            f"Division by zero while computing {step}.",
            details={"step": step},
        ) from exc
    if not result.is_finite():
        raise DegenerateComputation(
            f"Non-finite result while computing {step}.",
            details={"step": step},
        )
    return result


def _ceil(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


__all__ = ["SamplingEngine", "SamplingEngineConfig"]
