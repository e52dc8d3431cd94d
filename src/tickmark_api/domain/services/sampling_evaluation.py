# src/tickmark_api/domain/services/sampling_evaluation.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Sample selection and evaluation (domain kernel).

Purpose:
    Select monetary units from a population and evaluate tested samples:

        * Monetary-unit selection using cumulative amounts, a fixed interval
          and a caller-supplied random start.
        * MUS misstatement projection (known + projected misstatement, basic
          precision and incremental allowance -> upper misstatement limit).
        * Attribute sample evaluation (upper deviation limit vs. tolerable
          deviation rate).

Layer:
    domain/services

Notes:
    - Pure domain logic: deterministic for given inputs (the random start
      is an input, never generated here).
    - Both evaluations read ``EVALUATION_FACTORS`` (0-10 errors). MUS
      projection falls back to the 95% row when the confidence level has no
      row, and extends past 10 errors by +1.0 per error. Attribute evaluation
      uses 2.3 + 1.5 x deviations when the level or the count is off the table.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from tickmark_api.domain.entities.sampling_evaluation import (
    AttributeEvaluation,
    MUSProjection,
    MUSSelection,
    MUSSelectionItem,
    PopulationItem,
    TestedSampleItem,
)
from tickmark_api.domain.enums.sampling import (
    ControlRelianceConclusion,
    MisstatementConclusion,
)
from tickmark_api.domain.exceptions.calculation import DegenerateComputation, InvalidInput
from tickmark_api.domain.services.reliability_factors import (
    EVALUATION_FACTORS,
    ReliabilityFactorTable,
)

_ZERO = Decimal("0")
_ONE = Decimal("1")
_EXPANSION_BAND = Decimal("1.5")
_DEFAULT_CONFIDENCE = 95
_ATTRIBUTE_BASE = Decimal("2.3")
_ATTRIBUTE_STEP = Decimal("1.5")


def select_mus_items(
    population: Sequence[PopulationItem],
    sample_size: int,
    *,
    start_point: Decimal,
) -> MUSSelection:
    """Select items by cumulative monetary amount.

    The interval is ``total / sample_size``. An item is selected when the
    running total reaches the next selection point; items larger than the
    interval are selected once even if they span several points.

    Args:
        population: Items in population order.
        sample_size: Number of monetary units to select (>= 1).
        start_point: Random start within (0, interval].

    Raises:
        InvalidInput: On an empty population, a non-positive sample size, a
            start point outside (0, interval], or a zero population total.
    """
    if sample_size < 1:
        raise InvalidInput("sample_size must be a positive integer.", details={"sample_size": sample_size})
    if not population:
        raise InvalidInput("population must not be empty.")

    total = sum((item.value for item in population), _ZERO)
    if total <= _ZERO:
        raise InvalidInput("population total value must be greater than zero.")

    interval = total / sample_size
    if not _ZERO < start_point <= interval:
        raise InvalidInput(
            "start_point must lie within (0, sampling interval].",
            details={"start_point": str(start_point), "sampling_interval": str(interval)},
        )

    cumulative = _ZERO
    next_point = start_point
    items: list[MUSSelectionItem] = []
    for item in population:
        cumulative += item.value
        selected = cumulative >= next_point
        items.append(
            MUSSelectionItem(item_id=item.item_id, cumulative_value=cumulative, selected=selected)
        )
        while cumulative >= next_point:
            next_point += interval

    return MUSSelection(sampling_interval=interval, start_point=start_point, items=tuple(items))


def project_mus_misstatement(
    items: Sequence[TestedSampleItem],
    *,
    sampling_interval: Decimal,
    tolerable_misstatement: Decimal,
    confidence_level: int = 95,
    factors: ReliabilityFactorTable | None = None,
) -> MUSProjection:
    """Project misstatement for an MUS sample and conclude against tolerable misstatement.

    Raises:
        InvalidInput: On a non-positive interval or tolerable misstatement.
        DegenerateComputation: When an exception item has a zero book value.
    """
    if sampling_interval <= _ZERO:
        raise InvalidInput("sampling_interval must be greater than zero.")
    if tolerable_misstatement <= _ZERO:
        raise InvalidInput("tolerable_misstatement must be greater than zero.")

    table = factors or ReliabilityFactorTable()
    row = table.evaluation_row(confidence_level) or EVALUATION_FACTORS[_DEFAULT_CONFIDENCE]

    known = _ZERO
    taintings: list[Decimal] = []
    for item in items:
        if not item.is_exception:
            continue
        if item.book_value >= sampling_interval:
            known += item.misstatement
            continue
        if item.book_value == _ZERO:
            raise DegenerateComputation(
                "Cannot compute tainting for an item with zero book value.",
                details={"item_id": item.item_id},
            )
        taintings.append(min(item.misstatement / abs(item.book_value), _ONE))

    taintings.sort(reverse=True)

    basic_precision = row[0] * sampling_interval
    projected = _ZERO
    incremental = _ZERO
    for index, tainting in enumerate(taintings):
        projected += tainting * sampling_interval
        increment = _factor_at(row, index + 1) - _factor_at(row, index) - _ONE
        incremental += increment * tainting * sampling_interval

    upper_limit = known + projected + basic_precision + incremental

    if upper_limit <= tolerable_misstatement:
        conclusion = MisstatementConclusion.ACCEPTABLE
        rationale = (
            f"Upper misstatement limit ({upper_limit:,.0f}) is less than tolerable "
            f"misstatement ({tolerable_misstatement:,.0f}). Sampling results support the "
            "conclusion that the account is not materially misstated."
        )
    elif upper_limit <= tolerable_misstatement * _EXPANSION_BAND:
        conclusion = MisstatementConclusion.REQUIRES_EXPANSION
        rationale = (
            f"Upper misstatement limit ({upper_limit:,.0f}) exceeds tolerable misstatement "
            f"({tolerable_misstatement:,.0f}). Consider expanding the sample or performing "
            "additional procedures."
        )
    else:
        conclusion = MisstatementConclusion.UNACCEPTABLE
        rationale = (
            f"Upper misstatement limit ({upper_limit:,.0f}) significantly exceeds tolerable "
            f"misstatement ({tolerable_misstatement:,.0f}). Material misstatement likely "
            "exists. Consider proposing an adjustment."
        )

    return MUSProjection(
        known_misstatement=known,
        projected_misstatement=projected,
        basic_precision=basic_precision,
        incremental_allowance=incremental,
        upper_misstatement_limit=upper_limit,
        conclusion=conclusion,
        conclusion_rationale=rationale,
    )


def evaluate_attribute_sample(
    *,
    sample_size: int,
    deviations: int,
    tolerable_deviation_rate: Decimal,
    confidence_level: int = 95,
    factors: ReliabilityFactorTable | None = None,
) -> AttributeEvaluation:
    """Evaluate a test-of-controls sample.

    Args:
        sample_size: Items tested (>= 1).
        deviations: Deviations found (0 <= deviations <= sample_size).
        tolerable_deviation_rate: Fraction (``Decimal("0.05")`` for 5%).
        confidence_level: Integer percentage in (0, 100); 80, 85, 90 and 95 have table rows.

    Raises:
        InvalidInput: On inconsistent counts or a rate outside (0, 1].
    """
    if sample_size < 1:
        raise InvalidInput("sample_size must be a positive integer.", details={"sample_size": sample_size})
    if deviations < 0 or deviations > sample_size:
        raise InvalidInput(
            "deviations must be between 0 and sample_size.",
            details={"deviations": deviations, "sample_size": sample_size},
        )
    if not _ZERO < tolerable_deviation_rate <= _ONE:
        raise InvalidInput(
            "tolerable_deviation_rate must be a fraction in (0, 1].",
            details={"tolerable_deviation_rate": str(tolerable_deviation_rate)},
        )

    row = (factors or ReliabilityFactorTable()).evaluation_row(confidence_level)
    if row is not None and deviations < len(row):
        factor = row[deviations]
    else:
        factor = _ATTRIBUTE_BASE + _ATTRIBUTE_STEP * deviations

    sample_rate = Decimal(deviations) / sample_size
    upper_limit = factor / sample_size

    if upper_limit <= tolerable_deviation_rate:
        conclusion = ControlRelianceConclusion.RELIANCE_SUPPORTED
        rationale = (
            f"Upper deviation limit ({upper_limit * 100:.1f}%) does not exceed the tolerable "
            f"deviation rate ({tolerable_deviation_rate * 100:.1f}%). The control appears to "
            "be operating effectively."
        )
    else:
        conclusion = ControlRelianceConclusion.RELIANCE_NOT_SUPPORTED
        rationale = (
            f"Upper deviation limit ({upper_limit * 100:.1f}%) exceeds the tolerable deviation "
            f"rate ({tolerable_deviation_rate * 100:.1f}%). The control may not be operating "
            "effectively. Consider revising the assessed level of control risk."
        )

    return AttributeEvaluation(
        sample_deviation_rate=sample_rate,
        upper_deviation_limit=upper_limit,
        conclusion=conclusion,
        conclusion_rationale=rationale,
    )


def _factor_at(row: tuple[Decimal, ...], index: int) -> Decimal:
    """Return the factor at ``index``, extending the row by +1.0 per step."""
    if index < len(row):
        return row[index]
    return row[-1] + (index - len(row) + 1)


__all__ = ["select_mus_items", "project_mus_misstatement", "evaluate_attribute_sample"]
