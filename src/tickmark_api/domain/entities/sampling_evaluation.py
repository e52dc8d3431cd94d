# src/tickmark_api/domain/entities/sampling_evaluation.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Sample selection and evaluation entities.

Purpose:
    Represent population items for monetary-unit selection, tested sample
    items, and the projection/evaluation outcomes derived from them.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tickmark_api.domain.enums.sampling import (
    ControlRelianceConclusion,
    MisstatementConclusion,
)


@dataclass(frozen=True, slots=True)
class PopulationItem:
    """A population item eligible for monetary-unit selection."""

    item_id: str
    value: Decimal

    def __post_init__(self) -> None:
        """Enforce invariants."""
        if self.value < 0:
            raise ValueError("Population item values must be non-negative.")


@dataclass(frozen=True, slots=True)
class MUSSelectionItem:
    """A population item annotated with its cumulative value and selection flag."""

    item_id: str
    cumulative_value: Decimal
    selected: bool


@dataclass(frozen=True, slots=True)
class MUSSelection:
    """Result of a monetary-unit selection pass."""

    sampling_interval: Decimal
    start_point: Decimal
    items: tuple[MUSSelectionItem, ...]

    @property
    def selected_ids(self) -> tuple[str, ...]:
        """Return the ids of selected items in population order."""
        return tuple(i.item_id for i in self.items if i.selected)


@dataclass(frozen=True, slots=True)
class TestedSampleItem:
    """A sample item after substantive testing.

    Attributes:
        item_id: Item identifier.
        book_value: Recorded amount.
        audited_value: Amount supported by audit evidence.
    """

    __test__ = False

    item_id: str
    book_value: Decimal
    audited_value: Decimal

    @property
    def misstatement(self) -> Decimal:
        """Return the absolute difference between book and audited value."""
        return abs(self.book_value - self.audited_value)

    @property
    def is_exception(self) -> bool:
        """Return True when the item is misstated."""
        return self.book_value != self.audited_value


@dataclass(frozen=True, slots=True)
class MUSProjection:
    """Upper misstatement limit build-up for an MUS sample.

    Attributes:
        known_misstatement: Sum of misstatements on items at or above the interval.
        projected_misstatement: Sum of tainting x interval for the remaining exceptions.
        basic_precision: Zero-error reliability factor x interval.
        incremental_allowance: Allowance from successive factor increments.
        upper_misstatement_limit: Sum of the four components above.
        conclusion: Comparison against tolerable misstatement.
        conclusion_rationale: Narrative suitable for the working paper.
    """

    known_misstatement: Decimal
    projected_misstatement: Decimal
    basic_precision: Decimal
    incremental_allowance: Decimal
    upper_misstatement_limit: Decimal
    conclusion: MisstatementConclusion
    conclusion_rationale: str


@dataclass(frozen=True, slots=True)
class AttributeEvaluation:
    """Outcome of evaluating an attribute sample.

    Rates are fractions (``Decimal("0.05")`` means 5%).
    """

    sample_deviation_rate: Decimal
    upper_deviation_limit: Decimal
    conclusion: ControlRelianceConclusion
    conclusion_rationale: str


__all__ = [
    "PopulationItem",
    "MUSSelectionItem",
    "MUSSelection",
    "TestedSampleItem",
    "MUSProjection",
    "AttributeEvaluation",
]
