# src/tickmark_api/domain/services/reliability_factors.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Reliability factor table (domain kernel).

Purpose:
    Provide the fixed Poisson-based reliability factors (confidence level x
    expected error count) and the fixed z-values used by the sampling
    formulas.

Layer:
    domain/services

Notes:
    - No interpolation. Expected error counts above the table resolve to the
      flat 3.0 fallback rather than an extrapolated factor.
    - Sample evaluation reads a separate, longer table (0-10 errors at 80, 85,
      90 and 95% confidence). Confidence levels without a row return ``None``
      and each evaluation routine applies its own fallback.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import Final

from tickmark_api.domain.enums.sampling import ConfidenceLevel
from tickmark_api.domain.exceptions.calculation import InvalidInput

RELIABILITY_FACTORS: Final[Mapping[ConfidenceLevel, tuple[Decimal, ...]]] = MappingProxyType(
    {
        ConfidenceLevel.NINETY: (
            Decimal("2.31"),
            Decimal("3.89"),
            Decimal("5.33"),
            Decimal("6.69"),
        ),
        ConfidenceLevel.NINETY_FIVE: (
            Decimal("3.00"),
            Decimal("4.75"),
            Decimal("6.30"),
            Decimal("7.76"),
        ),
        ConfidenceLevel.NINETY_NINE: (
            Decimal("4.61"),
            Decimal("6.64"),
            Decimal("8.41"),
            Decimal("10.05"),
        ),
    }
)

# Upper-limit factors for evaluating a tested sample, keyed by confidence
# percent, indexed by the number of errors or deviations found (0-10).
EVALUATION_FACTORS: Final[Mapping[int, tuple[Decimal, ...]]] = MappingProxyType(
    {
        95: tuple(
            Decimal(v)
            for v in (
                "3.00", "4.75", "6.30", "7.76", "9.16", "10.52",
                "11.85", "13.15", "14.44", "15.71", "16.97",
            )
        ),
        90: tuple(
            Decimal(v)
            for v in (
                "2.31", "3.89", "5.33", "6.69", "8.00", "9.28",
                "10.54", "11.78", "13.00", "14.21", "15.41",
            )
        ),
        85: tuple(
            Decimal(v)
            for v in (
                "1.90", "3.38", "4.72", "6.02", "7.27", "8.50",
                "9.71", "10.90", "12.08", "13.25", "14.42",
            )
        ),
        80: tuple(
            Decimal(v)
            for v in (
                "1.61", "2.99", "4.28", "5.52", "6.73", "7.91",
                "9.08", "10.24", "11.38", "12.52", "13.66",
            )
        ),
    }
)

Z_VALUES: Final[Mapping[ConfidenceLevel, Decimal]] = MappingProxyType(
    {
        ConfidenceLevel.NINETY: Decimal("1.65"),
        ConfidenceLevel.NINETY_FIVE: Decimal("1.96"),
        ConfidenceLevel.NINETY_NINE: Decimal("2.58"),
    }
)

# Factor returned when the expected error count is beyond the table.
OUT_OF_TABLE_FACTOR: Final[Decimal] = Decimal("3.0")

MAX_TABLE_ERRORS: Final[int] = 3


def resolve_confidence_level(value: int | ConfidenceLevel) -> ConfidenceLevel:
    """Return the ConfidenceLevel for a raw percentage.

    Args:
        value: Confidence level in percent (90, 95 or 99).

    Raises:
        InvalidInput: If the value is not an integer or not a supported
            confidence level.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(
            "confidence_level must be an integer percentage.",
            details={"confidence_level": str(value)},
        )
    try:
        return ConfidenceLevel(value)
    except ValueError as exc:
        raise InvalidInput(
            "confidence_level must be one of 90, 95, 99.",
            details={"confidence_level": value},
        ) from exc


class ReliabilityFactorTable:
    """Static lookup of reliability factors and z-values."""

    @staticmethod
    def lookup(confidence_level: int | ConfidenceLevel, expected_errors: int) -> Decimal:
        """Return the reliability factor for a confidence level and error count.

        Args:
            confidence_level: 90, 95 or 99.
            expected_errors: Number of expected errors (0-3 in the table).

        Returns:
            The table factor, or ``OUT_OF_TABLE_FACTOR`` when
            ``expected_errors`` exceeds the table.

        Raises:
            InvalidInput: On an unsupported confidence level or a negative
                error count.
        """
        level = resolve_confidence_level(confidence_level)
        if expected_errors < 0:
            raise InvalidInput(
                "expected_errors must be non-negative.",
                details={"expected_errors": expected_errors},
            )
        if expected_errors > MAX_TABLE_ERRORS:
            return OUT_OF_TABLE_FACTOR
        return RELIABILITY_FACTORS[level][expected_errors]

    @staticmethod
    def evaluation_row(confidence_level: int) -> tuple[Decimal, ...] | None:
        """Return the evaluation factors (0-10 errors) for a confidence level.

        Returns:
            The factor row, or ``None`` when the table has no row for the
            level (for example 99%).

        Raises:
            InvalidInput: If the level is not an integer in (0, 100).
        """
        if isinstance(confidence_level, bool) or not isinstance(confidence_level, int):
            raise InvalidInput(
                "confidence_level must be an integer percentage.",
                details={"confidence_level": str(confidence_level)},
            )
        if not 0 < confidence_level < 100:
            raise InvalidInput(
                "confidence_level must lie within (0, 100).",
                details={"confidence_level": confidence_level},
            )
        return EVALUATION_FACTORS.get(confidence_level)

    @staticmethod
    def z_value(confidence_level: int | ConfidenceLevel) -> Decimal:
        """Return the fixed z-value for a confidence level."""
        return Z_VALUES[resolve_confidence_level(confidence_level)]


__all__ = [
    "RELIABILITY_FACTORS",
    "EVALUATION_FACTORS",
    "Z_VALUES",
    "OUT_OF_TABLE_FACTOR",
    "MAX_TABLE_ERRORS",
    "ReliabilityFactorTable",
    "resolve_confidence_level",
]
