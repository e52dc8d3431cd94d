# tests/unit/domain/services/test_reliability_factors.py
from __future__ import annotations

from decimal import Decimal

import pytest

from tickmark_api.domain.enums.sampling import ConfidenceLevel
from tickmark_api.domain.exceptions.calculation import InvalidInput
from tickmark_api.domain.services.reliability_factors import (
    EVALUATION_FACTORS,
    OUT_OF_TABLE_FACTOR,
    ReliabilityFactorTable,
    resolve_confidence_level,
)


@pytest.mark.parametrize(
    "level, errors, expected",
    [
        (90, 0, "2.31"),
        (90, 3, "6.69"),
        (95, 0, "3.00"),
        (95, 2, "6.30"),
        (99, 1, "6.64"),
        (99, 3, "10.05"),
    ],
)
def test_lookup_returns_table_values(level: int, errors: int, expected: str) -> None:
    assert ReliabilityFactorTable.lookup(level, errors) == Decimal(expected)


def test_lookup_beyond_table_is_flat_fallback() -> None:
    assert ReliabilityFactorTable.lookup(95, 4) == OUT_OF_TABLE_FACTOR
    assert ReliabilityFactorTable.lookup(99, 12) == Decimal("3.0")


def test_lookup_rejects_negative_errors() -> None:
    with pytest.raises(InvalidInput):
        ReliabilityFactorTable.lookup(95, -1)


def test_unknown_confidence_level_is_invalid() -> None:
    with pytest.raises(InvalidInput) as exc:
        ReliabilityFactorTable.lookup(85, 0)
    assert exc.value.details == {"confidence_level": 85}


def test_z_values() -> None:
    assert ReliabilityFactorTable.z_value(90) == Decimal("1.65")
    assert ReliabilityFactorTable.z_value(ConfidenceLevel.NINETY_FIVE) == Decimal("1.96")
    assert ReliabilityFactorTable.z_value(99) == Decimal("2.58")


def test_evaluation_rows_cover_ten_errors_and_ascend() -> None:
    for level, row in EVALUATION_FACTORS.items():
        assert len(row) == 11, level
        assert list(row) == sorted(row), level


@pytest.mark.parametrize(
    "level, errors, expected",
    [(95, 4, "9.16"), (95, 10, "16.97"), (90, 5, "9.28"), (85, 0, "1.90"), (80, 3, "5.52")],
)
def test_evaluation_row_values(level: int, errors: int, expected: str) -> None:
    row = ReliabilityFactorTable.evaluation_row(level)

    assert row is not None
    assert row[errors] == Decimal(expected)


def test_evaluation_row_is_missing_for_99_percent() -> None:
    assert ReliabilityFactorTable.evaluation_row(99) is None


@pytest.mark.parametrize("value", [0, 100, True, 95.0])
def test_evaluation_row_rejects_non_percentages(value: object) -> None:
    with pytest.raises(InvalidInput):
        ReliabilityFactorTable.evaluation_row(value)  # type: ignore[arg-type]


def test_resolve_confidence_level() -> None:
    assert resolve_confidence_level(99) is ConfidenceLevel.NINETY_NINE


@pytest.mark.parametrize("value", [95.9, 95.0, "95", True])
def test_resolve_confidence_level_rejects_non_integers(value: object) -> None:
    with pytest.raises(InvalidInput):
        resolve_confidence_level(value)  # type: ignore[arg-type]
