# tests/unit/application/use_cases/materiality/test_assess_materiality_uc.py
from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from tickmark_api.application.use_cases.materiality.assess_materiality import (
    ApplyQualitativeAdjustmentsRequest,
    ApplyQualitativeAdjustmentsUseCase,
    AssessMaterialityRevisionRequest,
    AssessMaterialityRevisionUseCase,
)
from tickmark_api.domain.entities.materiality import QualitativeFactorAssessment
from tickmark_api.domain.enums.materiality import FactorAssessment, QualitativeFactor
from tickmark_api.domain.exceptions.calculation import InvalidInput
from tickmark_api.domain.services.materiality_engine import (
    MaterialityEngine,
    MaterialityEngineConfig,
)


def _factor(
    assessment: FactorAssessment,
    impact: str | None,
    factor: QualitativeFactor = QualitativeFactor.FRAUD_RISK,
) -> QualitativeFactorAssessment:
    return QualitativeFactorAssessment(factor, assessment, Decimal(impact) if impact else None)


def test_adjustment_counts_factors_that_move_materiality(caplog: pytest.LogCaptureFixture) -> None:
    req = ApplyQualitativeAdjustmentsRequest(
        base_materiality=Decimal("200000"),
        factors=[
            _factor(FactorAssessment.DECREASES, "10"),
            _factor(FactorAssessment.INCREASES, "5", QualitativeFactor.PUBLIC_INTEREST),
            _factor(FactorAssessment.NO_IMPACT, "20", QualitativeFactor.DEBT_COVENANTS),
            _factor(FactorAssessment.INCREASES, None, QualitativeFactor.MANAGEMENT_INTEGRITY),
        ],
    )

    with caplog.at_level(logging.INFO):
        dto = ApplyQualitativeAdjustmentsUseCase().execute(req)

    assert dto.base_materiality == Decimal("200000")
    assert dto.adjusted_materiality == Decimal("190000")
    assert dto.factors_applied == 2
    assert "materiality.qualitative.success" in caplog.messages


def test_adjustment_without_factors_rounds_base() -> None:
    dto = ApplyQualitativeAdjustmentsUseCase().execute(
        ApplyQualitativeAdjustmentsRequest(base_materiality=Decimal("100.5"), factors=[])
    )

    assert dto.adjusted_materiality == Decimal("101")
    assert dto.factors_applied == 0


def test_adjustment_uses_injected_engine_cap() -> None:
    engine = MaterialityEngine(MaterialityEngineConfig(qualitative_adjustment_cap=Decimal("20")))

    dto = ApplyQualitativeAdjustmentsUseCase(engine).execute(
        ApplyQualitativeAdjustmentsRequest(
            base_materiality=Decimal("1000"),
            factors=[_factor(FactorAssessment.INCREASES, "45")],
        )
    )

    assert dto.adjusted_materiality == Decimal("1200")


def test_adjustment_rejects_negative_impact() -> None:
    with pytest.raises(InvalidInput):
        ApplyQualitativeAdjustmentsUseCase().execute(
            ApplyQualitativeAdjustmentsRequest(
                base_materiality=Decimal("1000"),
                factors=[_factor(FactorAssessment.INCREASES, "-5")],
            )
        )


def test_revision_check_reports_reason(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        dto = AssessMaterialityRevisionUseCase().execute(
            AssessMaterialityRevisionRequest(
                overall_materiality=Decimal("40000"),
                aggregate_misstatements=Decimal("30001"),
            )
        )

    assert dto.should_revise is True
    assert dto.reason == "Aggregate misstatements exceed 75% of overall materiality"
    assert "materiality.revision_check.success" in caplog.messages


def test_revision_check_at_trigger_does_not_revise() -> None:
    dto = AssessMaterialityRevisionUseCase().execute(
        AssessMaterialityRevisionRequest(
            overall_materiality=Decimal("40000"),
            aggregate_misstatements=Decimal("30000"),
        )
    )

    assert dto.should_revise is False
    assert dto.reason is None


def test_revision_check_rejects_non_finite_amount() -> None:
    with pytest.raises(InvalidInput):
        AssessMaterialityRevisionUseCase().execute(
            AssessMaterialityRevisionRequest(
                overall_materiality=Decimal("Infinity"),
                aggregate_misstatements=Decimal("1"),
            )
        )
