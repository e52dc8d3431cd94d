# src/tickmark_api/application/use_cases/materiality/assess_materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use cases: Qualitative adjustment and revision checks.

Purpose:
    * ApplyQualitativeAdjustmentsUseCase: move a materiality amount up or
      down for qualitative factors (capped, rounded to whole units).
    * AssessMaterialityRevisionUseCase: decide whether misstatements found so
      far call for revisiting overall materiality.

Layer:
    application

Notes:
    - Advisory only: neither use case touches the version ledger.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from tickmark_api.application.schemas.dto.materiality import (
    MaterialityRevisionDTO,
    QualitativeAdjustmentDTO,
)
from tickmark_api.domain.entities.materiality import QualitativeFactorAssessment
from tickmark_api.domain.enums.materiality import FactorAssessment
from tickmark_api.domain.services.materiality_engine import MaterialityEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplyQualitativeAdjustmentsRequest:
    """Request parameters for a qualitative adjustment."""

    base_materiality: Decimal
    factors: Sequence[QualitativeFactorAssessment]


@dataclass(frozen=True)
class AssessMaterialityRevisionRequest:
    """Request parameters for a revision check."""

    overall_materiality: Decimal
    aggregate_misstatements: Decimal


class ApplyQualitativeAdjustmentsUseCase:
    """Adjust materiality for qualitative factors."""

    def __init__(self, engine: MaterialityEngine | None = None) -> None:
        self._engine = engine or MaterialityEngine()

    def execute(self, req: ApplyQualitativeAdjustmentsRequest) -> QualitativeAdjustmentDTO:
        """Execute the adjustment.

        Raises:
            InvalidInput: On a negative or non-finite base amount or impact.
        """
        adjusted = self._engine.apply_qualitative_adjustments(req.base_materiality, req.factors)
        applied = sum(
            1
            for f in req.factors
            if f.impact and f.assessment is not FactorAssessment.NO_IMPACT
        )
        logger.info(
            "materiality.qualitative.success",
            extra={"factors": len(req.factors), "applied": applied},
        )
        return QualitativeAdjustmentDTO(
            base_materiality=req.base_materiality,
            adjusted_materiality=adjusted,
            factors_applied=applied,
        )


class AssessMaterialityRevisionUseCase:
    """Check whether overall materiality should be revisited."""

    def __init__(self, engine: MaterialityEngine | None = None) -> None:
        self._engine = engine or MaterialityEngine()

    def execute(self, req: AssessMaterialityRevisionRequest) -> MaterialityRevisionDTO:
        """Execute the check.

        Raises:
            InvalidInput: On a negative or non-finite amount.
        """
        assessment = self._engine.should_revise(
            req.overall_materiality, req.aggregate_misstatements
        )
        logger.info(
            "materiality.revision_check.success",
            extra={"should_revise": assessment.should_revise},
        )
        return MaterialityRevisionDTO(
            should_revise=assessment.should_revise,
            reason=assessment.reason,
        )
