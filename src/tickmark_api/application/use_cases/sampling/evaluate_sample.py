# src/tickmark_api/application/use_cases/sampling/evaluate_sample.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use cases: Evaluate tested samples.

Purpose:
    * EvaluateMUSSampleUseCase: project misstatement found in an MUS sample
      to the population and conclude against tolerable misstatement.
    * EvaluateAttributeSampleUseCase: compute the upper deviation limit of a
      test-of-controls sample and conclude on control reliance.

Layer:
    application
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from tickmark_api.application.schemas.dto.sampling import (
    AttributeEvaluationDTO,
    MUSProjectionDTO,
    to_attribute_evaluation_dto,
    to_projection_dto,
)
from tickmark_api.domain.entities.sampling_evaluation import TestedSampleItem
from tickmark_api.domain.services.reliability_factors import ReliabilityFactorTable
from tickmark_api.domain.services.sampling_evaluation import (
    evaluate_attribute_sample,
    project_mus_misstatement,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluateMUSSampleRequest:
    """Request parameters for MUS misstatement projection."""

    items: Sequence[TestedSampleItem]
    sampling_interval: Decimal
    tolerable_misstatement: Decimal
    confidence_level: int = 95


@dataclass(frozen=True)
class EvaluateAttributeSampleRequest:
    """Request parameters for attribute sample evaluation.

    Attributes:
        sample_size: Items tested.
        deviations: Deviations found.
        tolerable_deviation_rate: Fraction (``0.05`` for 5%).
        confidence_level: Integer percentage in (0, 100).
    """

    sample_size: int
    deviations: int
    tolerable_deviation_rate: Decimal
    confidence_level: int = 95


class EvaluateMUSSampleUseCase:
    """Project misstatement for a tested MUS sample."""

    def __init__(self, factors: ReliabilityFactorTable | None = None) -> None:
        self._factors = factors or ReliabilityFactorTable()

    def execute(self, req: EvaluateMUSSampleRequest) -> MUSProjectionDTO:
        """Execute the projection.

        Raises:
            InvalidInput: On a non-positive interval, tolerable misstatement or
                a confidence level outside (0, 100).
            DegenerateComputation: When an exception item has a zero book value.
        """
        projection = project_mus_misstatement(
            req.items,
            sampling_interval=req.sampling_interval,
            tolerable_misstatement=req.tolerable_misstatement,
            confidence_level=req.confidence_level,
            factors=self._factors,
        )
        logger.info(
            "sampling.mus.evaluate.success",
            extra={
                "items": len(req.items),
                "exceptions": sum(1 for i in req.items if i.is_exception),
                "conclusion": projection.conclusion.value,
            },
        )
        return to_projection_dto(projection)


class EvaluateAttributeSampleUseCase:
    """Evaluate a test-of-controls sample."""

    def __init__(self, factors: ReliabilityFactorTable | None = None) -> None:
        self._factors = factors or ReliabilityFactorTable()

    def execute(self, req: EvaluateAttributeSampleRequest) -> AttributeEvaluationDTO:
        """Execute the evaluation.

        Raises:
            InvalidInput: On inconsistent counts, a rate outside (0, 1] or a
                confidence level outside (0, 100).
        """
        evaluation = evaluate_attribute_sample(
            sample_size=req.sample_size,
            deviations=req.deviations,
            tolerable_deviation_rate=req.tolerable_deviation_rate,
            confidence_level=req.confidence_level,
            factors=self._factors,
        )
        logger.info(
            "sampling.attribute.evaluate.success",
            extra={
                "sample_size": req.sample_size,
                "deviations": req.deviations,
                "conclusion": evaluation.conclusion.value,
            },
        )
        return to_attribute_evaluation_dto(evaluation)
