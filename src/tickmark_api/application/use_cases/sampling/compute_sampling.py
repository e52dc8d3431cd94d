# src/tickmark_api/application/use_cases/sampling/compute_sampling.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use case: Compute a sample size for MUS, classical variables or attribute sampling.

Layer:
    application

Notes:
    - Stateless; no Unit of Work.
    - Every outcome (computed, incomplete, invalid, degenerate) is counted
      per method so rejected inputs are visible in metrics.
"""

from __future__ import annotations

import logging

from tickmark_api.application.schemas.dto.sampling import (
    SamplingResultDTO,
    to_sampling_result_dto,
)
from tickmark_api.domain.entities.sampling import SamplingInput
from tickmark_api.domain.exceptions.calculation import DegenerateComputation, InvalidInput
from tickmark_api.domain.services.sampling_engine import SamplingEngine
from tickmark_api.infrastructure.observability.metrics import get_sampling_computations_total

logger = logging.getLogger(__name__)


class ComputeSamplingUseCase:
    """Dispatch a sampling input to the sampling engine."""

    def __init__(self, engine: SamplingEngine | None = None) -> None:
        """Initialize the use case.

        Args:
            engine: Sampling engine; a default engine is used when omitted.
        """
        self._engine = engine or SamplingEngine()

    def execute(self, inputs: SamplingInput) -> SamplingResultDTO:
        """Execute the computation.

        Raises:
            InvalidInput: On negative, non-finite or out-of-range inputs.
            DegenerateComputation: When the formula cannot produce a finite size.
        """
        method = inputs.method.value
        counter = get_sampling_computations_total()
        try:
            result = self._engine.compute(inputs)
        except InvalidInput:
            counter.labels(method=method, outcome="invalid").inc()
            raise
        except DegenerateComputation:
            counter.labels(method=method, outcome="degenerate").inc()
            logger.warning("sampling.compute.degenerate", extra={"method": method})
            raise

        outcome = "incomplete" if result.trace.incomplete else "computed"
        counter.labels(method=method, outcome=outcome).inc()
        logger.info(
            "sampling.compute.success",
            extra={
                "method": method,
                "outcome": outcome,
                "sample_size": result.sample_size,
                "capped": result.trace.capped,
                "missing_fields": list(result.trace.missing_fields),
            },
        )
        return to_sampling_result_dto(result)
