# src/tickmark_api/application/use_cases/materiality/compute_materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use case: Compute materiality thresholds without saving them.

Purpose:
    Evaluate materiality inputs, consulting industry guidance (when a
    provider is configured) for the benchmark's typical range, and return
    thresholds plus advisory flags. Nothing is persisted.

Layer:
    application
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tickmark_api.application.schemas.dto.materiality import (
    MaterialityResultDTO,
    to_result_dto,
)
from tickmark_api.domain.entities.materiality import MaterialityInputs
from tickmark_api.domain.interfaces.gateways.industry_guidance_gateway import (
    IndustryGuidanceGateway,
)
from tickmark_api.domain.services.materiality_engine import MaterialityEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputeMaterialityRequest:
    """Request parameters for a stateless materiality computation."""

    inputs: MaterialityInputs


class ComputeMaterialityUseCase:
    """Compute thresholds and advisories for a set of materiality inputs."""

    def __init__(
        self,
        guidance_gateway: IndustryGuidanceGateway | None = None,
        engine: MaterialityEngine | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            guidance_gateway: Optional industry guidance provider.
            engine: Materiality engine; a default engine is used when omitted.
        """
        self._guidance = guidance_gateway
        self._engine = engine or MaterialityEngine()

    async def execute(self, req: ComputeMaterialityRequest) -> MaterialityResultDTO:
        """Execute the computation.

        Raises:
            InvalidInput: When a percentage or the benchmark is not a valid number.
        """
        inputs = req.inputs
        guidance = (
            await self._guidance.lookup(inputs.industry, inputs.benchmark_type)
            if self._guidance is not None
            else None
        )
        result = self._engine.evaluate(inputs, guidance=guidance)

        logger.info(
            "materiality.compute.success",
            extra={
                "benchmark_type": inputs.benchmark_type.value,
                "approvable": result.approvable,
                "advisories": [code.value for code in result.advisory_codes],
            },
        )
        return to_result_dto(result)
