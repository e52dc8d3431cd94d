# src/tickmark_api/application/use_cases/materiality/get_industry_guidance.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use case: Look up industry guidance for a benchmark."""

from __future__ import annotations

import logging

from tickmark_api.application.schemas.dto.materiality import (
    IndustryGuidanceDTO,
    to_guidance_dto,
)
from tickmark_api.domain.enums.materiality import BenchmarkType
from tickmark_api.domain.interfaces.gateways.industry_guidance_gateway import (
    IndustryGuidanceGateway,
)

logger = logging.getLogger(__name__)


class GetIndustryGuidanceUseCase:
    """Return guidance for an industry and benchmark, or ``None``."""

    def __init__(self, gateway: IndustryGuidanceGateway) -> None:
        self._gateway = gateway

    async def execute(
        self,
        industry: str | None,
        benchmark_type: BenchmarkType,
    ) -> IndustryGuidanceDTO | None:
        """Execute the lookup."""
        guidance = await self._gateway.lookup(industry, benchmark_type)
        logger.info(
            "materiality.guidance.lookup",
            extra={
                "industry": industry,
                "benchmark_type": benchmark_type.value,
                "found": guidance is not None,
            },
        )
        return to_guidance_dto(guidance) if guidance is not None else None
