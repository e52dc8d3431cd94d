# src/tickmark_api/domain/interfaces/gateways/industry_guidance_gateway.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Industry guidance gateway interface.

Purpose:
    Abstract the source of industry-specific materiality recommendations so
    that use cases can consult guidance without knowing whether it comes from
    a static table, a database, or a remote service.

Layer:
    domain/interfaces
"""

from __future__ import annotations

from typing import Protocol

from tickmark_api.domain.entities.industry_guidance import IndustryGuidance
from tickmark_api.domain.enums.materiality import BenchmarkType


class IndustryGuidanceGateway(Protocol):
    """Protocol for industry guidance providers."""

    async def lookup(
        self,
        industry: str | None,
        benchmark_type: BenchmarkType,
    ) -> IndustryGuidance | None:
        """Return guidance for an industry and benchmark.

        Args:
            industry: Free-text industry label; ``None`` means unspecified.
            benchmark_type: Benchmark the guidance applies to.

        Returns:
            IndustryGuidance, or ``None`` when no guidance is available. The
            engine must produce a result either way.
        """
        raise NotImplementedError
