# src/tickmark_api/application/use_cases/sampling/select_mus_items.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use case: Select population items by monetary unit."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from tickmark_api.application.schemas.dto.sampling import MUSSelectionDTO, to_selection_dto
from tickmark_api.domain.entities.sampling_evaluation import PopulationItem
from tickmark_api.domain.services.sampling_evaluation import select_mus_items

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectMUSItemsRequest:
    """Request parameters for monetary-unit selection.

    Attributes:
        population: Items in population order.
        sample_size: Number of monetary units to select.
        start_point: Random start within (0, interval].
    """

    population: Sequence[PopulationItem]
    sample_size: int
    start_point: Decimal


class SelectMUSItemsUseCase:
    """Run a monetary-unit selection pass over a population."""

    def execute(self, req: SelectMUSItemsRequest) -> MUSSelectionDTO:
        """Execute the selection.

        Raises:
            InvalidInput: On an empty population, bad sample size or start point.
        """
        selection = select_mus_items(req.population, req.sample_size, start_point=req.start_point)
        logger.info(
            "sampling.mus.select.success",
            extra={
                "population_items": len(req.population),
                "sample_size": req.sample_size,
                "selected": len(selection.selected_ids),
            },
        )
        return to_selection_dto(selection)
