# src/tickmark_api/application/use_cases/materiality/get_materiality_history.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use cases: Read the current materiality version and the full history.

Layer:
    application

Notes:
    - Read-only; both use cases open a Unit of Work only to resolve the
      repository and never commit changes.
"""

from __future__ import annotations

import logging

from tickmark_api.application.schemas.dto.materiality import (
    MaterialityHistoryDTO,
    MaterialityVersionDTO,
    to_version_dto,
)
from tickmark_api.application.uow import UnitOfWork
from tickmark_api.domain.exceptions.calculation import InvalidInput
from tickmark_api.domain.interfaces.repositories.materiality_versions_repository import (
    MaterialityVersionsRepository,
)

logger = logging.getLogger(__name__)


def _require_engagement_id(engagement_id: str) -> str:
    cleaned = engagement_id.strip()
    if not cleaned:
        raise InvalidInput("engagement_id must not be empty.")
    return cleaned


class GetMaterialityHistoryUseCase:
    """Return every saved version for an engagement, newest first."""

    def __init__(self, uow: UnitOfWork) -> None:
        """Initialize the use case.

        Args:
            uow: Unit of Work resolving the version repository.
        """
        self._uow = uow

    async def execute(self, engagement_id: str) -> MaterialityHistoryDTO:
        """Execute the history read."""
        engagement_id = _require_engagement_id(engagement_id)

        async with self._uow as tx:
            repo: MaterialityVersionsRepository = tx.get_repository(MaterialityVersionsRepository)
            versions = await repo.get_history(engagement_id)

        ordered = sorted(versions, key=lambda v: v.version, reverse=True)
        logger.info(
            "materiality.history.success",
            extra={"engagement_id": engagement_id, "versions": len(ordered)},
        )
        return MaterialityHistoryDTO(
            engagement_id=engagement_id,
            versions=[to_version_dto(v) for v in ordered],
        )


class GetCurrentMaterialityUseCase:
    """Return the engagement's current version, if any."""

    def __init__(self, uow: UnitOfWork) -> None:
        """Initialize the use case.

        Args:
            uow: Unit of Work resolving the version repository.
        """
        self._uow = uow

    async def execute(self, engagement_id: str) -> MaterialityVersionDTO | None:
        """Execute the current-version read.

        Returns:
            The current version, or ``None`` when nothing has been saved yet.
        """
        engagement_id = _require_engagement_id(engagement_id)

        async with self._uow as tx:
            repo: MaterialityVersionsRepository = tx.get_repository(MaterialityVersionsRepository)
            current = await repo.get_current(engagement_id)

        return to_version_dto(current) if current is not None else None
