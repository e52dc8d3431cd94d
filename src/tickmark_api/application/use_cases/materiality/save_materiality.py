# src/tickmark_api/application/use_cases/materiality/save_materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use case: Save materiality inputs as a new version for an engagement.

Purpose:
    Run the read-decide-write cycle of the version ledger in one Unit of Work:

        1. Read the engagement history and its current version.
        2. Reject the save if the caller's expected current version is stale.
        3. Return the current version untouched when the inputs are unchanged.
        4. Otherwise build the next version and append it with a
           compare-and-swap on the current pointer.

Layer:
    application

Notes:
    - Approved versions are never edited; a save after approval forks a new,
      unapproved version.
    - Advisories are returned alongside the saved version and never block it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from tickmark_api.application.schemas.dto.materiality import (
    MaterialityAdvisoryDTO,
    MaterialitySaveResultDTO,
    to_version_dto,
)
from tickmark_api.application.uow import UnitOfWork, run_in_uow
from tickmark_api.domain.entities.materiality import MaterialityCalculation, MaterialityInputs
from tickmark_api.domain.exceptions.calculation import InvalidInput
from tickmark_api.domain.exceptions.materiality import VersionConflict
from tickmark_api.domain.interfaces.gateways.industry_guidance_gateway import (
    IndustryGuidanceGateway,
)
from tickmark_api.domain.interfaces.repositories.materiality_versions_repository import (
    MaterialityVersionsRepository,
)
from tickmark_api.domain.services.materiality_engine import MaterialityEngine
from tickmark_api.infrastructure.observability.metrics import (
    get_materiality_versions_saved_total,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class SaveMaterialityRequest:
    """Request parameters for saving materiality.

    Attributes:
        engagement_id:
            Engagement the calculation belongs to.
        expected_current_version_id:
            Id of the version the caller last read as current, or ``None``
            when the caller believes the engagement has no history.
        inputs:
            Materiality inputs to save.
        prepared_by:
            Identifier of the preparer, if known.
    """

    engagement_id: str
    expected_current_version_id: UUID | None
    inputs: MaterialityInputs
    prepared_by: str | None = None


class SaveMaterialityUseCase:
    """Append a new materiality version under optimistic concurrency."""

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        guidance_gateway: IndustryGuidanceGateway | None = None,
        engine: MaterialityEngine | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        """Initialize the use case.

        Args:
            uow: Unit of Work resolving the version repository.
            guidance_gateway: Optional industry guidance provider for advisories.
            engine: Materiality engine; a default engine is used when omitted.
            clock: Source of the version creation timestamp.
            id_factory: Source of new version ids.
        """
        self._uow = uow
        self._guidance = guidance_gateway
        self._engine = engine or MaterialityEngine()
        self._clock = clock
        self._id_factory = id_factory

    async def execute(self, req: SaveMaterialityRequest) -> MaterialitySaveResultDTO:
        """Execute the save.

        Returns:
            The engagement's current version after the save and whether a new
            version was created.

        Raises:
            InvalidInput: On an empty engagement id or invalid inputs.
            VersionConflict: When the expected current version is stale.
        """
        engagement_id = req.engagement_id.strip()
        if not engagement_id:
            raise InvalidInput("engagement_id must not be empty.")

        # Validate before opening a transaction.
        inputs = req.inputs
        self._engine.compute(
            inputs.benchmark_value,
            inputs.overall_materiality_percentage,
            inputs.performance_materiality_percentage,
            inputs.clearly_trivial_percentage,
        )

        guidance = (
            await self._guidance.lookup(inputs.industry, inputs.benchmark_type)
            if self._guidance is not None
            else None
        )
        advisories = self._engine.advisories(inputs, guidance=guidance)

        logger.info(
            "materiality.version.save.start",
            extra={
                "engagement_id": engagement_id,
                "expected_current_version_id": (
                    str(req.expected_current_version_id)
                    if req.expected_current_version_id
                    else None
                ),
            },
        )

        async def _save(tx: UnitOfWork) -> tuple[MaterialityCalculation, bool]:
            repo: MaterialityVersionsRepository = tx.get_repository(MaterialityVersionsRepository)
            history = list(await repo.get_history(engagement_id))
            current = next((v for v in history if v.is_current), None)
            current_id = current.id if current is not None else None

            if current_id != req.expected_current_version_id:
                raise VersionConflict(
                    "Materiality was changed by another user; reload and retry.",
                    details={
                        "engagement_id": engagement_id,
                        "expected_current_version_id": (
                            str(req.expected_current_version_id)
                            if req.expected_current_version_id
                            else None
                        ),
                        "current_version_id": str(current_id) if current_id else None,
                    },
                )

            if current is not None and not self._engine.inputs_changed(current, inputs):
                return current, False

            new_version = self._engine.next_version(
                engagement_id=engagement_id,
                history=history,
                inputs=inputs,
                prepared_by=req.prepared_by,
                now=self._clock(),
                id_factory=self._id_factory,
            )
            saved = await repo.append(new_version, expected_current_version_id=current_id)
            return saved, True

        version, created = await run_in_uow(self._uow, _save)

        get_materiality_versions_saved_total().labels(
            result="created" if created else "unchanged"
        ).inc()
        logger.info(
            "materiality.version.saved" if created else "materiality.version.unchanged",
            extra={
                "engagement_id": engagement_id,
                "version_id": str(version.id),
                "version": version.version,
                "advisories": [a.code.value for a in advisories],
            },
        )

        return MaterialitySaveResultDTO(
            version=to_version_dto(version),
            created=created,
            advisories=[MaterialityAdvisoryDTO(code=a.code, message=a.message) for a in advisories],
        )
