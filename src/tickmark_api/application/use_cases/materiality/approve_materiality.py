# src/tickmark_api/application/use_cases/materiality/approve_materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Use case: Record reviewer approval on the current materiality version.

Layer:
    application

Notes:
    - The domain engine decides whether approval is allowed; the repository's
      conditional update closes the race between two concurrent approvers.
    - Approval never changes thresholds.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from tickmark_api.application.schemas.dto.materiality import (
    MaterialityVersionDTO,
    to_version_dto,
)
from tickmark_api.application.uow import UnitOfWork, run_in_uow
from tickmark_api.domain.entities.materiality import MaterialityCalculation
from tickmark_api.domain.exceptions.materiality import VersionNotFound
from tickmark_api.domain.interfaces.repositories.materiality_versions_repository import (
    MaterialityVersionsRepository,
)
from tickmark_api.domain.services.materiality_engine import MaterialityEngine
from tickmark_api.infrastructure.observability.metrics import get_materiality_approvals_total

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class ApproveMaterialityRequest:
    """Request parameters for approval."""

    version_id: UUID
    approver: str


class ApproveMaterialityUseCase:
    """Approve the current materiality version of an engagement."""

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        engine: MaterialityEngine | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the use case.

        Args:
            uow: Unit of Work resolving the version repository.
            engine: Materiality engine; a default engine is used when omitted.
            clock: Source of the approval timestamp.
        """
        self._uow = uow
        self._engine = engine or MaterialityEngine()
        self._clock = clock

    async def execute(self, req: ApproveMaterialityRequest) -> MaterialityVersionDTO:
        """Execute the approval.

        Raises:
            VersionNotFound: If the version does not exist.
            NotCurrentVersion: If the version has been superseded.
            AlreadyApproved: If the version is already approved.
            InvalidInput: If the approver is blank.
        """

        async def _approve(tx: UnitOfWork) -> MaterialityCalculation:
            repo: MaterialityVersionsRepository = tx.get_repository(MaterialityVersionsRepository)
            version = await repo.get(req.version_id)
            if version is None:
                raise VersionNotFound(
                    "Materiality version not found.",
                    details={"version_id": str(req.version_id)},
                )
            approved = self._engine.approve(version, approver=req.approver, at=self._clock())
            assert approved.approved_by is not None and approved.approved_at is not None  # noqa: S101
            return await repo.mark_approved(
                approved.id,
                approved_by=approved.approved_by,
                approved_at=approved.approved_at,
            )

        approved = await run_in_uow(self._uow, _approve)

        get_materiality_approvals_total().inc()
        logger.info(
            "materiality.version.approved",
            extra={
                "engagement_id": approved.engagement_id,
                "version_id": str(approved.id),
                "version": approved.version,
                "approved_by": approved.approved_by,
            },
        )
        return to_version_dto(approved)
