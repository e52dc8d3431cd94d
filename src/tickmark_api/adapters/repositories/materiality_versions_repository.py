# src/tickmark_api/adapters/repositories/materiality_versions_repository.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""SQLAlchemy repository for the materiality version ledger.

Purpose:
    Persist materiality versions in ``materiality_calculations`` and move the
    per-engagement current pointer with a compare-and-swap:

        * ``append`` demotes the expected current row with a conditional
          UPDATE and inserts the new current row in the same transaction.
        * A conditional UPDATE that touches no row, or a unique-index
          violation from a concurrent writer, surfaces as ``VersionConflict``.
        * ``mark_approved`` only updates a row that is current and not yet
          approved.

Layer:
    adapters/repositories

Notes:
    - Repositories never commit; the Unit of Work owns the transaction.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError

from tickmark_api.adapters.repositories.base_repository import BaseRepository
from tickmark_api.domain.entities.materiality import (
    MaterialityCalculation,
    MaterialityInputs,
    MaterialityThresholds,
)
from tickmark_api.domain.enums.materiality import BenchmarkType, RiskLevel
from tickmark_api.domain.exceptions.materiality import (
    AlreadyApproved,
    NotCurrentVersion,
    VersionConflict,
    VersionNotFound,
)
from tickmark_api.infrastructure.database.models.materiality import (
    MaterialityCalculationModel as Model,
)
from tickmark_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class SqlAlchemyMaterialityVersionsRepository(BaseRepository[Model]):
    """SQLAlchemy implementation of ``MaterialityVersionsRepository``."""

    name = "materiality_versions"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def append(
        self,
        version: MaterialityCalculation,
        *,
        expected_current_version_id: UUID | None,
    ) -> MaterialityCalculation:
        """Insert ``version`` as the new current version (compare-and-swap).

        Raises:
            ValueError: If ``version`` is not flagged current.
            VersionConflict: If the current pointer moved or the version
                number is already taken.
        """
        if not version.is_current:
            raise ValueError("Only a current version can be appended to the ledger.")

        conflict_details: dict[str, Any] = {
            "engagement_id": version.engagement_id,
            "version": version.version,
            "expected_current_version_id": (
                str(expected_current_version_id) if expected_current_version_id else None
            ),
        }

        with self.observe("append"):
            if expected_current_version_id is None:
                existing = await self._session.scalar(
                    select(Model.id).where(
                        Model.engagement_id == version.engagement_id,
                        Model.is_current.is_(True),
                    )
                )
                if existing is not None:
                    raise VersionConflict(
                        "Engagement already has a current materiality version.",
                        details={**conflict_details, "current_version_id": str(existing)},
                    )
            else:
                demoted = cast(
                    "CursorResult[Any]",
                    await self._session.execute(
                        update(Model)
                        .where(
                            Model.id == expected_current_version_id,
                            Model.engagement_id == version.engagement_id,
                            Model.is_current.is_(True),
                        )
                        .values(is_current=False)
                        .execution_options(synchronize_session=False)
                    ),
                )
                if demoted.rowcount != 1:
                    raise VersionConflict(
                        "Expected current materiality version is no longer current.",
                        details=conflict_details,
                    )

            self._session.add(self._to_model(version))
            try:
                await self._session.flush()
            except IntegrityError as exc:
                logger.warning(
                    "materiality.version.append_conflict",
                    extra={"engagement_id": version.engagement_id, "version": version.version},
                )
                raise VersionConflict(
                    "Concurrent materiality save detected.",
                    details=conflict_details,
                ) from exc

        return version

    async def mark_approved(
        self,
        version_id: UUID,
        *,
        approved_by: str,
        approved_at: datetime,
    ) -> MaterialityCalculation:
        """Record approval on a current, unapproved version.

        Raises:
            VersionNotFound: If the version does not exist.
            NotCurrentVersion: If the version has been superseded.
            AlreadyApproved: If the version already carries an approval.
        """
        with self.observe("mark_approved"):
            result = cast(
                "CursorResult[Any]",
                await self._session.execute(
                    update(Model)
                    .where(
                        Model.id == version_id,
                        Model.is_current.is_(True),
                        Model.approved_at.is_(None),
                    )
                    .values(approved_at=approved_at, approved_by=approved_by)
                    .execution_options(synchronize_session=False)
                ),
            )
            row = await self._load(version_id)

        if row is None:
            raise VersionNotFound(
                "Materiality version not found.",
                details={"version_id": str(version_id)},
            )
        if result.rowcount != 1:
            if not row.is_current:
                raise NotCurrentVersion(
                    "Only the current materiality version can be approved.",
                    details={"version_id": str(version_id), "version": row.version},
                )
            raise AlreadyApproved(
                "Materiality version is already approved.",
                details={"version_id": str(version_id), "approved_by": row.approved_by},
            )
        return self._to_domain(row)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, version_id: UUID) -> MaterialityCalculation | None:
        """Return a version by id, or ``None`` when unknown."""
        with self.observe("get"):
            row = await self._load(version_id)
        return self._to_domain(row) if row is not None else None

    async def get_current(self, engagement_id: str) -> MaterialityCalculation | None:
        """Return the engagement's current version, if any."""
        with self.observe("get_current"):
            row = await self.fetch_optional(
                select(Model)
                .where(Model.engagement_id == engagement_id, Model.is_current.is_(True))
                .execution_options(populate_existing=True)
            )
        return self._to_domain(row) if row is not None else None

    async def get_history(self, engagement_id: str) -> Sequence[MaterialityCalculation]:
        """Return every version for the engagement, newest first."""
        with self.observe("get_history"):
            rows = await self.fetch_all(
                select(Model)
                .where(Model.engagement_id == engagement_id)
                .order_by(Model.version.desc())
                .execution_options(populate_existing=True)
            )
        return [self._to_domain(r) for r in rows]

    async def _load(self, version_id: UUID) -> Model | None:
        return await self.fetch_optional(
            select(Model).where(Model.id == version_id).execution_options(populate_existing=True)
        )

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_model(version: MaterialityCalculation) -> Model:
        inputs = version.inputs
        return Model(
            id=version.id,
            engagement_id=version.engagement_id,
            version=version.version,
            is_current=version.is_current,
            benchmark_type=inputs.benchmark_type.value,
            benchmark_value=inputs.benchmark_value,
            benchmark_year=inputs.benchmark_year,
            overall_percentage=inputs.overall_materiality_percentage,
            performance_percentage=inputs.performance_materiality_percentage,
            clearly_trivial_percentage=inputs.clearly_trivial_percentage,
            risk_level=inputs.risk_level.value,
            industry=inputs.industry,
            benchmark_rationale=inputs.benchmark_rationale,
            percentage_rationale=inputs.percentage_rationale,
            additional_notes=inputs.additional_notes,
            overall_materiality=version.thresholds.overall,
            performance_materiality=version.thresholds.performance,
            clearly_trivial_threshold=version.thresholds.clearly_trivial,
            prepared_by=version.prepared_by,
            previous_version_id=version.previous_version_id,
            created_at=version.created_at,
            approved_at=version.approved_at,
            approved_by=version.approved_by,
        )

    def _to_domain(self, row: Model) -> MaterialityCalculation:
        created_at = self.as_utc(row.created_at)
        assert created_at is not None  # noqa: S101
        return MaterialityCalculation(
            id=row.id,
            engagement_id=row.engagement_id,
            version=row.version,
            is_current=row.is_current,
            inputs=MaterialityInputs(
                benchmark_type=BenchmarkType(row.benchmark_type),
                benchmark_value=row.benchmark_value,
                overall_materiality_percentage=row.overall_percentage,
                performance_materiality_percentage=row.performance_percentage,
                clearly_trivial_percentage=row.clearly_trivial_percentage,
                benchmark_rationale=row.benchmark_rationale,
                percentage_rationale=row.percentage_rationale,
                additional_notes=row.additional_notes,
                industry=row.industry,
                risk_level=RiskLevel(row.risk_level),
                benchmark_year=row.benchmark_year,
            ),
            thresholds=MaterialityThresholds(
                overall=row.overall_materiality,
                performance=row.performance_materiality,
                clearly_trivial=row.clearly_trivial_threshold,
            ),
            created_at=created_at,
            prepared_by=row.prepared_by,
            previous_version_id=row.previous_version_id,
            approved_at=self.as_utc(row.approved_at),
            approved_by=row.approved_by,
        )


__all__ = ["SqlAlchemyMaterialityVersionsRepository"]
