# tests/conftest.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import pytest

from tickmark_api.application.uow import UnitOfWork
from tickmark_api.domain.entities.materiality import MaterialityCalculation, MaterialityInputs
from tickmark_api.domain.enums.materiality import BenchmarkType
from tickmark_api.domain.exceptions.materiality import (
    AlreadyApproved,
    NotCurrentVersion,
    VersionConflict,
    VersionNotFound,
)
from tickmark_api.domain.interfaces.repositories.materiality_versions_repository import (
    MaterialityVersionsRepository,
)

FIXED_NOW = datetime(2024, 3, 31, 12, 0, tzinfo=UTC)

BENCHMARK_RATIONALE = (
    "Revenue is the most stable measure for this trading entity and is the focus of users."
)


def make_inputs(**overrides: Any) -> MaterialityInputs:
    """Return revenue-based inputs with the conventional defaults."""
    base: dict[str, Any] = {
        "benchmark_type": BenchmarkType.REVENUE,
        "benchmark_value": Decimal("5000000"),
        "benchmark_rationale": BENCHMARK_RATIONALE,
    }
    base.update(overrides)
    return MaterialityInputs(**base)


class InMemoryMaterialityVersionsRepository(MaterialityVersionsRepository):
    """Dict-backed repository with the same compare-and-swap rules as the SQL one."""

    def __init__(self) -> None:
        self.rows: dict[UUID, MaterialityCalculation] = {}

    async def append(
        self,
        version: MaterialityCalculation,
        *,
        expected_current_version_id: UUID | None,
    ) -> MaterialityCalculation:
        current = next(
            (
                v
                for v in self.rows.values()
                if v.engagement_id == version.engagement_id and v.is_current
            ),
            None,
        )
        current_id = current.id if current is not None else None
        if current_id != expected_current_version_id:
            raise VersionConflict("stale", details={"engagement_id": version.engagement_id})
        if any(
            v.engagement_id == version.engagement_id and v.version == version.version
            for v in self.rows.values()
        ):
            raise VersionConflict("duplicate version")
        if current is not None:
            self.rows[current.id] = replace(current, is_current=False)
        self.rows[version.id] = version
        return version

    async def get(self, version_id: UUID) -> MaterialityCalculation | None:
        return self.rows.get(version_id)

    async def get_current(self, engagement_id: str) -> MaterialityCalculation | None:
        return next(
            (v for v in self.rows.values() if v.engagement_id == engagement_id and v.is_current),
            None,
        )

    async def get_history(self, engagement_id: str) -> Sequence[MaterialityCalculation]:
        return sorted(
            (v for v in self.rows.values() if v.engagement_id == engagement_id),
            key=lambda v: v.version,
            reverse=True,
        )

    async def mark_approved(
        self,
        version_id: UUID,
        *,
        approved_by: str,
        approved_at: datetime,
    ) -> MaterialityCalculation:
        row = self.rows.get(version_id)
        if row is None:
            raise VersionNotFound("missing")
        if not row.is_current:
            raise NotCurrentVersion("superseded")
        if row.is_approved:
            raise AlreadyApproved("approved")
        approved = replace(row, approved_at=approved_at, approved_by=approved_by)
        self.rows[version_id] = approved
        return approved


class FakeUnitOfWork(UnitOfWork):  # type: ignore[misc]
    """UnitOfWork that hands out a single in-memory repository."""

    def __init__(self, repo: InMemoryMaterialityVersionsRepository) -> None:
        self.repo = repo
        self.commits = 0
        self.rollbacks = 0
        self._snapshot: dict[UUID, MaterialityCalculation] = {}

    async def __aenter__(self) -> FakeUnitOfWork:  # type: ignore[override]
        self._snapshot = dict(self.repo.rows)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        return None

    def get_repository(self, repo_type: type[Any]) -> Any:  # type: ignore[override]
        return self.repo

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.repo.rows = self._snapshot


@pytest.fixture
def repo() -> InMemoryMaterialityVersionsRepository:
    return InMemoryMaterialityVersionsRepository()


@pytest.fixture
def uow(repo: InMemoryMaterialityVersionsRepository) -> FakeUnitOfWork:
    return FakeUnitOfWork(repo)


@pytest.fixture
def inputs_factory() -> Any:
    """Return the ``make_inputs`` factory."""
    return make_inputs


@pytest.fixture
def clock() -> Any:
    """Return a clock frozen at ``FIXED_NOW``."""
    return lambda: FIXED_NOW
