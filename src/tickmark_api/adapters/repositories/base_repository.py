# src/tickmark_api/adapters/repositories/base_repository.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""
BaseRepository: shared repository foundation for Tickmark.

Purpose:
    Shared mechanics for all repositories:
      * Safe fetch helpers (optional, all).
      * UTC normalization for timestamps read back from the database.
      * Latency and error metrics around each operation.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
    * Repositories never commit; use cases own transactions.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from tickmark_api.infrastructure.observability.metrics import observe_db_operation

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Abstract base class for all repositories."""

    #: Repository label used in metrics.
    name: str = "repository"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        self._session: AsyncSession = session

    # ------------------------------------------------------------------
    # Timestamp utilities
    # ------------------------------------------------------------------

    @staticmethod
    def as_utc(value: datetime | None) -> datetime | None:
        """Return ``value`` as an aware UTC datetime.

        Some drivers (SQLite) return naive datetimes for timezone-aware
        columns; those are interpreted as UTC.
        """
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    # ------------------------------------------------------------------
    # Instrumentation
    # ------------------------------------------------------------------

    def observe(self, operation: str) -> AbstractContextManager[None]:
        """Return a context manager timing ``operation`` for this repository."""
        return observe_db_operation(self.name, operation)

    # ------------------------------------------------------------------
    # Fetch helpers
    # ------------------------------------------------------------------

    async def fetch_optional(self, stmt: Select[Any]) -> TModel | None:
        """Execute a statement and return zero or one row."""
        res = await self._session.execute(stmt)
        return res.scalars().first()

    async def fetch_all(self, stmt: Select[Any]) -> list[TModel]:
        """Execute a statement and return all rows as a list."""
        res = await self._session.execute(stmt)
        return list(res.scalars().all())
