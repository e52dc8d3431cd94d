# src/tickmark_api/domain/interfaces/repositories/materiality_versions_repository.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for the materiality version ledger.

Purpose:
    Describe the persistence capabilities the materiality use cases rely on:
    an append-only, per-engagement history of materiality calculations with
    exactly one current version and a compare-and-swap on that pointer.

Notes:
    * Implementations must make ``append`` atomic: demoting the previous
      current version and inserting the new one either both happen or
      neither does.
    * A stale ``expected_current_version_id`` must surface as
      ``VersionConflict``, never as a silent overwrite.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from tickmark_api.domain.entities.materiality import MaterialityCalculation


class MaterialityVersionsRepository(Protocol):
    """Domain-level contract for materiality version storage."""

    async def append(
        self,
        version: MaterialityCalculation,
        *,
        expected_current_version_id: UUID | None,
    ) -> MaterialityCalculation:
        """Insert ``version`` as the engagement's new current version.

        Args:
            version: New version (``is_current=True``).
            expected_current_version_id: Id of the version the caller believes
                is current, or ``None`` when the caller expects no history.

        Returns:
            The persisted version.

        Raises:
            VersionConflict: If the current pointer moved since the caller
                read it, or the version number is already taken.
        """
        raise NotImplementedError

    async def get(self, version_id: UUID) -> MaterialityCalculation | None:
        """Return a version by id, or ``None`` when unknown."""
        raise NotImplementedError

    async def get_current(self, engagement_id: str) -> MaterialityCalculation | None:
        """Return the engagement's current version, or ``None`` when it has none."""
        raise NotImplementedError

    async def get_history(self, engagement_id: str) -> Sequence[MaterialityCalculation]:
        """Return every version for the engagement, newest version first."""
        raise NotImplementedError

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
        raise NotImplementedError
