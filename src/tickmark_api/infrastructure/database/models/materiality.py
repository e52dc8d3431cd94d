# src/tickmark_api/infrastructure/database/models/materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Materiality version ledger model.

Table:
    materiality_calculations: one row per saved materiality version.

Constraints:
    * ``(engagement_id, version)`` is unique.
    * A partial unique index on ``engagement_id WHERE is_current`` lets the
      database itself guarantee a single current row per engagement.
    * Approval columns are set together or not at all.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from tickmark_api.infrastructure.database.models.base import (
    Base,
    CreatedAtMixin,
    IdentityMixin,
)

# Amount and percentage storage precision.
AMOUNT = Numeric(28, 8)
PERCENT = Numeric(12, 6)


class MaterialityCalculationModel(IdentityMixin, CreatedAtMixin, Base):
    """ORM model for a saved materiality version."""

    __tablename__ = "materiality_calculations"
    __table_args__ = (
        UniqueConstraint("engagement_id", "version"),
        CheckConstraint("version >= 1", name="version_positive"),
        CheckConstraint(
            "(approved_at IS NULL) = (approved_by IS NULL)",
            name="approval_complete",
        ),
        Index(
            "uq_materiality_calculations_current",
            "engagement_id",
            unique=True,
            postgresql_where=text("is_current"),
            sqlite_where=text("is_current = 1"),
        ),
    )

    engagement_id: Mapped[str] = mapped_column(String(128), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    benchmark_type: Mapped[str] = mapped_column(String(32), nullable=False)
    benchmark_value: Mapped[Decimal | None] = mapped_column(AMOUNT, nullable=True)
    benchmark_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    overall_percentage: Mapped[Decimal] = mapped_column(PERCENT, nullable=False)
    performance_percentage: Mapped[Decimal] = mapped_column(PERCENT, nullable=False)
    clearly_trivial_percentage: Mapped[Decimal] = mapped_column(PERCENT, nullable=False)
    risk_level: Mapped[str] = mapped_column(String(16), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    benchmark_rationale: Mapped[str | None] = mapped_column(Text, nullable=True)
    percentage_rationale: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    overall_materiality: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    performance_materiality: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    clearly_trivial_threshold: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)

    prepared_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    previous_version_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)


__all__ = ["MaterialityCalculationModel"]
