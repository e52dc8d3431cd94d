# migrations/versions/20261018_0001_materiality_calculations.py
"""Create the materiality_calculations version ledger."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# Revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

_TABLE = "materiality_calculations"
_AMOUNT = sa.Numeric(28, 8)
_PERCENT = sa.Numeric(12, 6)


def upgrade() -> None:
    op.create_table(
        _TABLE,
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("engagement_id", sa.String(length=128), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("is_current", sa.Boolean(), nullable=False),
        sa.Column("benchmark_type", sa.String(length=32), nullable=False),
        sa.Column("benchmark_value", _AMOUNT, nullable=True),
        sa.Column("benchmark_year", sa.Integer(), nullable=True),
        sa.Column("overall_percentage", _PERCENT, nullable=False),
        sa.Column("performance_percentage", _PERCENT, nullable=False),
        sa.Column("clearly_trivial_percentage", _PERCENT, nullable=False),
        sa.Column("risk_level", sa.String(length=16), nullable=False),
        sa.Column("industry", sa.String(length=128), nullable=True),
        sa.Column("benchmark_rationale", sa.Text(), nullable=True),
        sa.Column("percentage_rationale", sa.Text(), nullable=True),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("overall_materiality", _AMOUNT, nullable=False),
        sa.Column("performance_materiality", _AMOUNT, nullable=False),
        sa.Column("clearly_trivial_threshold", _AMOUNT, nullable=False),
        sa.Column("prepared_by", sa.String(length=255), nullable=True),
        sa.Column("previous_version_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_materiality_calculations"),
        sa.UniqueConstraint(
            "engagement_id",
            "version",
            name="uq_materiality_calculations_engagement_id_version",
        ),
        sa.CheckConstraint("version >= 1", name="ck_materiality_calculations_version_positive"),
        sa.CheckConstraint(
            "(approved_at IS NULL) = (approved_by IS NULL)",
            name="ck_materiality_calculations_approval_complete",
        ),
    )

    # At most one current version per engagement.
    op.create_index(
        "uq_materiality_calculations_current",
        _TABLE,
        ["engagement_id"],
        unique=True,
        postgresql_where=sa.text("is_current"),
        sqlite_where=sa.text("is_current = 1"),
    )


def downgrade() -> None:
    op.drop_index("uq_materiality_calculations_current", table_name=_TABLE)
    op.drop_table(_TABLE)
