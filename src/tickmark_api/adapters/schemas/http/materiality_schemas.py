# src/tickmark_api/adapters/schemas/http/materiality_schemas.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""HTTP schemas for materiality computation and the version ledger.

Purpose:
    Request bodies and response payloads for the ``/v1/materiality`` routes.
    Response shapes mirror the application DTOs field for field so the
    presenter can validate them directly.

Layer:
    adapters/schemas/http

Notes:
    - Amounts and percentages accept JSON numbers or strings and are emitted
      as fixed-point strings.
    - Range checks on percentages live in the domain so that out-of-range
      values surface as ``INVALID_INPUT`` rather than ``VALIDATION_ERROR``.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import ConfigDict, Field

from tickmark_api.adapters.schemas.http.base import BaseHTTPSchema, DecimalStr
from tickmark_api.domain.enums.materiality import (
    BenchmarkType,
    FactorAssessment,
    MaterialityAdvisoryCode,
    QualitativeFactor,
    RiskLevel,
)

__all__ = [
    "MaterialityInputsHTTP",
    "MaterialitySaveRequestHTTP",
    "MaterialityApproveRequestHTTP",
    "MaterialityThresholdsHTTP",
    "MaterialityAdvisoryHTTP",
    "MaterialityResultHTTP",
    "MaterialityVersionHTTP",
    "MaterialitySaveResultHTTP",
    "MaterialityHistoryHTTP",
    "IndustryGuidanceHTTP",
    "QualitativeFactorHTTP",
    "QualitativeAdjustmentRequestHTTP",
    "QualitativeAdjustmentHTTP",
    "MaterialityRevisionRequestHTTP",
    "MaterialityRevisionHTTP",
]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class MaterialityInputsHTTP(BaseHTTPSchema):
    """Materiality inputs (compute request body and saved-version echo)."""

    model_config = ConfigDict(
        title="MaterialityInputs",
        json_schema_extra={
            "examples": [
                {
                    "benchmark_type": "revenue",
                    "benchmark_value": "5000000",
                    "overall_materiality_percentage": "5",
                    "performance_materiality_percentage": "75",
                    "clearly_trivial_percentage": "5",
                    "industry": "saas",
                    "risk_level": "medium",
                }
            ]
        },
    )

    benchmark_type: BenchmarkType = Field(..., description="Financial statement benchmark.")
    benchmark_value: DecimalStr | None = Field(
        default=None,
        description="Benchmark amount; missing or non-positive values yield zero thresholds.",
    )
    overall_materiality_percentage: DecimalStr = Field(
        default=Decimal("5"),
        description="Overall materiality as a percent of the benchmark (0-100).",
    )
    performance_materiality_percentage: DecimalStr = Field(
        default=Decimal("75"),
        description="Performance materiality as a percent of overall (0-100).",
    )
    clearly_trivial_percentage: DecimalStr = Field(
        default=Decimal("5"),
        description="Clearly trivial threshold as a percent of overall (0-100).",
    )
    benchmark_rationale: str | None = Field(default=None, max_length=4000)
    percentage_rationale: str | None = Field(default=None, max_length=4000)
    additional_notes: str | None = Field(default=None, max_length=4000)
    industry: str | None = Field(default=None, max_length=64)
    risk_level: RiskLevel = Field(default=RiskLevel.MEDIUM)
    benchmark_year: int | None = Field(default=None, ge=1900, le=2200)


class MaterialitySaveRequestHTTP(MaterialityInputsHTTP):
    """Save request: inputs plus the optimistic-concurrency token."""

    model_config = ConfigDict(title="MaterialitySaveRequest")

    expected_current_version_id: UUID | None = Field(
        default=None,
        description="Id of the version the client edited; null for the first save.",
    )
    prepared_by: str | None = Field(default=None, max_length=128)


class MaterialityApproveRequestHTTP(BaseHTTPSchema):
    """Approval request body."""

    model_config = ConfigDict(title="MaterialityApproveRequest")

    approver: str = Field(..., min_length=1, max_length=128)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MaterialityThresholdsHTTP(BaseHTTPSchema):
    """Computed thresholds."""

    model_config = ConfigDict(title="MaterialityThresholds")

    overall_materiality: DecimalStr
    performance_materiality: DecimalStr
    clearly_trivial_threshold: DecimalStr


class MaterialityAdvisoryHTTP(BaseHTTPSchema):
    """Non-blocking advisory."""

    model_config = ConfigDict(title="MaterialityAdvisory")

    code: MaterialityAdvisoryCode
    message: str


class MaterialityResultHTTP(BaseHTTPSchema):
    """Stateless computation result."""

    model_config = ConfigDict(title="MaterialityResult")

    thresholds: MaterialityThresholdsHTTP
    advisories: list[MaterialityAdvisoryHTTP]
    approvable: bool


class MaterialityVersionHTTP(BaseHTTPSchema):
    """A saved materiality version."""

    model_config = ConfigDict(title="MaterialityVersion")

    id: UUID
    engagement_id: str
    version: int
    is_current: bool
    is_approved: bool
    inputs: MaterialityInputsHTTP
    thresholds: MaterialityThresholdsHTTP
    created_at: datetime
    prepared_by: str | None = None
    previous_version_id: UUID | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None


class MaterialitySaveResultHTTP(BaseHTTPSchema):
    """Save outcome; ``created`` is false when inputs were unchanged."""

    model_config = ConfigDict(title="MaterialitySaveResult")

    version: MaterialityVersionHTTP
    created: bool
    advisories: list[MaterialityAdvisoryHTTP]


class MaterialityHistoryHTTP(BaseHTTPSchema):
    """All versions for an engagement, newest first."""

    model_config = ConfigDict(title="MaterialityHistory")

    engagement_id: str
    versions: list[MaterialityVersionHTTP]


class IndustryGuidanceHTTP(BaseHTTPSchema):
    """Recommended percentages for an industry and benchmark."""

    model_config = ConfigDict(title="IndustryGuidance")

    industry: str
    benchmark_type: BenchmarkType
    recommended_overall_pct: DecimalStr
    recommended_performance_pct: DecimalStr
    recommended_trivial_pct: DecimalStr
    typical_overall_min_pct: DecimalStr
    typical_overall_max_pct: DecimalStr
    rationale: str


# ---------------------------------------------------------------------------
# Qualitative adjustment and revision check
# ---------------------------------------------------------------------------


class QualitativeFactorHTTP(BaseHTTPSchema):
    """Assessment of one qualitative factor."""

    model_config = ConfigDict(title="QualitativeFactor")

    factor: QualitativeFactor
    assessment: FactorAssessment
    impact: DecimalStr | None = Field(
        default=None,
        description="Percentage adjustment applied in the assessed direction (10 means 10%).",
    )
    description: str | None = Field(default=None, max_length=4000)


class QualitativeAdjustmentRequestHTTP(BaseHTTPSchema):
    """Qualitative adjustment request."""

    model_config = ConfigDict(title="QualitativeAdjustmentRequest")

    base_materiality: DecimalStr
    factors: list[QualitativeFactorHTTP] = Field(default_factory=list, max_length=50)


class QualitativeAdjustmentHTTP(BaseHTTPSchema):
    """Materiality before and after qualitative adjustments."""

    model_config = ConfigDict(title="QualitativeAdjustment")

    base_materiality: DecimalStr
    adjusted_materiality: DecimalStr
    factors_applied: int


class MaterialityRevisionRequestHTTP(BaseHTTPSchema):
    """Revision check request."""

    model_config = ConfigDict(title="MaterialityRevisionRequest")

    overall_materiality: DecimalStr
    aggregate_misstatements: DecimalStr


class MaterialityRevisionHTTP(BaseHTTPSchema):
    """Revision check outcome."""

    model_config = ConfigDict(title="MaterialityRevision")

    should_revise: bool
    reason: str | None = None
