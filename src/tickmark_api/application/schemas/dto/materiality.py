# src/tickmark_api/application/schemas/dto/materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Application DTOs for materiality computation and the version ledger.

Purpose:
    Provide strict Pydantic DTOs for:
        * Materiality inputs and computed thresholds.
        * Advisory flags attached to a computation.
        * Saved versions and per-engagement history.
        * Industry guidance.

Layer:
    application/schemas/dto

Notes:
    - Amounts and percentages stay ``Decimal`` end to end; the HTTP layer
      serializes them as strings to avoid precision loss.
    - The ``to_*_dto`` helpers are the single mapping point from domain
      entities so every use case emits identical shapes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from tickmark_api.application.schemas.dto.base import BaseDTO
from tickmark_api.domain.entities.industry_guidance import IndustryGuidance
from tickmark_api.domain.entities.materiality import (
    MaterialityCalculation,
    MaterialityInputs,
    MaterialityResult,
    MaterialityThresholds,
)
from tickmark_api.domain.enums.materiality import (
    BenchmarkType,
    MaterialityAdvisoryCode,
    RiskLevel,
)


class MaterialityInputsDTO(BaseDTO):
    """Materiality inputs as captured on a version."""

    benchmark_type: BenchmarkType
    benchmark_value: Decimal | None
    overall_materiality_percentage: Decimal
    performance_materiality_percentage: Decimal
    clearly_trivial_percentage: Decimal
    benchmark_rationale: str | None = None
    percentage_rationale: str | None = None
    additional_notes: str | None = None
    industry: str | None = None
    risk_level: RiskLevel = RiskLevel.MEDIUM
    benchmark_year: int | None = None


class MaterialityThresholdsDTO(BaseDTO):
    """Computed materiality thresholds."""

    overall_materiality: Decimal
    performance_materiality: Decimal
    clearly_trivial_threshold: Decimal


class MaterialityAdvisoryDTO(BaseDTO):
    """Non-blocking advisory flag."""

    code: MaterialityAdvisoryCode
    message: str


class MaterialityResultDTO(BaseDTO):
    """Outcome of a stateless materiality computation."""

    thresholds: MaterialityThresholdsDTO
    advisories: list[MaterialityAdvisoryDTO]
    approvable: bool


class MaterialityVersionDTO(BaseDTO):
    """A saved materiality version."""

    id: UUID
    engagement_id: str
    version: int
    is_current: bool
    is_approved: bool
    inputs: MaterialityInputsDTO
    thresholds: MaterialityThresholdsDTO
    created_at: datetime
    prepared_by: str | None = None
    previous_version_id: UUID | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None


class MaterialitySaveResultDTO(BaseDTO):
    """Outcome of a save: the current version and whether a new one was created."""

    version: MaterialityVersionDTO
    created: bool
    advisories: list[MaterialityAdvisoryDTO]


class MaterialityHistoryDTO(BaseDTO):
    """All versions for an engagement, newest first."""

    engagement_id: str
    versions: list[MaterialityVersionDTO]


class IndustryGuidanceDTO(BaseDTO):
    """Industry-specific materiality recommendation."""

    industry: str
    benchmark_type: BenchmarkType
    recommended_overall_pct: Decimal
    recommended_performance_pct: Decimal
    recommended_trivial_pct: Decimal
    typical_overall_min_pct: Decimal
    typical_overall_max_pct: Decimal
    rationale: str


class QualitativeAdjustmentDTO(BaseDTO):
    """Materiality amount before and after qualitative adjustments."""

    base_materiality: Decimal
    adjusted_materiality: Decimal
    factors_applied: int


class MaterialityRevisionDTO(BaseDTO):
    """Whether accumulated misstatements call for revisiting materiality."""

    should_revise: bool
    reason: str | None = None


def to_thresholds_dto(thresholds: MaterialityThresholds) -> MaterialityThresholdsDTO:
    """Map domain thresholds to their DTO."""
    return MaterialityThresholdsDTO(
        overall_materiality=thresholds.overall,
        performance_materiality=thresholds.performance,
        clearly_trivial_threshold=thresholds.clearly_trivial,
    )


def to_result_dto(result: MaterialityResult) -> MaterialityResultDTO:
    """Map a domain materiality result to its DTO."""
    return MaterialityResultDTO(
        thresholds=to_thresholds_dto(result.thresholds),
        advisories=[MaterialityAdvisoryDTO(code=a.code, message=a.message) for a in result.advisories],
        approvable=result.approvable,
    )


def to_inputs_dto(inputs: MaterialityInputs) -> MaterialityInputsDTO:
    """Map domain inputs to their DTO."""
    return MaterialityInputsDTO(
        benchmark_type=inputs.benchmark_type,
        benchmark_value=inputs.benchmark_value,
        overall_materiality_percentage=inputs.overall_materiality_percentage,
        performance_materiality_percentage=inputs.performance_materiality_percentage,
        clearly_trivial_percentage=inputs.clearly_trivial_percentage,
        benchmark_rationale=inputs.benchmark_rationale,
        percentage_rationale=inputs.percentage_rationale,
        additional_notes=inputs.additional_notes,
        industry=inputs.industry,
        risk_level=inputs.risk_level,
        benchmark_year=inputs.benchmark_year,
    )


def to_version_dto(version: MaterialityCalculation) -> MaterialityVersionDTO:
    """Map a saved materiality version to its DTO."""
    return MaterialityVersionDTO(
        id=version.id,
        engagement_id=version.engagement_id,
        version=version.version,
        is_current=version.is_current,
        is_approved=version.is_approved,
        inputs=to_inputs_dto(version.inputs),
        thresholds=to_thresholds_dto(version.thresholds),
        created_at=version.created_at,
        prepared_by=version.prepared_by,
        previous_version_id=version.previous_version_id,
        approved_at=version.approved_at,
        approved_by=version.approved_by,
    )


def to_guidance_dto(guidance: IndustryGuidance) -> IndustryGuidanceDTO:
    """Map industry guidance to its DTO."""
    return IndustryGuidanceDTO(
        industry=guidance.industry,
        benchmark_type=guidance.benchmark_type,
        recommended_overall_pct=guidance.recommended_overall_pct,
        recommended_performance_pct=guidance.recommended_performance_pct,
        recommended_trivial_pct=guidance.recommended_trivial_pct,
        typical_overall_min_pct=guidance.typical_overall_min_pct,
        typical_overall_max_pct=guidance.typical_overall_max_pct,
        rationale=guidance.rationale,
    )
