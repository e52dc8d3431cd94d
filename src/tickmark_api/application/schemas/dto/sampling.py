# src/tickmark_api/application/schemas/dto/sampling.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Application DTOs for sample sizing, selection and evaluation.

Layer:
    application/schemas/dto

Notes:
    - Rates in evaluation DTOs are fractions (``0.05`` means 5%).
"""

from __future__ import annotations

from decimal import Decimal

from tickmark_api.application.schemas.dto.base import BaseDTO
from tickmark_api.domain.entities.sampling import SamplingResult
from tickmark_api.domain.entities.sampling_evaluation import (
    AttributeEvaluation,
    MUSProjection,
    MUSSelection,
)
from tickmark_api.domain.enums.sampling import (
    ControlRelianceConclusion,
    MisstatementConclusion,
    SamplingMethod,
)


class SamplingTraceDTO(BaseDTO):
    """Intermediate values behind a sample size."""

    confidence_level: int
    reliability_factor: Decimal | None = None
    sampling_interval: Decimal | None = None
    z_value: Decimal | None = None
    assumed_std_dev: Decimal | None = None
    tolerable_rate: Decimal | None = None
    raw_sample_size: int | None = None
    capped: bool = False
    incomplete: bool = False
    missing_fields: list[str] = []


class SamplingResultDTO(BaseDTO):
    """Computed sample size with its trace."""

    method: SamplingMethod
    sample_size: int
    trace: SamplingTraceDTO


class MUSSelectionItemDTO(BaseDTO):
    """Population item annotated for monetary-unit selection."""

    item_id: str
    cumulative_value: Decimal
    selected: bool


class MUSSelectionDTO(BaseDTO):
    """Outcome of a monetary-unit selection pass."""

    sampling_interval: Decimal
    start_point: Decimal
    items: list[MUSSelectionItemDTO]
    selected_ids: list[str]


class MUSProjectionDTO(BaseDTO):
    """Upper misstatement limit build-up."""

    known_misstatement: Decimal
    projected_misstatement: Decimal
    basic_precision: Decimal
    incremental_allowance: Decimal
    upper_misstatement_limit: Decimal
    conclusion: MisstatementConclusion
    conclusion_rationale: str


class AttributeEvaluationDTO(BaseDTO):
    """Outcome of a test-of-controls evaluation."""

    sample_deviation_rate: Decimal
    upper_deviation_limit: Decimal
    conclusion: ControlRelianceConclusion
    conclusion_rationale: str


def to_sampling_result_dto(result: SamplingResult) -> SamplingResultDTO:
    """Map a domain sampling result to its DTO."""
    trace = result.trace
    return SamplingResultDTO(
        method=result.method,
        sample_size=result.sample_size,
        trace=SamplingTraceDTO(
            confidence_level=trace.confidence_level,
            reliability_factor=trace.reliability_factor,
            sampling_interval=trace.sampling_interval,
            z_value=trace.z_value,
            assumed_std_dev=trace.assumed_std_dev,
            tolerable_rate=trace.tolerable_rate,
            raw_sample_size=trace.raw_sample_size,
            capped=trace.capped,
            incomplete=trace.incomplete,
            missing_fields=list(trace.missing_fields),
        ),
    )


def to_selection_dto(selection: MUSSelection) -> MUSSelectionDTO:
    """Map a domain MUS selection to its DTO."""
    return MUSSelectionDTO(
        sampling_interval=selection.sampling_interval,
        start_point=selection.start_point,
        items=[
            MUSSelectionItemDTO(
                item_id=i.item_id,
                cumulative_value=i.cumulative_value,
                selected=i.selected,
            )
            for i in selection.items
        ],
        selected_ids=list(selection.selected_ids),
    )


def to_projection_dto(projection: MUSProjection) -> MUSProjectionDTO:
    """Map a domain MUS projection to its DTO."""
    return MUSProjectionDTO(
        known_misstatement=projection.known_misstatement,
        projected_misstatement=projection.projected_misstatement,
        basic_precision=projection.basic_precision,
        incremental_allowance=projection.incremental_allowance,
        upper_misstatement_limit=projection.upper_misstatement_limit,
        conclusion=projection.conclusion,
        conclusion_rationale=projection.conclusion_rationale,
    )


def to_attribute_evaluation_dto(evaluation: AttributeEvaluation) -> AttributeEvaluationDTO:
    """Map a domain attribute evaluation to its DTO."""
    return AttributeEvaluationDTO(
        sample_deviation_rate=evaluation.sample_deviation_rate,
        upper_deviation_limit=evaluation.upper_deviation_limit,
        conclusion=evaluation.conclusion,
        conclusion_rationale=evaluation.conclusion_rationale,
    )
