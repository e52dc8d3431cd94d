# src/tickmark_api/adapters/schemas/http/sampling_schemas.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""HTTP schemas for audit sampling.

Purpose:
    Request bodies and response payloads for the ``/v1/sampling`` routes.
    The sample-size request is a union discriminated on ``method``.

Layer:
    adapters/schemas/http

Notes:
    - Required numeric fields are nullable on purpose: a missing value yields
      an incomplete result (sample size 0) instead of a validation error.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import ConfigDict, Field, RootModel

from tickmark_api.adapters.schemas.http.base import BaseHTTPSchema, DecimalStr
from tickmark_api.domain.enums.sampling import (
    ControlRelianceConclusion,
    MisstatementConclusion,
    SamplingMethod,
)

__all__ = [
    "MUSRequestHTTP",
    "ClassicalVariablesRequestHTTP",
    "AttributeRequestHTTP",
    "SamplingComputeRequestHTTP",
    "SamplingTraceHTTP",
    "SamplingResultHTTP",
    "PopulationItemHTTP",
    "MUSSelectRequestHTTP",
    "MUSSelectionItemHTTP",
    "MUSSelectionHTTP",
    "TestedItemHTTP",
    "MUSEvaluateRequestHTTP",
    "MUSProjectionHTTP",
    "AttributeEvaluateRequestHTTP",
    "AttributeEvaluationHTTP",
]


# ---------------------------------------------------------------------------
# Sample size requests
# ---------------------------------------------------------------------------


class MUSRequestHTTP(BaseHTTPSchema):
    """Monetary unit sampling parameters."""

    model_config = ConfigDict(title="MUSRequest")

    method: Literal["MUS"]
    population_value: DecimalStr | None = None
    tolerable_error: DecimalStr | None = None
    confidence_level: int = 95
    expected_misstatements: int = 0


class ClassicalVariablesRequestHTTP(BaseHTTPSchema):
    """Classical variables (mean-per-unit) parameters."""

    model_config = ConfigDict(title="ClassicalVariablesRequest")

    method: Literal["classical_variables"]
    population_size: int | None = None
    population_value: DecimalStr | None = None
    tolerable_error: DecimalStr | None = None
    confidence_level: int = 95


class AttributeRequestHTTP(BaseHTTPSchema):
    """Attribute (test of controls) parameters."""

    model_config = ConfigDict(title="AttributeRequest")

    method: Literal["attribute"]
    population_size: int | None = None
    expected_error_rate: DecimalStr | None = None
    confidence_level: int = 95


SamplingRequestHTTP = Annotated[
    MUSRequestHTTP | ClassicalVariablesRequestHTTP | AttributeRequestHTTP,
    Field(discriminator="method"),
]


class SamplingComputeRequestHTTP(RootModel[SamplingRequestHTTP]):
    """Sample size request body, selected by ``method``."""


# ---------------------------------------------------------------------------
# Sample size response
# ---------------------------------------------------------------------------


class SamplingTraceHTTP(BaseHTTPSchema):
    """Intermediate values behind the sample size."""

    model_config = ConfigDict(title="SamplingTrace")

    confidence_level: int
    reliability_factor: DecimalStr | None = None
    sampling_interval: DecimalStr | None = None
    z_value: DecimalStr | None = None
    assumed_std_dev: DecimalStr | None = None
    tolerable_rate: DecimalStr | None = None
    raw_sample_size: int | None = None
    capped: bool = False
    incomplete: bool = False
    missing_fields: list[str] = Field(default_factory=list)


class SamplingResultHTTP(BaseHTTPSchema):
    """Computed sample size."""

    model_config = ConfigDict(title="SamplingResult")

    method: SamplingMethod
    sample_size: int
    trace: SamplingTraceHTTP


# ---------------------------------------------------------------------------
# MUS selection
# ---------------------------------------------------------------------------


class PopulationItemHTTP(BaseHTTPSchema):
    """Population line item."""

    model_config = ConfigDict(title="PopulationItem")

    item_id: str = Field(..., min_length=1, max_length=128)
    value: DecimalStr = Field(..., ge=Decimal("0"))


class MUSSelectRequestHTTP(BaseHTTPSchema):
    """Systematic monetary-unit selection request."""

    model_config = ConfigDict(title="MUSSelectRequest")

    population: list[PopulationItemHTTP] = Field(..., min_length=1)
    sample_size: int
    start_point: DecimalStr


class MUSSelectionItemHTTP(BaseHTTPSchema):
    """Population item with its running total."""

    model_config = ConfigDict(title="MUSSelectionItem")

    item_id: str
    cumulative_value: DecimalStr
    selected: bool


class MUSSelectionHTTP(BaseHTTPSchema):
    """Selection outcome."""

    model_config = ConfigDict(title="MUSSelection")

    sampling_interval: DecimalStr
    start_point: DecimalStr
    items: list[MUSSelectionItemHTTP]
    selected_ids: list[str]


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class TestedItemHTTP(BaseHTTPSchema):
    """Sample item with book and audited values."""

    __test__ = False

    model_config = ConfigDict(title="TestedItem")

    item_id: str = Field(..., min_length=1, max_length=128)
    book_value: DecimalStr
    audited_value: DecimalStr


class MUSEvaluateRequestHTTP(BaseHTTPSchema):
    """MUS evaluation request."""

    model_config = ConfigDict(title="MUSEvaluateRequest")

    items: list[TestedItemHTTP]
    sampling_interval: DecimalStr
    tolerable_misstatement: DecimalStr
    confidence_level: int = 95


class MUSProjectionHTTP(BaseHTTPSchema):
    """Upper misstatement limit build-up."""

    model_config = ConfigDict(title="MUSProjection")

    known_misstatement: DecimalStr
    projected_misstatement: DecimalStr
    basic_precision: DecimalStr
    incremental_allowance: DecimalStr
    upper_misstatement_limit: DecimalStr
    conclusion: MisstatementConclusion
    conclusion_rationale: str


class AttributeEvaluateRequestHTTP(BaseHTTPSchema):
    """Attribute evaluation request."""

    model_config = ConfigDict(title="AttributeEvaluateRequest")

    sample_size: int
    deviations: int
    tolerable_deviation_rate: DecimalStr
    confidence_level: int = 95


class AttributeEvaluationHTTP(BaseHTTPSchema):
    """Test-of-controls conclusion."""

    model_config = ConfigDict(title="AttributeEvaluation")

    sample_deviation_rate: DecimalStr
    upper_deviation_limit: DecimalStr
    conclusion: ControlRelianceConclusion
    conclusion_rationale: str
