# src/tickmark_api/domain/entities/sampling.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Sampling entities.

Purpose:
    Represent the tagged sampling input variants and the sample-size result
    with its computation trace for audit documentation.

Layer:
    domain/entities

Notes:
    - Each method has its own input type so unrelated fields never leak
      across formulas.
    - Numeric fields are ``None`` while not yet entered. The engine treats
      ``None`` and zero as incomplete, and negative values as invalid.
    - ``confidence_level`` is kept as a raw ``int`` so that out-of-range
      values surface as :class:`InvalidInput` from the engine rather than as
      construction errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar

from tickmark_api.domain.enums.sampling import SamplingMethod


@dataclass(frozen=True, slots=True)
class MUSInput:
    """Monetary Unit Sampling inputs."""

    method: ClassVar[SamplingMethod] = SamplingMethod.MUS

    population_value: Decimal | None
    tolerable_error: Decimal | None
    confidence_level: int = 95
    expected_misstatements: int = 0


@dataclass(frozen=True, slots=True)
class ClassicalVariablesInput:
    """Classical variables sampling inputs."""

    method: ClassVar[SamplingMethod] = SamplingMethod.CLASSICAL_VARIABLES

    population_size: int | None
    population_value: Decimal | None
    tolerable_error: Decimal | None
    confidence_level: int = 95


@dataclass(frozen=True, slots=True)
class AttributeInput:
    """Attribute (test of controls) sampling inputs.

    ``expected_error_rate`` is a percentage (``Decimal("2")`` means 2%).
    """

    method: ClassVar[SamplingMethod] = SamplingMethod.ATTRIBUTE

    population_size: int | None
    expected_error_rate: Decimal | None
    confidence_level: int = 95


SamplingInput = MUSInput | ClassicalVariablesInput | AttributeInput


@dataclass(frozen=True, slots=True)
class SamplingTrace:
    """Intermediate values on the formula path.

    Attributes:
        method: Formula variant used.
        confidence_level: Confidence level applied.
        reliability_factor: Table factor (MUS, attribute).
        sampling_interval: Floored monetary interval (MUS).
        z_value: Normal-distribution multiplier (classical).
        assumed_std_dev: Fixed 15%-of-value standard deviation (classical).
        tolerable_rate: Expected rate + 5 points (attribute).
        raw_sample_size: Size before the population cap.
        capped: True when the population cap reduced the size.
        incomplete: True when required inputs were missing.
        missing_fields: Names of the missing inputs.
    """

    method: SamplingMethod
    confidence_level: int
    reliability_factor: Decimal | None = None
    sampling_interval: Decimal | None = None
    z_value: Decimal | None = None
    assumed_std_dev: Decimal | None = None
    tolerable_rate: Decimal | None = None
    raw_sample_size: int | None = None
    capped: bool = False
    incomplete: bool = False
    missing_fields: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SamplingResult:
    """Sample size with its computation trace."""

    method: SamplingMethod
    sample_size: int
    trace: SamplingTrace

    def __post_init__(self) -> None:
        """Enforce invariants."""
        if self.trace.incomplete:
            if self.sample_size != 0:
                raise ValueError("Incomplete sampling results must have sample_size == 0.")
        elif self.sample_size < 1:
            raise ValueError("Complete sampling results must have a positive sample_size.")


__all__ = [
    "MUSInput",
    "ClassicalVariablesInput",
    "AttributeInput",
    "SamplingInput",
    "SamplingTrace",
    "SamplingResult",
]
