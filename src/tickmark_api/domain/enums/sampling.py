# src/tickmark_api/domain/enums/sampling.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Sampling enums.

Purpose:
    Define sampling methods, confidence levels, and evaluation conclusions
    used by the sampling kernel (AU-C 530).

Layer:
    domain/enums
"""

from __future__ import annotations

from enum import Enum, IntEnum


class SamplingMethod(str, Enum):
    """Sample-sizing formula variant."""

    MUS = "MUS"
    CLASSICAL_VARIABLES = "classical_variables"
    ATTRIBUTE = "attribute"


class ConfidenceLevel(IntEnum):
    """Supported confidence levels, in percent."""

    NINETY = 90
    NINETY_FIVE = 95
    NINETY_NINE = 99


class MisstatementConclusion(str, Enum):
    """Conclusion drawn from a substantive (MUS) sample evaluation."""

    ACCEPTABLE = "acceptable"
    REQUIRES_EXPANSION = "requires_expansion"
    UNACCEPTABLE = "unacceptable"


class ControlRelianceConclusion(str, Enum):
    """Conclusion drawn from an attribute (test of controls) sample evaluation."""

    RELIANCE_SUPPORTED = "reliance_supported"
    RELIANCE_NOT_SUPPORTED = "reliance_not_supported"


__all__ = [
    "SamplingMethod",
    "ConfidenceLevel",
    "MisstatementConclusion",
    "ControlRelianceConclusion",
]
