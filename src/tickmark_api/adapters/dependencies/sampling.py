# src/tickmark_api/adapters/dependencies/sampling.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Dependency wiring for sampling use cases.

Layer:
    adapters/dependencies

Notes:
    - Sampling use cases are stateless and share the process-wide engine.
"""

from __future__ import annotations

from functools import lru_cache

from tickmark_api.application.use_cases.sampling.compute_sampling import ComputeSamplingUseCase
from tickmark_api.application.use_cases.sampling.evaluate_sample import (
    EvaluateAttributeSampleUseCase,
    EvaluateMUSSampleUseCase,
)
from tickmark_api.application.use_cases.sampling.select_mus_items import SelectMUSItemsUseCase


@lru_cache(maxsize=1)
def get_compute_sampling_uc() -> ComputeSamplingUseCase:
    """Provide the sample size use case."""
    return ComputeSamplingUseCase()


@lru_cache(maxsize=1)
def get_select_mus_items_uc() -> SelectMUSItemsUseCase:
    """Provide the MUS selection use case."""
    return SelectMUSItemsUseCase()


@lru_cache(maxsize=1)
def get_evaluate_mus_sample_uc() -> EvaluateMUSSampleUseCase:
    """Provide the MUS evaluation use case."""
    return EvaluateMUSSampleUseCase()


@lru_cache(maxsize=1)
def get_evaluate_attribute_sample_uc() -> EvaluateAttributeSampleUseCase:
    """Provide the attribute evaluation use case."""
    return EvaluateAttributeSampleUseCase()
