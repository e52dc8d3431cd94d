# src/tickmark_api/domain/enums/materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Materiality enums.

Purpose:
    Define the benchmark, risk, advisory, and qualitative-factor vocabularies
    used by the materiality kernel (AU-C 320).

Layer:
    domain/enums
"""

from __future__ import annotations

from enum import Enum


class BenchmarkType(str, Enum):
    """Financial-statement benchmark from which overall materiality is derived."""

    REVENUE = "revenue"
    TOTAL_ASSETS = "total_assets"
    NET_INCOME = "net_income"
    EQUITY = "equity"
    EXPENSES = "expenses"


class RiskLevel(str, Enum):
    """Engagement-level risk assessment recorded alongside a calculation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MaterialityAdvisoryCode(str, Enum):
    """Non-blocking advisory flags attached to a materiality result."""

    NON_POSITIVE_BENCHMARK = "NON_POSITIVE_BENCHMARK"
    OVERALL_PERCENTAGE_OUTSIDE_RANGE = "OVERALL_PERCENTAGE_OUTSIDE_RANGE"
    PERFORMANCE_PERCENTAGE_OUTSIDE_RANGE = "PERFORMANCE_PERCENTAGE_OUTSIDE_RANGE"
    TRIVIAL_PERCENTAGE_OUTSIDE_RANGE = "TRIVIAL_PERCENTAGE_OUTSIDE_RANGE"
    BENCHMARK_PERCENTAGE_OUTSIDE_TYPICAL_RANGE = "BENCHMARK_PERCENTAGE_OUTSIDE_TYPICAL_RANGE"
    BENCHMARK_RATIONALE_TOO_SHORT = "BENCHMARK_RATIONALE_TOO_SHORT"


class QualitativeFactor(str, Enum):
    """Qualitative considerations that may move materiality up or down."""

    DEBT_COVENANTS = "debt_covenants"
    REGULATORY_REQUIREMENTS = "regulatory_requirements"
    RELATED_PARTY_TRANSACTIONS = "related_party_transactions"
    MANAGEMENT_INTEGRITY = "management_integrity"
    INDUSTRY_VOLATILITY = "industry_volatility"
    FIRST_YEAR_ENGAGEMENT = "first_year_engagement"
    PUBLIC_INTEREST = "public_interest"
    FRAUD_RISK = "fraud_risk"
    CONTROL_DEFICIENCIES = "control_deficiencies"
    PRIOR_YEAR_ADJUSTMENTS = "prior_year_adjustments"


class FactorAssessment(str, Enum):
    """Direction in which a qualitative factor moves materiality."""

    INCREASES = "increases"
    DECREASES = "decreases"
    NO_IMPACT = "no_impact"


__all__ = [
    "BenchmarkType",
    "RiskLevel",
    "MaterialityAdvisoryCode",
    "QualitativeFactor",
    "FactorAssessment",
]
