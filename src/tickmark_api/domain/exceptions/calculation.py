# src/tickmark_api/domain/exceptions/calculation.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Calculation domain exceptions.

Purpose:
    Error types raised by the materiality and sampling calculation kernels.

Layer:
    domain/exceptions

Notes:
    - Incomplete input (a field not yet entered) is not an error; the engines
      resolve it to a zero result. Only invalid or degenerate input raises.
"""

from __future__ import annotations

from tickmark_api.domain.exceptions.base import DomainError


class InvalidInput(DomainError):
    """Raised when a supplied value violates a hard input constraint.

    Examples: negative population value, confidence level outside
    {90, 95, 99}, non-finite numerics, percentages outside [0, 100].
    """

    code = "INVALID_INPUT"
    http_status = 400


class DegenerateComputation(DomainError):
    """Raised when a formula would divide by zero or yield a non-finite number."""

    code = "DEGENERATE_COMPUTATION"
    http_status = 422


__all__ = ["InvalidInput", "DegenerateComputation"]
