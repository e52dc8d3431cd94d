# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Domain exception exports."""

from __future__ import annotations

from .base import DomainError
from .calculation import DegenerateComputation, InvalidInput
from .materiality import AlreadyApproved, NotCurrentVersion, VersionConflict, VersionNotFound

__all__ = [
    "DomainError",
    "InvalidInput",
    "DegenerateComputation",
    "VersionConflict",
    "NotCurrentVersion",
    "AlreadyApproved",
    "VersionNotFound",
]
