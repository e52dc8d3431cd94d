# src/tickmark_api/domain/exceptions/materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Materiality version-ledger exceptions.

Purpose:
    Errors for the save/approve state machine over materiality versions.

Layer:
    domain/exceptions
"""

from __future__ import annotations

from tickmark_api.domain.exceptions.base import DomainError


class VersionConflict(DomainError):
    """Raised when a save was based on a stale current-version id."""

    code = "VERSION_CONFLICT"
    http_status = 409


class NotCurrentVersion(DomainError):
    """Raised when approving a version that is not the engagement's current one."""

    code = "NOT_CURRENT_VERSION"
    http_status = 409


class AlreadyApproved(DomainError):
    """Raised when approving a version whose approval is already recorded."""

    code = "ALREADY_APPROVED"
    http_status = 409


class VersionNotFound(DomainError):
    """Raised when a materiality version id does not exist in the ledger."""

    code = "VERSION_NOT_FOUND"
    http_status = 404


__all__ = ["VersionConflict", "NotCurrentVersion", "AlreadyApproved", "VersionNotFound"]
