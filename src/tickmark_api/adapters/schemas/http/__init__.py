# src/tickmark_api/adapters/schemas/http/__init__.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""HTTP schemas (adapters layer)."""

from tickmark_api.adapters.schemas.http.base import BaseHTTPSchema, DecimalStr
from tickmark_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
)

__all__ = [
    "BaseHTTPSchema",
    "DecimalStr",
    "ErrorEnvelope",
    "ErrorObject",
    "SuccessEnvelope",
]
