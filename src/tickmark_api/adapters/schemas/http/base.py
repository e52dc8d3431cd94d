# src/tickmark_api/adapters/schemas/http/base.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""
Base HTTP Schema (Adapters Layer)

Purpose:
    Canonical Pydantic base for all adapter-layer HTTP schemas.
    Enforces strict config and deterministic JSON encoding.

Layer: adapters/schemas/http

Notes:
    - Transport-facing only. Application DTOs must not import from this module.
    - Amounts are emitted as plain decimal strings (no exponent) so clients
      never lose precision.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, PlainSerializer


def _format_decimal(value: Decimal) -> str:
    """Render a Decimal without scientific notation."""
    if value == 0:
        return "0"
    return format(value, "f")


#: Decimal that serializes to a fixed-point string in JSON.
DecimalStr = Annotated[
    Decimal,
    PlainSerializer(_format_decimal, return_type=str, when_used="json"),
]


class BaseHTTPSchema(BaseModel):
    """Base class for all HTTP-facing schemas.

    Attributes:
        model_config: Pydantic v2 ``ConfigDict`` with strict validation.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def model_dump_http(self, **kwargs: Any) -> dict[str, Any]:
        """Return a JSON-serializable dict suitable for HTTP responses.

        Args:
            **kwargs: Optional Pydantic dump settings (e.g., ``exclude_none=True``).
        """
        return self.model_dump(mode="json", **kwargs)
