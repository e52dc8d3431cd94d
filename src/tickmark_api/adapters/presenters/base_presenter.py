# src/tickmark_api/adapters/presenters/base_presenter.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Presenter utilities and canonical envelope helpers.

Purpose:
    Thin, framework-aware helpers used by routers to consistently shape HTTP
    responses and headers.

Responsibilities:
    * Build SuccessEnvelope instances.
    * Compute strong, quoted ETags from canonical JSON material.
    * Apply standard headers such as X-Request-ID.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from tickmark_api.adapters.schemas.http.envelopes import SuccessEnvelope

T = TypeVar("T")


def compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    digest = hashlib.sha256(material).hexdigest()
    return f'"{digest}"'


@dataclass(slots=True)
class PresentResult(Generic[T]):  # noqa: UP046
    """Presentation result envelope.

    Attributes:
        body: A Pydantic envelope instance.
        headers: Extra HTTP headers to apply.
        status_code: Optional HTTP status override.
    """

    body: T
    headers: Mapping[str, str]
    status_code: int | None = None


class BasePresenter:
    """Base presenter for HTTP response shaping in adapter layers.

    Assembles standard envelopes and headers, leaving all business decisions
    to the application layer.
    """

    def present_success(
        self,
        *,
        data: Any,
        trace_id: str | None = None,
        etag: bool = False,
        status_code: int | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Build a SuccessEnvelope and attach headers.

        Behavior:
            * Always echoes ``X-Request-ID`` when provided.
            * When ``etag`` is true, sets a **quoted** strong ``ETag`` computed
              from the JSON form of the envelope body.
        """
        body = SuccessEnvelope[Any](data=data)

        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        if etag:
            headers["ETag"] = compute_quoted_etag(body.model_dump(mode="json"))
        return PresentResult(body=body, headers=headers, status_code=status_code)
