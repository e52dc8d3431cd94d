# src/tickmark_api/infrastructure/http/errors.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Application-level exception handlers.

Purpose:
    Map every error leaving a route onto the canonical error envelope
    ``{"error": {code, http_status, message, details, trace_id}}``:

        * ``DomainError`` subclasses use their own ``code`` and ``http_status``.
        * Request validation failures map to ``VALIDATION_ERROR`` (422).
        * ``HTTPException`` maps to ``HTTP_ERROR`` with its status.
        * Anything else maps to ``INTERNAL_ERROR`` (500).

Layer:
    infrastructure/http
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.responses import Response

from tickmark_api.domain.exceptions.base import DomainError
from tickmark_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    """Build the JSON body for an error response."""
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = jsonable_encoder(details)
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def _respond(request: Request, payload: dict[str, Any], status_code: int) -> Response:
    headers: dict[str, str] = {}
    trace_id = _trace_id(request)
    if trace_id:
        headers["X-Request-ID"] = trace_id
    return JSONResponse(status_code=status_code, content=payload, headers=headers)


async def handle_domain_error(request: Request, exc: Exception) -> Response:
    """Translate a ``DomainError`` into its envelope and HTTP status."""
    if not isinstance(exc, DomainError):  # pragma: no cover
        return await handle_unhandled_exception(request, exc)

    logger.info(
        "http.domain_error",
        extra={"code": exc.code, "http_status": exc.http_status, "path": request.url.path},
    )
    payload = error_envelope(
        code=exc.code,
        http_status=exc.http_status,
        message=exc.message,
        details=exc.details or None,
        trace_id=_trace_id(request),
    )
    return _respond(request, payload, exc.http_status)


async def handle_validation_error(request: Request, exc: Exception) -> Response:
    """Translate FastAPI request validation failures into ``VALIDATION_ERROR``."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": errors},
        trace_id=_trace_id(request),
    )
    return _respond(request, payload, 422)


async def handle_http_exception(request: Request, exc: Exception) -> Response:
    """Translate ``HTTPException`` into ``HTTP_ERROR``."""
    if not isinstance(exc, HTTPException):  # pragma: no cover
        return await handle_unhandled_exception(request, exc)
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return _respond(request, payload, exc.status_code)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    """Translate any other exception into ``INTERNAL_ERROR`` without leaking details."""
    logger.exception("http.unhandled_exception", extra={"path": request.url.path})
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        trace_id=_trace_id(request),
    )
    return _respond(request, payload, 500)


__all__ = [
    "error_envelope",
    "handle_domain_error",
    "handle_validation_error",
    "handle_http_exception",
    "handle_unhandled_exception",
]
