# src/tickmark_api/adapters/routers/metrics_router.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

Warms the lazily created counters and histograms so their series appear on
the very first scrape (cold start).

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from tickmark_api.infrastructure.observability.metrics import (
    get_db_errors_total,
    get_db_operation_duration_seconds,
    get_materiality_approvals_total,
    get_materiality_versions_saved_total,
    get_sampling_computations_total,
)

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics in the text exposition format."""
    get_materiality_versions_saved_total()
    get_materiality_approvals_total()
    get_sampling_computations_total()
    get_db_operation_duration_seconds()
    get_db_errors_total()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
