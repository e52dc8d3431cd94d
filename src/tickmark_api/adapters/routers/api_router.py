# src/tickmark_api/adapters/routers/api_router.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose and expose the top-level `router` that includes all feature routers.

Responsibilities:
    • Mount materiality endpoints under `/v1/materiality/...`.
    • Mount sampling endpoints under `/v1/sampling/...`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from tickmark_api.adapters.routers.materiality_router import router as materiality_router
from tickmark_api.adapters.routers.sampling_router import router as sampling_router

router = APIRouter()

# BaseRouter already carries the /v1/materiality prefix.
router.include_router(materiality_router)

# BaseRouter already carries the /v1/sampling prefix.
router.include_router(sampling_router)
