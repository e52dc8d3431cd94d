"""Routers Package Export (Adapters Layer).

Purpose:
    Provide stable, explicit exports for the application router aggregator
    (`api_router`) and the Prometheus scrape router (`metrics_router`).

Layer:
    adapters/routers
"""

from __future__ import annotations

from .api_router import router as api_router  # noqa: F401
from .metrics_router import router as metrics_router  # noqa: F401

__all__ = ["api_router", "metrics_router"]
