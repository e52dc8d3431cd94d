# src/tickmark_api/infrastructure/observability/metrics.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Accessor functions return collectors bound to the **current**
``prometheus_client.REGISTRY``:

    * Safe under hot reload and tests that swap the default registry.
    * No duplicate-registration errors.
    * Cache automatically resets when the active registry changes.

All histograms use explicit buckets so ``_bucket/_count/_sum`` series appear
after the first ``observe(...)`` call.

Example:
    get_sampling_computations_total().labels(method="MUS", outcome="computed").inc()

    with observe_db_operation("materiality_versions", "append"):
        ...
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from typing import Final, TypeVar

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

_TCollector = TypeVar("_TCollector", Counter, Histogram)

# Common histogram buckets (seconds)
_BUCKETS: Final[tuple[float, ...]] = (
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
    10.000,
)

# Cache keyed by metric name within the currently-active registry.
_registry_id: int | None = None
_hist_cache: dict[str, Histogram] = {}
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


# ---------------------------------------------------------------------------
# Registry-handling primitives


def _ensure_registry() -> None:
    """Reset caches if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id is None or _registry_id != rid:
            _hist_cache.clear()
            _counter_cache.clear()
            _registry_id = rid


def _lookup_existing(  # noqa: UP047
    name: str, kind: type[_TCollector]
) -> _TCollector | None:
    """Return a previously-registered collector of ``kind`` from the active registry."""
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, kind):
                return col
    return None


# ---------------------------------------------------------------------------
# Get-or-create helpers


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    buckets: tuple[float, ...] = _BUCKETS,
    labelnames: tuple[str, ...] = (),
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity.

    Strategy:
        1. Return from module cache if present for the active registry.
        2. If the registry already has a collector by this name, reuse it.
        3. Otherwise, register a new collector on the active registry.
        4. If concurrent registration raises a duplication error, retry step 2.
    """
    _ensure_registry()
    with _lock:
        cached = _hist_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name, Histogram)
        if existing is not None:
            _hist_cache[name] = existing
            return existing

        try:
            h = Histogram(name, help_text, labelnames, buckets=buckets, registry=prom.REGISTRY)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, Histogram)
                if again is not None:
                    _hist_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus histogram %s", name)
            raise
        _hist_cache[name] = h
        return h


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity."""
    _ensure_registry()
    with _lock:
        cached = _counter_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name, Counter)
        if existing is not None:
            _counter_cache[name] = existing
            return existing

        try:
            c = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, Counter)
                if again is not None:
                    _counter_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus counter %s", name)
            raise
        _counter_cache[name] = c
        return c


# ---------------------------------------------------------------------------
# Materiality metrics


def get_materiality_versions_saved_total() -> Counter:
    """Return counter for materiality versions persisted.

    Labels:
        result: ``created`` for a new version, ``unchanged`` when the save
            matched the current inputs.
    """
    return _get_or_create_counter(
        name="materiality_versions_saved_total",
        help_text="Materiality save requests by result",
        labelnames=("result",),
    )


def get_materiality_approvals_total() -> Counter:
    """Return counter for materiality approvals recorded."""
    return _get_or_create_counter(
        name="materiality_approvals_total",
        help_text="Materiality versions approved",
    )


# ---------------------------------------------------------------------------
# Sampling metrics


def get_sampling_computations_total() -> Counter:
    """Return counter for sampling computations.

    Labels:
        method: ``MUS``, ``classical_variables`` or ``attribute``.
        outcome: ``computed``, ``incomplete``, ``invalid`` or ``degenerate``.
    """
    return _get_or_create_counter(
        name="sampling_computations_total",
        help_text="Sample size computations by method and outcome",
        labelnames=("method", "outcome"),
    )


# ---------------------------------------------------------------------------
# Persistence metrics


def get_db_operation_duration_seconds() -> Histogram:
    """Return histogram for repository operation latency.

    Labels:
        repository: Repository name.
        operation: Operation name (``append``, ``get_current``, ...).
    """
    return _get_or_create_hist(
        name="db_operation_duration_seconds",
        help_text="Latency (seconds) of repository operations",
        labelnames=("repository", "operation"),
    )


def get_db_errors_total() -> Counter:
    """Return counter for repository errors.

    Labels:
        repository: Repository name.
        operation: Operation name.
        reason: Exception class name.
    """
    return _get_or_create_counter(
        name="db_errors_total",
        help_text="Errors raised by repository operations",
        labelnames=("repository", "operation", "reason"),
    )


@contextmanager
def observe_db_operation(repository: str, operation: str) -> Iterator[None]:
    """Time a repository operation and count the exception it raises, if any.

    Args:
        repository: Repository name label.
        operation: Operation name label.
    """
    start = time.perf_counter()
    try:
        yield
    except Exception as exc:
        get_db_errors_total().labels(
            repository=repository, operation=operation, reason=type(exc).__name__
        ).inc()
        raise
    finally:
        get_db_operation_duration_seconds().labels(
            repository=repository, operation=operation
        ).observe(time.perf_counter() - start)


__all__ = [
    "get_materiality_versions_saved_total",
    "get_materiality_approvals_total",
    "get_sampling_computations_total",
    "get_db_operation_duration_seconds",
    "get_db_errors_total",
    "observe_db_operation",
]
