# tests/unit/infrastructure/test_json_logging.py
from __future__ import annotations

import json
import logging
import sys
from decimal import Decimal
from uuid import UUID

import pytest

from tickmark_api.infrastructure.logging.logger import (
    _JsonFormatter,
    configure_root_logging,
    get_json_logger,
    get_request_id,
    set_request_context,
)


def _record(msg: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("tickmark.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_stable_keys_and_extras() -> None:
    line = _JsonFormatter().format(
        _record(
            engagement_id="eng-1",
            amount=Decimal("1.50"),
            version_id=UUID("00000000-0000-0000-0000-000000000001"),
        )
    )
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["logger"] == "tickmark.test"
    assert payload["message"] == "hello"
    assert payload["engagement_id"] == "eng-1"
    assert payload["amount"] == "1.50"
    assert payload["version_id"] == "00000000-0000-0000-0000-000000000001"
    assert "ts" in payload
    assert "args" not in payload


def test_formatter_includes_request_id_from_record() -> None:
    payload = json.loads(_JsonFormatter().format(_record(request_id="rid-42")))

    assert payload["request_id"] == "rid-42"


def test_formatter_includes_exception_info() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "tickmark.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    payload = json.loads(_JsonFormatter().format(record))

    assert payload["exc_type"] == "ValueError"
    assert payload["exc_message"] == "boom"


def test_request_context_roundtrip() -> None:
    set_request_context(request_id="ctx-1")

    assert get_request_id() == "ctx-1"
    payload = json.loads(_JsonFormatter().format(_record()))
    assert payload["request_id"] == "ctx-1"


def test_configure_root_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_root_logging("debug")
    configure_root_logging("info")

    json_handlers = [h for h in root.handlers if isinstance(h.formatter, _JsonFormatter)]
    assert len(json_handlers) == 1
    assert root.level == logging.INFO


def test_configure_root_logging_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setenv("LOG_LEVEL", "warning")

    configure_root_logging()

    assert root.level == logging.WARNING


def test_get_json_logger_propagates() -> None:
    logger = get_json_logger("tickmark.some.module")

    assert logger.name == "tickmark.some.module"
    assert logger.propagate is True
