from __future__ import annotations

import logging

from docmerge.utils.logging import TRACE_LEVEL, RequestIdLogFilter, request_id_var


def _record() -> logging.LogRecord:
    return logging.LogRecord("docmerge", logging.INFO, __file__, 1, "msg", (), None)


def test_filter_uses_placeholder_outside_requests() -> None:
    record = _record()

    assert RequestIdLogFilter().filter(record)
    assert record.request_id == "-"


def test_filter_stamps_current_request_id() -> None:
    token = request_id_var.set("abc123")
    try:
        record = _record()
        RequestIdLogFilter().filter(record)
    finally:
        request_id_var.reset(token)

    assert record.request_id == "abc123"


def test_trace_level_is_registered() -> None:
    assert logging.getLevelName(TRACE_LEVEL) == "TRACE"
    assert hasattr(logging.getLogger("docmerge.test"), "trace")
