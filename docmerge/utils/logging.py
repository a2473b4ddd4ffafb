from __future__ import annotations

import contextvars
import logging
import os
import sys

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] | %(message)s"

# Set by the HTTP middleware while a request is being served.
request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "docmerge_request_id", default=None
)


def trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:  # type: ignore[override]
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, msg, args, **kwargs)


logging.Logger.trace = trace  # type: ignore[attr-defined]


class RequestIdLogFilter(logging.Filter):
    """Stamp every record with ``request_id`` (``-`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def configure_logging(default_level: str = "INFO") -> logging.Logger:
    """Configure root logging once and return the ``docmerge`` logger."""

    level_name = os.getenv("DOCMERGE_LOG_LEVEL", default_level).upper()
    if level_name == "TRACE":
        level = TRACE_LEVEL
    else:
        level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, stream=sys.stderr, format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdLogFilter) for f in handler.filters):
            handler.addFilter(RequestIdLogFilter())
    return logging.getLogger("docmerge")


__all__ = ["TRACE_LEVEL", "RequestIdLogFilter", "configure_logging", "request_id_var"]
