"""Request identifiers shared between the HTTP layer, logging and search tracing."""

from __future__ import annotations

import logging
import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..utils.logging import request_id_var

LOGGER = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Identifiers double as trace file names.
_SAFE_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def get_request_id(default: str | None = None) -> str | None:
    """Return the identifier of the request being served, if any."""

    return request_id_var.get() or default


def normalise_request_id(value: str | None) -> str:
    """Return *value* when it is usable as a file name, otherwise a fresh token."""

    candidate = (value or "").strip()
    if _SAFE_ID.match(candidate):
        return candidate
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request identifier for the duration of a request and echo it back."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        request_id = normalise_request_id(request.headers.get(self.header_name))
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
            LOGGER.debug("%s %s -> %s", request.method, request.url.path, response.status_code)
        finally:
            request_id_var.reset(token)
        response.headers[self.header_name] = request_id
        return response


__all__ = [
    "REQUEST_ID_HEADER",
    "RequestIdMiddleware",
    "get_request_id",
    "normalise_request_id",
]
