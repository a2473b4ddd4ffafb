"""Response hardening for the JSON API."""

from __future__ import annotations

from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

# The service only ever answers with JSON, so nothing needs to load.
API_CONTENT_SECURITY_POLICY = "default-src 'none'; frame-ancestors 'none'"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add default security headers without overriding ones a route already set."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        hsts: bool = False,
        content_security_policy: str | None = API_CONTENT_SECURITY_POLICY,
    ) -> None:
        super().__init__(app)
        self._defaults: Dict[str, str] = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "Referrer-Policy": "no-referrer",
            # Merged documents may contain private notes.
            "Cache-Control": "no-store",
        }
        if content_security_policy:
            self._defaults["Content-Security-Policy"] = content_security_policy
        if hsts:
            self._defaults["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        for name, value in self._defaults.items():
            response.headers.setdefault(name, value)
        return response


__all__ = ["API_CONTENT_SECURITY_POLICY", "SecurityHeadersMiddleware"]
