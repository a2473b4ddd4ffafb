"""docmerge HTTP service entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .middleware import RequestIdMiddleware, SecurityHeadersMiddleware
from .observability import RequestMetricsMiddleware
from .routers import api_router
from .utils.errors import DocmergeError
from .utils.logging import configure_logging


configure_logging()
settings = get_settings()
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="docmerge", version=__version__)
if settings.cors_allow_origins:
    origins = list(settings.cors_allow_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
app.add_middleware(RequestIdMiddleware)
app.add_middleware(SecurityHeadersMiddleware, hsts=settings.hsts)
app.add_middleware(RequestMetricsMiddleware)
app.include_router(api_router)


@app.exception_handler(DocmergeError)
async def handle_docmerge_error(request: Request, exc: DocmergeError) -> JSONResponse:
    """Report known failures with their code instead of a bare 500."""

    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message, "code": exc.code, "extra": exc.extra},
    )


@app.exception_handler(Exception)
async def handle_unexpected_exception(
    request: Request, exc: Exception
) -> JSONResponse:
    """Ensure unexpected exceptions return a JSON payload."""

    logger.exception(
        "Unhandled exception while processing %s %s", request.method, request.url.path
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
    )


__all__ = ["app"]
