"""Health check API router."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from docmerge import __version__


class HealthResponse(BaseModel):
    """Liveness payload with the running package version."""

    ok: bool
    version: str


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Service health status")
def read_health() -> HealthResponse:
    """Report that the service is up and which release is serving."""

    return HealthResponse(ok=True, version=__version__)


__all__ = ["router", "HealthResponse", "read_health"]
