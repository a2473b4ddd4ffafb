"""Routes that expose operational observability data."""

from __future__ import annotations

from fastapi import APIRouter

from docmerge import __version__
from ..config import get_settings
from ..observability import metrics_registry

router = APIRouter(prefix="/api", tags=["observability"])


@router.get("/metrics")
def read_metrics() -> dict[str, object]:
    """Return the current request and search metrics snapshot."""

    return metrics_registry.snapshot()


@router.get("/status")
def read_status() -> dict[str, object]:
    """Return the version, active search configuration and metrics."""

    settings = get_settings()
    return {
        "app": {"version": __version__},
        "search": {
            "strategy": settings.strategy,
            "lookahead": settings.lookahead,
            "node_budget": settings.node_budget,
            "trace": settings.trace,
        },
        "metrics": metrics_registry.snapshot(),
    }


__all__ = ["router"]
