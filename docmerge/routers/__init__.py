"""API router package."""

from fastapi import APIRouter

from .extract import router as extract_router
from .health import router as health_router
from .observability import router as observability_router
from .reconcile import router as reconcile_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(reconcile_router)
api_router.include_router(extract_router)
api_router.include_router(observability_router)

__all__ = ["api_router"]
