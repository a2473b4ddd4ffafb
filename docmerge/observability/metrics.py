"""In-memory metrics for HTTP requests and reconciliation searches."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from threading import Lock
from time import perf_counter
from typing import Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


@dataclass
class RouteStats:
    count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0


@dataclass
class SearchStats:
    """Aggregates for one ordering strategy."""

    runs: int = 0
    nodes: int = 0
    pruned: int = 0
    incomplete: int = 0
    total_duration_ms: float = 0.0
    best_distance_total: int = 0


class MetricsRegistry:
    """Thread-safe collector shared by the middleware and the reconcile route."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        """Reset all counters (useful for tests)."""

        with self._lock:
            self._requests_total = 0
            self._status_families: Counter[str] = Counter()
            self._routes: Dict[str, RouteStats] = {}
            self._searches: Dict[str, SearchStats] = {}

    def request_finished(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_seconds: float,
    ) -> None:
        duration_ms = max(duration_seconds * 1000.0, 0.0)
        with self._lock:
            self._requests_total += 1
            self._status_families[f"{status_code // 100}xx"] += 1
            stats = self._routes.setdefault(f"{method.upper()} {path}", RouteStats())
            stats.count += 1
            stats.total_duration_ms += duration_ms
            stats.max_duration_ms = max(stats.max_duration_ms, duration_ms)

    def search_finished(
        self,
        strategy: str,
        *,
        nodes: int,
        pruned: int,
        distance: int,
        complete: bool,
        duration_seconds: float,
    ) -> None:
        """Record the outcome of one permutation search."""

        with self._lock:
            stats = self._searches.setdefault(strategy, SearchStats())
            stats.runs += 1
            stats.nodes += nodes
            stats.pruned += pruned
            stats.best_distance_total += distance
            stats.total_duration_ms += max(duration_seconds * 1000.0, 0.0)
            if not complete:
                stats.incomplete += 1

    def snapshot(self) -> Dict[str, object]:
        """Return a JSON-ready copy of the current metrics."""

        with self._lock:
            routes = {
                key: {
                    "count": stats.count,
                    "avg_duration_ms": stats.total_duration_ms / (stats.count or 1),
                    "max_duration_ms": stats.max_duration_ms,
                }
                for key, stats in self._routes.items()
            }
            searches = {
                key: {
                    "runs": stats.runs,
                    "nodes": stats.nodes,
                    "pruned": stats.pruned,
                    "incomplete": stats.incomplete,
                    "avg_distance": stats.best_distance_total / (stats.runs or 1),
                    "avg_duration_ms": stats.total_duration_ms / (stats.runs or 1),
                }
                for key, stats in self._searches.items()
            }
            return {
                "requests_total": self._requests_total,
                "status_codes": dict(self._status_families),
                "routes": routes,
                "searches": searches,
            }


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that records request metrics."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        registry: MetricsRegistry | None = None,
    ) -> None:
        super().__init__(app)
        self._registry = registry or metrics_registry

    async def dispatch(self, request: Request, call_next):
        start = perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._registry.request_finished(
                request.method, request.url.path, 500, perf_counter() - start
            )
            raise
        self._registry.request_finished(
            request.method,
            request.url.path,
            getattr(response, "status_code", 200),
            perf_counter() - start,
        )
        return response


metrics_registry = MetricsRegistry()

__all__ = [
    "MetricsRegistry",
    "RequestMetricsMiddleware",
    "SearchStats",
    "metrics_registry",
]
