"""Test configuration for docmerge."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from docmerge.config import reset_settings_cache  # noqa: E402
from docmerge.observability import metrics_registry  # noqa: E402

_ENV_VARS = (
    "DOCMERGE_ENV_FILE",
    "DOCMERGE_README",
    "DOCMERGE_SRC",
    "DOCMERGE_SKIP",
    "DOCMERGE_EXT",
    "DOCMERGE_LOOKAHEAD",
    "DOCMERGE_STRATEGY",
    "DOCMERGE_NODE_BUDGET",
    "DOCMERGE_TRACE",
    "DOCMERGE_HSTS",
    "PORT",
    "HOST",
    "CORS_ALLOW_ORIGINS",
)


@pytest.fixture(autouse=True)
def _isolate_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Provide isolated configuration for each test."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOCMERGE_TRACE_DIR", str(tmp_path / "traces"))
    reset_settings_cache()
    metrics_registry.reset()
    yield
    reset_settings_cache()
    metrics_registry.reset()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """Return a test client for the FastAPI application."""

    from docmerge.main import app

    with TestClient(app) as test_client:
        yield test_client
