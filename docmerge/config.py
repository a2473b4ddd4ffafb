"""Configuration utilities for docmerge."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _env_flag(name: str, default: bool) -> bool:
    """Return a boolean flag derived from environment variables."""

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    """Return a tuple of non-empty, comma-separated items from *name*."""

    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


DEFAULT_EXTENSIONS = "js,py,java,sql,ts,sh,go,c,cpp"
DEFAULT_LOOKAHEAD = 7
STRATEGIES = ("exhaustive", "quick", "seeded")


def _load_environment() -> None:
    """Load environment variables from a ``.env`` file if present."""

    explicit_path = os.getenv("DOCMERGE_ENV_FILE")
    candidates = []

    if explicit_path:
        candidates.append(Path(explicit_path))

    # Relative to the working directory, i.e. the repository being documented.
    candidates.append(Path.cwd() / ".env")

    for candidate in candidates:
        try_path = candidate.expanduser()
        if try_path.exists():
            load_dotenv(try_path, override=False)


_load_environment()


class Settings(BaseModel):
    """Tool configuration loaded from environment variables."""

    model_config = ConfigDict(validate_default=True)

    readme_path: Path = Field(
        default_factory=lambda: Path(os.getenv("DOCMERGE_README", "README.md"))
    )
    src_roots: Tuple[str, ...] = Field(
        default_factory=lambda: _env_list("DOCMERGE_SRC", ".")
    )
    skip_globs: Tuple[str, ...] = Field(
        default_factory=lambda: _env_list("DOCMERGE_SKIP", "")
    )
    extensions: Tuple[str, ...] = Field(
        default_factory=lambda: _env_list("DOCMERGE_EXT", DEFAULT_EXTENSIONS)
    )
    lookahead: int = Field(
        default_factory=lambda: int(
            os.getenv("DOCMERGE_LOOKAHEAD", str(DEFAULT_LOOKAHEAD))
        )
    )
    strategy: str = Field(
        default_factory=lambda: os.getenv("DOCMERGE_STRATEGY", "exhaustive")
    )
    node_budget: int = Field(
        default_factory=lambda: int(os.getenv("DOCMERGE_NODE_BUDGET", "0"))
    )
    trace: bool = Field(default_factory=lambda: _env_flag("DOCMERGE_TRACE", False))
    trace_dir: Path = Field(
        default_factory=lambda: Path(
            os.getenv("DOCMERGE_TRACE_DIR", str(Path.cwd() / "logs" / "search"))
        )
    )
    host: str = Field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "7610")))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))
    cors_allow_origins: Tuple[str, ...] = Field(
        default_factory=lambda: _env_list("CORS_ALLOW_ORIGINS", "")
    )
    hsts: bool = Field(default_factory=lambda: _env_flag("DOCMERGE_HSTS", False))

    @field_validator("extensions", mode="after")
    @classmethod
    def _normalise_extensions(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        normalised = []
        for item in value:
            for piece in item.split(","):
                piece = piece.strip().lstrip(".").lower()
                if piece:
                    normalised.append("." + piece)
        if not normalised:
            return tuple("." + ext for ext in DEFAULT_EXTENSIONS.split(","))
        return tuple(dict.fromkeys(normalised))

    @field_validator("lookahead", mode="after")
    @classmethod
    def _clamp_lookahead(cls, value: int) -> int:
        return max(1, value)

    @field_validator("strategy", mode="after")
    @classmethod
    def _normalise_strategy(cls, value: str) -> str:
        cleaned = value.strip().lower()
        if cleaned not in STRATEGIES:
            raise ValueError(
                f"strategy must be one of {', '.join(STRATEGIES)}, got {value!r}"
            )
        return cleaned

    @field_validator("node_budget", mode="after")
    @classmethod
    def _normalise_budget(cls, value: int) -> int:
        return max(0, value)

    @field_validator("src_roots", mode="after")
    @classmethod
    def _default_src(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return value or (".",)


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached settings so that subsequent calls reload from the environment."""

    get_settings.cache_clear()
