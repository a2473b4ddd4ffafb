from __future__ import annotations

from typing import Any, Dict


class DocmergeError(Exception):
    """Base class for failures surfaced to CLI and HTTP callers."""

    def __init__(self, code: str, message: str, extra: Dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.extra = extra or {}


class NoDocblocksError(DocmergeError):
    """Raised when no documentation comments were found in the sources."""

    def __init__(self, message: str = "No documentation comments found!", extra: Dict[str, Any] | None = None):
        super().__init__("no_docblocks", message, extra)


class SourceNotFoundError(DocmergeError):
    """Raised when a configured source root does not exist."""

    def __init__(self, path: str, extra: Dict[str, Any] | None = None) -> None:
        super().__init__("source_not_found", f"Source path not found: {path}", extra)
        self.path = path


class DocumentWriteError(DocmergeError):
    """Raised when the merged document cannot be persisted."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            "document_write_failed",
            f"Failed to write {path}: {reason}",
            {"path": path},
        )
        self.path = path


class DocumentReadError(DocmergeError):
    """Raised when an existing document cannot be read as UTF-8 text."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            "document_read_failed",
            f"Failed to read {path}: {reason}",
            {"path": path},
        )
        self.path = path


class ConfigurationError(DocmergeError):
    """Raised when environment settings fail validation."""

    def __init__(self, message: str) -> None:
        super().__init__("invalid_config", f"Invalid configuration: {message}")
