"""Reading and writing the document being reconciled."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..models import DiffOp
from ..utils.errors import DocumentReadError, DocumentWriteError
from .reconcile import merged_text

LOGGER = logging.getLogger(__name__)


def read_document(path: Path) -> str | None:
    """Return the document text, or None when the file does not exist yet."""

    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(str(path), str(exc)) from exc


def write_document(path: Path, operations: Iterable[DiffOp]) -> str:
    """Persist the merged document built from *operations* and return its text."""

    text = merged_text(operations)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DocumentWriteError(str(path), str(exc)) from exc
    LOGGER.info("Wrote %s (%d lines)", path, len(text.splitlines()))
    return text


__all__ = ["read_document", "write_document"]
