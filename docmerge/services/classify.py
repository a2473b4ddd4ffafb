"""Line predicates used by the differ and by preview rendering."""

from __future__ import annotations

import re
from typing import Sequence

IMAGE_MD_RE = re.compile(r"^\s*!\[[^\]]*\]\([^)]*\)\s*$")
SOLE_HTML_TAG_RE = re.compile(r"^<[^<>]+>$")
INSERT_BLOCK_OPEN_RE = re.compile(
    r"^\s*<div\b[^>]*\bclass\s*=\s*([\"'])[^\"']*\binsert-block\b[^\"']*\1[^>]*>\s*$"
)
INSERT_BLOCK_CLOSE = "</div>"


def is_blank(line: str | None) -> bool:
    return not line or not line.strip()


def is_special_line(line: str | None) -> bool:
    """Return True for image references and lines holding a single HTML tag."""

    if not line:
        return False
    if IMAGE_MD_RE.match(line):
        return True
    return bool(SOLE_HTML_TAG_RE.match(line.strip()))


def is_insert_block_open(line: str | None) -> bool:
    """Return True when *line* opens a ``<div class="... insert-block ...">`` region."""

    if not line:
        return False
    if line.rstrip().endswith("/>"):
        return False
    return bool(INSERT_BLOCK_OPEN_RE.match(line))


def is_insert_block_close(line: str | None) -> bool:
    return bool(line) and line.strip() == INSERT_BLOCK_CLOSE


def is_fresh_line(line: str | None) -> bool:
    """Blank and special document lines are kept even when no docblock has them."""

    return is_blank(line) or is_special_line(line)


def insert_block_end(doc: Sequence[str], start: int) -> int:
    """Return the index one past the region opened at ``doc[start]``.

    An unterminated region runs to the end of the document.
    """

    for idx in range(start + 1, len(doc)):
        if is_insert_block_close(doc[idx]):
            return idx + 1
    return len(doc)


__all__ = [
    "insert_block_end",
    "is_blank",
    "is_fresh_line",
    "is_insert_block_close",
    "is_insert_block_open",
    "is_special_line",
]
