"""Extract docblocks from ``//**`` and ``##**`` comments in source files.

Consecutive documentation lines form one docblock; any other line closes it::

    file1.js:                       [
        //** comment1                 ["comment1", "comment1"],
        //** comment1                 ["comment2"],
        code()                        ["comment3"],
        //** comment2               ]
    file2.py:
        ##** comment3
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from ..models import Docblock
from ..utils.errors import NoDocblocksError, SourceNotFoundError

LOGGER = logging.getLogger(__name__)

DOC_LINE_RE = re.compile(r"[/#][/#]\*\* (.*)")
DOC_BLANK_RE = re.compile(r"[/#][/#]\*\* ?$")

EXCLUDE_DIRS = frozenset(
    {
        "node_modules",
        "__pycache__",
        "venv",
        "env",
        "dist",
        "build",
        "vendor",
        "site-packages",
    }
)


def doc_comment(line: str) -> Optional[str]:
    """Return the documentation text carried by *line*, or None for code lines."""

    if DOC_BLANK_RE.search(line):
        return ""
    match = DOC_LINE_RE.search(line)
    if match:
        return match.group(1)
    return None


def extract_docblocks_from_text(
    text: str,
    source: str | None = None,
    start_index: int = 0,
) -> List[Docblock]:
    """Split *text* into docblocks, numbering them from *start_index*."""

    blocks: List[Docblock] = []
    active: List[str] | None = None
    active_start = 0

    def _close() -> None:
        if active:
            blocks.append(
                Docblock(
                    index=start_index + len(blocks),
                    lines=tuple(active),
                    source=source,
                    start_line=active_start,
                )
            )

    for line_no, line in enumerate(text.splitlines(), start=1):
        doc = doc_comment(line)
        if doc is None:
            _close()
            active = None
            continue
        if active is None:
            active = []
            active_start = line_no
        active.append(doc)
    _close()
    return blocks


def extract_docblocks_from_file(path: Path, start_index: int = 0) -> List[Docblock]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Skipping unreadable source %s: %s", path, exc)
        return []
    return extract_docblocks_from_text(text, source=str(path), start_index=start_index)


def _normalise_extensions(extensions: Iterable[str] | None) -> tuple[str, ...]:
    normalised: list[str] = []
    for item in extensions or ():
        for piece in item.split(","):
            piece = piece.strip().lstrip(".").lower()
            if piece:
                normalised.append("." + piece)
    return tuple(dict.fromkeys(normalised))


def _glob_variants(pattern: str) -> set[str]:
    """Expand *pattern* so that each ``**/`` may also match zero directories."""

    variants = {pattern}
    pending = [pattern]
    while pending:
        current = pending.pop()
        shorter = []
        if current.startswith("**/"):
            shorter.append(current[3:])
        if "/**/" in current:
            shorter.append(current.replace("/**/", "/", 1))
        for candidate in shorter:
            if candidate not in variants:
                variants.add(candidate)
                pending.append(candidate)
    return variants


def glob_match(relative: str, pattern: str) -> bool:
    """Match a relative posix path against a glob where ``**/`` spans any depth."""

    return any(fnmatch.fnmatch(relative, variant) for variant in _glob_variants(pattern))


def _skipped(relative: str, skip: Sequence[str]) -> bool:
    return any(
        glob_match(relative, pattern) or glob_match(relative, pattern.rstrip("/") + "/*")
        for pattern in skip
    )


def iter_source_files(
    roots: Iterable[str | Path],
    *,
    include: Sequence[str] = (),
    skip: Sequence[str] = (),
    extensions: Iterable[str] | None = None,
) -> Iterator[Path]:
    """Yield candidate source files under *roots* in a stable order.

    A root may be a file or a directory. ``include`` globs, when given, must
    match the path relative to its root; ``skip`` globs exclude it.
    """

    exts = _normalise_extensions(extensions)
    seen: set[Path] = set()
    for raw_root in roots:
        root = Path(raw_root).expanduser()
        if not root.exists():
            raise SourceNotFoundError(str(root))
        if root.is_file():
            candidates: Iterable[tuple[Path, str]] = [(root, root.name)]
        else:
            candidates = _walk(root)
        for path, relative in candidates:
            if exts and path.suffix.lower() not in exts:
                continue
            if include and not any(glob_match(relative, pattern) for pattern in include):
                continue
            if skip and _skipped(relative, skip):
                continue
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            yield path


def _walk(root: Path) -> Iterator[tuple[Path, str]]:
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(
            d for d in dirs if d not in EXCLUDE_DIRS and not d.startswith(".")
        )
        for name in sorted(files):
            path = Path(current) / name
            yield path, path.relative_to(root).as_posix()


def extract_docblocks(
    roots: Iterable[str | Path],
    *,
    include: Sequence[str] = (),
    skip: Sequence[str] = (),
    extensions: Iterable[str] | None = None,
) -> List[Docblock]:
    """Collect docblocks from every matching source file.

    Raises ``NoDocblocksError`` when nothing was found.
    """

    blocks: List[Docblock] = []
    files = 0
    for path in iter_source_files(
        roots, include=include, skip=skip, extensions=extensions
    ):
        files += 1
        blocks.extend(extract_docblocks_from_file(path, start_index=len(blocks)))
    LOGGER.info("Extracted %d docblocks from %d source files", len(blocks), files)
    if not blocks:
        raise NoDocblocksError(extra={"files_scanned": files})
    return blocks


__all__ = [
    "doc_comment",
    "extract_docblocks",
    "extract_docblocks_from_file",
    "extract_docblocks_from_text",
    "glob_match",
    "iter_source_files",
]
