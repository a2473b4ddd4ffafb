"""Human readable previews of a merge."""

from __future__ import annotations

from typing import Iterable, List

from rich.console import Console
from rich.text import Text

from ..models import DiffOp, OpKind

STYLES = {
    OpKind.UNCHANGED: "grey50",
    OpKind.ADDED: "blue",
    OpKind.REMOVED: "red strike",
    OpKind.FRESH: "magenta",
}

MARKERS = {
    OpKind.UNCHANGED: " ",
    OpKind.ADDED: "+",
    OpKind.REMOVED: "-",
    OpKind.FRESH: "~",
}


def _display(op: DiffOp) -> str:
    line = op.line.strip()
    if op.kind is OpKind.REMOVED:
        return f"xxx {line} xxx"
    return line


def render_text(operations: Iterable[DiffOp]) -> Text:
    """Return a styled ``rich`` text with one row per operation."""

    text = Text()
    for op in operations:
        text.append(_display(op), style=STYLES[op.kind])
        text.append("\n")
    return text


def render_plain(operations: Iterable[DiffOp]) -> List[str]:
    """Return unstyled rows prefixed by a one-character marker, for logs and pipes."""

    return [f"{MARKERS[op.kind]} {_display(op)}" for op in operations]


def print_preview(operations: Iterable[DiffOp], console: Console | None = None) -> None:
    console = console or Console()
    if console.is_terminal:
        console.print(render_text(operations), end="")
        return
    for row in render_plain(operations):
        console.print(row, markup=False, highlight=False, soft_wrap=True)


__all__ = ["MARKERS", "STYLES", "print_preview", "render_plain", "render_text"]
