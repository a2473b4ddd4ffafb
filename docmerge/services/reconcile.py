"""Reconcile extracted docblocks against an existing document."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from ..config import Settings, get_settings
from ..models import DiffOp, Docblock, OpKind, coerce_docblocks
from ..utils.trace import SearchTracer
from .search import SearchResult, Strategy, search

LOGGER = logging.getLogger(__name__)


def split_document(text: str | None) -> List[str]:
    """Split document text on line boundaries; empty text has no lines."""

    if not text:
        return []
    return text.splitlines()


def reconcile(
    docblocks: Iterable[Docblock | Sequence[str]],
    document_text: str | None,
    quick: bool = False,
    *,
    strategy: Strategy | str | None = None,
    settings: Settings | None = None,
    tracer: SearchTracer | None = None,
) -> SearchResult:
    """Return the best-matching merge of *docblocks* into *document_text*.

    ``quick`` selects the greedy strategy unless *strategy* names one
    explicitly. Lookahead and node budget come from *settings*.
    """

    settings = settings or get_settings()
    if strategy is None:
        chosen = Strategy.QUICK if quick else Strategy.parse(settings.strategy)
    else:
        chosen = Strategy.parse(strategy)

    blocks = coerce_docblocks(docblocks)
    lines = split_document(document_text)
    LOGGER.debug(
        "reconciling %d docblocks against %d document lines (%s)",
        len(blocks),
        len(lines),
        chosen.value,
    )
    return search(
        blocks,
        lines,
        chosen,
        lookahead=settings.lookahead,
        node_budget=settings.node_budget or None,
        tracer=tracer,
    )


def fresh_document(docblocks: Iterable[Docblock | Sequence[str]]) -> List[DiffOp]:
    """Operations for a first run, when there is no document to merge into."""

    return [
        DiffOp(OpKind.FRESH, line)
        for block in coerce_docblocks(docblocks)
        for line in block.lines
    ]


def merged_lines(operations: Iterable[DiffOp]) -> List[str]:
    return [op.line for op in operations if op.kept]


def merged_text(operations: Iterable[DiffOp]) -> str:
    """Return the merged document text: every line except removed ones."""

    return "\n".join(merged_lines(operations)).strip()


def summarize(operations: Iterable[DiffOp]) -> dict[str, int]:
    counts = Counter(op.kind for op in operations)
    return {kind.value: counts.get(kind, 0) for kind in OpKind}


def make_tracer(settings: Settings, run_id: Optional[str] = None) -> SearchTracer | None:
    """Return a tracer when search tracing is enabled in *settings*."""

    if not settings.trace:
        return None
    return SearchTracer(run_id=run_id, out_dir=str(settings.trace_dir))


__all__ = [
    "fresh_document",
    "make_tracer",
    "merged_lines",
    "merged_text",
    "reconcile",
    "split_document",
    "summarize",
]
