"""Incremental line-wise differ used to score candidate docblock orderings.

The walk keeps two pointers, one into the candidate data (the docblocks
concatenated in the order being evaluated) and one into the document. It never
rewinds, so a caller can score a prefix of an ordering, keep the returned
offsets and distance, and later resume from them with more data appended. A
running distance above ``bound`` aborts the walk immediately: the distance only
grows, so the branch can no longer beat the incumbent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models import DiffOp, OpKind
from ..utils.logging import TRACE_LEVEL
from .classify import insert_block_end, is_blank, is_fresh_line, is_insert_block_open

LOGGER = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD = 7


@dataclass(slots=True)
class AlignResult:
    """Outcome of one differ walk."""

    data_end: int
    doc_end: int
    distance: int
    operations: List[DiffOp] = field(default_factory=list)


class _Pruned(Exception):
    """Internal signal: the running distance exceeded the bound."""


class _Walk:
    """Mutable cursor state for a single ``align`` call."""

    __slots__ = ("data", "doc", "i", "j", "distance", "bound", "ops")

    def __init__(
        self,
        data: Sequence[str],
        doc: Sequence[str],
        i: int,
        j: int,
        distance: int,
        bound: Optional[int],
    ) -> None:
        self.data = data
        self.doc = doc
        self.i = i
        self.j = j
        self.distance = distance
        self.bound = bound
        self.ops: List[DiffOp] = []

    def charge(self, amount: int = 1) -> None:
        self.distance += amount
        if self.bound is not None and self.distance > self.bound:
            raise _Pruned()

    def emit(self, kind: OpKind, line: str) -> None:
        self.ops.append(DiffOp(kind, line, self.distance))

    def fresh_region(self) -> None:
        end = insert_block_end(self.doc, self.j)
        while self.j < end:
            self.emit(OpKind.FRESH, self.doc[self.j])
            self.j += 1

    def remove_doc_line(self) -> None:
        line = self.doc[self.j]
        self.j += 1
        if is_fresh_line(line):
            self.emit(OpKind.FRESH, line)
        else:
            self.charge()
            self.emit(OpKind.REMOVED, line)

    def add_data_line(self, charged: bool = True) -> None:
        line = self.data[self.i]
        self.i += 1
        if charged and not is_blank(line):
            self.charge()
        self.emit(OpKind.ADDED, line)


def _doc_lookahead(walk: _Walk, lookahead: int) -> int:
    """Offset of ``data[i]`` within the next document lines, 0 when absent."""

    target = walk.data[walk.i]
    limit = min(len(walk.doc), walk.j + lookahead + 1)
    for idx in range(walk.j + 1, limit):
        line = walk.doc[idx]
        if is_insert_block_open(line):
            break
        if line == target:
            return idx - walk.j
    return 0


def _data_lookahead(walk: _Walk, lookahead: int) -> int:
    """Offset of ``doc[j]`` within the next data lines, 0 when absent."""

    target = walk.doc[walk.j]
    limit = min(len(walk.data), walk.i + lookahead + 1)
    for idx in range(walk.i + 1, limit):
        if walk.data[idx] == target:
            return idx - walk.i
    return 0


def _step(walk: _Walk, lookahead: int) -> None:
    data_line = walk.data[walk.i]
    doc_line = walk.doc[walk.j]

    if is_insert_block_open(doc_line):
        walk.fresh_region()
        return

    if data_line == doc_line:
        walk.emit(OpKind.UNCHANGED, doc_line)
        walk.i += 1
        walk.j += 1
        return

    if is_blank(data_line):
        walk.i += 1
        return

    if is_fresh_line(doc_line):
        walk.emit(OpKind.FRESH, doc_line)
        walk.j += 1
        return

    offset = _doc_lookahead(walk, lookahead)
    if offset:
        for _ in range(offset):
            walk.remove_doc_line()
        return

    offset = _data_lookahead(walk, lookahead)
    if offset:
        for _ in range(offset):
            walk.add_data_line()
        return

    walk.remove_doc_line()
    walk.add_data_line()


def align(
    data: Sequence[str],
    doc: Sequence[str],
    data_start: int,
    doc_start: int,
    start_distance: int,
    is_partial: bool,
    *,
    bound: Optional[int] = None,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> Optional[AlignResult]:
    """Align ``data[data_start:]`` against ``doc[doc_start:]``.

    A partial walk stops once the data is consumed and leaves the rest of the
    document for the next call. A final walk also drains what is left of the
    document. Returns ``None`` when the distance exceeds ``bound``.
    """

    walk = _Walk(data, doc, data_start, doc_start, start_distance, bound)
    try:
        while walk.i < len(data) or (not is_partial and walk.j < len(doc)):
            if walk.j >= len(doc):
                walk.add_data_line(charged=False)
            elif walk.i >= len(data):
                if is_insert_block_open(doc[walk.j]):
                    walk.fresh_region()
                else:
                    walk.remove_doc_line()
            else:
                _step(walk, lookahead)
    except _Pruned:
        LOGGER.log(
            TRACE_LEVEL,
            "pruned at data=%d doc=%d distance=%d bound=%s",
            walk.i,
            walk.j,
            walk.distance,
            bound,
        )
        return None

    return AlignResult(
        data_end=walk.i,
        doc_end=walk.j,
        distance=walk.distance,
        operations=walk.ops,
    )


__all__ = ["AlignResult", "DEFAULT_LOOKAHEAD", "align"]
