"""Permutation search over docblock orderings.

The exhaustive strategy is a branch-and-bound walk over every ordering of the
docblocks. Each node of the search tree resumes the differ from its parent's
offsets and distance with one more docblock appended, so a prefix is aligned
once no matter how many orderings share it. The shared ``SearchContext`` holds
the best complete ordering found so far and bounds every differ call with it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from ..models import DiffOp, Docblock, coerce_docblocks
from .differ import DEFAULT_LOOKAHEAD, align

if TYPE_CHECKING:
    from ..utils.trace import SearchTracer

LOGGER = logging.getLogger(__name__)


class Strategy(str, Enum):
    """Ordering strategies selectable by the caller."""

    EXHAUSTIVE = "exhaustive"
    QUICK = "quick"
    SEEDED = "seeded"

    @classmethod
    def parse(cls, value: "Strategy | str | None", default: "Strategy | None" = None) -> "Strategy":
        if isinstance(value, Strategy):
            return value
        if value is None or not str(value).strip():
            return default or cls.EXHAUSTIVE
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown strategy {value!r}; expected one of: {choices}") from exc


@dataclass(slots=True)
class SearchState:
    """One node of the search tree: an ordered prefix and where its alignment stopped."""

    positions: Tuple[int, ...]
    order: Tuple[int, ...]
    data: Tuple[str, ...]
    data_end: int
    doc_end: int
    distance: int
    operations: List[DiffOp] = field(default_factory=list)
    parent: Optional["SearchState"] = None

    def full_operations(self) -> List[DiffOp]:
        segments: List[List[DiffOp]] = []
        node: Optional[SearchState] = self
        while node is not None:
            segments.append(node.operations)
            node = node.parent
        merged: List[DiffOp] = []
        for segment in reversed(segments):
            merged.extend(segment)
        return merged


@dataclass(slots=True)
class SearchResult:
    """Best ordering found by a search together with its full diff."""

    distance: int
    operations: List[DiffOp]
    order: Tuple[int, ...]
    strategy: Strategy
    nodes: int = 0
    pruned: int = 0
    complete: bool = True


ROOT_STATE = SearchState(positions=(), order=(), data=(), data_end=0, doc_end=0, distance=0)


class SearchContext:
    """Shared best-so-far record for a single search.

    Exactly one instance exists per search and every branch reads and updates
    it, so a result found deep in one subtree immediately bounds all others.
    """

    def __init__(
        self,
        blocks: Sequence[Docblock],
        doc: Sequence[str],
        *,
        lookahead: int = DEFAULT_LOOKAHEAD,
        node_budget: Optional[int] = None,
        tracer: "SearchTracer | None" = None,
    ) -> None:
        # Positions follow docblock index so traversal order matches the tie-break.
        self.blocks = sorted(blocks, key=lambda block: block.index)
        self.doc = list(doc)
        self.lookahead = lookahead
        self.node_budget = node_budget if node_budget and node_budget > 0 else None
        self.tracer = tracer
        self.best: Optional[SearchState] = None
        self.nodes = 0
        self.pruned = 0

    @property
    def best_distance(self) -> Optional[int]:
        return self.best.distance if self.best is not None else None

    @property
    def size(self) -> int:
        return len(self.blocks)

    def budget_exhausted(self) -> bool:
        return self.node_budget is not None and self.nodes >= self.node_budget

    def exceeds_best(self, distance: int) -> bool:
        best = self.best_distance
        return best is not None and distance > best

    def remaining(self, state: SearchState) -> List[int]:
        chosen = set(state.positions)
        return [pos for pos in range(self.size) if pos not in chosen]

    def expand(
        self,
        parent: SearchState,
        position: Optional[int],
        *,
        bound: Optional[int],
    ) -> Optional[SearchState]:
        """Resume the differ from *parent* with the docblock at *position* appended.

        ``position`` is ``None`` only for the empty ordering of zero docblocks.
        """

        if position is None:
            lines: Tuple[str, ...] = ()
            positions = parent.positions
            order = parent.order
        else:
            block = self.blocks[position]
            lines = block.lines
            positions = parent.positions + (position,)
            order = parent.order + (block.index,)
        data = parent.data + lines
        is_partial = len(positions) < self.size

        self.nodes += 1
        result = align(
            data,
            self.doc,
            parent.data_end,
            parent.doc_end,
            parent.distance,
            is_partial,
            bound=bound,
            lookahead=self.lookahead,
        )
        if result is None:
            self.pruned += 1
            return None
        return SearchState(
            positions=positions,
            order=order,
            data=data,
            data_end=result.data_end,
            doc_end=result.doc_end,
            distance=result.distance,
            operations=result.operations,
            parent=parent,
        )

    def try_update(self, state: SearchState) -> bool:
        """Install *state* as the best complete ordering if it beats the incumbent.

        Ties on distance go to the lexicographically smaller docblock order.
        """

        if self.best is not None:
            if (state.distance, state.order) >= (self.best.distance, self.best.order):
                return False
        self.best = state
        LOGGER.debug("best ordering %s at distance %d", state.order, state.distance)
        if self.tracer:
            self.tracer.ev(
                "best_updated",
                distance=state.distance,
                order=list(state.order),
                nodes=self.nodes,
            )
        return True


def _search_empty(ctx: SearchContext) -> None:
    state = ctx.expand(ROOT_STATE, None, bound=None)
    if state is not None:
        ctx.try_update(state)


def _search_quick(ctx: SearchContext) -> None:
    """Greedy pass: commit each slot to the docblock with the smallest distance."""

    state = ROOT_STATE
    for _ in range(ctx.size):
        chosen: Optional[SearchState] = None
        for position in ctx.remaining(state):
            bound = chosen.distance if chosen is not None else None
            child = ctx.expand(state, position, bound=bound)
            if child is None:
                continue
            if chosen is None or child.distance < chosen.distance:
                chosen = child
        if chosen is None:  # pragma: no cover - unbounded first candidate always aligns
            return
        state = chosen
    ctx.try_update(state)


def _search_exhaustive(ctx: SearchContext) -> bool:
    """Depth-first branch-and-bound over all orderings.

    Returns False when the node budget stopped the walk early.
    """

    stack: List[Tuple[SearchState, int]] = [
        (ROOT_STATE, position) for position in reversed(range(ctx.size))
    ]
    while stack:
        if ctx.best_distance == 0:
            break
        if ctx.budget_exhausted():
            LOGGER.warning(
                "Node budget of %d exhausted with %d branches unexplored",
                ctx.node_budget,
                len(stack),
            )
            if ctx.tracer:
                ctx.tracer.ev("budget_exhausted", nodes=ctx.nodes, pending=len(stack))
            return False

        parent, position = stack.pop()
        if ctx.exceeds_best(parent.distance):
            ctx.pruned += 1
            continue

        child = ctx.expand(parent, position, bound=ctx.best_distance)
        if child is None:
            continue
        if len(child.positions) == ctx.size:
            ctx.try_update(child)
            continue
        for nxt in reversed(ctx.remaining(child)):
            stack.append((child, nxt))
    return True


def search(
    docblocks: Iterable[Docblock | Sequence[str]],
    document_lines: Sequence[str],
    strategy: Strategy | str = Strategy.EXHAUSTIVE,
    *,
    lookahead: int = DEFAULT_LOOKAHEAD,
    node_budget: Optional[int] = None,
    tracer: "SearchTracer | None" = None,
) -> SearchResult:
    """Return the docblock ordering that best matches *document_lines*."""

    strategy = Strategy.parse(strategy)
    blocks = coerce_docblocks(docblocks)
    ctx = SearchContext(
        blocks,
        document_lines,
        lookahead=lookahead,
        node_budget=node_budget,
        tracer=tracer,
    )
    started = time.perf_counter()
    if tracer:
        tracer.ev(
            "start_run",
            strategy=strategy.value,
            docblocks=len(blocks),
            doc_lines=len(ctx.doc),
            lookahead=lookahead,
            node_budget=ctx.node_budget,
        )

    complete = True
    if not blocks:
        _search_empty(ctx)
    elif strategy is Strategy.QUICK:
        _search_quick(ctx)
    else:
        if strategy is Strategy.SEEDED:
            _search_quick(ctx)
        complete = _search_exhaustive(ctx)
        if ctx.best is None:
            LOGGER.warning("No complete ordering within budget; using the greedy ordering")
            _search_quick(ctx)

    best = ctx.best
    if best is None:
        raise RuntimeError(f"{strategy.value} search produced no complete ordering")
    elapsed = time.perf_counter() - started
    LOGGER.info(
        "search strategy=%s docblocks=%d distance=%d nodes=%d pruned=%d complete=%s in %.3fs",
        strategy.value,
        len(blocks),
        best.distance,
        ctx.nodes,
        ctx.pruned,
        complete,
        elapsed,
    )
    if tracer:
        tracer.ev(
            "end_run",
            distance=best.distance,
            order=list(best.order),
            nodes=ctx.nodes,
            pruned=ctx.pruned,
            complete=complete,
            elapsed_s=round(elapsed, 6),
        )

    return SearchResult(
        distance=best.distance,
        operations=best.full_operations(),
        order=best.order,
        strategy=strategy,
        nodes=ctx.nodes,
        pruned=ctx.pruned,
        complete=complete,
    )


__all__ = ["SearchContext", "SearchResult", "SearchState", "Strategy", "search"]
