"""Reconciliation endpoint."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..middleware import get_request_id
from ..models import DiffOp
from ..observability import metrics_registry
from ..services.reconcile import make_tracer, merged_text, reconcile, summarize

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reconcile"])


class ReconcileRequest(BaseModel):
    """Docblocks to order and the document to merge them into."""

    docblocks: list[list[str]] = Field(default_factory=list)
    document: str = ""
    quick: bool = False
    strategy: Literal["exhaustive", "quick", "seeded"] | None = None


class OperationPayload(BaseModel):
    kind: Literal["unchanged", "added", "removed", "fresh"]
    line: str
    distance: int = Field(ge=0)

    @classmethod
    def from_op(cls, op: DiffOp) -> "OperationPayload":
        return cls(**op.to_dict())


class ReconcileResponse(BaseModel):
    """Best ordering found, its full diff and the merged document."""

    distance: int = Field(ge=0)
    order: list[int]
    strategy: str
    complete: bool
    nodes: int
    pruned: int
    summary: dict[str, int]
    merged: str
    operations: list[OperationPayload]


@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile_document(
    payload: ReconcileRequest,
    settings: Settings = Depends(get_settings),
) -> ReconcileResponse:
    """Order the docblocks against the document and return the merge."""

    tracer = make_tracer(settings, run_id=get_request_id())
    started = perf_counter()
    result = reconcile(
        payload.docblocks,
        payload.document,
        quick=payload.quick,
        strategy=payload.strategy,
        settings=settings,
        tracer=tracer,
    )
    metrics_registry.search_finished(
        result.strategy.value,
        nodes=result.nodes,
        pruned=result.pruned,
        distance=result.distance,
        complete=result.complete,
        duration_seconds=perf_counter() - started,
    )
    if tracer:
        tracer.flush_jsonl()

    return ReconcileResponse(
        distance=result.distance,
        order=list(result.order),
        strategy=result.strategy.value,
        complete=result.complete,
        nodes=result.nodes,
        pruned=result.pruned,
        summary=summarize(result.operations),
        merged=merged_text(result.operations),
        operations=[OperationPayload.from_op(op) for op in result.operations],
    )


__all__ = ["router", "ReconcileRequest", "ReconcileResponse"]
