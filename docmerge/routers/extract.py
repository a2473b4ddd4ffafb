"""Docblock extraction endpoint for callers that hold source text in memory."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..services.extract import extract_docblocks_from_text
from ..utils.errors import NoDocblocksError

router = APIRouter(prefix="/api", tags=["extract"])


class ExtractRequest(BaseModel):
    text: str
    source: str | None = None
    strict: bool = False


class DocblockPayload(BaseModel):
    index: int
    lines: list[str]
    source: str | None = None
    start_line: int | None = None


class ExtractResponse(BaseModel):
    docblocks: list[DocblockPayload] = Field(default_factory=list)


@router.post("/extract", response_model=ExtractResponse)
def extract_from_text(payload: ExtractRequest) -> ExtractResponse:
    """Return the ``//**`` / ``##**`` docblocks found in ``text``.

    With ``strict`` set, finding none is an error, as it is for the CLI.
    """

    blocks = extract_docblocks_from_text(payload.text, source=payload.source)
    if payload.strict and not blocks:
        raise NoDocblocksError(extra={"source": payload.source})
    return ExtractResponse(
        docblocks=[DocblockPayload(**block.to_dict()) for block in blocks]
    )


__all__ = ["router"]
