"""Docblocks extracted from source comments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class Docblock:
    """Contiguous run of documentation comment lines.

    ``index`` is the extraction order. It only drives enumeration and the
    tie-break between equally good orderings; matching uses line content alone.
    """

    index: int
    lines: tuple[str, ...]
    source: str | None = None
    start_line: int | None = None

    def __len__(self) -> int:
        return len(self.lines)

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "lines": list(self.lines),
            "source": self.source,
            "start_line": self.start_line,
        }


def coerce_docblocks(blocks: Iterable[Docblock | Sequence[str]]) -> list[Docblock]:
    """Return ``Docblock`` objects for *blocks*, indexing plain sequences in order."""

    coerced: list[Docblock] = []
    for position, block in enumerate(blocks):
        if isinstance(block, Docblock):
            coerced.append(block)
        else:
            coerced.append(Docblock(index=position, lines=tuple(str(line) for line in block)))
    return coerced


__all__ = ["Docblock", "coerce_docblocks"]
