"""Tagged line operations produced by the differ."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OpKind(str, Enum):
    """Closed set of line operation kinds."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    FRESH = "fresh"


@dataclass(frozen=True, slots=True)
class DiffOp:
    """A single line together with its operation kind.

    ``distance`` is the cumulative alignment distance at the moment the
    operation was emitted and is only kept for diagnostics.
    """

    kind: OpKind
    line: str
    distance: int = 0

    @property
    def kept(self) -> bool:
        return self.kind is not OpKind.REMOVED

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "line": self.line, "distance": self.distance}


__all__ = ["DiffOp", "OpKind"]
