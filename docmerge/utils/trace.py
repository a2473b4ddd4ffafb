"""Structured traces of a single ordering search."""

from __future__ import annotations

import json
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .logging import configure_logging


LOGGER = configure_logging().getChild("search.trace")

_META_KEYS = {"t", "type"}


@dataclass(slots=True)
class TraceEvent:
    t: float
    type: str
    data: Dict[str, Any]

    def as_dict(self) -> Dict[str, Any]:
        return {"t": self.t, "type": self.type, **self.data}


class SearchTracer:
    """Collect events emitted while searching docblock orderings.

    Events stay in memory until ``flush_jsonl`` writes ``<run_id>.jsonl`` and
    ``<run_id>.summary.json`` under ``out_dir``.
    """

    def __init__(
        self, run_id: Optional[str] = None, out_dir: str = "logs/search"
    ) -> None:
        self.run_id = run_id or str(uuid.uuid4())
        self.out_dir = Path(out_dir)
        self.events: List[TraceEvent] = []

    @property
    def path(self) -> str:
        return str(self.out_dir / f"{self.run_id}.jsonl")

    @property
    def summary_path(self) -> str:
        return str(self.out_dir / f"{self.run_id}.summary.json")

    def ev(self, event_type: str, **data: Any) -> None:
        self.events.append(TraceEvent(t=time.time(), type=event_type, data=data))

    def as_list(self) -> List[Dict[str, Any]]:
        return [event.as_dict() for event in self.events]

    def summary(self) -> Dict[str, Any]:
        """Condense the events into run metadata, improvements and outcome."""

        def _payload(event: TraceEvent) -> Dict[str, Any]:
            return {k: v for k, v in event.data.items() if k not in _META_KEYS}

        metadata: Dict[str, Any] = {}
        outcome: Dict[str, Any] = {}
        improvements: List[Dict[str, Any]] = []
        for event in self.events:
            if event.type == "start_run":
                metadata = _payload(event)
            elif event.type == "best_updated":
                improvements.append(
                    {"distance": event.data.get("distance"), "order": event.data.get("order")}
                )
            elif event.type == "end_run":
                outcome = _payload(event)
        return {
            "run_id": self.run_id,
            "metadata": metadata,
            "improvements": improvements,
            "budget_exhausted": any(e.type == "budget_exhausted" for e in self.events),
            "outcome": outcome,
        }

    def flush_jsonl(self) -> str:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as handle:
            for event in self.events:
                handle.write(json.dumps(event.as_dict(), ensure_ascii=False) + "\n")
        with open(self.summary_path, "w", encoding="utf-8") as handle:
            json.dump(self.summary(), handle, ensure_ascii=False, indent=2)
        LOGGER.info("[search] Trace saved: %s (%d events)", self.path, len(self.events))
        return self.path


__all__ = ["SearchTracer", "TraceEvent"]
