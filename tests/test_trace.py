from __future__ import annotations

import json
from pathlib import Path

from docmerge.services.search import search
from docmerge.utils.trace import SearchTracer


def test_flush_writes_events_and_summary(tmp_path: Path) -> None:
    tracer = SearchTracer(run_id="run1", out_dir=str(tmp_path / "out"))

    search([["x"], ["y"]], ["p"], tracer=tracer)
    path = tracer.flush_jsonl()

    assert path == tracer.path
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]
    assert events[0]["type"] == "start_run"
    assert events[0]["docblocks"] == 2

    summary = json.loads(Path(tracer.summary_path).read_text(encoding="utf-8"))
    assert summary["run_id"] == "run1"
    assert summary["metadata"]["strategy"] == "exhaustive"
    assert summary["improvements"] == [{"distance": 2, "order": [0, 1]}]
    assert summary["budget_exhausted"] is False
    assert summary["outcome"]["distance"] == 2
    assert summary["outcome"]["order"] == [0, 1]


def test_run_id_is_generated() -> None:
    first = SearchTracer(out_dir="unused")
    second = SearchTracer(out_dir="unused")

    assert first.run_id != second.run_id
    assert first.as_list() == []
