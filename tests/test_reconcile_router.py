"""Tests for the reconcile and extract endpoints."""

from __future__ import annotations

import json
from pathlib import Path

from fastapi.testclient import TestClient

from docmerge.config import reset_settings_cache


def test_reconcile_orders_docblocks(client: TestClient) -> None:
    response = client.post(
        "/api/reconcile",
        json={"docblocks": [["B"], ["A"]], "document": "A\nB"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["distance"] == 0
    assert payload["order"] == [1, 0]
    assert payload["strategy"] == "exhaustive"
    assert payload["complete"] is True
    assert payload["merged"] == "A\nB"
    assert payload["summary"] == {"unchanged": 2, "added": 0, "removed": 0, "fresh": 0}
    assert payload["operations"] == [
        {"kind": "unchanged", "line": "A", "distance": 0},
        {"kind": "unchanged", "line": "B", "distance": 0},
    ]


def test_reconcile_keeps_insert_blocks(client: TestClient) -> None:
    document = '<div class="insert-block">\nCUSTOM\n</div>'
    response = client.post(
        "/api/reconcile",
        json={"docblocks": [["OTHER"]], "document": document, "quick": True},
    )

    payload = response.json()
    assert payload["strategy"] == "quick"
    assert [op["kind"] for op in payload["operations"]] == ["fresh", "fresh", "fresh", "added"]
    assert payload["merged"] == document + "\nOTHER"


def test_reconcile_rejects_unknown_strategy(client: TestClient) -> None:
    response = client.post(
        "/api/reconcile",
        json={"docblocks": [["A"]], "document": "A", "strategy": "fast"},
    )

    assert response.status_code == 422


def test_reconcile_records_search_metrics(client: TestClient) -> None:
    client.post("/api/reconcile", json={"docblocks": [["A"], ["B"]], "document": "A\nB"})
    client.post(
        "/api/reconcile",
        json={"docblocks": [["A"]], "document": "A", "strategy": "seeded"},
    )

    searches = client.get("/api/metrics").json()["searches"]
    assert searches["exhaustive"]["runs"] == 1
    assert searches["exhaustive"]["nodes"] == 2
    assert searches["seeded"]["runs"] == 1
    assert searches["seeded"]["incomplete"] == 0


def test_reconcile_writes_trace_named_after_request(
    client: TestClient, tmp_path: Path, monkeypatch
) -> None:
    monkeypatch.setenv("DOCMERGE_TRACE", "true")
    reset_settings_cache()

    response = client.post(
        "/api/reconcile",
        json={"docblocks": [["A"]], "document": ""},
        headers={"X-Request-ID": "trace-me"},
    )

    assert response.status_code == 200
    trace_file = tmp_path / "traces" / "trace-me.jsonl"
    events = [json.loads(line) for line in trace_file.read_text(encoding="utf-8").splitlines()]
    assert events[0]["type"] == "start_run"
    assert events[-1]["type"] == "end_run"
    assert (tmp_path / "traces" / "trace-me.summary.json").exists()


def test_extract_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/extract",
        json={"text": "//** one\n//** two\ncode\n##** three\n", "source": "x.js"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "docblocks": [
            {"index": 0, "lines": ["one", "two"], "source": "x.js", "start_line": 1},
            {"index": 1, "lines": ["three"], "source": "x.js", "start_line": 4},
        ]
    }


def test_strict_extract_without_docblocks_is_a_client_error(client: TestClient) -> None:
    response = client.post(
        "/api/extract", json={"text": "code()\n", "source": "a.js", "strict": True}
    )

    assert response.status_code == 400
    assert response.json() == {
        "detail": "No documentation comments found!",
        "code": "no_docblocks",
        "extra": {"source": "a.js"},
    }
