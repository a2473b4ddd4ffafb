from __future__ import annotations

import random

import pytest

from docmerge.config import Settings
from docmerge.models import DiffOp, Docblock, OpKind
from docmerge.services.reconcile import (
    fresh_document,
    make_tracer,
    merged_lines,
    merged_text,
    reconcile,
    split_document,
    summarize,
)
from docmerge.services.search import Strategy

U, A, R, F = OpKind.UNCHANGED, OpKind.ADDED, OpKind.REMOVED, OpKind.FRESH

README_BLOCKS = [
    ["# Project", "Short intro."],
    ["## Usage", "", "Run `tool --help`."],
    ["## API", "call(x) returns y"],
    ["## License", "MIT"],
]


def _pairs(operations):
    return [(op.kind, op.line) for op in operations]


def test_document_with_reordered_blocks() -> None:
    result = reconcile([["B"], ["A"]], "A\nB")

    assert result.distance == 0
    assert _pairs(result.operations) == [(U, "A"), (U, "B")]


def test_empty_document_adds_everything() -> None:
    result = reconcile([["X", "Y"], ["Z"]], "")

    assert result.distance == 0
    assert all(op.kind is A for op in result.operations)
    assert sorted(op.line for op in result.operations) == ["X", "Y", "Z"]


def test_insert_block_is_preserved_verbatim() -> None:
    document = '<div class="insert-block">\nCUSTOM\n</div>'

    result = reconcile([["OTHER"]], document)

    assert _pairs(result.operations) == [
        (F, '<div class="insert-block">'),
        (F, "CUSTOM"),
        (F, "</div>"),
        (A, "OTHER"),
    ]
    assert merged_text(result.operations) == document + "\nOTHER"


def test_image_is_retained() -> None:
    result = reconcile([["Title"]], "![logo](l.png)\nTitle")

    assert result.distance == 0
    assert _pairs(result.operations) == [(F, "![logo](l.png)"), (U, "Title")]


def test_merging_the_merged_document_is_a_no_op() -> None:
    document = "\n".join(line for block in README_BLOCKS for line in block)
    shuffled = [README_BLOCKS[2], README_BLOCKS[0], README_BLOCKS[3], README_BLOCKS[1]]

    result = reconcile(shuffled, document)

    assert result.distance == 0
    assert all(op.kind is U for op in result.operations)
    assert merged_text(result.operations) == document


def test_hand_edits_survive_a_second_merge() -> None:
    document = "\n".join(
        [
            "# Project",
            "![badge](badge.svg)",
            "Short intro.",
            '<div class="insert-block">',
            "Hand written notes.",
            "</div>",
            "## API",
            "call(x) returns y",
        ]
    )
    blocks = [["## API", "call(x) returns z"], ["# Project", "Short intro."]]

    result = reconcile(blocks, document)
    merged = merged_lines(result.operations)

    assert "![badge](badge.svg)" in merged
    assert "Hand written notes." in merged
    assert "call(x) returns z" in merged
    assert "call(x) returns y" not in merged
    assert result.order == (1, 0)


@pytest.mark.parametrize("seed", range(8))
def test_every_line_is_accounted_for(seed: int) -> None:
    rng = random.Random(seed)
    vocab = [f"text {k}" for k in range(8)] + ["", "![pic](p.png)", "<br>"]
    blocks = [[rng.choice(vocab) for _ in range(rng.randint(1, 3))] for _ in range(4)]
    doc = [rng.choice(vocab + ["stale"]) for _ in range(rng.randint(0, 10))]

    result = reconcile(blocks, "\n".join(doc), strategy="exhaustive")

    doc_side = [op.line for op in result.operations if op.kind in (U, R, F)]
    assert doc_side == split_document("\n".join(doc))

    data = [line for position in result.order for line in blocks[position]]
    data_side = [op.line for op in result.operations if op.kind in (U, A)]
    assert [line for line in data_side if line.strip()] == [
        line for line in data if line.strip()
    ]

    distances = [op.distance for op in result.operations]
    assert distances == sorted(distances)


def test_quick_flag_selects_greedy_strategy() -> None:
    result = reconcile([["B"], ["A"]], "A\nB", quick=True)

    assert result.strategy is Strategy.QUICK
    assert result.distance == 0


def test_explicit_strategy_overrides_quick() -> None:
    result = reconcile([["B"], ["A"]], "A\nB", quick=True, strategy="seeded")

    assert result.strategy is Strategy.SEEDED


def test_strategy_defaults_to_settings() -> None:
    settings = Settings().model_copy(update={"strategy": "quick"})

    result = reconcile([["A"]], "A", settings=settings)

    assert result.strategy is Strategy.QUICK


def test_settings_node_budget_is_applied() -> None:
    settings = Settings().model_copy(update={"node_budget": 1})
    blocks = [[f"b{k}"] for k in range(4)]

    result = reconcile(blocks, "unrelated", settings=settings)

    assert not result.complete
    assert sorted(result.order) == [0, 1, 2, 3]


def test_split_document() -> None:
    assert split_document("") == []
    assert split_document(None) == []
    assert split_document("a\r\nb\n") == ["a", "b"]


def test_fresh_document_marks_every_line_fresh() -> None:
    blocks = [Docblock(0, ("a", "")), Docblock(1, ("b",))]

    ops = fresh_document(blocks)

    assert _pairs(ops) == [(F, "a"), (F, ""), (F, "b")]
    assert merged_text(ops) == "a\n\nb"


def test_merged_text_drops_removed_lines_and_trims() -> None:
    ops = [
        DiffOp(F, ""),
        DiffOp(U, "a"),
        DiffOp(R, "b", 1),
        DiffOp(A, "c", 1),
        DiffOp(F, ""),
    ]

    assert merged_text(ops) == "a\nc"
    assert summarize(ops) == {"unchanged": 1, "added": 1, "removed": 1, "fresh": 2}


def test_make_tracer_follows_settings(tmp_path) -> None:
    disabled = Settings().model_copy(update={"trace": False})
    enabled = Settings().model_copy(update={"trace": True, "trace_dir": tmp_path})

    assert make_tracer(disabled) is None
    tracer = make_tracer(enabled, run_id="abc")
    assert tracer is not None
    assert tracer.run_id == "abc"
    assert tracer.path.startswith(str(tmp_path))
