from __future__ import annotations

import pytest

from docmerge.services.classify import (
    insert_block_end,
    is_blank,
    is_fresh_line,
    is_insert_block_close,
    is_insert_block_open,
    is_special_line,
)

OPEN = '<div class="insert-block">'


@pytest.mark.parametrize(
    "line",
    [
        "![logo](img/logo.png)",
        "  ![](x.svg)  ",
        "<br>",
        "<img src='a.png'/>",
        "  <p align=\"center\">",
        "</div>",
    ],
)
def test_special_lines(line: str) -> None:
    assert is_special_line(line)
    assert is_fresh_line(line)


@pytest.mark.parametrize(
    "line",
    [
        "plain text",
        "see ![logo](x.png) inline",
        "<b>bold</b> words",
        "a < b > c",
        "",
    ],
)
def test_not_special_lines(line: str) -> None:
    assert not is_special_line(line)


def test_blank_lines_are_fresh() -> None:
    assert is_blank("")
    assert is_blank("   \t")
    assert is_fresh_line("   ")
    assert not is_blank("x")
    assert not is_fresh_line("x")


def test_insert_block_open_detection() -> None:
    assert is_insert_block_open(OPEN)
    assert is_insert_block_open("<div class='note insert-block wide' id=\"a\">")
    assert is_insert_block_open('  <div class="insert-block">  ')
    assert not is_insert_block_open('<div class="insert-blocks">')
    assert not is_insert_block_open('<div class="other">')
    assert not is_insert_block_open('<div class="insert-block"/>')
    assert not is_insert_block_open("insert-block")


def test_insert_block_close_detection() -> None:
    assert is_insert_block_close("</div>")
    assert is_insert_block_close("  </div> ")
    assert not is_insert_block_close("</div> trailing")


def test_insert_block_end_finds_first_close() -> None:
    doc = ["a", OPEN, "x", "</div>", "b", "</div>"]
    assert insert_block_end(doc, 1) == 4


def test_unterminated_insert_block_runs_to_end() -> None:
    doc = [OPEN, "x", "y"]
    assert insert_block_end(doc, 0) == 3
