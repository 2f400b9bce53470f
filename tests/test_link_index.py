"""Tests for spatial link queries."""

import pytest

from markupview.document import DocumentBuilder, Element, Style
from markupview.errors import FocusStateError
from markupview.link_index import Direction, LinkIndex


def build(rows, width=20):
    """Build a document from rows of (text, target-or-None) pairs."""
    builder = DocumentBuilder(width)
    for row in rows:
        builder.push_line([
            Element.link(text, Style.UNDERLINE, target) if target else Element.plain(text)
            for text, target in row
        ])
    return builder.build()


# A . . . B
# . . C
# D . . . . . . E
GRID = [
    [("A", "a"), ("   ", None), ("B", "b")],
    [("  ", None), ("C", "c")],
    [("D", "d"), ("      ", None), ("E", "e")],
]

A, B, C, D, E = range(5)


@pytest.fixture
def index():
    return LinkIndex(build(GRID))


def test_anchors(index):
    assert [index.bounding_point(i) for i in range(5)] == [(0, 0), (0, 4), (1, 2), (2, 0), (2, 7)]


def test_first_and_last(index):
    assert index.first() == A
    assert index.last() == E
    assert len(index) == 5


def test_down_prefers_nearest_line(index):
    assert index.nearest_in_direction((0, 0), Direction.DOWN) == C
    assert index.nearest_in_direction((0, 4), Direction.DOWN) == C
    assert index.nearest_in_direction((1, 2), Direction.DOWN) == D


def test_up_tie_goes_to_document_order(index):
    # A and B are both one line up and two columns away
    assert index.nearest_in_direction((1, 2), Direction.UP) == A


def test_up_and_down_at_edges(index):
    assert index.nearest_in_direction((0, 0), Direction.UP) is None
    assert index.nearest_in_direction((2, 7), Direction.DOWN) is None


def test_right_on_same_line(index):
    assert index.nearest_in_direction((0, 0), Direction.RIGHT) == B
    assert index.nearest_in_direction((2, 0), Direction.RIGHT) == E


def test_right_falls_back_to_next_line(index):
    assert index.nearest_in_direction((0, 4), Direction.RIGHT) == C
    assert index.nearest_in_direction((1, 2), Direction.RIGHT) == D


def test_left_falls_back_to_end_of_previous_line(index):
    assert index.nearest_in_direction((1, 2), Direction.LEFT) == B
    assert index.nearest_in_direction((2, 0), Direction.LEFT) == C


def test_left_and_right_at_edges(index):
    assert index.nearest_in_direction((0, 0), Direction.LEFT) is None
    assert index.nearest_in_direction((2, 7), Direction.RIGHT) is None


def test_link_at(index):
    assert index.link_at(2, 7) == E
    assert index.link_at(2, 6) is None
    assert index.link_at(9, 0) is None
    assert index.link_at(0, -1) is None


def test_first_with_target(index):
    assert index.first_with_target("c") == C
    assert index.first_with_target("missing") is None


def test_line_range_of_wrapped_link():
    builder = DocumentBuilder(10)
    builder.push_line([Element.link("one", Style.NONE, "t", key=1)])
    builder.push_line([Element.link("two", Style.NONE, "t", key=1)])
    index = LinkIndex(builder.build())
    assert index.line_range(0) == (0, 1)


def test_unknown_link_raises(index):
    with pytest.raises(FocusStateError):
        index.link(99)
    assert 99 not in index
    assert C in index


def test_empty_document():
    index = LinkIndex(build([[("no links", None)]]))
    assert len(index) == 0
    assert index.first() is None
    assert index.nearest_in_direction((0, 0), Direction.DOWN) is None
