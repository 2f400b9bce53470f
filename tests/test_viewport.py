"""Tests for the scrolling window."""

import pytest

from markupview.viewport import Viewport


def check_invariant(viewport):
    assert 0 <= viewport.line_offset <= max(0, viewport.total_lines - viewport.height)


def test_visible_range():
    viewport = Viewport(height=5, total_lines=20)
    assert list(viewport.visible_range()) == [0, 1, 2, 3, 4]
    viewport.scroll_by(3)
    assert list(viewport.visible_range()) == [3, 4, 5, 6, 7]


def test_short_document():
    viewport = Viewport(height=10, total_lines=3)
    assert list(viewport.visible_range()) == [0, 1, 2]
    assert not viewport.scroll_by(1)
    assert viewport.line_offset == 0


def test_scroll_is_clamped():
    viewport = Viewport(height=5, total_lines=20)
    assert viewport.scroll_by(100)
    assert viewport.line_offset == 15
    assert not viewport.scroll_by(1)
    assert viewport.scroll_by(-100)
    assert viewport.line_offset == 0


def test_paging_keeps_context():
    viewport = Viewport(height=10, total_lines=100)
    viewport.page_down()
    assert viewport.line_offset == 8
    viewport.page_up()
    assert viewport.line_offset == 0


def test_top_and_bottom():
    viewport = Viewport(height=10, total_lines=25)
    assert viewport.scroll_to_bottom()
    assert viewport.line_offset == 15
    assert not viewport.scroll_to_bottom()
    assert viewport.scroll_to_top()
    assert viewport.line_offset == 0


def test_set_height_reclamps():
    viewport = Viewport(height=5, total_lines=20)
    viewport.scroll_to_bottom()
    viewport.set_height(15)
    assert viewport.line_offset == 5
    check_invariant(viewport)


def test_set_total_lines_reclamps():
    viewport = Viewport(height=5, total_lines=20)
    viewport.scroll_to_bottom()
    viewport.set_total_lines(8)
    assert viewport.line_offset == 3


def test_non_positive_height():
    viewport = Viewport(height=0, total_lines=5)
    assert viewport.height == 1


class TestEnsureVisible:

    def test_already_visible_does_not_move(self):
        viewport = Viewport(height=5, total_lines=20)
        viewport.scroll_by(5)
        viewport.ensure_visible(7, 7)
        assert viewport.line_offset == 5

    def test_below_scrolls_minimally(self):
        viewport = Viewport(height=5, total_lines=20)
        viewport.ensure_visible(12, 12)
        assert viewport.line_offset == 8
        assert viewport.is_visible(12)

    def test_above_scrolls_minimally(self):
        viewport = Viewport(height=5, total_lines=20)
        viewport.scroll_to_bottom()
        viewport.ensure_visible(3, 4)
        assert viewport.line_offset == 3

    def test_multi_line_range_fits(self):
        viewport = Viewport(height=5, total_lines=20)
        viewport.ensure_visible(6, 8)
        assert viewport.line_offset == 4

    def test_tall_range_aligns_to_start(self):
        viewport = Viewport(height=3, total_lines=20)
        viewport.ensure_visible(10, 15)
        assert viewport.line_offset == 10

    @pytest.mark.parametrize("line", [0, 1, 7, 18, 19])
    def test_invariant_holds(self, line):
        viewport = Viewport(height=4, total_lines=20)
        viewport.ensure_visible(line, line)
        check_invariant(viewport)
        assert viewport.is_visible(line)
