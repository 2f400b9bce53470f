"""Vertical scrolling window over the document's lines."""

from __future__ import annotations

from .constants import ViewConstants


class Viewport:
    """Keeps ``0 <= line_offset <= max(0, total_lines - height)``.

    Every mutator re-clamps immediately, so the invariant holds between
    any two calls.
    """

    CONTEXT_LINES: int = ViewConstants.CONTEXT_LINES  # Overlap context lines when paging

    def __init__(self, height: int = 1, total_lines: int = 0):
        self.line_offset = 0
        self.height = max(1, height)
        self.total_lines = max(0, total_lines)

    def __repr__(self) -> str:
        return f"Viewport(line_offset={self.line_offset}, height={self.height}, total_lines={self.total_lines})"

    @property
    def max_offset(self) -> int:
        return max(0, self.total_lines - self.height)

    def _clamp(self) -> None:
        self.line_offset = max(0, min(self.line_offset, self.max_offset))

    def set_height(self, height: int) -> None:
        self.height = max(1, height)
        self._clamp()

    def set_total_lines(self, total_lines: int) -> None:
        self.total_lines = max(0, total_lines)
        self._clamp()

    def visible_range(self) -> range:
        """Document lines currently inside the window."""
        return range(self.line_offset, min(self.total_lines, self.line_offset + self.height))

    def is_visible(self, line: int) -> bool:
        return self.line_offset <= line < self.line_offset + self.height

    def ensure_visible(self, first_line: int, last_line: int) -> None:
        """Scroll the least amount that brings the line range into view.

        A range taller than the window is aligned to its first line.
        """
        if last_line < first_line:
            first_line, last_line = last_line, first_line
        if last_line - first_line + 1 > self.height:
            self.line_offset = first_line
        elif first_line < self.line_offset:
            self.line_offset = first_line
        elif last_line >= self.line_offset + self.height:
            self.line_offset = last_line - self.height + 1
        self._clamp()

    def scroll_by(self, delta: int) -> bool:
        """Scroll by ``delta`` lines; returns True if the offset changed."""
        previous = self.line_offset
        self.line_offset += delta
        self._clamp()
        return self.line_offset != previous

    def _page_step(self) -> int:
        return max(1, self.height - self.CONTEXT_LINES)

    def page_down(self) -> bool:
        return self.scroll_by(self._page_step())

    def page_up(self) -> bool:
        return self.scroll_by(-self._page_step())

    def scroll_to_top(self) -> bool:
        return self.scroll_by(-self.line_offset)

    def scroll_to_bottom(self) -> bool:
        return self.scroll_by(self.max_offset - self.line_offset)
