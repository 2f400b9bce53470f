"""The interactive markup view.

`MarkupView` displays a rendered document, lets the user move a link
focus with the arrow keys or the mouse, and reports focus changes and
selections to the host through observers:

    view = MarkupView.html("<a href='https://rust-lang.org'>Rust</a>")
    view.set_maximum_width(120)
    view.on_link_focus(lambda ctx, url: ...)
    view.on_link_select(lambda ctx, url: ...)
    view.handle_key(Key.RIGHT)
    view.draw(buffer)

Everything runs synchronously on the caller's thread. Re-rendering only
happens when the width or the source changes, so navigation cost does not
depend on document size.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Protocol, Union

from .document import Document, Style
from .focus import FocusController
from .link_index import Direction, LinkIndex
from .model import DocumentModel
from .observers import FocusObserver, ObserverDispatcher, SelectionObserver
from .renderer import RendererKind
from .viewport import Viewport


class Key(Enum):
    """Input the view understands."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    SELECT = "select"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"

    @property
    def direction(self) -> Optional[Direction]:
        try:
            return Direction(self.value)
        except ValueError:
            return None


class DrawTarget(Protocol):
    """Anything the view can print styled text onto."""

    def print_at(self, row: int, column: int, text: str, style: Style) -> None:
        ...


class MarkupView:
    """A view for hypertext rendered by a `MarkupRenderer`.

    The view starts with no link focused. The first arrow key focuses the
    first link (Down/Right) or the last link (Up/Left). Directional moves
    at the edge of the document keep the current focus unless
    ``wrap_around`` is set.

    ``height`` is the number of visible rows; when it is None the window
    grows with the document, which suits hosts that scroll the view
    themselves.
    """

    def __init__(self, markup_source: str, renderer_kind: RendererKind = "html",
                 context: Any = None, wrap_around: bool = False,
                 maximum_width: Optional[int] = None, height: Optional[int] = None):
        self.model = DocumentModel(markup_source, renderer_kind, maximum_width=maximum_width)
        self.dispatcher = ObserverDispatcher(context)
        self.focus = FocusController(LinkIndex(self.model.document), self.dispatcher, wrap_around)
        self._fixed_height = height
        self.viewport = Viewport(self._viewport_height(), len(self.model.document))

    @classmethod
    def html(cls, markup: str, **kwargs) -> "MarkupView":
        """Create a view that renders HTML."""
        return cls(markup, "html", **kwargs)

    @classmethod
    def plain(cls, text: str, **kwargs) -> "MarkupView":
        """Create a view that renders plain text with auto-linked URLs."""
        return cls(text, "plain", **kwargs)

    # --- observers ---
    def on_link_focus(self, observer: Optional[FocusObserver]) -> None:
        """Set the observer called with ``(context, url)`` when the focused link changes."""
        self.dispatcher.on_link_focus(observer)

    def on_link_select(self, observer: Optional[SelectionObserver]) -> None:
        """Set the observer called with ``(context, url)`` when the focused link is selected."""
        self.dispatcher.on_link_select(observer)

    # --- state accessors ---
    @property
    def document(self) -> Document:
        return self.model.document

    @property
    def link_index(self) -> LinkIndex:
        return self.focus.index

    @property
    def focused_link(self) -> Optional[int]:
        return self.focus.current

    @property
    def focused_target(self) -> Optional[str]:
        return self.focus.current_target

    @property
    def wrap_around(self) -> bool:
        return self.focus.wrap_around

    @wrap_around.setter
    def wrap_around(self, enabled: bool) -> None:
        self.focus.wrap_around = bool(enabled)

    # --- layout ---
    def _viewport_height(self) -> int:
        if self._fixed_height is not None:
            return self._fixed_height
        return max(1, len(self.model.document))

    def _rebuild(self) -> None:
        self.focus.rebuild(self.model.document)
        self.viewport.set_height(self._viewport_height())
        self.viewport.set_total_lines(len(self.model.document))
        self._reveal_focus()

    def _reveal_focus(self) -> None:
        current = self.focus.current
        if current is not None:
            self.viewport.ensure_visible(*self.link_index.line_range(current))

    def set_maximum_width(self, width: int) -> None:
        """Limit the line width available to the renderer."""
        if self.model.set_maximum_width(width):
            self._rebuild()

    def set_height(self, height: Optional[int]) -> None:
        """Set the number of visible rows (None follows the document length)."""
        self._fixed_height = None if height is None else max(1, height)
        self.viewport.set_height(self._viewport_height())
        self._reveal_focus()

    def layout(self, width: int, height: Optional[int] = None) -> None:
        """Apply the size the host gives the view."""
        if self.model.set_available_width(width):
            self._rebuild()
        if height is not None:
            self.set_height(height)

    def set_source(self, markup: str) -> None:
        """Replace the displayed markup, keeping focus on the same target if possible."""
        if self.model.set_source(markup):
            self._rebuild()

    def required_size(self) -> tuple[int, int]:
        """(width, height) of the current document."""
        return self.document.size

    def important_area(self) -> Optional[tuple[int, int, int, int]]:
        """(line, column, width, height) of the focused link's first occurrence."""
        current = self.focus.current
        if current is None:
            return None
        occ = self.link_index.link(current).occurrences[0]
        return (occ.line, occ.column_start, occ.width, 1)

    # --- drawing ---
    def draw(self, target: DrawTarget) -> None:
        """Print the visible lines, highlighting the focused link."""
        current = self.focus.current
        lines = self.document.lines
        for row, line_index in enumerate(self.viewport.visible_range()):
            x = 0
            for span in lines[line_index].spans:
                style = span.style
                if current is not None and span.link_id == current:
                    style |= Style.HIGHLIGHT
                target.print_at(row, x, span.text, style)
                x += span.width

    # --- focus operations ---
    def move_focus(self, direction: Direction) -> bool:
        changed = self.focus.move_focus(direction)
        if changed:
            self._reveal_focus()
        return changed

    def take_focus(self, direction: Optional[Direction] = None) -> bool:
        accepted = self.focus.take_focus(direction)
        self._reveal_focus()
        return accepted

    def click_at(self, line: int, column: int) -> bool:
        """Focus the link at a document position; returns True if focus changed."""
        changed = self.focus.click_at(line, column)
        if changed:
            self._reveal_focus()
        return changed

    def focus_target(self, target: str) -> bool:
        changed = self.focus.focus_target(target)
        if changed:
            self._reveal_focus()
        return changed

    def select_current(self) -> bool:
        return self.focus.select_current()

    # --- input ---
    def handle_key(self, key: Union[Key, Direction]) -> bool:
        """Dispatch a navigation key.

        Returns:
            True if the key was consumed.
        """
        if isinstance(key, Direction):
            key = Key(key.value)
        direction = key.direction
        if direction is not None:
            if not len(self.link_index):
                return False
            self.move_focus(direction)
            return True
        if key is Key.SELECT:
            return self.select_current()
        if key is Key.PAGE_DOWN:
            return self.viewport.page_down()
        if key is Key.PAGE_UP:
            return self.viewport.page_up()
        if key is Key.HOME:
            return self.viewport.scroll_to_top()
        if key is Key.END:
            return self.viewport.scroll_to_bottom()
        return False

    def handle_click(self, row: int, column: int) -> bool:
        """Handle a click at a viewport-relative cell.

        Returns:
            True if the click focused a different link.
        """
        if not 0 <= row < self.viewport.height or column < 0:
            return False
        return self.click_at(self.viewport.line_offset + row, column)

    def scroll_by(self, delta: int) -> bool:
        return self.viewport.scroll_by(delta)
