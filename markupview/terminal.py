"""Draw targets: an in-memory cell buffer and a Blessed terminal interface."""

import blessed
from typing import Optional
import sys
import select

from .document import Style
from .textwidth import char_width

# SGR mouse reporting: button presses with decimal coordinates
MOUSE_ON = "\x1b[?1000h\x1b[?1006h"
MOUSE_OFF = "\x1b[?1006l\x1b[?1000l"

Cell = tuple[str, Style]
WIDE_FILLER = ""  # Occupies the second column of a wide character


class ScreenBuffer:
    """A grid of styled cells the view can draw into.

    Text past the right edge or below the last row is dropped, never
    wrapped.
    """

    def __init__(self, width: int, height: int):
        self.width = max(0, width)
        self.height = max(0, height)
        self.clear()

    def clear(self) -> None:
        self.cells: list[list[Cell]] = [
            [(" ", Style.NONE) for _ in range(self.width)] for _ in range(self.height)
        ]

    def print_at(self, row: int, column: int, text: str, style: Style) -> None:
        if not 0 <= row < self.height:
            return
        cells = self.cells[row]
        x = column
        for ch in text:
            w = char_width(ch)
            if w == 0:
                if 0 < x <= self.width:
                    prev, prev_style = cells[x - 1]
                    cells[x - 1] = (prev + ch, prev_style)
                continue
            if x < 0:
                x += w
                continue
            if x + w > self.width:
                break
            cells[x] = (ch, style)
            if w == 2:
                cells[x + 1] = (WIDE_FILLER, style)
            x += w

    def row_text(self, row: int) -> str:
        return "".join(ch for ch, _ in self.cells[row]).rstrip()

    def lines(self) -> list[str]:
        return [self.row_text(row) for row in range(self.height)]

    def row_styles(self, row: int) -> list[Style]:
        return [style for _, style in self.cells[row]]


class TerminalInterface:
    """Handles terminal I/O using Blessed for display and Curtsies for input."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False
        # Virtual screen state for minimal updates
        self._last_lines: list[str] | None = None
        self._last_status: str | None = None

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.hide_cursor, end='')
        print(self.term.clear, end='')
        print(MOUSE_ON, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                # Enter raw mode immediately so reads work
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception:
                # No tty (CI, pipes): run without keyboard input
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(MOUSE_OFF, end='')
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception:
                pass  # Raw mode may already be gone
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def invalidate_frame(self) -> None:
        """Invalidate cached frame so next update does a full clear."""
        self._last_lines = None
        self._last_status = None

    def _attributes(self, style: Style) -> str:
        """Blessed sequences for a style, starting from normal."""
        out = [self.term.normal]
        if style & Style.BOLD:
            out.append(self.term.bold)
        if style & Style.UNDERLINE:
            out.append(self.term.underline)
        if style & Style.ITALIC:
            out.append(self.term.italic)
        if style & Style.STRIKETHROUGH:
            out.append(self.term.dim)
        if style & Style.CODE:
            out.append(self.term.cyan)
        if style & Style.HIGHLIGHT:
            out.append(self.term.reverse)
        return ''.join(str(part) for part in out)

    def compose_row(self, buffer: ScreenBuffer, row: int) -> str:
        """Compose one buffer row into a string with terminal attributes."""
        out = []
        active = Style.NONE
        for ch, style in buffer.cells[row]:
            if ch == WIDE_FILLER:
                continue
            if style != active:
                out.append(self._attributes(style))
                active = style
            out.append(ch)
        if active != Style.NONE:
            out.append(str(self.term.normal))
        return ''.join(out)

    def update_frame(self, buffer: ScreenBuffer, status: str = "") -> None:
        """Diff against last frame and write only changed rows.

        Falls back to a full clear on first paint or when the row count
        changes.
        """
        if self._last_lines is None or len(self._last_lines) != buffer.height:
            print(self.term.home + self.term.clear, end='')
            self._last_lines = ["" for _ in range(buffer.height)]
            self._last_status = None

        for y in range(buffer.height):
            new_disp = self.compose_row(buffer, y)
            if new_disp != self._last_lines[y]:
                print(self.term.move(y, 0) + new_disp, end='')
                self._last_lines[y] = new_disp

        status_text = status[:self.term.width].ljust(self.term.width)
        if status_text != (self._last_status or ""):
            print(self.term.move(self.term.height - 1, 0) + self.term.reverse + status_text
                  + self.term.normal, end='')
            self._last_status = status_text
        print('', end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies token as a string, or None if nothing arrived.
        """
        if self._curtsies_input is not None:
            if timeout is None:
                evt = next(self._curtsies_input)  # blocks
                return str(evt)
            t = 0.0 if timeout == 0 else float(timeout)
            r, _, _ = select.select([sys.stdin], [], [], t)
            if not r:
                return None
            evt = next(self._curtsies_input)
            return str(evt)
        return None

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - 1  # Reserve one line for status
