"""A small terminal browser built on `MarkupView`.

Opens local files or http(s) URLs, shows the focused link's target in the
status line, follows links with Enter and goes back with Backspace.
"""

from __future__ import annotations

import logging
import os
import select
import signal
import sys
import termios
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urldefrag, urljoin, urlparse

import httpx

from .commands import CommandRegistry
from .constants import ViewConstants
from .errors import LoadError
from .keyboard import KeyboardHandler, KeyEvent
from .settings_persistence import SettingsKeys, SettingsPersistence, get_persistence
from .terminal import ScreenBuffer, TerminalInterface
from .view import MarkupView

logger = logging.getLogger(__name__)

HTML_SUFFIXES = (".html", ".htm", ".xhtml")


@dataclass
class Page:
    location: str
    markup: str
    kind: str  # "html" or "plain"


def _is_remote(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def load_page(location: str, client: Optional[httpx.Client] = None) -> Page:
    """Load a document from a local path or an http(s) URL.

    Raises:
        LoadError: if the document cannot be read or has an unsupported
            content type.
    """
    if _is_remote(location):
        return _fetch_page(location, client)
    path = location[len("file://"):] if location.startswith("file://") else location
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            markup = f.read()
    except OSError as e:
        raise LoadError(f"Cannot open {path}: {e.strerror or e}") from e
    kind = "html" if path.lower().endswith(HTML_SUFFIXES) else "plain"
    return Page(os.path.abspath(path), markup, kind)


def _fetch_page(url: str, client: Optional[httpx.Client]) -> Page:
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=ViewConstants.FETCH_TIMEOUT,
            follow_redirects=True,
            headers={"User-Agent": ViewConstants.USER_AGENT},
        )
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise LoadError(f"HTTP {e.response.status_code} for {url}") from e
    except httpx.HTTPError as e:
        raise LoadError(f"Failed to fetch {url}: {e}") from e
    finally:
        if owns_client:
            client.close()
    content_type = response.headers.get("content-type", "text/html").split(";")[0].strip().lower()
    if content_type in ("text/html", "application/xhtml+xml"):
        kind = "html"
    elif content_type.startswith("text/"):
        kind = "plain"
    else:
        raise LoadError(f"Unsupported content type: {content_type}")
    return Page(str(response.url), response.text, kind)


def resolve_link(base: str, target: str) -> str:
    """Resolve a link target against the location of the current page."""
    if urlparse(target).scheme:
        return target
    if _is_remote(base):
        return urljoin(base, target)
    path, _fragment = urldefrag(target)
    if not path:
        return base
    return os.path.normpath(os.path.join(os.path.dirname(base), path))


def _on_link_focus(browser: "Browser", target: str) -> None:
    browser.status_message = ViewConstants.LINK_TARGET_MESSAGE.format(target)


def _on_link_select(browser: "Browser", target: str) -> None:
    browser.follow(target)


class Browser:
    """Main browser application controller."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 persistence: Optional[SettingsPersistence] = None,
                 client: Optional[httpx.Client] = None,
                 renderer_kind: Optional[str] = None,
                 maximum_width: int = ViewConstants.DEFAULT_MAXIMUM_WIDTH,
                 wrap_around: bool = False):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.persistence = persistence or get_persistence()
        self.client = client
        self.renderer_kind = renderer_kind
        self.maximum_width = maximum_width
        self.wrap_around = wrap_around
        self.command_registry = CommandRegistry()
        self.view: Optional[MarkupView] = None
        self.location: Optional[str] = None
        self.history: list[str] = []
        self.status_message: Optional[str] = None
        self.running = False
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None

    # --- pages ---
    def open(self, location: str, push_history: bool = True) -> bool:
        """Load and display a document; failures end up in the status line."""
        try:
            page = load_page(location, self.client)
        except LoadError as e:
            logger.warning("%s", e)
            self.status_message = str(e)
            return False
        if self.location is not None:
            self._remember()
            if push_history:
                self.history.append(self.location)
        self._show(page)
        return True

    def _show(self, page: Page) -> None:
        settings = self.persistence.load_settings(page.location)
        view = MarkupView(
            page.markup,
            self.renderer_kind or page.kind,
            context=self,
            wrap_around=settings.get(SettingsKeys.WRAP_AROUND, self.wrap_around),
            maximum_width=settings.get(SettingsKeys.MAXIMUM_WIDTH, self.maximum_width),
            height=self.terminal.height,
        )
        view.layout(self.terminal.width)
        view.on_link_focus(_on_link_focus)
        view.on_link_select(_on_link_select)
        self.view = view
        self.location = page.location
        self.status_message = ViewConstants.OPENED_MESSAGE.format(page.location)
        logger.info("Opened %s (%d lines, %d links)", page.location,
                    len(view.document), len(view.document.links))
        last_target = settings.get(SettingsKeys.LAST_FOCUSED_TARGET)
        if last_target:
            view.focus_target(last_target)

    def _remember(self) -> None:
        if self.view is None or self.location is None:
            return
        self.persistence.save_settings(self.location, {
            SettingsKeys.LAST_FOCUSED_TARGET: self.view.focused_target,
        })

    def follow(self, target: str) -> bool:
        if self.location is None:
            return self.open(target)
        resolved = resolve_link(self.location, target)
        if resolved == self.location:
            return False
        return self.open(resolved)

    def go_back(self) -> bool:
        if not self.history:
            self.status_message = ViewConstants.NO_HISTORY_MESSAGE
            return False
        previous = self.history.pop()
        return self.open(previous, push_history=False)

    def reload(self) -> bool:
        if self.location is None:
            return False
        self._remember()
        return self.open(self.location, push_history=False)

    def toggle_wrap_around(self) -> None:
        if self.view is None:
            return
        self.view.wrap_around = not self.view.wrap_around
        self.persistence.save_settings(self.location, {SettingsKeys.WRAP_AROUND: self.view.wrap_around})
        self.status_message = f"Wrap-around {'on' if self.view.wrap_around else 'off'}"

    def change_maximum_width(self, delta: int) -> None:
        if self.view is None:
            return
        current = self.view.model.maximum_width or self.maximum_width
        width = max(ViewConstants.MIN_SETTINGS_WIDTH, min(ViewConstants.MAX_SETTINGS_WIDTH, current + delta))
        self.view.set_maximum_width(width)
        self.persistence.save_settings(self.location, {SettingsKeys.MAXIMUM_WIDTH: width})
        self.status_message = f"Maximum width: {width}"

    def quit(self) -> None:
        self._remember()
        self.running = False

    # --- drawing and input ---
    def status_line(self) -> str:
        if self.status_message:
            return f" {self.status_message}"
        if self.view is not None and self.view.focused_target:
            return " " + ViewConstants.LINK_TARGET_MESSAGE.format(self.view.focused_target)
        hint = ViewConstants.HELP_HINT
        return f" {self.location or ''}".ljust(max(0, self.terminal.width - len(hint) - 1)) + hint

    def draw(self) -> ScreenBuffer:
        buffer = ScreenBuffer(self.terminal.width, self.terminal.height)
        if self.view is not None:
            self.view.draw(buffer)
        self.terminal.update_frame(buffer, self.status_line())
        return buffer

    def handle_resize(self) -> None:
        if self.view is not None:
            self.view.layout(self.terminal.width, self.terminal.height)
        self.terminal.invalidate_frame()

    def handle_key_event(self, key_event: KeyEvent) -> bool:
        """Handle a keyboard or mouse event; returns True if it was consumed."""
        self.status_message = None
        return self.command_registry.execute(self, key_event)

    def _handle_resize_signal(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        if self._resize_pipe_w is not None:
            os.write(self._resize_pipe_w, ViewConstants.RESIZE_PIPE_MARKER)

    def run(self) -> None:
        """Run the main browser loop."""
        # Self-pipe so SIGWINCH wakes the select loop
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self.terminal.setup()
        self.running = True
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize_signal)
        old_settings = None
        try:
            with self.terminal.term.cbreak():
                try:
                    old_settings = termios.tcgetattr(sys.stdin)
                    new_settings = list(old_settings)
                    # Disable IXON/IXOFF so Ctrl-Q and Ctrl-S reach us
                    new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
                except (termios.error, AttributeError, OSError):
                    old_settings = None

                need_draw = True
                while self.running:
                    if need_draw:
                        self.draw()
                        need_draw = False

                    ready, _, _ = select.select([0, self._resize_pipe_r], [], [])
                    if self._resize_pipe_r in ready:
                        os.read(self._resize_pipe_r, 1024)
                        self.handle_resize()
                        need_draw = True
                    elif 0 in ready:
                        raw = self.keyboard.get_key_event(timeout=0)
                        if raw:
                            self.handle_key_event(raw)
                            need_draw = True

                if old_settings:
                    try:
                        termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                    except (termios.error, OSError):
                        pass
        except KeyboardInterrupt:
            self._remember()
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self._resize_pipe_r = self._resize_pipe_w = None
            self.terminal.cleanup()
