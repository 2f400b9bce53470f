"""Command pattern implementation for browser actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType
from .view import Key

if TYPE_CHECKING:
    from .browser import Browser
    from .keyboard import KeyEvent


class BrowserCommand(ABC):
    """Base class for browser commands."""

    @abstractmethod
    def execute(self, browser: 'Browser', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            browser: Browser instance
            key_event: The key event that triggered this command

        Returns:
            True if the event was consumed
        """
        pass


class ViewKeyCommand(BrowserCommand):
    """Forwards a navigation key to the markup view."""

    def __init__(self, key: Key):
        self.key = key

    def execute(self, browser, key_event):
        if browser.view is None:
            return False
        return browser.view.handle_key(self.key)


class ScrollCommand(BrowserCommand):
    """Scrolls the view by a fixed number of lines without moving focus."""

    def __init__(self, delta: int):
        self.delta = delta

    def execute(self, browser, key_event):
        if browser.view is None:
            return False
        return browser.view.scroll_by(self.delta)


class ClickCommand(BrowserCommand):
    def execute(self, browser, key_event):
        if browser.view is None or key_event.row is None or key_event.column is None:
            return False
        return browser.view.handle_click(key_event.row, key_event.column)


class SystemCommand(BrowserCommand):
    """Base class for system commands like quit, back, reload."""

    def execute(self, browser: 'Browser', key_event: 'KeyEvent') -> bool:
        self._execute_system(browser, key_event)
        return True

    @abstractmethod
    def _execute_system(self, browser: 'Browser', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, browser, key_event):
        browser.quit()


class BackCommand(SystemCommand):
    def _execute_system(self, browser, key_event):
        browser.go_back()


class ReloadCommand(SystemCommand):
    def _execute_system(self, browser, key_event):
        browser.reload()


class ToggleWrapCommand(SystemCommand):
    def _execute_system(self, browser, key_event):
        browser.toggle_wrap_around()


class WidthCommand(SystemCommand):
    """Narrows or widens the maximum line width."""

    def __init__(self, delta: int):
        self.delta = delta

    def _execute_system(self, browser, key_event):
        browser.change_maximum_width(self.delta)


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], BrowserCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Link navigation
        self.register((KeyType.SPECIAL, 'left'), ViewKeyCommand(Key.LEFT))
        self.register((KeyType.SPECIAL, 'right'), ViewKeyCommand(Key.RIGHT))
        self.register((KeyType.SPECIAL, 'up'), ViewKeyCommand(Key.UP))
        self.register((KeyType.SPECIAL, 'down'), ViewKeyCommand(Key.DOWN))
        self.register((KeyType.SPECIAL, 'enter'), ViewKeyCommand(Key.SELECT))

        # Scrolling
        self.register((KeyType.SPECIAL, 'page_down'), ViewKeyCommand(Key.PAGE_DOWN))
        self.register((KeyType.SPECIAL, 'page_up'), ViewKeyCommand(Key.PAGE_UP))
        self.register((KeyType.REGULAR, ' '), ViewKeyCommand(Key.PAGE_DOWN))
        self.register((KeyType.SPECIAL, 'home'), ViewKeyCommand(Key.HOME))
        self.register((KeyType.SPECIAL, 'end'), ViewKeyCommand(Key.END))
        self.register((KeyType.CTRL, 'e'), ScrollCommand(1))
        self.register((KeyType.CTRL, 'y'), ScrollCommand(-1))
        self.register((KeyType.MOUSE, 'wheel_down'), ScrollCommand(3))
        self.register((KeyType.MOUSE, 'wheel_up'), ScrollCommand(-3))
        self.register((KeyType.MOUSE, 'click'), ClickCommand())

        # System commands
        self.register((KeyType.REGULAR, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.SPECIAL, 'backspace'), BackCommand())
        self.register((KeyType.CTRL, 'r'), ReloadCommand())
        self.register((KeyType.REGULAR, 'w'), ToggleWrapCommand())
        self.register((KeyType.REGULAR, '-'), WidthCommand(-10))
        self.register((KeyType.REGULAR, '+'), WidthCommand(10))

    def register(self, key: Tuple[KeyType, str], command: BrowserCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[BrowserCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, browser: 'Browser', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the event was consumed
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(browser, key_event)
        return False
