"""Keyboard and mouse input handling using curtsies-style tokens."""

import re
from typing import Optional
from dataclasses import dataclass
from enum import Enum

# SGR mouse report: ESC [ < button ; column ; row (M = press, m = release)
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")
MOUSE_REPORT_PREFIX = '\x1b[<'
MOUSE_REPORT_MAX_TOKENS = 16  # Button, column and row with separators and terminator

MOUSE_BUTTONS = {
    0: 'click',
    64: 'wheel_up',
    65: 'wheel_down',
}


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"
    MOUSE = "mouse"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard or mouse event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace', 'click')
    raw: str  # The raw key string
    is_ctrl: bool = False
    is_sequence: bool = False
    code: Optional[int] = None
    row: Optional[int] = None  # Mouse events only, 0-based
    column: Optional[int] = None


class KeyboardHandler:
    """Handles keyboard input using curtsies-style key names."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get next key event and map curtsies-style names to KeyEvent."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        key_str = str(key)
        if key_str == MOUSE_REPORT_PREFIX:
            key_str = self._read_mouse_report(key_str)
        return self.parse_key(key_str)

    def _read_mouse_report(self, prefix: str) -> str:
        """Collect the rest of a mouse report that curtsies split into tokens."""
        parts = [prefix]
        for _ in range(MOUSE_REPORT_MAX_TOKENS):
            token = self.terminal.get_key(None)
            if not token:
                break
            parts.append(str(token))
            if parts[-1] in ('M', 'm'):
                break
        return ''.join(parts)

    def parse_mouse(self, key_str: str) -> Optional[KeyEvent]:
        """Parse an SGR mouse report; releases and unknown buttons give None."""
        m = _SGR_MOUSE_RE.match(key_str)
        if not m or m.group(4) != 'M':
            return None
        button = int(m.group(1))
        name = MOUSE_BUTTONS.get(button)
        if name is None:
            return None
        return KeyEvent(
            key_type=KeyType.MOUSE,
            value=name,
            raw=key_str,
            is_sequence=True,
            code=button,
            column=int(m.group(2)) - 1,
            row=int(m.group(3)) - 1,
        )

    def parse_key(self, key) -> Optional[KeyEvent]:
        """Parse a curtsies token into a KeyEvent.

        Args:
            key: Token string (or object whose str() is the token)

        Returns:
            Parsed KeyEvent, or None for mouse reports that carry no action
        """
        key_str = str(key)

        if key_str.startswith(MOUSE_REPORT_PREFIX):
            return self.parse_mouse(key_str)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Alt-left>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            name = key_str[1:-1]
            lower = name.lower()
            # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
            lower = lower.replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            mods = set()
            base = parts[-1]
            if len(parts) > 1:
                mods = set(parts[:-1])
            if 'meta' in mods or 'esc' in mods:
                mods = (mods - {'meta', 'esc'}) | {'alt'}
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'

            specials = {
                'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
                'delete', 'page_up', 'page_down', 'insert', 'tab', 'f1',
            }
            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if 'ctrl' in mods and len(base) == 1:
                # Map Ctrl-J / Ctrl-M to enter
                if base in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, is_sequence=True)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
            if mods:
                # Modified keys are unbound; keep them apart from the plain ones
                value = '-'.join(sorted(mods) + [base])
                return KeyEvent(key_type=KeyType.SPECIAL, value=value, raw=key_str, is_sequence=True)
            if base in specials:
                return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)
            if base in ('esc', 'escape'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)

        # Single-byte ASCII control chars (Ctrl-<letter>)
        if len(key_str) == 1:
            o = ord(key_str)
            if o in (8, 127):
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if o == 9:
                return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                ch = chr(ord('a') + o - 1)
                if ch in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)

        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')

        return KeyEvent(
            key_type=KeyType.REGULAR,
            value=key_str,
            raw=key_str,
            is_sequence=False
        )
