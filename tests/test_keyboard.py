"""Test keyboard and mouse input handling."""

import pytest
from unittest.mock import Mock

from markupview.keyboard import KeyboardHandler, KeyEvent, KeyType


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []

    def get_key(self, timeout=None):
        """Mock get_key that returns from queue."""
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key_str):
        key = Mock()
        key.__str__ = lambda self: key_str
        self._key_queue.append(key)


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


def test_arrow_keys(handler):
    for name in ('left', 'right', 'up', 'down'):
        handler.terminal.add_key(f'<{name.upper()}>')
        event = handler.get_key_event()
        assert event.key_type == KeyType.SPECIAL
        assert event.value == name


def test_page_keys(handler):
    assert handler.parse_key('<PAGEDOWN>').value == 'page_down'
    assert handler.parse_key('<PAGEUP>').value == 'page_up'
    assert handler.parse_key('<HOME>').value == 'home'
    assert handler.parse_key('<END>').value == 'end'


def test_enter_variants(handler):
    for raw in ('<Ctrl-j>', '<Ctrl-m>', '\n', '\r'):
        event = handler.parse_key(raw)
        assert event.key_type == KeyType.SPECIAL
        assert event.value == 'enter'


def test_space_and_regular_keys(handler):
    assert handler.parse_key('<SPACE>') == KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
    event = handler.parse_key('q')
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'q'


def test_control_keys(handler):
    event = handler.parse_key('<Ctrl-r>')
    assert event.key_type == KeyType.CTRL
    assert event.value == 'r'
    assert event.is_ctrl
    event = handler.parse_key('\x11')
    assert event.key_type == KeyType.CTRL
    assert event.value == 'q'


def test_backspace_bytes(handler):
    for raw in ('\x7f', '\x08', '<BACKSPACE>'):
        assert handler.parse_key(raw).value == 'backspace'


def test_tab(handler):
    assert handler.parse_key('\t').value == 'tab'
    assert handler.parse_key('<TAB>').value == 'tab'


def test_escape(handler):
    assert handler.parse_key('<ESC>').value == 'escape'
    assert handler.parse_key('\x1b').value == 'escape'


def test_mouse_click(handler):
    event = handler.parse_key('\x1b[<0;11;3M')
    assert event.key_type == KeyType.MOUSE
    assert event.value == 'click'
    assert (event.row, event.column) == (2, 10)


def test_mouse_wheel(handler):
    assert handler.parse_key('\x1b[<64;1;1M').value == 'wheel_up'
    assert handler.parse_key('\x1b[<65;1;1M').value == 'wheel_down'


def test_inert_mouse_reports(handler):
    assert handler.parse_key('\x1b[<0;11;3m') is None  # release
    assert handler.parse_key('\x1b[<2;1;1M') is None  # right button
    assert handler.parse_key('\x1b[<garbage') is None


def test_mouse_report_split_into_tokens(handler):
    for token in ('\x1b[<', '0', ';', '5', ';', '3', 'M', 'q'):
        handler.terminal.add_key(token)
    event = handler.get_key_event(timeout=0)
    assert event.key_type == KeyType.MOUSE
    assert event.value == 'click'
    assert (event.row, event.column) == (2, 4)
    assert event.raw == '\x1b[<0;5;3M'
    # The token after the report is left for the next read
    assert handler.get_key_event(timeout=0).value == 'q'


def test_split_wheel_report(handler):
    for token in ('\x1b[<', '65', ';', '1', ';', '1', 'M'):
        handler.terminal.add_key(token)
    event = handler.get_key_event()
    assert event.key_type == KeyType.MOUSE
    assert event.value == 'wheel_down'


def test_split_release_report_is_consumed(handler):
    for token in ('\x1b[<', '0', ';', '5', ';', '3', 'm'):
        handler.terminal.add_key(token)
    assert handler.get_key_event() is None
    assert handler.terminal._key_queue == []


def test_truncated_mouse_report(handler):
    for token in ('\x1b[<', '0', ';'):
        handler.terminal.add_key(token)
    assert handler.get_key_event() is None
    assert handler.terminal._key_queue == []


def test_modified_keys_do_not_alias_plain_keys(handler):
    event = handler.parse_key('<Alt-LEFT>')
    assert event.key_type == KeyType.SPECIAL
    assert event.value == 'alt-left'
    assert handler.parse_key('<Shift-DOWN>').value == 'shift-down'
    assert handler.parse_key('<Esc+u>').value == 'alt-u'


def test_no_key_available(handler):
    assert handler.get_key_event(timeout=0) is None
