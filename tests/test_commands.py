"""Tests for key bindings and browser commands."""

from unittest.mock import Mock

import pytest

from markupview.commands import CommandRegistry, QuitCommand, ViewKeyCommand
from markupview.keyboard import KeyEvent, KeyType
from markupview.view import Key, MarkupView

PAGE = "<p><a href='/a'>first</a> <a href='/b'>second</a></p>"


@pytest.fixture
def browser():
    browser = Mock()
    browser.view = MarkupView.html(PAGE)
    return browser


@pytest.fixture
def registry():
    return CommandRegistry()


def key(key_type, value, **kwargs):
    return KeyEvent(key_type=key_type, value=value, raw=value, **kwargs)


def test_arrows_move_focus(registry, browser):
    assert registry.execute(browser, key(KeyType.SPECIAL, 'right'))
    assert browser.view.focused_target == '/a'
    assert registry.execute(browser, key(KeyType.SPECIAL, 'right'))
    assert browser.view.focused_target == '/b'


def test_enter_selects(registry, browser):
    observer = Mock()
    browser.view.on_link_select(observer)
    assert not registry.execute(browser, key(KeyType.SPECIAL, 'enter'))
    registry.execute(browser, key(KeyType.SPECIAL, 'down'))
    assert registry.execute(browser, key(KeyType.SPECIAL, 'enter'))
    observer.assert_called_once_with(None, '/a')


def test_click(registry, browser):
    event = key(KeyType.MOUSE, 'click', row=0, column=7)
    assert registry.execute(browser, event)
    assert browser.view.focused_target == '/b'


def test_wheel_scrolls(registry):
    browser = Mock()
    browser.view = MarkupView.plain("\n".join(str(n) for n in range(30)), height=5)
    assert registry.execute(browser, key(KeyType.MOUSE, 'wheel_down'))
    assert browser.view.viewport.line_offset == 3
    assert registry.execute(browser, key(KeyType.CTRL, 'y'))
    assert browser.view.viewport.line_offset == 2


@pytest.mark.parametrize("event, method, args", [
    (key(KeyType.REGULAR, 'q'), 'quit', ()),
    (key(KeyType.CTRL, 'q'), 'quit', ()),
    (key(KeyType.SPECIAL, 'backspace'), 'go_back', ()),
    (key(KeyType.CTRL, 'r'), 'reload', ()),
    (key(KeyType.REGULAR, 'w'), 'toggle_wrap_around', ()),
    (key(KeyType.REGULAR, '-'), 'change_maximum_width', (-10,)),
    (key(KeyType.REGULAR, '+'), 'change_maximum_width', (10,)),
])
def test_system_commands(registry, browser, event, method, args):
    assert registry.execute(browser, event)
    getattr(browser, method).assert_called_once_with(*args)


def test_commands_without_a_view(registry):
    browser = Mock()
    browser.view = None
    assert not registry.execute(browser, key(KeyType.SPECIAL, 'down'))
    assert not registry.execute(browser, key(KeyType.MOUSE, 'wheel_down'))
    assert not registry.execute(browser, key(KeyType.MOUSE, 'click', row=0, column=0))


def test_unbound_key(registry, browser):
    assert not registry.execute(browser, key(KeyType.REGULAR, 'z'))
    assert registry.get_command(KeyType.REGULAR, 'z') is None


def test_register_overrides(registry, browser):
    registry.register((KeyType.REGULAR, 'x'), QuitCommand())
    registry.register((KeyType.SPECIAL, 'right'), ViewKeyCommand(Key.LEFT))
    registry.execute(browser, key(KeyType.SPECIAL, 'right'))
    assert browser.view.focused_target == '/b'
    assert registry.execute(browser, key(KeyType.REGULAR, 'x'))
    browser.quit.assert_called_once_with()
