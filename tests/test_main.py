"""Tests for the command line entry point."""

from unittest.mock import patch

import pytest

from markupview.__main__ import UsageError, main, parse_args
from markupview.constants import ViewConstants


def test_defaults():
    options = parse_args(["page.html"])
    assert options["location"] == "page.html"
    assert options["renderer_kind"] is None
    assert options["maximum_width"] == ViewConstants.DEFAULT_MAXIMUM_WIDTH
    assert options["wrap_around"] is False
    assert options["log_file"] is None


def test_all_options():
    options = parse_args(["--plain", "--width", "72", "--wrap", "--log", "debug.log", "notes.txt"])
    assert options == {
        "location": "notes.txt",
        "renderer_kind": "plain",
        "maximum_width": 72,
        "wrap_around": True,
        "log_file": "debug.log",
        "version": False,
    }


@pytest.mark.parametrize("args", [
    ["--width"],
    ["--width", "wide"],
    ["--width", "5"],
    ["--bogus"],
    ["a.html", "b.html"],
])
def test_usage_errors(args):
    with pytest.raises(UsageError):
        parse_args(args)


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("markupview ")


def test_missing_location(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().err


def test_bad_option_exit_code(capsys):
    assert main(["--width", "1"]) == 2
    assert "width must be between" in capsys.readouterr().err


def test_runs_browser():
    with patch("markupview.__main__.setup_logging") as setup_logging, \
            patch("markupview.browser.Browser") as browser_class:
        browser_class.return_value.open.return_value = True
        assert main(["--width", "60", "page.html"]) == 0
    setup_logging.assert_called_once_with(None)
    browser_class.assert_called_once_with(renderer_kind=None, maximum_width=60, wrap_around=False)
    browser_class.return_value.open.assert_called_once_with("page.html")
    browser_class.return_value.run.assert_called_once_with()


def test_open_failure(capsys):
    with patch("markupview.__main__.setup_logging"), patch("markupview.browser.Browser") as browser_class:
        browser_class.return_value.open.return_value = False
        browser_class.return_value.status_message = "Cannot open page.html"
        assert main(["page.html"]) == 1
    browser_class.return_value.run.assert_not_called()
    assert "Cannot open page.html" in capsys.readouterr().err
