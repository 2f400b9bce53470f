"""markupview CLI entry point.

Allows running via `python -m markupview` and provides the console script
defined in `pyproject.toml`.

Usage:
    markupview [--plain] [--width N] [--wrap] [--log FILE] LOCATION
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .constants import ViewConstants
from .version import get_version_string

USAGE = "usage: markupview [--version] [--plain] [--width N] [--wrap] [--log FILE] LOCATION"


class UsageError(Exception):
    pass


def parse_args(args: list[str]) -> dict:
    """Parse command line arguments into a dict of browser options."""
    options: dict = {
        "location": None,
        "renderer_kind": None,
        "maximum_width": ViewConstants.DEFAULT_MAXIMUM_WIDTH,
        "wrap_around": False,
        "log_file": None,
        "version": False,
    }
    it = iter(args)
    for arg in it:
        if arg in ("--version", "-V"):
            options["version"] = True
        elif arg == "--plain":
            options["renderer_kind"] = "plain"
        elif arg == "--wrap":
            options["wrap_around"] = True
        elif arg in ("--width", "--log"):
            value = next(it, None)
            if value is None:
                raise UsageError(f"{arg} needs a value")
            if arg == "--log":
                options["log_file"] = value
                continue
            try:
                width = int(value)
            except ValueError:
                raise UsageError(f"invalid width: {value}") from None
            if not ViewConstants.MIN_SETTINGS_WIDTH <= width <= ViewConstants.MAX_SETTINGS_WIDTH:
                raise UsageError(
                    f"width must be between {ViewConstants.MIN_SETTINGS_WIDTH} "
                    f"and {ViewConstants.MAX_SETTINGS_WIDTH}")
            options["maximum_width"] = width
        elif arg.startswith("-") and arg != "-":
            raise UsageError(f"unknown option: {arg}")
        elif options["location"] is None:
            options["location"] = arg
        else:
            raise UsageError("only one location may be given")
    return options


def setup_logging(log_file: Optional[str]) -> None:
    """Send log records to a file; the terminal belongs to the browser."""
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.getLogger().addHandler(logging.NullHandler())


def main(argv: Optional[list[str]] = None) -> int:
    try:
        options = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        print(f"markupview: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2
    if options["version"]:
        print(get_version_string())
        return 0
    if options["location"] is None:
        print(USAGE, file=sys.stderr)
        return 2

    setup_logging(options["log_file"])

    # Lazy import to avoid importing UI deps for --version
    from .browser import Browser
    browser = Browser(
        renderer_kind=options["renderer_kind"],
        maximum_width=options["maximum_width"],
        wrap_around=options["wrap_around"],
    )
    if not browser.open(options["location"]):
        print(f"markupview: {browser.status_message}", file=sys.stderr)
        return 1
    browser.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
