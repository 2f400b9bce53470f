"""Display width of text in terminal cells."""

from __future__ import annotations

import unicodedata


def char_width(ch: str) -> int:
    """Return the number of terminal columns one character occupies.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def split_at_width(text: str, max_cols: int) -> tuple[str, str]:
    """Split ``text`` so the head fits in ``max_cols`` columns.

    At least one character goes to the head so callers breaking long words
    always make progress, even when a single wide character is wider than
    ``max_cols``.
    """
    col = 0
    for i, ch in enumerate(text):
        w = char_width(ch)
        if col + w > max_cols and i > 0:
            return text[:i], text[i:]
        col += w
    return text, ""
