"""Renderers turn markup source into a `Document` for a given width.

The view never lays out text itself; it asks a `MarkupRenderer` for a
document every time the wrap width or the source changes. This module
holds the renderer interface, the word-wrapping shared by the bundled
renderers, and the plain text renderer. The HTML renderer lives in
`markupview.html_renderer`.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from .document import Document, DocumentBuilder, Element, Style
from .textwidth import split_at_width, text_width


class MarkupRenderer(ABC):
    """Strategy that renders markup into wrapped, styled lines."""

    @abstractmethod
    def render(self, markup: str, width: int) -> Document:
        """Render ``markup`` wrapped at ``width`` columns.

        Implementations must degrade gracefully on malformed input rather
        than raise: whatever they return is displayed as is.
        """


@dataclass
class Block:
    """A run of inline elements laid out as one wrapped paragraph.

    ``prefix`` is drawn before every line (blockquote markers, list
    nesting). ``marker`` is drawn on the first line only and the
    following lines get a hanging indent of the same width.
    """
    elements: list[Element] = field(default_factory=list)
    prefix: str = ""
    marker: str = ""
    preformatted: bool = False
    rule: bool = False


# A wrapped line is a list of elements; a word is a list of fragments
# that must stay together unless the word is wider than the line.
_Line = list[Element]


def _get_hanging_indent_width(paragraph: str) -> int:
    """Return hanging indent width for bullet/numbered paragraphs.

    Detects optional leading spaces, then one of:
    - '-' or '*' followed by exactly one space
    - one or more digits followed by '.' or ')' and exactly one space

    Returns total columns before first text char, or 0 if the paragraph
    is not a list item.
    """
    m = re.match(r"^(\s*)(?:([-*]) (?=\S)|((?:\d+)(?:[\.)]) (?=\S)))", paragraph)
    if not m:
        return 0
    leading = m.group(1) or ""
    marker = m.group(2)
    numbered = m.group(3)
    if marker is not None:
        return len(leading) + len(marker) + 1
    return len(leading) + len(numbered)


def _tokenize(elements: Iterable[Element]) -> list[tuple[str, list[Element]]]:
    """Split elements into ('word', fragments) and ('space', [element]) tokens."""
    tokens: list[tuple[str, list[Element]]] = []
    word: list[Element] = []
    for element in elements:
        for piece in re.split(r"( +)", element.text):
            if not piece:
                continue
            if piece.startswith(" "):
                if word:
                    tokens.append(("word", word))
                    word = []
                if not tokens or tokens[-1][0] != "space":
                    tokens.append(("space", [_with_text(element, " ")]))
            else:
                word.append(_with_text(element, piece))
    if word:
        tokens.append(("word", word))
    return tokens


def _with_text(element: Element, text: str) -> Element:
    return Element(text, element.style, element.link_target, element.link_key)


def _fragments_width(fragments: list[Element]) -> int:
    return sum(text_width(f.text) for f in fragments)


def _split_fragments(fragments: list[Element], max_cols: int) -> tuple[list[Element], list[Element]]:
    """Break a word so its head fits in ``max_cols`` columns."""
    head: list[Element] = []
    col = 0
    for i, frag in enumerate(fragments):
        w = text_width(frag.text)
        if col + w <= max_cols:
            head.append(frag)
            col += w
            continue
        room = max_cols - col
        first, rest = split_at_width(frag.text, room) if room > 0 else ("", frag.text)
        if head and text_width(first) > room:
            first, rest = "", frag.text
        if first:
            head.append(_with_text(frag, first))
        tail = ([_with_text(frag, rest)] if rest else []) + fragments[i + 1:]
        return head, tail
    return head, []


def _merge(line: _Line) -> _Line:
    """Join adjacent elements that carry identical attributes."""
    merged: _Line = []
    for element in line:
        if merged:
            last = merged[-1]
            if (last.style, last.link_target, last.link_key) == (element.style, element.link_target, element.link_key):
                merged[-1] = _with_text(last, last.text + element.text)
                continue
        merged.append(element)
    return merged


def wrap_block(block: Block, width: int) -> list[_Line]:
    """Wrap a block into lines no wider than ``width`` columns.

    Words are packed greedily; spaces at line breaks are dropped and words
    wider than the line are broken across as many lines as needed.
    """
    width = max(1, width)
    first_prefix = block.prefix + block.marker
    rest_prefix = block.prefix + " " * text_width(block.marker)

    def available_width_for_line(idx: int) -> int:
        prefix = first_prefix if idx == 0 else rest_prefix
        return max(1, width - text_width(prefix))

    def prefixed(idx: int, line: _Line) -> _Line:
        prefix = first_prefix if idx == 0 else rest_prefix
        return _merge(([Element.plain(prefix)] if prefix else []) + line)

    if block.rule:
        return [prefixed(0, [Element.plain("-" * available_width_for_line(0))])]

    if block.preformatted:
        return _wrap_preformatted(block, available_width_for_line, prefixed)

    lines: list[_Line] = []
    current: _Line = []
    current_width = 0
    pending_space: Optional[Element] = None

    def place(word: list[Element]) -> None:
        nonlocal current, current_width
        width_here = available_width_for_line(len(lines))
        while _fragments_width(word) > width_here:
            head, word = _split_fragments(word, width_here)
            lines.append(prefixed(len(lines), head))
            width_here = available_width_for_line(len(lines))
        current = list(word)
        current_width = _fragments_width(word)

    for kind, fragments in _tokenize(block.elements):
        if kind == "space":
            if current:
                pending_space = fragments[0]
            continue
        word_width = _fragments_width(fragments)
        if not current:
            place(fragments)
        elif current_width + 1 + word_width <= available_width_for_line(len(lines)):
            current.append(pending_space or Element.plain(" "))
            current.extend(fragments)
            current_width += 1 + word_width
        else:
            lines.append(prefixed(len(lines), current))
            place(fragments)
        pending_space = None

    if current or not lines:
        lines.append(prefixed(len(lines), current))
    return lines


def _wrap_preformatted(block: Block, available_width_for_line, prefixed) -> list[_Line]:
    lines: list[_Line] = []
    current: _Line = []
    for element in block.elements:
        parts = element.text.expandtabs(8).split("\n")
        for n, part in enumerate(parts):
            if n > 0:
                lines.append(prefixed(len(lines), current))
                current = []
            while part:
                room = available_width_for_line(len(lines)) - _fragments_width(current)
                if room <= 0:
                    lines.append(prefixed(len(lines), current))
                    current = []
                    continue
                head, part = split_at_width(part, room)
                if text_width(head) > room and current:
                    lines.append(prefixed(len(lines), current))
                    current = []
                    part = head + part
                    continue
                current.append(_with_text(element, head))
    if current or not lines:
        lines.append(prefixed(len(lines), current))
    return lines


def build_document(blocks: Iterable[Optional[Block]], width: int) -> Document:
    """Lay out blocks into a document. ``None`` entries become blank lines."""
    builder = DocumentBuilder(width)
    for block in blocks:
        if block is None:
            builder.push_line(())
            continue
        for line in wrap_block(block, width):
            builder.push_line(line)
    return builder.build()


_URL_RE = re.compile(r"https?://[^\s<>\"']+[^\s<>\"'.,;:!?)\]]")


class PlainTextRenderer(MarkupRenderer):
    """Renders plain text, one paragraph per source line.

    Bare ``http://`` and ``https://`` URLs become links. Bullet and
    numbered paragraphs get a hanging indent.
    """

    def render(self, markup: str, width: int) -> Document:
        return build_document(self._blocks(markup), max(1, width))

    def _blocks(self, text: str) -> list[Optional[Block]]:
        blocks: list[Optional[Block]] = []
        key = 0
        for paragraph in text.split("\n"):
            paragraph = paragraph.rstrip().expandtabs(8)
            if not paragraph:
                blocks.append(None)
                continue
            hanging = _get_hanging_indent_width(paragraph)
            marker, body = paragraph[:hanging], paragraph[hanging:]
            leading = len(body) - len(body.lstrip(" ")) if not hanging else 0
            prefix, body = body[:leading], body[leading:]
            elements: list[Element] = []
            pos = 0
            for m in _URL_RE.finditer(body):
                if m.start() > pos:
                    elements.append(Element.plain(body[pos:m.start()]))
                elements.append(Element.link(m.group(0), Style.UNDERLINE, m.group(0), key))
                key += 1
                pos = m.end()
            if pos < len(body):
                elements.append(Element.plain(body[pos:]))
            blocks.append(Block(elements, prefix=prefix, marker=marker))
        return blocks


RendererKind = Union[str, MarkupRenderer]


def create_renderer(kind: RendererKind = "html") -> MarkupRenderer:
    """Factory function to create a renderer.

    Args:
        kind: "html", "plain" (or "text"), or a renderer instance which
            is returned unchanged.

    Returns:
        MarkupRenderer instance
    """
    if isinstance(kind, MarkupRenderer):
        return kind
    name = str(kind).lower()
    if name in ("html", "htm"):
        from .html_renderer import HtmlRenderer
        return HtmlRenderer()
    if name in ("plain", "text", "txt"):
        return PlainTextRenderer()
    raise ValueError(f"Unknown renderer kind: {kind!r}")


__all__ = [
    "Block",
    "MarkupRenderer",
    "PlainTextRenderer",
    "RendererKind",
    "build_document",
    "create_renderer",
    "wrap_block",
]
