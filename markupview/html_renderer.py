"""HTML renderer built on the standard library's lenient `html.parser`.

The source is parsed once into blocks of styled inline elements; each
render only re-wraps those blocks for the requested width. Malformed
markup never raises: unknown tags contribute their text, unmatched end
tags are ignored and unclosed tags simply end with the document.
"""

from __future__ import annotations

import logging
import re
from html.parser import HTMLParser
from typing import Mapping, Optional

from .constants import ViewConstants
from .document import Document, Element, Style
from .renderer import Block, MarkupRenderer, build_document

logger = logging.getLogger(__name__)

# Tags whose content is never displayed
SKIP_TAGS = {"script", "style", "head", "title", "template", "noscript"}

# Inline tags and the style they add
INLINE_STYLES = {
    "b": Style.BOLD,
    "strong": Style.BOLD,
    "i": Style.ITALIC,
    "em": Style.ITALIC,
    "cite": Style.ITALIC,
    "u": Style.UNDERLINE,
    "ins": Style.UNDERLINE,
    "s": Style.STRIKETHROUGH,
    "strike": Style.STRIKETHROUGH,
    "del": Style.STRIKETHROUGH,
    "code": Style.CODE,
    "kbd": Style.CODE,
    "samp": Style.CODE,
    "tt": Style.CODE,
}

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}

# Block tags separated from their neighbours by a blank line
PARAGRAPH_TAGS = HEADING_TAGS | {"p", "pre", "blockquote", "table", "dl", "figure"}

# Block tags that only start a new line
LINE_TAGS = {
    "div", "section", "article", "header", "footer", "nav", "main", "aside",
    "li", "tr", "dt", "dd", "form", "address", "center", "caption",
}

LINK_STYLE = Style.UNDERLINE


class _BlockParser(HTMLParser):
    """Collects `Block`s from an HTML document."""

    def __init__(self, styles: Mapping[str, Style] = INLINE_STYLES, link_style: Style = LINK_STYLE):
        super().__init__(convert_charrefs=True)
        self.styles = styles
        self.link_style = link_style
        self.blocks: list[Optional[Block]] = []
        self._elements: list[Element] = []
        self._styles: list[tuple[str, Style]] = []
        self._links: list[tuple[Optional[str], int]] = []
        self._lists: list[list] = []  # [ordered, counter] per open list
        self._quote_depth = 0
        self._pre_depth = 0
        self._skip_depth = 0
        self._marker = ""
        self._pending_blank = False
        self._next_key = 0
        self._at_line_start = True

    # --- state helpers ---
    def _current_style(self) -> Style:
        style = Style.NONE
        for _, s in self._styles:
            style |= s
        if self._current_link() is not None:
            style |= self.link_style
        return style

    def _current_link(self) -> Optional[tuple[str, int]]:
        for target, key in reversed(self._links):
            if target is not None:
                return (target, key)
        return None

    def _prefix(self) -> str:
        nesting = "  " * max(0, len(self._lists) - 1)
        return "> " * self._quote_depth + nesting

    def _flush(self) -> None:
        has_text = any(e.text.strip() for e in self._elements) or (
            self._pre_depth and self._elements
        )
        if has_text:
            if self._pending_blank and self.blocks:
                self.blocks.append(None)
            self._pending_blank = False
            self.blocks.append(Block(
                self._elements,
                prefix=self._prefix(),
                marker=self._marker,
                preformatted=self._pre_depth > 0,
            ))
            self._marker = ""
        self._elements = []
        self._at_line_start = True

    def _break(self, blank: bool = False) -> None:
        self._flush()
        if blank:
            self._pending_blank = True

    def _pop_until(self, stack: list, tag: str) -> None:
        for i in range(len(stack) - 1, -1, -1):
            if stack[i][0] == tag:
                del stack[i]
                return

    # --- HTMLParser callbacks ---
    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        if tag in SKIP_TAGS:
            self._skip_depth += 1
            return
        if self._skip_depth:
            return
        if tag in self.styles:
            self._styles.append((tag, self.styles[tag]))
        elif tag in HEADING_TAGS:
            self._break(blank=True)
            self._styles.append((tag, Style.BOLD))
        elif tag == "a":
            href = attrs.get("href")
            self._links.append((href or None, self._next_key))
            self._next_key += 1
        elif tag == "br":
            if self._pre_depth:
                self.handle_data("\n")
            else:
                self._break()
        elif tag == "hr":
            self._break(blank=True)
            if self._pending_blank and self.blocks:
                self.blocks.append(None)
            self.blocks.append(Block(prefix=self._prefix(), rule=True))
            self._pending_blank = True
        elif tag in ("ul", "ol", "menu"):
            self._break(blank=not self._lists)
            self._lists.append([tag == "ol", 0])
        elif tag == "li":
            self._break()
            if self._lists:
                entry = self._lists[-1]
                entry[1] += 1
                self._marker = f"{entry[1]}. " if entry[0] else ViewConstants.LIST_BULLET
            else:
                self._marker = ViewConstants.LIST_BULLET
        elif tag == "blockquote":
            self._break(blank=True)
            self._quote_depth += 1
        elif tag == "pre":
            self._break(blank=True)
            self._pre_depth += 1
        elif tag == "img":
            alt = (attrs.get("alt") or "").strip()
            if alt:
                self.handle_data(f"[{alt}]")
        elif tag in ("td", "th"):
            if not self._at_line_start:
                self.handle_data(" ")
        elif tag in PARAGRAPH_TAGS:
            self._break(blank=True)
        elif tag in LINE_TAGS:
            self._break()

    def handle_startendtag(self, tag, attrs):
        self.handle_starttag(tag, attrs)
        if tag not in ("br", "hr", "img"):
            self.handle_endtag(tag)

    def handle_endtag(self, tag):
        if tag in SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if self._skip_depth:
            return
        if tag in self.styles:
            self._pop_until(self._styles, tag)
        elif tag in HEADING_TAGS:
            self._pop_until(self._styles, tag)
            self._break(blank=True)
        elif tag == "a":
            if self._links:
                self._links.pop()
        elif tag in ("ul", "ol", "menu"):
            self._break()
            if self._lists:
                self._lists.pop()
            if not self._lists:
                self._pending_blank = True
        elif tag == "blockquote":
            self._break(blank=True)
            self._quote_depth = max(0, self._quote_depth - 1)
        elif tag == "pre":
            self._break(blank=True)
            self._pre_depth = max(0, self._pre_depth - 1)
        elif tag in PARAGRAPH_TAGS:
            self._break(blank=True)
        elif tag in LINE_TAGS:
            self._break()

    def handle_data(self, data):
        if self._skip_depth or not data:
            return
        if not self._pre_depth:
            data = re.sub(r"\s+", " ", data)
            if self._at_line_start:
                data = data.lstrip(" ")
            if not data:
                return
        link = self._current_link()
        style = self._current_style()
        if link is not None:
            self._elements.append(Element.link(data, style, link[0], link[1]))
        else:
            self._elements.append(Element.styled(data, style))
        self._at_line_start = False

    def close(self):
        super().close()
        self._flush()


def parse_blocks(markup: str, styles: Mapping[str, Style] = INLINE_STYLES,
                 link_style: Style = LINK_STYLE) -> list[Optional[Block]]:
    """Parse HTML into blocks; ``None`` entries are blank separator lines."""
    parser = _BlockParser(styles, link_style)
    parser.feed(markup)
    parser.close()
    blocks = parser.blocks
    while blocks and blocks[-1] is None:
        blocks.pop()
    return blocks


class HtmlRenderer(MarkupRenderer):
    """Renders HTML documents.

    Links are underlined, ``<b>``/``<strong>`` and headings are bold,
    emphasis is italic and code is marked with `Style.CODE`. The last
    parsed source is kept so re-wrapping at a new width does not parse
    again.

    ``styles`` replaces the inline tag to style mapping and ``link_style``
    the style added to link text:

        HtmlRenderer(styles={**INLINE_STYLES, "mark": Style.BOLD},
                     link_style=Style.ITALIC)
    """

    def __init__(self, min_width: int = ViewConstants.HTML_MIN_WRAP_WIDTH,
                 styles: Optional[Mapping[str, Style]] = None,
                 link_style: Style = LINK_STYLE):
        self.min_width = min_width
        self.styles = dict(INLINE_STYLES if styles is None else styles)
        self.link_style = link_style
        self._parsed_source: Optional[str] = None
        self._blocks: list[Optional[Block]] = []

    def _parse(self, markup: str) -> list[Optional[Block]]:
        if markup != self._parsed_source:
            self._blocks = parse_blocks(markup, self.styles, self.link_style)
            self._parsed_source = markup
            logger.debug("Parsed HTML into %d blocks", len(self._blocks))
        return self._blocks

    def render(self, markup: str, width: int) -> Document:
        return build_document(self._parse(markup), max(self.min_width, width))
