"""Rendered documents: styled lines plus a table of links.

A `Document` is what a renderer produces for one wrap width. It is never
mutated; re-rendering at another width yields a new instance with freshly
assigned link ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Iterable, Iterator, Mapping, NamedTuple, Optional

from .errors import DocumentError
from .textwidth import text_width


class Style(IntFlag):
    """Text attributes of a span."""
    NONE = 0
    BOLD = 1
    UNDERLINE = 2
    ITALIC = 4
    STRIKETHROUGH = 8
    CODE = 16
    HIGHLIGHT = 32  # Added by the view to the focused link


@dataclass(frozen=True)
class Element:
    """A piece of renderer output: text with a style and an optional link.

    Elements that share a ``link_key`` belong to the same link even when
    wrapping puts them on different lines.
    """
    text: str
    style: Style = Style.NONE
    link_target: Optional[str] = None
    link_key: Optional[int] = None

    @classmethod
    def plain(cls, text: str) -> "Element":
        return cls(text)

    @classmethod
    def styled(cls, text: str, style: Style) -> "Element":
        return cls(text, style)

    @classmethod
    def link(cls, text: str, style: Style, target: str, key: Optional[int] = None) -> "Element":
        return cls(text, style, target, key)


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = Style.NONE
    link_id: Optional[int] = None

    @property
    def width(self) -> int:
        return text_width(self.text)


@dataclass(frozen=True)
class StyledLine:
    spans: tuple[Span, ...] = ()

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    @property
    def width(self) -> int:
        return sum(span.width for span in self.spans)


class LinkOccurrence(NamedTuple):
    """One contiguous run of a link's text on a single line."""
    line: int
    column_start: int
    column_end: int  # Exclusive

    def contains(self, line: int, column: int) -> bool:
        return line == self.line and self.column_start <= column < self.column_end

    @property
    def width(self) -> int:
        return self.column_end - self.column_start


@dataclass(frozen=True)
class Link:
    id: int
    target: str
    occurrences: tuple[LinkOccurrence, ...]

    @property
    def anchor(self) -> tuple[int, int]:
        first = self.occurrences[0]
        return (first.line, first.column_start)

    @property
    def first_line(self) -> int:
        return self.occurrences[0].line

    @property
    def last_line(self) -> int:
        return self.occurrences[-1].line


class Document:
    """An immutable rendered document.

    Construction validates the link table and raises `DocumentError` on
    duplicate ids, links without occurrences, occurrences outside the
    document, and spans that reference unknown links.
    """

    def __init__(self, lines: Iterable[StyledLine], links: Iterable[Link], width: int):
        self._lines: tuple[StyledLine, ...] = tuple(lines)
        self._width = width
        table: dict[int, Link] = {}
        for link in links:
            if link.id in table:
                raise DocumentError(f"Duplicate link id {link.id}")
            if not link.occurrences:
                raise DocumentError(f"Link {link.id} has no occurrences")
            for occ in link.occurrences:
                if not 0 <= occ.line < len(self._lines):
                    raise DocumentError(f"Link {link.id} occurs on missing line {occ.line}")
                if occ.column_start < 0 or occ.column_end <= occ.column_start:
                    raise DocumentError(f"Link {link.id} has an empty occurrence on line {occ.line}")
            table[link.id] = link
        for line_index, line in enumerate(self._lines):
            for span in line.spans:
                if span.link_id is not None and span.link_id not in table:
                    raise DocumentError(
                        f"Line {line_index} references unknown link {span.link_id}"
                    )
        self._links: dict[int, Link] = table

    @classmethod
    def empty(cls, width: int) -> "Document":
        return cls((), (), width)

    @property
    def lines(self) -> tuple[StyledLine, ...]:
        return self._lines

    @property
    def links(self) -> Mapping[int, Link]:
        return self._links

    @property
    def width(self) -> int:
        """The wrap width this document was rendered for."""
        return self._width

    @property
    def size(self) -> tuple[int, int]:
        """(widest line, number of lines)."""
        widest = max((line.width for line in self._lines), default=0)
        return (widest, len(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    def iter_links(self) -> Iterator[Link]:
        """Links in document order (anchor line, then column, then id)."""
        return iter(sorted(self._links.values(), key=lambda l: (*l.anchor, l.id)))

    def links_with_target(self, target: str) -> list[Link]:
        return [link for link in self.iter_links() if link.target == target]

    def __repr__(self) -> str:
        return f"Document(width={self._width}, lines={len(self._lines)}, links={len(self._links)})"


class DocumentBuilder:
    """Accumulates rendered lines and assigns link ids in document order."""

    def __init__(self, width: int):
        self.width = width
        self._lines: list[StyledLine] = []
        self._targets: list[str] = []
        self._occurrences: list[list[LinkOccurrence]] = []
        self._ids_by_key: dict[int, int] = {}

    def _link_id_for(self, element: Element, previous: Optional[tuple[int, str]]) -> int:
        if element.link_key is not None:
            link_id = self._ids_by_key.get(element.link_key)
            if link_id is None:
                link_id = self._new_link(element.link_target)
                self._ids_by_key[element.link_key] = link_id
            return link_id
        # Unkeyed runs of the same target on one line form a single link
        if previous is not None and previous[1] == element.link_target:
            return previous[0]
        return self._new_link(element.link_target)

    def _new_link(self, target: str) -> int:
        self._targets.append(target)
        self._occurrences.append([])
        return len(self._targets) - 1

    def push_line(self, elements: Iterable[Element]) -> None:
        """Append one rendered line to the document."""
        y = len(self._lines)
        x = 0
        spans: list[Span] = []
        previous: Optional[tuple[int, str]] = None  # (link id, target) of the last unkeyed link
        for element in elements:
            if not element.text:
                continue
            width = text_width(element.text)
            link_id = None
            if element.link_target is not None:
                link_id = self._link_id_for(element, previous)
                previous = (link_id, element.link_target) if element.link_key is None else None
                occs = self._occurrences[link_id]
                if occs and occs[-1].line == y and occs[-1].column_end == x:
                    occs[-1] = LinkOccurrence(y, occs[-1].column_start, x + width)
                elif width > 0:
                    occs.append(LinkOccurrence(y, x, x + width))
            else:
                previous = None
            spans.append(Span(element.text, element.style, link_id))
            x += width
        self._lines.append(StyledLine(tuple(spans)))

    def build(self) -> Document:
        links = [
            Link(link_id, target, tuple(occs))
            for link_id, (target, occs) in enumerate(zip(self._targets, self._occurrences))
            if occs
        ]
        kept = {link.id for link in links}
        lines = self._lines
        if len(kept) != len(self._targets):
            # Zero-width links cannot be focused; drop their references
            lines = [
                StyledLine(tuple(
                    span if span.link_id is None or span.link_id in kept
                    else Span(span.text, span.style, None)
                    for span in line.spans
                ))
                for line in self._lines
            ]
        return Document(lines, links, self.width)
