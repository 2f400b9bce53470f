"""Spatial queries over the links of one document."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .document import Document, Link
from .errors import FocusStateError


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_forward(self) -> bool:
        """True for directions that advance in reading order."""
        return self in (Direction.DOWN, Direction.RIGHT)


class LinkIndex:
    """Index over link anchors, rebuilt whenever the document is replaced.

    A link's anchor is the start of its first occurrence. Queries are
    linear in the number of links.
    """

    def __init__(self, document: Document):
        self.document = document
        self._ordered: list[Link] = list(document.iter_links())

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, link_id: object) -> bool:
        return link_id in self.document.links

    def link(self, link_id: int) -> Link:
        try:
            return self.document.links[link_id]
        except KeyError:
            raise FocusStateError(f"Link {link_id} is not part of the current document") from None

    def bounding_point(self, link_id: int) -> tuple[int, int]:
        return self.link(link_id).anchor

    def line_range(self, link_id: int) -> tuple[int, int]:
        """First and last line (inclusive) the link occupies."""
        link = self.link(link_id)
        return (link.first_line, link.last_line)

    def first(self) -> Optional[int]:
        return self._ordered[0].id if self._ordered else None

    def last(self) -> Optional[int]:
        return self._ordered[-1].id if self._ordered else None

    def first_with_target(self, target: str) -> Optional[int]:
        for link in self._ordered:
            if link.target == target:
                return link.id
        return None

    def link_at(self, line: int, column: int) -> Optional[int]:
        """Return the link whose occurrence contains the point, if any."""
        for link in self._ordered:
            for occ in link.occurrences:
                if occ.contains(line, column):
                    return link.id
        return None

    def nearest_in_direction(self, origin: tuple[int, int], direction: Direction) -> Optional[int]:
        """Return the closest link from ``origin`` in ``direction``.

        Up/Down consider links on strictly earlier/later lines, scored by
        line distance then column distance. Left/Right look on the
        origin's line first, scored by column distance; with nothing
        there they fall back to the neighbouring link in reading order on
        the nearest earlier/later line. Ties go to document order.
        """
        line, column = origin
        best: Optional[tuple[tuple[int, int], tuple[int, int, int]]] = None
        best_id: Optional[int] = None

        def consider(score: tuple[int, int], link: Link) -> None:
            nonlocal best, best_id
            key = (score, (*link.anchor, link.id))
            if best is None or key < best:
                best, best_id = key, link.id

        if direction in (Direction.UP, Direction.DOWN):
            for link in self._ordered:
                l_line, l_col = link.anchor
                if (l_line < line) if direction is Direction.UP else (l_line > line):
                    consider((abs(l_line - line), abs(l_col - column)), link)
            return best_id

        for link in self._ordered:
            l_line, l_col = link.anchor
            if l_line != line:
                continue
            if (l_col < column) if direction is Direction.LEFT else (l_col > column):
                consider((abs(l_col - column), 0), link)
        if best_id is not None:
            return best_id

        for link in self._ordered:
            l_line, l_col = link.anchor
            if direction is Direction.RIGHT and l_line > line:
                consider((l_line - line, l_col), link)
            elif direction is Direction.LEFT and l_line < line:
                # Latest link on the row wins
                consider((line - l_line, -l_col), link)
        return best_id
