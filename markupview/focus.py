"""Link focus state machine."""

from __future__ import annotations

import logging
from typing import Optional

from .document import Document
from .errors import FocusStateError
from .link_index import Direction, LinkIndex
from .observers import ObserverDispatcher

logger = logging.getLogger(__name__)


class FocusController:
    """Tracks the focused link: either none (unfocused) or one link id.

    A fresh controller is unfocused. Directional moves that find no link
    leave focus where it is, unless ``wrap_around`` is set, in which case
    they continue from the other end of the document.

    Every transition that lands on a different link notifies the focus
    observer exactly once; transitions that keep the same link are
    silent. Methods return True when the focused link changed.
    """

    def __init__(self, index: LinkIndex, dispatcher: ObserverDispatcher, wrap_around: bool = False):
        self.index = index
        self.dispatcher = dispatcher
        self.wrap_around = wrap_around
        self._current: Optional[int] = None

    @property
    def current(self) -> Optional[int]:
        if self._current is not None and self._current not in self.index:
            raise FocusStateError(f"Focused link {self._current} is missing from the link table")
        return self._current

    @property
    def is_focused(self) -> bool:
        return self.current is not None

    @property
    def current_target(self) -> Optional[str]:
        current = self.current
        return None if current is None else self.index.link(current).target

    def _set_current(self, link_id: Optional[int]) -> bool:
        if link_id == self._current:
            return False
        if link_id is not None and link_id not in self.index:
            raise FocusStateError(f"Cannot focus unknown link {link_id}")
        self._current = link_id
        if link_id is not None:
            self.dispatcher.notify_focus(self.index.link(link_id).target)
        return True

    def _edge_link(self, direction: Direction) -> Optional[int]:
        return self.index.first() if direction.is_forward else self.index.last()

    def move_focus(self, direction: Direction) -> bool:
        current = self.current
        if current is None:
            return self._set_current(self._edge_link(direction))
        target = self.index.nearest_in_direction(self.index.bounding_point(current), direction)
        if target is None and self.wrap_around:
            target = self._edge_link(direction)
        if target is None:
            return False
        return self._set_current(target)

    def take_focus(self, direction: Optional[Direction] = None) -> bool:
        """Focus an edge link when the host moves keyboard focus into the view.

        Entering forwards (or with no direction) focuses the first link,
        entering backwards the last one. Returns whether the view can take
        focus at all, i.e. whether it has links.
        """
        if not len(self.index):
            return False
        if self.current is None:
            self._set_current(self._edge_link(direction or Direction.DOWN))
        return True

    def click_at(self, line: int, column: int) -> bool:
        link_id = self.index.link_at(line, column)
        if link_id is None:
            return False
        return self._set_current(link_id)

    def focus_target(self, target: str) -> bool:
        """Focus the first link pointing at ``target``, if there is one."""
        link_id = self.index.first_with_target(target)
        if link_id is None:
            return False
        return self._set_current(link_id)

    def select_current(self) -> bool:
        """Notify the selection observer with the focused link's target.

        Returns:
            True if a link was focused (and the observer was notified).
        """
        target = self.current_target
        if target is None:
            return False
        self.dispatcher.notify_select(target)
        return True

    def clear(self) -> None:
        self._current = None

    def rebuild(self, document: Document) -> LinkIndex:
        """Switch to a new document, keeping focus on the same target.

        The previously focused link is matched by target URL; when the old
        document had several links to that URL the one at the same
        position among them is preferred. Without a match the controller
        becomes unfocused. Remapping to the same target never notifies.
        """
        old_index = self.index
        previous = self._current
        new_index = LinkIndex(document)
        self.index = new_index
        self._current = None
        if previous is None or previous not in old_index:
            return new_index
        target = old_index.link(previous).target
        old_same = [link.id for link in old_index.document.links_with_target(target)]
        new_same = [link.id for link in document.links_with_target(target)]
        if new_same:
            ordinal = old_same.index(previous)
            self._current = new_same[ordinal] if ordinal < len(new_same) else new_same[0]
        else:
            logger.debug("Focused target %s not in rebuilt document; unfocusing", target)
        return new_index
