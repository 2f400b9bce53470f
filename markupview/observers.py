"""Focus and selection observers.

Observers are plain callables taking ``(context, target)``. The context is
an opaque handle supplied by the host when the view is created, so an
observer can act on application state (quit, open a page, update a status
line) without the view knowing what that state is.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol


class FocusObserver(Protocol):
    def __call__(self, context: Any, target: str) -> None:
        """Called when a different link receives focus."""


class SelectionObserver(Protocol):
    def __call__(self, context: Any, target: str) -> None:
        """Called when the focused link is selected."""


class ObserverDispatcher:
    """Holds at most one focus observer and one selection observer.

    Registering replaces the previous observer; registering None removes
    it. Notifications run synchronously on the caller's thread and any
    exception raised by an observer propagates to the caller.
    """

    def __init__(self, context: Any = None):
        self.context = context
        self._focus_observer: Optional[FocusObserver] = None
        self._selection_observer: Optional[SelectionObserver] = None

    def on_link_focus(self, observer: Optional[FocusObserver]) -> None:
        self._focus_observer = observer

    def on_link_select(self, observer: Optional[SelectionObserver]) -> None:
        self._selection_observer = observer

    def notify_focus(self, target: str) -> None:
        if self._focus_observer is not None:
            self._focus_observer(self.context, target)

    def notify_select(self, target: str) -> None:
        if self._selection_observer is not None:
            self._selection_observer(self.context, target)
