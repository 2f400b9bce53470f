"""Document model: the rendered document for the current width."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional

from .constants import ViewConstants
from .document import Document
from .renderer import MarkupRenderer, RendererKind, create_renderer

logger = logging.getLogger(__name__)


class DocumentModel:
    """Owns the markup source and its rendering at the effective width.

    Rendering is delegated to a `MarkupRenderer`; results are cached by
    ``(markup, width)`` so redraws at an unchanged width never re-render.
    The effective width is the maximum width, further limited by the
    width the host makes available (if any).
    """

    def __init__(self, markup: str, renderer: RendererKind = "html",
                 maximum_width: Optional[int] = None,
                 cache_size: int = ViewConstants.DOCUMENT_CACHE_SIZE):
        self.renderer: MarkupRenderer = create_renderer(renderer)
        self._markup = markup
        self._maximum_width: Optional[int] = None
        self._available_width: Optional[int] = None
        self._cache: "OrderedDict[tuple[str, int], Document]" = OrderedDict()
        self._cache_size = max(1, cache_size)
        self.render_count = 0
        if maximum_width is not None:
            self._maximum_width = self._clamp(maximum_width)
        self._width = self._effective_width()
        self._document = self.render(self._markup, self._width)

    @staticmethod
    def _clamp(width: int) -> int:
        return max(ViewConstants.MIN_RENDER_WIDTH, int(width))

    def _effective_width(self) -> int:
        widths = [w for w in (self._maximum_width, self._available_width) if w is not None]
        if not widths:
            return ViewConstants.DEFAULT_MAXIMUM_WIDTH
        return min(widths)

    @property
    def document(self) -> Document:
        return self._document

    @property
    def markup(self) -> str:
        return self._markup

    @property
    def width(self) -> int:
        """The width the current document was requested at."""
        return self._width

    @property
    def maximum_width(self) -> Optional[int]:
        return self._maximum_width

    def render(self, markup: str, width: int) -> Document:
        """Return the document for ``(markup, width)``, rendering only on a cache miss."""
        key = (markup, width)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            logger.debug("Document cache hit at width %d", width)
            return cached
        document = self.renderer.render(markup, width)
        self.render_count += 1
        logger.debug("Rendered %r at width %d", document, width)
        self._cache[key] = document
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return document

    def _refresh(self) -> bool:
        """Re-render if the effective width or source changed.

        Returns:
            True if the current document was replaced.
        """
        width = self._effective_width()
        document = self.render(self._markup, width)
        self._width = width
        if document is self._document:
            return False
        self._document = document
        return True

    def set_maximum_width(self, width: int) -> bool:
        """Set the maximum line width; returns True if the document was replaced."""
        new_width = self._clamp(width)
        if new_width == self._maximum_width:
            return False
        self._maximum_width = new_width
        return self._refresh()

    def set_available_width(self, width: int) -> bool:
        """Set the width the host can give the view; returns True on rebuild."""
        new_width = self._clamp(width)
        if new_width == self._available_width:
            return False
        self._available_width = new_width
        return self._refresh()

    def set_source(self, markup: str) -> bool:
        """Replace the markup source; returns True on rebuild."""
        if markup == self._markup:
            return False
        self._markup = markup
        return self._refresh()
