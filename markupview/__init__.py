"""markupview - An interactive view for rendered hypertext."""

from .document import Document, DocumentBuilder, Element, Link, LinkOccurrence, Span, Style, StyledLine
from .errors import DocumentError, FocusStateError, LoadError, MarkupViewError
from .link_index import Direction, LinkIndex
from .renderer import MarkupRenderer, PlainTextRenderer, create_renderer
from .view import Key, MarkupView

__all__ = [
    'Document',
    'DocumentBuilder',
    'Element',
    'Link',
    'LinkOccurrence',
    'Span',
    'Style',
    'StyledLine',
    'MarkupViewError',
    'DocumentError',
    'FocusStateError',
    'LoadError',
    'Direction',
    'LinkIndex',
    'MarkupRenderer',
    'PlainTextRenderer',
    'create_renderer',
    'Key',
    'MarkupView',
]
