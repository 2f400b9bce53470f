"""Exceptions raised by the markup view."""


class MarkupViewError(Exception):
    """Base class for markup view errors."""


class DocumentError(MarkupViewError):
    """A rendered document violates its structural invariants."""


class FocusStateError(MarkupViewError):
    """The focused link is not part of the current document."""


class LoadError(MarkupViewError):
    """A document could not be loaded from a file or URL."""
