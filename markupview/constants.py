"""Constants and configuration for the markup view."""

class ViewConstants:
    """Central configuration constants for the view and browser."""

    # Document layout
    DEFAULT_MAXIMUM_WIDTH = 120  # Line width used by the browser
    MIN_RENDER_WIDTH = 1  # Non-positive widths are clamped to this
    HTML_MIN_WRAP_WIDTH = 5  # Narrower HTML layouts are unreadable
    LIST_BULLET = "* "  # Marker for unordered list items
    DOCUMENT_CACHE_SIZE = 4  # Rendered (markup, width) pairs kept per view

    # Scrolling
    CONTEXT_LINES = 2  # Overlap context lines when paging

    # Settings validation
    MIN_SETTINGS_WIDTH = 20
    MAX_SETTINGS_WIDTH = 400

    # Network
    FETCH_TIMEOUT = 10.0  # Seconds before a page fetch is abandoned
    USER_AGENT = "markupview"

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Status messages
    LINK_TARGET_MESSAGE = "Link target: {}"
    OPENED_MESSAGE = "Opened: {}"
    NO_HISTORY_MESSAGE = "No previous page"
    HELP_HINT = "q to quit"
