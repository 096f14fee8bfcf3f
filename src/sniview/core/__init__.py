"""
Core data models, limits and exceptions for sniview.
"""

from sniview.core.models import (
    Protocol,
    EventRecord,
    SortColumn,
    SortDirection,
    SortState,
    SetConfig,
    Notification,
    MAIN_SET_ID,
    NEW_SET_ID,
)
from sniview.core.exceptions import (
    SniviewError,
    ConfigurationError,
    TransportError,
    BackendError,
    StorageError,
    InvalidSelectionError,
)
from sniview.core.limits import (
    MAX_STORED_LINES,
    MAX_DISPLAY_ROWS,
    MAX_LINE_LENGTH,
    STORAGE_KEY,
    SORT_STATE_KEY,
    STREAM_ERROR_MARKER,
    is_line_too_long,
)

__all__ = [
    "Protocol",
    "EventRecord",
    "SortColumn",
    "SortDirection",
    "SortState",
    "SetConfig",
    "Notification",
    "MAIN_SET_ID",
    "NEW_SET_ID",
    "SniviewError",
    "ConfigurationError",
    "TransportError",
    "BackendError",
    "StorageError",
    "InvalidSelectionError",
    # Limits
    "MAX_STORED_LINES",
    "MAX_DISPLAY_ROWS",
    "MAX_LINE_LENGTH",
    "STORAGE_KEY",
    "SORT_STATE_KEY",
    "STREAM_ERROR_MARKER",
    "is_line_too_long",
]
