"""
Capacity limits and related helpers for sniview.

Centralizes the bounds that keep the live console's memory and durable
storage from growing without limit.
"""

import warnings

__all__ = [
    # Configuration constants
    "MAX_STORED_LINES",
    "MAX_DISPLAY_ROWS",
    "MAX_LINE_LENGTH",
    "STORAGE_KEY",
    "SORT_STATE_KEY",
    "STREAM_ERROR_MARKER",
    # Helpers
    "is_line_too_long",
]


# =============================================================================
# Configuration Constants
# =============================================================================

# Lines kept in the in-memory buffer and mirrored to durable storage
MAX_STORED_LINES = 1000

# Rows handed to parse/filter/sort per refresh
MAX_DISPLAY_ROWS = 1000

# Event lines are short; anything larger is not a classification event
MAX_LINE_LENGTH = 64 * 1024  # 64KB

# Durable store keys
STORAGE_KEY = "sniview_domains_lines"
SORT_STATE_KEY = "sniview_domains_sort"

# Synthetic line appended to the visible log when the stream fails
STREAM_ERROR_MARKER = "[STREAM ERROR]"


# =============================================================================
# Helpers
# =============================================================================

def is_line_too_long(line: str, max_length: int = MAX_LINE_LENGTH) -> bool:
    """
    Check a raw stream line against MAX_LINE_LENGTH.

    Over-long lines are reported with a warning; callers drop them.

    Args:
        line: Raw line received from a source
        max_length: Maximum allowed length in bytes

    Returns:
        True if the line should be dropped
    """
    line_length = len(line.encode("utf-8", errors="replace"))
    if line_length > max_length:
        warnings.warn(
            f"Dropping stream line of {line_length:,} bytes "
            f"(limit {max_length:,} bytes).",
            UserWarning,
            stacklevel=2,
        )
        return True
    return False
