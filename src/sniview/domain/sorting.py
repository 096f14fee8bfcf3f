"""
Stable, type-aware ordering of event records.
"""

from datetime import datetime
from typing import Any, Sequence

from dateutil.parser import isoparse

from sniview.core.models import EventRecord, SortColumn, SortDirection, SortState

__all__ = ["timestamp_to_millis", "sort_key", "sort_records"]


_EPOCH = datetime(1970, 1, 1)

# Date segments use either `/` or `-`
_DATE_SEPARATORS = ("/",)


def timestamp_to_millis(value: str) -> int | None:
    """
    Convert an event timestamp to epoch milliseconds.

    ``2025/10/13 22:41:12.466126`` is normalized to ``2025-10-13
    22:41:12.466126`` before parsing. Other formats are not guessed at.

    Returns:
        Milliseconds since the epoch, or None if the value does not parse
    """
    if not value:
        return None
    date_part, sep, time_part = value.strip().partition(" ")
    if not sep:
        return None
    for separator in _DATE_SEPARATORS:
        date_part = date_part.replace(separator, "-")
    try:
        parsed = isoparse(f"{date_part}T{time_part}")
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    delta = parsed - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def sort_key(record: EventRecord, column: SortColumn) -> Any:
    """
    Comparable value of ``record`` for ``column``.

    Timestamps compare as epoch milliseconds, the target flag as 0/1 and
    everything else as lower-cased text.
    """
    if column is SortColumn.TIMESTAMP:
        return timestamp_to_millis(record.timestamp)
    if column is SortColumn.IS_TARGET:
        return 1 if record.is_target else 0
    if column is SortColumn.PROTOCOL:
        return record.protocol.value.lower()
    return str(getattr(record, column.value)).lower()


def sort_records(
    records: Sequence[EventRecord],
    state: SortState | None = None,
    column: SortColumn | None = None,
    direction: SortDirection | None = None,
) -> list[EventRecord]:
    """
    Return a new list ordered by the active column.

    Either pass a SortState or the column/direction pair. With no active
    column or direction the input order is kept. Ties keep their relative
    input order in both directions. Records whose timestamp does not parse
    go last regardless of direction.

    Args:
        records: Records to order (not mutated)
        state: Current sort state
        column: Column to sort by, if no state is given
        direction: Direction, if no state is given

    Returns:
        New ordered list
    """
    if state is not None:
        column, direction = state.column, state.direction

    if column is None or direction is None:
        return list(records)

    keyed = [(sort_key(record, column), record) for record in records]
    comparable = [(key, record) for key, record in keyed if key is not None]
    rejected = [record for key, record in keyed if key is None]

    descending = direction is SortDirection.DESC
    # list.sort is stable and reverse=True keeps ties in input order
    comparable.sort(key=lambda pair: pair[0], reverse=descending)

    return [record for _, record in comparable] + rejected
