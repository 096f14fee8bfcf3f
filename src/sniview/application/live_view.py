"""
Live events view use case.

Orchestrates: store snapshot -> parse -> filter -> sort, plus the view's
own state (filter text, persisted sort, hotkeys).
"""

import logging
from dataclasses import dataclass

from sniview.application.event_store import EventStore
from sniview.application.ports import LineStorePort
from sniview.core.exceptions import StorageError
from sniview.core.limits import MAX_DISPLAY_ROWS
from sniview.core.models import EventRecord, Notification, SortColumn, SortState
from sniview.domain.filtering import filter_records
from sniview.domain.sorting import sort_records
from sniview.parsers.sni import SniLineParser

__all__ = ["ViewRows", "LiveEventsView"]

logger = logging.getLogger(__name__)


@dataclass
class ViewRows:
    """One refresh worth of table data."""
    rows: list[EventRecord]
    total_count: int
    filtered_count: int


class LiveEventsView:
    """
    Use case: present the live event table.

    The view reads the store but never mutates it except through the
    explicit clear and pause actions.

    Example:
        view = LiveEventsView(store, line_store=json_store)
        view.filter_text = "domain:google+protocol:udp"
        view.toggle_sort(SortColumn.DOMAIN)
        for record in view.refresh().rows:
            print(record.domain)
    """

    def __init__(
        self,
        store: EventStore,
        line_store: LineStorePort | None = None,
        parser: SniLineParser | None = None,
        max_rows: int = MAX_DISPLAY_ROWS,
    ):
        """
        Initialize the view.

        Args:
            store: Event store to read from
            line_store: Where the sort state is persisted, if anywhere
            parser: Line parser (default SniLineParser)
            max_rows: Most recent lines considered per refresh
        """
        self.store = store
        self.line_store = line_store
        self.parser = parser or SniLineParser()
        self.max_rows = max_rows
        self.filter_text = ""
        self.sort_state = line_store.load_sort_state() if line_store else SortState()

    def refresh(self) -> ViewRows:
        """Compute the rows to display from a fresh snapshot."""
        recent = self.store.snapshot()[-self.max_rows:]
        parsed = list(self.parser.parse_stream(recent))
        filtered = filter_records(parsed, self.filter_text)
        rows = sort_records(filtered, self.sort_state)
        return ViewRows(rows=rows, total_count=len(parsed), filtered_count=len(filtered))

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def toggle_sort(self, column: SortColumn) -> SortState:
        """Header click: new column ascending, same column asc -> desc -> none."""
        self._set_sort(self.sort_state.toggle(column))
        return self.sort_state

    def clear_sort(self) -> None:
        self._set_sort(self.sort_state.cleared())

    def _set_sort(self, state: SortState) -> None:
        self.sort_state = state
        if self.line_store is None:
            return
        try:
            self.line_store.save_sort_state(state)
        except StorageError as e:
            logger.warning("Failed to persist sort state: %s", e)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def clear(self) -> Notification:
        self.store.clear()
        self.store.reset_unseen()
        return Notification("Cleared all domains")

    def toggle_pause(self) -> Notification:
        paused = self.store.toggle_pause()
        return Notification(f"Domains {'paused' if paused else 'resumed'}")

    def handle_key(
        self,
        key: str,
        ctrl: bool = False,
        in_editable: bool = False,
    ) -> Notification | None:
        """
        Dispatch a keyboard shortcut.

        Ctrl+X / Delete clears, p / Pause toggles pause. Keys typed while
        focus is inside an editable element are ignored.

        Returns:
            Notification for the action taken, or None
        """
        if in_editable:
            return None
        if (ctrl and key.lower() == "x") or key == "Delete":
            return self.clear()
        if key in ("p", "Pause"):
            return self.toggle_pause()
        return None
