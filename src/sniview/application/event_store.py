"""
Bounded, persisted buffer of raw event lines.

The store is owned by whoever runs the live view: create it, enter it
(rehydrating from durable storage), feed it from one EventChannel, and
exit it to flush. Consumers only ever see snapshots.
"""

import logging
import queue
import threading
from collections import deque
from typing import Iterable

from sniview.application.ports import LineStorePort
from sniview.application.transport import (
    ChannelEvent,
    LineReceived,
    StreamClosed,
    StreamFailed,
)
from sniview.core.exceptions import StorageError
from sniview.core.limits import MAX_STORED_LINES, STREAM_ERROR_MARKER

__all__ = ["EventStore"]

logger = logging.getLogger(__name__)


class EventStore:
    """
    Last-N raw lines with FIFO eviction and a durable mirror.

    Every mutation is followed by a persist of the current contents.
    Persistence failures are logged and otherwise ignored: the in-memory
    buffer is the source of truth.

    Example:
        with EventStore(JsonLineStore(state_dir)) as store:
            store.append("2025/10/13 22:41:12.466126 [INFO] SNI TCP: ...")
            lines = store.snapshot()
    """

    def __init__(
        self,
        line_store: LineStorePort | None = None,
        capacity: int = MAX_STORED_LINES,
    ):
        """
        Initialize an empty store.

        Args:
            line_store: Durable store adapter, or None for memory only
            capacity: Maximum number of lines kept
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.line_store = line_store
        self._lines: deque[str] = deque(maxlen=capacity)
        self._paused = threading.Event()
        self._unseen = 0
        self._stream_failed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load_persisted(self) -> int:
        """
        Replace the buffer with the persisted lines.

        Returns:
            Number of lines restored
        """
        if self.line_store is None:
            return 0
        lines = self.line_store.load_lines()
        self._lines.clear()
        self._lines.extend(lines[-self.capacity:])
        return len(self._lines)

    def __enter__(self) -> "EventStore":
        self.load_persisted()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.persist()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def append(self, line: str) -> None:
        """Add one line, evicting the oldest when full."""
        self._lines.append(line)
        self._unseen += 1
        self.persist()

    def extend(self, lines: Iterable[str]) -> int:
        """Add a batch of lines with a single persist."""
        count = 0
        for line in lines:
            self._lines.append(line)
            count += 1
        if count:
            self._unseen += count
            self.persist()
        return count

    def clear(self) -> None:
        """Drop every line and reset the unseen counter."""
        self._lines.clear()
        self._unseen = 0
        self.persist()

    def persist(self) -> None:
        """Mirror the buffer to durable storage; never raises."""
        if self.line_store is None:
            return
        try:
            self.line_store.save_lines(list(self._lines))
        except StorageError as e:
            logger.error("Failed to persist event lines: %s", e)

    # ------------------------------------------------------------------
    # Channel consumption
    # ------------------------------------------------------------------

    def handle(self, event: ChannelEvent) -> bool:
        """
        Apply one channel event without persisting.

        Returns:
            True if the buffer changed
        """
        if isinstance(event, LineReceived):
            self._lines.append(event.line)
            self._unseen += 1
            return True
        if isinstance(event, StreamFailed):
            self._stream_failed = True
            self._lines.append(STREAM_ERROR_MARKER)
            return True
        if isinstance(event, StreamClosed):
            logger.info("Event stream closed")
        return False

    def pump(
        self,
        events: "queue.Queue[ChannelEvent]",
        timeout: float | None = None,
        max_items: int = 500,
    ) -> int:
        """
        Drain up to ``max_items`` events, then persist once.

        Args:
            events: Channel queue
            timeout: Seconds to wait for the first event (None = don't wait)
            max_items: Upper bound per call

        Returns:
            Number of events processed
        """
        processed = 0
        changed = False
        block = timeout is not None
        while processed < max_items:
            try:
                event = events.get(block=block and processed == 0, timeout=timeout)
            except queue.Empty:
                break
            processed += 1
            changed = self.handle(event) or changed
        if changed:
            self.persist()
        return processed

    # ------------------------------------------------------------------
    # Pause and counters
    # ------------------------------------------------------------------

    def is_paused(self) -> bool:
        return self._paused.is_set()

    def set_paused(self, paused: bool) -> None:
        if paused:
            self._paused.set()
        else:
            self._paused.clear()

    def toggle_pause(self) -> bool:
        """Flip the pause flag and return the new value."""
        self.set_paused(not self.is_paused())
        return self.is_paused()

    @property
    def unseen(self) -> int:
        """Lines admitted since the last reset_unseen()."""
        return self._unseen

    def reset_unseen(self) -> None:
        self._unseen = 0

    @property
    def stream_failed(self) -> bool:
        return self._stream_failed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> list[str]:
        """Copy of the current lines, oldest first."""
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
