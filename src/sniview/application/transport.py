"""
Event transport: one push channel per live view.

A reader thread pulls lines from a LineSourcePort and places discrete
events on a single-consumer queue. The owning thread drains the queue;
no other state is shared between the two.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable

from sniview.application.ports import LineSourcePort
from sniview.core.limits import is_line_too_long

__all__ = [
    "LineReceived",
    "StreamFailed",
    "StreamClosed",
    "ChannelEvent",
    "EventChannel",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineReceived:
    line: str


@dataclass(frozen=True)
class StreamFailed:
    message: str


@dataclass(frozen=True)
class StreamClosed:
    """The source ended normally."""


ChannelEvent = LineReceived | StreamFailed | StreamClosed


class EventChannel:
    """
    Push channel over a line source.

    Each inbound line is checked against ``is_paused`` at arrival time;
    lines arriving while paused are dropped, not queued. A source failure
    becomes a single StreamFailed event and ends the channel. There is no
    reconnection: create a new channel to resume.

    Example:
        with EventChannel(HttpLineSource(url), is_paused=store.is_paused) as channel:
            while channel.running:
                store.pump(channel.events, timeout=0.5)
    """

    def __init__(
        self,
        source: LineSourcePort,
        is_paused: Callable[[], bool] = lambda: False,
        events: "queue.Queue[ChannelEvent] | None" = None,
    ):
        """
        Initialize the channel.

        Args:
            source: Line source adapter
            is_paused: Checked on every inbound line; owned by the caller
            events: Queue to publish onto (a new one by default)
        """
        self.source = source
        self.is_paused = is_paused
        self.events: "queue.Queue[ChannelEvent]" = events if events is not None else queue.Queue()
        self._stop_evt = threading.Event()
        self._thread: threading.Thread | None = None
        self._received = 0
        self._dropped = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def received(self) -> int:
        return self._received

    @property
    def dropped(self) -> int:
        """Lines discarded because the channel was paused."""
        return self._dropped

    def open(self) -> "EventChannel":
        """Start the reader thread. Opening twice is an error."""
        if self._thread is not None:
            raise RuntimeError("EventChannel can only be opened once")
        self._thread = threading.Thread(
            target=self._run,
            name="sniview-event-channel",
            daemon=True,
        )
        self._thread.start()
        return self

    def close(self, timeout: float | None = 2.0) -> None:
        """Stop forwarding and release the source."""
        self._stop_evt.set()
        try:
            self.source.close()
        except OSError as e:
            logger.debug("Error closing line source: %s", e)
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def run_inline(self) -> None:
        """Read the whole source on the calling thread (replay and tests)."""
        self._run()

    def _run(self) -> None:
        try:
            for line in self.source.read_lines():
                if self._stop_evt.is_set():
                    return
                self._received += 1
                if self.is_paused():
                    self._dropped += 1
                    continue
                if is_line_too_long(line):
                    continue
                self.events.put(LineReceived(line))
        except Exception as e:
            if self._stop_evt.is_set():
                # Closing the source interrupts the read; not a failure
                return
            logger.warning("Event stream failed: %s", e)
            self.events.put(StreamFailed(str(e) or e.__class__.__name__))
            return

        if not self._stop_evt.is_set():
            self.events.put(StreamClosed())

    def __enter__(self) -> "EventChannel":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
