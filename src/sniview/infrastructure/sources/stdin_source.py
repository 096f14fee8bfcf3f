"""
Stdin source adapter for sniview.

Provides streaming input from standard input for piped data, e.g. the
output of a websocket bridge:

    websocat ws://192.168.1.1:7000/api/ws/logs | sniview watch -
"""

import sys
from typing import Iterator, TextIO

__all__ = ["StdinLineSource"]


class StdinLineSource:
    """
    Streaming source adapter for stdin.

    Reads piped input line-by-line without buffering the entire input.

    Example:
        source = StdinLineSource()
        for line in source.read_lines():
            process(line)
    """

    def __init__(self, stream: TextIO | None = None):
        """
        Initialize stdin line source.

        Args:
            stream: Text stream to read (default: sys.stdin)
        """
        self.stream = stream
        self._line_count = 0
        self._closed = False

    def read_lines(self) -> Iterator[str]:
        """
        Read lines from stdin, yielding one at a time.

        Yields:
            Input lines (without trailing newline), skipping blank ones
        """
        stream = self.stream if self.stream is not None else sys.stdin
        for line in stream:
            if self._closed:
                return
            stripped = line.rstrip("\n\r")
            if not stripped.strip():
                continue
            self._line_count += 1
            yield stripped

    def close(self) -> None:
        # stdin itself is left open; the reader stops at the next line
        self._closed = True

    def metadata(self) -> dict[str, str]:
        """
        Get source metadata.

        Note: Size is not known until reading completes.
        """
        return {
            "source_type": "stdin",
            "path": "<stdin>",
            "name": "stdin",
            "lines_read": str(self._line_count),
        }
