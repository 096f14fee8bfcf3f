"""
HTTP line-stream source for sniview.

Reads a long-lived chunked HTTP response from the appliance, one event per
line.
"""

from typing import Iterator

import requests

from sniview.core.exceptions import TransportError

__all__ = ["HttpLineSource"]


class HttpLineSource:
    """
    Streaming source adapter over a line-delimited HTTP response.

    The connection stays open until the server ends the response, the
    connection fails, or close() is called from another thread.

    Example:
        source = HttpLineSource("http://192.168.1.1:7000/api/logs/stream")
        for line in source.read_lines():
            process(line)
    """

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        connect_timeout: float = 5.0,
        read_timeout: float | None = None,
        encoding: str = "utf-8",
    ):
        """
        Initialize HTTP line source.

        Args:
            url: Stream endpoint
            session: Shared requests session (a private one by default)
            connect_timeout: Seconds allowed to establish the connection
            read_timeout: Seconds allowed between chunks (None = wait forever)
            encoding: Payload encoding
        """
        self.url = url
        self.session = session or requests.Session()
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.encoding = encoding
        self._response: requests.Response | None = None
        self._line_count = 0

    def read_lines(self) -> Iterator[str]:
        """
        Yield lines as they arrive.

        Raises:
            TransportError: If the stream cannot be opened or breaks
        """
        try:
            response = self.session.get(
                self.url,
                stream=True,
                timeout=(self.connect_timeout, self.read_timeout),
                headers={"Accept": "text/plain"},
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"Failed to open event stream: {e}", self.url) from e

        self._response = response
        try:
            for raw in response.iter_lines(decode_unicode=False):
                if not raw:
                    continue
                self._line_count += 1
                yield raw.decode(self.encoding, errors="replace").rstrip("\r")
        except (requests.RequestException, AttributeError, ValueError) as e:
            # AttributeError/ValueError surface when close() tears down the
            # raw connection mid-read
            raise TransportError(f"Event stream interrupted: {e}", self.url) from e
        finally:
            response.close()

    def close(self) -> None:
        response = self._response
        if response is not None:
            response.close()

    def metadata(self) -> dict[str, str]:
        return {
            "source_type": "http",
            "path": self.url,
            "name": self.url,
            "lines_read": str(self._line_count),
        }
