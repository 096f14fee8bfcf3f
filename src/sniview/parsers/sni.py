"""
Parser for the appliance's SNI classification log lines.
"""

import re
from typing import Iterable, Iterator

from sniview.core.models import EventRecord, Protocol

__all__ = ["SniLineParser", "parse_sni_line"]


class SniLineParser:
    """
    Parse one classification line into an EventRecord.

    Format:
        <date> <time> [INFO] SNI <TCP|UDP>[ TARGET]: <domain> <src> -> <dst>

    Example:
        2025/10/13 22:41:12.466126 [INFO] SNI TCP: assets.alicdn.com 192.168.1.100:38894 -> 92.123.206.67:443

    Lines that deviate from the format are rejected with ``None``; the
    parser never raises and never returns a partial record.
    """

    name = "sni"

    PATTERN = re.compile(
        r'^(\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}\.\d+)'  # timestamp
        r'\s+\[INFO\]'                                   # severity
        r'\s+SNI'                                        # marker
        r'\s+(TCP|UDP)'                                  # protocol
        r'(?:\s+TARGET)?:'                               # target marker
        r'\s+(\S+)'                                      # domain
        r'\s+(\S+)'                                      # source
        r'\s+->'
        r'\s+(\S+)\Z',                                   # destination
        re.ASCII,
    )

    TARGET_MARKER = "TARGET"

    def parse_line(self, line: str) -> EventRecord | None:
        """
        Parse a single line.

        Args:
            line: Raw line from the event stream

        Returns:
            EventRecord, or None if the line is not a classification event
        """
        match = self.PATTERN.match(line)
        if not match:
            return None

        timestamp, protocol, domain, source, destination = match.groups()
        parsed_protocol = Protocol.from_string(protocol)
        if parsed_protocol is None:
            return None

        return EventRecord(
            timestamp=timestamp,
            protocol=parsed_protocol,
            # The marker counts wherever it appears in the line
            is_target=self.TARGET_MARKER in line,
            domain=domain,
            source=source,
            destination=destination,
            raw=line,
        )

    def parse_stream(self, lines: Iterable[str]) -> Iterator[EventRecord]:
        """
        Parse many lines, silently dropping the ones that do not match.

        Args:
            lines: Raw lines

        Yields:
            EventRecord for each matching line, in input order
        """
        for line in lines:
            record = self.parse_line(line)
            if record is not None:
                yield record


_default_parser = SniLineParser()


def parse_sni_line(line: str) -> EventRecord | None:
    """Parse one line with the shared parser instance."""
    return _default_parser.parse_line(line)
