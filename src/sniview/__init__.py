"""
sniview - live view of SNI events reported by a traffic-filtering appliance.

Parses the appliance's SNI detection lines, keeps a bounded history of
them, and turns interesting domains or addresses into set rules.

Usage:
    from sniview import parse_lines, filter_records, sort_records, SortState

    records = parse_lines(open("capture.log"))
    records = filter_records(records, "domain:google+protocol:udp")
    records = sort_records(records, SortState(SortColumn.TIMESTAMP, SortDirection.DESC))

    # Rule candidates
    from sniview import generate_domain_variants, generate_ip_variants
    generate_domain_variants("a.b.example.com")  # ["a.b.example.com", "b.example.com", "example.com"]
    generate_ip_variants("203.0.113.7:443")      # ["203.0.113.7/32", "203.0.113.0/24", ...]
"""

__version__ = "0.1.0"

from typing import Iterable

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
from sniview.parsers import SniLineParser, parse_sni_line
from sniview.domain import (
    FilterQuery,
    parse_filter,
    filter_records,
    sort_records,
    generate_domain_variants,
    generate_ip_variants,
    SetTargetResolver,
)
from sniview.application import (
    EventChannel,
    EventStore,
    LiveEventsView,
    PromoteDomainUseCase,
    PromoteIpUseCase,
)
from sniview.infrastructure import (
    FileLineSource,
    HttpLineSource,
    StdinLineSource,
    JsonLineStore,
    SniviewApiClient,
)

__all__ = [
    # Version
    "__version__",
    # Core models
    "Protocol",
    "EventRecord",
    "SortColumn",
    "SortDirection",
    "SortState",
    "SetConfig",
    "Notification",
    "MAIN_SET_ID",
    "NEW_SET_ID",
    # Exceptions
    "SniviewError",
    "ConfigurationError",
    "TransportError",
    "BackendError",
    "StorageError",
    "InvalidSelectionError",
    # Parsing
    "SniLineParser",
    "parse_sni_line",
    # Domain
    "FilterQuery",
    "parse_filter",
    "filter_records",
    "sort_records",
    "generate_domain_variants",
    "generate_ip_variants",
    "SetTargetResolver",
    # Use cases
    "EventChannel",
    "EventStore",
    "LiveEventsView",
    "PromoteDomainUseCase",
    "PromoteIpUseCase",
    # Adapters
    "FileLineSource",
    "HttpLineSource",
    "StdinLineSource",
    "JsonLineStore",
    "SniviewApiClient",
    # Convenience functions
    "parse_lines",
    "parse_file",
]


def parse_lines(lines: Iterable[str]) -> list[EventRecord]:
    """
    Parse raw lines, skipping anything that is not an SNI event.

    Args:
        lines: Raw lines (trailing newlines are fine)

    Returns:
        List of EventRecord objects in input order
    """
    return list(SniLineParser().parse_stream(line.rstrip("\r\n") for line in lines))


def parse_file(file_path: str) -> list[EventRecord]:
    """
    Parse a captured log file.

    Args:
        file_path: Path to the capture

    Returns:
        List of EventRecord objects
    """
    return parse_lines(FileLineSource(file_path).read_lines())
