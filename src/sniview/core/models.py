"""
Core data models for sniview.

These dataclasses describe one classification event observed by the
appliance, the table sort state, and the backend-owned configuration sets
that observations can be promoted into.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

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
]


# Reserved pseudo-identifiers. MAIN_SET_ID is the appliance's primary set,
# NEW_SET_ID only ever means "create a set first" and is never a real id.
MAIN_SET_ID = "11111111-1111-1111-1111-111111111111"
NEW_SET_ID = "00000000-0000-0000-0000-000000000000"


class Protocol(Enum):
    """Transport protocol the classified connection used."""
    TCP = "TCP"
    UDP = "UDP"

    @classmethod
    def from_string(cls, value: str) -> "Protocol | None":
        """Return the matching protocol, or None for unknown tokens."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class EventRecord:
    """
    One parsed classification event.

    ``raw`` is the original line and doubles as the identity key, since the
    stream carries no sequence numbers.
    """
    timestamp: str
    protocol: Protocol
    is_target: bool
    domain: str
    source: str
    destination: str
    raw: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON export."""
        return {
            "timestamp": self.timestamp,
            "protocol": self.protocol.value,
            "is_target": self.is_target,
            "domain": self.domain,
            "source": self.source,
            "destination": self.destination,
            "raw": self.raw,
        }


class SortColumn(Enum):
    """Sortable table columns."""
    TIMESTAMP = "timestamp"
    PROTOCOL = "protocol"
    IS_TARGET = "is_target"
    DOMAIN = "domain"
    SOURCE = "source"
    DESTINATION = "destination"

    @classmethod
    def from_string(cls, value: str | None) -> "SortColumn | None":
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_string(cls, value: str | None) -> "SortDirection | None":
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class SortState:
    """
    At most one active column plus a direction.

    A column without a direction (or the reverse) means "insertion order".
    Transitions return new instances.
    """
    column: SortColumn | None = None
    direction: SortDirection | None = None

    @property
    def active(self) -> bool:
        return self.column is not None and self.direction is not None

    def toggle(self, column: SortColumn) -> "SortState":
        """
        Apply a header click.

        A new column starts ascending; the same column cycles
        asc -> desc -> unsorted.
        """
        if self.column is not column:
            return SortState(column, SortDirection.ASC)
        if self.direction is SortDirection.ASC:
            return SortState(column, SortDirection.DESC)
        if self.direction is SortDirection.DESC:
            return SortState()
        return SortState(column, SortDirection.ASC)

    def cleared(self) -> "SortState":
        return SortState()

    def to_dict(self) -> dict[str, str | None]:
        return {
            "column": self.column.value if self.column else None,
            "direction": self.direction.value if self.direction else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SortState":
        """Restore a persisted state; anything unusable restores as unsorted."""
        if not isinstance(data, dict):
            return cls()
        column = data.get("column")
        direction = data.get("direction")
        if not isinstance(column, str) or not isinstance(direction, str):
            return cls()
        parsed_column = SortColumn.from_string(column)
        parsed_direction = SortDirection.from_string(direction)
        if parsed_column is None or parsed_direction is None:
            return cls()
        return cls(parsed_column, parsed_direction)


@dataclass
class SetConfig:
    """
    A named, backend-owned rule group.

    Only the identity fields are modelled; everything else the backend
    returns is carried through untouched in ``extra``.
    """
    id: str
    name: str
    enabled: bool = True
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_main(self) -> bool:
        return self.id == MAIN_SET_ID

    def to_dict(self) -> dict[str, Any]:
        result = dict(self.extra)
        result.update({"id": self.id, "name": self.name, "enabled": self.enabled})
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SetConfig":
        extra = {k: v for k, v in data.items() if k not in ("id", "name", "enabled")}
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            enabled=bool(data.get("enabled", True)),
            extra=extra,
        )


@dataclass(frozen=True)
class Notification:
    """User-facing outcome of an action."""
    message: str
    severity: str = "success"  # success, error

    @property
    def is_error(self) -> bool:
        return self.severity == "error"
