"""
Filter query language for the live events table.

A query is a ``+``-separated list of terms. ``field:value`` terms are
OR-combined within a field and AND-combined across fields; bare terms must
each appear in at least one of domain, source, protocol or destination.

    domain:google+domain:youtube+protocol:udp+192.168
"""

from dataclasses import dataclass, field, fields
from typing import Callable, Iterable

from sniview.core.exceptions import ConfigurationError
from sniview.core.models import EventRecord

__all__ = [
    "FilterQuery",
    "FIELD_ACCESSORS",
    "GLOBAL_FIELDS",
    "parse_filter",
    "filter_records",
]


TERM_SEPARATOR = "+"
FIELD_SEPARATOR = ":"


def _text(attribute: str) -> Callable[[EventRecord], str]:
    def accessor(record: EventRecord) -> str:
        value = getattr(record, attribute)
        if isinstance(value, bool):
            return "true" if value else "false"
        if hasattr(value, "value"):
            value = value.value
        return str(value).lower()
    return accessor


# Query field name -> attribute of EventRecord
_FIELD_ATTRIBUTES = {
    "timestamp": "timestamp",
    "protocol": "protocol",
    "target": "is_target",
    "istarget": "is_target",
    "is_target": "is_target",
    "domain": "domain",
    "source": "source",
    "destination": "destination",
    "raw": "raw",
}

# Fields searched by bare (global) terms
GLOBAL_FIELDS = ("domain", "source", "protocol", "destination")


def _build_accessors() -> dict[str, Callable[[EventRecord], str]]:
    declared = {f.name for f in fields(EventRecord)}
    for name, attribute in _FIELD_ATTRIBUTES.items():
        if attribute not in declared:
            raise ConfigurationError(
                f"Filter field '{name}' maps to unknown attribute '{attribute}'",
                config_key=name,
            )
    return {name: _text(attribute) for name, attribute in _FIELD_ATTRIBUTES.items()}


FIELD_ACCESSORS = _build_accessors()


@dataclass
class FilterQuery:
    """Parsed form of a filter string."""
    field_terms: dict[str, list[str]] = field(default_factory=dict)
    global_terms: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.field_terms and not self.global_terms

    def matches(self, record: EventRecord) -> bool:
        """Evaluate this query against one record."""
        for field_name, values in self.field_terms.items():
            accessor = FIELD_ACCESSORS.get(field_name)
            # Unknown fields read as empty text
            field_value = accessor(record) if accessor else ""
            if not any(value in field_value for value in values):
                return False

        if self.global_terms:
            haystack = [FIELD_ACCESSORS[name](record) for name in GLOBAL_FIELDS]
            for term in self.global_terms:
                if not any(term in value for value in haystack):
                    return False

        return True


def parse_filter(text: str) -> FilterQuery:
    """
    Parse a raw filter string.

    Args:
        text: Filter as typed by the operator

    Returns:
        FilterQuery; empty when the string holds no terms
    """
    query = FilterQuery()
    terms = [t.strip() for t in text.strip().lower().split(TERM_SEPARATOR)]

    for term in terms:
        if not term:
            continue
        colon_index = term.find(FIELD_SEPARATOR)
        if colon_index > 0:
            field_name = term[:colon_index]
            value = term[colon_index + 1:]
            query.field_terms.setdefault(field_name, []).append(value)
        else:
            query.global_terms.append(term)

    return query


def filter_records(records: Iterable[EventRecord], text: str) -> list[EventRecord]:
    """
    Return the records matching ``text``, preserving order.

    An empty query matches everything.
    """
    query = parse_filter(text)
    if query.is_empty:
        return list(records)
    return [record for record in records if query.matches(record)]
