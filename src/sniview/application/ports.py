"""
Port interfaces for the application layer.

These are the interfaces that infrastructure adapters must implement.
They define the contract between use cases and the outside world.
"""

from typing import Any, Iterator, Protocol, runtime_checkable

from sniview.core.models import SetConfig, SortState

__all__ = [
    "LineSourcePort",
    "LineStorePort",
    "RulesApiPort",
    "SetsApiPort",
]


@runtime_checkable
class LineSourcePort(Protocol):
    """
    Port for event line sources.

    Implementations push raw classification lines from:
    - The appliance's HTTP line stream
    - Stdin (for piping a websocket bridge)
    - Files (replaying captured lines)
    """

    def read_lines(self) -> Iterator[str]:
        """Yield raw lines until the source ends; raise on failure."""
        ...

    def close(self) -> None:
        """Release the underlying connection or handle."""
        ...

    def metadata(self) -> dict[str, str]:
        """Get source metadata (type, location, counters)."""
        ...


@runtime_checkable
class LineStorePort(Protocol):
    """
    Port for the durable local store.

    Loading never fails: absent or corrupt content reads as empty. Saving
    may raise StorageError; callers log it and carry on.
    """

    def load_lines(self) -> list[str]:
        ...

    def save_lines(self, lines: list[str]) -> None:
        ...

    def clear_lines(self) -> None:
        ...

    def load_sort_state(self) -> SortState:
        ...

    def save_sort_state(self, state: SortState) -> None:
        ...


class RulesApiPort(Protocol):
    """
    Port for the appliance's rule-insertion API.

    Implementations raise BackendError with the backend's message.
    """

    def add_domain(
        self,
        domain: str,
        set_id: str,
        set_name: str | None = None,
    ) -> dict[str, Any]:
        """Insert a domain rule into a set."""
        ...

    def add_ips(
        self,
        cidrs: list[str],
        set_id: str,
        set_name: str | None = None,
    ) -> dict[str, Any]:
        """Insert one or more network prefixes into a set."""
        ...


class SetsApiPort(Protocol):
    """
    Port for the appliance's configuration-set API.
    """

    def list_sets(self) -> list[SetConfig]:
        ...

    def create_set(self, name: str, enabled: bool = True) -> SetConfig:
        ...

    def update_set(self, set_config: SetConfig) -> SetConfig:
        ...

    def delete_set(self, set_id: str) -> None:
        ...

    def reorder_sets(self, set_ids: list[str]) -> None:
        ...
