"""
Pytest fixtures for sniview tests.
"""

import pytest

from sniview.core.exceptions import BackendError, StorageError
from sniview.core.models import EventRecord, Protocol, SetConfig, SortState, MAIN_SET_ID
from sniview.parsers import SniLineParser


@pytest.fixture
def sample_sni_lines() -> list[str]:
    """Classification lines as the appliance emits them."""
    return [
        "2025/10/13 22:41:12.466126 [INFO] SNI TCP: assets.alicdn.com 192.168.1.100:38894 -> 92.123.206.67:443",
        "2025/10/13 22:41:13.100000 [INFO] SNI UDP TARGET: rr3.googlevideo.com 192.168.1.101:51515 -> 173.194.0.1:443",
        "2025/10/13 22:41:11.000001 [INFO] SNI TCP TARGET: www.youtube.com 192.168.1.100:40000 -> 142.250.74.46:443",
        "2025/10/13 22:41:14.250000 [INFO] SNI UDP: api.example.org 10.0.0.5:60000 -> 93.184.216.34:443",
    ]


@pytest.fixture
def sample_noise_lines() -> list[str]:
    """Lines the stream carries that are not classification events."""
    return [
        "2025/10/13 22:41:12.466126 [DEBUG] SNI TCP: assets.alicdn.com 1.2.3.4:1 -> 5.6.7.8:443",
        "2025/10/13 22:41:12.466126 [INFO] Queue 537 started",
        "[STREAM ERROR]",
        "",
    ]


@pytest.fixture
def sample_records(sample_sni_lines) -> list[EventRecord]:
    """Parsed records for sample_sni_lines, in input order."""
    return list(SniLineParser().parse_stream(sample_sni_lines))


@pytest.fixture
def make_record():
    """Factory for records with only the interesting fields set."""
    def factory(
        domain: str = "example.com",
        timestamp: str = "2025/10/13 22:41:12.000000",
        protocol: Protocol = Protocol.TCP,
        is_target: bool = False,
        source: str = "192.168.1.100:40000",
        destination: str = "93.184.216.34:443",
    ) -> EventRecord:
        raw = f"{timestamp} [INFO] SNI {protocol.value}: {domain} {source} -> {destination}"
        return EventRecord(
            timestamp=timestamp,
            protocol=protocol,
            is_target=is_target,
            domain=domain,
            source=source,
            destination=destination,
            raw=raw,
        )
    return factory


class MemoryLineStore:
    """In-memory LineStorePort used by application tests."""

    def __init__(self, lines=None, sort_state=None, fail_saves=False):
        self.lines = list(lines or [])
        self.sort_state = sort_state or SortState()
        self.fail_saves = fail_saves
        self.save_count = 0

    def load_lines(self):
        return list(self.lines)

    def save_lines(self, lines):
        if self.fail_saves:
            raise StorageError("disk full")
        self.save_count += 1
        self.lines = list(lines)

    def clear_lines(self):
        self.lines = []

    def load_sort_state(self):
        return self.sort_state

    def save_sort_state(self, state):
        if self.fail_saves:
            raise StorageError("disk full")
        self.sort_state = state


class ListLineSource:
    """LineSourcePort over a fixed list, optionally failing at the end."""

    def __init__(self, lines, fail_with=None):
        self.lines = list(lines)
        self.fail_with = fail_with
        self.closed = False

    def read_lines(self):
        for line in self.lines:
            yield line
        if self.fail_with is not None:
            raise self.fail_with

    def close(self):
        self.closed = True

    def metadata(self):
        return {"source_type": "memory", "path": "<memory>", "name": "memory"}


class FakeApi:
    """Records rule and set calls; optionally rejects them."""

    def __init__(self, sets=None, fail_message=None, insert_failures=0):
        self.sets = list(sets) if sets is not None else [
            SetConfig(MAIN_SET_ID, "Main"),
            SetConfig("22222222-2222-2222-2222-222222222222", "Streaming"),
            SetConfig("33333333-3333-3333-3333-333333333333", "Disabled", enabled=False),
        ]
        self.fail_message = fail_message
        # Rule inserts still to reject before accepting; sets are always created
        self.insert_failures = insert_failures
        self.domains: list[tuple[str, str]] = []
        self.ips: list[tuple[list[str], str]] = []
        self.created: list[str] = []

    def _check(self):
        if self.fail_message is not None:
            raise BackendError(self.fail_message, status_code=400)
        if self.insert_failures:
            self.insert_failures -= 1
            raise BackendError("upstream timeout", status_code=504)

    def add_domain(self, domain, set_id, set_name=None):
        self._check()
        self.domains.append((domain, set_id))
        return {}

    def add_ips(self, cidrs, set_id, set_name=None):
        self._check()
        self.ips.append((list(cidrs), set_id))
        return {}

    def list_sets(self):
        return list(self.sets)

    def create_set(self, name, enabled=True):
        created = SetConfig(f"created-{len(self.created) + 1}", name, enabled)
        self.created.append(name)
        self.sets.append(created)
        return created

    def update_set(self, set_config):
        return set_config

    def delete_set(self, set_id):
        self.sets = [s for s in self.sets if s.id != set_id]

    def reorder_sets(self, set_ids):
        pass


@pytest.fixture
def memory_store() -> MemoryLineStore:
    return MemoryLineStore()


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def line_source():
    """Factory for ListLineSource instances."""
    return ListLineSource


@pytest.fixture
def line_store_factory():
    """Factory for MemoryLineStore instances."""
    return MemoryLineStore


@pytest.fixture
def api_factory():
    """Factory for FakeApi instances."""
    return FakeApi
