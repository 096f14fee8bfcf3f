"""
Tests for the target-set picker state machine.
"""

import pytest

from sniview.core.exceptions import InvalidSelectionError
from sniview.core.models import MAIN_SET_ID, NEW_SET_ID, SetConfig
from sniview.domain.set_target import CREATE_SET_LABEL, SetTargetResolver, TargetState

STREAMING_ID = "22222222-2222-2222-2222-222222222222"


@pytest.fixture
def resolver():
    return SetTargetResolver()


class TestSetTargetResolver:
    """Tests for SetTargetResolver."""

    def test_starts_idle(self, resolver):
        assert resolver.state is TargetState.IDLE
        assert not resolver.is_ready
        with pytest.raises(InvalidSelectionError):
            resolver.resolve()

    def test_select_existing(self, resolver):
        resolver.select(STREAMING_ID)
        assert resolver.resolve() == (STREAMING_ID, None)

    def test_create_flow(self, resolver):
        """Test create marker, name entry and confirm."""
        resolver.select(NEW_SET_ID)
        assert resolver.is_creating
        assert not resolver.is_ready

        resolver.type_name("  Streaming  ")
        assert resolver.confirm()
        assert resolver.state is TargetState.SELECTED
        assert resolver.resolve() == (NEW_SET_ID, "Streaming")

    def test_blank_name_cannot_confirm(self, resolver):
        resolver.select(NEW_SET_ID)
        resolver.type_name("   ")
        assert not resolver.confirm()
        assert resolver.is_creating

    def test_cancel_restores_previous(self, resolver):
        resolver.select(STREAMING_ID)
        resolver.select(NEW_SET_ID)
        resolver.type_name("Half typed")
        resolver.cancel()
        assert resolver.resolve() == (STREAMING_ID, None)

    def test_cancel_without_previous_uses_default(self, resolver):
        resolver.select(NEW_SET_ID)
        resolver.cancel()
        assert resolver.resolve() == (MAIN_SET_ID, None)

    def test_cancel_restores_confirmed_new_set(self, resolver):
        """Test re-opening name entry and cancelling keeps the confirmed name."""
        resolver.select(NEW_SET_ID)
        resolver.type_name("Streaming")
        assert resolver.confirm()

        resolver.select(NEW_SET_ID)
        assert resolver.new_set_name == ""
        resolver.type_name("Something else")
        resolver.cancel()

        assert resolver.state is TargetState.SELECTED
        assert resolver.resolve() == (NEW_SET_ID, "Streaming")

    def test_cancel_after_existing_pick_drops_new_name(self, resolver):
        resolver.select(NEW_SET_ID)
        resolver.type_name("Streaming")
        resolver.confirm()
        resolver.select(STREAMING_ID)

        resolver.select(NEW_SET_ID)
        resolver.cancel()
        assert resolver.resolve() == (STREAMING_ID, None)

    def test_type_name_ignored_outside_creation(self, resolver):
        resolver.select(STREAMING_ID)
        resolver.type_name("ignored")
        assert resolver.new_set_name == ""

    def test_reset(self, resolver):
        resolver.select(NEW_SET_ID)
        resolver.reset()
        assert resolver.resolve() == (MAIN_SET_ID, None)

        resolver.reset(select_default=False)
        assert resolver.state is TargetState.IDLE

    def test_options_lists_create_first_and_enabled_sets(self):
        sets = [
            SetConfig(MAIN_SET_ID, "Main"),
            SetConfig(STREAMING_ID, "Streaming", enabled=False),
        ]
        assert SetTargetResolver.options(sets) == [
            (NEW_SET_ID, CREATE_SET_LABEL),
            (MAIN_SET_ID, "Main"),
        ]
