"""
Target-set selection for rule promotion.

The selector offers every enabled set plus a "create new set" entry.
Picking the create entry switches to name entry; confirming keeps the
create marker together with the typed name so the caller can create the
set first and insert the rule into it afterwards.
"""

from enum import Enum
from typing import Iterable

from sniview.core.exceptions import InvalidSelectionError
from sniview.core.models import MAIN_SET_ID, NEW_SET_ID, SetConfig

__all__ = ["TargetState", "SetTargetResolver", "CREATE_SET_LABEL"]


CREATE_SET_LABEL = "Create New Set"


class TargetState(Enum):
    IDLE = "idle"
    SELECTED = "selected"
    CREATING = "creating"


class SetTargetResolver:
    """
    State machine behind the target-set picker.

    States:
        IDLE      nothing selected yet
        SELECTED  ``set_id`` holds an existing id, or NEW_SET_ID after a
                  confirmed name
        CREATING  the operator is typing ``new_set_name``

    The resolver never talks to the backend; ``resolve()`` hands the
    ``(set_id, new_set_name)`` pair to the calling workflow. State lives as
    long as the dialog that owns it.

    Example:
        resolver = SetTargetResolver()
        resolver.select(NEW_SET_ID)
        resolver.type_name("Streaming")
        resolver.confirm()
        resolver.resolve()  # (NEW_SET_ID, "Streaming")
    """

    def __init__(self, default_set_id: str = MAIN_SET_ID):
        self.default_set_id = default_set_id
        self.state = TargetState.IDLE
        self.set_id: str | None = None
        self.new_set_name = ""
        self._previous_set_id: str | None = None
        self._previous_name = ""

    @property
    def is_creating(self) -> bool:
        return self.state is TargetState.CREATING

    @property
    def is_ready(self) -> bool:
        """Whether ``resolve()`` would succeed."""
        if self.state is TargetState.SELECTED:
            return bool(self.set_id)
        if self.state is TargetState.CREATING:
            return bool(self.new_set_name.strip())
        return False

    def select(self, set_id: str) -> None:
        """Pick an existing set, or NEW_SET_ID to start naming a new one."""
        if set_id == NEW_SET_ID:
            if self.state is not TargetState.CREATING:
                self._previous_set_id = self.set_id
                self._previous_name = self.new_set_name
            self.state = TargetState.CREATING
            self.set_id = NEW_SET_ID
            self.new_set_name = ""
            return

        self.state = TargetState.SELECTED
        self.set_id = set_id
        self.new_set_name = ""
        self._previous_set_id = None
        self._previous_name = ""

    def type_name(self, name: str) -> None:
        """Update the name being typed. Ignored outside name entry."""
        if self.state is TargetState.CREATING:
            self.new_set_name = name

    def confirm(self) -> bool:
        """
        Leave name entry keeping the create marker and the trimmed name.

        Returns:
            False (and stays in name entry) when the name is blank
        """
        if self.state is not TargetState.CREATING:
            return False
        name = self.new_set_name.strip()
        if not name:
            return False
        self.state = TargetState.SELECTED
        self.set_id = NEW_SET_ID
        self.new_set_name = name
        self._previous_set_id = None
        self._previous_name = ""
        return True

    def cancel(self) -> None:
        """
        Abandon name entry, restoring the previous pick or the default set.

        A previously confirmed new-set name comes back with its create marker.
        """
        if self.state is not TargetState.CREATING:
            return
        previous, name = self._previous_set_id, self._previous_name
        if previous == NEW_SET_ID and not name:
            previous = None
        if not previous:
            previous, name = self.default_set_id, ""
        self.state = TargetState.SELECTED
        self.set_id = previous
        self.new_set_name = name if previous == NEW_SET_ID else ""
        self._previous_set_id = None
        self._previous_name = ""

    def reset(self, select_default: bool = True) -> None:
        """Return to the dialog-open state."""
        self.state = TargetState.IDLE
        self.set_id = None
        self.new_set_name = ""
        self._previous_set_id = None
        self._previous_name = ""
        if select_default:
            self.select(self.default_set_id)

    def resolve(self) -> tuple[str, str | None]:
        """
        Return ``(set_id, new_set_name)`` for the insertion request.

        ``new_set_name`` is only set when ``set_id`` is NEW_SET_ID.

        Raises:
            InvalidSelectionError: If nothing usable is selected
        """
        if not self.is_ready or self.set_id is None:
            raise InvalidSelectionError("No target set selected")
        if self.set_id == NEW_SET_ID:
            return (NEW_SET_ID, self.new_set_name.strip())
        return (self.set_id, None)

    @staticmethod
    def options(sets: Iterable[SetConfig]) -> list[tuple[str, str]]:
        """Picker entries: the create entry first, then every enabled set."""
        entries = [(NEW_SET_ID, CREATE_SET_LABEL)]
        entries.extend((s.id, s.name) for s in sets if s.enabled)
        return entries
