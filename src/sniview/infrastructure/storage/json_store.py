"""
JSON file store for sniview state.

Each key is one JSON file in the state directory.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from sniview.core.exceptions import StorageError
from sniview.core.limits import MAX_STORED_LINES, SORT_STATE_KEY, STORAGE_KEY
from sniview.core.models import SortState

__all__ = ["JsonLineStore"]

logger = logging.getLogger(__name__)


class JsonLineStore:
    """
    Durable store for the event line buffer and the sort state.

    The lines key holds a JSON array of at most ``max_lines`` strings.
    Absent, malformed or oversized content loads as an empty list.

    Example:
        store = JsonLineStore("~/.local/state/sniview")
        store.save_lines(lines)
        restored = store.load_lines()
    """

    def __init__(
        self,
        directory: str | Path,
        max_lines: int = MAX_STORED_LINES,
        lines_key: str = STORAGE_KEY,
        sort_key: str = SORT_STATE_KEY,
    ):
        """
        Initialize the store.

        Args:
            directory: Directory holding one file per key (created lazily)
            max_lines: Most lines written or accepted on load
            lines_key: Key for the line buffer
            sort_key: Key for the sort state
        """
        self.directory = Path(directory).expanduser()
        self.max_lines = max_lines
        self.lines_key = lines_key
        self.sort_key = sort_key

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    # ------------------------------------------------------------------
    # Line buffer
    # ------------------------------------------------------------------

    def load_lines(self) -> list[str]:
        """Read the persisted lines; any problem reads as empty."""
        data = self._read(self.lines_key)
        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            logger.warning("Ignoring malformed persisted lines in %s", self.path_for(self.lines_key))
            return []
        if len(data) > self.max_lines:
            logger.warning(
                "Ignoring oversized persisted lines (%d > %d)", len(data), self.max_lines
            )
            return []
        return data

    def save_lines(self, lines: list[str]) -> None:
        """
        Write the last ``max_lines`` lines.

        Raises:
            StorageError: If the file cannot be written
        """
        self._write(self.lines_key, list(lines[-self.max_lines:]))

    def clear_lines(self) -> None:
        """Remove the persisted lines."""
        path = self.path_for(self.lines_key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove persisted lines: {e}", str(path)) from e

    # ------------------------------------------------------------------
    # Sort state
    # ------------------------------------------------------------------

    def load_sort_state(self) -> SortState:
        return SortState.from_dict(self._read(self.sort_key))

    def save_sort_state(self, state: SortState) -> None:
        self._write(self.sort_key, state.to_dict())

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _read(self, key: str) -> Any:
        path = self.path_for(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.error("Failed to load %s: %s", path, e)
            return None

    def _write(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write-then-rename so readers never see a half-written file
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self.directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to persist {key}: {e}", str(path)) from e
