"""
File source adapter for sniview.

Replays previously captured classification lines.
"""

from pathlib import Path
from typing import Iterator

__all__ = ["FileLineSource"]


class FileLineSource:
    """
    Line-by-line file replay.

    Example:
        source = FileLineSource("/var/log/b4/sni.log")
        for line in source.read_lines():
            print(line)
    """

    def __init__(
        self,
        path: str | Path,
        encoding: str = "utf-8",
        errors: str = "replace"
    ):
        """
        Initialize file line source.

        Args:
            path: Path to the capture
            encoding: File encoding (default: utf-8)
            errors: How to handle encoding errors (default: replace)
        """
        self.path = Path(path)
        self.encoding = encoding
        self.errors = errors
        self._closed = False

        if not self.path.exists():
            raise FileNotFoundError(f"File not found: {self.path}")

    def read_lines(self) -> Iterator[str]:
        """
        Read lines from file, yielding one at a time.

        Yields:
            Lines without trailing newline, skipping blank ones
        """
        with open(
            self.path,
            "r",
            encoding=self.encoding,
            errors=self.errors
        ) as f:
            for line in f:
                if self._closed:
                    return
                stripped = line.rstrip("\n\r")
                if stripped.strip():
                    yield stripped

    def close(self) -> None:
        self._closed = True

    def metadata(self) -> dict[str, str]:
        """Get source metadata."""
        stat = self.path.stat()
        return {
            "source_type": "file",
            "path": str(self.path.absolute()),
            "name": self.path.name,
            "size_bytes": str(stat.st_size),
        }
