"""
Line source adapters for sniview.
"""

from sniview.infrastructure.sources.file_source import FileLineSource
from sniview.infrastructure.sources.http_source import HttpLineSource
from sniview.infrastructure.sources.stdin_source import StdinLineSource

__all__ = [
    "FileLineSource",
    "HttpLineSource",
    "StdinLineSource",
]
