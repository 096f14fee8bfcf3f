"""
Infrastructure layer for sniview.

Contains adapters that implement the ports defined in the application layer.
These connect the domain to external systems (HTTP, files, stdin).
"""

from sniview.infrastructure.sources import (
    FileLineSource,
    HttpLineSource,
    StdinLineSource,
)
from sniview.infrastructure.storage import JsonLineStore
from sniview.infrastructure.api import SniviewApiClient

__all__ = [
    # Sources
    "FileLineSource",
    "HttpLineSource",
    "StdinLineSource",
    # Storage
    "JsonLineStore",
    # API
    "SniviewApiClient",
]
