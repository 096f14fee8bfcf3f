"""
Durable storage adapters for sniview.
"""

from sniview.infrastructure.storage.json_store import JsonLineStore

__all__ = ["JsonLineStore"]
