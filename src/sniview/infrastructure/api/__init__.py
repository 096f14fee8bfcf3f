"""
Backend API adapters for sniview.
"""

from sniview.infrastructure.api.client import SniviewApiClient, error_message

__all__ = ["SniviewApiClient", "error_message"]
