"""
Line parsers for sniview.
"""

from sniview.parsers.sni import SniLineParser, parse_sni_line

__all__ = [
    "SniLineParser",
    "parse_sni_line",
]
