"""
Rule candidates offered when promoting an observation.

Domains yield their dotted suffixes, addresses yield enclosing network
prefixes. Both lists run from most specific to broadest.
"""

import ipaddress

__all__ = [
    "generate_domain_variants",
    "generate_ip_variants",
    "strip_port",
    "IPV4_PREFIXES",
    "IPV6_PREFIXES",
]


IPV4_PREFIXES = (32, 24, 16, 8)
IPV6_PREFIXES = (128, 64, 48, 32)


def generate_domain_variants(domain: str) -> list[str]:
    """
    Generate suffixes from the full host name down to the two-label root.

    >>> generate_domain_variants("a.b.example.com")
    ['a.b.example.com', 'b.example.com', 'example.com']

    Single-label names yield an empty list. Labels are not validated.
    """
    parts = domain.split(".")
    return [".".join(parts[i:]) for i in range(len(parts) - 1)]


def strip_port(endpoint: str) -> str:
    """
    Remove a trailing port from an endpoint.

    Handles ``1.2.3.4:443`` and ``[2001:db8::1]:443``; bare addresses are
    returned unchanged.
    """
    endpoint = endpoint.strip()
    if endpoint.startswith("["):
        return endpoint[1:].split("]", 1)[0]
    if endpoint.count(":") == 1:
        return endpoint.split(":", 1)[0]
    return endpoint


def generate_ip_variants(endpoint: str) -> list[str]:
    """
    Generate CIDR candidates for an address, most specific first.

    IPv4 addresses yield /32, /24, /16 and /8 networks; IPv6 addresses yield
    /128, /64, /48 and /32. Anything that is not an address yields [].
    """
    try:
        address = ipaddress.ip_address(strip_port(endpoint))
    except ValueError:
        return []

    prefixes = IPV4_PREFIXES if address.version == 4 else IPV6_PREFIXES
    return [
        str(ipaddress.ip_network(f"{address}/{prefix}", strict=False))
        for prefix in prefixes
    ]
