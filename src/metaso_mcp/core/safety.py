"""URL safety filter guarding against requests to internal networks."""

from __future__ import annotations

import ipaddress
import re
import socket
from urllib.parse import urlsplit

_ALLOWED_SCHEMES = frozenset({"http", "https"})
_BLOCKED_HOSTNAMES = frozenset({"localhost", "127.0.0.1", "::1"})
_PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
)
# Decimal, octal or hex labels, as accepted by inet_aton ("127.1", "0x7f.0.0.1").
_NUMERIC_LABEL = re.compile(r"^(?:0x[0-9a-f]*|[0-9]+)$")


def _parse_address(hostname: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    """Parse hostname as an IP address, normalising shorthand IPv4 forms."""
    try:
        return ipaddress.ip_address(hostname)
    except ValueError:
        pass

    labels = hostname.split(".")
    if len(labels) > 4 or not all(_NUMERIC_LABEL.match(label) for label in labels):
        return None
    try:
        return ipaddress.IPv4Address(socket.inet_aton(hostname))
    except OSError:
        return None


def _is_internal_address(hostname: str) -> bool:
    address = _parse_address(hostname)
    if address is None:
        return False
    if isinstance(address, ipaddress.IPv6Address):
        if address.is_loopback:
            return True
        if address.ipv4_mapped is None:
            return False
        address = address.ipv4_mapped
    if address.is_loopback:
        return True
    return any(address in network for network in _PRIVATE_NETWORKS)


def is_safe(url: str) -> bool:
    """Return True if url is a public http(s) target.

    Loopback hosts, the RFC 1918 ranges and non-HTTP schemes are
    rejected, including shorthand and IPv4-mapped spellings of those
    addresses. Unparseable URLs are unsafe.
    """
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return False

    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        return False
    if not hostname:
        return False

    hostname = hostname.lower()
    if hostname in _BLOCKED_HOSTNAMES:
        return False
    return not _is_internal_address(hostname)
