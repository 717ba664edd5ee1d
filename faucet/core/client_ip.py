"""Resolve the originating client IP of a request.

Two strategies, tried in order:

1. Trusted proxy depth. When ``proxy_count`` reverse proxies sit in front of
   the service and each appends one hop to ``X-Forwarded-For``, the entry
   ``proxy_count`` positions from the right was written by our outermost
   proxy and cannot be forged by the client.
2. Best public address. Without a configured depth, scan ``X-Forwarded-For``
   and then ``X-Real-Ip`` from right to left and take the first address that
   is globally routable and outside the private range table.

When neither yields an address the connection's remote address is used.
"""

from __future__ import annotations

import ipaddress
from typing import Mapping, NamedTuple

from starlette.requests import Request

FORWARDED_FOR_HEADER = "X-Forwarded-For"
REAL_IP_HEADER = "X-Real-Ip"

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class IPRange(NamedTuple):
    start: ipaddress.IPv4Address
    end: ipaddress.IPv4Address

    def __contains__(self, ip: object) -> bool:
        # End bound is exclusive
        return isinstance(ip, ipaddress.IPv4Address) and self.start <= ip < self.end


def _ipv4_range(start: str, end: str) -> IPRange:
    return IPRange(ipaddress.IPv4Address(start), ipaddress.IPv4Address(end))


PRIVATE_RANGES: tuple[IPRange, ...] = (
    _ipv4_range("10.0.0.0", "10.255.255.255"),
    _ipv4_range("100.64.0.0", "100.127.255.255"),
    _ipv4_range("172.16.0.0", "172.31.255.255"),
    _ipv4_range("192.0.0.0", "192.0.0.255"),
    _ipv4_range("192.168.0.0", "192.168.255.255"),
    _ipv4_range("198.18.0.0", "198.19.255.255"),
)

_IPV4_BROADCAST = ipaddress.IPv4Address("255.255.255.255")


def _as_ipv4(ip: IPAddress) -> ipaddress.IPv4Address | None:
    if isinstance(ip, ipaddress.IPv4Address):
        return ip
    return ip.ipv4_mapped


def is_private_subnet(ip: IPAddress) -> bool:
    """Check ``ip`` against the private range table (IPv4 only)."""
    ipv4 = _as_ipv4(ip)
    if ipv4 is None:
        return False
    return any(ipv4 in r for r in PRIVATE_RANGES)


def is_global_unicast(ip: IPAddress) -> bool:
    """True unless ``ip`` is unspecified, loopback, multicast, link-local or broadcast."""
    ipv4 = _as_ipv4(ip)
    if ipv4 is not None:
        ip = ipv4
    if ip.is_unspecified or ip.is_loopback or ip.is_multicast or ip.is_link_local:
        return False
    return ip != _IPV4_BROADCAST


def split_host_port(value: str) -> str | None:
    """Return the host part of ``host:port`` or ``[host]:port``.

    The port text is not validated and may be empty, so ``"8.8.8.8:"``
    yields ``"8.8.8.8"``. Returns None when ``value`` has no port separator,
    including bare IPv6 literals.
    """
    if value.startswith("["):
        host, sep, port = value[1:].partition("]:")
        if not sep or ":" in port:
            return None
        return host
    host, sep, _ = value.rpartition(":")
    if not sep or ":" in host:
        return None
    return host


def _parse_ip(value: str) -> IPAddress | None:
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


def best_public_ip(headers: Mapping[str, str]) -> str:
    """Scan forwarding headers right to left for a public address.

    Returns an empty string when no candidate survives.
    """
    for header in (FORWARDED_FOR_HEADER, REAL_IP_HEADER):
        candidates = (headers.get(header) or "").split(",")
        for candidate in reversed(candidates):
            candidate = candidate.strip()
            host = split_host_port(candidate) or candidate
            ip = _parse_ip(host)
            if ip is None or not is_global_unicast(ip) or is_private_subnet(ip):
                continue
            return host
    return ""


def resolve_client_ip(proxy_count: int, headers: Mapping[str, str], remote_addr: str) -> str:
    """Return the address deemed to be the real client.

    Args:
        proxy_count: Number of trusted reverse proxies in front of the service.
        headers: Request headers (case-insensitive lookups expected).
        remote_addr: Transport-level peer address, optionally with a port.

    Returns:
        The client IP. Empty only when every source, including
        ``remote_addr``, is empty.
    """
    if proxy_count > 0:
        forwarded_for = headers.get(FORWARDED_FOR_HEADER)
        if forwarded_for:
            parts = forwarded_for.split(",")
            # A header shorter than the configured depth falls back to its first hop
            index = max(len(parts) - proxy_count, 0)
            return parts[index].strip()

    public_ip = best_public_ip(headers)
    if public_ip:
        return public_ip

    remote_ip = split_host_port(remote_addr) or remote_addr
    return remote_ip or remote_addr


def client_ip_from_request(proxy_count: int, request: Request) -> str:
    """Resolve the client IP of a Starlette request."""
    remote_addr = request.client.host if request.client else ""
    return resolve_client_ip(proxy_count, request.headers, remote_addr)
