"""Unit tests for client IP resolution."""

import ipaddress

import pytest

from faucet.core.client_ip import (
    PRIVATE_RANGES,
    best_public_ip,
    client_ip_from_request,
    is_global_unicast,
    is_private_subnet,
    resolve_client_ip,
    split_host_port,
)


class TestTrustedProxyDepth:
    @pytest.mark.parametrize(
        ("proxy_count", "expected"),
        [
            (1, "3.3.3.3"),
            (2, "2.2.2.2"),
            (3, "1.1.1.1"),
        ],
    )
    def test_selects_hop_by_depth(self, proxy_count: int, expected: str) -> None:
        headers = {"X-Forwarded-For": "1.1.1.1, 2.2.2.2, 3.3.3.3"}
        assert resolve_client_ip(proxy_count, headers, "9.9.9.9:1234") == expected

    def test_spoofed_left_entries_are_ignored(self) -> None:
        # Client forged "6.6.6.6"; the single trusted proxy appended the real peer
        headers = {"X-Forwarded-For": "6.6.6.6, 2.2.2.2"}
        assert resolve_client_ip(1, headers, "10.0.0.3:443") == "2.2.2.2"

    @pytest.mark.parametrize("proxy_count", [3, 4, 10])
    def test_short_header_clamps_to_first_entry(self, proxy_count: int) -> None:
        headers = {"X-Forwarded-For": " 1.1.1.1 , 2.2.2.2, 3.3.3.3"}
        assert resolve_client_ip(proxy_count, headers, "") == "1.1.1.1"

    def test_trusted_hop_is_returned_even_if_private(self) -> None:
        headers = {"X-Forwarded-For": "8.8.8.8, 10.0.0.7"}
        assert resolve_client_ip(1, headers, "") == "10.0.0.7"

    def test_missing_header_falls_back_to_scan_then_remote(self) -> None:
        assert resolve_client_ip(2, {"X-Real-Ip": "8.8.4.4"}, "") == "8.8.4.4"
        assert resolve_client_ip(2, {}, "203.0.113.5:8080") == "203.0.113.5"


class TestBestPublicIp:
    def test_scans_right_to_left(self) -> None:
        headers = {"X-Forwarded-For": "1.1.1.1, 8.8.8.8"}
        assert best_public_ip(headers) == "8.8.8.8"

    def test_skips_private_on_the_right(self) -> None:
        headers = {"X-Forwarded-For": "8.8.8.8, 10.0.0.5"}
        assert best_public_ip(headers) == "8.8.8.8"

    def test_private_rejected_regardless_of_position(self) -> None:
        assert best_public_ip({"X-Forwarded-For": "10.0.0.5, 8.8.8.8"}) == "8.8.8.8"
        assert best_public_ip({"X-Forwarded-For": "192.168.1.1, 172.16.3.3, 100.64.0.9"}) == ""

    def test_zero_proxies_uses_scan(self) -> None:
        headers = {"X-Forwarded-For": "10.0.0.5, 8.8.8.8"}
        assert resolve_client_ip(0, headers, "127.0.0.1:5000") == "8.8.8.8"

    @pytest.mark.parametrize(
        "value",
        ["127.0.0.1", "0.0.0.0", "224.0.0.1", "169.254.1.1", "255.255.255.255", "::1", "fe80::1", "not-an-ip", ""],
    )
    def test_rejects_non_global_unicast(self, value: str) -> None:
        assert best_public_ip({"X-Forwarded-For": value}) == ""

    def test_strips_port(self) -> None:
        assert best_public_ip({"X-Forwarded-For": "8.8.8.8:443"}) == "8.8.8.8"
        assert best_public_ip({"X-Forwarded-For": "[2001:4860::8888]:443"}) == "2001:4860::8888"

    def test_strips_empty_port(self) -> None:
        assert best_public_ip({"X-Forwarded-For": "8.8.8.8:"}) == "8.8.8.8"
        assert resolve_client_ip(0, {}, "203.0.113.9:") == "203.0.113.9"

    def test_falls_through_to_real_ip_header(self) -> None:
        headers = {"X-Forwarded-For": "10.1.1.1", "X-Real-Ip": "9.9.9.9"}
        assert best_public_ip(headers) == "9.9.9.9"

    def test_forwarded_for_wins_over_real_ip(self) -> None:
        headers = {"X-Forwarded-For": "8.8.8.8", "X-Real-Ip": "9.9.9.9"}
        assert best_public_ip(headers) == "8.8.8.8"


class TestRemoteFallback:
    def test_strips_port_from_remote(self) -> None:
        assert resolve_client_ip(0, {}, "203.0.113.9:51234") == "203.0.113.9"
        assert resolve_client_ip(0, {}, "[2001:db8::1]:80") == "2001:db8::1"

    def test_remote_without_port_is_used_as_is(self) -> None:
        assert resolve_client_ip(0, {}, "203.0.113.9") == "203.0.113.9"
        assert resolve_client_ip(0, {}, "::1") == "::1"

    def test_private_headers_fall_back_to_remote(self) -> None:
        assert resolve_client_ip(0, {"X-Forwarded-For": "10.0.0.1"}, "8.8.8.8:1") == "8.8.8.8"

    def test_empty_everything_returns_empty_string(self) -> None:
        assert resolve_client_ip(0, {}, "") == ""


class TestHelpers:
    def test_split_host_port(self) -> None:
        assert split_host_port("1.2.3.4:80") == "1.2.3.4"
        assert split_host_port("[::1]:80") == "::1"
        assert split_host_port("1.2.3.4") is None
        assert split_host_port("2001:db8::1") is None
        assert split_host_port("host:port") == "host"
        assert split_host_port("8.8.8.8:") == "8.8.8.8"
        assert split_host_port("[::1]:") == "::1"
        assert split_host_port("[::1]") is None

    def test_private_range_end_is_exclusive(self) -> None:
        assert is_private_subnet(ipaddress.ip_address("10.0.0.0"))
        assert is_private_subnet(ipaddress.ip_address("10.255.255.254"))
        assert not is_private_subnet(ipaddress.ip_address("10.255.255.255"))

    def test_ipv4_mapped_addresses_are_checked(self) -> None:
        assert is_private_subnet(ipaddress.ip_address("::ffff:192.168.0.10"))
        assert not is_global_unicast(ipaddress.ip_address("::ffff:127.0.0.1"))

    def test_ipv6_never_private(self) -> None:
        assert not is_private_subnet(ipaddress.ip_address("fd00::1"))

    def test_range_table_is_immutable(self) -> None:
        assert isinstance(PRIVATE_RANGES, tuple)
        with pytest.raises(AttributeError):
            PRIVATE_RANGES[0].start = ipaddress.IPv4Address("1.1.1.1")  # type: ignore[misc]


def test_client_ip_from_request(make_request) -> None:
    request = make_request({"X-Forwarded-For": "8.8.8.8, 203.0.113.1"}, client=("10.0.0.2", 1234))
    assert client_ip_from_request(1, request) == "203.0.113.1"
    assert client_ip_from_request(0, request) == "203.0.113.1"
    assert client_ip_from_request(2, request) == "8.8.8.8"


def test_client_ip_from_request_without_client(make_request) -> None:
    request = make_request(client=None)
    assert client_ip_from_request(0, request) == ""
