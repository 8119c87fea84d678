"""Tests for filter mask parsing and formatting."""

from __future__ import annotations

import ipaddress

import pytest

from peerswarm.networking.filters import FilterMask, canonical_filter
from peerswarm.types import InvalidFilterError


class TestFromString:
    """Tests for FilterMask.from_string."""

    @pytest.mark.parametrize(
        ("text", "network"),
        [
            ("/ip4/10.0.0.0/ipcidr/8", "10.0.0.0/8"),
            ("/ip4/192.168.0.0/ipcidr/16", "192.168.0.0/16"),
            ("/ip4/1.2.3.4/ipcidr/32", "1.2.3.4/32"),
            ("/ip4/0.0.0.0/ipcidr/0", "0.0.0.0/0"),
            ("/ip6/fe80::/ipcidr/10", "fe80::/10"),
            ("/ip6/::/ipcidr/0", "::/0"),
        ],
    )
    def test_valid(self, text: str, network: str) -> None:
        """Well-formed masks parse to the matching network and print back."""
        mask = FilterMask.from_string(text)
        assert mask.network == ipaddress.ip_network(network)
        assert str(mask) == text

    def test_spelling_canonicalised(self) -> None:
        """Equivalent spellings produce the same mask."""
        mask = FilterMask.from_string("/ip6/FE80:0:0:0:0:0:0:0/ipcidr/10/")
        assert mask == FilterMask.from_string("/ip6/fe80::/ipcidr/10")
        assert str(mask) == "/ip6/fe80::/ipcidr/10"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "10.0.0.0/8",
            "/ip4/10.0.0.0",
            "/ip4/10.0.0.0/tcp/8",
            "/ipcidr/8/ip4/10.0.0.0",
            "/ip4/10.0.0.0/ipcidr/8/tcp/1",
            "/dns4/example.com/ipcidr/8",
            "/ip4/10.0.0.0/ipcidr/33",
            "/ip6/::/ipcidr/129",
            "/ip4/10.0.0.0/ipcidr/x",
        ],
    )
    def test_invalid_raises(self, text: str) -> None:
        """Anything but /ip4|ip6/<net>/ipcidr/<bits> is rejected."""
        with pytest.raises(InvalidFilterError) as exc_info:
            FilterMask.from_string(text)
        assert exc_info.value.filter == text

    def test_host_bits_rejected(self) -> None:
        """A mask with host bits set has no exact network and is rejected."""
        with pytest.raises(InvalidFilterError, match="host bits set"):
            FilterMask.from_string("/ip4/10.1.2.3/ipcidr/8")

    def test_invalid_is_value_error(self) -> None:
        """InvalidFilterError doubles as ValueError."""
        with pytest.raises(ValueError):
            FilterMask.from_string("/ip4/10.0.0.0/ipcidr/99")

    def test_hashable(self) -> None:
        """Masks can key dicts and sets."""
        a = FilterMask.from_string("/ip4/10.0.0.0/ipcidr/8")
        b = FilterMask.from_string("/ip4/10.0.0.0/ipcidr/8/")
        assert {a, b} == {a}
        assert repr(a) == "FilterMask(/ip4/10.0.0.0/ipcidr/8)"


class TestFromNetwork:
    """Tests for FilterMask.from_network."""

    def test_from_cidr_text(self) -> None:
        """Plain CIDR notation is accepted."""
        assert str(FilterMask.from_network("172.16.0.0/12")) == "/ip4/172.16.0.0/ipcidr/12"

    def test_from_network_object(self) -> None:
        """ipaddress networks are accepted as is."""
        net = ipaddress.ip_network("2001:db8::/32")
        assert FilterMask.from_network(net).network is net

    def test_invalid_cidr_raises(self) -> None:
        """Malformed CIDR text raises InvalidFilterError."""
        with pytest.raises(InvalidFilterError):
            FilterMask.from_network("10.0.0.1/8")


class TestCanonicalFilter:
    """Tests for canonical_filter."""

    def test_canonicalises_valid(self) -> None:
        """Valid masks are rewritten to canonical text."""
        assert canonical_filter("/ip4/10.0.0.0/ipcidr/8/") == "/ip4/10.0.0.0/ipcidr/8"
        assert canonical_filter("/ip6/0:0::0/ipcidr/0") == "/ip6/::/ipcidr/0"

    def test_invalid_unchanged(self) -> None:
        """Unparseable entries are returned verbatim."""
        assert canonical_filter("garbage") == "garbage"
