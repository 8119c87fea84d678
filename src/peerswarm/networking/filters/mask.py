"""
Address filter masks.

A mask is an IP network written in multiaddr form::

    /ip4/192.168.0.0/ipcidr/16     (equivalent to 192.168.0.0/16)
    /ip6/fe80::/ipcidr/10          (equivalent to fe80::/10)

Masks are persisted as text and enforced as structured networks, so the two
forms must convert into each other without loss. Host bits are therefore
rejected: `/ip4/10.1.2.3/ipcidr/8` has no exact structured equivalent.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass

from peerswarm.types import InvalidAddressError, InvalidFilterError

from ..multiaddr import IP4, IP6, IPCIDR, Multiaddr

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


@dataclass(frozen=True, slots=True)
class FilterMask:
    """A network range used to filter connection attempts."""

    network: IPNetwork
    """The covered network."""

    @classmethod
    def from_string(cls, text: str) -> FilterMask:
        """
        Parse a textual mask.

        Raises:
            InvalidFilterError: If the text is not `/ip4|ip6/<net>/ipcidr/<bits>`,
                the prefix exceeds the address width, or host bits are set.
        """
        try:
            maddr = Multiaddr.from_string(text)
        except InvalidAddressError as e:
            raise InvalidFilterError(text, e.detail) from e

        if len(maddr) != 2:
            raise InvalidFilterError(text, "expected /ip4|ip6/<address>/ipcidr/<bits>")
        ip, cidr = maddr.components
        if ip.protocol not in (IP4, IP6) or cidr.protocol != IPCIDR:
            raise InvalidFilterError(text, "expected /ip4|ip6/<address>/ipcidr/<bits>")

        try:
            network = ipaddress.ip_network(f"{ip.value}/{cidr.value}", strict=True)
        except ValueError as e:
            raise InvalidFilterError(text, str(e)) from e
        return cls(network=network)

    @classmethod
    def from_network(cls, network: IPNetwork | str) -> FilterMask:
        """Build a mask from an `ipaddress` network or plain CIDR text."""
        if isinstance(network, str):
            try:
                network = ipaddress.ip_network(network, strict=True)
            except ValueError as e:
                raise InvalidFilterError(network, str(e)) from e
        return cls(network=network)

    def __str__(self) -> str:
        family = IP4.name if self.network.version == 4 else IP6.name
        address = self.network.network_address.compressed
        return f"/{family}/{address}/{IPCIDR.name}/{self.network.prefixlen}"

    def __repr__(self) -> str:
        return f"FilterMask({self!s})"


def canonical_filter(text: str) -> str:
    """
    Return the canonical spelling of a persisted filter.

    Entries that do not parse are returned unchanged so that they can still be
    compared literally.
    """
    try:
        return str(FilterMask.from_string(text))
    except InvalidFilterError:
        return text
