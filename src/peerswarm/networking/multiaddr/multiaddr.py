"""
Multiaddr textual codec.

A multiaddr is a self-describing address made of ordered protocol/value
segments::

    /ip4/104.131.131.82/tcp/4001/p2p/QmaCpDMGvV2BGHeYERUEnRQAwe3N8SzbUtfsmvsqQLuvuJ
    |------ ip4 ------||- tcp -||------------------- p2p -----------------------|

The swarm only ever asks two structural questions of an address:

1. Does it end in a peer-identity (`/p2p/...`) segment?
2. What is everything before that segment (the transport locator)?

Parsing validates every value against its protocol and produces a canonical
textual form, so two spellings of the same address compare equal.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from peerswarm.types import InvalidAddressError

from ..peer_id import PeerId
from .protocols import DNS_PROTOCOLS, P2P, Protocol, ValueKind, protocol_by_name


@dataclass(frozen=True, slots=True)
class Component:
    """One protocol/value segment of a multiaddr."""

    protocol: Protocol
    """Protocol of this segment."""

    value: str | None = None
    """Canonical value, or None for valueless protocols."""

    def __str__(self) -> str:
        if self.value is None:
            return f"/{self.protocol.name}"
        return f"/{self.protocol.name}/{self.value}"


@dataclass(frozen=True, slots=True)
class Multiaddr:
    """
    An immutable, validated multiaddr.

    Equality and hashing follow the canonical components, so addresses can be
    deduplicated with sets and dicts.
    """

    components: tuple[Component, ...]
    """Segments in order. Never empty."""

    def __post_init__(self) -> None:
        if not self.components:
            raise InvalidAddressError("", "empty multiaddr")

    @classmethod
    def from_string(cls, addr: str) -> Multiaddr:
        """
        Parse a textual multiaddr.

        A single trailing slash is tolerated. Legacy `/ipfs/` segments are
        rewritten to `/p2p/`.

        Raises:
            InvalidAddressError: If the address is empty, does not start with
                '/', names an unknown protocol, or carries an invalid value.
        """
        if not addr:
            raise InvalidAddressError(addr, "empty multiaddr")
        if not addr.startswith("/"):
            raise InvalidAddressError(addr, "multiaddr must start with '/'")

        tokens = addr[1:].split("/")
        if tokens and tokens[-1] == "":
            tokens.pop()
        if not tokens:
            raise InvalidAddressError(addr, "empty multiaddr")

        components: list[Component] = []
        i = 0
        while i < len(tokens):
            name = tokens[i]
            try:
                protocol = protocol_by_name(name)
            except ValueError as e:
                raise InvalidAddressError(addr, str(e)) from e

            if protocol.kind is ValueKind.NONE:
                components.append(Component(protocol))
                i += 1
                continue

            if i + 1 >= len(tokens) or tokens[i + 1] == "":
                raise InvalidAddressError(addr, f"missing value for /{name}")
            try:
                value = protocol.normalize(tokens[i + 1])
            except ValueError as e:
                raise InvalidAddressError(addr, f"invalid /{name} value: {e}") from e
            components.append(Component(protocol, value))
            i += 2

        return cls(tuple(components))

    def __str__(self) -> str:
        return "".join(str(c) for c in self.components)

    def __repr__(self) -> str:
        return f"Multiaddr({self!s})"

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[Component]:
        return iter(self.components)

    def split_last(self) -> tuple[Multiaddr | None, Component]:
        """
        Split off the final segment.

        Returns:
            (everything before the final segment or None, final segment)
        """
        head = self.components[:-1]
        return (Multiaddr(head) if head else None), self.components[-1]

    def encapsulate(self, other: Multiaddr | None) -> Multiaddr:
        """Return this address followed by `other`."""
        if other is None:
            return self
        return Multiaddr(self.components + other.components)

    def ends_with(self, suffix: Multiaddr) -> bool:
        """Check whether the trailing segments equal `suffix`."""
        n = len(suffix.components)
        return n <= len(self.components) and self.components[-n:] == suffix.components

    def ends_with_peer_id(self) -> bool:
        """Check whether the final segment is a peer-identity segment."""
        return self.components[-1].protocol == P2P

    def needs_resolution(self) -> bool:
        """Check whether any segment names a DNS host."""
        return any(c.protocol in DNS_PROTOCOLS for c in self.components)

    @property
    def peer_id(self) -> PeerId | None:
        """The trailing peer identity, if the address ends in one."""
        last = self.components[-1]
        if last.protocol != P2P or last.value is None:
            return None
        return PeerId.from_base58(last.value)
