"""
Peer addresses: a peer identity plus an optional transport locator.

A peer address is a multiaddr whose final segment is `/p2p/<peer-id>`::

    /ip4/1.2.3.4/tcp/4001/p2p/QmPeer   -> transport=/ip4/1.2.3.4/tcp/4001, peer=QmPeer
    /p2p/QmPeer                        -> transport=None,                  peer=QmPeer

An address without transport still names a dialable peer: the dialer falls
back to its own discovery to find a route.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from peerswarm.types import InvalidAddressError

from ..multiaddr import P2P, Multiaddr
from ..peer_id import PeerId


@dataclass(frozen=True, slots=True)
class PeerAddress:
    """A parsed peer address."""

    peer_id: PeerId
    """Identity named by the trailing `/p2p` segment."""

    transport: Multiaddr | None = None
    """Everything before the identity segment, or None if nothing precedes it."""

    @classmethod
    def from_multiaddr(cls, maddr: Multiaddr) -> PeerAddress:
        """
        Split a multiaddr into transport and peer identity.

        Raises:
            InvalidAddressError: If the final segment is not a peer identity.
        """
        transport, last = maddr.split_last()
        if last.protocol != P2P or last.value is None:
            raise InvalidAddressError(str(maddr), "address does not end in a /p2p peer id")
        return cls(peer_id=PeerId.from_base58(last.value), transport=transport)

    def to_multiaddr(self) -> Multiaddr:
        """Reassemble the full address."""
        identity = Multiaddr.from_string(f"/p2p/{self.peer_id}")
        if self.transport is None:
            return identity
        return self.transport.encapsulate(identity)

    def __str__(self) -> str:
        return str(self.to_multiaddr())


def parse_peer_address(addr: str) -> PeerAddress:
    """
    Parse a textual peer address.

    Raises:
        InvalidAddressError: If the address is malformed or lacks a trailing peer id.
    """
    return PeerAddress.from_multiaddr(Multiaddr.from_string(addr))


def parse_peer_addresses(addrs: Iterable[str]) -> list[PeerAddress]:
    """Parse a batch of peer addresses, failing on the first invalid one."""
    return [parse_peer_address(addr) for addr in addrs]
