"""
Peer records and address aggregation.

Resolution can yield several addresses for the same peer (one per interface,
transport or DNS record). The dialer wants one record per peer carrying every
known route, so addresses are grouped by identity before dialing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..multiaddr import Multiaddr
from ..peer_id import PeerId
from .address import PeerAddress


@dataclass(frozen=True, slots=True)
class PeerRecord:
    """A peer identity with the transport addresses it can be reached at."""

    peer_id: PeerId
    """Identity of the remote node."""

    addrs: tuple[Multiaddr, ...] = field(default_factory=tuple)
    """
    Transport locators, without duplicates.

    Empty when only the identity is known; dialing then relies on lower-level
    discovery.
    """


def aggregate_peer_addresses(addrs: Iterable[PeerAddress]) -> list[PeerRecord]:
    """
    Group peer addresses by identity.

    Identities keep their first-seen order and each identity's transports keep
    their first-seen order. Identity-only addresses contribute the identity and
    nothing else.
    """
    grouped: dict[PeerId, dict[Multiaddr, None]] = {}
    for addr in addrs:
        transports = grouped.setdefault(addr.peer_id, {})
        if addr.transport is not None:
            transports[addr.transport] = None

    return [
        PeerRecord(peer_id=peer_id, addrs=tuple(transports))
        for peer_id, transports in grouped.items()
    ]
