"""
Interface of the running node the swarm commands act on.

Dialing, connection bookkeeping and address discovery are provided by the
node's transport stack. The commands only need the narrow view below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from peerswarm.networking.multiaddr import Multiaddr
from peerswarm.networking.peer import PeerRecord
from peerswarm.networking.peer_id import PeerId


class Direction(Enum):
    """Which side opened a connection."""

    UNKNOWN = ""
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class Connection(Protocol):
    """An open connection to a remote peer."""

    @property
    def peer_id(self) -> PeerId:
        """Identity of the remote peer."""
        ...

    @property
    def remote_addr(self) -> Multiaddr:
        """Transport address of the remote side."""
        ...

    @property
    def direction(self) -> Direction:
        """Which side opened the connection."""
        ...

    def latency(self) -> float:
        """Round-trip estimate in seconds, 0.0 if unmeasured."""
        ...

    def streams(self) -> list[str]:
        """Protocol ids of the open streams (empty string if not negotiated)."""
        ...


class SwarmHost(Protocol):
    """The local node as seen by the swarm commands."""

    @property
    def peer_id(self) -> PeerId:
        """Our own identity."""
        ...

    async def connections(self) -> list[Connection]:
        """Currently open connections."""
        ...

    async def known_addrs(self) -> dict[PeerId, list[Multiaddr]]:
        """Every address known for every peer in the peer store."""
        ...

    async def local_addrs(self) -> list[Multiaddr]:
        """Addresses announced to the network."""
        ...

    async def listen_addrs(self) -> list[Multiaddr]:
        """Interface addresses the node listens on."""
        ...

    async def connect(self, record: PeerRecord) -> None:
        """Dial a peer, raising on failure."""
        ...

    async def disconnect(self, addr: Multiaddr) -> None:
        """Close connections to the peer at `addr`, raising on failure."""
        ...


@dataclass(slots=True)
class ConnectionInfo:
    """Display form of one open connection."""

    addr: str
    """Remote transport address."""

    peer: str
    """Base58 identity of the remote peer."""

    latency: str = ""
    """Formatted latency, `n/a` when unmeasured, empty when not requested."""

    direction: Direction = Direction.UNKNOWN
    """Direction, UNKNOWN when not requested."""

    streams: list[str] = field(default_factory=list)
    """Stream protocols, sorted; empty when not requested."""


@dataclass(slots=True)
class LocalAddrs:
    """Result of listing local addresses."""

    addrs: list[str]
    """Sorted announced addresses."""

    swarm_key: str = ""
    """Newly generated pre-shared key, when one was requested."""
