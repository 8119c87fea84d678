"""Exports the networking components used by the swarm commands."""

from .config import DNS_RESOLVE_TIMEOUT
from .multiaddr import Multiaddr
from .peer_id import PeerId

__all__ = [
    "DNS_RESOLVE_TIMEOUT",
    "Multiaddr",
    "PeerId",
]
