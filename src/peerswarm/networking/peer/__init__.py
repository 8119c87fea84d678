"""
Peer addressing.

Parses peer addresses (transport + trailing `/p2p/<peer-id>`) and groups them
into one record per peer for dialing.
"""

from .address import PeerAddress, parse_peer_address, parse_peer_addresses
from .record import PeerRecord, aggregate_peer_addresses

__all__ = [
    "PeerAddress",
    "PeerRecord",
    "aggregate_peer_addresses",
    "parse_peer_address",
    "parse_peer_addresses",
]
