"""
Multiaddr parsing and formatting.

Only the structural operations the swarm needs are provided: parsing with
per-protocol validation, canonical formatting, suffix checks and splitting
off the last segment.
"""

from .multiaddr import Component, Multiaddr
from .protocols import (
    DNS_PROTOCOLS,
    IP4,
    IP6,
    IPCIDR,
    P2P,
    PROTOCOLS,
    Protocol,
    ValueKind,
    protocol_by_name,
)

__all__ = [
    "Component",
    "Multiaddr",
    "Protocol",
    "ValueKind",
    "PROTOCOLS",
    "DNS_PROTOCOLS",
    "IP4",
    "IP6",
    "IPCIDR",
    "P2P",
    "protocol_by_name",
]
