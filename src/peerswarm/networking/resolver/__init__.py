"""
Peer address resolution.

Turns user-supplied addresses into dialable peer records, looking up DNS
names concurrently under one shared deadline.
"""

from .dns import DnsResolver
from .resolver import NameResolver, peers_with_addresses, resolve_addresses

__all__ = [
    "DnsResolver",
    "NameResolver",
    "peers_with_addresses",
    "resolve_addresses",
]
