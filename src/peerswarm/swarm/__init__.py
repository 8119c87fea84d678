"""
Swarm commands.

User-facing operations on the connection layer of a running node: listing
peers and addresses, connecting, disconnecting, and managing address filters.
"""

from .commands import SwarmCommands
from .host import Connection, ConnectionInfo, Direction, LocalAddrs, SwarmHost
from .key import generate_swarm_key, write_swarm_key
from .output import format_addr_map, format_duration, format_peers, format_string_list

__all__ = [
    "Connection",
    "ConnectionInfo",
    "Direction",
    "LocalAddrs",
    "SwarmCommands",
    "SwarmHost",
    "format_addr_map",
    "format_duration",
    "format_peers",
    "format_string_list",
    "generate_swarm_key",
    "write_swarm_key",
]
