"""
Swarm commands.

The operations behind `swarm peers`, `swarm addrs`, `swarm connect`,
`swarm disconnect` and `swarm filters`. Each returns plain data; rendering
lives in `output`.

Connect vs Disconnect
---------------------

`connect` accepts unresolved addresses (e.g. `/dnsaddr/bootstrap.libp2p.io`),
resolves the whole batch first and stops at the first failed dial.

`disconnect` needs full peer addresses, performs no lookups and reports a
per-address outcome without raising for individual failures.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from peerswarm.networking.config import DNS_RESOLVE_TIMEOUT
from peerswarm.networking.filters import FilterStore
from peerswarm.networking.multiaddr import Multiaddr
from peerswarm.networking.peer import parse_peer_addresses
from peerswarm.networking.resolver import NameResolver, peers_with_addresses
from peerswarm.types import ConnectError

from .host import ConnectionInfo, LocalAddrs, SwarmHost
from .key import generate_swarm_key, write_swarm_key
from .output import format_duration

logger = logging.getLogger(__name__)


class SwarmCommands:
    """Swarm command implementations bound to one node."""

    def __init__(
        self,
        host: SwarmHost,
        resolver: NameResolver,
        filters: FilterStore,
        timeout: float = DNS_RESOLVE_TIMEOUT,
    ) -> None:
        """
        Args:
            host: The running node.
            resolver: Name resolution service used by `connect`.
            filters: Deny-list store used by the `filters` commands.
            timeout: Resolution deadline in seconds for one `connect` batch.
        """
        self.host = host
        self.resolver = resolver
        self.filter_store = filters
        self.timeout = timeout

    async def peers(
        self,
        *,
        verbose: bool = False,
        streams: bool = False,
        latency: bool = False,
        direction: bool = False,
    ) -> list[ConnectionInfo]:
        """
        List open connections, sorted by address.

        `verbose` turns on every optional column.
        """
        out: list[ConnectionInfo] = []
        for conn in await self.host.connections():
            info = ConnectionInfo(addr=str(conn.remote_addr), peer=str(conn.peer_id))

            if verbose or direction:
                info.direction = conn.direction

            if verbose or latency:
                rtt = conn.latency()
                info.latency = "n/a" if rtt == 0 else format_duration(rtt)

            if verbose or streams:
                info.streams = sorted(conn.streams())

            out.append(info)

        out.sort(key=lambda info: info.addr)
        return out

    async def known_addrs(self) -> dict[str, list[str]]:
        """List every known address per peer."""
        known = await self.host.known_addrs()
        return {str(peer): [str(a) for a in addrs] for peer, addrs in known.items()}

    async def local_addrs(
        self,
        *,
        show_id: bool = False,
        swarm_key_path: Path | None = None,
    ) -> LocalAddrs:
        """
        List announced addresses, sorted.

        Args:
            show_id: Append `/p2p/<our id>` to every address.
            swarm_key_path: If set, generate a new pre-shared key, write it
                there and return it alongside the addresses.
        """
        addrs: list[str] = []
        for maddr in await self.host.local_addrs():
            if show_id:
                maddr = maddr.encapsulate(Multiaddr.from_string(f"/p2p/{self.host.peer_id}"))
            addrs.append(str(maddr))

        swarm_key = ""
        if swarm_key_path is not None:
            swarm_key = generate_swarm_key()
            write_swarm_key(swarm_key_path, swarm_key)

        return LocalAddrs(addrs=sorted(addrs), swarm_key=swarm_key)

    async def listen_addrs(self) -> list[str]:
        """List interface listen addresses, sorted."""
        return sorted(str(a) for a in await self.host.listen_addrs())

    async def connect(
        self,
        addresses: Sequence[str],
        *,
        swarm_key: str | None = None,
        swarm_key_path: Path | None = None,
    ) -> list[str]:
        """
        Resolve `addresses` and dial every peer they name.

        When both `swarm_key` and `swarm_key_path` are given, the key file is
        replaced after all dials succeeded.

        Returns:
            One `connect <peer> success` line per peer.

        Raises:
            InvalidAddressError, ResolutionFailureError, ResolutionTimeoutError:
                From resolution; nothing is dialed.
            ConnectError: On the first failed dial.
            PersistenceError: If the key file cannot be written.
        """
        records = await peers_with_addresses(addresses, self.resolver, self.timeout)

        output: list[str] = []
        for record in records:
            try:
                await self.host.connect(record)
            except Exception as e:
                logger.warning("Dialing %s failed: %s", record.peer_id, e)
                raise ConnectError(str(record.peer_id), str(e)) from e
            logger.info("Connected to %s", record.peer_id)
            output.append(f"connect {record.peer_id} success")

        if swarm_key is not None and swarm_key_path is not None:
            write_swarm_key(swarm_key_path, swarm_key)

        return output

    async def disconnect(self, addresses: Sequence[str]) -> list[str]:
        """
        Close connections to the peers at `addresses`.

        Returns:
            One `disconnect <peer> success` or `disconnect <peer> failure: <reason>`
            line per address.

        Raises:
            InvalidAddressError: If any address is not a full peer address.
        """
        output: list[str] = []
        for addr in parse_peer_addresses(addresses):
            line = f"disconnect {addr.peer_id}"
            try:
                await self.host.disconnect(addr.to_multiaddr())
            except Exception as e:
                logger.warning("Disconnecting %s failed: %s", addr.peer_id, e)
                line += f" failure: {e}"
            else:
                line += " success"
            output.append(line)
        return output

    def filters(self) -> list[str]:
        """List enforced deny filters in text form."""
        return [str(mask) for mask in self.filter_store.list()]

    def filters_add(self, filters: Sequence[str]) -> list[str]:
        """Add deny filters, returning those actually added."""
        return self.filter_store.add(filters)

    def filters_rm(self, filters: Sequence[str]) -> list[str]:
        """Remove deny filters (`all` or `*` clears the list), returning those removed."""
        return self.filter_store.remove(filters)
