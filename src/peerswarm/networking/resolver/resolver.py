"""
Batch resolution of peer addresses.

Users hand the swarm a mix of addresses::

    /ip4/104.131.131.82/tcp/4001/p2p/QmaCpDMGvV2BGHeYERUEnRQAwe3N8SzbUtfsmvsqQLuvuJ
    /dnsaddr/bootstrap.libp2p.io

The first already names a peer and is used as is. The second must be looked
up first; it may expand into several addresses, of which only those ending in
a peer identity are dialable.

Resolution Flow
---------------

1. Parse every input. One malformed input fails the call before any lookup.
2. Inputs ending in `/p2p/<id>` pass straight through.
3. Every other input gets its own lookup task. All tasks share one deadline.
4. Each task posts dialable candidates to a `found` queue, or a failure to
   an `errors` queue when it produced none.
5. After every task finished, `found` is drained, then `errors` is checked
   without blocking. Any queued error fails the whole batch.

The error reported is whichever one sits at the head of the queue, not
necessarily the first failure in wall-clock order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from peerswarm.types import ResolutionFailureError, ResolutionTimeoutError, SwarmError

from ..config import DNS_RESOLVE_TIMEOUT
from ..multiaddr import Multiaddr
from ..peer import PeerAddress, PeerRecord, aggregate_peer_addresses

logger = logging.getLogger(__name__)


class NameResolver(Protocol):
    """
    External name resolution service.

    Implementations must tolerate concurrent calls for distinct inputs and
    must stop promptly when the calling task is cancelled.
    """

    async def resolve(self, maddr: Multiaddr) -> list[Multiaddr]:
        """Return zero or more resolved addresses for `maddr`."""
        ...


async def resolve_addresses(
    addrs: Sequence[str],
    resolver: NameResolver,
    timeout: float = DNS_RESOLVE_TIMEOUT,
) -> list[Multiaddr]:
    """
    Resolve a batch of textual addresses into identity-terminated multiaddrs.

    Args:
        addrs: Textual multiaddrs, resolved or not.
        resolver: Service used for addresses not ending in a peer identity.
        timeout: Deadline in seconds for the whole batch.

    Returns:
        Pre-resolved inputs followed by resolved candidates. The order of the
        resolved part depends on completion order.

    Raises:
        InvalidAddressError: If any input is not a valid multiaddr.
        ResolutionFailureError: If any pending input yields no usable candidate.
        ResolutionTimeoutError: If the deadline elapses first.
    """
    maddrs: list[Multiaddr] = []
    pending: list[Multiaddr] = []

    for addr in addrs:
        maddr = Multiaddr.from_string(addr)
        if maddr.ends_with_peer_id():
            maddrs.append(maddr)
        else:
            pending.append(maddr)

    if not pending:
        return maddrs

    found: asyncio.Queue[Multiaddr] = asyncio.Queue()
    errors: asyncio.Queue[SwarmError] = asyncio.Queue()
    remaining = len(pending)

    async def resolve_one(maddr: Multiaddr) -> None:
        nonlocal remaining
        try:
            candidates = await resolver.resolve(maddr)
        except Exception as e:
            # A failed lookup is reported like an empty one.
            remaining -= 1
            logger.warning("Resolving %s failed: %s", maddr, e)
            error = ResolutionFailureError(str(maddr), str(e))
            error.__cause__ = e
            errors.put_nowait(error)
            return

        remaining -= 1
        usable = 0
        for candidate in candidates:
            if candidate.ends_with_peer_id():
                found.put_nowait(candidate)
                usable += 1

        logger.debug("Resolved %s to %d peer address(es)", maddr, usable)
        if usable == 0:
            errors.put_nowait(ResolutionFailureError(str(maddr)))

    try:
        async with asyncio.timeout(timeout):
            async with asyncio.TaskGroup() as tg:
                for maddr in pending:
                    tg.create_task(resolve_one(maddr))
    except TimeoutError as e:
        raise ResolutionTimeoutError(timeout, remaining) from e

    while not found.empty():
        maddrs.append(found.get_nowait())

    if not errors.empty():
        raise errors.get_nowait()

    return maddrs


async def peers_with_addresses(
    addrs: Sequence[str],
    resolver: NameResolver,
    timeout: float = DNS_RESOLVE_TIMEOUT,
) -> list[PeerRecord]:
    """
    Resolve addresses and group them into one dialable record per peer.

    Raises:
        Everything `resolve_addresses` raises.
    """
    maddrs = await resolve_addresses(addrs, resolver, timeout)
    return aggregate_peer_addresses(PeerAddress.from_multiaddr(m) for m in maddrs)
