"""
DNS-backed name resolution for multiaddrs.

Resolution Rules
----------------

The first DNS segment of an address is expanded; segments before it are kept
as a prefix and segments after it as a suffix.

- `/dns4/<host>`: one `/ip4/<a>` address per A record.
- `/dns6/<host>`: one `/ip6/<aaaa>` address per AAAA record.
- `/dns/<host>`: both of the above.
- `/dnsaddr/<domain>`: TXT records at `_dnsaddr.<domain>` of the form
  `dnsaddr=<multiaddr>`. When the input carries a suffix (typically
  `/p2p/<id>`), only records ending in that suffix are kept. Records that are
  themselves `/dnsaddr` addresses are followed up to a fixed depth.

Addresses with no DNS segment resolve to themselves.

References:
    - https://github.com/multiformats/multiaddr/blob/master/protocols/DNSADDR.md
"""

from __future__ import annotations

import logging

import dns.asyncresolver
import dns.exception

from peerswarm.types import InvalidAddressError, NameResolutionError

from ..config import DNSADDR_SUBDOMAIN, DNSADDR_TXT_PREFIX, MAX_DNSADDR_DEPTH
from ..multiaddr import DNS_PROTOCOLS, IP4, IP6, Component, Multiaddr

logger = logging.getLogger(__name__)

_RECORD_TYPES: dict[str, tuple[str, ...]] = {
    "dns4": ("A",),
    "dns6": ("AAAA",),
    "dns": ("A", "AAAA"),
}
"""DNS record types queried per hostname protocol."""


class DnsResolver:
    """
    Resolves `/dns*` and `/dnsaddr` segments with dnspython's asyncio resolver.

    Cancelling the calling task aborts outstanding queries.
    """

    def __init__(
        self,
        resolver: dns.asyncresolver.Resolver | None = None,
        max_depth: int = MAX_DNSADDR_DEPTH,
    ) -> None:
        """
        Args:
            resolver: dnspython resolver to query. Created from the system
                configuration on first use when omitted.
            max_depth: Maximum nesting of `/dnsaddr` records to follow.
        """
        self._resolver = resolver
        self._max_depth = max_depth

    @property
    def resolver(self) -> dns.asyncresolver.Resolver:
        """The underlying dnspython resolver."""
        if self._resolver is None:
            self._resolver = dns.asyncresolver.Resolver()
        return self._resolver

    async def resolve(self, maddr: Multiaddr) -> list[Multiaddr]:
        """
        Expand the first DNS segment of `maddr`.

        Raises:
            NameResolutionError: If a lookup fails.
        """
        return await self._resolve(maddr, depth=0)

    async def _resolve(self, maddr: Multiaddr, depth: int) -> list[Multiaddr]:
        if not maddr.needs_resolution():
            return [maddr]

        components = maddr.components
        index = next(i for i, c in enumerate(components) if c.protocol in DNS_PROTOCOLS)
        prefix = components[:index]
        segment = components[index]
        suffix = components[index + 1 :]

        if segment.protocol.name == "dnsaddr":
            resolved = await self._resolve_dnsaddr(_name_of(segment), suffix, depth)
        else:
            resolved = await self._resolve_host(segment, suffix)

        return [Multiaddr(prefix + r.components) for r in resolved]

    async def _resolve_host(
        self,
        segment: Component,
        suffix: tuple[Component, ...],
    ) -> list[Multiaddr]:
        host = _name_of(segment)

        failures: list[dns.exception.DNSException] = []
        results: list[Multiaddr] = []
        for rdtype in _RECORD_TYPES[segment.protocol.name]:
            try:
                answer = await self.resolver.resolve(host, rdtype)
            except dns.exception.DNSException as e:
                failures.append(e)
                continue

            protocol = IP4 if rdtype == "A" else IP6
            for rdata in answer:
                address = protocol.normalize(rdata.address)
                results.append(Multiaddr((Component(protocol, address),) + suffix))

        # `/dns` queries both families; one empty family is not a failure.
        if failures and not results:
            raise NameResolutionError(host, str(failures[0])) from failures[0]

        logger.debug("Resolved %s to %d address(es)", host, len(results))
        return results

    async def _resolve_dnsaddr(
        self,
        domain: str,
        suffix: tuple[Component, ...],
        depth: int,
    ) -> list[Multiaddr]:
        name = f"{DNSADDR_SUBDOMAIN}.{domain}"
        try:
            answer = await self.resolver.resolve(name, "TXT")
        except dns.exception.DNSException as e:
            raise NameResolutionError(name, str(e)) from e

        wanted = Multiaddr(suffix) if suffix else None
        results: list[Multiaddr] = []
        for rdata in answer:
            text = b"".join(rdata.strings).decode("utf-8", errors="replace")
            if not text.startswith(DNSADDR_TXT_PREFIX):
                continue

            try:
                candidate = Multiaddr.from_string(text.removeprefix(DNSADDR_TXT_PREFIX))
            except InvalidAddressError as e:
                logger.debug("Skipping malformed dnsaddr record at %s: %s", name, e)
                continue

            if wanted is not None and not candidate.ends_with(wanted):
                continue

            first = candidate.components[0]
            if first.protocol.name == "dnsaddr" and depth + 1 < self._max_depth:
                results.extend(await self._resolve(candidate, depth + 1))
            else:
                results.append(candidate)

        logger.debug("Resolved /dnsaddr/%s to %d address(es)", domain, len(results))
        return results


def _name_of(segment: Component) -> str:
    """Return the host or domain name carried by a DNS segment."""
    if segment.value is None:
        raise NameResolutionError(str(segment), "segment carries no name")
    return segment.value
