"""Plain-text renderings of swarm command results."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from peerswarm.networking.multiaddr import P2P

from .host import ConnectionInfo, Direction

NO_PROTOCOL_NAME = "<no protocol name>"
"""Shown for streams whose protocol was never negotiated."""


def format_duration(seconds: float) -> str:
    """
    Format a duration compactly: `850ns`, `12.5µs`, `1.25ms`, `2s`.

    Trailing zeros are dropped.
    """
    for unit, scale in (("s", 1.0), ("ms", 1e-3), ("µs", 1e-6)):
        if seconds >= scale:
            return f"{_trim(seconds / scale)}{unit}"
    return f"{_trim(seconds / 1e-9)}ns"


def _trim(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def format_peers(infos: Iterable[ConnectionInfo]) -> str:
    """
    Render open connections, one per line::

        /ip4/1.2.3.4/tcp/4001/p2p/QmPeer 1.5ms outbound
          /ipfs/bitswap/1.1.0
    """
    lines: list[str] = []
    for info in infos:
        line = f"{info.addr}/{P2P.name}/{info.peer}"
        if info.latency:
            line += f" {info.latency}"
        if info.direction is not Direction.UNKNOWN:
            line += f" {info.direction.value}"
        lines.append(line)
        lines.extend(f"  {protocol or NO_PROTOCOL_NAME}" for protocol in info.streams)
    return "".join(f"{line}\n" for line in lines)


def format_addr_map(addrs: Mapping[str, Iterable[str]]) -> str:
    """
    Render addresses grouped by peer, peers sorted::

        QmPeer (2)
        \t/ip4/1.2.3.4/tcp/4001
        \t/ip6/::1/tcp/4001
    """
    out: list[str] = []
    for peer in sorted(addrs):
        peer_addrs = list(addrs[peer])
        out.append(f"{peer} ({len(peer_addrs)})\n")
        out.extend(f"\t{addr}\n" for addr in peer_addrs)
    return "".join(out)


def format_string_list(strings: Iterable[str]) -> str:
    """Render one string per line."""
    return "".join(f"{s}\n" for s in strings)
