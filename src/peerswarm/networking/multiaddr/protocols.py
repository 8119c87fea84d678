"""
Multiaddr protocol table.

Each protocol has a registered code and describes what kind of value (if any)
follows it in the textual form. Only the protocols a swarm needs to dial,
resolve or filter are listed here.

References:
    - https://github.com/multiformats/multiaddr/blob/master/protocols.csv
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from enum import Enum, auto
from typing import Final

from ..peer_id import PeerId


class ValueKind(Enum):
    """What follows a protocol name in the textual form."""

    NONE = auto()
    """No value: `/quic`, `/ws`."""

    IP4 = auto()
    """Dotted-quad IPv4 literal."""

    IP6 = auto()
    """IPv6 literal."""

    PORT = auto()
    """Decimal port number 0-65535."""

    HOSTNAME = auto()
    """DNS name, resolved later."""

    PEER_ID = auto()
    """Base58 peer identity."""

    PREFIX = auto()
    """Decimal CIDR prefix length 0-255 (checked against the family elsewhere)."""


@dataclass(frozen=True, slots=True)
class Protocol:
    """A registered multiaddr protocol."""

    name: str
    """Canonical textual name."""

    code: int
    """Multicodec code."""

    kind: ValueKind
    """Kind of value carried after the name."""

    def normalize(self, value: str) -> str:
        """
        Validate a textual value and return its canonical spelling.

        Raises:
            ValueError: If the value is not acceptable for this protocol.
        """
        match self.kind:
            case ValueKind.IP4:
                return str(ipaddress.IPv4Address(value))
            case ValueKind.IP6:
                return ipaddress.IPv6Address(value).compressed
            case ValueKind.PORT:
                return str(_bounded_int(value, 65535, "port"))
            case ValueKind.PREFIX:
                return str(_bounded_int(value, 255, "prefix length"))
            case ValueKind.HOSTNAME:
                if len(value) > 253:
                    raise ValueError("hostname longer than 253 characters")
                return value
            case ValueKind.PEER_ID:
                return PeerId.from_base58(value).to_base58()
            case ValueKind.NONE:
                raise ValueError(f"/{self.name} takes no value")


def _bounded_int(value: str, maximum: int, what: str) -> int:
    if not value.isascii() or not value.isdigit():
        raise ValueError(f"{what} must be a decimal integer, got {value!r}")
    number = int(value)
    if number > maximum:
        raise ValueError(f"{what} {number} exceeds {maximum}")
    return number


IP4: Final = Protocol("ip4", 0x04, ValueKind.IP4)
TCP: Final = Protocol("tcp", 0x06, ValueKind.PORT)
DNS: Final = Protocol("dns", 0x35, ValueKind.HOSTNAME)
DNS4: Final = Protocol("dns4", 0x36, ValueKind.HOSTNAME)
DNS6: Final = Protocol("dns6", 0x37, ValueKind.HOSTNAME)
DNSADDR: Final = Protocol("dnsaddr", 0x38, ValueKind.HOSTNAME)
IP6: Final = Protocol("ip6", 0x29, ValueKind.IP6)
IPCIDR: Final = Protocol("ipcidr", 0x2B, ValueKind.PREFIX)
UDP: Final = Protocol("udp", 0x0111, ValueKind.PORT)
P2P_CIRCUIT: Final = Protocol("p2p-circuit", 0x0122, ValueKind.NONE)
P2P: Final = Protocol("p2p", 0x01A5, ValueKind.PEER_ID)
TLS: Final = Protocol("tls", 0x01C0, ValueKind.NONE)
QUIC: Final = Protocol("quic", 0x01CC, ValueKind.NONE)
QUIC_V1: Final = Protocol("quic-v1", 0x01CD, ValueKind.NONE)
WS: Final = Protocol("ws", 0x01DD, ValueKind.NONE)
WSS: Final = Protocol("wss", 0x01DE, ValueKind.NONE)

PROTOCOLS: Final[dict[str, Protocol]] = {
    p.name: p
    for p in (
        IP4,
        TCP,
        DNS,
        DNS4,
        DNS6,
        DNSADDR,
        IP6,
        IPCIDR,
        UDP,
        P2P_CIRCUIT,
        P2P,
        TLS,
        QUIC,
        QUIC_V1,
        WS,
        WSS,
    )
}
"""Protocols by canonical name."""

ALIASES: Final[dict[str, Protocol]] = {"ipfs": P2P}
"""Legacy names accepted on input and rewritten to their canonical protocol."""

DNS_PROTOCOLS: Final = frozenset({DNS, DNS4, DNS6, DNSADDR})
"""Protocols whose value must be resolved before dialing."""


def protocol_by_name(name: str) -> Protocol:
    """
    Look up a protocol by canonical or legacy name.

    Raises:
        ValueError: If the protocol is unknown.
    """
    protocol = PROTOCOLS.get(name) or ALIASES.get(name)
    if protocol is None:
        raise ValueError(f"unknown protocol {name!r}")
    return protocol
