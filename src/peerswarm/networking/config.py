"""Networking Configuration Constants."""

from typing import Final

DNS_RESOLVE_TIMEOUT: Final = 10.0
"""Deadline in seconds shared by every resolution task of one batch."""

MAX_DNSADDR_DEPTH: Final = 8
"""Maximum nesting of `/dnsaddr` records followed during one lookup."""

DNSADDR_TXT_PREFIX: Final = "dnsaddr="
"""Prefix of TXT record values that carry a multiaddr."""

DNSADDR_SUBDOMAIN: Final = "_dnsaddr"
"""Subdomain queried for `/dnsaddr/<domain>` TXT records."""

SWARM_KEY_HEADER: Final = "/key/swarm/psk/1.0.0/"
"""First line of a private network pre-shared key file."""

SWARM_KEY_ENCODING: Final = "/base16/"
"""Second line of a pre-shared key file: the encoding of the key material."""

SWARM_KEY_BYTES: Final = 32
"""Length of the random pre-shared key in bytes."""
