"""
Peer identities.

A libp2p peer identity is a multihash of the peer's public key, shown to
users as a Base58 string:
    1. Encode public key as protobuf (libp2p-crypto format)
    2. If encoded <= 42 bytes: PeerId = multihash(identity, encoded)
    3. If encoded > 42 bytes: PeerId = multihash(sha256, sha256(encoded))

Addresses name a peer through a trailing `/p2p/<peer-id>` component. This
module only needs to validate and compare such identities; it never checks
that the remote side actually owns the key (that is the transport's job).

String forms:
    - Ed25519 keys: "12D3KooW..." (identity multihash, 38 bytes)
    - secp256k1 keys: "16Uiu2..." (identity multihash, 39 bytes)
    - Large keys (RSA, ECDSA): "Qm..." (SHA256 multihash, 34 bytes)

References:
    - https://github.com/libp2p/specs/blob/master/peer-ids/peer-ids.md
    - https://github.com/multiformats/multihash
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from .varint import VarintError, decode_varint, encode_varint

__all__ = [
    "PeerId",
    "PublicKeyProto",
    "Multihash",
    "KeyType",
    "MultihashCode",
    "Base58",
]


class KeyType(IntEnum):
    """libp2p-crypto key type codes (from crypto.proto KeyType enum)."""

    RSA = 0
    ED25519 = 1
    SECP256K1 = 2
    ECDSA = 3


class MultihashCode(IntEnum):
    """Multihash function codes accepted in peer identities."""

    IDENTITY = 0x00
    """Identity "hash": the digest is the encoded public key itself."""

    SHA256 = 0x12
    """SHA-256 hash (32-byte output)."""


_DIGEST_SIZES: Final[dict[MultihashCode, int | None]] = {
    MultihashCode.IDENTITY: None,
    MultihashCode.SHA256: 32,
}
"""Required digest length per hash function (None: any length)."""

_IDENTITY_THRESHOLD: Final[int] = 42
"""Largest encoded key wrapped with the identity hash instead of SHA256."""


class Base58:
    """
    Base58 encoding/decoding (Bitcoin-style alphabet).

    The alphabet excludes visually ambiguous characters (0, O, I, l).
    """

    ALPHABET: Final[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

    @classmethod
    def encode(cls, data: bytes) -> str:
        """Encode bytes as a Base58 string; leading zero bytes become '1'."""
        leading_zeros = len(data) - len(data.lstrip(b"\x00"))

        num = int.from_bytes(data, "big")
        result: list[str] = []
        while num > 0:
            num, remainder = divmod(num, 58)
            result.append(cls.ALPHABET[remainder])

        result.extend([cls.ALPHABET[0]] * leading_zeros)
        return "".join(reversed(result))

    @classmethod
    def decode(cls, s: str) -> bytes:
        """
        Decode a Base58 string to bytes.

        Raises:
            ValueError: If the string contains characters outside the alphabet.
        """
        leading_ones = len(s) - len(s.lstrip(cls.ALPHABET[0]))

        num = 0
        for char in s:
            index = cls.ALPHABET.find(char)
            if index < 0:
                raise ValueError(f"Invalid Base58 character: {char!r}")
            num = num * 58 + index

        result = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
        return b"\x00" * leading_ones + result


@dataclass(frozen=True, slots=True)
class Multihash:
    """
    A self-describing hash: [code varint][length varint][digest].

    Attributes:
        code: Hash function identifier.
        digest: Hash output (or raw data for identity).
    """

    code: MultihashCode
    """Hash function used."""

    digest: bytes
    """Hash output or identity data."""

    def encode(self) -> bytes:
        """Encode as multihash bytes."""
        return encode_varint(self.code) + encode_varint(len(self.digest)) + self.digest

    @classmethod
    def decode(cls, data: bytes) -> Multihash:
        """
        Parse and validate multihash bytes.

        The announced length must match the remaining bytes exactly, and
        fixed-size hash functions must carry a digest of their size.

        Raises:
            ValueError: If the framing is malformed or the hash function unknown.
        """
        try:
            code, consumed = decode_varint(data)
            length, length_size = decode_varint(data, consumed)
        except VarintError as e:
            raise ValueError(f"malformed multihash: {e}") from e

        try:
            hash_code = MultihashCode(code)
        except ValueError as e:
            raise ValueError(f"unsupported multihash function 0x{code:x}") from e

        digest = data[consumed + length_size :]
        if len(digest) != length:
            raise ValueError(f"multihash announces {length} bytes, carries {len(digest)}")

        expected = _DIGEST_SIZES[hash_code]
        if expected is not None and length != expected:
            raise ValueError(f"{hash_code.name} digest must be {expected} bytes, got {length}")
        if hash_code is MultihashCode.IDENTITY and length == 0:
            raise ValueError("identity multihash must not be empty")

        return cls(code=hash_code, digest=digest)

    @classmethod
    def from_data(cls, data: bytes) -> Multihash:
        """Wrap small data with the identity hash, hash larger data with SHA256."""
        if len(data) <= _IDENTITY_THRESHOLD:
            return cls(code=MultihashCode.IDENTITY, digest=data)
        return cls(code=MultihashCode.SHA256, digest=hashlib.sha256(data).digest())


@dataclass(frozen=True, slots=True)
class PublicKeyProto:
    """
    A public key in libp2p-crypto protobuf format.

    Wire format: [0x08][type_varint][0x12][length_varint][key_bytes]
    """

    key_type: KeyType
    """Key algorithm type."""

    key_data: bytes
    """Raw public key bytes."""

    def encode(self) -> bytes:
        """Encode as deterministic protobuf bytes."""
        type_field = b"\x08" + encode_varint(self.key_type)
        data_field = b"\x12" + encode_varint(len(self.key_data)) + self.key_data
        return type_field + data_field


@dataclass(frozen=True, slots=True, order=True)
class PeerId:
    """
    A libp2p peer identifier.

    Instances are hashable and ordered by their multihash bytes, so they can
    serve directly as grouping keys.

    Attributes:
        multihash: Raw multihash bytes (before Base58 encoding).
    """

    multihash: bytes

    def __str__(self) -> str:
        """Return the Base58-encoded PeerId string."""
        return Base58.encode(self.multihash)

    def __repr__(self) -> str:
        return f"PeerId({self!s})"

    def to_base58(self) -> str:
        """Return the Base58-encoded PeerId string."""
        return Base58.encode(self.multihash)

    @classmethod
    def from_base58(cls, s: str) -> PeerId:
        """
        Parse and validate a Base58-encoded PeerId.

        Raises:
            ValueError: If the string is empty, not Base58, or not a valid multihash.
        """
        if not s:
            raise ValueError("empty peer id")
        data = Base58.decode(s)
        Multihash.decode(data)
        return cls(multihash=data)

    @classmethod
    def from_public_key(cls, public_key: PublicKeyProto) -> PeerId:
        """Derive a PeerId from a public key."""
        return cls(multihash=Multihash.from_data(public_key.encode()).encode())

    @classmethod
    def derive(cls, key_data: bytes, key_type: KeyType) -> PeerId:
        """Derive a PeerId from raw key bytes and type."""
        return cls.from_public_key(PublicKeyProto(key_type=key_type, key_data=key_data))
