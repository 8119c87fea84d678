"""
Unsigned LEB128 varints, as used by multihash framing.

A multihash is `[code varint][length varint][digest]`. Peer identities are
multihashes, so validating a textual peer identity means decoding two
varints and checking the digest length they announce.

Byte structure::

    [C|D D D D D D D]
     ^-- Continuation bit (1 = more bytes, 0 = last byte)
       ^-----------^-- 7 bits of data, least significant group first

References:
    - https://github.com/multiformats/unsigned-varint
"""

from __future__ import annotations

MAX_VARINT_BYTES = 9
"""Longest varint accepted by the multiformats unsigned-varint spec (63 bits)."""


class VarintError(ValueError):
    """Raised when varint encoding or decoding fails."""


def encode_varint(value: int) -> bytes:
    """
    Encode a non-negative integer as an unsigned varint.

    Args:
        value: Integer to encode, below 2^63.

    Returns:
        The minimal varint encoding of `value`.

    Raises:
        VarintError: If value is negative or does not fit in 63 bits.
    """
    if value < 0:
        raise VarintError("Varint must be non-negative")
    if value >= 1 << 63:
        raise VarintError("Varint exceeds 63 bits")

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)
    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode an unsigned varint starting at `offset`.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data.

    Returns:
        Tuple of (decoded_value, bytes_consumed).

    Raises:
        VarintError: If the input is truncated, longer than nine bytes,
            or not minimally encoded.
    """
    result = 0
    shift = 0
    pos = offset

    while True:
        if pos >= len(data):
            raise VarintError("Truncated varint")
        if pos - offset >= MAX_VARINT_BYTES:
            raise VarintError("Varint too long")

        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        shift += 7

        if not (byte & 0x80):
            # A trailing zero group means a shorter encoding existed.
            if byte == 0 and pos - offset > 1:
                raise VarintError("Varint not minimally encoded")
            return result, pos - offset
