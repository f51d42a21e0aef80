"""
Element-level binary encodings used by record fields.

All multi-byte integers are little-endian: byte `k` of an encoded integer holds bits
`[8k, 8k + 8)` of its two's-complement value. The functions here are pure; they know
nothing about schemas or buffers.
"""
from __future__ import annotations
from typing import Sequence

import numpy as np

from binrecord.errors.record_errors import InvalidArgumentError

NARROW_HOST_WIDTH = 4
WIDE_HOST_WIDTH = 8

_ASCII_MASK = 0x7F
_BOOL_TRUE = 0xFF
_BOOL_FALSE = 0x00


def _check_width(width: int, limit: int, kind: str) -> None:
    if not 1 <= width <= limit:
        raise InvalidArgumentError(f"{kind} width must be 1 to {limit} bytes, got {width}")


def encode_signed(value: int, width: int) -> bytes:
    """
    Encode a signed integer into `width` little-endian bytes.

    High-order bytes that do not fit are discarded without notice, so a value outside the
    range of the width wraps around.

    Args:
        value (int):
            The value to encode.

        width (int):
            Number of bytes to produce, 1 to 8.

    Returns:
        bytes:
            The encoded bytes.
    """
    _check_width(width, WIDE_HOST_WIDTH, "Signed integer")
    # >> on a negative int is arithmetic, which yields the two's-complement bytes
    return bytes((value >> (8 * k)) & 0xFF for k in range(width))


def decode_signed(data: bytes | bytearray | memoryview, width: int,
                  host_width: int = WIDE_HOST_WIDTH) -> int:
    """
    Decode `width` little-endian bytes as a two's-complement integer of `host_width` bytes.

    The stored bytes are copied into the low-order positions of a `host_width`-byte scratch
    buffer. Every position above them is filled with 0xFF when bit 7 of the most-significant
    stored byte is set and with 0x00 otherwise, then the scratch buffer is read back as a
    signed integer.

    Args:
        data (bytes | bytearray | memoryview):
            At least `width` bytes; only the first `width` are used.

        width (int):
            Number of stored bytes, 1 to `host_width`.

        host_width (int):
            Size of the result: 4 for the 32-bit accessor, 8 for the 64-bit accessor.

    Returns:
        int:
            The sign-extended value.

    Raises:
        InvalidArgumentError:
            If the width is out of range or `data` is too short.

    Example:
        >>> decode_signed(bytes([0x00, 0x00, 0x80]), 3)
        -8388608
    """
    _check_width(width, host_width, "Signed integer")
    if len(data) < width:
        raise InvalidArgumentError(f"Need {width} bytes to decode, got {len(data)}")

    scratch = bytearray(host_width)
    scratch[:width] = data[:width]
    fill = 0xFF if data[width - 1] & 0x80 else 0x00
    for k in range(width, host_width):
        scratch[k] = fill
    return int.from_bytes(scratch, "little", signed=True)


def encode_unsigned(value: int, width: int) -> bytes:
    """
    Encode a non-negative integer into `width` little-endian bytes.

    High-order bytes that do not fit are discarded without notice.

    Raises:
        InvalidArgumentError:
            If `value` is negative or the width is not 1 to 7.
    """
    _check_width(width, WIDE_HOST_WIDTH - 1, "Unsigned integer")
    if value < 0:
        raise InvalidArgumentError(f"Can't store negative number {value} in an unsigned field")
    return bytes((value >> (8 * k)) & 0xFF for k in range(width))


def decode_unsigned(data: bytes | bytearray | memoryview, width: int) -> int:
    """
    Decode `width` little-endian bytes as a zero-extended unsigned integer.
    """
    _check_width(width, WIDE_HOST_WIDTH - 1, "Unsigned integer")
    if len(data) < width:
        raise InvalidArgumentError(f"Need {width} bytes to decode, got {len(data)}")
    return int.from_bytes(bytes(data[:width]), "little", signed=False)


def encode_bool(value: bool) -> int:
    return _BOOL_TRUE if value else _BOOL_FALSE


def decode_bool(byte: int) -> bool:
    """
    A stored byte is true only if it is exactly 0xFF. Any other value reads as false.
    """
    return byte == _BOOL_TRUE


def encode_bools(values: Sequence[bool]) -> bytes:
    """
    Encode one boolean per byte (0xFF / 0x00).
    """
    return bytes(encode_bool(v) for v in values)


def decode_bools(data: bytes | bytearray | memoryview) -> list[bool]:
    """
    Decode one boolean per byte, true only for 0xFF.
    """
    return (np.frombuffer(bytes(data), dtype=np.uint8) == _BOOL_TRUE).tolist()


def pack_bools(values: Sequence[bool]) -> bytes:
    """
    Pack booleans 8 to a byte, most-significant bit first.

    The first boolean of each group of 8 goes to bit 7 and the eighth to bit 0, so
    `[True, True, True, True, False, False, False, True]` packs to `0xF1`.

    Args:
        values (Sequence[bool]):
            The booleans to pack; the length must be a multiple of 8.

    Returns:
        bytes:
            `len(values) // 8` bytes.

    Raises:
        InvalidArgumentError:
            If the number of booleans is not a multiple of 8.
    """
    bits = np.asarray(values, dtype=np.bool_)
    if bits.ndim != 1:
        raise InvalidArgumentError("Packed booleans must be a flat sequence")
    if bits.size % 8 != 0:
        raise InvalidArgumentError(
            f"Number of booleans for packed storage must be a multiple of 8, got {bits.size}"
        )
    return np.packbits(bits, bitorder="big").tobytes()


def unpack_bools(data: bytes | bytearray | memoryview) -> list[bool]:
    """
    Unpack 8 booleans per byte, most-significant bit first.
    """
    raw = np.frombuffer(bytes(data), dtype=np.uint8)
    return np.unpackbits(raw, bitorder="big").astype(np.bool_).tolist()


def encode_ascii(text: str) -> bytes:
    """
    Encode each character as one byte holding the low 7 bits of its code point.
    """
    return bytes(ord(c) & _ASCII_MASK for c in text)


def decode_ascii_char(byte: int) -> str:
    return chr(byte & _ASCII_MASK)


def decode_ascii(data: bytes | bytearray | memoryview) -> str:
    """
    Decode 7-bit characters and drop every NUL, wherever it appears.

    Embedded NUL characters therefore do not survive a round trip.
    """
    return "".join(decode_ascii_char(b) for b in bytes(data)).replace("\0", "")


def encode_wide(text: str) -> bytes:
    """
    Encode text as 16-bit little-endian code units.

    Characters outside the Basic Multilingual Plane take two code units (a surrogate pair).
    """
    return text.encode("utf-16-le", "surrogatepass")


def decode_wide(data: bytes | bytearray | memoryview) -> str:
    """
    Decode every 2-byte code unit, zero padding included.

    Unlike `decode_ascii`, NULs are kept: a string shorter than its field comes back with
    trailing NUL characters.
    """
    raw = bytes(data)
    if len(raw) % 2 != 0:
        raise InvalidArgumentError(f"Wide character data must have an even length, got {len(raw)}")
    return raw.decode("utf-16-le", "surrogatepass")


def fit(payload: bytes, byte_length: int) -> tuple[bytes, bool]:
    """
    Size a payload to exactly `byte_length` bytes.

    Returns:
        tuple[bytes, bool]:
            - The payload, zero-filled if short or cut if long.
            - True if bytes were cut off.
    """
    if len(payload) > byte_length:
        return payload[:byte_length], True
    return payload.ljust(byte_length, b"\0"), False
