from __future__ import annotations
from abc import ABC
import abc
from typing import Any, Sequence

from binrecord.codec.type_codec import (
    decode_ascii, decode_bools, decode_signed, decode_unsigned, decode_wide,
    encode_ascii, encode_bools, encode_signed, encode_unsigned, encode_wide,
    fit, pack_bools, unpack_bools,
)
from binrecord.errors.record_errors import InvalidArgumentError
from binrecord.schema.compiled_schema import FieldLayout
from binrecord.schema.storage_type import StorageType, TypeFamily
from binrecord.typeutils.strict_cast import strict_cast, strict_int


def compile_field(layout: FieldLayout) -> FieldCodec:
    """
    Build the codec that reads and writes the whole value of one field.

    The codec is selected by storage type:

      - `BYTE`: `FieldCodecBytes`, value is `bytes` of `count` bytes.
      - `BOOL`: `FieldCodecBools`, value is a list of `count` booleans, one byte each.
      - `BOOLS_8`: `FieldCodecPackedBools`, value is a list of `count * 8` booleans.
      - `INT_*`: `FieldCodecSigned`, value is the first integer of the field.
      - `UINT_*`: `FieldCodecUnsigned`, value is the first integer of the field.
      - `CHAR_ASCII`: `FieldCodecAscii`, value is a string with NULs removed.
      - `CHAR_WIDE`: `FieldCodecWide`, value is a string with NULs kept.

    Args:
        layout (FieldLayout):
            The compiled layout of the field.

    Returns:
        FieldCodec:
            A codec bound to that layout.
    """
    storage_type = layout.storage_type
    if storage_type is StorageType.BYTE:
        return FieldCodecBytes(layout)
    if storage_type is StorageType.BOOL:
        return FieldCodecBools(layout)
    if storage_type is StorageType.BOOLS_8:
        return FieldCodecPackedBools(layout)
    if storage_type is StorageType.CHAR_ASCII:
        return FieldCodecAscii(layout)
    if storage_type is StorageType.CHAR_WIDE:
        return FieldCodecWide(layout)
    if storage_type.family is TypeFamily.INT:
        return FieldCodecSigned(layout)
    return FieldCodecUnsigned(layout)


class FieldCodec(ABC):
    """
    Abstract base class for the compiled codec of a single field.

    A codec converts between the Python value of a whole field and its bytes in a record
    buffer. Writes always cover the full byte range of the field: short values are
    zero-filled, long values are cut, and `write` reports how many elements were supplied so
    the caller can detect truncation against `capacity`.

    Attributes:
        layout (FieldLayout):
            Name, type and position of the field this codec handles.
    """

    layout: FieldLayout

    def __init__(self, layout: FieldLayout):
        self.layout = layout

    @property
    def name(self) -> str:
        return self.layout.name

    @property
    def capacity(self) -> int:
        """
        Number of elements the field holds, in the unit counted by `write`.
        """
        return self.layout.count

    def _store(self, buffer: bytearray, idx: int, payload: bytes) -> None:
        data, _ = fit(payload, self.layout.byte_length)
        buffer[idx:idx + self.layout.byte_length] = data

    def _slice(self, buffer: bytearray | bytes, idx: int) -> bytes:
        return bytes(buffer[idx:idx + self.layout.byte_length])

    @abc.abstractmethod
    def read(self, buffer: bytearray | bytes, idx: int) -> Any:
        """
        Decode the field's value from `buffer`, where the field starts at index `idx`.

        Args:
            buffer (bytearray | bytes):
                The record buffer.

            idx (int):
                Index of the first byte of the field.

        Returns:
            Any:
                The decoded value.
        """

    @abc.abstractmethod
    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        """
        Encode `value` into `buffer`, where the field starts at index `idx`.

        Args:
            buffer (bytearray):
                The record buffer.

            idx (int):
                Index of the first byte of the field.

            value (Any):
                The value to store.

        Returns:
            int:
                Number of elements supplied. A result above `capacity` means the stored
                value was truncated.

        Raises:
            InvalidArgumentError:
                If the value has the wrong type or cannot be encoded.
        """


class FieldCodecBytes(FieldCodec):
    """
    Raw bytes. Accepts any bytes-like object or a sequence of ints in -128..255;
    negative ints are stored as their two's-complement byte.
    """

    def read(self, buffer: bytearray | bytes, idx: int) -> bytes:
        return self._slice(buffer, idx)

    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        if isinstance(value, (bytes, bytearray, memoryview)):
            payload = bytes(value)
        else:
            items = strict_cast((list, tuple), value, self.name)
            for i, item in enumerate(items):
                if not -128 <= strict_int(item, f"{self.name}[{i}]") <= 255:
                    raise InvalidArgumentError(f"{self.name}[{i}]: {item} does not fit in a byte")
            payload = bytes(item & 0xFF for item in items)
        self._store(buffer, idx, payload)
        return len(payload)


class FieldCodecBools(FieldCodec):
    """
    One boolean per byte, 0xFF for true and 0x00 for false.
    """

    def read(self, buffer: bytearray | bytes, idx: int) -> list[bool]:
        return decode_bools(self._slice(buffer, idx))

    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        values: Sequence[bool] = strict_cast((list, tuple), value, self.name)
        self._store(buffer, idx, encode_bools(values))
        return len(values)


class FieldCodecPackedBools(FieldCodec):
    """
    Eight booleans per byte, most-significant bit first. Capacity is counted in booleans.
    """

    @property
    def capacity(self) -> int:
        return self.layout.count * 8

    def read(self, buffer: bytearray | bytes, idx: int) -> list[bool]:
        return unpack_bools(self._slice(buffer, idx))

    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        values: Sequence[bool] = strict_cast((list, tuple), value, self.name)
        self._store(buffer, idx, pack_bools(values))
        return len(values)


class FieldCodecSigned(FieldCodec):
    """
    Signed integer. Only the first element of the field is addressed; high-order bytes of
    a value that does not fit are dropped silently.
    """

    def read(self, buffer: bytearray | bytes, idx: int) -> int:
        width = self.layout.storage_type.width
        return decode_signed(buffer[idx:idx + width], width)

    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        width = self.layout.storage_type.width
        buffer[idx:idx + width] = encode_signed(strict_int(value, self.name), width)
        return 1


class FieldCodecUnsigned(FieldCodec):
    """
    Unsigned integer. Only the first element of the field is addressed. Negative values
    are rejected; high-order bytes of a value that does not fit are dropped silently.
    """

    def read(self, buffer: bytearray | bytes, idx: int) -> int:
        width = self.layout.storage_type.width
        return decode_unsigned(buffer[idx:idx + width], width)

    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        width = self.layout.storage_type.width
        buffer[idx:idx + width] = encode_unsigned(strict_int(value, self.name), width)
        return 1


class FieldCodecAscii(FieldCodec):
    """
    7-bit characters, one per byte.
    """

    def read(self, buffer: bytearray | bytes, idx: int) -> str:
        return decode_ascii(self._slice(buffer, idx))

    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        text = strict_cast(str, value, self.name)
        self._store(buffer, idx, encode_ascii(text))
        return len(text)


class FieldCodecWide(FieldCodec):
    """
    16-bit code units, one per element. Capacity is counted in code units.
    """

    def read(self, buffer: bytearray | bytes, idx: int) -> str:
        return decode_wide(self._slice(buffer, idx))

    def write(self, buffer: bytearray, idx: int, value: Any) -> int:
        payload = encode_wide(strict_cast(str, value, self.name))
        self._store(buffer, idx, payload)
        return len(payload) // 2
