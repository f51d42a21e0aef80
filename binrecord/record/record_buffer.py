from __future__ import annotations
import logging
from typing import Any, Iterable, Sequence
import warnings

from binrecord.codec.field_codec import FieldCodec, compile_field
from binrecord.codec.type_codec import (
    NARROW_HOST_WIDTH, WIDE_HOST_WIDTH,
    decode_ascii_char, decode_bool, decode_signed, decode_unsigned, decode_wide,
    encode_ascii, encode_signed, encode_unsigned, encode_wide,
)
from binrecord.errors.record_errors import InvalidArgumentError, TruncationWarning, TypeMismatchError
from binrecord.schema.compiled_schema import CompiledSchema, FieldLayout, compile_schema
from binrecord.schema.field_descriptor import FieldDescriptor
from binrecord.schema.storage_type import StorageType, TypeFamily
from binrecord.typeutils.strict_cast import strict_cast, strict_int

_logger = logging.getLogger(__name__)

# widest integer types reachable through the 32-bit accessors
_NARROW_INT_WIDTH = 4
_NARROW_UINT_WIDTH = 3


class RecordBuffer:
    """
    A flat byte buffer laid out by a compiled schema, with typed accessors keyed by field name.

    The buffer is exactly `schema.total_size` bytes long and never changes size. Every
    accessor resolves the name through the schema (the first declared field with that name
    wins) and checks that the field's type family matches the accessor before touching any
    byte.

    Writes that carry more elements than the field can hold are cut to fit, stored anyway and
    reported with a `TruncationWarning`. Writes that carry fewer elements zero-fill the rest of
    the field.

    Attributes:
        schema (CompiledSchema):
            The layout of the buffer.

    Raises (from every accessor):
        UnknownFieldError:
            If the name is not declared in the schema.

        TypeMismatchError:
            If the field's declared type does not belong to the accessor's family.
    """

    schema: CompiledSchema
    _data: bytearray
    _codecs: dict[str, FieldCodec]

    def __init__(self, schema: CompiledSchema | Iterable[FieldDescriptor],
                 data: bytes | bytearray | None = None):
        """
        Allocate the buffer and optionally fill it with previously persisted bytes.

        Args:
            schema (CompiledSchema | Iterable[FieldDescriptor]):
                The compiled schema, or field descriptors to compile.

            data (bytes | bytearray | None):
                Initial content. Missing bytes are zero; extra bytes are ignored.
        """
        if not isinstance(schema, CompiledSchema):
            schema = compile_schema(schema)
        self.schema = schema
        self._data = bytearray(schema.total_size)
        self._codecs = {name: compile_field(schema.resolve(name)) for name in schema.names()}

        if data is not None:
            if len(data) != schema.total_size:
                _logger.warning(
                    "Record data is %d bytes but the schema expects %d; %s",
                    len(data), schema.total_size,
                    "zero-filling the rest" if len(data) < schema.total_size
                    else "ignoring the excess",
                )
            n = min(len(data), schema.total_size)
            self._data[:n] = data[:n]

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RecordBuffer(fields={len(self.schema)}, size={len(self._data)})"

    def raw_bytes(self) -> bytes:
        """
        Return a copy of the whole buffer, as persisted.
        """
        return bytes(self._data)

    def _codec(self, name: str, *families: TypeFamily) -> FieldCodec:
        layout = self.schema.resolve(name)
        if families and layout.storage_type.family not in families:
            expected = " or ".join(f.value for f in families)
            raise TypeMismatchError(
                f"Field {name!r} is {layout.storage_type.name}, not a {expected} field"
            )
        return self._codecs[name]

    def _narrow(self, name: str, family: TypeFamily, max_width: int) -> FieldLayout:
        layout = self._codec(name, family).layout
        if layout.storage_type.width > max_width:
            raise TypeMismatchError(
                f"Field {name!r} is {layout.storage_type.name}, too wide for a "
                f"{max_width * 8}-bit accessor"
            )
        return layout

    def _single_bool(self, name: str) -> FieldLayout:
        layout = self._codec(name, TypeFamily.BOOL).layout
        if layout.storage_type is not StorageType.BOOL:
            raise TypeMismatchError(f"Field {name!r} is {layout.storage_type.name}, not BOOL")
        return layout

    def _write(self, codec: FieldCodec, value: Any) -> None:
        supplied = codec.write(self._data, codec.layout.offset, value)
        if supplied > codec.capacity:
            _logger.warning(
                "Truncating value for field %r: %d elements supplied, capacity is %d",
                codec.name, supplied, codec.capacity,
            )
            warnings.warn(TruncationWarning(codec.name, codec.capacity, supplied), stacklevel=3)

    # generic

    def get(self, name: str) -> Any:
        """
        Read the whole value of any field, decoded according to its declared type.
        See `compile_field` for the value shape of each type.
        """
        codec = self._codec(name)
        return codec.read(self._data, codec.layout.offset)

    def set(self, name: str, value: Any) -> None:
        """
        Write the whole value of any field, encoded according to its declared type.
        """
        self._write(self._codec(name), value)

    # bytes

    def get_byte(self, name: str) -> int:
        """
        Read the first byte of a `BYTE` field, as an int in 0..255.
        """
        layout = self._codec(name, TypeFamily.BYTE).layout
        return self._data[layout.offset]

    def get_bytes(self, name: str) -> bytes:
        """
        Read every byte of a `BYTE` field.
        """
        return self._read(name, TypeFamily.BYTE)

    def set_byte(self, name: str, value: int) -> None:
        """
        Store a single byte into a `BYTE` field. The rest of the field is zero-filled.
        """
        self.set_bytes(name, [value])

    def set_bytes(self, name: str, value: bytes | bytearray | Sequence[int]) -> None:
        """
        Store bytes into a `BYTE` field.

        Args:
            name (str):
                The field name.

            value (bytes | bytearray | Sequence[int]):
                The bytes; ints may range from -128 to 255.
        """
        self._write(self._codec(name, TypeFamily.BYTE), value)

    # booleans

    def get_bool(self, name: str) -> bool:
        """
        Read the first boolean of a `BOOL` field. Only a stored 0xFF reads as true.
        """
        layout = self._single_bool(name)
        return decode_bool(self._data[layout.offset])

    def get_bools(self, name: str) -> list[bool]:
        """
        Read every boolean of a `BOOL` or `BOOLS_8` field.

        A `BOOLS_8` field with a count of `n` yields `8 * n` booleans.
        """
        return self._read(name, TypeFamily.BOOL)

    def set_bool(self, name: str, value: bool) -> None:
        """
        Store a single boolean into a `BOOL` field. The rest of the field is zero-filled.
        """
        self._single_bool(name)
        self.set_bools(name, [strict_cast(bool, value, name)])

    def set_bools(self, name: str, value: Sequence[bool]) -> None:
        """
        Store booleans into a `BOOL` or `BOOLS_8` field.

        Raises:
            InvalidArgumentError:
                If the field is `BOOLS_8` and the number of booleans is not a multiple of 8.
        """
        self._write(self._codec(name, TypeFamily.BOOL), value)

    # signed integers

    def get_int(self, name: str) -> int:
        """
        Read a signed integer field of 1 to 4 bytes, sign-extended to 32 bits.
        """
        layout = self._narrow(name, TypeFamily.INT, _NARROW_INT_WIDTH)
        width = layout.storage_type.width
        return decode_signed(self._data[layout.offset:layout.offset + width], width,
                             NARROW_HOST_WIDTH)

    def get_long(self, name: str) -> int:
        """
        Read a signed integer field of any width, sign-extended to 64 bits.
        """
        layout = self._codec(name, TypeFamily.INT).layout
        width = layout.storage_type.width
        return decode_signed(self._data[layout.offset:layout.offset + width], width,
                             WIDE_HOST_WIDTH)

    def set_int(self, name: str, value: int) -> None:
        """
        Store into a signed integer field of 1 to 4 bytes. Bytes that do not fit are dropped.
        """
        layout = self._narrow(name, TypeFamily.INT, _NARROW_INT_WIDTH)
        self._put_int(layout, encode_signed(strict_int(value, name), layout.storage_type.width))

    def set_long(self, name: str, value: int) -> None:
        """
        Store into a signed integer field of any width. Bytes that do not fit are dropped.
        """
        layout = self._codec(name, TypeFamily.INT).layout
        self._put_int(layout, encode_signed(strict_int(value, name), layout.storage_type.width))

    # unsigned integers

    def get_uint(self, name: str) -> int:
        """
        Read an unsigned integer field of 1 to 3 bytes.
        """
        layout = self._narrow(name, TypeFamily.UINT, _NARROW_UINT_WIDTH)
        width = layout.storage_type.width
        return decode_unsigned(self._data[layout.offset:layout.offset + width], width)

    def get_ulong(self, name: str) -> int:
        """
        Read an unsigned integer field of any width (1 to 7 bytes).
        """
        layout = self._codec(name, TypeFamily.UINT).layout
        width = layout.storage_type.width
        return decode_unsigned(self._data[layout.offset:layout.offset + width], width)

    def set_uint(self, name: str, value: int) -> None:
        """
        Store into an unsigned integer field of 1 to 3 bytes.

        Raises:
            InvalidArgumentError:
                If `value` is negative.
        """
        layout = self._narrow(name, TypeFamily.UINT, _NARROW_UINT_WIDTH)
        self._put_int(layout, encode_unsigned(strict_int(value, name), layout.storage_type.width))

    def set_ulong(self, name: str, value: int) -> None:
        """
        Store into an unsigned integer field of any width.

        Raises:
            InvalidArgumentError:
                If `value` is negative.
        """
        layout = self._codec(name, TypeFamily.UINT).layout
        self._put_int(layout, encode_unsigned(strict_int(value, name), layout.storage_type.width))

    def _put_int(self, layout: FieldLayout, encoded: bytes) -> None:
        self._data[layout.offset:layout.offset + len(encoded)] = encoded

    # characters

    def get_char(self, name: str) -> str:
        """
        Read the first character of a `CHAR_ASCII` or `CHAR_WIDE` field.
        """
        layout = self._codec(name, TypeFamily.CHAR).layout
        if layout.storage_type is StorageType.CHAR_ASCII:
            return decode_ascii_char(self._data[layout.offset])
        return decode_wide(self._data[layout.offset:layout.offset + 2])

    def get_string(self, name: str) -> str:
        """
        Read every character of a character field.

        `CHAR_ASCII` fields drop all NUL characters; `CHAR_WIDE` fields keep them, including
        the zero padding after a short string.
        """
        return self._read(name, TypeFamily.CHAR)

    def set_char(self, name: str, value: str) -> None:
        """
        Store one character into the first slot of a character field. Other slots are kept.

        Raises:
            InvalidArgumentError:
                If `value` is not a single character, or does not fit in one 16-bit code unit
                for a `CHAR_WIDE` field.
        """
        layout = self._codec(name, TypeFamily.CHAR).layout
        if len(strict_cast(str, value, name)) != 1:
            raise InvalidArgumentError(f"{name}: expected a single character, got {value!r}")
        if layout.storage_type is StorageType.CHAR_ASCII:
            encoded = encode_ascii(value)
        else:
            encoded = encode_wide(value)
            if len(encoded) != 2:
                raise InvalidArgumentError(
                    f"{name}: character {value!r} needs more than one 16-bit code unit"
                )
        self._data[layout.offset:layout.offset + len(encoded)] = encoded

    def set_string(self, name: str, value: str) -> None:
        """
        Store a string into a character field, zero-filling unused slots.
        """
        self._write(self._codec(name, TypeFamily.CHAR), value)

    def _read(self, name: str, family: TypeFamily) -> Any:
        codec = self._codec(name, family)
        return codec.read(self._data, codec.layout.offset)

