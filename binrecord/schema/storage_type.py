from __future__ import annotations
from enum import Enum

from binrecord.errors.record_errors import InvalidArgumentError


class TypeFamily(Enum):
    """
    Accessor families. Typed accessors check a field's family, not its exact storage type.
    """

    BYTE = "byte"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    CHAR = "char"


class StorageType(Enum):
    """
    Storage types supported by a record field.

    The value of each member is its textual token, as used in schema documents. The byte
    width of one element and the accessor family are fixed per member and exposed through
    `width` and `family`.

    `BOOLS_8` stores 8 booleans in a single byte, so one element of that type is one group
    of 8 booleans.
    """

    BYTE = "byte"
    BOOL = "bool"
    BOOLS_8 = "bools8"
    INT_8 = "i8"
    INT_16 = "i16"
    INT_24 = "i24"
    INT_32 = "i32"
    INT_40 = "i40"
    INT_48 = "i48"
    INT_56 = "i56"
    INT_64 = "i64"
    UINT_8 = "u8"
    UINT_16 = "u16"
    UINT_24 = "u24"
    UINT_32 = "u32"
    UINT_40 = "u40"
    UINT_48 = "u48"
    UINT_56 = "u56"
    CHAR_ASCII = "ascii"
    CHAR_WIDE = "wide"

    @property
    def width(self) -> int:
        """
        Number of bytes occupied by one element of this type.
        """
        return _WIDTHS[self]

    @property
    def family(self) -> TypeFamily:
        """
        The accessor family this type belongs to.
        """
        return _FAMILIES[self]

    @classmethod
    def signed(cls, width: int) -> StorageType:
        """
        Return the signed integer type for a byte width.

        Args:
            width (int):
                Byte width, 1 to 8.

        Returns:
            StorageType:
                The matching `INT_*` member.

        Raises:
            InvalidArgumentError:
                If no signed type has that width.
        """
        if not 1 <= width <= len(_SIGNED):
            raise InvalidArgumentError(f"Signed integer width must be 1 to 8 bytes, got {width}")
        return _SIGNED[width - 1]

    @classmethod
    def unsigned(cls, width: int) -> StorageType:
        """
        Return the unsigned integer type for a byte width.

        Unsigned widths stop at 7 bytes, since an 8-byte unsigned value does not fit the
        signed 64-bit range of the wide accessor.

        Args:
            width (int):
                Byte width, 1 to 7.

        Returns:
            StorageType:
                The matching `UINT_*` member.

        Raises:
            InvalidArgumentError:
                If no unsigned type has that width.
        """
        if not 1 <= width <= len(_UNSIGNED):
            raise InvalidArgumentError(f"Unsigned integer width must be 1 to 7 bytes, got {width}")
        return _UNSIGNED[width - 1]

    @classmethod
    def parse(cls, token: str) -> StorageType:
        """
        Look up a storage type by token (`"i24"`, `"ascii"`, ...) or member name
        (`"INT_24"`). The comparison is case-insensitive.

        Raises:
            InvalidArgumentError:
                If the token names no storage type.
        """
        if not isinstance(token, str):
            raise InvalidArgumentError(f"Storage type must be a string, got {type(token).__name__}")
        key = token.strip()
        for member in cls:
            if key.lower() == member.value or key.upper() == member.name:
                return member
        raise InvalidArgumentError(f"Unknown storage type {token!r}")


_WIDTHS: dict[StorageType, int] = {
    StorageType.BYTE: 1,
    StorageType.BOOL: 1,
    StorageType.BOOLS_8: 1,
    StorageType.INT_8: 1,
    StorageType.INT_16: 2,
    StorageType.INT_24: 3,
    StorageType.INT_32: 4,
    StorageType.INT_40: 5,
    StorageType.INT_48: 6,
    StorageType.INT_56: 7,
    StorageType.INT_64: 8,
    StorageType.UINT_8: 1,
    StorageType.UINT_16: 2,
    StorageType.UINT_24: 3,
    StorageType.UINT_32: 4,
    StorageType.UINT_40: 5,
    StorageType.UINT_48: 6,
    StorageType.UINT_56: 7,
    StorageType.CHAR_ASCII: 1,
    StorageType.CHAR_WIDE: 2,
}

_SIGNED: tuple[StorageType, ...] = (
    StorageType.INT_8, StorageType.INT_16, StorageType.INT_24, StorageType.INT_32,
    StorageType.INT_40, StorageType.INT_48, StorageType.INT_56, StorageType.INT_64,
)

_UNSIGNED: tuple[StorageType, ...] = (
    StorageType.UINT_8, StorageType.UINT_16, StorageType.UINT_24, StorageType.UINT_32,
    StorageType.UINT_40, StorageType.UINT_48, StorageType.UINT_56,
)

_FAMILIES: dict[StorageType, TypeFamily] = {
    StorageType.BYTE: TypeFamily.BYTE,
    StorageType.BOOL: TypeFamily.BOOL,
    StorageType.BOOLS_8: TypeFamily.BOOL,
    StorageType.CHAR_ASCII: TypeFamily.CHAR,
    StorageType.CHAR_WIDE: TypeFamily.CHAR,
    **{t: TypeFamily.INT for t in _SIGNED},
    **{t: TypeFamily.UINT for t in _UNSIGNED},
}
