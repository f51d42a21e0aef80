from __future__ import annotations
from dataclasses import dataclass

from binrecord.errors.record_errors import InvalidArgumentError
from binrecord.schema.storage_type import StorageType
from binrecord.typeutils.strict_cast import strict_cast, strict_int


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One entry of a record schema: a named, typed, fixed-length slot.

    Attributes:
        name (str):
            Field name used by the accessors. Names are not required to be unique;
            the first declared field wins on lookup.

        storage_type (StorageType):
            How each element is encoded.

        count (int):
            Number of elements (characters, integers, bytes, ...), not bytes.
            For `StorageType.BOOLS_8` it is the number of 8-boolean groups.
    """

    name: str
    storage_type: StorageType
    count: int = 1

    def __post_init__(self):
        strict_cast(str, self.name, "field name")
        strict_cast(StorageType, self.storage_type, f"storage type of {self.name!r}")
        if strict_int(self.count, f"count of {self.name!r}") < 1:
            raise InvalidArgumentError(f"Field {self.name!r} must have a count of at least 1")

    @property
    def byte_length(self) -> int:
        return self.count * self.storage_type.width
