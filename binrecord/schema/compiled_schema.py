from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Iterable, Iterator

from binrecord.errors.record_errors import UnknownFieldError
from binrecord.schema.field_descriptor import FieldDescriptor
from binrecord.schema.storage_type import StorageType
from binrecord.typeutils.strict_cast import strict_cast

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldLayout:
    """
    Resolved position of one field inside the record buffer.

    Attributes:
        name (str):
            The field name.

        storage_type (StorageType):
            The declared storage type.

        count (int):
            The declared element count.

        offset (int):
            Index of the first byte of the field in the buffer.

        byte_length (int):
            Number of bytes the field occupies (`count * storage_type.width`).
    """

    name: str
    storage_type: StorageType
    count: int
    offset: int
    byte_length: int

    @property
    def end(self) -> int:
        return self.offset + self.byte_length


class CompiledSchema:
    """
    An ordered list of fields with their byte offsets.

    Fields are packed back to back in declaration order with no padding, so the offset of a
    field is the sum of the byte lengths of every field declared before it.

    Duplicate names are accepted. Lookups return the first declared field with a given name,
    which makes later fields with the same name unreachable by name.

    Attributes:
        fields (tuple[FieldLayout, ...]):
            Every field, in declaration order.

        total_size (int):
            Size in bytes of a record buffer built from this schema.
    """

    fields: tuple[FieldLayout, ...]
    total_size: int
    _by_name: dict[str, FieldLayout]

    def __init__(self, fields: tuple[FieldLayout, ...]):
        self.fields = fields
        self.total_size = sum(f.byte_length for f in fields)
        self._by_name = {}
        for layout in fields:
            # first declaration shadows later ones
            self._by_name.setdefault(layout.name, layout)

    def lookup(self, name: str) -> FieldLayout | None:
        """
        Find the first field declared with `name`.

        Returns:
            FieldLayout | None:
                The field layout, or None if no field has that name.
        """
        return self._by_name.get(name)

    def resolve(self, name: str) -> FieldLayout:
        """
        Find the first field declared with `name`.

        Raises:
            UnknownFieldError:
                If no field has that name.
        """
        layout = self._by_name.get(name)
        if layout is None:
            raise UnknownFieldError(name)
        return layout

    def names(self) -> list[str]:
        """
        Unique field names in declaration order.
        """
        return list(self._by_name)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[FieldLayout]:
        return iter(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CompiledSchema):
            return self.fields == other.fields
        return False

    def __hash__(self) -> int:
        return hash(self.fields)

    def __repr__(self) -> str:
        return f"CompiledSchema(fields={len(self.fields)}, total_size={self.total_size})"


def compile_schema(fields: Iterable[FieldDescriptor]) -> CompiledSchema:
    """
    Compute the byte layout of an ordered list of field descriptors.

    The byte length of each field is `count * width`; the first field starts at offset 0 and
    every following field starts where the previous one ends. An empty list yields a
    zero-size schema.

    Args:
        fields (Iterable[FieldDescriptor]):
            The fields, in the order they are laid out in the buffer.

    Returns:
        CompiledSchema:
            The compiled schema.

    Raises:
        InvalidArgumentError:
            If an entry is not a FieldDescriptor.
    """
    layouts: list[FieldLayout] = []
    offset = 0
    for descriptor in fields:
        strict_cast(FieldDescriptor, descriptor, "schema entry")
        layouts.append(FieldLayout(
            name=descriptor.name,
            storage_type=descriptor.storage_type,
            count=descriptor.count,
            offset=offset,
            byte_length=descriptor.byte_length,
        ))
        offset += descriptor.byte_length

    schema = CompiledSchema(tuple(layouts))
    if len(schema.names()) != len(layouts):
        _logger.debug("Schema declares duplicate field names; first declarations win")
    _logger.debug("Compiled schema with %d fields, %d bytes", len(layouts), schema.total_size)
    return schema
