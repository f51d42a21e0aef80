import pytest

from binrecord.errors.record_errors import InvalidArgumentError, UnknownFieldError
from binrecord.schema.compiled_schema import CompiledSchema, compile_schema
from binrecord.schema.field_descriptor import FieldDescriptor
from binrecord.schema.storage_type import StorageType, TypeFamily


@pytest.mark.parametrize("width", range(1, 9))
def test_signed_types_by_width(width: int) -> None:
    storage_type = StorageType.signed(width)
    assert storage_type.width == width
    assert storage_type.family is TypeFamily.INT


@pytest.mark.parametrize("width", range(1, 8))
def test_unsigned_types_by_width(width: int) -> None:
    storage_type = StorageType.unsigned(width)
    assert storage_type.width == width
    assert storage_type.family is TypeFamily.UINT


def test_type_width_limits() -> None:
    with pytest.raises(InvalidArgumentError):
        StorageType.signed(0)
    with pytest.raises(InvalidArgumentError):
        StorageType.signed(9)
    with pytest.raises(InvalidArgumentError):
        StorageType.unsigned(8)


def test_fixed_widths() -> None:
    assert StorageType.BYTE.width == 1
    assert StorageType.BOOL.width == 1
    assert StorageType.BOOLS_8.width == 1
    assert StorageType.CHAR_ASCII.width == 1
    assert StorageType.CHAR_WIDE.width == 2
    assert StorageType.BOOLS_8.family is TypeFamily.BOOL
    assert StorageType.CHAR_WIDE.family is TypeFamily.CHAR


def test_parse_storage_type() -> None:
    assert StorageType.parse("i24") is StorageType.INT_24
    assert StorageType.parse("INT_24") is StorageType.INT_24
    assert StorageType.parse(" Wide ") is StorageType.CHAR_WIDE
    assert StorageType.parse("bools8") is StorageType.BOOLS_8
    with pytest.raises(InvalidArgumentError, match="Unknown storage type"):
        StorageType.parse("u64")
    with pytest.raises(InvalidArgumentError):
        StorageType.parse(3)  # type: ignore[arg-type]


def test_descriptor_byte_length() -> None:
    assert FieldDescriptor("s", StorageType.CHAR_WIDE, 3).byte_length == 6
    assert FieldDescriptor("flags", StorageType.BOOLS_8, 2).byte_length == 2
    assert FieldDescriptor("n", StorageType.INT_40).byte_length == 5


def test_descriptor_validation() -> None:
    with pytest.raises(InvalidArgumentError, match="at least 1"):
        FieldDescriptor("x", StorageType.BYTE, 0)
    with pytest.raises(InvalidArgumentError):
        FieldDescriptor("x", StorageType.BYTE, True)
    with pytest.raises(InvalidArgumentError):
        FieldDescriptor("x", "byte", 1)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        FieldDescriptor(7, StorageType.BYTE, 1)  # type: ignore[arg-type]


def test_offsets_are_prefix_sums() -> None:
    schema = compile_schema([
        FieldDescriptor("a", StorageType.BYTE),
        FieldDescriptor("b", StorageType.INT_24),
        FieldDescriptor("c", StorageType.CHAR_WIDE),
    ])

    assert [f.byte_length for f in schema] == [1, 3, 2]
    assert [f.offset for f in schema] == [0, 1, 4]
    assert schema.total_size == 6
    assert schema.resolve("c").end == 6


def test_empty_schema() -> None:
    schema = compile_schema([])
    assert schema.total_size == 0
    assert len(schema) == 0
    assert schema.lookup("anything") is None


def test_lookup_and_resolve() -> None:
    schema = compile_schema([FieldDescriptor("a", StorageType.UINT_16, 2)])

    layout = schema.lookup("a")
    assert layout is not None
    assert layout.storage_type is StorageType.UINT_16
    assert layout.count == 2
    assert layout.byte_length == 4
    assert schema.lookup("b") is None
    assert "a" in schema and "b" not in schema

    with pytest.raises(UnknownFieldError) as exc_info:
        schema.resolve("b")
    assert exc_info.value.field_name == "b"
    assert isinstance(exc_info.value, KeyError)


def test_duplicate_names_resolve_to_first() -> None:
    schema = compile_schema([
        FieldDescriptor("dup", StorageType.INT_8),
        FieldDescriptor("other", StorageType.BYTE, 2),
        FieldDescriptor("dup", StorageType.CHAR_ASCII, 4),
    ])

    layout = schema.resolve("dup")
    assert layout.offset == 0
    assert layout.storage_type is StorageType.INT_8
    assert schema.names() == ["dup", "other"]
    assert len(schema) == 3
    assert schema.total_size == 7


def test_schema_equality() -> None:
    fields = [FieldDescriptor("a", StorageType.BYTE), FieldDescriptor("b", StorageType.BOOL)]
    assert compile_schema(fields) == compile_schema(list(fields))
    assert compile_schema(fields) != compile_schema(fields[:1])
    assert isinstance(compile_schema(fields), CompiledSchema)


def test_compile_rejects_non_descriptors() -> None:
    with pytest.raises(InvalidArgumentError):
        compile_schema([("a", StorageType.BYTE, 1)])  # type: ignore[list-item]
