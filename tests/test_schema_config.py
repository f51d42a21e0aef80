from pathlib import Path

import pytest

from binrecord.config.schema_config import (
    schema_from_mapping, schema_from_yaml, schema_from_yaml_string,
)
from binrecord.errors.record_errors import FormatError, RecordIOError
from binrecord.schema.storage_type import StorageType

SCHEMA_YAML = """
fields:
  - {name: flags, type: bools8}
  - {name: score, type: i24}
  - name: player
    type: ascii
    count: 12
  - {name: title, type: WIDE, count: 4}
"""


def test_schema_from_yaml_string() -> None:
    schema = schema_from_yaml_string(SCHEMA_YAML)

    assert schema.names() == ["flags", "score", "player", "title"]
    assert [f.offset for f in schema] == [0, 1, 4, 16]
    assert schema.total_size == 24
    assert schema.resolve("title").storage_type is StorageType.CHAR_WIDE
    assert schema.resolve("player").count == 12


def test_schema_from_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "schema.yml"
    path.write_text(SCHEMA_YAML, encoding="utf-8")
    assert schema_from_yaml(path) == schema_from_yaml_string(SCHEMA_YAML)


def test_schema_from_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RecordIOError):
        schema_from_yaml(tmp_path / "missing.yml")


def test_empty_field_list() -> None:
    assert schema_from_mapping({"fields": []}).total_size == 0


@pytest.mark.parametrize("doc", [
    None,
    [],
    {"fields": "nope"},
    {"other": []},
])
def test_document_shape(doc) -> None:
    with pytest.raises(FormatError, match="'fields' list"):
        schema_from_mapping(doc)


@pytest.mark.parametrize("entry, message", [
    ("flags", "must be a mapping"),
    ({"name": "a"}, "needs both"),
    ({"name": "a", "type": "i24", "size": 3}, "unknown keys: size"),
    ({"name": "a", "type": "float"}, "Unknown storage type"),
    ({"name": "a", "type": "byte", "count": 0}, "at least 1"),
    ({"name": "a", "type": "byte", "count": "2"}, "expected int"),
])
def test_bad_entries_name_index(entry, message: str) -> None:
    doc = {"fields": [{"name": "ok", "type": "byte"}, entry]}
    with pytest.raises(FormatError, match=message) as exc_info:
        schema_from_mapping(doc)
    assert exc_info.value.index == 1


def test_invalid_yaml() -> None:
    with pytest.raises(FormatError, match="Invalid YAML"):
        schema_from_yaml_string("fields: [\n")
