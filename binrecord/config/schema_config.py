from __future__ import annotations
import logging
import os
from typing import Any, Mapping

import yaml

from binrecord.errors.record_errors import FormatError, InvalidArgumentError, RecordIOError
from binrecord.schema.compiled_schema import CompiledSchema, compile_schema
from binrecord.schema.field_descriptor import FieldDescriptor
from binrecord.schema.storage_type import StorageType

_logger = logging.getLogger(__name__)


def schema_from_mapping(doc: Mapping[str, Any]) -> CompiledSchema:
    """
    Build a schema from a parsed document.

    The document must hold a `fields` list; each entry is a mapping with a `name`, a `type`
    token (see `StorageType.parse`) and an optional `count` (default 1):

        fields:
          - {name: flags, type: bools8}
          - {name: score, type: i24}
          - {name: player, type: ascii, count: 12}

    Args:
        doc (Mapping[str, Any]):
            The parsed document.

    Returns:
        CompiledSchema:
            The compiled schema, in the order the fields are listed.

    Raises:
        FormatError:
            If the document is not shaped as above, or an entry has an unknown type or an
            invalid count. The error names the index of the offending entry.
    """
    if not isinstance(doc, Mapping) or not isinstance(doc.get("fields"), list):
        raise FormatError("Schema document must be a mapping with a 'fields' list")

    descriptors: list[FieldDescriptor] = []
    for i, entry in enumerate(doc["fields"]):
        if not isinstance(entry, Mapping):
            raise FormatError(f"Schema field {i} must be a mapping", index=i)
        unknown = set(entry) - {"name", "type", "count"}
        if unknown:
            raise FormatError(
                f"Schema field {i} has unknown keys: {', '.join(sorted(map(str, unknown)))}",
                index=i,
            )
        if "name" not in entry or "type" not in entry:
            raise FormatError(f"Schema field {i} needs both 'name' and 'type'", index=i)

        name = entry["name"]
        try:
            descriptors.append(FieldDescriptor(
                name=name if isinstance(name, str) else str(name),
                storage_type=StorageType.parse(entry["type"]),
                count=entry.get("count", 1),
            ))
        except InvalidArgumentError as exc:
            raise FormatError(f"Schema field {i}: {exc}", key=str(name), index=i) from exc

    return compile_schema(descriptors)


def schema_from_yaml_string(yaml_content: str) -> CompiledSchema:
    """
    Build a schema from YAML text. See `schema_from_mapping` for the document layout.

    Raises:
        FormatError:
            If the text is not valid YAML or does not describe a schema.
    """
    try:
        doc = yaml.safe_load(yaml_content)
    except yaml.YAMLError as exc:
        raise FormatError(f"Invalid YAML schema: {exc}") from exc
    return schema_from_mapping(doc)


def schema_from_yaml(yaml_path: str | os.PathLike[str]) -> CompiledSchema:
    """
    Build a schema from a YAML file. See `schema_from_mapping` for the document layout.

    Raises:
        RecordIOError:
            If the file cannot be read.

        FormatError:
            If the file is not valid YAML or does not describe a schema.
    """
    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as exc:
        raise RecordIOError(exc.errno, f"Cannot read schema file: {exc.strerror}",
                            os.fspath(yaml_path)) from exc
    _logger.debug("Loading schema from %s", yaml_path)
    return schema_from_yaml_string(content)
