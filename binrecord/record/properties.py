"""
Human-readable key/value view of a record.

Each field is rendered as one string:

  - byte fields: `0x`-prefixed hex per byte, joined by `;` (e.g. `0x55;0x0`)
  - boolean fields: `true` / `false` per element, joined by `;`
  - integer fields: decimal text
  - character fields: the decoded string

`dump_properties` and `parse_properties` read and write these mappings as `key=value` lines.
"""
from __future__ import annotations
import re
from typing import IO, Mapping

from binrecord.errors.record_errors import FormatError
from binrecord.record.record_buffer import RecordBuffer
from binrecord.schema.storage_type import StorageType, TypeFamily

_SEPARATOR = ";"

_DEFAULTS: dict[TypeFamily, str] = {
    TypeFamily.BYTE: "0x00",
    TypeFamily.INT: "0",
    TypeFamily.UINT: "0",
    TypeFamily.CHAR: "\0",
}


def _default(storage_type: StorageType, count: int) -> str:
    if storage_type.family is TypeFamily.BOOL:
        # packed fields only accept whole groups of 8
        n = count * 8 if storage_type is StorageType.BOOLS_8 else count
        return _SEPARATOR.join(["false"] * n)
    return _DEFAULTS[storage_type.family]


def to_properties(record: RecordBuffer) -> dict[str, str]:
    """
    Render every field of a record as text, keyed by field name in declaration order.

    Only the first field declared with a given name is reachable, so duplicated names
    appear once.
    """
    props: dict[str, str] = {}
    for name in record.schema.names():
        family = record.schema.resolve(name).storage_type.family
        if family is TypeFamily.BYTE:
            text = _SEPARATOR.join(f"0x{b:x}" for b in record.get_bytes(name))
        elif family is TypeFamily.BOOL:
            text = _SEPARATOR.join("true" if b else "false" for b in record.get_bools(name))
        elif family is TypeFamily.INT:
            text = str(record.get_long(name))
        elif family is TypeFamily.UINT:
            text = str(record.get_ulong(name))
        else:
            text = record.get_string(name)
        props[name] = text
    return props


def load_properties(record: RecordBuffer, props: Mapping[str, str]) -> None:
    """
    Store every field of a record from its text form.

    Keys absent from `props` are written with a zero default. Keys that name no field are
    ignored.

    Args:
        record (RecordBuffer):
            The record to update.

        props (Mapping[str, str]):
            Field name to text, as produced by `to_properties`.

    Raises:
        FormatError:
            If a value cannot be parsed. The error names the key and, for byte and boolean
            fields, the element index.
    """
    for name in record.schema.names():
        layout = record.schema.resolve(name)
        family = layout.storage_type.family
        text = props.get(name)
        if text is None:
            text = _default(layout.storage_type, layout.count)
        if family is TypeFamily.BYTE:
            record.set_bytes(name, [_parse_byte(item, name, i)
                                    for i, item in enumerate(text.split(_SEPARATOR))])
        elif family is TypeFamily.BOOL:
            record.set_bools(name, [_parse_bool(item, name, i)
                                    for i, item in enumerate(text.split(_SEPARATOR))])
        elif family is TypeFamily.INT:
            record.set_long(name, _parse_int(text, name, "signed"))
        elif family is TypeFamily.UINT:
            record.set_ulong(name, _parse_int(text, name, "unsigned"))
        else:
            record.set_string(name, text)


def _parse_byte(text: str, key: str, index: int) -> int:
    try:
        value = int(text.strip().replace("0x", "", 1), 16)
    except ValueError as exc:
        raise FormatError(f'Invalid byte data at key "{key}" index {index}', key, index) from exc
    if not 0 <= value <= 0xFF:
        raise FormatError(f'Invalid byte data at key "{key}" index {index}', key, index)
    return value


def _parse_bool(text: str, key: str, index: int) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise FormatError(f'Invalid boolean data at key "{key}" index {index}', key, index)


def _parse_int(text: str, key: str, kind: str) -> int:
    try:
        return int(text.strip(), 10)
    except ValueError as exc:
        raise FormatError(f'Invalid {kind} integer data at key "{key}"', key) from exc


_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "=": "\\=", "#": "\\#"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r", "=": "=", "#": "#"}


def _escape(text: str) -> str:
    out: list[str] = []
    for c in text:
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif ord(c) < 0x20 or 0xD800 <= ord(c) <= 0xDFFF:
            out.append(f"\\u{ord(c):04x}")
        else:
            out.append(c)
    return "".join(out)


def _unescape(text: str, line_no: int) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue
        if i + 1 >= len(text):
            raise FormatError(f"Dangling escape on line {line_no}")
        nxt = text[i + 1]
        if nxt == "u":
            digits = text[i + 2:i + 6]
            if not re.fullmatch(r"[0-9a-fA-F]{4}", digits):
                raise FormatError(f"Invalid \\u escape on line {line_no}")
            out.append(chr(int(digits, 16)))
            i += 6
            continue
        if nxt not in _UNESCAPES:
            raise FormatError(f"Unknown escape \\{nxt} on line {line_no}")
        out.append(_UNESCAPES[nxt])
        i += 2
    return "".join(out)


def dump_properties(props: Mapping[str, str], stream: IO[str]) -> None:
    """
    Write a mapping as `key=value` lines. Control characters (NUL included), `=`, `#` and
    backslashes are escaped so that any key and value survive `parse_properties`.
    """
    for key, value in props.items():
        stream.write(f"{_escape(key)}={_escape(value)}\n")


def parse_properties(stream: IO[str]) -> dict[str, str]:
    """
    Read `key=value` lines written by `dump_properties`.

    Blank lines and lines starting with `#` are skipped.

    Raises:
        FormatError:
            If a line has no unescaped `=` or holds an invalid escape.
    """
    props: dict[str, str] = {}
    for line_no, raw_line in enumerate(stream, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        match = re.match(r"((?:[^\\=]|\\.)*)=(.*)\Z", line, re.DOTALL)
        if match is None:
            raise FormatError(f"Missing '=' on line {line_no}")
        props[_unescape(match.group(1), line_no)] = _unescape(match.group(2), line_no)
    return props
