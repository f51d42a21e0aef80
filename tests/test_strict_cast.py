import pytest

# pylint: disable=protected-access
# pyright: reportPrivateUsage=false

from binrecord.errors.record_errors import InvalidArgumentError
from binrecord.typeutils.strict_cast import strict_cast, strict_int, _format_type_name


def test_format_type_name_single() -> None:
    assert _format_type_name(str) == "str"
    assert _format_type_name(int) == "int"


def test_format_type_name_tuple() -> None:
    assert _format_type_name((list, tuple)) == "list, tuple"
    assert _format_type_name((bool,)) == "bool"


def test_strict_cast_success() -> None:
    assert strict_cast(str, "hello") == "hello"
    assert strict_cast((bytes, bytearray), b"bytes") == b"bytes"
    assert strict_cast((list, tuple), (1, 2)) == (1, 2)


def test_strict_cast_failure_names_value() -> None:
    with pytest.raises(InvalidArgumentError, match="score: expected int, got str"):
        strict_cast(int, "wrong type", "score")

    with pytest.raises(InvalidArgumentError, match="expected list, tuple, got str"):
        strict_cast((list, tuple), "abc")


def test_strict_cast_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        strict_cast(int, 1.5)


def test_strict_int_rejects_bool() -> None:
    assert strict_int(5) == 5
    with pytest.raises(InvalidArgumentError, match="got bool"):
        strict_int(True)
    with pytest.raises(InvalidArgumentError, match="got float"):
        strict_int(2.0)
