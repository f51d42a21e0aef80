from typing import Type, TypeVar, Tuple, cast

from binrecord.errors.record_errors import InvalidArgumentError

T = TypeVar('T')

def _format_type_name(tp: Type[T] | Tuple[Type[T], ...]) -> str:
    """
    Helper to format type names nicely for error messages.
    """
    if isinstance(tp, tuple):
        return ", ".join(t.__name__ for t in tp)
    return tp.__name__

def strict_cast(tp: Type[T] | Tuple[Type[T], ...], value: object, what: str = "value") -> T:
    """
    Perform a shallow runtime type check on a value handed to a record accessor.

    Unlike `typing.cast`, this function enforces that the value is actually
    an instance of the specified type(s) at runtime. A mismatch is a caller error
    and is raised as `InvalidArgumentError`.

    The check is **shallow**: `strict_cast(list, [1, "2"])` passes, as the contents
    are not inspected.

    Args:
        tp (Type[T] or Tuple[Type[T], ...]):
            The expected type or tuple of types.
        value (object):
            The value to check.
        what (str):
            Short description of the value, used in the error message
            (usually the field name).

    Returns:
        T:
            The value, typed as T.

    Raises:
        InvalidArgumentError:
            If the value is not an instance of the given type(s).

    Example:
        >>> strict_cast(str, "hello")
        'hello'

        >>> strict_cast((bytes, bytearray), b"hello")
        b'hello'

        >>> strict_cast(int, "not an int", "counter")
        InvalidArgumentError: counter: expected int, got str
    """
    # avoid casting within a narrowed scope; this prevents Pylance from flagging the cast
    # as unnecessary
    value_ = value

    if not isinstance(value, tp):
        raise InvalidArgumentError(
            f"{what}: expected {_format_type_name(tp)}, got {type(value).__name__}"
        )

    return cast(T, value_)

def strict_int(value: object, what: str = "value") -> int:
    """
    Like `strict_cast(int, ...)` but rejects `bool`, which is an `int` subclass.

    Raises:
        InvalidArgumentError:
            If the value is not an int, or is a bool.
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{what}: expected int, got bool")
    return strict_cast(int, value, what)
