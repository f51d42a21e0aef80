class RecordError(Exception):
    """
    Base class for every error raised by the record codec.
    """


class UnknownFieldError(RecordError, KeyError):
    """
    Raised when an accessor is invoked with a name absent from the schema.

    Attributes:
        field_name (str):
            The name that could not be resolved.
    """

    field_name: str

    def __init__(self, field_name: str):
        super().__init__(field_name)
        self.field_name = field_name

    def __str__(self) -> str:
        return f"Unknown field {self.field_name!r}"


class TypeMismatchError(RecordError, TypeError):
    """
    Raised when the accessor's type family does not match the declared type of the field.
    """


class InvalidArgumentError(RecordError, ValueError):
    """
    Raised for values the codec cannot represent, such as a negative number stored in an
    unsigned field or a packed boolean array whose length is not a multiple of 8.
    """


class FormatError(RecordError, ValueError):
    """
    Raised when a textual representation (key/value export or schema document) is malformed.

    Attributes:
        key (str | None):
            The field name or key where the error was found, if known.

        index (int | None):
            The element index within the value, if the value is a list.
    """

    key: str | None
    index: int | None

    def __init__(self, message: str, key: str | None = None, index: int | None = None):
        super().__init__(message)
        self.key = key
        self.index = index


class RecordIOError(RecordError, OSError):
    """
    Raised when reading or writing the backing storage fails.
    """


class TruncationWarning(UserWarning):
    """
    Non-fatal notice that a value was longer than its field and was cut to fit.

    The write still completes with the truncated data retained. Callers can observe it with
    `warnings.catch_warnings(record=True)` or turn it into an error with a warnings filter.

    Attributes:
        field_name (str):
            The field that received the value.

        capacity (int):
            The number of elements the field can hold.

        supplied (int):
            The number of elements that were supplied.
    """

    field_name: str
    capacity: int
    supplied: int

    def __init__(self, field_name: str, capacity: int, supplied: int):
        super().__init__(
            f"Value for field {field_name!r} truncated: {supplied} elements supplied, "
            f"capacity is {capacity}"
        )
        self.field_name = field_name
        self.capacity = capacity
        self.supplied = supplied
