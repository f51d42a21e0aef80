from __future__ import annotations
import logging
import os
from types import TracebackType
from typing import Iterable, Self

from binrecord.errors.record_errors import RecordIOError
from binrecord.record.record_buffer import RecordBuffer
from binrecord.schema.compiled_schema import CompiledSchema
from binrecord.schema.field_descriptor import FieldDescriptor

_logger = logging.getLogger(__name__)


def read_all(path: str | os.PathLike[str]) -> bytes:
    """
    Read the entire content of a file.

    Raises:
        RecordIOError:
            If the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise RecordIOError(exc.errno, f"Cannot read record file: {exc.strerror}",
                            os.fspath(path)) from exc
    _logger.debug("Loaded %d bytes from %s", len(data), path)
    return data


def write_all(path: str | os.PathLike[str], data: bytes) -> None:
    """
    Replace the entire content of a file with `data`.

    Raises:
        RecordIOError:
            If the file cannot be written.
    """
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise RecordIOError(exc.errno, f"Cannot write record file: {exc.strerror}",
                            os.fspath(path)) from exc
    _logger.debug("Stored %d bytes to %s", len(data), path)


class RecordFile(RecordBuffer):
    """
    A record buffer persisted to a single file.

    The file holds the buffer bytes and nothing else: no header, no length and no schema.
    The same schema has to be supplied every time the file is opened.

    The file is created empty if it does not exist, then read once when the object is built.
    Changes stay in memory until `store()` (or `close()`, or the end of a `with` block)
    writes the whole buffer back.

    Example:
        >>> with RecordFile("save.bin", [FieldDescriptor("score", StorageType.INT_32)]) as rec:
        ...     rec.set_int("score", 1200)

    Attributes:
        path (str):
            Path of the backing file.
    """

    path: str

    def __init__(self, path: str | os.PathLike[str],
                 schema: CompiledSchema | Iterable[FieldDescriptor]):
        """
        Open (or create) the record file and load its content.

        Args:
            path (str | os.PathLike[str]):
                Path of the backing file.

            schema (CompiledSchema | Iterable[FieldDescriptor]):
                The layout the file was written with.

        Raises:
            RecordIOError:
                If the file cannot be created or read.
        """
        self.path = os.fspath(path)
        if not os.path.exists(self.path):
            _logger.debug("Creating record file %s", self.path)
            write_all(self.path, b"")
        super().__init__(schema, read_all(self.path))

    def store(self) -> None:
        """
        Write the whole buffer to the backing file.

        Raises:
            RecordIOError:
                If the file cannot be written.
        """
        write_all(self.path, self.raw_bytes())

    def close(self) -> None:
        self.store()

    def __enter__(self) -> Self:
        return self

    def __exit__(self,
                 exc_type: type[BaseException] | None,
                 exc: BaseException | None,
                 tb: TracebackType | None) -> None:
        # keep the file untouched if the block failed
        if exc_type is None:
            self.store()

    def __repr__(self) -> str:
        return f"RecordFile(path={self.path!r}, size={len(self)})"
