"""Byte stream abstractions used to read and write EBML data."""

from __future__ import annotations

import abc
import enum
import os
from typing import BinaryIO


class SeekMode(enum.IntEnum):
    """Reference point for a seek."""

    BEGINNING = os.SEEK_SET
    CURRENT = os.SEEK_CUR
    END = os.SEEK_END


class OpenMode(enum.Enum):
    """How a file backed stream is opened."""

    READ = enum.auto()
    WRITE = enum.auto()
    CREATE = enum.auto()
    SAFE = enum.auto()


class ScopeMode(enum.IntEnum):
    """How much of an element's payload a read loads."""

    PARTIAL_DATA = 0
    ALL_DATA = 1
    NO_DATA = 2


class CRTError(RuntimeError):
    """A failure of the underlying file system, carrying its errno value."""

    def __init__(self, description: str, error: int = 0) -> None:
        super().__init__(description)
        self.error = error


class IOCallback(abc.ABC):
    """A seekable byte stream that elements are read from and rendered to."""

    @abc.abstractmethod
    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of stream."""

    @abc.abstractmethod
    def set_file_pointer(self, offset: int, mode: SeekMode = SeekMode.BEGINNING) -> None:
        """Move the stream position."""

    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""

    @abc.abstractmethod
    def get_file_pointer(self) -> int:
        """Return the current stream position."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the stream."""

    def read_fully(self, size: int) -> bytes:
        """Read exactly ``size`` bytes or raise EOFError."""
        if size < 0:
            raise ValueError("size must not be negative")
        chunks = []
        remaining = size
        while remaining:
            chunk = self.read(remaining)
            if not chunk:
                got = size - remaining
                raise EOFError(f"end of stream: wanted {size} bytes, got {got}")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def write_fully(self, data: bytes) -> None:
        """Write all of ``data`` or raise OSError."""
        written = self.write(data)
        if written != len(data):
            raise OSError(f"short write: {written} of {len(data)} bytes")

    def __enter__(self) -> "IOCallback":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _target_position(offset: int, mode: SeekMode | int, current: int, end: int) -> int:
    mode = SeekMode(mode)
    if mode is SeekMode.BEGINNING:
        return offset
    if mode is SeekMode.CURRENT:
        return current + offset
    return end + offset


class MemReadIOCallback(IOCallback):
    """A read-only stream over a block of bytes held in memory."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    def read(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        chunk = self._data[self._pos:self._pos + size]
        self._pos += len(chunk)
        return chunk

    def set_file_pointer(self, offset: int, mode: SeekMode = SeekMode.BEGINNING) -> None:
        target = _target_position(offset, mode, self._pos, len(self._data))
        if not 0 <= target <= len(self._data):
            raise ValueError(f"position {target} outside of buffer of {len(self._data)} bytes")
        self._pos = target

    def write(self, data: bytes) -> int:
        return 0

    def get_file_pointer(self) -> int:
        return self._pos

    def close(self) -> None:
        pass

    @property
    def data_buffer(self) -> bytes:
        """The bytes from the current position to the end."""
        return self._data[self._pos:]

    @property
    def data_buffer_size(self) -> int:
        """The total size of the buffer."""
        return len(self._data)


class BytesIOCallback(IOCallback):
    """A growable in-memory stream that can be written and read back."""

    def __init__(self, initial: bytes | bytearray | memoryview = b"") -> None:
        self._buffer = bytearray(initial)
        self._pos = 0

    def read(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        chunk = bytes(self._buffer[self._pos:self._pos + size])
        self._pos += len(chunk)
        return chunk

    def set_file_pointer(self, offset: int, mode: SeekMode = SeekMode.BEGINNING) -> None:
        target = _target_position(offset, mode, self._pos, len(self._buffer))
        if target < 0:
            raise ValueError(f"position {target} is before the start of the buffer")
        self._pos = target

    def write(self, data: bytes) -> int:
        if self._pos > len(self._buffer):
            self._buffer.extend(bytes(self._pos - len(self._buffer)))
        end = self._pos + len(data)
        self._buffer[self._pos:end] = data
        self._pos = end
        return len(data)

    def get_file_pointer(self) -> int:
        return self._pos

    def close(self) -> None:
        pass

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


_FILE_MODES = {
    OpenMode.READ: "rb",
    OpenMode.SAFE: "rb",
    OpenMode.WRITE: "r+b",
    OpenMode.CREATE: "w+b",
}


class StdIOCallback(IOCallback):
    """A stream over a file on disk."""

    def __init__(self, path: str | os.PathLike[str], mode: OpenMode = OpenMode.READ) -> None:
        try:
            self._file: BinaryIO = open(path, _FILE_MODES[mode])
        except OSError as exc:
            raise CRTError(f"Error opening {os.fspath(path)}: {exc.strerror}", exc.errno or 0) from exc

    def read(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        return self._file.read(size)

    def set_file_pointer(self, offset: int, mode: SeekMode = SeekMode.BEGINNING) -> None:
        try:
            self._file.seek(offset, int(SeekMode(mode)))
        except OSError as exc:
            raise CRTError(f"Failed to seek: {exc.strerror}", exc.errno or 0) from exc

    def write(self, data: bytes) -> int:
        return self._file.write(data)

    def get_file_pointer(self) -> int:
        return self._file.tell()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    @property
    def closed(self) -> bool:
        """Whether the file has been closed."""
        return self._file.closed