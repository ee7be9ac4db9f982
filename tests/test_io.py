import errno
import os

import pytest

from ebmlkit.io import (
    BytesIOCallback,
    CRTError,
    MemReadIOCallback,
    OpenMode,
    SeekMode,
    StdIOCallback,
)


def test_mem_read_sequential():
    cb = MemReadIOCallback(b"abcdef")
    assert cb.read(2) == b"ab"
    assert cb.get_file_pointer() == 2
    assert cb.read(10) == b"cdef"
    assert cb.read(1) == b""
    assert cb.get_file_pointer() == 6


def test_mem_read_seek_modes():
    cb = MemReadIOCallback(bytearray(b"abcdef"))
    cb.set_file_pointer(-2, SeekMode.END)
    assert cb.read(2) == b"ef"
    cb.set_file_pointer(-3, SeekMode.CURRENT)
    assert cb.read(1) == b"d"
    cb.set_file_pointer(1)
    assert cb.read(1) == b"b"
    cb.set_file_pointer(-1, os.SEEK_END)
    assert cb.read(5) == b"f"


def test_mem_read_seek_out_of_range():
    cb = MemReadIOCallback(b"abc")
    with pytest.raises(ValueError):
        cb.set_file_pointer(4)
    with pytest.raises(ValueError):
        cb.set_file_pointer(-1)
    assert cb.get_file_pointer() == 0


def test_mem_read_is_read_only():
    cb = MemReadIOCallback(b"abc")
    assert cb.write(b"xyz") == 0
    with pytest.raises(OSError):
        cb.write_fully(b"xyz")


def test_mem_read_buffer_views():
    cb = MemReadIOCallback(memoryview(b"hello"))
    cb.read(2)
    assert cb.data_buffer == b"llo"
    assert cb.data_buffer_size == 5


def test_read_fully_exact_and_short():
    cb = MemReadIOCallback(b"abcd")
    assert cb.read_fully(3) == b"abc"
    with pytest.raises(EOFError):
        cb.read_fully(2)


def test_read_fully_zero():
    cb = MemReadIOCallback(b"")
    assert cb.read_fully(0) == b""


def test_bytes_io_round_trip():
    cb = BytesIOCallback()
    cb.write_fully(b"hello world")
    assert cb.get_file_pointer() == 11
    cb.set_file_pointer(0)
    assert cb.read(5) == b"hello"
    assert cb.getvalue() == b"hello world"
    assert len(cb) == 11


def test_bytes_io_overwrite_in_middle():
    cb = BytesIOCallback(b"abcdef")
    cb.set_file_pointer(2)
    assert cb.write(b"XY") == 2
    assert cb.getvalue() == b"abXYef"
    assert cb.read(2) == b"ef"


def test_bytes_io_write_past_end_pads():
    cb = BytesIOCallback()
    cb.set_file_pointer(3)
    cb.write(b"z")
    assert cb.getvalue() == b"\x00\x00\x00z"


def test_bytes_io_negative_seek():
    cb = BytesIOCallback(b"ab")
    with pytest.raises(ValueError):
        cb.set_file_pointer(-3, SeekMode.END)


def test_std_io_write_and_read(tmp_path):
    path = tmp_path / "data.bin"
    with StdIOCallback(path, OpenMode.CREATE) as cb:
        cb.write_fully(b"0123456789")
        assert cb.get_file_pointer() == 10
    with StdIOCallback(path, OpenMode.READ) as cb:
        cb.set_file_pointer(-4, SeekMode.END)
        assert cb.read_fully(4) == b"6789"
        cb.set_file_pointer(2)
        assert cb.read(3) == b"234"
    assert cb.closed


def test_std_io_write_mode_keeps_content(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"abcdef")
    with StdIOCallback(path, OpenMode.WRITE) as cb:
        cb.set_file_pointer(1)
        cb.write_fully(b"ZZ")
    assert path.read_bytes() == b"aZZdef"


def test_std_io_missing_file(tmp_path):
    with pytest.raises(CRTError) as info:
        StdIOCallback(tmp_path / "missing.bin", OpenMode.READ)
    assert info.value.error == errno.ENOENT


def test_std_io_bad_seek(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"abc")
    with StdIOCallback(path) as cb:
        with pytest.raises(CRTError):
            cb.set_file_pointer(-10, SeekMode.CURRENT)
        assert cb.get_file_pointer() == 0