"""Elements holding raw binary data, dates and floating point numbers."""

from __future__ import annotations

import copy
import enum
import math
import struct
from typing import Optional

from .element import EbmlElement
from .io import IOCallback, ScopeMode, SeekMode

_BIG_I64 = struct.Struct(">q")
_BIG_F32 = struct.Struct(">f")
_BIG_F64 = struct.Struct(">d")

_NS_PER_SECOND = 1_000_000_000


class EbmlBinary(EbmlElement):
    """An element whose payload is an opaque block of bytes."""

    def __init__(self) -> None:
        super().__init__(0, False)
        self.data: Optional[bytes] = None

    @property
    def buffer(self) -> bytes:
        """The payload, empty when nothing is stored."""
        return self.data or b""

    def set_buffer(self, data: bytes | bytearray | memoryview) -> None:
        """Store ``data`` as the payload and set the size to match."""
        self.data = bytes(data)
        self.size = len(self.data)
        self.value_is_set = True

    def has_same_data(self, other: "EbmlBinary") -> bool:
        """Whether both elements hold payloads of the same size and content."""
        return self.size == other.size and (
            self.size == 0 or self.buffer[: self.size] == other.buffer[: other.size]
        )

    def render_data(self, stream: IOCallback, force_render: bool, with_default: bool = False) -> int:
        payload = self.buffer[: self.size]
        if len(payload) != self.size:
            raise ValueError(
                f"binary element holds {len(payload)} bytes but its size is {self.size}"
            )
        stream.write_fully(payload)
        return self.size

    def update_size(self, with_default: bool = False, force_render: bool = False) -> int:
        return self.size

    def read_data(self, stream: IOCallback, scope: ScopeMode = ScopeMode.ALL_DATA) -> int:
        self.data = None
        if scope == ScopeMode.NO_DATA:
            return self.size
        if not self.size:
            self.value_is_set = True
            return 0
        self.data = stream.read(self.size)
        self.value_is_set = True
        return len(self.data)

    def validate_size(self) -> bool:
        return self.size_is_finite and self.size < 0x7FFFFFFF

    def is_default_value(self) -> bool:
        return False

    def clone(self) -> "EbmlBinary":
        return copy.copy(self)


class EbmlDate(EbmlElement):
    """A date stored as nanoseconds since 2001-01-01 00:00:00 UTC."""

    UNIX_EPOCH_DELAY = 978307200

    def __init__(self) -> None:
        super().__init__(8, False)
        self.my_date = 0

    @property
    def epoch_date(self) -> int:
        """The date as seconds since the UNIX epoch, in UTC."""
        seconds = abs(self.my_date) // _NS_PER_SECOND
        if self.my_date < 0:
            seconds = -seconds
        return seconds + self.UNIX_EPOCH_DELAY

    @epoch_date.setter
    def epoch_date(self, new_date: int) -> None:
        self.my_date = (int(new_date) - self.UNIX_EPOCH_DELAY) * _NS_PER_SECOND
        self.value_is_set = True

    @property
    def value(self) -> int:
        """Alias of :attr:`epoch_date`."""
        return self.epoch_date

    @value.setter
    def value(self, new_value: int) -> None:
        self.epoch_date = new_value

    def validate_size(self) -> bool:
        return self.size_is_finite and self.size in (0, 8)

    def update_size(self, with_default: bool = False, force_render: bool = False) -> int:
        self.size = 8 if self.value_is_set else 0
        return self.size

    def read_data(self, stream: IOCallback, scope: ScopeMode = ScopeMode.ALL_DATA) -> int:
        if scope == ScopeMode.NO_DATA or self.size == 0:
            return self.size
        if self.size != 8:
            stream.set_file_pointer(self.size, SeekMode.CURRENT)
            return self.size
        (self.my_date,) = _BIG_I64.unpack(stream.read_fully(8))
        self.value_is_set = True
        return self.size

    def render_data(self, stream: IOCallback, force_render: bool, with_default: bool = False) -> int:
        if self.size not in (0, 8):
            raise ValueError(f"a date is stored on 0 or 8 bytes, not {self.size}")
        if self.size == 8:
            stream.write_fully(_BIG_I64.pack(self.my_date))
        return self.size

    def is_smaller_than(self, other: EbmlElement) -> bool:
        if self.element_id == other.element_id:
            return self.my_date < other.my_date  # type: ignore[attr-defined]
        return False

    def is_default_value(self) -> bool:
        return False

    def clone(self) -> "EbmlDate":
        return copy.copy(self)


class FloatPrecision(enum.Enum):
    """Storage width of a floating point element."""

    FLOAT_32 = 4
    FLOAT_64 = 8


class EbmlFloat(EbmlElement):
    """An element holding a floating point number on 4 or 8 bytes."""

    def __init__(
        self,
        default_value: Optional[float] = None,
        precision: FloatPrecision = FloatPrecision.FLOAT_32,
    ) -> None:
        super().__init__(0, default_value is not None)
        self._value = 0.0
        self._default_value = 0.0
        if default_value is not None:
            self._value = float(default_value)
            self._default_value = float(default_value)
            self.default_is_set = True
        self.precision = precision

    @property
    def precision(self) -> FloatPrecision:
        """The storage width, derived from the current size."""
        return FloatPrecision.FLOAT_64 if self.size == 8 else FloatPrecision.FLOAT_32

    @precision.setter
    def precision(self, precision: FloatPrecision) -> None:
        self.size = 8 if FloatPrecision(precision) is FloatPrecision.FLOAT_64 else 4

    @property
    def value(self) -> float:
        """The stored number."""
        return self._value

    @value.setter
    def value(self, new_value: float) -> None:
        self._value = float(new_value)
        self.value_is_set = True

    @property
    def default_value(self) -> float:
        """The default number; raises ValueError when none is set."""
        if not self.default_is_set:
            raise ValueError("float element has no default value")
        return self._default_value

    def set_default_value(self, value: float) -> None:
        """Set the default number; it can be set only once."""
        if self.default_is_set:
            raise ValueError("float element already has a default value")
        self._default_value = float(value)
        self.default_is_set = True

    def render_data(self, stream: IOCallback, force_render: bool, with_default: bool = False) -> int:
        if self.size == 4:
            try:
                packed = _BIG_F32.pack(self._value)
            except OverflowError:
                packed = _BIG_F32.pack(math.copysign(math.inf, self._value))
            stream.write_fully(packed)
        elif self.size == 8:
            stream.write_fully(_BIG_F64.pack(self._value))
        else:
            raise ValueError(f"a float is stored on 4 or 8 bytes, not {self.size}")
        return self.size

    def update_size(self, with_default: bool = False, force_render: bool = False) -> int:
        if not with_default and self.is_default_value():
            return 0
        return self.size

    def read_data(self, stream: IOCallback, scope: ScopeMode = ScopeMode.ALL_DATA) -> int:
        if scope == ScopeMode.NO_DATA:
            return self.size
        if self.size not in (4, 8):
            stream.set_file_pointer(self.size, SeekMode.CURRENT)
            return self.size
        raw = stream.read_fully(self.size)
        unpacker = _BIG_F32 if self.size == 4 else _BIG_F64
        (self._value,) = unpacker.unpack(raw)
        self.value_is_set = True
        return self.size

    def validate_size(self) -> bool:
        return self.size_is_finite and self.size in (4, 8)

    def is_default_value(self) -> bool:
        return self.default_is_set and self._value == self._default_value

    def is_smaller_than(self, other: EbmlElement) -> bool:
        if self.element_id == other.element_id:
            return self._value < other.value  # type: ignore[attr-defined]
        return False

    def clone(self) -> "EbmlFloat":
        return copy.copy(self)