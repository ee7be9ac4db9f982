"""EBML identifiers and variable length integer coding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

_U64_MASK = (1 << 64) - 1

# Largest values storable on 1..4 octets; an all-ones value is reserved for "unknown".
_UNSIGNED_LIMITS = (127, 16383, 2097151, 268435455)

# (exclusive bound, bias) for signed values on 1..4 octets.
_SIGNED_RANGES = (
    (64, 63),
    (8192, 8191),
    (1048576, 1048575),
    (134217728, 134217727),
)


@dataclass(frozen=True)
class EbmlId:
    """An element identifier: its value together with its coded length."""

    value: int
    length: int

    def __post_init__(self) -> None:
        if not 1 <= self.length <= 8:
            raise ValueError(f"invalid EBML ID length {self.length}")
        if not 0 <= self.value < 1 << (8 * self.length):
            raise ValueError(f"EBML ID 0x{self.value:X} does not fit in {self.length} octets")

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "EbmlId":
        """Build an identifier from its octets as they appear in a stream."""
        raw = bytes(data)
        return cls(int.from_bytes(raw, "big"), len(raw))

    def to_bytes(self) -> bytes:
        """Return the octets of the identifier."""
        return self.value.to_bytes(self.length, "big")

    def __str__(self) -> str:
        return f"0x{self.value:0{2 * self.length}X}"


class _Coded(NamedTuple):
    value: int
    length: int
    unknown: int


def coded_size_length(length: int, size_length: int = 0, size_is_finite: bool = True) -> int:
    """Number of octets needed to code ``length`` as an EBML size."""
    for coded, limit in enumerate(_UNSIGNED_LIMITS, 1):
        if (length < limit) if size_is_finite else (length <= limit):
            break
    else:
        coded = 5
    if size_length > 0 and coded < size_length:
        coded = size_length
    return coded


def coded_size_length_signed(length: int, size_length: int = 0) -> int:
    """Number of octets needed to code the signed value ``length``."""
    for coded, (bound, _) in enumerate(_SIGNED_RANGES, 1):
        if -bound < length < bound:
            break
    else:
        coded = 5
    if size_length > 0 and coded < size_length:
        coded = size_length
    return coded


def coded_value_length(length: int, coded_size: int) -> bytes:
    """Code ``length`` on ``coded_size`` octets with the EBML length marker."""
    if not 1 <= coded_size <= 8:
        raise ValueError(f"invalid coded size {coded_size}")
    length &= _U64_MASK
    low_bits = 8 * (coded_size - 1)
    head = (1 << (8 - coded_size)) | ((length >> low_bits) & (0xFF >> (coded_size - 1)))
    tail = (length & ((1 << low_bits) - 1)).to_bytes(coded_size - 1, "big")
    return bytes([head]) + tail


def coded_value_length_signed(length: int, coded_size: int) -> bytes:
    """Code the signed value ``length`` on ``coded_size`` octets."""
    for bound, bias in _SIGNED_RANGES:
        if -bound < length < bound:
            length += bias
            break
    return coded_value_length(length, coded_size)


def read_coded_size_value(buffer: bytes | bytearray | memoryview) -> _Coded | None:
    """Decode an EBML coded size at the start of ``buffer``.

    Returns ``(value, length, unknown)`` where ``length`` is the number of
    octets used and ``unknown`` the all-ones value meaning "unknown size" for
    that length, or None when the buffer does not hold a complete value.
    """
    data = bytes(buffer)
    if not data:
        return None
    first = data[0]
    for index in range(min(len(data), 8)):
        marker = 0x80 >> index
        if first & marker:
            size = index + 1
            if size > len(data):
                return None
            value = ((first & (marker - 1)) << (8 * index)) | int.from_bytes(data[1:size], "big")
            return _Coded(value, size, (1 << (7 * size)) - 1)
    return None


def read_coded_size_signed_value(buffer: bytes | bytearray | memoryview) -> _Coded | None:
    """Decode a signed EBML coded value at the start of ``buffer``."""
    coded = read_coded_size_value(buffer)
    if coded is None:
        return None
    if coded.length <= len(_SIGNED_RANGES):
        _, bias = _SIGNED_RANGES[coded.length - 1]
        return coded._replace(value=coded.value - bias)
    return coded