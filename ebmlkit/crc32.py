"""The CRC-32 element used to protect the content of master elements."""

from __future__ import annotations

import copy
import struct
import zlib

from .coding import EbmlId
from .contexts import empty_global_context
from .element import EbmlCallbacks, EbmlElement
from .io import BytesIOCallback, IOCallback, ScopeMode, SeekMode

_CRC32_NEGL = 0xFFFFFFFF
_CRC_STRUCT = struct.Struct("<I")


def _advance(crc: int, data: bytes | bytearray | memoryview) -> int:
    """Feed ``data`` into a running (not finalized) CRC register."""
    return zlib.crc32(bytes(data), crc ^ _CRC32_NEGL) ^ _CRC32_NEGL


class EbmlCrc32(EbmlElement):
    """A CRC-32 checksum element, stored on 4 octets in little-endian order."""

    def __init__(self) -> None:
        super().__init__(4, False)
        self._crc = _CRC32_NEGL
        self._crc_final = 0
        self.size = 4

    @property
    def crc32(self) -> int:
        """The last finalized checksum."""
        return self._crc_final

    def reset_crc(self) -> None:
        """Restart the running checksum."""
        self._crc = _CRC32_NEGL

    def update_byte(self, byte: int) -> None:
        """Feed a single octet into the running checksum."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte value {byte} out of range")
        self._crc = _advance(self._crc, bytes([byte]))

    def update(self, data: bytes | bytearray | memoryview) -> None:
        """Feed ``data`` into the running checksum."""
        self._crc = _advance(self._crc, data)

    def finalize(self) -> None:
        """Finish the running checksum, store it and start a new one."""
        self._crc_final = self._crc ^ _CRC32_NEGL
        self.reset_crc()
        self.value_is_set = True

    def fill_crc32(self, data: bytes | bytearray | memoryview) -> None:
        """Compute and store the checksum of ``data`` alone."""
        self.reset_crc()
        self.update(data)
        self.finalize()

    @staticmethod
    def check_crc(input_crc: int, data: bytes | bytearray | memoryview) -> bool:
        """Whether ``input_crc`` is the checksum of ``data``."""
        return (_advance(_CRC32_NEGL, data) ^ _CRC32_NEGL) == input_crc

    def add_element_crc32(self, element: EbmlElement) -> None:
        """Feed the rendered form of ``element`` into the running checksum."""
        buffer = BytesIOCallback()
        element.render(buffer, True, True)
        data = buffer.getvalue()
        if len(data) > 0xFFFFFFFF:
            return
        self.update(data)

    def check_element_crc32(self, element: EbmlElement) -> bool:
        """Whether the stored checksum matches the rendered form of ``element``."""
        buffer = BytesIOCallback()
        element.render(buffer)
        data = buffer.getvalue()
        if len(data) > 0xFFFFFFFF:
            return False
        return self.check_crc(self._crc_final, data)

    def render_data(self, stream: IOCallback, force_render: bool, with_default: bool = False) -> int:
        result = 4
        stream.write_fully(_CRC_STRUCT.pack(self._crc_final))
        if result < self.default_size:
            stream.write_fully(bytes(self.default_size - result))
            result = self.default_size
        return result

    def read_data(self, stream: IOCallback, scope: ScopeMode = ScopeMode.ALL_DATA) -> int:
        if scope == ScopeMode.NO_DATA:
            return self.size
        if self.size != 4:
            stream.set_file_pointer(self.size, SeekMode.CURRENT)
            return self.size
        (self._crc_final,) = _CRC_STRUCT.unpack(stream.read_fully(4))
        self.value_is_set = True
        return self.size

    def update_size(self, with_default: bool = False, force_render: bool = False) -> int:
        return self.size

    def validate_size(self) -> bool:
        return self.size_is_finite and self.size == 4

    def is_default_value(self) -> bool:
        return False

    def clone(self) -> "EbmlCrc32":
        return copy.copy(self)


EbmlCrc32.class_infos = EbmlCallbacks(
    EbmlCrc32, EbmlId(0xBF, 1), "EBMLCrc32", empty_global_context()
)