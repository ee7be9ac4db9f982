"""Locating elements in a byte stream and skipping over their data."""

from __future__ import annotations

import copy
from typing import Optional

from .coding import EbmlId, read_coded_size_value
from .element import EbmlCallbacks, EbmlElement
from .io import IOCallback, ScopeMode, SeekMode
from .semantic import EbmlSemanticContext

DUMMY_RAW_ID = EbmlId(0xFF, 1)


def _dummy_global() -> EbmlSemanticContext:
    return _DUMMY_CONTEXT


_DUMMY_CONTEXT = EbmlSemanticContext(get_global=_dummy_global)


class EbmlDummy(EbmlElement):
    """An element whose identifier is not known in the current context."""

    def __init__(self, element_id: EbmlId = DUMMY_RAW_ID) -> None:
        super().__init__(0, False)
        self.dummy_id = element_id
        self.data = b""

    @property
    def element_id(self) -> EbmlId:
        return self.dummy_id

    @property
    def is_dummy(self) -> bool:
        return True

    def validate_size(self) -> bool:
        return self.size_is_finite and self.size < 0x7FFFFFFF

    def update_size(self, with_default: bool = False, force_render: bool = False) -> int:
        return self.size

    def read_data(self, stream: IOCallback, scope: ScopeMode = ScopeMode.ALL_DATA) -> int:
        self.data = b""
        if scope is ScopeMode.NO_DATA:
            return self.size
        if not self.size:
            self.value_is_set = True
            return 0
        self.data = stream.read(self.size)
        self.value_is_set = True
        return len(self.data)

    def render_data(self, stream: IOCallback, force_render: bool, with_default: bool = False) -> int:
        stream.write_fully(self.data)
        return len(self.data)

    def is_default_value(self) -> bool:
        return False

    def clone(self) -> "EbmlDummy":
        return copy.copy(self)


EbmlDummy.class_infos = EbmlCallbacks(EbmlDummy, DUMMY_RAW_ID, "DummyElement", _DUMMY_CONTEXT)


def find_next_id(
    stream: IOCallback, callbacks: EbmlCallbacks, max_data_size: int
) -> Optional[EbmlElement]:
    """Read the element at the current position, as ``callbacks`` if its ID matches."""
    element_position = stream.get_file_pointer()
    id_bytes = bytearray()
    mask = 0x80
    while len(id_bytes) < 4:
        byte = stream.read(1)
        if not byte:
            return None
        id_bytes += byte
        if id_bytes[0] & mask:
            break
        mask >>= 1
    else:
        return None

    size_position = stream.get_file_pointer()
    size_bytes = bytearray()
    while True:
        if len(size_bytes) >= 8:
            return None
        byte = stream.read(1)
        if not byte:
            return None
        size_bytes += byte
        coded = read_coded_size_value(size_bytes)
        if coded is not None:
            break

    element_id = EbmlId.from_bytes(id_bytes)
    if element_id == callbacks.global_id:
        result = callbacks.new_element()
    else:
        result = EbmlDummy(element_id)
    result.size_length = coded.length
    result.size = coded.value

    unknown = coded.value == coded.unknown
    if not result.validate_size() or (not unknown and max_data_size < result.size):
        return None
    if unknown:
        if not result.set_size_infinite(True):
            return None
    else:
        result.set_size_infinite(False)
    result.element_position = element_position
    result.size_position = size_position
    return result


def _id_length(buffer: bytearray) -> Optional[int]:
    for index in range(min(len(buffer), 4)):
        if buffer[0] & (0x80 >> index):
            return index + 1
    return None


def find_next_element(
    stream: IOCallback,
    context: EbmlSemanticContext,
    upper_level: int = 0,
    max_data_size: int = 0xFFFFFFFF,
    allow_dummy: bool = False,
    max_lower_level: int = 1,
) -> tuple[Optional[EbmlElement], int]:
    """Find the next element valid in ``context``, skipping bytes that do not parse.

    Returns ``(element, upper_level)``; the level is -1 for a global element,
    0 for a child, 1 for the same level and more for further parents. On
    success the stream is left at the start of the element's data.
    """
    original_level = upper_level
    parse_start = stream.get_file_pointer()
    buffer = bytearray()
    read_size = 0
    id_start = 0

    while True:
        id_length = _id_length(buffer)
        while id_length is None:
            if len(buffer) >= 4:
                del buffer[0]
                id_start += 1
            if max_data_size <= read_size:
                break
            byte = stream.read(1)
            if not byte:
                return None, original_level
            buffer += byte
            read_size += 1
            id_length = _id_length(buffer)
        if id_length is None:
            return None, original_level

        while True:
            coded = read_coded_size_value(buffer[id_length:])
            if coded is not None:
                break
            if len(buffer) - id_length >= 8 or max_data_size <= read_size:
                break
            byte = stream.read(1)
            if not byte:
                return None, original_level
            buffer += byte
            read_size += 1

        if coded is not None:
            element_id = EbmlId.from_bytes(buffer[:id_length])
            result, level = create_element_using_context(
                element_id, context, original_level, False, allow_dummy, max_lower_level
            )
            if result is not None and (allow_dummy or not result.is_dummy):
                result.size_length = coded.length
                result.size = coded.value
                unknown = coded.value == coded.unknown
                fits = (
                    unknown
                    or level > 0
                    or max_data_size == 0
                    or max_data_size >= id_start + id_length + coded.length + coded.value
                )
                if result.validate_size() and fits:
                    if not unknown or result.set_size_infinite(True):
                        result.element_position = parse_start + id_start
                        result.size_position = result.element_position + id_length
                        stream.set_file_pointer(result.size_position + coded.length)
                        return result, level

        del buffer[0]
        id_start += 1
        if max_data_size < read_size:
            return None, original_level


def create_element_using_context(
    element_id: EbmlId,
    context: EbmlSemanticContext,
    low_level: int,
    is_global: bool,
    allow_dummy: bool = False,
    max_lower_level: int = 1,
) -> tuple[Optional[EbmlElement], int]:
    """Create the element for ``element_id`` from ``context`` or the levels around it.

    Returns ``(element, low_level)``, the level adjusted to where the
    identifier was found; the element is None when nothing matched.
    """
    for sem in context.items:
        if element_id == sem.callbacks.global_id:
            return sem.create(), low_level

    global_context = context.global_context()
    if global_context == context:
        return None, low_level
    result, level = create_element_using_context(
        element_id, global_context, low_level - 1, True, allow_dummy, max_lower_level - 1
    )
    if result is not None:
        return result, level

    if context.master is not None and element_id == context.master.global_id:
        return context.master.new_element(), low_level + 1

    if context.parent is not None:
        return create_element_using_context(
            element_id, context.parent, low_level + 1, is_global, allow_dummy, max_lower_level + 1
        )

    if not is_global and allow_dummy:
        return EbmlDummy(element_id), 0
    return None, low_level


def skip_data(
    element: EbmlElement,
    stream: IOCallback,
    context: EbmlSemanticContext,
    test_read_elt: Optional[EbmlElement] = None,
    allow_dummy: bool = False,
) -> Optional[EbmlElement]:
    """Move the stream past ``element``'s data.

    For an element of unknown size, elements are read until one that belongs
    to an upper level is found; that element is returned, otherwise None.
    """
    if element.size_is_finite:
        if test_read_elt is not None:
            raise ValueError("an element of known size is skipped without reading ahead")
        stream.set_file_pointer(element.end_position(), SeekMode.BEGINNING)
        return None

    result: Optional[EbmlElement] = None
    end_found = False
    while not end_found and result is None:
        if test_read_elt is None:
            result, _ = find_next_element(stream, context, 0, 0xFFFFFFFF, allow_dummy)
        else:
            result, test_read_elt = test_read_elt, None

        if result is None:
            end_found = True
            continue

        for sem in context.items:
            if result.element_id == sem.callbacks.global_id:
                result = skip_data(result, stream, sem.callbacks.context, None)
                break
        else:
            if context.parent is not None:
                result = skip_data(element, stream, context.parent, result)
            else:
                global_context = context.global_context()
                if context != global_context:
                    result = skip_data(element, stream, global_context, result)
                else:
                    end_found = True
    return result