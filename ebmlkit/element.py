"""The generic EBML element: identifier, coded size and payload handling."""

from __future__ import annotations

import abc
import copy
from dataclasses import dataclass
from typing import Any, Callable, ClassVar

from .coding import EbmlId, coded_size_length, coded_value_length
from .io import IOCallback, ScopeMode


@dataclass(frozen=True)
class EbmlCallbacks:
    """Static description of an element class: factory, identifier, name and context."""

    create: Callable[[], "EbmlElement"]
    global_id: EbmlId
    debug_name: str
    context: Any = None

    def new_element(self) -> "EbmlElement":
        """Create a fresh element of the described class."""
        return self.create()


class EbmlElement(abc.ABC):
    """Basic information about an EBML element: its identifier and data size."""

    class_infos: ClassVar[EbmlCallbacks]

    def __init__(self, default_size: int = 0, value_set: bool = False) -> None:
        self.default_size = default_size
        self.size = default_size
        self.size_length = 0
        self.size_is_finite = True
        self.element_position = 0
        self.size_position = 0
        self.value_is_set = value_set
        self.default_is_set = False
        self.locked = False

    # identity -----------------------------------------------------------

    @property
    def element_id(self) -> EbmlId:
        """The identifier of this element."""
        return type(self).class_infos.global_id

    @property
    def debug_name(self) -> str:
        """A readable name for the element class."""
        return type(self).class_infos.debug_name

    @property
    def context(self) -> Any:
        """The semantic context of the element class."""
        return type(self).class_infos.context

    @property
    def is_dummy(self) -> bool:
        """Whether this element stands for an unknown identifier."""
        return False

    @property
    def is_master(self) -> bool:
        """Whether this element holds child elements."""
        return False

    def create_element(self) -> "EbmlElement":
        """Create a fresh element of the same class."""
        return type(self).class_infos.new_element()

    # behaviour supplied by concrete element types ------------------------

    @abc.abstractmethod
    def validate_size(self) -> bool:
        """Whether the current size is acceptable for this element type."""

    def set_size_infinite(self, infinite: bool = True) -> bool:
        """Mark the size as unknown; only finite sizes are allowed by default."""
        return not infinite

    @abc.abstractmethod
    def update_size(self, with_default: bool = False, force_render: bool = False) -> int:
        """Recompute the size of the stored data and return it."""

    @abc.abstractmethod
    def read_data(self, stream: IOCallback, scope: ScopeMode = ScopeMode.ALL_DATA) -> int:
        """Read the payload from ``stream``; return the number of bytes consumed."""

    @abc.abstractmethod
    def render_data(self, stream: IOCallback, force_render: bool, with_default: bool = False) -> int:
        """Write the payload to ``stream``; return the number of bytes written."""

    @abc.abstractmethod
    def is_default_value(self) -> bool:
        """Whether the element holds its default value."""

    def clone(self) -> "EbmlElement":
        """Return a copy of the element and its data."""
        return copy.copy(self)

    # rendering ------------------------------------------------------------

    def render(
        self,
        stream: IOCallback,
        with_default: bool = False,
        keep_position: bool = False,
        force_render: bool = False,
    ) -> int:
        """Write the head and payload; return the number of bytes written."""
        if not (self.value_is_set or (with_default and self.default_is_set)):
            raise ValueError(f"element {self.debug_name} rendered without a value set")
        if not with_default and self.is_default_value():
            return 0
        result = self.render_head(stream, force_render, with_default, keep_position)
        return result + self.render_data(stream, force_render, with_default)

    def render_head(
        self,
        stream: IOCallback,
        force_render: bool,
        with_default: bool = False,
        keep_position: bool = False,
    ) -> int:
        """Write the identifier and coded size; return the number of bytes written."""
        if not 0 < self.element_id.length <= 4:
            return 0
        self.update_size(with_default, force_render)
        return self._make_render_head(stream, keep_position)

    def _make_render_head(self, stream: IOCallback, keep_position: bool) -> int:
        element_id = self.element_id
        coded = coded_size_length(self.size, self.size_length, self.size_is_finite)
        head = element_id.to_bytes() + coded_value_length(self.size, coded)
        stream.write_fully(head)
        if not keep_position:
            self.element_position = stream.get_file_pointer() - len(head)
            self.size_position = self.element_position + element_id.length
        return len(head)

    # sizes ------------------------------------------------------------------

    def _coded_size(self) -> int:
        return coded_size_length(self.size, self.size_length, self.size_is_finite)

    def element_size(self, with_default: bool = False) -> int:
        """Size of head plus data as it would be written."""
        if not with_default and self.is_default_value():
            return 0
        return self.size + self.element_id.length + self._coded_size()

    def head_size(self) -> int:
        """Size of the identifier plus the coded size."""
        return self.element_id.length + self._coded_size()

    def end_position(self) -> int:
        """Stream position just after the element's data."""
        if not self.size_is_finite:
            raise ValueError("the end of an element of unknown size is not known")
        return self.size_position + self._coded_size() + self.size

    def force_size(self, new_size: int) -> bool:
        """Give an element of unknown size a size that fits in the same coded length."""
        if self.size_is_finite:
            return False
        old_length = self._coded_size()
        old_size = self.size
        self.size = new_size
        if self._coded_size() == old_length:
            self.size_is_finite = True
            return True
        self.size = old_size
        return False

    # rewriting in place -------------------------------------------------------

    def overwrite_head(self, stream: IOCallback, keep_position: bool = False) -> int:
        """Rewrite the head at its original position, keeping the stream position."""
        if self.element_position == 0:
            return 0
        current = stream.get_file_pointer()
        stream.set_file_pointer(self.element_position)
        result = self._make_render_head(stream, keep_position)
        stream.set_file_pointer(current)
        return result

    def overwrite_data(self, stream: IOCallback, keep_position: bool = False) -> int:
        """Rewrite the payload at its original position, keeping the stream position."""
        if self.element_position == 0:
            return 0
        head = self.element_id.length + self._coded_size()
        expected = self.size
        current = stream.get_file_pointer()
        stream.set_file_pointer(self.element_position + head)
        result = self.render_data(stream, True, keep_position)
        stream.set_file_pointer(current)
        if result != expected:
            raise ValueError(f"rewritten data is {result} bytes, expected {expected}")
        return result

    # ordering and reading -------------------------------------------------------

    def is_smaller_than(self, other: "EbmlElement") -> bool:
        """Default ordering for elements that cannot be compared."""
        return self.element_id == other.element_id

    @staticmethod
    def compare_elements(a: "EbmlElement", b: "EbmlElement") -> bool:
        """Whether ``a`` sorts before ``b``; elements of different types never do."""
        if a.element_id == b.element_id:
            return a.is_smaller_than(b)
        return False

    def read(
        self,
        stream: IOCallback,
        context: Any,
        upper_level: int,
        found: "EbmlElement | None",
        allow_dummy: bool = False,
        scope: ScopeMode = ScopeMode.ALL_DATA,
    ) -> "tuple[int, EbmlElement | None]":
        """Read the element's data; return the updated ``(upper_level, found)``."""
        self.read_data(stream, scope)
        return upper_level, found