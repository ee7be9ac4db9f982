"""Semantic tables: which elements may appear at each level of a document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .element import EbmlCallbacks, EbmlElement


@dataclass(frozen=True)
class EbmlSemantic:
    """One entry of a semantic table: an element class and its constraints."""

    mandatory: bool
    unique: bool
    callbacks: EbmlCallbacks

    def create(self) -> EbmlElement:
        """Create a fresh element of the described class."""
        return self.callbacks.new_element()


@dataclass(eq=False)
class EbmlSemanticContext:
    """The elements allowed at one level, with links to the enclosing levels.

    ``parent`` is the context of the enclosing level, ``get_global`` returns
    the context of elements allowed everywhere and ``master`` describes the
    element that owns this level.
    """

    items: tuple[EbmlSemantic, ...] = ()
    parent: Optional["EbmlSemanticContext"] = None
    get_global: Optional[Callable[[], "EbmlSemanticContext"]] = None
    master: Optional[EbmlCallbacks] = None

    def __post_init__(self) -> None:
        self.items = tuple(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[EbmlSemantic]:
        return iter(self.items)

    def semantic(self, index: int) -> EbmlSemantic:
        """Return the entry at ``index``; raise IndexError outside the table."""
        if not 0 <= index < len(self.items):
            raise IndexError(
                f"semantic index {index} outside of table size {len(self.items)}"
            )
        return self.items[index]

    def global_context(self) -> "EbmlSemanticContext":
        """Return the context of the elements allowed at every level."""
        if self.get_global is None:
            raise ValueError("semantic context has no global context")
        return self.get_global()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EbmlSemanticContext):
            return NotImplemented
        return (
            len(self.items) == len(other.items)
            and all(mine is theirs for mine, theirs in zip(self.items, other.items))
            and self.parent is other.parent
            and self.get_global == other.get_global
            and self.master is other.master
        )

    def __hash__(self) -> int:
        return hash((len(self.items), id(self.parent), id(self.master)))