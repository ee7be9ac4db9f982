"""The semantic contexts of the elements allowed at every level."""

from __future__ import annotations

import functools

from .semantic import EbmlSemantic, EbmlSemanticContext


def get_global_context() -> EbmlSemanticContext:
    """Return the context listing the elements allowed everywhere."""
    return _build_global_context()


@functools.lru_cache(maxsize=None)
def _build_global_context() -> EbmlSemanticContext:
    from .crc32 import EbmlCrc32

    return EbmlSemanticContext(
        items=(EbmlSemantic(False, False, EbmlCrc32.class_infos),),
        get_global=get_global_context,
    )


_EMPTY_GLOBAL = EbmlSemanticContext(get_global=get_global_context)


def empty_global_context() -> EbmlSemanticContext:
    """Return the empty context that global elements themselves live in."""
    return _EMPTY_GLOBAL