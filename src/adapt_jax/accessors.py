"""Element type, rank and parent template derived from descriptors alone."""

from __future__ import annotations

from functools import lru_cache

from .descriptors import DESCRIPTOR_CACHE_MAX, StorageType, TypeDesc, lru_cache_stats, template_of
from .kinds import kind_info
from .matcher import source_of


def ndims(desc: TypeDesc) -> int:
    if isinstance(desc, StorageType):
        return desc.ndim
    fixed = kind_info(desc.kind).fixed_ndim
    return fixed if fixed is not None else desc.ndim


def eltype(desc: TypeDesc) -> str:
    # every descriptor declares its element type
    return desc.dtype


@lru_cache(maxsize=DESCRIPTOR_CACHE_MAX)
def parent_type(desc: TypeDesc) -> str | None:
    """Template of the storage a wrapper type sits on.

    Mirroring kinds report their direct parent. Kinds that declare their own
    shape report the innermost storage of a recognized composition, falling
    back to the direct parent.
    """
    if isinstance(desc, StorageType):
        return None
    if kind_info(desc.kind).style == "dst":
        return template_of(desc.parent)
    source = source_of(desc)
    return template_of(source if source is not None else desc.parent)


def accessor_cache_stats(*, reset: bool = False) -> dict[str, float | int]:
    return lru_cache_stats(parent_type, reset=reset)
