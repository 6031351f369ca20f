"""Static type descriptors for storage and wrapper values.

A descriptor records what a wrapper's type declares (kind, element type, rank,
parent type) and nothing about its data, so matching and accessor derivation
can run without a value in hand. Descriptors are hashable and compare
structurally.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final, Union

import jax
import numpy as np

from .kinds import WrapperKind, kind_info
from .values import dtype_name, ndim_of
from .wrappers import parent, wrapper_kind

DESCRIPTOR_CACHE_MAX: Final[int] = max(1, int(os.environ.get("ADAPT_JAX_MATCH_CACHE_MAX", "1024")))

_STORAGE_FAMILIES: list[tuple[type, str]] = [(np.ndarray, "numpy"), (jax.Array, "jax")]


@dataclass(frozen=True)
class StorageType:
    """Leaf storage: a backend family plus declared element type and rank."""

    family: str
    dtype: str
    ndim: int


@dataclass(frozen=True)
class WrapperType:
    kind: WrapperKind
    dtype: str
    ndim: int
    parent: "TypeDesc"
    params: tuple = ()


TypeDesc = Union[StorageType, WrapperType]


def register_storage_family(cls: type, name: str) -> None:
    """Report instances of `cls` as storage family `name`; later registrations win."""
    _STORAGE_FAMILIES.insert(0, (cls, name))


def storage_family(value: object) -> str:
    for cls, name in _STORAGE_FAMILIES:
        if isinstance(value, cls):
            return name
    return type(value).__name__


def storage_type(family: str, dtype, ndim: int) -> StorageType:
    return StorageType(family=family, dtype=np.dtype(dtype).name, ndim=int(ndim))


def wrap_type(
    kind: WrapperKind,
    parent_desc: TypeDesc,
    *,
    dtype=None,
    ndim: int | None = None,
    params: tuple = (),
) -> WrapperType:
    """Descriptor of `kind` wrapped around `parent_desc`.

    `dtype` defaults to the parent's and `ndim` to the kind's fixed rank, then
    to the parent's rank.
    """
    kind = WrapperKind(kind)
    if ndim is None:
        fixed = kind_info(kind).fixed_ndim
        ndim = fixed if fixed is not None else parent_desc.ndim
    return WrapperType(
        kind=kind,
        dtype=parent_desc.dtype if dtype is None else np.dtype(dtype).name,
        ndim=int(ndim),
        parent=parent_desc,
        params=tuple(params),
    )


def type_of(value: object) -> TypeDesc:
    kind = wrapper_kind(value)
    if kind is None:
        return StorageType(family=storage_family(value), dtype=dtype_name(value), ndim=ndim_of(value))
    params = (value.perm,) if kind is WrapperKind.PERMUTED else ()
    return WrapperType(
        kind=kind,
        dtype=dtype_name(value),
        ndim=ndim_of(value),
        parent=type_of(parent(value)),
        params=params,
    )


def template_of(desc: TypeDesc) -> str:
    """Parameter-free template of a descriptor: family for storage, kind for wrappers."""
    if isinstance(desc, StorageType):
        return desc.family
    return desc.kind


def lru_cache_stats(cached, *, reset: bool = False) -> dict[str, float | int]:
    info = cached.cache_info()
    total = info.hits + info.misses
    stats: dict[str, float | int] = {
        "hits": info.hits,
        "misses": info.misses,
        "hit_rate": (info.hits / total) if total else 0.0,
        "size": info.currsize,
        "max_size": info.maxsize,
    }
    if reset:
        cached.cache_clear()
    return stats
