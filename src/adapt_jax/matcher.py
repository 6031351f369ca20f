"""Static matching of wrapper descriptors against a storage family.

`WrappedArray(src, dst)` recognizes every catalog wrapper whose storage is of
family `src`/`dst`, plus a fixed set of one-level compositions of the
composable kinds. Only one level is supported: a sub-view of a reshaped view
of a reinterpret view over storage is not matched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Final

import numpy as np

from .descriptors import DESCRIPTOR_CACHE_MAX, StorageType, TypeDesc, WrapperType, lru_cache_stats, type_of
from .kinds import WrapperKind, kind_info


@dataclass(frozen=True)
class CompositionRule:
    """`head` may sit directly on storage or on one of `inner`, which sits on storage."""

    head: WrapperKind
    inner: frozenset[WrapperKind]


# checked in this order; each head appears once, so at most one rule applies
COMPOSITION_RULES: Final[tuple[CompositionRule, ...]] = (
    CompositionRule(WrapperKind.REINTERPRET, frozenset({WrapperKind.SUB_VIEW})),
    CompositionRule(WrapperKind.RESHAPED, frozenset({WrapperKind.SUB_VIEW, WrapperKind.REINTERPRET})),
    CompositionRule(WrapperKind.SUB_VIEW, frozenset({WrapperKind.RESHAPED, WrapperKind.REINTERPRET})),
)

_RULE_BY_HEAD: Final[Mapping[WrapperKind, CompositionRule]] = MappingProxyType(
    {rule.head: rule for rule in COMPOSITION_RULES}
)


def source_of(desc: TypeDesc) -> StorageType | None:
    """Innermost storage a wrapper descriptor reaches through a recognized shape.

    Non-composable kinds reach only their direct parent. Returns None for
    storage descriptors and for nestings no rule covers.
    """
    if not isinstance(desc, WrapperType):
        return None
    direct = desc.parent
    if isinstance(direct, StorageType):
        return direct
    rule = _RULE_BY_HEAD.get(desc.kind)
    if rule is None or direct.kind not in rule.inner:
        return None
    if isinstance(direct.parent, StorageType):
        return direct.parent
    return None


@dataclass(frozen=True)
class WrappedMatch:
    kind: WrapperKind
    dtype: str
    ndim: int
    source: StorageType


@dataclass(frozen=True)
class WrappedArray:
    """Pattern over every catalog wrapper backed by one storage family.

    - `src`: family required of the storage under wrappers that declare their
      own element type and rank (sub-views, reshapes, permutations, ...).
    - `dst`: family required of the storage under wrappers that mirror it
      (transpose, triangular, diagonal, ...); the storage must also carry the
      wrapper's element type. Defaults to `src`.
    - `dtype`/`ndim`: optional constraints on the derived element type and rank.
    """

    src: str
    dst: str | None = None
    dtype: str | None = None
    ndim: int | None = None

    def __post_init__(self) -> None:
        if self.dst is None:
            object.__setattr__(self, "dst", self.src)
        if self.dtype is not None:
            object.__setattr__(self, "dtype", np.dtype(self.dtype).name)

    def match(self, desc: TypeDesc) -> WrappedMatch | None:
        return _match_cached(self, desc)

    def matches(self, desc: TypeDesc) -> bool:
        return self.match(desc) is not None

    def matches_value(self, value: object) -> bool:
        return self.matches(type_of(value))


def _match(pattern: WrappedArray, desc: TypeDesc) -> WrappedMatch | None:
    source = source_of(desc)
    if source is None:
        return None
    info = kind_info(desc.kind)
    if info.style == "dst":
        if source.family != pattern.dst or source.dtype != desc.dtype:
            return None
        ndim = source.ndim
    else:
        if source.family != pattern.src:
            return None
        ndim = info.fixed_ndim if info.fixed_ndim is not None else desc.ndim
    if pattern.dtype is not None and pattern.dtype != desc.dtype:
        return None
    if pattern.ndim is not None and pattern.ndim != ndim:
        return None
    return WrappedMatch(kind=desc.kind, dtype=desc.dtype, ndim=ndim, source=source)


@lru_cache(maxsize=DESCRIPTOR_CACHE_MAX)
def _match_cached(pattern: WrappedArray, desc: TypeDesc) -> WrappedMatch | None:
    return _match(pattern, desc)


def match_cache_stats(*, reset: bool = False) -> dict[str, float | int]:
    return lru_cache_stats(_match_cached, reset=reset)
