"""Closed catalog of wrapper kinds and their reconstruction recipes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final, Literal


Style = Literal["src", "dst"]


class WrapperKind(str, Enum):
    SUB_VIEW = "sub_view"
    LOGICAL_INDEX = "logical_index"
    PERMUTED = "permuted"
    RESHAPED = "reshaped"
    REINTERPRET = "reinterpret"
    ADJOINT = "adjoint"
    TRANSPOSE = "transpose"
    LOWER_TRIANGULAR = "lower_triangular"
    UNIT_LOWER_TRIANGULAR = "unit_lower_triangular"
    UPPER_TRIANGULAR = "upper_triangular"
    UNIT_UPPER_TRIANGULAR = "unit_upper_triangular"
    DIAGONAL = "diagonal"
    TRIDIAGONAL = "tridiagonal"


@dataclass(frozen=True)
class KindInfo:
    """Static facts about one wrapper kind.

    - `style`: `"dst"` wrappers mirror their parent's element type and rank,
      `"src"` wrappers may change them and declare their own.
    - `fixed_ndim`: rank every instance has regardless of its parameters, if any.
    - `forwarded` slots are copied into the rebuilt wrapper untouched.
    - `converted` slots are rewritten recursively; those also listed in
      `sequence_slots` hold tuples that are rewritten item by item.
    - `composable`: may appear inside another composable wrapper in a match.
    """

    kind: WrapperKind
    style: Style
    fixed_ndim: int | None
    forwarded: tuple[str, ...]
    converted: tuple[str, ...]
    sequence_slots: tuple[str, ...] = ()
    composable: bool = False


def _matrix(kind: WrapperKind) -> KindInfo:
    return KindInfo(kind=kind, style="dst", fixed_ndim=2, forwarded=(), converted=("parent",))


_ENTRIES = (
    KindInfo(
        kind=WrapperKind.SUB_VIEW,
        style="src",
        fixed_ndim=None,
        forwarded=(),
        converted=("parent", "indices"),
        sequence_slots=("indices",),
        composable=True,
    ),
    KindInfo(kind=WrapperKind.LOGICAL_INDEX, style="src", fixed_ndim=1, forwarded=(), converted=("mask",)),
    KindInfo(kind=WrapperKind.PERMUTED, style="src", fixed_ndim=None, forwarded=("perm",), converted=("parent",)),
    KindInfo(
        kind=WrapperKind.RESHAPED,
        style="src",
        fixed_ndim=None,
        forwarded=("shape",),
        converted=("parent",),
        composable=True,
    ),
    KindInfo(
        kind=WrapperKind.REINTERPRET,
        style="src",
        fixed_ndim=None,
        forwarded=("dtype",),
        converted=("parent",),
        composable=True,
    ),
    _matrix(WrapperKind.ADJOINT),
    _matrix(WrapperKind.TRANSPOSE),
    _matrix(WrapperKind.LOWER_TRIANGULAR),
    _matrix(WrapperKind.UNIT_LOWER_TRIANGULAR),
    _matrix(WrapperKind.UPPER_TRIANGULAR),
    _matrix(WrapperKind.UNIT_UPPER_TRIANGULAR),
    _matrix(WrapperKind.DIAGONAL),
    # three bands, each converted on its own; nothing is shared between them
    KindInfo(kind=WrapperKind.TRIDIAGONAL, style="dst", fixed_ndim=2, forwarded=(), converted=("dl", "d", "du")),
)

CATALOG: Final[Mapping[WrapperKind, KindInfo]] = MappingProxyType({info.kind: info for info in _ENTRIES})

COMPOSABLE_KINDS: Final[frozenset[WrapperKind]] = frozenset(k for k, info in CATALOG.items() if info.composable)
SRC_KINDS: Final[frozenset[WrapperKind]] = frozenset(k for k, info in CATALOG.items() if info.style == "src")
DST_KINDS: Final[frozenset[WrapperKind]] = frozenset(k for k, info in CATALOG.items() if info.style == "dst")


def kind_info(kind: WrapperKind) -> KindInfo:
    return CATALOG[WrapperKind(kind)]
