"""Concrete wrapper values, one frozen dataclass per catalog kind.

Field names match the slot names in `kinds.CATALOG`, which is how the rewrite
engine reads slots and rebuilds instances. Wrappers never copy the data they
wrap; `dtype`, `ndim` and `shape` are derived from slot metadata, except
`LogicalIndex.shape`, which counts the set entries of its mask. Equality
compares slots structurally, reading array contents.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import ClassVar

import jax
import jax.numpy as jnp
import numpy as np

from .errors import WrapperShapeError, WrapperTypeError
from .kinds import WrapperKind, kind_info
from .values import dtype_name, is_scalar_index, itemsize_of, ndim_of, shape_of

logger = logging.getLogger(__name__)

_WRAPPER_KINDS: dict[type, WrapperKind] = {}


def register_wrapper(cls: type, kind: WrapperKind) -> type:
    """Attach `cls` to a catalog kind so `adapt` can decompose and rebuild it.

    `cls` must be a dataclass whose fields include every slot named by the
    kind's recipe.
    """
    kind = WrapperKind(kind)
    if not dataclasses.is_dataclass(cls):
        raise WrapperTypeError(f"{cls.__name__} must be a dataclass to join kind {kind.value!r}")
    info = kind_info(kind)
    fields = {f.name for f in dataclasses.fields(cls)}
    missing = [slot for slot in info.forwarded + info.converted if slot not in fields]
    if missing:
        raise WrapperTypeError(f"{cls.__name__} lacks slot fields {missing} required by kind {kind.value!r}")
    _WRAPPER_KINDS[cls] = kind
    logger.debug("registered wrapper %s as %s", cls.__qualname__, kind.value)
    return cls


def wrapper_kind(value: object) -> WrapperKind | None:
    for klass in type(value).__mro__:
        kind = _WRAPPER_KINDS.get(klass)
        if kind is not None:
            return kind
    return None


def _wrapper(kind: WrapperKind):
    def decorate(cls: type) -> type:
        cls.kind = kind
        return register_wrapper(cls, kind)

    return decorate


def _is_array(value: object) -> bool:
    return isinstance(value, (np.ndarray, jax.Array))


def _slot_equal(left: object, right: object) -> bool:
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    if isinstance(left, tuple):
        return len(left) == len(right) and all(_slot_equal(a, b) for a, b in zip(left, right))
    if _is_array(left):
        return (
            dtype_name(left) == dtype_name(right)
            and shape_of(left) == shape_of(right)
            and bool(np.array_equal(np.asarray(left), np.asarray(right)))
        )
    return bool(left == right)


class _Structural:
    """Equality over slots: same class, arrays compared by dtype, shape and contents.

    Instances are unhashable since their slots usually are.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return all(
            _slot_equal(getattr(self, f.name), getattr(other, f.name)) for f in dataclasses.fields(self)
        )

    __hash__ = None


def _index_shape(index: object, dim: int) -> tuple[int, ...]:
    if isinstance(index, slice):
        return (len(range(*index.indices(dim))),)
    if is_scalar_index(index):
        return ()
    return shape_of(index)


@_wrapper(WrapperKind.SUB_VIEW)
@dataclass(frozen=True, eq=False)
class SubView(_Structural):
    """Range/index view; each index contributes its own rank to the result."""

    kind: ClassVar[WrapperKind]
    parent: object
    indices: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "indices", tuple(self.indices))
        if len(self.indices) > ndim_of(self.parent):
            raise WrapperShapeError(
                f"SubView has {len(self.indices)} indices for a rank-{ndim_of(self.parent)} parent"
            )

    @property
    def dtype(self) -> str:
        return dtype_name(self.parent)

    @property
    def shape(self) -> tuple[int, ...]:
        parent_shape = shape_of(self.parent)
        out: list[int] = []
        for index, dim in zip(self.indices, parent_shape):
            out.extend(_index_shape(index, dim))
        out.extend(parent_shape[len(self.indices) :])
        return tuple(out)

    @property
    def ndim(self) -> int:
        return len(self.shape)


@_wrapper(WrapperKind.LOGICAL_INDEX)
@dataclass(frozen=True, eq=False)
class LogicalIndex(_Structural):
    """Vector of the linear positions selected by a boolean mask."""

    kind: ClassVar[WrapperKind]
    mask: object

    def __post_init__(self) -> None:
        if dtype_name(self.mask) != "bool":
            raise WrapperShapeError(f"LogicalIndex mask must be boolean, got {dtype_name(self.mask)}")

    @property
    def dtype(self) -> str:
        return np.dtype(np.intp).name

    @property
    def shape(self) -> tuple[int, ...]:
        # reads the mask; on a device it is counted there and only the count moves
        if isinstance(self.mask, jax.Array):
            return (int(jnp.count_nonzero(self.mask)),)
        return (int(np.count_nonzero(np.asarray(self.mask))),)

    @property
    def ndim(self) -> int:
        return 1


@_wrapper(WrapperKind.PERMUTED)
@dataclass(frozen=True, eq=False)
class PermutedView(_Structural):
    kind: ClassVar[WrapperKind]
    parent: object
    perm: tuple[int, ...]

    def __post_init__(self) -> None:
        perm = tuple(int(axis) for axis in self.perm)
        object.__setattr__(self, "perm", perm)
        if sorted(perm) != list(range(ndim_of(self.parent))):
            raise WrapperShapeError(
                f"{perm} is not a permutation of the axes of a rank-{ndim_of(self.parent)} parent"
            )

    @property
    def dtype(self) -> str:
        return dtype_name(self.parent)

    @property
    def shape(self) -> tuple[int, ...]:
        parent_shape = shape_of(self.parent)
        return tuple(parent_shape[axis] for axis in self.perm)

    @property
    def ndim(self) -> int:
        return len(self.perm)


@_wrapper(WrapperKind.RESHAPED)
@dataclass(frozen=True, eq=False)
class ReshapedView(_Structural):
    kind: ClassVar[WrapperKind]
    parent: object
    shape: tuple[int, ...]

    def __post_init__(self) -> None:
        shape = tuple(int(d) for d in self.shape)
        object.__setattr__(self, "shape", shape)
        size = math.prod(shape_of(self.parent))
        if math.prod(shape) != size:
            raise WrapperShapeError(f"cannot reshape {size} elements into shape {shape}")

    @property
    def dtype(self) -> str:
        return dtype_name(self.parent)

    @property
    def ndim(self) -> int:
        return len(self.shape)


@_wrapper(WrapperKind.REINTERPRET)
@dataclass(frozen=True, eq=False)
class ReinterpretView(_Structural):
    """Bit-level reinterpretation; the last axis is rescaled by the itemsize ratio."""

    kind: ClassVar[WrapperKind]
    parent: object
    dtype: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "dtype", np.dtype(self.dtype).name)
        source = itemsize_of(self.parent)
        target = np.dtype(self.dtype).itemsize
        if source == target:
            return
        parent_shape = shape_of(self.parent)
        if not parent_shape or (parent_shape[-1] * source) % target:
            raise WrapperShapeError(
                f"cannot reinterpret {dtype_name(self.parent)} with shape {parent_shape} as {self.dtype}"
            )

    @property
    def shape(self) -> tuple[int, ...]:
        parent_shape = shape_of(self.parent)
        if not parent_shape:
            return ()
        nbytes = parent_shape[-1] * itemsize_of(self.parent)
        return parent_shape[:-1] + (nbytes // np.dtype(self.dtype).itemsize,)

    @property
    def ndim(self) -> int:
        return ndim_of(self.parent)


@dataclass(frozen=True, eq=False)
class _MatrixView(_Structural):
    parent: object

    # accepted parent ranks
    parent_ranks: ClassVar[tuple[int, ...]] = (2,)
    square: ClassVar[bool] = False

    def __post_init__(self) -> None:
        parent_shape = shape_of(self.parent)
        if len(parent_shape) not in self.parent_ranks:
            raise WrapperShapeError(
                f"{type(self).__name__} needs a parent of rank {self.parent_ranks}, got {len(parent_shape)}"
            )
        if self.square and parent_shape[0] != parent_shape[1]:
            raise WrapperShapeError(f"{type(self).__name__} needs a square parent, got {parent_shape}")

    @property
    def dtype(self) -> str:
        return dtype_name(self.parent)

    @property
    def ndim(self) -> int:
        return 2


class _Flipped(_MatrixView):
    parent_ranks = (1, 2)

    @property
    def shape(self) -> tuple[int, ...]:
        parent_shape = shape_of(self.parent)
        if len(parent_shape) == 1:
            return (1, parent_shape[0])
        return (parent_shape[1], parent_shape[0])


class _Triangular(_MatrixView):
    square = True

    @property
    def shape(self) -> tuple[int, ...]:
        return shape_of(self.parent)


@_wrapper(WrapperKind.ADJOINT)
@dataclass(frozen=True, eq=False)
class Adjoint(_Flipped):
    kind: ClassVar[WrapperKind]


@_wrapper(WrapperKind.TRANSPOSE)
@dataclass(frozen=True, eq=False)
class Transpose(_Flipped):
    kind: ClassVar[WrapperKind]


@_wrapper(WrapperKind.LOWER_TRIANGULAR)
@dataclass(frozen=True, eq=False)
class LowerTriangular(_Triangular):
    kind: ClassVar[WrapperKind]


@_wrapper(WrapperKind.UNIT_LOWER_TRIANGULAR)
@dataclass(frozen=True, eq=False)
class UnitLowerTriangular(_Triangular):
    kind: ClassVar[WrapperKind]


@_wrapper(WrapperKind.UPPER_TRIANGULAR)
@dataclass(frozen=True, eq=False)
class UpperTriangular(_Triangular):
    kind: ClassVar[WrapperKind]


@_wrapper(WrapperKind.UNIT_UPPER_TRIANGULAR)
@dataclass(frozen=True, eq=False)
class UnitUpperTriangular(_Triangular):
    kind: ClassVar[WrapperKind]


@_wrapper(WrapperKind.DIAGONAL)
@dataclass(frozen=True, eq=False)
class Diagonal(_MatrixView):
    """Square matrix whose diagonal is the 1-D `parent`."""

    kind: ClassVar[WrapperKind]
    parent_ranks = (1,)

    @property
    def shape(self) -> tuple[int, ...]:
        n = shape_of(self.parent)[0]
        return (n, n)


@_wrapper(WrapperKind.TRIDIAGONAL)
@dataclass(frozen=True, eq=False)
class Tridiagonal(_Structural):
    """Square matrix stored as sub-, main and super-diagonal bands."""

    kind: ClassVar[WrapperKind]
    dl: object
    d: object
    du: object

    def __post_init__(self) -> None:
        shapes = (shape_of(self.dl), shape_of(self.d), shape_of(self.du))
        if any(len(s) != 1 for s in shapes):
            raise WrapperShapeError(f"Tridiagonal bands must be 1-D, got shapes {shapes}")
        n = shapes[1][0]
        if shapes[0][0] != max(n - 1, 0) or shapes[2][0] != max(n - 1, 0):
            raise WrapperShapeError(f"Tridiagonal off-diagonal bands must have length {n - 1}, got {shapes}")

    @property
    def dtype(self) -> str:
        return dtype_name(self.d)

    @property
    def shape(self) -> tuple[int, ...]:
        n = shape_of(self.d)[0]
        return (n, n)

    @property
    def ndim(self) -> int:
        return 2


def parent(value: object) -> object:
    """Primary storage slot of a wrapper: the mask of a LogicalIndex, the main band of a Tridiagonal."""
    kind = wrapper_kind(value)
    if kind is None:
        raise WrapperTypeError(f"{type(value).__name__} is not a registered wrapper")
    if kind is WrapperKind.LOGICAL_INDEX:
        return value.mask
    if kind is WrapperKind.TRIDIAGONAL:
        return value.d
    return value.parent


def permutation(value: object) -> tuple[int, ...]:
    if wrapper_kind(value) is not WrapperKind.PERMUTED:
        raise WrapperTypeError(f"{type(value).__name__} is not a permuted view")
    return value.perm
