"""Shared wrapper samples and a marker leaf policy for rewrite tests."""

from __future__ import annotations

import numpy as np


class MarkedArray:
    """Stand-in for converted storage: same metadata, different leaf type."""

    def __init__(self, data) -> None:
        self.data = data

    @property
    def dtype(self):
        return self.data.dtype

    @property
    def shape(self) -> tuple[int, ...]:
        return self.data.shape

    @property
    def ndim(self) -> int:
        return self.data.ndim

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MarkedArray) and self.data is other.data

    __hash__ = None

    def __repr__(self) -> str:
        return f"MarkedArray({self.data!r})"


def mark(leaf):
    if isinstance(leaf, np.ndarray):
        return MarkedArray(leaf)
    return leaf


def sample_wrappers() -> dict[str, object]:
    """One instance per catalog kind, each backed by numpy storage."""
    from adapt_jax import (
        Adjoint,
        Diagonal,
        LogicalIndex,
        LowerTriangular,
        PermutedView,
        ReinterpretView,
        ReshapedView,
        SubView,
        Transpose,
        Tridiagonal,
        UnitLowerTriangular,
        UnitUpperTriangular,
        UpperTriangular,
    )

    matrix = np.arange(6.0).reshape(2, 3)
    square = np.eye(3)
    return {
        "sub_view": SubView(np.arange(12.0).reshape(3, 4), (np.array([0, 2]), slice(1, 3))),
        "logical_index": LogicalIndex(np.array([True, False, True])),
        "permuted": PermutedView(matrix, (1, 0)),
        "reshaped": ReshapedView(matrix, (3, 2)),
        "reinterpret": ReinterpretView(np.zeros((2, 4)), "float32"),
        "adjoint": Adjoint(matrix),
        "transpose": Transpose(matrix),
        "lower_triangular": LowerTriangular(square),
        "unit_lower_triangular": UnitLowerTriangular(square),
        "upper_triangular": UpperTriangular(square),
        "unit_upper_triangular": UnitUpperTriangular(square),
        "diagonal": Diagonal(np.ones(3)),
        "tridiagonal": Tridiagonal(np.ones(2), np.full(3, 2.0), np.ones(2)),
    }
