"""Metadata helpers for leaf storage and wrapper values."""

from __future__ import annotations

import numbers

import numpy as np


def dtype_name(value: object) -> str:
    """Canonical numpy dtype name of `value`, read without moving its data."""
    dtype = getattr(value, "dtype", None)
    if dtype is not None:
        return np.dtype(dtype).name
    return np.result_type(value).name


def shape_of(value: object) -> tuple[int, ...]:
    shape = getattr(value, "shape", None)
    if shape is not None:
        return tuple(int(d) for d in shape)
    return tuple(int(d) for d in np.shape(value))


def ndim_of(value: object) -> int:
    ndim = getattr(value, "ndim", None)
    if ndim is not None:
        return int(ndim)
    return len(shape_of(value))


def itemsize_of(value: object) -> int:
    return np.dtype(dtype_name(value)).itemsize


def is_scalar_index(index: object) -> bool:
    return isinstance(index, numbers.Integral) and not isinstance(index, bool)
