"""Leaf conversion policies for moving storage between numpy and jax devices."""

from __future__ import annotations

from dataclasses import dataclass

import jax
import numpy as np


@dataclass(frozen=True)
class DevicePut:
    """Place array leaves on `device` (jax's default device when None).

    Leaves that are not arrays, such as slices and integer indices, pass
    through unchanged.
    """

    device: object | None = None

    def __call__(self, leaf: object) -> object:
        if isinstance(leaf, (np.ndarray, jax.Array)):
            return jax.device_put(leaf, self.device)
        return leaf


def to_host(leaf: object) -> object:
    if isinstance(leaf, jax.Array):
        return np.asarray(jax.device_get(leaf))
    return leaf
