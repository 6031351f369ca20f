"""Structured error types for wrapper construction and rewriting."""

from __future__ import annotations


class AdaptError(Exception):
    """Base class for structured adapt-jax errors."""


class WrapperShapeError(AdaptError, ValueError):
    """Wrapper slots are inconsistent with the parent's shape, rank, or dtype."""


class WrapperTypeError(AdaptError, TypeError):
    """A value was handed to a wrapper-only operation but is not a wrapper."""
