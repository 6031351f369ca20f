"""adapt-jax public API."""

import logging

from .accessors import accessor_cache_stats, eltype, ndims, parent_type
from .adapt import Policy, adapt, adapt_structure
from .descriptors import (
    StorageType,
    TypeDesc,
    WrapperType,
    register_storage_family,
    storage_family,
    storage_type,
    template_of,
    type_of,
    wrap_type,
)
from .errors import AdaptError, WrapperShapeError, WrapperTypeError
from .kinds import CATALOG, KindInfo, WrapperKind, kind_info
from .matcher import COMPOSITION_RULES, WrappedArray, WrappedMatch, match_cache_stats, source_of
from .policies import DevicePut, to_host
from .wrappers import (
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
    parent,
    permutation,
    register_wrapper,
    wrapper_kind,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "adapt",
    "adapt_structure",
    "Policy",
    "DevicePut",
    "to_host",
    "WrapperKind",
    "KindInfo",
    "CATALOG",
    "kind_info",
    "SubView",
    "LogicalIndex",
    "PermutedView",
    "ReshapedView",
    "ReinterpretView",
    "Adjoint",
    "Transpose",
    "LowerTriangular",
    "UnitLowerTriangular",
    "UpperTriangular",
    "UnitUpperTriangular",
    "Diagonal",
    "Tridiagonal",
    "parent",
    "permutation",
    "register_wrapper",
    "wrapper_kind",
    "StorageType",
    "WrapperType",
    "TypeDesc",
    "type_of",
    "wrap_type",
    "storage_type",
    "storage_family",
    "register_storage_family",
    "template_of",
    "WrappedArray",
    "WrappedMatch",
    "COMPOSITION_RULES",
    "source_of",
    "match_cache_stats",
    "ndims",
    "eltype",
    "parent_type",
    "accessor_cache_stats",
    "AdaptError",
    "WrapperShapeError",
    "WrapperTypeError",
]
