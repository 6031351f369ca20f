from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for accessor tests")
class AccessorTests(unittest.TestCase):
    def test_type_of_records_declared_parameters_only(self) -> None:
        import numpy as np

        from adapt_jax import PermutedView, StorageType, Transpose, WrapperKind, WrapperType, type_of

        k = np.zeros((2, 3))
        self.assertEqual(
            type_of(Transpose(k)),
            WrapperType(
                kind=WrapperKind.TRANSPOSE,
                dtype="float64",
                ndim=2,
                parent=StorageType(family="numpy", dtype="float64", ndim=2),
            ),
        )
        self.assertEqual(type_of(PermutedView(k, (1, 0))).params, ((1, 0),))
        self.assertEqual(type_of(k), StorageType("numpy", "float64", 2))

    def test_storage_families(self) -> None:
        import jax.numpy as jnp
        import numpy as np

        from adapt_jax import register_storage_family, storage_family, type_of
        from adapt_jax.descriptors import _STORAGE_FAMILIES
        from wrapper_cases import MarkedArray

        self.assertEqual(storage_family(np.zeros(2)), "numpy")
        self.assertEqual(storage_family(jnp.zeros(2)), "jax")
        self.assertEqual(storage_family(MarkedArray(np.zeros(2))), "MarkedArray")

        class PinnedBuffer(np.ndarray):
            pass

        register_storage_family(PinnedBuffer, "pinned")
        self.addCleanup(_STORAGE_FAMILIES.remove, (PinnedBuffer, "pinned"))
        pinned = np.zeros(3).view(PinnedBuffer)
        self.assertEqual(type_of(pinned).family, "pinned")
        self.assertEqual(storage_family(np.zeros(2)), "numpy")

        self.doCleanups()
        self.assertEqual(storage_family(pinned), "numpy")

    def test_ndims_per_kind(self) -> None:
        from adapt_jax import WrapperKind, ndims, storage_type, wrap_type

        k = storage_type("jax", "float32", 3)
        band = storage_type("jax", "float32", 1)
        self.assertEqual(ndims(k), 3)
        self.assertEqual(ndims(wrap_type(WrapperKind.LOGICAL_INDEX, k, dtype="int64")), 1)
        self.assertEqual(ndims(wrap_type(WrapperKind.SUB_VIEW, k, ndim=1)), 1)
        self.assertEqual(ndims(wrap_type(WrapperKind.RESHAPED, k, ndim=5)), 5)
        self.assertEqual(ndims(wrap_type(WrapperKind.REINTERPRET, k, dtype="int32")), 3)
        self.assertEqual(ndims(wrap_type(WrapperKind.PERMUTED, k, params=((2, 1, 0),))), 3)
        for kind in (
            WrapperKind.ADJOINT,
            WrapperKind.TRANSPOSE,
            WrapperKind.LOWER_TRIANGULAR,
            WrapperKind.UNIT_LOWER_TRIANGULAR,
            WrapperKind.UPPER_TRIANGULAR,
            WrapperKind.UNIT_UPPER_TRIANGULAR,
            WrapperKind.DIAGONAL,
            WrapperKind.TRIDIAGONAL,
        ):
            with self.subTest(kind=kind.value):
                self.assertEqual(ndims(wrap_type(kind, band)), 2)

    def test_eltype_is_the_declared_element_type(self) -> None:
        from adapt_jax import WrapperKind, eltype, storage_type, wrap_type

        k = storage_type("jax", "float32", 2)
        self.assertEqual(eltype(k), "float32")
        self.assertEqual(eltype(wrap_type(WrapperKind.TRANSPOSE, k)), "float32")
        self.assertEqual(eltype(wrap_type(WrapperKind.REINTERPRET, k, dtype="uint8")), "uint8")

    def test_parent_type_of_mirroring_kinds_is_the_direct_parent(self) -> None:
        from adapt_jax import WrapperKind, parent_type, storage_type, wrap_type

        k = storage_type("jax", "float32", 2)
        self.assertIsNone(parent_type(k))
        self.assertEqual(parent_type(wrap_type(WrapperKind.TRANSPOSE, k)), "jax")
        sub = wrap_type(WrapperKind.SUB_VIEW, k, ndim=2)
        self.assertIs(parent_type(wrap_type(WrapperKind.ADJOINT, sub)), WrapperKind.SUB_VIEW)

    def test_parent_type_of_declaring_kinds_sees_through_compositions(self) -> None:
        from adapt_jax import WrapperKind, parent_type, storage_type, wrap_type

        k = storage_type("numpy", "float64", 2)
        reshaped = wrap_type(WrapperKind.RESHAPED, k, ndim=1)
        sub = wrap_type(WrapperKind.SUB_VIEW, k, ndim=1)

        self.assertEqual(parent_type(wrap_type(WrapperKind.SUB_VIEW, reshaped, ndim=1)), "numpy")
        self.assertEqual(parent_type(wrap_type(WrapperKind.REINTERPRET, sub, dtype="int64")), "numpy")
        self.assertEqual(parent_type(wrap_type(WrapperKind.LOGICAL_INDEX, k, dtype="int64")), "numpy")
        self.assertIs(parent_type(wrap_type(WrapperKind.SUB_VIEW, sub, ndim=0)), WrapperKind.SUB_VIEW)

    def test_parent_type_cache_reports_its_stats(self) -> None:
        from adapt_jax import WrapperKind, accessor_cache_stats, parent_type, storage_type, wrap_type
        from adapt_jax.descriptors import DESCRIPTOR_CACHE_MAX

        accessor_cache_stats(reset=True)
        k = storage_type("jax", "float32", 2)
        parent_type(wrap_type(WrapperKind.TRANSPOSE, k))
        parent_type(wrap_type(WrapperKind.TRANSPOSE, storage_type("jax", "float32", 2)))

        stats = accessor_cache_stats()
        self.assertEqual((stats["hits"], stats["misses"], stats["size"]), (1, 1, 1))
        self.assertEqual(stats["max_size"], DESCRIPTOR_CACHE_MAX)
        self.assertEqual(accessor_cache_stats(reset=True)["size"], 1)
        self.assertEqual(accessor_cache_stats()["size"], 0)

    def test_accessors_agree_with_live_wrappers(self) -> None:
        from adapt_jax import eltype, ndims, type_of
        from wrapper_cases import sample_wrappers

        for name, wrapper in sample_wrappers().items():
            with self.subTest(kind=name):
                desc = type_of(wrapper)
                self.assertEqual(ndims(desc), wrapper.ndim)
                self.assertEqual(eltype(desc), wrapper.dtype)


if __name__ == "__main__":
    unittest.main()
