"""
Taichi Field Pool Module

Pooling system for the 1D Taichi fields that back every PySegScan Vector and
every scratch buffer used by the primitives. Fields are organised by element
dtype, capacity and element width, and recycled instead of reallocated.

Recycling matters twice for a Taichi program: allocation of a new field after
the first kernel launch creates a new SNode tree (a limited resource), and
kernels taking fields as ti.template() are specialised per field, so reusing
a field also reuses the compiled kernel.

Supports scalar-element fields (width 1), vector-element fields (width > 1,
ti.Vector.field) and pair fields (struct elements whose dtype is given as a
(fst_dtype, snd_dtype) tuple), all 1D with ti.i indexing.

Author: PySegScan developers
"""

import logging
from typing import Any

import taichi as ti

from .. import constants as cte

logger = logging.getLogger(__name__)


class TPField:
    """
    Temporary Pooled Field wrapper for Taichi fields.

    Provides automatic memory management for temporary fields using the
    FieldsBuilder pattern. Tracks usage state and enables field reuse through
    pooling to minimize allocation overhead.

    Attributes:
        id: Unique field identifier
        field: Underlying Taichi field (scalar field or vector field)
        in_use: Current usage status
        dtype: Field data type
        capacity: Number of elements
        width: Number of components per element (1 for scalar fields)
        snodetree: Finalized field structure for memory management
    """

    _next_id = 0

    def __init__(self, dtype: Any, capacity: int, width: int = 1):
        """
        Initialize TPField with specified data type, capacity and width.

        Args:
            dtype: Taichi data type (ti.f32, ti.i32, etc.), or a (fst, snd) tuple of
                   Taichi data types for pair elements
            capacity: Number of elements (>= 1)
            width: Components per element; 1 gives ti.field, more gives ti.Vector.field
        """
        if capacity < 1:
            raise ValueError(f"Field capacity must be positive, got {capacity}")
        if width < 1:
            raise ValueError(f"Field width must be positive, got {width}")

        TPField._next_id += 1
        self.id = TPField._next_id
        self.in_use = False
        self.dtype = dtype
        self.capacity = capacity
        self.width = width

        # Create field using FieldsBuilder approach for proper memory management
        self.fb = ti.FieldsBuilder()
        if isinstance(dtype, tuple):
            # Pair elements: one struct member per component dtype
            self.field = cte.pair_type(*dtype).field()
        elif width == 1:
            self.field = ti.field(dtype)
        else:
            self.field = ti.Vector.field(width, dtype)
        self.fb.dense(ti.i, capacity).place(self.field)
        self.snodetree = self.fb.finalize()

    def acquire(self):
        """Mark field as in use and unavailable for other requests."""
        self.in_use = True

    def release(self):
        """
        Mark field as available for reuse in the pool.

        Does not destroy the field.
        """
        self.in_use = False

    def destroy(self):
        """
        Destroy field and free device memory.

        Should only be called when permanently removing fields from the pool.
        """
        if self.snodetree is not None:
            self.snodetree.destroy()
            self.snodetree = None

    def to_numpy(self):
        return self.field.to_numpy()

    def from_numpy(self, val):
        return self.field.from_numpy(val)

    def __enter__(self):
        """Context manager entry - return the field for use."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - automatically release field."""
        self.release()
        return False

    def __str__(self):
        return (f"Taichi field from the temp pool id:{self.id} - in_use:{self.in_use} - "
                f"dtype:{self.dtype} - capacity:{self.capacity} - width:{self.width}")


class TaiPool:
    """
    Pool manager for temporary Taichi fields.

    Manages pools of TPField objects organized by (dtype, capacity, width).
    Reuses existing fields when possible, allocating on demand otherwise.

    Usage:
        pool = TaiPool()
        values = pool.get_tpfield(ti.f32, 1000)
        pairs = pool.get_tpfield(ti.f32, 1000, width=2)
        # Use fields...
        pool.release_field(values)
        pool.release_field(pairs)
    """

    def __init__(self):
        self._pools = {}  # (dtype, capacity, width) -> [TPField]
        self._requests = 0
        self._reuses = 0

    def get_tpfield(self, dtype: Any, capacity: int, width: int = 1) -> TPField:
        """
        Get available TPField or create new one.

        Searches for an unused field with matching dtype, capacity and width.
        If none found, creates a new TPField and adds it to the pool.
        The returned field is automatically marked as in use.

        Args:
            dtype: Taichi data type (ti.f32, ti.i32, etc.)
            capacity: Number of elements
            width: Components per element

        Returns:
            TPField: Ready-to-use field marked as in use
        """
        key = (dtype, capacity, width)
        pool = self._pools.setdefault(key, [])
        self._requests += 1

        # Try to find available field
        for tpfield in pool:
            if not tpfield.in_use:
                tpfield.acquire()
                self._reuses += 1
                return tpfield

        # Create new field if none available
        logger.debug("allocating pooled field dtype=%s capacity=%d width=%d", dtype, capacity, width)
        tpfield = TPField(dtype, capacity, width)
        pool.append(tpfield)
        tpfield.acquire()
        return tpfield

    def release_field(self, tpfield: TPField):
        """Release TPField back to pool for reuse."""
        tpfield.release()

    def add_N_fields(self, dtype: Any, capacity: int, count: int, width: int = 1, check: bool = True):
        """
        Pre-allocate fields of given type and capacity.

        Args:
            dtype: Taichi data type (ti.f32, ti.i32, etc.)
            capacity: Number of elements
            count: Number of fields to ensure/add
            width: Components per element
            check: If True, only add if below count. If False, add count fields regardless
        """
        pool = self._pools.setdefault((dtype, capacity, width), [])
        existing = len(pool)

        for _ in range(max(0, (count - existing) if check else count)):
            pool.append(TPField(dtype, capacity, width))

    def clear_unused(self):
        """Destroy all fields that are not in use and remove them from the pool."""
        for pool in self._pools.values():
            for tpfield in pool[:]:
                if not tpfield.in_use:
                    tpfield.destroy()
                    pool.remove(tpfield)

    def clear_all(self):
        """
        Forced removal of all fields and free their device memory.

        This frees memory EVEN IF POTENTIALLY STILL IN USE.
        """
        for pool in self._pools.values():
            for tpfield in pool[:]:
                tpfield.destroy()
                pool.remove(tpfield)

    def forget_all(self):
        """
        Drop every field without destroying it.

        Used when the Taichi runtime owning the fields has been (or is about
        to be) reset, at which point destroying them is no longer valid.
        """
        for pool in self._pools.values():
            for tpfield in pool:
                tpfield.snodetree = None
        self._pools = {}

    def stats(self) -> dict:
        """
        Get pool usage statistics.

        Returns:
            dict: total, in_use and available field counts, and reuse_rate
                  (fraction of requests served by an existing field)
        """
        total = sum(len(pool) for pool in self._pools.values())
        in_use = sum(1 for pool in self._pools.values() for tpf in pool if tpf.in_use)
        reuse_rate = self._reuses / self._requests if self._requests else 0.0
        return {"total": total, "in_use": in_use, "available": total - in_use, "reuse_rate": reuse_rate}


# Global pool instance
taipool = TaiPool()


def get_temp_field(dtype: Any, capacity: int, width: int = 1) -> TPField:
    """
    Get temporary TPField from global pool.

    Args:
        dtype: Taichi data type (ti.f32, ti.i32, etc.)
        capacity: Number of elements
        width: Components per element

    Returns:
        TPField: Ready-to-use temporary field
    """
    return taipool.get_tpfield(dtype, capacity, width)


def release_temp_field(tpfield: TPField):
    """Release temporary TPField back to global pool."""
    taipool.release_field(tpfield)


def pool_stats() -> dict:
    """Get statistics from the global pool."""
    return taipool.stats()


def clear_pool():
    """Clear unused fields from global pool to free memory."""
    taipool.clear_unused()


def temp_field(dtype: Any, capacity: int, width: int = 1) -> TPField:
    """
    Get temporary TPField as context manager for automatic release.

    with temp_field(ti.f32, 1024) as buf:
        some_kernel(buf.field)
    # Field automatically released here

    Args:
        dtype: Taichi data type (ti.f32, ti.i32, etc.)
        capacity: Number of elements
        width: Components per element

    Returns:
        TPField: Ready-to-use temporary field (context manager)
    """
    return taipool.get_tpfield(dtype, capacity, width)
