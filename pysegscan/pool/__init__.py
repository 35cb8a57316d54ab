"""
Device Memory Management and Field Pooling System for PySegScan.

Every Vector produced by the primitives, and every scratch buffer a primitive
needs internally, is a 1D Taichi field taken from this pool. Fields are keyed
by (dtype, capacity, width) and handed back to the pool when released, so
repeated expressions over vectors of the same length reuse both memory and
compiled kernels.

Core Classes:
- TPField: Wrapper for pooled Taichi fields with lifecycle management
- TaiPool: Pool manager for temporary fields with usage tracking and statistics

Pool Management Functions:
- get_temp_field: Acquire temporary field from global pool
- release_temp_field: Return field to global pool for reuse
- temp_field: Context manager for automatic field lifecycle
- pool_stats: Pool usage statistics
- clear_pool: Remove unused fields and free device memory

Usage Patterns:
    import pysegscan as ps
    import taichi as ti

    ps.environment.initialise(ti.cpu)

    # Recommended: Context manager for automatic cleanup
    with ps.pool.temp_field(ti.f32, 512) as temp:
        temp.field.fill(0.0)
        result = temp.to_numpy()
    # Field automatically returned to pool

    # Pool monitoring
    stats = ps.pool.pool_stats()
    print(f"Pool efficiency: {stats['reuse_rate']:.1%}")
    print(f"Fields in use: {stats['in_use']}/{stats['total']}")

Author: PySegScan developers
"""

from .pool import (
    TPField,
    TaiPool,
    get_temp_field,
    release_temp_field,
    pool_stats,
    clear_pool,
    temp_field,
    taipool
)

__all__ = [
    "TPField",
    "TaiPool",
    "get_temp_field",
    "release_temp_field",
    "pool_stats",
    "clear_pool",
    "temp_field",
    "taipool"
]
