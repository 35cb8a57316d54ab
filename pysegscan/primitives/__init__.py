"""
Primitive Layer

The fixed set of unsegmented, shape-oblivious data-parallel operations the
segmented scans are written in. Every primitive takes and returns Vectors
(pooled 1D Taichi fields) and launches one or more Taichi kernels.

Available Primitives:
    - vector, Vector: host <-> device containers
    - unit, the, index, shape: scalars and shapes
    - constant, replicate, iota: broadcast and index generation
    - map, zip_with, cast, copy: element-wise operations
    - scanl1, scanr1: inclusive scans (Hillis-Steele, any associative op)
    - scanl_total, scanr_total: exclusive scans plus overall fold
    - permute: scatter with a collision-resolving operator
    - backpermute: gather
    - operators: stock @ti.func operators (add, maximum, first, fst, ...)

Operators are Taichi functions. Scan operators must be associative; the
earlier element is always the left argument.

Example Usage:
    ```python
    import taichi as ti
    import pysegscan as ps
    from pysegscan.primitives import operators as ops

    ps.environment.initialise(ti.cpu)

    v = ps.vector([3, 1, 7, 0, 4, 1, 6, 3])
    ps.primitives.scanl1(ops.add, v).to_numpy()
    # [3, 4, 11, 11, 15, 16, 22, 25]

    ex, total = ps.primitives.scanl_total(ops.add, ps.primitives.unit(0, v.dtype), v)
    ```

Author: PySegScan developers
"""

from . import operators
from .vector import Vector, vector, as_vector
from .elementwise import unit, the, index, shape, constant, replicate, iota, map, zip_with, cast, copy
from .parallel_scan import inclusive_scan, exclusive_scan, scanl1, scanr1, scanl_total, scanr_total
from .permute import permute, backpermute

__all__ = [
    'operators',
    'Vector',
    'vector',
    'as_vector',
    'unit',
    'the',
    'index',
    'shape',
    'constant',
    'replicate',
    'iota',
    'map',
    'zip_with',
    'cast',
    'copy',
    'inclusive_scan',
    'exclusive_scan',
    'scanl1',
    'scanr1',
    'scanl_total',
    'scanr_total',
    'permute',
    'backpermute'
]
