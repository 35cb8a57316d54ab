"""
PySegScan - GPU-accelerated segmented parallel scans.

Segmented prefix scans (prefix sums, prefix maxima, any associative operator)
over a flat vector partitioned into contiguous, variable-length segments,
written entirely in terms of flat data-parallel primitives running on Taichi.

Key Features:
- Segmented inclusive, exclusive and exclusive-with-totals scans, both directions
- Any associative operator, commutative or not, given as a Taichi function
- Empty (zero-length) segments anywhere in the segmentation
- Flat primitive layer: map, zip_with, inclusive/exclusive scan, scatter, gather
- Efficient device memory management through field pooling
- Inspection plots for segmented data

Core Components:
- primitives: Vector container and flat data-parallel primitives
- prelude: zip/unzip and unsegmented pre/post-scans
- segmented: flags, operator lifting and the segmented scans
- pool: Device memory management and field pooling
- visu: Inspection plots
- constants: Global configuration
- environment: Taichi initialisation
- errors: Exception hierarchy

Basic Usage:
    import taichi as ti
    import pysegscan as ps
    from pysegscan.primitives.operators import add, maximum

    ps.environment.initialise(ti.cpu)

    arr = ps.vector([1, 2, 3, 4, 5, 6])
    segments = ps.vector([2, 3, 1])

    ps.scanl1_seg(add, arr, segments).to_numpy()         # [1, 3, 3, 7, 12, 6]
    ps.scanl_seg(add, 0, arr, segments).to_numpy()       # [0, 1, 0, 3, 7, 0]
    scans, sums = ps.scanl_seg_sums(add, 0, arr, segments)
    ps.head_flags(segments).to_numpy()                   # [1, 0, 1, 0, 0, 1]

    # Custom operators are Taichi functions
    @ti.func
    def mul(a, b):
        return a * b

    ps.scanr1_seg(mul, arr, segments).to_numpy()         # [2, 2, 60, 20, 5, 6]

Scientific Background:
The segmented scan formulation follows Blelloch (1990), "Prefix sums and
their applications", with segment boundaries carried as flags through an
operator lifted to (flag, value) pairs.

Author: PySegScan developers
"""

__version__ = "0.1.0"

# Import all submodules in alphabetical order
from . import constants
from . import environment
from . import errors
from . import pool
from . import prelude
from . import primitives
from . import segmented
from . import visu

from .primitives import Vector, vector
from .prelude import zip, unzip, prescanl, postscanl, prescanr, postscanr
from .segmented import (
    scanl_seg, scanr_seg, scanl_seg_sums, scanr_seg_sums, scanl1_seg, scanr1_seg,
    prescanl_seg, prescanr_seg, postscanl_seg, postscanr_seg,
    head_flags, tail_flags, lift_segmented, offsets, check_segments
)

# Export all submodules and the public scan surface
__all__ = [
    "constants",
    "environment",
    "errors",
    "pool",
    "prelude",
    "primitives",
    "segmented",
    "visu",
    "Vector",
    "vector",
    "zip",
    "unzip",
    "prescanl",
    "postscanl",
    "prescanr",
    "postscanr",
    "scanl_seg",
    "scanr_seg",
    "scanl_seg_sums",
    "scanr_seg_sums",
    "scanl1_seg",
    "scanr1_seg",
    "prescanl_seg",
    "prescanr_seg",
    "postscanl_seg",
    "postscanr_seg",
    "head_flags",
    "tail_flags",
    "lift_segmented",
    "offsets",
    "check_segments"
]
