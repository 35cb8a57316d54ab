"""
Segmented Scans Module

Segmented prefix scans over a flat vector partitioned into contiguous,
variable-length segments. Nothing here is segment-aware at the kernel level:
segment boundaries become 0/1 flag vectors, the user operator is lifted to
(flag, value) pairs, and the ordinary flat primitives do the rest.

Core Modules:
    - segments: offsets, segment ends, per-element segment index, validation
    - flags: head/tail flag vectors
    - lift: lifting an operator to (flag, value) pairs
    - scans: inclusive, exclusive and exclusive-with-totals segmented scans
    - composites: segmented pre/post-scans

Available Functions:
    - scanl1_seg, scanr1_seg: inclusive segmented scans
    - scanl_seg, scanr_seg: exclusive segmented scans
    - scanl_seg_sums, scanr_seg_sums: exclusive scans plus one total per segment
    - prescanl_seg, prescanr_seg, postscanl_seg, postscanr_seg
    - head_flags, tail_flags, lift_segmented
    - offsets, segment_index, check_segments

Example Usage:
    ```python
    import taichi as ti
    import pysegscan as ps
    from pysegscan.primitives.operators import add

    ps.environment.initialise(ti.cpu)

    arr = [1, 2, 3, 4, 5, 6]
    segments = [2, 3, 1]

    ps.scanl1_seg(add, arr, segments).to_numpy()      # [1, 3, 3, 7, 12, 6]
    ps.scanl_seg(add, 0, arr, segments).to_numpy()    # [0, 1, 0, 3, 7, 0]
    scans, sums = ps.scanl_seg_sums(add, 0, arr, segments)
    sums.to_numpy()                                    # [3, 12, 6]
    ```

Empty (zero-length) segments are allowed anywhere: they produce no output
element and a total equal to the identity.

Author: PySegScan developers
"""

from .segments import offsets, ends, segment_index, check_segments, as_segments
from .flags import head_flags, tail_flags
from .lift import lift_segmented
from .scans import scanl1_seg, scanr1_seg, scanl_seg, scanr_seg, scanl_seg_sums, scanr_seg_sums
from .composites import prescanl_seg, prescanr_seg, postscanl_seg, postscanr_seg

__all__ = [
    'offsets',
    'ends',
    'segment_index',
    'check_segments',
    'as_segments',
    'head_flags',
    'tail_flags',
    'lift_segmented',
    'scanl1_seg',
    'scanr1_seg',
    'scanl_seg',
    'scanr_seg',
    'scanl_seg_sums',
    'scanr_seg_sums',
    'prescanl_seg',
    'prescanr_seg',
    'postscanl_seg',
    'postscanr_seg'
]
