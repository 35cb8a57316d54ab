"""
Visualization submodule for PySegScan.

Available Functions:
- plot_segments: bar plot of a flat vector coloured by segment, with head
  markers and an optional scan overlay

Usage:
    import pysegscan as ps
    from pysegscan.primitives.operators import add

    arr, segments = [1, 2, 3, 4, 5, 6], [2, 3, 1]
    ax = ps.visu.plot_segments(arr, segments, scans=ps.scanl1_seg(add, arr, segments))
    ax.figure.savefig("segments.png")

Author: PySegScan developers
"""

from .plot import plot_segments

__all__ = [
    "plot_segments"
]
