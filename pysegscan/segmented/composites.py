"""
Segmented pre/post-scans.

Thin projections and compositions of the segmented scans:
    prescanl_seg f e  = first component of scanl_seg_sums f e
    postscanl_seg f e = map (e `f`) . scanl1_seg f
    prescanr_seg f e  = first component of scanr_seg_sums f e
    postscanr_seg f e = map (`f` e) . scanr1_seg f

Author: PySegScan developers
"""

from ..primitives import unit
from .scans import scanl_seg_sums, scanr_seg_sums, _prepare, _postscan_seg


def prescanl_seg(op, identity, arr, segments):
	"""Segmented left-to-right prescan (exclusive scan)."""
	return scanl_seg_sums(op, identity, arr, segments)[0]


def postscanl_seg(op, identity, arr, segments):
	"""
	Segmented left-to-right postscan: every inclusive segment prefix with
	identity combined in on the left.
	"""
	arr, seg = _prepare(arr, segments)
	return _postscan_seg(op, unit(identity, arr.dtype), arr, seg, False)


def prescanr_seg(op, identity, arr, segments):
	"""Segmented right-to-left prescan (exclusive scan)."""
	return scanr_seg_sums(op, identity, arr, segments)[0]


def postscanr_seg(op, identity, arr, segments):
	"""
	Segmented right-to-left postscan: every inclusive segment suffix with
	identity combined in on the right.
	"""
	arr, seg = _prepare(arr, segments)
	return _postscan_seg(op, unit(identity, arr.dtype), arr, seg, True)
