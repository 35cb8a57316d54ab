"""
Segmented Scans

Segmented inclusive and exclusive scans, and per-segment totals, expressed
only with flat primitives, boundary flags and the lifted operator.

Inclusive (scanl1_seg / scanr1_seg):
    pair every element with its head (tail) flag, run the flat inclusive scan
    with the lifted operator, keep the value component.

Exclusive at original length (scanl_seg / scanr_seg), identity injection:
    1. augmented lengths = segments + 1
    2. s[i] = index of the segment owning element i (max-scan of a scatter of
       segment indices at segment starts)
    3. scatter element i to i + s[i] + 1 (left) or i + s[i] (right) of a
       vector of n + len(segments) identities: one free identity slot at the
       start (left) or end (right) of every augmented segment. The map is
       injective, so the scatter never collides, empty segments included.
    4. inclusive segmented scan of the augmented vector
    5. gather element i back from i + s[i] (left) or i + s[i] + 1 (right),
       the slot just before (after) its own in the augmented space

Exclusive with totals (scanl_seg_sums / scanr_seg_sums), shift-and-drop:
    each segment's last (first) element is dropped by scattering it to
    IGNORE, every other element moves one slot forward (backward) inside its
    segment, the freed slot keeps the identity from the default vector, and
    the inclusive machinery runs at the original length. Totals are read
    with a gather from the segmented postscan at each segment's last (first)
    index; an empty segment's total is the identity.

The identity passed to the exclusive scans must be a (right) identity of op:
scattered elements are combined with the default slot as op(x, identity).

Example (op = add, identity = 0):
    arr = [1, 2, 3, 4, 5, 6], segments = [2, 3, 1]
    scanl1_seg     -> [1, 3, 3, 7, 12, 6]
    scanl_seg      -> [0, 1, 0, 3, 7, 0]
    scanl_seg_sums -> ([0, 1, 0, 3, 7, 0], [3, 12, 6])

Author: PySegScan developers
"""

import taichi as ti

from .. import constants as cte
from ..errors import ShapeMismatchError
from ..prelude import zip
from ..primitives import operators as ops
from ..primitives import (as_vector, unit, replicate, iota, map, zip_with, inclusive_scan,
                          permute, backpermute)
from .flags import head_flags, tail_flags
from .lift import lift_segmented
from .segments import as_segments, offsets, ends, segment_index, last_of_nonempty, first_of_nonempty


#########################################
###### INDEX ARITHMETIC #################
#########################################


@ti.func
def _add_succ(i, s):
	return i + s + 1


@ti.func
def _next_unless_flagged(flag, i):
	return i + 1 if flag == 0 else cte.IGNORE


@ti.func
def _prev_unless_flagged(flag, i):
	return i - 1 if flag == 0 else cte.IGNORE


@ti.func
def _total_or_identity(p, identity):
	# p.fst: segment length, p.snd: gathered total
	return p.snd if p.fst > 0 else identity


#########################################
###### HELPERS ##########################
#########################################


def _prepare(arr, segments):
	arr = as_vector(arr)
	if arr.width != 1:
		raise ShapeMismatchError(f"Segmented scans expect scalar elements, got width {arr.width}")
	return arr, as_segments(segments)


def _flagged_scan(op, arr, flags, reverse):
	"""Flat scan of (flag, value) pairs with the lifted operator, values projected back."""
	scanned = inclusive_scan(lift_segmented(op, reverse), zip(flags, arr), reverse)
	return map(ops.snd, scanned, dtype=arr.dtype, width=1)


def _postscan_seg(op, seed, arr, seg, reverse):
	"""Segmented inclusive scan with the seed folded in at each segment boundary."""
	if reverse:
		return zip_with(op, _flagged_scan(op, arr, tail_flags(seg), True), replicate(arr.n, seed))
	return zip_with(op, replicate(arr.n, seed), _flagged_scan(op, arr, head_flags(seg), False))


def _gather_totals(post, seg, boundary, seed):
	"""
	Read one total per segment from a postscan.

	Args:
		post: Segmented postscan of the data
		seg: Segment lengths
		boundary: Index of each segment's last (left) or first (right) element, IGNORE if empty
		seed: Identity Scalar, used for empty segments
	"""
	gathered = backpermute(boundary, post)
	return zip_with(_total_or_identity, zip(seg, gathered), replicate(seg.n, seed), dtype=post.dtype, width=1)


#########################################
###### INCLUSIVE ########################
#########################################


def scanl1_seg(op, arr, segments):
	"""
	Segmented left-to-right inclusive scan.

	Element i is the combination of every element of its segment up to and
	including i.

	Args:
		op: Associative @ti.func
		arr: Data Vector (or array-like), scalar elements
		segments: Segment lengths summing to len(arr)

	Returns:
		Vector: same length and dtype as arr
	"""
	arr, seg = _prepare(arr, segments)
	return _flagged_scan(op, arr, head_flags(seg), False)


def scanr1_seg(op, arr, segments):
	"""
	Segmented right-to-left inclusive scan.

	Element i is the combination of i and every later element of its segment.
	"""
	arr, seg = _prepare(arr, segments)
	return _flagged_scan(op, arr, tail_flags(seg), True)


#########################################
###### EXCLUSIVE ########################
#########################################


def _inject_identity_scan(op, identity, arr, segments, reverse):
	arr, seg = _prepare(arr, segments)
	seed = unit(identity, arr.dtype)
	n = arr.n

	shift = segment_index(seg, n)
	positions = iota(n)

	# Injective map into the augmented space, one identity slot per segment
	dest = zip_with(ops.add if reverse else _add_succ, positions, shift)
	injected = permute(op, replicate(n + seg.n, seed), dest, arr)

	augmented = map(ops.succ, seg)
	if reverse:
		scanned = _flagged_scan(op, injected, tail_flags(augmented), True)
	else:
		scanned = _flagged_scan(op, injected, head_flags(augmented), False)

	# Neighbouring slot of each element in the augmented space
	source = zip_with(_add_succ if reverse else ops.add, positions, shift)
	return backpermute(source, scanned)


def scanl_seg(op, identity, arr, segments):
	"""
	Segmented left-to-right exclusive scan.

	Element i is the combination of identity and every element of its
	segment strictly before i. The first element of each segment gets the
	identity.

	Args:
		op: Associative @ti.func
		identity: Identity of op (host scalar or Scalar Vector)
		arr: Data Vector (or array-like), scalar elements
		segments: Segment lengths summing to len(arr)

	Returns:
		Vector: same length and dtype as arr
	"""
	return _inject_identity_scan(op, identity, arr, segments, False)


def scanr_seg(op, identity, arr, segments):
	"""
	Segmented right-to-left exclusive scan.

	Element i is the combination of every element of its segment strictly
	after i, and identity. The last element of each segment gets the identity.
	"""
	return _inject_identity_scan(op, identity, arr, segments, True)


def scanl_seg_sums(op, identity, arr, segments):
	"""
	Segmented left-to-right exclusive scan together with segment totals.

	Args:
		op: Associative @ti.func
		identity: Identity of op (host scalar or Scalar Vector)
		arr: Data Vector (or array-like), scalar elements
		segments: Segment lengths summing to len(arr)

	Returns:
		tuple: (exclusive scan, same length as arr;
		        totals, one per segment, identity for empty segments)
	"""
	arr, seg = _prepare(arr, segments)
	seed = unit(identity, arr.dtype)
	n = arr.n

	# Drop each segment's last element, shift the others one slot right
	dest = zip_with(_next_unless_flagged, tail_flags(seg), iota(n))
	shifted = permute(op, replicate(n, seed), dest, arr)
	scans = _flagged_scan(op, shifted, head_flags(seg), False)

	post = _postscan_seg(op, seed, arr, seg, False)
	lasts = zip_with(last_of_nonempty, seg, ends(seg))
	return scans, _gather_totals(post, seg, lasts, seed)


def scanr_seg_sums(op, identity, arr, segments):
	"""
	Segmented right-to-left exclusive scan together with segment totals.

	Returns:
		tuple: (exclusive scan, same length as arr;
		        totals, one per segment, identity for empty segments)
	"""
	arr, seg = _prepare(arr, segments)
	seed = unit(identity, arr.dtype)
	n = arr.n

	# Drop each segment's first element, shift the others one slot left
	dest = zip_with(_prev_unless_flagged, head_flags(seg), iota(n))
	shifted = permute(op, replicate(n, seed), dest, arr)
	scans = _flagged_scan(op, shifted, tail_flags(seg), True)

	post = _postscan_seg(op, seed, arr, seg, True)
	firsts = zip_with(first_of_nonempty, seg, offsets(seg))
	return scans, _gather_totals(post, seg, firsts, seed)
