"""
Flag-Vector Builder

Derives 0/1 boundary markers from a segment-length vector:
    - head flags: 1 at the first index of every non-empty segment
    - tail flags: 1 at the last index of every non-empty segment

Algorithm:
    1. offsets = exclusive prefix sum of the lengths, n = total length
    2. start from a zero vector of length n
    3. scatter the constant 1 at offsets[i] (head) or
       offsets[i] + segments[i] - 1 (tail) for every segment i

The scatter resolves collisions with const_one (_ -> 1). An empty segment in
the middle of the data shares its would-be boundary with a neighbour; both
writes deposit 1, so the result is the same whatever the write order. A
trailing empty segment's head position (n) and a leading empty segment's
tail position (-1) lie outside the data and are dropped.

Example:
    segments = [2, 3, 1]
    head_flags -> [1, 0, 1, 0, 0, 1]
    tail_flags -> [0, 1, 0, 0, 1, 1]

Author: PySegScan developers
"""

from .. import constants as cte
from ..primitives import operators as ops
from ..primitives import the, constant, replicate, zip_with, permute
from .segments import as_segments, offsets_and_length, start_or_ignore, end_or_ignore


def head_flags(segments):
	"""
	Head flags of a segmentation.

	Args:
		segments: Segment lengths (Vector or array-like)

	Returns:
		Vector: flag dtype, length sum(segments)
	"""
	seg = as_segments(segments)
	offs, total = offsets_and_length(seg)
	starts = zip_with(start_or_ignore, offs, replicate(seg.n, total))
	zeros = constant(the(total), 0, cte.FLAG_DTYPE)
	return permute(ops.const_one, zeros, starts, starts)


def tail_flags(segments):
	"""
	Tail flags of a segmentation.

	Args:
		segments: Segment lengths (Vector or array-like)

	Returns:
		Vector: flag dtype, length sum(segments)
	"""
	seg = as_segments(segments)
	offs, total = offsets_and_length(seg)
	lasts = zip_with(end_or_ignore, seg, offs)
	zeros = constant(the(total), 0, cte.FLAG_DTYPE)
	return permute(ops.const_one, zeros, lasts, lasts)
