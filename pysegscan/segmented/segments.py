"""
Segment descriptors.

Segments are never materialised as sub-vectors: a segmentation is a flat
integer Vector of lengths, from which offsets, per-element segment indices
and boundary positions are derived with the primitives.

Note:
    Index helpers below return constants.IGNORE for positions that fall
    outside the data (a trailing empty segment starts at n, a leading empty
    segment ends at -1), so scatters built on them never write out of range.

Author: PySegScan developers
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from ..errors import InvalidSegmentError
from ..primitives import operators as ops
from ..primitives import as_vector, unit, constant, iota, zip_with, permute, scanl1, scanl_total


#########################################
###### INDEX HELPERS ####################
#########################################


@ti.func
def start_or_ignore(offset, n):
	"""Segment start, or IGNORE when the start is at or past the data end."""
	return offset if offset < n else cte.IGNORE


@ti.func
def end_or_ignore(length, offset):
	"""Last index of a segment, or IGNORE when it would be negative."""
	last = offset + length - 1
	return last if last >= 0 else cte.IGNORE


@ti.func
def last_of_nonempty(length, end):
	"""Last index of a non-empty segment given its exclusive end; IGNORE if empty."""
	return end - 1 if length > 0 else cte.IGNORE


@ti.func
def first_of_nonempty(length, offset):
	"""First index of a non-empty segment; IGNORE if empty."""
	return offset if length > 0 else cte.IGNORE


#########################################
###### DESCRIPTORS ######################
#########################################


def as_segments(segments):
	"""Coerce segment lengths to an index-dtype Vector."""
	return as_vector(segments, cte.INDEX_DTYPE)


def offsets(segments):
	"""
	Start index of every segment (exclusive prefix sum of the lengths).

	Example:
		offsets([2, 3, 1]) -> [0, 2, 5]
	"""
	return offsets_and_length(segments)[0]


def offsets_and_length(segments):
	"""
	Offsets and total data length of a segmentation.

	Returns:
		tuple: (offsets Vector, Scalar holding sum(segments))
	"""
	seg = as_segments(segments)
	return scanl_total(ops.add, unit(0, cte.INDEX_DTYPE), seg)


def ends(segments):
	"""
	Exclusive end index of every segment (inclusive prefix sum of the lengths).

	Example:
		ends([2, 3, 1]) -> [2, 5, 6]
	"""
	return scanl1(ops.add, as_segments(segments))


def segment_index(segments, n):
	"""
	Index of the segment owning each data element.

	Every segment writes its own index at its start position, then a max-scan
	carries it forward over the segment. Empty segments share their start
	with the next segment; resolving that collision with max keeps the later
	(non-empty) one. Starts at or past n are dropped.

	Args:
		segments: Segment lengths
		n (int): Data length

	Returns:
		Vector: length n, index dtype

	Example:
		segment_index([2, 3, 1], 6) -> [0, 0, 1, 1, 1, 2]
		segment_index([0, 2, 0, 1], 3) -> [1, 1, 3]
	"""
	seg = as_segments(segments)
	starts = zip_with(start_or_ignore, offsets(seg), constant(seg.n, n, cte.INDEX_DTYPE))
	marks = permute(ops.maximum, constant(n, 0, cte.INDEX_DTYPE), starts, iota(seg.n))
	return scanl1(ops.maximum, marks)


def check_segments(arr, segments):
	"""
	Verify that segments partition arr.

	The scans never call this; segment validity is the caller's invariant.
	Use it while debugging inputs.

	Raises:
		InvalidSegmentError: On a negative length or a length sum different
			from len(arr)
	"""
	arr = as_vector(arr)
	lengths = as_segments(segments).to_numpy()
	if np.any(lengths < 0):
		raise InvalidSegmentError(f"Negative segment length at position {int(np.argmax(lengths < 0))}")
	total = int(lengths.sum())
	if total != arr.n:
		raise InvalidSegmentError(f"Segment lengths sum to {total}, data length is {arr.n}")
