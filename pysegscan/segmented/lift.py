"""
Segment-Operator Lifter

Turns an associative operator on values into an associative operator on
(flag, value) pairs that restarts accumulation at marked boundaries. An
ordinary flat scan with the lifted operator is then a segmented scan.

Left-to-right (head flags):
    apply(a, b) = (a.flag | b.flag, b.value            if b.flag
                                    op(a.value, b.value) otherwise)

A right-hand flag means "a segment starts here": everything accumulated on
the left is discarded. The flag itself is carried forward so that a later
combine cannot mask the reset.

Right-to-left (tail flags) is the mirror image:
    apply(a, b) = (a.flag | b.flag, a.value            if a.flag
                                    op(a.value, b.value) otherwise)

In both cases op still receives its arguments in vector order, so
non-commutative operators are handled. The lifted operator is associative
whenever op is, and is generally not commutative even if op is.

Pairs are struct elements (see zip): p.fst is the flag, p.snd the value, each
in its own dtype. The result reuses the right (left) operand's struct, so its
member dtypes are those of the pairs being scanned.

Author: PySegScan developers
"""

import functools

import taichi as ti


@functools.lru_cache(maxsize=None)
def lift_segmented(op, reverse=False):
	"""
	Lift op to (flag, value) pairs.

	Cached, so lifting the same operator twice returns the same ti.func and
	the scan kernels built from it are reused.

	Args:
		op: Associative @ti.func of two values
		reverse: Build the right-to-left variant (reset on the left operand's flag)

	Returns:
		@ti.func combining two pairs
	"""
	if reverse:
		@ti.func
		def apply_right(a, b):
			value = a.snd if a.fst != 0 else op(a.snd, b.snd)
			out = a
			out.fst = ti.max(a.fst, b.fst)
			out.snd = value
			return out

		return apply_right

	@ti.func
	def apply_left(a, b):
		value = b.snd if b.fst != 0 else op(a.snd, b.snd)
		out = b
		out.fst = ti.max(a.fst, b.fst)
		out.snd = value
		return out

	return apply_left
