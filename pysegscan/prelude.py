"""
Standard composites built from the primitive layer.

Functions that are not primitives themselves but are expressed with them:
pairing and unpairing vectors, and the pre/post-scan variants of the flat
scans. They are also the building blocks of the segmented scans.

Denotationally:
    prescanl f e  = first component of scanl_total f e
    postscanl f e = map (e `f`) . scanl1 f
    prescanr f e  = first component of scanr_total f e
    postscanr f e = map (`f` e) . scanr1 f

Author: PySegScan developers
"""

from .errors import ShapeMismatchError
from .primitives import operators as ops
from .primitives import as_vector, unit, replicate, map, zip_with, scanl1, scanr1, scanl_total, scanr_total


#########################################
###### MAP-LIKE #########################
#########################################


def zip(a, b):
	"""
	Combine the elements of two vectors pairwise.

	The length of the result is the intersection (minimum) of the two input
	lengths. Each component keeps its own dtype (pairs are Taichi structs), so
	no value is converted and unzip gives back the inputs exactly.

	Args:
		a, b: Vectors (or array-likes) with scalar elements

	Returns:
		Vector: pair Vector of (a[i], b[i]), dtype (a.dtype, b.dtype)

	Raises:
		ShapeMismatchError: If either input already holds tuples
	"""
	a = as_vector(a)
	b = as_vector(b)
	if a.width != 1 or b.width != 1:
		raise ShapeMismatchError(f"zip expects scalar elements, got widths {a.width} and {b.width}")

	return zip_with(ops.pair_of(a.dtype, b.dtype), a, b, dtype=(a.dtype, b.dtype))


def unzip(pairs):
	"""
	The converse of zip; both results have the length of the argument.

	Returns:
		tuple: (Vector of first components, Vector of second components),
		each in the dtype it had before zip

	Raises:
		ShapeMismatchError: If pairs is not a pair Vector
	"""
	if not pairs.is_pair:
		raise ShapeMismatchError(f"unzip expects pairs, got elements of dtype {pairs.dtype} and width {pairs.width}")
	first_dtype, second_dtype = pairs.dtype
	return map(ops.fst, pairs, dtype=first_dtype, width=1), map(ops.snd, pairs, dtype=second_dtype, width=1)


#########################################
###### COMPOSITE SCANS ##################
#########################################


def prescanl(op, e, v):
	"""
	Left-to-right prescan (aka exclusive scan).

	Args:
		op: Associative @ti.func
		e: Initial value (host scalar or Scalar Vector)
		v: Vector or array-like

	Example:
		prescanl(add, 0, [1, 2, 3, 4]) -> [0, 1, 3, 6]
	"""
	v = as_vector(v)
	return scanl_total(op, unit(e, v.dtype), v)[0]


def postscanl(op, e, v):
	"""
	Left-to-right postscan, a variant of scanl1 with an initial value.

	Example:
		postscanl(add, 10, [1, 2, 3, 4]) -> [11, 13, 16, 20]
	"""
	v = as_vector(v)
	return zip_with(op, replicate(v.n, unit(e, v.dtype)), scanl1(op, v))


def prescanr(op, e, v):
	"""
	Right-to-left prescan (aka exclusive scan).

	Example:
		prescanr(add, 0, [1, 2, 3, 4]) -> [9, 7, 4, 0]
	"""
	v = as_vector(v)
	return scanr_total(op, unit(e, v.dtype), v)[0]


def postscanr(op, e, v):
	"""
	Right-to-left postscan, a variant of scanr1 with an initial value.

	Example:
		postscanr(add, 10, [1, 2, 3, 4]) -> [20, 19, 17, 14]
	"""
	v = as_vector(v)
	return zip_with(op, scanr1(op, v), replicate(v.n, unit(e, v.dtype)))
