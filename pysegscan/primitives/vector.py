"""
Vector container for PySegScan.

A Vector is the unit of data every primitive consumes and produces: a dense,
0-indexed, logically immutable sequence backed by a pooled 1D Taichi field.
Elements are scalars (width 1), small fixed-size tuples of one dtype (width > 1,
stored in a ti.Vector.field) or pairs.

Pairs, such as the (flag, value) elements of segmented scans, are stored as
Taichi structs with members fst and snd. Each member keeps its own dtype, so a
pair Vector's dtype is the tuple (fst_dtype, snd_dtype) and nothing is
converted when two vectors are zipped.

The backing field always has at least one slot so that empty vectors are
representable; kernels only ever touch the first `n` slots. When a Vector is
garbage collected its field goes back to the pool.

Author: PySegScan developers
"""

import weakref

import numpy as np

from .. import constants as cte
from .. import pool
from ..errors import ShapeMismatchError


class Vector:
	"""
	Dense 1D array living on the Taichi device.

	Attributes:
		n (int): Logical length
		dtype: Taichi storage dtype, or (fst_dtype, snd_dtype) for pairs
		width (int): Components per element (1 = scalar elements, 2 for pairs)
		field: Underlying Taichi field (capacity max(n, 1))
	"""

	def __init__(self, n, dtype, width=1):
		"""
		Allocate an uninitialised Vector from the pool.

		Args:
			n (int): Logical length (>= 0)
			dtype: Taichi storage dtype, or a (fst_dtype, snd_dtype) tuple for pairs
			width (int): Components per element. Ignored for pairs
		"""
		if n < 0:
			raise ValueError(f"Vector length must be non-negative, got {n}")
		self.n = int(n)
		self.dtype = tuple(dtype) if isinstance(dtype, (tuple, list)) else dtype
		self.width = 2 if self.is_pair else int(width)

		self._tpfield = pool.taipool.get_tpfield(self.dtype, max(self.n, 1), self.width)
		self.field = self._tpfield.field
		# Hand the field back to the pool once nothing references this Vector
		self._finalizer = weakref.finalize(self, pool.taipool.release_field, self._tpfield)

	@property
	def is_pair(self):
		return isinstance(self.dtype, tuple)

	def fill(self, value):
		"""Fill every slot with a constant and return self."""
		if self.is_pair:
			self.field.fst.fill(value)
			self.field.snd.fill(value)
		else:
			self.field.fill(value)
		return self

	def to_numpy(self):
		"""
		Copy the logical content back to host memory.

		Returns:
			np.ndarray: shape (n,) for scalar elements, (n, width) for tuples,
			and a structured array with fields fst and snd for pairs
		"""
		if not self.is_pair:
			return self.field.to_numpy()[:self.n]

		members = self.field.to_numpy()
		out = np.empty(self.n, dtype=[("fst", members["fst"].dtype), ("snd", members["snd"].dtype)])
		out["fst"] = members["fst"][:self.n]
		out["snd"] = members["snd"][:self.n]
		return out

	def __len__(self):
		return self.n

	def __getitem__(self, i):
		if i < 0:
			i += self.n
		if i < 0 or i >= self.n:
			raise IndexError(f"index {i} out of range for Vector of length {self.n}")
		return self.field[i]

	def __repr__(self):
		return f"Vector(n={self.n}, dtype={self.dtype}, width={self.width}, data={self.to_numpy().tolist()})"


def vector(data, dtype=None):
	"""
	Build a Vector from host data.

	Accepts an existing Vector (returned as is), a numpy array or anything
	np.asarray() understands. 1D input gives scalar elements, 2D input of
	shape (n, w) gives width-w elements, and a structured array with fields
	fst and snd (as returned by Vector.to_numpy for pairs) gives pairs.

	Args:
		data: Host data or Vector
		dtype: Taichi dtype. Inferred from the numpy dtype when omitted

	Returns:
		Vector

	Raises:
		ShapeMismatchError: If data is neither 1D nor 2D, or a structured array
			other than (fst, snd)
	"""
	if isinstance(data, Vector):
		return data

	arr = np.asarray(data)
	if arr.dtype.names is not None:
		return _pair_vector(arr)

	if dtype is None:
		# Empty python lists come out as float64; an empty vector has no values to lose
		dtype = cte.to_taichi_dtype(arr.dtype)

	if arr.ndim == 1:
		width = 1
	elif arr.ndim == 2:
		width = arr.shape[1]
	else:
		raise ShapeMismatchError(f"Vectors are one-dimensional, got an array of shape {arr.shape}")

	n = arr.shape[0]
	out = Vector(n, dtype, width)
	if n > 0:
		out.field.from_numpy(np.ascontiguousarray(arr, dtype=cte.to_numpy_dtype(dtype)))
	return out


def _pair_vector(arr):
	if arr.dtype.names != ("fst", "snd") or arr.ndim != 1:
		raise ShapeMismatchError(f"Pair data must be a 1D structured array with fields (fst, snd), got {arr.dtype}")

	dtype = (cte.to_taichi_dtype(arr.dtype["fst"]), cte.to_taichi_dtype(arr.dtype["snd"]))
	out = Vector(arr.shape[0], dtype)
	if out.n > 0:
		out.field.from_numpy({
			"fst": np.ascontiguousarray(arr["fst"], dtype=cte.to_numpy_dtype(dtype[0])),
			"snd": np.ascontiguousarray(arr["snd"], dtype=cte.to_numpy_dtype(dtype[1])),
		})
	return out


def as_vector(data, dtype=None):
	"""Like vector(), but casts an existing Vector to `dtype` when both are given."""
	if isinstance(data, Vector):
		if dtype is None or data.dtype == dtype:
			return data
		from .elementwise import cast
		return cast(data, dtype)
	return vector(data, dtype)
