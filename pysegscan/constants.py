"""
Global constants and configuration parameters for PySegScan.

This module centralises the values shared by every Taichi kernel of the
package: the dtypes used for indices and boundary flags, the sentinel index
that tells a scatter to drop a write, and the runtime switch that turns on
index checking in the scatter/gather primitives.

Constants read inside kernels (IGNORE, INDEX_DTYPE, FLAG_DTYPE) are embedded
at compile time. Changing them after the first kernel launch has no effect on
kernels that are already compiled; reboot the environment first.

Constant Categories:
- Utils Constants: initialisation state
- Index Constants: index/flag dtypes and the ignore sentinel
- Checking Constants: optional bounds checking for permute/backpermute
- Conversion Constants: numpy -> Taichi dtype table used by vector(), pair element types

Usage:
    import pysegscan.constants as cte

    # Turn index checking on before building scatter-heavy expressions
    cte.CHECK_INDICES = True

    @ti.kernel
    def my_kernel(index: ti.template(), n: int):
        for i in range(n):
            if index[i] != cte.IGNORE:
                ...

Author: PySegScan developers
"""

import functools

import numpy as np
import taichi as ti

#########################################
###### UTILS CONSTANTS ##################
#########################################

INITIALISED = False


#########################################
###### INDEX CONSTANTS ##################
#########################################

# Sentinel destination index: a permute write sent here is dropped.
# Compile-time constant. Must be negative so it can never alias a real slot.
IGNORE = -1

# Dtype of index vectors, segment lengths and offsets
INDEX_DTYPE = ti.i32

# Dtype of head/tail flag vectors (0/1)
FLAG_DTYPE = ti.i32


#########################################
###### CHECKING CONSTANTS ###############
#########################################

# When True, permute/backpermute raise IndexOutOfBoundsError for any index
# (other than IGNORE) outside the destination/source range.
# When False, such writes are dropped and such reads yield zero.
CHECK_INDICES = False


#########################################
###### CONVERSION CONSTANTS #############
#########################################

# numpy dtype -> Taichi dtype, used when building a Vector from host data
NP_TO_TI = {
	np.dtype(np.int8): ti.i8,
	np.dtype(np.int16): ti.i16,
	np.dtype(np.int32): ti.i32,
	np.dtype(np.int64): ti.i64,
	np.dtype(np.uint8): ti.u8,
	np.dtype(np.uint16): ti.u16,
	np.dtype(np.uint32): ti.u32,
	np.dtype(np.uint64): ti.u64,
	np.dtype(np.float16): ti.f16,
	np.dtype(np.float32): ti.f32,
	np.dtype(np.float64): ti.f64,
	np.dtype(np.bool_): ti.u8,
}


def to_taichi_dtype(np_dtype):
	"""
	Map a numpy dtype onto the Taichi dtype used to store it.

	Args:
		np_dtype: numpy dtype (or anything np.dtype() accepts)

	Returns:
		Taichi dtype

	Raises:
		TypeError: if no Taichi dtype stores this numpy dtype
	"""
	key = np.dtype(np_dtype)
	if key not in NP_TO_TI:
		raise TypeError(f"No Taichi dtype for numpy dtype {key}")
	return NP_TO_TI[key]


def to_numpy_dtype(ti_dtype):
	"""
	Map a Taichi dtype onto the numpy dtype holding its host copy.
	"""
	for np_dtype, tdt in NP_TO_TI.items():
		if tdt == ti_dtype and np_dtype != np.dtype(np.bool_):
			return np_dtype
	raise TypeError(f"No numpy dtype for Taichi dtype {ti_dtype}")



@functools.lru_cache(maxsize=None)
def pair_type(fst_dtype, snd_dtype):
	"""
	Taichi struct type of a pair element.

	Each component keeps its own dtype, so pairing never converts a value.
	Cached: the same component dtypes always give the same struct type.

	Args:
		fst_dtype: Taichi dtype of the first component (the flag in segmented scans)
		snd_dtype: Taichi dtype of the second component

	Returns:
		ti.types.struct with members fst and snd
	"""
	return ti.types.struct(fst=fst_dtype, snd=snd_dtype)
