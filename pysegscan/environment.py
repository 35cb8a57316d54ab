"""
Environment initialization and management for PySegScan.

Wraps Taichi initialisation so the package state (index checking, the field
pool) stays consistent with the Taichi runtime it was built against.

Author: PySegScan developers
"""

import taichi as ti
from . import constants as cte
from . import pool


def initialise(arch=None, check_indices=False, **kwargs):
	"""
	Initialize Taichi and the PySegScan environment.

	Args:
		arch: Taichi backend (ti.cpu, ti.gpu, ...). Defaults to ti.cpu
		check_indices: Enable bounds checking in permute/backpermute
		**kwargs: Forwarded to ti.init (debug, default_fp, ...)

	Raises:
		RuntimeError: If already initialized
	"""
	if(cte.INITIALISED):
		raise RuntimeError("PySegScan already initialized")

	ti.init(arch=ti.cpu if arch is None else arch, **kwargs)
	cte.CHECK_INDICES = check_indices

	# Mark as initialized
	cte.INITIALISED = True


def reboot():
	"""
	Reset the Taichi runtime and the PySegScan state.

	Every pooled field belongs to the runtime being torn down, so the pool is
	emptied without destroying anything. Vectors created before the reboot
	must not be used afterwards.
	"""
	pool.taipool.forget_all()
	ti.reset()
	cte.INITIALISED = False
