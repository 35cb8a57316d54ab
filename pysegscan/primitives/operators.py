"""
Stock Operators for the Primitive Layer

Taichi functions usable wherever a primitive expects an operator: binary
combining operators for scans and scatters, and projections for pairs. User
operators follow the same convention: a @ti.func of one (map) or two
(zip_with, scan, permute) arguments returning the combined element.

Scan operators must be associative. They need not be commutative: the scan
primitives always pass the earlier element as the left argument.

Available Operators:
    - add, mul, maximum, minimum: associative and commutative
    - first, last: associative, not commutative (keep left / keep right)
    - const_one: idempotent scatter resolver used for boundary flags
    - fst, snd: projections of pair elements (members of the pair struct)
    - identity, succ: unary index helpers

Usage:
    ```python
    import taichi as ti
    import pysegscan as ps

    @ti.func
    def saturating_add(a, b):
        return ti.min(a + b, 255)

    out = ps.primitives.scanl1(saturating_add, ps.vector([100, 100, 100]))
    ```

Author: PySegScan developers
"""

import functools

import taichi as ti

from .. import constants as cte


@ti.func
def add(a, b):
    return a + b


@ti.func
def mul(a, b):
    return a * b


@ti.func
def maximum(a, b):
    return ti.max(a, b)


@ti.func
def minimum(a, b):
    return ti.min(a, b)


@ti.func
def first(a, b):
    """Keep the left operand. Associative, not commutative."""
    return a


@ti.func
def last(a, b):
    """Keep the right operand. Associative, not commutative."""
    return b


@ti.func
def const_one(a, b):
    """
    Scatter resolver that always deposits 1.

    Idempotent: any number of writes to the same slot, in any order, give the
    same result.
    """
    return 1


@ti.func
def fst(p):
    return p.fst


@ti.func
def snd(p):
    return p.snd


@ti.func
def identity(x):
    return x


@ti.func
def succ(x):
    return x + 1


@functools.lru_cache(maxsize=None)
def pair_of(fst_dtype, snd_dtype):
    """
    Pair constructor for pairs of (fst_dtype, snd_dtype).

    Each component is stored in its own dtype. Returns the same ti.func for
    the same dtypes, so kernels built from it are compiled once.
    """
    pair_t = cte.pair_type(fst_dtype, snd_dtype)

    @ti.func
    def pair(x, y):
        return pair_t(fst=x, snd=y)

    return pair
