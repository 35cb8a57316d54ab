"""
Element-wise Primitives

Embarrassingly parallel primitives: one Taichi thread per output element, no
communication between elements. Every function returns a fresh Vector and
leaves its arguments untouched.

Kernels that apply a user operator are built once per operator by a cached
factory; Taichi then specialises them per field argument as usual.

Author: PySegScan developers
"""

import functools
import logging

import taichi as ti

from .. import constants as cte
from .operators import identity
from .vector import Vector, vector, as_vector

logger = logging.getLogger(__name__)


#########################################
###### KERNELS ##########################
#########################################


@ti.kernel
def copy_prefix(src: ti.template(), dst: ti.template(), n: int):
    """Copy the first n elements of src into dst."""
    for i in range(n):
        dst[i] = src[i]


@ti.kernel
def broadcast(scalar: ti.template(), dst: ti.template(), n: int):
    """Write scalar[0] into the first n slots of dst."""
    for i in range(n):
        dst[i] = scalar[0]


@ti.kernel
def init_arange(dst: ti.template(), n: int):
    """dst[i] = i for the first n slots."""
    for i in range(n):
        dst[i] = i


@functools.lru_cache(maxsize=None)
def _map_kernel(f):
    logger.debug("building map kernel for %s", getattr(f, "__name__", f))

    @ti.kernel
    def kernel(src: ti.template(), dst: ti.template(), n: int):
        for i in range(n):
            dst[i] = f(src[i])

    return kernel


@functools.lru_cache(maxsize=None)
def _zip_with_kernel(f):
    logger.debug("building zip_with kernel for %s", getattr(f, "__name__", f))

    @ti.kernel
    def kernel(a: ti.template(), b: ti.template(), dst: ti.template(), n: int):
        for i in range(n):
            dst[i] = f(a[i], b[i])

    return kernel


#########################################
###### PRIMITIVES #######################
#########################################


def unit(value, dtype=None):
    """
    Wrap a host value as a Scalar (Vector of length 1).

    Args:
        value: Python number, a sequence for a width > 1 element, or a Scalar
        dtype: Taichi dtype. Inferred by numpy when omitted; a Scalar is cast to it
    """
    if isinstance(value, Vector):
        return value if dtype is None else as_vector(value, dtype)
    if isinstance(value, (list, tuple)):
        return vector([list(value)], dtype)
    return vector([value], dtype)


def the(scalar):
    """Read the single element of a Scalar back to the host."""
    return scalar.field[0]


def index(v, i):
    """Read element i of a Vector back to the host."""
    return v[i]


def shape(v):
    """Length of a Vector."""
    return v.n


def constant(n, value, dtype, width=1):
    """Vector of n copies of a host constant."""
    return Vector(n, dtype, width).fill(value)


def replicate(n, scalar):
    """
    Broadcast a Scalar to a Vector of length n.

    Args:
        n (int): Target length
        scalar: Scalar Vector (see unit())

    Returns:
        Vector with the scalar's dtype and width
    """
    out = Vector(n, scalar.dtype, scalar.width)
    if n > 0:
        broadcast(scalar.field, out.field, n)
    return out


def iota(n, dtype=None):
    """Index vector [0, 1, ..., n-1]."""
    out = Vector(n, cte.INDEX_DTYPE if dtype is None else dtype)
    if n > 0:
        init_arange(out.field, n)
    return out


def map(f, v, dtype=None, width=None):
    """
    Apply a unary ti.func to every element.

    Args:
        f: @ti.func of one argument
        v: Input Vector
        dtype: Output dtype. Defaults to v's dtype
        width: Output element width. Defaults to v's width

    Returns:
        Vector of length len(v)
    """
    out = Vector(v.n, v.dtype if dtype is None else dtype, v.width if width is None else width)
    if v.n > 0:
        _map_kernel(f)(v.field, out.field, v.n)
    return out


def zip_with(f, a, b, dtype=None, width=None):
    """
    Combine two Vectors pointwise with a binary ti.func.

    The result is as long as the shorter input (shape intersection).

    Args:
        f: @ti.func of two arguments
        a, b: Input Vectors
        dtype: Output dtype, a (fst, snd) tuple for pairs. Defaults to a's dtype
        width: Output element width. Defaults to a's width

    Returns:
        Vector of length min(len(a), len(b))
    """
    n = min(a.n, b.n)
    out = Vector(n, a.dtype if dtype is None else dtype, a.width if width is None else width)
    if n > 0:
        _zip_with_kernel(f)(a.field, b.field, out.field, n)
    return out


def cast(v, dtype):
    """Convert every element to dtype."""
    return map(identity, v, dtype=dtype)


def copy(v):
    """Independent copy of a Vector."""
    out = Vector(v.n, v.dtype, v.width)
    if v.n > 0:
        copy_prefix(v.field, out.field, v.n)
    return out
