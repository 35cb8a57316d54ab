"""
Scatter (permute) and Gather (backpermute) Primitives

Index functions are given as materialised index Vectors: permute sends
src[i] to slot index[i] of a copy of the default vector, backpermute reads
src[index[i]] into slot i of the result. Index Vectors are built beforehand
with the element-wise primitives.

Scatter is the one primitive with a genuine race. It runs in three passes:
    1. Count, with atomics, how many sources target each destination
    2. Write every destination targeted exactly once, fully in parallel
    3. Only if some destination is targeted several times, combine those
       writes in a serialised loop, in increasing source index order

A destination is combined as dst[j] = op(src[i], dst[j]), starting from the
default value. With an idempotent op (or an injective index vector) the
result does not depend on the order of pass 3 at all.

Writes to IGNORE are dropped silently. Other out-of-range indices are dropped
too, or raise IndexOutOfBoundsError when constants.CHECK_INDICES is set.

Author: PySegScan developers
"""

import functools
import logging

import taichi as ti

from .. import constants as cte
from .. import pool
from ..errors import IndexOutOfBoundsError, ShapeMismatchError
from .vector import Vector
from .elementwise import copy

logger = logging.getLogger(__name__)


@ti.kernel
def count_destinations(index: ti.template(), counts: ti.template(), stats: ti.template(), n: int, m: int):
    """
    Count writes per destination.

    Args:
        index: Destination index of each source element
        counts: Output, number of sources per destination (size >= m)
        stats: Output, stats[0] = out-of-range indices, stats[1] = colliding destinations
        n: Number of source elements
        m: Number of destination slots
    """
    stats[0] = 0
    stats[1] = 0
    for j in range(m):
        counts[j] = 0
    for i in range(n):
        j = index[i]
        if j != cte.IGNORE:
            if j >= 0 and j < m:
                ti.atomic_add(counts[j], 1)
            else:
                ti.atomic_add(stats[0], 1)
    for j in range(m):
        if counts[j] > 1:
            ti.atomic_add(stats[1], 1)


@ti.kernel
def gather(src: ti.template(), index: ti.template(), fallback: ti.template(), dst: ti.template(),
           stats: ti.template(), n: int, m: int):
    """
    dst[i] = src[index[i]], or fallback[0] when index[i] is outside [0, m).

    stats[0] receives the number of out-of-range indices other than IGNORE.
    """
    stats[0] = 0
    for i in range(n):
        j = index[i]
        if j >= 0 and j < m:
            dst[i] = src[j]
        else:
            dst[i] = fallback[0]
            if j != cte.IGNORE:
                ti.atomic_add(stats[0], 1)


@functools.lru_cache(maxsize=None)
def _scatter_kernels(op):
    """Build the parallel and the serialised scatter kernels for op."""
    logger.debug("building scatter kernels for %s", getattr(op, "__name__", op))

    @ti.kernel
    def scatter_unique(src: ti.template(), index: ti.template(), counts: ti.template(),
                       dst: ti.template(), n: int, m: int):
        for i in range(n):
            j = index[i]
            if j >= 0 and j < m:
                if counts[j] == 1:
                    dst[j] = op(src[i], dst[j])

    @ti.kernel
    def scatter_colliding(src: ti.template(), index: ti.template(), counts: ti.template(),
                          dst: ti.template(), n: int, m: int):
        ti.loop_config(serialize=True)
        for i in range(n):
            j = index[i]
            if j >= 0 and j < m:
                if counts[j] > 1:
                    dst[j] = op(src[i], dst[j])

    return scatter_unique, scatter_colliding


def _check_index_vector(index):
    if index.width != 1:
        raise ShapeMismatchError(f"Index vectors hold scalar elements, got width {index.width}")


def permute(op, default, index, src):
    """
    Scatter src into a copy of default.

    Args:
        op: @ti.func resolving writes, called as op(new, current)
        default: Vector providing the result's length and initial values
        index: Integer Vector, destination of each source element (IGNORE drops it)
        src: Source Vector

    Returns:
        Vector: same length, dtype and width as default

    Raises:
        IndexOutOfBoundsError: If CHECK_INDICES is set and an index other
            than IGNORE falls outside default
    """
    _check_index_vector(index)
    n = min(index.n, src.n)
    m = default.n
    out = copy(default)
    if n == 0:
        return out

    with pool.temp_field(cte.INDEX_DTYPE, max(m, 1)) as counts, pool.temp_field(ti.i32, 2) as stats:
        count_destinations(index.field, counts.field, stats.field, n, m)

        if cte.CHECK_INDICES:
            oob = stats.field[0]
            if oob > 0:
                raise IndexOutOfBoundsError(f"permute: {oob} index(es) outside [0, {m})")

        scatter_unique, scatter_colliding = _scatter_kernels(op)
        scatter_unique(src.field, index.field, counts.field, out.field, n, m)

        colliding = stats.field[1]
        if colliding > 0:
            logger.debug("permute: %d colliding destination(s), running serial pass", colliding)
            scatter_colliding(src.field, index.field, counts.field, out.field, n, m)

    return out


def backpermute(index, src):
    """
    Gather src at the positions listed in index.

    Args:
        index: Integer Vector, one source position per output element
        src: Source Vector

    Returns:
        Vector: length len(index), dtype and width of src. Slots whose index
        is IGNORE (or out of range, with checking off) hold zero.

    Raises:
        IndexOutOfBoundsError: If CHECK_INDICES is set and an index other
            than IGNORE falls outside src
    """
    _check_index_vector(index)
    n = index.n
    out = Vector(n, src.dtype, src.width)
    if n == 0:
        return out

    fallback = Vector(1, src.dtype, src.width).fill(0)
    with pool.temp_field(ti.i32, 2) as stats:
        gather(src.field, index.field, fallback.field, out.field, stats.field, n, src.n)
        if cte.CHECK_INDICES:
            oob = stats.field[0]
            if oob > 0:
                raise IndexOutOfBoundsError(f"backpermute: {oob} index(es) outside [0, {src.n})")

    return out
