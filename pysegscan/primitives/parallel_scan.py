"""
Parallel Scan Implementation

This module implements the inclusive and exclusive prefix scans of the
primitive layer for an arbitrary associative operator, using the
Hillis-Steele step-doubling scheme with ping-pong buffers. Optimized for GPU
execution with Taichi.

Algorithm Details:
    - Hillis & Steele (1986) data-parallel scan
    - ceil(log2 n) steps; at step k every element combines with the element
      2^k positions earlier (left-to-right) or later (right-to-left)
    - O(n log n) work, O(log n) depth
    - Needs no identity element, so it serves scanl1/scanr1 directly
    - Reads and writes alternate between two buffers (ping-pong), so no step
      ever reads a value written in the same step

Mathematical Operation:
    Given input array [a0, a1, ..., an-1] and associative op, scanl1 produces
    [a0, op(a0, a1), op(op(a0, a1), a2), ...]
    and scanr1 produces
    [op(a0, op(a1, ...)), ..., op(an-2, an-1), an-1]

Operand Order:
    The left argument of op is always the element (or partial result) that
    comes first in the vector. Only associativity is required; commutativity
    is never assumed, which is what lets the lifted segmented operator (not
    commutative) run through the same code.

Exclusive scans (scanl_total/scanr_total) run the inclusive scan, then shift
it by one position while folding in the seed, and also return the overall
fold as a Scalar.

Reference: Hillis, W. D., Steele, G. L. (1986). "Data parallel algorithms"

Author: PySegScan developers
"""

import functools
import logging

import taichi as ti

from .. import pool
from .vector import Vector
from .elementwise import copy_prefix

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def _scan_step_kernel(op, reverse):
    """
    Build the kernel executing one Hillis-Steele step for op.

    For stride s, left-to-right: dst[i] = op(src[i-s], src[i]) for i >= s.
    Right-to-left: dst[i] = op(src[i], src[i+s]) for i + s < n.
    Other elements are copied unchanged.
    """
    logger.debug("building %s scan step kernel for %s", "right" if reverse else "left",
                 getattr(op, "__name__", op))

    @ti.kernel
    def step(src: ti.template(), dst: ti.template(), n: int, stride: int):
        for i in range(n):
            if ti.static(reverse):
                if i + stride < n:
                    dst[i] = op(src[i], src[i + stride])
                else:
                    dst[i] = src[i]
            else:
                if i >= stride:
                    dst[i] = op(src[i - stride], src[i])
                else:
                    dst[i] = src[i]

    return step


@functools.lru_cache(maxsize=None)
def _exclusive_kernel(op, reverse):
    """
    Build the kernel turning an inclusive scan into an exclusive one.

    Left-to-right: dst[0] = seed, dst[i] = op(seed, inc[i-1]); total = op(seed, inc[n-1])
    Right-to-left: dst[n-1] = seed, dst[i] = op(inc[i+1], seed); total = op(inc[0], seed)
    """
    logger.debug("building %s exclusive scan kernel for %s", "right" if reverse else "left",
                 getattr(op, "__name__", op))

    @ti.kernel
    def shift(inc: ti.template(), seed: ti.template(), dst: ti.template(), total: ti.template(), n: int):
        for i in range(n):
            if ti.static(reverse):
                if i + 1 < n:
                    dst[i] = op(inc[i + 1], seed[0])
                else:
                    dst[i] = seed[0]
            else:
                if i > 0:
                    dst[i] = op(seed[0], inc[i - 1])
                else:
                    dst[i] = seed[0]

        if n == 0:
            total[0] = seed[0]
        else:
            if ti.static(reverse):
                total[0] = op(inc[0], seed[0])
            else:
                total[0] = op(seed[0], inc[n - 1])

    return shift


def inclusive_scan(op, v, reverse=False):
    """
    Compute a parallel inclusive scan of v with an associative operator.

    Args:
        op: Associative @ti.func of two arguments
        v: Input Vector
        reverse: Scan right-to-left when True

    Returns:
        Vector: Inclusive scan, same length, dtype and width as v

    Requirements:
        - op must be associative; the result is unspecified otherwise

    Example:
        Input:  [3, 1, 7, 0, 4, 1, 6, 3], op = add
        Output: [3, 4, 11, 11, 15, 16, 22, 25]

    Time Complexity: O(n log n) work, O(log n) depth
    Space Complexity: one pooled scratch buffer of size n
    """
    n = v.n
    out = Vector(n, v.dtype, v.width)
    if n == 0:
        return out

    # Number of doubling steps
    steps = 0
    stride = 1
    while stride < n:
        steps += 1
        stride *= 2

    step = _scan_step_kernel(op, reverse)
    with pool.temp_field(v.dtype, n, v.width) as tmp:
        # Pick the starting buffer so that the last step lands in out
        bufs = (out.field, tmp.field)
        cur = steps % 2
        copy_prefix(v.field, bufs[cur], n)

        stride = 1
        while stride < n:
            step(bufs[cur], bufs[1 - cur], n, stride)
            cur = 1 - cur
            stride *= 2

    return out


def exclusive_scan(op, seed, v, reverse=False):
    """
    Compute a parallel exclusive scan of v together with its overall fold.

    Args:
        op: Associative @ti.func of two arguments
        seed: Scalar Vector holding the initial value (usually op's identity)
        v: Input Vector
        reverse: Scan right-to-left when True

    Returns:
        tuple: (Vector exclusive scan of length len(v), Scalar total)

    Example:
        Input:  [3, 1, 7, 0], op = add, seed = 0
        Output: ([0, 3, 4, 11], [11])
    """
    inc = inclusive_scan(op, v, reverse)
    out = Vector(v.n, v.dtype, v.width)
    total = Vector(1, v.dtype, v.width)
    _exclusive_kernel(op, reverse)(inc.field, seed.field, out.field, total.field, v.n)
    return out, total


def scanl1(op, v):
    """Left-to-right inclusive scan."""
    return inclusive_scan(op, v, reverse=False)


def scanr1(op, v):
    """Right-to-left inclusive scan."""
    return inclusive_scan(op, v, reverse=True)


def scanl_total(op, seed, v):
    """Left-to-right exclusive scan and total."""
    return exclusive_scan(op, seed, v, reverse=False)


def scanr_total(op, seed, v):
    """Right-to-left exclusive scan and total."""
    return exclusive_scan(op, seed, v, reverse=True)
