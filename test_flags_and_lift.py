#!/usr/bin/env python3
import numpy as np
import pytest
import taichi as ti

import pysegscan as ps
from pysegscan.primitives import Vector
from pysegscan.primitives import operators as ops

from conftest import random_segments


def lifted_host(op, a, b, reverse):
    """(flag, value) tuples combined on the host"""
    flag = max(a[0], b[0])
    if reverse:
        value = a[1] if a[0] else op(a[1], b[1])
    else:
        value = b[1] if b[0] else op(a[1], b[1])
    return flag, value


HOST_OPS = {
    "add": (ops.add, lambda a, b: a + b),
    "last": (ops.last, lambda a, b: b),
    "first": (ops.first, lambda a, b: a),
}


def apply_lifted(lifted, a, b, c):
    """Evaluate (a.b).c and a.(b.c) on the device, element by element"""
    lhs = Vector(a.n, a.dtype)
    rhs = Vector(a.n, a.dtype)
    direct = Vector(a.n, a.dtype)

    @ti.kernel
    def run(a: ti.template(), b: ti.template(), c: ti.template(), lhs: ti.template(),
            rhs: ti.template(), direct: ti.template(), n: int):
        for i in range(n):
            lhs[i] = lifted(lifted(a[i], b[i]), c[i])
            rhs[i] = lifted(a[i], lifted(b[i], c[i]))
            direct[i] = lifted(a[i], b[i])

    run(a.field, b.field, c.field, lhs.field, rhs.field, direct.field, a.n)
    return host_pairs(lhs), host_pairs(rhs), host_pairs(direct)


def random_pairs(rng, n):
    """Host (flag, value) tuples and the matching pair Vector"""
    flags = rng.integers(0, 2, size=n).astype(np.int32)
    values = rng.integers(-20, 20, size=n).astype(np.int64)
    return list(zip(flags.tolist(), values.tolist())), ps.zip(flags, values)


def host_pairs(pairs):
    host = pairs.to_numpy()
    return np.stack([host["fst"], host["snd"]], axis=1)


def test_head_flags_worked_example():
    np.testing.assert_array_equal(ps.head_flags([2, 3, 1]).to_numpy(), [1, 0, 1, 0, 0, 1])
    np.testing.assert_array_equal(ps.tail_flags([2, 3, 1]).to_numpy(), [0, 1, 0, 0, 1, 1])


def test_flags_with_empty_segments():
    segments = [0, 2, 0, 1, 0]
    np.testing.assert_array_equal(ps.head_flags(segments).to_numpy(), [1, 0, 1])
    np.testing.assert_array_equal(ps.tail_flags(segments).to_numpy(), [0, 1, 1])

    assert len(ps.head_flags([0, 0])) == 0
    assert len(ps.tail_flags([])) == 0


@pytest.mark.parametrize("nseg", [1, 7, 40])
def test_one_flag_per_nonempty_segment(nseg, rng):
    segments = random_segments(rng, nseg)
    heads = ps.head_flags(segments).to_numpy()
    tails = ps.tail_flags(segments).to_numpy()
    assert heads.size == tails.size == segments.sum()

    offsets = np.cumsum(segments) - segments
    nonempty = segments > 0
    expected_heads = np.zeros(segments.sum(), dtype=np.int32)
    expected_heads[offsets[nonempty]] = 1
    expected_tails = np.zeros(segments.sum(), dtype=np.int32)
    expected_tails[(offsets + segments - 1)[nonempty]] = 1

    np.testing.assert_array_equal(heads, expected_heads)
    np.testing.assert_array_equal(tails, expected_tails)
    assert heads.sum() == tails.sum() == nonempty.sum()


def test_lifting_is_cached():
    assert ps.lift_segmented(ops.add) is ps.lift_segmented(ops.add)
    assert ps.lift_segmented(ops.add) is not ps.lift_segmented(ops.add, True)


@pytest.mark.parametrize("reverse", [False, True])
@pytest.mark.parametrize("name", sorted(HOST_OPS))
def test_lifted_operator(name, reverse, rng):
    """Matches the host definition and stays associative"""
    op, host_op = HOST_OPS[name]
    (a, a_dev), (b, b_dev), (c, c_dev) = (random_pairs(rng, 64) for _ in range(3))
    lhs, rhs, direct = apply_lifted(ps.lift_segmented(op, reverse), a_dev, b_dev, c_dev)

    expected = np.array([lifted_host(host_op, x, y, reverse) for x, y in zip(a, b)])
    np.testing.assert_array_equal(direct, expected)
    np.testing.assert_array_equal(lhs, rhs)


def test_lifted_operator_is_not_commutative():
    a = ps.zip(np.array([1], dtype=np.int32), np.array([5], dtype=np.int64))
    b = ps.zip(np.array([0], dtype=np.int32), np.array([7], dtype=np.int64))
    lifted = ps.lift_segmented(ops.add)
    _, _, ab = apply_lifted(lifted, a, b, b)
    _, _, ba = apply_lifted(lifted, b, a, a)
    np.testing.assert_array_equal(ab, [[1, 12]])
    np.testing.assert_array_equal(ba, [[1, 5]])


def test_lifted_operator_keeps_member_dtypes():
    """Flags stay integers and unsigned values stay unsigned through the combine"""
    a = ps.zip(np.array([1], dtype=np.int32), np.array([3_000_000_000], dtype=np.uint32))
    b = ps.zip(np.array([0], dtype=np.int32), np.array([1], dtype=np.uint32))
    _, _, ab = apply_lifted(ps.lift_segmented(ops.maximum), a, b, b)
    np.testing.assert_array_equal(ab, [[1, 3_000_000_000]])
