#!/usr/bin/env python3
import numpy as np
import pytest
import taichi as ti

import pysegscan as ps
from pysegscan.errors import InvalidSegmentError, ShapeMismatchError
from pysegscan.primitives import operators as ops
from pysegscan.segmented import segment_index, ends

from conftest import random_segments, split


ARR = [1, 2, 3, 4, 5, 6]
SEGMENTS = [2, 3, 1]

NUMPY_OPS = {
    "add": (ops.add, np.add, 0),
    "maximum": (ops.maximum, np.maximum, -10**9),
    "minimum": (ops.minimum, np.minimum, 10**9),
}


def reference_scans(ufunc, identity, arr, segments):
    """Host segmented scans: (inclusive left, exclusive left, inclusive right, exclusive right, sums)"""
    inc_l, exc_l, inc_r, exc_r, sums = [], [], [], [], []
    for piece in split(arr, segments):
        if piece.size == 0:
            sums.append(identity)
            continue
        left = ufunc.accumulate(piece)
        right = ufunc.accumulate(piece[::-1])[::-1]
        inc_l.append(left)
        exc_l.append(np.concatenate([[identity], ufunc(identity, left[:-1])]))
        inc_r.append(right)
        exc_r.append(np.concatenate([ufunc(right[1:], identity), [identity]]))
        sums.append(ufunc(identity, left[-1]))

    def flat(parts):
        return np.concatenate(parts) if parts else np.zeros(0, dtype=np.int64)

    return flat(inc_l), flat(exc_l), flat(inc_r), flat(exc_r), np.array(sums)


def test_left_scans_worked_example():
    np.testing.assert_array_equal(ps.scanl1_seg(ops.add, ARR, SEGMENTS).to_numpy(), [1, 3, 3, 7, 12, 6])
    np.testing.assert_array_equal(ps.scanl_seg(ops.add, 0, ARR, SEGMENTS).to_numpy(), [0, 1, 0, 3, 7, 0])

    scans, sums = ps.scanl_seg_sums(ops.add, 0, ARR, SEGMENTS)
    np.testing.assert_array_equal(scans.to_numpy(), [0, 1, 0, 3, 7, 0])
    np.testing.assert_array_equal(sums.to_numpy(), [3, 12, 6])


def test_right_scans_worked_example():
    np.testing.assert_array_equal(ps.scanr1_seg(ops.add, ARR, SEGMENTS).to_numpy(), [3, 2, 12, 9, 5, 6])
    np.testing.assert_array_equal(ps.scanr1_seg(ops.mul, ARR, SEGMENTS).to_numpy(), [2, 2, 60, 20, 5, 6])
    np.testing.assert_array_equal(ps.scanr_seg(ops.add, 0, ARR, SEGMENTS).to_numpy(), [2, 0, 9, 5, 0, 0])

    scans, sums = ps.scanr_seg_sums(ops.add, 0, ARR, SEGMENTS)
    np.testing.assert_array_equal(scans.to_numpy(), [2, 0, 9, 5, 0, 0])
    np.testing.assert_array_equal(sums.to_numpy(), [3, 12, 6])


def test_results_keep_length_and_dtype():
    arr = ps.vector(np.array(ARR, dtype=np.int32))
    for out in (ps.scanl1_seg(ops.add, arr, SEGMENTS), ps.scanl_seg(ops.add, 0, arr, SEGMENTS),
                ps.scanr_seg(ops.add, 0, arr, SEGMENTS)):
        assert len(out) == len(arr)
        assert out.dtype == ti.i32
        assert out.width == 1


def test_single_segment_matches_flat_scan():
    data = np.array([3, 1, 7, 0, 4, 1, 6, 3], dtype=np.int32)
    np.testing.assert_array_equal(ps.scanl1_seg(ops.add, data, [8]).to_numpy(), np.cumsum(data))
    np.testing.assert_array_equal(ps.scanl_seg(ops.add, 0, data, [8]).to_numpy(),
                                  ps.prescanl(ops.add, 0, data).to_numpy())


def test_singleton_segments():
    data = np.array([5, -2, 9], dtype=np.int32)
    np.testing.assert_array_equal(ps.scanl1_seg(ops.add, data, [1, 1, 1]).to_numpy(), data)
    np.testing.assert_array_equal(ps.scanl_seg(ops.add, 0, data, [1, 1, 1]).to_numpy(), [0, 0, 0])
    np.testing.assert_array_equal(ps.scanr_seg(ops.add, 0, data, [1, 1, 1]).to_numpy(), [0, 0, 0])
    scans, sums = ps.scanr_seg_sums(ops.add, 0, data, [1, 1, 1])
    np.testing.assert_array_equal(sums.to_numpy(), data)


def test_empty_segments_everywhere():
    """Leading, interior (consecutive) and trailing empty segments"""
    data = np.array([1, 2, 3, 4], dtype=np.int64)
    segments = [0, 2, 0, 0, 2, 0]

    np.testing.assert_array_equal(ps.scanl1_seg(ops.add, data, segments).to_numpy(), [1, 3, 3, 7])
    np.testing.assert_array_equal(ps.scanr1_seg(ops.add, data, segments).to_numpy(), [3, 2, 7, 4])
    np.testing.assert_array_equal(ps.scanl_seg(ops.add, 0, data, segments).to_numpy(), [0, 1, 0, 3])
    np.testing.assert_array_equal(ps.scanr_seg(ops.add, 0, data, segments).to_numpy(), [2, 0, 4, 0])

    scans, sums = ps.scanl_seg_sums(ops.add, 0, data, segments)
    np.testing.assert_array_equal(scans.to_numpy(), [0, 1, 0, 3])
    np.testing.assert_array_equal(sums.to_numpy(), [0, 3, 0, 0, 7, 0])

    scans, sums = ps.scanr_seg_sums(ops.add, 0, data, segments)
    np.testing.assert_array_equal(scans.to_numpy(), [2, 0, 4, 0])
    np.testing.assert_array_equal(sums.to_numpy(), [0, 3, 0, 0, 7, 0])


def test_empty_segment_totals_are_the_identity():
    data = np.array([4, 9], dtype=np.int64)
    _, sums = ps.scanl_seg_sums(ops.maximum, -100, data, [0, 1, 0, 1, 0])
    np.testing.assert_array_equal(sums.to_numpy(), [-100, 4, -100, 9, -100])


def test_all_segments_empty():
    empty = np.zeros(0, dtype=np.int32)
    segments = [0, 0, 0]
    assert len(ps.scanl1_seg(ops.add, empty, segments)) == 0
    assert len(ps.scanr_seg(ops.add, 0, empty, segments)) == 0

    scans, sums = ps.scanl_seg_sums(ops.add, 7, empty, segments)
    assert len(scans) == 0
    np.testing.assert_array_equal(sums.to_numpy(), [7, 7, 7])


def test_no_segments_at_all():
    empty = np.zeros(0, dtype=np.int32)
    scans, sums = ps.scanr_seg_sums(ops.add, 0, empty, np.zeros(0, dtype=np.int32))
    assert len(scans) == 0
    assert len(sums) == 0


@pytest.mark.parametrize("name", sorted(NUMPY_OPS))
@pytest.mark.parametrize("nseg", [1, 4, 17, 60])
def test_against_host_reference(name, nseg, rng):
    op, ufunc, identity = NUMPY_OPS[name]
    segments = random_segments(rng, nseg)
    data = rng.integers(-50, 50, size=int(segments.sum())).astype(np.int64)
    inc_l, exc_l, inc_r, exc_r, sums = reference_scans(ufunc, identity, data, segments)

    np.testing.assert_array_equal(ps.scanl1_seg(op, data, segments).to_numpy(), inc_l)
    np.testing.assert_array_equal(ps.scanr1_seg(op, data, segments).to_numpy(), inc_r)
    np.testing.assert_array_equal(ps.scanl_seg(op, identity, data, segments).to_numpy(), exc_l)
    np.testing.assert_array_equal(ps.scanr_seg(op, identity, data, segments).to_numpy(), exc_r)

    scans, totals = ps.scanl_seg_sums(op, identity, data, segments)
    np.testing.assert_array_equal(scans.to_numpy(), exc_l)
    np.testing.assert_array_equal(totals.to_numpy(), sums)

    scans, totals = ps.scanr_seg_sums(op, identity, data, segments)
    np.testing.assert_array_equal(scans.to_numpy(), exc_r)
    np.testing.assert_array_equal(totals.to_numpy(), sums)


def test_float_data(rng):
    segments = random_segments(rng, 12)
    data = rng.random(int(segments.sum())).astype(np.float32)
    inc_l, exc_l, _, _, sums = reference_scans(np.add, 0.0, data, segments)

    np.testing.assert_allclose(ps.scanl1_seg(ops.add, data, segments).to_numpy(), inc_l, rtol=1e-5)
    scans, totals = ps.scanl_seg_sums(ops.add, 0.0, data, segments)
    np.testing.assert_allclose(scans.to_numpy(), exc_l, rtol=1e-5, atol=1e-6)
    np.testing.assert_allclose(totals.to_numpy(), sums, rtol=1e-5)


def test_non_commutative_operators():
    data = np.array([1, 2, 3, 4, 5, 6], dtype=np.int32)
    np.testing.assert_array_equal(ps.scanl1_seg(ops.first, data, SEGMENTS).to_numpy(), [1, 1, 3, 3, 3, 6])
    np.testing.assert_array_equal(ps.scanl1_seg(ops.last, data, SEGMENTS).to_numpy(), data)
    np.testing.assert_array_equal(ps.scanr1_seg(ops.last, data, SEGMENTS).to_numpy(), [2, 2, 5, 5, 5, 6])
    np.testing.assert_array_equal(ps.scanr1_seg(ops.first, data, SEGMENTS).to_numpy(), data)


def test_pre_and_post_scan_composites():
    np.testing.assert_array_equal(ps.prescanl_seg(ops.add, 0, ARR, SEGMENTS).to_numpy(), [0, 1, 0, 3, 7, 0])
    np.testing.assert_array_equal(ps.postscanl_seg(ops.add, 10, ARR, SEGMENTS).to_numpy(), [11, 13, 13, 17, 22, 16])
    np.testing.assert_array_equal(ps.prescanr_seg(ops.add, 0, ARR, SEGMENTS).to_numpy(), [2, 0, 9, 5, 0, 0])
    np.testing.assert_array_equal(ps.postscanr_seg(ops.add, 10, ARR, SEGMENTS).to_numpy(), [13, 12, 22, 19, 15, 16])


def test_segmented_scans_reject_pairs():
    pairs = ps.zip([1, 2], [3, 4])
    with pytest.raises(ShapeMismatchError):
        ps.scanl1_seg(ops.add, pairs, [2])


def test_segment_descriptors():
    np.testing.assert_array_equal(ps.offsets(SEGMENTS).to_numpy(), [0, 2, 5])
    np.testing.assert_array_equal(ends(SEGMENTS).to_numpy(), [2, 5, 6])
    np.testing.assert_array_equal(segment_index(SEGMENTS, 6).to_numpy(), [0, 0, 1, 1, 1, 2])
    np.testing.assert_array_equal(segment_index([0, 2, 0, 1], 3).to_numpy(), [1, 1, 3])
    np.testing.assert_array_equal(segment_index([0, 0, 1, 0], 1).to_numpy(), [2])


def test_check_segments():
    ps.check_segments(ARR, SEGMENTS)
    ps.check_segments([], [0, 0])
    with pytest.raises(InvalidSegmentError):
        ps.check_segments(ARR, [2, 3])
    with pytest.raises(InvalidSegmentError):
        ps.check_segments(ARR, [4, -1, 3])


def test_unsigned_data_above_signed_range():
    data = np.array([3_000_000_000, 1, 2, 4_000_000_000], dtype=np.uint32)
    out = ps.scanl1_seg(ops.maximum, data, [2, 2])
    assert out.dtype == ti.u32
    np.testing.assert_array_equal(out.to_numpy(), [3_000_000_000, 3_000_000_000, 2, 4_000_000_000])
    np.testing.assert_array_equal(ps.scanr1_seg(ops.maximum, data, [2, 2]).to_numpy(),
                                  [3_000_000_000, 1, 4_000_000_000, 4_000_000_000])

    big = np.array([2**63 + 5, 3, 2**64 - 1], dtype=np.uint64)
    scans, sums = ps.scanl_seg_sums(ops.maximum, 0, big, [2, 1])
    np.testing.assert_array_equal(scans.to_numpy(), np.array([0, 2**63 + 5, 0], dtype=np.uint64))
    np.testing.assert_array_equal(sums.to_numpy(), np.array([2**63 + 5, 2**64 - 1], dtype=np.uint64))


def test_identity_scalar_is_cast_to_the_data_dtype():
    data = np.array([0.5, 0.25, 1.5], dtype=np.float32)
    seed = ps.primitives.unit(0, ti.i64)

    scans, sums = ps.scanl_seg_sums(ops.add, seed, data, [3])
    assert scans.dtype == ti.f32
    np.testing.assert_allclose(scans.to_numpy(), [0.0, 0.5, 0.75])
    np.testing.assert_allclose(sums.to_numpy(), [2.25])

    np.testing.assert_allclose(ps.scanr_seg(ops.add, seed, data, [2, 1]).to_numpy(), [0.25, 0.0, 0.0])
    np.testing.assert_allclose(ps.postscanl_seg(ops.add, seed, data, [2, 1]).to_numpy(), [0.5, 0.75, 1.5])
