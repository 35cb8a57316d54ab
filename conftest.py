import numpy as np
import pytest
import taichi as ti

import pysegscan as ps

ps.environment.initialise(ti.cpu)


@pytest.fixture(autouse=True)
def release_pooled_fields():
    """Free the fields left unused by a test so SNode trees do not pile up."""
    yield
    ps.pool.clear_pool()


@pytest.fixture
def rng():
    return np.random.default_rng(1990)


def random_segments(rng, nseg, max_len=5, p_empty=0.3):
    """Segment lengths with a share of empty segments."""
    lengths = rng.integers(1, max_len + 1, size=nseg)
    lengths[rng.random(nseg) < p_empty] = 0
    return lengths.astype(np.int32)


def split(arr, segments):
    """Host-side list of sub-arrays, one per segment."""
    bounds = np.cumsum(segments)[:-1]
    return np.split(np.asarray(arr), bounds) if len(segments) else []
