import numpy as np
import pytest

from LBG_VQ.errors import EmptyClusterError
from LBG_VQ.quant.distance import centroid, distance, nearest


def test_distance_is_squared_and_symmetric():
    rng = np.random.default_rng(3)
    a = rng.uniform(0, 255, (4, 4)).astype(np.float32)
    b = rng.uniform(0, 255, (4, 4)).astype(np.float32)
    assert distance(a, b) == distance(b, a)
    assert distance(a, a) == 0
    assert distance(np.zeros((1, 2)), np.array([[3.0, 4.0]])) == 25.0


def test_distance_shape_mismatch():
    with pytest.raises(ValueError):
        distance(np.zeros((2, 2)), np.zeros((2, 3)))


def test_centroid():
    c = centroid([np.full((2, 2), 1.0), np.full((2, 2), 4.0)])
    assert c.dtype == np.float32
    assert np.array_equal(c, np.full((2, 2), 2.5))


def test_centroid_empty():
    with pytest.raises(EmptyClusterError):
        centroid([])


def test_nearest_ties_go_to_first_codeword():
    blocks = np.array([[[0.0]], [[5.0]], [[10.0]]])
    cws = np.array([[[4.0]], [[6.0]], [[10.0]]])
    assert nearest(blocks, cws).tolist() == [0, 0, 2]
