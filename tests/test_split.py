import numpy as np
import pytest

from LBG_VQ.data.split import crop, merge_blocks, split_blocks
from LBG_VQ.errors import InvalidDimensions


def test_blocks_row_major():
    g = np.arange(16, dtype=np.float32).reshape(4, 4)
    blocks, shape = split_blocks(g, 2, 2)
    assert shape == (2, 2)
    assert blocks.shape == (4, 2, 2)
    assert np.array_equal(blocks[0], [[0, 1], [4, 5]])
    assert np.array_equal(blocks[1], [[2, 3], [6, 7]])
    assert np.array_equal(blocks[2], [[8, 9], [12, 13]])
    assert np.array_equal(merge_blocks(blocks, *shape), g)


def test_blocks_are_copies():
    g = np.zeros((4, 4), np.float32)
    blocks, _ = split_blocks(g, 2, 2)
    g[0, 0] = 99
    assert blocks[0, 0, 0] == 0


def test_partial_rows_and_cols_dropped():
    g = np.arange(35, dtype=np.float32).reshape(5, 7)
    blocks, shape = split_blocks(g, 2, 3)
    assert shape == (2, 2)
    assert np.array_equal(merge_blocks(blocks, *shape), g[:4, :6])


@pytest.mark.parametrize("vh,vw", [(0, 2), (2, -1), (5, 2), (2, 9)])
def test_invalid_block_size(vh, vw):
    with pytest.raises(InvalidDimensions):
        split_blocks(np.zeros((4, 8)), vh, vw)


def test_non_2d_grid():
    with pytest.raises(InvalidDimensions):
        split_blocks(np.zeros(8), 1, 1)
    with pytest.raises(InvalidDimensions):
        crop(np.zeros((2, 2)), 3, 1)
