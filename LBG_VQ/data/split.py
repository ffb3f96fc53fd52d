from __future__ import annotations
from typing import Tuple

import numpy as np

from ..errors import InvalidDimensions


def as_grid(samples) -> np.ndarray:
    grid = np.asarray(samples, dtype=np.float32)
    if grid.ndim != 2 or grid.size == 0:
        raise InvalidDimensions(f"expected a non-empty 2-D sample grid, got shape {grid.shape}")
    return grid


def crop(grid: np.ndarray, vh: int, vw: int) -> np.ndarray:
    """Drop the bottom rows / right columns that do not fill a whole block."""
    if vh <= 0 or vw <= 0:
        raise InvalidDimensions(f"block size must be positive, got {vh}x{vw}")
    h, w = grid.shape
    h, w = h - h % vh, w - w % vw
    if h == 0 or w == 0:
        raise InvalidDimensions(
            f"block {vh}x{vw} does not fit in a {grid.shape[0]}x{grid.shape[1]} grid")
    return grid[:h, :w]


def split_blocks(samples, vh: int, vw: int) -> Tuple[np.ndarray, Tuple[int, int]]:
    """
    Slice the grid into non-overlapping vh x vw blocks.

    Returns (blocks, (rows, cols)) where blocks has shape [rows*cols, vh, vw],
    ordered row-major over block positions.  Blocks are copies of the grid.
    """
    grid = crop(as_grid(samples), vh, vw)
    rows, cols = grid.shape[0] // vh, grid.shape[1] // vw
    blocks = (grid.reshape(rows, vh, cols, vw)
                  .transpose(0, 2, 1, 3)
                  .reshape(-1, vh, vw)
                  .copy())
    return blocks, (rows, cols)


def merge_blocks(blocks: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """Inverse of split_blocks: lay [rows*cols, vh, vw] blocks back into a grid."""
    _, vh, vw = blocks.shape
    return (blocks.reshape(rows, cols, vh, vw)
                  .transpose(0, 2, 1, 3)
                  .reshape(rows * vh, cols * vw))
