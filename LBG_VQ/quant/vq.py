from __future__ import annotations
from typing import Tuple

import numpy as np
from loguru import logger

from ..data.split import merge_blocks, split_blocks
from ..errors import EncodingError, InvalidDimensions
from .codebook import Codebook, index_width
from .distance import Searcher, nearest
from .lbg import MAX_ITERATIONS, LBGState, build_codebook


def encode(labels: np.ndarray, shape: Tuple[int, int], codebook: Codebook) -> np.ndarray:
    """Cluster label per block position -> [rows, cols] grid of index strings."""
    rows, cols = shape
    labels = np.asarray(labels)
    if labels.shape != (rows * cols,):
        raise EncodingError(f"{labels.size} labels for a {rows}x{cols} index grid")
    bad = (labels < 0) | (labels >= len(codebook))
    if bad.any():
        pos = int(np.flatnonzero(bad)[0])
        raise EncodingError(f"block {divmod(pos, cols)} is not assigned to any codeword")

    codes = np.array([codebook.code(i) for i in range(len(codebook))])
    return codes[labels].reshape(rows, cols)


def compress(samples, block_height: int, block_width: int, n_vectors: int,
             max_iterations: int = MAX_ITERATIONS,
             search: Searcher = nearest) -> Tuple[np.ndarray, Codebook]:
    blocks, shape = split_blocks(samples, block_height, block_width)
    logger.info("{} blocks of {}x{} ({}x{} index grid)",
                len(blocks), block_height, block_width, *shape)

    state = build_codebook(LBGState(blocks, n_vectors,
                                    max_iterations=max_iterations, search=search))
    codebook = Codebook(state.codewords,
                        bits=index_width(max(n_vectors, len(state.codewords))))
    return encode(state.labels, shape, codebook), codebook


def decompress(index_grid, codebook: Codebook,
               block_height: int, block_width: int) -> np.ndarray:
    if codebook.block_shape != (block_height, block_width):
        vh, vw = codebook.block_shape
        raise InvalidDimensions(
            f"codebook holds {vh}x{vw} codewords, expected {block_height}x{block_width}")

    grid = np.asarray(index_grid, dtype=str)
    if grid.ndim != 2:
        raise InvalidDimensions(f"index grid must be 2-D, got shape {grid.shape}")
    rows, cols = grid.shape

    uniq, inv = np.unique(grid.ravel(), return_inverse=True)
    ids = np.array([codebook.index(c) for c in uniq], dtype=np.int64)
    blocks = codebook.codewords[ids[inv.ravel()]]
    return merge_blocks(blocks, rows, cols)
