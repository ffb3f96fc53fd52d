"""Linde-Buzo-Gray codebook design: binary splitting followed by Lloyd iteration."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from loguru import logger

from .distance import Searcher, centroid, nearest

MAX_ITERATIONS = 100


@dataclass
class LBGState:
    """Working data of one codebook design run."""
    blocks: np.ndarray                  # [n, vh, vw] float32, never mutated
    n_vectors: int
    max_iterations: int = MAX_ITERATIONS
    search: Searcher = nearest

    codewords: np.ndarray | None = None   # [k, vh, vw] float32
    labels: np.ndarray | None = None      # [n] codeword index per block position
    splits: int = 0
    iterations: int = 0
    converged: bool = False


def split_codewords(codewords: np.ndarray) -> np.ndarray:
    """
    Replace every codeword v by floor(v) and ceil(v), cell by cell.

    Integral cells would give identical children, so they become v-1 and v+1.
    Children keep parent order: [floor(v0), ceil(v0), floor(v1), ceil(v1), ...].
    """
    lo = np.floor(codewords)
    hi = np.ceil(codewords)
    same = lo == hi
    lo[same] -= 1
    hi[same] += 1
    return np.stack([lo, hi], axis=1).reshape(-1, *codewords.shape[1:]).astype(np.float32)


def refine(blocks: np.ndarray, codewords: np.ndarray,
           search: Searcher = nearest) -> Tuple[np.ndarray, np.ndarray]:
    """
    One Lloyd pass: assign every block to its nearest codeword, then move each
    codeword to the centroid of its cluster.  Codewords left with no blocks are
    dropped; survivors keep their relative order.

    Returns (new_codewords, labels) where labels index the *input* codewords.
    """
    labels = search(blocks, codewords)
    counts = np.bincount(labels, minlength=len(codewords))

    new = []
    for j in range(len(codewords)):
        if counts[j] == 0:
            logger.debug("codeword {} has no blocks, dropped", j)
            continue
        new.append(centroid(blocks[labels == j]))
    return np.stack(new), labels


def build_codebook(state: LBGState) -> LBGState:
    if state.n_vectors < 1:
        raise ValueError(f"n_vectors must be >= 1, got {state.n_vectors}")
    if state.max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {state.max_iterations}")

    blocks = state.blocks
    codewords = centroid(blocks)[None]

    # 1) grow by splitting until the target size is reached
    while len(codewords) < state.n_vectors:
        before = len(codewords)
        codewords, _ = refine(blocks, split_codewords(codewords), state.search)
        state.splits += 1
        logger.debug("split {}: {} -> {} codewords", state.splits, before, len(codewords))
        if len(codewords) <= before:
            logger.warning("codebook stuck at {} codewords (target {}), "
                           "not enough distinct blocks to split further",
                           len(codewords), state.n_vectors)
            break

    # 2) Lloyd iteration until the codewords stop moving
    for it in range(1, state.max_iterations + 1):
        state.iterations = it
        new, _ = refine(blocks, codewords, state.search)
        if new.shape == codewords.shape and np.array_equal(new, codewords):
            state.converged = True
            break
        codewords = new
    else:
        logger.warning("no convergence after {} iterations, keeping last codebook",
                       state.max_iterations)

    state.codewords = codewords
    state.labels = state.search(blocks, codewords)
    logger.info("codebook ready: {} codewords, {} splits, {} iterations",
                len(codewords), state.splits, state.iterations)
    return state
