"""Squared Euclidean distance, centroids and nearest-codeword search."""
from __future__ import annotations
from typing import Callable, Sequence

import numpy as np

from ..errors import EmptyClusterError

# (blocks [n, vh, vw], codewords [k, vh, vw]) -> labels [n]
Searcher = Callable[[np.ndarray, np.ndarray], np.ndarray]


def distance(a: np.ndarray, b: np.ndarray) -> float:
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"block shapes differ: {a.shape} vs {b.shape}")
    return float(((a - b) ** 2).sum())


def centroid(blocks: Sequence[np.ndarray] | np.ndarray) -> np.ndarray:
    if len(blocks) == 0:
        raise EmptyClusterError("centroid of an empty cluster")
    arr = np.asarray(blocks, dtype=np.float64)
    return arr.mean(axis=0).astype(np.float32)


def nearest(blocks: np.ndarray, codewords: np.ndarray) -> np.ndarray:
    """
    Linear scan: index of the closest codeword for every block.

    Ties go to the codeword that comes first in the codebook.
    """
    n, k = len(blocks), len(codewords)
    if k == 0:
        raise ValueError("nearest() needs at least one codeword")
    flat = np.asarray(blocks, dtype=np.float64).reshape(n, -1)
    cws  = np.asarray(codewords, dtype=np.float64).reshape(k, -1)
    if flat.shape[1] != cws.shape[1]:
        raise ValueError(f"block size {flat.shape[1]} != codeword size {cws.shape[1]}")

    dist = np.empty((n, k), np.float64)
    for j in range(k):
        dist[:, j] = ((flat - cws[j]) ** 2).sum(axis=1)
    # argmin returns the first minimum
    return dist.argmin(axis=1).astype(np.int64)
