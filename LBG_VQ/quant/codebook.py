"""Codebook: ordered codewords addressed by fixed-width binary index strings."""
from __future__ import annotations
from typing import Dict, Iterator, Tuple

import numpy as np

from ..errors import InvalidDimensions, UnknownIndexError


def index_width(n: int) -> int:
    """Bits per index for n codewords; a single codeword still gets one bit."""
    return max(1, (n - 1).bit_length())


class Codebook:

    def __init__(self, codewords: np.ndarray, bits: int | None = None):
        cws = np.asarray(codewords, dtype=np.float32)
        if cws.ndim != 3 or len(cws) == 0:
            raise InvalidDimensions(f"codewords must be [k, vh, vw] with k >= 1, got {cws.shape}")
        need = index_width(len(cws))
        if bits is None:
            bits = need
        if bits < need:
            raise ValueError(f"{bits}-bit indices cannot address {len(cws)} codewords")

        self.codewords: np.ndarray = cws
        self.bits: int             = int(bits)
        self._index: Dict[str, int] = {self.code(i): i for i in range(len(cws))}

    @classmethod
    def from_entries(cls, entries: Dict[str, np.ndarray]) -> "Codebook":
        """Build from {index string: codeword}; indices must be exactly 0..k-1."""
        if not entries:
            raise ValueError("empty codebook")
        widths = {len(c) for c in entries}
        if len(widths) != 1:
            raise ValueError(f"index strings have mixed widths {sorted(widths)}")
        if any(not c or set(c) - {"0", "1"} for c in entries):
            raise ValueError("index strings must be binary")
        order = sorted(entries, key=lambda c: int(c, 2))
        if [int(c, 2) for c in order] != list(range(len(order))):
            raise ValueError("codebook indices are not contiguous from 0")
        return cls(np.stack([entries[c] for c in order]), bits=widths.pop())

    # ---------------------------------------------------------------- #
    def code(self, i: int) -> str:
        return format(i, f"0{self.bits}b")

    def index(self, code: str) -> int:
        try:
            return self._index[code]
        except KeyError:
            raise UnknownIndexError(code) from None

    def lookup(self, code: str) -> np.ndarray:
        return self.codewords[self.index(code)]

    def items(self) -> Iterator[Tuple[str, np.ndarray]]:
        for i, cw in enumerate(self.codewords):
            yield self.code(i), cw

    @property
    def block_shape(self) -> Tuple[int, int]:
        return int(self.codewords.shape[1]), int(self.codewords.shape[2])

    def __len__(self) -> int:
        return len(self.codewords)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Codebook):
            return NotImplemented
        return (self.bits == other.bits
                and self.codewords.shape == other.codewords.shape
                and bool(np.array_equal(self.codewords, other.codewords)))

    def __repr__(self) -> str:
        vh, vw = self.block_shape
        return f"Codebook(size={len(self)}, bits={self.bits}, block={vh}x{vw})"
