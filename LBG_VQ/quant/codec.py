#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Binary container for one compressed image (all fields big-endian):

    i32 rows | i32 cols | rows*cols x UTF index | i32 vh | i32 vw
    then until EOF:  UTF index | vh*vw x f32 codeword (row-major)

UTF = u16 byte length + modified UTF-8 bytes.
"""
from __future__ import annotations
import struct
from typing import BinaryIO, Dict, Tuple

import numpy as np
from loguru import logger

from ..errors import CodecError, InvalidDimensions
from .codebook import Codebook

INT   = struct.Struct(">i")
SHORT = struct.Struct(">H")
FLOAT = np.dtype(">f4")
CHUNK = 1 << 16


# ───────────── modified UTF-8 ──────────────
def encode_utf(s: str) -> bytes:
    out = bytearray()
    # supplementary characters are written as two surrogates
    units = s.encode("utf-16-be", "surrogatepass")
    for k in range(0, len(units), 2):
        c = (units[k] << 8) | units[k + 1]
        if 0x01 <= c <= 0x7F:
            out.append(c)
        elif c <= 0x7FF:
            out += bytes((0xC0 | (c >> 6), 0x80 | (c & 0x3F)))
        else:
            out += bytes((0xE0 | (c >> 12), 0x80 | ((c >> 6) & 0x3F), 0x80 | (c & 0x3F)))
    if len(out) > 0xFFFF:
        raise CodecError(f"string of {len(out)} bytes does not fit a 16-bit length")
    return SHORT.pack(len(out)) + bytes(out)


def _cont(raw: bytes, i: int, n: int) -> None:
    for k in range(1, n + 1):
        if raw[i + k] & 0xC0 != 0x80:
            raise CodecError(f"bad modified UTF-8 continuation byte 0x{raw[i + k]:02x} at {i + k}")


def decode_utf(raw: bytes) -> str:
    units, i = [], 0
    try:
        while i < len(raw):
            b = raw[i]
            if b < 0x80:
                units.append(b); i += 1
            elif b & 0xE0 == 0xC0:
                _cont(raw, i, 1)
                units.append(((b & 0x1F) << 6) | (raw[i + 1] & 0x3F)); i += 2
            elif b & 0xF0 == 0xE0:
                _cont(raw, i, 2)
                units.append(((b & 0x0F) << 12) | ((raw[i + 1] & 0x3F) << 6)
                             | (raw[i + 2] & 0x3F)); i += 3
            else:
                raise CodecError(f"bad modified UTF-8 lead byte 0x{b:02x}")
    except IndexError:
        raise CodecError("modified UTF-8 sequence cut short") from None
    be = b"".join(struct.pack(">H", u) for u in units)
    return be.decode("utf-16-be", "surrogatepass")


# ───────────── stream helpers ──────────────
def _take(fp: BinaryIO, n: int, what: str) -> bytes:
    # sizes come from the header; read in chunks so memory follows the real stream
    parts, got = [], 0
    while got < n:
        buf = fp.read(min(CHUNK, n - got))
        if not buf:
            break
        parts.append(buf)
        got += len(buf)
    if got != n:
        raise CodecError(f"stream truncated while reading {what} "
                         f"({got} of {n} bytes)")
    return b"".join(parts)


def _read_int(fp: BinaryIO, what: str) -> int:
    return INT.unpack(_take(fp, INT.size, what))[0]


def _read_utf(fp: BinaryIO, what: str) -> str:
    n = SHORT.unpack(_take(fp, SHORT.size, what))[0]
    return decode_utf(_take(fp, n, what))


# ───────────── public API ──────────────
def dump(fp: BinaryIO, index_grid, codebook: Codebook, vh: int, vw: int) -> int:
    grid = np.asarray(index_grid, dtype=str)
    if grid.ndim != 2:
        raise InvalidDimensions(f"index grid must be 2-D, got shape {grid.shape}")
    if codebook.block_shape != (vh, vw):
        raise InvalidDimensions(
            f"codebook holds {codebook.block_shape} codewords, expected {(vh, vw)}")
    rows, cols = grid.shape

    payload = bytearray()
    payload += INT.pack(rows) + INT.pack(cols)
    for code in grid.ravel():
        payload += encode_utf(str(code))
    payload += INT.pack(vh) + INT.pack(vw)
    for code, cw in codebook.items():
        payload += encode_utf(code)
        payload += cw.astype(FLOAT).tobytes()

    fp.write(payload)
    return len(payload)


def load(fp: BinaryIO) -> Tuple[np.ndarray, Codebook, int, int]:
    rows = _read_int(fp, "index grid height")
    cols = _read_int(fp, "index grid width")
    if rows < 0 or cols < 0:
        raise CodecError(f"negative index grid size {rows}x{cols}")

    cells = [_read_utf(fp, f"index {k}") for k in range(rows * cols)]
    grid = np.array(cells, dtype=str).reshape(rows, cols)

    vh = _read_int(fp, "block height")
    vw = _read_int(fp, "block width")
    if vh <= 0 or vw <= 0:
        raise CodecError(f"invalid block size {vh}x{vw}")

    entries: Dict[str, np.ndarray] = {}
    while True:
        head = fp.read(SHORT.size)
        if not head:
            break
        if len(head) != SHORT.size:
            raise CodecError("stream truncated inside a codebook entry")
        code = decode_utf(_take(fp, SHORT.unpack(head)[0], "codebook index"))
        if code in entries:
            raise CodecError(f"duplicate codebook index {code!r}")
        raw = _take(fp, vh * vw * FLOAT.itemsize, f"codeword {code!r}")
        entries[code] = np.frombuffer(raw, dtype=FLOAT).reshape(vh, vw).astype(np.float32)

    try:
        codebook = Codebook.from_entries(entries)
    except ValueError as e:
        raise CodecError(f"malformed codebook: {e}") from e
    return grid, codebook, vh, vw


def write(path, index_grid, codebook: Codebook, vh: int, vw: int) -> int:
    with open(path, "wb") as fp:
        n = dump(fp, index_grid, codebook, vh, vw)
    logger.info("wrote {} bytes to {}", n, path)
    return n


def read(path) -> Tuple[np.ndarray, Codebook, int, int]:
    with open(path, "rb") as fp:
        grid, codebook, vh, vw = load(fp)
    logger.info("read {}x{} index grid, {} codewords from {}", *grid.shape, len(codebook), path)
    return grid, codebook, vh, vw
