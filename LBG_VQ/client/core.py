#!/usr/bin/env python
# -*- coding: utf-8 -*-

from __future__ import annotations
import io
import math
from typing import Tuple

import numpy as np
from loguru import logger
from sklearn.metrics import mean_squared_error

from ..config import QuantCfg
from ..data.loader import load_image, save_image
from ..data.split import as_grid
from ..quant import codec
from ..quant.vq import compress, decompress


def psnr(mse: float, peak: float = 255.0) -> float:
    return float("inf") if mse == 0 else 10 * math.log10(peak ** 2 / mse)


def report(source: np.ndarray, index_grid: np.ndarray, codebook,
           recon: np.ndarray, payload: int) -> dict:
    """Size and distortion figures for one compressed image."""
    h, w = source.shape
    ref = source[: recon.shape[0], : recon.shape[1]]
    mse = float(mean_squared_error(ref.ravel(), recon.ravel()))
    return {
        "source"        : (h, w),
        "cropped"       : tuple(int(x) for x in recon.shape),
        "blocks"        : int(index_grid.size),
        "codewords"     : len(codebook),
        "bits_per_index": codebook.bits,
        "payload_bytes" : payload,
        "ratio"         : (h * w) / payload if payload else 0.0,
        "mse"           : mse,
        "psnr"          : psnr(mse),
    }


def _quantise(src, q: QuantCfg):
    source = as_grid(load_image(src))
    idx, cb = compress(source, q.block_height, q.block_width, q.n_vectors,
                       max_iterations=q.max_iterations)
    return source, idx, cb, decompress(idx, cb, q.block_height, q.block_width)


def compress_image(src, q: QuantCfg) -> Tuple[bytes, dict]:
    """Image file (path or binary file object) -> compressed stream bytes + report."""
    source, idx, cb, recon = _quantise(src, q)
    buf = io.BytesIO()
    n = codec.dump(buf, idx, cb, q.block_height, q.block_width)
    return buf.getvalue(), report(source, idx, cb, recon, n)


def compress_file(image_path, out_path, q: QuantCfg) -> dict:
    source, idx, cb, recon = _quantise(image_path, q)
    n = codec.write(out_path, idx, cb, q.block_height, q.block_width)
    stats = report(source, idx, cb, recon, n)
    logger.info("{} -> {} ({} bytes, ratio {:.2f}:1, PSNR {:.2f} dB)",
                image_path, out_path, stats["payload_bytes"], stats["ratio"], stats["psnr"])
    return stats


def decompress_stream(fp) -> np.ndarray:
    grid, cb, vh, vw = codec.load(fp)
    return decompress(grid, cb, vh, vw)


def decompress_file(bin_path, out_path, fmt: str | None = None,
                    default_fmt: str = "PNG") -> Tuple[int, int]:
    grid, cb, vh, vw = codec.read(bin_path)
    recon = decompress(grid, cb, vh, vw)
    save_image(recon, out_path, fmt, default_fmt=default_fmt)
    logger.info("{} -> {} ({}x{})", bin_path, out_path, *recon.shape)
    return tuple(recon.shape)
