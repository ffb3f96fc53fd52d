#!/usr/bin/env python
# -*- coding: utf-8 -*-

from __future__ import annotations
import io
from dataclasses import asdict, replace

from flask import Flask, jsonify, request, send_file
from loguru import logger

from ..config import MainCfg
from ..data.loader import save_image
from ..errors import VQError
from ..client.core import compress_image, decompress_stream

CFG = MainCfg()
app = Flask(__name__)


def _form_int(name: str, default: int) -> int:
    raw = request.form.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"form field {name!r} must be an integer, got {raw!r}") from None


def _upload(field: str):
    f = request.files.get(field)
    if f is None:
        raise ValueError(f"missing file field {field!r}")
    return f.stream


@app.errorhandler(VQError)
@app.errorhandler(ValueError)
@app.errorhandler(OSError)
def bad_request(e):
    logger.warning("{} {}: {}", request.method, request.path, e)
    return jsonify({"ok": False, "error": str(e)}), 400


@app.route("/params", methods=["GET"])
def params():
    return jsonify(asdict(CFG.quant))


@app.route("/compress", methods=["POST"])
def compress():
    q = CFG.quant
    q = replace(
        q,
        block_height=_form_int("block_height", q.block_height),
        block_width=_form_int("block_width", q.block_width),
        n_vectors=_form_int("n_vectors", q.n_vectors),
        max_iterations=_form_int("max_iterations", q.max_iterations),
    )
    data, stats = compress_image(_upload("image"), q)
    logger.info("compressed {}x{} image into {} bytes", *stats["source"], len(data))

    resp = send_file(io.BytesIO(data), mimetype="application/octet-stream",
                     download_name="compressed.bin")
    resp.headers["X-Codewords"] = str(stats["codewords"])
    resp.headers["X-PSNR"] = f"{stats['psnr']:.4f}"
    return resp


@app.route("/decompress", methods=["POST"])
def decompress():
    recon = decompress_stream(_upload("data"))

    buf = io.BytesIO()
    save_image(recon, buf, "PNG")
    buf.seek(0)
    return send_file(buf, mimetype="image/png", download_name="reconstructed.png")


if __name__ == "__main__":
    from ..utils.logging import init_logger

    init_logger(CFG.log_level)
    app.run(CFG.server.host, CFG.server.port, threaded=True)
