from pathlib import Path

import rich
import typer

from ..config import MainCfg, QuantCfg
from ..errors import VQError
from ..utils.logging import init_logger
from .core import compress_file, decompress_file

app = typer.Typer(help="LBG vector quantisation image codec")
CFG = MainCfg()


def _fail(e: Exception) -> None:
    rich.print(f"[bold red]error:[/] {e}")
    raise typer.Exit(code=1)


@app.command()
def compress(
    image: Path,
    output: Path,
    block_height: int = CFG.quant.block_height,
    block_width: int = CFG.quant.block_width,
    codewords: int = CFG.quant.n_vectors,
    max_iterations: int = CFG.quant.max_iterations,
    log_level: str = CFG.log_level,
):
    """Compress IMAGE into the binary stream OUTPUT."""
    init_logger(log_level)
    q = QuantCfg(block_height, block_width, codewords, max_iterations)
    try:
        st = compress_file(image, output, q)
    except (VQError, OSError, ValueError) as e:
        _fail(e)

    h, w = st["source"]
    ch, cw = st["cropped"]
    rich.print(
        f"[bold green]OK[/] {h}x{w} -> {ch}x{cw}, "
        f"{st['blocks']:,} blocks, {st['codewords']} codewords "
        f"({st['bits_per_index']} bit)\n"
        f"   {st['payload_bytes']:,} bytes  ratio={st['ratio']:.2f}:1  "
        f"mse={st['mse']:.2f}  psnr={st['psnr']:.2f} dB"
    )


@app.command()
def decompress(
    input: Path,
    output: Path,
    format: str = typer.Option(None, help="image format when OUTPUT has no extension"),
    log_level: str = CFG.log_level,
):
    """Rebuild an image from the binary stream INPUT."""
    init_logger(log_level)
    try:
        h, w = decompress_file(input, output, format, default_fmt=CFG.image_format)
    except (VQError, OSError, ValueError) as e:
        _fail(e)
    rich.print(f"[bold green]OK[/] {output} ({h}x{w})")


@app.command()
def serve(
    host: str = CFG.server.host,
    port: int = CFG.server.port,
    log_level: str = CFG.log_level,
):
    """Run the HTTP compression service."""
    init_logger(log_level)
    from ..server.app import app as web

    web.run(host, port, threaded=True)


if __name__ == "__main__":
    app()
