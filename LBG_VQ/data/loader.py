from pathlib import Path

import numpy as np
from PIL import Image


def load_image(src) -> np.ndarray:
    """Decode an image into a float32 intensity grid (max of R, G, B per pixel)."""
    with Image.open(src) as img:
        rgb = np.asarray(img.convert("RGB"), dtype=np.uint8)
    return rgb.max(axis=2).astype(np.float32)


def save_image(grid: np.ndarray, dst, fmt: str | None = None,
               default_fmt: str = "PNG") -> None:
    px = np.clip(np.asarray(grid, dtype=np.float32), 0, 255).astype(np.uint8)
    img = Image.fromarray(np.repeat(px[:, :, None], 3, axis=2))

    if fmt is None and (not isinstance(dst, (str, Path)) or not Path(dst).suffix):
        fmt = default_fmt
    img.save(dst, format=fmt)
