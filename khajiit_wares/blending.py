import numpy as np

from PIL import Image

Region = tuple[slice, slice]


def clip_region(
    shape: tuple[int, ...],
    x: int,
    y: int,
    height: int,
    width: int,
) -> tuple[Region, Region] | None:
    """Clip a ``height`` x ``width`` patch placed at (x, y) to a canvas.

    Returns ``(canvas_region, patch_region)`` or ``None`` when nothing of the
    patch lands on the canvas.
    """
    canvas_h, canvas_w = shape[:2]
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + width, canvas_w), min(y + height, canvas_h)
    if x0 >= x1 or y0 >= y1:
        return None
    return (
        (slice(y0, y1), slice(x0, x1)),
        (slice(y0 - y, y1 - y), slice(x0 - x, x1 - x)),
    )


def source_over(dst: np.ndarray, src_rgb: np.ndarray, src_alpha: np.ndarray) -> None:
    """Blend ``src`` over ``dst`` in place (straight alpha, floats in [0, 1]).

    ``dst`` is an (h, w, 4) view, ``src_rgb`` broadcasts to (h, w, 3) and
    ``src_alpha`` is (h, w, 1).
    """
    dst_alpha = dst[..., 3:4]
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    rgb = src_rgb * src_alpha + dst[..., :3] * dst_alpha * (1.0 - src_alpha)
    np.divide(rgb, out_alpha, out=rgb, where=out_alpha > 0)
    dst[..., :3] = rgb
    dst[..., 3:4] = out_alpha


def blend_color(
    canvas: np.ndarray,
    x: int,
    y: int,
    coverage: np.ndarray,
    color: np.ndarray,
) -> None:
    """Paint ``color`` at (x, y) using ``coverage`` as alpha; off-canvas parts are dropped."""
    clipped = clip_region(canvas.shape, x, y, *coverage.shape)
    if clipped is None:
        return
    canvas_region, patch_region = clipped
    source_over(canvas[canvas_region], color, coverage[patch_region][..., None])


def to_array(image: Image.Image) -> np.ndarray:
    return np.asarray(image.convert("RGBA"), dtype=np.float32) / 255.0


def to_image(array: np.ndarray) -> Image.Image:
    pixels = np.rint(np.clip(array, 0.0, 1.0) * 255.0).astype(np.uint8)
    return Image.fromarray(pixels)
