"""Cell preparation: clean, crop and normalize a character sample.

Character samples arrive at arbitrary sizes with arbitrary margins. Before
tracing they are binarized to pure black on white, cropped to the ink plus a
small padding and scaled onto a fixed square canvas so every glyph is traced
at the same resolution.
"""

import numpy as np
from PIL import Image

from handfont.core.binarizer import binarize
from handfont.domain import Bitmap, PixelBuffer


def find_bounding_box(bitmap: Bitmap) -> tuple[int, int, int, int] | None:
    """Bounding box of the foreground pixels.

    Returns:
        (x, y, width, height), or None if the bitmap has no foreground
    """
    if bitmap.width == 0 or bitmap.height == 0:
        return None

    grid = np.frombuffer(bitmap.bits, dtype=np.uint8).reshape(bitmap.height, bitmap.width)
    ys, xs = np.nonzero(grid)
    if xs.size == 0:
        return None

    min_x, max_x = int(xs.min()), int(xs.max())
    min_y, max_y = int(ys.min()), int(ys.max())
    return (min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)


def bitmap_to_buffer(bitmap: Bitmap) -> PixelBuffer:
    """Render a bitmap as opaque black-on-white RGBA."""
    grid = np.frombuffer(bitmap.bits, dtype=np.uint8).reshape(bitmap.height, bitmap.width)
    gray = np.where(grid == 1, 0, 255).astype(np.uint8)
    rgba = np.empty((bitmap.height, bitmap.width, 4), dtype=np.uint8)
    rgba[..., 0] = gray
    rgba[..., 1] = gray
    rgba[..., 2] = gray
    rgba[..., 3] = 255
    return PixelBuffer(width=bitmap.width, height=bitmap.height, data=rgba.tobytes())


def crop_to_content(
    buffer: PixelBuffer,
    padding: int = 3,
    threshold: int | None = None,
) -> PixelBuffer | None:
    """Binarize and crop a buffer to its ink plus ``padding`` pixels.

    Returns:
        The cleaned black-on-white crop, or None if there is no ink
    """
    bitmap = binarize(buffer, threshold)
    bbox = find_bounding_box(bitmap)
    if bbox is None:
        return None

    x, y, w, h = bbox
    left = max(0, x - padding)
    top = max(0, y - padding)
    right = min(buffer.width, x + w + padding)
    bottom = min(buffer.height, y + h + padding)

    return bitmap_to_buffer(bitmap).crop(left, top, right - left, bottom - top)


def normalize_cell(buffer: PixelBuffer, size: int) -> PixelBuffer:
    """Scale a cropped cell onto a white ``size`` x ``size`` canvas.

    The aspect ratio is preserved. The content is left-aligned so its
    horizontal position maps to a small left side bearing, and centered
    vertically.
    """
    scale = size / max(buffer.width, buffer.height, 1)
    new_width = max(1, round(buffer.width * scale))
    new_height = max(1, round(buffer.height * scale))

    source = Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.data)
    scaled = source.resize((new_width, new_height), Image.Resampling.BILINEAR)

    canvas = Image.new("RGBA", (size, size), (255, 255, 255, 255))
    canvas.paste(scaled, (0, (size - new_height) // 2))

    return PixelBuffer(width=size, height=size, data=canvas.tobytes())


def prepare_cell(
    buffer: PixelBuffer,
    padding: int = 3,
    size: int | None = 200,
    threshold: int | None = None,
) -> PixelBuffer | None:
    """Clean, crop and (optionally) normalize a character sample.

    Args:
        buffer: Raw character sample
        padding: Pixels kept around the ink when cropping
        size: Target canvas size, or None to keep the crop as-is
        threshold: Fixed binarization threshold, or None for Otsu

    Returns:
        The prepared buffer, or None when the sample has no ink
    """
    cropped = crop_to_content(buffer, padding, threshold)
    if cropped is None:
        return None
    if size is None:
        return cropped
    return normalize_cell(cropped, size)
