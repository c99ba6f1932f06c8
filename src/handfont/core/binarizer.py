"""Luminance thresholding: RGBA pixel buffers to binary bitmaps.

The threshold is picked with Otsu's method unless a fixed one is supplied.
All functions are pure and deterministic.
"""

import numpy as np

from handfont.domain import Bitmap, PixelBuffer

DEFAULT_THRESHOLD = 128

# ITU-R BT.601 luma weights
_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def luminance(buffer: PixelBuffer) -> np.ndarray:
    """Compute per-pixel luminance, weighted by alpha.

    ``L = (0.299 R + 0.587 G + 0.114 B) * A / 255``, rounded to the nearest
    integer so the same value is used for histogram binning and
    thresholding.

    Args:
        buffer: RGBA pixel buffer

    Returns:
        uint8 array of shape (height, width)
    """
    if buffer.width == 0 or buffer.height == 0:
        return np.zeros((buffer.height, buffer.width), dtype=np.uint8)

    rgba = np.frombuffer(buffer.data, dtype=np.uint8).reshape(buffer.height, buffer.width, 4)
    gray = rgba[..., :3].astype(np.float64) @ _LUMA_WEIGHTS
    weighted = gray * (rgba[..., 3].astype(np.float64) / 255.0)
    return np.clip(np.rint(weighted), 0, 255).astype(np.uint8)


def find_otsu_split(histogram: np.ndarray) -> int | None:
    """Pick the threshold maximizing between-class variance.

    A candidate ``t`` splits the bins into ``L < t`` and ``L >= t``. The
    lowest ``t`` reaching the maximum wins.

    Args:
        histogram: 256 pixel counts indexed by luminance

    Returns:
        Threshold in [1, 255], or None if no candidate produces two
        non-empty classes
    """
    counts = histogram.astype(np.float64)
    total = counts.sum()
    if total == 0:
        return None

    levels = np.arange(256, dtype=np.float64)
    cumulative = np.cumsum(counts)
    cumulative_sum = np.cumsum(counts * levels)

    # Candidate t = 1..255: the lower class holds bins 0..t-1
    weight_low = cumulative[:-1]
    weight_high = total - weight_low
    sum_low = cumulative_sum[:-1]
    sum_high = cumulative_sum[-1] - sum_low

    valid = (weight_low > 0) & (weight_high > 0)
    if not valid.any():
        return None

    with np.errstate(divide="ignore", invalid="ignore"):
        mean_low = np.where(valid, sum_low / weight_low, 0.0)
        mean_high = np.where(valid, sum_high / weight_high, 0.0)

    fraction_low = weight_low / total
    fraction_high = weight_high / total
    variance = np.where(
        valid,
        fraction_low * fraction_high * (mean_low - mean_high) ** 2,
        -1.0,
    )

    # argmax returns the first maximum, i.e. the lowest threshold on ties
    return int(np.argmax(variance)) + 1


def otsu_threshold(buffer: PixelBuffer) -> int:
    """Compute Otsu's threshold for a pixel buffer, 128 for uniform input."""
    histogram = np.bincount(luminance(buffer).ravel(), minlength=256)
    split = find_otsu_split(histogram)
    return DEFAULT_THRESHOLD if split is None else split


def binarize(buffer: PixelBuffer, threshold: int | None = None) -> Bitmap:
    """Convert a pixel buffer to a bitmap.

    A pixel is foreground iff its luminance is below the threshold. A
    uniform image (no Otsu split) yields threshold 128 and an empty bitmap,
    whatever its luminance; a fixed threshold is always applied as given.

    Args:
        buffer: RGBA pixel buffer
        threshold: Fixed threshold, or None to use Otsu's method

    Returns:
        Bitmap carrying the threshold that was applied
    """
    lum = luminance(buffer)
    if threshold is None:
        histogram = np.bincount(lum.ravel(), minlength=256)
        threshold = find_otsu_split(histogram)
        if threshold is None:
            bits = bytes(buffer.width * buffer.height)
            return Bitmap(
                width=buffer.width, height=buffer.height, bits=bits, threshold=DEFAULT_THRESHOLD
            )

    bits = (lum < threshold).astype(np.uint8).tobytes()
    return Bitmap(width=buffer.width, height=buffer.height, bits=bits, threshold=threshold)
