"""Unit tests for luminance thresholding."""

import numpy as np
import pytest

from handfont.core.binarizer import (
    DEFAULT_THRESHOLD,
    binarize,
    luminance,
    find_otsu_split,
    otsu_threshold,
)
from handfont.domain import PixelBuffer


class TestLuminance:
    """Tests for luminance computation."""

    def test_white_and_black(self):
        """Test opaque white and black map to the extremes."""
        buffer = PixelBuffer.filled(2, 1).with_rect(1, 0, 2, 1)
        lum = luminance(buffer)
        assert lum.shape == (1, 2)
        assert lum[0, 0] == 255
        assert lum[0, 1] == 0

    def test_weights(self):
        """Test BT.601 weights for pure red."""
        buffer = PixelBuffer.filled(1, 1, (255, 0, 0, 255))
        assert luminance(buffer)[0, 0] == round(0.299 * 255)

    def test_alpha_scales_luminance(self):
        """Test translucent pixels get darker with lower alpha."""
        buffer = PixelBuffer.filled(1, 1, (255, 255, 255, 0))
        assert luminance(buffer)[0, 0] == 0

    def test_empty_buffer(self):
        """Test a zero-sized buffer gives an empty array."""
        assert luminance(PixelBuffer.filled(0, 0)).size == 0


class TestOtsu:
    """Tests for Otsu threshold selection."""

    def test_uniform_image_uses_default(self):
        """Test a single-valued histogram falls back to 128."""
        assert otsu_threshold(PixelBuffer.filled(200, 200)) == DEFAULT_THRESHOLD

    def test_uniform_dark_image_uses_default(self):
        """Test an all-black image also falls back to 128."""
        assert otsu_threshold(PixelBuffer.filled(200, 200, (0, 0, 0, 255))) == DEFAULT_THRESHOLD

    def test_no_split(self):
        """Test empty and single-valued histograms have no split."""
        assert find_otsu_split(np.zeros(256, dtype=np.int64)) is None
        histogram = np.zeros(256, dtype=np.int64)
        histogram[60] = 500
        assert find_otsu_split(histogram) is None

    def test_black_and_white_separates_classes(self):
        """Test a two-level image yields a threshold that makes black foreground."""
        histogram = np.zeros(256, dtype=np.int64)
        histogram[0] = 100
        histogram[255] = 300
        threshold = find_otsu_split(histogram)
        assert 0 < threshold <= 255
        # Lowest threshold reaching the maximum: bins 0 | 1..255
        assert threshold == 1

    def test_bimodal_threshold_between_modes(self):
        """Test the threshold falls between two clusters."""
        histogram = np.zeros(256, dtype=np.int64)
        histogram[40:50] = 10
        histogram[200:210] = 10
        threshold = find_otsu_split(histogram)
        assert 50 <= threshold <= 200


class TestBinarize:
    """Tests for binarize."""

    def test_white_image_has_no_foreground(self):
        """Test a blank page produces an empty bitmap with threshold 128."""
        bitmap = binarize(PixelBuffer.filled(200, 200))
        assert bitmap.is_empty()
        assert bitmap.threshold == 128

    def test_black_square_is_foreground(self):
        """Test ink pixels become foreground with the Otsu threshold."""
        buffer = PixelBuffer.filled(20, 20).with_rect(5, 5, 15, 15)
        bitmap = binarize(buffer)
        assert bitmap.foreground_count() == 100
        assert bitmap.is_foreground(5, 5)
        assert not bitmap.is_foreground(4, 5)

    def test_fixed_threshold(self):
        """Test a fixed threshold is applied strictly (L < t)."""
        buffer = PixelBuffer.filled(2, 1, (100, 100, 100, 255))
        assert binarize(buffer, threshold=100).is_empty()
        assert binarize(buffer, threshold=101).foreground_count() == 2

    def test_deterministic(self):
        """Test the same input always gives the same bitmap."""
        buffer = PixelBuffer.filled(30, 30).with_rect(3, 3, 9, 20, (90, 90, 90, 255))
        assert binarize(buffer) == binarize(buffer)

    @pytest.mark.parametrize(
        "color",
        [(0, 0, 0, 255), (60, 60, 60, 255), (255, 255, 255, 0)],
        ids=["black", "dark-grey", "transparent"],
    )
    def test_uniform_image_has_no_foreground(self, color):
        """Test a uniform image is empty even when its luminance is below 128."""
        bitmap = binarize(PixelBuffer.filled(200, 200, color))
        assert bitmap.threshold == DEFAULT_THRESHOLD
        assert bitmap.is_empty()
        assert (bitmap.width, bitmap.height) == (200, 200)

    def test_uniform_image_with_fixed_threshold(self):
        """Test a fixed threshold is still applied to a uniform image."""
        bitmap = binarize(PixelBuffer.filled(4, 4, (0, 0, 0, 255)), threshold=128)
        assert bitmap.foreground_count() == 16
