"""Unit tests for cell preparation and the per-character pipeline."""

import pytest

from handfont.config import FontConfig, TraceConfig
from handfont.core.binarizer import binarize
from handfont.core.pipeline import build_glyph, trace_cell, vectorize
from handfont.core.raster import crop_to_content, find_bounding_box, normalize_cell, prepare_cell
from handfont.domain import Bitmap, CharacterCell, PixelBuffer, Point, SegmentType
from handfont.domain.outline import EmptyOutline, TracedOutline

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)

# Padding large enough that cropping keeps the whole 200x200 frame
FULL_FRAME = TraceConfig(normalize_size=None, crop_padding=64)


@pytest.fixture
def white_page() -> PixelBuffer:
    return PixelBuffer.filled(200, 200)


@pytest.fixture
def square_page() -> PixelBuffer:
    return PixelBuffer.filled(200, 200).with_rect(50, 50, 150, 150)


@pytest.fixture
def ring_page() -> PixelBuffer:
    return (
        PixelBuffer.filled(200, 200)
        .with_rect(40, 40, 160, 160)
        .with_rect(80, 80, 120, 120, WHITE)
    )


class TestRaster:
    """Tests for cropping and normalization."""

    def test_find_bounding_box(self):
        """Test the box covers exactly the foreground."""
        bitmap = Bitmap.from_rows(["....", ".##.", "..#.", "...."])
        assert find_bounding_box(bitmap) == (1, 1, 2, 2)

    def test_find_bounding_box_empty(self):
        """Test no foreground gives None."""
        assert find_bounding_box(Bitmap.from_rows(["..", ".."])) is None

    def test_crop_to_content_pads(self, square_page):
        """Test the crop keeps the ink plus padding."""
        crop = crop_to_content(square_page, padding=3)
        assert (crop.width, crop.height) == (106, 106)
        assert crop.pixel(3, 3) == BLACK
        assert crop.pixel(2, 2) == WHITE

    def test_crop_to_content_clipped(self):
        """Test padding does not extend past the image."""
        page = PixelBuffer.filled(20, 20).with_rect(0, 0, 10, 10)
        crop = crop_to_content(page, padding=3)
        assert (crop.width, crop.height) == (13, 13)

    def test_crop_to_content_blank(self, white_page):
        """Test a blank page has nothing to crop."""
        assert crop_to_content(white_page) is None

    def test_crop_output_is_black_and_white(self):
        """Test the crop is cleaned to pure black and white."""
        page = PixelBuffer.filled(10, 10, (230, 230, 230, 255)).with_rect(2, 2, 8, 8, (40, 40, 40, 255))
        crop = crop_to_content(page, padding=1)
        assert crop.pixel(0, 0) == WHITE
        assert crop.pixel(1, 1) == BLACK

    def test_normalize_wide_cell_centered_vertically(self):
        """Test a wide crop fills the width and is centred vertically."""
        cell = normalize_cell(PixelBuffer.filled(100, 50, BLACK), 200)
        assert (cell.width, cell.height) == (200, 200)
        assert cell.pixel(100, 100) == BLACK
        assert cell.pixel(100, 10) == WHITE
        assert cell.pixel(100, 190) == WHITE

    def test_normalize_tall_cell_left_aligned(self):
        """Test a tall crop fills the height and sits at the left edge."""
        cell = normalize_cell(PixelBuffer.filled(50, 100, BLACK), 200)
        assert cell.pixel(50, 100) == BLACK
        assert cell.pixel(150, 100) == WHITE

    def test_prepare_cell_sizes(self, square_page):
        """Test preparation yields the normalized canvas, or the crop when disabled."""
        assert prepare_cell(square_page, size=200).width == 200
        assert prepare_cell(square_page, size=None).width == 106

    def test_prepare_cell_blank(self, white_page):
        """Test a blank page prepares to None."""
        assert prepare_cell(white_page) is None


class TestVectorize:
    """Tests for the vectorization pipeline."""

    def test_white_page_is_empty(self, white_page):
        """Test a blank 200x200 page produces no outline."""
        assert binarize(white_page).threshold == 128
        outline = vectorize(white_page)
        assert isinstance(outline, EmptyOutline)
        assert outline.reason == "no foreground"

    def test_square_full_frame(self, square_page):
        """Test a centred square traces to one four-corner contour and four curves."""
        outline = vectorize(square_page, FULL_FRAME)
        assert isinstance(outline, TracedOutline)
        assert (outline.image_width, outline.image_height) == (200, 200)
        assert outline.bbox == (50, 50, 100, 100)
        assert len(outline.contours) == 1
        assert list(outline.contours[0].points) == [
            Point(50, 50),
            Point(149, 50),
            Point(149, 149),
            Point(50, 149),
        ]
        kinds = [s.kind for s in outline.segments]
        assert kinds == [SegmentType.MOVE_TO] + [SegmentType.CURVE_TO] * 4 + [SegmentType.CLOSE]
        assert outline.segments[-2].end == outline.segments[0].end

    def test_square_cropped(self, square_page):
        """Test cropping without normalization traces in crop coordinates."""
        outline = vectorize(square_page, TraceConfig(normalize_size=None))
        assert isinstance(outline, TracedOutline)
        assert (outline.image_width, outline.image_height) == (106, 106)
        assert outline.contours[0].points[0] == Point(3, 3)

    def test_square_normalized(self, square_page):
        """Test the default configuration traces on the normalized canvas."""
        outline = vectorize(square_page)
        assert isinstance(outline, TracedOutline)
        assert (outline.image_width, outline.image_height) == (200, 200)
        assert len(outline.contours) == 1
        assert not outline.contours[0].is_hole
        assert outline.segments[0].kind == SegmentType.MOVE_TO
        assert outline.segments[-1].kind == SegmentType.CLOSE

    def test_ring_keeps_counter(self, ring_page):
        """Test a ring produces an outer contour and a hole."""
        outline = vectorize(ring_page, FULL_FRAME)
        assert isinstance(outline, TracedOutline)
        assert len(outline.contours) == 2
        assert outline.hole_count == 1

    def test_fixed_threshold(self):
        """Test light ink is ignored under a strict fixed threshold."""
        page = PixelBuffer.filled(50, 50).with_rect(10, 10, 40, 40, (200, 200, 200, 255))
        assert isinstance(vectorize(page, TraceConfig(threshold=100)), EmptyOutline)
        assert isinstance(vectorize(page, TraceConfig(threshold=250)), TracedOutline)

    def test_trace_cell_without_content(self):
        """Test a cell without a buffer is empty."""
        outline = trace_cell(CharacterCell.for_char("A"))
        assert isinstance(outline, EmptyOutline)
        assert outline.reason == "no content"


class TestBuildGlyph:
    """Tests for the full per-character pipeline."""

    @pytest.mark.parametrize(
        "color", [BLACK, (255, 255, 255, 0)], ids=["black", "transparent"]
    )
    def test_uniform_page_empty_glyph(self, color):
        """Test a uniform dark or transparent sample yields an empty glyph."""
        page = PixelBuffer.filled(200, 200, color)
        assert isinstance(vectorize(page), EmptyOutline)
        glyph = build_glyph(CharacterCell.for_char("A", page), FontConfig())
        assert glyph.is_empty()
        assert glyph.advance_width == 500

    def test_white_page_empty_glyph(self, white_page):
        """Test a blank sample yields an empty glyph with advance 500."""
        glyph = build_glyph(CharacterCell.for_char("A", white_page), FontConfig())
        assert glyph.is_empty()
        assert glyph.advance_width == 500
        assert glyph.name == "A"

    def test_square_glyph_design_coordinates(self, square_page):
        """Test the square's corners land in design units on a 5x scale."""
        glyph = build_glyph(CharacterCell.for_char("I", square_page), FontConfig(), FULL_FRAME)
        ends = [s.end.to_tuple() for s in glyph.segments if s.end is not None]
        assert ends == [(250, 550), (745, 550), (745, 55), (250, 55), (250, 550)]
        min_x, min_y, max_x, max_y = glyph.bounds()
        assert -200 <= min_y and max_y <= 800
        assert glyph.advance_width == 600

    def test_missing_cell_empty_glyph(self):
        """Test a slot without content still produces a glyph."""
        glyph = build_glyph(CharacterCell.for_char("?"), FontConfig())
        assert glyph.is_empty()
        assert glyph.name == "question"
        assert glyph.unicode == ord("?")
