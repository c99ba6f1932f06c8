"""Unit tests for mapping outlines into design units."""

import pytest

from handfont.config import FontConfig
from handfont.core.glyph_builder import GlyphBuilder, validate_font_config
from handfont.domain import PathSegment, Point, SegmentType
from handfont.domain.outline import EmptyOutline, TracedOutline
from handfont.exceptions import ConfigurationError


def _outline(points: list[Point], width: int, height: int, bbox_width: int) -> TracedOutline:
    segments = [PathSegment.move_to(points[0])]
    segments += [PathSegment.line_to(p) for p in points[1:]]
    segments.append(PathSegment.close())
    return TracedOutline(
        segments=tuple(segments),
        contours=(),
        image_width=width,
        image_height=height,
        bbox=(0, 0, bbox_width, bbox_width),
    )


@pytest.fixture
def builder() -> GlyphBuilder:
    return GlyphBuilder(FontConfig())


class TestValidation:
    """Tests for font metric validation."""

    def test_valid_config(self):
        """Test default metrics pass."""
        validate_font_config(FontConfig())

    @pytest.mark.parametrize(
        ("upm", "ascender", "descender"),
        [(0, 800, -200), (1000, 0, -200), (1000, 800, 0), (-5, 800, -200)],
    )
    def test_invalid_metrics_rejected_by_model(self, upm, ascender, descender):
        """Test FontConfig refuses invalid metrics on construction."""
        with pytest.raises(ValueError):
            FontConfig(units_per_em=upm, ascender=ascender, descender=descender)

    def test_unvalidated_config_fails_fast(self):
        """Test the builder rejects configs built without validation."""
        config = FontConfig.model_construct(units_per_em=1000, ascender=800, descender=100)
        with pytest.raises(ConfigurationError, match="descender"):
            GlyphBuilder(config)


class TestTransform:
    """Tests for the pixel-to-design transform."""

    def test_scale_for_square_canvas(self, builder):
        """Test a 1000px canvas maps one pixel to one unit."""
        assert builder.scale_for(1000, 1000) == 1.0

    def test_scale_uses_larger_side(self, builder):
        """Test the scale follows the larger image dimension."""
        assert builder.scale_for(100, 200) == 5.0

    def test_scale_for_empty_image(self, builder):
        """Test a zero-sized image does not divide by zero."""
        assert builder.scale_for(0, 0) == 1000.0

    def test_y_axis_flipped(self, builder):
        """Test the top of the image maps to the ascender and the bottom to the descender."""
        assert builder.to_design(Point(0, 0), 1.0) == Point(0, 800)
        assert builder.to_design(Point(0, 1000), 1.0) == Point(0, -200)
        assert builder.to_design(Point(10, 300), 1.0) == Point(10, 500)

    def test_rounding_half_up(self, builder):
        """Test coordinates round half away from zero like font compilers do."""
        assert builder.to_design(Point(0.5, 0), 1.0).x == 1
        assert builder.to_design(Point(2.5, 0), 1.0).x == 3


class TestAdvanceWidth:
    """Tests for advance width computation."""

    def test_margin_added(self, builder):
        """Test ink width plus 10% UPM side margin."""
        assert builder.advance_width_for(400, 1.0) == 500

    def test_lower_clamp(self, builder):
        """Test narrow glyphs get at least 30% of UPM."""
        assert builder.advance_width_for(10, 1.0) == 300

    def test_upper_clamp(self, builder):
        """Test wide glyphs are capped at one em."""
        assert builder.advance_width_for(5000, 1.0) == 1000

    def test_min_advance_rounds_up(self):
        """Test the lower clamp is never below 0.3 * UPM."""
        assert GlyphBuilder(FontConfig(units_per_em=1001)).min_advance_width == 301


class TestBuild:
    """Tests for building glyphs from pipeline results."""

    def test_empty_outline(self, builder):
        """Test an empty result gives an empty glyph with half an em of advance."""
        glyph = builder.build(EmptyOutline(), label="A", unicode=0x41)
        assert glyph.is_empty()
        assert glyph.advance_width == 500
        assert glyph.name == "A"
        assert glyph.unicode == 0x41

    def test_traced_outline_in_design_space(self, builder):
        """Test points land in design units with the y axis flipped."""
        outline = _outline(
            [Point(100, 100), Point(900, 100), Point(900, 900), Point(100, 900)],
            1000, 1000, 800,
        )
        glyph = builder.build(outline, label="O", unicode=ord("O"))
        assert glyph.segments[0] == PathSegment.move_to(Point(100, 700))
        assert glyph.segments[2].points == (Point(900, -100),)
        assert glyph.segments[-1].kind == SegmentType.CLOSE
        assert glyph.advance_width == 900

    def test_points_within_vertical_metrics(self, builder):
        """Test every on-image point maps inside [descender, ascender]."""
        points = [Point(0, 0), Point(1000, 0), Point(1000, 1000), Point(0, 1000), Point(500, 500)]
        glyph = builder.build(_outline(points, 1000, 1000, 1000), label="X", unicode=88)
        min_x, min_y, max_x, max_y = glyph.bounds()
        assert min_y >= -200
        assert max_y <= 800

    def test_name_from_glyph_list(self, builder):
        """Test glyph names come from the Adobe Glyph List."""
        glyph = builder.build(EmptyOutline(), label="?", unicode=ord("?"))
        assert glyph.name == "question"

    def test_explicit_name(self, builder):
        """Test an explicit name overrides the derived one."""
        glyph = builder.empty_glyph("A", 0x41, name="A.alt")
        assert glyph.name == "A.alt"
