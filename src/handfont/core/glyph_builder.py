"""Mapping traced outlines from pixel space into font design units.

Pixel space has its origin at the top-left with y growing downward; design
space has its origin on the baseline with y growing upward. The whole image
height maps onto the ascender-to-descender span:

    s  = (ascender - descender) / max(image_width, image_height, 1)
    x' = round(x * s)
    y' = round(ascender - y * s)
"""

import math

from fontTools.misc.roundTools import otRound

from handfont.config import FontConfig, metric_problem
from handfont.domain import Glyph, GlyphMetadata, PathSegment, Point
from handfont.domain.charset import glyph_name_for
from handfont.domain.outline import EmptyOutline, Outline, TracedOutline
from handfont.exceptions import ConfigurationError

DEFAULT_SIDE_MARGIN = 0.1
MIN_ADVANCE_RATIO = 0.3
EMPTY_ADVANCE_RATIO = 0.5


def validate_font_config(config: FontConfig) -> None:
    """Fail fast on metrics no transform can work with.

    FontConfig validates itself on construction; this guards instances
    built without validation (``model_construct``).

    Raises:
        ConfigurationError: If units per em, ascender or descender are invalid
    """
    problem = metric_problem(config.units_per_em, config.ascender, config.descender)
    if problem is not None:
        raise ConfigurationError(problem)


class GlyphBuilder:
    """Builds design-space glyphs from traced outlines.

    Example:
        builder = GlyphBuilder(FontConfig())
        glyph = builder.build(outline, label="A", unicode=0x41)
    """

    def __init__(self, config: FontConfig, side_margin: float = DEFAULT_SIDE_MARGIN) -> None:
        """Initialize the builder.

        Args:
            config: Font metrics
            side_margin: Advance width padding as a fraction of UPM

        Raises:
            ConfigurationError: If the font metrics are invalid
        """
        validate_font_config(config)
        self.config = config
        self.side_margin = side_margin

    @property
    def min_advance_width(self) -> int:
        return math.ceil(MIN_ADVANCE_RATIO * self.config.units_per_em)

    @property
    def default_advance_width(self) -> int:
        return otRound(EMPTY_ADVANCE_RATIO * self.config.units_per_em)

    def scale_for(self, image_width: int, image_height: int) -> float:
        """Uniform pixel-to-design-unit scale for an image."""
        span = self.config.ascender - self.config.descender
        return span / max(image_width, image_height, 1)

    def to_design(self, point: Point, scale: float) -> Point:
        """Transform a pixel-space point, flipping the y axis."""
        return Point(
            otRound(point.x * scale),
            otRound(self.config.ascender - point.y * scale),
        )

    def advance_width_for(self, ink_width: int, scale: float) -> int:
        """Advance width for a glyph whose ink is ``ink_width`` pixels wide.

        The ink width in design units plus the side margin, clamped to
        [0.3 * UPM, UPM].
        """
        upm = self.config.units_per_em
        width = otRound(ink_width * scale) + otRound(self.side_margin * upm)
        return max(self.min_advance_width, min(width, upm))

    def empty_glyph(self, label: str, unicode: int | None, name: str | None = None) -> Glyph:
        """A glyph with no outline and the default advance width."""
        metadata = GlyphMetadata(
            name=name or _name_for(label, unicode),
            label=label,
            unicode=unicode,
            advance_width=self.default_advance_width,
        )
        return Glyph(metadata=metadata)

    def build(
        self,
        outline: Outline,
        label: str,
        unicode: int | None,
        name: str | None = None,
    ) -> Glyph:
        """Build a glyph from a pipeline result.

        Args:
            outline: Traced outline, or the empty variant
            label: Character label
            unicode: Code point to map the glyph to
            name: Glyph name (derived from the code point if omitted)

        Returns:
            Glyph in design units. Empty results and outlines without
            segments produce an empty glyph with the default advance width.
        """
        if isinstance(outline, EmptyOutline) or not outline.segments:
            return self.empty_glyph(label, unicode, name)

        return self._build_traced(outline, label, unicode, name)

    def _build_traced(
        self,
        outline: TracedOutline,
        label: str,
        unicode: int | None,
        name: str | None,
    ) -> Glyph:
        scale = self.scale_for(outline.image_width, outline.image_height)

        segments: list[PathSegment] = [
            segment.map_points(lambda p: self.to_design(p, scale))
            for segment in outline.segments
        ]

        metadata = GlyphMetadata(
            name=name or _name_for(label, unicode),
            label=label,
            unicode=unicode,
            advance_width=self.advance_width_for(outline.bbox[2], scale),
        )
        return Glyph(metadata=metadata, segments=tuple(segments))


def _name_for(label: str, unicode: int | None) -> str:
    if unicode is not None and unicode > 0:
        return glyph_name_for(chr(unicode))
    if len(label) == 1:
        return glyph_name_for(label)
    return label
