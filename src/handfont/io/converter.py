"""Converters between fonttools pens and domain models.

Domain glyphs store their outlines as pen commands, so writing a glyph is a
replay of its segments into any fonttools pen.

Winding: traced outer contours run clockwise in design space (the TrueType
convention). CFF expects the opposite, so CFF charstrings are drawn through a
ReverseContourPen.
"""

from typing import Any

from fontTools.pens.basePen import AbstractPen
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.reverseContourPen import ReverseContourPen
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen

from handfont.domain import Glyph, SegmentType

# Maximum error (font units) when approximating cubic curves with quadratics
CU2QU_MAX_ERR = 1.0


def draw_glyph(glyph: Glyph, pen: AbstractPen) -> None:
    """Replay the glyph's segments into a fonttools pen."""
    for segment in glyph.segments:
        coords = [p.to_tuple() for p in segment.points]
        if segment.kind == SegmentType.MOVE_TO:
            pen.moveTo(coords[0])
        elif segment.kind == SegmentType.LINE_TO:
            pen.lineTo(coords[0])
        elif segment.kind == SegmentType.CURVE_TO:
            pen.curveTo(*coords)
        elif segment.kind == SegmentType.CLOSE:
            pen.closePath()


def glyph_bounds(glyph: Glyph) -> tuple[float, float, float, float] | None:
    """Exact outline bounds (xMin, yMin, xMax, yMax), or None if empty."""
    pen = BoundsPen(None)
    draw_glyph(glyph, pen)
    return pen.bounds


def left_side_bearing(glyph: Glyph) -> int:
    bounds = glyph_bounds(glyph)
    return int(bounds[0]) if bounds is not None else 0


def glyph_to_charstring(glyph: Glyph) -> Any:
    """Compile a glyph into a CFF Type 2 charstring."""
    pen = T2CharStringPen(width=glyph.advance_width, glyphSet=None)
    draw_glyph(glyph, ReverseContourPen(pen))
    return pen.getCharString()


def glyph_to_ttglyph(glyph: Glyph) -> Any:
    """Compile a glyph into a TrueType glyf entry with quadratic curves."""
    pen = TTGlyphPen(None)
    draw_glyph(glyph, Cu2QuPen(pen, max_err=CU2QU_MAX_ERR, reverse_direction=False))
    return pen.glyph()
