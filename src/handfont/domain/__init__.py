"""Domain models for handfont.

This module contains the domain models representing raster input, traced
contours, outline segments, glyphs and the assembled font document. All
models are designed to be:

- Immutable (frozen dataclasses); each pipeline stage returns new values
- Serializable for inter-process communication (parallel processing)
- Independent of fonttools implementation details

Key classes:
- PixelBuffer / Bitmap: RGBA input and its binarized form
- Point / Contour: Pixel-space geometry produced by the tracer
- PathSegment: Move/line/cubic/close drawing commands
- Glyph / GlyphMetadata: A character outline in design units
- FontDocument: Ordered glyph set with family metadata
- CharacterCell: One requested character slot
- TracedOutline / EmptyOutline: Result variants of the vectorization pipeline
"""

from handfont.domain.cell import CharacterCell
from handfont.domain.contour import Contour, Point
from handfont.domain.font import FontDocument
from handfont.domain.glyph import Glyph, GlyphMetadata
from handfont.domain.outline import EmptyOutline, Outline, TracedOutline
from handfont.domain.path import PathSegment, SegmentType, split_outlines
from handfont.domain.raster import Bitmap, PixelBuffer

__all__: list[str] = [
    # Enums
    "SegmentType",
    # Raster
    "PixelBuffer",
    "Bitmap",
    # Geometry
    "Point",
    "Contour",
    "PathSegment",
    "split_outlines",
    # Glyphs and fonts
    "GlyphMetadata",
    "Glyph",
    "FontDocument",
    "CharacterCell",
    # Pipeline results
    "TracedOutline",
    "EmptyOutline",
    "Outline",
]
