"""Core vectorization logic for handfont.

This module contains the raster-to-outline pipeline:

- binarizer: Luminance and Otsu thresholding
- tracer: Moore-neighbourhood boundary tracing
- simplifier: Douglas-Peucker contour simplification
- curves: Catmull-Rom to cubic Bezier fitting
- raster: Cell cropping and normalization
- glyph_builder: Pixel space to design units
- assembler: .notdef, space and user glyph ordering
- pipeline: Per-character pipeline
- processor: Parallel orchestration (FontGenerator)
"""

from handfont.core.assembler import FontAssembler
from handfont.core.binarizer import binarize, otsu_threshold
from handfont.core.curves import fit_contour, fit_contours
from handfont.core.glyph_builder import GlyphBuilder, validate_font_config
from handfont.core.pipeline import build_glyph, trace_cell, vectorize
from handfont.core.processor import FontGenerator, process_cell
from handfont.core.raster import find_bounding_box, prepare_cell
from handfont.core.simplifier import douglas_peucker, simplify_contour, simplify_contours
from handfont.core.tracer import trace_contours

__all__ = [
    "FontAssembler",
    "FontGenerator",
    "GlyphBuilder",
    "binarize",
    "build_glyph",
    "douglas_peucker",
    "find_bounding_box",
    "fit_contour",
    "fit_contours",
    "otsu_threshold",
    "prepare_cell",
    "process_cell",
    "simplify_contour",
    "simplify_contours",
    "trace_cell",
    "trace_contours",
    "validate_font_config",
    "vectorize",
]
