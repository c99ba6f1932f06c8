"""Per-character vectorization pipeline.

    PixelBuffer -> prepare -> binarize -> trace -> simplify -> fit -> Glyph

Every stage is pure. Each stage that can come up empty returns the
EmptyOutline variant instead of raising, so one unusable sample never aborts
the font.
"""

from handfont.config import FontConfig, TraceConfig
from handfont.core.binarizer import binarize
from handfont.core.curves import fit_contours
from handfont.core.glyph_builder import GlyphBuilder
from handfont.core.raster import find_bounding_box, prepare_cell
from handfont.core.simplifier import simplify_contours
from handfont.core.tracer import trace_contours
from handfont.domain import CharacterCell, Glyph, PixelBuffer
from handfont.domain.outline import EmptyOutline, Outline, TracedOutline


def vectorize(buffer: PixelBuffer, config: TraceConfig | None = None) -> Outline:
    """Trace a character sample into a closed pixel-space outline.

    Args:
        buffer: Raw character sample
        config: Tracing settings (defaults if None)

    Returns:
        TracedOutline, or EmptyOutline naming the stage that found nothing
    """
    config = config or TraceConfig()

    prepared = prepare_cell(
        buffer,
        padding=config.crop_padding,
        size=config.normalize_size,
        threshold=config.threshold,
    )
    if prepared is None:
        return EmptyOutline("no foreground")

    bitmap = binarize(prepared, config.threshold)
    bbox = find_bounding_box(bitmap)
    if bbox is None:
        return EmptyOutline("no foreground after normalization")

    contours = trace_contours(bitmap)
    if not contours:
        return EmptyOutline("no traceable contours")

    simplified = simplify_contours(contours, config.epsilon)
    if not simplified:
        return EmptyOutline("contours collapsed during simplification")

    segments = fit_contours(simplified, config.tension)

    return TracedOutline(
        segments=tuple(segments),
        contours=tuple(simplified),
        image_width=bitmap.width,
        image_height=bitmap.height,
        bbox=bbox,
        threshold=bitmap.threshold,
    )


def trace_cell(cell: CharacterCell, config: TraceConfig | None = None) -> Outline:
    """Vectorize a cell, treating the "no content" marker as empty."""
    if not cell.has_content or cell.buffer is None:
        return EmptyOutline("no content")
    return vectorize(cell.buffer, config)


def build_glyph(
    cell: CharacterCell,
    font_config: FontConfig,
    trace_config: TraceConfig | None = None,
) -> Glyph:
    """Run the full pipeline for one character slot.

    Always returns a glyph; a slot without usable ink gets an empty outline
    and the default advance width.
    """
    trace_config = trace_config or TraceConfig()
    builder = GlyphBuilder(font_config, side_margin=trace_config.side_margin)
    outline = trace_cell(cell, trace_config)
    return builder.build(outline, label=cell.label, unicode=cell.unicode)
