"""Font assembly: required placeholder glyphs plus the user glyphs.

Every font starts with ``.notdef`` (a hollow rectangle shown for unmapped
characters) and ``space``, followed by one glyph per requested character in
request order.
"""

from fontTools.misc.roundTools import otRound

from handfont.config import FontConfig
from handfont.core.glyph_builder import validate_font_config
from handfont.domain import FontDocument, Glyph, GlyphMetadata, PathSegment, Point

NOTDEF_NAME = ".notdef"
SPACE_NAME = "space"
SPACE_CODE_POINT = 32

NOTDEF_WIDTH_RATIO = 0.5
SPACE_WIDTH_RATIO = 0.25
NOTDEF_OUTER_INSET = 50
NOTDEF_INNER_INSET = 100


def _closed_polygon(points: list[tuple[int, int]]) -> list[PathSegment]:
    first, *rest = (Point(x, y) for x, y in points)
    return [
        PathSegment.move_to(first),
        *(PathSegment.line_to(p) for p in rest),
        PathSegment.close(),
    ]


class FontAssembler:
    """Orders glyphs and wraps them into a FontDocument.

    Example:
        assembler = FontAssembler(FontConfig(family_name="Notes"))
        document = assembler.assemble(glyphs)
    """

    def __init__(self, config: FontConfig) -> None:
        validate_font_config(config)
        self.config = config

    def build_notdef(self) -> Glyph:
        """Hollow rectangle: outer box and a reversed inner box."""
        width = otRound(NOTDEF_WIDTH_RATIO * self.config.units_per_em)
        asc = self.config.ascender
        desc = self.config.descender
        outer, inner = NOTDEF_OUTER_INSET, NOTDEF_INNER_INSET

        segments = _closed_polygon([
            (outer, desc + outer),
            (width - outer, desc + outer),
            (width - outer, asc - outer),
            (outer, asc - outer),
        ])
        segments += _closed_polygon([
            (inner, desc + inner),
            (inner, asc - inner),
            (width - inner, asc - inner),
            (width - inner, desc + inner),
        ])

        metadata = GlyphMetadata(name=NOTDEF_NAME, label="", unicode=None, advance_width=width)
        return Glyph(metadata=metadata, segments=tuple(segments))

    def build_space(self) -> Glyph:
        metadata = GlyphMetadata(
            name=SPACE_NAME,
            label=" ",
            unicode=SPACE_CODE_POINT,
            advance_width=otRound(SPACE_WIDTH_RATIO * self.config.units_per_em),
        )
        return Glyph(metadata=metadata)

    def assemble(self, user_glyphs: list[Glyph]) -> FontDocument:
        """Create the document ``[.notdef, space, *user_glyphs]``.

        Glyph names must be unique within a font, so a user glyph whose name
        is already taken is renamed with a numeric suffix (``A.1``). Its code
        point is kept; the character map resolves duplicates in favour of the
        earlier glyph.

        Args:
            user_glyphs: One glyph per requested character, in request order

        Returns:
            A document holding exactly ``len(user_glyphs) + 2`` glyphs
        """
        glyphs = [self.build_notdef(), self.build_space()]
        taken = {NOTDEF_NAME, SPACE_NAME}

        for glyph in user_glyphs:
            name = glyph.name
            if name in taken:
                suffix = 1
                while f"{glyph.name}.{suffix}" in taken:
                    suffix += 1
                name = f"{glyph.name}.{suffix}"
                glyph = glyph.renamed(name)
            taken.add(name)
            glyphs.append(glyph)

        return FontDocument.from_config(self.config, glyphs)
