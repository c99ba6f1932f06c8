"""Font document: the assembled glyph set plus family metadata."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from handfont.domain.glyph import Glyph

if TYPE_CHECKING:
    from handfont.config import FontConfig


@dataclass(frozen=True)
class FontDocument:
    """An ordered glyph collection ready to be encoded as a font binary.

    Glyph order is the order of ``glyphs``: ``.notdef`` first, then ``space``,
    then the user glyphs in request order.

    Attributes:
        family_name: Font family name
        style_name: Font style name
        units_per_em: Design units per em
        ascender: Ascender in design units
        descender: Descender in design units (negative)
        version: Version string without the "Version " prefix
        glyphs: Glyphs in output order
    """

    family_name: str
    style_name: str
    units_per_em: int
    ascender: int
    descender: int
    version: str = "1.0"
    glyphs: tuple[Glyph, ...] = field(default=())

    @classmethod
    def from_config(cls, config: "FontConfig", glyphs: list[Glyph]) -> "FontDocument":
        """Create a document carrying the metadata of ``config``."""
        return cls(
            family_name=config.family_name,
            style_name=config.style_name,
            units_per_em=config.units_per_em,
            ascender=config.ascender,
            descender=config.descender,
            version=config.version,
            glyphs=tuple(glyphs),
        )

    def __len__(self) -> int:
        return len(self.glyphs)

    @property
    def full_name(self) -> str:
        return f"{self.family_name} {self.style_name}"

    @property
    def postscript_name(self) -> str:
        return f"{self.family_name}-{self.style_name}".replace(" ", "")

    @property
    def unique_id(self) -> str:
        return f"{self.version};{self.postscript_name}"

    @property
    def glyph_order(self) -> list[str]:
        return [g.name for g in self.glyphs]

    def get_glyph(self, name: str) -> Glyph | None:
        """Look up a glyph by name."""
        for glyph in self.glyphs:
            if glyph.name == name:
                return glyph
        return None

    def character_map(self) -> dict[int, str]:
        """Map code points to glyph names.

        The first glyph claiming a code point wins. ``.notdef`` and code
        point 0 are never mapped.
        """
        cmap: dict[int, str] = {}
        for glyph in self.glyphs:
            code_point = glyph.unicode
            if code_point is None or code_point == 0 or glyph.name == ".notdef":
                continue
            cmap.setdefault(code_point, glyph.name)
        return cmap

    def advance_widths(self) -> dict[str, int]:
        return {g.name: g.advance_width for g in self.glyphs}

    def to_bytes(self, fmt: str = "otf") -> bytes:
        """Serialize to a font binary.

        Args:
            fmt: One of "otf", "ttf", "woff", "woff2"

        Returns:
            The encoded font file
        """
        from handfont.io.writer import encode_font

        return encode_font(self, fmt)

    def save(self, path: Path, fmt: str | None = None) -> Path:
        """Encode and write the font, inferring the format from the suffix."""
        from handfont.io.writer import FontWriter

        return FontWriter(self, path).save(fmt)
