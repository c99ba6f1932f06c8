"""Font writer: encode a FontDocument as an OpenType binary.

This module builds the sfnt tables with fontTools' FontBuilder. OTF output
carries cubic CFF outlines; TTF output converts the cubics to quadratic glyf
outlines; WOFF and WOFF2 are compressed flavours of the OTF.
"""

from io import BytesIO
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.ttLib import TTFont

from handfont.domain.font import FontDocument
from handfont.exceptions import FontBuildError, FontSaveError, UnsupportedFormatError
from handfont.io.converter import glyph_to_charstring, glyph_to_ttglyph, left_side_bearing
from handfont.utils import get_logger

FORMATS = ("otf", "ttf", "woff", "woff2")

logger = get_logger("handfont.io.writer")


def _normalize_format(fmt: str) -> str:
    normalized = fmt.lower().lstrip(".")
    if normalized not in FORMATS:
        raise UnsupportedFormatError(fmt)
    return normalized


def _name_strings(document: FontDocument) -> dict[str, str]:
    return {
        "familyName": document.family_name,
        "styleName": document.style_name,
        "uniqueFontIdentifier": document.unique_id,
        "fullName": document.full_name,
        "version": f"Version {document.version}",
        "psName": document.postscript_name,
    }


def build_ttfont(document: FontDocument, fmt: str = "otf") -> TTFont:
    """Build an in-memory fontTools TTFont from a document.

    Args:
        document: Assembled font document
        fmt: One of "otf", "ttf", "woff", "woff2"

    Returns:
        The TTFont, with ``flavor`` set for WOFF output

    Raises:
        UnsupportedFormatError: If the format is unknown
        FontBuildError: If fontTools rejects the glyph data
    """
    fmt = _normalize_format(fmt)
    is_ttf = fmt == "ttf"

    try:
        builder = FontBuilder(document.units_per_em, isTTF=is_ttf)
        builder.setupGlyphOrder(document.glyph_order)
        builder.setupCharacterMap(document.character_map())

        if is_ttf:
            builder.setupGlyf({g.name: glyph_to_ttglyph(g) for g in document.glyphs})
            glyf = builder.font["glyf"]
            metrics = {
                g.name: (g.advance_width, getattr(glyf[g.name], "xMin", 0))
                for g in document.glyphs
            }
        else:
            charstrings = {g.name: glyph_to_charstring(g) for g in document.glyphs}
            builder.setupCFF(
                document.postscript_name,
                {"FullName": document.full_name},
                charstrings,
                {},
            )
            metrics = {
                g.name: (g.advance_width, left_side_bearing(g))
                for g in document.glyphs
            }

        builder.setupHorizontalMetrics(metrics)
        builder.setupHorizontalHeader(ascent=document.ascender, descent=document.descender)
        builder.setupNameTable(_name_strings(document))
        builder.setupOS2(
            sTypoAscender=document.ascender,
            sTypoDescender=document.descender,
            sTypoLineGap=0,
            usWinAscent=document.ascender,
            usWinDescent=abs(document.descender),
        )
        builder.setupPost()
        builder.setupMaxp()
    except Exception as e:
        raise FontBuildError(str(e)) from e

    if fmt in ("woff", "woff2"):
        builder.font.flavor = fmt

    return builder.font


def encode_font(document: FontDocument, fmt: str = "otf") -> bytes:
    """Serialize a document to font file bytes.

    Raises:
        UnsupportedFormatError: If the format is unknown
        FontBuildError: If the font cannot be built or compiled
    """
    font = build_ttfont(document, fmt)
    buffer = BytesIO()
    try:
        font.save(buffer)
    except Exception as e:
        raise FontBuildError(str(e)) from e
    return buffer.getvalue()


class FontWriter:
    """Writes a font document to disk.

    Example:
        writer = FontWriter(document, Path("MyHandwriting.otf"))
        writer.save()
    """

    def __init__(self, document: FontDocument, output_path: Path) -> None:
        """Initialize the font writer.

        Args:
            document: The font document to write
            output_path: Path where the font will be saved
        """
        self._document = document
        self._output_path = Path(output_path)

    def save(self, fmt: str | None = None) -> Path:
        """Encode and write the font.

        Args:
            fmt: Output format; inferred from the file suffix when None,
                defaulting to OTF

        Returns:
            The path written

        Raises:
            UnsupportedFormatError: If the format is unknown
            FontBuildError: If the font cannot be built
            FontSaveError: If the file cannot be written
        """
        if fmt is None:
            fmt = self._output_path.suffix.lstrip(".") or "otf"

        data = encode_font(self._document, fmt)

        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_bytes(data)
        except OSError as e:
            raise FontSaveError(str(self._output_path), str(e)) from e

        logger.debug(
            "Font written",
            path=str(self._output_path),
            format=fmt,
            size=len(data),
            glyphs=len(self._document),
        )
        return self._output_path

    @staticmethod
    def output_path_for(directory: Path, document: FontDocument, fmt: str = "otf") -> Path:
        """Default output file name for a document.

        Example: ``MyHandwriting-Regular.otf``
        """
        return Path(directory) / f"{document.postscript_name}.{_normalize_format(fmt)}"
