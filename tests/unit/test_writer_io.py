"""Unit tests for font encoding and writing."""

from io import BytesIO

import pytest
from fontTools.pens.areaPen import AreaPen
from fontTools.ttLib import TTFont

from handfont.config import FontConfig, TraceConfig
from handfont.core.assembler import FontAssembler
from handfont.core.pipeline import build_glyph
from handfont.domain import CharacterCell, PixelBuffer
from handfont.exceptions import UnsupportedFormatError
from handfont.io import FontWriter, build_ttfont, encode_font

FULL_FRAME = TraceConfig(normalize_size=None, crop_padding=64)


@pytest.fixture
def document():
    page = PixelBuffer.filled(200, 200).with_rect(50, 50, 150, 150)
    config = FontConfig(family_name="Test Hand")
    glyphs = [
        build_glyph(CharacterCell.for_char("I", page), config, FULL_FRAME),
        build_glyph(CharacterCell.for_char("?"), config, FULL_FRAME),
    ]
    return FontAssembler(config).assemble(glyphs)


def _reopen(data: bytes) -> TTFont:
    return TTFont(BytesIO(data))


def _area(font: TTFont, name: str) -> float:
    pen = AreaPen(font.getGlyphSet())
    font.getGlyphSet()[name].draw(pen)
    return pen.value


class TestEncodeFont:
    """Tests for encoding documents to bytes."""

    def test_otf_uses_cff(self, document):
        """Test OTF output carries CFF outlines."""
        data = encode_font(document, "otf")
        assert data[:4] == b"OTTO"
        font = _reopen(data)
        assert "CFF " in font
        assert "glyf" not in font

    def test_ttf_uses_glyf(self, document):
        """Test TTF output carries quadratic glyf outlines."""
        font = _reopen(encode_font(document, "ttf"))
        assert "glyf" in font
        assert "CFF " not in font

    @pytest.mark.parametrize("fmt", ["otf", "ttf"])
    def test_glyph_order_and_cmap(self, document, fmt):
        """Test glyph order and character map survive encoding."""
        font = _reopen(encode_font(document, fmt))
        assert font.getGlyphOrder() == [".notdef", "space", "I", "question"]
        cmap = font.getBestCmap()
        assert cmap[32] == "space"
        assert cmap[ord("I")] == "I"
        assert cmap[ord("?")] == "question"
        assert len(cmap) == 3

    @pytest.mark.parametrize("fmt", ["otf", "ttf"])
    def test_horizontal_metrics(self, document, fmt):
        """Test advance widths and vertical metrics."""
        font = _reopen(encode_font(document, fmt))
        assert font["head"].unitsPerEm == 1000
        assert font["hhea"].ascent == 800
        assert font["hhea"].descent == -200
        assert font["hmtx"]["space"][0] == 250
        assert font["hmtx"][".notdef"][0] == 500
        assert font["hmtx"]["question"][0] == 500
        assert font["hmtx"]["I"][0] == 600

    def test_name_table(self, document):
        """Test family metadata lands in the name table."""
        name = _reopen(encode_font(document, "otf"))["name"]
        assert name.getDebugName(1) == "Test Hand"
        assert name.getDebugName(2) == "Regular"
        assert name.getDebugName(4) == "Test Hand Regular"
        assert name.getDebugName(5) == "Version 1.0"
        assert name.getDebugName(6) == "TestHand-Regular"

    def test_outline_geometry(self, document, glyph_segments):
        """Test on-curve points survive CFF encoding."""
        font = _reopen(encode_font(document, "otf"))
        segments = glyph_segments(font.getGlyphSet(), "I")
        ends = {s.end.to_tuple() for s in segments if s.end is not None}
        assert {(250, 550), (745, 550), (745, 55), (250, 55)} <= ends

    def test_winding_per_format(self, document):
        """Test outer contours run clockwise in TrueType and counter-clockwise in CFF."""
        assert _area(_reopen(encode_font(document, "ttf")), "I") < 0
        assert _area(_reopen(encode_font(document, "otf")), "I") > 0

    def test_notdef_counter_is_hollow(self, document):
        """Test the .notdef rectangles have opposite directions."""
        font = _reopen(encode_font(document, "ttf"))
        glyph = font["glyf"][".notdef"]
        assert glyph.numberOfContours == 2

    @pytest.mark.parametrize("fmt", ["woff", "woff2"])
    def test_woff_flavors(self, document, fmt):
        """Test compressed flavours round-trip through fontTools."""
        data = encode_font(document, fmt)
        assert data[:4] == (b"wOFF" if fmt == "woff" else b"wOF2")
        font = _reopen(data)
        assert font.flavor == fmt
        assert font.getGlyphOrder()[:2] == [".notdef", "space"]

    def test_build_ttfont_sets_flavor(self, document):
        """Test the in-memory font knows its flavour."""
        assert build_ttfont(document, "woff").flavor == "woff"
        assert build_ttfont(document, "otf").flavor is None

    def test_unsupported_format(self, document):
        """Test unknown formats are rejected."""
        with pytest.raises(UnsupportedFormatError, match="svg"):
            encode_font(document, "svg")

    def test_format_case_insensitive(self, document):
        """Test format names ignore case and a leading dot."""
        assert encode_font(document, ".OTF")[:4] == b"OTTO"

    def test_document_to_bytes(self, document):
        """Test the document shortcut encodes the same way."""
        assert document.to_bytes("ttf")[:4] == b"\x00\x01\x00\x00"


class TestFontWriter:
    """Tests for writing fonts to disk."""

    def test_save_infers_format(self, document, tmp_path):
        """Test the suffix picks the format."""
        path = FontWriter(document, tmp_path / "out.ttf").save()
        assert path.exists()
        assert "glyf" in TTFont(path)

    def test_save_defaults_to_otf(self, document, tmp_path):
        """Test a path without suffix is written as OTF."""
        path = FontWriter(document, tmp_path / "out").save()
        assert path.read_bytes()[:4] == b"OTTO"

    def test_explicit_format_wins(self, document, tmp_path):
        """Test an explicit format overrides the suffix."""
        path = FontWriter(document, tmp_path / "out.bin").save("woff2")
        assert path.read_bytes()[:4] == b"wOF2"

    def test_creates_parent_directories(self, document, tmp_path):
        """Test missing parent directories are created."""
        path = document.save(tmp_path / "nested" / "dir" / "font.otf")
        assert path.exists()

    def test_unknown_suffix_rejected(self, document, tmp_path):
        """Test an unknown suffix without an explicit format fails."""
        with pytest.raises(UnsupportedFormatError):
            FontWriter(document, tmp_path / "font.svg").save()
        assert not (tmp_path / "font.svg").exists()

    def test_output_path_for(self, document, tmp_path):
        """Test the default file name uses the PostScript name."""
        assert FontWriter.output_path_for(tmp_path, document, "woff") == tmp_path / "TestHand-Regular.woff"
