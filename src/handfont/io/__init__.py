"""Image and font I/O layer for handfont.

This module handles reading character samples with Pillow and writing fonts
with fonttools. It provides a clean abstraction layer between those
libraries and the domain models.

Key responsibilities:
- Load sample images as RGBA pixel buffers
- Collect one character cell per requested character
- Convert domain glyphs into fonttools pens
- Encode OTF/TTF/WOFF/WOFF2 binaries

Key classes:
- FontWriter: Save font documents
"""

from handfont.io.reader import load_character_cells, load_image, load_pixel_buffer
from handfont.io.writer import FORMATS, FontWriter, build_ttfont, encode_font

__all__ = [
    "FORMATS",
    "FontWriter",
    "build_ttfont",
    "encode_font",
    "load_character_cells",
    "load_image",
    "load_pixel_buffer",
]
