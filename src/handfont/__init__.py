"""Handfont - Turn hand-drawn character samples into installable fonts.

Handfont traces raster samples of handwritten characters (one image per
character, or a template sheet split into cells) into smooth cubic outlines
and assembles them into an OpenType/TrueType font.

Example:
    $ handfont build ./letters -o MyHandwriting.otf

This will trace every character image found in ./letters and write
MyHandwriting.otf with a .notdef and space glyph followed by the traced
characters.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
