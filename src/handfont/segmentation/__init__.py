"""Template sheet segmentation for handfont.

Locators find each character's box on a scanned handwriting sheet:

- GridCellLocator: fixed columns x rows grid with a fill-ratio quality score
- VisionCellLocator: asks a vision language model for boxes
- FallbackCellLocator: primary locator with a fallback on failure

crop_cells turns a LocatorResult into one CharacterCell per character.
"""

from handfont.segmentation.base import (
    CellBox,
    CellLocator,
    FallbackCellLocator,
    LocatedCell,
    LocatorResult,
    crop_cells,
)
from handfont.segmentation.grid import GridCellLocator, score_cell
from handfont.segmentation.vision import VisionCellLocator, parse_locator_response, strip_code_fences

__all__ = [
    "CellBox",
    "CellLocator",
    "FallbackCellLocator",
    "GridCellLocator",
    "LocatedCell",
    "LocatorResult",
    "VisionCellLocator",
    "crop_cells",
    "parse_locator_response",
    "score_cell",
    "strip_code_fences",
]
