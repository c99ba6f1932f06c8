"""Fixed-grid cell location.

The printable template is a regular grid filled left-to-right, top-to-bottom,
so when no smarter locator is available every cell is simply a grid slot,
inset slightly to stay clear of the printed grid lines.
"""

import math

from handfont.core.binarizer import binarize
from handfont.core.raster import find_bounding_box
from handfont.domain import PixelBuffer
from handfont.segmentation.base import CellBox, LocatedCell, LocatorResult

DEFAULT_COLUMNS = 5
DEFAULT_ROWS = 6
DEFAULT_PADDING_RATIO = 0.05

# Fill ratio window for a plausible handwritten character
MIN_FILL = 0.02
MAX_FILL = 0.5
FILL_SCORE_FACTOR = 300
# Bounding box coverage that earns a bonus
MIN_BBOX_COVERAGE = 0.05
MAX_BBOX_COVERAGE = 0.8
BBOX_BONUS = 20


def score_cell(cell: PixelBuffer) -> int:
    """Estimate how clearly a cell holds one character (0-100).

    Ink covering 2-50 % of the cell scores ``fill * 300`` (capped at 100),
    plus a bonus when the ink's bounding box covers 5-80 % of the cell.
    Blank or flooded cells score 0.
    """
    total = cell.width * cell.height
    if total == 0:
        return 0

    bitmap = binarize(cell)
    bbox = find_bounding_box(bitmap)
    fill = bitmap.foreground_count() / total

    if bbox is None or not (MIN_FILL < fill < MAX_FILL):
        return 0

    score = min(100, math.floor(fill * FILL_SCORE_FACTOR + 0.5))
    coverage = (bbox[2] * bbox[3]) / total
    if MIN_BBOX_COVERAGE < coverage < MAX_BBOX_COVERAGE:
        score = min(100, score + BBOX_BONUS)
    return score


class GridCellLocator:
    """Locates cells on a fixed columns x rows grid.

    Characters beyond the grid capacity are not located.

    Example:
        result = GridCellLocator(columns=5, rows=6).locate(sheet, list("ABC"))
    """

    def __init__(
        self,
        columns: int = DEFAULT_COLUMNS,
        rows: int = DEFAULT_ROWS,
        padding_ratio: float = DEFAULT_PADDING_RATIO,
    ) -> None:
        self.columns = columns
        self.rows = rows
        self.padding_ratio = padding_ratio

    def cell_box(self, index: int, image_width: int, image_height: int) -> CellBox:
        """Inset box of the grid slot at ``index`` (row-major)."""
        cell_width = image_width // self.columns
        cell_height = image_height // self.rows
        row, col = divmod(index, self.columns)
        pad = math.floor(cell_width * self.padding_ratio + 0.5)
        return CellBox(
            x=col * cell_width + pad,
            y=row * cell_height + pad,
            width=cell_width - 2 * pad,
            height=cell_height - 2 * pad,
        )

    def locate(self, image: PixelBuffer, characters: list[str]) -> LocatorResult:
        capacity = self.columns * self.rows
        cells: list[LocatedCell] = []
        issues: list[str] = []

        for index, char in enumerate(characters[:capacity]):
            box = self.cell_box(index, image.width, image.height)
            crop = image.crop(int(box.x), int(box.y), int(box.width), int(box.height))
            cells.append(LocatedCell(letter=char, bbox=box, quality_score=score_cell(crop)))

        if len(characters) > capacity:
            issues.append(
                f"Grid holds {capacity} cells; {len(characters) - capacity} characters not located"
            )

        return LocatorResult(cells=tuple(cells), issues=tuple(issues), method="grid")
