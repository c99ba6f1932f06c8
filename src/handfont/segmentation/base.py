"""Cell location: finding each character's box on a template sheet.

A locator looks at a whole handwriting sheet and reports where each requested
character was written. Locators are interchangeable behind the CellLocator
protocol; FallbackCellLocator chains a preferred locator with a dependable
one.
"""

import math
from dataclasses import dataclass, field
from typing import Protocol

from handfont.domain import CharacterCell, PixelBuffer
from handfont.exceptions import CellLocatorError
from handfont.utils import get_logger

logger = get_logger("handfont.segmentation")


@dataclass(frozen=True)
class CellBox:
    """Axis-aligned box in sheet pixels."""

    x: float
    y: float
    width: float
    height: float

    def clamped(self, image_width: int, image_height: int) -> "CellBox":
        """Round to whole pixels and clip to the image.

        The origin is clamped into the image first and the size is then cut
        to what remains, so a box hanging off the right or bottom edge keeps
        its visible part. Sizes may come out zero or negative for boxes that
        lie entirely outside the image.
        """
        x = max(0, _round_half_up(self.x))
        y = max(0, _round_half_up(self.y))
        width = min(image_width - x, _round_half_up(self.width))
        height = min(image_height - y, _round_half_up(self.height))
        return CellBox(x, y, width, height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class LocatedCell:
    """A character box reported by a locator.

    Attributes:
        letter: Character the box holds
        bbox: Box in sheet pixels
        quality_score: 0-100 clarity estimate
    """

    letter: str
    bbox: CellBox
    quality_score: int = 0


@dataclass(frozen=True)
class LocatorResult:
    """Outcome of locating cells on a sheet.

    Attributes:
        cells: Located boxes, in sheet order
        issues: Human readable problems noticed on the sheet
        method: Name of the locator that produced the result ("ai", "grid")
    """

    cells: tuple[LocatedCell, ...] = field(default=())
    issues: tuple[str, ...] = field(default=())
    method: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.cells, tuple):
            object.__setattr__(self, "cells", tuple(self.cells))
        if not isinstance(self.issues, tuple):
            object.__setattr__(self, "issues", tuple(self.issues))

    def is_empty(self) -> bool:
        return len(self.cells) == 0

    def cell_for(self, letter: str) -> LocatedCell | None:
        """First located cell for ``letter``."""
        for cell in self.cells:
            if cell.letter == letter:
                return cell
        return None


class CellLocator(Protocol):
    """Anything that can find character boxes on a sheet."""

    def locate(self, image: PixelBuffer, characters: list[str]) -> LocatorResult:
        """Locate ``characters`` on ``image``.

        Raises:
            CellLocatorError: If no boxes could be produced
        """
        ...


class FallbackCellLocator:
    """Try a primary locator, falling back on failure or an empty result.

    Example:
        locator = FallbackCellLocator(VisionCellLocator(api_key), GridCellLocator())
        result = locator.locate(sheet, list("ABC"))
    """

    def __init__(self, primary: CellLocator, fallback: CellLocator) -> None:
        self.primary = primary
        self.fallback = fallback

    def locate(self, image: PixelBuffer, characters: list[str]) -> LocatorResult:
        try:
            result = self.primary.locate(image, characters)
        except CellLocatorError as e:
            logger.warning("Primary cell locator failed, using fallback", error=e.reason)
            return self.fallback.locate(image, characters)

        if result.is_empty():
            logger.warning("Primary cell locator returned no cells, using fallback")
            return self.fallback.locate(image, characters)

        return result


def crop_cells(
    image: PixelBuffer,
    result: LocatorResult,
    characters: list[str],
    min_quality: int = 1,
) -> list[CharacterCell]:
    """Cut one cell per requested character out of the sheet.

    Characters the locator did not report, boxes outside the image and boxes
    scoring below ``min_quality`` become cells without content.
    """
    cells: list[CharacterCell] = []

    for char in characters:
        located = result.cell_for(char)
        if located is None:
            cells.append(CharacterCell.for_char(char))
            continue

        box = located.bbox.clamped(image.width, image.height)
        if box.is_empty or located.quality_score < min_quality:
            logger.debug(
                "Cell dropped",
                character=char,
                quality=located.quality_score,
                empty_box=box.is_empty,
            )
            cells.append(CharacterCell.for_char(char, quality_score=located.quality_score))
            continue

        buffer = image.crop(int(box.x), int(box.y), int(box.width), int(box.height))
        cells.append(CharacterCell.for_char(char, buffer, located.quality_score))

    return cells


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
