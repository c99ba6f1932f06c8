"""Result variants of the vectorization pipeline.

Tracing a character either yields a traced outline or an explicit empty
result explaining why nothing usable was found. Degenerate input is never an
exception.
"""

from dataclasses import dataclass, field

from handfont.domain.contour import Contour
from handfont.domain.path import PathSegment


@dataclass(frozen=True)
class TracedOutline:
    """Fitted outline of a character in pixel space.

    Attributes:
        segments: Closed cubic/line paths, one per contour
        contours: Simplified contours the segments were fitted through
        image_width: Width of the traced image
        image_height: Height of the traced image
        bbox: Foreground bounding box (x, y, width, height) in pixels
        threshold: Luminance threshold used for binarization
    """

    segments: tuple[PathSegment, ...]
    contours: tuple[Contour, ...]
    image_width: int
    image_height: int
    bbox: tuple[int, int, int, int]
    threshold: int = 128

    @property
    def hole_count(self) -> int:
        return sum(1 for c in self.contours if c.is_hole)


@dataclass(frozen=True)
class EmptyOutline:
    """No usable foreground was found.

    Attributes:
        reason: Short description of the stage that came up empty
    """

    reason: str = field(default="no foreground")


Outline = TracedOutline | EmptyOutline
