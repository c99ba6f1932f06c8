"""Outline path segments.

PathSegment is the representation handed from the curve fitter to the glyph
builder and from glyphs to the font encoder. It mirrors the drawing commands
of the fontTools pen protocol.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from handfont.domain.contour import Point


class SegmentType(Enum):
    """Kind of path segment."""

    MOVE_TO = "moveTo"
    LINE_TO = "lineTo"
    CURVE_TO = "curveTo"
    CLOSE = "closePath"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A single drawing command.

    Attributes:
        kind: Segment type
        points: Points of the command. One point for MOVE_TO and LINE_TO,
            (c1, c2, end) for CURVE_TO and none for CLOSE.
    """

    kind: SegmentType
    points: tuple[Point, ...] = ()

    @classmethod
    def move_to(cls, point: Point) -> "PathSegment":
        return cls(SegmentType.MOVE_TO, (point,))

    @classmethod
    def line_to(cls, point: Point) -> "PathSegment":
        return cls(SegmentType.LINE_TO, (point,))

    @classmethod
    def curve_to(cls, c1: Point, c2: Point, end: Point) -> "PathSegment":
        return cls(SegmentType.CURVE_TO, (c1, c2, end))

    @classmethod
    def close(cls) -> "PathSegment":
        return cls(SegmentType.CLOSE, ())

    @property
    def end(self) -> Point | None:
        """The on-curve point this segment finishes at (None for CLOSE)."""
        return self.points[-1] if self.points else None

    def map_points(self, fn: Callable[[Point], Point]) -> "PathSegment":
        """Return a copy with every point passed through ``fn``."""
        return PathSegment(self.kind, tuple(fn(p) for p in self.points))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"kind": self.kind.value, "points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PathSegment":
        """Deserialize from dictionary."""
        return cls(
            SegmentType(data["kind"]),
            tuple(Point.from_dict(p) for p in data["points"]),
        )


def split_outlines(segments: tuple[PathSegment, ...] | list[PathSegment]) -> list[list[PathSegment]]:
    """Split a segment sequence into one list per closed outline.

    Each outline starts at a MOVE_TO; the CLOSE segment is kept with it.
    """
    outlines: list[list[PathSegment]] = []
    current: list[PathSegment] = []

    for segment in segments:
        if segment.kind == SegmentType.MOVE_TO and current:
            outlines.append(current)
            current = []
        current.append(segment)
        if segment.kind == SegmentType.CLOSE:
            outlines.append(current)
            current = []

    if current:
        outlines.append(current)

    return outlines
