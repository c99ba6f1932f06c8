"""Shared fixtures for reading written fonts back."""

from typing import Any

import pytest
from fontTools.pens.recordingPen import RecordingPen

from handfont.domain import PathSegment, Point


def _recording_to_segments(recording: list[tuple[str, tuple[Any, ...]]]) -> list[PathSegment]:
    """Convert RecordingPen commands to path segments.

    Quadratic runs from TrueType fonts become a single LINE_TO to their final
    on-curve point, which is enough to compare on-curve geometry.
    """
    segments: list[PathSegment] = []
    for command, args in recording:
        points = [Point(pt[0], pt[1]) for pt in args if pt is not None]
        if command == "moveTo":
            segments.append(PathSegment.move_to(points[0]))
        elif command == "lineTo":
            segments.append(PathSegment.line_to(points[0]))
        elif command == "curveTo":
            segments.append(PathSegment.curve_to(*points))
        elif command == "qCurveTo":
            segments.append(PathSegment.line_to(points[-1]))
        elif command in ("closePath", "endPath"):
            segments.append(PathSegment.close())
    return segments


@pytest.fixture
def glyph_segments():
    """Read a glyph out of a fontTools glyph set as path segments."""

    def read(glyph_set: Any, name: str) -> list[PathSegment]:
        pen = RecordingPen()
        glyph_set[name].draw(pen)
        return _recording_to_segments(pen.value)

    return read
