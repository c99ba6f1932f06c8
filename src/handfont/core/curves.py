"""Closed Catmull-Rom curve fitting.

Turns a simplified polygon into one cubic Bezier segment per edge. For the
edge p1 -> p2 with neighbors p0 (before) and p3 (after):

    c1 = p1 + (p2 - p0) / k
    c2 = p2 - (p3 - p1) / k

where k is the tension divisor. Indices wrap modulo the polygon length.
"""

from handfont.domain import Contour, PathSegment, Point

DEFAULT_TENSION = 6.0


def _control_points(
    p0: Point, p1: Point, p2: Point, p3: Point, tension: float
) -> tuple[Point, Point]:
    c1 = Point(p1.x + (p2.x - p0.x) / tension, p1.y + (p2.y - p0.y) / tension)
    c2 = Point(p2.x - (p3.x - p1.x) / tension, p2.y - (p3.y - p1.y) / tension)
    return c1, c2


def fit_contour(contour: Contour, tension: float = DEFAULT_TENSION) -> list[PathSegment]:
    """Fit a closed path through the contour's points.

    Triangles are emitted as straight lines since a spline through three
    points overshoots badly. Larger polygons get one cubic per edge; the
    last one ends back on the first point.

    Args:
        contour: Simplified contour with at least 3 points
        tension: Catmull-Rom tension divisor

    Returns:
        MOVE_TO, one segment per edge, CLOSE. Empty for degenerate input.
    """
    points = contour.points
    n = len(points)
    if n < 3:
        return []

    segments = [PathSegment.move_to(points[0])]

    if n == 3:
        segments.extend(PathSegment.line_to(points[i]) for i in (1, 2, 0))
        segments.append(PathSegment.close())
        return segments

    for i in range(n):
        p0 = points[(i - 1) % n]
        p1 = points[i]
        p2 = points[(i + 1) % n]
        p3 = points[(i + 2) % n]
        c1, c2 = _control_points(p0, p1, p2, p3, tension)
        segments.append(PathSegment.curve_to(c1, c2, p2))

    segments.append(PathSegment.close())
    return segments


def fit_contours(contours: list[Contour], tension: float = DEFAULT_TENSION) -> list[PathSegment]:
    """Fit every contour and concatenate the closed paths."""
    segments: list[PathSegment] = []
    for contour in contours:
        segments.extend(fit_contour(contour, tension))
    return segments
