"""Douglas-Peucker polyline simplification for traced contours."""

import math

from handfont.domain import Contour, Point

DEFAULT_EPSILON = 1.5


def perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
    """Distance from a point to the segment between two points.

    The projection is clamped to the segment, and a degenerate segment
    measures plain distance to its start.
    """
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return math.hypot(point.x - line_start.x, point.y - line_start.y)

    t = ((point.x - line_start.x) * dx + (point.y - line_start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    proj_x = line_start.x + t * dx
    proj_y = line_start.y + t * dy
    return math.hypot(point.x - proj_x, point.y - proj_y)


def douglas_peucker(points: list[Point], epsilon: float = DEFAULT_EPSILON) -> list[Point]:
    """Simplify an open polyline.

    Finds the point farthest from the segment joining the endpoints; if it
    is farther than ``epsilon`` both halves are simplified in turn and
    joined at that point, otherwise only the endpoints remain. Uses an
    explicit stack so long traced boundaries cannot exhaust the recursion
    limit.

    Args:
        points: Ordered points
        epsilon: Maximum allowed deviation

    Returns:
        The retained points, in order
    """
    n = len(points)
    if n <= 2:
        return list(points)

    keep = [False] * n
    keep[0] = keep[n - 1] = True
    stack = [(0, n - 1)]

    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        max_dist = 0.0
        max_idx = first
        start, end = points[first], points[last]
        for i in range(first + 1, last):
            dist = perpendicular_distance(points[i], start, end)
            if dist > max_dist:
                max_dist = dist
                max_idx = i

        if max_dist > epsilon:
            keep[max_idx] = True
            stack.append((max_idx, last))
            stack.append((first, max_idx))

    return [p for p, kept in zip(points, keep) if kept]


def simplify_contour(contour: Contour, epsilon: float = DEFAULT_EPSILON) -> Contour | None:
    """Simplify a closed contour.

    The start point is appended as the closing point before simplification
    and removed afterwards, so the corner at the start of the walk is kept
    and the pixel next to it is not.

    Returns:
        The simplified contour, or None if fewer than 3 points remain
    """
    points = list(contour.points)
    if len(points) < 3:
        return None

    simplified = douglas_peucker(points + [points[0]], epsilon)[:-1]
    if len(simplified) < 3:
        return None
    return contour.with_points(simplified)


def simplify_contours(contours: list[Contour], epsilon: float = DEFAULT_EPSILON) -> list[Contour]:
    """Simplify each contour independently, dropping the ones that collapse."""
    result: list[Contour] = []
    for contour in contours:
        simplified = simplify_contour(contour, epsilon)
        if simplified is not None:
            result.append(simplified)
    return result
