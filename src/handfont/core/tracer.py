"""Moore-neighborhood boundary tracing.

Extracts the boundary of every 8-connected foreground region of a bitmap as
an ordered, closed point sequence. The walk is expressed as an explicit state
machine: ``step`` maps a TraceState to the next state (or None when the walk
is stuck), and ``trace_boundary`` drives it from a start pixel.
"""

from typing import NamedTuple

from handfont.domain import Bitmap, Contour, Point

# Clockwise in screen coordinates (y grows downward):
# right, down-right, down, down-left, left, up-left, up, up-right
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)

LEFT = 4

# Each boundary pixel can be entered at most once per side
STEP_BUDGET_FACTOR = 4

MIN_CONTOUR_POINTS = 3


class TraceState(NamedTuple):
    """Position of the boundary walk.

    Attributes:
        x: Current pixel column
        y: Current pixel row
        backtrack: Direction index pointing back to the pixel we came from
    """

    x: int
    y: int
    backtrack: int


def step(bitmap: Bitmap, state: TraceState) -> TraceState | None:
    """Advance the walk by one pixel.

    Searches the 8 neighbors clockwise, starting one position past the
    backtrack direction, and moves to the first foreground neighbor.

    Returns:
        The next state, or None if the pixel has no foreground neighbor
    """
    start = (state.backtrack + 1) % 8
    for i in range(8):
        direction = (start + i) % 8
        dx, dy = DIRECTIONS[direction]
        nx, ny = state.x + dx, state.y + dy
        if bitmap.is_foreground(nx, ny):
            return TraceState(nx, ny, (direction + 4) % 8)
    return None


def trace_boundary(
    bitmap: Bitmap,
    start_x: int,
    start_y: int,
    visited: bytearray | None = None,
) -> list[Point]:
    """Walk the boundary that starts at a foreground pixel.

    The walk ends when it comes back to the start pixel, when it reaches a
    pixel with no foreground neighbor, or when the step budget
    (proportional to the bitmap area) runs out.

    Args:
        bitmap: Source bitmap
        start_x: Column of the start pixel (its left neighbor is background)
        start_y: Row of the start pixel
        visited: Optional row-major mask updated with every pixel on the walk

    Returns:
        Boundary pixels in walk order, start pixel first and not repeated
    """
    points: list[Point] = []
    state = TraceState(start_x, start_y, LEFT)
    max_steps = max(1, STEP_BUDGET_FACTOR * bitmap.width * bitmap.height)

    for _ in range(max_steps):
        points.append(Point(state.x, state.y))
        if visited is not None:
            visited[state.y * bitmap.width + state.x] = 1

        next_state = step(bitmap, state)
        if next_state is None:
            break
        if next_state.x == start_x and next_state.y == start_y:
            break
        state = next_state

    return points


def trace_contours(bitmap: Bitmap) -> list[Contour]:
    """Extract boundary contours from a bitmap.

    Scans in row-major order. Every unvisited foreground pixel whose left
    neighbor is background (or the image edge) starts a new contour, so
    separate strokes (the dot of an "i") become separate contours. A start
    pixel sitting to the right of an enclosed counter traces the counter's
    boundary; such contours wind the other way and are flagged as holes.

    Contours with fewer than 3 points are discarded.

    Args:
        bitmap: Source bitmap

    Returns:
        Contours in discovery order
    """
    width = bitmap.width
    bits = bitmap.bits
    visited = bytearray(width * bitmap.height)
    contours: list[Contour] = []

    for y in range(bitmap.height):
        row = y * width
        for x in range(width):
            idx = row + x
            if bits[idx] != 1 or visited[idx]:
                continue
            if x > 0 and bits[idx - 1] == 1:
                continue

            points = trace_boundary(bitmap, x, y, visited)
            if len(points) < MIN_CONTOUR_POINTS:
                continue

            contour = Contour(points=tuple(points))
            if contour.signed_area() < 0:
                contour = Contour(points=contour.points, is_hole=True)
            contours.append(contour)

    return contours
