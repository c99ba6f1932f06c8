"""Core geometric types for contour representation.

This module defines the fundamental geometric types used throughout handfont:
- Point: A 2D point in pixel or design space
- Contour: A closed, immutable point sequence traced from a bitmap
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts. Pixel-space points carry
    integer coordinates, design-space and control points may be fractional.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True)
class Contour:
    """A closed contour representing a region boundary.

    The closing edge from the last point back to the first is implicit.
    Each pipeline stage (traced, simplified) produces a new Contour; a
    contour is never modified in place.

    Attributes:
        points: Ordered points forming the contour
        is_hole: True if the contour bounds an interior counter rather than
            the outside of a foreground region
    """

    points: tuple[Point, ...]
    is_hole: bool = field(default=False)

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        In image space (y grows downward) an outer boundary traced by the
        boundary follower has positive area and a hole has negative area.

        Returns:
            Signed area of the contour
        """
        n = len(self.points)
        if n < 3:
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        return area / 2.0

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate bounding box of the contour.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if not self.points:
            return (0.0, 0.0, 0.0, 0.0)

        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def with_points(self, points: list[Point] | tuple[Point, ...]) -> "Contour":
        """Return a new contour with the same hole flag and different points."""
        return Contour(points=tuple(points), is_hole=self.is_hole)

