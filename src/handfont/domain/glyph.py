"""Glyph representation and metadata.

This module defines the glyph domain model, which represents a single
glyph (character) in design units with its outline segments and metadata.
"""

from dataclasses import dataclass, field
from typing import Any

from handfont.domain.path import PathSegment, SegmentType, split_outlines


@dataclass(frozen=True)
class GlyphMetadata:
    """Metadata about a glyph.

    Attributes:
        name: Glyph name (e.g., "A", "exclam", ".notdef")
        label: Character label the glyph was requested for ("" for placeholders)
        unicode: Unicode code point (None for unencoded glyphs)
        advance_width: Horizontal advance width in font units
    """

    name: str
    label: str
    unicode: int | None
    advance_width: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "name": self.name,
            "label": self.label,
            "unicode": self.unicode,
            "advance_width": self.advance_width,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphMetadata":
        """Deserialize from dictionary."""
        return cls(
            name=data["name"],
            label=data["label"],
            unicode=data["unicode"],
            advance_width=data["advance_width"],
        )


@dataclass(frozen=True)
class Glyph:
    """A single glyph with its outline in design units.

    Attributes:
        metadata: Glyph metadata (name, unicode, advance width)
        segments: Drawing commands forming zero or more closed outlines
    """

    metadata: GlyphMetadata
    segments: tuple[PathSegment, ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def unicode(self) -> int | None:
        return self.metadata.unicode

    @property
    def advance_width(self) -> int:
        return self.metadata.advance_width

    def is_empty(self) -> bool:
        """Check if glyph has no outlines.

        Empty glyphs include space and characters with no traceable ink.
        """
        return len(self.segments) == 0

    def outline_count(self) -> int:
        """Number of closed outlines in the glyph."""
        return len(split_outlines(self.segments))

    def bounds(self) -> tuple[float, float, float, float] | None:
        """Control-point bounding box (min_x, min_y, max_x, max_y), or None if empty."""
        points = [p for segment in self.segments for p in segment.points]
        if not points:
            return None
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return (min(xs), min(ys), max(xs), max(ys))

    def curve_count(self) -> int:
        """Number of cubic segments in the outline."""
        return sum(1 for s in self.segments if s.kind == SegmentType.CURVE_TO)

    def renamed(self, name: str) -> "Glyph":
        """Return a copy of this glyph under a different glyph name."""
        metadata = GlyphMetadata(
            name=name,
            label=self.metadata.label,
            unicode=self.metadata.unicode,
            advance_width=self.metadata.advance_width,
        )
        return Glyph(metadata=metadata, segments=self.segments)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "metadata": self.metadata.to_dict(),
            "segments": [s.to_dict() for s in self.segments],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Glyph":
        """Deserialize from dictionary."""
        return cls(
            metadata=GlyphMetadata.from_dict(data["metadata"]),
            segments=tuple(PathSegment.from_dict(s) for s in data["segments"]),
        )
