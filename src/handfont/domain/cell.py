"""Character cells: the per-character input of the vectorization pipeline."""

from dataclasses import dataclass
from typing import Any

from handfont.domain.raster import PixelBuffer


@dataclass(frozen=True)
class CharacterCell:
    """One requested character slot.

    Attributes:
        label: The character this slot is for
        unicode: Code point the glyph will be mapped to
        buffer: Located raster sample, or None when the slot has no content
        quality_score: Advisory 0-100 score from the cell locator, if any
    """

    label: str
    unicode: int
    buffer: PixelBuffer | None = None
    quality_score: int | None = None

    @classmethod
    def for_char(
        cls,
        char: str,
        buffer: PixelBuffer | None = None,
        quality_score: int | None = None,
    ) -> "CharacterCell":
        """Create a cell for a single character, deriving its code point."""
        return cls(label=char, unicode=ord(char), buffer=buffer, quality_score=quality_score)

    @property
    def has_content(self) -> bool:
        return self.buffer is not None and self.buffer.width > 0 and self.buffer.height > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "label": self.label,
            "unicode": self.unicode,
            "buffer": self.buffer.to_dict() if self.buffer is not None else None,
            "quality_score": self.quality_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CharacterCell":
        """Deserialize from dictionary."""
        buffer = PixelBuffer.from_dict(data["buffer"]) if data["buffer"] is not None else None
        return cls(
            label=data["label"],
            unicode=data["unicode"],
            buffer=buffer,
            quality_score=data.get("quality_score"),
        )
