"""Raster types: RGBA pixel buffers and binary bitmaps."""

from dataclasses import dataclass
from typing import Any

from handfont.exceptions import InvalidPixelBufferError

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


@dataclass(frozen=True)
class PixelBuffer:
    """An immutable grid of RGBA samples with 8-bit channels.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        data: Row-major RGBA bytes, ``width * height * 4`` long
    """

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0 or len(self.data) != self.width * self.height * 4:
            raise InvalidPixelBufferError(self.width, self.height, len(self.data))
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def filled(
        cls,
        width: int,
        height: int,
        color: tuple[int, int, int, int] = WHITE,
    ) -> "PixelBuffer":
        """Create a buffer of a single color."""
        return cls(width=width, height=height, data=bytes(color) * (width * height))

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the RGBA sample at (x, y)."""
        i = (y * self.width + x) * 4
        r, g, b, a = self.data[i : i + 4]
        return (r, g, b, a)

    def with_rect(
        self,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        color: tuple[int, int, int, int] = BLACK,
    ) -> "PixelBuffer":
        """Return a copy with the half-open rectangle [x0, x1) x [y0, y1) painted.

        The rectangle is clipped to the buffer.
        """
        x0, x1 = max(0, x0), min(self.width, x1)
        y0, y1 = max(0, y0), min(self.height, y1)
        data = bytearray(self.data)
        if x1 > x0:
            row = bytes(color) * (x1 - x0)
            for y in range(y0, y1):
                start = (y * self.width + x0) * 4
                data[start : start + len(row)] = row
        return PixelBuffer(width=self.width, height=self.height, data=bytes(data))

    def crop(self, x: int, y: int, width: int, height: int) -> "PixelBuffer":
        """Return the sub-region starting at (x, y), clipped to the buffer."""
        x0 = min(max(0, x), self.width)
        y0 = min(max(0, y), self.height)
        x1 = min(self.width, x0 + max(0, width))
        y1 = min(self.height, y0 + max(0, height))

        stride = self.width * 4
        rows = [
            self.data[row * stride + x0 * 4 : row * stride + x1 * 4]
            for row in range(y0, y1)
        ]
        return PixelBuffer(width=x1 - x0, height=y1 - y0, data=b"".join(rows))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"width": self.width, "height": self.height, "data": self.data}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PixelBuffer":
        """Deserialize from dictionary."""
        return cls(width=data["width"], height=data["height"], data=data["data"])


@dataclass(frozen=True)
class Bitmap:
    """A binary foreground/background grid.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        bits: Row-major bytes, 1 for foreground and 0 for background
        threshold: Luminance threshold the bitmap was derived with
    """

    width: int
    height: int
    bits: bytes
    threshold: int = 128

    @classmethod
    def from_rows(cls, rows: list[str], foreground: str = "#") -> "Bitmap":
        """Build a bitmap from text rows, e.g. ``[".#.", "###"]``.

        Args:
            rows: Equal-length strings, one per pixel row
            foreground: Character that marks a foreground pixel

        Returns:
            Bitmap instance
        """
        height = len(rows)
        width = len(rows[0]) if rows else 0
        bits = bytes(
            1 if ch == foreground else 0
            for row in rows
            for ch in row.ljust(width, ".")[:width]
        )
        return cls(width=width, height=height, bits=bits)

    def is_foreground(self, x: int, y: int) -> bool:
        """Check a pixel, treating everything outside the grid as background."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.bits[y * self.width + x] == 1
        return False

    def foreground_count(self) -> int:
        """Number of foreground pixels."""
        return self.bits.count(1)

    def is_empty(self) -> bool:
        """True if the bitmap has no foreground pixels."""
        return 1 not in self.bits
