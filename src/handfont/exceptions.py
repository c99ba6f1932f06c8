"""Exception hierarchy for Handfont."""


class HandfontError(Exception):
    """Base exception for all Handfont errors."""

    pass


class ConfigurationError(HandfontError):
    """Font configuration violates a metric invariant."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid font configuration: {reason}")


class ImageError(HandfontError):
    """Errors related to raster input."""

    pass


class ImageLoadError(ImageError):
    """Error loading an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image '{path}': {reason}")


class InvalidPixelBufferError(ImageError):
    """Pixel data does not match the declared dimensions."""

    def __init__(self, width: int, height: int, length: int) -> None:
        self.width = width
        self.height = height
        self.length = length
        super().__init__(
            f"Pixel buffer of {width}x{height} needs {width * height * 4} bytes, got {length}"
        )


class FontError(HandfontError):
    """Errors related to building or saving the font binary."""

    pass


class FontBuildError(FontError):
    """Error encoding a font document."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to build font: {reason}")


class FontSaveError(FontError):
    """Error saving a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save font '{path}': {reason}")


class UnsupportedFormatError(FontError):
    """Requested output format is not supported."""

    def __init__(self, fmt: str) -> None:
        self.fmt = fmt
        super().__init__(f"Unsupported font format '{fmt}' (expected otf, ttf, woff or woff2)")


class CellLocatorError(HandfontError):
    """A cell locator could not produce character boxes."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cell location failed: {reason}")


class ProcessingCancelledError(HandfontError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
