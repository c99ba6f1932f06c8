"""Image reader for loading character samples.

Samples are read with Pillow and handed to the pipeline as RGBA pixel
buffers. A directory of samples holds one image per character, named after
the glyph (``A.png``, ``exclam.png``), its code point (``uni0021.png``) or the
character itself where the file system allows it.
"""

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from handfont.domain import CharacterCell, PixelBuffer
from handfont.domain.charset import glyph_name_for
from handfont.exceptions import ImageLoadError
from handfont.utils import get_logger

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".webp")

logger = get_logger("handfont.io.reader")


def image_to_buffer(image: Image.Image, flatten: bool = True) -> PixelBuffer:
    """Convert a Pillow image of any mode to an RGBA pixel buffer.

    Args:
        image: Source image
        flatten: Composite translucent pixels onto white. Luminance is
            weighted by alpha, so an unflattened transparent background
            reads as ink.
    """
    rgba = image.convert("RGBA")
    if flatten and rgba.getextrema()[3][0] < 255:
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        rgba = Image.alpha_composite(background, rgba)
    return PixelBuffer(width=rgba.width, height=rgba.height, data=rgba.tobytes())


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.data)


def load_image(path: Path) -> Image.Image:
    """Open an image file fully into memory.

    Raises:
        ImageLoadError: If the file is missing or not a readable image
    """
    path = Path(path)
    if not path.exists():
        raise ImageLoadError(str(path), "file not found")

    try:
        with Image.open(path) as image:
            image.load()
            return image.copy()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(str(path), str(e)) from e


def load_pixel_buffer(path: Path) -> PixelBuffer:
    """Load an image file as an RGBA pixel buffer.

    Raises:
        ImageLoadError: If the file is missing or not a readable image
    """
    return image_to_buffer(load_image(path))


def candidate_stems(char: str) -> list[str]:
    """File name stems that may hold the sample for ``char``, in priority order."""
    stems = [glyph_name_for(char), f"uni{ord(char):04X}"]
    if char.isalnum():
        stems.append(char)
    return list(dict.fromkeys(stems))


def find_sample(directory: Path, char: str) -> Path | None:
    """Locate the sample image for a character in a directory."""
    for stem in candidate_stems(char):
        for ext in IMAGE_EXTENSIONS:
            for candidate in (directory / f"{stem}{ext}", directory / f"{stem}{ext.upper()}"):
                if candidate.is_file():
                    return candidate
    return None


def load_character_cells(directory: Path, characters: list[str]) -> list[CharacterCell]:
    """Load one cell per requested character from a sample directory.

    Missing or unreadable samples become cells without content, so the
    character still gets an (empty) glyph.

    Raises:
        ImageLoadError: If ``directory`` is not a directory
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ImageLoadError(str(directory), "not a directory")

    cells: list[CharacterCell] = []
    for char in characters:
        path = find_sample(directory, char)
        if path is None:
            logger.warning("No sample found", character=char, directory=str(directory))
            cells.append(CharacterCell.for_char(char))
            continue

        try:
            buffer = load_pixel_buffer(path)
        except ImageLoadError as e:
            logger.warning("Skipping unreadable sample", character=char, error=str(e))
            cells.append(CharacterCell.for_char(char))
            continue

        logger.debug("Sample loaded", character=char, path=str(path))
        cells.append(CharacterCell.for_char(char, buffer))

    return cells
