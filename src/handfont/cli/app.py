"""CLI application entry point for handfont.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from handfont import __version__
from handfont.cli.output import (
    console,
    create_progress,
    print_cancellation_summary,
    print_error,
    print_glyph_table,
    print_header,
    print_locator_result,
    print_processing_info,
    print_samples_found,
    print_step,
    print_success,
)
from handfont.config import (
    FontConfig,
    HandfontSettings,
    LocatorConfig,
    LoggingConfig,
    ProcessingConfig,
    TraceConfig,
)
from handfont.core import FontGenerator
from handfont.domain import CharacterCell, FontDocument
from handfont.domain.charset import resolve_charset
from handfont.exceptions import (
    ConfigurationError,
    FontSaveError,
    HandfontError,
    ImageLoadError,
    ProcessingCancelledError,
)
from handfont.io import FORMATS, FontWriter, load_character_cells, load_pixel_buffer
from handfont.segmentation import (
    CellLocator,
    FallbackCellLocator,
    GridCellLocator,
    VisionCellLocator,
    crop_cells,
)
from handfont.utils import ProcessingStats

API_KEY_ENV = "OPENROUTER_API_KEY"

app = typer.Typer(
    name="handfont",
    help="Turn handwriting samples into an installable font.",
    add_completion=False,
    no_args_is_help=True,
)

# Options shared by every command
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Output font path (default: {Family}-{Style}.{format})"),
]
FamilyOption = Annotated[str, typer.Option("--family", help="Font family name")]
StyleOption = Annotated[str, typer.Option("--style", help="Font style name")]
UpmOption = Annotated[int, typer.Option("--upm", help="Units per em", min=16, max=16384)]
AscenderOption = Annotated[int, typer.Option("--ascender", help="Ascender in font units")]
DescenderOption = Annotated[int, typer.Option("--descender", help="Descender in font units (negative)")]
FontVersionOption = Annotated[str, typer.Option("--font-version", help="Font version string")]
FormatOption = Annotated[
    str | None,
    typer.Option("--format", "-f", help="Output format (otf|ttf|woff|woff2, default: from suffix or otf)"),
]
CharsetOption = Annotated[
    str,
    typer.Option(
        "--charset",
        "-c",
        help="Comma-separated groups (uppercase, lowercase, digits, punctuation, all) or literal characters",
    ),
]
ThresholdOption = Annotated[
    int | None,
    typer.Option("--threshold", help="Fixed luminance threshold 0-255 (default: Otsu)", min=0, max=255),
]
EpsilonOption = Annotated[
    float,
    typer.Option("--epsilon", help="Simplification tolerance in pixels", min=0.01, max=50.0),
]
TensionOption = Annotated[
    float,
    typer.Option("--tension", help="Curve tension (higher = tighter curves)", min=1.0, max=100.0),
]
WorkersOption = Annotated[
    int | None,
    typer.Option("--workers", "-j", help="Number of parallel workers (default: auto, 1 = inline)", min=1),
]
LogFileOption = Annotated[Path | None, typer.Option("--log-file", help="Write detailed logs to file")]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose console output")]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Minimal console output")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Handfont[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Turn handwriting samples into an installable font."""


def _build_settings(
    family: str,
    style: str,
    upm: int,
    ascender: int,
    descender: int,
    font_version: str,
    threshold: int | None,
    epsilon: float,
    tension: float,
    workers: int | None,
    log_file: Path | None,
    log_level: str,
    quiet: bool,
    locator: LocatorConfig | None = None,
) -> HandfontSettings:
    try:
        font = FontConfig(
            family_name=family,
            style_name=style,
            units_per_em=upm,
            ascender=ascender,
            descender=descender,
            version=font_version,
        )
    except ValidationError as e:
        raise ConfigurationError(e.errors()[0]["msg"]) from e

    return HandfontSettings(
        font=font,
        trace=TraceConfig(threshold=threshold, epsilon=epsilon, tension=tension),
        locator=locator or LocatorConfig(),
        processing=ProcessingConfig(max_workers=workers),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "ERROR",
        ),
    )


def _resolve_output(output: Path | None, fmt: str | None, settings: HandfontSettings) -> tuple[Path, str]:
    """Pick the output path and format from the options."""
    if fmt is not None:
        fmt = fmt.lower()
        if fmt not in FORMATS:
            raise typer.BadParameter(f"expected one of {', '.join(FORMATS)}", param_hint="--format")

    if output is None:
        document = FontDocument.from_config(settings.font, [])
        return FontWriter.output_path_for(Path.cwd(), document, fmt or "otf"), fmt or "otf"

    suffix = output.suffix.lower().lstrip(".")
    return output, fmt or (suffix if suffix in FORMATS else "otf")


def _run_generation(
    cells: list[CharacterCell],
    settings: HandfontSettings,
    output_path: Path,
    fmt: str,
    workers: int | None,
    quiet: bool,
    verbose: bool = False,
) -> None:
    """Vectorize cells, write the font and report the outcome."""
    generator = FontGenerator(settings)

    if not quiet:
        actual_workers = workers if workers else os.cpu_count() or 1
        print_step("Tracing characters")
        print_processing_info(actual_workers, is_auto=(workers is None))

    document: FontDocument | None = None
    stats: ProcessingStats | None = None
    try:
        if not quiet:
            with create_progress() as progress:
                task_id = progress.add_task(f"Tracing {len(cells)} characters", total=len(cells))

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                document, stats = generator.generate_to_file(
                    cells, output_path, fmt, max_workers=workers, progress_callback=update_progress
                )
        else:
            document, stats = generator.generate_to_file(cells, output_path, fmt, max_workers=workers)
    except ProcessingCancelledError as e:
        if not quiet:
            print_cancellation_summary(processed=e.processed_count, cancelled=e.pending_count)
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

    if not quiet:
        print_success(
            output_path=str(output_path),
            file_size=_format_file_size(output_path),
            total_time_s=stats.duration_seconds,
            glyphs=len(document),
            traced=stats.traced_count,
            empty=stats.empty_count + stats.error_count,
            errors=stats.error_count,
            avg_time_ms=stats.avg_glyph_ms if stats.glyph_timings_ms else None,
            min_time_ms=stats.min_glyph_ms if stats.glyph_timings_ms else None,
            max_time_ms=stats.max_glyph_ms if stats.glyph_timings_ms else None,
        )
        if verbose:
            print_glyph_table(document)


def _handle_errors(error: Exception) -> None:
    """Report an error and exit with a failure code."""
    if isinstance(error, ConfigurationError):
        print_error(f"Invalid font metrics: {error.reason}")
    elif isinstance(error, ImageLoadError):
        print_error(f"Could not load image: {error.reason}", details=error.path)
    elif isinstance(error, FontSaveError):
        print_error(f"Could not save font: {error.reason}")
    elif isinstance(error, HandfontError):
        print_error(str(error))
    else:
        print_error(f"Unexpected error: {error}")
    raise typer.Exit(code=1)


@app.command()
def build(
    directory: Annotated[
        Path,
        typer.Argument(help="Directory with one image per character", show_default=False),
    ],
    output: OutputOption = None,
    family: FamilyOption = "MyHandwriting",
    style: StyleOption = "Regular",
    upm: UpmOption = 1000,
    ascender: AscenderOption = 800,
    descender: DescenderOption = -200,
    font_version: FontVersionOption = "1.0",
    fmt: FormatOption = None,
    charset: CharsetOption = "uppercase",
    threshold: ThresholdOption = None,
    epsilon: EpsilonOption = 1.5,
    tension: TensionOption = 6.0,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Build a font from a directory of per-character images.

    Images are looked up by glyph name (A.png, exclam.png), code point
    (uni0041.png) or the character itself.

    Example:
        handfont build samples/ --charset uppercase,digits -o Notes.otf
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not directory.is_dir():
        print_error(
            f"Input directory not found: {directory}",
            details=f"'{directory}' does not exist or is not a directory.",
        )
        raise typer.Exit(code=1)

    try:
        settings = _build_settings(
            family, style, upm, ascender, descender, font_version,
            threshold, epsilon, tension, workers, log_file, log_level, quiet,
        )
        output_path, out_fmt = _resolve_output(output, fmt, settings)
        characters = resolve_charset(charset)

        if not quiet:
            print_header(__version__)
            print_step("Loading samples")

        cells = load_character_cells(directory, characters)

        if not quiet:
            missing = [c.label for c in cells if not c.has_content]
            print_samples_found(len(cells) - len(missing), len(cells), missing, verbose)

        _run_generation(cells, settings, output_path, out_fmt, workers, quiet, verbose)

    except (typer.Exit, typer.BadParameter):
        raise
    except Exception as e:
        _handle_errors(e)


@app.command()
def sheet(
    image: Annotated[
        Path,
        typer.Argument(help="Scanned or photographed template sheet", show_default=False),
    ],
    output: OutputOption = None,
    family: FamilyOption = "MyHandwriting",
    style: StyleOption = "Regular",
    upm: UpmOption = 1000,
    ascender: AscenderOption = 800,
    descender: DescenderOption = -200,
    font_version: FontVersionOption = "1.0",
    fmt: FormatOption = None,
    charset: CharsetOption = "uppercase",
    columns: Annotated[int, typer.Option("--columns", help="Template grid columns", min=1, max=26)] = 5,
    rows: Annotated[int, typer.Option("--rows", help="Template grid rows", min=1, max=26)] = 6,
    no_ai: Annotated[
        bool,
        typer.Option("--no-ai", help=f"Skip the vision model and use the fixed grid (no {API_KEY_ENV} needed)"),
    ] = False,
    model: Annotated[str | None, typer.Option("--model", help="Vision model identifier")] = None,
    min_quality: Annotated[
        int,
        typer.Option("--min-quality", help="Cells scoring below this are left empty", min=0, max=100),
    ] = 1,
    threshold: ThresholdOption = None,
    epsilon: EpsilonOption = 1.5,
    tension: TensionOption = 6.0,
    workers: WorkersOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Build a font from a filled-in template sheet.

    Character cells are located with a vision model when an API key is set
    in the OPENROUTER_API_KEY environment variable, falling back to a fixed
    grid otherwise.

    Example:
        handfont sheet template.jpg --charset uppercase -o Notes.otf
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not image.is_file():
        print_error(
            f"Input file not found: {image}",
            details=f"'{image}' does not exist or is not a file.",
        )
        raise typer.Exit(code=1)

    try:
        locator_config = LocatorConfig(
            use_ai=not no_ai,
            grid_columns=columns,
            grid_rows=rows,
            min_quality=min_quality,
            **({"model": model} if model else {}),
        )
        settings = _build_settings(
            family, style, upm, ascender, descender, font_version,
            threshold, epsilon, tension, workers, log_file, log_level, quiet,
            locator=locator_config,
        )
        output_path, out_fmt = _resolve_output(output, fmt, settings)
        characters = resolve_charset(charset)

        if not quiet:
            print_header(__version__)
            print_step("Loading sheet")

        sheet_buffer = load_pixel_buffer(image)

        if not quiet:
            console.print(f"  {sheet_buffer.width}x{sheet_buffer.height} px")
            print_step("Locating characters")

        locator = _create_locator(settings.locator)
        result = locator.locate(sheet_buffer, characters)

        if not quiet:
            print_locator_result(result, verbose)

        cells = crop_cells(sheet_buffer, result, characters, settings.locator.min_quality)
        _run_generation(cells, settings, output_path, out_fmt, workers, quiet, verbose)

    except (typer.Exit, typer.BadParameter):
        raise
    except Exception as e:
        _handle_errors(e)


def _create_locator(config: LocatorConfig) -> CellLocator:
    """Vision locator with grid fallback, or the grid alone."""
    grid = GridCellLocator(columns=config.grid_columns, rows=config.grid_rows)
    api_key = os.environ.get(API_KEY_ENV, "")
    if not config.use_ai or not api_key:
        return grid

    vision = VisionCellLocator(
        api_key=api_key,
        api_url=config.api_url,
        model=config.model,
        timeout_seconds=config.timeout_seconds,
    )
    return FallbackCellLocator(vision, grid)


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "42 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
