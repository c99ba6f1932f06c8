"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from handfont.domain import FontDocument
from handfont.segmentation import LocatorResult

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for character processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Handfont[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_samples_found(found: int, requested: int, missing: list[str], verbose: bool) -> None:
    """Print how many requested characters have a usable sample.

    Args:
        found: Characters with a sample
        requested: Characters requested
        missing: Characters without a sample
        verbose: Whether to list the missing characters
    """
    style = "green" if found == requested else "yellow"
    console.print(f"  [{style}]{found}[/{style}] of {requested} characters have samples")
    if verbose and missing:
        shown = " ".join(missing[:40])
        if len(missing) > 40:
            shown += f" {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(missing) - 40} more)"
        console.print(f"  missing: {shown}")


def print_locator_result(result: LocatorResult, verbose: bool) -> None:
    """Print the cell location summary, with a per-cell table when verbose."""
    method = "vision model" if result.method == "ai" else "fixed grid"
    console.print(f"  {len(result.cells)} cells located {SYM_DOT} {method}")
    for issue in result.issues:
        line = Text(f"  {SYM_DOT} ")
        line.append(issue, style="yellow")
        console.print(line)

    if verbose and result.cells:
        table = Table(box=None, padding=(0, 2))
        table.add_column("Char")
        table.add_column("Box")
        table.add_column("Quality", justify="right")
        for cell in result.cells:
            box = cell.bbox
            table.add_row(
                cell.letter,
                f"{box.x:.0f},{box.y:.0f} {box.width:.0f}x{box.height:.0f}",
                str(cell.quality_score),
            )
        console.print(table)


def print_glyph_table(document: FontDocument) -> None:
    """Print advance width, outline and curve counts of each character glyph."""
    widths = document.advance_widths()
    table = Table(box=None, padding=(0, 2))
    table.add_column("Glyph")
    table.add_column("Advance", justify="right")
    table.add_column("Outlines", justify="right")
    table.add_column("Curves", justify="right")
    # .notdef and space lead the glyph order
    for name in document.glyph_order[2:]:
        glyph = document.get_glyph(name)
        table.add_row(name, str(widths[name]), str(glyph.outline_count()), str(glyph.curve_count()))
    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    """Print processing configuration.

    Args:
        workers: Number of parallel workers
        is_auto: Whether the count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    glyphs: int,
    traced: int,
    empty: int,
    errors: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total processing time in seconds
        glyphs: Glyphs in the font, including .notdef and space
        traced: Characters traced into outlines
        empty: Characters left without an outline
        errors: Number of errors encountered
        avg_time_ms: Average processing time per glyph in milliseconds
        min_time_ms: Minimum processing time per glyph in milliseconds
        max_time_ms: Maximum processing time per glyph in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    empty_style = "yellow" if empty > 0 else "green"
    console.print(
        f"  {glyphs} glyphs {SYM_DOT} {traced} traced {SYM_DOT} "
        f"[{empty_style}]{empty} empty[/{empty_style}] {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )

    if avg_time_ms is not None:
        timing_str = f"{avg_time_ms:.1f}ms avg"
        if min_time_ms is not None and max_time_ms is not None:
            timing_str += f" ({min_time_ms:.1f}–{max_time_ms:.1f}ms range)"
        console.print(f"  {timing_str}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        processed: Number of characters processed before cancellation
        cancelled: Number of pending tasks that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} characters completed {SYM_DOT} {cancelled} tasks cancelled")
    console.print("  No output file created")
