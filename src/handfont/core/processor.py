"""Parallel orchestration of the vectorization pipeline.

Every requested character is an independent pipeline run, so cells are fanned
out over worker processes and the resulting glyphs are merged back in request
order before the font is assembled.

Key components:
- process_cell: Top-level picklable function for parallel execution
- FontGenerator: Main orchestrator turning character cells into a font
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from handfont.config import FontConfig, HandfontSettings, TraceConfig
from handfont.core.assembler import FontAssembler
from handfont.core.glyph_builder import GlyphBuilder, validate_font_config
from handfont.core.pipeline import trace_cell
from handfont.domain import CharacterCell, FontDocument, Glyph
from handfont.domain.outline import EmptyOutline
from handfont.exceptions import ProcessingCancelledError
from handfont.utils import ProcessingLogger, ProcessingStats, configure_logging

ProgressCallback = Callable[[int, int, str, bool], None]


def process_cell(
    cell_dict: dict[str, Any],
    trace_dict: dict[str, Any],
    font_dict: dict[str, Any],
) -> dict[str, Any]:
    """Vectorize a single character cell into a glyph.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Args:
        cell_dict: Serialized cell (from CharacterCell.to_dict())
        trace_dict: Serialized trace configuration
        font_dict: Serialized font configuration

    Returns:
        Dictionary containing either:
        - Success: {"glyph": glyph_dict, "contours": int, "holes": int,
          "empty_reason": str | None, "duration_ms": float}
        - Error: {"error": str, "label": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        cell = CharacterCell.from_dict(cell_dict)
        trace_config = TraceConfig(**trace_dict)
        builder = GlyphBuilder(FontConfig(**font_dict), side_margin=trace_config.side_margin)

        outline = trace_cell(cell, trace_config)
        glyph = builder.build(outline, label=cell.label, unicode=cell.unicode)

        if isinstance(outline, EmptyOutline):
            contours, holes, empty_reason = 0, 0, outline.reason
        else:
            contours, holes, empty_reason = len(outline.contours), outline.hole_count, None

        return {
            "glyph": glyph.to_dict(),
            "contours": contours,
            "holes": holes,
            "empty_reason": empty_reason,
            "duration_ms": (time.time() - start_time) * 1000,
        }

    except Exception as e:
        return {
            "error": str(e),
            "label": cell_dict.get("label", "unknown"),
            "traceback": traceback.format_exc(),
            "duration_ms": (time.time() - start_time) * 1000,
        }


class FontGenerator:
    """Turns character cells into a complete font.

    Manages the complete workflow:
    1. Validate the font configuration (fail fast)
    2. Vectorize every cell, in worker processes or inline
    3. Merge glyphs in request order, substituting empty glyphs for failures
    4. Assemble .notdef + space + user glyphs into a FontDocument

    Example:
        generator = FontGenerator(HandfontSettings())
        document, stats = generator.generate(cells)
        document.save(Path("MyHandwriting.otf"))
    """

    def __init__(self, config: HandfontSettings) -> None:
        """Initialize the generator.

        Args:
            config: Settings carrying font, trace, processing and logging config

        Raises:
            ConfigurationError: If the font metrics are invalid
        """
        validate_font_config(config.font)
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
        )
        self.builder = GlyphBuilder(config.font, side_margin=config.trace.side_margin)
        self.assembler = FontAssembler(config.font)

    def generate(
        self,
        cells: list[CharacterCell],
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> tuple[FontDocument, ProcessingStats]:
        """Vectorize all cells and assemble the font document.

        Args:
            cells: One cell per requested character, in request order
            max_workers: Maximum worker processes (None = config, 1 = inline)
            progress_callback: Optional callback(completed, total, label, success)

        Returns:
            The assembled document (len(cells) + 2 glyphs) and run statistics

        Raises:
            ProcessingCancelledError: If processing is interrupted by the user
        """
        if max_workers is None:
            max_workers = self.config.processing.max_workers

        processing_logger = ProcessingLogger(self.logger)
        stats = processing_logger.stats
        stats.start_time = time.time()

        self.logger.info(
            "Starting font generation",
            family=self.config.font.family_name,
            characters=len(cells),
            max_workers=max_workers,
        )

        if max_workers == 1:
            results = self._process_inline(cells, processing_logger, progress_callback)
        else:
            results = self._process_parallel(cells, max_workers, processing_logger, progress_callback)

        glyphs = [
            results.get(idx) or self.builder.empty_glyph(cell.label, cell.unicode)
            for idx, cell in enumerate(cells)
        ]
        document = self.assembler.assemble(glyphs)

        stats.end_time = time.time()
        self.logger.info(
            "Generation complete",
            glyphs=len(document),
            traced=stats.traced_count,
            empty=stats.empty_count,
            errors=stats.error_count,
            contours=stats.contour_count,
            holes=stats.hole_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return document, stats

    def generate_to_file(
        self,
        cells: list[CharacterCell],
        output_path: Path,
        fmt: str | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> tuple[FontDocument, ProcessingStats]:
        """Generate the font and write it to ``output_path``.

        Returns:
            The assembled document and the run statistics
        """
        document, stats = self.generate(cells, max_workers, progress_callback)
        saved = document.save(output_path, fmt)
        self.logger.info("Font saved", output=str(saved), glyphs=len(document))
        return document, stats

    def _handle_result(
        self,
        cell: CharacterCell,
        result: dict[str, Any],
        processing_logger: ProcessingLogger,
    ) -> Glyph | None:
        if "error" in result:
            processing_logger.log_glyph_error(
                glyph_name=result["label"],
                error=Exception(result["error"]),
                traceback=result.get("traceback"),
            )
            return None

        glyph = Glyph.from_dict(result["glyph"])
        if result["empty_reason"] is not None:
            processing_logger.log_glyph_empty(glyph.name, result["empty_reason"])
        else:
            processing_logger.log_glyph_complete(
                glyph_name=glyph.name,
                contours=result["contours"],
                holes=result["holes"],
                duration_ms=result.get("duration_ms", 0.0),
            )
        return glyph

    def _process_inline(
        self,
        cells: list[CharacterCell],
        processing_logger: ProcessingLogger,
        progress_callback: ProgressCallback | None,
    ) -> dict[int, Glyph]:
        results: dict[int, Glyph] = {}
        trace_dict = self.config.trace.model_dump()
        font_dict = self.config.font.model_dump()

        for idx, cell in enumerate(cells):
            try:
                processing_logger.log_glyph_start(cell.label)
                result = process_cell(cell.to_dict(), trace_dict, font_dict)
            except KeyboardInterrupt as e:
                self.logger.info("Cancellation requested by user")
                stats = processing_logger.stats
                stats.was_cancelled = True
                stats.cancelled_count = len(cells) - idx
                raise ProcessingCancelledError(idx, len(cells) - idx) from e

            glyph = self._handle_result(cell, result, processing_logger)
            if glyph is not None:
                results[idx] = glyph
            if progress_callback is not None:
                progress_callback(idx + 1, len(cells), cell.label, glyph is not None)

        return results

    def _process_parallel(
        self,
        cells: list[CharacterCell],
        max_workers: int | None,
        processing_logger: ProcessingLogger,
        progress_callback: ProgressCallback | None,
    ) -> dict[int, Glyph]:
        """Process cells in parallel using ProcessPoolExecutor.

        Returns:
            Dictionary mapping slot index to glyph; failed slots are absent
        """
        results: dict[int, Glyph] = {}
        trace_dict = self.config.trace.model_dump()
        font_dict = self.config.font.model_dump()

        total = len(cells)
        completed = 0
        pending_futures: dict[Future, int] = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for idx, cell in enumerate(cells):
                processing_logger.log_glyph_start(cell.label)
                future = executor.submit(process_cell, cell.to_dict(), trace_dict, font_dict)
                pending_futures[future] = idx

            try:
                for future in as_completed(list(pending_futures)):
                    idx = pending_futures.pop(future)
                    cell = cells[idx]
                    glyph = None

                    try:
                        glyph = self._handle_result(cell, future.result(), processing_logger)
                    except Exception as e:
                        # Executor-level error (e.g. a worker process died)
                        processing_logger.log_glyph_error(
                            glyph_name=cell.label,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    if glyph is not None:
                        results[idx] = glyph

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, cell.label, glyph is not None)

            except KeyboardInterrupt as e:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats = processing_logger.stats
                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise ProcessingCancelledError(completed, len(pending_futures)) from e

        return results
