"""Logging utilities for handfont."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import structlog

_HANDLER_NAME_PREFIX = "handfont"


@dataclass
class ProcessingStats:
    """Statistics from a font generation run."""

    traced_count: int = 0
    empty_count: int = 0
    error_count: int = 0
    contour_count: int = 0
    hole_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    glyph_timings_ms: list[float] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def processed_count(self) -> int:
        """Slots that produced a glyph (traced or empty)."""
        return self.traced_count + self.empty_count

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_glyph_ms(self) -> float:
        if not self.glyph_timings_ms:
            return 0.0
        return sum(self.glyph_timings_ms) / len(self.glyph_timings_ms)

    @property
    def min_glyph_ms(self) -> float:
        return min(self.glyph_timings_ms, default=0.0)

    @property
    def max_glyph_ms(self) -> float:
        return max(self.glyph_timings_ms, default=0.0)


def _remove_handler(root: logging.Logger, name: str) -> None:
    for existing in list(root.handlers):
        if existing.get_name() == name:
            root.removeHandler(existing)
            existing.close()


def _replace_handler(root: logging.Logger, handler: logging.Handler, name: str) -> None:
    _remove_handler(root, name)
    handler.set_name(name)
    root.addHandler(handler)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        _replace_handler(root_logger, file_handler, f"{_HANDLER_NAME_PREFIX}.file")
    else:
        _remove_handler(root_logger, f"{_HANDLER_NAME_PREFIX}.file")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    _replace_handler(root_logger, console_handler, f"{_HANDLER_NAME_PREFIX}.console")

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logger = structlog.get_logger("handfont")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


def get_logger(name: str = "handfont") -> structlog.stdlib.BoundLogger:
    """Module-level logger for I/O and locator code."""
    return structlog.get_logger(name)


class ProcessingLogger:
    """Logger for tracking generation progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_glyph_start(self, label: str) -> None:
        """Log start of character processing."""
        self._logger.debug("Processing character", character=label)

    def log_glyph_complete(
        self,
        glyph_name: str,
        contours: int,
        duration_ms: float,
        holes: int = 0,
    ) -> None:
        """Log a successfully traced glyph."""
        self._logger.info(
            "Glyph traced",
            glyph=glyph_name,
            contours=contours,
            holes=holes,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.traced_count += 1
        self._stats.contour_count += contours
        self._stats.hole_count += holes
        self._stats.glyph_timings_ms.append(duration_ms)

    def log_glyph_empty(self, glyph_name: str, reason: str) -> None:
        """Log a slot that produced an empty glyph."""
        self._logger.info("Glyph left empty", glyph=glyph_name, reason=reason)
        self._stats.empty_count += 1

    def log_glyph_error(
        self,
        glyph_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log glyph processing error."""
        self._logger.error(
            "Glyph processing failed",
            glyph=glyph_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((glyph_name, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
