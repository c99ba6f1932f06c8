"""Utility functions for handfont.

This module provides logging setup and processing statistics.
"""

from handfont.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
    get_logger,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
    "get_logger",
]
