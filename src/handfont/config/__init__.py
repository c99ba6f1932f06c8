"""Configuration management for handfont.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- FontConfig: Family names and vertical metrics
- TraceConfig: Binarization, simplification and curve fitting settings
- LocatorConfig: Template sheet cell location settings
- ProcessingConfig: Worker settings
- LoggingConfig: Logging settings
- HandfontSettings: Main application settings
"""

from handfont.config.settings import (
    DEFAULT_API_URL,
    DEFAULT_VISION_MODEL,
    FontConfig,
    HandfontSettings,
    LocatorConfig,
    LoggingConfig,
    ProcessingConfig,
    TraceConfig,
    get_default_settings,
    metric_problem,
)

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_VISION_MODEL",
    "FontConfig",
    "HandfontSettings",
    "LocatorConfig",
    "LoggingConfig",
    "ProcessingConfig",
    "TraceConfig",
    "get_default_settings",
    "metric_problem",
]
