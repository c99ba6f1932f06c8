"""Configuration settings for Handfont."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_VISION_MODEL = "google/gemini-2.5-flash-lite"


class FontConfig(BaseModel):
    """Font family metadata and vertical metrics.

    All glyph transforms depend on these values, so an invalid combination is
    rejected at construction time, before any character is processed.
    """

    model_config = ConfigDict(frozen=True)

    family_name: str = Field(
        default="MyHandwriting",
        min_length=1,
        description="Font family name",
    )
    style_name: str = Field(
        default="Regular",
        min_length=1,
        description="Font style name",
    )
    units_per_em: int = Field(
        default=1000,
        description="Design units per em",
    )
    ascender: int = Field(
        default=800,
        description="Ascender in design units (positive)",
    )
    descender: int = Field(
        default=-200,
        description="Descender in design units (negative)",
    )
    version: str = Field(
        default="1.0",
        description="Font version string (without the 'Version ' prefix)",
    )

    @model_validator(mode="after")
    def _check_metrics(self) -> "FontConfig":
        problem = metric_problem(self.units_per_em, self.ascender, self.descender)
        if problem is not None:
            raise ValueError(problem)
        return self


def metric_problem(units_per_em: int, ascender: int, descender: int) -> str | None:
    """Describe why a set of vertical metrics is invalid.

    Returns:
        A human readable reason, or None when the metrics are usable
    """
    if units_per_em <= 0:
        return f"units_per_em must be positive, got {units_per_em}"
    if ascender <= 0:
        return f"ascender must be positive, got {ascender}"
    if descender >= 0:
        return f"descender must be negative, got {descender}"
    return None


class TraceConfig(BaseModel):
    """Configuration for raster tracing and curve fitting."""

    threshold: int | None = Field(
        default=None,
        ge=0,
        le=255,
        description="Fixed luminance threshold (None = Otsu)",
    )
    epsilon: float = Field(
        default=1.5,
        gt=0.0,
        le=50.0,
        description="Douglas-Peucker tolerance in pixels",
    )
    tension: float = Field(
        default=6.0,
        ge=1.0,
        le=100.0,
        description="Catmull-Rom tension divisor (higher = tighter curves)",
    )
    side_margin: float = Field(
        default=0.1,
        ge=0.0,
        le=0.5,
        description="Side margin added to the advance width, as a fraction of UPM",
    )
    crop_padding: int = Field(
        default=3,
        ge=0,
        le=64,
        description="Padding in pixels kept around the foreground when cropping",
    )
    normalize_size: int | None = Field(
        default=200,
        ge=16,
        le=4096,
        description="Square canvas size cells are scaled to (None = trace as-is)",
    )


class LocatorConfig(BaseModel):
    """Configuration for locating character cells on a template sheet."""

    use_ai: bool = Field(
        default=True,
        description="Ask the vision model for cell boxes before falling back to the grid",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="OpenAI-compatible chat completions endpoint",
    )
    model: str = Field(
        default=DEFAULT_VISION_MODEL,
        description="Vision model identifier",
    )
    timeout_seconds: float = Field(
        default=15.0,
        gt=0.0,
        le=300.0,
        description="Timeout for the vision request",
    )
    grid_columns: int = Field(
        default=5,
        ge=1,
        le=26,
        description="Columns of the fallback grid",
    )
    grid_rows: int = Field(
        default=6,
        ge=1,
        le=26,
        description="Rows of the fallback grid",
    )
    min_quality: int = Field(
        default=1,
        ge=0,
        le=100,
        description="Cells scoring below this are treated as empty",
    )


class ProcessingConfig(BaseModel):
    """Configuration for glyph processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto, 1 = inline)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class HandfontSettings(BaseModel):
    """Main application settings."""

    font: FontConfig = Field(default_factory=FontConfig)
    trace: TraceConfig = Field(default_factory=TraceConfig)
    locator: LocatorConfig = Field(default_factory=LocatorConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> HandfontSettings:
    """Get default application settings."""
    return HandfontSettings()
