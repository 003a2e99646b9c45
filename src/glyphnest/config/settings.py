"""Configuration settings for Glyphnest."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class SearchStrategy(str, Enum):
    """How candidate positions are generated during placement search."""

    RANDOM = "random"
    GRID = "grid"


class GeometryConfig(BaseModel):
    """Configuration for geometry and collision tests."""

    collision_margin: float = Field(
        default=5.0,
        ge=0.0,
        le=50.0,
        description="Margin each hull is expanded by before collision tests (viewport units)",
    )
    detect_containment: bool = Field(
        default=True,
        description="Treat a hull lying wholly inside another as a collision",
    )


class AnalyzerConfig(BaseModel):
    """Configuration for glyph rasterization and edge tracing.

    All pixel values are measured at the reference size, i.e. one em is
    ``reference_size`` pixels wide.
    """

    reference_size: float = Field(
        default=100.0,
        ge=16.0,
        le=1000.0,
        description="Pixels per em used when rasterizing glyphs",
    )
    padding: int = Field(
        default=4,
        ge=2,
        le=64,
        description="Background pixels around the glyph box",
    )
    stride: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Sampling stride of the edge tracer (pixels)",
    )
    band_tolerance: float = Field(
        default=10.0,
        ge=1.0,
        le=50.0,
        description="Width of the top/right/bottom/left bands used to order edge points",
    )
    flatten_tolerance: float = Field(
        default=0.25,
        ge=0.01,
        le=5.0,
        description="Maximum deviation when flattening glyph curves (pixels)",
    )


class SearchConfig(BaseModel):
    """Configuration for the placement search."""

    strategy: SearchStrategy = Field(
        default=SearchStrategy.RANDOM,
        description="Candidate position strategy",
    )
    attempts: int = Field(
        default=200,
        ge=1,
        le=10000,
        description="Random candidate positions per placement",
    )
    grid_size: int = Field(
        default=14,
        ge=1,
        le=200,
        description="Grid divisions per axis for the grid strategy",
    )
    rotation_steps: int = Field(
        default=8,
        ge=1,
        le=360,
        description="Evenly spaced rotations tried at every position",
    )
    max_scale_ratio: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Largest scale as a fraction of the shorter viewport side",
    )
    min_search_scale: float = Field(
        default=10.0,
        ge=0.0,
        description="Lower bound of the scale binary search",
    )
    min_scale: float = Field(
        default=15.0,
        ge=0.0,
        description="Scale floor applied to every searched placement",
    )
    max_iterations: int = Field(
        default=15,
        ge=1,
        le=64,
        description="Binary search iteration cap",
    )
    convergence_threshold: float = Field(
        default=2.0,
        gt=0.0,
        description="Binary search stops once the bracket is narrower than this",
    )
    boundary_margin: float = Field(
        default=20.0,
        ge=0.0,
        description="Distance kept from every viewport edge",
    )
    width_ratio: float = Field(
        default=0.7,
        gt=0.0,
        le=2.0,
        description="Estimated glyph width as a fraction of its scale",
    )
    fallback_scale: float = Field(
        default=50.0,
        gt=0.0,
        description="Scale used for the fallback placement",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the search random generator (None = nondeterministic)",
    )


class DispatchConfig(BaseModel):
    """Configuration for asynchronous placement dispatch."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Time allowed for a dispatched placement before falling back",
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


class GlyphNestSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphNestSettings:
    """Get default application settings."""
    return GlyphNestSettings()
