"""Configuration management for glyphnest.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerances and collision margin
- AnalyzerConfig: Glyph rasterization and edge tracing settings
- SearchConfig: Placement search budget and limits
- DispatchConfig: Asynchronous dispatch settings
- LoggingConfig: Logging settings
- GlyphNestSettings: Main application settings
"""

from glyphnest.config.settings import (
    AnalyzerConfig,
    DispatchConfig,
    GeometryConfig,
    GlyphNestSettings,
    LoggingConfig,
    SearchConfig,
    SearchStrategy,
    get_default_settings,
)

__all__ = [
    "AnalyzerConfig",
    "DispatchConfig",
    "GeometryConfig",
    "GlyphNestSettings",
    "LoggingConfig",
    "SearchConfig",
    "SearchStrategy",
    "get_default_settings",
]
