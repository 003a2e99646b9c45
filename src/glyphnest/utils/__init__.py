"""Utility functions for glyphnest.

This module provides logging setup and the placement logger that
accumulates per-session statistics.
"""

from glyphnest.utils.logging import (
    PlacementLogger,
    PlacementStats,
    configure_logging,
    get_logger,
)

__all__ = [
    "PlacementLogger",
    "PlacementStats",
    "configure_logging",
    "get_logger",
]
