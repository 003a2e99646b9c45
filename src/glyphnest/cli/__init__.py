"""Command-line interface for glyphnest.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Commands:
- analyze: Show the convex hull summary of characters
- place: Place a string of characters into a viewport
"""

from glyphnest.cli.app import cli, main

__all__ = ["cli", "main"]
