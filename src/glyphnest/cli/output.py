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

from glyphnest.domain import PlacedShape, ShapeAnalysis
from glyphnest.utils import PlacementStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for glyph placement.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def print_header(version: str) -> None:
    """Print application header."""
    console.print(f"\n[bold]Glyphnest[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(font_path: str, font_type: str, glyph_count: int, upm: int) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font_type: Font format type (e.g., "TrueType", "OpenType")
        glyph_count: Total number of glyphs in font
        upm: Units per em value
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(font_path)
    line.append(f" ({font_type})")
    console.print(line)
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")


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


def print_shape_table(analyses: list[ShapeAnalysis]) -> None:
    """Print one row per analyzed glyph."""
    table = Table(box=None, pad_edge=False)
    table.add_column("Glyph")
    table.add_column("Hull", justify="right")
    table.add_column("Area", justify="right")
    table.add_column("Centroid", justify="right")
    table.add_column("Bounds", justify="right")

    for analysis in analyses:
        if analysis.is_blank:
            table.add_row(repr(analysis.glyph), "0", "0.0", "-", "[dim]blank[/dim]")
            continue

        bbox = analysis.bounding_box
        bounds = f"{bbox.width:.1f} × {bbox.height:.1f}" if bbox else "-"
        table.add_row(
            repr(analysis.glyph),
            str(len(analysis.polygon_approximation)),
            f"{analysis.area:.1f}",
            f"({analysis.centroid.x:.1f}, {analysis.centroid.y:.1f})",
            bounds,
        )

    console.print(table)


def print_placement_table(shapes: list[PlacedShape], fallbacks: set[str]) -> None:
    """Print one row per placed glyph.

    Args:
        shapes: Placed shapes in placement order
        fallbacks: Character ids that received the fallback placement
    """
    table = Table(box=None, pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Glyph")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Rotation", justify="right")
    table.add_column("Scale", justify="right")

    for index, shape in enumerate(shapes, start=1):
        scale = f"{shape.scale:.1f}"
        if shape.character_id in fallbacks:
            scale = f"[yellow]{scale} (fallback)[/yellow]"
        table.add_row(
            str(index),
            repr(shape.glyph),
            f"{shape.x:.1f}",
            f"{shape.y:.1f}",
            f"{shape.rotation:.0f}°",
            scale,
        )

    console.print(table)


def print_success(total_time_s: float, stats: PlacementStats) -> None:
    """Print success message with placement summary.

    Args:
        total_time_s: Total run time in seconds
        stats: Statistics from the placement logger
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    fallback_style = "yellow" if stats.fallbacks > 0 else "green"
    console.print(
        f"  {stats.placements} glyphs {SYM_DOT} {stats.candidates_tested:,} candidates {SYM_DOT} "
        f"[{fallback_style}]{stats.fallbacks} fallbacks[/{fallback_style}]"
    )

    if stats.timed_placements:
        console.print(
            f"  {stats.avg_placement_ms:.1f}ms avg "
            f"({stats.min_placement_ms:.1f}–{stats.max_placement_ms:.1f}ms range)"
        )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
