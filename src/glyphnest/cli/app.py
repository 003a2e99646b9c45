"""CLI application entry point for glyphnest.

This module provides the main CLI interface using Typer.
"""

import json
import time
from pathlib import Path
from typing import Annotated

import typer

from glyphnest import __version__
from glyphnest.cli.output import (
    console,
    create_progress,
    print_error,
    print_font_info,
    print_header,
    print_placement_table,
    print_shape_table,
    print_step,
    print_success,
)
from glyphnest.config import (
    GlyphNestSettings,
    LoggingConfig,
    SearchConfig,
    SearchStrategy,
)
from glyphnest.core import NestingEngine, ShapeAnalyzer
from glyphnest.domain import FontMetrics, PlacedShape, PlacementRequest, Viewport
from glyphnest.exceptions import FontLoadError, GlyphNestError
from glyphnest.io import FontReader
from glyphnest.utils import PlacementLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphnest",
    help="Pack glyphs of a font into the negative space of each other.",
    add_completion=False,
    no_args_is_help=True,
)

FontArgument = Annotated[
    Path,
    typer.Argument(
        help="Path to input TTF/OTF font file",
        show_default=False,
    ),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Print results as JSON instead of a table",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Glyphnest[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Pack glyphs of a font into the negative space of each other."""


def _check_font_path(font: Path) -> None:
    if not font.exists():
        print_error(
            f"Input file not found: {font}",
            details=f"The file '{font}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not font.is_file():
        print_error(
            f"Input path is not a file: {font}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)


def _load_reader(font: Path) -> FontReader:
    reader = FontReader(font)
    try:
        reader.load()
    except Exception as e:
        raise FontLoadError(str(font), str(e)) from e
    return reader


@app.command()
def analyze(
    font: FontArgument,
    chars: Annotated[
        str,
        typer.Argument(
            help="Characters to analyze",
            show_default=False,
        ),
    ],
    as_json: JsonOption = False,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Show the convex hull summary of each character.

    Example:
        glyphnest analyze NotoSans-Regular.ttf "AOL"
    """
    _check_font_path(font)

    settings = GlyphNestSettings(logging=LoggingConfig(log_file=log_file, log_level=log_level))
    logger = PlacementLogger(
        configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
        )
    )

    try:
        reader = _load_reader(font)
        try:
            if not as_json:
                print_header(__version__)
                print_step("Loading font")
                print_font_info(
                    font_path=str(font),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                )
                print_step("Analyzing glyphs")

            analyzer = ShapeAnalyzer(reader, config=settings.analyzer, logger=logger)
            unique = list(dict.fromkeys(chars))
            missing = [c for c in unique if not reader.has_glyph(c)]
            analyses = [analyzer.analyze(c) for c in unique if c not in missing]
        finally:
            reader.close()

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphNestError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if as_json:
        payload = {
            "reference_size": settings.analyzer.reference_size,
            "shapes": [a.to_dict() for a in analyses],
            "missing": missing,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    print_shape_table(analyses)
    if missing:
        console.print(f"\n  [yellow]Not in font:[/yellow] {' '.join(repr(c) for c in missing)}")


def _place_text(
    engine: NestingEngine,
    text: str,
    viewport: Viewport,
    font_metrics: FontMetrics,
    show_progress: bool,
) -> tuple[list[PlacedShape], set[str]]:
    """Place each character of text against the ones before it.

    Returns:
        (placed shapes in order, character ids placed by the fallback)
    """
    shapes: list[PlacedShape] = []
    fallbacks: set[str] = set()

    def place_one(index: int, char: str) -> None:
        request = PlacementRequest(
            character_id=str(index),
            existing_shapes=tuple(shapes),
            new_glyph=char,
            viewport_width=viewport.width,
            viewport_height=viewport.height,
            font_metrics=font_metrics,
        )
        response = engine.place(request)
        if response.is_fallback:
            fallbacks.add(response.character_id)
        shapes.append(
            PlacedShape(glyph=char, character_id=response.character_id).with_placement(
                response.placement
            )
        )

    if not show_progress:
        for index, char in enumerate(text):
            place_one(index, char)
        return shapes, fallbacks

    with create_progress() as progress:
        task_id = progress.add_task(f"Placing {len(text)} glyphs", total=len(text))
        for index, char in enumerate(text):
            place_one(index, char)
            progress.advance(task_id)

    return shapes, fallbacks


@app.command()
def place(
    font: FontArgument,
    text: Annotated[
        str,
        typer.Argument(
            help="Characters to place, in order",
            show_default=False,
        ),
    ],
    width: Annotated[
        float,
        typer.Option(
            "--width",
            "-w",
            help="Viewport width",
            min=1.0,
        ),
    ] = 1000.0,
    height: Annotated[
        float,
        typer.Option(
            "--height",
            help="Viewport height",
            min=1.0,
        ),
    ] = 800.0,
    attempts: Annotated[
        int,
        typer.Option(
            "--attempts",
            "-a",
            help="Random candidate positions per glyph",
            min=1,
        ),
    ] = 200,
    rotations: Annotated[
        int,
        typer.Option(
            "--rotations",
            "-r",
            help="Rotations tried at every position (1 = upright only)",
            min=1,
            max=360,
        ),
    ] = 8,
    seed: Annotated[
        int | None,
        typer.Option(
            "--seed",
            help="Random seed for reproducible layouts",
        ),
    ] = None,
    strategy: Annotated[
        str,
        typer.Option(
            "--strategy",
            "-s",
            help="Candidate positions (random|grid)",
        ),
    ] = "random",
    as_json: JsonOption = False,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Place the characters of TEXT one after another into a viewport.

    Each character is made as large as possible without overlapping the
    characters placed before it. Characters missing from the font are skipped.

    Example:
        glyphnest place NotoSans-Regular.ttf "nesting" --seed 7
    """
    _check_font_path(font)

    # Validate strategy argument
    try:
        search_strategy = SearchStrategy(strategy.lower())
    except ValueError:
        print_error(
            f"Invalid strategy: {strategy}",
            details="Valid values: random, grid",
        )
        raise typer.Exit(code=1)

    # Create settings from CLI arguments
    settings = GlyphNestSettings(
        search=SearchConfig(
            strategy=search_strategy,
            attempts=attempts,
            rotation_steps=rotations,
            seed=seed,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level,
        ),
    )
    logger = PlacementLogger(
        configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
        )
    )

    viewport = Viewport(width, height)
    start_time = time.perf_counter()

    try:
        with NestingEngine.from_font(font, settings, logger=logger) as engine:
            reader = engine.analyzer.reader
            if not as_json:
                print_header(__version__)
                print_step("Loading font")
                print_font_info(
                    font_path=str(font),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                )
                print_step(f"Placing into {width:g} × {height:g}")

            skipped = [c for c in dict.fromkeys(text) if not reader.has_glyph(c)]
            placeable = "".join(c for c in text if c not in skipped)
            shapes, fallbacks = _place_text(
                engine,
                placeable,
                viewport,
                reader.font_metrics,
                show_progress=not as_json,
            )

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphNestError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        print_error("Cancelled")
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

    if as_json:
        payload = {
            "viewport": {"width": width, "height": height},
            "shapes": [s.to_dict() for s in shapes],
            "fallbacks": sorted(fallbacks, key=int),
            "skipped": skipped,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    print_placement_table(shapes, fallbacks)
    if skipped:
        console.print(f"\n  [yellow]Not in font:[/yellow] {' '.join(repr(c) for c in skipped)}")
    print_success(time.perf_counter() - start_time, logger.stats)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
