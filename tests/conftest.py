"""Shared fixtures: a small TrueType font built with fontTools.

Glyph geometry (font units, 1000 UPM, ascender 800, descender -200,
advance 600 unless noted):
- I: rectangle x 200..400, y 0..700
- A: triangle (50, 0), (550, 0), (300, 700)
- O: square x 50..550, y 0..700 with a square counter x 150..450, y 100..600
- L: L-shape, stem x 100..200, foot y 0..100 reaching x 500
- o: round shape drawn with quadratic curves, x 50..550, y 0..700
- space: empty, advance 250
"""

import logging
from pathlib import Path

import pytest
import structlog
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphnest.utils.logging import LOGGER_NAME

UPM = 1000
ASCENDER = 800
DESCENDER = -200


def _polygon(pen: TTGlyphPen, points: list[tuple[int, int]]) -> None:
    pen.moveTo(points[0])
    for point in points[1:]:
        pen.lineTo(point)
    pen.closePath()


def _draw_glyphs() -> dict[str, tuple[TTGlyphPen, int, int]]:
    """Return glyph name -> (pen, advance width, left side bearing)."""
    glyphs: dict[str, tuple[TTGlyphPen, int, int]] = {}

    pen = TTGlyphPen(None)
    _polygon(pen, [(50, 0), (50, 700), (450, 700), (450, 0)])
    glyphs[".notdef"] = (pen, 500, 50)

    glyphs["space"] = (TTGlyphPen(None), 250, 0)

    pen = TTGlyphPen(None)
    _polygon(pen, [(200, 0), (200, 700), (400, 700), (400, 0)])
    glyphs["I"] = (pen, 600, 200)

    pen = TTGlyphPen(None)
    _polygon(pen, [(50, 0), (300, 700), (550, 0)])
    glyphs["A"] = (pen, 600, 50)

    pen = TTGlyphPen(None)
    _polygon(pen, [(50, 0), (50, 700), (550, 700), (550, 0)])
    _polygon(pen, [(150, 100), (450, 100), (450, 600), (150, 600)])
    glyphs["O"] = (pen, 600, 50)

    pen = TTGlyphPen(None)
    _polygon(pen, [(100, 0), (100, 700), (200, 700), (200, 100), (500, 100), (500, 0)])
    glyphs["L"] = (pen, 600, 100)

    pen = TTGlyphPen(None)
    pen.moveTo((300, 0))
    pen.qCurveTo((50, 0), (50, 350))
    pen.qCurveTo((50, 700), (300, 700))
    pen.qCurveTo((550, 700), (550, 350))
    pen.qCurveTo((550, 0), (300, 0))
    pen.closePath()
    glyphs["o"] = (pen, 600, 50)

    return glyphs


def build_test_font(path: Path) -> Path:
    """Build the test font and save it to path."""
    drawn = _draw_glyphs()
    glyph_order = list(drawn)

    fb = FontBuilder(UPM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(
        {
            ord(" "): "space",
            ord("I"): "I",
            ord("A"): "A",
            ord("O"): "O",
            ord("L"): "L",
            ord("o"): "o",
        }
    )
    fb.setupGlyf({name: pen.glyph() for name, (pen, _, _) in drawn.items()})
    fb.setupHorizontalMetrics({name: (advance, lsb) for name, (_, advance, lsb) in drawn.items()})
    fb.setupHorizontalHeader(ascent=ASCENDER, descent=DESCENDER)
    fb.setupNameTable({"familyName": "Nest Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=ASCENDER, sTypoDescender=DESCENDER, usWinAscent=ASCENDER, usWinDescent=-DESCENDER)
    fb.setupPost()
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def font_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Path to the generated test font."""
    return build_test_font(tmp_path_factory.mktemp("fonts") / "NestTest-Regular.ttf")


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handlers and structlog configuration installed by a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    structlog.reset_defaults()
