"""Glyph rasterization and approximate outline tracing.

A glyph is drawn through a flattening pen into raster space (y pointing
down, one em = reference_size pixels). Each flattened contour is filled
with Pillow and the per-contour masks are summed with the sign of the
contour's direction, which gives the non-zero winding fill as a numpy
boolean mask.

The tracer samples the mask on a coarse stride and keeps every ink sample
that has a background sample among its four neighbours. The scattered edge
points are then ordered into a rough outline by taking the points near the
top, right, bottom and left extremes in turn. It is a cheap approximation;
the outline only has to be good enough for its convex hull.
"""

import math
from dataclasses import dataclass, field

import numpy as np
from fontTools.pens.basePen import BasePen
from fontTools.pens.boundsPen import BoundsPen
from PIL import Image, ImageDraw

from glyphnest.config import AnalyzerConfig
from glyphnest.core._bezier import flatten_cubic, flatten_quadratic
from glyphnest.domain import Point
from glyphnest.exceptions import GlyphRasterError
from glyphnest.io import FontReader


class FlatteningPen(BasePen):
    """Pen that records glyph contours as polygons in raster space.

    Quadratic and cubic segments are flattened by recursive subdivision.
    Components are decomposed by BasePen through the glyph set.
    """

    def __init__(
        self,
        glyph_set: object,
        scale: float,
        offset_x: float,
        offset_y: float,
        tolerance: float,
    ) -> None:
        """Initialize the pen.

        Args:
            glyph_set: fontTools glyph set used to resolve components
            scale: Pixels per font unit
            offset_x: Raster x of font x = 0
            offset_y: Raster y of font y = 0 (y is flipped)
            tolerance: Curve flattening tolerance in pixels
        """
        super().__init__(glyph_set)
        self._scale = scale
        self._offset_x = offset_x
        self._offset_y = offset_y
        self._tolerance = tolerance
        self._current: list[Point] = []
        self.contours: list[list[Point]] = []

    def _map(self, pt: tuple[float, float]) -> Point:
        return Point(
            self._offset_x + pt[0] * self._scale,
            self._offset_y - pt[1] * self._scale,
        )

    def _flush(self) -> None:
        if len(self._current) >= 2:
            self.contours.append(self._current)
        self._current = []

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self._flush()
        self._current = [self._map(pt)]

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self._current.append(self._map(pt))

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        start = self._map(self._getCurrentPoint())
        flattened = flatten_cubic(
            [start, self._map(pt1), self._map(pt2), self._map(pt3)], self._tolerance
        )
        self._current.extend(flattened[1:])

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        start = self._map(self._getCurrentPoint())
        flattened = flatten_quadratic([start, self._map(pt1), self._map(pt2)], self._tolerance)
        self._current.extend(flattened[1:])

    def _closePath(self) -> None:
        self._flush()

    def _endPath(self) -> None:
        self._flush()


def _direction(contour: list[Point]) -> int:
    """Sign of a contour's shoelace sum: +1, -1, or 0 when it encloses nothing."""
    n = len(contour)
    total = 0.0
    for i in range(n):
        p = contour[i]
        q = contour[(i + 1) % n]
        total += p.x * q.y - q.x * p.y
    if total > 0:
        return 1
    if total < 0:
        return -1
    return 0


def fill_contours(width: int, height: int, contours: list[list[Point]]) -> np.ndarray:
    """Fill contours with the non-zero winding rule.

    Args:
        width: Raster width in pixels
        height: Raster height in pixels
        contours: Closed polygons in raster coordinates

    Returns:
        Boolean array of shape (height, width), True where there is ink
    """
    winding = np.zeros((height, width), dtype=np.int16)
    for contour in contours:
        direction = _direction(contour)
        if direction == 0:
            continue

        img = Image.new("L", (width, height), 0)
        draw = ImageDraw.Draw(img)
        draw.polygon([(p.x, p.y) for p in contour], fill=1)
        winding += direction * np.asarray(img, dtype=np.int16)

    return winding != 0


@dataclass
class GlyphRaster:
    """A raster of one glyph, filled on first access.

    Attributes:
        width: Raster width in pixels
        height: Raster height in pixels
        contours: Flattened glyph contours in raster coordinates
        origin: Raster position of the glyph's em-box centre
    """

    width: int
    height: int
    contours: list[list[Point]]
    origin: Point
    _mask: np.ndarray | None = field(default=None, repr=False, compare=False, init=False)

    @property
    def mask(self) -> np.ndarray:
        """Ink mask indexed [y, x]."""
        if self._mask is None:
            self._mask = fill_contours(self.width, self.height, self.contours)
        return self._mask

    def is_ink(self, x: int, y: int) -> bool:
        """Check if pixel (x, y) is ink. Pixels outside the raster are background."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        return bool(self.mask[y, x])


def render_glyph(reader: FontReader, char: str, config: AnalyzerConfig) -> GlyphRaster:
    """Render a character of a loaded font into a raster.

    The raster covers the glyph's em box (advance width by ascender to
    descender) and its ink bounds, plus padding on every side.

    Args:
        reader: Loaded font reader
        char: Character to render
        config: Analyzer configuration

    Returns:
        GlyphRaster for the character

    Raises:
        GlyphError: If char is not a single character
        GlyphNotFoundError: If the font has no glyph for char
        GlyphRasterError: If the glyph cannot be drawn
    """
    glyph_name = reader.glyph_name_for(char)
    metrics = reader.font_metrics

    try:
        glyph_set = reader.glyph_set
        glyph = glyph_set[glyph_name]
        advance = glyph.width

        bounds_pen = BoundsPen(glyph_set)
        glyph.draw(bounds_pen)

        left, right = 0.0, float(advance)
        bottom, top = float(metrics.descender), float(metrics.ascender)
        if bounds_pen.bounds is not None:
            x_min, y_min, x_max, y_max = bounds_pen.bounds
            left = min(left, x_min)
            bottom = min(bottom, y_min)
            right = max(right, x_max)
            top = max(top, y_max)

        scale = config.reference_size / metrics.units_per_em
        padding = config.padding
        offset_x = padding - left * scale
        offset_y = padding + top * scale

        pen = FlatteningPen(
            glyph_set,
            scale=scale,
            offset_x=offset_x,
            offset_y=offset_y,
            tolerance=config.flatten_tolerance,
        )
        glyph.draw(pen)
    except Exception as e:
        raise GlyphRasterError(char, str(e)) from e

    # Guard against float noise such as 600 * 0.1 landing just above 60
    width = math.ceil((right - left) * scale - 1e-9) + 2 * padding
    height = math.ceil((top - bottom) * scale - 1e-9) + 2 * padding
    origin = Point(
        offset_x + advance / 2 * scale,
        offset_y - (metrics.ascender + metrics.descender) / 2 * scale,
    )

    return GlyphRaster(width=width, height=height, contours=pen.contours, origin=origin)


def trace_edges(raster: GlyphRaster, stride: int) -> list[Point]:
    """Find edge points on a coarse sampling grid.

    A sample is an edge point when it is ink and at least one of its four
    neighbouring samples (one stride away) is background. Samples beyond
    the raster count as background.

    Args:
        raster: Glyph raster
        stride: Sampling stride in pixels

    Returns:
        Edge points at pixel centres, in row-major order
    """
    samples = raster.mask[::stride, ::stride]
    padded = np.pad(samples, 1, constant_values=False)
    surrounded = padded[:-2, 1:-1] & padded[2:, 1:-1] & padded[1:-1, :-2] & padded[1:-1, 2:]
    rows, cols = np.nonzero(samples & ~surrounded)

    return [
        Point(col * stride + 0.5, row * stride + 0.5)
        for row, col in zip(rows.tolist(), cols.tolist())
    ]


def organize_edge_points(edges: list[Point], band: float) -> list[Point]:
    """Order scattered edge points into a rough outline.

    Points within band of the topmost row are taken left to right, then
    points near the rightmost column top to bottom, then the bottom band
    right to left and the left band bottom to top. Points far from every
    extreme are dropped; corner points may appear twice.

    Args:
        edges: Unordered edge points
        band: Band width in pixels

    Returns:
        Ordered outline points (empty if there are no edges)
    """
    if not edges:
        return []

    top_y = min(p.y for p in edges)
    bottom_y = max(p.y for p in edges)
    left_x = min(p.x for p in edges)
    right_x = max(p.x for p in edges)

    top = sorted((p for p in edges if abs(p.y - top_y) < band), key=lambda p: p.x)
    right = sorted((p for p in edges if abs(p.x - right_x) < band), key=lambda p: p.y)
    bottom = sorted((p for p in edges if abs(p.y - bottom_y) < band), key=lambda p: -p.x)
    left = sorted((p for p in edges if abs(p.x - left_x) < band), key=lambda p: -p.y)

    return top + right + bottom + left
