"""Shape analysis for glyph placement.

This module turns a character into a ShapeAnalysis:
1. Render the glyph at the reference size
2. Trace edge points on a coarse grid and order them into an outline
3. Move the outline so the glyph's em-box centre is the origin
4. Reduce it to its convex hull and measure area, centroid and bounds

Analyses are memoized per glyph in a ShapeCache owned by the caller.
"""

import time

from fontTools.pens.svgPathPen import SVGPathPen

from glyphnest.config import AnalyzerConfig
from glyphnest.core.geometry import polygon_area, polygon_bounds, polygon_centroid
from glyphnest.core.hull import calculate_convex_hull
from glyphnest.core.raster import organize_edge_points, render_glyph, trace_edges
from glyphnest.domain import FontMetrics, PathCommand, Point, ShapeAnalysis
from glyphnest.io import FontReader
from glyphnest.utils import PlacementLogger


class ShapeCache:
    """Memo of shape analyses keyed by glyph.

    Example:
        cache = ShapeCache()
        cache.put(analysis)
        cache.get("A")  # -> analysis, counted as a hit
    """

    def __init__(self) -> None:
        self._entries: dict[str, ShapeAnalysis] = {}
        self.hits = 0
        self.misses = 0

    def get(self, glyph: str) -> ShapeAnalysis | None:
        """Look up a cached analysis, counting the hit or miss."""
        analysis = self._entries.get(glyph)
        if analysis is None:
            self.misses += 1
        else:
            self.hits += 1
        return analysis

    def put(self, analysis: ShapeAnalysis) -> None:
        """Store an analysis under its glyph. An existing entry is kept."""
        self._entries.setdefault(analysis.glyph, analysis)

    def clear(self) -> None:
        """Drop all entries and reset the counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, glyph: object) -> bool:
        return glyph in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def hull_path_commands(hull: list[Point]) -> list[PathCommand]:
    """Describe a closed polygon as M/L/Z path commands."""
    if not hull:
        return []

    commands = [PathCommand("M", (hull[0].x, hull[0].y))]
    commands.extend(PathCommand("L", (p.x, p.y)) for p in hull[1:])
    commands.append(PathCommand("Z"))
    return commands


def hull_svg_path(hull: list[Point]) -> str:
    """Render a closed polygon as SVG path data."""
    if not hull:
        return ""

    pen = SVGPathPen(None)
    pen.moveTo((hull[0].x, hull[0].y))
    for p in hull[1:]:
        pen.lineTo((p.x, p.y))
    pen.closePath()
    return pen.getCommands()


def build_shape_analysis(glyph: str, hull: list[Point]) -> ShapeAnalysis:
    """Assemble a ShapeAnalysis from a glyph's hull.

    Args:
        glyph: Character the hull belongs to
        hull: Convex hull in shape-local coordinates (may be empty)

    Returns:
        ShapeAnalysis with area, centroid, bounds and path data
    """
    return ShapeAnalysis(
        glyph=glyph,
        bounding_box=polygon_bounds(hull),
        path_commands=tuple(hull_path_commands(hull)),
        polygon_approximation=tuple(hull),
        area=polygon_area(hull),
        centroid=polygon_centroid(hull),
        _svg_path=hull_svg_path(hull),
    )


class ShapeAnalyzer:
    """Analyzes glyphs of one font into cached convex hulls.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            analyzer = ShapeAnalyzer(reader)
            shape = analyzer.analyze("A")
            print(shape.area, len(shape.hull))
    """

    def __init__(
        self,
        reader: FontReader,
        config: AnalyzerConfig | None = None,
        cache: ShapeCache | None = None,
        logger: PlacementLogger | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            reader: Loaded font reader
            config: Analyzer configuration (defaults if None)
            cache: Shape cache to fill (a fresh one if None)
            logger: Placement logger for cache-miss events
        """
        self._reader = reader
        self._config = config or AnalyzerConfig()
        self._cache = cache if cache is not None else ShapeCache()
        self._logger = logger or PlacementLogger()
        self._font_metrics = reader.font_metrics

    @property
    def reader(self) -> FontReader:
        return self._reader

    @property
    def config(self) -> AnalyzerConfig:
        return self._config

    @property
    def cache(self) -> ShapeCache:
        return self._cache

    @property
    def reference_size(self) -> float:
        """Pixels per em at which hulls are traced."""
        return self._config.reference_size

    @property
    def font_metrics(self) -> FontMetrics:
        """Metrics of the analyzed font."""
        return self._font_metrics

    def analyze(self, glyph: str) -> ShapeAnalysis:
        """Get the shape analysis of a character, computing it on a cache miss.

        Args:
            glyph: A single character

        Returns:
            ShapeAnalysis whose hull is centred on the glyph's em box

        Raises:
            GlyphError: If glyph is not a single character
            GlyphNotFoundError: If the font has no glyph for the character
            GlyphRasterError: If the glyph cannot be rendered
        """
        cached = self._cache.get(glyph)
        if cached is not None:
            return cached

        start = time.perf_counter()

        raster = render_glyph(self._reader, glyph, self._config)
        edges = trace_edges(raster, self._config.stride)
        outline = organize_edge_points(edges, self._config.band_tolerance)

        origin = raster.origin
        local = [Point(p.x - origin.x, p.y - origin.y) for p in outline]
        hull = calculate_convex_hull(local)

        analysis = build_shape_analysis(glyph, hull)
        self._cache.put(analysis)

        duration_ms = (time.perf_counter() - start) * 1000
        self._logger.log_shape_analyzed(glyph, len(hull), duration_ms)

        return analysis
