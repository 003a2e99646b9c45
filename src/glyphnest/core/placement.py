"""Placement search: fit each new glyph as large as possible between the others.

The first glyph is centred at 80% of the shorter viewport side. Every later
glyph is placed by sampling candidate positions, trying a fixed set of
rotations at each, and binary-searching the largest scale that neither
crosses the viewport margin nor collides with an existing glyph's hull.
The candidate with the largest achieved scale wins.

Key functions:
- rotation_angles: Evenly spaced rotations
- generate_random_positions / generate_grid_positions: Candidate positions
- fallback_placement: Pose used when a placement cannot be computed

Key classes:
- NestingEngine: Session object owning the shape cache and random generator
"""

import math
import random
import time
import traceback
from dataclasses import replace
from pathlib import Path

from glyphnest.config import GlyphNestSettings, SearchStrategy
from glyphnest.core.analyzer import ShapeAnalyzer
from glyphnest.core.geometry import PosedPolygon, pose_polygon, posed_polygons_collide
from glyphnest.domain import (
    FontMetrics,
    PlacedShape,
    PlacementRequest,
    PlacementResponse,
    PlacementResult,
    ShapeAnalysis,
    Transform,
    Viewport,
)
from glyphnest.exceptions import FontLoadError
from glyphnest.io import FontReader
from glyphnest.utils import PlacementLogger


def rotation_angles(steps: int) -> list[float]:
    """Evenly spaced rotations in degrees, starting at 0."""
    return [i * 360 / steps for i in range(steps)]


def generate_random_positions(
    viewport: Viewport, count: int, rng: random.Random
) -> list[tuple[float, float]]:
    """Uniformly random positions anywhere in the viewport."""
    return [(rng.random() * viewport.width, rng.random() * viewport.height) for _ in range(count)]


def generate_grid_positions(viewport: Viewport, grid_size: int) -> list[tuple[float, float]]:
    """Evenly spaced grid positions including the viewport edges.

    Returns:
        (grid_size + 1) ** 2 positions, column by column
    """
    step_x = viewport.width / grid_size
    step_y = viewport.height / grid_size
    return [
        (i * step_x, j * step_y)
        for i in range(grid_size + 1)
        for j in range(grid_size + 1)
    ]


def fallback_placement(viewport: Viewport, scale: float, rng: random.Random) -> PlacementResult:
    """Pose used when no placement could be computed.

    Args:
        viewport: Target viewport
        scale: Fallback scale
        rng: Random generator for the rotation

    Returns:
        Viewport centre, random rotation in [0, 360), given scale, score 0
    """
    cx, cy = viewport.center
    return PlacementResult(x=cx, y=cy, rotation=rng.random() * 360, scale=scale, score=0.0)


class NestingEngine:
    """Finds non-overlapping, near-maximal poses for successive glyphs.

    One engine serves one session: it owns the shape cache (through its
    analyzer) and the random generator. Viewport and font metrics are passed
    with every call; nothing about them is remembered between calls.

    Example:
        with NestingEngine.from_font(Path("font.ttf")) as engine:
            viewport = Viewport(1000, 800)
            first = engine.calculate_optimal_placement([], "A", viewport)
            placed = [PlacedShape("A").with_placement(first)]
            second = engine.calculate_optimal_placement(placed, "B", viewport)
    """

    def __init__(
        self,
        analyzer: ShapeAnalyzer,
        settings: GlyphNestSettings | None = None,
        rng: random.Random | None = None,
        logger: PlacementLogger | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            analyzer: Shape analyzer for the session's font
            settings: Settings (defaults if None)
            rng: Random generator (seeded from settings.search.seed if None)
            logger: Placement logger (a quiet default if None)
        """
        self._analyzer = analyzer
        self._settings = settings or GlyphNestSettings()
        self._rng = rng if rng is not None else random.Random(self._settings.search.seed)
        self._logger = logger or PlacementLogger()

    @classmethod
    def from_font(
        cls,
        font_path: Path,
        settings: GlyphNestSettings | None = None,
        rng: random.Random | None = None,
        logger: PlacementLogger | None = None,
    ) -> "NestingEngine":
        """Create an engine for a font file.

        Raises:
            FontLoadError: If the font cannot be loaded
        """
        settings = settings or GlyphNestSettings()
        logger = logger or PlacementLogger()

        reader = FontReader(Path(font_path))
        try:
            reader.load()
        except Exception as e:
            raise FontLoadError(str(font_path), str(e)) from e

        analyzer = ShapeAnalyzer(reader, config=settings.analyzer, logger=logger)
        return cls(analyzer, settings=settings, rng=rng, logger=logger)

    @property
    def analyzer(self) -> ShapeAnalyzer:
        return self._analyzer

    @property
    def settings(self) -> GlyphNestSettings:
        return self._settings

    @property
    def logger(self) -> PlacementLogger:
        return self._logger

    def close(self) -> None:
        """Release the underlying font."""
        self._analyzer.reader.close()

    def __enter__(self) -> "NestingEngine":
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.close()

    def character_dimensions(
        self, scale: float, font_metrics: FontMetrics | None = None
    ) -> tuple[float, float]:
        """Estimate a glyph's (width, height) at a scale.

        Height spans ascender to descender; width is a fixed ratio of the scale.
        """
        metrics = font_metrics or self._analyzer.font_metrics
        height = scale * metrics.line_height_ratio
        width = scale * self._settings.search.width_ratio
        return width, height

    def exceeds_viewport(
        self,
        x: float,
        y: float,
        rotation: float,
        scale: float,
        viewport: Viewport,
        font_metrics: FontMetrics | None = None,
    ) -> bool:
        """Check whether a pose's rotated box crosses the viewport margin."""
        width, height = self.character_dimensions(scale, font_metrics)

        angle = math.radians(rotation)
        cos = abs(math.cos(angle))
        sin = abs(math.sin(angle))
        rotated_width = width * cos + height * sin
        rotated_height = width * sin + height * cos

        margin = self._settings.search.boundary_margin
        return (
            x - rotated_width / 2 < margin
            or x + rotated_width / 2 > viewport.width - margin
            or y - rotated_height / 2 < margin
            or y + rotated_height / 2 > viewport.height - margin
        )

    def _pose_obstacles(self, existing_shapes: list[PlacedShape]) -> list[PosedPolygon]:
        reference_size = self._analyzer.reference_size
        margin = self._settings.geometry.collision_margin

        obstacles: list[PosedPolygon] = []
        for shape in existing_shapes:
            analysis = self._analyzer.analyze(shape.glyph)
            if analysis.is_blank:
                continue
            obstacles.append(
                pose_polygon(analysis.hull, shape.transform(reference_size), margin)
            )
        return obstacles

    def _collides(
        self,
        shape: ShapeAnalysis,
        obstacles: list[PosedPolygon],
        x: float,
        y: float,
        rotation: float,
        scale: float,
        viewport: Viewport,
        font_metrics: FontMetrics,
    ) -> bool:
        if self.exceeds_viewport(x, y, rotation, scale, viewport, font_metrics):
            return True

        if shape.is_blank or not obstacles:
            return False

        transform = Transform(
            x=x, y=y, rotation=rotation, scale=scale / self._analyzer.reference_size
        )
        posed = pose_polygon(shape.hull, transform, self._settings.geometry.collision_margin)
        detect_containment = self._settings.geometry.detect_containment

        return any(
            posed_polygons_collide(posed, obstacle, detect_containment)
            for obstacle in obstacles
        )

    def _search_scale(
        self,
        shape: ShapeAnalysis,
        obstacles: list[PosedPolygon],
        x: float,
        y: float,
        rotation: float,
        viewport: Viewport,
        font_metrics: FontMetrics,
    ) -> float:
        search = self._settings.search
        low = search.min_search_scale
        high = viewport.short_side * search.max_scale_ratio
        best = 0.0

        for _ in range(search.max_iterations):
            mid = (low + high) / 2
            if self._collides(shape, obstacles, x, y, rotation, mid, viewport, font_metrics):
                high = mid
            else:
                low = mid
                best = mid

            if high - low < search.convergence_threshold:
                break

        return best

    def check_collision(
        self,
        existing_shapes: list[PlacedShape],
        new_glyph: str,
        x: float,
        y: float,
        rotation: float,
        scale: float,
        viewport: Viewport,
        font_metrics: FontMetrics | None = None,
    ) -> bool:
        """Check whether a glyph at a pose leaves the viewport margin or hits a shape.

        Returns:
            True if the pose is not acceptable
        """
        metrics = font_metrics or self._analyzer.font_metrics
        shape = self._analyzer.analyze(new_glyph)
        obstacles = self._pose_obstacles(existing_shapes)
        return self._collides(shape, obstacles, x, y, rotation, scale, viewport, metrics)

    def calculate_max_scale(
        self,
        existing_shapes: list[PlacedShape],
        new_glyph: str,
        x: float,
        y: float,
        rotation: float,
        viewport: Viewport,
        font_metrics: FontMetrics | None = None,
    ) -> float:
        """Binary-search the largest collision-free scale at a position and rotation.

        Returns:
            The largest midpoint found free of collisions, or 0.0 if every
            tested scale collided
        """
        metrics = font_metrics or self._analyzer.font_metrics
        shape = self._analyzer.analyze(new_glyph)
        obstacles = self._pose_obstacles(existing_shapes)
        return self._search_scale(shape, obstacles, x, y, rotation, viewport, metrics)

    def _candidate_positions(self, viewport: Viewport) -> list[tuple[float, float]]:
        search = self._settings.search
        if search.strategy is SearchStrategy.GRID:
            return generate_grid_positions(viewport, search.grid_size)
        return generate_random_positions(viewport, search.attempts, self._rng)

    def calculate_optimal_placement(
        self,
        existing_shapes: list[PlacedShape],
        new_glyph: str,
        viewport: Viewport,
        font_metrics: FontMetrics | None = None,
    ) -> PlacementResult:
        """Find the pose that lets a new glyph be as large as possible.

        Args:
            existing_shapes: Shapes already placed (not modified)
            new_glyph: Character to place
            viewport: Target viewport
            font_metrics: Metrics for dimension estimates (the font's if None)

        Returns:
            PlacementResult. The first glyph is centred at the maximum scale
            with score 1.0; later glyphs get the best candidate found, with
            the scale raised to at least min_scale.

        Raises:
            GlyphError: If the glyph cannot be analyzed
        """
        search = self._settings.search
        metrics = font_metrics or self._analyzer.font_metrics
        cx, cy = viewport.center

        if not existing_shapes:
            scale = viewport.short_side * search.max_scale_ratio
            self._logger.log_first_placement(new_glyph, scale)
            self._logger.log_placement_complete(new_glyph, scale, candidates=0, duration_ms=0.0)
            return PlacementResult(x=cx, y=cy, rotation=0.0, scale=scale, score=1.0)

        start = time.perf_counter()
        self._logger.log_placement_start(new_glyph, len(existing_shapes))

        shape = self._analyzer.analyze(new_glyph)
        obstacles = self._pose_obstacles(existing_shapes)
        rotations = rotation_angles(search.rotation_steps)

        best = PlacementResult(x=cx, y=cy, rotation=0.0, scale=search.min_search_scale, score=0.0)
        candidates = 0

        for x, y in self._candidate_positions(viewport):
            for rotation in rotations:
                candidates += 1
                scale = self._search_scale(shape, obstacles, x, y, rotation, viewport, metrics)
                if scale > best.scale:
                    best = PlacementResult(x=x, y=y, rotation=rotation, scale=scale, score=scale)
                    self._logger.log_new_best(new_glyph, x, y, rotation, scale)

        if best.scale < search.min_scale:
            best = replace(best, scale=search.min_scale)

        duration_ms = (time.perf_counter() - start) * 1000
        self._logger.log_placement_complete(new_glyph, best.scale, candidates, duration_ms)

        return best

    def recalculate_all_placements(
        self,
        shapes: list[PlacedShape],
        viewport: Viewport,
        font_metrics: FontMetrics | None = None,
    ) -> list[PlacedShape]:
        """Re-place every composing shape around the fixed ones.

        Fixed shapes are returned unchanged and first, in input order. Composing
        shapes follow, each placed against everything before it. A composing
        shape whose placement fails gets the fallback pose.

        Returns:
            New list of shapes; the input is not modified
        """
        fixed = [s for s in shapes if not s.is_composing]
        composing = [s for s in shapes if s.is_composing]

        result = list(fixed)
        for shape in composing:
            try:
                placement = self.calculate_optimal_placement(
                    result, shape.glyph, viewport, font_metrics
                )
            except Exception as e:
                self._logger.log_fallback(shape.character_id, shape.glyph, e, traceback.format_exc())
                placement = self.fallback_placement(viewport)
            result.append(shape.with_placement(placement))

        return result

    def fallback_placement(self, viewport: Viewport) -> PlacementResult:
        """Fallback pose at the viewport centre with a random rotation."""
        return fallback_placement(viewport, self._settings.search.fallback_scale, self._rng)

    def place(self, request: PlacementRequest) -> PlacementResponse:
        """Answer a placement request, falling back instead of raising.

        Args:
            request: Placement request

        Returns:
            PlacementResponse; is_fallback is set if the search failed
        """
        viewport = request.viewport
        try:
            placement = self.calculate_optimal_placement(
                list(request.existing_shapes),
                request.new_glyph,
                viewport,
                request.font_metrics,
            )
        except Exception as e:
            self._logger.log_fallback(
                request.character_id, request.new_glyph, e, traceback.format_exc()
            )
            return PlacementResponse(
                character_id=request.character_id,
                placement=self.fallback_placement(viewport),
                is_fallback=True,
            )

        return PlacementResponse(character_id=request.character_id, placement=placement)
