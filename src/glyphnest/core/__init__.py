"""Core placement and collision algorithms for glyphnest.

This module contains the core algorithms for:

- Geometry operations (point-in-polygon, segment and polygon intersection)
- Convex hull construction
- Glyph analysis (rasterization, edge tracing, hull reduction)
- Placement search (candidate generation, binary search of the scale)
- Asynchronous dispatch of placement requests

Key functions:
- point_in_polygon: Classify a point as inside, outside or indeterminate
- polygons_intersect: Test two polygons for crossing boundaries
- check_polygon_collision: Collision test of two posed, expanded polygons
- calculate_convex_hull: Andrew's monotone chain hull
- compute_placement: Top-level picklable function for worker processes

Key classes:
- ShapeAnalyzer: Turns characters into cached ShapeAnalysis objects
- NestingEngine: Finds near-maximal, non-overlapping poses
- PlacementDispatcher: Runs placements concurrently with a deadline
"""

from glyphnest.core.analyzer import ShapeAnalyzer, ShapeCache
from glyphnest.core.dispatcher import PlacementDispatcher, compute_placement
from glyphnest.core.geometry import (
    check_polygon_collision,
    expand_polygon,
    on_segment,
    point_in_polygon,
    polygon_area,
    polygon_bounds,
    polygon_centroid,
    polygons_intersect,
    rotate_polygon,
    segments_intersect,
    transform_polygon,
)
from glyphnest.core.hull import calculate_convex_hull, hull_area, rectangular_hull
from glyphnest.core.placement import NestingEngine, fallback_placement

__all__ = [
    # Placement classes
    "NestingEngine",
    "PlacementDispatcher",
    # Analyzer classes
    "ShapeAnalyzer",
    "ShapeCache",
    # Hull functions
    "calculate_convex_hull",
    # Geometry functions
    "check_polygon_collision",
    "compute_placement",
    "expand_polygon",
    "fallback_placement",
    "hull_area",
    "on_segment",
    "point_in_polygon",
    "polygon_area",
    "polygon_bounds",
    "polygon_centroid",
    "polygons_intersect",
    "rectangular_hull",
    "rotate_polygon",
    "segments_intersect",
    "transform_polygon",
]
