"""Domain models for glyphnest.

This module contains the core domain models representing points, transforms,
glyph shape analyses, placements and the messages exchanged with the caller.
All models are designed to be:

- Immutable (using frozen dataclasses)
- Serializable for inter-process communication (dispatch to worker processes)
- Independent of fonttools implementation details

Key classes:
- Point: An immutable 2D point
- BoundingBox: Axis-aligned box over a polygon
- Transform: Scale, rotation and translation of a shape
- ShapeAnalysis: Cached hull, area and centroid of a glyph
- PlacedShape: A glyph the caller has already placed
- PlacementResult: The pose chosen for a new glyph
- PlacementRequest / PlacementResponse: Boundary messages
"""

from glyphnest.domain.geometry import BoundingBox, Containment, Point, Transform
from glyphnest.domain.messages import PlacementRequest, PlacementResponse
from glyphnest.domain.placement import FontMetrics, PlacedShape, PlacementResult, Viewport
from glyphnest.domain.shape import PathCommand, ShapeAnalysis

__all__: list[str] = [
    # Enums
    "Containment",
    # Geometry
    "BoundingBox",
    "Point",
    "Transform",
    # Shapes
    "PathCommand",
    "ShapeAnalysis",
    # Placement
    "FontMetrics",
    "PlacedShape",
    "PlacementResult",
    "Viewport",
    # Messages
    "PlacementRequest",
    "PlacementResponse",
]
