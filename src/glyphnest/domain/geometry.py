"""Core geometric types.

This module defines the fundamental geometric types used throughout glyphnest:
- Point: An immutable 2D point
- BoundingBox: An axis-aligned box over a polygon's extrema
- Transform: Uniform scale, rotation and translation of a shape
- Containment: Outcome of a point-in-polygon test
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class Containment(Enum):
    """Result of classifying a point against a polygon.

    INDETERMINATE is returned when the point lies on a vertex or an edge of
    the polygon (or the polygon is degenerate). Callers must handle it as a
    separate branch rather than coercing it to inside or outside.
    """

    INSIDE = auto()
    OUTSIDE = auto()
    INDETERMINATE = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        x: Minimum x coordinate
        y: Minimum y coordinate
        width: Extent along x
        height: Extent along y
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def overlaps(self, other: "BoundingBox") -> bool:
        """Check whether two boxes share any area or boundary."""
        return not (
            self.max_x < other.x
            or other.max_x < self.x
            or self.max_y < other.y
            or other.max_y < self.y
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BoundingBox":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"], width=data["width"], height=data["height"])


@dataclass(frozen=True, slots=True)
class Transform:
    """Pose of a shape: scale, then rotate about the origin, then translate.

    The order is fixed. Changing it changes collision results.

    Attributes:
        x: Translation along x
        y: Translation along y
        rotation: Rotation in degrees
        scale: Uniform scale factor
    """

    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale: float = 1.0
