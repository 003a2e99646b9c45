"""Shape analysis results for a single glyph.

A ShapeAnalysis is produced once per distinct character and shared by every
placement of that character. Its polygon is always the convex hull of the
traced outline, in reference-size pixel units with the glyph's em-box centre
at the origin and y pointing down.
"""

from dataclasses import dataclass, field
from typing import Any

from glyphnest.domain.geometry import BoundingBox, Point


@dataclass(frozen=True, slots=True)
class PathCommand:
    """A single SVG-style path command.

    Attributes:
        type: Command letter ("M", "L" or "Z")
        points: Flat coordinate list for the command
    """

    type: str
    points: tuple[float, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"type": self.type, "points": list(self.points)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PathCommand":
        """Deserialize from dictionary."""
        return cls(type=data["type"], points=tuple(data["points"]))


@dataclass(frozen=True)
class ShapeAnalysis:
    """Cached geometric summary of a glyph.

    Attributes:
        glyph: The character this analysis describes
        bounding_box: Box over the hull (None for blank glyphs)
        path_commands: Hull outline as path commands, for external renderers
        polygon_approximation: Convex hull of the traced outline
        area: Absolute hull area
        centroid: Mean of the hull vertices
    """

    glyph: str
    bounding_box: BoundingBox | None
    path_commands: tuple[PathCommand, ...]
    polygon_approximation: tuple[Point, ...]
    area: float
    centroid: Point
    _svg_path: str = field(default="", repr=False)

    @property
    def is_blank(self) -> bool:
        """Check if the glyph has no usable outline (e.g. space).

        Returns:
            True if the hull has fewer than 3 points
        """
        return len(self.polygon_approximation) < 3

    @property
    def hull(self) -> list[Point]:
        """Hull vertices as a fresh list."""
        return list(self.polygon_approximation)

    @property
    def svg_path(self) -> str:
        """Hull outline as SVG path data."""
        return self._svg_path

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the analysis
        """
        return {
            "glyph": self.glyph,
            "bounding_box": self.bounding_box.to_dict() if self.bounding_box else None,
            "path_commands": [c.to_dict() for c in self.path_commands],
            "polygon_approximation": [p.to_dict() for p in self.polygon_approximation],
            "area": self.area,
            "centroid": self.centroid.to_dict(),
            "svg_path": self._svg_path,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShapeAnalysis":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of an analysis

        Returns:
            ShapeAnalysis instance
        """
        bbox = data["bounding_box"]
        return cls(
            glyph=data["glyph"],
            bounding_box=BoundingBox.from_dict(bbox) if bbox is not None else None,
            path_commands=tuple(PathCommand.from_dict(c) for c in data["path_commands"]),
            polygon_approximation=tuple(
                Point.from_dict(p) for p in data["polygon_approximation"]
            ),
            area=data["area"],
            centroid=Point.from_dict(data["centroid"]),
            _svg_path=data.get("svg_path", ""),
        )
