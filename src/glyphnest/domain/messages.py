"""Request and response messages exchanged with the surrounding application.

Both messages serialize to plain dictionaries so they can cross a process
boundary unchanged.
"""

from dataclasses import dataclass
from typing import Any

from glyphnest.domain.placement import FontMetrics, PlacedShape, PlacementResult, Viewport


@dataclass(frozen=True)
class PlacementRequest:
    """Request to place one new glyph.

    Attributes:
        character_id: Caller-assigned identifier of the new character
        existing_shapes: Shapes already placed
        new_glyph: Character to place
        viewport_width: Current viewport width
        viewport_height: Current viewport height
        font_metrics: Metrics used for dimension estimates
    """

    character_id: str
    existing_shapes: tuple[PlacedShape, ...]
    new_glyph: str
    viewport_width: float
    viewport_height: float
    font_metrics: FontMetrics

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.viewport_width, self.viewport_height)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "character_id": self.character_id,
            "existing_shapes": [s.to_dict() for s in self.existing_shapes],
            "new_glyph": self.new_glyph,
            "viewport_width": self.viewport_width,
            "viewport_height": self.viewport_height,
            "font_metrics": self.font_metrics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlacementRequest":
        """Deserialize from dictionary."""
        return cls(
            character_id=data["character_id"],
            existing_shapes=tuple(PlacedShape.from_dict(s) for s in data["existing_shapes"]),
            new_glyph=data["new_glyph"],
            viewport_width=data["viewport_width"],
            viewport_height=data["viewport_height"],
            font_metrics=FontMetrics.from_dict(data["font_metrics"]),
        )


@dataclass(frozen=True)
class PlacementResponse:
    """Placement computed for a request.

    Attributes:
        character_id: Identifier copied from the request
        placement: The chosen pose
        is_fallback: True when the placement is the failure fallback
    """

    character_id: str
    placement: PlacementResult
    is_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "character_id": self.character_id,
            "placement": self.placement.to_dict(),
            "is_fallback": self.is_fallback,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlacementResponse":
        """Deserialize from dictionary."""
        return cls(
            character_id=data["character_id"],
            placement=PlacementResult.from_dict(data["placement"]),
            is_fallback=data.get("is_fallback", False),
        )
