"""Placement domain models.

This module defines the inputs and outputs of the placement search:
- FontMetrics: Vertical metrics used to estimate glyph dimensions
- Viewport: The drawing area glyphs are packed into
- PlacedShape: A glyph already placed by the caller
- PlacementResult: The pose chosen for a new glyph
"""

from dataclasses import dataclass, replace
from typing import Any

from glyphnest.domain.geometry import Transform


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Font-wide vertical metrics.

    Attributes:
        units_per_em: Font design units per em
        ascender: Ascender in font units (positive)
        descender: Descender in font units (usually negative)
    """

    units_per_em: int
    ascender: float
    descender: float

    @property
    def line_height_ratio(self) -> float:
        """Height of the ascender-descender span relative to the em."""
        return (self.ascender - self.descender) / self.units_per_em

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "units_per_em": self.units_per_em,
            "ascender": self.ascender,
            "descender": self.descender,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FontMetrics":
        """Deserialize from dictionary."""
        return cls(
            units_per_em=data["units_per_em"],
            ascender=data["ascender"],
            descender=data["descender"],
        )


@dataclass(frozen=True, slots=True)
class Viewport:
    """Viewport dimensions in screen units."""

    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)


@dataclass(frozen=True, slots=True)
class PlacementResult:
    """Pose chosen for a glyph.

    Attributes:
        x: Centre x in viewport units
        y: Centre y in viewport units
        rotation: Rotation in degrees
        scale: Glyph size in viewport units per em
        score: Achieved scale (1.0 for the first glyph, 0 for a fallback)
    """

    x: float
    y: float
    rotation: float
    scale: float
    score: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "scale": self.scale,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlacementResult":
        """Deserialize from dictionary."""
        return cls(
            x=data["x"],
            y=data["y"],
            rotation=data["rotation"],
            scale=data["scale"],
            score=data["score"],
        )


@dataclass(frozen=True, slots=True)
class PlacedShape:
    """A glyph the caller has already placed.

    The core never mutates placed shapes; relayout returns new instances.

    Attributes:
        glyph: Character drawn by this shape
        x: Centre x in viewport units
        y: Centre y in viewport units
        rotation: Rotation in degrees
        scale: Glyph size in viewport units per em
        character_id: Caller-assigned identifier
        is_composing: True while the character is part of unconfirmed input
    """

    glyph: str
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale: float = 1.0
    character_id: str = ""
    is_composing: bool = False

    def transform(self, reference_size: float) -> Transform:
        """Transform mapping the glyph's reference-size hull to this pose.

        Args:
            reference_size: Pixels per em the hull was traced at

        Returns:
            Transform for collision tests
        """
        return Transform(
            x=self.x,
            y=self.y,
            rotation=self.rotation,
            scale=self.scale / reference_size,
        )

    def with_placement(self, placement: PlacementResult) -> "PlacedShape":
        """Return a copy moved to the given placement."""
        return replace(
            self,
            x=placement.x,
            y=placement.y,
            rotation=placement.rotation,
            scale=placement.scale,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "glyph": self.glyph,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "scale": self.scale,
            "character_id": self.character_id,
            "is_composing": self.is_composing,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlacedShape":
        """Deserialize from dictionary."""
        return cls(
            glyph=data["glyph"],
            x=data["x"],
            y=data["y"],
            rotation=data["rotation"],
            scale=data["scale"],
            character_id=data.get("character_id", ""),
            is_composing=data.get("is_composing", False),
        )
