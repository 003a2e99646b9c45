"""Tests for domain models to verify they work correctly."""

import pytest

from glyphnest.domain import (
    BoundingBox,
    FontMetrics,
    PathCommand,
    PlacedShape,
    PlacementRequest,
    PlacementResponse,
    PlacementResult,
    Point,
    ShapeAnalysis,
    Transform,
    Viewport,
)


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        p = Point(100.0, 200.0)
        assert p.x == 100.0
        assert p.y == 200.0

    def test_point_to_tuple(self) -> None:
        """Test point to tuple conversion."""
        assert Point(100.0, 200.0).to_tuple() == (100.0, 200.0)

    def test_point_serialization(self) -> None:
        """Test point serialization and deserialization."""
        p1 = Point(100.0, 200.0)
        assert Point.from_dict(p1.to_dict()) == p1

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100.0, 200.0)
        with pytest.raises(AttributeError):
            p.x = 300.0  # type: ignore

    def test_point_hashable(self) -> None:
        """Test that equal points collapse in a set."""
        assert len({Point(1, 2), Point(1.0, 2.0), Point(2, 1)}) == 2


class TestBoundingBox:
    """Tests for BoundingBox class."""

    def test_extents(self) -> None:
        """Test derived max coordinates and centre."""
        box = BoundingBox(x=10, y=20, width=30, height=40)
        assert box.max_x == 40
        assert box.max_y == 60
        assert box.center == Point(25, 40)

    def test_overlaps(self) -> None:
        """Test overlapping, touching and separate boxes."""
        box = BoundingBox(0, 0, 10, 10)
        assert box.overlaps(BoundingBox(5, 5, 10, 10))
        assert box.overlaps(BoundingBox(10, 0, 5, 5))
        assert not box.overlaps(BoundingBox(11, 0, 5, 5))
        assert not BoundingBox(0, 20, 1, 1).overlaps(box)

    def test_serialization(self) -> None:
        """Test bounding box serialization."""
        box = BoundingBox(1.5, -2.0, 3.0, 4.0)
        assert BoundingBox.from_dict(box.to_dict()) == box


class TestTransform:
    """Tests for Transform class."""

    def test_defaults_are_identity(self) -> None:
        """Test that the default transform changes nothing."""
        assert Transform() == Transform(x=0.0, y=0.0, rotation=0.0, scale=1.0)


class TestFontMetrics:
    """Tests for FontMetrics class."""

    def test_line_height_ratio(self) -> None:
        """Test ascender to descender span relative to the em."""
        metrics = FontMetrics(units_per_em=2048, ascender=1638, descender=-410)
        assert metrics.line_height_ratio == pytest.approx(1.0)

    def test_serialization(self) -> None:
        """Test font metrics serialization."""
        metrics = FontMetrics(units_per_em=1000, ascender=800, descender=-200)
        assert FontMetrics.from_dict(metrics.to_dict()) == metrics


class TestViewport:
    """Tests for Viewport class."""

    def test_center_and_short_side(self) -> None:
        """Test viewport centre and shorter side."""
        viewport = Viewport(1000, 800)
        assert viewport.center == (500, 400)
        assert viewport.short_side == 800
        assert Viewport(300, 900).short_side == 300


class TestPlacedShape:
    """Tests for PlacedShape class."""

    def test_defaults(self) -> None:
        """Test a freshly created shape."""
        shape = PlacedShape(glyph="A")
        assert (shape.x, shape.y, shape.rotation, shape.scale) == (0.0, 0.0, 0.0, 1.0)
        assert shape.character_id == ""
        assert not shape.is_composing

    def test_transform_uses_reference_size(self) -> None:
        """Test that the transform scales hulls traced at the reference size."""
        shape = PlacedShape(glyph="A", x=10, y=20, rotation=45, scale=300)
        assert shape.transform(100) == Transform(x=10, y=20, rotation=45, scale=3.0)

    def test_with_placement(self) -> None:
        """Test moving a shape keeps its identity fields."""
        shape = PlacedShape(glyph="A", character_id="7", is_composing=True)
        moved = shape.with_placement(PlacementResult(x=1, y=2, rotation=90, scale=40, score=40))

        assert (moved.x, moved.y, moved.rotation, moved.scale) == (1, 2, 90, 40)
        assert moved.glyph == "A"
        assert moved.character_id == "7"
        assert moved.is_composing
        assert shape.x == 0.0

    def test_serialization(self) -> None:
        """Test placed shape serialization."""
        shape = PlacedShape(glyph="B", x=5, y=6, rotation=7, scale=8, character_id="x", is_composing=True)
        assert PlacedShape.from_dict(shape.to_dict()) == shape

    def test_deserialization_defaults(self) -> None:
        """Test optional fields missing from a payload."""
        shape = PlacedShape.from_dict({"glyph": "B", "x": 1, "y": 2, "rotation": 0, "scale": 10})
        assert shape.character_id == ""
        assert not shape.is_composing


class TestShapeAnalysis:
    """Tests for ShapeAnalysis class."""

    def _analysis(self) -> ShapeAnalysis:
        hull = (Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10))
        return ShapeAnalysis(
            glyph="O",
            bounding_box=BoundingBox(0, 0, 10, 10),
            path_commands=(
                PathCommand("M", (0.0, 0.0)),
                PathCommand("L", (10.0, 0.0)),
                PathCommand("L", (10.0, 10.0)),
                PathCommand("L", (0.0, 10.0)),
                PathCommand("Z"),
            ),
            polygon_approximation=hull,
            area=100.0,
            centroid=Point(5, 5),
            _svg_path="M0,0 L10,0 L10,10 L0,10 Z",
        )

    def test_hull_is_fresh_list(self) -> None:
        """Test that callers cannot mutate the cached hull."""
        analysis = self._analysis()
        hull = analysis.hull
        hull.append(Point(99, 99))
        assert len(analysis.hull) == 4

    def test_is_blank(self) -> None:
        """Test blank detection for fewer than three hull points."""
        assert not self._analysis().is_blank
        blank = ShapeAnalysis(" ", None, (), (), 0.0, Point(0, 0))
        assert blank.is_blank
        assert blank.svg_path == ""

    def test_serialization(self) -> None:
        """Test shape analysis serialization."""
        analysis = self._analysis()
        restored = ShapeAnalysis.from_dict(analysis.to_dict())

        assert restored == analysis
        assert restored.svg_path == analysis.svg_path

    def test_blank_serialization(self) -> None:
        """Test serialization of an analysis without a bounding box."""
        blank = ShapeAnalysis(" ", None, (), (), 0.0, Point(0, 0))
        assert ShapeAnalysis.from_dict(blank.to_dict()) == blank


class TestMessages:
    """Tests for request and response messages."""

    def test_request_serialization(self) -> None:
        """Test placement request serialization."""
        request = PlacementRequest(
            character_id="3",
            existing_shapes=(PlacedShape(glyph="A", x=500, y=400, scale=640, character_id="1"),),
            new_glyph="B",
            viewport_width=1000,
            viewport_height=800,
            font_metrics=FontMetrics(units_per_em=1000, ascender=800, descender=-200),
        )
        restored = PlacementRequest.from_dict(request.to_dict())

        assert restored == request
        assert restored.viewport == Viewport(1000, 800)

    def test_response_serialization(self) -> None:
        """Test placement response serialization."""
        response = PlacementResponse(
            character_id="3",
            placement=PlacementResult(x=1, y=2, rotation=3, scale=4, score=4),
            is_fallback=True,
        )
        assert PlacementResponse.from_dict(response.to_dict()) == response

    def test_response_fallback_flag_optional(self) -> None:
        """Test that a payload without is_fallback is a regular response."""
        data = {
            "character_id": "3",
            "placement": {"x": 1, "y": 2, "rotation": 3, "scale": 4, "score": 4},
        }
        assert not PlacementResponse.from_dict(data).is_fallback
