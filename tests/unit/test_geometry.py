"""Unit tests for the geometry kernel.

Tests cover:
- Point-in-polygon classification, including boundary cases
- Segment and polygon intersection
- Transforms and their order
- Polygon expansion, area, centroid and bounds
- Collision of posed polygons
"""

import math
import random

import pytest

from glyphnest.core.geometry import (
    check_polygon_collision,
    expand_polygon,
    on_segment,
    point_in_polygon,
    polygon_area,
    polygon_bounds,
    polygon_centroid,
    polygons_intersect,
    pose_polygon,
    posed_polygons_collide,
    rotate_polygon,
    segments_intersect,
    transform_polygon,
)
from glyphnest.core.hull import calculate_convex_hull, rectangular_hull
from glyphnest.domain import BoundingBox, Containment, Point, Transform

SQUARE = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]


def square_at(x: float, y: float, size: float = 10.0) -> list[Point]:
    return [Point(x, y), Point(x + size, y), Point(x + size, y + size), Point(x, y + size)]


class TestPointInPolygon:
    """Tests for ray-casting point classification."""

    def test_inside(self):
        assert point_in_polygon(Point(5, 5), SQUARE) is Containment.INSIDE

    def test_outside(self):
        assert point_in_polygon(Point(15, 5), SQUARE) is Containment.OUTSIDE
        assert point_in_polygon(Point(-1, -1), SQUARE) is Containment.OUTSIDE

    def test_vertex_is_indeterminate(self):
        for vertex in SQUARE:
            assert point_in_polygon(vertex, SQUARE) is Containment.INDETERMINATE

    def test_edge_is_indeterminate(self):
        assert point_in_polygon(Point(5, 0), SQUARE) is Containment.INDETERMINATE
        assert point_in_polygon(Point(10, 5), SQUARE) is Containment.INDETERMINATE

    def test_degenerate_polygon_is_indeterminate(self):
        """Fewer than three points is a sentinel case, not an error."""
        assert point_in_polygon(Point(0, 0), []) is Containment.INDETERMINATE
        assert point_in_polygon(Point(0, 0), [Point(0, 0), Point(1, 1)]) is Containment.INDETERMINATE

    def test_offset_moves_polygon(self):
        assert point_in_polygon(Point(25, 25), SQUARE, 20, 20) is Containment.INSIDE
        assert point_in_polygon(Point(5, 5), SQUARE, 20, 20) is Containment.OUTSIDE

    def test_zero_length_edge_skipped(self):
        """A repeated vertex does not flip the parity."""
        polygon = [Point(0, 0), Point(10, 0), Point(10, 0), Point(10, 10), Point(0, 10)]
        assert point_in_polygon(Point(5, 5), polygon) is Containment.INSIDE
        assert point_in_polygon(Point(20, 5), polygon) is Containment.OUTSIDE

    def test_concave_polygon(self):
        """The notch of an L-shape is outside."""
        polygon = [Point(0, 0), Point(10, 0), Point(10, 2), Point(2, 2), Point(2, 10), Point(0, 10)]
        assert point_in_polygon(Point(1, 5), polygon) is Containment.INSIDE
        assert point_in_polygon(Point(6, 6), polygon) is Containment.OUTSIDE


class TestOnSegment:
    """Tests for strict on-segment checks."""

    def test_interior_point(self):
        assert on_segment(Point(0, 0), Point(10, 10), Point(5, 5))

    def test_endpoints_excluded(self):
        assert not on_segment(Point(0, 0), Point(10, 10), Point(0, 0))
        assert not on_segment(Point(0, 0), Point(10, 10), Point(10, 10))

    def test_axis_aligned(self):
        assert on_segment(Point(0, 0), Point(0, 10), Point(0, 3))
        assert on_segment(Point(0, 0), Point(10, 0), Point(3, 0))
        assert not on_segment(Point(0, 0), Point(10, 0), Point(11, 0))

    def test_off_line(self):
        assert not on_segment(Point(0, 0), Point(10, 10), Point(5, 6))


class TestSegmentsIntersect:
    """Tests for segment intersection."""

    def test_crossing(self):
        result = segments_intersect(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        assert result == Point(1.0, 1.0)

    def test_parallel(self):
        assert segments_intersect(Point(0, 0), Point(2, 0), Point(0, 1), Point(2, 1)) is None

    def test_coincident(self):
        assert segments_intersect(Point(0, 0), Point(2, 0), Point(1, 0), Point(3, 0)) is None

    def test_outside_range(self):
        assert segments_intersect(Point(0, 0), Point(1, 1), Point(3, 0), Point(2, 1)) is None

    def test_endpoint_within_tolerance(self):
        """A crossing a hair past an endpoint still counts."""
        x = 10 + 1e-12
        hit = segments_intersect(Point(0, 0), Point(10, 0), Point(x, -5), Point(x, 5))
        assert hit is not None

    def test_infinite_lines(self):
        result = segments_intersect(Point(0, 0), Point(1, 1), Point(3, 0), Point(2, 1), infinite=True)
        assert result is not None
        assert result.x == pytest.approx(1.5)
        assert result.y == pytest.approx(1.5)

    def test_vertical_segment(self):
        """The x range test is skipped for a vertical segment."""
        result = segments_intersect(Point(5, 0), Point(5, 10), Point(0, 5), Point(10, 5))
        assert result == Point(5.0, 5.0)


class TestPolygonsIntersect:
    """Tests for polygon boundary intersection."""

    def test_overlapping_squares(self):
        assert polygons_intersect(SQUARE, square_at(5, 5))

    def test_disjoint_squares(self):
        assert not polygons_intersect(SQUARE, square_at(20, 20))

    def test_symmetry(self):
        pairs = [
            (SQUARE, square_at(5, 5)),
            (SQUARE, square_at(20, 0)),
            (SQUARE, square_at(-5, 3)),
            ([Point(0, 0), Point(10, 0), Point(5, 8)], square_at(4, 4, 2)),
        ]
        for a, b in pairs:
            assert polygons_intersect(a, b) == polygons_intersect(b, a)

    def test_symmetry_at_shared_vertex(self):
        """A vertex of A resting on an edge of B intersects in either order."""
        a = [Point(-2, 2), Point(0, 4), Point(-1, 5), Point(-4, 3), Point(-5, 2)]
        b = [Point(1, 5), Point(1, 8), Point(-1, 10), Point(-4, 8), Point(-4, 5)]
        assert polygons_intersect(a, b)
        assert polygons_intersect(b, a)

    def test_offsets(self):
        assert not polygons_intersect(SQUARE, SQUARE, (0, 0), (100, 0))
        assert polygons_intersect(SQUARE, SQUARE, (0, 0), (5, 5))

    def test_touching_vertex_counts(self):
        """Segment tests include endpoints, so a vertex resting on an edge touches."""
        triangle = [Point(5, 10), Point(8, 15), Point(2, 15)]
        assert polygons_intersect(SQUARE, triangle)
        assert polygons_intersect(triangle, SQUARE)

    def test_crossing_through_vertex(self):
        """A polygon passing through a vertex of the other intersects it."""
        diamond = [Point(10, 5), Point(15, 0), Point(20, 5), Point(15, 10)]
        crossing = [Point(5, 5), Point(15, 5), Point(10, 20)]
        assert polygons_intersect(diamond, crossing)

    def test_closing_edge_considered(self):
        """Only the closing edge of B crosses A."""
        a = [Point(0, 0), Point(10, 0), Point(10, 1), Point(0, 1)]
        b = [Point(5, -5), Point(20, -5), Point(20, 5), Point(5, 5)]
        assert polygons_intersect(a, b)

    def test_degenerate_never_intersects(self):
        assert not polygons_intersect([Point(0, 0), Point(10, 10)], SQUARE)
        assert not polygons_intersect(SQUARE, [])


class TestTransforms:
    """Tests for rotation and pose transforms."""

    def test_rotate_quarter_turn(self):
        rotated = rotate_polygon([Point(1, 0)], 90)
        assert rotated[0].x == pytest.approx(0.0, abs=1e-12)
        assert rotated[0].y == pytest.approx(1.0)

    def test_order_scale_rotate_translate(self):
        result = transform_polygon([Point(1, 0)], Transform(x=10, y=20, rotation=90, scale=2))
        assert result[0].x == pytest.approx(10.0)
        assert result[0].y == pytest.approx(22.0)

    def test_identity(self):
        assert transform_polygon(SQUARE, Transform()) == SQUARE

    def test_round_trip(self):
        """Translating back and undoing rotation and scale restores the polygon."""
        polygon = [Point(3, -4), Point(12, 7), Point(-5, 9)]
        transform = Transform(x=250, y=-80, rotation=37.5, scale=2.5)

        posed = transform_polygon(polygon, transform)
        moved_back = [Point(p.x - transform.x, p.y - transform.y) for p in posed]
        restored = transform_polygon(
            moved_back, Transform(0, 0, -transform.rotation, 1 / transform.scale)
        )

        for original, result in zip(polygon, restored, strict=True):
            assert result.x == pytest.approx(original.x)
            assert result.y == pytest.approx(original.y)


class TestExpandPolygon:
    """Tests for margin expansion."""

    def test_vertices_move_outward(self):
        expanded = expand_polygon(SQUARE, 2)
        for original, moved in zip(SQUARE, expanded, strict=True):
            before = math.hypot(original.x - 5, original.y - 5)
            after = math.hypot(moved.x - 5, moved.y - 5)
            assert after == pytest.approx(before + 2)

    def test_non_positive_margin_unchanged(self):
        assert expand_polygon(SQUARE, 0) is SQUARE
        assert expand_polygon(SQUARE, -3) is SQUARE

    def test_degenerate_unchanged(self):
        line = [Point(0, 0), Point(1, 1)]
        assert expand_polygon(line, 5) is line


class TestMeasures:
    """Tests for area, centroid and bounds."""

    def test_area_ignores_orientation(self):
        assert polygon_area(SQUARE) == pytest.approx(100.0)
        assert polygon_area(list(reversed(SQUARE))) == pytest.approx(100.0)

    def test_area_degenerate(self):
        assert polygon_area([Point(0, 0), Point(1, 0)]) == 0.0

    def test_centroid_is_vertex_mean(self):
        assert polygon_centroid(SQUARE) == Point(5.0, 5.0)

    def test_centroid_empty(self):
        assert polygon_centroid([]) == Point(0.0, 0.0)

    def test_bounds(self):
        polygon = [Point(-2, 3), Point(4, -1), Point(1, 7)]
        assert polygon_bounds(polygon) == BoundingBox(x=-2, y=-1, width=6, height=8)

    def test_bounds_degenerate(self):
        assert polygon_bounds([Point(0, 0), Point(1, 1)]) is None


class TestCollision:
    """Tests for posed polygon collision."""

    def test_far_apart_never_collide(self):
        square = rectangular_hull(100, 100)
        assert not check_polygon_collision(square, Transform(0, 0), square, Transform(300, 0))

    def test_close_always_collide(self):
        square = rectangular_hull(100, 100)
        assert check_polygon_collision(square, Transform(0, 0), square, Transform(10, 0))

    def test_identical_pose_collides(self):
        square = rectangular_hull(100, 100)
        assert check_polygon_collision(square, Transform(0, 0), square, Transform(0, 0))
        assert check_polygon_collision(square, Transform(0, 0), square, Transform(0, 0), margin=0)

    def test_collinear_edges_collide(self):
        """Shapes sharing the lines of two edges overlap."""
        square = rectangular_hull(100, 100)
        for dx in (0.5, 10, 50, 99):
            assert check_polygon_collision(square, Transform(0, 0), square, Transform(dx, 0))
            assert check_polygon_collision(square, Transform(0, 0), square, Transform(0, dx))

    def test_collision_is_symmetric(self):
        rng = random.Random(7)
        for _ in range(300):
            hull_a = calculate_convex_hull(
                [Point(rng.uniform(-5, 5), rng.uniform(-5, 5)) for _ in range(8)]
            )
            hull_b = calculate_convex_hull(
                [Point(rng.uniform(-5, 5), rng.uniform(-5, 5)) for _ in range(8)]
            )
            pose_a = Transform(rng.uniform(-20, 20), rng.uniform(-20, 20), rng.uniform(0, 360), 3.0)
            pose_b = Transform(rng.uniform(-20, 20), rng.uniform(-20, 20), rng.uniform(0, 360), 3.0)
            forward = check_polygon_collision(hull_a, pose_a, hull_b, pose_b)
            backward = check_polygon_collision(hull_b, pose_b, hull_a, pose_a)
            assert forward == backward

    def test_same_hull_same_pose_always_collides(self):
        rng = random.Random(3)
        for _ in range(100):
            hull = calculate_convex_hull(
                [Point(rng.uniform(-5, 5), rng.uniform(-5, 5)) for _ in range(6)]
            )
            pose = Transform(rng.uniform(-20, 20), rng.uniform(-20, 20), rng.uniform(0, 360), 4.0)
            assert check_polygon_collision(hull, pose, hull, pose)

    def test_margin_closes_gap(self):
        square = rectangular_hull(100, 100)
        # Edges 4 units apart; corners move about 2.8 units per axis with margin 4
        assert not check_polygon_collision(square, Transform(0, 0), square, Transform(104, 0), margin=0)
        assert check_polygon_collision(square, Transform(0, 0), square, Transform(104, 0), margin=4)

    def test_containment_is_collision(self):
        big = rectangular_hull(100, 100)
        small = rectangular_hull(10, 10)
        assert check_polygon_collision(big, Transform(0, 0), small, Transform(0, 0))
        assert not check_polygon_collision(
            big, Transform(0, 0), small, Transform(0, 0), detect_containment=False
        )

    def test_degenerate_never_collides(self):
        square = rectangular_hull(100, 100)
        assert not check_polygon_collision([], Transform(0, 0), square, Transform(0, 0))

    def test_posed_bounds_rejection(self):
        a = pose_polygon(SQUARE, Transform(), 0)
        b = pose_polygon(SQUARE, Transform(x=50), 0)
        assert a.bounds is not None
        assert not posed_polygons_collide(a, b)

    def test_rotation_considered(self):
        """A thin bar only reaches the other shape once rotated."""
        bar = rectangular_hull(100, 4)
        target = rectangular_hull(10, 10, center=(0, 40))
        assert not check_polygon_collision(bar, Transform(0, 0), target, Transform(0, 0), margin=0)
        assert check_polygon_collision(
            bar, Transform(0, 0, rotation=90), target, Transform(0, 0), margin=0
        )
