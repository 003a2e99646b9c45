"""Geometric operations for polygon collision detection.

This module provides the tolerance-based primitives used by the placement
search:
- Point-in-polygon classification (ray casting, with an indeterminate outcome)
- Segment intersection
- Polygon-polygon intersection with a tie-break for touching polygons
- Affine transforms (scale, rotate, translate) of polygons
- Approximate polygon expansion by a margin
- Area, centroid and bounding box helpers

All functions are pure and stateless. Degenerate input (fewer than 3 points)
never raises; each function returns a documented sentinel instead.
"""

import math
from dataclasses import dataclass

from glyphnest.domain import BoundingBox, Containment, Point, Transform

TOL = 1e-9


def almost_equal(a: float, b: float, tolerance: float = TOL) -> bool:
    """Check if two values are equal within tolerance."""
    return abs(a - b) < tolerance


def on_segment(a: Point, b: Point, p: Point) -> bool:
    """Check if point p lies strictly inside segment AB.

    Endpoints are excluded: a point coinciding with A or B is not on the
    segment.

    Args:
        a: First endpoint of the segment
        b: Second endpoint of the segment
        p: Point to test

    Returns:
        True if p lies on AB between (but not at) its endpoints
    """
    # Vertical segment
    if almost_equal(a.x, b.x) and almost_equal(p.x, a.x):
        return (
            not almost_equal(p.y, b.y)
            and not almost_equal(p.y, a.y)
            and min(a.y, b.y) < p.y < max(a.y, b.y)
        )

    # Horizontal segment
    if almost_equal(a.y, b.y) and almost_equal(p.y, a.y):
        return (
            not almost_equal(p.x, b.x)
            and not almost_equal(p.x, a.x)
            and min(a.x, b.x) < p.x < max(a.x, b.x)
        )

    # Outside the segment's box
    if (
        (p.x < a.x and p.x < b.x)
        or (p.x > a.x and p.x > b.x)
        or (p.y < a.y and p.y < b.y)
        or (p.y > a.y and p.y > b.y)
    ):
        return False

    # Endpoints are not "on" the segment
    if (almost_equal(p.x, a.x) and almost_equal(p.y, a.y)) or (
        almost_equal(p.x, b.x) and almost_equal(p.y, b.y)
    ):
        return False

    cross = (p.y - a.y) * (b.x - a.x) - (p.x - a.x) * (b.y - a.y)
    if abs(cross) > TOL:
        return False

    dot = (p.x - a.x) * (b.x - a.x) + (p.y - a.y) * (b.y - a.y)
    if dot < 0 or almost_equal(dot, 0):
        return False

    len2 = (b.x - a.x) ** 2 + (b.y - a.y) ** 2
    if dot > len2 or almost_equal(dot, len2):
        return False

    return True


def segments_intersect(
    a: Point, b: Point, e: Point, f: Point, infinite: bool = False
) -> Point | None:
    """Find the intersection of segments AB and EF.

    Solves the 2x2 linear system for the lines through AB and EF.

    Args:
        a: First endpoint of segment 1
        b: Second endpoint of segment 1
        e: First endpoint of segment 2
        f: Second endpoint of segment 2
        infinite: If True, treat both segments as infinite lines

    Returns:
        Intersection point, or None if the lines are parallel/coincident or
        (when not infinite) the intersection lies outside either segment

    Examples:
        >>> segments_intersect(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        Point(x=1.0, y=1.0)
    """
    a1 = b.y - a.y
    b1 = a.x - b.x
    c1 = b.x * a.y - a.x * b.y
    a2 = f.y - e.y
    b2 = e.x - f.x
    c2 = f.x * e.y - e.x * f.y

    denom = a1 * b2 - a2 * b1
    if denom == 0:
        return None

    x = (b1 * c2 - b2 * c1) / denom
    y = (a2 * c1 - a1 * c2) / denom

    if not math.isfinite(x) or not math.isfinite(y):
        return None

    if not infinite:
        # The range test is skipped on an axis where the segment is degenerate
        if abs(a.x - b.x) > TOL and not _within(x, a.x, b.x):
            return None
        if abs(a.y - b.y) > TOL and not _within(y, a.y, b.y):
            return None
        if abs(e.x - f.x) > TOL and not _within(x, e.x, f.x):
            return None
        if abs(e.y - f.y) > TOL and not _within(y, e.y, f.y):
            return None

    return Point(x, y)


def _within(value: float, end1: float, end2: float) -> bool:
    return min(end1, end2) - TOL <= value <= max(end1, end2) + TOL


def polygon_bounds(polygon: list[Point]) -> BoundingBox | None:
    """Get the axis-aligned bounding box of a polygon.

    Args:
        polygon: Polygon vertices

    Returns:
        BoundingBox, or None for polygons with fewer than 3 points
    """
    if len(polygon) < 3:
        return None

    xs = [p.x for p in polygon]
    ys = [p.y for p in polygon]
    min_x = min(xs)
    min_y = min(ys)
    return BoundingBox(x=min_x, y=min_y, width=max(xs) - min_x, height=max(ys) - min_y)


def point_in_polygon(
    point: Point,
    polygon: list[Point],
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> Containment:
    """Classify a point against a polygon using ray casting.

    Before counting ray crossings the point is checked against every vertex
    and edge; a point on the boundary is INDETERMINATE. Near-zero-length edges
    are skipped when accumulating parity.

    Args:
        point: The point to test
        polygon: Polygon vertices (not closed explicitly)
        offset_x: Offset added to every polygon vertex along x
        offset_y: Offset added to every polygon vertex along y

    Returns:
        INSIDE, OUTSIDE, or INDETERMINATE (on the boundary or degenerate polygon)

    Examples:
        >>> square = [Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)]
        >>> point_in_polygon(Point(1, 1), square)
        <Containment.INSIDE: 1>
        >>> point_in_polygon(Point(2, 2), square)
        <Containment.INDETERMINATE: 3>
    """
    n = len(polygon)
    if n < 3:
        return Containment.INDETERMINATE

    inside = False

    for i in range(n):
        j = i - 1
        xi = polygon[i].x + offset_x
        yi = polygon[i].y + offset_y
        xj = polygon[j].x + offset_x
        yj = polygon[j].y + offset_y

        if almost_equal(xi, point.x) and almost_equal(yi, point.y):
            return Containment.INDETERMINATE

        if on_segment(Point(xi, yi), Point(xj, yj), point):
            return Containment.INDETERMINATE

        if almost_equal(xi, xj) and almost_equal(yi, yj):
            continue

        if ((yi > point.y) != (yj > point.y)) and (
            point.x < (xj - xi) * (point.y - yi) / (yj - yi) + xi
        ):
            inside = not inside

    return Containment.INSIDE if inside else Containment.OUTSIDE


def polygons_intersect(
    a: list[Point],
    b: list[Point],
    a_offset: tuple[float, float] = (0.0, 0.0),
    b_offset: tuple[float, float] = (0.0, 0.0),
) -> bool:
    """Check whether the boundaries of two polygons cross.

    Every edge of A is tested against every edge of B, including the closing
    edges. When a vertex of one polygon touches an edge or vertex of the
    other, the touch is decided by the vertices either side of it: if they
    lie on opposite sides of the other polygon, the polygons intersect;
    otherwise the contact is tangential and ignored. The test runs in both
    directions, so the result does not depend on argument order.

    Args:
        a: Vertices of polygon A
        b: Vertices of polygon B
        a_offset: (dx, dy) added to every vertex of A
        b_offset: (dx, dy) added to every vertex of B

    Returns:
        True if the polygons intersect. Degenerate polygons never intersect.
    """
    if len(a) < 3 or len(b) < 3:
        return False

    return _boundary_crosses(a, b, a_offset, b_offset) or _boundary_crosses(
        b, a, b_offset, a_offset
    )


def _boundary_crosses(
    a: list[Point],
    b: list[Point],
    a_offset: tuple[float, float],
    b_offset: tuple[float, float],
) -> bool:
    na = len(a)
    nb = len(b)

    adx, ady = a_offset
    bdx, bdy = b_offset

    for i in range(na):
        a1 = Point(a[i].x + adx, a[i].y + ady)
        a2 = Point(a[(i + 1) % na].x + adx, a[(i + 1) % na].y + ady)

        for j in range(nb):
            b1 = Point(b[j].x + bdx, b[j].y + bdy)
            b2 = Point(b[(j + 1) % nb].x + bdx, b[(j + 1) % nb].y + bdy)

            if on_segment(a1, a2, b1) or (
                almost_equal(a1.x, b1.x) and almost_equal(a1.y, b1.y)
            ):
                b0 = Point(b[j - 1].x + bdx, b[j - 1].y + bdy)
                b0_in = point_in_polygon(b0, a, adx, ady)
                b2_in = point_in_polygon(b2, a, adx, ady)
                if {b0_in, b2_in} == {Containment.INSIDE, Containment.OUTSIDE}:
                    return True
                continue

            if segments_intersect(b1, b2, a1, a2) is not None:
                return True

    return False


def rotate_polygon(polygon: list[Point], degrees: float) -> list[Point]:
    """Rotate a polygon about the origin.

    Args:
        polygon: Polygon vertices
        degrees: Rotation angle in degrees

    Returns:
        New list of rotated points
    """
    angle = math.radians(degrees)
    cos = math.cos(angle)
    sin = math.sin(angle)
    return [Point(p.x * cos - p.y * sin, p.x * sin + p.y * cos) for p in polygon]


def transform_polygon(polygon: list[Point], transform: Transform) -> list[Point]:
    """Apply scale, then rotation about the origin, then translation.

    Args:
        polygon: Polygon vertices in shape-local coordinates
        transform: Pose to apply

    Returns:
        New list of transformed points
    """
    scaled = [Point(p.x * transform.scale, p.y * transform.scale) for p in polygon]

    if transform.rotation != 0:
        scaled = rotate_polygon(scaled, transform.rotation)

    return [Point(p.x + transform.x, p.y + transform.y) for p in scaled]


def expand_polygon(polygon: list[Point], margin: float) -> list[Point]:
    """Push every vertex outward from the polygon's centre by margin.

    Each vertex moves along the ray from the bounding-box centre through the
    vertex. This is not a true offset curve; it is adequate for convex hulls.

    Args:
        polygon: Polygon vertices
        margin: Distance to move each vertex

    Returns:
        Expanded polygon, or the input unchanged when margin <= 0 or the
        polygon is degenerate
    """
    if margin <= 0:
        return polygon

    bounds = polygon_bounds(polygon)
    if bounds is None:
        return polygon

    center = bounds.center
    expanded: list[Point] = []
    for p in polygon:
        dx = p.x - center.x
        dy = p.y - center.y
        distance = math.hypot(dx, dy)

        if distance == 0:
            expanded.append(p)
            continue

        factor = (distance + margin) / distance
        expanded.append(Point(center.x + dx * factor, center.y + dy * factor))

    return expanded


def polygon_area(polygon: list[Point]) -> float:
    """Absolute polygon area using the shoelace formula.

    Returns:
        Area in square units. Returns 0.0 for degenerate polygons.
    """
    n = len(polygon)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i].x * polygon[j].y
        area -= polygon[j].x * polygon[i].y

    return abs(area) / 2.0


def polygon_centroid(polygon: list[Point]) -> Point:
    """Arithmetic mean of the polygon's vertices.

    Returns:
        Mean point, or the origin for an empty polygon
    """
    if not polygon:
        return Point(0.0, 0.0)

    n = len(polygon)
    return Point(sum(p.x for p in polygon) / n, sum(p.y for p in polygon) / n)


@dataclass(frozen=True, slots=True)
class PosedPolygon:
    """A polygon moved to its pose and expanded by the collision margin.

    Attributes:
        points: Transformed and expanded vertices
        bounds: Bounding box of the points (None if degenerate)
    """

    points: list[Point]
    bounds: BoundingBox | None


def pose_polygon(polygon: list[Point], transform: Transform, margin: float) -> PosedPolygon:
    """Transform a polygon to its pose and expand it by margin.

    Args:
        polygon: Shape-local polygon
        transform: Pose to apply
        margin: Expansion applied after the transform

    Returns:
        PosedPolygon ready for collision tests
    """
    points = expand_polygon(transform_polygon(polygon, transform), margin)
    return PosedPolygon(points=points, bounds=polygon_bounds(points))


def posed_polygons_collide(
    a: PosedPolygon, b: PosedPolygon, detect_containment: bool = True
) -> bool:
    """Check two posed polygons for collision.

    Disjoint bounding boxes are rejected first. Otherwise the boundaries are
    tested with polygons_intersect. If they do not cross and
    detect_containment is set, the polygons still collide when a vertex of
    one lies strictly inside the other (one encloses the other) or when an
    interior point of one lies inside or on the other. The interior point
    catches shapes whose boundaries coincide, such as identical poses.

    Returns:
        True if the polygons collide. Degenerate polygons never collide.
    """
    if a.bounds is None or b.bounds is None:
        return False

    if not a.bounds.overlaps(b.bounds):
        return False

    if polygons_intersect(a.points, b.points):
        return True

    if detect_containment:
        return (
            _has_vertex_inside(a.points, b.points)
            or _has_vertex_inside(b.points, a.points)
            or _has_interior_point_inside(a.points, b.points)
            or _has_interior_point_inside(b.points, a.points)
        )

    return False


def _has_vertex_inside(outer: list[Point], inner: list[Point]) -> bool:
    return any(point_in_polygon(p, outer) is Containment.INSIDE for p in inner)


def _has_interior_point_inside(outer: list[Point], inner: list[Point]) -> bool:
    # The vertex mean is only usable when it falls strictly inside its own polygon
    center = polygon_centroid(inner)
    if point_in_polygon(center, inner) is not Containment.INSIDE:
        return False
    return point_in_polygon(center, outer) is not Containment.OUTSIDE


def check_polygon_collision(
    poly_a: list[Point],
    transform_a: Transform,
    poly_b: list[Point],
    transform_b: Transform,
    margin: float = 2.0,
    detect_containment: bool = True,
) -> bool:
    """Check whether two shapes collide at their poses.

    Both polygons are transformed, each is expanded by margin, and the results
    are tested with posed_polygons_collide.

    Args:
        poly_a: Shape-local polygon A
        transform_a: Pose of A
        poly_b: Shape-local polygon B
        transform_b: Pose of B
        margin: Expansion applied to each polygon
        detect_containment: Count enclosure as a collision

    Returns:
        True if the shapes collide
    """
    if len(poly_a) < 3 or len(poly_b) < 3:
        return False

    return posed_polygons_collide(
        pose_polygon(poly_a, transform_a, margin),
        pose_polygon(poly_b, transform_b, margin),
        detect_containment=detect_containment,
    )
