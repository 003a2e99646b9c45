"""Convex hull construction.

Glyph outlines are reduced to their convex hulls before any collision test:
hulls have few vertices and are convex, which keeps polygon intersection
cheap and keeps the margin expansion around the bounding-box centre well
behaved. Concave features of a glyph (the counter of an "O", the notch of
an "L") are lost.
"""

from glyphnest.core.geometry import polygon_area
from glyphnest.domain import Point

DEDUP_TOLERANCE = 1e-10


def _cross(o: Point, a: Point, b: Point) -> float:
    """Z component of (a - o) x (b - o); positive for a left turn."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def remove_duplicates(points: list[Point], tolerance: float = DEDUP_TOLERANCE) -> list[Point]:
    """Drop points that coincide with an earlier point within tolerance.

    Args:
        points: Input points
        tolerance: Per-axis distance below which two points are the same

    Returns:
        Unique points in their original order
    """
    unique: list[Point] = []
    for point in points:
        if not any(
            abs(existing.x - point.x) < tolerance and abs(existing.y - point.y) < tolerance
            for existing in unique
        ):
            unique.append(point)
    return unique


def calculate_convex_hull(
    points: list[Point], tolerance: float = DEDUP_TOLERANCE
) -> list[Point]:
    """Calculate the convex hull of a set of points.

    Uses Andrew's monotone chain: points are sorted by x (then y), the lower
    chain is built left to right and the upper chain right to left, popping
    the stack top while the last three points do not make a strict left turn.

    Args:
        points: Input points (any order, duplicates allowed)
        tolerance: Deduplication tolerance

    Returns:
        Hull vertices in counter-clockwise order without repeating the first
        vertex. Fewer than 3 unique points are returned unchanged. If all
        points are collinear the two extreme points are returned.

    Examples:
        >>> square = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1), Point(0.5, 0.5)]
        >>> calculate_convex_hull(square)
        [Point(x=0, y=0), Point(x=1, y=0), Point(x=1, y=1), Point(x=0, y=1)]
    """
    unique = remove_duplicates(points, tolerance)
    if len(unique) < 3:
        return unique

    ordered = sorted(unique, key=lambda p: (p.x, p.y))

    lower: list[Point] = []
    for p in ordered:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: list[Point] = []
    for p in reversed(ordered):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    # The last point of each chain is the first point of the other one.
    # For collinear input both chains are the same segment, which leaves
    # exactly its two endpoints here.
    return lower[:-1] + upper[:-1]


def hull_area(hull: list[Point]) -> float:
    """Calculate the area of a hull using the shoelace formula.

    Returns:
        Absolute area; 0.0 for fewer than 3 points
    """
    return polygon_area(hull)


def rectangular_hull(
    width: float, height: float, center: tuple[float, float] = (0.0, 0.0)
) -> list[Point]:
    """Hull of an axis-aligned rectangle.

    Args:
        width: Rectangle width
        height: Rectangle height
        center: Rectangle centre

    Returns:
        Four corners: (min x, min y), (max x, min y), (max x, max y), (min x, max y)
    """
    cx, cy = center
    half_width = width / 2
    half_height = height / 2
    return [
        Point(cx - half_width, cy - half_height),
        Point(cx + half_width, cy - half_height),
        Point(cx + half_width, cy + half_height),
        Point(cx - half_width, cy + half_height),
    ]
