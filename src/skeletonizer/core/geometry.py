"""Geometric predicates for the straight skeleton computation.

This module provides the floating-point utilities the event machinery is built on:
- Relative-tolerance equality of scalars and vectors
- Signed area and contour orientation (shoelace formula)
- Contour normalization (near-duplicate and collinear point removal)
- Ray/ray and line/line intersection
- Perpendicular distance from a point to an edge's supporting line
- Detection of unsolved "points at infinity"

All functions are pure, stateless, and designed for use in parallel processing.
Predicates never raise on degenerate geometry: they return None or False and the
caller skips the candidate.
"""

import math
from collections.abc import Iterable, Iterator, Sequence
from typing import TypeVar

from skeletonizer.domain import Ray, Segment, Vec2

T = TypeVar("T")

DEFAULT_RELATIVE_TOLERANCE = 0.001
DEFAULT_EPSILON = 1e-5
DEFAULT_PARALLEL_EPSILON = 1e-10
DEFAULT_INFINITY_THRESHOLD = 1e10


def window(items: Sequence[T]) -> Iterator[tuple[T, T, T]]:
    """Iterate a closed sequence as (previous, current, next) triples.

    Args:
        items: Items of a closed loop

    Yields:
        One triple per item, wrapping around at both ends

    Examples:
        >>> list(window([1, 2, 3]))
        [(3, 1, 2), (1, 2, 3), (2, 3, 1)]
    """
    n = len(items)
    for i in range(n):
        yield items[i - 1], items[i], items[(i + 1) % n]


def approx_equal(a: float, b: float, tolerance: float = DEFAULT_RELATIVE_TOLERANCE) -> bool:
    """Compare two scalars with a tolerance relative to their magnitude.

    Args:
        a: First value
        b: Second value
        tolerance: Allowed difference as a fraction of max(|a|, |b|)

    Returns:
        True if the values are equal within tolerance. NaN is never equal.
    """
    return a == b or abs(a - b) <= max(abs(a), abs(b)) * tolerance


def approx_equal_vec(a: Vec2, b: Vec2, tolerance: float = DEFAULT_RELATIVE_TOLERANCE) -> bool:
    """Compare two vectors componentwise with a relative tolerance."""
    return approx_equal(a.x, b.x, tolerance) and approx_equal(a.y, b.y, tolerance)


def signed_area(points: Sequence[Vec2]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> signed_area([Vec2(0, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 1)])
        1.0
        >>> signed_area([Vec2(0, 0), Vec2(0, 1), Vec2(1, 1), Vec2(1, 0)])
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def orient(points: Sequence[Vec2], counter_clockwise: bool = True) -> list[Vec2]:
    """Return the points wound in the requested direction.

    Args:
        points: Closed contour
        counter_clockwise: Target winding (y axis pointing up)

    Returns:
        The contour, reversed if its winding did not match
    """
    area = signed_area(points)
    if (area < 0.0) == counter_clockwise:
        return list(reversed(points))
    return list(points)


def normalize_contour(
    points: Sequence[Vec2], tolerance: float = DEFAULT_RELATIVE_TOLERANCE
) -> list[Vec2]:
    """Prepare a contour for active vertex list construction.

    The contour is reversed into the frame the event predicates are written
    for, then points approximately equal to their predecessor are dropped
    (including across the closing edge), then points continuing their
    predecessor's direction are dropped.

    Args:
        points: Closed contour, already oriented
        tolerance: Relative tolerance for point and direction equality

    Returns:
        Cleaned contour, possibly with fewer than 3 points
    """
    deduped: list[Vec2] = []
    for point in reversed(points):
        if deduped and approx_equal_vec(point, deduped[-1], tolerance):
            continue
        deduped.append(point)
    while len(deduped) > 1 and approx_equal_vec(deduped[-1], deduped[0], tolerance):
        deduped.pop()

    if len(deduped) < 3:
        return deduped

    return [
        point
        for prev, point, nxt in window(deduped)
        if not approx_equal_vec((point - prev).normalize(), (nxt - point).normalize(), tolerance)
    ]


def prepare_contour(
    points: Iterable[Vec2 | tuple[float, float]],
    counter_clockwise: bool = True,
    tolerance: float = DEFAULT_RELATIVE_TOLERANCE,
) -> list[Vec2]:
    """Coerce, orient and normalize one input contour.

    Args:
        points: Contour as Vec2 or (x, y) pairs
        counter_clockwise: True for outer boundaries, False for holes
        tolerance: Relative tolerance for normalization

    Returns:
        Contour ready for LAV construction
    """
    contour = [Vec2.of(p) for p in points]
    return normalize_contour(orient(contour, counter_clockwise), tolerance)


def ray_intersection(
    a: Ray, b: Ray, parallel_epsilon: float = DEFAULT_PARALLEL_EPSILON
) -> Vec2 | None:
    """Find where two rays cross.

    Args:
        a: First ray
        b: Second ray
        parallel_epsilon: Relative determinant threshold for parallel rays

    Returns:
        Intersection point if both rays reach it, None for parallel,
        degenerate or diverging rays
    """
    r = a.direction
    s = b.direction
    denom = r.cross(s)
    if not abs(denom) > parallel_epsilon * r.magnitude() * s.magnitude():
        return None

    offset = b.origin - a.origin
    t = offset.cross(s) / denom
    u = offset.cross(r) / denom
    if not (t >= 0.0 and u >= 0.0):
        return None

    return a.origin + r * t


def line_intersection(
    a: Segment, b: Segment, parallel_epsilon: float = DEFAULT_PARALLEL_EPSILON
) -> Vec2 | None:
    """Find where the infinite supporting lines of two segments cross.

    Args:
        a: First segment
        b: Second segment
        parallel_epsilon: Relative determinant threshold for parallel lines

    Returns:
        Intersection point, or None if the lines are parallel or degenerate
    """
    r = a.vec()
    s = b.vec()
    denom = r.cross(s)
    if not abs(denom) > parallel_epsilon * r.magnitude() * s.magnitude():
        return None

    t = (b.src - a.src).cross(s) / denom
    return a.src + r * t


def line_distance(segment: Segment, point: Vec2) -> float:
    """Perpendicular distance from a point to a segment's supporting line.

    Args:
        segment: Edge whose infinite line is measured against
        point: Query point

    Returns:
        Non-negative distance; distance to ``segment.src`` for a zero-length segment
    """
    direction = segment.vec()
    length = direction.magnitude()
    if length == 0.0:
        return point.distance(segment.src)
    return abs(direction.cross(point - segment.src)) / length


def is_point_at_infinity(point: Vec2, threshold: float = DEFAULT_INFINITY_THRESHOLD) -> bool:
    """Check whether a point is an unsolved-geometry sentinel.

    Args:
        point: Point to test
        threshold: Squared magnitude above which the point counts as infinite

    Returns:
        True for non-finite coordinates or points beyond the threshold
    """
    if not (math.isfinite(point.x) and math.isfinite(point.y)):
        return True
    return point.magnitude2() > threshold
