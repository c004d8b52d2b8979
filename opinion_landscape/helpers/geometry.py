"""Geometry helpers for opinion map visualization.

Pure math functions for convex hulls, smoothed hull outlines, centroids
and fallback circle radii. Nothing here raises on degenerate input: too few
or collinear points produce an empty hull, and the renderer falls back to a
circle sized by estimate_radius().
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from opinion_landscape.helpers.constants import (
    RADIUS_EMPTY,
    RADIUS_MIN,
    RADIUS_PADDING,
    RADIUS_PAIR_MIN,
    RADIUS_SINGLE,
    SPLINE_ALPHA,
)
from opinion_landscape.helpers.validation import InvalidArgumentError, require_finite

logger = logging.getLogger(__name__)

# Segment lengths below this are treated as zero when building spline controls
_EPSILON = 1e-12


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class SmoothedBoundary:
    """Hull vertices plus the SVG path of the closed spline through them."""

    hull: List[Point2D]
    path: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hull": [p.to_dict() for p in self.hull],
            "path": self.path,
        }


def to_point(value: Any) -> Point2D:
    """Coerce a Point2D, an {"x", "y"} dict or an (x, y) pair to Point2D."""
    if isinstance(value, Point2D):
        x, y = value.x, value.y
    elif isinstance(value, dict):
        if "x" not in value or "y" not in value:
            raise InvalidArgumentError(f"point dict needs 'x' and 'y' keys, got {value!r}")
        x, y = value["x"], value["y"]
    else:
        try:
            x, y = value
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"cannot interpret {value!r} as a 2D point") from e
    return Point2D(require_finite(x, "x"), require_finite(y, "y"))


def to_points(values: Iterable[Any]) -> List[Point2D]:
    return [to_point(v) for v in values]


# ---------------------------------------------------------------------------
# Convex hull
# ---------------------------------------------------------------------------

def is_counter_clockwise(a: Point2D, b: Point2D, c: Point2D) -> bool:
    """True if a -> b -> c makes a strict left turn, (b - a) x (c - a) > 0."""
    cross = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
    return cross > 0


def _all_collinear(points: List[Point2D]) -> bool:
    first = points[0]
    # Reference direction comes from the first point distinct from `first`;
    # a duplicated leading point would otherwise make every set look collinear.
    second = next((p for p in points[1:] if p != first), None)
    if second is None:
        return True

    for p in points:
        if is_counter_clockwise(first, second, p) or is_counter_clockwise(first, p, second):
            return False
    return True


def compute_convex_hull(points: Iterable[Any]) -> List[Point2D]:
    """Compute the convex hull of a set of 2D points using Graham scan.

    Returns hull vertices in counter-clockwise order starting at the anchor
    (lowest y, leftmost on ties). Returns an empty list when fewer than 3
    points are given or all points are collinear, since neither encloses a
    drawable region.
    """
    points = to_points(points)
    if len(points) < 3:
        return []

    if _all_collinear(points):
        logger.debug("Convex hull skipped: %d collinear points", len(points))
        return []

    anchor_idx = min(range(len(points)), key=lambda i: (points[i].y, points[i].x))
    anchor = points[anchor_idx]
    others = points[:anchor_idx] + points[anchor_idx + 1:]

    def polar_key(p):
        dx = p.x - anchor.x
        dy = p.y - anchor.y
        return (math.atan2(dy, dx), dx * dx + dy * dy)

    # sorted() is stable, so exact ties keep input order
    rest = sorted(others, key=polar_key)

    hull = [anchor]
    for p in rest:
        while len(hull) > 1 and not is_counter_clockwise(hull[-2], hull[-1], p):
            hull.pop()
        hull.append(p)

    # Rounding noise can let the atan2 order and the cross product disagree
    # on the last ray, so both turns that close the polygon are rechecked.
    while len(hull) > 2 and not (
        is_counter_clockwise(hull[-2], hull[-1], anchor)
        and is_counter_clockwise(hull[-1], anchor, hull[1])
    ):
        hull.pop()

    if len(hull) < 3:
        logger.debug("Convex hull skipped: %d nearly collinear points", len(points))
        return []

    return hull


# ---------------------------------------------------------------------------
# Smoothing
# ---------------------------------------------------------------------------

def _fmt(value: float) -> str:
    value = round(value, 4)
    if value == 0:
        value = 0.0  # drop negative zero
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def _bezier_controls(p0, p1, p2, p3, alpha):
    """Bezier control points for the centripetal Catmull-Rom span p1 -> p2.

    Knot spacing uses |pi - pj| ** alpha; a zero-length neighbouring span
    degrades that side to its endpoint.
    """
    d01 = math.hypot(p1.x - p0.x, p1.y - p0.y)
    d12 = math.hypot(p2.x - p1.x, p2.y - p1.y)
    d23 = math.hypot(p3.x - p2.x, p3.y - p2.y)

    l01_a, l12_a, l23_a = d01 ** alpha, d12 ** alpha, d23 ** alpha
    l01_2a, l12_2a, l23_2a = l01_a * l01_a, l12_a * l12_a, l23_a * l23_a

    c1x, c1y = p1.x, p1.y
    if l01_a > _EPSILON:
        a = 2 * l01_2a + 3 * l01_a * l12_a + l12_2a
        n = 3 * l01_a * (l01_a + l12_a)
        c1x = (p1.x * a - p0.x * l12_2a + p2.x * l01_2a) / n
        c1y = (p1.y * a - p0.y * l12_2a + p2.y * l01_2a) / n

    c2x, c2y = p2.x, p2.y
    if l23_a > _EPSILON:
        b = 2 * l23_2a + 3 * l23_a * l12_a + l12_2a
        m = 3 * l23_a * (l23_a + l12_a)
        c2x = (p2.x * b + p1.x * l23_2a - p3.x * l12_2a) / m
        c2y = (p2.y * b + p1.y * l23_2a - p3.y * l12_2a) / m

    return Point2D(c1x, c1y), Point2D(c2x, c2y)


def smooth_hull_path(hull: Iterable[Any], alpha: float = SPLINE_ALPHA) -> str:
    """Closed centripetal Catmull-Rom spline through the hull, as SVG path data.

    The path starts with a move to hull[0], has one cubic segment per hull
    edge (including the closing edge back to hull[0]) and ends with Z.
    Returns "" for fewer than 3 vertices.
    """
    pts = to_points(hull)
    n = len(pts)
    if n < 3:
        return ""

    parts = [f"M{_fmt(pts[0].x)},{_fmt(pts[0].y)}"]
    for i in range(n):
        p0, p1 = pts[i - 1], pts[i]
        p2, p3 = pts[(i + 1) % n], pts[(i + 2) % n]
        c1, c2 = _bezier_controls(p0, p1, p2, p3, alpha)
        parts.append(
            f"C{_fmt(c1.x)},{_fmt(c1.y)},{_fmt(c2.x)},{_fmt(c2.y)},{_fmt(p2.x)},{_fmt(p2.y)}"
        )
    parts.append("Z")
    return "".join(parts)


def compute_smoothed_hull(points: Iterable[Any]) -> Optional[SmoothedBoundary]:
    """Hull plus smoothed path, or None when no boundary can be drawn."""
    hull = compute_convex_hull(points)
    if len(hull) < 3:
        return None

    path = smooth_hull_path(hull)
    if not path:
        return None

    return SmoothedBoundary(hull=hull, path=path)


# ---------------------------------------------------------------------------
# Centroid / fallback radius
# ---------------------------------------------------------------------------

def compute_centroid(points: Iterable[Any]) -> Point2D:
    """Compute the centroid (center of mass) of a set of points."""
    points = to_points(points)
    if not points:
        return Point2D(0.0, 0.0)

    n = len(points)
    x_sum = sum(p.x for p in points)
    y_sum = sum(p.y for p in points)

    return Point2D(round(x_sum / n, 4), round(y_sum / n, 4))


def estimate_radius(points: Iterable[Any]) -> float:
    """Radius of the fallback circle drawn when a hull is unavailable.

    0 points -> 30, 1 point -> 40, 2 points -> max(50, half distance + 20),
    otherwise max(60, farthest distance from the centroid + 20).
    """
    points = to_points(points)
    if not points:
        return float(RADIUS_EMPTY)

    if len(points) == 1:
        return float(RADIUS_SINGLE)

    if len(points) == 2:
        a, b = points
        dist = math.hypot(b.x - a.x, b.y - a.y)
        return max(float(RADIUS_PAIR_MIN), dist / 2 + RADIUS_PADDING)

    n = len(points)
    cx = sum(p.x for p in points) / n
    cy = sum(p.y for p in points) / n
    max_dist = max(math.hypot(p.x - cx, p.y - cy) for p in points)

    return max(float(RADIUS_MIN), max_dist + RADIUS_PADDING)
