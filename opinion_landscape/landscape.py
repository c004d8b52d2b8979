"""
Compose the opinion landscape for one poll snapshot.

Per cluster: a smoothed convex hull when the members enclose a region,
otherwise a fallback circle around the cluster centroid. Across clusters:
one coalition analysis over the statement x group score matrix, the
polarization score derived from it, the coalition pattern of each
statement and, when raw votes are supplied, its consensus classification.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from opinion_landscape.helpers.coalitions import (
    CoalitionAnalysis,
    analyze_coalitions,
    calculate_polarization_level,
    polarization_band,
    to_statement,
)
from opinion_landscape.helpers.config import get_config
from opinion_landscape.helpers.consensus import (
    StatementClassification,
    classify_all_statements,
)
from opinion_landscape.helpers.constants import BoundaryKind
from opinion_landscape.helpers.geometry import (
    Point2D,
    compute_centroid,
    compute_smoothed_hull,
    estimate_radius,
    to_point,
    to_points,
)
from opinion_landscape.helpers.statement_patterns import (
    PatternClassification,
    classify_statement_pattern,
)
from opinion_landscape.helpers.validation import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterBoundary:
    group_id: int
    kind: str  # BoundaryKind.HULL or BoundaryKind.CIRCLE
    hull: List[Point2D] = field(default_factory=list)
    path: str = ""
    centroid: Optional[Point2D] = None
    radius: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == BoundaryKind.HULL:
            return {
                "groupId": self.group_id,
                "type": self.kind,
                "hull": [p.to_dict() for p in self.hull],
                "path": self.path,
            }
        return {
            "groupId": self.group_id,
            "type": self.kind,
            "centroid": self.centroid.to_dict(),
            "radius": self.radius,
        }


@dataclass(frozen=True)
class Landscape:
    boundaries: Dict[int, ClusterBoundary]
    coalitions: CoalitionAnalysis
    polarization: int
    polarization_level: str
    statement_patterns: List[PatternClassification] = field(default_factory=list)
    consensus: List[StatementClassification] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boundaries": {str(gid): b.to_dict() for gid, b in self.boundaries.items()},
            "coalitionAnalysis": self.coalitions.to_dict(),
            "polarization": self.polarization,
            "polarizationLevel": self.polarization_level,
            "statementPatterns": [p.to_dict() for p in self.statement_patterns],
            "consensus": [c.to_dict() for c in self.consensus],
        }


# ---------------------------------------------------------------------------
# Canvas projection
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CanvasBounds:
    min_x: float
    min_y: float
    width: float
    height: float


def compute_canvas_bounds(points: Sequence[Point2D], padding_x: float, padding_y: float) -> CanvasBounds:
    """Bounds of all points plus fractional padding; (-1..1) when empty."""
    if not points:
        return CanvasBounds(min_x=-1.0, min_y=-1.0, width=2.0, height=2.0)

    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)

    # A single point or a flat axis would give zero span
    span_x = (max_x - min_x) or 1.0
    span_y = (max_y - min_y) or 1.0
    pad_x = span_x * padding_x
    pad_y = span_y * padding_y

    return CanvasBounds(
        min_x=min_x - pad_x,
        min_y=min_y - pad_y,
        width=span_x + 2 * pad_x,
        height=span_y + 2 * pad_y,
    )


def project_point(point: Point2D, bounds: CanvasBounds, width: float, height: float) -> Point2D:
    """Map data coordinates onto the canvas; canvas y grows downward."""
    x = (point.x - bounds.min_x) / bounds.width * width
    y = height - (point.y - bounds.min_y) / bounds.height * height
    return Point2D(x, y)


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def build_cluster_boundary(group_id: int, points: Sequence[Point2D],
                           centroid: Optional[Point2D] = None) -> ClusterBoundary:
    smoothed = compute_smoothed_hull(points)
    if smoothed is not None:
        return ClusterBoundary(
            group_id=group_id,
            kind=BoundaryKind.HULL,
            hull=smoothed.hull,
            path=smoothed.path,
        )

    logger.debug("Cluster %s: no drawable hull from %d points, using circle", group_id, len(points))
    return ClusterBoundary(
        group_id=group_id,
        kind=BoundaryKind.CIRCLE,
        centroid=centroid if centroid is not None else compute_centroid(points),
        radius=estimate_radius(points),
    )


def compose_landscape(
    clusters: Iterable[Dict[str, Any]],
    statements: Iterable[Any],
    num_groups: int,
    group_labels: Optional[Sequence[str]] = None,
    project: Optional[bool] = None,
    config=None,
    votes: Optional[Mapping[str, Sequence[int]]] = None,
    user_groups: Optional[Mapping[str, int]] = None,
) -> Landscape:
    """Build boundaries for every cluster and the coalition analysis.

    Args:
        clusters: Dicts with 'id' (group id), 'points' (list of points) and an
                  optional 'centroid' (point) supplied by the clustering stage.
        statements: Statement agreement records, see analyze_coalitions().
        num_groups: Number of opinion groups.
        group_labels: Optional display labels per group.
        project: Project points onto the canvas before computing shapes.
                 Defaults to config.PROJECT_TO_CANVAS.
        config: Config instance; defaults to get_config().
        votes: Optional user id -> vote row (1, -1, 0 per statement, in the
               order of `statements`). Given together with user_groups, it
               adds a consensus classification per statement.
        user_groups: Optional user id -> group id for the voters in votes.

    Returns:
        Landscape with one boundary per cluster keyed by group id.
    """
    config = config or get_config()
    if project is None:
        project = config.PROJECT_TO_CANVAS
    if (votes is None) != (user_groups is None):
        raise InvalidArgumentError("votes and user_groups must be given together")

    parsed = []
    for cluster in clusters:
        if "id" not in cluster:
            raise InvalidArgumentError(f"cluster is missing 'id': {cluster!r}")
        centroid = cluster.get("centroid")
        parsed.append((
            cluster["id"],
            to_points(cluster.get("points", [])),
            to_point(centroid) if centroid is not None else None,
        ))

    if project:
        all_points = [p for _, pts, _ in parsed for p in pts]
        bounds = compute_canvas_bounds(all_points, config.CANVAS_PADDING_X, config.CANVAS_PADDING_Y)

        def to_canvas(p):
            return project_point(p, bounds, config.CANVAS_WIDTH, config.CANVAS_HEIGHT)

        parsed = [
            (gid, [to_canvas(p) for p in pts], to_canvas(c) if c is not None else None)
            for gid, pts, c in parsed
        ]

    boundaries = {
        gid: build_cluster_boundary(gid, pts, centroid)
        for gid, pts, centroid in parsed
    }

    statements = [to_statement(s) for s in statements]
    coalitions = analyze_coalitions(statements, num_groups, group_labels)
    polarization = calculate_polarization_level(coalitions)

    patterns = [
        classify_statement_pattern(s.group_agreements, statement_id=s.statement_id)
        for s in statements
        if s.group_agreements
    ]

    consensus = []
    if votes is not None:
        consensus = classify_all_statements(votes, user_groups, [s.statement_id for s in statements])

    hull_count = sum(1 for b in boundaries.values() if b.kind == BoundaryKind.HULL)
    logger.info(
        "Composed landscape: %d clusters (%d hulls, %d circles), %d statements, polarization=%d",
        len(boundaries), hull_count, len(boundaries) - hull_count, len(statements), polarization,
    )

    return Landscape(
        boundaries=boundaries,
        coalitions=coalitions,
        polarization=polarization,
        polarization_level=polarization_band(polarization),
        statement_patterns=patterns,
        consensus=consensus,
    )
