"""
Opinion landscape: cluster boundary geometry and coalition analysis.

Pure, synchronous computation over snapshots supplied by the clustering and
vote-aggregation stages. Results are plain value objects with to_dict()
for the rendering and reporting layers.
"""

from opinion_landscape.helpers.coalitions import (
    CoalitionAnalysis,
    PairwiseAlignment,
    StatementAgreements,
    analyze_coalitions,
    calculate_polarization_level,
    get_coalitions_above_threshold,
    get_strongest_coalition,
    is_strong_coalition,
    polarization_band,
)
from opinion_landscape.helpers.consensus import (
    GroupScore,
    StatementClassification,
    classify_all_statements,
    classify_statement,
)
from opinion_landscape.helpers.geometry import (
    Point2D,
    SmoothedBoundary,
    compute_centroid,
    compute_convex_hull,
    compute_smoothed_hull,
    estimate_radius,
    is_counter_clockwise,
    smooth_hull_path,
)
from opinion_landscape.helpers.validation import InvalidArgumentError
from opinion_landscape.landscape import ClusterBoundary, Landscape, compose_landscape

__all__ = [
    # Geometry
    "Point2D",
    "SmoothedBoundary",
    "compute_convex_hull",
    "smooth_hull_path",
    "compute_smoothed_hull",
    "estimate_radius",
    "is_counter_clockwise",
    "compute_centroid",
    # Coalitions
    "StatementAgreements",
    "PairwiseAlignment",
    "CoalitionAnalysis",
    "analyze_coalitions",
    "get_strongest_coalition",
    "is_strong_coalition",
    "get_coalitions_above_threshold",
    "calculate_polarization_level",
    "polarization_band",
    # Consensus
    "GroupScore",
    "StatementClassification",
    "classify_statement",
    "classify_all_statements",
    # Composition
    "ClusterBoundary",
    "Landscape",
    "compose_landscape",
    "InvalidArgumentError",
]
