"""Shared constants for thresholds, fallback sizes, and classification types.

These values define the observable output of the engine (which statements
count as agreement, how large a fallback circle is). They are deliberately
not exposed through Config.
"""


# ── Coalition analysis ──────────────────────────────────────────────────
# Normalized score (-100..+100) beyond which a group's position is decisive.
AGREEMENT_THRESHOLD = 60

# Number of top-ranked pairs reported as strongest coalitions.
STRONGEST_COALITION_COUNT = 3

# is_strong_coalition() requires strictly more than this alignment.
STRONG_COALITION_ALIGNMENT = 50

# Default min_alignment for get_coalitions_above_threshold().
DEFAULT_MIN_ALIGNMENT = 50

# Polarization score bands (score >= value)
POLARIZATION_HIGH = 30
POLARIZATION_MEDIUM = 15

class PolarizationBand:
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


# ── Geometry ────────────────────────────────────────────────────────────
# Centripetal Catmull-Rom
SPLINE_ALPHA = 0.5

# Fallback circle radii
RADIUS_EMPTY = 30
RADIUS_SINGLE = 40
RADIUS_PAIR_MIN = 50
RADIUS_MIN = 60
RADIUS_PADDING = 20

class BoundaryKind:
    HULL = 'hull'
    CIRCLE = 'circle'


# ── Statement patterns (percentages, -100..+100) ────────────────────────
BRIDGE_MIN_AVG_PERCENT = 40
BRIDGE_MAX_AVG_PERCENT = 70

class PatternType:
    FULL_CONSENSUS = 'full_consensus'
    PARTIAL_CONSENSUS = 'partial_consensus'
    SPLIT_DECISION = 'split_decision'
    DIVISIVE = 'divisive'
    BRIDGE = 'bridge'
    NORMAL = 'normal'

PATTERN_TYPE_LABELS = {
    PatternType.FULL_CONSENSUS: 'Full Consensus',
    PatternType.PARTIAL_CONSENSUS: 'Partial Consensus',
    PatternType.SPLIT_DECISION: 'Split Decision',
    PatternType.DIVISIVE: 'Divisive',
    PatternType.BRIDGE: 'Bridge',
    PatternType.NORMAL: 'Normal',
}


# ── Consensus detection (agreement scores, 0..1) ────────────────────────
CONSENSUS_STD_THRESHOLD = 0.2
DIVISIVE_STD_THRESHOLD = 0.4
POSITIVE_CONSENSUS_THRESHOLD = 0.8
NEGATIVE_CONSENSUS_THRESHOLD = 0.2
BRIDGE_MIN_GROUPS = 2
BRIDGE_MIN_MEAN = 0.4
BRIDGE_MAX_MEAN = 0.7
BRIDGE_GROUP_AGREEMENT = 0.5

class ConsensusType:
    POSITIVE_CONSENSUS = 'positive_consensus'
    NEGATIVE_CONSENSUS = 'negative_consensus'
    DIVISIVE = 'divisive'
    BRIDGE = 'bridge'
    NORMAL = 'normal'
