"""Coalition analysis between opinion groups.

Pure functions (no I/O) operating on per-statement group agreement scores.
Two groups are aligned on a statement when both hold a decisive position
(beyond AGREEMENT_THRESHOLD on the -100..+100 scale) in the same direction,
and opposed when both are decisive in opposite directions.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from opinion_landscape.helpers.constants import (
    AGREEMENT_THRESHOLD,
    DEFAULT_MIN_ALIGNMENT,
    POLARIZATION_HIGH,
    POLARIZATION_MEDIUM,
    STRONG_COALITION_ALIGNMENT,
    STRONGEST_COALITION_COUNT,
    PolarizationBand,
)
from opinion_landscape.helpers.validation import (
    InvalidArgumentError,
    require_finite,
    require_group_count,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatementAgreements:
    """Agreement score per group for one statement; absent groups have no score."""

    statement_id: str
    group_agreements: Dict[int, float]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatementAgreements":
        raw = data.get("groupAgreements")
        if raw is None:
            raw = data.get("group_agreements", {})
        statement_id = data.get("statementId", data.get("statement_id"))
        return cls(statement_id=statement_id, group_agreements=coerce_scores(raw))


@dataclass(frozen=True)
class PairwiseAlignment:
    group_ids: Tuple[int, int]
    group_labels: Tuple[str, str]
    agreement_count: int
    disagreement_count: int
    neutral_count: int
    alignment_percentage: int

    @property
    def counted_statements(self) -> int:
        return self.agreement_count + self.disagreement_count + self.neutral_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groupIds": list(self.group_ids),
            "groupLabels": list(self.group_labels),
            "agreementCount": self.agreement_count,
            "disagreementCount": self.disagreement_count,
            "neutralCount": self.neutral_count,
            "alignmentPercentage": self.alignment_percentage,
        }


@dataclass(frozen=True)
class CoalitionAnalysis:
    pairwise_alignment: List[PairwiseAlignment]
    strongest_coalitions: List[PairwiseAlignment]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pairwiseAlignment": [a.to_dict() for a in self.pairwise_alignment],
            "strongestCoalitions": [a.to_dict() for a in self.strongest_coalitions],
        }


# ---------------------------------------------------------------------------
# Score handling
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round to the nearest int with .5 going up (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def normalize_score(score: float) -> float:
    """Map a 0..1 score onto -100..+100; other values are already on that scale."""
    if 0 <= score <= 1:
        return (score - 0.5) * 200
    return score


def _coerce_group_id(key) -> int:
    if isinstance(key, bool):
        raise InvalidArgumentError(f"group id must be an int, got {key!r}")
    if isinstance(key, float) and not key.is_integer():
        raise InvalidArgumentError(f"group id must be an int, got {key!r}")
    try:
        return int(key)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"group id must be an int, got {key!r}") from e


def coerce_scores(raw: Dict[Any, Any]) -> Dict[int, float]:
    """Normalize keys to int (JSON feeds use str keys) and reject non-finite scores."""
    scores = {}
    for key, value in raw.items():
        if value is None:
            continue
        group_id = _coerce_group_id(key)
        scores[group_id] = require_finite(value, f"score for group {group_id}")
    return scores


def to_statement(value: Any) -> StatementAgreements:
    if isinstance(value, StatementAgreements):
        return StatementAgreements(
            statement_id=value.statement_id,
            group_agreements=coerce_scores(value.group_agreements),
        )
    if isinstance(value, dict):
        return StatementAgreements.from_dict(value)
    raise InvalidArgumentError(f"cannot interpret {value!r} as statement agreements")


def _classify_pair(score1: float, score2: float) -> str:
    pct1 = normalize_score(score1)
    pct2 = normalize_score(score2)

    if abs(pct1) <= AGREEMENT_THRESHOLD or abs(pct2) <= AGREEMENT_THRESHOLD:
        return "neutral"
    if (pct1 > 0) == (pct2 > 0):
        return "agreement"
    return "disagreement"


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

def analyze_coalitions(
    statements: Iterable[Any],
    num_groups: int,
    group_labels: Optional[Sequence[str]] = None,
) -> CoalitionAnalysis:
    """Compute pairwise alignment for every pair of groups.

    Args:
        statements: StatementAgreements records, or dicts with 'statementId'
                    and 'groupAgreements' (groupId -> score, 0..1 or -100..100).
        num_groups: Number of opinion groups; ids are 0..num_groups-1.
        group_labels: Optional display labels; defaults to "Group 1", "Group 2", ...

    Returns:
        CoalitionAnalysis with pairs sorted by alignment percentage then
        agreement count (both descending) and the top three as strongest.

    A statement missing either group's score is skipped for that pair, but
    still counts toward the alignment percentage denominator.
    """
    num_groups = require_group_count(num_groups)
    statements = [to_statement(s) for s in statements]

    if group_labels is None:
        labels = [f"Group {i + 1}" for i in range(num_groups)]
    else:
        labels = list(group_labels)
        if len(labels) < num_groups:
            raise InvalidArgumentError(
                f"group_labels has {len(labels)} entries, need {num_groups}"
            )

    total_statements = len(statements)
    pairwise = []

    for i in range(num_groups):
        for j in range(i + 1, num_groups):
            counts = {"agreement": 0, "disagreement": 0, "neutral": 0}

            for stmt in statements:
                score1 = stmt.group_agreements.get(i)
                score2 = stmt.group_agreements.get(j)
                if score1 is None or score2 is None:
                    continue
                counts[_classify_pair(score1, score2)] += 1

            if total_statements > 0:
                alignment = round_half_up(counts["agreement"] / total_statements * 100)
            else:
                alignment = 0

            pairwise.append(PairwiseAlignment(
                group_ids=(i, j),
                group_labels=(labels[i], labels[j]),
                agreement_count=counts["agreement"],
                disagreement_count=counts["disagreement"],
                neutral_count=counts["neutral"],
                alignment_percentage=alignment,
            ))

    pairwise.sort(key=lambda a: (-a.alignment_percentage, -a.agreement_count))

    logger.debug(
        "Coalition analysis: %d groups, %d statements, %d pairs",
        num_groups, total_statements, len(pairwise),
    )

    return CoalitionAnalysis(
        pairwise_alignment=pairwise,
        strongest_coalitions=pairwise[:STRONGEST_COALITION_COUNT],
    )


def get_strongest_coalition(analysis: CoalitionAnalysis) -> Optional[PairwiseAlignment]:
    if not analysis.strongest_coalitions:
        return None
    return analysis.strongest_coalitions[0]


def is_strong_coalition(group_id1: int, group_id2: int, analysis: CoalitionAnalysis) -> bool:
    """True if the two groups (in either order) align on more than 50% of statements."""
    wanted = {group_id1, group_id2}
    for alignment in analysis.pairwise_alignment:
        if set(alignment.group_ids) == wanted:
            return alignment.alignment_percentage > STRONG_COALITION_ALIGNMENT
    return False


def get_coalitions_above_threshold(
    analysis: CoalitionAnalysis,
    min_alignment: float = DEFAULT_MIN_ALIGNMENT,
) -> List[PairwiseAlignment]:
    return [a for a in analysis.pairwise_alignment if a.alignment_percentage >= min_alignment]


def calculate_polarization_level(analysis: CoalitionAnalysis) -> int:
    """Share of decisive disagreements across all pairs, 0-100.

    The per-pair statement count is taken from the first (strongest) pair
    only, not averaged over all pairs. Pairs with different amounts of
    missing data therefore skew the score.
    """
    pairs = analysis.pairwise_alignment
    if not pairs:
        return 0

    total_disagreements = sum(a.disagreement_count for a in pairs)
    statements_per_pair = pairs[0].counted_statements or 1

    return round_half_up(total_disagreements / (len(pairs) * statements_per_pair) * 100)


def polarization_band(score: float) -> str:
    if score >= POLARIZATION_HIGH:
        return PolarizationBand.HIGH
    if score >= POLARIZATION_MEDIUM:
        return PolarizationBand.MEDIUM
    return PolarizationBand.LOW
