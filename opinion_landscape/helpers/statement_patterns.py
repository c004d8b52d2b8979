"""Per-statement coalition patterns.

Splits the groups voting on a statement into agreeing, disagreeing and
neutral sets (same threshold as coalition analysis) and names the pattern:
full consensus, partial consensus, split decision, bridge or divisive.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from opinion_landscape.helpers.coalitions import coerce_scores, normalize_score
from opinion_landscape.helpers.constants import (
    AGREEMENT_THRESHOLD,
    BRIDGE_MAX_AVG_PERCENT,
    BRIDGE_MIN_AVG_PERCENT,
    PATTERN_TYPE_LABELS,
    PatternType,
)
from opinion_landscape.helpers.validation import InvalidArgumentError


@dataclass(frozen=True)
class CoalitionPattern:
    description: str
    agreeing_groups: List[int] = field(default_factory=list)
    disagreeing_groups: List[int] = field(default_factory=list)
    neutral_groups: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "agreeingGroups": list(self.agreeing_groups),
            "disagreeingGroups": list(self.disagreeing_groups),
            "neutralGroups": list(self.neutral_groups),
        }


@dataclass(frozen=True)
class PatternClassification:
    type: str
    coalition_pattern: CoalitionPattern
    statement_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statementId": self.statement_id,
            "type": self.type,
            "coalitionPattern": self.coalition_pattern.to_dict(),
        }


def _format_group_ids(group_ids):
    """0-indexed ids -> "1,2,3" for display."""
    return ",".join(str(g + 1) for g in group_ids)


def _describe_majority(majority, minority, action):
    noun = "Group" if len(minority) == 1 else "Groups"
    return f"Groups {_format_group_ids(majority)} {action} vs {noun} {_format_group_ids(minority)}"


def classify_statement_pattern(group_agreements, statement_id=None):
    """Classify how groups line up on a single statement.

    Args:
        group_agreements: Dict mapping group id -> agreement percentage
                          (-100..+100; 0..1 scores are normalized first).
        statement_id: Optional id carried into the result.

    Returns:
        PatternClassification. Group ids in each list keep ascending order.
    """
    scores = coerce_scores(group_agreements)
    if not scores:
        raise InvalidArgumentError("classify_statement_pattern needs at least one group score")

    num_groups = len(scores)
    pct = {g: normalize_score(s) for g, s in sorted(scores.items())}

    agreeing = [g for g, p in pct.items() if p > AGREEMENT_THRESHOLD]
    disagreeing = [g for g, p in pct.items() if p < -AGREEMENT_THRESHOLD]
    neutral = [g for g, p in pct.items() if -AGREEMENT_THRESHOLD <= p <= AGREEMENT_THRESHOLD]

    def result(pattern_type, pattern):
        return PatternClassification(type=pattern_type, coalition_pattern=pattern,
                                     statement_id=statement_id)

    # 1. Full consensus
    if len(agreeing) == num_groups:
        return result(PatternType.FULL_CONSENSUS,
                      CoalitionPattern("All groups agree", agreeing_groups=agreeing))
    if len(disagreeing) == num_groups:
        return result(PatternType.FULL_CONSENSUS,
                      CoalitionPattern("All groups disagree", disagreeing_groups=disagreeing))

    # 2. Partial consensus: everyone but one group; the rest count as opposing
    if len(agreeing) == num_groups - 1:
        opposing = disagreeing + neutral
        return result(PatternType.PARTIAL_CONSENSUS, CoalitionPattern(
            _describe_majority(agreeing, opposing, "agree"),
            agreeing_groups=agreeing,
            disagreeing_groups=opposing,
        ))
    if len(disagreeing) == num_groups - 1:
        opposing = agreeing + neutral
        return result(PatternType.PARTIAL_CONSENSUS, CoalitionPattern(
            _describe_majority(disagreeing, opposing, "disagree"),
            agreeing_groups=opposing,
            disagreeing_groups=disagreeing,
        ))

    # 3. Split decision
    if agreeing and disagreeing and len(agreeing) == len(disagreeing):
        return result(PatternType.SPLIT_DECISION, CoalitionPattern(
            f"Groups {_format_group_ids(agreeing)} vs Groups {_format_group_ids(disagreeing)}",
            agreeing, disagreeing, neutral,
        ))

    # 4. Bridge
    avg_strength = sum(abs(p) for p in pct.values()) / num_groups
    if (BRIDGE_MIN_AVG_PERCENT <= avg_strength <= BRIDGE_MAX_AVG_PERCENT
            and len(agreeing) >= 2 and len(disagreeing) >= 1):
        return result(PatternType.BRIDGE, CoalitionPattern(
            f"Connects Groups {_format_group_ids(agreeing)}",
            agreeing, disagreeing, neutral,
        ))

    # 5. Divisive
    return result(PatternType.DIVISIVE, CoalitionPattern(
        "Fragmented opinion", agreeing, disagreeing, neutral,
    ))


def get_type_label(pattern_type: str) -> str:
    return PATTERN_TYPE_LABELS[pattern_type]
