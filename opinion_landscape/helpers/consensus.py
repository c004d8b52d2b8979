"""
Consensus detection across opinion groups.

Classifies statements as positive/negative consensus, divisive, bridge or
normal from the spread of group agreement scores (0..1 scale). Spread is
measured with the population standard deviation, not the variance; the
thresholds below are on the same 0..1 scale as the scores themselves.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from opinion_landscape.helpers.constants import (
    BRIDGE_GROUP_AGREEMENT,
    BRIDGE_MAX_MEAN,
    BRIDGE_MIN_GROUPS,
    BRIDGE_MIN_MEAN,
    CONSENSUS_STD_THRESHOLD,
    DIVISIVE_STD_THRESHOLD,
    NEGATIVE_CONSENSUS_THRESHOLD,
    POSITIVE_CONSENSUS_THRESHOLD,
    ConsensusType,
)
from opinion_landscape.helpers.validation import InvalidArgumentError, require_finite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupScore:
    group_id: int
    agreement_score: float  # 0..1
    voter_count: int = 0


@dataclass(frozen=True)
class StatementClassification:
    statement_id: str
    type: str
    group_agreements: Dict[int, float]
    average_agreement: float
    standard_deviation: float
    bridge_score: Optional[float] = None
    connects_groups: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "statementId": self.statement_id,
            "type": self.type,
            "groupAgreements": dict(self.group_agreements),
            "averageAgreement": self.average_agreement,
            "standardDeviation": self.standard_deviation,
        }
        if self.type == ConsensusType.BRIDGE:
            data["bridgeScore"] = self.bridge_score
            data["connectsGroups"] = list(self.connects_groups)
        return data


def _detect_bridge(group_scores, mean, std):
    """Return (bridge_score, connected group ids) or None.

    A bridge has moderate average agreement, moderate spread, and at least
    two groups leaning toward agreement.
    """
    if len(group_scores) < BRIDGE_MIN_GROUPS:
        return None
    if mean < BRIDGE_MIN_MEAN or mean > BRIDGE_MAX_MEAN:
        return None
    if std < CONSENSUS_STD_THRESHOLD or std > DIVISIVE_STD_THRESHOLD:
        return None

    agreeing = [g.group_id for g in group_scores if g.agreement_score > BRIDGE_GROUP_AGREEMENT]
    if len(agreeing) < BRIDGE_MIN_GROUPS:
        return None

    return len(agreeing) / len(group_scores) * mean, agreeing


def classify_statement(statement_id: str, group_scores: Sequence[GroupScore]) -> StatementClassification:
    """Classify one statement from its per-group agreement scores.

    Checks run in order: positive consensus, negative consensus, divisive,
    bridge; anything left is normal.
    """
    if not group_scores:
        raise InvalidArgumentError(f"No group agreements provided for statement {statement_id}")

    values = np.array(
        [require_finite(g.agreement_score, f"agreement score for group {g.group_id}")
         for g in group_scores],
        dtype=float,
    )
    mean = float(np.mean(values))
    std = float(np.std(values))  # population std (ddof=0)

    base = dict(
        statement_id=statement_id,
        group_agreements={g.group_id: g.agreement_score for g in group_scores},
        average_agreement=mean,
        standard_deviation=std,
    )

    if std < CONSENSUS_STD_THRESHOLD and mean > POSITIVE_CONSENSUS_THRESHOLD:
        return StatementClassification(type=ConsensusType.POSITIVE_CONSENSUS, **base)

    if std < CONSENSUS_STD_THRESHOLD and mean < NEGATIVE_CONSENSUS_THRESHOLD:
        return StatementClassification(type=ConsensusType.NEGATIVE_CONSENSUS, **base)

    if std > DIVISIVE_STD_THRESHOLD:
        return StatementClassification(type=ConsensusType.DIVISIVE, **base)

    bridge = _detect_bridge(group_scores, mean, std)
    if bridge is not None:
        bridge_score, connects = bridge
        return StatementClassification(
            type=ConsensusType.BRIDGE,
            bridge_score=bridge_score,
            connects_groups=connects,
            **base,
        )

    return StatementClassification(type=ConsensusType.NORMAL, **base)


def classify_all_statements(
    votes: Mapping[str, Sequence[int]],
    user_groups: Mapping[str, int],
    statement_ids: Sequence[str],
) -> List[StatementClassification]:
    """Classify every statement from raw votes.

    Args:
        votes: Dict mapping user id -> vote row, one entry per statement
               (1 agree, -1 disagree, 0 pass).
        user_groups: Dict mapping user id -> group id. Users without a group
                     are ignored.
        statement_ids: Statement ids matching the vote row columns.

    Returns:
        One classification per statement that at least one group voted on
        (agree or disagree). Groups whose members all passed are left out of
        that statement's scores.
    """
    group_ids = sorted(set(user_groups.values()))
    members = {
        gid: [uid for uid, g in user_groups.items() if g == gid and uid in votes]
        for gid in group_ids
    }

    classifications = []
    for idx, statement_id in enumerate(statement_ids):
        group_scores = []
        for gid in group_ids:
            column = np.array(
                [votes[uid][idx] for uid in members[gid] if idx < len(votes[uid])],
                dtype=float,
            )
            agree = int(np.sum(column == 1))
            disagree = int(np.sum(column == -1))
            total = agree + disagree
            if total == 0:
                continue

            raw = (agree - disagree) / total  # -1..1
            group_scores.append(GroupScore(
                group_id=gid,
                agreement_score=(raw + 1) / 2,
                voter_count=total,
            ))

        if group_scores:
            classifications.append(classify_statement(statement_id, group_scores))

    logger.debug(
        "Classified %d of %d statements across %d groups",
        len(classifications), len(statement_ids), len(group_ids),
    )
    return classifications
