"""
Ranker

Ranks scored candidates and applies diversity rules so that no single
institution or academic level dominates the top of the list.
"""

from functools import cmp_to_key
from typing import Dict, List, Optional

from .contracts import ScoredCandidate
from .constants import (
    OVERALL_TIE_TOLERANCE,
    SUBJECT_TIE_TOLERANCE,
    TIE_EPSILON,
    MAX_PER_INSTITUTION,
    MAX_PER_LEVEL,
    UNKNOWN_GROUP,
)


def _descending(x: float, y: float) -> int:
    if x > y:
        return -1
    if x < y:
        return 1
    return 0


def compare_candidates(first: ScoredCandidate, second: ScoredCandidate) -> int:
    """
    Tolerance-based comparator.

    Overall scores at most 0.1 apart count as tied and fall through
    to subject match (tolerance 0.05), then to time overlap.
    """
    a, b = first.score, second.score

    if abs(a.overall - b.overall) > OVERALL_TIE_TOLERANCE + TIE_EPSILON:
        return _descending(a.overall, b.overall)

    if abs(a.subject_match - b.subject_match) > SUBJECT_TIE_TOLERANCE + TIE_EPSILON:
        return _descending(a.subject_match, b.subject_match)

    return _descending(a.time_overlap, b.time_overlap)


def rank_candidates(
    scored_candidates: List[ScoredCandidate]
) -> List[ScoredCandidate]:
    """
    Rank candidates best first.

    Args:
        scored_candidates: List of scored candidates

    Returns:
        New sorted list; equal candidates keep their input order
    """
    return sorted(scored_candidates, key=cmp_to_key(compare_candidates))


def apply_diversity(
    ranked: List[ScoredCandidate],
    limit: Optional[int] = None
) -> List[ScoredCandidate]:
    """
    Greedy diversification with backfill.

    A candidate is admitted while its institution has appeared fewer than
    3 times and its level fewer than 2 times among those admitted. Skipped
    candidates are appended afterwards in rank order, so nothing is lost
    when the pool has no alternatives.

    Args:
        ranked: Candidates in rank order
        limit: Maximum number to return (all when None)

    Returns:
        Diversified list
    """
    institution_counts: Dict[str, int] = {}
    level_counts: Dict[str, int] = {}
    admitted: List[ScoredCandidate] = []
    skipped: List[ScoredCandidate] = []

    for scored in ranked:
        institution = scored.institution or UNKNOWN_GROUP
        level = scored.level or UNKNOWN_GROUP

        if (
            institution_counts.get(institution, 0) < MAX_PER_INSTITUTION
            and level_counts.get(level, 0) < MAX_PER_LEVEL
        ):
            admitted.append(scored)
            institution_counts[institution] = institution_counts.get(institution, 0) + 1
            level_counts[level] = level_counts.get(level, 0) + 1
        else:
            skipped.append(scored)

    diversified = admitted + skipped
    if limit is not None:
        return diversified[:limit]
    return diversified
