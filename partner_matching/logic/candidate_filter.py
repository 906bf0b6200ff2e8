"""
Candidate Filter

Reduces the candidate pool before scoring, and applies the score-dependent
thresholds after it.
"""

import logging
from typing import List, Optional

from .contracts import Participant, MatchingCriteria, CompatibilityScore

logger = logging.getLogger(__name__)


def is_eligible_candidate(
    requester: Participant,
    candidate: Participant,
    criteria: MatchingCriteria
) -> bool:
    """
    Hard eligibility check for one candidate.

    Excludes:
    - The requester itself and existing partners
    - Inactive participants and incomplete profiles
    - Candidates sharing none of the requested subjects (when given)
    - Level / style mismatches when exact matching is requested
    """
    if candidate.id == requester.id or candidate.id in requester.partner_ids:
        return False
    if not candidate.is_active or not candidate.profile_complete:
        return False

    if criteria.subjects and not candidate.subject_ids.intersection(criteria.subjects):
        return False

    if criteria.exact_level_match:
        wanted_level = criteria.academic_level or requester.level
        if candidate.level != wanted_level:
            return False

    if criteria.exact_style_match:
        wanted_style = criteria.learning_style or requester.learning_style
        if wanted_style and candidate.learning_style != wanted_style:
            return False

    return True


def filter_candidates(
    requester: Participant,
    candidate_pool: List[Participant],
    criteria: MatchingCriteria
) -> List[Participant]:
    """
    Pre-filter the pool, preserving its order.

    Args:
        requester: Participant asking for partners
        candidate_pool: Caller-supplied candidates
        criteria: Request criteria

    Returns:
        Candidates that pass every hard filter
    """
    eligible = [c for c in candidate_pool if is_eligible_candidate(requester, c, criteria)]
    skipped = len(candidate_pool) - len(eligible)
    if skipped:
        logger.debug(f"Pre-filter removed {skipped} of {len(candidate_pool)} candidates")
    return eligible


def passes_score_thresholds(
    score: CompatibilityScore,
    criteria: MatchingCriteria,
    distance_km: Optional[float] = None
) -> bool:
    """Minimum compatibility and maximum distance (only when a distance is known)."""
    if (
        criteria.min_compatibility_score is not None
        and score.overall < criteria.min_compatibility_score
    ):
        return False
    if (
        criteria.max_distance is not None
        and distance_km is not None
        and distance_km > criteria.max_distance
    ):
        return False
    return True
