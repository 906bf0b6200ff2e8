"""
Score Aggregator

Combines the individual component scores into an overall compatibility score.
Applies weighting and normalization.
"""

from typing import Dict, List, Optional, Tuple

from .cache import EvictionCache
from .contracts import Participant, CompatibilityScore
from .dimension_scorers import (
    DistanceProvider,
    ReputationProvider,
    default_reputation,
    score_subject_match,
    score_level_compatibility,
    score_style_compatibility,
    score_time_overlap,
    score_location_compatibility,
    score_activity_compatibility,
    score_reputation,
)
from .constants import COMPATIBILITY_WEIGHTS


def aggregate_scores(
    a: Participant,
    b: Participant,
    distance_km: Optional[float] = None,
    reputation_provider: ReputationProvider = default_reputation
) -> CompatibilityScore:
    """
    Compute all component scores and aggregate into an overall score.

    Args:
        a: Participant the score is computed for
        b: Candidate partner
        distance_km: Known distance between the two, if any
        reputation_provider: Source of the candidate's reputation

    Returns:
        CompatibilityScore with all components and the weighted overall
    """
    components: Dict[str, float] = {
        "subject_match": score_subject_match(a, b),
        "level_compatibility": score_level_compatibility(a, b),
        "style_compatibility": score_style_compatibility(a, b),
        "time_overlap": score_time_overlap(a, b),
        "location_compatibility": score_location_compatibility(a, b, distance_km),
        "activity_compatibility": score_activity_compatibility(a, b),
        "reputation_score": score_reputation(b, reputation_provider),
    }

    overall = sum(
        COMPATIBILITY_WEIGHTS[name] * value
        for name, value in components.items()
    )

    # Normalize to ensure 0-1 range
    overall = max(0.0, min(1.0, overall))

    return CompatibilityScore(overall=overall, **components)


class CompatibilityScorer:
    """
    Pairwise compatibility scorer with injected collaborators.

    The geocoding and review collaborators are optional; without them
    location falls back to tag comparison and reputation to the value on
    the participant record.
    """

    def __init__(
        self,
        distance_provider: Optional[DistanceProvider] = None,
        reputation_provider: Optional[ReputationProvider] = None,
        cache: Optional[EvictionCache] = None
    ):
        self.distance_provider = distance_provider
        self.reputation_provider = reputation_provider or default_reputation
        self.cache = cache

    def distance(self, a: Participant, b: Participant) -> Optional[float]:
        if self.distance_provider is None:
            return None
        return self.distance_provider(a, b)

    def score(self, a: Participant, b: Participant) -> CompatibilityScore:
        """Score `b` as a partner for `a`. Results are cached per participant pair."""
        key = (a, b)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        result = aggregate_scores(
            a, b,
            distance_km=self.distance(a, b),
            reputation_provider=self.reputation_provider,
        )

        if self.cache is not None:
            self.cache.set(key, result)
        return result

    def score_many(
        self,
        a: Participant,
        candidates: List[Participant]
    ) -> List[Tuple[Participant, CompatibilityScore]]:
        """Score multiple candidates in batch."""
        return [(candidate, self.score(a, candidate)) for candidate in candidates]
