"""
Matching Engine

Main orchestrator that combines all matching components into a single pipeline.
This is the primary entry point for finding study partners.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from ..config import (
    MATCH_CACHE_CAPACITY,
    MATCH_CACHE_TTL_SECONDS,
    SCORE_CACHE_CAPACITY,
    DEFAULT_MATCH_LIMIT,
)
from .aggregator import CompatibilityScorer
from .cache import EvictionCache
from .candidate_filter import filter_candidates, passes_score_thresholds
from .contracts import (
    Participant,
    MatchingCriteria,
    MatchResult,
    CompatibilityScore,
    ScoredCandidate,
)
from .output_assembler import assemble_matches
from .ranker import rank_candidates, apply_diversity

logger = logging.getLogger(__name__)


class MatchingEngine:
    """
    Matching engine that orchestrates the partner-matching pipeline.

    Pipeline flow:
    1. Cache lookup - Reuse results for the same requester and criteria
    2. Pre-filter - Drop ineligible candidates
    3. Scoring - Seven compatibility components per candidate
    4. Thresholds - Minimum score / maximum distance
    5. Ranking - Tolerance-based ordering
    6. Diversification - Cap institution / level repeats
    7. Output Assembly - Build MatchResults and cache them
    """

    def __init__(
        self,
        scorer: Optional[CompatibilityScorer] = None,
        cache: Optional[EvictionCache] = None
    ):
        """
        Initialize the matching engine.

        Args:
            scorer: Pairwise scorer. Defaults to one with a score cache.
            cache: Match-result cache. Defaults to one sized from config.
        """
        if scorer is None:
            scorer = CompatibilityScorer(
                cache=EvictionCache(SCORE_CACHE_CAPACITY, MATCH_CACHE_TTL_SECONDS)
            )
        if cache is None:
            cache = EvictionCache(MATCH_CACHE_CAPACITY, MATCH_CACHE_TTL_SECONDS)

        self.scorer = scorer
        self.cache = cache
        self.version = "1.0.0"

    @staticmethod
    def cache_key(requester: Participant, criteria: MatchingCriteria) -> str:
        return f"{requester.id}-{criteria.model_dump_json()}"

    def find_matches(
        self,
        requester: Participant,
        candidate_pool: Iterable[Participant],
        criteria: Optional[MatchingCriteria] = None,
        limit: int = DEFAULT_MATCH_LIMIT
    ) -> List[MatchResult]:
        """
        Find the best study partners for a requester.

        Args:
            requester: Participant asking for partners
            candidate_pool: Candidates to consider
            criteria: Request criteria (defaults to no constraints)
            limit: Maximum number of matches to return

        Returns:
            Ranked, diversified MatchResults (possibly empty)
        """
        if requester is None:
            raise ValueError("requester is required")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        criteria = criteria or MatchingCriteria()
        start_time = time.perf_counter()

        # Step 1: Cache lookup
        key = self.cache_key(requester, criteria)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"⚡ Match cache hit for participant {requester.id}")
            return list(cached[:limit])

        # Step 2: Pre-filter
        pool = list(candidate_pool)
        candidates = filter_candidates(requester, pool, criteria)
        if not candidates:
            logger.info(f"No eligible candidates for participant {requester.id} (pool size {len(pool)})")
            return []

        # Step 3 & 4: Score and apply thresholds
        scored: List[ScoredCandidate] = []
        for candidate in candidates:
            score = self.scorer.score(requester, candidate)
            distance = self.scorer.distance(requester, candidate)
            if not passes_score_thresholds(score, criteria, distance):
                logger.debug(f"Candidate {candidate.id} below thresholds (overall={score.overall:.3f})")
                continue
            scored.append(ScoredCandidate(participant=candidate, score=score, distance_km=distance))

        # Step 5 & 6: Rank and diversify
        ranked = rank_candidates(scored)
        diversified = apply_diversity(ranked)

        # Step 7: Assemble output
        results = assemble_matches(requester, diversified)
        self.cache.set(key, tuple(results))

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"✅ Matched participant {requester.id}: {len(results)} of {len(pool)} candidates "
            f"in {processing_time:.2f}ms"
        )

        return results[:limit]

    def find_matches_from_dict(
        self,
        requester_data: Dict[str, Any],
        candidate_data: List[Dict[str, Any]],
        criteria_data: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> List[MatchResult]:
        """
        Find matches from plain dictionaries.

        Convenience method for callers holding raw records. Malformed
        records raise pydantic's ValidationError.
        """
        requester = Participant.model_validate(requester_data)
        pool = [Participant.model_validate(c) for c in candidate_data]
        criteria = MatchingCriteria.model_validate(criteria_data) if criteria_data else None
        return self.find_matches(requester, pool, criteria, **kwargs)

    def score_pair(self, a: Participant, b: Participant) -> CompatibilityScore:
        """Score a single pair without filtering or caching the result list."""
        return self.scorer.score(a, b)

    def clear_cache(self) -> None:
        self.cache.clear()


# Convenience function for simple usage
def find_matches(
    requester: Participant,
    candidate_pool: Iterable[Participant],
    criteria: Optional[MatchingCriteria] = None,
    limit: int = DEFAULT_MATCH_LIMIT
) -> List[MatchResult]:
    """
    Find matches with a fresh engine (no cache shared between calls).
    """
    engine = MatchingEngine()
    return engine.find_matches(requester, candidate_pool, criteria, limit)
