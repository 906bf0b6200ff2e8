"""
Hybrid Recommendations

Blends collaborative and content-based recommendations with fixed weights.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .collaborative import CollaborativeFilteringEngine
from .content_based import ContentBasedEngine
from .contracts import Participant, Recommendation
from .constants import HYBRID_WEIGHTS, DEFAULT_MATCH_LIMIT, RecommendationMethod

logger = logging.getLogger(__name__)


class HybridRecommendationEngine:
    """
    Weighted blend: 0.6 x collaborative score + 0.4 x content score.

    A candidate found by only one engine keeps that engine's method and
    only its weighted share of the score.
    """

    def __init__(
        self,
        collaborative: Optional[CollaborativeFilteringEngine] = None,
        content: Optional[ContentBasedEngine] = None,
        weights: Optional[Dict[str, float]] = None
    ):
        self.collaborative = collaborative or CollaborativeFilteringEngine()
        self.content = content or ContentBasedEngine()
        self.weights = weights or HYBRID_WEIGHTS

    def recommend_partners(
        self,
        target: Participant,
        participants: Sequence[Participant],
        limit: int = DEFAULT_MATCH_LIMIT
    ) -> List[Recommendation]:
        if target is None:
            raise ValueError("target participant is required")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        collaborative_recs = self.collaborative.recommend_partners(target, participants, limit * 2)
        content_recs = self.content.recommend_partners(target, participants, limit * 2)

        combined = self._combine(collaborative_recs, content_recs)
        logger.debug(
            f"Hybrid blend for {target.id}: {len(collaborative_recs)} collaborative, "
            f"{len(content_recs)} content, {len(combined)} combined"
        )
        return combined[:limit]

    def _combine(
        self,
        collaborative_recs: List[Recommendation],
        content_recs: List[Recommendation]
    ) -> List[Recommendation]:
        combined: Dict[str, dict] = {}
        collaborative_weight = self.weights[RecommendationMethod.COLLABORATIVE.value]
        content_weight = self.weights[RecommendationMethod.CONTENT.value]

        for rec in collaborative_recs:
            combined[rec.candidate_id] = {
                "participant": rec.participant,
                "score": rec.score * collaborative_weight,
                "method": RecommendationMethod.COLLABORATIVE,
                "reason": rec.reason,
            }

        for rec in content_recs:
            existing = combined.get(rec.candidate_id)
            if existing:
                existing["score"] += rec.score * content_weight
                existing["method"] = RecommendationMethod.HYBRID
                existing["reason"] = f"{existing['reason']}; {rec.reason}"
            else:
                combined[rec.candidate_id] = {
                    "participant": rec.participant,
                    "score": rec.score * content_weight,
                    "method": RecommendationMethod.CONTENT,
                    "reason": rec.reason,
                }

        blended = [Recommendation(**fields) for fields in combined.values()]
        blended.sort(key=lambda r: r.score, reverse=True)
        return blended
