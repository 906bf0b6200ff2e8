"""
Collaborative Filtering

User-based collaborative filtering: participants who rate shared subjects
the way the target does are "neighbours", and the neighbours' partners are
recommended to the target.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from .contracts import Participant, Recommendation
from .constants import (
    PROFICIENCY_RATING_MAP,
    MIN_SHARED_SUBJECTS_FOR_CORRELATION,
    NEIGHBOR_SIMILARITY_THRESHOLD,
    MAX_NEIGHBORS,
    DEFAULT_MATCH_LIMIT,
    RecommendationMethod,
)
from .structures import PriorityQueue, ParticipantGraph, build_partner_graph

logger = logging.getLogger(__name__)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson coefficient; 0.0 for mismatched, empty or constant inputs."""
    if len(x) != len(y) or len(x) == 0:
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()

    denominator = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denominator == 0:
        return 0.0
    return float(np.sum(dx * dy) / denominator)


def rating_similarity(a: Participant, b: Participant) -> float:
    """
    Correlation of proficiency ratings over the subjects both participants study.

    Fewer than two shared subjects gives 0.0.
    """
    shared = sorted(a.subject_ids & b.subject_ids)
    if len(shared) < MIN_SHARED_SUBJECTS_FOR_CORRELATION:
        return 0.0

    ratings_a = [PROFICIENCY_RATING_MAP.get(a.proficiency_for(s), 1) for s in shared]
    ratings_b = [PROFICIENCY_RATING_MAP.get(b.proficiency_for(s), 1) for s in shared]
    return pearson_correlation(ratings_a, ratings_b)


class CollaborativeFilteringEngine:
    """User-based collaborative filtering over the partnership graph."""

    def __init__(
        self,
        similarity_threshold: float = NEIGHBOR_SIMILARITY_THRESHOLD,
        max_neighbors: int = MAX_NEIGHBORS
    ):
        self.similarity_threshold = similarity_threshold
        self.max_neighbors = max_neighbors

    def recommend_partners(
        self,
        target: Participant,
        participants: Sequence[Participant],
        limit: int = DEFAULT_MATCH_LIMIT,
        graph: Optional[ParticipantGraph] = None
    ) -> List[Recommendation]:
        """
        Recommend partners that similar participants already study with.

        Args:
            target: Participant to recommend for
            participants: Everyone known to the system
            limit: Maximum recommendations
            graph: Partnership graph (built from `participants` when omitted)

        Returns:
            Recommendations sorted by accumulated similarity
        """
        if target is None:
            raise ValueError("target participant is required")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        if graph is None:
            graph = build_partner_graph(participants)

        neighbors = self._find_neighbors(target, participants)
        if not neighbors:
            logger.debug(f"No similar participants found for {target.id}")
            return []

        by_id = {p.id: p for p in participants}
        excluded = set(target.partner_ids) | set(graph.neighbors(target.id)) | {target.id}

        scores: Dict[str, float] = {}
        supporters: Dict[str, int] = {}
        best: Dict[str, float] = {}

        for neighbor, similarity in neighbors:
            for partner_id in graph.neighbors(neighbor.id):
                if partner_id in excluded or partner_id not in by_id:
                    continue
                scores[partner_id] = scores.get(partner_id, 0.0) + similarity
                supporters[partner_id] = supporters.get(partner_id, 0) + 1
                best[partner_id] = max(best.get(partner_id, 0.0), similarity)

        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)

        return [
            Recommendation(
                participant=by_id[partner_id],
                score=score,
                method=RecommendationMethod.COLLABORATIVE,
                reason=(
                    f"Recommended by {supporters[partner_id]} participants similar to you "
                    f"(top similarity: {best[partner_id]:.2f})"
                ),
            )
            for partner_id, score in ranked[:limit]
        ]

    def _find_neighbors(
        self,
        target: Participant,
        participants: Sequence[Participant]
    ) -> List[tuple]:
        """Top participants by rating similarity above the threshold."""
        queue: PriorityQueue = PriorityQueue()
        for other in participants:
            if other.id == target.id:
                continue
            similarity = rating_similarity(target, other)
            if similarity > self.similarity_threshold:
                queue.push((other, similarity), similarity)

        neighbors = []
        while queue and len(neighbors) < self.max_neighbors:
            neighbors.append(queue.pop())
        return neighbors
