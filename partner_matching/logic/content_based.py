"""
Content-Based Recommendations

Recommends partners whose own profile looks like the target's: subjects
weighted by proficiency plus categorical profile features, compared with
cosine similarity.
"""

from typing import Dict, List, Sequence

import numpy as np

from .contracts import Participant, Recommendation
from .constants import (
    PROFICIENCY_RATING_MAP,
    DEFAULT_MATCH_LIMIT,
    RecommendationMethod,
)


def build_feature_vector(participant: Participant) -> Dict[str, float]:
    """Sparse feature map for one participant."""
    features: Dict[str, float] = {}

    for subject in participant.subjects:
        features[f"subject_{subject.subject_id}"] = float(
            PROFICIENCY_RATING_MAP.get(subject.proficiency_level, 1)
        )

    features[f"level_{participant.level}"] = 1.0
    if participant.learning_style:
        features[f"style_{participant.learning_style}"] = 1.0
    if participant.institution:
        features[f"university_{participant.institution}"] = 1.0
    if participant.major:
        features[f"major_{participant.major}"] = 1.0
    if participant.graduation_year:
        features[f"year_{participant.graduation_year}"] = 1.0

    return features


def cosine_similarity(first: Dict[str, float], second: Dict[str, float]) -> float:
    keys = sorted(set(first) | set(second))
    if not keys:
        return 0.0

    u = np.array([first.get(k, 0.0) for k in keys])
    v = np.array([second.get(k, 0.0) for k in keys])
    denominator = np.linalg.norm(u) * np.linalg.norm(v)
    if denominator == 0:
        return 0.0
    return float(np.dot(u, v) / denominator)


def describe_match(target: Participant, candidate: Participant) -> str:
    reasons = []

    shared = target.subject_ids & candidate.subject_ids
    if shared:
        reasons.append(f"{len(shared)} shared subjects")
    if target.level == candidate.level:
        reasons.append("Same study level")
    if target.learning_style and target.learning_style == candidate.learning_style:
        reasons.append("Same learning style")
    if target.institution and target.institution == candidate.institution:
        reasons.append("Same university")

    if reasons:
        return f"High compatibility: {', '.join(reasons)}"
    return "Good overall match"


class ContentBasedEngine:
    """Profile-similarity recommendations."""

    def recommend_partners(
        self,
        target: Participant,
        participants: Sequence[Participant],
        limit: int = DEFAULT_MATCH_LIMIT
    ) -> List[Recommendation]:
        """
        Args:
            target: Participant to recommend for
            participants: Everyone known to the system
            limit: Maximum recommendations

        Returns:
            Recommendations sorted by cosine similarity
        """
        if target is None:
            raise ValueError("target participant is required")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        target_features = build_feature_vector(target)
        recommendations = []

        for candidate in participants:
            if candidate.id == target.id or candidate.id in target.partner_ids:
                continue
            score = cosine_similarity(target_features, build_feature_vector(candidate))
            recommendations.append(Recommendation(
                participant=candidate,
                score=score,
                method=RecommendationMethod.CONTENT,
                reason=describe_match(target, candidate),
            ))

        recommendations.sort(key=lambda r: r.score, reverse=True)
        return recommendations[:limit]
