"""
Output Assembler

Transforms a scored candidate into the final MatchResult contract.
Generates human-readable reasons, shared subjects and complementary skills.
"""

from typing import List

from .contracts import (
    Participant,
    CompatibilityScore,
    MatchResult,
    MatchStats,
    ScoredCandidate,
)
from .constants import (
    LEVEL_ORDINAL_MAP,
    MAX_MATCH_REASONS,
    MAX_COMPLEMENTARY_SKILLS,
    REASON_THRESHOLDS,
)


def assemble_match(
    requester: Participant,
    candidate: Participant,
    score: CompatibilityScore
) -> MatchResult:
    """
    Convert a scored candidate into a MatchResult.

    Args:
        requester: Participant the matches are for
        candidate: The matched participant
        score: Candidate's compatibility with the requester

    Returns:
        MatchResult object
    """
    return MatchResult(
        participant=candidate,
        compatibility_score=score,
        reasons=tuple(_generate_reasons(score)),
        shared_subjects=tuple(find_shared_subjects(requester, candidate)),
        complementary_skills=tuple(find_complementary_skills(requester, candidate)),
        stats=MatchStats(
            total_partnerships=len(candidate.partner_ids),
            review_count=candidate.review_count,
            recent_activity=candidate.recent_activity,
            average_rating=candidate.average_rating,
        ),
    )


def assemble_matches(
    requester: Participant,
    ranked: List[ScoredCandidate]
) -> List[MatchResult]:
    """Build MatchResults for ranked candidates, preserving their order."""
    return [assemble_match(requester, s.participant, s.score) for s in ranked]


def find_shared_subjects(requester: Participant, candidate: Participant) -> List[str]:
    """Subjects both study, in the requester's order."""
    theirs = candidate.subject_ids
    return [s.subject_id for s in requester.subjects if s.subject_id in theirs]


def find_complementary_skills(requester: Participant, candidate: Participant) -> List[str]:
    """Shared subjects with different proficiency, plus differing learning styles."""
    skills = []

    for subject_id in find_shared_subjects(requester, candidate):
        mine = LEVEL_ORDINAL_MAP.get(requester.proficiency_for(subject_id), 0)
        theirs = LEVEL_ORDINAL_MAP.get(candidate.proficiency_for(subject_id), 0)
        if mine != theirs:
            skills.append(f"{subject_id} tutoring opportunity")

    if (
        requester.learning_style
        and candidate.learning_style
        and requester.learning_style != candidate.learning_style
    ):
        skills.append("Diverse learning approaches")

    return skills[:MAX_COMPLEMENTARY_SKILLS]


def _generate_reasons(score: CompatibilityScore) -> List[str]:
    """Explain the strongest components of a score."""
    reasons = []

    if score.subject_match > REASON_THRESHOLDS["subject_match"]:
        reasons.append(f"Strong subject overlap ({round(score.subject_match * 100)}% match)")

    if score.level_compatibility >= REASON_THRESHOLDS["level_compatibility"]:
        reasons.append("Same academic level")

    if score.time_overlap > REASON_THRESHOLDS["time_overlap"]:
        reasons.append("Excellent schedule compatibility")

    if score.style_compatibility >= REASON_THRESHOLDS["style_compatibility"]:
        reasons.append("Same learning style")

    if score.activity_compatibility > REASON_THRESHOLDS["activity_compatibility"]:
        reasons.append("Similar study patterns and habits")

    if score.location_compatibility >= REASON_THRESHOLDS["location_compatibility"]:
        reasons.append("Same time zone or region")

    if not reasons:
        reasons.append("Potential study partner")

    return reasons[:MAX_MATCH_REASONS]
