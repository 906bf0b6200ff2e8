"""
Dimension Scorers

Individual scoring functions for each compatibility component.
Each scorer produces a normalized score between 0.0 and 1.0.
All logic is deterministic - no AI/ML components.
"""

from typing import Callable, List, Optional, Sequence

from .availability import participant_intervals
from .contracts import Participant, TimeInterval
from .constants import (
    LEVEL_ORDINAL_MAP,
    LEVEL_DIFFERENCE_SCORE_MAP,
    LEVEL_FAR_APART_SCORE,
    COMPLEMENTARY_STYLE_PAIRS,
    SAME_STYLE_SCORE,
    COMPLEMENTARY_STYLE_SCORE,
    DIFFERENT_STYLE_SCORE,
    LOCATION_DISTANCE_BANDS,
    LOCATION_FAR_SCORE,
    SAME_LOCATION_SCORE,
    DEFAULT_REPUTATION_SCORE,
    DEFAULT_SCORE,
)

# (a, b) -> distance in km, or None when unknown
DistanceProvider = Callable[[Participant, Participant], Optional[float]]
# participant -> reputation in [0, 1]
ReputationProvider = Callable[[Participant], float]


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def score_subject_match(a: Participant, b: Participant) -> float:
    """
    Jaccard index over the two subject-id sets.

    Returns 0.0 when neither participant lists a subject.
    """
    subjects_a = a.subject_ids
    subjects_b = b.subject_ids
    union = subjects_a | subjects_b
    if not union:
        return 0.0
    return len(subjects_a & subjects_b) / len(union)


def score_level_compatibility(a: Participant, b: Participant) -> float:
    """Ordinal level distance banded into 1.0 / 0.8 / 0.5 / 0.2."""
    difference = abs(
        LEVEL_ORDINAL_MAP.get(a.level, 0) - LEVEL_ORDINAL_MAP.get(b.level, 0)
    )
    return LEVEL_DIFFERENCE_SCORE_MAP.get(difference, LEVEL_FAR_APART_SCORE)


def score_style_compatibility(a: Participant, b: Participant) -> float:
    if not a.learning_style or not b.learning_style:
        return DEFAULT_SCORE
    if a.learning_style == b.learning_style:
        return SAME_STYLE_SCORE
    if frozenset({a.learning_style, b.learning_style}) in COMPLEMENTARY_STYLE_PAIRS:
        return COMPLEMENTARY_STYLE_SCORE
    return DIFFERENT_STYLE_SCORE


def overlap_minutes(
    first: Sequence[TimeInterval],
    second: Sequence[TimeInterval]
) -> float:
    """
    Total overlapping minutes between two start-sorted interval lists.

    Two-pointer sweep: after comparing the current pair, the interval that
    ends first is advanced (the second list's on ties).
    """
    i = j = 0
    total = 0.0

    while i < len(first) and j < len(second):
        x, y = first[i], second[j]
        start = max(x.start, y.start)
        end = min(x.end, y.end)
        if end > start:
            total += (end - start).total_seconds() / 60.0

        if x.end < y.end:
            i += 1
        else:
            j += 1

    return total


def time_overlap_ratio(
    first: List[TimeInterval],
    second: List[TimeInterval]
) -> float:
    """
    Overlap relative to the smaller total availability.

    A participant whose entire availability sits inside the other's scores 1.0.
    """
    total_first = sum(i.duration_minutes for i in first)
    total_second = sum(i.duration_minutes for i in second)
    if total_first <= 0 or total_second <= 0:
        return 0.0

    overlap = overlap_minutes(first, second)
    return _clamp(overlap / min(total_first, total_second))


def score_time_overlap(a: Participant, b: Participant) -> float:
    return time_overlap_ratio(participant_intervals(a), participant_intervals(b))


def score_location_compatibility(
    a: Participant,
    b: Participant,
    distance_km: Optional[float] = None
) -> float:
    """
    Score geographic closeness.

    Args:
        a: First participant
        b: Second participant
        distance_km: Distance from the geocoding collaborator, if known

    Returns:
        1.0 for identical timezone or region tags, a distance band score when
        a distance is known, otherwise neutral 0.5.
    """
    tz_a, tz_b = a.timezone_tag, b.timezone_tag
    if not (tz_a or a.region) or not (tz_b or b.region):
        return DEFAULT_SCORE

    if (tz_a and tz_a == tz_b) or (a.region and a.region == b.region):
        return SAME_LOCATION_SCORE

    if distance_km is None:
        return DEFAULT_SCORE

    for upper_bound, band_score in LOCATION_DISTANCE_BANDS:
        if distance_km < upper_bound:
            return band_score
    return LOCATION_FAR_SCORE


def score_activity_compatibility(a: Participant, b: Participant) -> float:
    """Closeness of recent activity levels; two inactive participants are neutral."""
    activity_a, activity_b = a.recent_activity, b.recent_activity
    highest = max(activity_a, activity_b)
    if highest == 0:
        return DEFAULT_SCORE
    return max(0.0, 1.0 - abs(activity_a - activity_b) / highest)


def default_reputation(participant: Participant) -> float:
    if participant.reputation_score is None:
        return DEFAULT_REPUTATION_SCORE
    return participant.reputation_score


def score_reputation(
    b: Participant,
    provider: ReputationProvider = default_reputation
) -> float:
    return _clamp(float(provider(b)))
