"""
Matching Engine Constants

Defines all level mappings, weights, bands, caps and enums used by the matching engine.
All values are deterministic with no AI/ML components.
"""

from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

# =============================================================================
# LEVELS & STYLES
# =============================================================================

class AcademicLevel(str, Enum):
    """Ordinal academic / proficiency level."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class LearningStyle(str, Enum):
    """Preferred learning style."""
    VISUAL = "visual"
    AUDITORY = "auditory"
    READING = "reading"
    KINESTHETIC = "kinesthetic"


class RecommendationMethod(str, Enum):
    """Which sub-engine(s) produced a recommendation score."""
    COLLABORATIVE = "collaborative"
    CONTENT = "content"
    HYBRID = "hybrid"


# Level ordinal (used for level compatibility distance)
LEVEL_ORDINAL_MAP: Dict[str, int] = {
    AcademicLevel.BEGINNER.value: 0,
    AcademicLevel.INTERMEDIATE.value: 1,
    AcademicLevel.ADVANCED.value: 2,
    AcademicLevel.EXPERT.value: 3,
}

# Proficiency as a numeric rating / feature weight
PROFICIENCY_RATING_MAP: Dict[str, int] = {
    AcademicLevel.BEGINNER.value: 1,
    AcademicLevel.INTERMEDIATE.value: 2,
    AcademicLevel.ADVANCED.value: 3,
    AcademicLevel.EXPERT.value: 4,
}

DEFAULT_LEVEL = AcademicLevel.BEGINNER.value

# =============================================================================
# BAND SCORE MAPPINGS
# =============================================================================

# Ordinal level difference -> score
LEVEL_DIFFERENCE_SCORE_MAP: Dict[int, float] = {
    0: 1.0,    # Same level
    1: 0.8,    # Adjacent levels
    2: 0.5,    # Two levels apart
}
LEVEL_FAR_APART_SCORE = 0.2

# Learning style pairs that study well together
COMPLEMENTARY_STYLE_PAIRS: List[FrozenSet[str]] = [
    frozenset({LearningStyle.VISUAL.value, LearningStyle.KINESTHETIC.value}),
    frozenset({LearningStyle.AUDITORY.value, LearningStyle.READING.value}),
    frozenset({LearningStyle.VISUAL.value, LearningStyle.AUDITORY.value}),
]
SAME_STYLE_SCORE = 1.0
COMPLEMENTARY_STYLE_SCORE = 0.8
DIFFERENT_STYLE_SCORE = 0.3

# Location distance bands (upper bound exclusive, score)
LOCATION_DISTANCE_BANDS: List[Tuple[float, float]] = [
    (10.0, 0.9),     # Same city
    (50.0, 0.7),     # Same region
    (200.0, 0.4),    # Same country
]
LOCATION_FAR_SCORE = 0.1       # Different country
SAME_LOCATION_SCORE = 1.0

# Reputation placeholder when the review aggregator has nothing for a participant
DEFAULT_REPUTATION_SCORE = 0.8

# =============================================================================
# DIMENSION WEIGHTS
# =============================================================================

# Weights for each compatibility component (must sum to 1.0)
COMPATIBILITY_WEIGHTS: Dict[str, float] = {
    "subject_match": 0.25,
    "level_compatibility": 0.20,
    "style_compatibility": 0.15,
    "time_overlap": 0.15,
    "location_compatibility": 0.10,
    "activity_compatibility": 0.10,
    "reputation_score": 0.05,
}

# =============================================================================
# RANKING CONFIGURATION
# =============================================================================

# Scores at most this far apart are treated as tied
OVERALL_TIE_TOLERANCE = 0.1
SUBJECT_TIE_TOLERANCE = 0.05
# Absorbs float error so differences of exactly the tolerance still tie
TIE_EPSILON = 1e-9

# Diversity soft caps among admitted candidates
MAX_PER_INSTITUTION = 3
MAX_PER_LEVEL = 2
UNKNOWN_GROUP = "unknown"

DEFAULT_MATCH_LIMIT = 10

# =============================================================================
# EXPLAINABILITY
# =============================================================================

MAX_MATCH_REASONS = 5
MAX_COMPLEMENTARY_SKILLS = 3

# Component thresholds above which a reason is shown
REASON_THRESHOLDS: Dict[str, float] = {
    "subject_match": 0.7,
    "time_overlap": 0.6,
    "activity_compatibility": 0.75,
    "level_compatibility": 1.0,      # inclusive
    "style_compatibility": 1.0,      # inclusive
    "location_compatibility": 1.0,   # inclusive
}

# =============================================================================
# SCHEDULING
# =============================================================================

MAX_SCHEDULE_SLOTS = 5

# Weekly availability is anchored on this Monday
REFERENCE_WEEK_START = date(2024, 1, 1)

WEEKDAY_INDEX_MAP: Dict[str, int] = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1, "tues": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3, "thurs": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

DEFAULT_TIMEZONE = "UTC"

# =============================================================================
# RECOMMENDATION BLENDING
# =============================================================================

MIN_SHARED_SUBJECTS_FOR_CORRELATION = 2
NEIGHBOR_SIMILARITY_THRESHOLD = 0.3
MAX_NEIGHBORS = 20

HYBRID_WEIGHTS: Dict[str, float] = {
    RecommendationMethod.COLLABORATIVE.value: 0.6,
    RecommendationMethod.CONTENT.value: 0.4,
}

# =============================================================================
# PROGRESS PREDICTION
# =============================================================================

MAX_PREDICTION_CONFIDENCE = 0.95
LOW_DATA_CONFIDENCE = 0.3

# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULT_SCORE = 0.5
