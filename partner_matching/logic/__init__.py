"""
Partner Matching Logic Module

Provides the deterministic matching engine, session scheduler,
recommendation engines and progress predictor.
"""

from .contracts import (
    Participant,
    SubjectProficiency,
    AvailabilitySlot,
    UserPreferences,
    MatchingCriteria,
    CompatibilityScore,
    MatchResult,
    MatchStats,
    TimeInterval,
    ScheduleSlot,
    Recommendation,
    StudyRecord,
    ProgressPrediction,
    CacheStats,
)
from .cache import EvictionCache, memoize
from .aggregator import CompatibilityScorer
from .engine import MatchingEngine, find_matches
from .scheduler import StudySessionScheduler
from .collaborative import CollaborativeFilteringEngine
from .content_based import ContentBasedEngine
from .hybrid import HybridRecommendationEngine
from .progress import ProgressPredictor
from .structures import PriorityQueue, ParticipantGraph, build_partner_graph
from .constants import AcademicLevel, LearningStyle, RecommendationMethod

__all__ = [
    # Main engines
    "MatchingEngine",
    "find_matches",
    "CompatibilityScorer",
    "StudySessionScheduler",
    "CollaborativeFilteringEngine",
    "ContentBasedEngine",
    "HybridRecommendationEngine",
    "ProgressPredictor",

    # Infrastructure
    "EvictionCache",
    "memoize",
    "PriorityQueue",
    "ParticipantGraph",
    "build_partner_graph",

    # Contracts
    "Participant",
    "SubjectProficiency",
    "AvailabilitySlot",
    "UserPreferences",
    "MatchingCriteria",
    "CompatibilityScore",
    "MatchResult",
    "MatchStats",
    "TimeInterval",
    "ScheduleSlot",
    "Recommendation",
    "StudyRecord",
    "ProgressPrediction",
    "CacheStats",

    # Enums
    "AcademicLevel",
    "LearningStyle",
    "RecommendationMethod",
]
