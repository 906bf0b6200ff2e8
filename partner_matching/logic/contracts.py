"""
Data Contracts for the Matching Engine

Defines Pydantic models for Participant / MatchingCriteria (input) and
MatchResult / ScheduleSlot / Recommendation (output).
These contracts are the API boundary for the matching engine.
"""

from datetime import date, datetime
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    AcademicLevel,
    LearningStyle,
    RecommendationMethod,
    DEFAULT_LEVEL,
    DEFAULT_TIMEZONE,
)


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class SubjectProficiency(BaseModel):
    """A subject a participant studies, with their proficiency in it."""
    subject_id: str
    proficiency_level: AcademicLevel = AcademicLevel.BEGINNER.value

    class Config:
        frozen = True
        use_enum_values = True


class AvailabilitySlot(BaseModel):
    """
    One availability window as supplied by the data layer.

    `day` is a weekday name ("Monday", "mon") or an ISO date. `start_time` and
    `end_time` are "HH:MM" clock times, or full ISO datetimes when `day` is
    omitted. Values are validated lazily when the slot is turned into an
    interval; a slot that cannot be resolved contributes no availability.
    """
    day: Optional[str] = None
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    timezone: str = DEFAULT_TIMEZONE

    class Config:
        frozen = True
        populate_by_name = True


def _availability_before(value):
    from .availability import parse_availability_payload
    return parse_availability_payload(value)


class UserPreferences(BaseModel):
    """Session preferences carried on matching criteria."""
    session_type: str = "virtual"                # virtual/in_person/hybrid
    group_size: str = "one_on_one"               # one_on_one/small_group/large_group
    communication_style: str = "mixed"           # formal/casual/mixed
    study_intensity: str = "moderate"            # relaxed/moderate/intensive

    class Config:
        frozen = True


class Participant(BaseModel):
    """
    Input record for one study participant.
    Immutable for the duration of a matching call.
    """
    # Identity
    id: str

    # Academic profile
    academic_level: Optional[AcademicLevel] = None
    learning_style: Optional[LearningStyle] = None
    institution: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    subjects: Tuple[SubjectProficiency, ...] = ()

    # Location
    timezone: Optional[str] = None
    region: Optional[str] = None

    # Scheduling
    availability: Tuple[AvailabilitySlot, ...] = ()

    # Activity & social graph
    recent_activity: int = Field(default=0, ge=0)  # completed sessions
    partner_ids: FrozenSet[str] = frozenset()
    is_active: bool = True
    profile_complete: bool = True

    # Supplied by the review aggregator
    reputation_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    review_count: int = 0
    average_rating: float = 0.0

    class Config:
        frozen = True
        use_enum_values = True

    @field_validator("availability", mode="before")
    @classmethod
    def parse_availability(cls, value):
        return _availability_before(value)

    @property
    def level(self) -> str:
        """Academic level, treating an unset level as the lowest."""
        return self.academic_level or DEFAULT_LEVEL

    @property
    def subject_ids(self) -> FrozenSet[str]:
        return frozenset(s.subject_id for s in self.subjects)

    def proficiency_for(self, subject_id: str) -> Optional[str]:
        for subject in self.subjects:
            if subject.subject_id == subject_id:
                return subject.proficiency_level
        return None

    @property
    def timezone_tag(self) -> Optional[str]:
        """Explicit timezone, else the timezone the availability was given in."""
        if self.timezone:
            return self.timezone
        if self.availability:
            return self.availability[0].timezone
        return None


class MatchingCriteria(BaseModel):
    """
    Per-request matching criteria. Never mutated by the engine.
    """
    subjects: Tuple[str, ...] = ()
    academic_level: Optional[AcademicLevel] = None
    learning_style: Optional[LearningStyle] = None
    availability: Tuple[AvailabilitySlot, ...] = ()
    location: Optional[str] = None
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    max_distance: Optional[float] = Field(default=None, ge=0.0)
    min_compatibility_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    # Hard filters
    exact_level_match: bool = False
    exact_style_match: bool = False

    class Config:
        frozen = True
        use_enum_values = True

    @field_validator("availability", mode="before")
    @classmethod
    def parse_availability(cls, value):
        return _availability_before(value)


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class CompatibilityScore(BaseModel):
    """Seven independent components in [0, 1] plus their weighted sum."""
    overall: float = Field(ge=0.0, le=1.0)
    subject_match: float = Field(ge=0.0, le=1.0)
    level_compatibility: float = Field(ge=0.0, le=1.0)
    style_compatibility: float = Field(ge=0.0, le=1.0)
    time_overlap: float = Field(ge=0.0, le=1.0)
    location_compatibility: float = Field(ge=0.0, le=1.0)
    activity_compatibility: float = Field(ge=0.0, le=1.0)
    reputation_score: float = Field(ge=0.0, le=1.0)

    class Config:
        frozen = True


class ScoredCandidate(BaseModel):
    """Internal: a candidate with its score, between scoring and assembly."""
    participant: Participant
    score: CompatibilityScore
    distance_km: Optional[float] = None

    class Config:
        frozen = True

    @property
    def institution(self) -> Optional[str]:
        return self.participant.institution

    @property
    def level(self) -> str:
        return self.participant.level


class MatchStats(BaseModel):
    """Summary statistics shown alongside a match."""
    total_partnerships: int = 0
    review_count: int = 0
    recent_activity: int = 0
    average_rating: float = 0.0

    class Config:
        frozen = True


class MatchResult(BaseModel):
    """
    Single partner match with full scoring details.
    """
    participant: Participant
    compatibility_score: CompatibilityScore

    # Explainability
    reasons: Tuple[str, ...] = ()
    shared_subjects: Tuple[str, ...] = ()
    complementary_skills: Tuple[str, ...] = ()

    stats: MatchStats = Field(default_factory=MatchStats)

    class Config:
        frozen = True

    @property
    def participant_id(self) -> str:
        return self.participant.id


class TimeInterval(BaseModel):
    """Resolved availability interval owned by one participant (UTC)."""
    start: datetime
    end: datetime
    participant_id: str

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_order(self):
        if not self.start < self.end:
            raise ValueError("interval start must be before its end")
        return self

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


class ScheduleSlot(BaseModel):
    """Candidate session window and the participants free during it."""
    start: datetime
    end: datetime
    participant_ids: Tuple[str, ...]

    class Config:
        frozen = True

    @property
    def participant_count(self) -> int:
        return len(self.participant_ids)

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


class Recommendation(BaseModel):
    """Partner recommendation produced by one of the recommendation engines."""
    participant: Participant
    score: float = Field(ge=0.0)
    method: RecommendationMethod
    reason: str = ""

    class Config:
        frozen = True
        use_enum_values = True

    @property
    def candidate_id(self) -> str:
        return self.participant.id


class StudyRecord(BaseModel):
    """Hours studied on one day."""
    day: date
    hours: float = Field(ge=0.0)

    class Config:
        frozen = True


class ProgressPrediction(BaseModel):
    """Projected completion of a study-hours goal."""
    estimated_completion: Optional[date] = None
    confidence: float = Field(ge=0.0, le=1.0)
    current_rate: float = 0.0          # hours per day
    required_rate: Optional[float] = None
    hours_completed: float = 0.0
    hours_remaining: float = 0.0


class CacheStats(BaseModel):
    """Snapshot of cache usage."""
    size: int
    capacity: int
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    hit_rate: float = 0.0
    average_access_count: float = 0.0
