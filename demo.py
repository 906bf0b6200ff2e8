"""
Demo of the matching engine, scheduler, recommenders and progress predictor
on a small in-memory community.

Run from the project root:
    python demo.py
"""

import json
import logging
from datetime import date, timedelta

from partner_matching.config import configure_logging
from partner_matching.logic import (
    MatchingEngine,
    MatchingCriteria,
    Participant,
    StudySessionScheduler,
    HybridRecommendationEngine,
    ProgressPredictor,
    StudyRecord,
)

logger = logging.getLogger("demo")


def _participant(participant_id, subjects, **fields):
    return Participant(
        id=participant_id,
        subjects=[{"subject_id": s, "proficiency_level": level} for s, level in subjects],
        **fields,
    )


def build_community():
    alice = _participant(
        "alice",
        [("calculus", "INTERMEDIATE"), ("algorithms", "ADVANCED"), ("physics", "BEGINNER")],
        academic_level="INTERMEDIATE",
        learning_style="visual",
        institution="Stanford University",
        major="Computer Science",
        timezone="America/Los_Angeles",
        availability=json.dumps([
            {"day": "Monday", "startTime": "09:00", "endTime": "12:00", "timezone": "America/Los_Angeles"},
            {"day": "Wednesday", "startTime": "14:00", "endTime": "17:00", "timezone": "America/Los_Angeles"},
        ]),
        recent_activity=6,
        partner_ids={"dana"},
    )
    bob = _participant(
        "bob",
        [("calculus", "INTERMEDIATE"), ("algorithms", "ADVANCED"), ("physics", "BEGINNER")],
        academic_level="INTERMEDIATE",
        learning_style="kinesthetic",
        institution="UC Berkeley",
        major="Computer Science",
        timezone="America/Los_Angeles",
        availability=[
            {"day": "Monday", "start_time": "10:00", "end_time": "11:30", "timezone": "America/Los_Angeles"},
        ],
        recent_activity=5,
        partner_ids={"erin"},
        reputation_score=0.9,
        review_count=4,
        average_rating=4.6,
    )
    carol = _participant(
        "carol",
        [("calculus", "EXPERT"), ("statistics", "ADVANCED")],
        academic_level="ADVANCED",
        learning_style="reading",
        institution="MIT",
        timezone="America/New_York",
        availability=[
            {"day": "Wednesday", "start_time": "17:00", "end_time": "19:00", "timezone": "America/New_York"},
        ],
        recent_activity=12,
    )
    dana = _participant("dana", [("physics", "ADVANCED")], institution="Stanford University")
    erin = _participant(
        "erin",
        [("algorithms", "INTERMEDIATE"), ("calculus", "BEGINNER")],
        academic_level="BEGINNER",
        learning_style="visual",
        institution="Stanford University",
        timezone="America/Los_Angeles",
        availability=[
            {"day": "Monday", "start_time": "09:30", "end_time": "10:30", "timezone": "America/Los_Angeles"},
        ],
        recent_activity=3,
    )
    return alice, [alice, bob, carol, dana, erin]


def demo_matching(requester, community):
    print("\n" + "=" * 60)
    print("PARTNER MATCHING")
    print("=" * 60)

    engine = MatchingEngine()
    criteria = MatchingCriteria(subjects=("calculus", "algorithms"))
    matches = engine.find_matches(requester, community, criteria, limit=5)

    for rank, match in enumerate(matches, 1):
        score = match.compatibility_score
        print(f"  #{rank}: {match.participant_id} - overall {score.overall:.3f}")
        print(f"      Reasons: {', '.join(match.reasons)}")
        if match.complementary_skills:
            print(f"      Complementary: {', '.join(match.complementary_skills)}")

    engine.find_matches(requester, community, criteria, limit=5)
    stats = engine.cache.stats()
    print(f"\n  Cache: {stats.size} entries, hit rate {stats.hit_rate:.0%}")


def demo_scheduling(community):
    print("\n" + "=" * 60)
    print("SESSION SCHEDULING")
    print("=" * 60)

    scheduler = StudySessionScheduler()
    slots = scheduler.find_slots(
        community, required_duration_minutes=60, min_participants=2, timezone="America/Los_Angeles"
    )
    if not slots:
        print("  No shared windows found")
    for slot in slots:
        print(f"  {slot.start:%a %H:%M}-{slot.end:%H:%M}: {', '.join(slot.participant_ids)}")


def demo_recommendations(requester, community):
    print("\n" + "=" * 60)
    print("HYBRID RECOMMENDATIONS")
    print("=" * 60)

    for rec in HybridRecommendationEngine().recommend_partners(requester, community, limit=3):
        print(f"  {rec.candidate_id} [{rec.method}] {rec.score:.3f} - {rec.reason}")


def demo_progress():
    print("\n" + "=" * 60)
    print("PROGRESS PREDICTION")
    print("=" * 60)

    start = date.today() - timedelta(days=4)
    records = [
        StudyRecord(day=start + timedelta(days=i), hours=h)
        for i, h in enumerate([2, 3, 1.5, 4, 2.5])
    ]
    prediction = ProgressPredictor().predict_progress(
        records, target_hours=100, deadline=date.today() + timedelta(days=60)
    )
    print(f"  Completed: {prediction.hours_completed:.1f}h, remaining {prediction.hours_remaining:.1f}h")
    print(f"  Rate: {prediction.current_rate:.2f}h/day (needed {prediction.required_rate:.2f}h/day)")
    print(f"  Estimated completion: {prediction.estimated_completion} "
          f"(confidence {prediction.confidence:.0%})")


if __name__ == "__main__":
    configure_logging()
    logger.info("Running partner matching demo")

    requester, community = build_community()
    demo_matching(requester, community)
    demo_scheduling(community)
    demo_recommendations(requester, community)
    demo_progress()
