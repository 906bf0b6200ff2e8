"""
Test the matching pipeline end to end.
"""

import json

import pytest

from partner_matching.logic import MatchingEngine, MatchingCriteria
from partner_matching.logic.cache import EvictionCache

MONDAY_MORNING = [{"day": "Monday", "start_time": "09:00", "end_time": "12:00"}]


@pytest.fixture
def engine():
    return MatchingEngine(cache=EvictionCache(capacity=50, ttl_seconds=300))


@pytest.fixture
def requester(make_participant):
    return make_participant(
        "me", subjects=["math", "cs"], academic_level="INTERMEDIATE",
        learning_style="visual", availability=MONDAY_MORNING, partner_ids={"old-friend"},
    )


def test_excludes_requester_partners_and_ineligible(engine, requester, make_participant):
    pool = [
        requester,
        make_participant("old-friend", subjects=["math"]),
        make_participant("inactive", subjects=["math"], is_active=False),
        make_participant("incomplete", subjects=["math"], profile_complete=False),
        make_participant("good", subjects=["math", "cs"], academic_level="INTERMEDIATE"),
    ]

    matches = engine.find_matches(requester, pool)

    assert [m.participant_id for m in matches] == ["good"]


def test_best_match_first_with_explanations(engine, requester, make_participant):
    pool = [
        make_participant("weak", subjects=["art"], academic_level="EXPERT"),
        make_participant(
            "strong", subjects=[("math", "ADVANCED"), "cs"], academic_level="INTERMEDIATE",
            learning_style="kinesthetic", availability=MONDAY_MORNING, partner_ids={"x", "y"},
            review_count=3, average_rating=4.5,
        ),
    ]

    matches = engine.find_matches(requester, pool)

    best = matches[0]
    assert best.participant_id == "strong"
    assert best.shared_subjects == ("math", "cs")
    assert "math tutoring opportunity" in best.complementary_skills
    assert "Diverse learning approaches" in best.complementary_skills
    assert "Strong subject overlap (100% match)" in best.reasons
    assert best.stats.total_partnerships == 2
    assert best.stats.review_count == 3
    assert matches[1].reasons


def test_empty_pool_and_unsupported_subject(engine, requester, make_participant):
    assert engine.find_matches(requester, []) == []

    criteria = MatchingCriteria(subjects=("underwater-basket-weaving",))
    pool = [make_participant("b", subjects=["math"])]
    assert engine.find_matches(requester, pool, criteria) == []


def test_criteria_filters(engine, requester, make_participant):
    pool = [
        make_participant("same-level", subjects=["math"], academic_level="INTERMEDIATE"),
        make_participant("other-level", subjects=["math"], academic_level="EXPERT"),
        make_participant("other-subject", subjects=["history"], academic_level="INTERMEDIATE"),
    ]
    criteria = MatchingCriteria(subjects=("math",), exact_level_match=True)

    matches = engine.find_matches(requester, pool, criteria)

    assert [m.participant_id for m in matches] == ["same-level"]


def test_min_compatibility_score(engine, requester, make_participant):
    pool = [
        make_participant("close", subjects=["math", "cs"], academic_level="INTERMEDIATE",
                         availability=MONDAY_MORNING),
        make_participant("far", subjects=["art"], academic_level="EXPERT"),
    ]

    matches = engine.find_matches(requester, pool, MatchingCriteria(min_compatibility_score=0.6))

    assert [m.participant_id for m in matches] == ["close"]


def test_max_distance_uses_known_distances(requester, make_participant):
    from partner_matching.logic.aggregator import CompatibilityScorer

    distances = {"near": 5.0, "far": 500.0}
    engine = MatchingEngine(
        scorer=CompatibilityScorer(distance_provider=lambda a, b: distances.get(b.id)),
        cache=EvictionCache(capacity=10, ttl_seconds=60),
    )
    pool = [
        make_participant("near", subjects=["math"]),
        make_participant("far", subjects=["math"]),
        make_participant("unknown", subjects=["math"]),
    ]

    matches = engine.find_matches(requester, pool, MatchingCriteria(max_distance=50))

    assert sorted(m.participant_id for m in matches) == ["near", "unknown"]


def test_results_are_cached_per_requester_and_criteria(engine, requester, make_participant):
    first_pool = [make_participant("b", subjects=["math"])]
    second_pool = [make_participant("c", subjects=["math"])]

    first = engine.find_matches(requester, first_pool)
    cached = engine.find_matches(requester, second_pool)
    different_criteria = engine.find_matches(
        requester, second_pool, MatchingCriteria(subjects=("math",))
    )

    assert [m.participant_id for m in first] == ["b"]
    assert [m.participant_id for m in cached] == ["b"]
    assert [m.participant_id for m in different_criteria] == ["c"]
    assert engine.cache.stats().hits == 1


def test_limit_truncates_cached_list(engine, requester, make_participant):
    pool = [make_participant(f"p{i}", subjects=["math"], institution=f"S{i}") for i in range(6)]

    assert len(engine.find_matches(requester, pool, limit=5)) == 5
    assert len(engine.find_matches(requester, pool, limit=2)) == 2
    assert len(engine.find_matches(requester, pool, limit=10)) == 6


def test_contract_violations(engine, requester):
    with pytest.raises(ValueError):
        engine.find_matches(requester, [], limit=0)
    with pytest.raises(ValueError):
        engine.find_matches(None, [])


def test_find_matches_from_dict():
    engine = MatchingEngine(cache=EvictionCache(capacity=10, ttl_seconds=60))
    requester = {
        "id": "me",
        "subjects": [{"subject_id": "math"}],
        "availability": json.dumps(MONDAY_MORNING),
    }
    candidates = [
        {"id": "you", "subjects": [{"subject_id": "math"}], "availability": "not json"},
    ]

    matches = engine.find_matches_from_dict(requester, candidates, {"subjects": ["math"]})

    assert [m.participant_id for m in matches] == ["you"]
    assert matches[0].compatibility_score.time_overlap == 0.0


def test_results_do_not_mutate_inputs(engine, requester, make_participant):
    candidate = make_participant("b", subjects=["math"])
    before = candidate.model_dump()

    engine.find_matches(requester, [candidate])

    assert candidate.model_dump() == before
