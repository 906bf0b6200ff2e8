"""
Tests for the collaborative, content-based and hybrid recommendation engines.
"""

import pytest

from partner_matching.logic.collaborative import (
    CollaborativeFilteringEngine,
    pearson_correlation,
    rating_similarity,
)
from partner_matching.logic.content_based import (
    ContentBasedEngine,
    build_feature_vector,
    cosine_similarity,
)
from partner_matching.logic.hybrid import HybridRecommendationEngine


@pytest.fixture
def community(make_participant):
    """
    `target` rates subjects like `twin` and opposite to `contrarian`.
    `twin` studies with `pal` and with the target's existing partner `buddy`.
    """
    ratings = [("math", "BEGINNER"), ("cs", "INTERMEDIATE"), ("physics", "ADVANCED")]
    reversed_ratings = [("math", "ADVANCED"), ("cs", "INTERMEDIATE"), ("physics", "BEGINNER")]

    return {
        "target": make_participant(
            "target", subjects=ratings, academic_level="INTERMEDIATE",
            learning_style="visual", institution="MIT", partner_ids={"buddy"},
        ),
        "twin": make_participant(
            "twin", subjects=ratings, academic_level="INTERMEDIATE",
            learning_style="visual", institution="MIT", partner_ids={"pal", "buddy"},
        ),
        "contrarian": make_participant(
            "contrarian", subjects=reversed_ratings, partner_ids={"stranger"},
        ),
        "pal": make_participant("pal", subjects=["math"], academic_level="INTERMEDIATE"),
        "buddy": make_participant("buddy", subjects=["math"]),
        "stranger": make_participant("stranger", academic_level="EXPERT"),
    }


def test_pearson_correlation():
    assert pearson_correlation([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
    assert pearson_correlation([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)
    assert pearson_correlation([2, 2, 2], [1, 2, 3]) == 0.0
    assert pearson_correlation([], []) == 0.0
    assert pearson_correlation([1, 2], [1]) == 0.0


def test_rating_similarity_needs_two_shared_subjects(make_participant):
    a = make_participant("a", subjects=[("math", "BEGINNER"), ("cs", "EXPERT")])
    b = make_participant("b", subjects=[("math", "BEGINNER"), ("art", "EXPERT")])

    assert rating_similarity(a, b) == 0.0


def test_collaborative_recommends_neighbours_partners(community):
    engine = CollaborativeFilteringEngine()

    recs = engine.recommend_partners(community["target"], list(community.values()))

    assert [r.candidate_id for r in recs] == ["pal"]
    assert recs[0].score == pytest.approx(1.0)
    assert recs[0].method == "collaborative"
    assert recs[0].reason == "Recommended by 1 participants similar to you (top similarity: 1.00)"


def test_collaborative_without_neighbours(make_participant):
    target = make_participant("target", subjects=["math"])
    others = [make_participant("x", subjects=["math"], partner_ids={"y"}), make_participant("y")]

    assert CollaborativeFilteringEngine().recommend_partners(target, [target] + others) == []


def test_feature_vector_and_cosine(make_participant):
    participant = make_participant(
        "a", subjects=[("math", "EXPERT")], learning_style="reading",
        institution="MIT", major="CS", graduation_year=2026,
    )

    features = build_feature_vector(participant)

    assert features == {
        "subject_math": 4.0,
        "level_BEGINNER": 1.0,
        "style_reading": 1.0,
        "university_MIT": 1.0,
        "major_CS": 1.0,
        "year_2026": 1.0,
    }
    assert cosine_similarity(features, features) == pytest.approx(1.0)
    assert cosine_similarity(features, {}) == 0.0
    assert cosine_similarity({"a": 1.0}, {"b": 1.0}) == 0.0


def test_content_based_ranks_similar_profiles(community):
    engine = ContentBasedEngine()

    recs = engine.recommend_partners(community["target"], list(community.values()))

    ids = [r.candidate_id for r in recs]
    assert ids[0] == "twin"
    assert "target" not in ids
    assert "buddy" not in ids
    assert recs[0].score == pytest.approx(1.0)
    assert recs[0].reason == (
        "High compatibility: 3 shared subjects, Same study level, "
        "Same learning style, Same university"
    )
    assert recs[-1].reason == "Good overall match"
    assert all(r.method == "content" for r in recs)


def test_hybrid_blends_both_engines(community):
    engine = HybridRecommendationEngine()

    recs = engine.recommend_partners(community["target"], list(community.values()), limit=3)

    assert len(recs) == 3
    by_id = {r.candidate_id: r for r in recs}
    pal = by_id["pal"]
    assert pal.method == "hybrid"
    assert "; " in pal.reason
    assert pal.score > 0.6
    assert by_id["twin"].method == "content"
    assert by_id["twin"].score == pytest.approx(0.4)
    scores = [r.score for r in recs]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.parametrize("engine_class", [
    CollaborativeFilteringEngine,
    ContentBasedEngine,
    HybridRecommendationEngine,
])
def test_invalid_arguments(engine_class, make_participant):
    engine = engine_class()
    target = make_participant("target")

    with pytest.raises(ValueError):
        engine.recommend_partners(target, [], limit=0)
    with pytest.raises(ValueError):
        engine.recommend_partners(None, [])
