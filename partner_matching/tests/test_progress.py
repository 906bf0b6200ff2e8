from datetime import date, timedelta

import pytest

from partner_matching.logic.contracts import StudyRecord
from partner_matching.logic.progress import ProgressPredictor

START = date(2025, 3, 1)


def _records(hours):
    return [StudyRecord(day=START + timedelta(days=i), hours=h) for i, h in enumerate(hours)]


@pytest.fixture
def predictor():
    return ProgressPredictor(today=lambda: START)


def test_projection_is_in_the_future(predictor):
    records = _records([2, 3, 1.5, 4, 2.5])

    prediction = predictor.predict_progress(records, target_hours=100)

    last_day = records[-1].day
    assert prediction.estimated_completion > last_day
    assert 0.0 <= prediction.confidence <= 0.95
    assert prediction.current_rate > 0
    assert prediction.hours_completed == pytest.approx(13.0)
    assert prediction.hours_remaining == pytest.approx(87.0)
    assert prediction.required_rate is None


def test_required_rate_against_deadline(predictor):
    records = _records([2, 2, 2])
    deadline = records[-1].day + timedelta(days=10)

    prediction = predictor.predict_progress(records, target_hours=26, deadline=deadline)

    assert prediction.required_rate == pytest.approx(2.0)
    days_to_go = (prediction.estimated_completion - records[-1].day).days
    assert days_to_go in (10, 11)
    assert prediction.confidence == pytest.approx(0.95)


def test_goal_already_reached(predictor):
    records = _records([5, 5])

    prediction = predictor.predict_progress(records, target_hours=8)

    assert prediction.estimated_completion == records[-1].day
    assert prediction.hours_remaining == 0.0


def test_too_little_data(predictor):
    deadline = date(2025, 4, 1)

    single = predictor.predict_progress(_records([3]), target_hours=10, deadline=deadline)
    empty = predictor.predict_progress([], target_hours=10, deadline=deadline)

    assert single.estimated_completion == deadline
    assert single.confidence == 0.3
    assert single.current_rate == 0.0
    assert empty.required_rate == pytest.approx(10 / 31)


def test_same_day_records_are_combined(predictor):
    records = [StudyRecord(day=START, hours=1), StudyRecord(day=START, hours=2)]

    prediction = predictor.predict_progress(records, target_hours=10)

    assert prediction.confidence == 0.3
    assert prediction.hours_completed == 3


def test_invalid_target(predictor):
    with pytest.raises(ValueError):
        predictor.predict_progress(_records([1, 2]), target_hours=0)
