"""
Shared fixtures for the matching engine tests.
"""

import pytest

from partner_matching.logic.contracts import Participant, SubjectProficiency


def _subject(entry):
    if isinstance(entry, str):
        return SubjectProficiency(subject_id=entry)
    subject_id, level = entry
    return SubjectProficiency(subject_id=subject_id, proficiency_level=level)


@pytest.fixture
def make_participant():
    """
    Build a Participant. `subjects` entries are subject ids or
    (subject_id, proficiency_level) pairs.
    """
    def _make(participant_id, subjects=(), **fields):
        return Participant(
            id=participant_id,
            subjects=[_subject(s) for s in subjects],
            **fields,
        )
    return _make


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
