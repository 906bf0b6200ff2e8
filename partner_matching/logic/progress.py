"""
Progress Predictor

Projects when a study-hours goal will be reached from the hours logged so
far, using a least-squares line through cumulative hours per day.
"""

import logging
import math
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, Optional

import numpy as np

from .contracts import StudyRecord, ProgressPrediction
from .constants import MAX_PREDICTION_CONFIDENCE, LOW_DATA_CONFIDENCE

logger = logging.getLogger(__name__)


def _required_rate(remaining: float, deadline: Optional[date], reference: date) -> Optional[float]:
    """Hours per day still needed; past or same-day deadlines need everything now."""
    if deadline is None:
        return None
    days_left = (deadline - reference).days
    if days_left <= 0:
        return remaining
    return remaining / days_left


class ProgressPredictor:
    """Linear-regression goal projection."""

    def __init__(self, today: Callable[[], date] = date.today):
        self._today = today

    def predict_progress(
        self,
        records: Iterable[StudyRecord],
        target_hours: float,
        deadline: Optional[date] = None
    ) -> ProgressPrediction:
        """
        Predict when `target_hours` will be reached.

        Args:
            records: Logged study hours (several records on one day are summed)
            target_hours: Goal in hours
            deadline: Optional goal deadline

        Returns:
            ProgressPrediction. With fewer than two logged days the
            completion date is the deadline and confidence is 0.3.
        """
        if target_hours <= 0:
            raise ValueError(f"target_hours must be positive, got {target_hours}")

        hours_by_day: Dict[date, float] = {}
        for record in records:
            hours_by_day[record.day] = hours_by_day.get(record.day, 0.0) + record.hours

        days = sorted(hours_by_day)
        completed = sum(hours_by_day.values())
        remaining = max(0.0, target_hours - completed)

        if len(days) < 2:
            reference = days[-1] if days else self._today()
            return ProgressPrediction(
                estimated_completion=deadline,
                confidence=LOW_DATA_CONFIDENCE,
                current_rate=0.0,
                required_rate=_required_rate(remaining, deadline, reference),
                hours_completed=completed,
                hours_remaining=remaining,
            )

        x = np.array([(d - days[0]).days for d in days], dtype=float)
        y = np.cumsum([hours_by_day[d] for d in days])

        slope, intercept = np.polyfit(x, y, 1)
        predicted = slope * x + intercept
        ss_res = float(np.sum((y - predicted) ** 2))
        ss_tot = float(np.sum((y - y.mean()) ** 2))
        r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0

        last_day = days[-1]
        if remaining == 0:
            completion = last_day
        elif slope > 0:
            completion = last_day + timedelta(days=math.ceil(remaining / slope))
        else:
            logger.debug("Non-positive study rate, goal completion cannot be projected")
            completion = None

        return ProgressPrediction(
            estimated_completion=completion,
            confidence=max(0.0, min(MAX_PREDICTION_CONFIDENCE, r_squared)),
            current_rate=float(slope),
            required_rate=_required_rate(remaining, deadline, last_day),
            hours_completed=completed,
            hours_remaining=remaining,
        )
