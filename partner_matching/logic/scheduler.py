"""
Study Session Scheduler

Finds availability windows shared by enough participants to hold a
session of the required length.
"""

import logging
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .availability import participant_intervals
from .contracts import Participant, ScheduleSlot, TimeInterval
from .constants import MAX_SCHEDULE_SLOTS

logger = logging.getLogger(__name__)


class StudySessionScheduler:
    """
    Interval-overlap scheduler.

    Every availability interval is used as an anchor; the slot it produces
    spans the anchor and lists everyone with an interval overlapping it.
    """

    def __init__(self, max_slots: int = MAX_SCHEDULE_SLOTS):
        self.max_slots = max_slots

    def find_slots(
        self,
        participants: Sequence[Participant],
        required_duration_minutes: float,
        min_participants: Optional[int] = None,
        timezone: Optional[str] = None
    ) -> List[ScheduleSlot]:
        """
        Find the best session windows.

        Args:
            participants: People who should attend
            required_duration_minutes: Minimum slot length
            min_participants: Minimum attendees (defaults to everyone)
            timezone: IANA zone to express slot bounds in (UTC if omitted or unknown)

        Returns:
            Up to 5 slots, most attendees first
        """
        if required_duration_minutes <= 0:
            raise ValueError(
                f"required_duration_minutes must be positive, got {required_duration_minutes}"
            )
        if not participants:
            logger.debug("No participants to schedule")
            return []
        if min_participants is None:
            min_participants = len(participants)
        if min_participants <= 0:
            raise ValueError(f"min_participants must be positive, got {min_participants}")

        intervals: List[TimeInterval] = []
        for participant in participants:
            intervals.extend(participant_intervals(participant))

        if not intervals:
            logger.debug("No resolvable availability among participants")
            return []

        intervals.sort(key=lambda i: i.start)

        slots = [
            slot for slot in self._overlapping_slots(intervals)
            if slot.participant_count >= min_participants
            and slot.duration_minutes >= required_duration_minutes
        ]
        slots.sort(key=lambda s: s.participant_count, reverse=True)
        slots = slots[:self.max_slots]

        zone = self._output_zone(timezone) if timezone else None
        if zone is not None:
            slots = [
                ScheduleSlot(
                    start=s.start.astimezone(zone),
                    end=s.end.astimezone(zone),
                    participant_ids=s.participant_ids,
                )
                for s in slots
            ]

        logger.debug(f"Found {len(slots)} schedule slot(s) for {len(participants)} participants")
        return slots

    @staticmethod
    def _output_zone(name: str) -> Optional[ZoneInfo]:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown output timezone {name!r}, keeping slots in UTC")
            return None

    @staticmethod
    def _overlapping_slots(intervals: List[TimeInterval]) -> List[ScheduleSlot]:
        slots = []
        for anchor in intervals:
            owners = [anchor.participant_id]
            for other in intervals:
                if other is anchor or other.participant_id in owners:
                    continue
                if anchor.start < other.end and other.start < anchor.end:
                    owners.append(other.participant_id)
            slots.append(ScheduleSlot(
                start=anchor.start,
                end=anchor.end,
                participant_ids=tuple(owners),
            ))
        return slots
