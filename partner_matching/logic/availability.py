"""
Availability Parsing

Turns the availability payload supplied by the data layer into validated
slots, and slots into concrete UTC intervals.

Payloads arrive either as lists of dicts or as a serialized JSON string.
Anything that cannot be understood degrades to "no availability" instead of
failing the whole matching call.
"""

import json
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from .cache import memoize
from .constants import REFERENCE_WEEK_START, WEEKDAY_INDEX_MAP
from .contracts import AvailabilitySlot, Participant, TimeInterval

logger = logging.getLogger(__name__)


def parse_availability_payload(value: Any) -> Tuple[AvailabilitySlot, ...]:
    """
    Parse raw availability into slots.

    Args:
        value: None, a JSON string, or an iterable of dicts / AvailabilitySlot

    Returns:
        Tuple of valid slots (invalid entries are skipped)
    """
    if value is None:
        return ()

    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Unparseable availability payload, treating as empty")
            return ()

    if not isinstance(value, (list, tuple)):
        logger.warning(f"Availability payload must be a list, got {type(value).__name__}")
        return ()

    slots: List[AvailabilitySlot] = []
    for entry in value:
        if isinstance(entry, AvailabilitySlot):
            slots.append(entry)
            continue
        try:
            slots.append(AvailabilitySlot.model_validate(entry))
        except ValidationError as exc:
            logger.debug(f"Skipping invalid availability entry {entry!r}: {exc.error_count()} error(s)")

    return tuple(slots)


def _resolve_day(day: str) -> date:
    """Weekday names map into the reference week; anything else must be an ISO date."""
    index = WEEKDAY_INDEX_MAP.get(day.strip().lower())
    if index is not None:
        return REFERENCE_WEEK_START + timedelta(days=index)
    return date.fromisoformat(day.strip())


def _localize(value: datetime, tz: ZoneInfo) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=tz)


@memoize(ttl_seconds=3600.0, max_size=2048)
def resolve_slot(slot: AvailabilitySlot) -> Optional[Tuple[datetime, datetime]]:
    """
    Resolve a slot to a (start, end) pair in UTC.

    A clock-time end earlier than its start wraps past midnight. Returns None
    for unknown timezones, malformed values and zero-length windows.
    """
    try:
        tz = ZoneInfo(slot.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug(f"Unknown timezone {slot.timezone!r} in availability slot")
        return None

    try:
        if slot.day:
            base = _resolve_day(slot.day)
            start = datetime.combine(base, time.fromisoformat(slot.start_time), tzinfo=tz)
            end = datetime.combine(base, time.fromisoformat(slot.end_time), tzinfo=tz)
            if end < start:
                end += timedelta(days=1)
        else:
            start = _localize(datetime.fromisoformat(slot.start_time), tz)
            end = _localize(datetime.fromisoformat(slot.end_time), tz)
    except ValueError:
        logger.debug(f"Malformed availability slot {slot!r}")
        return None

    if not start < end:
        return None

    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def slots_to_intervals(owner_id: str, slots: Iterable[AvailabilitySlot]) -> List[TimeInterval]:
    intervals = []
    for slot in slots:
        resolved = resolve_slot(slot)
        if resolved is None:
            continue
        start, end = resolved
        intervals.append(TimeInterval(start=start, end=end, participant_id=owner_id))
    return intervals


def participant_intervals(participant: Participant) -> List[TimeInterval]:
    """All resolvable availability of a participant, sorted by start."""
    intervals = slots_to_intervals(participant.id, participant.availability)
    intervals.sort(key=lambda i: i.start)
    return intervals
