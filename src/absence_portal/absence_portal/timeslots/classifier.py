"""Decides whether a timetable slot can be picked for a new absence request,
and whether a new timetable entry collides with the existing ones."""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence, TypeVar

from ..core.constants import RANGE_SEPARATOR
from ..core.enums import RequestStatus, WeekDay
from ..core.exceptions import ConflictError
from .ranges import overlaps
from .week import WeekDate


class Slot(Protocol):
    subject: str
    day: WeekDay
    time: str


class Detail(Protocol):
    subject: str
    day: WeekDay
    date: Optional[date]
    time: str


class RequestLike(Protocol):
    status: RequestStatus
    class_details: Sequence[Detail]


class SlotState(str, Enum):
    SELECTABLE = "selectable"
    PAST = "past"
    REQUESTED = "requested"


S = TypeVar("S", bound=Slot)


def slot_start(value: str) -> time:
    start = value.partition(RANGE_SEPARATOR)[0].strip()
    hours, minutes = start.split(":")
    return time(int(hours), int(minutes))


def is_in_past(week_date: WeekDate, value: str, now: datetime) -> bool:
    # Only the start counts: a class already in progress is past.
    return datetime.combine(week_date.date, slot_start(value)) < now


def is_duplicate_request(slot: Slot, week_date: WeekDate, existing_requests: Iterable[RequestLike]) -> bool:
    for req in existing_requests:
        if req.status == RequestStatus.REJECTED:
            continue
        for d in req.class_details:
            if d.subject != slot.subject or WeekDay(d.day) != WeekDay(slot.day):
                continue
            if d.date is not None and d.date != week_date.date:
                continue
            if overlaps(d.time, slot.time):
                return True
    return False


def classify_slot(
    week_date: WeekDate,
    slot: Slot,
    existing_requests: Iterable[RequestLike],
    now: datetime,
) -> SlotState:
    if week_date.is_past or is_in_past(week_date, slot.time, now):
        return SlotState.PAST
    if is_duplicate_request(slot, week_date, existing_requests):
        return SlotState.REQUESTED
    return SlotState.SELECTABLE


def is_selectable(
    week_date: WeekDate,
    slot: Slot,
    existing_requests: Iterable[RequestLike],
    now: datetime,
) -> bool:
    return classify_slot(week_date, slot, existing_requests, now) is SlotState.SELECTABLE


def find_conflict(value: str, entries: Iterable[S]) -> Optional[S]:
    """First entry whose time overlaps ``value``; callers pass one day of one scope."""
    for entry in entries:
        if overlaps(entry.time, value):
            return entry
    return None


def ensure_no_conflict(value: str, entries: Iterable[Slot]) -> None:
    hit = find_conflict(value, entries)
    if hit is not None:
        raise ConflictError(
            f'Time slot overlaps with existing class "{hit.subject}" ({hit.time}). '
            "Please choose a different time.",
            subject=hit.subject,
            time=hit.time,
        )
