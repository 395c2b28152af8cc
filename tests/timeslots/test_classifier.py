from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

import pytest

from src.absence_portal.absence_portal.core.enums import RequestStatus, WeekDay
from src.absence_portal.absence_portal.core.exceptions import ConflictError
from src.absence_portal.absence_portal.timeslots.classifier import (
    SlotState,
    classify_slot,
    ensure_no_conflict,
    find_conflict,
    is_in_past,
    is_selectable,
)
from src.absence_portal.absence_portal.timeslots.week import current_week


@dataclass(frozen=True)
class FakeSlot:
    subject: str
    day: WeekDay
    time: str


@dataclass(frozen=True)
class FakeDetail:
    subject: str
    day: WeekDay
    time: str
    date: Optional[date] = None


@dataclass
class FakeRequest:
    status: RequestStatus
    class_details: list = field(default_factory=list)


@pytest.fixture
def week(fixed_now):
    return current_week(fixed_now)


ALGORITHMS = FakeSlot("Algorithms", WeekDay.THURSDAY, "14:00 - 15:00")


def test_earlier_day_is_past(week, fixed_now):
    slot = FakeSlot("Databases", WeekDay.MONDAY, "16:00 - 17:00")
    assert classify_slot(week[WeekDay.MONDAY], slot, [], fixed_now) is SlotState.PAST


def test_today_uses_slot_start(week, fixed_now):
    started = FakeSlot("Networks", WeekDay.WEDNESDAY, "09:00 - 11:00")
    upcoming = FakeSlot("Statistics", WeekDay.WEDNESDAY, "11:00 - 12:00")

    assert is_in_past(week[WeekDay.WEDNESDAY], started.time, fixed_now)
    assert classify_slot(week[WeekDay.WEDNESDAY], started, [], fixed_now) is SlotState.PAST
    assert classify_slot(week[WeekDay.WEDNESDAY], upcoming, [], fixed_now) is SlotState.SELECTABLE


def test_slot_starting_exactly_now_is_not_past(week):
    now = datetime(2025, 1, 15, 11, 0)
    assert not is_in_past(week[WeekDay.WEDNESDAY], "11:00 - 12:00", now)


def test_future_slot_without_requests_is_selectable(week, fixed_now):
    assert is_selectable(week[WeekDay.THURSDAY], ALGORITHMS, [], fixed_now)


@pytest.mark.parametrize("status", [RequestStatus.PENDING, RequestStatus.APPROVED])
def test_live_request_for_same_class_blocks_it(week, fixed_now, status):
    req = FakeRequest(status, [FakeDetail("Algorithms", WeekDay.THURSDAY, "14:00 - 15:00", date(2025, 1, 16))])
    assert classify_slot(week[WeekDay.THURSDAY], ALGORITHMS, [req], fixed_now) is SlotState.REQUESTED


def test_rejected_request_does_not_block(week, fixed_now):
    req = FakeRequest(
        RequestStatus.REJECTED, [FakeDetail("Algorithms", WeekDay.THURSDAY, "14:00 - 15:00", date(2025, 1, 16))]
    )
    assert classify_slot(week[WeekDay.THURSDAY], ALGORITHMS, [req], fixed_now) is SlotState.SELECTABLE


def test_request_from_another_week_does_not_block(week, fixed_now):
    req = FakeRequest(
        RequestStatus.PENDING, [FakeDetail("Algorithms", WeekDay.THURSDAY, "14:00 - 15:00", date(2025, 1, 9))]
    )
    assert classify_slot(week[WeekDay.THURSDAY], ALGORITHMS, [req], fixed_now) is SlotState.SELECTABLE


def test_detail_without_date_matches_any_week(week, fixed_now):
    req = FakeRequest(RequestStatus.PENDING, [FakeDetail("Algorithms", WeekDay.THURSDAY, "14:30 - 15:30")])
    assert classify_slot(week[WeekDay.THURSDAY], ALGORITHMS, [req], fixed_now) is SlotState.REQUESTED


def test_other_subject_or_disjoint_time_does_not_block(week, fixed_now):
    req = FakeRequest(
        RequestStatus.PENDING,
        [
            FakeDetail("Compilers", WeekDay.THURSDAY, "14:00 - 15:00", date(2025, 1, 16)),
            FakeDetail("Algorithms", WeekDay.THURSDAY, "15:00 - 16:00", date(2025, 1, 16)),
            FakeDetail("Algorithms", WeekDay.FRIDAY, "14:00 - 15:00", date(2025, 1, 17)),
        ],
    )
    assert classify_slot(week[WeekDay.THURSDAY], ALGORITHMS, [req], fixed_now) is SlotState.SELECTABLE


def test_past_wins_over_requested(week, fixed_now):
    monday = FakeSlot("Databases", WeekDay.MONDAY, "09:00 - 10:00")
    req = FakeRequest(RequestStatus.PENDING, [FakeDetail("Databases", WeekDay.MONDAY, "09:00 - 10:00", date(2025, 1, 13))])
    assert classify_slot(week[WeekDay.MONDAY], monday, [req], fixed_now) is SlotState.PAST


def test_find_conflict_returns_first_overlap():
    entries = [
        FakeSlot("Databases", WeekDay.MONDAY, "08:00 - 09:00"),
        FakeSlot("Algorithms", WeekDay.MONDAY, "09:00 - 10:30"),
    ]
    assert find_conflict("10:00 - 11:00", entries) is entries[1]
    assert find_conflict("10:30 - 11:30", entries) is None


def test_ensure_no_conflict_names_the_existing_class():
    entries = [FakeSlot("Algorithms", WeekDay.MONDAY, "09:00 - 10:30")]

    with pytest.raises(ConflictError) as exc:
        ensure_no_conflict("10:00 - 11:00", entries)

    assert exc.value.subject == "Algorithms"
    assert exc.value.time == "09:00 - 10:30"
    assert str(exc.value) == (
        'Time slot overlaps with existing class "Algorithms" (09:00 - 10:30). Please choose a different time.'
    )


def test_ensure_no_conflict_allows_back_to_back_classes():
    ensure_no_conflict("10:30 - 11:30", [FakeSlot("Algorithms", WeekDay.MONDAY, "09:00 - 10:30")])


def test_duplicate_clears_once_the_request_is_rejected():
    now = datetime(2024, 3, 3, 8, 0)
    monday = current_week(now)[WeekDay.MONDAY]
    assert monday.date == date(2024, 3, 4)

    slot = FakeSlot("Algorithms", WeekDay.MONDAY, "09:30 - 10:30")
    req = FakeRequest(RequestStatus.PENDING, [FakeDetail("Algorithms", WeekDay.MONDAY, "09:00 - 10:00", date(2024, 3, 4))])

    assert classify_slot(monday, slot, [req], now) is SlotState.REQUESTED
    req.status = RequestStatus.REJECTED
    assert classify_slot(monday, slot, [req], now) is SlotState.SELECTABLE
