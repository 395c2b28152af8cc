"""Time-range parsing, validation and half-open overlap tests.

A range is encoded as ``"HH:MM - HH:MM"``. A bare ``"HH:MM"`` used where a range is
expected stands for one hour starting at that time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..core.constants import DEFAULT_SLOT_MINUTES, RANGE_SEPARATOR
from ..core.exceptions import InvalidFormat
from .clock import format_minutes, parse_to_minutes

TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

MISSING_SEPARATOR = 'Time must be in format "HH:MM - HH:MM"'
BAD_TIME = "Invalid time format. Use HH:MM format (e.g., 09:30)"
START_AFTER_END = "Start time must be before end time"


@dataclass(frozen=True)
class TimeRange:
    """Half-open interval ``[start, end)`` in minutes since midnight."""

    start: int
    end: int

    @classmethod
    def parse(cls, value: str) -> "TimeRange":
        if RANGE_SEPARATOR in value:
            start, _, end = value.partition(RANGE_SEPARATOR)
            return cls(parse_to_minutes(start), parse_to_minutes(end))
        start = parse_to_minutes(value)
        return cls(start, start + DEFAULT_SLOT_MINUTES)

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{format_minutes(self.start)}{RANGE_SEPARATOR}{format_minutes(self.end)}"


def is_valid_time(value: str) -> bool:
    return bool(TIME_RE.match((value or "").strip()))


def validate_time_range(value: str) -> None:
    if RANGE_SEPARATOR not in (value or ""):
        raise InvalidFormat(MISSING_SEPARATOR)

    start, _, end = value.partition(RANGE_SEPARATOR)
    start, end = start.strip(), end.strip()
    if not is_valid_time(start) or not is_valid_time(end):
        raise InvalidFormat(BAD_TIME)

    if parse_to_minutes(start) >= parse_to_minutes(end):
        raise InvalidFormat(START_AFTER_END)


def validate_time_encoding(value: str) -> None:
    """Accept a valid range or a valid bare time."""
    if RANGE_SEPARATOR in (value or ""):
        validate_time_range(value)
    elif not is_valid_time(value):
        raise InvalidFormat(BAD_TIME)


def make_time_range(start: str, end: str) -> str:
    """Join picker values into the stored range text, validating it."""
    value = f"{(start or '').strip()}{RANGE_SEPARATOR}{(end or '').strip()}"
    validate_time_range(value)
    return value


def overlaps(a: str, b: str) -> bool:
    return TimeRange.parse(a).overlaps(TimeRange.parse(b))
