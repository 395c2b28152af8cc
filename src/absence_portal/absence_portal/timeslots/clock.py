"""Conversions between ``HH:MM`` text, minutes since midnight and 12-hour labels."""

from __future__ import annotations

from ..core.constants import (
    RANGE_SEPARATOR,
    TIME_OPTION_FIRST_HOUR,
    TIME_OPTION_LAST_HOUR,
    TIME_OPTION_STEP_MINUTES,
)


def parse_to_minutes(value: str) -> int:
    """Minutes since midnight for ``H:MM`` / ``HH:MM``.

    Callers validate first; malformed text raises ``ValueError`` or gives a meaningless result.
    """
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def format_for_display(value: str) -> str:
    hours, minutes = value.strip().split(":")
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def format_range_for_display(value: str) -> str:
    if RANGE_SEPARATOR in value:
        start, _, end = value.partition(RANGE_SEPARATOR)
        return f"{format_for_display(start)}{RANGE_SEPARATOR}{format_for_display(end)}"
    return format_for_display(value)


def time_options(
    *,
    first_hour: int = TIME_OPTION_FIRST_HOUR,
    last_hour: int = TIME_OPTION_LAST_HOUR,
    step_minutes: int = TIME_OPTION_STEP_MINUTES,
) -> list[tuple[str, str]]:
    """(value, label) pairs for the start/end time pickers."""
    options: list[tuple[str, str]] = []
    for total in range(first_hour * 60, (last_hour + 1) * 60, step_minutes):
        value = format_minutes(total)
        options.append((value, format_for_display(value)))
    return options
