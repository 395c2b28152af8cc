"""Admin bulk import of timetable rows.

Format: a header line naming ``course, semester, day, time, subject, facultyId, facultyName``
(any order, case-insensitive) followed by comma-separated rows. Quoting is not supported.
"""

from __future__ import annotations

import logging

from ..core.constants import CSV_REQUIRED_COLUMNS
from ..core.enums import WeekDay
from ..core.exceptions import InvalidFormat, ValidationError
from ..timeslots.ranges import validate_time_encoding
from .model import NewTimetableEntry

log = logging.getLogger(__name__)


def parse_timetable_csv(text: str) -> tuple[list[NewTimetableEntry], int]:
    """Returns (entries, skipped_row_count)."""
    lines = [ln for ln in (text or "").lstrip("\ufeff").splitlines() if ln.strip()]
    if len(lines) < 2:
        raise ValidationError("CSV has no data rows.")

    header = [h.strip().lower() for h in lines[0].split(",")]
    missing = [c for c in CSV_REQUIRED_COLUMNS if c not in header]
    if missing:
        raise ValidationError(f"Missing columns: {', '.join(missing)}")
    idx = {name: header.index(name) for name in CSV_REQUIRED_COLUMNS}

    entries: list[NewTimetableEntry] = []
    skipped = 0
    for lineno, line in enumerate(lines[1:], start=2):
        cols = line.split(",")
        if len(cols) != len(header):
            skipped += 1
            continue
        row = {name: cols[i].strip() for name, i in idx.items()}
        if not row["course"] or not row["semester"] or not row["subject"]:
            skipped += 1
            continue

        try:
            day = WeekDay.parse(row["day"])
            validate_time_encoding(row["time"])
        except InvalidFormat as e:
            log.debug("csv line %d skipped: %s", lineno, e)
            skipped += 1
            continue

        entries.append(
            NewTimetableEntry(
                course=row["course"],
                semester=row["semester"],
                day=day,
                time=row["time"],
                subject=row["subject"],
                faculty_id=row["facultyid"],
                faculty_name=row["facultyname"],
            )
        )
    return entries, skipped
