from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import WeekDay
from .model import NewTimetableEntry, TimetableEntry, TimetableScope


class TimetableRepository(Protocol):
    """Entries are keyed by (course, semester, day, time); writes upsert on that key."""

    def list_entries(self, scope: TimetableScope, *, day: Optional[WeekDay] = None) -> Sequence[TimetableEntry]:
        raise NotImplementedError

    def list_all(self) -> Sequence[TimetableEntry]:
        raise NotImplementedError

    def upsert(self, entry: NewTimetableEntry) -> int:
        """Returns entry_id."""

        raise NotImplementedError

    def upsert_many(self, entries: Sequence[NewTimetableEntry]) -> int:
        """All-or-nothing. Returns the number of rows written."""

        raise NotImplementedError

    def delete(self, *, entry_id: int) -> bool:
        raise NotImplementedError

    def delete_slot(self, scope: TimetableScope, *, day: WeekDay, time: str) -> int:
        raise NotImplementedError

    def replace_course(self, *, course: str, semester: str, entries: Sequence[NewTimetableEntry]) -> int:
        """Atomically swap every entry of one course+semester for ``entries``."""

        raise NotImplementedError
