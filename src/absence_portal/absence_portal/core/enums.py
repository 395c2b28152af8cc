from __future__ import annotations

from enum import Enum, IntEnum

from .exceptions import InvalidFormat


class Role(str, Enum):
    """User roles used for authorization."""

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class RequestStatus(str, Enum):
    """Approval state of an absence request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


_DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class WeekDay(IntEnum):
    """Day within a Sunday-start week (0 = Sunday)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def label(self) -> str:
        return _DAY_NAMES[self.value]

    @classmethod
    def from_date(cls, value) -> "WeekDay":
        # date.weekday() is Monday=0
        return cls((value.weekday() + 1) % 7)

    @classmethod
    def parse(cls, value) -> "WeekDay":
        """Accept an index (3, "3") or a day name ("Wednesday", "wed")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        if text.isdigit() and int(text) in range(7):
            return cls(int(text))
        lowered = text.lower()
        if len(lowered) >= 3:
            for i, name in enumerate(_DAY_NAMES):
                if name.lower().startswith(lowered):
                    return cls(i)
        raise InvalidFormat(f"Invalid day: {value!r}")
