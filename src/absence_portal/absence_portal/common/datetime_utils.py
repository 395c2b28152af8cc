from __future__ import annotations

from datetime import date, datetime
from typing import Optional

ISO_DATE = "%Y-%m-%d"


def parse_iso_date(value: str) -> date:
    return datetime.strptime(value.strip(), ISO_DATE).date()


def format_iso_date(value: date) -> str:
    return value.strftime(ISO_DATE)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 text for JSON responses; ``None`` stays ``None``."""
    return value.isoformat(timespec="seconds") if value else None


def now_local() -> datetime:
    """Wall-clock time of the server. Services call this through the module so tests can pin it."""
    return datetime.now()
