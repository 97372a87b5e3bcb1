"""
Datetime Helpers
Naive local timestamps shared by services and tests
"""

from datetime import datetime
from typing import Optional, Union


def now_local() -> datetime:
    """Current local time, truncated to whole seconds.

    Wrapped so tests can patch it.
    """
    return datetime.now().replace(microsecond=0)


def as_datetime(value: Union[datetime, str, None]) -> Optional[datetime]:
    """Normalise a timestamp column value read through raw SQL.

    SQLite hands back ISO strings, PostgreSQL hands back datetime objects.
    """
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an offset-aware timestamp to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
