"""Clock abstraction so progression logic never reads the wall clock directly"""

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current date and time"""

    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...


class SystemClock:
    """Wall-clock time in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()


def is_previous_day(earlier: date, later: date) -> bool:
    """True when `earlier` is the calendar day right before `later`"""
    return later - earlier == timedelta(days=1)
