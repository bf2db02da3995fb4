from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

INSTANT = timedelta(microseconds=1)


@dataclass(frozen=True)
class MonthPeriod:
    year: int
    month: int
    start: datetime
    end: datetime  # exclusive

    @property
    def last_instant(self) -> datetime:
        return self.end - INSTANT

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


def month_period(year: int, month: int, tz: tzinfo) -> MonthPeriod:
    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    start = datetime(year, month, 1, tzinfo=tz)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year, month + 1, 1, tzinfo=tz)
    return MonthPeriod(year, month, start, end)


def localize(moment: datetime, tz: tzinfo) -> datetime:
    """Interpret naive datetimes in ``tz``; convert aware ones into it."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def has_month_elapsed(year: int, month: int, now: datetime, tz: tzinfo) -> bool:
    """True once ``now`` is past the last instant of the given month."""
    return localize(now, tz) > month_period(year, month, tz).last_instant


def has_month_passed(moment: datetime, now: datetime, tz: tzinfo) -> bool:
    local = localize(moment, tz)
    return has_month_elapsed(local.year, local.month, now, tz)
