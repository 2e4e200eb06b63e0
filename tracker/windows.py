"""Time windows: granularity → concrete interval, and date-key membership."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from tracker.models import GRANULARITIES, WEEKDAYS, DateInterval


_DATE_KEY = re.compile(r"\d{4}-\d{2}-\d{2}")


class InvalidDateKey(ValueError):
    """A completion key that is not a YYYY-MM-DD calendar date."""


def _start_of(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def _end_of(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.max, tzinfo=now.tzinfo)


def resolve_window(granularity: str, now: datetime, week_start: str = "sun") -> DateInterval:
    """Return the inclusive interval for *granularity* around *now*.

    day    -> [now, now]
    week   -> first/last instant of the week containing now
    month  -> first/last instant of the calendar month
    year   -> first/last instant of the calendar year
    """
    today = now.date()
    if granularity == "day":
        return DateInterval(start=now, end=now)
    if granularity == "week":
        offset = (today.weekday() - WEEKDAYS.index(week_start)) % 7
        first = today - timedelta(days=offset)
        return DateInterval(start=_start_of(first, now), end=_end_of(first + timedelta(days=6), now))
    if granularity == "month":
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return DateInterval(
            start=_start_of(first, now),
            end=_end_of(next_month - timedelta(days=1), now),
        )
    if granularity == "year":
        return DateInterval(
            start=_start_of(date(today.year, 1, 1), now),
            end=_end_of(date(today.year, 12, 31), now),
        )
    raise ValueError(f"Invalid granularity: {granularity!r} (expected one of {', '.join(GRANULARITIES)})")


def parse_date_key(key: str) -> date:
    if not isinstance(key, str) or not _DATE_KEY.fullmatch(key):
        raise InvalidDateKey(f"Invalid date key: {key!r}")
    try:
        return date.fromisoformat(key)
    except ValueError as e:
        raise InvalidDateKey(f"Invalid date key: {key!r}") from e


def in_interval(key: str, interval: DateInterval) -> bool:
    """True if the calendar day *key* falls within *interval* (inclusive).

    Keys carry no time of day, so they are compared against the calendar
    days of the interval bounds.
    """
    day = parse_date_key(key)
    return interval.start.date() <= day <= interval.end.date()
