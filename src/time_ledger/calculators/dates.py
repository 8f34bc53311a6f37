"""Timezone-aware calendar boundaries.

Day, week, month and leave-year boundaries are computed on local calendar
dates in the user's or organization's IANA timezone. Instants only ever
cross this module as timezone-aware UTC datetimes.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from time_ledger.calculators.errors import InvalidInputError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_ISO_WEEK_RE = re.compile(r"^(\d{4})-W(\d{2})$")


def get_zone(tz_name: str) -> ZoneInfo:
    """Look up an IANA timezone, failing loudly on unknown names."""
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidInputError("timezone", tz_name, "unknown IANA timezone") from e


def to_utc(instant: datetime) -> datetime:
    """Normalize an instant to aware UTC. Naive values are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def day_bounds(day: date, tz_name: str) -> tuple[datetime, datetime]:
    """Return the half-open UTC range [start, end) of a local day."""
    zone = get_zone(tz_name)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return to_utc(start), to_utc(end)


def range_bounds(start: date, end: date, tz_name: str) -> tuple[datetime, datetime]:
    """Return the half-open UTC range covering local days start..end inclusive."""
    if end < start:
        raise InvalidInputError("date range", (start, end), "end is before start")
    return day_bounds(start, tz_name)[0], day_bounds(end, tz_name)[1]


def local_date(instant: datetime, tz_name: str) -> date:
    """Return the local calendar date of an instant."""
    return to_utc(instant).astimezone(get_zone(tz_name)).date()


def today_in(tz_name: str, now: datetime | None = None) -> date:
    """Return today's local date in a timezone."""
    return local_date(now or datetime.now(timezone.utc), tz_name)


def iso_week_start(day: date) -> date:
    """Return the Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


def iso_weeks(start: date, end: date) -> list[tuple[date, date, date, date]]:
    """Partition start..end into ISO weeks.

    Returns (week_start, week_end, clipped_start, clipped_end) tuples where
    the clipped pair is the week's intersection with the requested range.
    """
    if end < start:
        raise InvalidInputError("date range", (start, end), "end is before start")

    weeks = []
    week_start = iso_week_start(start)
    while week_start <= end:
        week_end = week_start + timedelta(days=6)
        weeks.append((week_start, week_end, max(week_start, start), min(week_end, end)))
        week_start += timedelta(days=7)
    return weeks


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month."""
    if not 1 <= month <= 12:
        raise InvalidInputError("month", month, "must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def anchor_date(year: int, month: int, day: int) -> date:
    """Return the anchor date in a given year.

    Days past the end of the month clamp to the last day, so a Feb 29
    anchor falls on Feb 28 in common years.
    """
    if not 1 <= month <= 12:
        raise InvalidInputError("leave year start month", month, "must be between 1 and 12")
    if not 1 <= day <= 31:
        raise InvalidInputError("leave year start day", day, "must be between 1 and 31")
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def parse_period(value: str) -> tuple[date, date]:
    """Parse a 'YYYY-MM' month or 'YYYY-Www' ISO week into a date range."""
    match = _MONTH_RE.match(value)
    if match:
        return month_bounds(int(match.group(1)), int(match.group(2)))

    match = _ISO_WEEK_RE.match(value)
    if match:
        try:
            monday = date.fromisocalendar(int(match.group(1)), int(match.group(2)), 1)
        except ValueError as e:
            raise InvalidInputError("period", value, str(e)) from e
        return monday, monday + timedelta(days=6)

    raise InvalidInputError("period", value, "expected YYYY-MM or YYYY-Www")
