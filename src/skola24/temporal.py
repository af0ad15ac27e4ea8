"""ISO week-date resolution for render service lessons.

The render service describes a lesson by (ISO week, year, weekday 1-7,
"HH:MM:SS"). Instants are naive local datetimes; no timezone is attached.
"""

import re
from datetime import date, datetime, time, timedelta

from skola24.errors import MalformedTimeString

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})$")


def parse_time(value: str) -> int:
    """Parse "HH:MM:SS" into seconds since midnight.

    Raises:
        MalformedTimeString: If the value is not HH:MM:SS or a field is out of
            range. "24:00:00" is accepted as end of day.
    """
    match = _TIME_RE.match(value.strip())
    if match is None:
        raise MalformedTimeString(value)

    hours, minutes, seconds = (int(part) for part in match.groups())
    if minutes > 59 or seconds > 59 or hours > 24:
        raise MalformedTimeString(value)
    if hours == 24 and (minutes or seconds):
        raise MalformedTimeString(value)

    return hours * 3600 + minutes * 60 + seconds


def week_start(week: int, year: int) -> datetime:
    """Monday 00:00 of ISO week `week` of ISO week-year `year`.

    Weeks outside the year's range roll over the way ISO week dates do:
    week 53 of a 52-week year is week 1 of the next year, week 0 is the last
    week of the previous year.
    """
    first_monday = date.fromisocalendar(year, 1, 1)
    monday = first_monday + timedelta(weeks=week - 1)
    return datetime.combine(monday, time.min)


def resolve_instant(week: int, year: int, weekday: int, time_of_day: str) -> datetime:
    """Absolute instant for a weekday (1 = Monday) and "HH:MM:SS" in an ISO week."""
    if not 1 <= weekday <= 7:
        raise ValueError(f"weekday must be 1-7, got {weekday}")
    return week_start(week, year) + timedelta(
        days=weekday - 1, seconds=parse_time(time_of_day)
    )


def resolve_span(
    week: int, year: int, weekday: int, time_start: str, time_end: str
) -> tuple[datetime, datetime]:
    """Start and end instants of a lesson."""
    return (
        resolve_instant(week, year, weekday, time_start),
        resolve_instant(week, year, weekday, time_end),
    )


def weeks_in_year(year: int) -> int:
    """Number of ISO weeks (52 or 53) in ISO week-year `year`."""
    # Dec 28 always falls in the last ISO week of its year
    return date(year, 12, 28).isocalendar()[1]
