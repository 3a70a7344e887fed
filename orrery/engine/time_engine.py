"""
Julian Date conversions for the Orrery simulation core.

Simulated time is a continuous Julian Date (JD): a floating-point count
of days since the beginning of the Julian Period. Everything here is a
pure function of its arguments. Nothing here holds state, and the only
function that looks at the real world is current_julian_date().

J2000.0 epoch: 2000-01-01 12:00 TT = JD 2451545.0
"""

from __future__ import annotations

import math
import time
from datetime import UTC, datetime, timedelta
from typing import NamedTuple

J2000 = 2451545.0
UNIX_EPOCH_JD = 2440587.5
MILLIS_PER_DAY = 86_400_000
SECONDS_PER_DAY = 86_400

# First day of the Gregorian calendar (1582-10-15)
GREGORIAN_START_JD = 2299161

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class CalendarDate(NamedTuple):
    """Broken-down UTC calendar date. Years may be zero or negative."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int


def unix_millis_to_julian_date(unix_millis: float) -> float:
    return unix_millis / MILLIS_PER_DAY + UNIX_EPOCH_JD


def julian_date_to_unix_millis(jd: float) -> float:
    return (jd - UNIX_EPOCH_JD) * MILLIS_PER_DAY


def unix_millis_to_datetime(unix_millis: float) -> datetime:
    return _UNIX_EPOCH + timedelta(milliseconds=unix_millis)


def current_unix_millis() -> float:
    """Wall-clock time in milliseconds since the Unix epoch."""
    return time.time() * 1000.0


def current_julian_date() -> float:
    """
    Return the present moment as a Julian Date.

    JD = unix_millis / 86400000 + 2440587.5
    """
    return unix_millis_to_julian_date(current_unix_millis())


def datetime_to_julian_date(dt: datetime) -> float:
    """
    Convert a datetime to a Julian Date.

    Naive datetimes are interpreted as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    millis = (dt - _UNIX_EPOCH) / timedelta(milliseconds=1)
    return unix_millis_to_julian_date(millis)


def julian_date_to_calendar(jd: float) -> CalendarDate:
    """
    Break a Julian Date down into calendar fields.

    Follows Meeus, "Astronomical Algorithms" 2nd ed., ch. 7. Dates before
    the Gregorian reform are expressed in the Julian calendar, which is
    what makes this usable for any JD, including ones datetime can't hold.
    """
    z = math.floor(jd + 0.5)

    # Whole seconds: float drift from repeated ticks must not floor 00:00 to 23:59
    day_seconds = round((jd + 0.5 - z) * SECONDS_PER_DAY)
    if day_seconds >= SECONDS_PER_DAY:
        z += 1
        day_seconds -= SECONDS_PER_DAY

    if z < GREGORIAN_START_JD:
        a = z
    else:
        alpha = math.floor((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - math.floor(alpha / 4)

    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    hours, rest = divmod(day_seconds, 3600)
    minutes, seconds = divmod(rest, 60)

    return CalendarDate(int(year), int(month), int(day), int(hours), int(minutes), int(seconds))


def julian_date_to_datetime(jd: float) -> datetime:
    """
    Convert a Julian Date to an aware UTC datetime.

    Raises:
        ValueError: if the date falls outside what datetime can represent
    """
    try:
        return unix_millis_to_datetime(julian_date_to_unix_millis(jd))
    except OverflowError as exc:
        raise ValueError(f"Julian Date {jd} is outside the datetime range") from exc


def format_julian_date(jd: float) -> str:
    """
    Format a Julian Date for display, e.g. "2024 Jan 15 12:30 UTC".
    """
    cal = julian_date_to_calendar(jd)
    month = MONTH_ABBREVIATIONS[cal.month - 1]
    return f"{cal.year} {month} {cal.day:02d} {cal.hour:02d}:{cal.minute:02d} UTC"


def julian_centuries(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (jd - J2000) / 36525.0
