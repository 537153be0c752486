"""Calendar arithmetic shared by the value types and the generator engine.

All functions are pure and operate on proleptic Gregorian years, months in
[1, 12] and days in [1, 31].  Day-of-year values are zero-based so that
January 1st is day 0, which keeps the week arithmetic in the generators free
of off-by-one adjustments.
"""

import datetime
from typing import TYPE_CHECKING, Any, Optional

from ..timezone.service import localize

if TYPE_CHECKING:
    from .models import DateValue, Weekday

_MONTH_START_DAY_OF_YEAR = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    """Return True if year has a February 29th."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def year_length(year: int) -> int:
    """Number of days in the given year."""
    return 366 if is_leap_year(year) else 365


def month_length(year: int, month: int) -> int:
    """Number of days in the given month of the given year."""
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_LENGTHS[month - 1]


def day_of_year(year: int, month: int, day: int) -> int:
    """Zero-based day of the year, in [0, 365]."""
    doy = _MONTH_START_DAY_OF_YEAR[month - 1] + day - 1
    if month > 2 and is_leap_year(year):
        doy += 1
    return doy


def first_day_of_week_in_month(year: int, month: int) -> "Weekday":
    """Weekday that the first day of the given month falls on."""
    from .models import Weekday  # noqa: PLC0415

    return Weekday.from_day_num(datetime.date(year, month, 1).weekday())


def days_between(later: "DateValue", earlier: "DateValue") -> int:
    """Number of whole days from earlier to later; negative if reversed."""
    return later.to_ordinal() - earlier.to_ordinal()


def to_utc(value: "DateValue", tzinfo: Optional[Any]) -> "DateValue":
    """Convert a local date-time in tzinfo to UTC.

    Date-only values have no instant and pass through unchanged, as does any
    value when tzinfo is None.
    """
    if tzinfo is None or not value.has_time:
        return value
    from .models import DateTimeValue  # noqa: PLC0415

    local = localize(value.to_datetime(), tzinfo)
    return DateTimeValue.from_datetime(local.astimezone(datetime.timezone.utc))


def from_utc(value: "DateValue", tzinfo: Optional[Any]) -> "DateValue":
    """Convert a UTC date-time into local wall time in tzinfo."""
    if tzinfo is None or not value.has_time:
        return value
    from .models import DateTimeValue  # noqa: PLC0415

    utc = value.to_datetime().replace(tzinfo=datetime.timezone.utc)
    return DateTimeValue.from_datetime(utc.astimezone(tzinfo))
