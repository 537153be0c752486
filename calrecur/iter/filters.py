"""Filters for rule parts that constrain dates instead of generating them."""

from typing import Iterable

from ..values.models import DateValue, Weekday, WeekdayNum
from ..values.time_utils import day_of_year, month_length, year_length
from .predicates import Predicate
from .util import week_start_on_or_before


def by_day_filter(days: Iterable[WeekdayNum], weeks_in_year: bool) -> Predicate:
    """Accept dates matching one of the BYDAY weekday ordinals.

    A positive ordinal n matches the nth such weekday of the month (or year
    when ``weeks_in_year``), a negative one counts from the end, and 0
    matches every such weekday.
    """
    days = tuple(days)

    def accept(date: DateValue) -> bool:
        dow = date.weekday()
        if weeks_in_year:
            n_days = year_length(date.year)
            instance = day_of_year(date.year, date.month, date.day)
        else:
            n_days = month_length(date.year, date.month)
            instance = date.day - 1
        from_start = instance // 7 + 1
        from_end = -((n_days - 1 - instance) // 7 + 1)
        for day in days:
            if day.wday is dow and day.num in (0, from_start, from_end):
                return True
        return False

    return accept


def by_month_day_filter(month_days: Iterable[int]) -> Predicate:
    """Accept dates on one of the listed days; negative days count from the end."""
    month_days = frozenset(month_days)

    def accept(date: DateValue) -> bool:
        if date.day in month_days:
            return True
        return (date.day - month_length(date.year, date.month) - 1) in month_days

    return accept


def week_interval_filter(interval: int, wkst: Weekday, dtstart: DateValue) -> Predicate:
    """Accept dates in weeks that are a multiple of interval after dtstart's week."""
    week_start = week_start_on_or_before(dtstart.date_part(), wkst)

    def accept(date: DateValue) -> bool:
        days_between = date.to_ordinal() - week_start.to_ordinal()
        return (days_between // 7) % interval == 0

    return accept


def _time_field_filter(field: str, values: Iterable[int]) -> Predicate:
    allowed = frozenset(values)

    def accept(date: DateValue) -> bool:
        return getattr(date, field, 0) in allowed

    return accept


def by_hour_filter(hours: Iterable[int]) -> Predicate:
    return _time_field_filter("hour", hours)


def by_minute_filter(minutes: Iterable[int]) -> Predicate:
    return _time_field_filter("minute", minutes)


def by_second_filter(seconds: Iterable[int]) -> Predicate:
    return _time_field_filter("second", seconds)
