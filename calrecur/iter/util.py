"""Ordinal sets and week arithmetic shared by generators and filters."""

from typing import Iterable

from ..values.builder import DTBuilder
from ..values.models import DateValue, Weekday


class IntSet:
    """A set of ints that reads back in ascending order."""

    def __init__(self, values: Iterable[int] = ()) -> None:
        self._values: set[int] = set(values)

    def add(self, value: int) -> None:
        self._values.add(value)

    def to_list(self) -> list[int]:
        return sorted(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values


def uniquify(values: Iterable[int]) -> tuple[int, ...]:
    """Sorted, de-duplicated copy of values."""
    return tuple(IntSet(values).to_list())


def day_num_to_date(
    dow0: Weekday, n_days: int, week_num: int, dow: Weekday, d0: int, n_days_in_month: int
) -> int:
    """Resolve a weekday ordinal to a day of the month.

    Args:
        dow0: Weekday of the first day of the window (month or year).
        n_days: Length of the window in days.
        week_num: Signed ordinal of dow within the window; negative counts
            from the end.
        dow: The weekday wanted.
        d0: Zero-based offset of the first of the month within the window.
        n_days_in_month: Length of the month.

    Returns:
        Day of the month in [1, n_days_in_month], or 0 if the resolved day
        falls outside the month.
    """
    first_date_of_dow = 1 + ((7 + dow.day_num - dow0.day_num) % 7)
    if week_num > 0:
        date = (week_num - 1) * 7 + first_date_of_dow - d0
    else:
        last_date_of_dow = first_date_of_dow + 7 * 54
        last_date_of_dow -= 7 * ((last_date_of_dow - n_days + 6) // 7)
        date = last_date_of_dow + 7 * (week_num + 1) - d0
    if date <= 0 or date > n_days_in_month:
        return 0
    return date


def days_into_week(value: DateValue, wkst: Weekday) -> int:
    """Zero-based position of value within a week starting on wkst."""
    return (7 + value.weekday().day_num - wkst.day_num) % 7


def next_week_start(value: DateValue, wkst: Weekday) -> DateValue:
    """The first wkst strictly after value."""
    builder = DTBuilder.from_value(value)
    builder.day += 7 - days_into_week(value, wkst)
    return builder.to_date()


def week_start_on_or_before(value: DateValue, wkst: Weekday) -> DateValue:
    """The latest wkst on or before value, keeping value's time of day."""
    builder = DTBuilder.from_value(value)
    builder.day -= days_into_week(value, wkst)
    return builder.to_value(value.has_time)
