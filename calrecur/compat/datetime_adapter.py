"""Adapters between engine values and ``datetime.date``/``datetime.datetime``.

Engine values are UTC date-times or floating dates.  ``DateIterator``
yields timezone-aware UTC datetimes (dates become midnight UTC), while
``LocalDateIterator`` works purely in ``datetime.date``.
"""

import datetime
from typing import Any, Iterator, Optional, Union

from ..iter.factory import create_recurrence_iterator
from ..iter.iterators import RecurrenceIterator
from ..timezone.service import resolve_timezone
from ..values.models import DateTimeValue, DateValue
from ..values.time_utils import from_utc

TimezoneLike = Union[str, datetime.tzinfo, None]


def _resolve(tz: TimezoneLike) -> Optional[Any]:
    if isinstance(tz, str):
        return resolve_timezone(tz)
    return tz


def date_value_to_datetime(value: DateValue) -> datetime.datetime:
    """UTC-aware datetime for a UTC value; dates map to midnight UTC."""
    return value.to_datetime().replace(tzinfo=datetime.timezone.utc)


def datetime_to_date_value(dt: datetime.datetime, midnight_as_date: bool = False) -> DateValue:
    """Whole-second UTC value for dt; naive datetimes are taken as UTC.

    With midnight_as_date, an instant at exactly midnight UTC becomes a
    date-only value.  Dates sort before date-times on the same day, so
    advancing to such a value never skips an occurrence at midnight.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc)
    if midnight_as_date and (dt.hour, dt.minute, dt.second) == (0, 0, 0):
        return DateValue(dt.year, dt.month, dt.day)
    return DateTimeValue.from_datetime(dt)


def date_value_to_date(value: DateValue) -> datetime.date:
    return value.to_date()


def date_to_date_value(value: datetime.date) -> DateValue:
    if isinstance(value, datetime.datetime):
        value = value.date()
    return DateValue.from_date(value)


def _start_value(start: Union[datetime.date, datetime.datetime], tzinfo: Optional[Any]) -> DateValue:
    if isinstance(start, datetime.datetime):
        if start.tzinfo is not None and tzinfo is not None:
            start = start.astimezone(tzinfo)
        elif start.tzinfo is not None:
            start = start.astimezone(datetime.timezone.utc)
        return DateTimeValue.from_datetime(start)
    return DateValue.from_date(start)


class DateIterator:
    """Recurrence iterator yielding UTC-aware datetimes."""

    def __init__(self, iterator: RecurrenceIterator) -> None:
        self.iterator = iterator

    def has_next(self) -> bool:
        return self.iterator.has_next()

    def next(self) -> datetime.datetime:
        return date_value_to_datetime(self.iterator.next())

    def advance_to(self, dt: datetime.datetime) -> None:
        """Skip occurrences before dt.

        A midnight instant is treated as a date so that an occurrence on that
        date is kept.
        """
        self.iterator.advance_to(datetime_to_date_value(dt, midnight_as_date=True))

    def __iter__(self) -> Iterator[datetime.datetime]:
        return self

    def __next__(self) -> datetime.datetime:
        return self.next()


class LocalDateIterator:
    """Recurrence iterator yielding ``datetime.date`` values.

    Timed occurrences are reported as their local date in tzinfo.
    """

    def __init__(self, iterator: RecurrenceIterator, tzinfo: Optional[Any] = None) -> None:
        self.iterator = iterator
        self.tzinfo = tzinfo

    def has_next(self) -> bool:
        return self.iterator.has_next()

    def next(self) -> datetime.date:
        return date_value_to_date(from_utc(self.iterator.next(), self.tzinfo))

    def advance_to(self, value: datetime.date) -> None:
        self.iterator.advance_to(date_to_date_value(value))

    def __iter__(self) -> Iterator[datetime.date]:
        return self

    def __next__(self) -> datetime.date:
        return self.next()


def create_date_iterator(
    rdata: str,
    start: Union[datetime.date, datetime.datetime],
    tz: TimezoneLike = None,
    strict: bool = False,
) -> DateIterator:
    """Expand rdata from start, yielding UTC-aware datetimes.

    Args:
        rdata: RRULE, RDATE, EXRULE and EXDATE lines.
        start: A datetime for timed occurrences, or a date for all-day ones.
            Aware datetimes are converted to tz; naive ones are wall time in tz.
        tz: Zone name or tzinfo; None means UTC.
        strict: Raise on bad lines instead of dropping them.
    """
    tzinfo = _resolve(tz)
    iterator = create_recurrence_iterator(rdata, _start_value(start, tzinfo), tzinfo, strict)
    return DateIterator(iterator)


def create_local_date_iterator(
    rdata: str, start: datetime.date, tz: TimezoneLike = None, strict: bool = False
) -> LocalDateIterator:
    """Expand rdata from start, yielding dates."""
    tzinfo = _resolve(tz)
    iterator = create_recurrence_iterator(rdata, date_to_date_value(start), tzinfo, strict)
    return LocalDateIterator(iterator, tzinfo)
