"""Builds recurrence iterators from parsed rules, date lists and blocks.

Rules are expanded as a cascade of year, month and day generators.  Where a
rule part could be either a generator or a filter, the cheaper choice is
made: ``FREQ=YEARLY;BYDAY=TU;BYWEEKNO=1`` generates the days of week 1 and
filters them for Tuesdays rather than generating every Tuesday of the year.
"""

import logging
from typing import Any, Callable, Iterable, Iterator, Optional

from ..values.exceptions import UnsupportedFrequencyError
from ..values.models import DateTimeValue, DateValue, Frequency, RDateList, RRule, Weekday
from ..values.rdata import parse_rdata
from ..values.time_utils import to_utc
from .conditions import CountCondition, UntilCondition, always_continue
from .filters import (
    by_day_filter,
    by_hour_filter,
    by_minute_filter,
    by_month_day_filter,
    by_second_filter,
    week_interval_filter,
)
from .generators import (
    ByDayGenerator,
    ByMonthDayGenerator,
    ByMonthGenerator,
    ByWeekNoGenerator,
    ByYearDayGenerator,
    Generator,
    SerialDayGenerator,
    SerialMonthGenerator,
    SerialYearGenerator,
)
from .instance_generators import BySetPosInstanceGenerator, SerialInstanceGenerator
from .iterators import CompoundIterator, RDateIterator, RecurrenceIterator, RRuleIterator
from .predicates import Predicate, and_
from .util import week_start_on_or_before

logger = logging.getLogger(__name__)

SET_POS_FREQUENCIES = (Frequency.WEEKLY, Frequency.MONTHLY, Frequency.YEARLY)


def period_start(freq: Frequency, dtstart: DateValue, wkst: Weekday) -> DateValue:
    """Start of the BYSETPOS period containing dtstart."""
    if freq is Frequency.YEARLY:
        first = DateValue(dtstart.year, 1, 1)
    elif freq is Frequency.MONTHLY:
        first = DateValue(dtstart.year, dtstart.month, 1)
    else:
        first = week_start_on_or_before(dtstart.date_part(), wkst)
    if dtstart.has_time:
        return DateTimeValue(first.year, first.month, first.day)
    return first


def create_rrule_iterator(
    rrule: RRule, dtstart: DateValue, tzinfo: Optional[Any] = None
) -> RRuleIterator:
    """Create an iterator over the instances of one RRULE or EXRULE.

    Args:
        rrule: The parsed rule.
        dtstart: First instance, in local time when it has a time of day.
        tzinfo: Zone of dtstart; None treats dtstart as UTC.

    Raises:
        UnsupportedFrequencyError: For SECONDLY, MINUTELY and HOURLY rules.
    """
    freq = rrule.freq
    if freq.is_sub_daily:
        raise UnsupportedFrequencyError(
            f"{freq.value} rules cannot be expanded at day granularity", rrule.to_ical()
        )

    wkst = rrule.wkst
    interval = rrule.interval
    by_day = rrule.by_day
    by_month_day = rrule.by_month_day
    by_set_pos = rrule.by_set_pos if freq in SET_POS_FREQUENCIES else ()

    # Positive set positions index from the start of the period, so the
    # generators begin there and the iterator drops anything before dtstart.
    start = period_start(freq, dtstart, wkst) if by_set_pos else dtstart

    year_generator = SerialYearGenerator(interval if freq is Frequency.YEARLY else 1, start)
    month_generator: Optional[Generator] = None
    day_generator: Generator
    filters: list[Predicate] = []

    if freq is Frequency.DAILY:
        if interval == 1 and by_month_day:
            day_generator = ByMonthDayGenerator(by_month_day, start)
            by_month_day = ()
        elif interval == 1 and by_day:
            day_generator = ByDayGenerator(by_day, False, start)
            by_day = ()
        else:
            day_generator = SerialDayGenerator(interval, dtstart)
    elif freq is Frequency.WEEKLY:
        # a week may span two months, so weeks are a filter rather than a tier
        if by_day:
            day_generator = ByDayGenerator(by_day, False, start)
            by_day = ()
            if interval > 1:
                filters.append(week_interval_filter(interval, wkst, dtstart))
        else:
            day_generator = SerialDayGenerator(interval * 7, dtstart)
    elif freq is Frequency.YEARLY and rrule.by_year_day:
        day_generator = ByYearDayGenerator(rrule.by_year_day, start)
    elif by_month_day:
        day_generator = ByMonthDayGenerator(by_month_day, start)
        by_month_day = ()
    elif freq is Frequency.YEARLY and rrule.by_week_no:
        day_generator = ByWeekNoGenerator(rrule.by_week_no, wkst, start)
    elif by_day:
        weeks_in_year = freq is Frequency.YEARLY and not rrule.by_month
        day_generator = ByDayGenerator(by_day, weeks_in_year, start)
        by_day = ()
    else:
        if freq is Frequency.YEARLY:
            month_generator = ByMonthGenerator((dtstart.month,), start)
        day_generator = ByMonthDayGenerator((dtstart.day,), start)

    if by_day:
        weeks_in_year = freq is Frequency.YEARLY and not rrule.by_month
        filters.append(by_day_filter(by_day, weeks_in_year))
    if by_month_day:
        filters.append(by_month_day_filter(by_month_day))
    if dtstart.has_time:
        if rrule.by_hour:
            filters.append(by_hour_filter(rrule.by_hour))
        if rrule.by_minute:
            filters.append(by_minute_filter(rrule.by_minute))
        if rrule.by_second:
            filters.append(by_second_filter(rrule.by_second))

    if rrule.by_month:
        month_generator = ByMonthGenerator(rrule.by_month, start)
    elif month_generator is None:
        month_generator = SerialMonthGenerator(interval if freq is Frequency.MONTHLY else 1, start)

    accept = and_(*filters)
    instance_generator: Generator
    if by_set_pos:
        instance_generator = BySetPosInstanceGenerator(
            by_set_pos, freq, wkst, year_generator, month_generator, day_generator, accept
        )
    else:
        instance_generator = SerialInstanceGenerator(
            year_generator, month_generator, day_generator, accept
        )

    condition: Callable[[DateValue], bool]
    if rrule.count is not None:
        condition = CountCondition(rrule.count)
    elif rrule.until is not None:
        condition = UntilCondition(rrule.until, dtstart.has_time)
    else:
        condition = always_continue

    logger.debug(f"Created iterator for {rrule.to_ical()} from {dtstart}")
    return RRuleIterator(
        dtstart,
        start,
        tzinfo,
        condition,
        instance_generator,
        year_generator,
        month_generator,
        can_shortcut_advance=rrule.count is None and not by_set_pos,
    )


def create_rdate_iterator(rdates: RDateList) -> RDateIterator:
    return RDateIterator(rdates.dates_utc)


def _rule_iterators(
    rules: Iterable[RRule], dtstart: DateValue, tzinfo: Optional[Any], strict: bool
) -> list[RecurrenceIterator]:
    iterators: list[RecurrenceIterator] = []
    for rule in rules:
        try:
            iterators.append(create_rrule_iterator(rule, dtstart, tzinfo))
        except UnsupportedFrequencyError as e:
            if strict:
                raise
            logger.warning(f"Dropping recurrence rule: {e}")
    return iterators


def create_recurrence_iterator(
    rdata: str, dtstart: DateValue, tzinfo: Optional[Any] = None, strict: bool = False
) -> RecurrenceIterator:
    """Iterate the dates described by a block of recurrence lines.

    dtstart is always an instance unless an exclusion removes it.

    Args:
        rdata: RRULE, RDATE, EXRULE and EXDATE lines.
        dtstart: Start of the recurrence, local to tzinfo.
        tzinfo: Zone of dtstart and of floating RDATE/EXDATE values.
        strict: Raise on bad lines and unsupported rules instead of dropping them.

    Raises:
        RecurrenceError: In strict mode, for the first bad line or rule.
    """
    recurrence = parse_rdata(rdata, tzinfo, strict)
    inclusions: list[RecurrenceIterator] = [RDateIterator([to_utc(dtstart, tzinfo)])]
    inclusions.extend(_rule_iterators(recurrence.inclusion_rules, dtstart, tzinfo, strict))
    inclusions.extend(create_rdate_iterator(dates) for dates in recurrence.inclusion_dates)

    exclusions = _rule_iterators(recurrence.exclusion_rules, dtstart, tzinfo, strict)
    exclusions.extend(create_rdate_iterator(dates) for dates in recurrence.exclusion_dates)
    return CompoundIterator(inclusions, exclusions)


class RecurrenceIterable:
    """Re-iterable recurrence: every iter() parses and starts afresh."""

    def __init__(
        self, rdata: str, dtstart: DateValue, tzinfo: Optional[Any] = None, strict: bool = False
    ) -> None:
        self.rdata = rdata
        self.dtstart = dtstart
        self.tzinfo = tzinfo
        self.strict = strict
        if strict:
            # fail now rather than on first iteration
            parse_rdata(rdata, tzinfo, strict)

    def __iter__(self) -> Iterator[DateValue]:
        return create_recurrence_iterator(self.rdata, self.dtstart, self.tzinfo, self.strict)


def create_recurrence_iterable(
    rdata: str, dtstart: DateValue, tzinfo: Optional[Any] = None, strict: bool = False
) -> RecurrenceIterable:
    return RecurrenceIterable(rdata, dtstart, tzinfo, strict)


def join(first: RecurrenceIterator, *others: RecurrenceIterator) -> RecurrenceIterator:
    """Merge independent iterators into one ascending, duplicate-free stream."""
    return CompoundIterator([first, *others])
