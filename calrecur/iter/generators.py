"""Field generators: one stateful object per year, month or day tier.

Every generator implements ``advance(builder)``.  On ``Step.OK`` it has
written the next value of the field it owns into the builder.  On
``Step.EXHAUSTED`` the containing period (as set on the builder by the
coarser tiers) has no more values, and the caller must advance the next
coarser tier and call again.  Only the year tier can return
``Step.SHORT_CIRCUIT``, which means the rule has produced nothing for so long
that it is assumed to produce nothing ever again.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable

from ..values.builder import DTBuilder
from ..values.models import DateValue, Weekday, WeekdayNum
from ..values.time_utils import (
    day_of_year,
    first_day_of_week_in_month,
    month_length,
    year_length,
)
from .util import IntSet, day_num_to_date, uniquify

# Years the year tier may produce without any instance being emitted.  For
# FREQ=YEARLY;INTERVAL=4 this spans 400 calendar years.
MAX_YEARS_BETWEEN_INSTANCES = 100


class Step(Enum):
    """Result of advancing a generator."""

    OK = "ok"
    EXHAUSTED = "exhausted"
    SHORT_CIRCUIT = "short_circuit"


class Generator(ABC):
    """Produces successive values for one builder field."""

    @abstractmethod
    def advance(self, builder: DTBuilder) -> Step:
        """Write the next value into builder, or report why there is none."""

    def __repr__(self) -> str:
        return type(self).__name__


class ThrottledGenerator(Generator):
    """A generator that gives up after too many steps with no output."""

    @abstractmethod
    def work_done(self) -> None:
        """Signal that an instance was produced downstream."""


class SerialYearGenerator(ThrottledGenerator):
    """Years counting up from the start year in steps of interval.

    Guards against rules such as ``FREQ=YEARLY;BYMONTHDAY=30;BYMONTH=2``
    that can never produce a date.
    """

    def __init__(self, interval: int, start: DateValue) -> None:
        self.interval = interval
        self.year = start.year - interval
        self.throttle = MAX_YEARS_BETWEEN_INSTANCES

    def advance(self, builder: DTBuilder) -> Step:
        self.throttle -= 1
        if self.throttle < 0:
            return Step.SHORT_CIRCUIT
        self.year += self.interval
        builder.year = self.year
        return Step.OK

    def work_done(self) -> None:
        self.throttle = MAX_YEARS_BETWEEN_INSTANCES

    def __repr__(self) -> str:
        return f"SerialYearGenerator({self.interval})"


class SerialMonthGenerator(Generator):
    """Months of the builder's year that are a multiple of interval from start."""

    def __init__(self, interval: int, start: DateValue) -> None:
        self.interval = interval
        self.year = start.year
        self.month = start.month - interval
        while self.month < 1:
            self.month += 12
            self.year -= 1

    def advance(self, builder: DTBuilder) -> Step:
        if self.year != builder.year:
            months_between = (builder.year - self.year) * 12 - (self.month - 1)
            next_month = ((self.interval - (months_between % self.interval)) % self.interval) + 1
            if next_month > 12:
                # keep the old year so the distance is right on the next call
                return Step.EXHAUSTED
            self.year = builder.year
        else:
            next_month = self.month + self.interval
            if next_month > 12:
                return Step.EXHAUSTED
        self.month = builder.month = next_month
        return Step.OK

    def __repr__(self) -> str:
        return f"SerialMonthGenerator({self.interval})"


class SerialDayGenerator(Generator):
    """Days of the builder's month that are a multiple of interval from start."""

    def __init__(self, interval: int, start: DateValue) -> None:
        self.interval = interval
        builder = DTBuilder.from_value(start)
        builder.day -= interval
        before_start = builder.to_date()
        self.year = before_start.year
        self.month = before_start.month
        self.day = before_start.day
        self.n_days = month_length(self.year, self.month)

    def advance(self, builder: DTBuilder) -> Step:
        if self.year == builder.year and self.month == builder.month:
            next_day = self.day + self.interval
            if next_day > self.n_days:
                return Step.EXHAUSTED
        else:
            self.n_days = month_length(builder.year, builder.month)
            if self.interval != 1:
                first = DateValue(builder.year, builder.month, 1)
                last = DateValue(self.year, self.month, self.day)
                days_between = first.to_ordinal() - last.to_ordinal()
                next_day = ((self.interval - (days_between % self.interval)) % self.interval) + 1
                if next_day > self.n_days:
                    # keep the old month so the distance is right on the next call
                    return Step.EXHAUSTED
            else:
                next_day = 1
            self.year = builder.year
            self.month = builder.month
        self.day = builder.day = next_day
        return Step.OK

    def __repr__(self) -> str:
        return f"SerialDayGenerator({self.interval})"


class ByYearGenerator(Generator):
    """The listed years, ascending, starting with the first not before start."""

    def __init__(self, years: Iterable[int], start: DateValue) -> None:
        self.years = uniquify(years)
        self.index = 0
        while self.index < len(self.years) and self.years[self.index] < start.year:
            self.index += 1

    def advance(self, builder: DTBuilder) -> Step:
        if self.index >= len(self.years):
            return Step.EXHAUSTED
        builder.year = self.years[self.index]
        self.index += 1
        return Step.OK


class ByMonthGenerator(Generator):
    """The listed months of each year, ascending."""

    def __init__(self, months: Iterable[int], start: DateValue) -> None:
        self.months = uniquify(months)
        self.year = start.year
        self.index = 0

    def advance(self, builder: DTBuilder) -> Step:
        if self.year != builder.year:
            self.index = 0
            self.year = builder.year
        if self.index >= len(self.months):
            return Step.EXHAUSTED
        builder.month = self.months[self.index]
        self.index += 1
        return Step.OK


class _DayListGenerator(Generator):
    """A day generator that recomputes its days whenever the month changes."""

    def __init__(self, start: DateValue) -> None:
        self.year = start.year
        self.month = start.month
        self.dates: list[int] = []
        self.index = 0

    @abstractmethod
    def _compute_dates(self, year_changed: bool) -> list[int]:
        """Days of the current month, ascending."""

    def _check_period(self, builder: DTBuilder) -> None:
        if self.year != builder.year or self.month != builder.month:
            year_changed = self.year != builder.year
            self.year = builder.year
            self.month = builder.month
            self.dates = self._compute_dates(year_changed)
            self.index = 0

    def advance(self, builder: DTBuilder) -> Step:
        self._check_period(builder)
        if self.index >= len(self.dates):
            return Step.EXHAUSTED
        builder.day = self.dates[self.index]
        self.index += 1
        return Step.OK


class ByMonthDayGenerator(_DayListGenerator):
    """The listed days of each month; negative days count back from the end."""

    def __init__(self, dates: Iterable[int], start: DateValue) -> None:
        super().__init__(start)
        self.month_days = uniquify(dates)
        self.dates = self._compute_dates(True)

    def _compute_dates(self, year_changed: bool) -> list[int]:
        n_days = month_length(self.year, self.month)
        dates = IntSet()
        for date in self.month_days:
            if date < 0:
                date += n_days + 1
            if 1 <= date <= n_days:
                dates.add(date)
        return dates.to_list()


class ByDayGenerator(_DayListGenerator):
    """Days of the month matching BYDAY weekday ordinals.

    When ``weeks_in_year`` is set the ordinals count weekdays within the year
    (``20MO`` is the 20th Monday of the year), otherwise within the month.
    """

    def __init__(self, days: Iterable[WeekdayNum], weeks_in_year: bool, start: DateValue) -> None:
        super().__init__(start)
        self.days = tuple(days)
        self.weeks_in_year = weeks_in_year
        self.dates = self._compute_dates(True)

    def _compute_dates(self, year_changed: bool) -> list[int]:
        n_days_in_month = month_length(self.year, self.month)
        if self.weeks_in_year:
            n_days = year_length(self.year)
            dow0 = first_day_of_week_in_month(self.year, 1)
            d0 = day_of_year(self.year, self.month, 1)
        else:
            n_days = n_days_in_month
            dow0 = first_day_of_week_in_month(self.year, self.month)
            d0 = 0

        # not after the first week of the month
        w0 = d0 // 7
        dates = IntSet()
        for day in self.days:
            if day.num:
                week_nums = [day.num]
            else:
                week_nums = list(range(w0, w0 + 7))
            for week_num in week_nums:
                date = day_num_to_date(dow0, n_days, week_num, day.wday, d0, n_days_in_month)
                if date:
                    dates.add(date)
        return dates.to_list()

    def __repr__(self) -> str:
        return f"ByDayGenerator({','.join(day.to_ical() for day in self.days)})"


class ByWeekNoGenerator(_DayListGenerator):
    """Days of the month falling in the listed weeks of the year.

    Week 1 is the first week, starting on wkst, with at least four days in the
    year.  Days of the year before week 1 belong to no week.
    """

    def __init__(self, week_nos: Iterable[int], wkst: Weekday, start: DateValue) -> None:
        super().__init__(start)
        self.week_nos = uniquify(week_nos)
        self.wkst = wkst
        self.weeks_in_year = 0
        # may be negative when week 1 starts in the previous year
        self.doy_start_week1 = 0
        self._check_year()
        self.dates = self._compute_dates(False)

    def _check_year(self) -> None:
        dow_jan1 = first_day_of_week_in_month(self.year, 1)
        n_days_in_first_week = 7 - ((7 + dow_jan1.day_num - self.wkst.day_num) % 7)
        n_orphaned_days = 0
        if n_days_in_first_week < 4:
            n_orphaned_days = n_days_in_first_week
            n_days_in_first_week = 7
        self.doy_start_week1 = n_days_in_first_week - 7 + n_orphaned_days
        self.weeks_in_year = (year_length(self.year) - n_orphaned_days + 6) // 7

    def _compute_dates(self, year_changed: bool) -> list[int]:
        if year_changed:
            self._check_year()
        doy_month1 = day_of_year(self.year, self.month, 1)
        n_days = month_length(self.year, self.month)
        dates = IntSet()
        for week_no in self.week_nos:
            if week_no < 0:
                week_no += self.weeks_in_year + 1
            if not 1 <= week_no <= self.weeks_in_year:
                continue
            for d in range(7):
                date = (week_no - 1) * 7 + d + self.doy_start_week1 - doy_month1 + 1
                if 1 <= date <= n_days:
                    dates.add(date)
        return dates.to_list()


class ByYearDayGenerator(_DayListGenerator):
    """Days of the month that are one of the listed days of the year."""

    def __init__(self, year_days: Iterable[int], start: DateValue) -> None:
        super().__init__(start)
        self.year_days = uniquify(year_days)
        self.dates = self._compute_dates(True)

    def _compute_dates(self, year_changed: bool) -> list[int]:
        doy_month1 = day_of_year(self.year, self.month, 1)
        n_days = month_length(self.year, self.month)
        n_year_days = year_length(self.year)
        dates = IntSet()
        for year_day in self.year_days:
            if year_day < 0:
                year_day += n_year_days + 1
            date = year_day - doy_month1
            if 1 <= date <= n_days:
                dates.add(date)
        return dates.to_list()

