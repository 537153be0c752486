"""Generators that cascade the field tiers into whole dates."""

import logging
from enum import Enum, auto
from typing import Optional

from ..values.builder import DTBuilder
from ..values.models import DateValue, Frequency, Weekday
from ..values.time_utils import days_between
from .generators import Generator, Step
from .predicates import Predicate, always_true
from .util import days_into_week, next_week_start, uniquify

logger = logging.getLogger(__name__)


class SerialInstanceGenerator(Generator):
    """Pulls days, then months, then years until a date passes the filter."""

    def __init__(
        self,
        year_generator: Generator,
        month_generator: Generator,
        day_generator: Generator,
        accept: Predicate = always_true,
    ) -> None:
        self.year_generator = year_generator
        self.month_generator = month_generator
        self.day_generator = day_generator
        self.accept = accept

    def advance(self, builder: DTBuilder) -> Step:
        while True:
            while self.day_generator.advance(builder) is not Step.OK:
                while True:
                    step = self.month_generator.advance(builder)
                    if step is Step.OK:
                        break
                    step = self.year_generator.advance(builder)
                    if step is not Step.OK:
                        return step
            if self.accept(builder.to_date_time()):
                return Step.OK


class SetPosState(Enum):
    """Where the set-position resolver is between periods."""

    START = auto()
    # the held-back date is the first date of the next period
    SEEDED = auto()
    # the last period stopped early; skip what is left of it
    CUT_SHORT = auto()
    # candidates of the current period are being emitted
    RESOLVED = auto()
    EXHAUSTED = auto()


def in_same_period(freq: Frequency, wkst: Weekday, d0: DateValue, d: DateValue) -> bool:
    """True if d, which is not before d0, falls in the same BYSETPOS period."""
    if freq is Frequency.YEARLY:
        return d0.year == d.year
    if freq is Frequency.MONTHLY:
        return d0.year == d.year and d0.month == d.month
    if freq is Frequency.WEEKLY:
        # no whole week between them and d later in the week than d0
        return days_between(d, d0) < 7 and days_into_week(d, wkst) > days_into_week(d0, wkst)
    return False


class BySetPosInstanceGenerator(Generator):
    """Collects each period's dates and emits only the requested positions.

    Positive positions count from the start of the period and negative ones
    from its end.  When every position is positive, collection stops once
    the largest position is reached.
    """

    def __init__(
        self,
        set_pos: tuple[int, ...],
        freq: Frequency,
        wkst: Weekday,
        year_generator: Generator,
        month_generator: Generator,
        day_generator: Generator,
        accept: Predicate = always_true,
    ) -> None:
        if not set_pos:
            raise ValueError("BYSETPOS needs at least one position")
        self.set_pos = uniquify(set_pos)
        self.freq = freq
        self.wkst = wkst
        self.year_generator = year_generator
        self.month_generator = month_generator
        self.serial = SerialInstanceGenerator(
            year_generator, month_generator, day_generator, accept
        )
        self.all_positive = self.set_pos[0] > 0
        self.max_pos = self.set_pos[-1]

        self.state = SetPosState.START
        self._following = SetPosState.EXHAUSTED
        self._pushback: Optional[DateValue] = None
        self._candidates: list[DateValue] = []
        self._index = 0

    def advance(self, builder: DTBuilder) -> Step:
        while self.state is not SetPosState.RESOLVED or self._index >= len(self._candidates):
            if self.state is SetPosState.RESOLVED:
                self.state = self._following
            if self.state is SetPosState.EXHAUSTED:
                return Step.EXHAUSTED

            step = self._collect_period(builder)
            if step is not Step.OK:
                self.state = SetPosState.EXHAUSTED
                return step

        date = self._candidates[self._index]
        self._index += 1
        builder.year, builder.month, builder.day = date.year, date.month, date.day
        return Step.OK

    def _start_period(self, builder: DTBuilder) -> tuple[Step, Optional[DateValue]]:
        """Position builder at the start of the next period.

        Returns the first date of the period when it is already known.
        """
        if self.state is SetPosState.SEEDED:
            d0 = self._pushback
            self._pushback = None
            assert d0 is not None
            builder.year, builder.month, builder.day = d0.year, d0.month, d0.day
            return Step.OK, d0

        if self.state is SetPosState.CUT_SHORT:
            if self.freq is Frequency.YEARLY:
                step = self.year_generator.advance(builder)
                if step is not Step.OK:
                    return step, None
            if self.freq in (Frequency.YEARLY, Frequency.MONTHLY):
                while self.month_generator.advance(builder) is not Step.OK:
                    step = self.year_generator.advance(builder)
                    if step is not Step.OK:
                        return step, None
                return Step.OK, None
            if self.freq is Frequency.WEEKLY:
                next_week = next_week_start(builder.to_date(), self.wkst)
                while True:
                    step = self.serial.advance(builder)
                    if step is not Step.OK:
                        return step, None
                    if builder.compare_to(next_week) >= 0:
                        return Step.OK, builder.to_date()

        return Step.OK, None

    def _collect_period(self, builder: DTBuilder) -> Step:
        """Gather one period's dates and resolve them to candidates.

        Returns EXHAUSTED only when the stream ended with nothing left to
        emit; a final partial period is still resolved and emitted.
        """
        step, d0 = self._start_period(builder)
        if step is not Step.OK:
            return step

        dates: list[DateValue] = [d0] if d0 is not None else []
        limit = self.max_pos if self.all_positive else None
        exhausted = False
        pushback: Optional[DateValue] = None
        while limit is None or len(dates) < limit:
            step = self.serial.advance(builder)
            if step is Step.SHORT_CIRCUIT:
                # negative positions need the whole period
                logger.debug("Set position period cut off by the year throttle")
                return step
            if step is Step.EXHAUSTED:
                exhausted = True
                break
            date = builder.to_date()
            if d0 is None:
                d0 = date
            elif not in_same_period(self.freq, self.wkst, d0, date):
                pushback = date
                break
            dates.append(date)

        if pushback is not None:
            self._pushback = pushback
            self._following = SetPosState.SEEDED
        elif exhausted:
            self._following = SetPosState.EXHAUSTED
        else:
            self._following = SetPosState.CUT_SHORT

        self._candidates = self._resolve(dates)
        self._index = 0
        self.state = SetPosState.RESOLVED
        return Step.OK

    def _resolve(self, dates: list[DateValue]) -> list[DateValue]:
        size = len(dates)
        if self.all_positive:
            positions = self.set_pos
        else:
            positions = uniquify(p if p > 0 else size + p + 1 for p in self.set_pos)
        return [dates[p - 1] for p in positions if 1 <= p <= size]
