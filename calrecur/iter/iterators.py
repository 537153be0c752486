"""Pull-based cursors over recurrence instances, in UTC."""

import bisect
import heapq
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional

from ..utils import logging as _logging  # noqa: F401  installs Logger.verbose
from ..values.builder import DTBuilder
from ..values.models import DateTimeValue, DateValue
from ..values.time_utils import from_utc, to_utc
from .generators import Generator, Step, ThrottledGenerator

logger = logging.getLogger(__name__)


class RecurrenceIterator(ABC):
    """An ascending stream of UTC date values with skip-ahead.

    Also a Python iterator, so ``for value in it`` and ``next(it)`` work.
    """

    @abstractmethod
    def has_next(self) -> bool:
        """True if another value is available."""

    @abstractmethod
    def peek(self) -> DateValue:
        """The next value, without consuming it.

        Raises:
            StopIteration: If the stream is exhausted.
        """

    @abstractmethod
    def advance_to(self, date_utc: DateValue) -> None:
        """Skip every value before date_utc."""

    def next(self) -> DateValue:
        """Consume and return the next value.

        Raises:
            StopIteration: If the stream is exhausted.
        """
        value = self.peek()
        self._consume()
        return value

    @abstractmethod
    def _consume(self) -> None:
        """Drop the value peek() returned."""

    def __iter__(self) -> "RecurrenceIterator":
        return self

    def __next__(self) -> DateValue:
        return self.next()


class RRuleIterator(RecurrenceIterator):
    """Drives one generator chain and applies dtstart and the end condition."""

    def __init__(
        self,
        dtstart: DateValue,
        start: DateValue,
        tzinfo: Optional[Any],
        condition: Callable[[DateValue], bool],
        instance_generator: Generator,
        year_generator: ThrottledGenerator,
        month_generator: Generator,
        can_shortcut_advance: bool,
    ) -> None:
        self.dtstart = dtstart
        self.tzinfo = tzinfo
        self.condition = condition
        self.instance_generator = instance_generator
        self.year_generator = year_generator
        self.month_generator = month_generator
        self.can_shortcut_advance = can_shortcut_advance
        self.timed = dtstart.has_time

        self._dtstart_utc = to_utc(dtstart, tzinfo)
        self._last_utc: Optional[DateValue] = None
        self._pending_utc: Optional[DateValue] = None
        self._done = False

        self.builder = DTBuilder.from_value(start)
        if self.timed:
            self.builder.hour = dtstart.hour  # type: ignore[attr-defined]
            self.builder.minute = dtstart.minute  # type: ignore[attr-defined]
            self.builder.second = dtstart.second  # type: ignore[attr-defined]

        # position the year and month tiers so the first pull starts at the day tier
        step = self.year_generator.advance(self.builder)
        while step is Step.OK and self.month_generator.advance(self.builder) is not Step.OK:
            step = self.year_generator.advance(self.builder)
        if step is not Step.OK:
            self._done = True

    def _to_utc(self) -> DateValue:
        if self.timed:
            return to_utc(self.builder.to_date_time(), self.tzinfo)
        return self.builder.to_date()

    def _generate_instance(self) -> Optional[DateValue]:
        while True:
            step = self.instance_generator.advance(self.builder)
            if step is Step.SHORT_CIRCUIT:
                logger.verbose(  # type: ignore[attr-defined]
                    f"Recurrence short-circuited after {self.builder!r}; treating as exhausted"
                )
                return None
            if step is not Step.OK:
                return None
            value_utc = self._to_utc()
            if value_utc < self._dtstart_utc:
                continue
            if self._last_utc is not None and value_utc <= self._last_utc:
                continue
            return value_utc

    def _fetch_next(self) -> None:
        if self._pending_utc is not None or self._done:
            return
        value_utc = self._generate_instance()
        if value_utc is not None and self.condition(value_utc):
            self._pending_utc = value_utc
            self._last_utc = value_utc
            self.year_generator.work_done()
        else:
            self._done = True

    def has_next(self) -> bool:
        self._fetch_next()
        return self._pending_utc is not None

    def peek(self) -> DateValue:
        self._fetch_next()
        if self._pending_utc is None:
            raise StopIteration("recurrence exhausted")
        return self._pending_utc

    def _consume(self) -> None:
        self._pending_utc = None

    def advance_to(self, date_utc: DateValue) -> None:
        if self._done:
            return
        if self._pending_utc is not None:
            if self._pending_utc >= date_utc:
                return
            self._pending_utc = None

        if self.can_shortcut_advance:
            self._skip_periods(self._local_target(date_utc))
            if self._done:
                return

        while self.has_next() and self.peek() < date_utc:
            self._consume()

    def _local_target(self, date_utc: DateValue) -> DateValue:
        """Local wall time of date_utc, in the zone the tiers count in."""
        if not self.timed:
            return date_utc
        if not date_utc.has_time:
            # a date bound starts at UTC midnight, which can be the previous local day
            date_utc = DateTimeValue(date_utc.year, date_utc.month, date_utc.day)
        return from_utc(date_utc, self.tzinfo)

    def _skip_periods(self, target: DateValue) -> None:
        """Move the year and month tiers up to target without generating days."""
        builder = self.builder
        if builder.year < target.year:
            while builder.year < target.year:
                if self.year_generator.advance(builder) is not Step.OK:
                    self._done = True
                    return
                self.year_generator.work_done()
            while self.month_generator.advance(builder) is not Step.OK:
                if self.year_generator.advance(builder) is not Step.OK:
                    self._done = True
                    return
        while builder.year == target.year and builder.month < target.month:
            while self.month_generator.advance(builder) is not Step.OK:
                if self.year_generator.advance(builder) is not Step.OK:
                    self._done = True
                    return

    def __repr__(self) -> str:
        return f"RRuleIterator(dtstart={self.dtstart}, generator={self.instance_generator!r})"


class RDateIterator(RecurrenceIterator):
    """Iterates a fixed set of UTC dates in ascending order."""

    def __init__(self, dates_utc: Iterable[DateValue]) -> None:
        self.dates = sorted(set(dates_utc))
        self.index = 0

    def has_next(self) -> bool:
        return self.index < len(self.dates)

    def peek(self) -> DateValue:
        if self.index >= len(self.dates):
            raise StopIteration("date list exhausted")
        return self.dates[self.index]

    def _consume(self) -> None:
        self.index += 1

    def advance_to(self, date_utc: DateValue) -> None:
        self.index = max(self.index, bisect.bisect_left(self.dates, date_utc))


class CompoundIterator(RecurrenceIterator):
    """Merges inclusions, drops duplicates and drops anything an exclusion yields."""

    def __init__(
        self,
        inclusions: Iterable[RecurrenceIterator],
        exclusions: Iterable[RecurrenceIterator] = (),
    ) -> None:
        self.inclusions = list(inclusions)
        self.exclusions = list(exclusions)
        self._heap: list[tuple[DateValue, int, RecurrenceIterator]] = []
        self._pending: Optional[DateValue] = None
        self._last: Optional[DateValue] = None
        self._rebuild_heap()

    def _rebuild_heap(self) -> None:
        self._heap = [
            (it.peek(), index, it) for index, it in enumerate(self.inclusions) if it.has_next()
        ]
        heapq.heapify(self._heap)

    def _pop_candidate(self) -> Optional[DateValue]:
        if not self._heap:
            return None
        value, index, it = heapq.heappop(self._heap)
        it.next()
        if it.has_next():
            heapq.heappush(self._heap, (it.peek(), index, it))
        return value

    def _is_excluded(self, value: DateValue) -> bool:
        for exclusion in self.exclusions:
            exclusion.advance_to(value)
            if exclusion.has_next() and exclusion.peek() == value:
                return True
        return False

    def _fetch_next(self) -> None:
        while self._pending is None:
            value = self._pop_candidate()
            if value is None:
                return
            if self._last is not None and value == self._last:
                continue
            self._last = value
            if not self._is_excluded(value):
                self._pending = value

    def has_next(self) -> bool:
        self._fetch_next()
        return self._pending is not None

    def peek(self) -> DateValue:
        self._fetch_next()
        if self._pending is None:
            raise StopIteration("recurrence exhausted")
        return self._pending

    def _consume(self) -> None:
        self._pending = None

    def advance_to(self, date_utc: DateValue) -> None:
        if self._pending is not None:
            if self._pending >= date_utc:
                return
            self._pending = None
        for it in self.inclusions:
            it.advance_to(date_utc)
        self._rebuild_heap()
