"""Unit tests for rule part filters, predicates and week helpers."""

from calrecur.iter.filters import (
    by_day_filter,
    by_hour_filter,
    by_minute_filter,
    by_month_day_filter,
    by_second_filter,
    week_interval_filter,
)
from calrecur.iter.predicates import Predicate, always_false, always_true, and_, not_, or_
from calrecur.iter.util import (
    IntSet,
    day_num_to_date,
    days_into_week,
    next_week_start,
    uniquify,
    week_start_on_or_before,
)
from calrecur.values.models import DateTimeValue, DateValue, Weekday, WeekdayNum


def accept_all(accept: Predicate, dates: list[tuple[int, int, int]]) -> bool:
    return all(accept(DateValue(*date)) for date in dates)


class TestPredicates:
    """Test predicate combinators."""

    def test_constants(self) -> None:
        """Test the constant predicates."""
        value = DateValue(2006, 1, 1)
        assert always_true(value)
        assert not always_false(value)
        assert not_(always_false)(value)

    def test_and_identity(self) -> None:
        """Test and_ of nothing is always true and of one is that one."""
        assert and_() is always_true
        assert and_(always_false) is always_false

    def test_or_identity(self) -> None:
        """Test or_ of nothing is always false and of one is that one."""
        assert or_() is always_false
        assert or_(always_true) is always_true

    def test_short_circuit(self) -> None:
        """Test evaluation stops once the result is known."""
        calls = []

        def spy(value: DateValue) -> bool:
            calls.append(value)
            return True

        value = DateValue(2006, 1, 1)
        assert not and_(always_false, spy)(value)
        assert or_(always_true, spy)(value)
        assert calls == []
        assert and_(spy, spy)(value)
        assert len(calls) == 2


class TestByDayFilter:
    """Test by_day_filter."""

    def test_plain_weekdays(self) -> None:
        """Test unnumbered weekdays match every such day."""
        accept = by_day_filter([WeekdayNum(0, Weekday.TU), WeekdayNum(0, Weekday.TH)], False)
        assert accept(DateValue(1997, 9, 2))
        assert accept(DateValue(1997, 9, 4))
        assert not accept(DateValue(1997, 9, 3))

    def test_ordinals_within_month(self) -> None:
        """Test first and last ordinals within a month."""
        accept = by_day_filter([WeekdayNum(1, Weekday.FR), WeekdayNum(-1, Weekday.SU)], False)
        assert accept(DateValue(1997, 9, 5))
        assert not accept(DateValue(1997, 9, 12))
        assert accept(DateValue(1997, 9, 28))
        assert not accept(DateValue(1997, 9, 21))

    def test_ordinals_within_year(self) -> None:
        """Test ordinals counted over the year."""
        accept = by_day_filter([WeekdayNum(20, Weekday.MO)], True)
        assert accept(DateValue(1997, 5, 19))
        assert not accept(DateValue(1997, 5, 12))

    def test_time_of_day_ignored(self) -> None:
        """Test date-times are matched by their date."""
        accept = by_day_filter([WeekdayNum(0, Weekday.TU)], False)
        assert accept(DateTimeValue(1997, 9, 2, 9, 0, 0))


class TestOtherFilters:
    """Test month day, week interval and time filters."""

    def test_month_day_filter(self) -> None:
        """Test positive and negative month days."""
        accept = by_month_day_filter([13, -1])
        assert accept(DateValue(2006, 1, 13))
        assert accept(DateValue(2006, 2, 28))
        assert accept(DateValue(2008, 2, 29))
        assert not accept(DateValue(2008, 2, 28))

    def test_week_interval_filter(self) -> None:
        """Test every other week counted from dtstart's week."""
        accept = week_interval_filter(2, Weekday.SU, DateValue(1997, 9, 1))
        assert accept(DateValue(1997, 9, 1))
        assert accept(DateValue(1997, 9, 6))
        assert not accept(DateValue(1997, 9, 7))
        assert accept(DateValue(1997, 9, 15))

    def test_week_interval_depends_on_week_start(self) -> None:
        """Test the week start decides which week a Sunday falls in."""
        dtstart = DateValue(1997, 8, 5)
        assert accept_all(week_interval_filter(2, Weekday.MO, dtstart), [(1997, 8, 10), (1997, 8, 24)])
        assert accept_all(week_interval_filter(2, Weekday.SU, dtstart), [(1997, 8, 17), (1997, 8, 31)])
        assert not week_interval_filter(2, Weekday.SU, dtstart)(DateValue(1997, 8, 10))

    def test_time_filters(self) -> None:
        """Test hour, minute and second filters."""
        value = DateTimeValue(2006, 1, 1, 9, 30, 15)
        assert by_hour_filter([9, 17])(value)
        assert not by_hour_filter([10])(value)
        assert by_minute_filter([30])(value)
        assert by_second_filter([15])(value)
        assert not by_second_filter([0])(value)


class TestUtil:
    """Test ordinal sets and week arithmetic."""

    def test_int_set(self) -> None:
        """Test IntSet reads back sorted and unique."""
        values = IntSet([5, 1, 5])
        values.add(-3)
        assert values.to_list() == [-3, 1, 5]
        assert len(values) == 3
        assert 1 in values
        assert uniquify([3, 1, 3, 2]) == (1, 2, 3)

    def test_day_num_to_date_within_month(self) -> None:
        """Test weekday ordinals resolve to days of January 2006."""
        # January 2006 starts on a Sunday
        assert day_num_to_date(Weekday.SU, 31, 1, Weekday.MO, 0, 31) == 2
        assert day_num_to_date(Weekday.SU, 31, 5, Weekday.MO, 0, 31) == 30
        assert day_num_to_date(Weekday.SU, 31, -1, Weekday.TU, 0, 31) == 31
        assert day_num_to_date(Weekday.SU, 31, 6, Weekday.MO, 0, 31) == 0

    def test_days_into_week(self) -> None:
        """Test positions within weeks starting on different days."""
        tuesday = DateValue(1997, 9, 2)
        assert days_into_week(tuesday, Weekday.MO) == 1
        assert days_into_week(tuesday, Weekday.SU) == 2
        assert days_into_week(tuesday, Weekday.TU) == 0

    def test_next_week_start(self) -> None:
        """Test the next week start is always strictly later."""
        assert next_week_start(DateValue(1997, 9, 2), Weekday.MO) == DateValue(1997, 9, 8)
        assert next_week_start(DateValue(1997, 9, 1), Weekday.MO) == DateValue(1997, 9, 8)
        assert next_week_start(DateValue(1997, 12, 28), Weekday.MO) == DateValue(1997, 12, 29)

    def test_week_start_on_or_before(self) -> None:
        """Test the week start keeps the time of day."""
        assert week_start_on_or_before(DateValue(1997, 9, 1), Weekday.MO) == DateValue(1997, 9, 1)
        assert week_start_on_or_before(DateTimeValue(1998, 1, 1, 9, 0, 0), Weekday.SU) == DateTimeValue(
            1997, 12, 28, 9, 0, 0
        )
