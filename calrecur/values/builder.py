"""Mutable date-time accumulator written to by the generator tiers."""

import datetime

from .models import DateTimeValue, DateValue


class DTBuilder:
    """Year, month, day and time fields that may hold out-of-range values.

    Generators write one field each; ``normalize`` carries any overflow into
    the next larger field.  Conversions never mutate the builder.
    """

    __slots__ = ("year", "month", "day", "hour", "minute", "second")

    def __init__(
        self,
        year: int = 0,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
    ) -> None:
        self.year = year
        self.month = month
        self.day = day
        self.hour = hour
        self.minute = minute
        self.second = second

    @classmethod
    def from_value(cls, value: DateValue) -> "DTBuilder":
        if value.has_time:
            return cls(value.year, value.month, value.day, value.hour, value.minute, value.second)  # type: ignore[attr-defined]
        return cls(value.year, value.month, value.day)

    def normalize(self) -> None:
        """Carry overflow so every field is in its canonical range."""
        carry, self.second = divmod(self.second, 60)
        self.minute += carry
        carry, self.minute = divmod(self.minute, 60)
        self.hour += carry
        carry, self.hour = divmod(self.hour, 24)
        self.day += carry

        carry, month0 = divmod(self.month - 1, 12)
        self.year += carry
        self.month = month0 + 1

        # day may be zero, negative or past the month end
        first = datetime.date(self.year, self.month, 1)
        resolved = datetime.date.fromordinal(first.toordinal() + self.day - 1)
        self.year, self.month, self.day = resolved.year, resolved.month, resolved.day

    def _normalized_copy(self) -> "DTBuilder":
        copy = DTBuilder(self.year, self.month, self.day, self.hour, self.minute, self.second)
        copy.normalize()
        return copy

    def to_date(self) -> DateValue:
        b = self._normalized_copy()
        return DateValue(b.year, b.month, b.day)

    def to_date_time(self) -> DateTimeValue:
        b = self._normalized_copy()
        return DateTimeValue(b.year, b.month, b.day, b.hour, b.minute, b.second)

    def to_value(self, has_time: bool) -> DateValue:
        return self.to_date_time() if has_time else self.to_date()

    def compare_to(self, value: DateValue) -> int:
        """Three-way comparison of the builder's fields with value."""
        own = (self.year, self.month, self.day, self.hour, self.minute, self.second)
        if value.has_time:
            other = (value.year, value.month, value.day, value.hour, value.minute, value.second)  # type: ignore[attr-defined]
        else:
            other = (value.year, value.month, value.day, 0, 0, 0)
        return (own > other) - (own < other)

    def __repr__(self) -> str:
        return (
            f"DTBuilder({self.year:04d}-{self.month:02d}-{self.day:02d} "
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d})"
        )
