"""End conditions for a rule: COUNT and UNTIL."""

from ..values.models import DateTimeValue, DateValue


class CountCondition:
    """Accepts the first count instances it is asked about."""

    def __init__(self, count: int) -> None:
        self.remaining = count

    def __call__(self, value_utc: DateValue) -> bool:
        self.remaining -= 1
        return self.remaining >= 0

    def __repr__(self) -> str:
        return f"CountCondition(remaining={self.remaining})"


class UntilCondition:
    """Accepts instances on or before until.

    A date-only until against timed instances lasts through the end of that
    day.  A timed until against date-only instances compares by date.
    """

    def __init__(self, until: DateValue, timed_instances: bool) -> None:
        if timed_instances and not until.has_time:
            until = DateTimeValue(until.year, until.month, until.day, 23, 59, 59)
        elif not timed_instances and until.has_time:
            until = until.date_part()
        self.until = until

    def __call__(self, value_utc: DateValue) -> bool:
        return value_utc <= self.until

    def __repr__(self) -> str:
        return f"UntilCondition({self.until})"


def always_continue(value_utc: DateValue) -> bool:
    return True
