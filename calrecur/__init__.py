"""calrecur - RFC 5545 recurrence expansion.

Parses RRULE, RDATE, EXRULE and EXDATE content lines and lazily generates the
dates they describe, in ascending order.
"""

__version__ = "1.0.0"

from .compat import create_date_iterator, create_local_date_iterator
from .iter import (
    RecurrenceIterator,
    create_recurrence_iterable,
    create_recurrence_iterator,
    create_rrule_iterator,
    join,
)
from .values import (
    DateTimeValue,
    DateValue,
    Frequency,
    Recurrence,
    RecurrenceError,
    RecurrenceParseError,
    RRule,
    Weekday,
    parse_rdata,
    parse_rrule,
)

__all__ = [
    "DateTimeValue",
    "DateValue",
    "Frequency",
    "Recurrence",
    "RecurrenceError",
    "RecurrenceIterator",
    "RecurrenceParseError",
    "RRule",
    "Weekday",
    "__version__",
    "create_date_iterator",
    "create_local_date_iterator",
    "create_recurrence_iterable",
    "create_recurrence_iterator",
    "create_rrule_iterator",
    "join",
    "parse_rdata",
    "parse_rrule",
]
