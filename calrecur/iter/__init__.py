"""Recurrence expansion: field generators, filters and iterators."""

from .factory import (
    RecurrenceIterable,
    create_recurrence_iterable,
    create_recurrence_iterator,
    create_rrule_iterator,
    join,
)
from .generators import MAX_YEARS_BETWEEN_INSTANCES, Generator, Step
from .iterators import CompoundIterator, RDateIterator, RecurrenceIterator, RRuleIterator

__all__ = [
    "MAX_YEARS_BETWEEN_INSTANCES",
    "CompoundIterator",
    "Generator",
    "RDateIterator",
    "RRuleIterator",
    "RecurrenceIterable",
    "RecurrenceIterator",
    "Step",
    "create_recurrence_iterable",
    "create_recurrence_iterator",
    "create_rrule_iterator",
    "join",
]
