"""Recurrence value types and the content-line parser."""

from .builder import DTBuilder
from .exceptions import (
    RecurrenceError,
    RecurrenceParseError,
    RecurrenceRoleError,
    UnsupportedFrequencyError,
)
from .models import (
    DateTimeValue,
    DateValue,
    Frequency,
    RDateList,
    RRule,
    ValueType,
    Weekday,
    WeekdayNum,
)
from .rdata import parse_rdata
from .recurrence import Recurrence
from .schema import parse_content_line, parse_date_value, parse_rdate_list, parse_rrule

__all__ = [
    "DTBuilder",
    "DateTimeValue",
    "DateValue",
    "Frequency",
    "RDateList",
    "RRule",
    "Recurrence",
    "RecurrenceError",
    "RecurrenceParseError",
    "RecurrenceRoleError",
    "UnsupportedFrequencyError",
    "ValueType",
    "Weekday",
    "WeekdayNum",
    "parse_content_line",
    "parse_date_value",
    "parse_rdata",
    "parse_rdate_list",
    "parse_rrule",
]
