"""Parser for RRULE, EXRULE, RDATE and EXDATE content lines.

Parsing is table driven.  ``OBJECT_RULES`` maps a content-line name to the
function that handles its parameters and content, ``CONTENT_RULES`` maps each
recurrence part to the rule field it fills and the transform that produces
the value, and ``XFORM_RULES`` maps transform names to functions that
validate and convert the raw text.
"""

import logging
import re
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from ..timezone.service import get_timezone_service
from .exceptions import RecurrenceParseError
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
from .time_utils import to_utc

logger = logging.getLogger(__name__)

ContentLine = Union[RRule, RDateList]

_CONTENT_LINE_RE = re.compile(
    r'^([A-Z][A-Z0-9\-]*)((?:;[A-Z0-9\-]+=(?:"[^"]*"|[^";:]*))*):(.*)$', re.IGNORECASE
)
_PARAM_RE = re.compile(r';([A-Z0-9\-]+)=("[^"]*"|[^";:]*)', re.IGNORECASE)
_RRULE_PART_RE = re.compile(r"^([A-Z][A-Z0-9\-]*)=(.*)$", re.IGNORECASE)
_NUM_DAY_RE = re.compile(r"^([+\-]?\d\d?)?(SU|MO|TU|WE|TH|FR|SA)$", re.IGNORECASE)
_DATE_VALUE_RE = re.compile(
    r"^(\d{4})(\d{2})(\d{2})(?:T(\d{2})(\d{2})(\d{2})(Z)?)?$", re.IGNORECASE
)
_INT_RE = re.compile(r"^[+\-]?\d+$")
_DIGITS_RE = re.compile(r"^\d+$")


def _is_x_name(name: str) -> bool:
    return name.upper().startswith("X-")


def parse_date_value(text: str) -> tuple[DateValue, bool]:
    """Parse ``YYYYMMDD`` or ``YYYYMMDDTHHMMSS[Z]``.

    Returns:
        The value and whether it carried the UTC designator.

    Raises:
        RecurrenceParseError: If the text is not a valid date or date-time.
    """
    match = _DATE_VALUE_RE.match(text.strip())
    if not match:
        raise RecurrenceParseError("Bad date value", text)
    year, month, day, hour, minute, second, zulu = match.groups()
    try:
        if hour is None:
            return DateValue(int(year), int(month), int(day)), False
        value = DateTimeValue(
            int(year), int(month), int(day), int(hour), int(minute), int(second)
        )
    except ValueError as e:
        raise RecurrenceParseError(str(e), text) from e
    return value, zulu is not None


# ---------------------------------------------------------------------------
# Value transforms
# ---------------------------------------------------------------------------


def _int_list(value: str, absmin: int, absmax: int, signed: bool = True) -> tuple[int, ...]:
    out = []
    for token in value.split(","):
        token = token.strip()
        if not _INT_RE.match(token):
            raise RecurrenceParseError("Bad number in list", value)
        n = int(token)
        if not signed and token[0] in "+-":
            raise RecurrenceParseError("Signed value in unsigned list", value)
        if not absmin <= abs(n) <= absmax:
            raise RecurrenceParseError(f"Value {n} outside [{absmin}, {absmax}]", value)
        out.append(n)
    return tuple(out)


def _xform_freq(value: str) -> Frequency:
    try:
        return Frequency(value.upper())
    except ValueError as e:
        raise RecurrenceParseError("Unknown frequency", value) from e


def _xform_end_date(value: str) -> DateValue:
    # a timed UNTIL is always UTC
    return parse_date_value(value)[0]


def _xform_count(value: str) -> int:
    if not _DIGITS_RE.match(value):
        raise RecurrenceParseError("Bad COUNT", value)
    return int(value)


def _xform_interval(value: str) -> int:
    if not _DIGITS_RE.match(value) or int(value) < 1:
        raise RecurrenceParseError("INTERVAL must be a positive integer", value)
    return int(value)


def _xform_weekday(value: str) -> Weekday:
    try:
        return Weekday(value.upper())
    except ValueError as e:
        raise RecurrenceParseError("Unknown weekday", value) from e


def _xform_weekday_num_list(value: str) -> tuple[WeekdayNum, ...]:
    days = []
    for token in value.split(","):
        match = _NUM_DAY_RE.match(token.strip())
        if not match:
            raise RecurrenceParseError("Bad weekday", token)
        num_text, day_text = match.groups()
        num = int(num_text) if num_text else 0
        if num_text and not 1 <= abs(num) <= 53:
            raise RecurrenceParseError("Weekday ordinal outside [1, 53]", token)
        days.append(WeekdayNum(num, Weekday(day_text.upper())))
    return tuple(days)


XFORM_RULES: dict[str, Callable[[str], Any]] = {
    "freq": _xform_freq,
    "enddate": _xform_end_date,
    "count": _xform_count,
    "interval": _xform_interval,
    "byseclist": lambda value: _int_list(value, 0, 59, signed=False),
    "byminlist": lambda value: _int_list(value, 0, 59, signed=False),
    "byhrlist": lambda value: _int_list(value, 0, 23, signed=False),
    "bywdaylist": _xform_weekday_num_list,
    "bymodaylist": lambda value: _int_list(value, 1, 31),
    "byyrdaylist": lambda value: _int_list(value, 1, 366),
    "bywknolist": lambda value: _int_list(value, 1, 53),
    "bymolist": lambda value: _int_list(value, 1, 12, signed=False),
    "bysplist": lambda value: _int_list(value, 1, 366),
    "weekday": _xform_weekday,
}

# part name -> (RRule field, transform name)
CONTENT_RULES: dict[str, tuple[str, str]] = {
    "FREQ": ("freq", "freq"),
    "UNTIL": ("until", "enddate"),
    "COUNT": ("count", "count"),
    "INTERVAL": ("interval", "interval"),
    "BYSECOND": ("by_second", "byseclist"),
    "BYMINUTE": ("by_minute", "byminlist"),
    "BYHOUR": ("by_hour", "byhrlist"),
    "BYDAY": ("by_day", "bywdaylist"),
    "BYMONTHDAY": ("by_month_day", "bymodaylist"),
    "BYYEARDAY": ("by_year_day", "byyrdaylist"),
    "BYWEEKNO": ("by_week_no", "bywknolist"),
    "BYMONTH": ("by_month", "bymolist"),
    "BYSETPOS": ("by_set_pos", "bysplist"),
    "WKST": ("wkst", "weekday"),
}


# ---------------------------------------------------------------------------
# Object rules
# ---------------------------------------------------------------------------


def _parse_rule(
    name: str, params: list[tuple[str, str]], content: str, tzinfo: Optional[Any]
) -> RRule:
    for key, value in params:
        if not _is_x_name(key):
            raise RecurrenceParseError(f"Bad parameter for {name}", f"{key}={value}")

    parts: dict[str, str] = {}
    for part in content.split(";"):
        match = _RRULE_PART_RE.match(part.strip())
        if not match:
            raise RecurrenceParseError("Bad part", part)
        key, value = match.group(1).upper(), match.group(2)
        if key in parts:
            raise RecurrenceParseError("Duplicate part", part)
        if key not in CONTENT_RULES and not _is_x_name(key):
            raise RecurrenceParseError("Unknown part", part)
        parts[key] = value

    if "FREQ" not in parts:
        raise RecurrenceParseError("Missing FREQ", content)
    if "UNTIL" in parts and "COUNT" in parts:
        raise RecurrenceParseError("UNTIL & COUNT are exclusive", content)

    fields: dict[str, Any] = {"name": name}
    for key, value in parts.items():
        if _is_x_name(key):
            continue
        field, xform = CONTENT_RULES[key]
        fields[field] = XFORM_RULES[xform](value)

    try:
        return RRule(**fields)
    except ValidationError as e:
        raise RecurrenceParseError(str(e), content) from e


def _parse_date_list(
    name: str, params: list[tuple[str, str]], content: str, tzinfo: Optional[Any]
) -> RDateList:
    value_type: Optional[ValueType] = None
    tzid: Optional[str] = None
    seen: set[str] = set()
    for key, value in params:
        upper = key.upper()
        if _is_x_name(upper):
            continue
        if upper in seen:
            raise RecurrenceParseError("Duplicate parameter", f"{key}={value}")
        seen.add(upper)
        if upper == "VALUE":
            try:
                value_type = ValueType(value.upper())
            except ValueError as e:
                raise RecurrenceParseError("Bad VALUE parameter", f"{key}={value}") from e
        elif upper == "TZID":
            tzid = get_timezone_service().normalize_name(value.strip('"'))
            tzinfo = get_timezone_service().find(tzid)
            if tzinfo is None:
                raise RecurrenceParseError("Unknown TZID", f"{key}={value}")
        else:
            raise RecurrenceParseError(f"Bad parameter for {name}", f"{key}={value}")

    dates: list[DateValue] = []
    for token in content.split(","):
        if value_type is ValueType.PERIOD:
            # only the start of a period matters for recurrence
            token = token.split("/", 1)[0]
        value, is_utc = parse_date_value(token)
        if value_type is ValueType.DATE and value.has_time:
            raise RecurrenceParseError("VALUE=DATE requires date values", token)
        dates.append(value if is_utc else to_utc(value, tzinfo))

    if value_type is None:
        value_type = ValueType.DATE_TIME if any(d.has_time for d in dates) else ValueType.DATE
    return RDateList(name=name, value_type=value_type, tzid=tzid, dates_utc=tuple(dates))


OBJECT_RULES: dict[str, Callable[[str, list[tuple[str, str]], str, Optional[Any]], ContentLine]] = {
    "RRULE": _parse_rule,
    "EXRULE": _parse_rule,
    "RDATE": _parse_date_list,
    "EXDATE": _parse_date_list,
}


def split_content_line(line: str) -> tuple[str, list[tuple[str, str]], str]:
    """Split ``NAME;PARAM=VALUE:CONTENT`` into its name, params and content."""
    match = _CONTENT_LINE_RE.match(line.strip())
    if not match:
        raise RecurrenceParseError("Malformed content line", line)
    name, param_text, content = match.groups()
    params = [(key, value) for key, value in _PARAM_RE.findall(param_text)]
    return name.upper(), params, content


def parse_content_line(line: str, tzinfo: Optional[Any] = None) -> ContentLine:
    """Parse one unfolded content line.

    Args:
        line: An RRULE, EXRULE, RDATE or EXDATE content line.
        tzinfo: Zone for RDATE/EXDATE values that have neither a TZID nor a
            trailing ``Z``.  None leaves such values as written.

    Raises:
        RecurrenceParseError: Naming the offending fragment.
    """
    name, params, content = split_content_line(line)
    rule = OBJECT_RULES.get(name)
    if rule is None:
        raise RecurrenceParseError("Unknown content line", name)
    return rule(name, params, content, tzinfo)


def parse_rrule(text: str) -> RRule:
    """Parse an RRULE or EXRULE; a bare ``FREQ=...`` body is read as an RRULE."""
    if ":" not in text:
        text = f"RRULE:{text}"
    result = parse_content_line(text)
    if not isinstance(result, RRule):
        raise RecurrenceParseError("Not a rule", text)
    return result


def parse_rdate_list(text: str, tzinfo: Optional[Any] = None) -> RDateList:
    """Parse an RDATE or EXDATE content line."""
    result = parse_content_line(text, tzinfo)
    if not isinstance(result, RDateList):
        raise RecurrenceParseError("Not a date list", text)
    return result
