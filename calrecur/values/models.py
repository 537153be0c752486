"""Data models for recurrence rules and the dates they produce."""

import datetime
from enum import Enum
from functools import total_ordering
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .time_utils import month_length


class Weekday(str, Enum):
    """Days of the week, keyed by their iCalendar two-letter codes."""

    MO = "MO"
    TU = "TU"
    WE = "WE"
    TH = "TH"
    FR = "FR"
    SA = "SA"
    SU = "SU"

    @property
    def day_num(self) -> int:
        """Monday-based day number in [0, 6], matching ``date.weekday()``."""
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def from_day_num(cls, day_num: int) -> "Weekday":
        return _WEEKDAY_ORDER[day_num % 7]

    @classmethod
    def of(cls, value: "DateValue") -> "Weekday":
        """Weekday that value falls on."""
        return cls.from_day_num(value.to_date().weekday())


_WEEKDAY_ORDER = (
    Weekday.MO,
    Weekday.TU,
    Weekday.WE,
    Weekday.TH,
    Weekday.FR,
    Weekday.SA,
    Weekday.SU,
)


class WeekdayNum(NamedTuple):
    """A BYDAY token: a weekday with a signed ordinal, 0 meaning every one."""

    num: int
    wday: Weekday

    def to_ical(self) -> str:
        if self.num == 0:
            return self.wday.value
        return f"{self.num}{self.wday.value}"


class Frequency(str, Enum):
    """The base repetition tier of a rule, finest first."""

    SECONDLY = "SECONDLY"
    MINUTELY = "MINUTELY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    @property
    def is_sub_daily(self) -> bool:
        return self in (Frequency.SECONDLY, Frequency.MINUTELY, Frequency.HOURLY)


class ValueType(str, Enum):
    """VALUE parameter of RDATE/EXDATE content lines."""

    DATE = "DATE"
    DATE_TIME = "DATE-TIME"
    PERIOD = "PERIOD"


@total_ordering
class DateValue:
    """An immutable calendar date.

    Dates order by year, month and day.  A date-only value sorts before any
    date-time on the same day, so advancing a cursor to a bare date never
    skips an occurrence at midnight of that date.
    """

    __slots__ = ("_year", "_month", "_day")

    def __init__(self, year: int, month: int, day: int) -> None:
        if not 1 <= month <= 12:
            raise ValueError(f"Month out of range: {year:04d}-{month:02d}")
        if not 1 <= day <= month_length(year, month):
            raise ValueError(f"Day out of range: {year:04d}-{month:02d}-{day:02d}")
        self._year = year
        self._month = month
        self._day = day

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def day(self) -> int:
        return self._day

    @property
    def has_time(self) -> bool:
        return False

    def sort_key(self) -> tuple[int, ...]:
        return (self._year, self._month, self._day, 0, 0, 0, 0)

    def date_part(self) -> "DateValue":
        return DateValue(self._year, self._month, self._day)

    def to_date(self) -> datetime.date:
        return datetime.date(self._year, self._month, self._day)

    def to_datetime(self) -> datetime.datetime:
        """Naive datetime at the start of this value."""
        return datetime.datetime(self._year, self._month, self._day)

    def to_ordinal(self) -> int:
        return self.to_date().toordinal()

    def weekday(self) -> Weekday:
        return Weekday.of(self)

    def to_ical(self) -> str:
        return f"{self._year:04d}{self._month:02d}{self._day:02d}"

    @classmethod
    def from_date(cls, value: datetime.date) -> "DateValue":
        return cls(value.year, value.month, value.day)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.sort_key())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_ical()})"

    def __str__(self) -> str:
        return self.to_ical()


class DateTimeValue(DateValue):
    """An immutable date with a whole-second time of day."""

    __slots__ = ("_hour", "_minute", "_second")

    def __init__(
        self, year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
    ) -> None:
        super().__init__(year, month, day)
        if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
            raise ValueError(f"Time out of range: {hour:02d}:{minute:02d}:{second:02d}")
        self._hour = hour
        self._minute = minute
        self._second = second

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def has_time(self) -> bool:
        return True

    def sort_key(self) -> tuple[int, ...]:
        return (self._year, self._month, self._day, 1, self._hour, self._minute, self._second)

    def to_datetime(self) -> datetime.datetime:
        return datetime.datetime(
            self._year, self._month, self._day, self._hour, self._minute, self._second
        )

    def to_ical(self) -> str:
        return f"{super().to_ical()}T{self._hour:02d}{self._minute:02d}{self._second:02d}"

    @classmethod
    def from_datetime(cls, value: datetime.datetime) -> "DateTimeValue":
        """Wall-clock fields of value; tzinfo and microseconds are dropped."""
        return cls(value.year, value.month, value.day, value.hour, value.minute, value.second)


class RRule(BaseModel):
    """A parsed RRULE or EXRULE content line."""

    name: str = Field(default="RRULE", description="RRULE or EXRULE")
    freq: Frequency
    interval: int = Field(default=1, ge=1)
    until: Optional[DateValue] = None
    count: Optional[int] = Field(default=None, ge=0)
    by_second: tuple[int, ...] = ()
    by_minute: tuple[int, ...] = ()
    by_hour: tuple[int, ...] = ()
    by_day: tuple[WeekdayNum, ...] = ()
    by_month_day: tuple[int, ...] = ()
    by_year_day: tuple[int, ...] = ()
    by_week_no: tuple[int, ...] = ()
    by_month: tuple[int, ...] = ()
    by_set_pos: tuple[int, ...] = ()
    wkst: Weekday = Weekday.MO

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.upper()
        if value not in ("RRULE", "EXRULE"):
            raise ValueError(f"Not a rule name: {value}")
        return value

    @model_validator(mode="after")
    def _check_until_and_count(self) -> "RRule":
        if self.until is not None and self.count is not None:
            raise ValueError("UNTIL & COUNT are exclusive")
        return self

    def to_ical(self) -> str:
        """Serialize back to a content line."""
        parts = [f"FREQ={self.freq.value}"]
        if self.until is not None:
            until = self.until.to_ical()
            parts.append(f"UNTIL={until}Z" if self.until.has_time else f"UNTIL={until}")
        if self.count is not None:
            parts.append(f"COUNT={self.count}")
        if self.interval != 1:
            parts.append(f"INTERVAL={self.interval}")
        for key, values in (
            ("BYMONTH", self.by_month),
            ("BYWEEKNO", self.by_week_no),
            ("BYYEARDAY", self.by_year_day),
            ("BYMONTHDAY", self.by_month_day),
        ):
            if values:
                parts.append(f"{key}={','.join(str(v) for v in values)}")
        if self.by_day:
            parts.append(f"BYDAY={','.join(day.to_ical() for day in self.by_day)}")
        for key, values in (
            ("BYHOUR", self.by_hour),
            ("BYMINUTE", self.by_minute),
            ("BYSECOND", self.by_second),
            ("BYSETPOS", self.by_set_pos),
        ):
            if values:
                parts.append(f"{key}={','.join(str(v) for v in values)}")
        if self.wkst is not Weekday.MO:
            parts.append(f"WKST={self.wkst.value}")
        return f"{self.name}:{';'.join(parts)}"


class RDateList(BaseModel):
    """A parsed RDATE or EXDATE content line; dates are stored in UTC."""

    name: str = Field(default="RDATE", description="RDATE or EXDATE")
    value_type: ValueType = ValueType.DATE_TIME
    tzid: Optional[str] = Field(default=None, description="TZID the values were written in")
    dates_utc: tuple[DateValue, ...] = ()

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.upper()
        if value not in ("RDATE", "EXDATE"):
            raise ValueError(f"Not a date list name: {value}")
        return value

    def to_ical(self) -> str:
        head = self.name
        if self.value_type is ValueType.DATE:
            head += ";VALUE=DATE"
        values = ",".join(
            f"{date.to_ical()}Z" if date.has_time else date.to_ical() for date in self.dates_utc
        )
        return f"{head}:{values}"
