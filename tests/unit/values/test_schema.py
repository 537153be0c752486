"""Unit tests for the content-line parser."""

from datetime import timezone

import pytest

from calrecur.timezone.service import resolve_timezone
from calrecur.values.exceptions import RecurrenceParseError
from calrecur.values.models import (
    DateTimeValue,
    DateValue,
    Frequency,
    RDateList,
    RRule,
    ValueType,
    Weekday,
    WeekdayNum,
)
from calrecur.values.schema import (
    CONTENT_RULES,
    OBJECT_RULES,
    XFORM_RULES,
    parse_content_line,
    parse_date_value,
    parse_rdate_list,
    parse_rrule,
    split_content_line,
)


class TestDispatchTables:
    """Test the parser dispatch tables are consistent."""

    def test_every_part_has_a_transform(self) -> None:
        """Test each recurrence part names a registered transform and a rule field."""
        for part, (field, xform) in CONTENT_RULES.items():
            assert xform in XFORM_RULES, part
            assert field in RRule.model_fields, part

    def test_object_rules_cover_content_lines(self) -> None:
        """Test all four content-line names are dispatched."""
        assert set(OBJECT_RULES) == {"RRULE", "EXRULE", "RDATE", "EXDATE"}


class TestParseDateValue:
    """Test date and date-time value parsing."""

    def test_date(self) -> None:
        """Test a bare date."""
        assert parse_date_value("20060102") == (DateValue(2006, 1, 2), False)

    def test_date_time(self) -> None:
        """Test a floating date-time."""
        value, is_utc = parse_date_value("20060102T030405")
        assert value == DateTimeValue(2006, 1, 2, 3, 4, 5)
        assert not is_utc

    def test_utc_date_time(self) -> None:
        """Test the UTC designator is reported."""
        value, is_utc = parse_date_value("20060102T030405Z")
        assert value == DateTimeValue(2006, 1, 2, 3, 4, 5)
        assert is_utc

    @pytest.mark.parametrize("text", ["2006012", "20060230", "20060102T25", "20060102T250000", "x"])
    def test_invalid(self, text: str) -> None:
        """Test malformed and out of range values are rejected."""
        with pytest.raises(RecurrenceParseError):
            parse_date_value(text)


class TestParseRRule:
    """Test RRULE and EXRULE parsing."""

    def test_simple_rule(self) -> None:
        """Test a rule with a frequency and count."""
        rule = parse_rrule("RRULE:FREQ=DAILY;COUNT=10")
        assert rule.name == "RRULE"
        assert rule.freq is Frequency.DAILY
        assert rule.count == 10

    def test_bare_body_is_rrule(self) -> None:
        """Test a body without a name is read as an RRULE."""
        assert parse_rrule("FREQ=WEEKLY").freq is Frequency.WEEKLY

    def test_all_parts(self) -> None:
        """Test every recurrence part lands in its field."""
        rule = parse_rrule(
            "RRULE:FREQ=YEARLY;UNTIL=20101231T000000Z;INTERVAL=2;BYSECOND=0,30;BYMINUTE=15;"
            "BYHOUR=9,17;BYDAY=-1SU,MO,+2TU;BYMONTHDAY=1,-1;BYYEARDAY=100,-366;"
            "BYWEEKNO=20,-1;BYMONTH=3,11;BYSETPOS=1,-1;WKST=SU"
        )
        assert rule.until == DateTimeValue(2010, 12, 31, 0, 0, 0)
        assert rule.interval == 2
        assert rule.by_second == (0, 30)
        assert rule.by_minute == (15,)
        assert rule.by_hour == (9, 17)
        assert rule.by_day == (
            WeekdayNum(-1, Weekday.SU),
            WeekdayNum(0, Weekday.MO),
            WeekdayNum(2, Weekday.TU),
        )
        assert rule.by_month_day == (1, -1)
        assert rule.by_year_day == (100, -366)
        assert rule.by_week_no == (20, -1)
        assert rule.by_month == (3, 11)
        assert rule.by_set_pos == (1, -1)
        assert rule.wkst is Weekday.SU

    def test_case_insensitive(self) -> None:
        """Test names, parts and values are read case-insensitively."""
        rule = parse_rrule("rrule:freq=monthly;byday=1fr;wkst=su")
        assert rule.freq is Frequency.MONTHLY
        assert rule.by_day == (WeekdayNum(1, Weekday.FR),)
        assert rule.wkst is Weekday.SU

    def test_exrule(self) -> None:
        """Test EXRULE parses to a rule named EXRULE."""
        assert parse_rrule("EXRULE:FREQ=WEEKLY;BYDAY=SA,SU").name == "EXRULE"

    def test_date_until(self) -> None:
        """Test a date-only UNTIL stays a date."""
        assert parse_rrule("RRULE:FREQ=DAILY;UNTIL=20060105").until == DateValue(2006, 1, 5)

    def test_extension_parts_ignored(self) -> None:
        """Test X- parts and parameters are skipped."""
        rule = parse_rrule("RRULE;X-FOO=bar:FREQ=DAILY;X-NAME=value;COUNT=2")
        assert rule.count == 2

    @pytest.mark.parametrize(
        "text",
        [
            "RRULE:COUNT=3",
            "RRULE:FREQ=DAILY;COUNT=3;UNTIL=20060101",
            "RRULE:FREQ=DAILY;FREQ=WEEKLY",
            "RRULE:FREQ=DAILY;BYFOO=1",
            "RRULE:FREQ=FORTNIGHTLY",
            "RRULE:FREQ=DAILY;INTERVAL=0",
            "RRULE:FREQ=DAILY;COUNT=-1",
            "RRULE:FREQ=DAILY;BYMONTH=13",
            "RRULE:FREQ=DAILY;BYMONTH=-1",
            "RRULE:FREQ=DAILY;BYHOUR=+9",
            "RRULE:FREQ=DAILY;BYMONTHDAY=0",
            "RRULE:FREQ=DAILY;BYMONTHDAY=32",
            "RRULE:FREQ=YEARLY;BYYEARDAY=367",
            "RRULE:FREQ=YEARLY;BYWEEKNO=54",
            "RRULE:FREQ=MONTHLY;BYDAY=0MO",
            "RRULE:FREQ=MONTHLY;BYDAY=54MO",
            "RRULE:FREQ=MONTHLY;BYDAY=XX",
            "RRULE:FREQ=DAILY;WKST=XX",
            "RRULE:FREQ=DAILY;UNTIL=2006",
            "RRULE;TZID=UTC:FREQ=DAILY",
            "RRULE:FREQ",
        ],
    )
    def test_invalid_rules(self, text: str) -> None:
        """Test grammar and range violations raise RecurrenceParseError."""
        with pytest.raises(RecurrenceParseError):
            parse_rrule(text)

    def test_error_carries_fragment(self) -> None:
        """Test the offending part is reported."""
        with pytest.raises(RecurrenceParseError) as exc_info:
            parse_rrule("RRULE:FREQ=DAILY;BYFOO=1")
        assert exc_info.value.fragment == "BYFOO=1"
        assert "BYFOO=1" in str(exc_info.value)

    def test_rdate_is_not_a_rule(self) -> None:
        """Test parse_rrule rejects date lists."""
        with pytest.raises(RecurrenceParseError):
            parse_rrule("RDATE:20060101")


class TestParseDateList:
    """Test RDATE and EXDATE parsing."""

    def test_date_list_infers_date_type(self) -> None:
        """Test a list of dates without VALUE is typed DATE."""
        dates = parse_rdate_list("RDATE:20060101,20060105")
        assert dates.value_type is ValueType.DATE
        assert dates.dates_utc == (DateValue(2006, 1, 1), DateValue(2006, 1, 5))

    def test_utc_values_kept(self) -> None:
        """Test Z-suffixed values are stored as written."""
        dates = parse_rdate_list("EXDATE:20060101T090000Z", resolve_timezone("Asia/Tokyo"))
        assert dates.name == "EXDATE"
        assert dates.value_type is ValueType.DATE_TIME
        assert dates.dates_utc == (DateTimeValue(2006, 1, 1, 9, 0, 0),)

    def test_floating_values_use_default_zone(self) -> None:
        """Test values without TZID are converted from the default zone."""
        dates = parse_rdate_list("RDATE:20060101T090000", resolve_timezone("America/New_York"))
        assert dates.dates_utc == (DateTimeValue(2006, 1, 1, 14, 0, 0),)

    def test_floating_values_without_zone(self) -> None:
        """Test floating values stay as written when no zone is given."""
        dates = parse_rdate_list("RDATE:20060101T090000")
        assert dates.dates_utc == (DateTimeValue(2006, 1, 1, 9, 0, 0),)

    def test_tzid_parameter(self) -> None:
        """Test a TZID overrides the default zone."""
        dates = parse_rdate_list("RDATE;TZID=America/New_York:20060701T090000", timezone.utc)
        assert dates.tzid == "America/New_York"
        assert dates.dates_utc == (DateTimeValue(2006, 7, 1, 13, 0, 0),)

    def test_quoted_tzid(self) -> None:
        """Test a quoted global TZID."""
        dates = parse_rdate_list('RDATE;TZID="/Europe/Paris":20060101T090000')
        assert dates.dates_utc == (DateTimeValue(2006, 1, 1, 8, 0, 0),)

    def test_period_keeps_start(self) -> None:
        """Test PERIOD values contribute their start."""
        dates = parse_rdate_list("RDATE;VALUE=PERIOD:20060101T090000Z/PT1H")
        assert dates.value_type is ValueType.PERIOD
        assert dates.dates_utc == (DateTimeValue(2006, 1, 1, 9, 0, 0),)

    @pytest.mark.parametrize(
        "text",
        [
            "RDATE;TZID=Nowhere/Special:20060101T090000",
            "RDATE;VALUE=DATE:20060101T090000",
            "RDATE;VALUE=BINARY:20060101",
            "RDATE;VALUE=DATE;VALUE=DATE:20060101",
            "RDATE;LANGUAGE=en:20060101",
            "RDATE:20060101,",
            "EXDATE:not-a-date",
        ],
    )
    def test_invalid_date_lists(self, text: str) -> None:
        """Test bad parameters and values raise RecurrenceParseError."""
        with pytest.raises(RecurrenceParseError):
            parse_rdate_list(text)

    def test_rule_is_not_a_date_list(self) -> None:
        """Test parse_rdate_list rejects rules."""
        with pytest.raises(RecurrenceParseError):
            parse_rdate_list("RRULE:FREQ=DAILY")


class TestContentLines:
    """Test generic content-line handling."""

    def test_split_content_line(self) -> None:
        """Test name, parameters and content are separated."""
        name, params, content = split_content_line('rdate;VALUE=DATE;X-A="b;c":20060101')
        assert name == "RDATE"
        assert params == [("VALUE", "DATE"), ("X-A", '"b;c"')]
        assert content == "20060101"

    def test_dispatch_by_name(self) -> None:
        """Test each name parses to the right model."""
        assert isinstance(parse_content_line("EXRULE:FREQ=DAILY"), RRule)
        assert isinstance(parse_content_line("EXDATE:20060101"), RDateList)

    def test_unknown_name(self) -> None:
        """Test other properties are rejected."""
        with pytest.raises(RecurrenceParseError):
            parse_content_line("DTSTART:20060101")

    def test_malformed(self) -> None:
        """Test a line with no colon is rejected."""
        with pytest.raises(RecurrenceParseError):
            parse_content_line("RRULE FREQ=DAILY")
