"""Unit tests for parsing recurrence blocks."""

import logging

import pytest

from calrecur.values.exceptions import RecurrenceParseError
from calrecur.values.models import DateValue, Frequency
from calrecur.values.rdata import parse_rdata, unfold


class TestUnfold:
    """Test line unfolding."""

    def test_removes_folds(self) -> None:
        """Test CRLF, LF and tab folds are joined."""
        assert unfold("RRULE:FREQ=DAI\r\n LY;COUNT\n\t=2") == "RRULE:FREQ=DAILY;COUNT=2"

    def test_keeps_plain_breaks(self) -> None:
        """Test unfolded line breaks survive."""
        assert unfold("A\nB") == "A\nB"


class TestParseRData:
    """Test parse_rdata."""

    def test_sorts_lines_by_role(self) -> None:
        """Test each content line lands in its collection."""
        recurrence = parse_rdata(
            "RRULE:FREQ=DAILY;COUNT=3\r\n"
            "RDATE;VALUE=DATE:20060110\r\n"
            "EXRULE:FREQ=WEEKLY;BYDAY=SA\r\n"
            "EXDATE;VALUE=DATE:20060102\r\n"
            "RRULE:FREQ=MONTHLY\r\n"
        )
        assert [rule.freq for rule in recurrence.inclusion_rules] == [
            Frequency.DAILY,
            Frequency.MONTHLY,
        ]
        assert recurrence.inclusion_dates[0].dates_utc == (DateValue(2006, 1, 10),)
        assert recurrence.exclusion_rules[0].name == "EXRULE"
        assert recurrence.exclusion_dates[0].dates_utc == (DateValue(2006, 1, 2),)

    def test_folded_input(self) -> None:
        """Test folded lines are unfolded before parsing."""
        recurrence = parse_rdata("RRULE:FREQ=WEEK\r\n LY;BYDAY=MO,\r\n TU")
        assert len(recurrence.inclusion_rules[0].by_day) == 2

    def test_empty_input(self) -> None:
        """Test blank input yields an empty recurrence."""
        assert parse_rdata("").is_empty()
        assert parse_rdata(" \r\n \n").is_empty()

    def test_lenient_drops_bad_lines(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test bad lines are logged and skipped by default."""
        with caplog.at_level(logging.WARNING, logger="calrecur"):
            recurrence = parse_rdata(
                "RRULE:FREQ=BOGUS\nRRULE:FREQ=DAILY\nDTSTART:20060101\nEXDATE:2006"
            )
        assert len(recurrence.inclusion_rules) == 1
        assert not recurrence.exclusion_dates
        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(messages) == 3
        assert all(m.startswith("Dropping bad recurrence rule line") for m in messages)
        assert "RRULE:FREQ=BOGUS" in messages[0]

    def test_strict_raises(self) -> None:
        """Test strict mode raises on the first bad line."""
        with pytest.raises(RecurrenceParseError):
            parse_rdata("RRULE:FREQ=DAILY\nRRULE:FREQ=BOGUS", strict=True)

    def test_strict_rejects_other_properties(self) -> None:
        """Test lines other than the four recurrence properties are errors."""
        with pytest.raises(RecurrenceParseError):
            parse_rdata("DTSTART:20060101", strict=True)
