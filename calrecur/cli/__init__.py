"""Command-line interface: expand a recurrence block and print its dates."""

import logging
import sys
from datetime import timezone
from pathlib import Path
from typing import Any, Optional, TextIO

from ..config.settings import RecurrenceSettings, get_settings
from ..iter.factory import create_recurrence_iterator
from ..timezone.service import TimezoneError, resolve_timezone
from ..utils.logging import setup_logging
from ..values.exceptions import RecurrenceError
from ..values.models import DateTimeValue, DateValue
from ..values.time_utils import from_utc, to_utc
from .parser import create_parser, parse_start

logger = logging.getLogger(__name__)


def read_rdata(value: str, stdin: Optional[TextIO] = None) -> str:
    """Return the recurrence block for an RDATA argument.

    ``-`` reads standard input; otherwise literal ``\\n`` sequences become
    line breaks so a block fits in one shell argument.
    """
    if value == "-":
        return (stdin or sys.stdin).read()
    return value.replace("\\n", "\n")


def format_occurrence(value_utc: DateValue, tzinfo: Any) -> str:
    """Render a UTC occurrence as local iCalendar text; UTC times get a Z."""
    if not value_utc.has_time:
        return value_utc.to_ical()
    if tzinfo is timezone.utc:
        return f"{value_utc.to_ical()}Z"
    return from_utc(value_utc, tzinfo).to_ical()


def after_utc(after: DateValue, start: DateValue, tzinfo: Any) -> DateValue:
    """UTC bound for --after, which is local to tzinfo.

    A date-only bound on a timed recurrence means local midnight of that day.
    """
    if start.has_time and not after.has_time:
        after = DateTimeValue(after.year, after.month, after.day)
    return to_utc(after, tzinfo)


def _load_settings(config: Optional[str]) -> RecurrenceSettings:
    if config:
        return RecurrenceSettings(config_file=Path(config))
    return get_settings()


def main(argv: Optional[list[str]] = None) -> int:
    """Run the CLI.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return 0 if e.code in (0, None) else 1

    try:
        settings = _load_settings(args.config)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    setup_logging(settings, log_level=args.log_level)

    try:
        tzinfo = resolve_timezone(args.tz) if args.tz else settings.default_tzinfo
        strict = args.strict or settings.strict_parsing
        limit = min(args.limit or settings.max_occurrences, settings.max_occurrences)

        iterator = create_recurrence_iterator(read_rdata(args.rdata), args.start, tzinfo, strict)
        if args.after is not None:
            iterator.advance_to(after_utc(args.after, args.start, tzinfo))

        count = 0
        for value in iterator:
            print(format_occurrence(value, tzinfo))
            count += 1
            if count >= limit:
                break
    except (RecurrenceError, TimezoneError, ValueError) as e:
        logger.debug(f"Expansion failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Printed {count} occurrences")
    return 0


__all__ = ["after_utc", "create_parser", "format_occurrence", "main", "parse_start", "read_rdata"]
