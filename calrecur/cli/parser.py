"""Command-line argument parsing for calrecur."""

import argparse
from typing import Optional

from ..values.exceptions import RecurrenceParseError
from ..values.models import DateValue
from ..values.schema import parse_date_value


def parse_start(value: str) -> DateValue:
    """Parse a YYYYMMDD or YYYYMMDDTHHMMSS argument.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid date.
    """
    try:
        date_value, _ = parse_date_value(value)
    except RecurrenceParseError as err:
        raise argparse.ArgumentTypeError(
            f"Invalid date: {value}. Use YYYYMMDD or YYYYMMDDTHHMMSS"
        ) from err
    return date_value


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"Not an integer: {value}") from err
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1: {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Returns:
        argparse.ArgumentParser: Parser for ``calrecur RDATA --start DATE ...``.

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["RRULE:FREQ=DAILY;COUNT=3", "--start", "20240101"])
    """
    parser = argparse.ArgumentParser(
        prog="calrecur",
        description="Expand RFC 5545 recurrence rules into occurrence dates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s 'RRULE:FREQ=WEEKLY;COUNT=4;BYDAY=MO,WE' --start 20240101
  %(prog)s 'RRULE:FREQ=MONTHLY;BYDAY=-1FR' --start 20240105T090000 --tz America/New_York --limit 6
  %(prog)s 'RRULE:FREQ=DAILY\\nEXDATE:20240102' --start 20240101 --limit 5
  cat rules.txt | %(prog)s - --start 20240101
        """,
    )

    parser.add_argument(
        "rdata",
        metavar="RDATA",
        help="RRULE/RDATE/EXRULE/EXDATE lines; '\\n' separates lines, '-' reads stdin",
    )
    parser.add_argument(
        "--start",
        required=True,
        type=parse_start,
        metavar="DATE",
        help="Start of the recurrence (YYYYMMDD or YYYYMMDDTHHMMSS, local to --tz)",
    )
    parser.add_argument(
        "--tz",
        metavar="NAME",
        help="Timezone for the start date and output (default: from configuration, else UTC)",
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        metavar="N",
        help="Maximum number of occurrences to print (default: configured max_occurrences)",
    )
    parser.add_argument(
        "--after",
        type=parse_start,
        metavar="DATE",
        help="Skip occurrences before this date (local to --tz)",
    )
    parser.add_argument(
        "--strict", action="store_true", help="Fail on the first malformed line instead of dropping it"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Console log level",
    )
    parser.add_argument("--config", metavar="PATH", help="YAML configuration file")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return create_parser().parse_args(argv)


__all__ = ["create_parser", "parse_args", "parse_start", "positive_int"]
