"""Parse a block of recurrence content lines into a Recurrence."""

import logging
import re
from typing import Any, Optional

from .exceptions import RecurrenceError, RecurrenceParseError
from .models import RDateList, RRule
from .recurrence import Recurrence
from .schema import parse_content_line

logger = logging.getLogger(__name__)

FOLD = re.compile(r"(?:\r\n?|\n)[ \t]")
NEWLINE = re.compile(r"[\r\n]+")
RULE = re.compile(r"^(?:R|EX)RULE[:;]", re.IGNORECASE)
DATE = re.compile(r"^(?:R|EX)DATE[:;]", re.IGNORECASE)


def unfold(rdata: str) -> str:
    """Remove line folds: a line break followed by a space or tab."""
    return FOLD.sub("", rdata)


def parse_rdata(rdata: str, tzinfo: Optional[Any] = None, strict: bool = False) -> Recurrence:
    """Parse RRULE, EXRULE, RDATE and EXDATE lines.

    Args:
        rdata: One or more content lines, possibly folded.
        tzinfo: Default zone for floating RDATE/EXDATE values.
        strict: Raise on the first bad line instead of dropping it.

    Returns:
        A Recurrence holding every line that parsed.  Empty input yields an
        empty Recurrence.

    Raises:
        RecurrenceError: In strict mode, for the first line that fails.
    """
    result = Recurrence()
    unfolded = unfold(rdata).strip()
    if not unfolded:
        return result

    for index, raw_line in enumerate(NEWLINE.split(unfolded)):
        line = raw_line.strip()
        if not line:
            continue
        try:
            if not (RULE.match(line) or DATE.match(line)):
                raise RecurrenceParseError(f"Unrecognized line {index + 1}", line)
            item = parse_content_line(line, tzinfo)
            if isinstance(item, RRule):
                if item.name == "RRULE":
                    result.add_inclusion_rule(item)
                else:
                    result.add_exclusion_rule(item)
            elif isinstance(item, RDateList):
                if item.name == "RDATE":
                    result.add_inclusion_date_list(item)
                else:
                    result.add_exclusion_date_list(item)
        except RecurrenceError as e:
            if strict:
                raise
            logger.warning(f"Dropping bad recurrence rule line: {line} ({e})")

    logger.debug(f"Parsed recurrence block: {result!r}")
    return result
