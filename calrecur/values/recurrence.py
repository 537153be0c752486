"""Container for the rules and date lists parsed from one recurrence block."""

from typing import Any, Optional, TypeVar

from .exceptions import RecurrenceRoleError
from .models import RDateList, RRule

_T = TypeVar("_T")


def _check_role(value: Optional[_T], expected: str) -> _T:
    if value is None:
        raise RecurrenceRoleError(f"Expecting {expected}, got None")
    name: Any = getattr(value, "name", None)
    if not isinstance(name, str) or name.upper() != expected:
        raise RecurrenceRoleError(f"Expecting object named {expected}, got {name!r}")
    return value


class Recurrence:
    """Inclusion and exclusion rules and date lists.

    Each collection only grows.  Appending an item whose name does not match
    the collection (an EXRULE as an inclusion rule, say) raises
    RecurrenceRoleError.
    """

    def __init__(self) -> None:
        self._inclusion_rules: list[RRule] = []
        self._inclusion_dates: list[RDateList] = []
        self._exclusion_rules: list[RRule] = []
        self._exclusion_dates: list[RDateList] = []

    @property
    def inclusion_rules(self) -> tuple[RRule, ...]:
        return tuple(self._inclusion_rules)

    @property
    def inclusion_dates(self) -> tuple[RDateList, ...]:
        return tuple(self._inclusion_dates)

    @property
    def exclusion_rules(self) -> tuple[RRule, ...]:
        return tuple(self._exclusion_rules)

    @property
    def exclusion_dates(self) -> tuple[RDateList, ...]:
        return tuple(self._exclusion_dates)

    def add_inclusion_rule(self, rule: RRule) -> None:
        self._inclusion_rules.append(_check_role(rule, "RRULE"))

    def add_inclusion_date_list(self, dates: RDateList) -> None:
        self._inclusion_dates.append(_check_role(dates, "RDATE"))

    def add_exclusion_rule(self, rule: RRule) -> None:
        self._exclusion_rules.append(_check_role(rule, "EXRULE"))

    def add_exclusion_date_list(self, dates: RDateList) -> None:
        self._exclusion_dates.append(_check_role(dates, "EXDATE"))

    def is_empty(self) -> bool:
        return not (
            self._inclusion_rules
            or self._inclusion_dates
            or self._exclusion_rules
            or self._exclusion_dates
        )

    def to_ical(self) -> str:
        """Content lines for every item, inclusions first."""
        items: list[Any] = [
            *self._inclusion_rules,
            *self._inclusion_dates,
            *self._exclusion_rules,
            *self._exclusion_dates,
        ]
        return "\n".join(item.to_ical() for item in items)

    def __repr__(self) -> str:
        return (
            f"Recurrence(rrules={len(self._inclusion_rules)}, "
            f"rdates={len(self._inclusion_dates)}, "
            f"exrules={len(self._exclusion_rules)}, "
            f"exdates={len(self._exclusion_dates)})"
        )
