"""Boolean combinators over date values.

Filters built from rule parts that constrain rather than generate are plain
callables taking a DateValue.  These helpers compose them, evaluating
components in order and stopping as soon as the answer is known.
"""

from typing import Callable

from ..values.models import DateValue

Predicate = Callable[[DateValue], bool]


def always_true(value: DateValue) -> bool:
    return True


def always_false(value: DateValue) -> bool:
    return False


def not_(predicate: Predicate) -> Predicate:
    def negated(value: DateValue) -> bool:
        return not predicate(value)

    return negated


def and_(*components: Predicate) -> Predicate:
    """True iff every component is true; true when there are none."""
    if not components:
        return always_true
    if len(components) == 1:
        return components[0]

    def conjunction(value: DateValue) -> bool:
        return all(predicate(value) for predicate in components)

    return conjunction


def or_(*components: Predicate) -> Predicate:
    """True iff any component is true; false when there are none."""
    if not components:
        return always_false
    if len(components) == 1:
        return components[0]

    def disjunction(value: DateValue) -> bool:
        return any(predicate(value) for predicate in components)

    return disjunction
