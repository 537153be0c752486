"""Adapters to the standard library date and datetime types."""

from .datetime_adapter import (
    DateIterator,
    LocalDateIterator,
    create_date_iterator,
    create_local_date_iterator,
    date_to_date_value,
    date_value_to_date,
    date_value_to_datetime,
    datetime_to_date_value,
)

__all__ = [
    "DateIterator",
    "LocalDateIterator",
    "create_date_iterator",
    "create_local_date_iterator",
    "date_to_date_value",
    "date_value_to_date",
    "date_value_to_datetime",
    "datetime_to_date_value",
]
