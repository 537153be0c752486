"""Timezone resolution for calrecur.

Example usage:
    >>> from calrecur.timezone import resolve_timezone
    >>> tz = resolve_timezone("America/New_York")
"""

from .service import (
    TimezoneError,
    TimezoneService,
    get_timezone_service,
    localize,
    resolve_timezone,
)

__all__ = [
    "TimezoneError",
    "TimezoneService",
    "get_timezone_service",
    "localize",
    "resolve_timezone",
]
