"""Timezone lookup for TZID parameters and the default recurrence timezone.

Resolution tries zoneinfo first, then pytz, then dateutil's gettz (which also
understands POSIX TZ strings such as ``EST5EDT``).  Resolved zones are cached
per name.
"""

import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytz
from dateutil import tz as dateutil_tz

logger = logging.getLogger(__name__)

UTC_NAMES = frozenset({"UTC", "GMT", "Z", "ETC/UTC", "ETC/GMT"})


class TimezoneError(Exception):
    """Raised when a timezone name cannot be resolved."""


def localize(dt: datetime, tzinfo: Any) -> datetime:
    """Attach tzinfo to a naive wall-clock datetime.

    pytz zones must go through ``localize`` to pick the right offset; every
    other tzinfo implementation supports ``replace``.
    """
    if dt.tzinfo is not None:
        return dt
    if hasattr(tzinfo, "localize"):
        return tzinfo.localize(dt)
    return dt.replace(tzinfo=tzinfo)


class TimezoneService:
    """Resolves iCalendar TZID values to tzinfo objects."""

    def __init__(self) -> None:
        self._cache: dict[str, Any] = {}

    @staticmethod
    def normalize_name(name: str) -> str:
        """Strip the global-id prefix and map spaces to underscores.

        RFC 5545 marks globally unique TZIDs with a leading solidus; every name
        is treated as global here.
        """
        name = name.strip()
        if name.startswith("/"):
            name = name[1:].strip()
        return name.replace(" ", "_")

    def find(self, name: str) -> Optional[Any]:
        """Return the tzinfo for name, or None if no library knows it."""
        normalized = self.normalize_name(name)
        if not normalized:
            return None
        if normalized in self._cache:
            return self._cache[normalized]

        tzinfo: Optional[Any] = None
        if normalized.upper() in UTC_NAMES:
            tzinfo = dt_timezone.utc
        else:
            try:
                tzinfo = ZoneInfo(normalized)
            except (ZoneInfoNotFoundError, ValueError):
                try:
                    tzinfo = pytz.timezone(normalized)
                except pytz.UnknownTimeZoneError:
                    tzinfo = dateutil_tz.gettz(normalized)

        if tzinfo is not None:
            logger.debug(f"Resolved timezone {name!r} -> {tzinfo}")
            self._cache[normalized] = tzinfo
        return tzinfo

    def resolve(self, name: str) -> Any:
        """Return the tzinfo for name.

        Raises:
            TimezoneError: If the name is unknown to every timezone library.
        """
        tzinfo = self.find(name)
        if tzinfo is None:
            raise TimezoneError(f"Unknown timezone: {name!r}")
        return tzinfo


_timezone_service: Optional[TimezoneService] = None


def get_timezone_service() -> TimezoneService:
    """Get the global timezone service instance."""
    if globals()["_timezone_service"] is None:
        globals()["_timezone_service"] = TimezoneService()
    return globals()["_timezone_service"]


def resolve_timezone(name: str) -> Any:
    """Resolve name with the global service."""
    return get_timezone_service().resolve(name)
