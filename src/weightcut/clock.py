"""Explicit clock threaded through every calculation.

Nothing in the engine reads wall-clock time; callers build a Clock at the
edge (``Clock.system()``) or pin one for replay and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "UTC"


def normalize_timezone_name(value: object) -> str | None:
    """Normalize a timezone name and verify it's a valid IANA name."""
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    if raw.upper() == "UTC":
        return "UTC"
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    return raw


def local_date_for_timezone(ts: datetime, timezone_name: str) -> date:
    """Project a timestamp into the local calendar date."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(ZoneInfo(timezone_name)).date()


@dataclass(frozen=True)
class Clock:
    """Effective "now" plus an optional historical as-of override."""

    now: datetime
    as_of: date | None = None
    timezone_name: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        if self.now.tzinfo is None:
            object.__setattr__(self, "now", self.now.replace(tzinfo=timezone.utc))

    @classmethod
    def system(cls, *, as_of: date | None = None, timezone_name: str = DEFAULT_TIMEZONE) -> Clock:
        return cls(now=datetime.now(timezone.utc), as_of=as_of, timezone_name=timezone_name)

    @classmethod
    def fixed(cls, when: datetime | date, *, timezone_name: str = DEFAULT_TIMEZONE) -> Clock:
        """Pin the clock to a moment; a bare date pins it to local noon."""
        if isinstance(when, datetime):
            return cls(now=when, timezone_name=timezone_name)
        noon = datetime.combine(when, time(12, 0), tzinfo=ZoneInfo(timezone_name))
        return cls(now=noon, as_of=when, timezone_name=timezone_name)

    @property
    def today(self) -> date:
        """Effective calendar date: the as-of override, else now in local time."""
        if self.as_of is not None:
            return self.as_of
        return local_date_for_timezone(self.now, self.timezone_name)

    def local_date(self, ts: datetime) -> date:
        return local_date_for_timezone(ts, self.timezone_name)

    def days_until(self, target: date) -> int:
        return (target - self.today).days
