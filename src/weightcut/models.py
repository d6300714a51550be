"""Core data models for the weight-cut engine.

Inputs (log entries, athlete profile) are frozen pydantic models so malformed
payloads are rejected before any calculation runs. Protocols, log kinds and
day buckets are closed enums; every table keyed by them is checked for
completeness when its module is imported.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Protocol(str, Enum):
    """Cutting strategy chosen by the athlete."""

    BODY_COMP = "body_comp"
    MAKE_WEIGHT = "make_weight"
    HOLD_WEIGHT = "hold_weight"
    BUILD = "build"

    @classmethod
    def _missing_(cls, value: object) -> Protocol | None:
        if not isinstance(value, str):
            return None
        raw = value.strip().lower().replace("-", "_").replace(" ", "_")
        legacy = _LEGACY_PROTOCOL_CODES.get(raw)
        if legacy is not None:
            return cls(legacy)
        compact = raw.replace("_", "")
        for member in cls:
            if member.value.replace("_", "") == compact:
                return member
        return None

    @property
    def is_cutting(self) -> bool:
        return self in (Protocol.BODY_COMP, Protocol.MAKE_WEIGHT)

    @property
    def display_name(self) -> str:
        return _PROTOCOL_NAMES[self]


_LEGACY_PROTOCOL_CODES: dict[str, str] = {
    "1": "body_comp",
    "2": "make_weight",
    "3": "hold_weight",
    "4": "build",
}

_PROTOCOL_NAMES: dict[Protocol, str] = {
    Protocol.BODY_COMP: "Body Comp",
    Protocol.MAKE_WEIGHT: "Make Weight",
    Protocol.HOLD_WEIGHT: "Hold Weight",
    Protocol.BUILD: "Build",
}


class LogKind(str, Enum):
    MORNING = "morning"
    PRE_PRACTICE = "pre-practice"
    POST_PRACTICE = "post-practice"
    BEFORE_BED = "before-bed"
    EXTRA_BEFORE = "extra-before"
    EXTRA_AFTER = "extra-after"
    CHECK_IN = "check-in"
    WEIGH_IN = "weigh-in"


class DayBucket(IntEnum):
    """Days-until-weigh-in collapsed onto the rows of the lookup tables."""

    RECOVERY = -1
    WEIGH_IN = 0
    ONE_OUT = 1
    TWO_OUT = 2
    THREE_OUT = 3
    FOUR_OUT = 4
    FIVE_OUT = 5

    @classmethod
    def clamp(cls, days_until: int) -> DayBucket:
        """Clamp any day offset into [-1, 5]; out-of-table days never fail."""
        if days_until < 0:
            return cls.RECOVERY
        return cls(min(days_until, cls.FIVE_OUT))


def require_complete(table: Mapping[Any, Any], keys: type[Enum], name: str) -> None:
    """Fail at import time when a lookup table misses a member of its key enum."""
    missing = [member.name for member in keys if member not in table]
    if missing:
        raise RuntimeError(f"{name} is missing entries for: {', '.join(missing)}")


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class WeightLogEntry(BaseModel):
    """One body-weight observation supplied by the logging collaborator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: datetime
    weight: float = Field(gt=0)
    kind: LogKind
    duration_minutes: float | None = Field(default=None, ge=0, alias="durationMinutes")
    sleep_hours: float | None = Field(default=None, ge=0, alias="sleepHours")

    @field_validator("id", mode="before")
    @classmethod
    def id_not_empty(cls, v: Any) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("id must not be empty")
        return v

    @field_validator("weight")
    @classmethod
    def weight_is_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("weight must be a finite number")
        return v

    @field_validator("timestamp")
    @classmethod
    def timestamp_is_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class AthleteProfile(BaseModel):
    """Athlete settings plus the effective as-of date from the clock."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    target_weight_class: int = Field(gt=0, alias="targetWeightClass")
    protocol: Protocol
    weigh_in_date: date = Field(alias="weighInDate")
    as_of_date: date = Field(alias="asOfDate")

    @property
    def days_until_weigh_in(self) -> int:
        """Whole days to the weigh-in; negative once it has passed."""
        return (self.weigh_in_date - self.as_of_date).days
