"""Projection & checkpoint generator.

Checkpoint ranges come straight from the protocol target table; the projected
weigh-in weight extrapolates the latest morning weight with the
recency-weighted drift, session and extra-workout losses.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from weightcut.drift import DriftSamples, ExtraWorkoutStats
from weightcut.models import AthleteProfile
from weightcut.smoothing import compute_ema
from weightcut.targets import (
    WATER_LOADING_MAX_LBS,
    WATER_LOADING_MIN_LBS,
    is_water_loading_day,
    weight_multiplier,
)
from weightcut.utils import round_half_up

CRITICAL_LOW_MULTIPLIER = 1.02
PACE_AHEAD_BUFFER_LBS = 1.5

# (on-track, borderline) buffers over target, normal days vs loading days 5-3
STATUS_BUFFERS_LBS: tuple[float, float] = (1.5, 3.0)
LOADING_STATUS_BUFFERS_LBS: tuple[float, float] = (4.0, 6.0)


class Pace(str, Enum):
    AHEAD = "ahead"
    ON_TRACK = "on-track"
    BEHIND = "behind"


class WeightStatus(str, Enum):
    ON_TRACK = "on-track"
    BORDERLINE = "borderline"
    RISK = "risk"


@dataclass(frozen=True)
class Checkpoints:
    walk_around: str
    mid_week: str
    critical: str
    water_loading_adjustment: str
    is_water_loading_day: bool

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProjectionRates:
    """Recency-weighted daily losses in lbs; None where no pairs exist."""

    overnight: float | None = None
    session: float | None = None
    extra: float | None = None

    @classmethod
    def from_samples(cls, drift: DriftSamples, extra: ExtraWorkoutStats) -> ProjectionRates:
        return cls(
            overnight=compute_ema(drift.overnight),
            session=compute_ema(drift.session),
            extra=compute_ema(extra.losses),
        )

    @property
    def is_empty(self) -> bool:
        return self.overnight is None and self.session is None and self.extra is None

    @property
    def daily_loss(self) -> float:
        total = sum(rate for rate in (self.overnight, self.session, self.extra) if rate is not None)
        return max(0.0, total)


@dataclass(frozen=True)
class Projection:
    projected_weight: float | None
    pace: Pace | None
    daily_loss: float | None
    rates: ProjectionRates

    def as_dict(self) -> dict[str, Any]:
        return {
            "projected_weight": self.projected_weight,
            "pace": self.pace.value if self.pace is not None else None,
            "daily_loss": self.daily_loss,
            "rates": asdict(self.rates),
        }


def _lbs_range(low: int, high: int) -> str:
    return f"{low} - {high} lbs"


def checkpoints(profile: AthleteProfile) -> Checkpoints:
    wc = profile.target_weight_class
    loading = is_water_loading_day(profile.days_until_weigh_in, profile.protocol)
    adjustment = ""
    if loading:
        adjustment = (
            f"Expect +{WATER_LOADING_MIN_LBS} to +{WATER_LOADING_MAX_LBS} lbs "
            "above baseline from water loading"
        )
    return Checkpoints(
        walk_around=_lbs_range(
            round_half_up(wc * weight_multiplier(4)), round_half_up(wc * weight_multiplier(5))
        ),
        mid_week=_lbs_range(
            round_half_up(wc * weight_multiplier(2)), round_half_up(wc * weight_multiplier(3))
        ),
        critical=_lbs_range(
            round_half_up(wc * CRITICAL_LOW_MULTIPLIER), round_half_up(wc * weight_multiplier(1))
        ),
        water_loading_adjustment=adjustment,
        is_water_loading_day=loading,
    )


def classify_pace(projected_weight: float, weight_class: int) -> Pace:
    if projected_weight <= weight_class - PACE_AHEAD_BUFFER_LBS:
        return Pace.AHEAD
    if projected_weight <= weight_class:
        return Pace.ON_TRACK
    return Pace.BEHIND


def project_weigh_in(
    current_weight: float | None,
    days_remaining: int,
    weight_class: int,
    rates: ProjectionRates,
) -> Projection:
    """Extrapolate the current weight to weigh-in day.

    Returns an empty projection without a current weight or without any
    measured rate. On weigh-in day the current weight is the projection.
    """
    if current_weight is None or rates.is_empty:
        return Projection(projected_weight=None, pace=None, daily_loss=None, rates=rates)

    days_left = max(0, days_remaining)
    daily_loss = rates.daily_loss
    projected = current_weight - daily_loss * days_left
    return Projection(
        projected_weight=projected,
        pace=classify_pace(projected, weight_class),
        daily_loss=daily_loss,
        rates=rates,
    )


def weight_status(current_weight: float, target: float, days_until: int) -> WeightStatus:
    """Classify the current weight against today's target.

    Buffers widen on water-loading days, when athletes are intentionally
    heavy.
    """
    on_track, borderline = (
        LOADING_STATUS_BUFFERS_LBS if 3 <= days_until <= 5 else STATUS_BUFFERS_LBS
    )
    over = current_weight - target
    if over <= on_track:
        return WeightStatus.ON_TRACK
    if over <= borderline:
        return WeightStatus.BORDERLINE
    return WeightStatus.RISK
