"""Cut report: composes every calculator into one snapshot for a day.

Full recompute on every call; the clock decides what "today" is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from weightcut.clock import Clock
from weightcut.descent import DescentSnapshot, week_descent
from weightcut.drift import DriftMetrics, ExtraWorkoutStats, drift_samples, extra_workout_stats
from weightcut.hydration import HydrationTarget, SodiumTarget, hydration_target, sodium_target
from weightcut.models import AthleteProfile, LogKind, WeightLogEntry
from weightcut.projection import (
    Checkpoints,
    Projection,
    ProjectionRates,
    WeightStatus,
    checkpoints,
    project_weigh_in,
    weight_status,
)
from weightcut.rehydration import RehydrationPlan, rehydration_plan
from weightcut.targets import (
    PlanDay,
    TargetBand,
    calculate_target,
    phase_for_days_until,
    target_band,
    weekly_plan,
)
from weightcut.utils import mean

logger = logging.getLogger(__name__)

_BODY_WEIGHT_KINDS = (LogKind.MORNING, LogKind.WEIGH_IN)


@dataclass(frozen=True)
class CutReport:
    as_of: str
    days_until_weigh_in: int
    phase: str
    target: int
    band: TargetBand
    body_weight: float | None
    status: WeightStatus | None
    hydration: HydrationTarget
    sodium: SodiumTarget
    drift: DriftMetrics
    overnight_rate: float | None
    session_rate: float | None
    extra_workouts: ExtraWorkoutStats
    descent: DescentSnapshot
    checkpoints: Checkpoints
    projection: Projection
    weekly_plan: list[PlanDay]
    rehydration: RehydrationPlan

    def as_dict(self) -> dict[str, Any]:
        return {
            "as_of": self.as_of,
            "days_until_weigh_in": self.days_until_weigh_in,
            "phase": self.phase,
            "target": self.target,
            "band": self.band.as_dict(),
            "body_weight": self.body_weight,
            "status": self.status.value if self.status is not None else None,
            "hydration": self.hydration.as_dict(),
            "sodium": self.sodium.as_dict(),
            "drift": self.drift.as_dict(),
            "overnight_rate": self.overnight_rate,
            "session_rate": self.session_rate,
            "extra_workouts": self.extra_workouts.as_dict(),
            "descent": self.descent.as_dict(),
            "checkpoints": self.checkpoints.as_dict(),
            "projection": self.projection.as_dict(),
            "weekly_plan": [day.as_dict() for day in self.weekly_plan],
            "rehydration": self.rehydration.as_dict(),
        }


def latest_body_weight(logs: Iterable[WeightLogEntry], clock: Clock) -> float | None:
    """Most recent morning or weigh-in weight logged on or before today."""
    latest: WeightLogEntry | None = None
    for entry in logs:
        if entry.kind not in _BODY_WEIGHT_KINDS:
            continue
        if clock.local_date(entry.timestamp) > clock.today:
            continue
        if latest is None or entry.timestamp > latest.timestamp:
            latest = entry
    return latest.weight if latest is not None else None


def build_cut_report(
    profile: AthleteProfile,
    logs: Iterable[WeightLogEntry],
    clock: Clock,
) -> CutReport:
    logs = list(logs)
    if profile.as_of_date != clock.today:
        logger.debug(
            "Profile as-of %s replaced by clock date %s",
            profile.as_of_date,
            clock.today,
        )
        profile = profile.model_copy(update={"as_of_date": clock.today})

    wc = profile.target_weight_class
    days_until = profile.days_until_weigh_in
    tz = clock.timezone_name

    target = calculate_target(profile)
    body_weight = latest_body_weight(logs, clock)
    hydration_weight = body_weight if body_weight is not None else float(wc)

    samples = drift_samples(logs, timezone_name=tz)
    extras = extra_workout_stats(logs, clock.today, timezone_name=tz)
    descent = week_descent(wc, profile.weigh_in_date, logs, clock.today, timezone_name=tz)

    current_weight = descent.current_weight if descent.current_weight is not None else body_weight
    projection = project_weigh_in(
        current_weight,
        descent.days_remaining,
        wc,
        ProjectionRates.from_samples(samples, extras),
    )

    lost = max(0.0, descent.total_lost or 0.0)
    report = CutReport(
        as_of=clock.today.isoformat(),
        days_until_weigh_in=days_until,
        phase=phase_for_days_until(days_until),
        target=target,
        band=target_band(wc, profile.protocol, days_until),
        body_weight=body_weight,
        status=weight_status(body_weight, target, days_until) if body_weight is not None else None,
        hydration=hydration_target(days_until, hydration_weight),
        sodium=sodium_target(days_until),
        drift=samples.metrics(),
        overnight_rate=mean(samples.overnight_rates),
        session_rate=mean(samples.session_rates),
        extra_workouts=extras,
        descent=descent,
        checkpoints=checkpoints(profile),
        projection=projection,
        weekly_plan=weekly_plan(profile, body_weight),
        rehydration=rehydration_plan(lost),
    )

    logger.info(
        "Built cut report (protocol=%s, days_until=%d, target=%d, logs=%d, projected=%s)",
        profile.protocol.value,
        days_until,
        target,
        len(logs),
        projection.projected_weight,
        extra={
            "weightcut_protocol": profile.protocol.value,
            "weightcut_days_until": days_until,
        },
    )
    return report
