"""Log pairing & drift extraction.

Three pairing passes over the same log list:

- overnight: post-practice (evening) -> next morning, 6-16h apart
- session: pre-practice -> post-practice, 0-4h apart, latest post-practice
  in the window wins
- extra workout: extra-before -> extra-after on the same calendar day,
  0-3h apart, closest match wins

Session and extra-workout passes consume matched candidates; the overnight
pass does not, since each evening normally has a single post-practice entry.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Iterable

from weightcut.clock import DEFAULT_TIMEZONE, local_date_for_timezone
from weightcut.models import LogKind, WeightLogEntry
from weightcut.pairing import LogPair, PairingRule, TieBreak, interval_join
from weightcut.utils import mean

logger = logging.getLogger(__name__)

OVERNIGHT_RULE = PairingRule(
    name="overnight",
    anchor_kind=LogKind.MORNING,
    candidate_kind=LogKind.POST_PRACTICE,
    min_gap_hours=6,
    max_gap_hours=16,
    candidate_before_anchor=True,
    tie_break=TieBreak.FIRST_FOUND,
    consume=False,
    candidates_newest_first=True,
)

SESSION_RULE = PairingRule(
    name="session",
    anchor_kind=LogKind.PRE_PRACTICE,
    candidate_kind=LogKind.POST_PRACTICE,
    min_gap_hours=0,
    max_gap_hours=4,
    tie_break=TieBreak.FIRST_FOUND,
    candidates_newest_first=True,
)

EXTRA_WORKOUT_RULE = PairingRule(
    name="extra_workout",
    anchor_kind=LogKind.EXTRA_BEFORE,
    candidate_kind=LogKind.EXTRA_AFTER,
    min_gap_hours=0,
    max_gap_hours=3,
    tie_break=TieBreak.CLOSEST,
    same_day=True,
)

MAX_SWEAT_RATE_LBS_PER_HOUR = 6.0


@dataclass(frozen=True)
class DriftMetrics:
    overnight: float | None = None
    session: float | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DriftSamples:
    """Per-pair measurements, newest first."""

    overnight: list[float] = field(default_factory=list)
    session: list[float] = field(default_factory=list)
    overnight_rates: list[float] = field(default_factory=list)  # lbs per hour slept
    session_rates: list[float] = field(default_factory=list)  # lbs per hour of practice

    def metrics(self) -> DriftMetrics:
        return DriftMetrics(overnight=mean(self.overnight), session=mean(self.session))


@dataclass(frozen=True)
class ExtraWorkoutStats:
    avg_loss: float | None
    total_workouts: int
    paired_count: int
    today_workouts: int
    today_loss: float
    losses: list[float] = field(default_factory=list)  # positive losses, newest first

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("losses")
        return data


def _newest_first(pairs: list[LogPair]) -> list[LogPair]:
    return sorted(pairs, key=lambda pair: pair.anchor.timestamp, reverse=True)


def _overnight_rate(pair: LogPair, delta: float) -> float | None:
    if delta <= 0:
        return None
    slept = pair.anchor.sleep_hours
    hours = slept if slept is not None and slept > 0 else pair.gap_hours
    return delta / hours


def _session_rate(pair: LogPair, loss: float) -> float | None:
    if loss <= 0:
        return None
    minutes = pair.candidate.duration_minutes
    hours = minutes / 60 if minutes is not None and minutes > 0 else pair.gap_hours
    rate = loss / hours
    if rate > MAX_SWEAT_RATE_LBS_PER_HOUR:
        return None
    return rate


def drift_samples(
    logs: Iterable[WeightLogEntry], *, timezone_name: str = DEFAULT_TIMEZONE
) -> DriftSamples:
    logs = list(logs)
    samples = DriftSamples()

    for pair in _newest_first(interval_join(logs, OVERNIGHT_RULE, timezone_name=timezone_name)):
        delta = pair.candidate.weight - pair.anchor.weight
        samples.overnight.append(delta)
        rate = _overnight_rate(pair, delta)
        if rate is not None:
            samples.overnight_rates.append(rate)

    for pair in _newest_first(interval_join(logs, SESSION_RULE, timezone_name=timezone_name)):
        loss = pair.anchor.weight - pair.candidate.weight
        samples.session.append(loss)
        rate = _session_rate(pair, loss)
        if rate is not None:
            samples.session_rates.append(rate)

    return samples


def drift_metrics(
    logs: Iterable[WeightLogEntry], *, timezone_name: str = DEFAULT_TIMEZONE
) -> DriftMetrics:
    """Average overnight drift and session sweat loss; None without pairs."""
    return drift_samples(logs, timezone_name=timezone_name).metrics()


def extra_workout_stats(
    logs: Iterable[WeightLogEntry],
    today: date,
    *,
    timezone_name: str = DEFAULT_TIMEZONE,
) -> ExtraWorkoutStats:
    """Average loss across extra workouts plus today's subtotal.

    Pairings with no loss still count towards ``paired_count`` and
    ``today_workouts`` but are left out of the average.
    """
    pairs = interval_join(logs, EXTRA_WORKOUT_RULE, timezone_name=timezone_name)

    losses: list[float] = []
    today_workouts = 0
    today_loss = 0.0
    for pair in _newest_first(pairs):
        loss = pair.anchor.weight - pair.candidate.weight
        is_today = local_date_for_timezone(pair.anchor.timestamp, timezone_name) == today
        if is_today:
            today_workouts += 1
        if loss <= 0:
            continue
        losses.append(loss)
        if is_today:
            today_loss += loss

    return ExtraWorkoutStats(
        avg_loss=mean(losses),
        total_workouts=len(losses),
        paired_count=len(pairs),
        today_workouts=today_workouts,
        today_loss=today_loss,
        losses=losses,
    )
