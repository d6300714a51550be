"""Weekly descent aggregator.

Collects the morning weigh-ins of the weigh-in week (Monday through "today")
and derives cumulative loss and the average daily rate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable

from weightcut.clock import DEFAULT_TIMEZONE, local_date_for_timezone
from weightcut.models import LogKind, WeightLogEntry
from weightcut.targets import DAY_NAMES, week_start


@dataclass(frozen=True)
class DescentSample:
    day: str
    weight: float
    date: date


@dataclass(frozen=True)
class DescentSnapshot:
    target_weight: int
    days_remaining: int
    samples: list[DescentSample] = field(default_factory=list)
    start_weight: float | None = None
    current_weight: float | None = None
    total_lost: float | None = None
    daily_avg_loss: float | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "target_weight": self.target_weight,
            "days_remaining": self.days_remaining,
            "samples": [
                {"day": s.day, "weight": s.weight, "date": s.date.isoformat()}
                for s in self.samples
            ],
            "start_weight": self.start_weight,
            "current_weight": self.current_weight,
            "total_lost": self.total_lost,
            "daily_avg_loss": self.daily_avg_loss,
        }


def _morning_by_date(
    logs: Iterable[WeightLogEntry], timezone_name: str
) -> dict[date, WeightLogEntry]:
    """Earliest morning entry for each local calendar date."""
    result: dict[date, WeightLogEntry] = {}
    mornings = sorted(
        (entry for entry in logs if entry.kind is LogKind.MORNING),
        key=lambda entry: entry.timestamp,
    )
    for entry in mornings:
        result.setdefault(local_date_for_timezone(entry.timestamp, timezone_name), entry)
    return result


def week_descent(
    weight_class: int,
    weigh_in_date: date,
    logs: Iterable[WeightLogEntry],
    today: date,
    *,
    timezone_name: str = DEFAULT_TIMEZONE,
) -> DescentSnapshot:
    mornings = _morning_by_date(logs, timezone_name)
    monday = week_start(weigh_in_date)

    samples: list[DescentSample] = []
    for offset in range(7):
        check_date = monday + timedelta(days=offset)
        if check_date > today:
            break
        entry = mornings.get(check_date)
        if entry is not None:
            samples.append(DescentSample(day=DAY_NAMES[offset], weight=entry.weight, date=check_date))

    days_remaining = max(0, (weigh_in_date - today).days)
    if not samples:
        return DescentSnapshot(target_weight=weight_class, days_remaining=days_remaining)

    start_weight = samples[0].weight
    current_weight = samples[-1].weight
    total_lost = start_weight - current_weight

    daily_avg_loss: float | None = None
    if len(samples) >= 2:
        # actual elapsed days: mornings can be missing
        elapsed = max(1, (samples[-1].date - samples[0].date).days)
        daily_avg_loss = total_lost / elapsed

    return DescentSnapshot(
        target_weight=weight_class,
        days_remaining=days_remaining,
        samples=samples,
        start_weight=start_weight,
        current_weight=current_weight,
        total_lost=total_lost,
        daily_avg_loss=daily_avg_loss,
    )
