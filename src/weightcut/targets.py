"""Protocol target calculator.

Maps (weight class, protocol, days until weigh-in) onto the allowable
body-weight band. Out-of-table day offsets clamp to the nearest bucket:
anything past day 5 is treated as day 5 and any day after the weigh-in as
recovery.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any

from weightcut.hydration import sodium_target, water_target_gallons, water_target_oz
from weightcut.models import AthleteProfile, DayBucket, Protocol, require_complete
from weightcut.utils import round_half_up

WEIGHT_MULTIPLIERS: dict[DayBucket, float] = {
    DayBucket.FIVE_OUT: 1.07,
    DayBucket.FOUR_OUT: 1.06,
    DayBucket.THREE_OUT: 1.05,
    DayBucket.TWO_OUT: 1.04,
    DayBucket.ONE_OUT: 1.03,
    DayBucket.WEIGH_IN: 1.00,
    DayBucket.RECOVERY: 1.07,  # back to walk-around
}
require_complete(WEIGHT_MULTIPLIERS, DayBucket, "WEIGHT_MULTIPLIERS")

HOLD_WEIGHT_MULTIPLIERS: dict[DayBucket, float] = {
    DayBucket.FIVE_OUT: 1.05,
    DayBucket.FOUR_OUT: 1.05,
    DayBucket.THREE_OUT: 1.05,
    DayBucket.TWO_OUT: 1.04,
    DayBucket.ONE_OUT: 1.03,
    DayBucket.WEIGH_IN: 1.00,
    DayBucket.RECOVERY: 1.05,
}
require_complete(HOLD_WEIGHT_MULTIPLIERS, DayBucket, "HOLD_WEIGHT_MULTIPLIERS")

WATER_LOADING_MIN_LBS = 2
WATER_LOADING_MAX_LBS = 4
WATER_LOADING_DAYS: frozenset[int] = frozenset({5, 4, 3})

# Water-load bonus by weight class: (minimum class, bonus lbs), heaviest first
WATER_LOAD_BONUS_TIERS: tuple[tuple[int, int], ...] = ((175, 4), (150, 3), (0, 2))

DAY_NAMES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class WeightRange:
    min: int
    max: int


@dataclass(frozen=True)
class TargetBand:
    base: int
    with_water_load: int | None = None
    range: WeightRange | None = None

    @property
    def target(self) -> int:
        return self.with_water_load if self.with_water_load is not None else self.base

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def weight_multiplier(days_until: int) -> float:
    return WEIGHT_MULTIPLIERS[DayBucket.clamp(days_until)]


def is_water_loading_day(days_until: int, protocol: Protocol) -> bool:
    """Only the two cutting protocols load water, and only on days 5-3."""
    if not protocol.is_cutting:
        return False
    return days_until in WATER_LOADING_DAYS


def calculate_target_weight(weight_class: int, days_until: int, protocol: Protocol) -> TargetBand:
    base = round_half_up(weight_class * weight_multiplier(days_until))
    if is_water_loading_day(days_until, protocol):
        return TargetBand(
            base=base,
            with_water_load=base + WATER_LOADING_MAX_LBS,
            range=WeightRange(min=base + WATER_LOADING_MIN_LBS, max=base + WATER_LOADING_MAX_LBS),
        )
    return TargetBand(base=base)


def target_band(weight_class: int, protocol: Protocol, days_until: int) -> TargetBand:
    """Band for one day under the given protocol.

    Build and Hold Weight have a single target and no water-loading range;
    the cutting protocols use the walk-down table.
    """
    if protocol is Protocol.BUILD:
        return TargetBand(base=weight_class)
    if protocol is Protocol.HOLD_WEIGHT:
        bucket = DayBucket.clamp(days_until)
        if bucket is DayBucket.WEIGH_IN:
            return TargetBand(base=weight_class)
        return TargetBand(base=round_half_up(weight_class * HOLD_WEIGHT_MULTIPLIERS[bucket]))
    return calculate_target_weight(weight_class, days_until, protocol)


def target_for_day(weight_class: int, protocol: Protocol, days_until: int) -> int:
    """Target weight for one day under the given protocol."""
    return target_band(weight_class, protocol, days_until).target


def calculate_target(profile: AthleteProfile) -> int:
    return target_for_day(
        profile.target_weight_class, profile.protocol, profile.days_until_weigh_in
    )


def water_load_bonus(weight_class: int) -> int:
    for minimum, bonus in WATER_LOAD_BONUS_TIERS:
        if weight_class >= minimum:
            return bonus
    return WATER_LOAD_BONUS_TIERS[-1][1]


def phase_for_days_until(days_until: int) -> str:
    if days_until < 0:
        return "Recover"
    if days_until == 0:
        return "Compete"
    if days_until == 1:
        return "Cut"
    if days_until == 2:
        return "Prep"
    if days_until <= 5:
        return "Load"
    return "Train"


def week_start(weigh_in_date: date) -> date:
    """Monday of the ISO week containing the weigh-in."""
    return weigh_in_date - timedelta(days=weigh_in_date.weekday())


@dataclass(frozen=True)
class PlanDay:
    date: date
    day: str
    days_until: int
    phase: str
    target: int
    water_oz: int
    water_label: str
    sodium_mg: int
    sodium_label: str
    is_today: bool

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


def weekly_plan(profile: AthleteProfile, body_weight: float | None = None) -> list[PlanDay]:
    """Day-by-day targets for the weigh-in week, Monday through Sunday.

    Water targets scale with ``body_weight``; without one the weight class
    is used.
    """
    weight = body_weight if body_weight is not None else float(profile.target_weight_class)
    monday = week_start(profile.weigh_in_date)
    plan: list[PlanDay] = []
    for offset, name in enumerate(DAY_NAMES):
        day = monday + timedelta(days=offset)
        days_until = (profile.weigh_in_date - day).days
        sodium = sodium_target(days_until)
        plan.append(
            PlanDay(
                date=day,
                day=name,
                days_until=days_until,
                phase=phase_for_days_until(days_until),
                target=target_for_day(profile.target_weight_class, profile.protocol, days_until),
                water_oz=water_target_oz(days_until, weight),
                water_label=water_target_gallons(days_until, weight),
                sodium_mg=sodium.milligrams,
                sodium_label=sodium.label,
                is_today=day == profile.as_of_date,
            )
        )
    return plan
