"""Hydration & sodium scheduler.

Fluid targets scale with body weight through an ounces-per-pound table keyed
by day bucket: high while water loading (days 5-3), tapering sharply into the
cut and back to maintenance during recovery.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from weightcut.models import DayBucket, require_complete
from weightcut.utils import round_half_up

WATER_OZ_PER_LB: dict[DayBucket, float] = {
    DayBucket.FIVE_OUT: 1.2,
    DayBucket.FOUR_OUT: 1.5,
    DayBucket.THREE_OUT: 1.5,
    DayBucket.TWO_OUT: 0.3,
    DayBucket.ONE_OUT: 0.08,
    DayBucket.WEIGH_IN: 0.0,
    DayBucket.RECOVERY: 0.75,
}
require_complete(WATER_OZ_PER_LB, DayBucket, "WATER_OZ_PER_LB")

MAX_WATER_LOADING_OZ = 320
LOADING_FACTOR_THRESHOLD = 0.5  # factors above this are loading days
SIPS_ONLY_FACTOR = 0.1
OZ_PER_GALLON = 128


@dataclass(frozen=True)
class SodiumTarget:
    milligrams: int
    label: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HydrationTarget:
    ounces: int
    label: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


SODIUM_BY_DAY: dict[DayBucket, SodiumTarget] = {
    DayBucket.FIVE_OUT: SodiumTarget(5000, "High — salt-load"),
    DayBucket.FOUR_OUT: SodiumTarget(5000, "High — salt-load"),
    DayBucket.THREE_OUT: SodiumTarget(5000, "High — salt-load"),
    DayBucket.TWO_OUT: SodiumTarget(2500, "Normal — stop adding salt"),
    DayBucket.ONE_OUT: SodiumTarget(1000, "Minimal — under 1,000mg"),
    DayBucket.WEIGH_IN: SodiumTarget(0, "Reintroduce post weigh-in"),
    DayBucket.RECOVERY: SodiumTarget(3000, "Normal — replenish"),
}
require_complete(SODIUM_BY_DAY, DayBucket, "SODIUM_BY_DAY")


def _capped_ounces(factor: float, weight_lbs: float) -> float:
    ounces = factor * weight_lbs
    if factor > LOADING_FACTOR_THRESHOLD:
        ounces = min(ounces, MAX_WATER_LOADING_OZ)
    return ounces


def water_target_oz(days_until: int, weight_lbs: float) -> int:
    """Daily fluid target in ounces; 0 on weigh-in day, capped while loading."""
    if days_until == 0:
        return 0
    factor = WATER_OZ_PER_LB[DayBucket.clamp(days_until)]
    raw = round_half_up(factor * weight_lbs)
    if factor > LOADING_FACTOR_THRESHOLD:
        return min(raw, MAX_WATER_LOADING_OZ)
    return raw


def water_target_gallons(days_until: int, weight_lbs: float) -> str:
    """Human label for the day's fluid target, to the nearest quarter gallon."""
    if days_until == 0:
        return "Rehydrate"
    factor = WATER_OZ_PER_LB[DayBucket.clamp(days_until)]
    if factor <= SIPS_ONLY_FACTOR:
        return "Sips only"
    gallons = _capped_ounces(factor, weight_lbs) / OZ_PER_GALLON
    rounded = round_half_up(gallons * 4) / 4
    if rounded.is_integer():
        return f"{rounded:.1f} gal"
    return f"{rounded:.2f} gal"


def hydration_target(days_until: int, weight_lbs: float) -> HydrationTarget:
    return HydrationTarget(
        ounces=water_target_oz(days_until, weight_lbs),
        label=water_target_gallons(days_until, weight_lbs),
    )


def sodium_target(days_until: int) -> SodiumTarget:
    return SODIUM_BY_DAY[DayBucket.clamp(days_until)]
