"""Post weigh-in rehydration plan, scaled linearly by pounds lost."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from weightcut.utils import round_half_up

FLUID_OZ_PER_LB_MIN = 16
FLUID_OZ_PER_LB_MAX = 24
SODIUM_MG_PER_LB_MIN = 500
SODIUM_MG_PER_LB_MAX = 700
GLYCOGEN_GUIDANCE = "40-50g Dextrose/Rice Cakes"


@dataclass(frozen=True)
class RehydrationPlan:
    fluid_range: str
    sodium_range: str
    glycogen: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def rehydration_plan(lost_weight: float) -> RehydrationPlan:
    return RehydrationPlan(
        fluid_range=(
            f"{round_half_up(lost_weight * FLUID_OZ_PER_LB_MIN)}-"
            f"{round_half_up(lost_weight * FLUID_OZ_PER_LB_MAX)} oz"
        ),
        sodium_range=(
            f"{round_half_up(lost_weight * SODIUM_MG_PER_LB_MIN)}-"
            f"{round_half_up(lost_weight * SODIUM_MG_PER_LB_MAX)}mg"
        ),
        glycogen=GLYCOGEN_GUIDANCE,
    )
