"""Conformance harness: synthetic athletes swept across the whole table.

Builds deterministic athletes for every weight class x protocol x
days-until-weigh-in in [-5, 10], synthesizes a plausible log week for each,
and checks the engine's invariants against the results. Used by the
``weightcut stress`` command and the test suite.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone

from weightcut.clock import Clock
from weightcut.hydration import (
    MAX_WATER_LOADING_OZ,
    sodium_target,
    water_target_gallons,
    water_target_oz,
)
from weightcut.models import AthleteProfile, LogKind, Protocol, WeightLogEntry
from weightcut.rehydration import rehydration_plan
from weightcut.report import build_cut_report
from weightcut.smoothing import compute_ema
from weightcut.targets import (
    WATER_LOADING_MAX_LBS,
    WATER_LOADING_MIN_LBS,
    calculate_target,
    calculate_target_weight,
    is_water_loading_day,
    target_for_day,
    water_load_bonus,
)
from weightcut.utils import round_half_up

logger = logging.getLogger(__name__)

WEIGHT_CLASSES: tuple[int, ...] = (125, 133, 141, 149, 157, 165, 174, 184, 197, 285)
DAYS_UNTIL_RANGE: range = range(-5, 11)
HARNESS_WEIGH_IN = date(2026, 2, 14)  # a Saturday

EXPECTED_SODIUM_MG: dict[int, int] = {5: 5000, 4: 5000, 3: 5000, 2: 2500, 1: 1000, 0: 0}
RECOVERY_SODIUM_MG = 3000


@dataclass(frozen=True)
class SyntheticAthlete:
    name: str
    weight_class: int
    protocol: Protocol
    days_until: int
    walk_around_weight: float
    seed: int

    @property
    def profile(self) -> AthleteProfile:
        return AthleteProfile(
            target_weight_class=self.weight_class,
            protocol=self.protocol,
            weigh_in_date=HARNESS_WEIGH_IN,
            as_of_date=HARNESS_WEIGH_IN - timedelta(days=self.days_until),
        )


@dataclass(frozen=True)
class CheckFailure:
    check: str
    athlete: str
    detail: str


@dataclass
class ConformanceResult:
    total: int = 0
    passed: int = 0
    failures: list[CheckFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def check(self, condition: bool, check: str, athlete: str, detail: str = "") -> None:
        self.total += 1
        if condition:
            self.passed += 1
        else:
            self.failures.append(CheckFailure(check=check, athlete=athlete, detail=detail))


def generate_athletes(seed: int = 42) -> list[SyntheticAthlete]:
    """One athlete per weight class x protocol x day offset."""
    rng = random.Random(seed)
    athletes: list[SyntheticAthlete] = []
    for weight_class in WEIGHT_CLASSES:
        for protocol in Protocol:
            for days_until in DAYS_UNTIL_RANGE:
                over_pct = rng.uniform(0.0, 0.09)
                athletes.append(
                    SyntheticAthlete(
                        name=f"{weight_class}-{protocol.value}-d{days_until}",
                        weight_class=weight_class,
                        protocol=protocol,
                        days_until=days_until,
                        walk_around_weight=round(weight_class * (1 + over_pct), 1),
                        seed=rng.randrange(1_000_000),
                    )
                )
    return athletes


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


def generate_logs(athlete: SyntheticAthlete) -> list[WeightLogEntry]:
    """A plausible log history from the week before the weigh-in up to as-of.

    Each day: morning weigh-in, practice with pre/post weights, before-bed,
    and an occasional extra workout. Weight trends down about half a pound a
    day with overnight drift and sweat loss on top.
    """
    rng = random.Random(athlete.seed)
    profile = athlete.profile
    start = profile.weigh_in_date - timedelta(days=8)
    logs: list[WeightLogEntry] = []
    weight = athlete.walk_around_weight

    def log(kind: LogKind, ts: datetime, value: float, **extra: float) -> None:
        logs.append(
            WeightLogEntry(
                id=f"{athlete.name}-{ts.isoformat()}-{kind.value}",
                timestamp=ts,
                weight=round(max(value, 1.0), 1),
                kind=kind,
                **extra,
            )
        )

    day = start
    while day <= profile.as_of_date:
        log(LogKind.MORNING, _at(day, 7), weight, sleep_hours=round(rng.uniform(6.0, 9.0), 1))
        pre = weight + rng.uniform(0.5, 1.5)
        log(LogKind.PRE_PRACTICE, _at(day, 15), pre)
        post = pre - rng.uniform(1.0, 3.0)
        log(LogKind.POST_PRACTICE, _at(day, 17), post, duration_minutes=float(rng.choice((90, 105, 120))))
        if rng.random() < 0.4:
            before = post + rng.uniform(0.0, 0.8)
            log(LogKind.EXTRA_BEFORE, _at(day, 18, 30), before)
            log(LogKind.EXTRA_AFTER, _at(day, 19, 15), before - rng.uniform(0.3, 1.2), duration_minutes=45.0)
        log(LogKind.BEFORE_BED, _at(day, 22), post + rng.uniform(0.5, 1.5))
        weight = post - rng.uniform(0.5, 1.5)
        day += timedelta(days=1)
    return logs


def _check_targets(result: ConformanceResult, athlete: SyntheticAthlete) -> None:
    name = athlete.name
    wc = athlete.weight_class
    protocol = athlete.protocol
    days = athlete.days_until
    target = calculate_target(athlete.profile)

    result.check(math.isfinite(target) and target > 0, "target_positive", name, f"got {target}")
    if protocol is Protocol.BUILD:
        result.check(target == wc, "build_equals_class", name, f"got {target}")
    if protocol is Protocol.HOLD_WEIGHT:
        if days == 0:
            result.check(target == wc, "hold_weigh_in_equals_class", name, f"got {target}")
        elif days >= 1:
            ceiling = round_half_up(wc * 1.05)
            result.check(wc <= target <= ceiling, "hold_within_band", name, f"got {target}")
    if days == 0:
        result.check(target == wc, "weigh_in_equals_class", name, f"got {target}")

    band = calculate_target_weight(wc, days, protocol)
    if is_water_loading_day(days, protocol):
        bonus = None if band.with_water_load is None else band.with_water_load - band.base
        result.check(
            bonus is not None and WATER_LOADING_MIN_LBS <= bonus <= WATER_LOADING_MAX_LBS,
            "water_load_bonus_range",
            name,
            f"band {band}",
        )
        result.check(band.range is not None, "water_load_range_present", name)
    else:
        result.check(band.with_water_load is None and band.range is None, "no_water_load", name)

    result.check(
        WATER_LOADING_MIN_LBS <= water_load_bonus(wc) <= WATER_LOADING_MAX_LBS,
        "class_bonus_range",
        name,
    )


def _check_schedule(result: ConformanceResult, athlete: SyntheticAthlete) -> None:
    name = athlete.name
    days = athlete.days_until
    weight = athlete.walk_around_weight

    ounces = water_target_oz(days, weight)
    result.check(ounces >= 0, "water_non_negative", name, f"got {ounces}")
    if 3 <= days <= 5:
        result.check(ounces <= MAX_WATER_LOADING_OZ, "water_capped", name, f"got {ounces}")
    if days == 0:
        result.check(ounces == 0, "weigh_in_water_zero", name, f"got {ounces}")
        result.check(water_target_gallons(days, weight) == "Rehydrate", "weigh_in_rehydrate", name)

    sodium = sodium_target(days).milligrams
    expected = RECOVERY_SODIUM_MG if days < 0 else EXPECTED_SODIUM_MG[min(days, 5)]
    result.check(sodium == expected, "sodium_table", name, f"expected {expected}, got {sodium}")


def _check_monotonic(result: ConformanceResult, weight_class: int, protocol: Protocol) -> None:
    label = f"{weight_class}-{protocol.value}"
    bases = [calculate_target_weight(weight_class, d, protocol).base for d in range(5, -1, -1)]
    result.check(
        all(later <= earlier for earlier, later in zip(bases, bases[1:])),
        "base_monotonic",
        label,
        f"bases {bases}",
    )
    if not protocol.is_cutting:
        return
    targets = [target_for_day(weight_class, protocol, d) for d in range(5, -1, -1)]
    result.check(
        all(later <= earlier for earlier, later in zip(targets, targets[1:])),
        "cutting_monotonic",
        label,
        f"targets {targets}",
    )


def _check_report(result: ConformanceResult, athlete: SyntheticAthlete) -> None:
    name = athlete.name
    logs = generate_logs(athlete)
    report = build_cut_report(athlete.profile, logs, Clock.fixed(athlete.profile.as_of_date))

    for label, value in (("overnight", report.drift.overnight), ("session", report.drift.session)):
        result.check(value is None or math.isfinite(value), f"drift_{label}_finite", name, f"got {value}")

    extras = report.extra_workouts
    result.check(extras.today_workouts >= 0 and extras.today_loss >= 0, "extra_today_non_negative", name)
    result.check(extras.total_workouts <= extras.paired_count, "extra_counts_consistent", name)
    if extras.avg_loss is not None:
        result.check(extras.avg_loss > 0, "extra_avg_positive", name, f"got {extras.avg_loss}")

    dates = [sample.date for sample in report.descent.samples]
    result.check(dates == sorted(dates), "descent_ordered", name)
    if report.descent.daily_avg_loss is not None:
        result.check(math.isfinite(report.descent.daily_avg_loss), "descent_rate_finite", name)
    result.check(report.descent.days_remaining >= 0, "descent_days_non_negative", name)

    cps = report.checkpoints
    highs = []
    for label, text in (("walk_around", cps.walk_around), ("mid_week", cps.mid_week), ("critical", cps.critical)):
        result.check(text.endswith(" lbs"), f"checkpoint_{label}_format", name, text)
        highs.append(int(text.split(" - ")[1].split()[0]))
    result.check(highs[0] >= highs[1] >= highs[2], "checkpoints_descending", name, f"{highs}")
    result.check(
        bool(cps.water_loading_adjustment) == cps.is_water_loading_day,
        "water_loading_narrative",
        name,
    )

    projected = report.projection.projected_weight
    result.check(projected is None or math.isfinite(projected), "projection_finite", name)


def _check_fixed_points(result: ConformanceResult) -> None:
    result.check(compute_ema([]) is None, "ema_empty", "fixed")
    result.check(compute_ema([2.5]) == 2.5, "ema_single", "fixed")
    ema = compute_ema([1.0, 2.0, 3.0])
    result.check(ema is not None and abs(ema - 1.96) <= 0.001, "ema_fold_order", "fixed", f"got {ema}")

    plan = rehydration_plan(0)
    result.check(plan.fluid_range == "0-0 oz" and plan.sodium_range == "0-0mg", "rehydration_zero", "fixed")
    for lost in (1.5, 4.0, 7.3):
        plan = rehydration_plan(lost)
        expected = f"{round_half_up(lost * 16)}-{round_half_up(lost * 24)} oz"
        result.check(plan.fluid_range == expected, "rehydration_scaling", f"lost={lost}", plan.fluid_range)


def run_conformance(seed: int = 42, *, with_reports: bool = True) -> ConformanceResult:
    result = ConformanceResult()
    athletes = generate_athletes(seed)

    for weight_class in WEIGHT_CLASSES:
        for protocol in Protocol:
            _check_monotonic(result, weight_class, protocol)

    for athlete in athletes:
        _check_targets(result, athlete)
        _check_schedule(result, athlete)
        if with_reports:
            _check_report(result, athlete)

    _check_fixed_points(result)

    logger.info(
        "Conformance sweep finished: %d/%d checks passed across %d athletes",
        result.passed,
        result.total,
        len(athletes),
        extra={"weightcut_failures": len(result.failures)},
    )
    return result
