"""Tests for the protocol target calculator."""

from datetime import date, timedelta

import pytest

from weightcut.models import AthleteProfile, Protocol
from weightcut.targets import (
    TargetBand,
    WeightRange,
    calculate_target,
    calculate_target_weight,
    is_water_loading_day,
    phase_for_days_until,
    target_band,
    target_for_day,
    water_load_bonus,
    week_start,
    weekly_plan,
    weight_multiplier,
)

WEIGH_IN = date(2026, 2, 14)  # Saturday


def _make_profile(days_until: int, protocol: Protocol = Protocol.BODY_COMP, wc: int = 141) -> AthleteProfile:
    return AthleteProfile(
        target_weight_class=wc,
        protocol=protocol,
        weigh_in_date=WEIGH_IN,
        as_of_date=WEIGH_IN - timedelta(days=days_until),
    )


class TestWeightMultiplier:
    @pytest.mark.parametrize(
        "days,expected",
        [(5, 1.07), (4, 1.06), (3, 1.05), (2, 1.04), (1, 1.03), (0, 1.00), (-1, 1.07)],
    )
    def test_table(self, days, expected):
        assert weight_multiplier(days) == expected

    def test_far_out_clamps_to_day_five(self):
        assert weight_multiplier(30) == weight_multiplier(5)

    def test_long_after_weigh_in_is_recovery(self):
        assert weight_multiplier(-12) == 1.07


class TestWaterLoadingDay:
    @pytest.mark.parametrize("protocol", [Protocol.BODY_COMP, Protocol.MAKE_WEIGHT])
    def test_cutting_protocols_load_on_days_five_to_three(self, protocol):
        assert [d for d in range(-2, 10) if is_water_loading_day(d, protocol)] == [3, 4, 5]

    @pytest.mark.parametrize("protocol", [Protocol.HOLD_WEIGHT, Protocol.BUILD])
    def test_other_protocols_never_load(self, protocol):
        assert not any(is_water_loading_day(d, protocol) for d in range(-2, 10))


def test_calculate_target_weight_loading_day_band():
    band = calculate_target_weight(141, 5, Protocol.BODY_COMP)
    assert band.base == 151
    assert band.range == WeightRange(min=153, max=155)
    assert band.with_water_load == 155
    assert band.target == 155


def test_calculate_target_weight_without_loading_has_no_band():
    band = calculate_target_weight(141, 2, Protocol.MAKE_WEIGHT)
    assert band.base == 147  # 141 * 1.04 = 146.64
    assert band.with_water_load is None
    assert band.range is None


def test_exact_half_rounds_up():
    assert calculate_target_weight(150, 1, Protocol.BODY_COMP).base == 155  # 154.5
    assert calculate_target_weight(250, 1, Protocol.HOLD_WEIGHT).base == 258  # 257.5


class TestCalculateTarget:
    def test_cutting_scenario_day_five(self):
        assert calculate_target(_make_profile(5)) == 155

    @pytest.mark.parametrize("protocol", list(Protocol))
    def test_weigh_in_day_equals_weight_class(self, protocol):
        assert calculate_target(_make_profile(0, protocol)) == 141

    def test_build_is_weight_class_every_day(self):
        assert {calculate_target(_make_profile(d, Protocol.BUILD)) for d in range(-5, 11)} == {141}

    @pytest.mark.parametrize(
        "days,expected",
        [(-3, 148), (-1, 148), (0, 141), (1, 145), (2, 147), (3, 148), (9, 148)],
    )
    def test_hold_weight_band(self, days, expected):
        assert calculate_target(_make_profile(days, Protocol.HOLD_WEIGHT)) == expected

    def test_make_weight_recovery_returns_walk_around(self):
        assert calculate_target(_make_profile(-2, Protocol.MAKE_WEIGHT)) == 151

    def test_cutting_far_out_has_no_water_load(self):
        # day 8 clamps to the day-5 multiplier but is not a loading day
        assert calculate_target(_make_profile(8)) == 151


class TestTargetBand:
    @pytest.mark.parametrize("protocol", list(Protocol))
    @pytest.mark.parametrize("days", range(-3, 9))
    def test_every_protocol_has_band(self, protocol, days):
        band = target_band(141, protocol, days)
        assert band.target == target_for_day(141, protocol, days)
        if band.range is not None:
            assert protocol.is_cutting

    def test_build_band_is_weight_class(self):
        assert target_band(141, Protocol.BUILD, 5) == TargetBand(base=141)

    def test_hold_weight_band_has_no_water_load(self):
        assert target_band(141, Protocol.HOLD_WEIGHT, 4) == TargetBand(base=148)

    def test_cutting_band_matches_walk_down_table(self):
        assert target_band(141, Protocol.MAKE_WEIGHT, 5) == calculate_target_weight(141, 5, Protocol.MAKE_WEIGHT)


def test_target_for_day_matches_profile_path():
    for days in range(-3, 8):
        for protocol in Protocol:
            assert target_for_day(157, protocol, days) == calculate_target(_make_profile(days, protocol, 157))


@pytest.mark.parametrize("wc,expected", [(125, 2), (149, 2), (150, 3), (174, 3), (175, 4), (285, 4)])
def test_water_load_bonus_tiers(wc, expected):
    assert water_load_bonus(wc) == expected


@pytest.mark.parametrize(
    "days,phase",
    [(-1, "Recover"), (0, "Compete"), (1, "Cut"), (2, "Prep"), (3, "Load"), (5, "Load"), (6, "Train")],
)
def test_phase_for_days_until(days, phase):
    assert phase_for_days_until(days) == phase


def test_week_start_is_monday():
    assert week_start(WEIGH_IN) == date(2026, 2, 9)
    assert week_start(date(2026, 2, 9)) == date(2026, 2, 9)
    assert week_start(date(2026, 2, 15)) == date(2026, 2, 9)  # Sunday


def test_weekly_plan_covers_monday_to_sunday():
    plan = weekly_plan(_make_profile(3), body_weight=150.0)
    assert [d.day for d in plan] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [d.days_until for d in plan] == [5, 4, 3, 2, 1, 0, -1]
    assert plan[0].water_oz == 180
    assert plan[5].water_label == "Rehydrate"
    assert plan[5].target == 141
    assert plan[2].is_today
    assert sum(d.is_today for d in plan) == 1
    assert plan[0].as_dict()["date"] == "2026-02-09"
