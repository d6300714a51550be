"""End-to-end tests for the composed cut report."""

import json
import logging
from datetime import date, datetime, timezone

import pytest

from weightcut import AthleteProfile, Clock, LogKind, Protocol, WeightLogEntry, build_cut_report
from weightcut.projection import Pace, WeightStatus
from weightcut.report import latest_body_weight

WEIGH_IN = date(2026, 2, 14)
TODAY = date(2026, 2, 12)  # Thursday, two days out


def _entry(entry_id: str, kind: LogKind, day: int, hour: int, weight: float) -> WeightLogEntry:
    return WeightLogEntry(
        id=entry_id,
        timestamp=datetime(2026, 2, day, hour, 0, tzinfo=timezone.utc),
        weight=weight,
        kind=kind,
    )


def _make_profile(protocol: Protocol = Protocol.BODY_COMP, as_of: date = date(2026, 2, 1)) -> AthleteProfile:
    return AthleteProfile(
        target_weight_class=141,
        protocol=protocol,
        weigh_in_date=WEIGH_IN,
        as_of_date=as_of,
    )


def _week_logs() -> list[WeightLogEntry]:
    logs = []
    for day, morning in ((9, 150.0), (10, 149.0), (11, 148.0), (12, 147.0)):
        logs.append(_entry(f"m{day}", LogKind.MORNING, day, 7, morning))
        if day < 12:
            logs.append(_entry(f"post{day}", LogKind.POST_PRACTICE, day, 17, morning - 0.2))
    # logged after the as-of date; must not leak into the report
    logs.append(_entry("m13", LogKind.MORNING, 13, 7, 140.0))
    return logs


class TestBuildCutReport:
    def test_clock_overrides_profile_as_of(self):
        report = build_cut_report(_make_profile(), [], Clock.fixed(TODAY))
        assert report.as_of == "2026-02-12"
        assert report.days_until_weigh_in == 2
        assert report.phase == "Prep"
        assert report.target == 147

    def test_empty_logs(self):
        report = build_cut_report(_make_profile(), [], Clock.fixed(TODAY))
        assert report.body_weight is None
        assert report.status is None
        assert report.drift.overnight is None
        assert report.projection.projected_weight is None
        assert report.rehydration.fluid_range == "0-0 oz"
        assert report.hydration.ounces == 42  # 0.3 * 141 = 42.3

    def test_week_of_logs(self):
        report = build_cut_report(_make_profile(), _week_logs(), Clock.fixed(TODAY))
        assert report.body_weight == 147.0
        assert report.status is WeightStatus.ON_TRACK
        assert report.hydration.ounces == 44  # 0.3 * 147 = 44.1
        assert report.sodium.milligrams == 2500
        assert report.drift.overnight == pytest.approx(0.8)
        assert report.descent.total_lost == pytest.approx(3.0)
        assert report.descent.daily_avg_loss == pytest.approx(1.0)
        assert report.projection.projected_weight == pytest.approx(147.0 - 0.8 * 2)
        assert report.projection.pace is Pace.BEHIND
        assert report.rehydration.fluid_range == "48-72 oz"
        assert [day.is_today for day in report.weekly_plan].index(True) == 3

    def test_weight_gain_gives_zero_rehydration(self):
        logs = [_entry("m9", LogKind.MORNING, 9, 7, 147.0), _entry("m12", LogKind.MORNING, 12, 7, 149.0)]
        report = build_cut_report(_make_profile(), logs, Clock.fixed(TODAY))
        assert report.descent.total_lost == pytest.approx(-2.0)
        assert report.rehydration.fluid_range == "0-0 oz"

    def test_build_protocol_target(self):
        report = build_cut_report(_make_profile(Protocol.BUILD), _week_logs(), Clock.fixed(TODAY))
        assert report.target == 141
        assert report.band.base == 141
        assert report.band.range is None

    @pytest.mark.parametrize("protocol", list(Protocol))
    @pytest.mark.parametrize("as_of", [date(2026, 2, 9), TODAY, WEIGH_IN, date(2026, 2, 16)])
    def test_band_agrees_with_target(self, protocol, as_of):
        report = build_cut_report(_make_profile(protocol), [], Clock.fixed(as_of))
        assert report.band.target == report.target

    def test_hold_weight_band_uses_hold_table(self):
        report = build_cut_report(_make_profile(Protocol.HOLD_WEIGHT), [], Clock.fixed(date(2026, 2, 9)))
        assert report.band.base == 148  # 141 * 1.05 = 148.05
        assert report.band.with_water_load is None

    def test_as_dict_is_json_serializable(self):
        report = build_cut_report(_make_profile(), _week_logs(), Clock.fixed(TODAY))
        data = json.loads(json.dumps(report.as_dict()))
        assert data["status"] == "on-track"
        assert data["projection"]["pace"] == "behind"
        assert len(data["weekly_plan"]) == 7
        assert "losses" not in data["extra_workouts"]

    def test_logs_summary_line(self, caplog):
        with caplog.at_level(logging.INFO, logger="weightcut.report"):
            build_cut_report(_make_profile(), _week_logs(), Clock.fixed(TODAY))
        records = [r for r in caplog.records if r.name == "weightcut.report"]
        assert any(r.getMessage().startswith("Built cut report") for r in records)
        assert records[-1].weightcut_days_until == 2


def test_latest_body_weight_includes_weigh_in_entries():
    logs = [
        _entry("m", LogKind.MORNING, 13, 7, 143.0),
        _entry("w", LogKind.WEIGH_IN, 14, 8, 140.8),
        _entry("bed", LogKind.BEFORE_BED, 14, 22, 146.0),
    ]
    assert latest_body_weight(logs, Clock.fixed(date(2026, 2, 14))) == 140.8
    assert latest_body_weight(logs, Clock.fixed(date(2026, 2, 13))) == 143.0
    assert latest_body_weight(logs, Clock.fixed(date(2026, 2, 12))) is None
