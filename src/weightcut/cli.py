"""CLI for the weight-cut engine."""

from __future__ import annotations

import json
import sys
from datetime import date, datetime
from pathlib import Path

import click
from pydantic import TypeAdapter, ValidationError

from weightcut.clock import Clock, normalize_timezone_name
from weightcut.config import Config
from weightcut.errors import ConfigError
from weightcut.harness import run_conformance
from weightcut.logging import setup_logging
from weightcut.models import AthleteProfile, WeightLogEntry
from weightcut.report import build_cut_report
from weightcut.targets import weekly_plan

_LOG_LIST = TypeAdapter(list[WeightLogEntry])


def _load_json(path: Path) -> object:
    with path.open() as f:
        return json.load(f)


def _load_profile(path: Path, as_of: date) -> AthleteProfile:
    data = _load_json(path)
    if not isinstance(data, dict):
        raise click.BadParameter("profile file must contain a JSON object", param_hint="--profile-file")
    data = {**data}
    data.pop("asOfDate", None)
    data["as_of_date"] = as_of
    try:
        return AthleteProfile.model_validate(data)
    except ValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="--profile-file") from exc


def _load_logs(path: Path | None) -> list[WeightLogEntry]:
    if path is None:
        return []
    try:
        return _LOG_LIST.validate_python(_load_json(path))
    except ValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="--logs-file") from exc


def _build_clock(config: Config, as_of: datetime | None, timezone_name: str | None) -> Clock:
    tz = config.timezone_name
    if timezone_name is not None:
        normalized = normalize_timezone_name(timezone_name)
        if normalized is None:
            raise click.BadParameter(f"unknown timezone {timezone_name!r}", param_hint="--timezone")
        tz = normalized
    if as_of is None:
        return Clock.system(timezone_name=tz)
    return Clock.fixed(as_of.date(), timezone_name=tz)


@click.group()
@click.pass_context
def main(ctx: click.Context):
    """Weight-cut targets, drift analytics and weigh-in projection."""
    try:
        config = Config.from_env()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config.log_format, config.log_level)
    ctx.obj = config


_profile_option = click.option(
    "--profile-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Athlete profile JSON (targetWeightClass, protocol, weighInDate).",
)
_as_of_option = click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Review the cut as of this date instead of today.",
)
_timezone_option = click.option("--timezone", "timezone_name", help="IANA timezone for calendar days.")


@main.command()
@_profile_option
@click.option(
    "--logs-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Weight log JSON array.",
)
@_as_of_option
@_timezone_option
@click.pass_obj
def report(
    config: Config,
    profile_file: Path,
    logs_file: Path | None,
    as_of: datetime | None,
    timezone_name: str | None,
):
    """Print the full cut report as JSON."""
    clock = _build_clock(config, as_of, timezone_name)
    profile = _load_profile(profile_file, clock.today)
    logs = _load_logs(logs_file)
    result = build_cut_report(profile, logs, clock)
    click.echo(json.dumps(result.as_dict(), indent=2, ensure_ascii=False))


@main.command()
@_profile_option
@click.option("--weight", type=float, help="Current body weight in lbs for water targets.")
@_as_of_option
@_timezone_option
@click.pass_obj
def schedule(
    config: Config,
    profile_file: Path,
    weight: float | None,
    as_of: datetime | None,
    timezone_name: str | None,
):
    """Print the weigh-in week plan."""
    if weight is not None and weight <= 0:
        raise click.BadParameter("weight must be positive", param_hint="--weight")
    clock = _build_clock(config, as_of, timezone_name)
    profile = _load_profile(profile_file, clock.today)
    click.echo(f"{profile.protocol.display_name}: weigh-in {profile.weigh_in_date.isoformat()}")
    for day in weekly_plan(profile, weight):
        marker = "*" if day.is_today else " "
        click.echo(
            f"{marker} {day.day} {day.date.isoformat()}  {day.phase:<8} "
            f"target {day.target:>3} lbs  water {day.water_label:<10} "
            f"sodium {day.sodium_mg}mg"
        )


@main.command()
@click.option("--seed", type=int, help="Seed for synthetic athletes (default from WEIGHTCUT_HARNESS_SEED).")
@click.option("--targets-only", is_flag=True, help="Skip the per-athlete log reports.")
@click.pass_obj
def stress(config: Config, seed: int | None, targets_only: bool):
    """Run the conformance sweep over synthetic athletes."""
    result = run_conformance(seed if seed is not None else config.harness_seed, with_reports=not targets_only)
    click.echo(f"Checks: {result.total}  passed: {result.passed}  failed: {len(result.failures)}")
    if result.failures:
        for failure in result.failures[:50]:
            click.echo(f"  [{failure.check}] {failure.athlete}: {failure.detail}", err=True)
        sys.exit(1)
