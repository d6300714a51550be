"""Weight-cut target & drift-analytics engine."""

from weightcut.clock import Clock
from weightcut.models import AthleteProfile, LogKind, Protocol, WeightLogEntry
from weightcut.report import CutReport, build_cut_report

__all__ = [
    "AthleteProfile",
    "Clock",
    "CutReport",
    "LogKind",
    "Protocol",
    "WeightLogEntry",
    "build_cut_report",
]
