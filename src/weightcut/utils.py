"""Shared numeric helpers."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (152.5 -> 153).

    Python's round() uses banker's rounding, which would move targets by a
    pound on exact halves.
    """
    return int(math.floor(value + 0.5))


def mean(values: Iterable[float]) -> float | None:
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Signed hours from ``earlier`` to ``later``."""
    return (later - earlier).total_seconds() / 3600.0
