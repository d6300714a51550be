"""Recency-weighted smoothing for sparse drift series."""

from __future__ import annotations

from typing import Sequence

EMA_ALPHA = 0.4


def compute_ema(values: Sequence[float], alpha: float = EMA_ALPHA) -> float | None:
    """Exponential moving average over values ordered newest first.

    The accumulator is seeded with the oldest value and folded toward the
    newest, so the most recent observation carries the most weight.

    Returns None for an empty series.
    """
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    ema = values[-1]
    for value in reversed(values[:-1]):
        ema = alpha * value + (1 - alpha) * ema
    return ema
