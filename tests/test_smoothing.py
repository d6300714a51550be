"""Tests for the EMA smoother."""

import pytest

from weightcut.smoothing import compute_ema


def test_empty_series_is_none():
    assert compute_ema([]) is None


def test_single_value_is_returned_unchanged():
    assert compute_ema([2.5]) == 2.5


def test_fold_order_and_alpha():
    # seed 3 (oldest) -> 0.4*2 + 0.6*3 = 2.6 -> 0.4*1 + 0.6*2.6 = 1.96
    assert compute_ema([1, 2, 3]) == pytest.approx(1.96, abs=0.001)


def test_newest_value_has_most_influence():
    rising = compute_ema([3.0, 1.0, 1.0, 1.0])
    falling = compute_ema([1.0, 1.0, 1.0, 3.0])
    assert rising > falling


def test_result_stays_within_observed_range():
    values = [1.2, 0.4, 2.8, 1.9, 0.7]
    ema = compute_ema(values)
    assert min(values) <= ema <= max(values)


def test_custom_alpha():
    assert compute_ema([1.0, 3.0], alpha=1.0) == 1.0
    assert compute_ema([1.0, 3.0], alpha=0.0) == 3.0
