import math
import statistics
from unittest.mock import patch

import pytest

from mavtraj.timing import Accumulator, MiniTimer

SAMPLES = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0]


def test_accumulator_with_window_overflow():
    acc = Accumulator(4)
    for sample in SAMPLES:
        acc.add(sample)
    assert acc.total_samples() == len(SAMPLES)
    assert acc.sum() == pytest.approx(sum(SAMPLES))
    assert acc.mean() == pytest.approx(statistics.mean(SAMPLES))
    assert acc.rolling_mean() == pytest.approx(statistics.mean(SAMPLES[-4:]))
    assert acc.min() == min(SAMPLES)
    assert acc.max() == max(SAMPLES)
    assert acc.lazy_variance() == pytest.approx(statistics.pvariance(SAMPLES[-4:]))


def test_accumulator_below_window():
    acc = Accumulator(50)
    for sample in SAMPLES[:3]:
        acc.add(sample)
    assert acc.rolling_mean() == pytest.approx(acc.mean())
    assert acc.lazy_variance() == pytest.approx(statistics.pvariance(SAMPLES[:3]))


def test_accumulator_empty():
    acc = Accumulator(5)
    assert acc.total_samples() == 0
    assert acc.lazy_variance() == 0.0
    assert math.isnan(acc.mean())
    assert math.isnan(acc.rolling_mean())


def test_accumulator_negative_samples():
    acc = Accumulator(3)
    negatives = [-5.0, -2.0, -7.0]
    for sample in negatives:
        acc.add(sample)
    assert acc.max() == max(negatives)
    assert acc.min() == min(negatives)


def test_accumulator_rejects_bad_window():
    with pytest.raises(ValueError):
        Accumulator(0)


def test_mini_timer_before_stop_is_zero():
    timer = MiniTimer()
    assert timer.elapsed() == 0.0


@patch("mavtraj.timing.perf_counter", side_effect=[10.0, 12.5, 20.0])
def test_mini_timer_measures_and_resets(mock_clock):
    timer = MiniTimer()
    assert timer.stop() == pytest.approx(2.5)
    assert timer.elapsed() == pytest.approx(2.5)
    timer.start()
    assert timer.elapsed() == 0.0
    assert mock_clock.call_count == 3