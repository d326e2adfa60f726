"""Tests for clock capture and timer calibration."""

from __future__ import annotations

import itertools
import logging

import pytest

from bi_launcher.engine import timer
from bi_launcher.engine.timer import TimerCalibration, gettime, time_cal
from bi_launcher.models.state import Timestamp


pytestmark = pytest.mark.unit_launcher


def _stepping_clock(step_ns: int, reads_per_step: int):
    counter = itertools.count()
    return lambda: (next(counter) // reads_per_step) * step_ns


def test_gettime_splits_nanoseconds() -> None:
    assert gettime(lambda: 1_500_000_123) == Timestamp(sec=1, nsec=500_000_123)


def test_microsecond_readings_are_scaled() -> None:
    assert Timestamp.from_us(5, 7) == Timestamp(sec=5, nsec=7000)


def test_gettime_falls_back_to_microsecond_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delattr(timer.time, "clock_gettime_ns")
    monkeypatch.setattr(timer.time, "time", lambda: 1_700_000_000.25)

    assert gettime() == Timestamp(sec=1_700_000_000, nsec=250_000_000)


def test_gettime_uses_wall_clock() -> None:
    stamp = gettime()
    assert stamp.sec > 1_000_000_000
    assert 0 <= stamp.nsec < 1_000_000_000


def test_calibration_reports_mean_step_and_rounds() -> None:
    result = time_cal(trials=10, clock=_stepping_clock(1000, 3))
    assert result == TimerCalibration(trials=10, resolution_ns=1000, avg_rounds=3)


def test_calibration_on_real_clock_is_sane() -> None:
    result = time_cal(trials=50)
    assert result.resolution_ns > 0
    assert result.avg_rounds >= 1


def test_verbose_calibration_logs_every_trial(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="bi_launcher.engine.timer")
    time_cal(trials=5, clock=_stepping_clock(10, 1), debug=9)
    trial_lines = [r for r in caplog.records if "time delta for iteration" in r.getMessage()]
    assert len(trial_lines) == 5
    assert any("calculated timer resolution" in r.getMessage() for r in caplog.records)


def test_trials_must_be_positive() -> None:
    with pytest.raises(ValueError):
        time_cal(trials=0)
