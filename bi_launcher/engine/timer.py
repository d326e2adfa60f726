"""Wall-clock capture and empirical timer resolution."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from bi_launcher.models.state import Timestamp

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 1000

Clock = Callable[[], int]


def _default_clock() -> int:
    if hasattr(time, "clock_gettime_ns"):
        return time.clock_gettime_ns(time.CLOCK_REALTIME)
    return time.time_ns()


def _microsecond_clock() -> tuple[int, int]:
    now = time.time()
    sec = int(now)
    return sec, int((now - sec) * 1_000_000)


def gettime(clock: Optional[Clock] = None) -> Timestamp:
    """Read the wall clock as a seconds + nanoseconds pair.

    Without ``clock_gettime`` the reading comes from a microsecond source and
    is scaled up to nanoseconds.
    """
    if clock is None and not hasattr(time, "clock_gettime_ns"):
        return Timestamp.from_us(*_microsecond_clock())
    return Timestamp.from_ns((clock or _default_clock)())


@dataclass(frozen=True)
class TimerCalibration:
    """Mean observed clock step and spin count over a calibration run."""

    trials: int
    resolution_ns: int
    avg_rounds: int


def time_cal(
    trials: int = DEFAULT_TRIALS,
    clock: Optional[Clock] = None,
    debug: int = 0,
) -> TimerCalibration:
    """
    Measure how often the clock actually changes.

    Each trial spins on the clock until the reading differs from the previous
    one. Some platforms advance their clock in steps much coarser than the
    nominal unit, which skews short benchmark durations.

    Args:
        trials: Number of clock changes to observe
        clock: Nanosecond clock to sample, the wall clock by default
        debug: Verbosity; above 8 every trial is logged

    Returns:
        Integer mean step in nanoseconds and mean spin count
    """
    if trials <= 0:
        raise ValueError("trials must be positive")
    read = clock or _default_clock
    deltas: list[int] = []
    counts: list[int] = []

    current = read()
    prev = current
    for _ in range(trials):
        count = 0
        while current == prev:
            current = read()
            count += 1
        deltas.append(current - prev)
        counts.append(count)
        prev = current

    if debug > 8:
        for index, (delta, count) in enumerate(zip(deltas, counts)):
            logger.debug(
                "time delta for iteration %d: %dns (%d rounds)", index, delta, count
            )

    result = TimerCalibration(
        trials=trials,
        resolution_ns=sum(deltas) // trials,
        avg_rounds=sum(counts) // trials,
    )
    if debug:
        logger.info(
            "calculated timer resolution (%d iterations): %d ns (%d avg rounds)",
            result.trials,
            result.resolution_ns,
            result.avg_rounds,
        )
    return result
