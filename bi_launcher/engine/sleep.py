"""Millisecond sleep with fallbacks across OS sleep mechanisms."""

from __future__ import annotations

import errno
import select
import threading
import time
from typing import Callable, Optional, Sequence

from bi_common.errors import ConfigurationError
from bi_launcher.engine.fatal import report, terminate
from bi_launcher.models.state import RuntimeState

Sleeper = Callable[[float], None]


def _nanosleep(seconds: float) -> None:
    time.sleep(seconds)


def _select_sleep(seconds: float) -> None:
    select.select([], [], [], seconds)


def _event_sleep(seconds: float) -> None:
    threading.Event().wait(seconds)


def available_sleepers() -> list[tuple[str, Sleeper]]:
    """Sleep mechanisms usable on this platform, preferred first."""
    sleepers: list[tuple[str, Sleeper]] = []
    if hasattr(time, "sleep"):
        sleepers.append(("nanosleep", _nanosleep))
    if hasattr(select, "select"):
        sleepers.append(("select", _select_sleep))
    sleepers.append(("event", _event_sleep))
    return sleepers


def millisleep(
    milliseconds: int,
    state: Optional[RuntimeState] = None,
    sleepers: Optional[Sequence[tuple[str, Sleeper]]] = None,
) -> int:
    """Sleep for ``milliseconds`` using the first available mechanism.

    Returns 0. A platform without any usable mechanism is a configuration
    error and ends the process with exit code 1.
    """
    candidates = available_sleepers() if sleepers is None else list(sleepers)
    if milliseconds < 0:
        raise ValueError("milliseconds must be non-negative")
    if not candidates:
        report("configuration error: there is no sleep function available", state)
        terminate(1, state)
    name, sleeper = candidates[0]
    try:
        sleeper(milliseconds / 1000)
    except OSError as exc:
        if exc.errno != errno.ENOSYS:
            raise
        error = ConfigurationError(f"{name} is not available", cause=exc)
        report(f"configuration error: {error.diagnostic()}", state)
        terminate(1, state)
    return 0
