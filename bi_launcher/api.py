"""Stable launcher API surface."""

from bi_launcher.engine import (
    NO_CHILD,
    ReapResult,
    TimerCalibration,
    children_pending,
    gettime,
    init_state,
    invoke,
    millisleep,
    substitute_command,
    terminate,
    time_cal,
    wait_for_next,
)
from bi_launcher.events import LaunchRecord
from bi_launcher.models import (
    CommandInfo,
    CopyInfo,
    LaunchObserver,
    LauncherConfig,
    RuntimeState,
    StdinPolicy,
    Timestamp,
)

__all__ = [
    "NO_CHILD",
    "CommandInfo",
    "CopyInfo",
    "LaunchObserver",
    "LaunchRecord",
    "LauncherConfig",
    "ReapResult",
    "RuntimeState",
    "StdinPolicy",
    "TimerCalibration",
    "Timestamp",
    "children_pending",
    "gettime",
    "init_state",
    "invoke",
    "millisleep",
    "substitute_command",
    "terminate",
    "time_cal",
    "wait_for_next",
]
