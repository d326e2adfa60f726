"""Invocation-and-reap engine."""

from bi_launcher.engine.fatal import terminate
from bi_launcher.engine.invocation import build_argv, init_state, resolve_directory
from bi_launcher.engine.launcher import LaunchPhase, dry_invoke, invoke
from bi_launcher.engine.reaper import NO_CHILD, ReapResult, children_pending, wait_for_next
from bi_launcher.engine.sleep import millisleep
from bi_launcher.engine.substitution import make_number_buf, sub_strings, substitute_command
from bi_launcher.engine.timer import TimerCalibration, gettime, time_cal

__all__ = [
    "NO_CHILD",
    "LaunchPhase",
    "ReapResult",
    "TimerCalibration",
    "build_argv",
    "children_pending",
    "dry_invoke",
    "gettime",
    "init_state",
    "invoke",
    "make_number_buf",
    "millisleep",
    "resolve_directory",
    "sub_strings",
    "substitute_command",
    "terminate",
    "time_cal",
    "wait_for_next",
]
