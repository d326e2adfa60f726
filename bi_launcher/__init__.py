"""Launcher facade for bench-invoke.

Re-exports the types callers need to start command copies and reap them.
"""

from bi_launcher.api import (
    CommandInfo,
    CopyInfo,
    LauncherConfig,
    RuntimeState,
    init_state,
    invoke,
    wait_for_next,
)

__all__ = [
    "CommandInfo",
    "CopyInfo",
    "LauncherConfig",
    "RuntimeState",
    "init_state",
    "invoke",
    "wait_for_next",
]
