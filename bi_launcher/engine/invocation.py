"""Runtime state construction and per-invocation argument vectors."""

from __future__ import annotations

import logging
from typing import Optional, TextIO

from bi_launcher.engine.fatal import report, terminate
from bi_launcher.models.config import CommandInfo, LauncherConfig
from bi_launcher.models.state import CopyInfo, RuntimeState

logger = logging.getLogger(__name__)


def init_state(
    config: Optional[LauncherConfig] = None,
    output: Optional[TextIO] = None,
) -> RuntimeState:
    """Create the runtime state once, at startup."""
    try:
        state = RuntimeState(config=config or LauncherConfig())
    except MemoryError:
        report("Could not allocate storage for state structure")
        terminate(1)
    if output is not None:
        state.output = output
    logger.debug(
        "Launcher state ready: shell=%s redirect=%s stdin=%s dry_run=%s",
        state.shell,
        state.config.redirect,
        state.config.stdin_policy.value,
        state.config.dry_run,
    )
    return state


def build_argv(state: RuntimeState, command: str) -> list[str]:
    """Return a fresh ``shell -c command`` vector for one invocation."""
    return [state.shell, "-c", command]


def resolve_directory(copy: CopyInfo, command: CommandInfo) -> Optional[str]:
    """The copy's directory override wins over the command's directory."""
    if copy.dir is not None:
        return copy.dir
    return command.dir
