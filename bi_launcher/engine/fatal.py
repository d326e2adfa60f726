"""Single exit path for unrecoverable conditions."""

from __future__ import annotations

import logging
import os
import sys
from typing import NoReturn, Optional

from bi_launcher.models.state import RuntimeState

logger = logging.getLogger(__name__)


def report(message: str, state: Optional[RuntimeState] = None) -> None:
    """Write a diagnostic line straight to the error stream.

    In a forked child the line goes to descriptor 2 itself, which by then
    points at the redirected error file; ``sys.stderr`` may be rebound to
    something else entirely.
    """
    line = message.rstrip("\n") + "\n"
    if state is not None and state.in_child:
        os.write(2, line.encode("utf-8", "replace"))
        return
    sys.stderr.write(line)
    sys.stderr.flush()


def terminate(code: int, state: Optional[RuntimeState] = None) -> NoReturn:
    """Run cleanup hooks and leave the process with ``code``.

    A forked child must never unwind into the caller's stack, so it leaves
    through ``os._exit``; the parent raises ``SystemExit``.
    """
    in_child = bool(state and state.in_child)
    if state is not None:
        for hook in state.cleanup_hooks:
            try:
                hook(code)
            except Exception:
                logger.exception("Exit cleanup hook failed")
        try:
            state.output.flush()
        except (OSError, ValueError) as exc:
            logger.debug("Could not flush launch log on exit: %s", exc)
    if in_child:
        sys.stderr.flush()
        os._exit(code)
    raise SystemExit(code)
