"""Collect the next finished child of this process."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ReapResult:
    """Pid and raw wait status of a finished child.

    ``status`` is the platform-encoded value; the properties below decode it
    for callers that want an exit code or a signal number.
    """

    pid: Optional[int]
    status: Optional[int]

    @property
    def ready(self) -> bool:
        return self.pid is not None

    @property
    def exited(self) -> bool:
        return self.status is not None and os.WIFEXITED(self.status)

    @property
    def exit_code(self) -> Optional[int]:
        if not self.exited:
            return None
        return os.WEXITSTATUS(self.status)

    @property
    def signaled(self) -> bool:
        return self.status is not None and os.WIFSIGNALED(self.status)

    @property
    def term_signal(self) -> Optional[int]:
        if not self.signaled:
            return None
        return os.WTERMSIG(self.status)


NO_CHILD = ReapResult(pid=None, status=None)


def wait_for_next(blocking: bool) -> ReapResult:
    """
    Return the next terminated child, whichever it is.

    Non-blocking mode returns ``NO_CHILD`` immediately when nothing has
    finished yet. Both modes return ``NO_CHILD`` when this process has no
    children left to wait for.
    """
    try:
        if blocking:
            pid, status = os.wait()
        else:
            pid, status = os.waitpid(-1, os.WNOHANG)
    except ChildProcessError:
        return NO_CHILD
    if pid == 0:
        return NO_CHILD
    return ReapResult(pid=pid, status=status)


def children_pending() -> bool:
    """True while this process still has a child it could wait for.

    The check leaves finished children in place, so a later
    ``wait_for_next`` still collects them.
    """
    try:
        os.waitid(os.P_ALL, 0, os.WEXITED | os.WNOHANG | os.WNOWAIT)
    except ChildProcessError:
        return False
    return True
