"""Runtime state and per-copy records shared by the launcher operations."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional, TextIO

from bi_launcher.models.config import LauncherConfig

NSEC_PER_SEC = 1_000_000_000


@dataclass(frozen=True, order=True)
class Timestamp:
    """Wall-clock instant split into whole seconds and nanoseconds."""

    sec: int
    nsec: int

    @classmethod
    def from_ns(cls, value: int) -> "Timestamp":
        sec, nsec = divmod(value, NSEC_PER_SEC)
        return cls(sec=sec, nsec=nsec)

    @classmethod
    def from_us(cls, sec: int, usec: int) -> "Timestamp":
        """Normalize a microsecond clock reading."""
        return cls(sec=sec, nsec=usec * 1000)

    def to_ns(self) -> int:
        return self.sec * NSEC_PER_SEC + self.nsec


@dataclass
class CopyInfo:
    """One concrete instance of a command, e.g. copy 3 of a benchmark."""

    num: int
    bind: Optional[str] = None
    dir: Optional[str] = None
    pid: Optional[int] = None
    start_time: Optional[Timestamp] = None

    def __post_init__(self) -> None:
        if self.num < 0:
            raise ValueError("CopyInfo: 'num' must be non-negative")


class LaunchObserver:
    """Hooks around process creation.

    ``pre_spawn`` and ``post_spawn`` run in the parent; ``pre_exec`` runs in
    the child after redirection, right before the shell replaces it.
    """

    def pre_spawn(self, command: str, copy: CopyInfo) -> None:
        return None

    def pre_exec(self, command: str, copy: CopyInfo) -> None:
        return None

    def post_spawn(self, pid: int, command: str, copy: CopyInfo) -> None:
        return None


@dataclass
class RuntimeState:
    """Context built once at startup and passed to every launcher operation."""

    config: LauncherConfig
    output: TextIO = field(default_factory=lambda: sys.stdout)
    observers: List[LaunchObserver] = field(default_factory=list)
    cleanup_hooks: List[Callable[[int], None]] = field(default_factory=list)
    in_child: bool = False

    @property
    def shell(self) -> str:
        return self.config.shell

    @property
    def debug(self) -> int:
        return self.config.debug
