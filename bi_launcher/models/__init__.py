"""Data model for the launcher."""

from bi_launcher.models.config import CommandInfo, LauncherConfig, StdinPolicy
from bi_launcher.models.state import (
    CopyInfo,
    LaunchObserver,
    RuntimeState,
    Timestamp,
)

__all__ = [
    "CommandInfo",
    "CopyInfo",
    "LaunchObserver",
    "LauncherConfig",
    "RuntimeState",
    "StdinPolicy",
    "Timestamp",
]
