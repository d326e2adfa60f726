"""Launcher configuration and command descriptors."""

from __future__ import annotations

import os
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bi_common.config.env import parse_bool_env, parse_int_env, parse_str_env

DEFAULT_SHELL = "/bin/sh"
COPYNUM_TOKEN = "$SPECCOPYNUM"
BIND_TOKEN = "$BIND"


class StdinPolicy(str, Enum):
    """What a child's stdin is attached to when no input file is given."""

    NULL = "null"
    ZERO_FILE = "zero-file"
    STDERR = "stderr"


class LauncherConfig(BaseModel):
    """Process-wide launcher settings, fixed for the lifetime of a run."""

    shell: str = Field(default=DEFAULT_SHELL, description="Shell used to run each command with -c")
    dry_run: bool = Field(default=False, description="Log commands without creating processes")
    redirect: bool = Field(default=True, description="Attach child stdio to the configured files")
    stdin_policy: StdinPolicy = Field(
        default=StdinPolicy.NULL,
        description="Stdin source for children that have no input file",
    )
    copy_token: str = Field(default=COPYNUM_TOKEN, description="Placeholder replaced by the copy number")
    bind_token: str = Field(default=BIND_TOKEN, description="Placeholder replaced by the bind target")
    debug: int = Field(default=0, ge=0, description="Diagnostic verbosity")

    @model_validator(mode="after")
    def validate_tokens(self) -> "LauncherConfig":
        if not self.shell or not self.shell.strip():
            raise ValueError("LauncherConfig: 'shell' must be non-empty")
        if not self.copy_token or not self.bind_token:
            raise ValueError("LauncherConfig: substitution tokens must be non-empty")
        return self

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> "LauncherConfig":
        """Build a config from BI_* environment variables plus explicit overrides."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        shell = parse_str_env(env.get("BI_SHELL"))
        if shell is not None:
            values["shell"] = shell
        dry_run = parse_bool_env(env.get("BI_DRY_RUN"))
        if dry_run is not None:
            values["dry_run"] = dry_run
        redirect = parse_bool_env(env.get("BI_REDIRECT"))
        if redirect is not None:
            values["redirect"] = redirect
        policy = parse_str_env(env.get("BI_STDIN_POLICY"))
        if policy is not None:
            values["stdin_policy"] = policy
        debug = parse_int_env(env.get("BI_DEBUG"))
        if debug is not None:
            values["debug"] = debug
        values.update({key: val for key, val in overrides.items() if val is not None})
        return cls(**values)


class CommandInfo(BaseModel):
    """One benchmark command as handed over by the configuration loader."""

    model_config = ConfigDict(frozen=True)

    cmd: str = Field(description="Command template, may contain placeholders")
    dir: Optional[str] = Field(default=None, description="Working directory for the command")
    input: Optional[str] = Field(default=None, description="File attached to stdin")
    output: Optional[str] = Field(default=None, description="File stdout is written to (truncated)")
    error: Optional[str] = Field(default=None, description="File stderr is appended to")
