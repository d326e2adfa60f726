"""
Fork/exec of one command copy.

An invocation moves through three phases: it is prepared in the parent
(directory, substitution, start time), then the fork splits it into a child
that plumbs its descriptors and execs the shell without ever returning, and a
parent that records the pid and writes the launch log line.
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from enum import Enum
from typing import Mapping, NoReturn, Optional

from bi_common.errors import ChildSetupError, LaunchError
from bi_launcher.engine.fatal import report, terminate
from bi_launcher.engine.invocation import build_argv, resolve_directory
from bi_launcher.engine.substitution import substitute_command
from bi_launcher.engine.timer import gettime
from bi_launcher.events import LaunchRecord, emit_launch
from bi_launcher.models.config import CommandInfo, StdinPolicy
from bi_launcher.models.state import CopyInfo, RuntimeState, Timestamp

logger = logging.getLogger(__name__)

EMPTY_FILE_TEMPLATE = "spec_empty_file.{num}.{pid}"
EXEC_FAILED_EXIT = 127


class LaunchPhase(str, Enum):
    """Where an invocation currently is."""

    PREPARING = "preparing"
    CHILD_EXECUTING = "child-executing"
    PARENT_TRACKING = "parent-tracking"


def empty_file_name(num: int, pid: int) -> str:
    """Name of the zero-length stdin file for a copy."""
    return EMPTY_FILE_TEMPLATE.format(num=num, pid=pid)


def expand_command(copy: CopyInfo, command: CommandInfo, state: RuntimeState) -> str:
    """Return the fully substituted command line for ``copy``."""
    return substitute_command(
        command.cmd,
        copy.num,
        copy.bind,
        copy_token=state.config.copy_token,
        bind_token=state.config.bind_token,
    )


def dry_invoke(copy: CopyInfo, command: CommandInfo, state: RuntimeState) -> int:
    """Log what would run for ``copy`` without creating a process."""
    cmd = expand_command(copy, command, state)
    copy.start_time = gettime()
    copy.pid = 0
    state.output.write(f"dry run: {copy.num}, '{cmd}'\n")
    state.output.flush()
    return 0


def invoke(
    copy: CopyInfo,
    command: CommandInfo,
    env: Optional[Mapping[str, str]],
    state: RuntimeState,
) -> int:
    """
    Start one copy of ``command`` and return the child's pid.

    Args:
        copy: Copy being launched; its ``pid`` and ``start_time`` are filled in
        command: Command template and redirection paths
        env: Environment for the child, the current environment when None
        state: Runtime state built by ``init_state``

    Returns:
        The child pid, or 0 in dry-run mode
    """
    directory = resolve_directory(copy, command)
    if state.config.dry_run:
        return dry_invoke(copy, command, state)

    cmd = expand_command(copy, command, state)
    environ = dict(os.environ if env is None else env)
    logger.debug(
        "%s copy %d in %s: %s",
        LaunchPhase.PREPARING.value,
        copy.num,
        directory or ".",
        cmd,
    )
    for observer in state.observers:
        observer.pre_spawn(cmd, copy)

    _flush_streams(state)
    start = gettime()
    copy.start_time = start
    phase, pid = _fork(state)
    if phase is LaunchPhase.CHILD_EXECUTING:
        _run_child(cmd, copy, command, directory, environ, state)
    return _track_child(pid, cmd, start, copy, state)


def _flush_streams(state: RuntimeState) -> None:
    # Anything still buffered would be written twice, once by each process.
    for stream in (sys.stdout, sys.stderr, state.output):
        stream.flush()


def _fork(state: RuntimeState) -> tuple[LaunchPhase, int]:
    try:
        pid = os.fork()
    except OSError as exc:
        error = LaunchError("Can't fork", cause=exc)
        report(error.diagnostic())
        terminate(2, state)
    if pid == 0:
        return LaunchPhase.CHILD_EXECUTING, 0
    return LaunchPhase.PARENT_TRACKING, pid


def _track_child(
    pid: int, cmd: str, start: Timestamp, copy: CopyInfo, state: RuntimeState
) -> int:
    copy.pid = pid
    for observer in state.observers:
        observer.post_spawn(pid, cmd, copy)
    emit_launch(
        state.output,
        LaunchRecord(num=copy.num, sec=start.sec, nsec=start.nsec, pid=pid, cmd=cmd),
    )
    logger.debug("%s pid %d for copy %d", LaunchPhase.PARENT_TRACKING.value, pid, copy.num)
    return pid


def _run_child(
    cmd: str,
    copy: CopyInfo,
    command: CommandInfo,
    directory: Optional[str],
    environ: dict[str, str],
    state: RuntimeState,
) -> NoReturn:
    state.in_child = True
    try:
        if directory:
            _enter_directory(directory)
        if state.config.redirect:
            _redirect_stdio(copy, command, state.config.stdin_policy)
        for observer in state.observers:
            observer.pre_exec(cmd, copy)
        argv = build_argv(state, cmd)
        try:
            os.execve(argv[0], argv, environ)
        except OSError as exc:
            report(f"Can't exec '{argv[0]}': {exc.strerror}({exc.errno})", state)
            terminate(EXEC_FAILED_EXIT, state)
    except ChildSetupError as exc:
        report(exc.diagnostic(), state)
        terminate(1, state)
    except BaseException:
        report(traceback.format_exc(), state)
        terminate(1, state)


def _enter_directory(directory: str) -> None:
    try:
        os.chdir(directory)
    except OSError as exc:
        raise ChildSetupError(
            f"Can't change directory to '{directory}'",
            context={"dir": directory},
            cause=exc,
        ) from exc


def _open(path: str, flags: int, mode: int, message: str) -> int:
    try:
        return os.open(path, flags, mode)
    except OSError as exc:
        raise ChildSetupError(message, context={"path": path}, cause=exc) from exc


def _attach(fd: int, target: int) -> None:
    """Make ``fd`` the child's descriptor ``target``, surviving exec."""
    if fd == target:
        os.set_inheritable(fd, True)
        return
    os.dup2(fd, target)
    os.close(fd)


def _redirect_stdio(copy: CopyInfo, command: CommandInfo, policy: StdinPolicy) -> None:
    if command.error is not None:
        errfd = _open(
            command.error,
            os.O_WRONLY | os.O_CREAT | os.O_APPEND,
            0o644,
            f"Can't open error file '{command.error}'",
        )
        sys.stderr.flush()
        _attach(errfd, 2)

    if command.input is not None:
        infd = _open(
            command.input, os.O_RDONLY, 0, f"Can't open input file '{command.input}'"
        )
        _attach(infd, 0)
    elif policy is StdinPolicy.NULL:
        _attach(_open(os.devnull, os.O_RDONLY, 0, "Can't open /dev/null for stdin"), 0)
    elif policy is StdinPolicy.ZERO_FILE:
        tmpfile = empty_file_name(copy.num, os.getpid())
        infd = _open(
            tmpfile,
            os.O_RDWR | os.O_CREAT | os.O_TRUNC,
            0o666,
            f"Can't create {tmpfile} for stdin",
        )
        try:
            os.unlink(tmpfile)
        except OSError as exc:
            raise ChildSetupError(
                f"Can't remove {tmpfile}", context={"path": tmpfile}, cause=exc
            ) from exc
        _attach(infd, 0)
    else:
        os.dup2(2, 0)

    sys.stdout.flush()
    if command.output is not None:
        outfd = _open(
            command.output,
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
            0o644,
            f"Can't open output file '{command.output}'",
        )
        _attach(outfd, 1)
    else:
        os.dup2(2, 1)
