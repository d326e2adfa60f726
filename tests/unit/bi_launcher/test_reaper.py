"""Tests for collecting finished children."""

from __future__ import annotations

import io
import os
import signal
import time

import pytest

from bi_launcher.engine.invocation import init_state
from bi_launcher.engine.launcher import invoke
from bi_launcher.engine.reaper import NO_CHILD, ReapResult, children_pending, wait_for_next
from bi_launcher.models import CommandInfo, CopyInfo, LauncherConfig


pytestmark = pytest.mark.unit_launcher


@pytest.fixture
def state():
    return init_state(LauncherConfig(), output=io.StringIO())


def test_non_blocking_without_children_returns_sentinel() -> None:
    started = time.monotonic()
    result = wait_for_next(blocking=False)
    assert result is NO_CHILD
    assert not result.ready
    assert time.monotonic() - started < 1.0


def test_blocking_without_children_returns_sentinel() -> None:
    assert wait_for_next(blocking=True) is NO_CHILD


def test_every_launched_child_is_reaped(state) -> None:
    info = CommandInfo(cmd="/bin/true")
    launched = {invoke(CopyInfo(num=num), info, None, state) for num in range(5)}

    reaped = set()
    for _ in range(5):
        result = wait_for_next(blocking=True)
        assert result.ready
        assert result.exit_code == 0
        reaped.add(result.pid)

    assert reaped == launched
    assert wait_for_next(blocking=False) is NO_CHILD


def test_non_blocking_does_not_wait_for_running_child(state) -> None:
    pid = invoke(CopyInfo(num=0), CommandInfo(cmd="exec sleep 30"), None, state)
    try:
        started = time.monotonic()
        assert wait_for_next(blocking=False) is NO_CHILD
        assert time.monotonic() - started < 1.0
    finally:
        os.kill(pid, signal.SIGTERM)

    result = wait_for_next(blocking=True)
    assert result.pid == pid
    assert result.signaled
    assert result.term_signal == signal.SIGTERM
    assert result.exit_code is None


def test_exit_code_is_decoded_from_raw_status(state) -> None:
    pid = invoke(CopyInfo(num=0), CommandInfo(cmd="exit 3"), None, state)
    result = wait_for_next(blocking=True)
    assert result.pid == pid
    assert result.exited
    assert result.exit_code == 3
    assert os.waitstatus_to_exitcode(result.status) == 3


def test_sentinel_decodes_to_nothing() -> None:
    assert NO_CHILD == ReapResult(pid=None, status=None)
    assert NO_CHILD.exit_code is None
    assert NO_CHILD.term_signal is None


def test_children_pending_leaves_finished_child_for_reaper(state) -> None:
    assert not children_pending()
    pid = invoke(CopyInfo(num=0), CommandInfo(cmd="exit 4"), None, state)
    assert children_pending()

    time.sleep(0.2)
    assert children_pending()
    result = wait_for_next(blocking=True)
    assert result.pid == pid
    assert result.exit_code == 4
    assert not children_pending()
