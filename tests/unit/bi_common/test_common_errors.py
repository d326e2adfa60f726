"""Tests for shared error helpers."""

from __future__ import annotations

import errno
from pathlib import Path

import pytest

from bi_common.errors import BIError, ChildSetupError, ConfigurationError, LaunchError


pytestmark = pytest.mark.unit_common


def test_context_is_normalized() -> None:
    err = ChildSetupError(
        "Can't open output file",
        context={
            "path": Path("/tmp/out"),
            "nested": {"value": Path("nested")},
            "items": (Path("a"), "b"),
        },
    )
    assert err.error_type == "ChildSetupError"
    assert err.context["path"].endswith("out")
    assert err.context["nested"]["value"] == "nested"
    assert err.context["items"] == ["a", "b"]


def test_diagnostic_appends_os_error_string_and_code() -> None:
    cause = FileNotFoundError(errno.ENOENT, "No such file or directory")
    err = ChildSetupError("Can't change directory to '/nope'", cause=cause)
    assert err.diagnostic() == (
        f"Can't change directory to '/nope': No such file or directory({errno.ENOENT})"
    )


def test_diagnostic_without_os_cause_is_message() -> None:
    err = ConfigurationError("bad token", cause=ValueError("x"))
    assert err.diagnostic() == "bad token"


def test_cause_is_chained() -> None:
    cause = BlockingIOError(errno.EAGAIN, "Resource temporarily unavailable")
    err = LaunchError("Can't fork", cause=cause)
    assert isinstance(err, BIError)
    assert err.__cause__ is cause
    assert err.context == {}
