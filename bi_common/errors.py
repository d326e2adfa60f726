"""Shared error taxonomy for bench-invoke."""

from __future__ import annotations

from typing import Any, Mapping


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class BIError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def diagnostic(self) -> str:
        """Human readable line with the OS error string and code, if any."""
        cause = self.__cause__
        if isinstance(cause, OSError) and cause.errno is not None:
            return f"{self}: {cause.strerror}({cause.errno})"
        return str(self)


class ConfigurationError(BIError):
    """Failure due to invalid configuration or a missing platform facility."""


class LaunchError(BIError):
    """Failure in the parent while creating a child process."""


class ChildSetupError(BIError):
    """Failure inside a forked child before the shell could be executed."""
