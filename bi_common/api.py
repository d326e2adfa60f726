"""Public API surface for bi_common."""

from bi_common.errors import (
    BIError,
    ChildSetupError,
    ConfigurationError,
    LaunchError,
)
from bi_common.logging import configure_logging

__all__ = [
    "BIError",
    "ChildSetupError",
    "ConfigurationError",
    "LaunchError",
    "configure_logging",
]
