"""Shared helpers for bench-invoke."""

from bi_common.api import BIError, ConfigurationError, configure_logging

__all__ = ["configure_logging", "BIError", "ConfigurationError"]
