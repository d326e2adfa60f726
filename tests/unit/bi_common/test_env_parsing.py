"""Tests for bi_common.config.env parsing utilities."""

import pytest

from bi_common.config import parse_bool_env, parse_int_env, parse_str_env


pytestmark = pytest.mark.unit_common


class TestParseBoolEnv:
    """Tests for parse_bool_env function."""

    def test_returns_none_for_none(self) -> None:
        assert parse_bool_env(None) is None

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on", "  on  "])
    def test_returns_true_for_truthy_values(self, value: str) -> None:
        assert parse_bool_env(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", "random", ""])
    def test_returns_false_for_falsy_values(self, value: str) -> None:
        assert parse_bool_env(value) is False


class TestParseIntEnv:
    """Tests for parse_int_env function."""

    def test_parses_valid_int(self) -> None:
        assert parse_int_env("42") == 42
        assert parse_int_env("  9  ") == 9

    def test_returns_none_for_invalid_or_missing(self) -> None:
        assert parse_int_env(None) is None
        assert parse_int_env("3.14") is None
        assert parse_int_env("") is None


class TestParseStrEnv:
    """Tests for parse_str_env function."""

    def test_strips_and_keeps_value(self) -> None:
        assert parse_str_env("  /bin/bash ") == "/bin/bash"

    def test_blank_is_none(self) -> None:
        assert parse_str_env("   ") is None
        assert parse_str_env(None) is None
