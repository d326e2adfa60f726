"""Placeholder substitution for command templates."""

from __future__ import annotations

from typing import Optional

from bi_common.errors import ConfigurationError
from bi_launcher.models.config import BIND_TOKEN, COPYNUM_TOKEN


def sub_strings(template: str, token: str, value: str) -> str:
    """Replace every occurrence of ``token`` in ``template`` with ``value``."""
    if not token:
        raise ConfigurationError("Substitution token must be non-empty")
    return template.replace(token, value)


def make_number_buf(num: int) -> str:
    """Render a copy number in plain decimal."""
    if num < 0:
        raise ConfigurationError(
            "Copy number must be non-negative", context={"num": num}
        )
    return str(int(num))


def substitute_command(
    template: str,
    copy_num: int,
    bind: Optional[str] = None,
    *,
    copy_token: str = COPYNUM_TOKEN,
    bind_token: str = BIND_TOKEN,
) -> str:
    """Expand the bind target, then the copy number, into ``template``."""
    cmd = template
    if bind is not None:
        cmd = sub_strings(cmd, bind_token, bind)
    return sub_strings(cmd, copy_token, make_number_buf(copy_num))
