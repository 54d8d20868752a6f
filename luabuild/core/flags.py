# SPDX-License-Identifier: MIT
"""Preprocessor define helpers for luabuild.

Defines are accumulated as (name, value) pairs and only turned into
compiler flags by a toolchain, which owns the flag prefix (``-D`` or
``/D``). Values are inserted verbatim; string values must be quoted
with c_string_literal() first.
"""

from __future__ import annotations

from typing import NamedTuple


class Define(NamedTuple):
    """A preprocessor symbol with an optional verbatim value."""

    name: str
    value: str | None = None


def escape_c_string(text: str) -> str:
    """Escape text for use between the quotes of a C string literal.

    Backslashes are doubled first, then double quotes are escaped, so the
    backslashes introduced for the quotes are not doubled again.

    Examples:
        >>> escape_c_string('C:\\\\lua')
        'C:\\\\\\\\lua'
        >>> escape_c_string('say "hi"')
        'say \\\\"hi\\\\"'
    """
    return text.replace("\\", "\\\\").replace('"', '\\"')


def c_string_literal(text: str) -> str:
    """Render text as a double-quoted C string literal."""
    return f'"{escape_c_string(text)}"'


def format_define(define: Define, prefix: str = "-D") -> str:
    """Format a define as a single compiler argument.

    Args:
        define: The define to format.
        prefix: Toolchain define prefix ('-D' or '/D').

    Returns:
        'PREFIXNAME' for flag defines, 'PREFIXNAME=value' otherwise.
    """
    if define.value is None:
        return f"{prefix}{define.name}"
    return f"{prefix}{define.name}={define.value}"
