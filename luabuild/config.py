# SPDX-License-Identifier: MIT
"""Build variable lookup.

Variables can be set when invoking the CLI:
    luabuild build CC=clang OUT_DIR=out

or through the environment:
    CC=clang python build.py
"""

from __future__ import annotations

import json
import logging
import os

logger = logging.getLogger(__name__)

# Environment variable used by the CLI to hand KEY=value arguments down
VARS_ENV = "LUABUILD_VARS"

# KEY=value variables from the command line, loaded lazily
_cli_vars: dict[str, str] | None = None


def get_var(name: str, default: str | None = None) -> str | None:
    """Look up a build variable.

    A value given on the command line (luabuild build VAR=value) wins
    over one in the environment (VAR=value luabuild build).

    Args:
        name: Variable name.
        default: Returned when the variable is set nowhere.

    Returns:
        The value found, else default.
    """
    global _cli_vars

    if _cli_vars is None:
        raw = os.environ.get(VARS_ENV)
        if raw:
            try:
                _cli_vars = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed %s: %r", VARS_ENV, raw)
                _cli_vars = {}
        else:
            _cli_vars = {}

    if name in _cli_vars:
        return _cli_vars[name]

    return os.environ.get(name, default)


def set_cli_vars(variables: dict[str, str]) -> None:
    """Install command-line variables for this process and its children."""
    global _cli_vars

    _cli_vars = dict(variables)
    os.environ[VARS_ENV] = json.dumps(_cli_vars)


def _reset_cli_vars() -> None:
    """Forget cached command-line variables (used by tests)."""
    global _cli_vars

    _cli_vars = None


def get_bool_var(name: str, default: bool = False) -> bool:
    """Get a build variable interpreted as a boolean flag."""
    value = get_var(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")
