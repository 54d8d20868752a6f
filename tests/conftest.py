# SPDX-License-Identifier: MIT
"""Shared fixtures for luabuild tests."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from luabuild import config
from luabuild.core.cc import CcBuild
from luabuild.tools.toolchain import CompilerTool, ToolchainFamily

BUILD_VARIABLES = (
    "LUABUILD_VARS",
    "CC",
    "AR",
    "TARGET",
    "HOST",
    "OUT_DIR",
    "OPT_LEVEL",
    "DEBUG",
    "LUABUILD_LUA_DIR",
)


@pytest.fixture(autouse=True)
def clean_build_variables(monkeypatch):
    """Isolate tests from build variables set in the environment."""
    for name in BUILD_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    config._reset_cli_vars()
    yield
    # set_cli_vars writes os.environ directly
    os.environ.pop(config.VARS_ENV, None)
    config._reset_cli_vars()


def make_cc(family: ToolchainFamily, path: str = "cc") -> CcBuild:
    """A descriptor with a pre-detected compiler, so nothing is probed."""
    return CcBuild(tool=CompilerTool(path=Path(path), family=family))


@pytest.fixture
def gnu_cc() -> CcBuild:
    return make_cc(ToolchainFamily.GNU, "gcc")


@pytest.fixture
def clang_cc() -> CcBuild:
    return make_cc(ToolchainFamily.CLANG, "clang")


@pytest.fixture
def msvc_cc() -> CcBuild:
    return make_cc(ToolchainFamily.MSVC, "cl.exe")


@pytest.fixture
def clang_cl_cc() -> CcBuild:
    return make_cc(ToolchainFamily.CLANG_CL, "clang-cl")


class FakeRun:
    """Stand-in for subprocess.run that records commands.

    Attributes:
        commands: Every command passed in, in order.
        returncode: Exit status reported for commands matching fail_on.
    """

    def __init__(
        self,
        stdout: str = "",
        fail_on: str | None = None,
        returncode: int = 1,
    ) -> None:
        self.commands: list[list[str]] = []
        self.stdout = stdout
        self.fail_on = fail_on
        self.returncode = returncode

    def __call__(self, command, **kwargs):
        command = [str(part) for part in command]
        self.commands.append(command)
        failed = self.fail_on is not None and any(
            self.fail_on in part for part in command
        )
        return subprocess.CompletedProcess(
            command,
            self.returncode if failed else 0,
            stdout="error: boom\n" if failed else self.stdout,
            stderr="",
        )


@pytest.fixture
def fake_run(monkeypatch) -> FakeRun:
    """Patch subprocess.run everywhere with a recording fake."""
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake
