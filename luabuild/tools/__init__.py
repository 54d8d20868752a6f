# SPDX-License-Identifier: MIT
"""Toolchain abstractions."""

from luabuild.tools.toolchain import BaseToolchain, CompilerTool, ToolchainFamily

__all__ = ["BaseToolchain", "CompilerTool", "ToolchainFamily"]
