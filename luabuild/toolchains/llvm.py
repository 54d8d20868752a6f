# SPDX-License-Identifier: MIT
"""LLVM/Clang toolchain implementation.

Clang accepts GCC-style command lines; the difference that matters here
is that one clang binary can target any triple, selected with --target.
"""

from __future__ import annotations

from luabuild.toolchains.gcc import GccToolchain
from luabuild.tools.toolchain import ToolchainFamily


class LlvmToolchain(GccToolchain):
    """LLVM toolchain: clang driven like gcc, plus cross targeting."""

    family = ToolchainFamily.CLANG

    def __init__(self) -> None:
        super().__init__("llvm")

    def target_flags(self, target: str | None, host: str | None) -> list[str]:
        if target and host and target != host:
            return [f"--target={target}"]
        return []
