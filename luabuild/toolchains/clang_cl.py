# SPDX-License-Identifier: MIT
"""Clang-CL toolchain implementation.

Clang-CL is LLVM's MSVC-compatible compiler driver for Windows.
It uses MSVC-style command-line flags and produces MSVC-compatible
objects, but understands GNU C dialects, which cl.exe does not.
"""

from __future__ import annotations

from luabuild.toolchains.msvc import MsvcToolchain
from luabuild.tools.toolchain import ToolchainFamily


class ClangClToolchain(MsvcToolchain):
    """Clang-CL toolchain: clang-cl with llvm-lib."""

    family = ToolchainFamily.CLANG_CL
    default_archiver = "llvm-lib"

    def __init__(self) -> None:
        super().__init__("clang-cl")

    def std_flags(self, std: str) -> list[str]:
        # Forwarded to the clang driver so gnu99 and friends are accepted
        return [f"/clang:-std={std}"]

    def target_flags(self, target: str | None, host: str | None) -> list[str]:
        if target and host and target != host:
            return [f"--target={target}"]
        return []
