# SPDX-License-Identifier: MIT
"""GCC toolchain implementation.

Provides GCC-style command lines:
- C compiler (gcc, cc)
- GNU archiver (ar)
"""

from __future__ import annotations

from pathlib import Path

from luabuild.tools.toolchain import BaseToolchain, ToolchainFamily


class GccToolchain(BaseToolchain):
    """GCC toolchain for C compilation into static libraries.

    Variables:
        dprefix: Define prefix ('-D')
        iprefix: Include directory prefix ('-I')
        default_archiver: Archiver command ('ar')
    """

    family = ToolchainFamily.GNU
    # Flags passed to ar: replace members, create archive, write index
    ARCHIVE_FLAGS = "crs"

    def __init__(self, name: str = "gcc") -> None:
        super().__init__(name)

    def std_flags(self, std: str) -> list[str]:
        return [f"-std={std}"]

    def warning_flags(self, warnings: bool, extra_warnings: bool) -> list[str]:
        flags: list[str] = []
        if warnings:
            flags.append("-Wall")
        if extra_warnings:
            flags.append("-Wextra")
        return flags

    def optimization_flags(self, opt_level: int | None, debug: bool) -> list[str]:
        flags: list[str] = []
        if opt_level is not None:
            flags.append(f"-O{opt_level}")
        if debug:
            flags.append("-g")
        return flags

    def compile_command(
        self, compiler: Path, flags: list[str], source: Path, obj: Path
    ) -> list[str]:
        return [str(compiler), *flags, "-c", "-o", str(obj), str(source)]

    def archive_command(
        self, archiver: Path, library: Path, objects: list[Path]
    ) -> list[str]:
        return [
            str(archiver),
            self.ARCHIVE_FLAGS,
            str(library),
            *(str(obj) for obj in objects),
        ]
