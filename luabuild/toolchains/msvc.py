# SPDX-License-Identifier: MIT
"""MSVC toolchain implementation (Windows only)."""

from __future__ import annotations

from pathlib import Path

from luabuild.tools.toolchain import BaseToolchain, ToolchainFamily


class MsvcToolchain(BaseToolchain):
    """MSVC toolchain: cl.exe and lib.exe.

    cl.exe takes /D and /I with the value attached, and names the
    object file with /Fo.
    """

    family = ToolchainFamily.MSVC
    default_archiver = "lib.exe"
    dprefix = "/D"
    iprefix = "/I"

    def __init__(self, name: str = "msvc") -> None:
        super().__init__(name)

    def std_flags(self, std: str) -> list[str]:
        return [f"/std:{std}"]

    def warning_flags(self, warnings: bool, extra_warnings: bool) -> list[str]:
        # /W4 already covers what -Wextra adds for GCC
        return ["/W4"] if warnings or extra_warnings else []

    def optimization_flags(self, opt_level: int | None, debug: bool) -> list[str]:
        flags: list[str] = []
        if opt_level == 0:
            flags.append("/Od")
        elif opt_level is not None:
            flags.append("/O2")
        if debug:
            flags.append("/Z7")
        return flags

    def compile_command(
        self, compiler: Path, flags: list[str], source: Path, obj: Path
    ) -> list[str]:
        return [str(compiler), "/nologo", *flags, "/c", f"/Fo{obj}", str(source)]

    def archive_command(
        self, archiver: Path, library: Path, objects: list[Path]
    ) -> list[str]:
        return [
            str(archiver),
            "/nologo",
            f"/OUT:{library}",
            *(str(obj) for obj in objects),
        ]

    def get_object_suffix(self) -> str:
        return ".obj"

    def get_static_library_name(self, name: str) -> str:
        """Return filename for a static library (Windows-style)."""
        if name.endswith(".lib"):
            return name
        return f"{name}.lib"
