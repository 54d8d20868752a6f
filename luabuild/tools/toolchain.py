# SPDX-License-Identifier: MIT
"""Toolchain protocol and base implementation.

A Toolchain knows how one compiler family spells its command lines:
dialect selection, warnings, defines, include paths, optimization,
object compilation and static library archiving.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from luabuild.core.flags import format_define

if TYPE_CHECKING:
    from luabuild.core.flags import Define


class ToolchainFamily(enum.Enum):
    """Compiler families that need distinct command-line handling."""

    GNU = "gnu"
    CLANG = "clang"
    MSVC = "msvc"
    CLANG_CL = "clang_cl"

    @property
    def is_like_gnu(self) -> bool:
        return self is ToolchainFamily.GNU

    @property
    def is_like_clang(self) -> bool:
        return self is ToolchainFamily.CLANG

    @property
    def is_like_msvc(self) -> bool:
        return self is ToolchainFamily.MSVC

    @property
    def is_like_clang_cl(self) -> bool:
        return self is ToolchainFamily.CLANG_CL


@dataclass(frozen=True)
class CompilerTool:
    """A detected C compiler.

    Attributes:
        path: Path (or bare command name) of the compiler executable.
        family: The compiler family, which selects the toolchain.
        version: First line of the compiler's version output, if known.
    """

    path: Path
    family: ToolchainFamily
    version: str | None = None


class BaseToolchain(ABC):
    """Abstract base class for toolchains.

    Subclasses provide the flag spelling for one compiler family.
    """

    family: ToolchainFamily
    default_archiver: str = "ar"
    dprefix: str = "-D"
    iprefix: str = "-I"

    def __init__(self, name: str) -> None:
        """Initialize a toolchain.

        Args:
            name: Toolchain name.
        """
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    # =========================================================================
    # Compile flags
    # =========================================================================

    @abstractmethod
    def std_flags(self, std: str) -> list[str]:
        """Flags selecting the C dialect."""
        ...

    @abstractmethod
    def warning_flags(self, warnings: bool, extra_warnings: bool) -> list[str]:
        """Flags enabling compiler warnings."""
        ...

    @abstractmethod
    def optimization_flags(self, opt_level: int | None, debug: bool) -> list[str]:
        """Flags for the optimization level and debug info."""
        ...

    def target_flags(self, target: str | None, host: str | None) -> list[str]:
        """Flags selecting the target; none unless the family needs them."""
        return []

    def define_flags(self, defines: list[Define]) -> list[str]:
        """Flags for preprocessor defines, in order, duplicates kept."""
        return [format_define(d, self.dprefix) for d in defines]

    def include_flags(self, includes: list[Path]) -> list[str]:
        return [f"{self.iprefix}{path}" for path in includes]

    # =========================================================================
    # Commands
    # =========================================================================

    @abstractmethod
    def compile_command(
        self, compiler: Path, flags: list[str], source: Path, obj: Path
    ) -> list[str]:
        """Command compiling one source file to an object file."""
        ...

    @abstractmethod
    def archive_command(
        self, archiver: Path, library: Path, objects: list[Path]
    ) -> list[str]:
        """Command bundling object files into a static library."""
        ...

    # =========================================================================
    # Naming
    # =========================================================================

    def get_object_suffix(self) -> str:
        return ".o"

    def get_static_library_name(self, name: str) -> str:
        """Return filename for a static library (Unix-style).

        Names that already carry the prefix and suffix are kept as-is.
        """
        if name.startswith("lib") and name.endswith(".a"):
            return name
        return f"lib{name}.a"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
