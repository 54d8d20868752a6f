# SPDX-License-Identifier: MIT
"""Compiler invocation descriptor.

CcBuild accumulates everything needed to turn a set of C files into a
static library (files, include paths, defines, dialect, warnings,
optimization) and runs the compiler and archiver when asked to
compile. Every setter is additive or overwrites a scalar; nothing is
de-duplicated.
"""

from __future__ import annotations

import hashlib
import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from luabuild.config import get_var
from luabuild.configure.config import find_program
from luabuild.configure.platform import host_triple
from luabuild.core.errors import CompileError, ToolNotFoundError
from luabuild.core.flags import Define
from luabuild.toolchains import detect_compiler, toolchain_for_family
from luabuild.tools.toolchain import BaseToolchain, CompilerTool

logger = logging.getLogger(__name__)

# Files the bundled tree carries in src/ that are not compilation units
HEADER_SUFFIXES = frozenset([".h", ".hpp"])


class CcBuild:
    """Accumulated configuration for one static library compilation.

    Attributes:
        files: Source files to compile, in the order they were added.
        includes: Include directories.
        defines: Preprocessor defines, duplicates kept.
        std: C dialect to request, or None for the compiler default.
        warnings: Whether to enable the standard warning set.
        extra_warnings: Whether to enable extra warnings.
        debug: Whether to emit debug info.
        opt_level: Optimization level, or None for the compiler default.
    """

    def __init__(self, *, tool: CompilerTool | None = None) -> None:
        """Create an empty descriptor.

        Args:
            tool: Pre-detected compiler; skips detection when given.
        """
        self.files: list[Path] = []
        self.includes: list[Path] = []
        self.defines: list[Define] = []
        self.std: str | None = None
        self.warnings = False
        self.extra_warnings = False
        self.debug = False
        self.opt_level: int | None = None
        self._host: str | None = None
        self._target: str | None = None
        self._out_dir: Path | None = None
        self._compiler: str | Path | None = None
        self._archiver: str | Path | None = None
        self._tool = tool

    # =========================================================================
    # Setters
    # =========================================================================

    def file(self, path: Path | str) -> CcBuild:
        self.files.append(Path(path))
        return self

    def add_files(self, paths: Iterable[Path | str]) -> CcBuild:
        for path in paths:
            self.file(path)
        return self

    def include(self, path: Path | str) -> CcBuild:
        self.includes.append(Path(path))
        return self

    def add_includes(self, paths: Iterable[Path | str]) -> CcBuild:
        for path in paths:
            self.include(path)
        return self

    def define(self, name: str, value: str | None = None) -> CcBuild:
        self.defines.append(Define(name, value))
        return self

    def set_std(self, std: str) -> CcBuild:
        self.std = std
        return self

    def set_warnings(self, enabled: bool) -> CcBuild:
        self.warnings = enabled
        return self

    def set_extra_warnings(self, enabled: bool) -> CcBuild:
        self.extra_warnings = enabled
        return self

    def set_debug(self, enabled: bool) -> CcBuild:
        self.debug = enabled
        return self

    def set_opt_level(self, opt_level: int) -> CcBuild:
        if opt_level < 0:
            raise ValueError(f"optimization level must be unsigned: {opt_level}")
        self.opt_level = opt_level
        return self

    def set_host(self, host: str) -> CcBuild:
        self._host = host
        return self

    def set_target(self, target: str) -> CcBuild:
        self._target = target
        return self

    def set_out_dir(self, path: Path | str) -> CcBuild:
        self._out_dir = Path(path)
        return self

    def set_compiler(self, compiler: Path | str) -> CcBuild:
        """Use a specific compiler; detection runs again on next use."""
        self._compiler = compiler
        self._tool = None
        return self

    def set_archiver(self, archiver: Path | str) -> CcBuild:
        self._archiver = archiver
        return self

    # =========================================================================
    # Resolved settings
    # =========================================================================

    @property
    def host(self) -> str:
        return self._host or host_triple()

    @property
    def target(self) -> str:
        return self._target or get_var("TARGET") or self.host

    @property
    def out_dir(self) -> Path:
        if self._out_dir is not None:
            return self._out_dir
        return Path(get_var("OUT_DIR") or "build")

    def try_get_compiler(self) -> CompilerTool:
        """Return the compiler, detecting it on first use.

        Raises:
            ToolNotFoundError: If no compiler is available.
            ToolchainError: If the compiler could not be probed.
        """
        if self._tool is None:
            self._tool = detect_compiler(
                self._compiler, target=self.target, host=self.host
            )
        return self._tool

    def toolchain(self) -> BaseToolchain:
        return toolchain_for_family(self.try_get_compiler().family)

    # =========================================================================
    # Commands
    # =========================================================================

    def compile_flags(self) -> list[str]:
        """Flags shared by every compile command, in a stable order."""
        toolchain = self.toolchain()
        flags: list[str] = []
        flags.extend(toolchain.target_flags(self.target, self.host))
        if self.std is not None:
            flags.extend(toolchain.std_flags(self.std))
        flags.extend(toolchain.warning_flags(self.warnings, self.extra_warnings))
        flags.extend(toolchain.optimization_flags(self.opt_level, self.debug))
        flags.extend(toolchain.include_flags(self.includes))
        flags.extend(toolchain.define_flags(self.defines))
        return flags

    def object_path(self, source: Path) -> Path:
        """Object file for a source.

        The full file name is kept (lapi.c gives lapi.c.o) and prefixed
        with a hash of the parent directory, so no two sources share an
        object.
        """
        digest = hashlib.sha1(str(source.parent).encode("utf-8")).hexdigest()[:16]
        suffix = self.toolchain().get_object_suffix()
        return self.out_dir / f"{digest}-{source.name}{suffix}"

    def _archiver_path(self, toolchain: BaseToolchain) -> Path:
        archiver = self._archiver or get_var("AR") or toolchain.default_archiver
        path = find_program(str(archiver))
        if path is None:
            raise ToolNotFoundError(str(archiver))
        return path

    def try_compile(self, output: str) -> Path:
        """Compile all files and archive them into a static library.

        Args:
            output: Library name ('lua' gives liblua.a or lua.lib).

        Returns:
            Path of the static library.

        Raises:
            ToolchainError: If the toolchain is missing or a command fails.
            OSError: If the output directory cannot be created.
        """
        tool = self.try_get_compiler()
        toolchain = toolchain_for_family(tool.family)
        out_dir = self.out_dir
        out_dir.mkdir(parents=True, exist_ok=True)

        flags = self.compile_flags()
        objects: list[Path] = []
        for source in self.files:
            if source.suffix.lower() in HEADER_SUFFIXES:
                logger.debug("Not compiling header %s", source)
                continue
            obj = self.object_path(source)
            command = toolchain.compile_command(tool.path, flags, source, obj)
            logger.info("Compiling %s", source)
            _run(command, f"failed to compile {source}")
            objects.append(obj)

        library = out_dir / toolchain.get_static_library_name(output)
        # Archivers append to an existing library, so start clean
        library.unlink(missing_ok=True)
        command = toolchain.archive_command(
            self._archiver_path(toolchain), library, objects
        )
        logger.info("Archiving %s", library)
        _run(command, f"failed to archive {library}")
        return library

    def __repr__(self) -> str:
        return (
            f"CcBuild(files={len(self.files)}, includes={len(self.includes)}, "
            f"defines={len(self.defines)}, std={self.std!r})"
        )


def _run(command: list[str], message: str) -> None:
    logger.debug("Running: %s", " ".join(command))
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise CompileError(f"{message}: {e}", command=command) from e
    if result.returncode != 0:
        raise CompileError(
            f"{message} (exit status {result.returncode})",
            command=command,
            returncode=result.returncode,
            output=result.stdout or "",
        )
