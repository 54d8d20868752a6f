# SPDX-License-Identifier: MIT
"""Toolchain definitions (GCC, LLVM, MSVC, Clang-CL) and compiler detection."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from luabuild.config import get_var
from luabuild.configure.config import find_program
from luabuild.core.errors import ToolchainError, ToolNotFoundError
from luabuild.toolchains.clang_cl import ClangClToolchain
from luabuild.toolchains.gcc import GccToolchain
from luabuild.toolchains.llvm import LlvmToolchain
from luabuild.toolchains.msvc import MsvcToolchain
from luabuild.tools.toolchain import BaseToolchain, CompilerTool, ToolchainFamily

logger = logging.getLogger(__name__)

_TOOLCHAINS: dict[ToolchainFamily, type[BaseToolchain]] = {
    ToolchainFamily.GNU: GccToolchain,
    ToolchainFamily.CLANG: LlvmToolchain,
    ToolchainFamily.MSVC: MsvcToolchain,
    ToolchainFamily.CLANG_CL: ClangClToolchain,
}


def toolchain_for_family(family: ToolchainFamily) -> BaseToolchain:
    """Create the toolchain that spells command lines for a family."""
    return _TOOLCHAINS[family]()


def compiler_candidates(target: str, host: str) -> list[str]:
    """List compiler commands to try for a target, most preferred first.

    Cross compilers come first when target and host differ; the host
    compilers follow as a fallback.
    """
    if target.endswith("-windows-msvc"):
        return ["cl.exe", "clang-cl"]
    if "-apple-" in target:
        return ["clang", "cc"]
    candidates = ["cc", "gcc", "clang"]
    if target != host:
        candidates[:0] = _cross_compilers(target)
    return candidates


def _cross_compilers(target: str) -> list[str]:
    """Prefixed GCC names distributions use for a target."""
    if target.endswith("-windows-gnu"):
        # MinGW-w64 packages name their tools <arch>-w64-mingw32-*
        arch = target.split("-", 1)[0]
        return [f"{arch}-w64-mingw32-gcc"]
    return [f"{target}-gcc"]


def _family_from_name(path: Path) -> ToolchainFamily | None:
    """Recognize MSVC-style drivers, which do not understand --version."""
    stem = path.name.lower().removesuffix(".exe")
    if stem == "cl":
        return ToolchainFamily.MSVC
    if stem.endswith("clang-cl"):
        return ToolchainFamily.CLANG_CL
    return None


def _version_output(path: Path) -> str:
    """Run ``path --version`` and return stdout and stderr together.

    Raises:
        ToolchainError: If the compiler cannot be run or fails.
    """
    try:
        result = subprocess.run(
            [str(path), "--version"],
            capture_output=True,
            text=True,
            timeout=30,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        raise ToolchainError(f"failed to probe compiler {path}: {e}") from e
    if result.returncode != 0:
        raise ToolchainError(
            f"failed to probe compiler {path}: exit status {result.returncode}"
        )
    return f"{result.stdout}\n{result.stderr}"


def _family_from_version(output: str) -> ToolchainFamily:
    return ToolchainFamily.CLANG if "clang" in output.lower() else ToolchainFamily.GNU


def _first_line(output: str) -> str | None:
    return next((line.strip() for line in output.splitlines() if line.strip()), None)


def probe_compiler(path: Path) -> CompilerTool:
    """Detect the family and version of the compiler at path.

    MSVC-style drivers are recognized by name. Anything else is asked
    for its version; output mentioning clang means a Clang compiler,
    otherwise it is assumed to be GCC-like.

    Raises:
        ToolchainError: If the compiler cannot be run.
    """
    family = _family_from_name(path)
    if family is not None:
        return CompilerTool(path=path, family=family)
    output = _version_output(path)
    return CompilerTool(
        path=path, family=_family_from_version(output), version=_first_line(output)
    )


def detect_compiler(
    compiler: str | Path | None = None,
    *,
    target: str,
    host: str,
) -> CompilerTool:
    """Locate the C compiler and detect its family.

    Args:
        compiler: Explicit compiler command or path; when None the CC
            build variable is used, then the defaults for the target.
        target: Target triple being compiled for.
        host: Triple of the machine running the compiler.

    Returns:
        The detected compiler.

    Raises:
        ToolNotFoundError: If no candidate compiler exists.
        ToolchainError: If the compiler could not be probed.
    """
    if compiler is None:
        compiler = get_var("CC")
    if compiler:
        candidates = [str(compiler)]
    else:
        candidates = compiler_candidates(target, host)

    for candidate in candidates:
        path = find_program(candidate)
        if path is None:
            continue
        tool = probe_compiler(path)
        logger.debug(
            "Detected %s compiler %s (%s)", tool.family.value, path, tool.version
        )
        if not compiler and target != host and candidate in ("cc", "gcc"):
            logger.warning(
                "No cross compiler found for %s; using host compiler %s. "
                "Set CC to select one.",
                target,
                path,
            )
        return tool

    raise ToolNotFoundError("C compiler", candidates)


__all__ = [
    "ClangClToolchain",
    "GccToolchain",
    "LlvmToolchain",
    "MsvcToolchain",
    "compiler_candidates",
    "detect_compiler",
    "probe_compiler",
    "toolchain_for_family",
]
