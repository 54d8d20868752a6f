# SPDX-License-Identifier: MIT
"""Source file discovery for Lua builds.

Two layouts are supported, both flat (subdirectories are never
scanned):

- the bundled tree: ``include/`` with the public headers and ``src/``
  with everything that gets compiled;
- a standard Lua distribution's ``src/`` directory, where headers sit
  next to the ``.c`` files and two of those files are programs.

Files are returned in directory iteration order. Any error while
listing a directory or inspecting an entry propagates as OSError and
nothing is returned.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from luabuild.config import get_var

logger = logging.getLogger(__name__)

# Files with their own main(): the standalone interpreter and compiler
BINARIES: frozenset[str] = frozenset(["lua.c", "luac.c"])

# Default location of the bundled tree, next to this package
BUNDLED_LUA_DIR = Path(__file__).parent / "lua-5.4.8"


def bundled_lua_dir() -> Path:
    """Return the bundled tree, honoring the LUABUILD_LUA_DIR variable."""
    override = get_var("LUABUILD_LUA_DIR")
    return Path(override) if override else BUNDLED_LUA_DIR


def _regular_files(directory: Path) -> list[os.DirEntry[str]]:
    """List regular files directly inside directory.

    Symlinks, directories and other special entries are skipped.
    """
    entries: list[os.DirEntry[str]] = []
    with os.scandir(directory) as it:
        for entry in it:
            if entry.is_file(follow_symlinks=False):
                entries.append(entry)
    return entries


def bundled_sources(root: Path | str) -> tuple[Path, list[Path]]:
    """Collect the bundled tree's include directory and sources.

    Every regular file in ``src/`` is returned, whatever its extension.

    Args:
        root: Root of the bundled tree.

    Returns:
        Tuple of (include directory, source files).

    Raises:
        OSError: If ``src/`` cannot be listed.
    """
    root = Path(root)
    include = root / "include"
    files = [Path(entry.path) for entry in _regular_files(root / "src")]
    logger.debug("Found %d bundled source files in %s", len(files), root)
    return include, files


def is_library_source(name: str) -> bool:
    """Whether a file name belongs in an embeddable Lua library."""
    return name.endswith(".c") and name not in BINARIES


def lua_sources(root: Path | str) -> list[Path]:
    """Collect the library sources of a standard Lua source directory.

    Only ``.c`` files are returned, excluding lua.c and luac.c. Names
    that cannot be represented as text are skipped.

    Args:
        root: Directory holding the Lua sources and headers.

    Returns:
        The source files to compile.

    Raises:
        OSError: If the directory cannot be listed.
    """
    files: list[Path] = []
    for entry in _regular_files(Path(root)):
        name = entry.name
        try:
            # Undecodable bytes surface as lone surrogates
            name.encode("utf-8")
        except UnicodeEncodeError:
            logger.debug("Skipping non-text file name %r", name)
            continue
        if not is_library_source(name):
            continue
        files.append(Path(entry.path))
    logger.debug("Found %d Lua source files in %s", len(files), root)
    return files
