# SPDX-License-Identifier: MIT
"""Builder for a compilation of Lua 5.4.

Example:
    from luabuild import Build, LuaConf

    (
        Build.for_current()
        .add_bundled_src()
        .lua_conf(LuaConf(no_number_to_string=True))
        .compat_lua_5_3()
        .unicode_identifiers()
        .compile("lua")
    )

Methods starting with ``try_`` raise the underlying error (OSError,
ToolchainError). Their counterparts without the prefix log the error
and abort the build with BuildAborted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from luabuild.core.cc import CcBuild
from luabuild.core.errors import BuildAborted, LuabuildError
from luabuild.core.flags import c_string_literal
from luabuild.platforms import current_triple, from_target_triple, select_standard
from luabuild.sources import bundled_lua_dir, bundled_sources, lua_sources

if TYPE_CHECKING:
    from luabuild.lua_conf import LuaConf
    from luabuild.platforms import Platform

logger = logging.getLogger(__name__)


def _abort(error: Exception) -> BuildAborted:
    logger.error("%s", error)
    return BuildAborted(str(error))


class Build:
    """Compilation of a Lua static library.

    Wraps a CcBuild that has already been set up for a platform: the
    compiler family's dialect is selected, warnings are enabled and the
    platform's defines are applied. Every other method adds to it.
    """

    def __init__(self, cc: CcBuild) -> None:
        self._cc = cc

    @property
    def cc(self) -> CcBuild:
        """The underlying compiler invocation descriptor."""
        return self._cc

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def try_new(cls, platform: Platform, cc: CcBuild | None = None) -> Build:
        """Create a builder for a platform.

        Args:
            platform: Platform providing defines and dialects.
            cc: Descriptor to configure; a fresh one by default.

        Raises:
            ToolchainError: If the compiler cannot be found or probed.
        """
        cc = cc if cc is not None else CcBuild()
        tool = cc.try_get_compiler()

        std = select_standard(tool.family, platform.standards)
        if std is not None:
            cc.set_std(std)

        cc.set_warnings(True).set_extra_warnings(True)
        for define in platform.defines:
            cc.define(define)

        logger.debug(
            "Configured %s compiler %s with std=%s", tool.family.value, tool.path, std
        )
        return cls(cc)

    @classmethod
    def new(cls, platform: Platform, cc: CcBuild | None = None) -> Build:
        """Create a builder for a platform, aborting on failure.

        See also Build.try_new for the raising version.
        """
        try:
            return cls.try_new(platform, cc)
        except LuabuildError as e:
            raise _abort(e) from e

    @classmethod
    def for_current(cls, cc: CcBuild | None = None) -> Build:
        """Create a builder for the platform of the current target triple.

        Aborts if the triple is not recognized or setting up failed.
        """
        triple = current_triple()
        platform = from_target_triple(triple)
        if platform is None:
            message = f"couldn't determine platform for current target triple {triple!r}"
            logger.error("%s", message)
            raise BuildAborted(message)
        return cls.new(platform, cc)

    # =========================================================================
    # Compilation
    # =========================================================================

    def try_compile(self, output: str) -> Path:
        """Run the compiler, generating the static library ``output``.

        Returns:
            Path of the generated library.

        Raises:
            ToolchainError: If compilation fails.
            OSError: If the output directory cannot be created.
        """
        return self._cc.try_compile(output)

    def compile(self, output: str) -> Path:
        """Run the compiler, aborting if compilation fails.

        See also Build.try_compile for the raising version.
        """
        try:
            return self.try_compile(output)
        except (LuabuildError, OSError) as e:
            raise _abort(e) from e

    # =========================================================================
    # Scalar settings
    # =========================================================================

    def host(self, host: str) -> Build:
        """Set the host assumed by this configuration."""
        self._cc.set_host(host)
        return self

    def out_dir(self, path: Path | str) -> Build:
        """Set the directory for object files and the static library."""
        self._cc.set_out_dir(path)
        return self

    def include(self, path: Path | str) -> Build:
        """Add an include directory."""
        self._cc.include(path)
        return self

    def includes(self, paths: Iterable[Path | str]) -> Build:
        """Add multiple include directories."""
        self._cc.add_includes(paths)
        return self

    def debug_info(self, emit_debug_info: bool) -> Build:
        """Set whether debug information should be emitted."""
        self._cc.set_debug(emit_debug_info)
        return self

    def opt_level(self, opt_level: int) -> Build:
        """Set the optimization level.

        The meaning of the number is up to the compiler.
        """
        self._cc.set_opt_level(opt_level)
        return self

    # =========================================================================
    # Defines
    # =========================================================================

    def define_flag(self, name: str) -> Build:
        """Define a preprocessor symbol without a value."""
        self._cc.define(name)
        return self

    def define_literal(self, name: str, value: str) -> Build:
        """Define a preprocessor symbol whose value is inserted verbatim."""
        self._cc.define(name, value)
        return self

    def define_string(self, name: str, text: str) -> Build:
        """Define a preprocessor symbol expanding to a C string literal."""
        return self.define_literal(name, c_string_literal(text))

    # =========================================================================
    # Sources
    # =========================================================================

    def try_add_bundled_src(self, root: Path | str | None = None) -> Build:
        """Add all source files of the bundled Lua 5.4.8 tree.

        The bundled luaconf.h honors the settings of LuaConf.

        Args:
            root: Tree to use instead of the bundled one.

        Raises:
            OSError: If the source directory cannot be read.
        """
        tree = Path(root) if root is not None else bundled_lua_dir()
        include, files = bundled_sources(tree)
        self._cc.include(include)
        self._cc.add_files(files)
        return self

    def add_bundled_src(self, root: Path | str | None = None) -> Build:
        """Add the bundled Lua sources, aborting if they cannot be read.

        See also Build.try_add_bundled_src for the raising version.
        """
        try:
            return self.try_add_bundled_src(root)
        except OSError as e:
            raise _abort(e) from e

    def try_add_lua_src(self, root: Path | str) -> Build:
        """Add all Lua library sources found in ``root``.

        ``root`` must hold both the sources (``*.c``) and the headers
        (``*.h``). The standalone programs lua.c and luac.c are left out.

        A normal Lua source distribution ignores LuaConf; see the
        luabuild.lua_conf module for the luaconf.h changes it needs.

        Raises:
            OSError: If the directory cannot be read.
        """
        files = lua_sources(root)
        self._cc.add_files(files)
        return self

    def add_lua_src(self, root: Path | str) -> Build:
        """Add Lua sources from ``root``, aborting if they cannot be read.

        See also Build.try_add_lua_src for the raising version.
        """
        try:
            return self.try_add_lua_src(root)
        except OSError as e:
            raise _abort(e) from e

    # =========================================================================
    # Lua features
    # =========================================================================

    def compat_lua_5_3(self) -> Build:
        """Enable compatibility with Lua 5.3."""
        return self.define_flag("LUA_COMPAT_5_3")

    def compat_math_lib(self) -> Build:
        """Include several deprecated functions in the math library."""
        return self.define_flag("LUA_COMPAT_MATH_LIB")

    def compat_lt_le(self) -> Build:
        """Emulate the __le metamethod using __lt."""
        return self.define_flag("LUA_COMPAT_LT_LE")

    def api_checks(self) -> Build:
        """Enable several consistency checks in the API."""
        return self.define_flag("LUA_USE_APICHECK")

    def lua_lib_path(self, path: str) -> Build:
        """Set the default path that Lua uses to look for Lua libraries."""
        return self.define_string("LUA_PATH_DEFAULT", path)

    def lua_c_lib_path(self, path: str) -> Build:
        """Set the default path that Lua uses to look for C libraries."""
        return self.define_string("LUA_CPATH_DEFAULT", path)

    def dir_separator(self, sep: str) -> Build:
        """Set the directory separator for require submodules."""
        return self.define_string("LUA_DIRSEP", sep)

    def unicode_identifiers(self) -> Build:
        """Enable Unicode identifiers.

        LUA_UCID is not mentioned in luaconf.h, but lctype.c checks it
        when building the identifier character table.
        """
        return self.define_flag("LUA_UCID")

    def lua_conf(self, conf: LuaConf) -> Build:
        """Apply the literal-value settings of a LuaConf."""
        for name, value in conf.defines():
            if value is None:
                self.define_flag(name)
            else:
                self.define_literal(name, value)
        return self
