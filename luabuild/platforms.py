# SPDX-License-Identifier: MIT
"""Lua platform handling.

A platform is what luaconf.h calls a system configuration: the set of
preprocessor symbols (LUA_USE_LINUX, LUA_USE_POSIX, ...) that select
the right OS facilities, plus the C dialect each compiler family should
be asked for.

Known platforms are plain classes with constant class attributes:

    build = Build.try_new(Linux())

Any object exposing ``defines`` and ``standards`` works too, such as a
CustomPlatform.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Protocol, runtime_checkable

from luabuild.config import get_var
from luabuild.configure.platform import host_triple
from luabuild.tools.toolchain import ToolchainFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Standards:
    """C standard identifiers for each kind of compiler.

    None leaves the dialect to the compiler's default.
    """

    gnu: str | None = None
    clang: str | None = None
    msvc: str | None = None
    clang_cl: str | None = None

    def for_family(self, family: ToolchainFamily) -> str | None:
        """Return the dialect for exactly one compiler family."""
        if family.is_like_clang_cl:
            return self.clang_cl
        if family.is_like_msvc:
            return self.msvc
        if family.is_like_clang:
            return self.clang
        if family.is_like_gnu:
            return self.gnu
        raise ValueError(f"unknown compiler family: {family!r}")


DEFAULT_STANDARDS = Standards(gnu="gnu99", clang="gnu99", msvc="c99", clang_cl="gnu99")


@runtime_checkable
class Platform(Protocol):
    """Protocol for a Lua platform."""

    @property
    def defines(self) -> tuple[str, ...]:
        """Preprocessor symbols defined (without a value) for this platform."""
        ...

    @property
    def standards(self) -> Standards:
        """C dialect to request per compiler family."""
        ...


def select_standard(family: ToolchainFamily, standards: Standards) -> str | None:
    """Pick the dialect to request from a compiler of the given family.

    Only that family's entry is consulted; an MSVC compiler never
    receives the GNU dialect.
    """
    return standards.for_family(family)


class ConstPlatform:
    """Base class for known platforms with constant data.

    Subclasses set DEFINES and, when they differ from the defaults,
    STANDARDS.
    """

    DEFINES: ClassVar[tuple[str, ...]] = ()
    STANDARDS: ClassVar[Standards] = DEFAULT_STANDARDS

    @property
    def defines(self) -> tuple[str, ...]:
        return self.DEFINES

    @property
    def standards(self) -> Standards:
        return self.STANDARDS

    @property
    def name(self) -> str:
        return type(self).__name__

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{self.name}()"


class Aix(ConstPlatform):
    DEFINES = ("LUA_USE_POSIX", "LUA_USE_DLOPEN")


class Bsd(ConstPlatform):
    DEFINES = ("LUA_USE_POSIX", "LUA_USE_DLOPEN")


class C89(ConstPlatform):
    """Strict ANSI C build; MSVC keeps its default dialect."""

    DEFINES = ("LUA_USE_POSIX", "LUA_USE_DLOPEN")
    STANDARDS = Standards(gnu="c89", clang="c89", msvc=None, clang_cl="c89")


class FreeBsd(ConstPlatform):
    # Same configuration as Linux in luaconf.h
    DEFINES = ("LUA_USE_LINUX",)


class Ios(ConstPlatform):
    DEFINES = ("LUA_USE_IOS",)


class Linux(ConstPlatform):
    DEFINES = ("LUA_USE_LINUX",)


class MacOsX(ConstPlatform):
    DEFINES = ("LUA_USE_MACOSX",)


class MinGw(ConstPlatform):
    DEFINES = ("LUA_BUILD_AS_DLL",)


class Posix(ConstPlatform):
    DEFINES = ("LUA_USE_POSIX",)


class Solaris(ConstPlatform):
    DEFINES = ("LUA_USE_POSIX", "LUA_USE_DLOPEN", "_REENTRANT")


class Windows(ConstPlatform):
    DEFINES = ("LUA_USE_WINDOWS",)


KNOWN_PLATFORMS: dict[str, type[ConstPlatform]] = {
    cls.__name__.lower(): cls
    for cls in (
        Aix,
        Bsd,
        C89,
        FreeBsd,
        Ios,
        Linux,
        MacOsX,
        MinGw,
        Posix,
        Solaris,
        Windows,
    )
}


@dataclass(frozen=True)
class CustomPlatform:
    """A platform built at runtime from copied data.

    Attributes:
        defines: Preprocessor symbols to define.
        standards: Dialects per compiler family.
        name: Display name.
    """

    defines: tuple[str, ...] = ()
    standards: Standards = DEFAULT_STANDARDS
    name: str = "custom"

    @classmethod
    def from_platform(cls, platform: Platform, name: str | None = None) -> CustomPlatform:
        """Copy the data of any platform into a CustomPlatform."""
        return cls(
            defines=tuple(platform.defines),
            standards=platform.standards,
            name=name or getattr(platform, "name", "custom"),
        )


def platform_by_name(name: str) -> ConstPlatform | None:
    """Look up a known platform by case-insensitive class name."""
    cls = KNOWN_PLATFORMS.get(name.lower())
    return cls() if cls is not None else None


def current_triple() -> str:
    """Return the triple being built for.

    The TARGET build variable wins; otherwise the host triple is used.
    """
    return get_var("TARGET") or host_triple()


def from_target_triple(target: str) -> ConstPlatform | None:
    """Get an appropriate platform for the given target triple.

    The first match wins. Suffix tests ignore a trailing OS version,
    so 'sparc-sun-solaris2.11' is treated like 'sparc-sun-solaris'.

    Returns:
        The platform, or None when the triple is not recognized.
    """
    base = target.rstrip("0123456789.")
    platform: ConstPlatform | None
    if "linux" in target:
        platform = Linux()
    elif base.endswith("bsd"):
        platform = FreeBsd()
    elif base.endswith("apple-darwin"):
        platform = MacOsX()
    elif base.endswith("apple-ios"):
        platform = Ios()
    elif base.endswith("solaris"):
        platform = Solaris()
    elif "windows" in target:
        platform = Windows()
    else:
        platform = None

    logger.debug("Target %s resolved to %r", target, platform)
    return platform


def from_current_triple() -> ConstPlatform | None:
    """Get an appropriate platform for the triple being built for."""
    return from_target_triple(current_triple())
