# SPDX-License-Identifier: MIT
"""Host platform detection.

Describes the machine luabuild is running on, which is the default
build target unless the TARGET variable says otherwise.
"""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass
from functools import cache

from luabuild.config import get_var

# Normalize platform.machine() spellings to target-triple architectures
_ARCH_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "i386": "i686",
    "i586": "i686",
    "x86": "i686",
    "arm64": "aarch64",
    "armv8": "aarch64",
    "sun4v": "sparcv9",
    "sun4u": "sparcv9",
    "ppc64le": "powerpc64le",
    "ppc64": "powerpc64",
}


@dataclass(frozen=True)
class HostPlatform:
    """Information about the host operating system.

    Attributes:
        os: Lowercase OS name as reported by sys.platform, without
            version suffix (e.g. 'linux', 'darwin', 'win32', 'freebsd').
        arch: Target-triple architecture (e.g. 'x86_64', 'aarch64').
    """

    os: str
    arch: str

    def triple(self) -> str:
        """Return the target triple describing this platform."""
        arch = self.arch
        if self.os == "linux":
            return f"{arch}-unknown-linux-gnu"
        if self.os == "darwin":
            return f"{arch}-apple-darwin"
        if self.os in ("win32", "cygwin"):
            return f"{arch}-pc-windows-msvc"
        if self.os.startswith("freebsd"):
            return f"{arch}-unknown-freebsd"
        if self.os.startswith("openbsd"):
            return f"{arch}-unknown-openbsd"
        if self.os.startswith("netbsd"):
            return f"{arch}-unknown-netbsd"
        if self.os.startswith("sunos"):
            return f"{arch}-sun-solaris"
        if self.os.startswith("aix"):
            return f"{arch}-ibm-aix"
        return f"{arch}-unknown-{self.os}"


def normalize_arch(machine: str) -> str:
    """Map a platform.machine() value to a triple architecture."""
    machine = machine.strip().lower()
    if not machine:
        return "unknown"
    return _ARCH_ALIASES.get(machine, machine)


@cache
def get_platform() -> HostPlatform:
    """Detect the host platform (cached)."""
    os_name = sys.platform
    # sys.platform carries a version on some systems (e.g. 'freebsd14', 'sunos5')
    if os_name.startswith(("freebsd", "openbsd", "netbsd", "sunos", "aix")):
        os_name = os_name.rstrip("0123456789")
    return HostPlatform(os=os_name, arch=normalize_arch(_platform.machine()))


def host_triple() -> str:
    """Return the host target triple.

    The HOST build variable takes precedence over detection.
    """
    override = get_var("HOST")
    if override:
        return override
    return get_platform().triple()
