# SPDX-License-Identifier: MIT
"""Configure step: host platform detection and program discovery."""

from luabuild.configure.config import find_program
from luabuild.configure.platform import HostPlatform, get_platform, host_triple

__all__ = [
    "HostPlatform",
    "find_program",
    "get_platform",
    "host_triple",
]
