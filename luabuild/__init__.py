# SPDX-License-Identifier: MIT
"""
luabuild: Build an embeddable Lua 5.4 static library from source.

luabuild selects preprocessor defines and the C dialect for the target
platform and compiler, collects the Lua sources, and drives the C
compiler to produce a static library with compile-time Lua options
(compatibility flags, coercion behavior, memory-layout tunables).
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export commonly used classes for convenient imports
from luabuild.build import Build  # noqa: E402
from luabuild.core.cc import CcBuild  # noqa: E402
from luabuild.core.errors import (  # noqa: E402
    BuildAborted,
    CompileError,
    LuabuildError,
    ToolchainError,
    ToolNotFoundError,
)
from luabuild.lua_conf import LuaConf  # noqa: E402
from luabuild.platforms import (  # noqa: E402
    CustomPlatform,
    Platform,
    Standards,
    from_current_triple,
    from_target_triple,
)

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Core classes
    "Build",
    "CcBuild",
    "LuaConf",
    # Platforms
    "CustomPlatform",
    "Platform",
    "Standards",
    "from_current_triple",
    "from_target_triple",
    # Errors
    "BuildAborted",
    "CompileError",
    "LuabuildError",
    "ToolchainError",
    "ToolNotFoundError",
]
