# SPDX-License-Identifier: MIT
"""Command-line interface for luabuild."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from luabuild.build import Build
from luabuild.config import get_bool_var, get_var, set_cli_vars
from luabuild.core.cc import CcBuild
from luabuild.core.errors import LuabuildError
from luabuild.lua_conf import LuaConf
from luabuild.platforms import (
    KNOWN_PLATFORMS,
    ConstPlatform,
    current_triple,
    from_target_triple,
    platform_by_name,
)

# Set up logging
logger = logging.getLogger("luabuild")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def load_lua_conf(path: Path) -> LuaConf:
    """Load a LuaConf from a JSON object file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return LuaConf.from_mapping(data)


def resolve_platform(
    name: str | None, triple: str | None
) -> tuple[ConstPlatform | None, str]:
    """Pick a platform by explicit name, else by triple.

    Returns:
        Tuple of (platform or None, description used in messages).
    """
    if name:
        return platform_by_name(name), f"platform name {name!r}"
    triple = triple or current_triple()
    return from_target_triple(triple), f"target triple {triple!r}"


def cmd_platform(args: argparse.Namespace) -> int:
    """Show the platform, defines and dialects for a triple."""
    setup_logging(args.verbose, args.debug)

    platform, described = resolve_platform(args.platform, args.triple)
    if platform is None:
        logger.error("couldn't determine platform for %s", described)
        return 1

    stds = platform.standards
    print(f"platform: {platform.name}")
    print(f"defines: {' '.join(platform.defines)}")
    print(
        f"standards: gnu={stds.gnu} clang={stds.clang} "
        f"msvc={stds.msvc} clang_cl={stds.clang_cl}"
    )
    return 0


def configure_build(args: argparse.Namespace) -> Build:
    """Create and configure a Build from parsed arguments.

    Raises:
        LuabuildError: If the platform or toolchain cannot be set up.
        OSError: If sources or configuration files cannot be read.
        ValueError: If configuration values are invalid.
    """
    platform, described = resolve_platform(args.platform, None)
    if platform is None:
        raise LuabuildError(f"couldn't determine platform for {described}")

    cc = CcBuild()
    if args.cc:
        cc.set_compiler(args.cc)
    build = Build.try_new(platform, cc)

    out_dir = args.out_dir or get_var("OUT_DIR")
    if out_dir:
        build.out_dir(out_dir)

    opt_level = args.opt_level
    if opt_level is None and get_var("OPT_LEVEL"):
        opt_level = int(get_var("OPT_LEVEL") or "0")
    if opt_level is not None:
        build.opt_level(opt_level)
    build.debug_info(args.debug_info or get_bool_var("DEBUG"))

    if args.include:
        build.includes(args.include)

    if args.lua_src:
        build.try_add_lua_src(args.lua_src)
    else:
        build.try_add_bundled_src()

    if args.lua_conf:
        build.lua_conf(load_lua_conf(Path(args.lua_conf)))

    if args.compat_5_3:
        build.compat_lua_5_3()
    if args.compat_math:
        build.compat_math_lib()
    if args.compat_lt_le:
        build.compat_lt_le()
    if args.api_checks:
        build.api_checks()
    if args.unicode_identifiers:
        build.unicode_identifiers()
    if args.lua_path is not None:
        build.lua_lib_path(args.lua_path)
    if args.lua_cpath is not None:
        build.lua_c_lib_path(args.lua_cpath)
    if args.dir_sep is not None:
        build.dir_separator(args.dir_sep)

    return build


def cmd_build(args: argparse.Namespace) -> int:
    """Configure and compile the Lua static library."""
    setup_logging(args.verbose, args.debug)

    variables, remaining = parse_variables(getattr(args, "extra", []))
    if remaining:
        logger.error("Unexpected arguments: %s", " ".join(remaining))
        return 1
    if variables:
        set_cli_vars(variables)

    try:
        build = configure_build(args)
        library = build.try_compile(args.output)
    except (LuabuildError, OSError, ValueError, TypeError) as e:
        logger.error("%s", e)
        return 1

    print(library)
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "-p",
        "--platform",
        metavar="NAME",
        choices=sorted(KNOWN_PLATFORMS),
        help="Use a known platform instead of resolving the target triple",
    )


def add_build_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the build command."""
    parser.add_argument(
        "--lua-src",
        metavar="DIR",
        help="Lua source directory (default: the bundled Lua 5.4.8 tree)",
    )
    parser.add_argument(
        "-o", "--output", default="lua", help="Library name (default: lua)"
    )
    parser.add_argument(
        "-B", "--out-dir", help="Output directory (default: OUT_DIR or build)"
    )
    parser.add_argument("--cc", metavar="PATH", help="C compiler to use")
    parser.add_argument(
        "-I", "--include", action="append", metavar="DIR", help="Add include directory"
    )
    parser.add_argument("--opt-level", type=int, metavar="N", help="Optimization level")
    parser.add_argument(
        "--debug-info", action="store_true", help="Emit debug information"
    )
    parser.add_argument(
        "--compat-5-3", action="store_true", help="Enable Lua 5.3 compatibility"
    )
    parser.add_argument(
        "--compat-math",
        action="store_true",
        help="Include deprecated math library functions",
    )
    parser.add_argument(
        "--compat-lt-le", action="store_true", help="Emulate __le using __lt"
    )
    parser.add_argument(
        "--api-checks", action="store_true", help="Enable C API consistency checks"
    )
    parser.add_argument(
        "--unicode-identifiers",
        action="store_true",
        help="Allow Unicode characters in identifiers",
    )
    parser.add_argument("--lua-path", metavar="PATH", help="Default package.path")
    parser.add_argument("--lua-cpath", metavar="PATH", help="Default package.cpath")
    parser.add_argument(
        "--dir-sep", metavar="SEP", help="Directory separator for require"
    )
    parser.add_argument(
        "--lua-conf",
        metavar="FILE",
        help="JSON file with no_number_to_string, no_string_to_number, "
        "extra_space and id_size",
    )
    parser.add_argument(
        "extra",
        nargs="*",
        help="Build variables (KEY=value), e.g. CC=clang TARGET=...",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the luabuild CLI."""
    parser = argparse.ArgumentParser(
        prog="luabuild",
        description="Build an embeddable Lua 5.4 static library from source.",
        epilog="Run 'luabuild <command> --help' for command-specific help.",
    )
    from luabuild import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # luabuild platform
    platform_parser = subparsers.add_parser(
        "platform", help="Show the Lua platform for a target triple"
    )
    add_common_args(platform_parser)
    platform_parser.add_argument(
        "triple", nargs="?", help="Target triple (default: current target)"
    )
    platform_parser.set_defaults(func=cmd_platform)

    # luabuild build
    build_parser = subparsers.add_parser(
        "build", help="Compile the Lua static library"
    )
    add_common_args(build_parser)
    add_build_args(build_parser)
    build_parser.set_defaults(func=cmd_build)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
