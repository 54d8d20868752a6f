# SPDX-License-Identifier: MIT
"""Tests for luabuild.build."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from conftest import FakeRun

from luabuild.build import Build
from luabuild.core.cc import CcBuild
from luabuild.core.errors import BuildAborted, CompileError, ToolNotFoundError
from luabuild.core.flags import Define
from luabuild.lua_conf import LuaConf
from luabuild.platforms import C89, CustomPlatform, Linux, Standards, Windows


def unescape_c_string(literal: str) -> str:
    """Interpret a C string literal holding only \\\\ and \\" escapes."""
    assert literal.startswith('"') and literal.endswith('"')
    body = literal[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            i += 1
            assert body[i] in ('"', "\\")
            out.append(body[i])
        else:
            # An unescaped quote would end the literal early
            assert ch != '"'
            out.append(ch)
        i += 1
    return "".join(out)


def defines_added(build: Build, before: int) -> list[Define]:
    return build.cc.defines[before:]


class TestConstruction:
    """Tests for Build.try_new / Build.new / Build.for_current."""

    def test_gnu_linux(self, gnu_cc):
        build = Build.try_new(Linux(), gnu_cc)
        assert build.cc is gnu_cc
        assert gnu_cc.std == "gnu99"
        assert gnu_cc.warnings is True
        assert gnu_cc.extra_warnings is True
        assert gnu_cc.defines == [Define("LUA_USE_LINUX")]

    def test_msvc_windows(self, msvc_cc):
        Build.try_new(Windows(), msvc_cc)
        assert msvc_cc.std == "c99"
        assert msvc_cc.defines == [Define("LUA_USE_WINDOWS")]

    def test_msvc_c89_keeps_default_dialect(self, msvc_cc):
        """Test that a missing dialect leaves the compiler default."""
        Build.try_new(C89(), msvc_cc)
        assert msvc_cc.std is None
        assert msvc_cc.defines == [Define("LUA_USE_POSIX"), Define("LUA_USE_DLOPEN")]

    def test_clang_cl_reads_its_own_field(self, clang_cl_cc):
        platform = CustomPlatform(
            defines=("X",),
            standards=Standards(gnu="gnu11", clang="c11", msvc="c17", clang_cl="gnu17"),
        )
        Build.try_new(platform, clang_cl_cc)
        assert clang_cl_cc.std == "gnu17"

    def test_platform_defines_have_no_value(self, clang_cc):
        Build.try_new(CustomPlatform(defines=("A", "B", "C")), clang_cc)
        assert all(d.value is None for d in clang_cc.defines)
        assert [d.name for d in clang_cc.defines] == ["A", "B", "C"]

    def test_try_new_propagates_missing_compiler(self, tmp_path):
        cc = CcBuild().set_compiler(tmp_path / "no-such-cc")
        with pytest.raises(ToolNotFoundError):
            Build.try_new(Linux(), cc)

    def test_new_aborts_with_error_text(self, tmp_path):
        cc = CcBuild().set_compiler(tmp_path / "no-such-cc")
        with pytest.raises(BuildAborted) as excinfo:
            Build.new(Linux(), cc)
        assert "tool not found" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, ToolNotFoundError)

    def test_new_is_a_system_exit(self, tmp_path):
        cc = CcBuild().set_compiler(tmp_path / "no-such-cc")
        with pytest.raises(SystemExit):
            Build.new(Linux(), cc)

    def test_for_current_unknown_triple(self, monkeypatch, gnu_cc):
        monkeypatch.setenv("TARGET", "unknown-unknown-unknown")
        with pytest.raises(BuildAborted, match="couldn't determine platform"):
            Build.for_current(gnu_cc)

    def test_for_current_uses_target(self, monkeypatch, gnu_cc):
        monkeypatch.setenv("TARGET", "x86_64-unknown-linux-gnu")
        Build.for_current(gnu_cc)
        assert gnu_cc.defines == [Define("LUA_USE_LINUX")]


class TestDefines:
    """Tests for the define primitives."""

    def test_define_flag(self, gnu_cc):
        build = Build.try_new(Linux(), gnu_cc)
        assert build.define_flag("FOO") is build
        assert gnu_cc.defines[-1] == Define("FOO")

    def test_define_literal_verbatim(self, gnu_cc):
        build = Build.try_new(Linux(), gnu_cc).define_literal(
            "LUNKA_EXTRASPACE", "sizeof(void *)"
        )
        assert build.cc.defines[-1] == Define("LUNKA_EXTRASPACE", "sizeof(void *)")

    def test_define_string_quotes(self, gnu_cc):
        build = Build.try_new(Linux(), gnu_cc).define_string("NAME", "plain")
        assert build.cc.defines[-1] == Define("NAME", '"plain"')

    def test_define_string_escapes(self, gnu_cc):
        text = 'C:\\path"with"quotes'
        build = Build.try_new(Linux(), gnu_cc).define_string("LUA_PATH_DEFAULT", text)
        value = build.cc.defines[-1].value
        assert value == '"C:\\\\path\\"with\\"quotes"'

    @pytest.mark.parametrize(
        "text",
        [
            'C:\\path"with"quotes',
            "\\",
            '"',
            '\\"',
            "./?.lua;./?/init.lua",
            "",
        ],
    )
    def test_define_string_round_trips(self, gnu_cc, text):
        """Test that the literal reads back as the original text."""
        build = Build.try_new(Linux(), gnu_cc).define_string("S", text)
        value = build.cc.defines[-1].value
        assert value is not None
        assert unescape_c_string(value) == text


class TestFeatures:
    """Tests for the named feature methods."""

    @pytest.mark.parametrize(
        "method, symbol",
        [
            ("compat_lua_5_3", "LUA_COMPAT_5_3"),
            ("compat_math_lib", "LUA_COMPAT_MATH_LIB"),
            ("compat_lt_le", "LUA_COMPAT_LT_LE"),
            ("api_checks", "LUA_USE_APICHECK"),
            ("unicode_identifiers", "LUA_UCID"),
        ],
    )
    def test_flag_features(self, gnu_cc, method, symbol):
        build = Build.try_new(Linux(), gnu_cc)
        assert getattr(build, method)() is build
        assert gnu_cc.defines[-1] == Define(symbol)

    @pytest.mark.parametrize(
        "method, symbol, text, literal",
        [
            ("lua_lib_path", "LUA_PATH_DEFAULT", "./?.lua", '"./?.lua"'),
            ("lua_c_lib_path", "LUA_CPATH_DEFAULT", "./?.so", '"./?.so"'),
            ("dir_separator", "LUA_DIRSEP", "\\", '"\\\\"'),
        ],
    )
    def test_string_features(self, gnu_cc, method, symbol, text, literal):
        build = Build.try_new(Linux(), gnu_cc)
        getattr(build, method)(text)
        assert gnu_cc.defines[-1] == Define(symbol, literal)

    def test_repeated_feature_is_not_deduplicated(self, gnu_cc):
        """Test that duplicates are kept and handed to the compiler as-is."""
        build = Build.try_new(Linux(), gnu_cc)
        before = len(gnu_cc.defines)
        build.compat_lua_5_3().compat_lua_5_3()
        assert defines_added(build, before) == [
            Define("LUA_COMPAT_5_3"),
            Define("LUA_COMPAT_5_3"),
        ]
        assert gnu_cc.compile_flags().count("-DLUA_COMPAT_5_3") == 2


class TestLuaConf:
    """Tests for applying a LuaConf."""

    def test_only_extra_space(self, gnu_cc):
        build = Build.try_new(Linux(), gnu_cc)
        before = len(gnu_cc.defines)
        build.lua_conf(LuaConf(extra_space="sizeof(void *)"))
        assert defines_added(build, before) == [
            Define("LUNKA_EXTRASPACE", "sizeof(void *)")
        ]

    def test_empty_conf_adds_nothing(self, gnu_cc):
        build = Build.try_new(Linux(), gnu_cc)
        before = len(gnu_cc.defines)
        build.lua_conf(LuaConf())
        assert defines_added(build, before) == []

    def test_all_fields(self, gnu_cc):
        build = Build.try_new(Linux(), gnu_cc)
        before = len(gnu_cc.defines)
        build.lua_conf(
            LuaConf(
                no_number_to_string=True,
                no_string_to_number=True,
                extra_space="16",
                id_size="120",
            )
        )
        assert defines_added(build, before) == [
            Define("LUNKA_NOCVTN2S"),
            Define("LUNKA_NOCVTS2N"),
            Define("LUNKA_EXTRASPACE", "16"),
            Define("LUNKA_IDSIZE", "120"),
        ]


class TestSources:
    """Tests for adding sources to a Build."""

    def test_try_add_lua_src(self, gnu_cc, tmp_path):
        for name in ("lapi.c", "lapi.h", "lua.c", "luac.c"):
            (tmp_path / name).write_text("")
        build = Build.try_new(Linux(), gnu_cc).try_add_lua_src(tmp_path)
        assert build.cc.files == [tmp_path / "lapi.c"]
        assert build.cc.includes == []

    def test_try_add_bundled_src(self, gnu_cc, tmp_path):
        (tmp_path / "include").mkdir()
        (tmp_path / "include" / "lua.h").write_text("")
        (tmp_path / "src").mkdir()
        for name in ("lapi.c", "lapi.h", "lauxlib.c"):
            (tmp_path / "src" / name).write_text("")
        build = Build.try_new(Linux(), gnu_cc).try_add_bundled_src(tmp_path)
        assert build.cc.includes == [tmp_path / "include"]
        assert sorted(p.name for p in build.cc.files) == [
            "lapi.c",
            "lapi.h",
            "lauxlib.c",
        ]

    def test_bundled_src_uses_variable(self, gnu_cc, tmp_path, monkeypatch):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "lapi.c").write_text("")
        monkeypatch.setenv("LUABUILD_LUA_DIR", str(tmp_path))
        build = Build.try_new(Linux(), gnu_cc).try_add_bundled_src()
        assert build.cc.files == [tmp_path / "src" / "lapi.c"]

    def test_try_add_lua_src_error_leaves_config_untouched(self, gnu_cc, tmp_path):
        build = Build.try_new(Linux(), gnu_cc)
        with pytest.raises(FileNotFoundError):
            build.try_add_lua_src(tmp_path / "missing")
        assert build.cc.files == []

    def test_try_add_bundled_src_error_leaves_config_untouched(self, gnu_cc, tmp_path):
        build = Build.try_new(Linux(), gnu_cc)
        with pytest.raises(FileNotFoundError):
            build.try_add_bundled_src(tmp_path)
        assert build.cc.files == []
        assert build.cc.includes == []

    def test_add_lua_src_aborts(self, gnu_cc, tmp_path):
        build = Build.try_new(Linux(), gnu_cc)
        with pytest.raises(BuildAborted) as excinfo:
            build.add_lua_src(tmp_path / "missing")
        assert "missing" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    def test_add_bundled_src_aborts(self, gnu_cc, tmp_path):
        build = Build.try_new(Linux(), gnu_cc)
        with pytest.raises(BuildAborted):
            build.add_bundled_src(tmp_path / "missing")


class TestScalarSettings:
    """Tests for the scalar setters."""

    def test_chaining(self, gnu_cc, tmp_path):
        build = Build.try_new(Linux(), gnu_cc)
        result = (
            build.host("x86_64-unknown-linux-gnu")
            .out_dir(tmp_path)
            .include(tmp_path / "a")
            .includes([tmp_path / "b", tmp_path / "c"])
            .debug_info(True)
            .opt_level(3)
        )
        assert result is build
        assert gnu_cc.host == "x86_64-unknown-linux-gnu"
        assert gnu_cc.out_dir == tmp_path
        assert gnu_cc.includes == [tmp_path / "a", tmp_path / "b", tmp_path / "c"]
        assert gnu_cc.debug is True
        assert gnu_cc.opt_level == 3

    def test_scalars_overwrite(self, gnu_cc, tmp_path):
        build = Build.try_new(Linux(), gnu_cc)
        build.opt_level(3).opt_level(0).debug_info(True).debug_info(False)
        build.out_dir(tmp_path / "one").out_dir(tmp_path / "two")
        assert gnu_cc.opt_level == 0
        assert gnu_cc.debug is False
        assert gnu_cc.out_dir == tmp_path / "two"


class TestCompile:
    """Tests for Build.try_compile / Build.compile."""

    def _build(self, gnu_cc: CcBuild, tmp_path: Path) -> Build:
        src = tmp_path / "src"
        src.mkdir()
        (src / "lapi.c").write_text("")
        (src / "lcode.c").write_text("")
        gnu_cc.set_archiver(sys.executable)
        return (
            Build.try_new(Linux(), gnu_cc)
            .try_add_lua_src(src)
            .out_dir(tmp_path / "out")
        )

    def test_try_compile(self, gnu_cc, tmp_path, fake_run: FakeRun):
        build = self._build(gnu_cc, tmp_path)
        library = build.try_compile("lua")
        assert library == tmp_path / "out" / "liblua.a"
        assert len(fake_run.commands) == 3
        compiles, archive = fake_run.commands[:2], fake_run.commands[2]
        for command in compiles:
            assert command[0] == "gcc"
            assert "-std=gnu99" in command
            assert "-DLUA_USE_LINUX" in command
        assert archive[:3] == [sys.executable, "crs", str(library)]

    def test_repeated_compile(self, gnu_cc, tmp_path, fake_run: FakeRun):
        """Test that compiling twice reuses the same configuration."""
        build = self._build(gnu_cc, tmp_path)
        first = build.try_compile("lua")
        second = build.try_compile("lua")
        assert first == second
        assert len(fake_run.commands) == 6

    def test_try_compile_raises(self, gnu_cc, tmp_path, fake_run: FakeRun):
        fake_run.fail_on = "lcode.c"
        build = self._build(gnu_cc, tmp_path)
        with pytest.raises(CompileError) as excinfo:
            build.try_compile("lua")
        assert excinfo.value.returncode == 1
        assert "error: boom" in str(excinfo.value)

    def test_compile_aborts_with_error_text(self, gnu_cc, tmp_path, fake_run):
        fake_run.fail_on = "lcode.c"
        build = self._build(gnu_cc, tmp_path)
        with pytest.raises(BuildAborted) as excinfo:
            build.compile("lua")
        assert "failed to compile" in str(excinfo.value)
        assert "error: boom" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, CompileError)
