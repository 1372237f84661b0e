# SPDX-License-Identifier: MIT
"""Tests for imgui_build.toolchains.msvc."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from imgui_build.core.build_context import MsvcCompileContext
from imgui_build.core.target import TargetOS
from imgui_build.tools.toolchain import NativeBuildOptions
from imgui_build.toolchains.msvc import MsvcToolchain, _msvc_bin_dirs


def options(tmp_path: Path, **kwargs) -> NativeBuildOptions:
    return NativeBuildOptions(
        library_name="dear_imgui",
        out_dir=tmp_path,
        includes=(r"C:\crate\imgui",),
        defines=("IMGUI_ENABLE_FREETYPE=1",),
        **kwargs,
    )


class TestMsvcCommands:
    def test_creation(self):
        tc = MsvcToolchain()
        assert tc.name == "msvc"
        assert tc.cxx == "cl.exe"
        assert tc.ar == "lib.exe"
        assert tc.object_suffix == ".obj"

    def test_context_uses_msvc_prefixes(self, tmp_path):
        ctx = MsvcToolchain().make_context(options(tmp_path))
        assert isinstance(ctx, MsvcCompileContext)
        tokens = ctx.command_tokens()
        assert r"/IC:\crate\imgui" in tokens
        assert "/DIMGUI_ENABLE_FREETYPE=1" in tokens

    def test_debug_and_release_flags(self, tmp_path):
        debug = MsvcToolchain().make_context(options(tmp_path)).flags
        release = MsvcToolchain().make_context(options(tmp_path, release=True)).flags
        assert debug[:4] == ["/nologo", "/std:c++20", "/EHsc", "/MD"]
        assert "/Z7" in debug
        assert "/O2" in release

    def test_compile_command(self, tmp_path):
        tc = MsvcToolchain()
        ctx = tc.make_context(options(tmp_path))
        obj = tc.object_path(tmp_path / "obj", 3, Path("imgui_draw.cpp"))
        cmd = tc.compile_command(Path("imgui_draw.cpp"), obj, ctx)
        assert obj.name == "03-imgui_draw.obj"
        assert cmd[0] == "cl.exe"
        assert cmd[-3:] == ["/c", f"/Fo{obj}", "imgui_draw.cpp"]

    def test_archive_command(self):
        cmd = MsvcToolchain().archive_command(
            [Path("a.obj"), Path("b.obj")], Path("dear_imgui.lib")
        )
        assert cmd == ["lib.exe", "/nologo", "/OUT:dear_imgui.lib", "a.obj", "b.obj"]

    def test_library_filename(self):
        assert MsvcToolchain().library_filename("dear_imgui") == "dear_imgui.lib"


class TestMsvcConfigure:
    def test_configure_returns_false_on_non_windows(self, make_settings, fake_configure):
        config = fake_configure(
            make_settings(), {"cl.exe": "cl.exe", "lib.exe": "lib.exe"}
        )
        assert not MsvcToolchain().configure(config)
        assert config.lookups == []

    def test_developer_prompt(self, make_settings, fake_configure):
        settings = make_settings(os=TargetOS.WINDOWS, env="msvc")
        config = fake_configure(
            settings,
            {"cl.exe": r"C:\VC\bin\cl.exe", "lib.exe": r"C:\VC\bin\lib.exe"},
        )
        tc = MsvcToolchain()
        with patch("imgui_build.toolchains.msvc._find_msvc_install", return_value=None):
            assert tc.configure(config)
        assert tc.cxx == str(Path(r"C:\VC\bin\cl.exe"))
        assert tc.ar == str(Path(r"C:\VC\bin\lib.exe"))

    def test_no_compiler(self, make_settings, fake_configure):
        settings = make_settings(os=TargetOS.WINDOWS, env="msvc")
        config = fake_configure(settings, {})
        with patch("imgui_build.toolchains.msvc._find_msvc_install", return_value=None):
            assert not MsvcToolchain().configure(config)


class TestMsvcBinDirs:
    def test_latest_version_first(self, tmp_path):
        tools = tmp_path / "VC" / "Tools" / "MSVC"
        for version in ("14.38.33130", "14.40.33807"):
            (tools / version).mkdir(parents=True)
        dirs = _msvc_bin_dirs(tmp_path, "aarch64")
        assert dirs == [
            tools / "14.40.33807" / "bin" / "Hostx64" / "arm64",
            tools / "14.38.33130" / "bin" / "Hostx64" / "arm64",
        ]

    def test_missing_install(self, tmp_path):
        assert _msvc_bin_dirs(tmp_path, "x86_64") == []
