# SPDX-License-Identifier: MIT
"""Tests for imgui_build.configure.config."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from imgui_build.configure.config import BuildSettings, Configure
from imgui_build.core.errors import ConfigurationError, MissingVariableError
from imgui_build.core.features import Feature, FeatureFlags
from imgui_build.core.target import TargetOS


def cargo_environ(tmp_path: Path, **extra: str) -> dict[str, str]:
    environ = {
        "CARGO_MANIFEST_DIR": str(tmp_path / "crate"),
        "OUT_DIR": str(tmp_path / "out"),
        "CARGO_CFG_TARGET_ARCH": "x86_64",
        "CARGO_CFG_TARGET_OS": "linux",
        "CARGO_CFG_TARGET_ENV": "gnu",
    }
    environ.update(extra)
    return environ


class TestBuildSettingsFromEnviron:
    def test_basic(self, tmp_path: Path) -> None:
        settings = BuildSettings.from_environ(
            cargo_environ(tmp_path, CARGO_FEATURE_SDL2="1", PROFILE="release")
        )
        assert settings.manifest_dir == tmp_path / "crate"
        assert settings.out_dir == tmp_path / "out"
        assert settings.target.os is TargetOS.LINUX
        assert settings.features.names() == ["sdl2"]
        assert settings.is_release

    def test_profile_defaults_to_debug(self, tmp_path: Path) -> None:
        settings = BuildSettings.from_environ(cargo_environ(tmp_path))
        assert settings.profile == "debug"
        assert not settings.is_release

    @pytest.mark.parametrize("variable", ["CARGO_MANIFEST_DIR", "OUT_DIR"])
    def test_required_variables(self, tmp_path: Path, variable: str) -> None:
        environ = cargo_environ(tmp_path)
        del environ[variable]
        with pytest.raises(MissingVariableError) as excinfo:
            BuildSettings.from_environ(environ)
        assert excinfo.value.variable == variable

    def test_empty_counts_as_missing(self, tmp_path: Path) -> None:
        with pytest.raises(MissingVariableError):
            BuildSettings.from_environ(cargo_environ(tmp_path, OUT_DIR=""))

    def test_missing_target(self, tmp_path: Path) -> None:
        environ = cargo_environ(tmp_path)
        del environ["CARGO_CFG_TARGET_OS"]
        with pytest.raises(ConfigurationError, match="cannot determine target"):
            BuildSettings.from_environ(environ)

    def test_extra_features_added(self, tmp_path: Path) -> None:
        settings = BuildSettings.from_environ(
            cargo_environ(tmp_path, CARGO_FEATURE_GL3="1"),
            extra_features=FeatureFlags.from_names(["freetype"]),
        )
        assert settings.features.names() == ["gl3", "freetype"]

    def test_environ_is_copied(self, tmp_path: Path) -> None:
        environ = cargo_environ(tmp_path, CXX="clang++")
        settings = BuildSettings.from_environ(environ)
        environ["CXX"] = "g++"
        assert settings.get("CXX") == "clang++"


class TestBuildSettingsLayout:
    def test_library_root(self, make_settings, manifest_dir: Path) -> None:
        assert make_settings().library_root == manifest_dir / "imgui"
        docking = make_settings(["docking"])
        assert docking.library_root == manifest_dir / "imgui_docking"
        assert docking.layout.backends_dir == manifest_dir / "imgui_docking" / "backends"
        assert docking.layout.wrapper == manifest_dir / "wrapper.cpp"

    def test_get_treats_empty_as_unset(self, make_settings) -> None:
        settings = make_settings(environ={"CXX": "", "AR": "llvm-ar"})
        assert settings.get("CXX") is None
        assert settings.get("CXX", "g++") == "g++"
        assert settings.get("AR") == "llvm-ar"

    def test_frozen(self, make_settings) -> None:
        settings = make_settings()
        with pytest.raises(AttributeError):
            settings.profile = "release"  # type: ignore[misc]

    def test_feature_membership(self, make_settings) -> None:
        assert Feature.WIN32 in make_settings(["win32"]).features


def make_executable(path: Path) -> Path:
    path.write_text("#!/bin/sh\necho tool 1.0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


class TestFindProgram:
    @pytest.mark.skipif(os.name == "nt", reason="POSIX executables")
    def test_hint_directory(self, make_settings, tmp_path: Path) -> None:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        tool = make_executable(bin_dir / "my-tool-xyz")

        config = Configure(make_settings())
        info = config.find_program("my-tool-xyz", hints=[bin_dir], version_flag="")

        assert info is not None
        assert info.path == tool
        assert info.version is None

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executables")
    def test_hint_file(self, make_settings, tmp_path: Path) -> None:
        tool = make_executable(tmp_path / "custom-cxx")
        config = Configure(make_settings())
        info = config.find_program("c++", hints=[tool], version_flag="")
        assert info is not None
        assert info.path == tool

    def test_not_found(self, make_settings) -> None:
        config = Configure(make_settings())
        assert config.find_program("definitely-not-a-real-tool-12345") is None

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executables")
    def test_results_cached(self, make_settings, tmp_path: Path) -> None:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        tool = make_executable(bin_dir / "cached-tool")
        config = Configure(make_settings())
        first = config.find_program("cached-tool", hints=[bin_dir], version_flag="")
        tool.unlink()
        assert config.find_program("cached-tool", hints=[bin_dir]) is first
