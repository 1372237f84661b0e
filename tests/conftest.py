# SPDX-License-Identifier: MIT
"""Shared fixtures: a fake Dear ImGui tree and build settings."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from imgui_build.configure.config import BuildSettings, ProgramInfo
from imgui_build.core.features import FeatureFlags
from imgui_build.core.resolver import (
    BACKENDS,
    CORE_AUXILIARY_HEADERS,
    CORE_BINDABLE_HEADERS,
    CORE_SOURCES,
)
from imgui_build.core.target import TargetInfo, TargetOS


def populate_tree(manifest_dir: Path, library: str = "imgui") -> Path:
    """Create every file the resolver can select, with placeholder content."""
    root = manifest_dir / library
    names = [*CORE_SOURCES, *CORE_BINDABLE_HEADERS, *CORE_AUXILIARY_HEADERS]
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {name}\n")

    backends = root / "backends"
    backends.mkdir(parents=True, exist_ok=True)
    for spec in BACKENDS:
        for suffix in (".cpp", ".h"):
            (backends / f"imgui_impl_{spec.stem}{suffix}").write_text("// backend\n")
        for extra in spec.extra_headers:
            directory = manifest_dir if extra.project_local else backends
            (directory / extra.name).write_text("// extra\n")

    freetype = root / "misc" / "freetype"
    freetype.mkdir(parents=True, exist_ok=True)
    (freetype / "imgui_freetype.cpp").write_text("// freetype\n")
    (freetype / "imgui_freetype.h").write_text("// freetype\n")

    (manifest_dir / "wrapper.cpp").write_text('#include "imgui.h"\n')
    return root


@pytest.fixture
def manifest_dir(tmp_path: Path) -> Path:
    """A host project directory containing a complete fake library tree."""
    manifest = tmp_path / "crate"
    manifest.mkdir()
    populate_tree(manifest)
    populate_tree(manifest, "imgui_docking")
    return manifest


@pytest.fixture
def make_settings(
    tmp_path: Path, manifest_dir: Path
) -> Callable[..., BuildSettings]:
    """Factory for BuildSettings over the fake tree."""

    def factory(
        features: Iterable[str] = (),
        os: TargetOS = TargetOS.LINUX,
        *,
        arch: str = "x86_64",
        env: str = "gnu",
        profile: str = "debug",
        environ: dict[str, str] | None = None,
    ) -> BuildSettings:
        return BuildSettings(
            manifest_dir=manifest_dir,
            out_dir=tmp_path / "out",
            profile=profile,
            features=FeatureFlags.from_names(features),
            target=TargetInfo(arch=arch, os=os, env=env),
            environ=environ or {},
        )

    return factory


class FakeConfigure:
    """Configure stand-in that knows a fixed set of programs.

    Attributes:
        settings: The build settings.
        programs: Program name to path of every "installed" program.
        lookups: Names looked up, in order.
    """

    def __init__(self, settings: BuildSettings, programs: dict[str, str]) -> None:
        self.settings = settings
        self.programs = programs
        self.lookups: list[str] = []

    def find_program(self, name, *, hints=None, version_flag="--version"):
        self.lookups.append(name)
        if name in self.programs:
            return ProgramInfo(path=Path(self.programs[name]))
        return None


class CommandRecorder:
    """Replacement for run_command that records every command.

    A command fails when one of its arguments equals or ends with
    `fail_on`.
    """

    def __init__(self, fail_on: str | None = None, stderr: str = "") -> None:
        self.commands: list[list[str]] = []
        self.fail_on = fail_on
        self.stderr = stderr

    def __call__(self, cmd, **kwargs):
        cmd = [str(c) for c in cmd]
        self.commands.append(cmd)
        if self.fail_on is not None and any(c.endswith(self.fail_on) for c in cmd):
            return subprocess.CompletedProcess(
                cmd, 1, stdout="", stderr=f"{self.fail_on}: error: expected ';'"
            )
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr=self.stderr)


@pytest.fixture
def fake_configure() -> type[FakeConfigure]:
    return FakeConfigure


@pytest.fixture
def command_recorder() -> type[CommandRecorder]:
    return CommandRecorder
