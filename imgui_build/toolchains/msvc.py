# SPDX-License-Identifier: MIT
"""MSVC toolchain implementation (Windows only)."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from imgui_build.core.build_context import CompileContext, MsvcCompileContext
from imgui_build.tools.toolchain import BaseToolchain, NativeBuildOptions

if TYPE_CHECKING:
    from imgui_build.configure.config import Configure

logger = logging.getLogger(__name__)


def _find_vswhere() -> Path | None:
    program_files = os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
    vswhere = (
        Path(program_files) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"
    )
    return vswhere if vswhere.exists() else None


def _find_msvc_install() -> Path | None:
    vswhere = _find_vswhere()
    if vswhere is None:
        return None
    try:
        result = subprocess.run(
            [
                str(vswhere),
                "-latest",
                "-requires",
                "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
                "-property",
                "installationPath",
            ],
            capture_output=True,
            text=True,
            timeout=30,
        )
        if result.returncode == 0 and result.stdout.strip():
            return Path(result.stdout.strip())
    except (subprocess.TimeoutExpired, OSError):
        pass
    return None


def _msvc_bin_dirs(install: Path, arch: str) -> list[Path]:
    """Host-x64 compiler directories for the target architecture."""
    target = {"x86_64": "x64", "aarch64": "arm64", "x86": "x86", "i686": "x86"}.get(
        arch, "x64"
    )
    tools = install / "VC" / "Tools" / "MSVC"
    if not tools.is_dir():
        return []
    versions = sorted((p for p in tools.iterdir() if p.is_dir()), reverse=True)
    return [v / "bin" / "Hostx64" / target for v in versions]


class MsvcToolchain(BaseToolchain):
    """MSVC toolchain: cl.exe and lib.exe.

    cl.exe is looked up on PATH first (a developer prompt), then in the
    latest Visual Studio installation found by vswhere. Building with an
    installation found by vswhere still needs the INCLUDE/LIB variables of
    a developer environment.
    """

    object_suffix = ".obj"

    def __init__(self) -> None:
        super().__init__("msvc", cxx="cl.exe", ar="lib.exe")

    def _configure_tools(self, config: Configure) -> bool:
        settings = config.settings
        if not settings.target.is_windows:
            return False

        hints: list[Path | str] = []
        install = _find_msvc_install()
        if install is not None:
            logger.debug("Visual Studio installation %s", install)
            hints.extend(_msvc_bin_dirs(install, settings.target.arch))

        cl = config.find_program("cl.exe", version_flag="")
        if cl is None and hints:
            cl = config.find_program("cl.exe", hints=hints, version_flag="")
        if cl is None:
            return False
        lib = config.find_program("lib.exe", hints=[cl.path.parent], version_flag="")
        if lib is None:
            return False

        self.cxx = str(cl.path)
        self.ar = str(lib.path)
        return True

    def base_flags(self, options: NativeBuildOptions) -> list[str]:
        flags = ["/nologo", f"/std:{options.std}", "/EHsc", "/MD"]
        flags.append("/O2" if options.release else "/Z7")
        return flags

    def make_context(self, options: NativeBuildOptions) -> CompileContext:
        base = super().make_context(options)
        return MsvcCompileContext(
            includes=base.includes, defines=base.defines, flags=base.flags
        )

    def compile_command(
        self, source: Path, obj: Path, context: CompileContext
    ) -> list[str]:
        return [
            self.cxx,
            *context.command_tokens(),
            "/c",
            f"/Fo{obj}",
            str(source),
        ]

    def archive_command(self, objects: Sequence[Path], library: Path) -> list[str]:
        return [self.ar, "/nologo", f"/OUT:{library}", *(str(o) for o in objects)]

    def library_filename(self, name: str) -> str:
        return f"{name}.lib"
