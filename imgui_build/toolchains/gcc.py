# SPDX-License-Identifier: MIT
"""GCC toolchain implementation.

Provides the GCC C++ compiler (g++) and the GNU archiver (ar).
CXX and AR override the programs.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from imgui_build.core.build_context import CompileContext
from imgui_build.tools.toolchain import BaseToolchain, NativeBuildOptions

if TYPE_CHECKING:
    from imgui_build.configure.config import Configure


class UnixToolchain(BaseToolchain):
    """Shared command lines of GCC-compatible toolchains."""

    SEPARATED_ARG_FLAGS: frozenset[str] = frozenset(
        [
            "-isystem",
            "-include",
            "-iquote",
            "-arch",
            "-target",
            "-Xclang",
        ]
    )

    def base_flags(self, options: NativeBuildOptions) -> list[str]:
        flags = [f"-std={options.std}", "-fPIC", "-ffunction-sections", "-fdata-sections"]
        flags.append("-O2" if options.release else "-g")
        return flags

    def compile_command(
        self, source: Path, obj: Path, context: CompileContext
    ) -> list[str]:
        return [
            self.cxx,
            *context.command_tokens(),
            "-c",
            "-o",
            str(obj),
            str(source),
        ]

    def archive_command(self, objects: Sequence[Path], library: Path) -> list[str]:
        return [self.ar, "rcs", str(library), *(str(o) for o in objects)]

    def library_filename(self, name: str) -> str:
        return f"lib{name}.a"


class GccToolchain(UnixToolchain):
    """GCC toolchain: g++ and ar."""

    def __init__(self) -> None:
        super().__init__("gcc", cxx="g++", ar="ar")

    def _configure_tools(self, config: Configure) -> bool:
        settings = config.settings
        gxx = config.find_program(settings.get("CXX") or "g++")
        if gxx is None:
            gxx = config.find_program("c++")
        if gxx is None:
            return False

        ar = config.find_program(settings.get("AR") or "ar", version_flag="")
        if ar is None:
            return False

        self.cxx = str(gxx.path)
        self.ar = str(ar.path)
        return True
