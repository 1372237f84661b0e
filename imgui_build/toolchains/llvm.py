# SPDX-License-Identifier: MIT
"""LLVM/Clang toolchain implementation.

Provides the Clang C++ compiler (clang++) and the LLVM archiver
(llvm-ar, falling back to the system ar).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from imgui_build.toolchains.gcc import UnixToolchain

if TYPE_CHECKING:
    from imgui_build.configure.config import Configure


class LlvmToolchain(UnixToolchain):
    """LLVM toolchain: clang++ and llvm-ar."""

    def __init__(self) -> None:
        super().__init__("llvm", cxx="clang++", ar="llvm-ar")

    def _configure_tools(self, config: Configure) -> bool:
        settings = config.settings
        clangxx = config.find_program(settings.get("CXX") or "clang++")
        if clangxx is None:
            return False

        ar_override = settings.get("AR")
        if ar_override:
            ar = config.find_program(ar_override, version_flag="")
        else:
            # Prefer llvm-ar, fall back to ar
            ar = config.find_program("llvm-ar", version_flag="")
            if ar is None:
                ar = config.find_program("ar", version_flag="")
        if ar is None:
            return False

        self.cxx = str(clangxx.path)
        self.ar = str(ar.path)
        return True
