# SPDX-License-Identifier: MIT
"""Toolchain definitions (GCC, LLVM, MSVC) and toolchain discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from imgui_build.core.errors import ToolNotFoundError
from imgui_build.toolchains.gcc import GccToolchain, UnixToolchain
from imgui_build.toolchains.llvm import LlvmToolchain
from imgui_build.toolchains.msvc import MsvcToolchain

if TYPE_CHECKING:
    from imgui_build.configure.config import Configure
    from imgui_build.tools.toolchain import BaseToolchain

logger = logging.getLogger(__name__)


def toolchain_candidates(config: Configure) -> list[BaseToolchain]:
    """Toolchains to try, most appropriate first.

    MSVC targets use MSVC. Otherwise a CXX override naming clang selects
    LLVM first; macOS prefers LLVM; everything else prefers GCC.
    """
    settings = config.settings
    target = settings.target
    if target.is_msvc:
        return [MsvcToolchain()]

    cxx = Path(settings.get("CXX") or "").name
    if "clang" in cxx or target.is_macos:
        return [LlvmToolchain(), GccToolchain()]
    return [GccToolchain(), LlvmToolchain()]


def find_cxx_toolchain(config: Configure) -> BaseToolchain:
    """Find and configure a C++ toolchain for the target.

    Raises:
        ToolNotFoundError: If no candidate toolchain is available.
    """
    candidates = toolchain_candidates(config)
    for toolchain in candidates:
        if toolchain.configure(config):
            logger.debug("Using toolchain %r", toolchain)
            return toolchain
        logger.debug("Toolchain %s not available", toolchain.name)
    names = ", ".join(t.name for t in candidates)
    raise ToolNotFoundError(f"C++ toolchain (tried {names})")


__all__ = [
    "GccToolchain",
    "LlvmToolchain",
    "MsvcToolchain",
    "UnixToolchain",
    "find_cxx_toolchain",
    "toolchain_candidates",
]
