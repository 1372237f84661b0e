# SPDX-License-Identifier: MIT
"""Target environment reader.

Resolves the target architecture and operating system the native library
is being built for. The identifiers come from the environment Cargo gives
build scripts (CARGO_CFG_TARGET_ARCH / CARGO_CFG_TARGET_OS), with the
TARGET triple as a fallback.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from imgui_build.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_.]+$")


class TargetOS(Enum):
    """Operating systems the resolver distinguishes."""

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    OTHER = "other"

    @classmethod
    def from_identifier(cls, identifier: str) -> TargetOS:
        """Map a target OS identifier (e.g. 'windows', 'darwin') to TargetOS."""
        name = identifier.lower()
        if name == "windows":
            return cls.WINDOWS
        if name == "linux":
            return cls.LINUX
        if name in ("macos", "darwin"):
            return cls.MACOS
        return cls.OTHER


@dataclass(frozen=True)
class TargetInfo:
    """Target architecture and operating system.

    Attributes:
        arch: Architecture identifier (e.g. 'x86_64', 'aarch64').
        os: Target operating system.
        env: Target environment/ABI if known (e.g. 'msvc', 'gnu').
    """

    arch: str
    os: TargetOS
    env: str = ""

    @property
    def is_windows(self) -> bool:
        return self.os is TargetOS.WINDOWS

    @property
    def is_macos(self) -> bool:
        return self.os is TargetOS.MACOS

    @property
    def is_msvc(self) -> bool:
        return self.is_windows and self.env == "msvc"

    def __str__(self) -> str:
        return f"{self.arch}/{self.os.value}"


def _validate(kind: str, value: str) -> str:
    if not _IDENTIFIER_RE.match(value):
        raise ConfigurationError(f"unparseable target {kind}: {value!r}")
    return value


def parse_triple(triple: str) -> tuple[str, str, str]:
    """Split a target triple into (arch, os, env).

    Handles the usual shapes:
        x86_64-pc-windows-msvc      -> ('x86_64', 'windows', 'msvc')
        aarch64-apple-darwin        -> ('aarch64', 'darwin', '')
        x86_64-unknown-linux-gnu    -> ('x86_64', 'linux', 'gnu')
        wasm32-unknown-unknown      -> ('wasm32', 'unknown', '')
        wasm32-wasip1               -> ('wasm32', 'wasip1', '')

    Raises:
        ConfigurationError: If the triple has fewer than two components.
    """
    parts = triple.strip().split("-")
    if len(parts) < 2 or not all(parts):
        raise ConfigurationError(f"unparseable target triple: {triple!r}")
    arch = parts[0]
    if len(parts) == 2:
        return arch, parts[1], ""
    os_name = parts[2]
    env = parts[3] if len(parts) > 3 else ""
    return arch, os_name, env


def read_target_info(environ: Mapping[str, str]) -> TargetInfo:
    """Read the target architecture and OS from the environment.

    Args:
        environ: Environment mapping (usually os.environ plus CLI variables).

    Returns:
        The resolved TargetInfo.

    Raises:
        ConfigurationError: If an identifier is absent or unparseable.
    """
    arch = environ.get("CARGO_CFG_TARGET_ARCH", "")
    os_name = environ.get("CARGO_CFG_TARGET_OS", "")
    env = environ.get("CARGO_CFG_TARGET_ENV", "")

    if not (arch and os_name):
        triple = environ.get("TARGET", "")
        if not triple:
            missing = "CARGO_CFG_TARGET_ARCH" if not arch else "CARGO_CFG_TARGET_OS"
            raise ConfigurationError(
                f"cannot determine target: {missing} and TARGET are not set"
            )
        t_arch, t_os, t_env = parse_triple(triple)
        arch = arch or t_arch
        os_name = os_name or t_os
        env = env or t_env

    info = TargetInfo(
        arch=_validate("architecture", arch),
        os=TargetOS.from_identifier(_validate("OS", os_name)),
        env=env,
    )
    logger.debug("target_arch %s", info.arch)
    logger.debug("target_os %s", info.os.value)
    return info
