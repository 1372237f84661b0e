# SPDX-License-Identifier: MIT
"""Configure context for imgui-build.

BuildSettings gathers everything the pipeline reads from its environment:
directories, build profile, feature flags and target. Configure locates the
external programs (compilers, archivers, pkg-config, bindgen) the stages
drive.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from imgui_build.core.errors import MissingVariableError
from imgui_build.core.features import Feature, FeatureFlags
from imgui_build.core.resolver import LibraryLayout
from imgui_build.core.target import TargetInfo, read_target_info

logger = logging.getLogger(__name__)

# Name of the native library; also names the static archive.
LIBRARY_NAME = "dear_imgui"


@dataclass
class ProgramInfo:
    """Information about a found program.

    Attributes:
        path: Path to the program executable.
        version: Version string if detected.
    """

    path: Path
    version: str | None = None


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "")
    if not value:
        raise MissingVariableError(name)
    return value


@dataclass(frozen=True)
class BuildSettings:
    """Everything resolved once at the start of a build.

    Attributes:
        manifest_dir: Host project directory (CARGO_MANIFEST_DIR).
        out_dir: Build-scoped output directory (OUT_DIR).
        profile: Build profile, 'debug' or 'release' (PROFILE).
        features: Enabled features.
        target: Target architecture and OS.
        environ: The environment the settings were read from; tool
            overrides such as CXX or BINDGEN are looked up here.
    """

    manifest_dir: Path
    out_dir: Path
    profile: str
    features: FeatureFlags
    target: TargetInfo
    environ: Mapping[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        extra_features: FeatureFlags | None = None,
    ) -> BuildSettings:
        """Read settings from the environment.

        Args:
            environ: Environment mapping; defaults to os.environ.
            extra_features: Features enabled in addition to the
                CARGO_FEATURE_* variables (e.g. from the command line).

        Raises:
            ConfigurationError: If a required identifier is absent or
                unparseable.
        """
        if environ is None:
            environ = os.environ
        manifest_dir = Path(_require(environ, "CARGO_MANIFEST_DIR"))
        logger.debug("manifest_directory %s", manifest_dir)
        out_dir = Path(_require(environ, "OUT_DIR"))
        logger.debug("out_path %s", out_dir)
        target = read_target_info(environ)

        features = FeatureFlags.from_environ(environ)
        if extra_features is not None:
            features = features.with_features(*extra_features)
        logger.debug("features %s", features.names())

        return cls(
            manifest_dir=manifest_dir,
            out_dir=out_dir,
            profile=environ.get("PROFILE", "debug") or "debug",
            features=features,
            target=target,
            environ=dict(environ),
        )

    @property
    def is_release(self) -> bool:
        """True for optimized builds (runtime assertions stripped)."""
        return self.profile != "debug"

    @property
    def library_root(self) -> Path:
        """The vendored library tree; the docking branch has its own copy."""
        if Feature.DOCKING in self.features:
            return self.manifest_dir / "imgui_docking"
        return self.manifest_dir / "imgui"

    @property
    def layout(self) -> LibraryLayout:
        return LibraryLayout(root=self.library_root, manifest_dir=self.manifest_dir)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Look up a tool override variable, treating empty as unset."""
        return self.environ.get(name) or default


class Configure:
    """Locates the external programs a build needs.

    Example:
        config = Configure(settings)
        gxx = config.find_program("g++")
        if gxx:
            print(f"Found g++ at {gxx.path}")

    Attributes:
        settings: The build settings.
    """

    def __init__(self, settings: BuildSettings) -> None:
        self.settings = settings
        self._programs: dict[str, ProgramInfo] = {}

    def find_program(
        self,
        name: str,
        *,
        hints: list[Path | str] | None = None,
        version_flag: str = "--version",
    ) -> ProgramInfo | None:
        """Find a program on the system.

        Searches the hint paths first, then PATH.

        Args:
            name: Program name or path (e.g., 'g++', '/usr/bin/clang++').
            hints: Additional directories or files to search.
            version_flag: Flag to get the version; empty to skip detection.

        Returns:
            ProgramInfo if found, None otherwise.
        """
        if name in self._programs:
            return self._programs[name]

        found_path: Path | None = None

        if hints:
            for hint in hints:
                hint_path = Path(hint)
                if hint_path.is_file() and os.access(hint_path, os.X_OK):
                    found_path = hint_path
                    break
                candidate = hint_path / name
                if self.settings.target.is_windows and not candidate.suffix:
                    candidate = candidate.with_suffix(".exe")
                if candidate.is_file() and os.access(candidate, os.X_OK):
                    found_path = candidate
                    break

        if found_path is None:
            found_path = self._which(name)

        if found_path is None:
            logger.debug("Program not found: %s", name)
            return None

        version = None
        if version_flag:
            version = self._get_program_version(found_path, version_flag)

        info = ProgramInfo(path=found_path, version=version)
        self._programs[name] = info
        logger.debug("Found %s at %s (%s)", name, found_path, version or "unknown")
        return info

    def _which(self, name: str) -> Path | None:
        result = shutil.which(name)
        if result:
            return Path(result)
        return None

    def _get_program_version(self, path: Path, version_flag: str) -> str | None:
        """Try to get the version of a program."""
        try:
            result = subprocess.run(
                [str(path), version_flag],
                capture_output=True,
                text=True,
                timeout=5,
            )
            if result.returncode == 0:
                for line in result.stdout.split("\n"):
                    line = line.strip()
                    if line:
                        return line
            return None
        except (subprocess.TimeoutExpired, OSError):
            return None

    def __repr__(self) -> str:
        return f"Configure(target={self.settings.target}, out_dir={self.settings.out_dir})"
