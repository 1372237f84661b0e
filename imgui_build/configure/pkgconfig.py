# SPDX-License-Identifier: MIT
"""External dependency prober.

Some features need a separately installed native library: FreeType for
the font rasterizer, SDL2/SDL3 for their platform backends. For each such
feature that is enabled, pkg-config is asked for the library's include
paths and link arguments. A disabled feature is never probed, so a missing
library that nothing uses never blocks the build.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from imgui_build.core.errors import DependencyProbeError
from imgui_build.core.features import Feature, FeatureFlags
from imgui_build.util.process import failure_output, run_command

logger = logging.getLogger(__name__)

# Features that depend on a system library, with its pkg-config name.
DEPENDENCY_LIBRARIES: dict[Feature, str] = {
    Feature.FREETYPE: "freetype2",
    Feature.SDL2: "sdl2",
    Feature.SDL3: "sdl3",
}


@dataclass(frozen=True)
class DependencyInfo:
    """Build metadata for one native library.

    Attributes:
        name: pkg-config package name.
        include_paths: Include directories, in pkg-config order.
        link_args: Linker arguments as reported by pkg-config --libs.
        version: Package version if reported.
    """

    name: str
    include_paths: tuple[Path, ...] = ()
    link_args: tuple[str, ...] = ()
    version: str = ""


def _query(pkg_config: str, name: str, *args: str) -> str:
    try:
        result = run_command([pkg_config, *args, name])
    except OSError as e:
        raise DependencyProbeError(name, f"could not run {pkg_config}: {e}") from e
    if result.returncode != 0:
        raise DependencyProbeError(name, failure_output(result))
    return result.stdout.strip()


def probe_library(name: str, *, pkg_config: str = "pkg-config") -> DependencyInfo:
    """Query pkg-config for a library.

    Args:
        name: pkg-config package name (e.g. 'freetype2').
        pkg_config: pkg-config executable.

    Returns:
        The library's include paths and link arguments.

    Raises:
        DependencyProbeError: If pkg-config cannot be run or does not
            know the package.
    """
    cflags = shlex.split(_query(pkg_config, name, "--cflags-only-I"))
    include_paths = tuple(
        Path(flag[2:]) for flag in cflags if flag.startswith("-I") and len(flag) > 2
    )
    link_args = tuple(shlex.split(_query(pkg_config, name, "--libs")))
    version = _query(pkg_config, name, "--modversion")
    info = DependencyInfo(
        name=name,
        include_paths=include_paths,
        link_args=link_args,
        version=version,
    )
    logger.info("Found %s %s", name, version or "(unknown version)")
    for include in include_paths:
        logger.debug("%s include %s", name, include)
    return info


class DependencyProber:
    """Probes the libraries required by the enabled features.

    Attributes:
        pkg_config: The pkg-config executable to run.
        libraries: Feature to pkg-config package mapping.
    """

    def __init__(
        self,
        pkg_config: str = "pkg-config",
        libraries: Mapping[Feature, str] | None = None,
    ) -> None:
        self.pkg_config = pkg_config
        self.libraries = dict(DEPENDENCY_LIBRARIES if libraries is None else libraries)

    def required_libraries(self, flags: FeatureFlags) -> list[tuple[Feature, str]]:
        """(feature, package) pairs to probe, in feature declaration order."""
        return [(f, self.libraries[f]) for f in flags if f in self.libraries]

    def probe(self, flags: FeatureFlags) -> dict[Feature, DependencyInfo]:
        """Probe every enabled dependency-requiring feature.

        Stops at the first library that cannot be found.

        Raises:
            DependencyProbeError: Naming the first missing library.
        """
        found: dict[Feature, DependencyInfo] = {}
        for feature, name in self.required_libraries(flags):
            logger.debug("Probing %s for %s feature", name, feature.value)
            found[feature] = probe_library(name, pkg_config=self.pkg_config)
        return found
