# SPDX-License-Identifier: MIT
"""Native build interface and toolchain base implementation.

A toolchain is a C++ compiler plus an archiver. BaseToolchain compiles
each unit to an object file, one at a time, then archives the objects into
a static library. Subclasses supply the command lines.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from imgui_build.core.build_context import CompileContext
from imgui_build.core.errors import NativeCompileError
from imgui_build.core.features import Feature
from imgui_build.core.flags import deduplicate_flags, split_flags, unique_paths
from imgui_build.core.units import FileGroups
from imgui_build.util.process import failure_output, format_command, run_command

if TYPE_CHECKING:
    from imgui_build.configure.config import BuildSettings, Configure
    from imgui_build.configure.pkgconfig import DependencyInfo

logger = logging.getLogger(__name__)

# Defines turning on an optional integration's code path in the library.
FEATURE_DEFINES: dict[Feature, str] = {
    Feature.FREETYPE: "IMGUI_ENABLE_FREETYPE=1",
}


@dataclass(frozen=True)
class NativeBuildOptions:
    """Configuration of one static library build.

    Attributes:
        library_name: Library name; the archive is named after it.
        out_dir: Build-scoped output directory.
        includes: Include directories, library root first.
        defines: Preprocessor definitions ('NAME' or 'NAME=VALUE').
        std: C++ language standard.
        release: Optimized build.
        extra_flags: Additional compiler flags (e.g. from CXXFLAGS).
    """

    library_name: str
    out_dir: Path
    includes: tuple[str, ...] = ()
    defines: tuple[str, ...] = ()
    std: str = "c++20"
    release: bool = False
    extra_flags: tuple[str, ...] = ()


def native_build_options(
    settings: BuildSettings,
    dependencies: Mapping[Feature, DependencyInfo],
    library_name: str,
) -> NativeBuildOptions:
    """Collect includes and defines for the enabled features.

    Args:
        settings: Build settings.
        dependencies: Probe results of the enabled dependency features.
        library_name: Name of the static library.
    """
    includes = [settings.library_root]
    for info in dependencies.values():
        includes.extend(info.include_paths)

    defines = [FEATURE_DEFINES[f] for f in settings.features if f in FEATURE_DEFINES]
    if settings.is_release:
        defines.append("NDEBUG")

    return NativeBuildOptions(
        library_name=library_name,
        out_dir=settings.out_dir,
        includes=tuple(unique_paths(includes)),
        defines=tuple(defines),
        release=settings.is_release,
        extra_flags=tuple(split_flags(settings.get("CXXFLAGS"))),
    )


def compile_units_for(groups: FileGroups, wrapper: Path) -> list[Path]:
    """Source units of all_files followed by the interop wrapper."""
    return [u.path for u in groups.sources()] + [wrapper]


@runtime_checkable
class NativeBuildBackend(Protocol):
    """Produces one static library from a list of source units."""

    def compile(self, units: Sequence[Path], options: NativeBuildOptions) -> Path:
        """Compile `units` into a static library.

        Returns:
            Path to the library artifact.

        Raises:
            NativeCompileError: If any unit or the archive step fails.
        """
        ...


class BaseToolchain(ABC):
    """Abstract base class for toolchains.

    Attributes:
        cxx: C++ compiler command; configure() replaces the default
            with the located program.
        ar: Archiver command, likewise.
    """

    # Flags taking their argument as a separate token.
    SEPARATED_ARG_FLAGS: frozenset[str] = frozenset()
    object_suffix = ".o"

    def __init__(self, name: str, *, cxx: str, ar: str) -> None:
        self._name = name
        self.cxx = cxx
        self.ar = ar
        self._configured = False

    @property
    def name(self) -> str:
        return self._name

    def configure(self, config: Configure) -> bool:
        """Locate the compiler and archiver.

        Returns:
            True if the toolchain is available.
        """
        if self._configured:
            return True
        result = self._configure_tools(config)
        self._configured = result
        return result

    @abstractmethod
    def _configure_tools(self, config: Configure) -> bool:
        """Detect the tools and set cxx and ar."""
        ...

    @abstractmethod
    def compile_command(
        self, source: Path, obj: Path, context: CompileContext
    ) -> list[str]:
        """Command compiling one source file to an object file."""
        ...

    @abstractmethod
    def archive_command(self, objects: Sequence[Path], library: Path) -> list[str]:
        """Command archiving object files into a static library."""
        ...

    @abstractmethod
    def library_filename(self, name: str) -> str:
        """File name of the static library called `name`."""
        ...

    def base_flags(self, options: NativeBuildOptions) -> list[str]:
        """Language and optimization flags; override in subclasses."""
        return []

    def make_context(self, options: NativeBuildOptions) -> CompileContext:
        flags = deduplicate_flags(
            [*self.base_flags(options), *options.extra_flags],
            self.SEPARATED_ARG_FLAGS,
        )
        return CompileContext(
            includes=list(options.includes),
            defines=list(options.defines),
            flags=flags,
        )

    def object_path(self, obj_dir: Path, index: int, source: Path) -> Path:
        # The index keeps objects of same-named sources apart.
        return obj_dir / f"{index:02d}-{source.stem}{self.object_suffix}"

    def _run(self, cmd: list[str], what: str) -> None:
        try:
            result = run_command(cmd)
        except OSError as e:
            raise NativeCompileError(f"could not run {cmd[0]}: {e}") from e
        if result.returncode != 0:
            raise NativeCompileError(f"{what} failed: {failure_output(result)}")
        if result.stderr.strip():
            logger.warning("%s: %s", what, result.stderr.strip())

    def compile(self, units: Sequence[Path], options: NativeBuildOptions) -> Path:
        if not units:
            raise NativeCompileError("no compile units")

        context = self.make_context(options)
        obj_dir = options.out_dir / "obj"
        try:
            obj_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise NativeCompileError(f"cannot create {obj_dir}: {e}") from e

        objects: list[Path] = []
        for index, source in enumerate(units):
            obj = self.object_path(obj_dir, index, Path(source))
            cmd = self.compile_command(Path(source), obj, context)
            logger.info("Compiling %s", Path(source).name)
            logger.debug("  %s", format_command(cmd))
            self._run(cmd, f"Compiling {source}")
            objects.append(obj)

        library = options.out_dir / self.library_filename(options.library_name)
        # Archivers update existing archives in place; start from scratch.
        try:
            library.unlink(missing_ok=True)
        except OSError as e:
            raise NativeCompileError(f"cannot remove stale {library}: {e}") from e
        self._run(self.archive_command(objects, library), f"Archiving {library.name}")
        logger.info("Built %s from %d units", library, len(objects))
        return library

    def __repr__(self) -> str:
        return f"{type(self).__name__}(cxx={self.cxx!r}, ar={self.ar!r})"
