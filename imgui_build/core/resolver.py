# SPDX-License-Identifier: MIT
"""File-set resolver.

Computes which Dear ImGui files take part in the build from the enabled
features and the target OS. The result is a pure function of
(FeatureFlags, TargetInfo, LibraryLayout): nothing here touches the
filesystem or the environment, so identical inputs always produce an
identical, order-stable FileGroups.

Backends are described by the BACKENDS table rather than by code paths.
A backend restricted to one OS that is enabled while building for another
OS is skipped with an informational log message: feature flags are
requested globally across a multi-platform build matrix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from imgui_build.core.features import Feature, FeatureFlags
from imgui_build.core.target import TargetInfo, TargetOS
from imgui_build.core.units import CompileUnit, FileGroups

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LibraryLayout:
    """Where the vendored library and project-local files live.

    Attributes:
        root: The library root (directory containing imgui.h).
        manifest_dir: The host project directory, home of the interop
            wrapper and project-local backend headers.
    """

    root: Path
    manifest_dir: Path

    @property
    def backends_dir(self) -> Path:
        return self.root / "backends"

    @property
    def misc_dir(self) -> Path:
        return self.root / "misc"

    @property
    def freetype_dir(self) -> Path:
        return self.misc_dir / "freetype"

    @property
    def wrapper(self) -> Path:
        """The interop wrapper translation unit."""
        return self.manifest_dir / "wrapper.cpp"


@dataclass(frozen=True)
class ExtraHeader:
    """An additional header a backend contributes.

    Attributes:
        name: File name.
        requires_binding: Whether the header is parsed for bindings.
        project_local: If True the header lives in the manifest directory,
            otherwise next to the backend sources.
    """

    name: str
    requires_binding: bool
    project_local: bool = False


@dataclass(frozen=True)
class BackendSpec:
    """A platform or renderer backend.

    Attributes:
        feature: Feature that enables the backend.
        stem: Backend file stem, e.g. 'win32' for imgui_impl_win32.cpp.
        required_os: The only OS the backend builds on, or None.
        extra_headers: Headers added after the source/header pair.
    """

    feature: Feature
    stem: str
    required_os: TargetOS | None = None
    extra_headers: tuple[ExtraHeader, ...] = ()

    def units(self, layout: LibraryLayout) -> list[CompileUnit]:
        base = layout.backends_dir / f"imgui_impl_{self.stem}"
        units = [
            CompileUnit.source(base.with_suffix(".cpp")),
            CompileUnit.header(base.with_suffix(".h"), requires_binding=True),
        ]
        for extra in self.extra_headers:
            directory = layout.manifest_dir if extra.project_local else layout.backends_dir
            units.append(
                CompileUnit.header(
                    directory / extra.name, requires_binding=extra.requires_binding
                )
            )
        return units


# Core files, in declaration order.
CORE_SOURCES = (
    "imgui.cpp",
    "imgui_widgets.cpp",
    "imgui_draw.cpp",
    "imgui_tables.cpp",
    "imgui_demo.cpp",
)
CORE_BINDABLE_HEADERS = ("imgui.h", "imgui_internal.h")
# Vendored stb single-header modules: compiled in, never bound.
CORE_AUXILIARY_HEADERS = ("imstb_textedit.h", "imstb_rectpack.h", "imstb_truetype.h")

BACKENDS: tuple[BackendSpec, ...] = (
    BackendSpec(
        Feature.WIN32,
        "win32",
        TargetOS.WINDOWS,
        (ExtraHeader("imgui_impl_win32_wrapper.hpp", True, project_local=True),),
    ),
    BackendSpec(Feature.DX9, "dx9", TargetOS.WINDOWS),
    BackendSpec(Feature.DX10, "dx10", TargetOS.WINDOWS),
    BackendSpec(Feature.DX11, "dx11", TargetOS.WINDOWS),
    BackendSpec(Feature.DX12, "dx12", TargetOS.WINDOWS),
    BackendSpec(Feature.SDL2, "sdl2"),
    BackendSpec(Feature.SDL2_RENDERER, "sdlrenderer2"),
    BackendSpec(Feature.SDL3, "sdl3"),
    BackendSpec(Feature.SDL3_RENDERER, "sdlrenderer3"),
    BackendSpec(Feature.GL2, "opengl2"),
    BackendSpec(
        Feature.GL3,
        "opengl3",
        extra_headers=(ExtraHeader("imgui_impl_opengl3_loader.h", False),),
    ),
    BackendSpec(Feature.VULKAN, "vulkan"),
)


def core_units(layout: LibraryLayout) -> list[CompileUnit]:
    """The fixed core file set, in the order the library lists it."""
    root = layout.root
    sources = [CompileUnit.source(root / name) for name in CORE_SOURCES]
    headers = [
        CompileUnit.header(root / name, requires_binding=True)
        for name in CORE_BINDABLE_HEADERS
    ]
    # imgui.cpp, imgui.h, imgui_internal.h, then the remaining sources
    units = [sources[0], *headers, *sources[1:]]
    units.extend(
        CompileUnit.header(root / name, requires_binding=False)
        for name in CORE_AUXILIARY_HEADERS
    )
    return units


def backend_units(
    flags: FeatureFlags, target: TargetInfo, layout: LibraryLayout
) -> list[CompileUnit]:
    """Units contributed by every enabled backend that supports the target."""
    units: list[CompileUnit] = []
    for spec in BACKENDS:
        if spec.feature not in flags:
            continue
        required = spec.required_os
        if required is not None and required is not target.os:
            logger.info(
                "Target OS is not %s, skipping %s feature",
                required.value,
                spec.feature.value,
            )
            continue
        units.extend(spec.units(layout))
    return units


def other_units(flags: FeatureFlags, layout: LibraryLayout) -> list[CompileUnit]:
    """Units of auxiliary optional modules (the FreeType rasterizer)."""
    units: list[CompileUnit] = []
    if Feature.FREETYPE in flags:
        units.append(CompileUnit.source(layout.freetype_dir / "imgui_freetype.cpp"))
        units.append(
            CompileUnit.header(
                layout.freetype_dir / "imgui_freetype.h", requires_binding=False
            )
        )
    return units


def resolve_file_groups(
    flags: FeatureFlags, target: TargetInfo, layout: LibraryLayout
) -> FileGroups:
    """Compute the core, backend and other file groups.

    Args:
        flags: Enabled features.
        target: Target architecture and OS.
        layout: Library and manifest directories.

    Returns:
        The resolved FileGroups.
    """
    groups = FileGroups(
        core=tuple(core_units(layout)),
        backend=tuple(backend_units(flags, target, layout)),
        other=tuple(other_units(flags, layout)),
    )
    for label, units in (
        ("Core", groups.core),
        ("Backend", groups.backend),
        ("Other", groups.other),
    ):
        for unit in units:
            logger.debug("%s file %s", label, unit.path)
    return groups
