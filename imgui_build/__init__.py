# SPDX-License-Identifier: MIT
"""
imgui-build: builds a vendored Dear ImGui tree for a Rust host crate.

Selects the library sources, backends and integrations from feature flags
and the target OS, generates Rust bindings with bindgen and compiles the
selection into a static library, reporting back to Cargo through cargo:
directives.
"""

from __future__ import annotations

from imgui_build.configure.config import BuildSettings, Configure
from imgui_build.core.features import Feature, FeatureFlags
from imgui_build.core.resolver import LibraryLayout, resolve_file_groups
from imgui_build.core.target import TargetInfo, TargetOS
from imgui_build.core.units import CompileUnit, FileGroups, UnitKind
from imgui_build.pipeline import BuildResult, Pipeline, PipelineState

__version__ = "0.1.0"


__all__ = [
    "__version__",
    # Configuration
    "BuildSettings",
    "Configure",
    "Feature",
    "FeatureFlags",
    "TargetInfo",
    "TargetOS",
    # File selection
    "CompileUnit",
    "FileGroups",
    "LibraryLayout",
    "UnitKind",
    "resolve_file_groups",
    # Pipeline
    "BuildResult",
    "Pipeline",
    "PipelineState",
]
