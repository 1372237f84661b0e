# SPDX-License-Identifier: MIT
"""Feature switches for the Dear ImGui build.

Each optional backend or integration is a member of the closed Feature
enumeration. A FeatureFlags value is the set of features the caller
enabled; it is built once at the start of a build and never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum

from imgui_build.core.errors import ConfigurationError

# Prefix Cargo uses to announce enabled features to build scripts.
CARGO_FEATURE_PREFIX = "CARGO_FEATURE_"


class Feature(str, Enum):
    """Optional capabilities of the native library build."""

    DOCKING = "docking"
    WIN32 = "win32"
    DX9 = "dx9"
    DX10 = "dx10"
    DX11 = "dx11"
    DX12 = "dx12"
    SDL2 = "sdl2"
    SDL2_RENDERER = "sdl2_renderer"
    SDL3 = "sdl3"
    SDL3_RENDERER = "sdl3_renderer"
    GL2 = "gl2"
    GL3 = "gl3"
    VULKAN = "vulkan"
    FREETYPE = "freetype"

    @property
    def env_name(self) -> str:
        """Name of the Cargo environment variable announcing this feature."""
        return CARGO_FEATURE_PREFIX + self.value.upper().replace("-", "_")

    @classmethod
    def parse(cls, name: str) -> Feature:
        """Look up a feature by name.

        Accepts Cargo spellings too ("SDL2_RENDERER", "sdl2-renderer").

        Raises:
            ConfigurationError: If the name is not a known feature.
        """
        normalized = name.strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            known = ", ".join(f.value for f in cls)
            raise ConfigurationError(
                f"unknown feature {name!r} (known features: {known})"
            ) from None


@dataclass(frozen=True)
class FeatureFlags:
    """The set of enabled features.

    Everything not listed is disabled. Iteration follows Feature
    declaration order, never insertion order, so two equal FeatureFlags
    always iterate identically.
    """

    enabled: frozenset[Feature] = field(default_factory=frozenset)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> FeatureFlags:
        """Build flags from feature names.

        Raises:
            ConfigurationError: If any name is unknown.
        """
        return cls(frozenset(Feature.parse(n) for n in names if n.strip()))

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> FeatureFlags:
        """Build flags from CARGO_FEATURE_<NAME> variables.

        Cargo also announces features that do not concern this build
        (e.g. "default"), so unknown CARGO_FEATURE_ variables are ignored
        here rather than rejected.
        """
        enabled = frozenset(f for f in Feature if f.env_name in environ)
        return cls(enabled)

    def __contains__(self, feature: object) -> bool:
        return feature in self.enabled

    def __iter__(self) -> Iterator[Feature]:
        return (f for f in Feature if f in self.enabled)

    def __len__(self) -> int:
        return len(self.enabled)

    def is_enabled(self, feature: Feature) -> bool:
        return feature in self.enabled

    def with_features(self, *features: Feature) -> FeatureFlags:
        """Return a copy with the given features also enabled."""
        return FeatureFlags(self.enabled | frozenset(features))

    def without_features(self, *features: Feature) -> FeatureFlags:
        """Return a copy with the given features disabled."""
        return FeatureFlags(self.enabled - frozenset(features))

    def names(self) -> list[str]:
        return [f.value for f in self]

    def __repr__(self) -> str:
        return f"FeatureFlags({self.names()!r})"
