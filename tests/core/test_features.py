# SPDX-License-Identifier: MIT
"""Tests for imgui_build.core.features."""

from __future__ import annotations

import pytest

from imgui_build.core.errors import ConfigurationError
from imgui_build.core.features import Feature, FeatureFlags


class TestFeature:
    def test_env_name(self) -> None:
        assert Feature.SDL2_RENDERER.env_name == "CARGO_FEATURE_SDL2_RENDERER"
        assert Feature.WIN32.env_name == "CARGO_FEATURE_WIN32"

    @pytest.mark.parametrize("name", ["sdl2_renderer", "SDL2_RENDERER", "sdl2-renderer"])
    def test_parse_spellings(self, name: str) -> None:
        assert Feature.parse(name) is Feature.SDL2_RENDERER

    def test_parse_unknown(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown feature 'metal'"):
            Feature.parse("metal")


class TestFeatureFlags:
    def test_default_is_empty(self) -> None:
        flags = FeatureFlags()
        assert len(flags) == 0
        assert not flags.is_enabled(Feature.WIN32)

    def test_from_names(self) -> None:
        flags = FeatureFlags.from_names(["win32", "freetype", ""])
        assert Feature.WIN32 in flags
        assert Feature.FREETYPE in flags
        assert Feature.SDL2 not in flags

    def test_from_names_rejects_unknown(self) -> None:
        with pytest.raises(ConfigurationError):
            FeatureFlags.from_names(["win32", "nope"])

    def test_from_environ(self) -> None:
        flags = FeatureFlags.from_environ(
            {
                "CARGO_FEATURE_SDL2": "1",
                "CARGO_FEATURE_GL3": "1",
                "CARGO_FEATURE_DEFAULT": "1",
                "PATH": "/usr/bin",
            }
        )
        assert flags.names() == ["sdl2", "gl3"]

    def test_iteration_uses_declaration_order(self) -> None:
        flags = FeatureFlags.from_names(["vulkan", "win32", "gl2"])
        assert list(flags) == [Feature.WIN32, Feature.GL2, Feature.VULKAN]

    def test_equality_ignores_request_order(self) -> None:
        a = FeatureFlags.from_names(["sdl3", "dx11"])
        b = FeatureFlags.from_names(["dx11", "sdl3"])
        assert a == b
        assert hash(a) == hash(b)

    def test_with_and_without(self) -> None:
        flags = FeatureFlags().with_features(Feature.DX12, Feature.VULKAN)
        assert flags.names() == ["dx12", "vulkan"]
        assert flags.without_features(Feature.DX12).names() == ["vulkan"]

    def test_immutable(self) -> None:
        flags = FeatureFlags()
        with pytest.raises(AttributeError):
            flags.enabled = frozenset([Feature.WIN32])  # type: ignore[misc]
