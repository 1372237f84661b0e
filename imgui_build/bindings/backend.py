# SPDX-License-Identifier: MIT
"""Binding generator interface.

The pipeline only knows the BindingBackend protocol; BindgenBackend is the
real implementation and tests substitute fakes that record their inputs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from imgui_build.core.units import FileGroups

# Output file name inside the build output directory.
BINDINGS_FILENAME = "bindings.rs"


@dataclass(frozen=True)
class BindingOptions:
    """Fixed binding-generation configuration.

    Attributes:
        include_dir: The library root, passed as the include search path.
        language: Parse dialect.
        std: Language standard.
        defines: Preprocessor definitions. IMGUI_DISABLE_SSE removes the
            SSE inline-function path the generator cannot represent.
        enable_cxx_namespaces: Keep namespace-qualified names as modules.
        prepend_enum_name: Prefix enum variants with the enum name.
        bitfield_enum_patterns: Enums lowered to bitmask-flag types.
        newtype_enum_patterns: Enums lowered to non-extensible wrappers.
        rust_target: Most permissive target dialect.
    """

    include_dir: Path
    language: str = "c++"
    std: str = "c++20"
    defines: tuple[str, ...] = ("IMGUI_DISABLE_SSE",)
    enable_cxx_namespaces: bool = True
    prepend_enum_name: bool = False
    bitfield_enum_patterns: tuple[str, ...] = (".*Flags_",)
    newtype_enum_patterns: tuple[str, ...] = (".*",)
    rust_target: str = "nightly"

    def clang_args(self) -> list[str]:
        """Arguments handed to the C++ parser."""
        args = ["-I", str(self.include_dir), "-x", self.language, f"-std={self.std}"]
        for define in self.defines:
            args.extend(["-D", define])
        return args


@runtime_checkable
class BindingBackend(Protocol):
    """Produces one bindings artifact from a list of headers."""

    def generate(
        self,
        headers: Sequence[Path],
        options: BindingOptions,
        output: Path,
    ) -> Path:
        """Generate bindings for `headers` into `output`.

        Returns:
            The path of the written artifact.

        Raises:
            BindingGenerationError: If generation fails.
        """
        ...


def binding_headers(groups: FileGroups) -> list[Path]:
    """Paths of the headers that must be parsed, each exactly once."""
    seen: set[Path] = set()
    headers: list[Path] = []
    for unit in groups.bindable_headers():
        if unit.path not in seen:
            seen.add(unit.path)
            headers.append(unit.path)
    return headers
