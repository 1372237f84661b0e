# SPDX-License-Identifier: MIT
"""Compile units and the resolved file groups.

A CompileUnit is one file taking part in the native build and/or binding
generation. FileGroups holds the three ordered groups the resolver
produces; both downstream invokers read the same FileGroups value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class UnitKind(Enum):
    SOURCE = "source"
    HEADER = "header"


@dataclass(frozen=True)
class CompileUnit:
    """A single source or header file.

    Attributes:
        path: Path to the file.
        kind: Whether the file is compiled or included.
        requires_binding: For headers, whether the header is parsed by
            the binding generator. Always False for sources.
    """

    path: Path
    kind: UnitKind
    requires_binding: bool = False

    def __post_init__(self) -> None:
        if self.kind is UnitKind.SOURCE and self.requires_binding:
            raise ValueError(f"source unit cannot require bindings: {self.path}")

    @classmethod
    def source(cls, path: Path | str) -> CompileUnit:
        return cls(Path(path), UnitKind.SOURCE)

    @classmethod
    def header(cls, path: Path | str, *, requires_binding: bool) -> CompileUnit:
        return cls(Path(path), UnitKind.HEADER, requires_binding)

    @property
    def is_source(self) -> bool:
        return self.kind is UnitKind.SOURCE

    @property
    def is_bindable(self) -> bool:
        return self.kind is UnitKind.HEADER and self.requires_binding

    def __str__(self) -> str:
        if self.is_source:
            return f"source {self.path}"
        tag = "bindgen" if self.requires_binding else "no-bindgen"
        return f"header[{tag}] {self.path}"


@dataclass(frozen=True)
class FileGroups:
    """The resolved core, backend and other compile units.

    The concatenation order (core, backend, other) is the order declared
    to the rebuild-trigger mechanism and handed to both invokers.
    """

    core: tuple[CompileUnit, ...] = ()
    backend: tuple[CompileUnit, ...] = ()
    other: tuple[CompileUnit, ...] = ()

    @property
    def all_files(self) -> tuple[CompileUnit, ...]:
        return self.core + self.backend + self.other

    def sources(self) -> list[CompileUnit]:
        """Source units of all_files, in order."""
        return [u for u in self.all_files if u.is_source]

    def bindable_headers(self) -> list[CompileUnit]:
        """Headers of all_files that must be parsed for bindings, in order."""
        return [u for u in self.all_files if u.is_bindable]

    def __len__(self) -> int:
        return len(self.core) + len(self.backend) + len(self.other)
