# SPDX-License-Identifier: MIT
"""Cargo build-script directives.

The host build reads `cargo:` lines from the orchestrator's stdout. They
declare rebuild triggers (every file the build depends on) and tell the
linker where the static library and its native dependencies live.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from imgui_build.core.target import TargetInfo, TargetOS
from imgui_build.core.units import FileGroups


def cpp_stdlib_for(target: TargetInfo) -> str | None:
    """C++ standard library a static C++ archive needs at link time."""
    if target.os is TargetOS.WINDOWS:
        return None
    if target.os is TargetOS.MACOS:
        return "c++"
    return "stdc++"


class CargoDirectives:
    """Writes cargo: directives to a stream.

    Every directive written is also kept in `emitted`, which makes the
    output easy to inspect in tests and dry runs.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.emitted: list[str] = []

    def emit(self, key: str, value: str) -> None:
        line = f"cargo:{key}={value}"
        self.emitted.append(line)
        stream = self._stream if self._stream is not None else sys.stdout
        print(line, file=stream)

    def rerun_if_changed(self, path: Path | str) -> None:
        self.emit("rerun-if-changed", str(Path(path).absolute()))

    def rerun_if_env_changed(self, name: str) -> None:
        self.emit("rerun-if-env-changed", name)

    def declare_rebuild_triggers(self, groups: FileGroups, wrapper: Path) -> list[Path]:
        """Declare every unit of all_files, then the wrapper unit.

        Returns:
            The absolute paths declared, in order.
        """
        paths = [Path(u.path).absolute() for u in groups.all_files]
        paths.append(Path(wrapper).absolute())
        for path in paths:
            self.rerun_if_changed(path)
        return paths

    def link_search(self, directory: Path | str, kind: str = "native") -> None:
        self.emit("rustc-link-search", f"{kind}={directory}")

    def link_lib(self, name: str, kind: str | None = None) -> None:
        self.emit("rustc-link-lib", f"{kind}={name}" if kind else name)

    def link_args(self, args: Iterable[str]) -> None:
        """Translate linker arguments from pkg-config into directives.

        Only -L<dir>, -l<lib> and -framework <name> are understood; other
        tokens are not representable as cargo directives and are skipped.
        """
        tokens = list(args)
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.startswith("-L") and len(token) > 2:
                self.link_search(token[2:])
            elif token.startswith("-l") and len(token) > 2:
                self.link_lib(token[2:])
            elif token == "-framework" and i + 1 < len(tokens):
                self.link_lib(tokens[i + 1], kind="framework")
                i += 1
            i += 1

    def static_library(self, library: Path, target: TargetInfo) -> None:
        """Announce a compiled static library and its C++ runtime."""
        self.link_search(library.parent)
        name = library.stem
        if name.startswith("lib") and library.suffix == ".a":
            name = name[3:]
        self.link_lib(name, kind="static")
        stdlib = cpp_stdlib_for(target)
        if stdlib:
            self.link_lib(stdlib)
