# SPDX-License-Identifier: MIT
"""Compile contexts for toolchain-specific command formatting.

A CompileContext holds the include directories, preprocessor definitions
and extra flags for one native build. The prefixes (-I/-D versus /I//D)
are toolchain-specific, so formatting lives here rather than in the
toolchains' command assembly.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CompileContext:
    """Context for C++ compilation.

    Attributes:
        includes: Include directories (without -I prefix).
        defines: Preprocessor definitions as 'NAME' or 'NAME=VALUE'
            (without -D prefix).
        flags: Additional compiler flags.
        include_prefix: Prefix for include directories (default: "-I").
        define_prefix: Prefix for preprocessor definitions (default: "-D").
    """

    includes: list[str] = field(default_factory=list)
    defines: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)

    include_prefix: str = "-I"
    define_prefix: str = "-D"

    def get_variables(self) -> dict[str, list[str]]:
        """Return the formatted token lists.

        Keys:
        - includes: Include flags (e.g., ["-I/path1", "-I/path2"])
        - defines: Define flags (e.g., ["-DFOO", "-DBAR=1"])
        - extra_flags: Additional compiler flags

        Empty groups are omitted.
        """
        result: dict[str, list[str]] = {}

        if self.includes:
            result["includes"] = [
                f"{self.include_prefix}{inc}" for inc in self.includes
            ]

        if self.defines:
            result["defines"] = [f"{self.define_prefix}{d}" for d in self.defines]

        if self.flags:
            result["extra_flags"] = list(self.flags)

        return result

    def command_tokens(self) -> list[str]:
        """Flatten the variables as extra flags, includes, defines."""
        variables = self.get_variables()
        return [
            *variables.get("extra_flags", []),
            *variables.get("includes", []),
            *variables.get("defines", []),
        ]


@dataclass
class MsvcCompileContext(CompileContext):
    """Context for MSVC compilation.

    Uses MSVC-specific prefixes for flags.
    """

    include_prefix: str = "/I"
    define_prefix: str = "/D"
