# SPDX-License-Identifier: MIT
"""Flag handling utilities.

Compiler flags reach the native build from several places: the fixed
options, pkg-config output and the user's CXXFLAGS. Flags such as
-isystem or -include take their argument as a separate token, so
de-duplication must treat the flag and its argument as one unit.

The set of such flags is toolchain-specific and is passed in by the
caller (see SEPARATED_ARG_FLAGS on the toolchain classes).
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable


def _tokens(
    flags: list[str], separated_arg_flags: frozenset[str]
) -> Iterable[tuple[str, ...]]:
    """Yield flags grouped as (flag,) or (flag, argument)."""
    i = 0
    while i < len(flags):
        flag = flags[i]
        if flag in separated_arg_flags and i + 1 < len(flags):
            yield (flag, flags[i + 1])
            i += 2
        else:
            yield (flag,)
            i += 1


def deduplicate_flags(
    flags: list[str], separated_arg_flags: frozenset[str] = frozenset()
) -> list[str]:
    """De-duplicate flags, keeping the first occurrence.

    Examples:
        >>> deduplicate_flags(["-O2", "-Wall", "-O2"])
        ['-O2', '-Wall']

        >>> deduplicate_flags(
        ...     ["-isystem", "/a", "-isystem", "/b", "-isystem", "/a"],
        ...     frozenset(["-isystem"]),
        ... )
        ['-isystem', '/a', '-isystem', '/b']
    """
    result: list[str] = []
    seen: set[tuple[str, ...]] = set()
    for token in _tokens(flags, separated_arg_flags):
        if token not in seen:
            seen.add(token)
            result.extend(token)
    return result


def split_flags(value: str | None) -> list[str]:
    """Split a flag string such as the CXXFLAGS variable into tokens.

    Quoted arguments are kept together:
        >>> split_flags('-DNAME="a b" -O2')
        ['-DNAME=a b', '-O2']
    """
    if not value:
        return []
    return shlex.split(value)


def unique_paths(paths: Iterable[object]) -> list[str]:
    """Stringify paths and drop repeats, preserving order."""
    result: list[str] = []
    for path in paths:
        text = str(path)
        if text not in result:
            result.append(text)
    return result
