# SPDX-License-Identifier: MIT
"""bindgen command-line backend.

bindgen takes a single input header, so an umbrella header including every
bindable header is written next to the output first. Each header is then
allow-listed by path so only declarations from those files are emitted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from imgui_build.bindings.backend import BindingOptions
from imgui_build.core.errors import BindingGenerationError
from imgui_build.util.process import failure_output, run_command

logger = logging.getLogger(__name__)

UMBRELLA_FILENAME = "imgui_build_bindings.hpp"


def write_umbrella_header(headers: Sequence[Path], path: Path) -> Path:
    """Write a header that includes each of `headers` in order."""
    lines = ["// Generated by imgui-build. Do not edit.", "#pragma once"]
    lines.extend(f'#include "{Path(h).absolute().as_posix()}"' for h in headers)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")
    return path


class BindgenBackend:
    """Generates Rust bindings by running the bindgen CLI.

    Attributes:
        cmd: bindgen executable.
    """

    def __init__(self, cmd: str = "bindgen") -> None:
        self.cmd = cmd

    def command(
        self,
        umbrella: Path,
        headers: Sequence[Path],
        options: BindingOptions,
        output: Path,
    ) -> list[str]:
        """Assemble the bindgen command line."""
        cmd = [self.cmd, str(umbrella), "--output", str(output)]
        for header in headers:
            cmd.extend(["--allowlist-file", re.escape(str(Path(header).absolute()))])
        if options.enable_cxx_namespaces:
            cmd.append("--enable-cxx-namespaces")
        if not options.prepend_enum_name:
            cmd.append("--no-prepend-enum-name")
        for pattern in options.bitfield_enum_patterns:
            cmd.extend(["--bitfield-enum", pattern])
        for pattern in options.newtype_enum_patterns:
            cmd.extend(["--newtype-enum", pattern])
        cmd.extend(["--rust-target", options.rust_target])
        cmd.append("--")
        cmd.extend(options.clang_args())
        return cmd

    def generate(
        self,
        headers: Sequence[Path],
        options: BindingOptions,
        output: Path,
    ) -> Path:
        if not headers:
            raise BindingGenerationError("no headers to generate bindings for")

        for header in headers:
            logger.debug("Bindgen file %s", header)

        umbrella_path = output.parent / UMBRELLA_FILENAME
        try:
            umbrella = write_umbrella_header(headers, umbrella_path)
        except OSError as e:
            raise BindingGenerationError(f"could not write {umbrella_path}: {e}") from e
        cmd = self.command(umbrella, headers, options, output)

        try:
            result = run_command(cmd)
        except OSError as e:
            raise BindingGenerationError(f"could not run {self.cmd}: {e}") from e

        if result.returncode != 0:
            raise BindingGenerationError(
                f"Failed to generate bindings: {failure_output(result)}"
            )
        if not output.is_file():
            raise BindingGenerationError(f"Couldn't write bindings to {output}")

        logger.debug("Bindings file path %s", output)
        return output
