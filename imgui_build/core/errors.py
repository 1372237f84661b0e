# SPDX-License-Identifier: MIT
"""Custom exceptions for imgui-build.

All imgui-build exceptions inherit from ImguiBuildError. Every error is
terminal: the pipeline never retries and never downgrades one to a
warning.
"""

from __future__ import annotations


class ImguiBuildError(Exception):
    """Base class for all imgui-build exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(ImguiBuildError):
    """Error while reading the build configuration.

    Raised when a required environment identifier is missing or
    unparseable, when an unknown feature is requested, or when the
    library tree does not look the way the resolver expects.
    """


class MissingVariableError(ConfigurationError):
    """A required environment variable is not set.

    Attributes:
        variable: The name of the missing variable.
    """

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"required variable not set: {variable}")


class MissingSourceError(ConfigurationError):
    """A compile unit that must exist on disk does not.

    Attributes:
        path: The path to the missing file.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"source file not found: {path}")


class ToolNotFoundError(ConfigurationError):
    """Required tool was not found.

    Attributes:
        tool: The name of the tool that was not found.
    """

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"tool not found: {tool}")


class DependencyProbeError(ImguiBuildError):
    """An enabled feature's native library could not be located.

    Attributes:
        library: The pkg-config name of the library.
    """

    def __init__(self, library: str, reason: str) -> None:
        self.library = library
        self.reason = reason
        super().__init__(f"failed to probe {library} library: {reason}")


class BindingGenerationError(ImguiBuildError):
    """The binding generator rejected a header or failed to run."""


class NativeCompileError(ImguiBuildError):
    """The native toolchain failed on a compile unit or the archive step."""


class PipelineError(ImguiBuildError):
    """A pipeline stage failed.

    Wraps the first error raised by a stage so the top-level report can
    name which stage failed and the underlying cause.

    Attributes:
        stage: Name of the stage that failed.
        cause: The original exception.
    """

    def __init__(self, stage: str, cause: ImguiBuildError) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} stage failed: {cause}")
