# SPDX-License-Identifier: MIT
"""The build pipeline.

One linear pass: resolve the file groups, declare rebuild triggers, probe
native dependencies, generate bindings, compile the static library. Every
step runs to completion before the next starts, and the first error stops
the run. Artifacts written by completed steps are left in place; a retry
overwrites them identically.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from imgui_build.bindings import (
    BINDINGS_FILENAME,
    BindgenBackend,
    BindingBackend,
    BindingOptions,
    binding_headers,
)
from imgui_build.configure.config import LIBRARY_NAME, BuildSettings, Configure
from imgui_build.configure.pkgconfig import DependencyInfo, DependencyProber
from imgui_build.core.directives import CargoDirectives
from imgui_build.core.errors import (
    ConfigurationError,
    ImguiBuildError,
    MissingSourceError,
    PipelineError,
)
from imgui_build.core.features import Feature
from imgui_build.core.resolver import resolve_file_groups
from imgui_build.core.units import FileGroups
from imgui_build.tools.toolchain import (
    NativeBuildBackend,
    compile_units_for,
    native_build_options,
)

logger = logging.getLogger(__name__)

# Variables whose change should re-run the build.
TOOL_VARIABLES = ("CXX", "AR", "CXXFLAGS", "BINDGEN", "PKG_CONFIG", "PKG_CONFIG_PATH")


class PipelineState(Enum):
    NOT_STARTED = "not started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class BuildResult:
    """What a successful run produced.

    Attributes:
        groups: The resolved file groups.
        dependencies: Probe results per dependency-requiring feature.
        bindings_path: The generated bindings file.
        library_path: The static library.
        rebuild_triggers: Absolute paths declared as rebuild triggers.
    """

    groups: FileGroups
    dependencies: dict[Feature, DependencyInfo] = field(default_factory=dict)
    bindings_path: Path | None = None
    library_path: Path | None = None
    rebuild_triggers: list[Path] = field(default_factory=list)


class Pipeline:
    """Drives resolution, probing, binding generation and compilation.

    The binding and native backends, the prober and the directive writer
    can be replaced; by default bindgen, pkg-config and the first
    available C++ toolchain are used.

    Example:
        settings = BuildSettings.from_environ()
        result = Pipeline(settings).run()
        print(result.library_path)
    """

    def __init__(
        self,
        settings: BuildSettings,
        *,
        binding_backend: BindingBackend | None = None,
        native_backend: NativeBuildBackend | None = None,
        prober: DependencyProber | None = None,
        directives: CargoDirectives | None = None,
        library_name: str = LIBRARY_NAME,
    ) -> None:
        self.settings = settings
        self.binding_backend = binding_backend or BindgenBackend(
            settings.get("BINDGEN") or "bindgen"
        )
        self._native_backend = native_backend
        self.prober = prober or DependencyProber(settings.get("PKG_CONFIG") or "pkg-config")
        self.directives = directives or CargoDirectives()
        self.library_name = library_name
        self._state = PipelineState.NOT_STARTED
        self._stage: str | None = None

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def stage(self) -> str | None:
        """The stage currently running, or the one that failed."""
        return self._stage

    @property
    def wrapper(self) -> Path:
        return self.settings.layout.wrapper

    def resolve(self) -> FileGroups:
        """Resolve the file groups without running anything."""
        settings = self.settings
        return resolve_file_groups(settings.features, settings.target, settings.layout)

    def binding_options(self) -> BindingOptions:
        return BindingOptions(include_dir=self.settings.library_root)

    def native_backend(self) -> NativeBuildBackend:
        if self._native_backend is None:
            # Imported here: toolchain discovery pulls in every toolchain.
            from imgui_build.toolchains import find_cxx_toolchain

            self._native_backend = find_cxx_toolchain(Configure(self.settings))
        return self._native_backend

    @contextmanager
    def _run_stage(self, name: str) -> Iterator[None]:
        self._stage = name
        logger.debug("Stage %s", name)
        try:
            yield
        except ImguiBuildError as e:
            self._state = PipelineState.FAILED
            raise PipelineError(name, e) from e
        except Exception:
            self._state = PipelineState.FAILED
            raise

    def run(self) -> BuildResult:
        """Run every stage once.

        Returns:
            The build result.

        Raises:
            PipelineError: Wrapping the first error, with the stage name.
        """
        if self._state is not PipelineState.NOT_STARTED:
            raise ImguiBuildError(f"pipeline cannot run again ({self._state.value})")
        self._state = PipelineState.RUNNING
        settings = self.settings
        logger.debug("imgui_path %s", settings.library_root)

        with self._run_stage("resolve"):
            groups = self.resolve()
            result = BuildResult(groups=groups)
            result.rebuild_triggers = self.directives.declare_rebuild_triggers(
                groups, self.wrapper
            )
            for name in TOOL_VARIABLES:
                self.directives.rerun_if_env_changed(name)

        with self._run_stage("probe"):
            result.dependencies = self.prober.probe(settings.features)
            for info in result.dependencies.values():
                self.directives.link_args(info.link_args)

        with self._run_stage("bindings"):
            headers = binding_headers(groups)
            for header in headers:
                if not header.is_file():
                    raise MissingSourceError(str(header))
            try:
                settings.out_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigurationError(
                    f"cannot create output directory {settings.out_dir}: {e}"
                ) from e
            result.bindings_path = self.binding_backend.generate(
                headers, self.binding_options(), settings.out_dir / BINDINGS_FILENAME
            )

        with self._run_stage("compile"):
            if not self.wrapper.is_file():
                raise MissingSourceError(str(self.wrapper))
            units = compile_units_for(groups, self.wrapper)
            options = native_build_options(
                settings, result.dependencies, self.library_name
            )
            result.library_path = self.native_backend().compile(units, options)
            self.directives.static_library(result.library_path, settings.target)

        self._state = PipelineState.SUCCEEDED
        self._stage = None
        return result
