# SPDX-License-Identifier: MIT
"""Binding generation backends."""

from imgui_build.bindings.backend import (
    BINDINGS_FILENAME,
    BindingBackend,
    BindingOptions,
    binding_headers,
)
from imgui_build.bindings.bindgen import BindgenBackend

__all__ = [
    "BINDINGS_FILENAME",
    "BindingBackend",
    "BindingOptions",
    "BindgenBackend",
    "binding_headers",
]
