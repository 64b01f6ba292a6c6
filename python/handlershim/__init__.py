"""
Handlershim - Dynamic handler loading for Python entry points

Overview
--------
This is the top-level package. It serves as the main entry point for
scripts that expose a handler defined in a separately loaded unit.

Responsibilities:
1.  Export the shim (`LoaderShim`, `bootstrap`, `load_handler`).
2.  Export the individual steps so hosts can compose them differently.
3.  Export configuration, error types and tracing helpers.

Public Interfaces:
- Shim: `LoaderShim`, `State`, `bootstrap`, `load_handler`
- Steps: `resolve_base_directory`, `register_search_path`, `load_unit`,
  `extract_handler`, `emit_diagnostic`, `export_handler`
- Providers: `HandlerProvider`, `provider`, `resolve_provider`
- Errors: `ResolutionError`, `LoadError`, `MissingExportError`,
  `MissingExportWarning`
- Tracing: `span`
"""

import handlershim.config as config

VERSION = "0.1.0"

from handlershim.core import (
    FileEvaluator,
    LoadedModule,
    extract_handler,
    load_unit,
    register_search_path,
    resolve_base_directory,
    search_path,
)
from handlershim.errors import (
    LoadError,
    MissingExportError,
    MissingExportWarning,
    ResolutionError,
    ShimError,
)
from handlershim.providers import HandlerProvider, provider, resolve_provider
from handlershim.shim import (
    LoaderShim,
    State,
    bootstrap,
    describe,
    emit_diagnostic,
    export_handler,
    load_handler,
)
from handlershim.tracing import span

__all__ = [
    "VERSION",
    "config",
    "FileEvaluator",
    "LoadedModule",
    "extract_handler",
    "load_unit",
    "register_search_path",
    "resolve_base_directory",
    "search_path",
    "LoadError",
    "MissingExportError",
    "MissingExportWarning",
    "ResolutionError",
    "ShimError",
    "HandlerProvider",
    "provider",
    "resolve_provider",
    "LoaderShim",
    "State",
    "bootstrap",
    "describe",
    "emit_diagnostic",
    "export_handler",
    "load_handler",
    "span",
]
