"""
Core Loader

Overview
--------
This package holds the pieces the shim is assembled from.

Responsibilities:
1.  Resolve the base directory of an entry point.
2.  Manage module search paths, either process-wide or scoped.
3.  Evaluate a source unit and extract a named export from it.

Public Interfaces:
- `resolve_base_directory`, `register_search_path`, `search_path`
- `LoadedModule`, `Evaluator`, `FileEvaluator`, `load_unit`, `extract_handler`
"""

from .loader import (
    DEFAULT_EXPORT,
    ON_MISSING_POLICIES,
    Evaluator,
    FileEvaluator,
    LoadedModule,
    extract_handler,
    load_unit,
)
from .paths import register_search_path, resolve_base_directory, search_path

__all__ = [
    "DEFAULT_EXPORT",
    "ON_MISSING_POLICIES",
    "Evaluator",
    "FileEvaluator",
    "LoadedModule",
    "extract_handler",
    "load_unit",
    "register_search_path",
    "resolve_base_directory",
    "search_path",
]
