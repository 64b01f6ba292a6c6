"""
Handler Providers

Overview
--------
This package maps unit targets such as ``src/card_get.py`` or
``module:cards.get`` to objects that know how to load them.

Responsibilities:
1.  Registry of provider factories via `@provider`.
2.  Target resolution (`resolve_provider`).

Public Interfaces:
- `HandlerProvider`: Base class for providers.
- `provider`: Decorator registering a provider under a scheme.
- `resolve_provider`: Build the provider for a target string.
- `registered_schemes`: Known schemes and their descriptions.
"""

# Import builtin to trigger provider registration via decorators
import handlershim.providers.builtin  # noqa: F401

from handlershim.providers.base import HandlerProvider
from handlershim.providers.builtin import FileProvider, ModuleProvider
from handlershim.providers.registry import (
    provider,
    registered_schemes,
    resolve_provider,
)

__all__ = [
    "FileProvider",
    "HandlerProvider",
    "ModuleProvider",
    "provider",
    "registered_schemes",
    "resolve_provider",
]
