"""Flat key/value configuration for the loader shim.

Values set with :func:`set` take precedence over ``HANDLERSHIM_*`` environment
variables, which take precedence over :data:`DEFAULTS`. Only explicitly set
values are visible through :func:`get`; use :func:`resolve` for the effective
value.
"""

import builtins
import os
from typing import Any, Dict, List, Optional

ENV_PREFIX = "HANDLERSHIM_"

DEFAULTS: Dict[str, Any] = {
    "shim.search_path": "src",
    "shim.export": "handler",
    "shim.on_missing": "ignore",
    "shim.diagnostic_tag": "HANDLER",
}

_store: Dict[str, Any] = {}


def env_name(key: str) -> str:
    """Environment variable consulted for ``key``.

    >>> env_name("shim.on_missing")
    'HANDLERSHIM_SHIM_ON_MISSING'
    """
    return ENV_PREFIX + key.replace(".", "_").replace("-", "_").upper()


def get(key):
    return _store.get(key)


def set(key, value):
    _store[key] = value


def get_str(key) -> Optional[str]:
    if key not in _store:
        return None
    return str(_store[key])


def contains_key(key) -> bool:
    return key in _store


def remove(key):
    return _store.pop(key, None)


def keys() -> List[str]:
    return list(_store)


def clear():
    _store.clear()


def len() -> int:
    return builtins.len(_store)


def is_empty() -> bool:
    return not _store


def resolve(key, default=None):
    """Return the effective value for ``key``.

    Lookup order: explicitly set value, environment variable, built-in
    default, then ``default``.
    """
    if key in _store:
        return _store[key]
    env_value = os.environ.get(env_name(key))
    if env_value is not None:
        return env_value
    return DEFAULTS.get(key, default)
