"""Scheme registry for handler providers.

Targets are written as ``scheme:location``. A target whose prefix is not a
registered scheme (including plain paths and Windows drive letters) is
handled by the ``file`` provider.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

DEFAULT_SCHEME = "file"

# Global registry state
_providers: Dict[str, Dict[str, Any]] = {}  # scheme -> {factory, description}
_scheme_aliases: Dict[str, str] = {}  # alias -> canonical scheme


def _normalize_scheme(scheme: str) -> str:
    """Lower-case a scheme, drop a trailing colon and resolve aliases.

    >>> _normalize_scheme("FILE:")
    'file'
    >>> _normalize_scheme(" Module ")
    'module'
    """
    normalized = scheme.strip().rstrip(":").lower()
    return _scheme_aliases.get(normalized, normalized)


def _split_target(target: str) -> Tuple[Optional[str], str]:
    """Split a target into ``(scheme, location)``.

    >>> _split_target("module:cards.get")
    ('module', 'cards.get')
    >>> _split_target("src/card_get.py")
    (None, 'src/card_get.py')
    >>> _split_target("C:/units/card_get.py")
    (None, 'C:/units/card_get.py')
    """
    if ":" in target:
        head, rest = target.split(":", 1)
        scheme = _normalize_scheme(head)
        if scheme in _providers:
            return scheme, rest
    return None, target


def provider(
    scheme: str,
    aliases: Optional[List[str]] = None,
    description: str = "",
):
    """Decorator for registering provider factories.

    Usage:
        @provider("file")
        class FileProvider(HandlerProvider):
            ...

        @provider("module", aliases=["py"])
        class ModuleProvider(HandlerProvider):
            ...

    Args:
        scheme: Canonical scheme name
        aliases: Other scheme names resolving to the same factory
        description: One-line description shown by ``handlershim --list-schemes``
    """

    def decorator(factory: Callable) -> Callable:
        canonical = scheme.strip().rstrip(":").lower()
        if not canonical:
            raise ValueError("A provider scheme must not be empty")

        _providers[canonical] = {
            "factory": factory,
            "description": description or (factory.__doc__ or "").strip().split("\n")[0],
        }
        for alias in aliases or []:
            _scheme_aliases[alias.lower()] = canonical

        if isinstance(factory, type):
            factory.scheme = canonical
        return factory

    return decorator


def resolve_provider(
    target: str,
    base_dir=None,
    search_paths: Sequence = (),
    evaluator=None,
):
    """Build the provider responsible for ``target``.

    Raises:
        LookupError: If the default ``file`` provider is not registered.
    """
    scheme, location = _split_target(target)
    scheme = scheme or DEFAULT_SCHEME
    if scheme not in _providers:
        raise LookupError(f"No provider registered for scheme: {scheme}")

    factory = _providers[scheme]["factory"]
    return factory(
        location,
        base_dir=base_dir,
        search_paths=search_paths,
        evaluator=evaluator,
    )


def registered_schemes() -> Dict[str, str]:
    """Map each registered scheme to its description."""
    return {name: info["description"] for name, info in sorted(_providers.items())}
