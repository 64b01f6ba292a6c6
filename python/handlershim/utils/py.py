from collections.abc import Mapping
from typing import Any, Iterable, Union

MISSING = object()


def _get_attr(obj, key: Union[str, Iterable[str]], default: Any = None):
    """Get a value from a mapping or an object, trying multiple keys.

    Examples
    --------
    Single key on dict:

    >>> _get_attr({"handler": 1}, "handler")
    1

    Multiple keys on dict (first hit wins):

    >>> _get_attr({"main": 2}, ["handler", "main"])
    2

    Missing keys fall back to default:

    >>> _get_attr({"a": 1}, ["handler"], default=0)
    0

    A key bound to ``None`` is still a hit:

    >>> _get_attr({"handler": None}, "handler", default=0) is None
    True

    Any mapping, not only dict:

    >>> from types import MappingProxyType
    >>> _get_attr(MappingProxyType({"handler": 3}), "handler")
    3

    Attributes on a module-like object:

    >>> class Unit:
    ...     handler = 10
    >>> _get_attr(Unit(), "handler")
    10

    Parameters
    ----------
    obj : Any
        Source object or mapping.
    key : str | list[str]
        Single key/name or a list of candidates to try in order.
    default : Any, optional
        Fallback value if none of the keys are found.
    """
    keys = key if isinstance(key, (list, tuple)) else [key]

    for k in keys:
        if isinstance(obj, Mapping):
            if k in obj:
                return obj[k]
        else:
            if hasattr(obj, k):
                return getattr(obj, k)

    return default


def _has_attr(obj, key: str) -> bool:
    """Whether ``key`` is present on a mapping or object.

    >>> _has_attr({"handler": None}, "handler")
    True
    >>> _has_attr({}, "handler")
    False
    """
    return _get_attr(obj, key, default=MISSING) is not MISSING


def _public_names(obj) -> list:
    """Sorted public names of a mapping or module.

    Honours ``__all__`` when the object defines one.

    >>> _public_names({"handler": 1, "_private": 2, "b": 3})
    ['b', 'handler']
    """
    exported = _get_attr(obj, "__all__")
    if exported is not None:
        return sorted(exported)
    names = obj.keys() if isinstance(obj, Mapping) else vars(obj).keys()
    return sorted(n for n in names if not n.startswith("_"))
