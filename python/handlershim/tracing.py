"""Tracing helpers for the loader shim.

This module provides a small ``span`` wrapper around the OpenTelemetry API.
Without an SDK configured every span is a no-op, so the shim can be traced
in production and stay silent everywhere else.
"""

import inspect
import functools
from typing import Any, Callable, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

TRACER_NAME = "handlershim"


def get_tracer():
    return trace.get_tracer(TRACER_NAME)


def current_span():
    """Return the active recording span, or None when there is none."""
    s = trace.get_current_span()
    if not s.get_span_context().is_valid:
        return None
    return s


def _clean_attrs(attrs: dict) -> dict:
    # OpenTelemetry only accepts primitive attribute values
    cleaned = {}
    for key, value in attrs.items():
        if value is None:
            continue
        if isinstance(value, (str, bool, int, float)):
            cleaned[key] = value
        else:
            cleaned[key] = str(value)
    return cleaned


class SpanWrapper:
    """Context manager and decorator returned by :func:`span`."""

    def __init__(self, name: str, kind: Optional[trace.SpanKind], attrs: dict):
        self.name = name
        self.kind = kind or trace.SpanKind.INTERNAL
        self.attrs = _clean_attrs(attrs)
        self._cm = None

    def __call__(self, func: Callable) -> Callable:
        """This is @span("name") - used as decorator"""
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*wargs, **wkwargs):
                with SpanWrapper(self.name, self.kind, self.attrs):
                    return await func(*wargs, **wkwargs)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*wargs, **wkwargs):
            with SpanWrapper(self.name, self.kind, self.attrs):
                return func(*wargs, **wkwargs)

        return wrapper

    def __enter__(self):
        """This is with span("name") - used as context manager"""
        self._cm = get_tracer().start_as_current_span(
            self.name,
            kind=self.kind,
            attributes=self.attrs,
            record_exception=False,
            set_status_on_exception=False,
        )
        return self._cm.__enter__()

    def __exit__(self, exc_type, exc, tb):
        s = trace.get_current_span()
        if exc is not None:
            s.record_exception(exc)
            s.set_status(Status(StatusCode.ERROR, str(exc)))
        else:
            s.set_status(Status(StatusCode.OK))
        cm, self._cm = self._cm, None
        return cm.__exit__(exc_type, exc, tb)


def span(*args, **kwargs) -> Any:
    """Create a span context manager or decorator.

    This function can be used in three ways:

    1. As a context manager:
       ```python
       with span("handlershim.load_unit", path=str(path)):
           ...
       ```

    2. As a decorator with an explicit name:
       ```python
       @span("handlershim.emit_diagnostic")
       def emit(value):
           ...
       ```

    3. As a bare decorator, named after the function:
       ```python
       @span
       async def load():
           ...
       ```

    Args:
        *args: The span name, or the decorated callable for bare ``@span``
        **kwargs: ``kind`` selects the OpenTelemetry span kind; all other
            keyword arguments become span attributes

    Returns:
        A SpanWrapper, or the wrapped function for bare ``@span``
    """
    kind = kwargs.pop("kind", None)

    if len(args) == 1 and callable(args[0]) and not isinstance(args[0], str):
        func = args[0]
        return SpanWrapper(func.__qualname__, kind, kwargs)(func)

    if len(args) == 1 and isinstance(args[0], str):
        return SpanWrapper(args[0], kind, kwargs)

    if args:
        raise TypeError("span() requires a string name as the first argument")
    raise TypeError("span() requires at least one argument")


def add_event(name: str, *, attributes: Optional[dict] = None):
    """Add an event to the current active span.

    Raises:
        RuntimeError: If there is no active span in the current context.

    Example:
        ```python
        with span("operation"):
            add_event("unit.loaded", attributes={"path": "/srv/src/card_get.py"})
        ```
    """
    current = current_span()
    if current is None:
        raise RuntimeError("No active span in current context. Cannot add event.")

    current.add_event(name, attributes=_clean_attrs(attributes or {}))
