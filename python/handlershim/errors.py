"""Exception types raised by the loader shim."""

from typing import Optional


class ShimError(Exception):
    """Base class for shim errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ResolutionError(ShimError):
    """The shim could not determine where its own entry point lives."""


class LoadError(ShimError):
    """A source unit could not be read or evaluated.

    The original exception is always chained as ``__cause__``.
    """

    def __init__(self, path, message: Optional[str] = None, details: Optional[dict] = None):
        self.path = str(path)
        super().__init__(message or f"Failed to load unit: {self.path}", details)


class MissingExportError(ShimError, LookupError):
    """The loaded unit does not export the requested name."""

    def __init__(self, name: str, unit: Optional[str] = None):
        self.name = name
        self.unit = unit
        where = f" in {unit}" if unit else ""
        super().__init__(f"Export '{name}' not found{where}")


class MissingExportWarning(UserWarning):
    """Emitted instead of MissingExportError when the policy is ``warn``."""
