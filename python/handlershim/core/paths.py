"""Base-directory resolution and module search path handling."""

import contextlib
import logging
import os
import pathlib
import sys
from types import ModuleType
from typing import Iterator, Optional, Union

from handlershim.errors import ResolutionError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _entry_file(entry) -> Optional[str]:
    if entry is None:
        main = sys.modules.get("__main__")
        return getattr(main, "__file__", None) if main is not None else None
    if isinstance(entry, ModuleType):
        return getattr(entry, "__file__", None)
    return os.fspath(entry)


def resolve_base_directory(entry: Union[PathLike, ModuleType, None] = None) -> pathlib.Path:
    """Return the absolute directory containing the entry point.

    Args:
        entry: A file path (usually ``__file__``), a directory, a module
            object, or None to use the ``__main__`` module of the running
            process.

    Raises:
        ResolutionError: If no file location can be determined, e.g. for an
            interactive interpreter or a module without ``__file__``.
    """
    filename = _entry_file(entry)
    if not filename:
        raise ResolutionError(
            f"Cannot determine the location of entry point {entry!r}",
            details={"entry": repr(entry)},
        )

    location = pathlib.Path(filename).resolve()
    base_dir = location if location.is_dir() else location.parent
    logger.debug("Resolved base directory %s from %s", base_dir, filename)
    return base_dir


def register_search_path(base_dir: PathLike, subpath: PathLike = "") -> None:
    """Append ``base_dir/subpath`` to ``sys.path`` for the rest of the process."""
    entry = str(pathlib.Path(base_dir, subpath).resolve())
    if entry in sys.path:
        return
    sys.path.append(entry)
    logger.debug("Registered search path %s", entry)


@contextlib.contextmanager
def search_path(*dirs: PathLike) -> Iterator[list]:
    """Temporarily put ``dirs`` at the front of ``sys.path``.

    Only the entries added here are removed on exit, so registrations made
    by the loaded code itself survive.
    """
    added = []
    for d in reversed(dirs):
        entry = str(pathlib.Path(d).resolve())
        if entry in sys.path:
            continue
        sys.path.insert(0, entry)
        added.append(entry)
    try:
        yield list(reversed(added))
    finally:
        for entry in added:
            try:
                sys.path.remove(entry)
            except ValueError:
                pass
