"""Evaluation of source units and extraction of their exports."""

import asyncio
import importlib.machinery
import importlib.util
import logging
import pathlib
import sys
import warnings
from dataclasses import dataclass
from types import ModuleType
from typing import Any, List, Optional, Protocol, Sequence

from handlershim.core.paths import PathLike, search_path
from handlershim.errors import LoadError, MissingExportError, MissingExportWarning
from handlershim.utils.py import _get_attr, _has_attr, _public_names

logger = logging.getLogger(__name__)

DEFAULT_EXPORT = "handler"

IGNORE = "ignore"
WARN = "warn"
ERROR = "error"
ON_MISSING_POLICIES = (IGNORE, WARN, ERROR)


@dataclass(frozen=True)
class LoadedModule:
    """Result of evaluating one source unit.

    ``namespace`` is the evaluated module object, or any mapping of export
    name to value produced by a custom evaluator.
    """

    name: str
    namespace: Any
    path: Optional[str] = None

    @classmethod
    def from_module(cls, module: ModuleType) -> "LoadedModule":
        return cls(
            name=module.__name__,
            namespace=module,
            path=getattr(module, "__file__", None),
        )

    def has(self, export: str) -> bool:
        return _has_attr(self.namespace, export)

    def get(self, export: str, default: Any = None) -> Any:
        return _get_attr(self.namespace, export, default=default)

    def exports(self) -> List[str]:
        return _public_names(self.namespace)


class Evaluator(Protocol):
    """Anything that can turn a file path into a :class:`LoadedModule`."""

    async def evaluate(
        self, path: pathlib.Path, search_paths: Sequence[PathLike] = ()
    ) -> LoadedModule:
        ...


class FileEvaluator:
    """Execute a Python source file as a fresh module.

    The module is registered in ``sys.modules`` under ``module_name`` (the
    file stem by default) while it executes, so dataclasses, pickling and
    relative imports inside the unit behave as they do for regular imports.
    A module of the same name loaded from another file is put back once the
    unit has run; the unit is then only reachable through the result.

    The unit executes on the event loop's thread, like a plain import, so it
    may import the package that is loading it or install signal handlers.
    """

    def __init__(self, module_name: Optional[str] = None):
        self.module_name = module_name

    async def evaluate(
        self, path: pathlib.Path, search_paths: Sequence[PathLike] = ()
    ) -> LoadedModule:
        with search_path(*search_paths):
            await asyncio.sleep(0)
            module = self._execute(pathlib.Path(path))
        return LoadedModule.from_module(module)

    def _execute(self, path: pathlib.Path) -> ModuleType:
        name = self.module_name or path.stem
        loader = importlib.machinery.SourceFileLoader(name, str(path))
        spec = importlib.util.spec_from_file_location(name, str(path), loader=loader)
        if spec is None:
            raise LoadError(path, f"No module spec for {path}")

        module = importlib.util.module_from_spec(spec)
        previous = sys.modules.get(name)
        sys.modules[name] = module
        try:
            loader.exec_module(module)
        except Exception as exc:
            _restore_module(name, previous)
            raise LoadError(
                path,
                f"Failed to load unit {path}: {type(exc).__name__}: {exc}",
                details={"module": name},
            ) from exc

        if previous is not None and getattr(previous, "__file__", None) != module.__file__:
            logger.warning(
                "Unit %s shares the module name %s with %r, keeping the existing module",
                path,
                name,
                previous,
            )
            _restore_module(name, previous)

        logger.info("Loaded unit %s as module %s", path, name)
        return module


def _restore_module(name: str, previous: Optional[ModuleType]) -> None:
    if previous is None:
        sys.modules.pop(name, None)
    else:
        sys.modules[name] = previous


async def load_unit(
    path: PathLike,
    evaluator: Optional[Evaluator] = None,
    search_paths: Sequence[PathLike] = (),
) -> LoadedModule:
    """Evaluate the unit at ``path`` and return its result.

    Errors raised by the evaluator (``LoadError`` for the default one) are
    propagated unchanged.
    """
    path = pathlib.Path(path)
    if not path.is_absolute():
        raise ValueError(f"load_unit() requires an absolute path, got {path}")

    if evaluator is None:
        evaluator = FileEvaluator()
    return await evaluator.evaluate(path, search_paths)


def extract_handler(
    result: LoadedModule, name: str = DEFAULT_EXPORT, on_missing: str = IGNORE
) -> Any:
    """Read export ``name`` from a loaded unit.

    A missing export is handled according to ``on_missing``:

    - ``ignore``: return None
    - ``warn``: emit :class:`MissingExportWarning` and return None
    - ``error``: raise :class:`MissingExportError`

    >>> extract_handler(LoadedModule("unit", {"handler": len}))
    <built-in function len>
    >>> extract_handler(LoadedModule("unit", {})) is None
    True
    """
    if on_missing not in ON_MISSING_POLICIES:
        raise ValueError(
            f"Invalid on_missing policy {on_missing!r}, "
            f"expected one of {', '.join(ON_MISSING_POLICIES)}"
        )

    if not isinstance(result, LoadedModule):
        result = LoadedModule(getattr(result, "__name__", "<unit>"), result)

    if result.has(name):
        return result.get(name)

    if on_missing == ERROR:
        raise MissingExportError(name, result.path or result.name)
    if on_missing == WARN:
        warnings.warn(
            f"Unit {result.path or result.name} does not export '{name}'",
            MissingExportWarning,
            stacklevel=2,
        )
    logger.debug("Unit %s has no export %r", result.name, name)
    return None
