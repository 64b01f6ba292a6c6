"""Built-in handler providers.

- ``file:`` evaluates a Python source file through an evaluator.
- ``module:`` (alias ``py:``) imports a module by dotted name.
"""

import asyncio
import importlib
import logging
import pathlib

from handlershim.core.loader import LoadedModule, load_unit
from handlershim.core.paths import search_path
from handlershim.errors import LoadError
from handlershim.providers.base import HandlerProvider, _absolute_dirs
from handlershim.providers.registry import provider

logger = logging.getLogger(__name__)


@provider("file", description="Python source file, relative to the base directory")
class FileProvider(HandlerProvider):
    def __init__(self, location, *, base_dir=None, search_paths=(), evaluator=None):
        path = pathlib.Path(location)
        if not path.is_absolute():
            if base_dir is None:
                raise ValueError(f"Relative unit path {location!r} needs a base directory")
            path = pathlib.Path(base_dir, path)
        self.path = path.resolve()
        self.search_paths = _absolute_dirs(search_paths, base_dir)
        self.evaluator = evaluator

    @property
    def location(self) -> str:
        return str(self.path)

    async def load(self) -> LoadedModule:
        return await load_unit(self.path, self.evaluator, self.search_paths)


@provider("module", aliases=["py"], description="Importable module, by dotted name")
class ModuleProvider(HandlerProvider):
    """Import a regular module instead of evaluating a file.

    The search paths are only in effect while the import runs. The import
    happens on the event loop's thread.
    """

    def __init__(self, location, *, base_dir=None, search_paths=(), evaluator=None):
        name = location.strip()
        if not name:
            raise ValueError("A module target needs a module name")
        self.name = name
        self.search_paths = _absolute_dirs(search_paths, base_dir)

    @property
    def location(self) -> str:
        return self.name

    async def load(self) -> LoadedModule:
        with search_path(*self.search_paths):
            await asyncio.sleep(0)
            try:
                module = importlib.import_module(self.name)
            except Exception as exc:
                raise LoadError(
                    self.name, f"Failed to import module {self.name}: {type(exc).__name__}: {exc}"
                ) from exc

        logger.info("Imported unit module %s", self.name)
        return LoadedModule.from_module(module)
