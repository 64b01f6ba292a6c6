"""The loader shim.

A shim resolves its base directory, makes ``base/<search_path>`` importable,
loads one unit, pulls a single export out of it, prints ``HANDLER <value>``
and re-exports the value. The steps always run in that order and the only
suspension point is the unit load.
"""

import asyncio
import enum
import inspect
import logging
import pathlib
import sys
from types import ModuleType
from typing import Any, Dict, MutableMapping, Optional, TextIO, Union

import handlershim.config as config
from handlershim.core import paths
from handlershim.core.loader import Evaluator, LoadedModule, extract_handler
from handlershim.providers import resolve_provider
from handlershim.tracing import span

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "src/handler.py"


class State(enum.Enum):
    START = "start"
    BASE_DIRECTORY_RESOLVED = "base_directory_resolved"
    SEARCH_PATH_REGISTERED = "search_path_registered"
    UNIT_LOADED = "unit_loaded"
    HANDLER_EXTRACTED = "handler_extracted"
    DIAGNOSTIC_EMITTED = "diagnostic_emitted"
    EXPORTED = "exported"
    FAILED = "failed"


def describe(value: Any) -> str:
    """Render ``value`` for the diagnostic line.

    Functions and classes are shown by qualified name so the output does not
    depend on memory addresses.

    >>> describe(None)
    'None'
    >>> describe(len)
    '<function builtins.len>'
    >>> describe({"status": 200})
    "{'status': 200}"
    """
    if value is None:
        return "None"
    if inspect.isclass(value):
        kind = "class"
    elif inspect.iscoroutinefunction(value):
        kind = "async function"
    elif inspect.isroutine(value):
        kind = "function"
    else:
        return repr(value)

    qualname = getattr(value, "__qualname__", None) or getattr(value, "__name__", "?")
    module = getattr(value, "__module__", None)
    return f"<{kind} {module}.{qualname}>" if module else f"<{kind} {qualname}>"


def emit_diagnostic(value: Any, stream: Optional[TextIO] = None, tag: Optional[str] = None) -> str:
    """Write ``<tag> <value>`` to ``stream`` (stdout by default)."""
    tag = tag or config.resolve("shim.diagnostic_tag")
    line = f"{tag} {describe(value)}"
    print(line, file=stream if stream is not None else sys.stdout, flush=True)
    return line


def export_handler(
    value: Any,
    namespace: Union[MutableMapping[str, Any], ModuleType],
    name: Optional[str] = None,
) -> None:
    """Publish ``value`` as ``name`` in a module or a ``globals()`` mapping."""
    name = name or config.resolve("shim.export")
    if isinstance(namespace, ModuleType):
        setattr(namespace, name, value)
    else:
        namespace[name] = value


class LoaderShim:
    """Load a unit relative to an entry point and expose one of its exports.

    Args:
        entry: The entry point file (usually ``__file__``), a module, or None
            for ``__main__``.
        unit: Target of the unit, a path relative to the base directory or a
            ``scheme:location`` string understood by the provider registry.
        search_path: Directory, relative to the base directory, made
            importable before the unit loads.
        export: Name of the export to extract and re-export.
        on_missing: What to do when the export is absent:
            ``ignore``, ``warn`` or ``error``.
        evaluator: Evaluator used by file targets.
        stream: Diagnostic stream, stdout when None.
        register_globally: Append the search path to ``sys.path`` for the rest
            of the process. When False it is only in effect during the load.
    """

    def __init__(
        self,
        entry=None,
        unit: str = DEFAULT_UNIT,
        *,
        search_path: Optional[str] = None,
        export: Optional[str] = None,
        on_missing: Optional[str] = None,
        diagnostic_tag: Optional[str] = None,
        evaluator: Optional[Evaluator] = None,
        stream: Optional[TextIO] = None,
        register_globally: bool = True,
    ):
        self.entry = entry
        self.unit = unit
        self.search_path = search_path if search_path is not None else config.resolve("shim.search_path")
        self.export = export or config.resolve("shim.export")
        self.on_missing = on_missing or config.resolve("shim.on_missing")
        self.diagnostic_tag = diagnostic_tag or config.resolve("shim.diagnostic_tag")
        self.evaluator = evaluator
        self.stream = stream
        self.register_globally = register_globally

        self.base_dir: Optional[pathlib.Path] = None
        self.search_dir: Optional[pathlib.Path] = None
        self.result: Optional[LoadedModule] = None
        self.exports: Dict[str, Any] = {}
        self._handler: Any = None
        self._state = State.START

    @property
    def state(self) -> State:
        return self._state

    @property
    def handler(self) -> Any:
        return self.exports.get(self.export)

    def _advance(self, state: State):
        logger.debug("Shim %s: %s -> %s", self.unit, self._state.value, state.value)
        self._state = state

    def resolve_base_directory(self) -> pathlib.Path:
        with span("handlershim.resolve_base_directory"):
            self.base_dir = paths.resolve_base_directory(self.entry)
        self._advance(State.BASE_DIRECTORY_RESOLVED)
        return self.base_dir

    def register_search_path(self) -> pathlib.Path:
        with span("handlershim.register_search_path", subpath=self.search_path):
            self.search_dir = pathlib.Path(self.base_dir, self.search_path).resolve()
            if self.register_globally:
                paths.register_search_path(self.base_dir, self.search_path)
        self._advance(State.SEARCH_PATH_REGISTERED)
        return self.search_dir

    async def load_unit(self) -> LoadedModule:
        with span("handlershim.load_unit", unit=self.unit) as s:
            unit_provider = resolve_provider(
                self.unit,
                base_dir=self.base_dir,
                search_paths=[self.search_dir],
                evaluator=self.evaluator,
            )
            self.result = await unit_provider.load()
            s.set_attribute("handlershim.module", self.result.name)
        self._advance(State.UNIT_LOADED)
        return self.result

    def extract_handler(self) -> Any:
        with span("handlershim.extract_handler", export=self.export):
            self._handler = extract_handler(self.result, self.export, self.on_missing)
        self._advance(State.HANDLER_EXTRACTED)
        return self._handler

    def emit_diagnostic(self) -> str:
        with span("handlershim.emit_diagnostic"):
            line = emit_diagnostic(self._handler, self.stream, self.diagnostic_tag)
        self._advance(State.DIAGNOSTIC_EMITTED)
        return line

    def export_handler(self, namespace=None) -> Any:
        with span("handlershim.export_handler", export=self.export):
            export_handler(self._handler, self.exports, self.export)
            if namespace is not None:
                export_handler(self._handler, namespace, self.export)
        self._advance(State.EXPORTED)
        return self._handler

    async def run(self, namespace=None) -> Any:
        """Run every step in order and return the exported value.

        Any exception moves the shim to ``State.FAILED`` and is re-raised
        unchanged.
        """
        if self._state is not State.START:
            raise RuntimeError(f"Shim already ran (state: {self._state.value})")

        try:
            with span("handlershim.run", unit=self.unit):
                self.resolve_base_directory()
                self.register_search_path()
                await self.load_unit()
                self.extract_handler()
                self.emit_diagnostic()
                return self.export_handler(namespace)
        except BaseException:
            self._advance(State.FAILED)
            raise


async def load_handler(entry=None, unit: str = DEFAULT_UNIT, *, namespace=None, **options) -> Any:
    """Run a :class:`LoaderShim` from inside an event loop."""
    shim = LoaderShim(entry, unit, **options)
    return await shim.run(namespace)


def bootstrap(entry=None, unit: str = DEFAULT_UNIT, *, namespace=None, **options) -> Any:
    """Run a :class:`LoaderShim` to completion and return the exported value.

    Meant for module level code; the import of the calling module does not
    finish before the unit has loaded::

        import handlershim

        handlershim.bootstrap(__file__, "src/card_get.py", namespace=globals())

    Must not be called while an event loop is running; use
    :func:`load_handler` there.
    """
    return asyncio.run(load_handler(entry, unit, namespace=namespace, **options))
