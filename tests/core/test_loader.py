"""Tests for unit evaluation and export extraction."""

import asyncio
import sys
import threading
from collections.abc import Mapping
from types import MappingProxyType

import pytest

from handlershim.core.loader import FileEvaluator, LoadedModule, extract_handler, load_unit
from handlershim.core.paths import register_search_path
from handlershim.errors import LoadError, MissingExportError, MissingExportWarning
from handlershim.testing import (
    dependent_unit,
    failing_unit,
    handler_unit,
    missing_export_unit,
    sibling_module,
    write_unit,
)


class TestFileEvaluator:
    """Test loading units from source files."""

    def test_loads_handler_export(self, tmp_path):
        path = write_unit(tmp_path, "card_handler.py", handler_unit('"card-get"'))

        result = asyncio.run(load_unit(path))

        assert isinstance(result, LoadedModule)
        assert result.name == "card_handler"
        assert result.path == str(path)
        assert result.has("handler")
        assert result.get("handler") == "card-get"
        assert sys.modules["card_handler"] is result.namespace

    def test_custom_module_name(self, tmp_path):
        path = write_unit(tmp_path, "card_handler.py", handler_unit())

        result = asyncio.run(load_unit(path, FileEvaluator(module_name="cards.get")))

        assert result.name == "cards.get"
        assert "cards.get" in sys.modules

    def test_missing_file_raises_load_error(self, tmp_path):
        path = tmp_path / "absent.py"

        with pytest.raises(LoadError) as excinfo:
            asyncio.run(load_unit(path))

        assert excinfo.value.path == str(path)
        assert isinstance(excinfo.value.__cause__, FileNotFoundError)
        assert "absent" not in sys.modules

    def test_syntax_error_raises_load_error(self, tmp_path):
        path = write_unit(tmp_path, "broken.py", "def handler(:\n")

        with pytest.raises(LoadError) as excinfo:
            asyncio.run(load_unit(path))

        assert isinstance(excinfo.value.__cause__, SyntaxError)
        assert "broken" not in sys.modules

    def test_runtime_error_raises_load_error(self, tmp_path):
        path = write_unit(tmp_path, "exploding.py", failing_unit("no database"))

        with pytest.raises(LoadError) as excinfo:
            asyncio.run(load_unit(path))

        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert "no database" in str(excinfo.value)
        assert "exploding" not in sys.modules

    def test_failed_reload_restores_previous_module(self, tmp_path):
        good = write_unit(tmp_path / "a", "card_handler.py", handler_unit())
        bad = write_unit(tmp_path / "b", "card_handler.py", failing_unit())

        first = asyncio.run(load_unit(good))
        with pytest.raises(LoadError):
            asyncio.run(load_unit(bad))

        assert sys.modules["card_handler"] is first.namespace

    def test_existing_module_is_not_replaced(self, tmp_path, monkeypatch):
        existing = type(sys)("card_shadow")
        monkeypatch.setitem(sys.modules, "card_shadow", existing)
        path = write_unit(tmp_path, "card_shadow.py", handler_unit('"shadow"'))

        result = asyncio.run(load_unit(path))

        assert result.get("handler") == "shadow"
        assert result.namespace is not existing
        assert sys.modules["card_shadow"] is existing

    def test_runs_on_calling_thread(self, tmp_path):
        path = write_unit(
            tmp_path,
            "card_thread.py",
            """
            import threading

            handler = threading.get_ident()
            """,
        )

        result = asyncio.run(load_unit(path))

        assert result.get("handler") == threading.get_ident()

    def test_relative_path_is_rejected(self):
        with pytest.raises(ValueError):
            asyncio.run(load_unit("src/card_handler.py"))


class TestSearchPath:
    """Units importing sibling files need their directory to be importable."""

    def _write(self, tmp_path):
        src = tmp_path / "src"
        write_unit(src, "card_format.py", sibling_module())
        return write_unit(src, "card_handler.py", dependent_unit("card_format"))

    def test_sibling_import_fails_without_search_path(self, tmp_path):
        path = self._write(tmp_path)

        with pytest.raises(LoadError) as excinfo:
            asyncio.run(load_unit(path))

        assert isinstance(excinfo.value.__cause__, ModuleNotFoundError)

    def test_sibling_import_after_registration(self, tmp_path):
        path = self._write(tmp_path)
        register_search_path(tmp_path, "src")

        result = asyncio.run(load_unit(path))
        handler = result.get("handler")

        assert handler({"id": "c-1"}, None) == {"id": "c-1", "kind": "card"}

    def test_sibling_import_with_explicit_search_path(self, tmp_path):
        path = self._write(tmp_path)
        src = str((tmp_path / "src").resolve())

        result = asyncio.run(load_unit(path, search_paths=[tmp_path / "src"]))

        assert result.has("handler")
        assert src not in sys.path


class TestLoadedModule:
    def test_mapping_namespace(self):
        result = LoadedModule("unit", {"handler": None, "helper": 1, "_private": 2})

        assert result.has("handler")
        assert result.get("handler", default="fallback") is None
        assert not result.has("main")
        assert result.get("main", default="fallback") == "fallback"
        assert result.exports() == ["handler", "helper"]

    def test_read_only_mapping_namespace(self):
        result = LoadedModule("unit", MappingProxyType({"handler": 1, "_private": 2}))

        assert result.has("handler")
        assert result.get("handler") == 1
        assert result.exports() == ["handler"]
        assert extract_handler(result, on_missing="error") == 1

    def test_custom_mapping_namespace(self):
        class Exports(Mapping):
            def __init__(self, **values):
                self._values = values

            def __getitem__(self, key):
                return self._values[key]

            def __iter__(self):
                return iter(self._values)

            def __len__(self):
                return len(self._values)

        result = LoadedModule("unit", Exports(handler="card-get"))

        assert extract_handler(result, on_missing="error") == "card-get"
        assert not result.has("main")

    def test_module_namespace_honours_all(self, tmp_path):
        path = write_unit(
            tmp_path,
            "exported.py",
            """
            __all__ = ["handler"]
            handler = 1
            helper = 2
            """,
        )

        result = asyncio.run(load_unit(path))

        assert result.exports() == ["handler"]


class TestExtractHandler:
    def test_present_export(self):
        result = LoadedModule("unit", {"handler": print})
        assert extract_handler(result) is print

    def test_export_bound_to_none_is_not_missing(self):
        result = LoadedModule("unit", {"handler": None})
        assert extract_handler(result, on_missing="error") is None

    def test_missing_export_is_ignored_by_default(self, recwarn):
        result = LoadedModule("unit", {})

        assert extract_handler(result) is None
        assert len(recwarn) == 0

    def test_missing_export_warns(self):
        result = LoadedModule("unit", {}, path="/srv/src/unit.py")

        with pytest.warns(MissingExportWarning, match="/srv/src/unit.py"):
            assert extract_handler(result, on_missing="warn") is None

    def test_missing_export_errors(self):
        result = LoadedModule("unit", {})

        with pytest.raises(MissingExportError) as excinfo:
            extract_handler(result, on_missing="error")

        assert excinfo.value.name == "handler"
        assert isinstance(excinfo.value, LookupError)

    def test_other_export_name(self):
        result = LoadedModule("unit", {"main": 1})
        assert extract_handler(result, "main") == 1

    def test_raw_module_is_accepted(self, tmp_path):
        path = write_unit(tmp_path, "no_handler.py", missing_export_unit())
        module = asyncio.run(load_unit(path)).namespace

        assert extract_handler(module, "main") is module.main
        assert extract_handler(module) is None

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            extract_handler(LoadedModule("unit", {}), on_missing="explode")
