import os
import sys

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

import handlershim.config

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PYTHON_DIR = os.path.join(PROJECT_ROOT, "python")
EXAMPLES_DIR = os.path.join(PROJECT_ROOT, "examples")

_exporter = InMemorySpanExporter()


@pytest.fixture(scope="session", autouse=True)
def tracer_provider():
    """Route handlershim spans to an in-memory exporter for the whole session."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(_exporter))
    trace.set_tracer_provider(provider)
    yield provider
    provider.shutdown()


@pytest.fixture
def span_exporter():
    _exporter.clear()
    yield _exporter
    _exporter.clear()


@pytest.fixture(autouse=True)
def isolated_imports(tmp_path_factory):
    """Restore sys.path and drop modules loaded from temporary directories."""
    saved_path = list(sys.path)
    saved_modules = set(sys.modules)
    base_temp = str(tmp_path_factory.getbasetemp())
    yield
    sys.path[:] = saved_path
    for name in set(sys.modules) - saved_modules:
        module_file = getattr(sys.modules.get(name), "__file__", None) or ""
        if module_file.startswith(base_temp) or module_file.startswith(EXAMPLES_DIR):
            del sys.modules[name]


@pytest.fixture(autouse=True)
def clear_config(monkeypatch):
    """Clear configuration and HANDLERSHIM_* variables around each test."""
    for key in list(os.environ):
        if key.startswith(handlershim.config.ENV_PREFIX):
            monkeypatch.delenv(key)
    handlershim.config.clear()
    yield
    handlershim.config.clear()


@pytest.fixture
def subprocess_env():
    """Environment for running handlershim in a child interpreter."""
    env = os.environ.copy()
    for key in list(env):
        if key.startswith(handlershim.config.ENV_PREFIX):
            del env[key]
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{PYTHON_DIR}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = PYTHON_DIR
    return env
