"""Testing helpers for the handlershim package.

This module exposes small factories for unit source files used in tests.
Keeping them here keeps test modules short and the unit bodies consistent.
"""

from __future__ import annotations

import pathlib
import textwrap

__all__ = [
    "dependent_unit",
    "failing_unit",
    "handler_unit",
    "missing_export_unit",
    "sibling_module",
    "write_unit",
]


def write_unit(directory: pathlib.Path, name: str, source: str) -> pathlib.Path:
    """Write ``source`` to ``directory/name`` and return the path."""
    path = pathlib.Path(directory, name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source))
    return path


def handler_unit(value: str = '"card-get"') -> str:
    return f"""
        handler = {value}
        """


def missing_export_unit() -> str:
    return """
        def main(event, context):
            return {"statusCode": 200}
        """


def failing_unit(message: str = "boom") -> str:
    return f"""
        raise RuntimeError({message!r})
        """


def sibling_module() -> str:
    return """
        def render(card_id):
            return {"id": card_id, "kind": "card"}
        """


def dependent_unit(module: str = "card_format") -> str:
    return f"""
        import {module}


        def handler(event, context):
            return {module}.render(event["id"])
        """
