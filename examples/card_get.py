#!/usr/bin/env python3
# Exposes the handler defined in src/card_handler.py as this module's `handler`.
# Run directly to print the HANDLER line, or import from a host process.
import handlershim

__all__ = ["handler"]

handlershim.bootstrap(__file__, "src/card_handler.py", search_path="src", namespace=globals())
