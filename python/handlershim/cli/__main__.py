import argparse
import logging
import os
import sys

from handlershim.core.loader import ON_MISSING_POLICIES
from handlershim.providers import registered_schemes
from handlershim.shim import DEFAULT_UNIT, bootstrap


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="handlershim",
        description="Load a handler unit and print its HANDLER diagnostic line.",
    )
    parser.add_argument(
        "unit",
        nargs="?",
        default=DEFAULT_UNIT,
        help=f"unit target, relative to the base directory (default: {DEFAULT_UNIT})",
    )
    parser.add_argument(
        "--base-dir",
        default=os.getcwd(),
        help="directory the unit and search path are relative to (default: cwd)",
    )
    parser.add_argument("--search-path", default=None, help="importable subdirectory (default: src)")
    parser.add_argument("--export", default=None, help="export to extract (default: handler)")
    parser.add_argument("--on-missing", choices=ON_MISSING_POLICIES, default=None)
    parser.add_argument("--list-schemes", action="store_true", help="list unit target schemes and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="log loader steps to stderr")
    return parser.parse_args(argv)


def main(argv=None):
    """Entry point for the handlershim command."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    if args.list_schemes:
        for scheme, description in registered_schemes().items():
            print(f"{scheme:<8} {description}")
        return 0

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # Load errors propagate to the interpreter, which reports them and exits non-zero
    bootstrap(
        args.base_dir,
        args.unit,
        search_path=args.search_path,
        export=args.export,
        on_missing=args.on_missing,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
