"""Command-line entry point: parse a C file and print interesting structs."""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from pathlib import Path

from .api import dump_catalogs, dump_json, extract_file
from .config import ExtractorConfig, NestedInitializerPolicy
from .errors import CAstError, SourcePathError
from . import constants

logger = logging.getLogger(__name__)

_LOG_LEVELS = [logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]
_DEFAULT_LEVEL_INDEX = 2
_VARIABLE = re.compile(r"\$(?:\{(\w+)(?::-([^}]*))?\}|(\w+))")


def expand_path(raw: str) -> Path:
    """Expand ``~``, ``$VAR``, ``${VAR}`` and ``${VAR:-default}``.

    A ``$`` not followed by a name is kept literally. An undefined variable
    without a default is an error.
    """

    def substitute(match: re.Match) -> str:
        name = match.group(1) or match.group(3)
        value = os.environ.get(name)
        if value is None:
            default = match.group(2)
            if default is None:
                raise SourcePathError(f"{raw}: undefined variable {name}")
            return default
        return value

    return Path(os.path.expanduser(_VARIABLE.sub(substitute, raw)))


def log_level(verbose: int, quiet: int) -> int:
    index = _DEFAULT_LEVEL_INDEX + verbose - quiet
    return _LOG_LEVELS[max(0, min(index, len(_LOG_LEVELS) - 1))]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="c-ast", description="Parse a C file and print interesting structs"
    )
    parser.add_argument("--file", "-f", default=constants.DEFAULT_SOURCE_PATH,
                        help="C source file, ~, $VAR and ${VAR:-default} expanded (default: ./main.c)")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="More diagnostics (repeatable)")
    parser.add_argument("--quiet", "-q", action="count", default=0,
                        help="Fewer diagnostics (repeatable)")
    parser.add_argument("--json", action="store_true",
                        help="Print the catalogs as JSON")
    parser.add_argument("--strict", action="store_true",
                        help="Abort on the first declaration that cannot be extracted")
    parser.add_argument("--nested", default=NestedInitializerPolicy.FLATTEN.value,
                        choices=[p.value for p in NestedInitializerPolicy],
                        help="Nested initializer handling (default: flatten)")
    parser.add_argument("--designators", action="store_true",
                        help="Match .field designators by name instead of position")
    parser.add_argument("--preprocess", action="store_true",
                        help="Run the file through `cc -E -P` before parsing")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=log_level(args.verbose, args.quiet),
        format="%(levelname)s: %(message)s",
    )

    config = ExtractorConfig(
        nested_initializers=NestedInitializerPolicy(args.nested),
        match_designators=args.designators,
        strict=args.strict,
    )
    try:
        path = expand_path(args.file)
        result = extract_file(
            path,
            config,
            preprocess_command=constants.DEFAULT_PREPROCESS_COMMAND if args.preprocess else None,
        )
    except CAstError as exc:
        logger.error("%s", exc)
        return 1

    print(dump_json(result) if args.json else dump_catalogs(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
