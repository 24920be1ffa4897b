from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .atoms import pretty, to_sexpr
from .indenter import normalize
from .lexer import tokenize
from .parser import ParseError, parse_source
from .token_types import Tok
from .utils import format_diagnostic

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "NEOTERIC_LOG_LEVEL"


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source, including text too
      long to be a file name.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except OSError:
        return arg

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg


def _log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG

    name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise SystemExit(f"{LOG_LEVEL_ENV}: unknown log level {name!r}")
    return level


def _dump_tokens(tokens: List[Tok]) -> None:
    for tok in tokens:
        print(f"{tok.span.start:>5}..{tok.span.end:<5} {tok.type.name:<14} {tok.value!r}")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="neoteric", description="Parse neoteric source into an atom tree")
    ap.add_argument("source", nargs="?", help="Source file, '-' for stdin, or literal source text")
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("--raw", action="store_true", help="Print scanner tokens")
    mode.add_argument("--tokens", action="store_true", help="Print logical tokens after indentation handling")
    mode.add_argument("--sexpr", action="store_true", help="Print each top-level atom as canonical source")
    ap.add_argument("--close-blocks", action="store_true", help="Emit DEDENTs for blocks still open at end of input")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=_log_level(args.verbose), format="%(name)s: %(message)s")

    source = _load_source(args.source)

    if args.raw:
        _dump_tokens(tokenize(source))
        return 0

    if args.tokens:
        _dump_tokens(normalize(tokenize(source), close_blocks_at_eof=args.close_blocks))
        return 0

    try:
        atoms = parse_source(source, close_blocks_at_eof=args.close_blocks)
    except ParseError as err:
        sys.stderr.write(format_diagnostic(source, err) + "\n")
        return 1

    logger.debug("parsed %d top-level atom(s)", len(atoms))

    if args.sexpr:
        for atom in atoms:
            print(to_sexpr(atom))
    else:
        print(pretty(atoms), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
