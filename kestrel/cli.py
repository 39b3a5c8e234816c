from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from kestrel import __version__
from kestrel.errors import KestrelError, KestrelIncomplete
from kestrel.interpreter import Interpreter
from kestrel.printer import pr_str
from kestrel.repl import Repl

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kestrel", description="Kestrel Lisp interpreter")
    parser.add_argument("files", nargs="*", metavar="FILE", help="evaluate each file in order")
    parser.add_argument("-e", "--eval", dest="expr", help="evaluate EXPR and print the result")
    parser.add_argument("--no-prelude", action="store_true", help="skip loading the prelude")
    parser.add_argument("--docs", type=Path, help="documentation JSON used by man/help")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    interp = Interpreter(prelude=not args.no_prelude, docs_path=args.docs)

    if not args.files and args.expr is None:
        logger.debug("no files or expression given; starting the REPL")
        Repl(interp).run()
        return 0

    try:
        for name in args.files:
            interp.eval_file(name)
        if args.expr is not None:
            print(pr_str(interp.eval(args.expr), True))
    except KestrelIncomplete as ex:
        print(f"Incomplete input: {ex}", file=sys.stderr)
        return 1
    except KestrelError as ex:
        print(ex, file=sys.stderr)
        return 1
    except OSError as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return 1
    return 0
