"""
MatCalc — Entry point.

Launch the interactive calculator, or evaluate one line with ``-e``.
"""

import argparse
import sys
from typing import Optional

from console import Repl
from console import storage
from console.logging_config import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matcalc",
        description="Interactive scalar and matrix calculator.",
    )
    parser.add_argument("-e", "--eval", metavar="EXPR",
                        help="evaluate EXPR, print the result and exit")
    parser.add_argument("--precision", type=int, default=None,
                        help="decimals shown for non-integral numbers")
    parser.add_argument("--no-history", action="store_true",
                        help="do not record evaluated lines")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging verbosity (default: from settings)")
    parser.add_argument("--log-file", default=None,
                        help="also write logs to this file")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = storage.get_settings()
    setup_logging(args.log_level or settings["log_level"], args.log_file)

    repl = Repl(
        precision=args.precision if args.precision is not None else settings["precision"],
        save_history=settings["save_history"] and not args.no_history,
        show_banner=settings["show_banner"],
    )

    if args.eval is not None:
        try:
            results = repl.evaluator.run(args.eval)
        except ValueError as e:
            print(Repl._friendly_error(e), file=sys.stderr)
            return 1
        if results:
            print(repl.render(*results[-1]))
        return 0

    repl.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
