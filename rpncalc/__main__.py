import argparse
import logging
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

import rpncalc

logger = logging.getLogger("rpncalc")


def prompt() -> Iterator[str]:
    while True:
        try:
            yield input("% ")
        except EOFError:
            print()
            break


def run(
    lines: Iterable[str],
    calc: rpncalc.Calculator,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Evaluate every line independently; returns the number of lines that failed."""
    out = out or sys.stdout
    err = err or sys.stderr
    failed = 0
    for line in lines:
        try:
            answer = calc.evaluate(line)
        except rpncalc.EvalError as e:
            failed += 1
            print(e, file=err)
        else:
            print(answer, file=out)
    return failed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpncalc",
        description="Super awesome sample RPN calculator",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print the remaining tokens and the stack after every token",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {rpncalc.__version__}",
    )
    parser.add_argument(
        "formula_file",
        metavar="FILE",
        nargs="?",
        default=None,
        help="Formulas written in RPN, one per line (default: standard input)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    calc = rpncalc.Calculator(args.verbose)

    try:
        if args.formula_file is not None:
            logger.debug("Reading formulas from %s", args.formula_file)
            with open(args.formula_file, encoding="utf-8") as f:
                failed = run(f, calc)
        elif sys.stdin.isatty():
            logger.debug("Reading formulas interactively")
            failed = run(prompt(), calc)
        else:
            logger.debug("Reading formulas from standard input")
            failed = run(sys.stdin, calc)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Cannot read formulas: %s", e)
        return 1

    logger.debug("%d formula(s) failed", failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
