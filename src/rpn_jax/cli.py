"""Interactive read loop and one-shot command line front end."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from .calculator import Calculator
from .config import LOG_LEVELS, OPERAND_KINDS, CalculatorConfig

QUIT_COMMAND = "quit"


def build_parser(defaults: CalculatorConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpn-jax",
        description="Reverse Polish Notation calculator with undo and memoized evaluation.",
    )
    parser.add_argument("tokens", nargs="*", help="evaluate these tokens once instead of starting the read loop")
    parser.add_argument("--precision", type=int, default=defaults.precision, help="calculation scale (decimal places)")
    parser.add_argument(
        "--display-precision",
        type=int,
        default=defaults.display_precision,
        help="decimal places shown in results",
    )
    parser.add_argument("--operand", choices=OPERAND_KINDS, default=defaults.operand, help="operand value type")
    parser.add_argument(
        "--parallel",
        action=argparse.BooleanOptionalAction,
        default=defaults.parallel_evaluate,
        help="force stack roots on a thread pool",
    )
    parser.add_argument("--max-workers", type=int, default=defaults.max_workers, help="thread pool size for --parallel")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help="logging verbosity",
    )
    return parser


def _print_stack(calculator: Calculator, out: TextIO) -> None:
    print("Stack: " + " ".join(calculator.render()), file=out)


def _run_line(calculator: Calculator, tokens: list[str], out: TextIO) -> bool:
    error = calculator.accept_many(tokens)
    if error is not None:
        print(str(error), file=out)
    _print_stack(calculator, out)
    return error is None


def run_repl(calculator: Calculator, stdin: TextIO, stdout: TextIO) -> int:
    symbols = " ".join(calculator.registry.symbols)
    while True:
        print(f"Enter list of numbers and operators. Supported Operators are: {symbols}.", file=stdout)
        raw = stdin.readline()
        if raw == "":
            break
        line = raw.strip()
        if line == QUIT_COMMAND:
            break
        _run_line(calculator, line.split(), stdout)
    return 0


def main(argv: list[str] | None = None, *, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    defaults = CalculatorConfig.from_env()
    args = build_parser(defaults).parse_args(argv)
    config = defaults.with_overrides(
        precision=args.precision,
        display_precision=args.display_precision,
        operand=args.operand,
        parallel_evaluate=args.parallel,
        max_workers=args.max_workers,
        log_level=args.log_level,
    )
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    calculator = Calculator.from_config(config)
    out = sys.stdout if stdout is None else stdout
    if args.tokens:
        return 0 if _run_line(calculator, args.tokens, out) else 1
    return run_repl(calculator, sys.stdin if stdin is None else stdin, out)
