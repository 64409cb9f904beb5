"""Read-eval-print loop and command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, TextIO

from monkey.config import Settings, get_settings
from monkey.debug_utils.pprint import DEFAULT_OPTIONS, load_options_from_json, pprint_value
from monkey.errors import MonkeyError, MonkeySyntaxError
from monkey.interpreter import Interpreter
from monkey.types.objects import is_error

logger = logging.getLogger(__name__)

BANNER = "Hello! This is the Monkey programming language!\nFeel free to type in commands"


def print_parse_errors(errors: list[str], out: TextIO) -> None:
    out.write("Woops! parser errors:\n")
    for msg in errors:
        out.write(f"\t{msg}\n")


def start(
    interp: Interpreter,
    inp: TextIO,
    out: TextIO,
    prompt: str = ">> ",
    color: bool = False,
    options: Optional[dict] = None,
) -> None:
    """Run the loop until `inp` is exhausted. State persists across lines."""
    options = {**(options or DEFAULT_OPTIONS), "enabled": color}
    while True:
        out.write(prompt)
        out.flush()
        line = inp.readline()
        if not line:
            return
        try:
            result = interp.eval(line)
        except MonkeySyntaxError as ex:
            print_parse_errors(ex.errors, out)
            continue
        except MonkeyError as ex:
            out.write(f"{ex}\n")
            continue
        if result is not None:
            out.write(pprint_value(result, options=options) + "\n")


def run_file(interp: Interpreter, path: str, out: TextIO) -> int:
    with open(path, encoding="utf-8") as f:
        source = f.read()
    try:
        result = interp.eval(source)
    except MonkeySyntaxError as ex:
        print_parse_errors(ex.errors, out)
        return 1
    except MonkeyError as ex:
        out.write(f"{ex}\n")
        return 1
    if is_error(result):
        out.write(result.inspect() + "\n")
        return 1
    return 0


def build_arg_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="monkey", description="The Monkey programming language")
    parser.add_argument("script", nargs="?", help="run this file instead of starting the REPL")
    parser.add_argument("-t", "--trace", action="store_true", default=settings.trace,
                        help="trace parser calls (logged at DEBUG level)")
    parser.add_argument("--log-level", default=settings.log_level,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--no-color", dest="color", action="store_false", default=settings.color,
                        help="disable colored output")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    settings = get_settings()
    args = build_arg_parser(settings).parse_args(argv)

    level = "DEBUG" if args.trace else args.log_level
    logging.basicConfig(level=level, format="%(message)s" if args.trace else "%(levelname)s %(name)s: %(message)s")

    interp = Interpreter(trace=args.trace)
    if args.script:
        return run_file(interp, args.script, sys.stdout)

    print(BANNER)
    options = load_options_from_json(settings.pprint_options)
    start(interp, sys.stdin, sys.stdout, settings.prompt, color=args.color and sys.stdout.isatty(), options=options)
    return 0


if __name__ == "__main__":
    sys.exit(main())
