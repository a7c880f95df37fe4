from __future__ import annotations
import argparse
import sys
from pathlib import Path

from termcolor import colored

from .dot_export import to_dot
from .errors import ValyrianError
from .interpreter import Interpreter
from .parser import parse_text
from .runner import SOURCE_SUFFIX, read_source

BANNER = r"""
    +------------------------------------------------------------+
    |                                                            |
    |    Welcome to Mid Valyrian - Language of Old Valyria       |
    |                                                            |
    |    "Valar morghulis" - All men must debug                  |
    |                                                            |
    +------------------------------------------------------------+
"""


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="mid-valyrian",
        description="A Game of Thrones inspired interpreted programming language",
    )
    ap.add_argument("file", help=f"The {SOURCE_SUFFIX} file to execute")
    ap.add_argument("-d", "--debug", action="store_true",
                    help="Enable debug mode (show AST and execution trace)")
    ap.add_argument("--dot", metavar="OUT", help="Write the program AST as a Graphviz .dot file")
    ap.add_argument("--no-banner", action="store_true", help="Do not print the banner")
    args = ap.parse_args(argv)

    if not args.no_banner:
        print(colored(BANNER, "cyan"))

    if Path(args.file).suffix != SOURCE_SUFFIX:
        print(colored(f"Error: Only files with the `{SOURCE_SUFFIX}` extension are allowed.", "red"),
              file=sys.stderr)
        return 1

    if args.debug:
        print(colored("Debug mode enabled - The Maesters will show their work", "yellow"))

    try:
        program = parse_text(read_source(args.file))
        if args.dot:
            Path(args.dot).write_text(to_dot(program) + "\n", encoding="utf-8")
        Interpreter(debug=args.debug).interpret(program)
    except ValyrianError as e:
        print(colored(str(e), "red"), file=sys.stderr)
        return 1
    except OSError as e:
        print(colored(f"[io error] {e}", "red"), file=sys.stderr)
        return 1

    if args.debug:
        print(colored("The realm prospers! Program executed successfully.", "green"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
