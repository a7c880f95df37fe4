from __future__ import annotations

from pathlib import Path
from typing import Optional, TextIO, Union

from .errors import InputOutputError, ParseError
from .interpreter import Interpreter
from .parser import parse_text

SOURCE_SUFFIX = ".mv"


def read_source(path: Union[str, Path]) -> str:
    p = Path(path)
    if p.suffix != SOURCE_SUFFIX:
        raise ParseError(f"File must end with {SOURCE_SUFFIX}")
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputOutputError(f"Failed to read file '{p}': {e}") from e


def run_code(
    source: str,
    debug: bool = False,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> Interpreter:
    """Parse and run `source`; returns the interpreter so callers can inspect its tables."""
    program = parse_text(source)
    interp = Interpreter(debug=debug, stdin=stdin, stdout=stdout)
    interp.interpret(program)
    return interp


def run_file(
    path: Union[str, Path],
    debug: bool = False,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> Interpreter:
    return run_code(read_source(path), debug=debug, stdin=stdin, stdout=stdout)
