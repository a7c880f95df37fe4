from pathlib import Path

import pytest

from mid_valyrian.errors import DivisionByZeroError, InputOutputError, ParseError
from mid_valyrian.runner import run_file

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_hello(capsys):
    run_file(EXAMPLES / "hello.mv")
    assert capsys.readouterr().out == "Valar morghulis!\n"


def test_fibonacci(capsys):
    interp = run_file(EXAMPLES / "fibonacci.mv")
    out = capsys.readouterr().out.split()
    assert out == ["0", "1", "1", "2", "3", "5", "8", "13", "21", "34"]
    # `n` only ever existed as a parameter
    assert "n" not in interp.variables


def test_council(capsys):
    run_file(EXAMPLES / "council.mv")
    assert capsys.readouterr().out == "5\n100\n42\n"


def test_realm(capsys):
    run_file(EXAMPLES / "realm.mv")
    assert capsys.readouterr().out.splitlines() == [
        "House Targaryen",
        "4.5",
        "T",
        "nay",
        "Dracarys",
        "Dracarys",
        "Dracarys",
        "The realm trembles",
        "three heads",
    ]


def test_night_king(capsys):
    with pytest.raises(DivisionByZeroError):
        run_file(EXAMPLES / "night_king.mv")
    assert capsys.readouterr().out == ""


def test_run_file_requires_mv_suffix(tmp_path):
    src = tmp_path / "hello.txt"
    src.write_text('speak("hi")\n', encoding="utf-8")
    with pytest.raises(ParseError, match=r"\.mv"):
        run_file(src)


def test_run_file_missing_file(tmp_path):
    with pytest.raises(InputOutputError, match="Failed to read file"):
        run_file(tmp_path / "missing.mv")
