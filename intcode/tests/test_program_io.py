import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.program_io import dump_program, format_program, load_program, parse_program
from intcode.vm_errors import ProgramParseError


def test_parse_program_text():
    assert parse_program("1,0,0,3,99\n") == [1, 0, 0, 3, 99]
    assert parse_program(" 1, -2 ,3,") == [1, -2, 3]
    assert parse_program("") == []
    assert parse_program("\n") == []


def test_parse_program_rejects_non_integers():
    with pytest.raises(ProgramParseError, match="field 1"):
        parse_program("1,x,3")
    with pytest.raises(ProgramParseError):
        parse_program("1,,3")


def test_format_program():
    assert format_program((2, 0, -1, 99)) == "2,0,-1,99"


def test_dump_and_load(tmp_path):
    path = tmp_path / "program.txt"
    dump_program([1002, 4, 3, 4, 33], path)
    assert path.read_text(encoding="utf-8") == "1002,4,3,4,33\n"
    assert load_program(path) == [1002, 4, 3, 4, 33]
    assert load_program(str(path)) == [1002, 4, 3, 4, 33]
