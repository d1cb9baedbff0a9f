from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union

from .vm_errors import ProgramParseError

PathLike = Union[str, Path]


def parse_program(text: str) -> List[int]:
    """Parse comma-separated program text such as ``"1,0,0,3,99"``.

    Whitespace around fields and a trailing comma or newline are ignored.
    """
    stripped = text.strip()
    if not stripped:
        return []
    fields = stripped.split(",")
    if fields[-1].strip() == "":
        fields.pop()
    program = []
    for index, field in enumerate(fields):
        token = field.strip()
        try:
            program.append(int(token))
        except ValueError:
            raise ProgramParseError(f"field {index}: {token!r} is not an integer") from None
    return program


def format_program(tape: Iterable[int]) -> str:
    return ",".join(str(value) for value in tape)


def load_program(path: PathLike) -> List[int]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_program(f.read())


def dump_program(tape: Iterable[int], path: PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_program(tape) + "\n")


__all__ = ["dump_program", "format_program", "load_program", "parse_program"]
