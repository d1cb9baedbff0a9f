"""Callers that drive the VM the way the daily puzzles do."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .machine import run_program
from .vm_errors import IntcodeError, MalformedProgram

GRAVITY_ASSIST_TARGET = 19_690_720


class DiagnosticFailure(RuntimeError):
    def __init__(self, message: str, outputs: Sequence[int]):
        super().__init__(message)
        self.outputs = list(outputs)


def _check_patchable(program: Sequence[int]) -> None:
    if len(program) < 3:
        raise MalformedProgram(f"noun/verb addresses 1 and 2 outside tape of length {len(program)}")


def patch_program(program: Sequence[int], noun: int, verb: int) -> List[int]:
    _check_patchable(program)
    patched = list(program)
    patched[1] = noun
    patched[2] = verb
    return patched


def restore_gravity_assist(program: Sequence[int], noun: int = 12, verb: int = 2) -> int:
    """Set the noun/verb addresses, run to completion and return address 0."""
    result = run_program(patch_program(program, noun, verb))
    return result.tape[0]


def find_noun_verb(
    program: Sequence[int],
    target: int = GRAVITY_ASSIST_TARGET,
    noun_range: Iterable[int] = range(100),
    verb_range: Iterable[int] = range(100),
) -> Optional[Tuple[int, int]]:
    _check_patchable(program)
    verbs = list(verb_range)
    for noun in noun_range:
        for verb in verbs:
            try:
                value = restore_gravity_assist(program, noun, verb)
            except IntcodeError:
                # this pair sends the program out of bounds; not a candidate
                continue
            if value == target:
                return noun, verb
    return None


def run_diagnostic(program: Sequence[int], system_id: int) -> int:
    """Run a self-test program and return its final diagnostic code.

    Every output before the last is a test result and must be zero.
    """
    outputs = run_program(program, [system_id]).outputs
    if not outputs:
        raise DiagnosticFailure("diagnostic program produced no output", outputs)
    failed = [value for value in outputs[:-1] if value != 0]
    if failed:
        raise DiagnosticFailure(f"{len(failed)} diagnostic test(s) failed: {failed}", outputs)
    return outputs[-1]


__all__ = [
    "DiagnosticFailure",
    "GRAVITY_ASSIST_TARGET",
    "find_noun_verb",
    "patch_program",
    "restore_gravity_assist",
    "run_diagnostic",
]
