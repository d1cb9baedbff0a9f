from __future__ import annotations

from typing import Iterator, Sequence, Tuple

from .opcodes import Instruction, Opcode, ParameterMode
from .vm_errors import IntcodeError, MalformedProgram, UnknownOpcode

_OPCODES_BY_VALUE = {op.value: op for op in Opcode}


def split_word(word: int) -> Tuple[int, Tuple[int, int, int]]:
    """Split an opcode word into its opcode number and three mode digits.

    Mode digits are read right to left from the hundreds place, so
    ``1002`` becomes ``(2, (0, 1, 0))``.
    """
    opcode = word % 100
    digits = word // 100
    modes = (digits % 10, (digits // 10) % 10, (digits // 100) % 10)
    return opcode, modes


def decode_instruction(tape: Sequence[int], pc: int) -> Instruction:
    if not 0 <= pc < len(tape):
        raise MalformedProgram(f"program counter {pc} outside tape of length {len(tape)}", pc)

    word = tape[pc]
    if word < 0:
        raise UnknownOpcode(word, pc)
    number, digits = split_word(word)
    opcode = _OPCODES_BY_VALUE.get(number)
    if opcode is None:
        raise UnknownOpcode(word, pc)

    count = opcode.operand_count
    end = pc + 1 + count
    if end > len(tape):
        raise MalformedProgram(
            f"{opcode.name} at {pc} needs {count} operand(s) but tape ends at {len(tape)}", pc
        )

    operands = tuple(tape[pc + 1:end])
    modes = tuple(ParameterMode.from_digit(d) for d in digits[:count])
    return Instruction(opcode, modes, operands, pc)


def disassemble(tape: Sequence[int], start: int = 0) -> Iterator[Tuple[int, str]]:
    """Walk the tape linearly, yielding ``(address, text)`` pairs.

    Cells that do not decode are shown as ``DATA`` and skipped one at a time.
    """
    pc = start
    while 0 <= pc < len(tape):
        try:
            instruction = decode_instruction(tape, pc)
        except IntcodeError:
            yield pc, f"DATA {tape[pc]}"
            pc += 1
            continue
        yield pc, str(instruction)
        pc += instruction.width


__all__ = ["decode_instruction", "disassemble", "split_word"]
