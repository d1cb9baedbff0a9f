from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ParameterMode(Enum):
    POSITION = 0    # operand is an address
    IMMEDIATE = 1   # operand is the value itself

    @classmethod
    def from_digit(cls, digit: int) -> "ParameterMode":
        return cls.POSITION if digit == 0 else cls.IMMEDIATE


class Opcode(Enum):
    ADD = 1             # ADD a, b, dst
    MULTIPLY = 2        # MULTIPLY a, b, dst
    INPUT = 3           # INPUT dst
    OUTPUT = 4          # OUTPUT src
    JUMP_IF_TRUE = 5    # JUMP_IF_TRUE cond, target
    JUMP_IF_FALSE = 6   # JUMP_IF_FALSE cond, target
    LESS_THAN = 7       # LESS_THAN a, b, dst
    EQUALS = 8          # EQUALS a, b, dst
    HALT = 99

    @property
    def operand_count(self) -> int:
        return OPERAND_COUNTS[self]

    @property
    def width(self) -> int:
        return self.operand_count + 1


OPERAND_COUNTS = {
    Opcode.ADD: 3,
    Opcode.MULTIPLY: 3,
    Opcode.INPUT: 1,
    Opcode.OUTPUT: 1,
    Opcode.JUMP_IF_TRUE: 2,
    Opcode.JUMP_IF_FALSE: 2,
    Opcode.LESS_THAN: 3,
    Opcode.EQUALS: 3,
    Opcode.HALT: 0,
}

# Operand indexes that name a tape cell to write to; their mode digit is ignored.
WRITE_OPERANDS = {
    Opcode.ADD: 2,
    Opcode.MULTIPLY: 2,
    Opcode.INPUT: 0,
    Opcode.LESS_THAN: 2,
    Opcode.EQUALS: 2,
}

_MNEMONICS = {
    Opcode.ADD: "ADD",
    Opcode.MULTIPLY: "MUL",
    Opcode.INPUT: "IN",
    Opcode.OUTPUT: "OUT",
    Opcode.JUMP_IF_TRUE: "JNZ",
    Opcode.JUMP_IF_FALSE: "JZ",
    Opcode.LESS_THAN: "LT",
    Opcode.EQUALS: "EQ",
    Opcode.HALT: "HALT",
}


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction: opcode, per-operand modes and raw operand cells."""

    opcode: Opcode
    modes: Tuple[ParameterMode, ...]
    operands: Tuple[int, ...]
    address: int = 0

    @property
    def width(self) -> int:
        return self.opcode.width

    def _format_operand(self, index: int) -> str:
        value = self.operands[index]
        if WRITE_OPERANDS.get(self.opcode) == index:
            return f"[{value}]"
        if self.modes[index] is ParameterMode.IMMEDIATE:
            return f"#{value}"
        return f"[{value}]"

    def __str__(self):
        mnemonic = _MNEMONICS[self.opcode]
        if not self.operands:
            return mnemonic
        args = ", ".join(self._format_operand(i) for i in range(len(self.operands)))
        return f"{mnemonic} {args}"


__all__ = ["Instruction", "Opcode", "OPERAND_COUNTS", "ParameterMode", "WRITE_OPERANDS"]
