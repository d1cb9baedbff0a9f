from __future__ import annotations

from .vm_events import MachineSnapshot


class IntcodeError(RuntimeError):
    """Runtime error raised by the Intcode VM with the failing program counter attached."""

    def __init__(self, message: str, pc: int | None = None, snapshot: MachineSnapshot | None = None):
        super().__init__(message)
        self.pc = pc
        self.snapshot = snapshot

    def with_snapshot(self, snapshot: MachineSnapshot) -> "IntcodeError":
        self.snapshot = snapshot
        if self.pc is None:
            self.pc = snapshot.pc
        return self


class MalformedProgram(IntcodeError):
    """An instruction or operand refers to an address outside the tape."""


class UnknownOpcode(IntcodeError):
    def __init__(self, word: int, pc: int | None = None, snapshot: MachineSnapshot | None = None):
        super().__init__(f"unknown opcode word {word} at {pc}", pc, snapshot)
        self.word = word


class StepLimitExceeded(IntcodeError):
    pass


class ProgramParseError(ValueError):
    """Raised when program text is not a comma-separated list of integers."""


__all__ = [
    "IntcodeError",
    "MalformedProgram",
    "ProgramParseError",
    "StepLimitExceeded",
    "UnknownOpcode",
]
