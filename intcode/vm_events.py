from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass(frozen=True)
class MachineSnapshot:
    """Point-in-time copy of a machine, attached to errors and trace output."""

    pc: int
    status: str
    tape: Sequence[int]
    inputs: Sequence[int] = field(default_factory=tuple)
    outputs: Sequence[int] = field(default_factory=tuple)
    steps: int = 0


@dataclass(frozen=True)
class InputConsumed:
    pc: int
    address: int
    value: int
    defaulted: bool = False


@dataclass(frozen=True)
class OutputEmitted:
    pc: int
    value: int


@dataclass(frozen=True)
class MachineSuspended:
    pc: int
    reason: str


@dataclass(frozen=True)
class MachineHalted:
    pc: int
    steps: int
    implicit: bool = False
    error: str | None = None


MachineEvent = InputConsumed | OutputEmitted | MachineSuspended | MachineHalted


__all__ = [
    "InputConsumed",
    "MachineEvent",
    "MachineHalted",
    "MachineSnapshot",
    "MachineSuspended",
    "OutputEmitted",
]
