from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List, Optional, Sequence, Tuple

from .decoder import decode_instruction
from .opcodes import Instruction, Opcode, ParameterMode
from .vm_errors import IntcodeError, MalformedProgram, StepLimitExceeded
from .vm_events import (
    InputConsumed,
    MachineEvent,
    MachineHalted,
    MachineSnapshot,
    MachineSuspended,
    OutputEmitted,
)

HALTED = -1

READY = "ready"
AWAITING_INPUT = "awaiting_input"
HALTED_STATUS = "halted"


@dataclass(frozen=True)
class MachineState:
    """Immutable view of one run: tape, program counter and I/O queues."""

    tape: Tuple[int, ...]
    pc: int = 0
    inputs: Tuple[int, ...] = ()
    outputs: Tuple[int, ...] = ()
    status: str = READY

    @property
    def halted(self) -> bool:
        return self.status == HALTED_STATUS

    @property
    def last_output(self) -> Optional[int]:
        return self.outputs[-1] if self.outputs else None


@dataclass(frozen=True)
class FinalResult:
    tape: Tuple[int, ...]
    outputs: Tuple[int, ...]


class IntcodeVM:
    def __init__(self, tape: Iterable[int], inputs: Iterable[int] = (), *, block_on_input: bool = False):
        self.tape: List[int] = list(tape)
        self.inputs: Deque[int] = deque(inputs)
        self.outputs: List[int] = []
        self.pc = 0
        self.status = READY
        self.steps = 0
        self.block_on_input = block_on_input
        self.last_event: Optional[str] = None
        self._event_buffer: List[MachineEvent] = []
        # Opcode dispatch table
        self._handlers = {
            Opcode.ADD: self._op_ADD,
            Opcode.MULTIPLY: self._op_MULTIPLY,
            Opcode.INPUT: self._op_INPUT,
            Opcode.OUTPUT: self._op_OUTPUT,
            Opcode.JUMP_IF_TRUE: self._op_JUMP_IF_TRUE,
            Opcode.JUMP_IF_FALSE: self._op_JUMP_IF_FALSE,
            Opcode.LESS_THAN: self._op_LESS_THAN,
            Opcode.EQUALS: self._op_EQUALS,
            Opcode.HALT: self._op_HALT,
        }

    @classmethod
    def from_state(cls, state: MachineState, *, block_on_input: bool = False) -> "IntcodeVM":
        vm = cls(state.tape, state.inputs, block_on_input=block_on_input)
        vm.outputs = list(state.outputs)
        vm.status = state.status
        if vm.status == AWAITING_INPUT and (vm.inputs or not block_on_input):
            vm.status = READY
        vm.pc = HALTED if state.halted else state.pc
        return vm

    def to_state(self) -> MachineState:
        return MachineState(
            tape=tuple(self.tape),
            pc=self.pc,
            inputs=tuple(self.inputs),
            outputs=tuple(self.outputs),
            status=self.status,
        )

    @property
    def halted(self) -> bool:
        return self.status == HALTED_STATUS

    def feed(self, *values: int) -> None:
        self.inputs.extend(values)
        if self.status == AWAITING_INPUT and self.inputs:
            self.status = READY

    # -------------------- Debug/event helpers --------------------
    def emit_event(self, event: MachineEvent) -> None:
        self._event_buffer.append(event)

    def drain_events(self) -> List[MachineEvent]:
        events = list(self._event_buffer)
        self._event_buffer.clear()
        return events

    def snapshot_state(self) -> MachineSnapshot:
        return MachineSnapshot(
            pc=self.pc,
            status=self.status,
            tape=tuple(self.tape),
            inputs=tuple(self.inputs),
            outputs=tuple(self.outputs),
            steps=self.steps,
        )

    def describe(self, pc: Optional[int] = None) -> str:
        pc = self.pc if pc is None else pc
        try:
            return str(decode_instruction(self.tape, pc))
        except IntcodeError as exc:
            return f"<{exc}>"

    # -------------------- Memory access --------------------
    def _check_address(self, address: int) -> int:
        if not 0 <= address < len(self.tape):
            raise MalformedProgram(
                f"address {address} outside tape of length {len(self.tape)}", self.pc
            )
        return address

    def read(self, address: int) -> int:
        return self.tape[self._check_address(address)]

    def write(self, address: int, value: int) -> None:
        self.tape[self._check_address(address)] = value

    def resolve(self, instruction: Instruction, index: int) -> int:
        operand = instruction.operands[index]
        if instruction.modes[index] is ParameterMode.IMMEDIATE:
            return operand
        return self.read(operand)

    # -------------------- Execution --------------------
    def execute(self, instruction: Instruction) -> Optional[str]:
        """Apply a decoded instruction at the current program counter.

        Returns the handler's control signal: ``None`` after advancing the
        program counter, ``"jump"``, ``"output"``, ``"suspend"`` or ``"halt"``.
        """
        control = self._handlers[instruction.opcode](instruction)
        if control in ("jump", "suspend", "halt"):
            return control
        self.pc += instruction.width
        return control

    def step(self) -> Optional[str]:
        """Decodes and executes a single instruction."""
        if self.halted:
            return "halt"
        if self.status == AWAITING_INPUT and not self.inputs:
            return "suspend"

        try:
            instruction = decode_instruction(self.tape, self.pc)
            control = self.execute(instruction)
        except IntcodeError as exc:
            raise exc.with_snapshot(self.snapshot_state())
        if control != "suspend":
            self.steps += 1
        return control

    def run(
        self,
        debug: bool = False,
        *,
        stop_on_output: bool = False,
        max_steps: Optional[int] = None,
        strict: bool = True,
    ) -> List[int]:
        """Run until halt, until blocked on input, or (optionally) after one output.

        With ``strict=False`` a decode or addressing failure ends the run as
        an implicit halt instead of raising.
        """
        self.last_event = None
        executed = 0
        while True:
            if max_steps is not None and executed >= max_steps and not self.halted:
                raise StepLimitExceeded(
                    f"run exceeded {max_steps} steps", self.pc, self.snapshot_state()
                )
            if debug and not self.halted:
                print(f"[PC={self.pc}] EXEC: {self.describe()}")
                print(f"  INPUTS: {list(self.inputs)}")
                print(f"  OUTPUTS: {self.outputs}\n")

            try:
                status = self.step()
            except IntcodeError as exc:
                if strict:
                    raise
                self._halt(implicit=True, error=str(exc))
                status = "halt"
            executed += 1

            if status == "halt":
                self.last_event = "halt"
                break
            if status == "suspend":
                self.last_event = "suspend"
                break
            if status == "output" and stop_on_output:
                self.last_event = "output"
                break
        return self.outputs

    def _halt(self, implicit: bool = False, error: Optional[str] = None) -> None:
        self.emit_event(MachineHalted(pc=self.pc, steps=self.steps, implicit=implicit, error=error))
        self.pc = HALTED
        self.status = HALTED_STATUS

    # -------------------- Opcode handlers --------------------
    def _op_ADD(self, inst: Instruction):
        self.write(inst.operands[2], self.resolve(inst, 0) + self.resolve(inst, 1))

    def _op_MULTIPLY(self, inst: Instruction):
        self.write(inst.operands[2], self.resolve(inst, 0) * self.resolve(inst, 1))

    def _op_LESS_THAN(self, inst: Instruction):
        self.write(inst.operands[2], int(self.resolve(inst, 0) < self.resolve(inst, 1)))

    def _op_EQUALS(self, inst: Instruction):
        self.write(inst.operands[2], int(self.resolve(inst, 0) == self.resolve(inst, 1)))

    def _op_INPUT(self, inst: Instruction):
        address = self._check_address(inst.operands[0])
        if self.inputs:
            value = self.inputs.popleft()
            defaulted = False
        elif self.block_on_input:
            self.status = AWAITING_INPUT
            self.emit_event(MachineSuspended(pc=self.pc, reason="input"))
            return "suspend"
        else:
            value = 0
            defaulted = True
        self.tape[address] = value
        self.emit_event(InputConsumed(pc=self.pc, address=address, value=value, defaulted=defaulted))

    def _op_OUTPUT(self, inst: Instruction):
        value = self.resolve(inst, 0)
        self.outputs.append(value)
        self.emit_event(OutputEmitted(pc=self.pc, value=value))
        return "output"

    def _jump(self, inst: Instruction, taken: bool):
        if not taken:
            return None
        target = self.resolve(inst, 1)
        if target < 0:
            raise MalformedProgram(f"jump target {target} outside tape", self.pc)
        self.pc = target
        return "jump"

    def _op_JUMP_IF_TRUE(self, inst: Instruction):
        return self._jump(inst, self.resolve(inst, 0) != 0)

    def _op_JUMP_IF_FALSE(self, inst: Instruction):
        return self._jump(inst, self.resolve(inst, 0) == 0)

    def _op_HALT(self, inst: Instruction):
        self._halt()
        return "halt"


# -------------------- Functional API --------------------
def new_machine(tape: Iterable[int], inputs: Iterable[int] = ()) -> MachineState:
    return MachineState(tape=tuple(tape), inputs=tuple(inputs))


def execute_instruction(instruction: Instruction, state: MachineState) -> MachineState:
    """Apply one decoded instruction to ``state`` and return the next state."""
    vm = IntcodeVM.from_state(state)
    vm.execute(instruction)
    return vm.to_state()


def resume(
    state: MachineState,
    inputs: Sequence[int] = (),
    *,
    stop_on_output: bool = False,
    strict: bool = True,
    max_steps: Optional[int] = None,
) -> MachineState:
    """Continue ``state`` until it halts, blocks on input, or emits (optionally) one output."""
    vm = IntcodeVM.from_state(state, block_on_input=True)
    vm.feed(*inputs)
    vm.run(stop_on_output=stop_on_output, strict=strict, max_steps=max_steps)
    return vm.to_state()


def run(
    state: MachineState,
    *,
    strict: bool = True,
    max_steps: Optional[int] = None,
    debug: bool = False,
) -> FinalResult:
    vm = IntcodeVM.from_state(state)
    vm.run(debug, strict=strict, max_steps=max_steps)
    return FinalResult(tape=tuple(vm.tape), outputs=tuple(vm.outputs))


def run_program(tape: Iterable[int], inputs: Iterable[int] = (), **kwargs) -> FinalResult:
    return run(new_machine(tape, inputs), **kwargs)


__all__ = [
    "AWAITING_INPUT",
    "FinalResult",
    "HALTED",
    "HALTED_STATUS",
    "IntcodeVM",
    "MachineState",
    "READY",
    "execute_instruction",
    "new_machine",
    "resume",
    "run",
    "run_program",
]
