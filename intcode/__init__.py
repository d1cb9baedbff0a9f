"""intcode package exposes the Intcode virtual machine and its callers."""
from .amplifiers import AmplifierChain, AmplifierError, max_thruster_signal, run_amplifiers, run_feedback_loop
from .decoder import decode_instruction, disassemble
from .machine import (
    HALTED,
    FinalResult,
    IntcodeVM,
    MachineState,
    execute_instruction,
    new_machine,
    resume,
    run,
    run_program,
)
from .opcodes import Instruction, Opcode, ParameterMode
from .program_io import dump_program, format_program, load_program, parse_program
from .solvers import DiagnosticFailure, find_noun_verb, restore_gravity_assist, run_diagnostic
from .vm_errors import IntcodeError, MalformedProgram, ProgramParseError, StepLimitExceeded, UnknownOpcode

__all__ = [
    "AmplifierChain",
    "AmplifierError",
    "DiagnosticFailure",
    "FinalResult",
    "HALTED",
    "Instruction",
    "IntcodeError",
    "IntcodeVM",
    "MachineState",
    "MalformedProgram",
    "Opcode",
    "ParameterMode",
    "ProgramParseError",
    "StepLimitExceeded",
    "UnknownOpcode",
    "decode_instruction",
    "disassemble",
    "dump_program",
    "execute_instruction",
    "find_noun_verb",
    "format_program",
    "load_program",
    "max_thruster_signal",
    "new_machine",
    "parse_program",
    "restore_gravity_assist",
    "resume",
    "run",
    "run_amplifiers",
    "run_diagnostic",
    "run_feedback_loop",
    "run_program",
]
