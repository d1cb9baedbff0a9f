from __future__ import annotations

import argparse
import pathlib
import sys
from typing import List, Optional

from .amplifiers import AmplifierError, max_thruster_signal, run_amplifiers, run_feedback_loop
from .decoder import disassemble
from .event_format import format_event, format_snapshot
from .machine import IntcodeVM
from .program_io import format_program, parse_program
from .solvers import GRAVITY_ASSIST_TARGET, DiagnosticFailure, find_noun_verb, run_diagnostic
from .vm_errors import IntcodeError, ProgramParseError


def _load_program_text(args: argparse.Namespace) -> str:
    if args.execute:
        return args.execute
    if args.program and args.program != "-":
        return pathlib.Path(args.program).read_text(encoding="utf-8")
    return sys.stdin.read()


def _parse_phases(text: str) -> List[int]:
    try:
        return [int(part) for part in text.replace(" ", "").split(",") if part]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid phase settings {text!r}") from None


def _add_program_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("program", nargs="?", help="Path to program file ('-' or omitted reads stdin)")
    parser.add_argument("-e", "--execute", help="Program text given inline, e.g. '1,0,0,0,99'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="intcode", description="Run Intcode programs")
    parser.add_argument("--stack", action="store_true", help="Print the machine state when a run fails")
    sub = parser.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", help="Run a program to completion")
    _add_program_arguments(run_p)
    run_p.add_argument("-i", "--input", dest="inputs", action="append", type=int, default=[],
                       help="Input value (repeat for several)")
    run_p.add_argument("--print-tape", action="store_true", help="Print the final tape")
    run_p.add_argument("--debug", action="store_true", help="Print every executed instruction")
    run_p.add_argument("--trace", action="store_true", help="Print input/output/halt events")
    run_p.add_argument("--legacy", action="store_true",
                       help="Treat decode failures as an implicit halt instead of an error")
    run_p.add_argument("--max-steps", type=int, default=None, help="Abort after this many instructions")

    dis_p = sub.add_parser("disasm", help="Disassemble a program")
    _add_program_arguments(dis_p)

    nv_p = sub.add_parser("noun-verb", help="Search the noun/verb pair producing a target value")
    _add_program_arguments(nv_p)
    nv_p.add_argument("--target", type=int, default=GRAVITY_ASSIST_TARGET)

    diag_p = sub.add_parser("diagnostic", help="Run a diagnostic program for a system id")
    _add_program_arguments(diag_p)
    diag_p.add_argument("--system-id", type=int, default=1)

    amp_p = sub.add_parser("amplify", help="Run an amplifier chain")
    _add_program_arguments(amp_p)
    amp_p.add_argument("--phases", type=_parse_phases, help="Comma-separated phase settings; omitted searches all orderings")
    amp_p.add_argument("--feedback", action="store_true", help="Use a feedback loop")
    amp_p.add_argument("--signal", type=int, default=0, help="Initial input signal")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.execute and args.program:
            parser.error("cannot use program path and --execute together")
        program = parse_program(_load_program_text(args))

        if args.command == "run":
            return _run(program, args)
        if args.command == "disasm":
            for address, text in disassemble(program):
                print(f"{address:>5}: {text}")
            return 0
        if args.command == "noun-verb":
            found = find_noun_verb(program, args.target)
            if found is None:
                print(f"no noun/verb pair produces {args.target}", file=sys.stderr)
                return 1
            noun, verb = found
            print(100 * noun + verb)
            return 0
        if args.command == "diagnostic":
            print(run_diagnostic(program, args.system_id))
            return 0
        if args.command == "amplify":
            return _amplify(program, args)
        parser.error(f"unknown command {args.command}")
    except (OSError, ProgramParseError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except IntcodeError as exc:
        if args.stack and exc.snapshot is not None:
            print(format_snapshot(exc.snapshot), file=sys.stderr)
        print(f"Intcode execution failed: {exc}", file=sys.stderr)
        return 1
    except (AmplifierError, DiagnosticFailure) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _run(program: List[int], args: argparse.Namespace) -> int:
    vm = IntcodeVM(program, args.inputs)
    try:
        vm.run(debug=args.debug, strict=not args.legacy, max_steps=args.max_steps)
    finally:
        if args.trace:
            _print_events(vm.drain_events())
    for value in vm.outputs:
        print(value)
    if args.print_tape:
        print(format_program(vm.tape))
    return 0


def _amplify(program: List[int], args: argparse.Namespace) -> int:
    if args.phases:
        runner = run_feedback_loop if args.feedback else run_amplifiers
        print(runner(program, args.phases, args.signal))
        return 0
    phase_values = range(5, 10) if args.feedback else range(5)
    signal, phases = max_thruster_signal(program, phase_values, feedback=args.feedback, signal=args.signal)
    print(f"{signal} (phases {','.join(map(str, phases))})")
    return 0


def _print_events(events: list) -> None:
    if not events:
        return
    print("Machine events:")
    for event in events:
        print(f"  - {format_event(event)}")


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
