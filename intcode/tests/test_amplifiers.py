from __future__ import annotations

import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.amplifiers import (
    AmplifierChain,
    AmplifierError,
    max_thruster_signal,
    run_amplifiers,
    run_feedback_loop,
)

SERIAL_43210 = [3, 15, 3, 16, 1002, 16, 10, 16, 1, 16, 15, 15, 4, 15, 99, 0, 0]
SERIAL_54321 = [
    3, 23, 3, 24, 1002, 24, 10, 24, 1002, 23, -1, 23,
    101, 5, 23, 23, 1, 24, 23, 23, 4, 23, 99, 0, 0,
]
FEEDBACK_139629729 = [
    3, 26, 1001, 26, -4, 26, 3, 27, 1002, 27, 2, 27, 1, 27, 26,
    27, 4, 27, 1001, 28, -1, 28, 1005, 28, 6, 99, 0, 0, 5,
]


def test_serial_chain_with_known_phases() -> None:
    assert run_amplifiers(SERIAL_43210, [4, 3, 2, 1, 0]) == 43210
    assert run_amplifiers(SERIAL_54321, [0, 1, 2, 3, 4]) == 54321


def test_serial_chain_search() -> None:
    assert max_thruster_signal(SERIAL_43210) == (43210, (4, 3, 2, 1, 0))
    assert max_thruster_signal(SERIAL_54321) == (54321, (0, 1, 2, 3, 4))


def test_feedback_loop_with_known_phases() -> None:
    assert run_feedback_loop(FEEDBACK_139629729, [9, 8, 7, 6, 5]) == 139629729


def test_feedback_loop_search() -> None:
    signal, phases = max_thruster_signal(FEEDBACK_139629729, range(5, 10), feedback=True)
    assert signal == 139629729
    assert phases == (9, 8, 7, 6, 5)


def test_machines_do_not_share_tapes() -> None:
    chain = AmplifierChain(SERIAL_43210, [4, 3, 2, 1, 0])
    chain.run_once(0)
    tapes = [vm.tape for vm in chain.machines]
    assert len({id(tape) for tape in tapes}) == 5
    assert chain.program == tuple(SERIAL_43210)
    assert tapes[0][15] == 4
    assert tapes[1][15] == 43


def test_chain_requires_phases() -> None:
    with pytest.raises(AmplifierError):
        AmplifierChain(SERIAL_43210, [])


def test_machine_halting_without_output_is_an_error() -> None:
    with pytest.raises(AmplifierError, match="halted without producing"):
        run_amplifiers([3, 0, 99], [1])


def test_machine_starved_of_input_is_an_error() -> None:
    # reads phase and signal, then asks for a third value nobody sends
    with pytest.raises(AmplifierError, match="waiting for input"):
        run_amplifiers([3, 0, 3, 0, 3, 0, 99], [1])
