from __future__ import annotations

import itertools
from typing import Iterable, List, Optional, Sequence, Tuple

from .machine import IntcodeVM


class AmplifierError(RuntimeError):
    pass


class AmplifierChain:
    """A row of machines running the same program, each primed with a phase setting.

    Every machine is created with blocking input, so a machine that needs a
    signal suspends and hands control back to the chain, which forwards the
    previous machine's output to it.
    """

    __slots__ = ("program", "phases", "machines", "strict", "max_steps")

    def __init__(
        self,
        program: Sequence[int],
        phases: Sequence[int],
        *,
        strict: bool = True,
        max_steps: Optional[int] = None,
    ) -> None:
        if not phases:
            raise AmplifierError("an amplifier chain needs at least one phase setting")
        self.program = tuple(program)
        self.phases = tuple(phases)
        self.strict = strict
        self.max_steps = max_steps
        self.machines: List[IntcodeVM] = [
            IntcodeVM(self.program, [phase], block_on_input=True) for phase in self.phases
        ]

    def _pass_signal(self, index: int, signal: int) -> Optional[int]:
        vm = self.machines[index]
        vm.feed(signal)
        vm.run(stop_on_output=True, strict=self.strict, max_steps=self.max_steps)
        if vm.last_event == "output":
            return vm.outputs[-1]
        if vm.last_event == "suspend":
            raise AmplifierError(f"amplifier {index} is waiting for input the chain cannot supply")
        return None

    def run_once(self, signal: int = 0) -> int:
        for index in range(len(self.machines)):
            produced = self._pass_signal(index, signal)
            if produced is None:
                raise AmplifierError(f"amplifier {index} halted without producing a signal")
            signal = produced
        return signal

    def run_feedback(self, signal: int = 0) -> int:
        """Loop the last amplifier's output back into the first until the last one halts."""
        last = len(self.machines) - 1
        thruster: Optional[int] = None
        while True:
            for index in range(len(self.machines)):
                produced = self._pass_signal(index, signal)
                if produced is not None:
                    signal = produced
                    if index == last:
                        thruster = produced
                elif index == last:
                    if thruster is None:
                        raise AmplifierError("feedback loop halted before producing a thruster signal")
                    return thruster


def run_amplifiers(program: Sequence[int], phases: Sequence[int], signal: int = 0, **kwargs) -> int:
    return AmplifierChain(program, phases, **kwargs).run_once(signal)


def run_feedback_loop(program: Sequence[int], phases: Sequence[int], signal: int = 0, **kwargs) -> int:
    return AmplifierChain(program, phases, **kwargs).run_feedback(signal)


def max_thruster_signal(
    program: Sequence[int],
    phase_values: Iterable[int] = range(5),
    *,
    feedback: bool = False,
    signal: int = 0,
) -> Tuple[int, Tuple[int, ...]]:
    """Try every ordering of ``phase_values`` and return the best ``(signal, phases)``."""
    runner = run_feedback_loop if feedback else run_amplifiers
    best: Optional[Tuple[int, Tuple[int, ...]]] = None
    for phases in itertools.permutations(tuple(phase_values)):
        result = runner(program, phases, signal)
        if best is None or result > best[0]:
            best = (result, phases)
    if best is None:
        raise AmplifierError("no phase settings to try")
    return best


__all__ = [
    "AmplifierChain",
    "AmplifierError",
    "max_thruster_signal",
    "run_amplifiers",
    "run_feedback_loop",
]
