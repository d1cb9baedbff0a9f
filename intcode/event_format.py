from __future__ import annotations

from .vm_events import (
    InputConsumed,
    MachineHalted,
    MachineSnapshot,
    MachineSuspended,
    OutputEmitted,
)


def format_event(event: object) -> str:
    if isinstance(event, InputConsumed):
        suffix = " (default)" if event.defaulted else ""
        return f"@{event.pc} input {event.value} -> [{event.address}]{suffix}"
    if isinstance(event, OutputEmitted):
        return f"@{event.pc} output {event.value}"
    if isinstance(event, MachineSuspended):
        return f"@{event.pc} suspended waiting for {event.reason}"
    if isinstance(event, MachineHalted):
        if event.implicit:
            return f"@{event.pc} implicit halt after {event.steps} steps: {event.error}"
        return f"@{event.pc} halted after {event.steps} steps"
    return str(event)


def format_snapshot(snapshot: MachineSnapshot, window: int = 8) -> str:
    lines = [f"machine state (pc={snapshot.pc}, status={snapshot.status}, steps={snapshot.steps}):"]
    if 0 <= snapshot.pc < len(snapshot.tape):
        start = max(0, snapshot.pc - window // 2)
        cells = snapshot.tape[start:start + window]
        lines.append(f"\ttape[{start}:{start + len(cells)}] = {list(cells)}")
    lines.append(f"\tinputs = {list(snapshot.inputs)}")
    lines.append(f"\toutputs = {list(snapshot.outputs)}")
    return "\n".join(lines)


__all__ = ["format_event", "format_snapshot"]
