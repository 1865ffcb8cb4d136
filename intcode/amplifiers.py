"""
IntCode Machine — Amplifier Orchestration

Several machines running the same program, wired output-to-input.

  Chain:     A -> B -> C -> D -> E          one pass, each run to halt
  Feedback:  A -> B -> C -> D -> E -> A...  suspended machines, round robin

A machine passed in place of program text is a template: each amplifier
is a clone of it with empty input and output queues.

Each amplifier first reads its phase setting, then signals. Scheduling is
cooperative and single threaded: run() is called on one machine at a time
and returns WAITING when that machine needs the next signal.
"""

import logging
from itertools import permutations
from typing import Iterable, List, Sequence, Tuple, Union

from .config import DEFAULT_SIGNAL
from .errors import IntCodeError
from .machine import IntCodeMachine, Status

logger = logging.getLogger(__name__)


class PipelineStalled(IntCodeError):
    """Raised when a feedback ring makes no progress for a full round."""
    pass


def _template(program: Union[str, Iterable[int], IntCodeMachine]) -> IntCodeMachine:
    if isinstance(program, IntCodeMachine):
        return program
    return IntCodeMachine(program)


def _amplifier(template: IntCodeMachine, phase: int) -> IntCodeMachine:
    """Clone template with empty queues, then queue the phase setting."""
    amp = template.clone()
    amp.inputs.clear()
    amp.take_output()
    amp.add_input(phase)
    return amp


def run_amplifier_chain(program, phases: Sequence[int],
                        signal: int = DEFAULT_SIGNAL) -> int:
    """Run one amplifier per phase in series and return the last output.

    Each amplifier is fed [phase, signal]; its first output is the
    signal for the next one.
    """
    template = _template(program)
    for phase in phases:
        amp = _amplifier(template, phase)
        amp.add_input(signal)
        amp.run()
        if not amp.output:
            raise PipelineStalled(f"Amplifier with phase {phase} produced no output")
        signal = amp.output[0]
    return signal


def run_feedback_loop(program, phases: Sequence[int],
                      signal: int = DEFAULT_SIGNAL) -> int:
    """Run amplifiers in a ring until the last one halts.

    Before each run() the previous amplifier's latest output is appended
    to the current amplifier's input queue. Returns the last signal
    produced by the ring.
    """
    if not phases:
        raise ValueError("No phase settings given")
    template = _template(program)
    amps: List[IntCodeMachine] = []
    for phase in phases:
        amp = _amplifier(template, phase)
        amp.wait_on_input()
        amps.append(amp)

    last = len(amps) - 1
    current = 0
    idle_runs = 0
    while True:
        amp = amps[current]
        was_halted = amp.halted
        amp.add_input(signal)
        status = amp.run()
        out = amp.take_output()
        if out:
            signal = out[-1]
            idle_runs = 0
        elif status is Status.HALTED and not was_halted:
            idle_runs = 0
        else:
            idle_runs += 1

        if status is Status.HALTED and current == last:
            break
        if all(a.halted for a in amps):
            break
        if idle_runs >= len(amps):
            raise PipelineStalled(
                f"No output for a full round (phases {list(phases)})")
        current = (current + 1) % len(amps)

    logger.debug(f"Feedback loop {list(phases)} -> {signal}")
    return signal


def max_thruster_signal(program, phase_values: Iterable[int],
                        feedback: bool = False) -> Tuple[int, Tuple[int, ...]]:
    """Try every ordering of phase_values; return (best_signal, best_phases)."""
    phase_values = tuple(phase_values)
    if not phase_values:
        raise ValueError("No phase values given")
    template = _template(program)
    run = run_feedback_loop if feedback else run_amplifier_chain
    best = None
    for phases in permutations(phase_values):
        signal = run(template, phases)
        if best is None or signal > best[0]:
            best = (signal, phases)
    logger.info(f"Best signal {best[0]} from phases {best[1]}")
    return best
