"""
IntCode Machine — Main Machine Class

Integrates:
  - Growable memory (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - Input queue / output log
  - Instruction pointer and relative base

Execution model (one step):
  1. Decode the instruction at ip
  2. Resolve operands by addressing mode
  3. Execute the handler: update memory, queues, relative base
  4. Advance ip by the instruction size, unless a jump was taken

Run results:
  - HALTED:   opcode 99 reached; further run() calls return HALTED
              without touching state
  - WAITING:  input instruction with an empty queue while wait_on_input
              is enabled; ip still points at the input instruction so the
              next run() retries it

Everything else is fatal and raised as an IntCodeError subclass:
  - DecodeError (IllegalOpcode, IllegalMode)
  - DestinationError (immediate-mode write target)
  - InputUnderflow (empty queue, wait_on_input disabled)
  - AddressError (negative resolved address)
A fatal error leaves ip on the failing instruction.

Usage:
    m = IntCodeMachine("3,0,4,0,99", [7])
    m.run()          # Status.HALTED
    m.output         # [7]
"""

import logging
import re
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Deque, Iterable, List, Optional, Union

from .config import DEFAULT_INSTRUCTION_SET
from .cpu.decoder import (
    Instruction, InstructionSet, Mode, Op, Parameter, decode_instruction,
)
from .errors import (
    AddressError, DestinationError, IntCodeError, InputUnderflow, ProgramParseError,
)
from .mem.memory import Memory

logger = logging.getLogger(__name__)

INT_TOKEN = re.compile(r'[+-]?[0-9]+')


class Status(Enum):
    WAITING = 'WAITING'
    HALTED = 'HALTED'


def parse_program(text: str) -> List[int]:
    """Parse comma-separated signed integers.

    Whitespace around each token is ignored. Any token that is not an
    ASCII decimal integer (empty, underscores, other scripts' digits)
    raises ProgramParseError.
    """
    tokens = text.strip().split(',')
    program = []
    for index, token in enumerate(tokens):
        token = token.strip()
        if not INT_TOKEN.fullmatch(token):
            raise ProgramParseError(f"Not an integer: {token!r}", index)
        program.append(int(token))
    return program


class IntCodeMachine:
    """IntCode virtual machine.

    A machine owns its memory, input queue and output log exclusively.
    It is mutated in place by run() until it halts, and clone() gives an
    independent copy for branching searches.

    Drivers may patch memory before running (m.memory[1] = 12), feed
    input between runs with add_input(), and read or drain the output
    log (m.output, m.take_output()).
    """

    def __init__(self, program: Union[str, Iterable[int]],
                 inputs: Iterable[int] = (), *,
                 instruction_set: InstructionSet = InstructionSet(DEFAULT_INSTRUCTION_SET),
                 wait_on_input: bool = False):
        if isinstance(program, str):
            program = parse_program(program)
        self.memory = Memory(program)
        self.instruction_set = instruction_set
        self.ip: int = 0
        self.relative_base: int = 0
        self.inputs: Deque[int] = deque(inputs)
        self.output: List[int] = []
        self.halted: bool = False
        self.steps: int = 0

        self._wait_on_input = wait_on_input

        # Trace output
        self._trace = False
        self._trace_output: List[str] = []

        self._dispatch = self._build_dispatch()

    @classmethod
    def from_file(cls, path: Union[str, Path], inputs: Iterable[int] = (),
                  **kwargs) -> 'IntCodeMachine':
        """Build a machine from a program text file."""
        return cls(Path(path).read_text(), inputs, **kwargs)

    def __repr__(self) -> str:
        return (f"IntCodeMachine(ip={self.ip}, rb={self.relative_base}, "
                f"mem={len(self.memory)}, halted={self.halted})")

    # ══════════════════════════════════════════════
    # Input / output
    # ══════════════════════════════════════════════

    def wait_on_input(self, enable: bool = True):
        """Suspend with WAITING on an empty input queue instead of raising."""
        self._wait_on_input = enable

    @property
    def waits_on_input(self) -> bool:
        return self._wait_on_input

    def add_input(self, *values: int):
        self.inputs.extend(values)

    def take_output(self) -> List[int]:
        """Return the output log and start a fresh one."""
        out, self.output = self.output, []
        return out

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[Status]:
        """Execute one instruction. Returns a Status if stopped, else None."""
        if self.halted:
            return Status.HALTED

        ip = self.ip
        try:
            instr = decode_instruction(self.memory, ip, self.instruction_set)
            rb = self.relative_base
            target = self._dispatch[instr.op](instr)
        except _HaltException:
            self._record(ip, instr, self.relative_base)
            self.halted = True
            logger.debug(f"Halted at ip={ip} after {self.steps} steps")
            return Status.HALTED
        except _WaitException:
            logger.debug(f"Waiting for input at ip={ip}")
            return Status.WAITING
        except IntCodeError as e:
            logger.debug(f"Fatal: {e}")
            raise

        self._record(ip, instr, rb)
        self.ip = target if target is not None else ip + instr.size
        self.steps += 1
        return None

    def run(self) -> Status:
        """Run until HALTED or WAITING."""
        while True:
            status = self.step()
            if status is not None:
                return status

    def clone(self) -> 'IntCodeMachine':
        """Independent deep copy: memory, queues, ip and relative base."""
        twin = IntCodeMachine(self.memory.snapshot(), self.inputs,
                              instruction_set=self.instruction_set,
                              wait_on_input=self._wait_on_input)
        twin.ip = self.ip
        twin.relative_base = self.relative_base
        twin.output = list(self.output)
        twin.halted = self.halted
        twin.steps = self.steps
        twin._trace = self._trace
        twin._trace_output = list(self._trace_output)
        return twin

    def reset_counters(self):
        self.steps = 0

    # ══════════════════════════════════════════════
    # Operand resolution
    # ══════════════════════════════════════════════

    def _address(self, param: Parameter) -> int:
        """Resolve a POSITIONAL or RELATIVE parameter to an address."""
        if param.mode is Mode.POSITIONAL:
            addr = param.value
        elif param.mode is Mode.RELATIVE:
            addr = self.relative_base + param.value
        else:
            raise DestinationError(f"Immediate operand {param} has no address", self.ip)
        if addr < 0:
            raise AddressError(f"Negative address {addr} from operand {param}", self.ip)
        return addr

    def _read(self, param: Parameter) -> int:
        if param.mode is Mode.IMMEDIATE:
            return param.value
        return self.memory.read(self._address(param))

    def _write(self, param: Parameter, value: int):
        self.memory.write(self._address(param), value)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(instr) -> Optional[int]
    # A returned int is a jump target; None means advance by instr.size.

    def _build_dispatch(self) -> dict:
        return {
            Op.ADD: self._op_add,
            Op.MULTIPLY: self._op_mul,
            Op.INPUT: self._op_in,
            Op.OUTPUT: self._op_out,
            Op.JUMP_IF_TRUE: self._op_jnz,
            Op.JUMP_IF_FALSE: self._op_jz,
            Op.LESS_THAN: self._op_lt,
            Op.EQUALS: self._op_eq,
            Op.ADJUST_RELATIVE_BASE: self._op_arb,
            Op.HALT: self._op_halt,
        }

    def _op_add(self, instr: Instruction):
        a, b, dest = instr.params
        self._write(dest, self._read(a) + self._read(b))

    def _op_mul(self, instr: Instruction):
        a, b, dest = instr.params
        self._write(dest, self._read(a) * self._read(b))

    def _op_in(self, instr: Instruction):
        if not self.inputs:
            if self._wait_on_input:
                raise _WaitException()
            raise InputUnderflow("Input queue is empty", instr.address)
        self._write(instr.destination, self.inputs.popleft())

    def _op_out(self, instr: Instruction):
        self.output.append(self._read(instr.params[0]))

    def _op_jnz(self, instr: Instruction) -> Optional[int]:
        cond, target = instr.params
        if self._read(cond) != 0:
            return self._jump_target(target)
        return None

    def _op_jz(self, instr: Instruction) -> Optional[int]:
        cond, target = instr.params
        if self._read(cond) == 0:
            return self._jump_target(target)
        return None

    def _jump_target(self, param: Parameter) -> int:
        target = self._read(param)
        if target < 0:
            raise AddressError(f"Jump to negative address {target}", self.ip)
        return target

    def _op_lt(self, instr: Instruction):
        a, b, dest = instr.params
        self._write(dest, 1 if self._read(a) < self._read(b) else 0)

    def _op_eq(self, instr: Instruction):
        a, b, dest = instr.params
        self._write(dest, 1 if self._read(a) == self._read(b) else 0)

    def _op_arb(self, instr: Instruction):
        self.relative_base += self._read(instr.params[0])

    def _op_halt(self, instr: Instruction):
        raise _HaltException()

    # ══════════════════════════════════════════════
    # Debug / trace
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record one listing line per executed instruction."""
        self._trace = enable

    def _record(self, ip: int, instr: Instruction, rb: int):
        if self._trace:
            self._trace_output.append(f"{ip:6d}: {instr!s:32s} rb={rb}")

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()


class _HaltException(Exception):
    pass

class _WaitException(Exception):
    pass
